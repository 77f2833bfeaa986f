"""
Version record models.

These models represent one analyzed snapshot of an application package as it is
stored by the extraction pipeline, plus the in-memory grouping of snapshots per
package used by the catalog views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class SecurityIssue(BaseModel):
    """A security finding flagged by the extractor for one file."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    issue_type: str = Field(alias="type", description="Finding category (e.g. hardcoded_key)")
    file: str = Field(default="", description="Path of the offending file inside the package")

    def __str__(self) -> str:
        return f"{self.issue_type}: {self.file}"


class VersionRecord(BaseModel):
    """One analyzed version of an application package.

    Records are read-only snapshots owned by the store. Optional collections
    that the extractor left out (or stored as null) are normalized to empty.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str = Field(description="Opaque identifier, stable per version")
    package_name: str = Field(description="Application package name (e.g. com.example.app)")
    version_code: int = Field(description="Monotonic version code within the package")
    version_name: str = Field(default="", description="Display version string")
    hash: str | None = Field(default=None, description="Artifact hash")
    app_name: str | None = Field(default=None, description="Application display name")

    permissions: list[str] = Field(default_factory=list)
    libraries: list[str] = Field(default_factory=list)
    strings: dict[str, str] = Field(default_factory=dict)
    security_issues: list[SecurityIssue] = Field(default_factory=list)

    extracted_at: datetime | None = Field(default=None, description="When the record was produced")

    @field_validator("permissions", "libraries", "strings", "security_issues", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {} if info.field_name == "strings" else []
        return value

    @property
    def label(self) -> str:
        """Selector label, e.g. ``2.1.0 (210)``."""
        return f"{self.version_name} ({self.version_code})"

    @property
    def short_permissions(self) -> list[str]:
        """Permission names without their dotted prefix.

        Returns:
            list[str]: e.g. ``CAMERA`` for ``android.permission.CAMERA``.
        """
        return [short_name(p) for p in self.permissions]


class AppGroup(BaseModel):
    """A package name and the version records fetched for it."""

    package_name: str
    versions: list[VersionRecord] = Field(default_factory=list)

    @property
    def latest(self) -> VersionRecord | None:
        """First record of the group, the most recent one in catalog order."""
        return self.versions[0] if self.versions else None

    @property
    def display_name(self) -> str:
        """App name of the latest record, falling back to the package name."""
        latest = self.latest
        if latest is not None and latest.app_name:
            return latest.app_name
        return self.package_name

    def matches(self, query: str) -> bool:
        """Case-insensitive match on package name or display name."""
        needle = (query or "").lower()
        if not needle:
            return True
        app_name = self.latest.app_name if self.latest else None
        return needle in self.package_name.lower() or bool(app_name and needle in app_name.lower())


def short_name(identifier: str) -> str:
    """Last dot-delimited segment of a capability or class name."""
    return identifier.rsplit(".", 1)[-1]


def group_by_package(records: Iterable[VersionRecord]) -> list[AppGroup]:
    """Group records by package name.

    Packages keep the order of their first appearance and records keep their
    input order within a package.
    """
    groups: dict[str, AppGroup] = {}
    for record in records:
        group = groups.get(record.package_name)
        if group is None:
            group = groups[record.package_name] = AppGroup(package_name=record.package_name)
        group.versions.append(record)
    return list(groups.values())
