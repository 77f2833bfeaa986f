"""
Version diff engine.

Pure functions that compare two version records: added/removed/unchanged
partitions for permissions and libraries, added/removed entries for the string
resource table, and a search-filtered, paginated slice of a string table.

Nothing here keeps state between calls; callers recompute the whole result
whenever the selected versions, the search query or the page change.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import ValidationError
from ..models.version import VersionRecord

StringEntry = tuple[str, str]


class SetDiff(BaseModel):
    """Partition of two identifier collections."""

    model_config = ConfigDict(frozen=True)

    added: list[str] = Field(default_factory=list, description="In current only, current order")
    removed: list[str] = Field(default_factory=list, description="In previous only, previous order")
    unchanged: list[str] = Field(default_factory=list, description="In both, current order")

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed)


class StringDiff(BaseModel):
    """Keys that appeared or disappeared between two string tables."""

    model_config = ConfigDict(frozen=True)

    added: list[StringEntry] = Field(default_factory=list)
    removed: list[StringEntry] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed)


class StringPage(BaseModel):
    """One page of a filtered string table."""

    model_config = ConfigDict(frozen=True)

    page_items: list[StringEntry] = Field(default_factory=list)
    total_pages: int = Field(default=1, ge=1)
    page: int = Field(default=1)
    page_size: int = Field(default=20, ge=1)
    total_items: int = Field(default=0, ge=0, description="Entries left after filtering")

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class VersionComparison(BaseModel):
    """All category diffs between a current and a previous version."""

    model_config = ConfigDict(frozen=True)

    permissions: SetDiff = Field(default_factory=SetDiff)
    libraries: SetDiff = Field(default_factory=SetDiff)
    strings: StringDiff = Field(default_factory=StringDiff)

    @property
    def has_changes(self) -> bool:
        return self.permissions.has_changes or self.libraries.has_changes or self.strings.has_changes


def _unique(items: Iterable[str] | None) -> list[str]:
    # First occurrence wins; keeps input order.
    return list(dict.fromkeys(items or ()))


def diff_sets(current: Iterable[str] | None, previous: Iterable[str] | None) -> SetDiff:
    """Split two identifier collections into added, removed and unchanged.

    Elements are compared by exact string match. Duplicates in either input
    count once. ``None`` is treated as an empty collection.

    Args:
        current: Identifiers of the version being viewed.
        previous: Identifiers of the version it is compared against.

    Returns:
        SetDiff whose ``added`` and ``unchanged`` follow the order of
        ``current`` and whose ``removed`` follows the order of ``previous``.
    """
    current_items = _unique(current)
    previous_items = _unique(previous)
    current_set = set(current_items)
    previous_set = set(previous_items)

    return SetDiff(
        added=[item for item in current_items if item not in previous_set],
        removed=[item for item in previous_items if item not in current_set],
        unchanged=[item for item in current_items if item in previous_set],
    )


def diff_strings(
    current: Mapping[str, str] | None, previous: Mapping[str, str] | None
) -> StringDiff:
    """Compare two string resource tables by key presence.

    A key present in both tables is never reported, even when its value
    changed between the versions.

    Args:
        current: String table of the version being viewed.
        previous: String table of the version it is compared against.

    Returns:
        StringDiff with ``added`` entries taken from ``current`` and
        ``removed`` entries taken from ``previous``.
    """
    current = current or {}
    previous = previous or {}
    return StringDiff(
        added=[(key, value) for key, value in current.items() if key not in previous],
        removed=[(key, value) for key, value in previous.items() if key not in current],
    )


def filter_entries(entries: Iterable[StringEntry] | None, query: str | None) -> list[StringEntry]:
    """Keep entries whose key or value contains ``query``, ignoring case."""
    needle = (query or "").lower()
    if not needle:
        return list(entries or ())
    return [
        (key, value)
        for key, value in entries or ()
        if needle in key.lower() or needle in value.lower()
    ]


def filter_and_paginate(
    entries: Iterable[StringEntry] | None,
    query: str | None,
    page_size: int,
    page: int,
) -> StringPage:
    """Filter string entries by ``query`` and return one 1-based page.

    ``page`` is not clamped: a page outside ``[1, total_pages]`` yields an
    empty ``page_items``. There is always at least one page.

    Raises:
        ValidationError: If ``page_size`` is smaller than 1.
    """
    if page_size < 1:
        raise ValidationError(
            message="page size must be at least 1",
            field_name="page_size",
            expected_type="int >= 1",
            actual_value=page_size,
        )

    filtered = filter_entries(entries, query)
    total_pages = max(1, math.ceil(len(filtered) / page_size))
    if page < 1:
        items: list[StringEntry] = []
    else:
        start = (page - 1) * page_size
        items = filtered[start : start + page_size]

    return StringPage(
        page_items=items,
        total_pages=total_pages,
        page=page,
        page_size=page_size,
        total_items=len(filtered),
    )


def compare_versions(
    current: VersionRecord, previous: VersionRecord, query: str | None = ""
) -> VersionComparison:
    """Diff every category of two version records.

    The string diff is narrowed by ``query`` the same way the full string
    table is, so a search applies to added and removed rows too.
    """
    strings = diff_strings(current.strings, previous.strings)
    return VersionComparison(
        permissions=diff_sets(current.permissions, previous.permissions),
        libraries=diff_sets(current.libraries, previous.libraries),
        strings=StringDiff(
            added=filter_entries(strings.added, query),
            removed=filter_entries(strings.removed, query),
        ),
    )
