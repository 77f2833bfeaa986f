"""
In-memory version store.

Holds records in a list. Used by tests and for rendering fixtures without a
running store.
"""

from __future__ import annotations

from typing import Iterable

from ..core.exceptions import DuplicateEntryError, StoreError
from ..models.version import VersionRecord
from ..models.waitlist import WaitlistEntry
from .interface import VersionStore


class InMemoryVersionStore(VersionStore):
    """Store backed by Python lists."""

    def __init__(
        self,
        records: Iterable[VersionRecord] = (),
        waitlist: Iterable[WaitlistEntry] = (),
    ) -> None:
        self.records: list[VersionRecord] = list(records)
        self.waitlist: list[WaitlistEntry] = list(waitlist)
        # Set to make every call raise, simulating an unreachable store
        self.fail_with: StoreError | None = None
        self.closed = False

    def _check(self, operation: str) -> None:
        if self.fail_with is not None:
            self.fail_with.operation = self.fail_with.operation or operation
            raise self.fail_with

    async def list_versions(self) -> list[VersionRecord]:
        self._check("list_versions")
        return self.sort_by_extraction(self.records)

    async def fetch_versions(self, package_name: str) -> list[VersionRecord]:
        self._check("fetch_versions")
        return self.sort_by_version_code(
            [r for r in self.records if r.package_name == package_name]
        )

    async def fetch_app_name(self, package_name: str) -> str | None:
        self._check("fetch_app_name")
        for record in self.records:
            if record.package_name == package_name:
                return record.app_name
        return None

    async def insert_waitlist(self, entry: WaitlistEntry) -> None:
        self._check("insert_waitlist")
        if any(e.email.lower() == entry.email.lower() for e in self.waitlist):
            raise DuplicateEntryError(
                message="email already on waitlist",
                operation="insert_waitlist",
                column="email",
                error_code="23505",
            )
        self.waitlist.append(entry)

    async def aclose(self) -> None:
        self.closed = True
