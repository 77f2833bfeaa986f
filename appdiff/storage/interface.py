"""
Version store interface.

Defines the abstract read/write contract with the backing store that holds
analyzed version records and waitlist signups, enabling pluggable backends
(hosted REST store, local JSON files, in-memory fake).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from ..models.version import VersionRecord
from ..models.waitlist import WaitlistEntry


class VersionStore(ABC):
    """Abstract store client.

    Instances are constructed explicitly and passed to the services that
    need them; the caller owns their lifecycle.
    """

    @abstractmethod
    async def list_versions(self) -> list[VersionRecord]:
        """Load every version record, newest extraction first.

        Returns:
            All records ordered by ``extracted_at`` descending.

        Raises:
            StoreError: If the store cannot be queried.
        """
        ...

    @abstractmethod
    async def fetch_versions(self, package_name: str) -> list[VersionRecord]:
        """Load all records of one package.

        Args:
            package_name: Package to query.

        Returns:
            Records ordered by ``version_code`` ascending. Empty if the
            package is unknown.

        Raises:
            StoreError: If the store cannot be queried.
        """
        ...

    @abstractmethod
    async def fetch_app_name(self, package_name: str) -> str | None:
        """Load the display name recorded for a package.

        Args:
            package_name: Package to query.

        Returns:
            The app name of any one record, or None if none is recorded.

        Raises:
            StoreError: If the store cannot be queried.
        """
        ...

    @abstractmethod
    async def insert_waitlist(self, entry: WaitlistEntry) -> None:
        """Insert a waitlist signup.

        Args:
            entry: Validated signup row.

        Raises:
            DuplicateEntryError: If the email is already on the waitlist.
            StoreError: If the insert fails for any other reason.
        """
        ...

    async def aclose(self) -> None:
        """Release network or file handles held by the store."""

    async def __aenter__(self) -> VersionStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @staticmethod
    def sort_by_version_code(records: list[VersionRecord]) -> list[VersionRecord]:
        """Order records oldest to newest release."""
        return sorted(records, key=lambda r: r.version_code)

    @staticmethod
    def sort_by_extraction(records: list[VersionRecord]) -> list[VersionRecord]:
        """Order records newest extraction first; undated records last."""
        dated = [r for r in records if r.extracted_at is not None]
        undated = [r for r in records if r.extracted_at is None]
        return sorted(dated, key=lambda r: r.extracted_at.timestamp(), reverse=True) + undated  # type: ignore[union-attr]
