"""
Local filesystem version store.

Reads and writes the store's tables as JSON arrays of row objects, one file per
table, suitable for offline development against an exported snapshot of the
hosted store.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiofiles
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import DuplicateEntryError, StoreError
from ..core.logging import get_logger
from ..models.version import VersionRecord
from ..models.waitlist import WaitlistEntry
from .interface import VersionStore

logger = get_logger(__name__)


class LocalVersionStore(VersionStore):
    """Store backed by ``<table>.json`` files in a directory."""

    def __init__(
        self,
        base_path: Path,
        versions_table: str = "app_versions",
        waitlist_table: str = "waitlist",
    ) -> None:
        """Initialize local storage.

        Args:
            base_path: Directory holding the table files
            versions_table: Table name for version records
            waitlist_table: Table name for waitlist signups
        """
        self.base_path = base_path.resolve()
        self.versions_table = versions_table
        self.waitlist_table = waitlist_table

    def _table_path(self, table: str) -> Path:
        return self.base_path / f"{table}.json"

    async def _read_table(self, table: str) -> list[dict[str, Any]]:
        """Read all rows of a table. A missing file is an empty table.

        Raises:
            StoreError: If the file cannot be read or is not a JSON array.
        """
        path = self._table_path(table)
        if not path.exists():
            return []

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                rows = json.loads(await f.read())
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(
                message=f"Cannot read table '{table}'",
                operation="read",
                context={"path": str(path)},
                cause=e,
            ) from e

        if not isinstance(rows, list):
            raise StoreError(
                message=f"Table '{table}' is not a JSON array",
                operation="read",
                context={"path": str(path)},
            )
        return rows

    async def _write_table(self, table: str, rows: list[dict[str, Any]]) -> None:
        path = self._table_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(rows, indent=2, default=str))
        except OSError as e:
            raise StoreError(
                message=f"Cannot write table '{table}'",
                operation="write",
                context={"path": str(path)},
                cause=e,
            ) from e

    async def _load_records(self) -> list[VersionRecord]:
        rows = await self._read_table(self.versions_table)
        try:
            return [VersionRecord.model_validate(row) for row in rows]
        except PydanticValidationError as e:
            raise StoreError(
                message=f"Malformed row in table '{self.versions_table}'",
                operation="read",
                cause=e,
            ) from e

    async def list_versions(self) -> list[VersionRecord]:
        records = await self._load_records()
        logger.debug("local_versions_loaded", count=len(records))
        return self.sort_by_extraction(records)

    async def fetch_versions(self, package_name: str) -> list[VersionRecord]:
        records = [r for r in await self._load_records() if r.package_name == package_name]
        logger.debug("local_package_loaded", package_name=package_name, count=len(records))
        return self.sort_by_version_code(records)

    async def fetch_app_name(self, package_name: str) -> str | None:
        for row in await self._read_table(self.versions_table):
            if row.get("package_name") == package_name:
                return row.get("app_name")
        return None

    async def insert_waitlist(self, entry: WaitlistEntry) -> None:
        rows = await self._read_table(self.waitlist_table)
        email = entry.email.lower()
        if any(str(row.get("email", "")).lower() == email for row in rows):
            raise DuplicateEntryError(
                message="email already on waitlist",
                operation="insert_waitlist",
                column="email",
                error_code="23505",
            )
        rows.append(entry.model_dump(mode="json"))
        await self._write_table(self.waitlist_table, rows)
        logger.info("waitlist_row_inserted", table=self.waitlist_table)
