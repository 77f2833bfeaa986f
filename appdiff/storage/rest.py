"""
Hosted REST version store.

Talks to the PostgREST endpoint exposed by the hosted database
(``/rest/v1/<table>``) using httpx. One ``AsyncClient`` is held per store
instance and released by ``aclose()``.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..core.config import StoreConfig
from ..core.exceptions import DuplicateEntryError, StoreError, ValidationError
from ..core.logging import get_logger
from ..models.version import VersionRecord
from ..models.waitlist import WaitlistEntry
from .interface import VersionStore

logger = get_logger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class RestVersionStore(VersionStore):
    """Store client for the hosted PostgREST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        versions_table: str = "app_versions",
        waitlist_table: str = "waitlist",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the REST store.

        Args:
            base_url: Project URL, e.g. ``https://xyz.supabase.co``
            api_key: Key sent as ``apikey`` and bearer token
            timeout: Request timeout in seconds
            versions_table: Table holding version records
            waitlist_table: Table holding waitlist signups
            client: Preconfigured client to use instead of creating one. The
                caller keeps ownership of an injected client.
        """
        self.base_url = base_url.rstrip("/")
        self.versions_table = versions_table
        self.waitlist_table = waitlist_table
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: StoreConfig) -> RestVersionStore:
        """Build a store from configuration.

        Raises:
            ValidationError: If the URL or key is not configured.
        """
        if not config.url:
            raise ValidationError(message="store URL is not configured", field_name="store.url")
        if config.api_key is None:
            raise ValidationError(message="store API key is not configured", field_name="store.api_key")
        return cls(
            base_url=config.url,
            api_key=config.api_key.get_secret_value(),
            timeout=config.timeout_seconds,
            versions_table=config.versions_table,
            waitlist_table=config.waitlist_table,
        )

    async def _request(self, method: str, table: str, operation: str, **kwargs: Any) -> httpx.Response:
        """Send a request and map transport and HTTP failures to StoreError."""
        try:
            response = await self._client.request(method, f"/{table}", **kwargs)
        except httpx.HTTPError as e:
            logger.error("store_request_failed", operation=operation, table=table, error=str(e))
            raise StoreError(
                message=f"Request to table '{table}' failed",
                operation=operation,
                retryable=True,
                cause=e,
            ) from e

        if response.is_success:
            return response

        error_code, detail = self._error_details(response)
        logger.warning(
            "store_request_rejected",
            operation=operation,
            table=table,
            status_code=response.status_code,
            error_code=error_code,
        )
        if error_code == UNIQUE_VIOLATION or response.status_code == 409:
            raise DuplicateEntryError(
                message=detail or "duplicate key value violates unique constraint",
                operation=operation,
                status_code=response.status_code,
                error_code=error_code,
            )
        raise StoreError(
            message=detail or f"Store returned HTTP {response.status_code}",
            operation=operation,
            status_code=response.status_code,
            error_code=error_code,
            retryable=response.status_code >= 500,
        )

    @staticmethod
    def _error_details(response: httpx.Response) -> tuple[str | None, str]:
        try:
            body = response.json()
        except ValueError:
            return None, response.text
        if not isinstance(body, dict):
            return None, response.text
        return body.get("code"), body.get("message") or ""

    def _parse_records(self, response: httpx.Response, operation: str) -> list[VersionRecord]:
        try:
            return [VersionRecord.model_validate(row) for row in response.json()]
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise StoreError(
                message=f"Unexpected payload from table '{self.versions_table}'",
                operation=operation,
                cause=e,
            ) from e

    async def list_versions(self) -> list[VersionRecord]:
        response = await self._request(
            "GET",
            self.versions_table,
            "list_versions",
            params={"select": "*", "order": "extracted_at.desc"},
        )
        records = self._parse_records(response, "list_versions")
        logger.info("versions_loaded", count=len(records))
        return records

    async def fetch_versions(self, package_name: str) -> list[VersionRecord]:
        response = await self._request(
            "GET",
            self.versions_table,
            "fetch_versions",
            params={
                "select": "*",
                "package_name": f"eq.{package_name}",
                "order": "version_code.asc",
            },
        )
        records = self._parse_records(response, "fetch_versions")
        logger.info("package_versions_loaded", package_name=package_name, count=len(records))
        # version_code may be a text column upstream; enforce numeric order
        return self.sort_by_version_code(records)

    async def fetch_app_name(self, package_name: str) -> str | None:
        response = await self._request(
            "GET",
            self.versions_table,
            "fetch_app_name",
            params={"select": "app_name", "package_name": f"eq.{package_name}", "limit": "1"},
        )
        try:
            rows = response.json()
        except ValueError as e:
            raise StoreError(
                message=f"Unexpected payload from table '{self.versions_table}'",
                operation="fetch_app_name",
                cause=e,
            ) from e
        if not isinstance(rows, list) or (rows and not isinstance(rows[0], dict)):
            raise StoreError(
                message=f"Unexpected payload from table '{self.versions_table}'",
                operation="fetch_app_name",
            )
        if not rows:
            return None
        return rows[0].get("app_name")

    async def insert_waitlist(self, entry: WaitlistEntry) -> None:
        await self._request(
            "POST",
            self.waitlist_table,
            "insert_waitlist",
            json={
                "email": entry.email,
                "ip_address": entry.ip_address,
                "referral_source": entry.referral_source,
            },
            headers={"Prefer": "return=minimal"},
        )
        logger.info("waitlist_row_inserted", table=self.waitlist_table)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
