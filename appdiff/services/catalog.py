"""
Catalog Service.

Loads version records from the store for the app list and for a single
package's detail view.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..core.exceptions import PackageNotFoundError, StoreError
from ..core.logging import get_logger
from ..core.types import FailureReason, ServiceResult
from ..models.version import AppGroup, VersionRecord, group_by_package
from ..storage import VersionStore

logger = get_logger(__name__)

LOAD_APPS_FAILED = "Failed to load apps"
LOAD_VERSIONS_FAILED = "Failed to load app versions"


class PackageDetails(BaseModel):
    """Everything the detail view needs for one package."""

    package_name: str
    app_name: str | None = Field(default=None)
    versions: list[VersionRecord] = Field(description="Ordered by version_code ascending")

    @property
    def display_name(self) -> str:
        return self.app_name or self.package_name


class CatalogService:
    """Service for browsing analyzed packages.

    No retry is attempted on store failures; a failed load is reported once
    and the caller decides whether to ask again.
    """

    def __init__(self, store: VersionStore) -> None:
        """Initialize the catalog service.

        Args:
            store: Store client used for every query
        """
        self.store = store

    async def list_apps(self, query: str = "") -> ServiceResult[list[AppGroup]]:
        """Group all records by package and filter by a search query.

        Args:
            query: Case-insensitive substring of a package name or app name.

        Returns:
            Groups in order of their most recent extraction.
        """
        try:
            records = await self.store.list_versions()
        except StoreError as e:
            logger.error("list_apps_failed", error=str(e))
            return ServiceResult.fail(LOAD_APPS_FAILED, reason=FailureReason.STORE_ERROR.value)

        groups = [group for group in group_by_package(records) if group.matches(query)]
        logger.debug("apps_listed", total_records=len(records), groups=len(groups), query=query)
        return ServiceResult.ok(groups, total_records=len(records))

    async def get_package(self, package_name: str) -> PackageDetails:
        """Load a package's versions and display name.

        A failure while fetching only the display name is logged and the name
        left empty; the versions are what the view cannot do without.

        Raises:
            PackageNotFoundError: If the store has no records for the package.
            StoreError: If the versions cannot be loaded.
        """
        versions = await self.store.fetch_versions(package_name)
        if not versions:
            raise PackageNotFoundError(
                message="no version records", package_name=package_name
            )

        try:
            app_name = await self.store.fetch_app_name(package_name)
        except StoreError as e:
            logger.warning("app_name_unavailable", package_name=package_name, error=str(e))
            app_name = None

        return PackageDetails(package_name=package_name, app_name=app_name, versions=versions)

    async def load_package(self, package_name: str) -> ServiceResult[PackageDetails]:
        """Load a package for display, reporting not-found and store errors apart.

        Returns:
            The package details, or a failure whose ``reason`` is
            ``not_found`` or ``store_error``.
        """
        try:
            details = await self.get_package(package_name)
        except PackageNotFoundError:
            logger.info("package_not_found", package_name=package_name)
            return ServiceResult.fail(
                f"No versions found for {package_name}",
                reason=FailureReason.NOT_FOUND.value,
                package_name=package_name,
            )
        except StoreError as e:
            logger.error("load_package_failed", package_name=package_name, error=str(e))
            return ServiceResult.fail(
                LOAD_VERSIONS_FAILED,
                reason=FailureReason.STORE_ERROR.value,
                package_name=package_name,
            )

        return ServiceResult.ok(details, package_name=package_name)
