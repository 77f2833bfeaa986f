"""Services package for AppDiff."""

from .catalog import CatalogService, PackageDetails
from .waitlist import WaitlistService

__all__ = [
    "CatalogService",
    "PackageDetails",
    "WaitlistService",
]
