"""Core infrastructure components for AppDiff."""

from .config import Config, get_config
from .exceptions import (
    AppDiffError,
    DuplicateEntryError,
    PackageNotFoundError,
    ServiceError,
    StoreError,
    ValidationError,
)
from .logging import get_logger, setup_logging
from .types import FailureReason, ServiceResult

__all__ = [
    "Config",
    "get_config",
    "AppDiffError",
    "DuplicateEntryError",
    "PackageNotFoundError",
    "ServiceError",
    "StoreError",
    "ValidationError",
    "get_logger",
    "setup_logging",
    "FailureReason",
    "ServiceResult",
]
