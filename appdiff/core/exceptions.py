"""
Custom exception hierarchy for AppDiff.

All exceptions inherit from AppDiffError to enable consistent error handling
across the store, services and views. Each exception type carries context for
debugging and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AppDiffError(Exception):
    """Base exception for all AppDiff errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ValidationError(AppDiffError):
    """Raised when input validation fails."""

    field_name: str | None = None
    expected_type: str | None = None
    actual_value: Any = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_name:
            return f"Validation failed for '{self.field_name}': {base}"
        return f"Validation failed: {base}"


@dataclass
class ServiceError(AppDiffError):
    """Raised when a service operation fails."""

    service_name: str = ""
    operation: str = ""
    retryable: bool = False

    def __str__(self) -> str:
        base = super().__str__()
        retry_hint = " (retryable)" if self.retryable else " (non-retryable)"
        return f"[{self.service_name}.{self.operation}]{retry_hint}: {base}"


@dataclass
class StoreError(ServiceError):
    """Raised when the backing store cannot be reached or rejects a request."""

    status_code: int | None = None
    error_code: str | None = None

    def __post_init__(self) -> None:
        self.service_name = "store"


@dataclass
class DuplicateEntryError(StoreError):
    """Raised when an insert violates a uniqueness constraint."""

    column: str = ""


@dataclass
class PackageNotFoundError(AppDiffError):
    """Raised when the store holds no version records for a package."""

    package_name: str = ""

    def __str__(self) -> str:
        return f"No versions found for package '{self.package_name}': {self.message}"
