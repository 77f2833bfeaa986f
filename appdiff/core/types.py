"""
Core type definitions for AppDiff.

Provides the result wrapper returned by services so that callers can tell a
successful load from a not-found package or a store failure without catching
exceptions at every call site.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class FailureReason(str, Enum):
    """Why a service call did not produce data."""

    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"


@dataclass
class ServiceResult(Generic[T]):
    """Result wrapper for service operations.

    Carries the success flag together with either the data or an error
    message.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> ServiceResult[T]:
        """Create a failed result."""
        return cls(success=False, error=error, metadata=metadata)

    @property
    def reason(self) -> FailureReason | None:
        """Failure reason recorded in metadata, if any."""
        value = self.metadata.get("reason")
        return FailureReason(value) if value else None
