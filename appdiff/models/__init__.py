"""
AppDiff data models.

Pydantic models for the records read from the backing store and the rows
written to it.
"""

from .version import AppGroup, SecurityIssue, VersionRecord, group_by_package, short_name
from .waitlist import WaitlistEntry, WaitlistResult

__all__ = [
    "AppGroup",
    "SecurityIssue",
    "VersionRecord",
    "group_by_package",
    "short_name",
    "WaitlistEntry",
    "WaitlistResult",
]
