"""Version comparison for AppDiff."""

from .engine import (
    SetDiff,
    StringDiff,
    StringEntry,
    StringPage,
    VersionComparison,
    compare_versions,
    diff_sets,
    diff_strings,
    filter_and_paginate,
    filter_entries,
)

__all__ = [
    "SetDiff",
    "StringDiff",
    "StringEntry",
    "StringPage",
    "VersionComparison",
    "compare_versions",
    "diff_sets",
    "diff_strings",
    "filter_and_paginate",
    "filter_entries",
]
