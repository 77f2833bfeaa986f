"""View-models driving the dashboard pages."""

from .comparison import ComparisonState, ComparisonView, VersionOption

__all__ = ["ComparisonState", "ComparisonView", "VersionOption"]
