"""
Version comparison view-model.

Holds the user's choices on a package detail page (which version is viewed,
which one it is compared with, whether comparison is on, the string search
query and the string page) and derives the complete view from them on demand.
Each input method updates the choices only; ``view()`` recomputes every diff
and the string page from scratch.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..diff.engine import StringPage, VersionComparison, compare_versions, filter_and_paginate
from ..models.version import SecurityIssue, VersionRecord

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20


class VersionOption(BaseModel):
    """An entry of a version selector."""

    index: int
    label: str
    disabled: bool = False


class ComparisonView(BaseModel):
    """Derived state rendered by a package detail page."""

    current: VersionRecord
    previous: VersionRecord | None = Field(default=None, description="Set only while comparing")
    comparing: bool = False
    comparison: VersionComparison = Field(default_factory=VersionComparison)
    strings_page: StringPage
    security_issues: list[SecurityIssue] = Field(default_factory=list)
    query: str = ""


class ComparisonState:
    """Selection state for comparing the versions of one package.

    Args:
        versions: Records of one package, oldest to newest.
        page_size: String rows per page.

    Raises:
        ValidationError: If ``versions`` is empty or ``page_size`` < 1.
    """

    def __init__(self, versions: list[VersionRecord], page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if not versions:
            raise ValidationError(message="at least one version is required", field_name="versions")
        if page_size < 1:
            raise ValidationError(
                message="page size must be at least 1", field_name="page_size", actual_value=page_size
            )
        self.versions = list(versions)
        self.page_size = page_size
        self.selected_index = 0
        self.compare_index = 1 if len(self.versions) > 1 else 0
        self.show_diff = False
        self.query = ""
        self.page = 1

    @property
    def can_compare(self) -> bool:
        return len(self.versions) > 1

    @property
    def current(self) -> VersionRecord:
        return self.versions[self.selected_index]

    @property
    def previous(self) -> VersionRecord:
        return self.versions[self.compare_index]

    def _check_index(self, index: int, field_name: str) -> None:
        if not 0 <= index < len(self.versions):
            raise ValidationError(
                message=f"version index out of range (0..{len(self.versions) - 1})",
                field_name=field_name,
                actual_value=index,
            )

    def version_options(self) -> list[VersionOption]:
        """Options for the current-version selector."""
        return [VersionOption(index=i, label=v.label) for i, v in enumerate(self.versions)]

    def compare_options(self) -> list[VersionOption]:
        """Options for the compare selector; the current version is disabled."""
        return [
            VersionOption(index=i, label=v.label, disabled=i == self.selected_index)
            for i, v in enumerate(self.versions)
        ]

    def select_version(self, index: int) -> None:
        """View another version.

        While comparing, the compare version cannot be selected. Otherwise,
        selecting it hands the compare slot the previously viewed version so
        that the two indices stay distinct.

        Raises:
            ValidationError: If the index is out of range or already the
                compare version while comparing.
        """
        self._check_index(index, "selected_index")
        if index == self.selected_index:
            return
        if self.can_compare and index == self.compare_index:
            if self.show_diff:
                raise ValidationError(
                    message="version is already selected for comparison",
                    field_name="selected_index",
                    actual_value=index,
                )
            self.compare_index = self.selected_index
        self.selected_index = index
        self.page = 1
        logger.debug("version_selected", selected_index=index, compare_index=self.compare_index)

    def select_compare(self, index: int) -> None:
        """Choose the version to compare against.

        Raises:
            ValidationError: If the index is out of range or is the current version.
        """
        self._check_index(index, "compare_index")
        if self.can_compare and index == self.selected_index:
            raise ValidationError(
                message="cannot compare a version with itself",
                field_name="compare_index",
                actual_value=index,
            )
        self.compare_index = index
        logger.debug("compare_selected", selected_index=self.selected_index, compare_index=index)

    def toggle_diff(self) -> bool:
        """Switch comparison mode.

        Turning comparison on swaps the viewed and compare versions; turning
        it off keeps both.

        Returns:
            Whether comparison is now on.

        Raises:
            ValidationError: If the package has a single version.
        """
        if not self.can_compare:
            raise ValidationError(message="comparison needs at least two versions", field_name="show_diff")
        self.show_diff = not self.show_diff
        if self.show_diff:
            self.selected_index, self.compare_index = self.compare_index, self.selected_index
            self.page = 1
        logger.debug(
            "diff_toggled",
            show_diff=self.show_diff,
            selected_index=self.selected_index,
            compare_index=self.compare_index,
        )
        return self.show_diff

    def select_pair(self, current: int, previous: int) -> None:
        """Turn comparison on for an explicit pair of versions, without swapping.

        Raises:
            ValidationError: If either index is out of range, the indices are
                equal, or the package has a single version.
        """
        if not self.can_compare:
            raise ValidationError(message="comparison needs at least two versions", field_name="show_diff")
        self._check_index(current, "selected_index")
        self._check_index(previous, "compare_index")
        if current == previous:
            raise ValidationError(
                message="cannot compare a version with itself",
                field_name="compare_index",
                actual_value=previous,
            )
        if current != self.selected_index:
            self.page = 1
        self.selected_index = current
        self.compare_index = previous
        self.show_diff = True

    def set_query(self, query: str) -> None:
        """Change the string search and go back to the first page."""
        self.query = query or ""
        self.page = 1

    def total_pages(self) -> int:
        return filter_and_paginate(self.current.strings.items(), self.query, self.page_size, 1).total_pages

    def go_to_page(self, page: int) -> int:
        """Jump to a page, clamped to the available pages.

        Returns:
            The page now shown.
        """
        self.page = min(max(page, 1), self.total_pages())
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    def view(self) -> ComparisonView:
        """Derive the full view from the current choices."""
        current = self.current
        strings_page = filter_and_paginate(current.strings.items(), self.query, self.page_size, self.page)

        if self.show_diff and self.can_compare:
            previous = self.previous
            comparison = compare_versions(current, previous, self.query)
        else:
            previous = None
            comparison = VersionComparison()

        return ComparisonView(
            current=current,
            previous=previous,
            comparing=previous is not None,
            comparison=comparison,
            strings_page=strings_page,
            security_issues=list(current.security_issues),
            query=self.query,
        )
