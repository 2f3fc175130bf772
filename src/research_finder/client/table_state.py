"""
Sort and pagination over the latest result set.

Pure derivation: nothing here mutates the results, and `visible_rows` is the
only thing the table and the exporters ever read.
"""

from enum import Enum
from math import ceil, isfinite
from typing import Any, Callable

from pydantic import BaseModel, Field

from research_finder.constants import DEFAULT_PAGE_SIZE
from research_finder.models.research import ResearchItem


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _lexical(value: str) -> tuple:
    return (value.casefold(), value)


def _year_key(item: ResearchItem) -> tuple:
    # Finite numbers first (numerically), then anything else lexically.
    year = item.year
    if isinstance(year, int):
        return (0, year, "")
    text = str(year).strip()
    try:
        number = float(text)
    except ValueError:
        number = None
    if number is not None and isfinite(number):
        return (0, number, "")
    return (1, 0, text.casefold())


SORT_KEYS: dict[str, Callable[[ResearchItem], Any]] = {
    "title": lambda item: _lexical(item.title),
    "authors": lambda item: _lexical(", ".join(item.authors)),
    "journal": lambda item: _lexical(item.journal),
    "year": _year_key,
    "doi": lambda item: _lexical(item.doi),
}


class TableState(BaseModel):
    """Sort key/direction and current page of the results table."""

    sort_key: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    def sort_by(self, key: str | None, direction: SortDirection = SortDirection.ASC) -> None:
        if key is not None and key not in SORT_KEYS:
            raise ValueError(f"Unknown sort column: {key}")
        self.sort_key = key
        self.sort_direction = direction

    def toggle_sort(self, key: str) -> None:
        """Header-click cycle: ascending → descending → unsorted."""
        if self.sort_key != key:
            self.sort_by(key, SortDirection.ASC)
        elif self.sort_direction is SortDirection.ASC:
            self.sort_by(key, SortDirection.DESC)
        else:
            self.sort_by(None)

    def go_to_page(self, page_index: int) -> None:
        if page_index < 0:
            raise ValueError("page_index must be >= 0")
        self.page_index = page_index

    def set_page_size(self, page_size: int) -> None:
        """Change the page size, keeping the current first row on screen."""
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        first_row = self.page_index * self.page_size
        self.page_size = page_size
        self.page_index = first_row // page_size

    def page_count(self, row_count: int) -> int:
        return ceil(row_count / self.page_size) if row_count else 0

    def sorted_rows(self, results: list[ResearchItem]) -> list[ResearchItem]:
        if self.sort_key is None:
            return list(results)
        # sorted() is stable for both directions
        return sorted(
            results,
            key=SORT_KEYS[self.sort_key],
            reverse=self.sort_direction is SortDirection.DESC,
        )

    def visible_rows(self, results: list[ResearchItem]) -> list[ResearchItem]:
        rows = self.sorted_rows(results)
        last_page = max(self.page_count(len(rows)) - 1, 0)
        page_index = min(self.page_index, last_page)
        start = page_index * self.page_size
        return rows[start : start + self.page_size]
