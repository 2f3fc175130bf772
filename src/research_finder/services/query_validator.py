"""Query validation: reject short queries and clamp the requested row count."""

from typing import Any

from research_finder.constants import DEFAULT_MAX_ROWS, DEFAULT_ROWS, MIN_QUERY_LENGTH
from research_finder.errors import QueryValidationError
from research_finder.models.research import SearchQuery


def parse_rows(raw_rows: Any, max_rows: int = DEFAULT_MAX_ROWS) -> int:
    """Return the row count clamped to [1, max_rows].

    Missing, non-numeric and zero inputs fall back to DEFAULT_ROWS before
    clamping.
    """
    try:
        rows = int(float(raw_rows))
    except (TypeError, ValueError, OverflowError):
        rows = 0
    if rows == 0:
        rows = DEFAULT_ROWS
    return max(1, min(max_rows, rows))


def validate_query(
    raw_query: Any, raw_rows: Any = None, *, max_rows: int = DEFAULT_MAX_ROWS
) -> SearchQuery:
    text = raw_query.strip() if isinstance(raw_query, str) else ""
    if len(text) < MIN_QUERY_LENGTH:
        raise QueryValidationError()
    return SearchQuery(text=text, rows=parse_rows(raw_rows, max_rows))
