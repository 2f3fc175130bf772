"""
Normalization of Crossref works into ResearchItem.

Every read from the upstream payload goes through one of the combinators
below, each of which returns a default instead of raising when a level is
absent or has an unexpected type. ``normalize`` is therefore total: it
returns a ResearchItem for any input, including None or non-mappings.
"""

from typing import Any

from research_finder.models.model_crossref import UpstreamRecord
from research_finder.models.research import ResearchItem


# ---------------------------------------------------------------------------
# Default-on-absence combinators
# ---------------------------------------------------------------------------


def dig(value: Any, *path: str | int, default: Any = None) -> Any:
    """Follow mapping keys / sequence indexes along `path`, or return `default`."""
    current = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, (list, tuple)) or not -len(current) <= step < len(current):
                return default
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return default
            current = current[step]
    return default if current is None else current


def as_text(value: Any) -> str:
    """Scalar to string; None, containers and other non-scalars become ""."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def first_text(value: Any) -> str:
    """First element when `value` is a list, otherwise the scalar itself."""
    if isinstance(value, (list, tuple)):
        return as_text(dig(value, 0))
    return as_text(value)


def date_year(value: Any) -> int | str:
    """First date part of a Crossref date object (`{"date-parts": [[Y, M, D]]}`)."""
    year = dig(value, "date-parts", 0, 0, default="")
    if isinstance(year, bool):
        return ""
    if isinstance(year, int):
        return year
    if isinstance(year, float) and year.is_integer():
        return int(year)
    if isinstance(year, str):
        return year.strip()
    return ""


def author_name(entry: Any) -> str:
    given = as_text(dig(entry, "given", default=""))
    family = as_text(dig(entry, "family", default=""))
    return f"{given} {family}".strip()


# ---------------------------------------------------------------------------
# Record normalization
# ---------------------------------------------------------------------------


def normalize(record: Any) -> ResearchItem:
    work = UpstreamRecord.from_raw(record)

    authors = work.author if isinstance(work.author, list) else []

    return ResearchItem(
        title=first_text(work.title),
        authors=[author_name(entry) for entry in authors],
        journal=first_text(work.container_title),
        year=date_year(work.issued) or date_year(work.created) or "",
        doi=as_text(work.doi),
        abstract=as_text(work.abstract),
        url=as_text(work.url),
    )
