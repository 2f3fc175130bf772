"""Data models for research-finder."""

from research_finder.models.model_crossref import CrossrefPage, UpstreamRecord
from research_finder.models.research import ResearchItem, SearchQuery, SearchResult

__all__ = [
    "CrossrefPage",
    "ResearchItem",
    "SearchQuery",
    "SearchResult",
    "UpstreamRecord",
]
