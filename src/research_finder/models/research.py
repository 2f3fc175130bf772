"""
Canonical search models.

These are the data contracts between the gateway and its consumers. The UI,
the table state and the exporters only ever see these shapes, never raw
Crossref payloads.
"""

from pydantic import BaseModel, Field

from research_finder.constants import DOI_RESOLVER_URL


class SearchQuery(BaseModel):
    """A validated query: trimmed text of at least two characters plus a row count."""

    text: str
    rows: int


class ResearchItem(BaseModel):
    """Normalized bibliographic record."""

    title: str = ""
    authors: list[str] = []
    journal: str = ""
    year: int | str = ""
    doi: str = ""
    abstract: str = ""
    url: str = ""

    @property
    def doi_url(self) -> str:
        """Resolver link for the DOI, or "" when the record has none."""
        if not self.doi:
            return ""
        return f"{DOI_RESOLVER_URL}/{self.doi}"


class SearchResult(BaseModel):
    """One page of normalized results plus the upstream-reported total."""

    total: int = Field(default=0, ge=0)
    results: list[ResearchItem] = []
