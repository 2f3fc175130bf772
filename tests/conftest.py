"""Pytest configuration and fixtures."""

import pytest

from research_finder.config import get_settings
from research_finder.models.research import ResearchItem


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def crossref_work() -> dict:
    """A Crossref work with every field the normalizer reads."""
    return {
        "title": ["Foo"],
        "author": [{"given": "A", "family": "B"}],
        "container-title": ["J"],
        "issued": {"date-parts": [[2020]]},
        "DOI": "10.1/x",
    }


@pytest.fixture
def crossref_response(crossref_work) -> dict:
    """A works response as returned by api.crossref.org."""
    return {
        "status": "ok",
        "message-type": "work-list",
        "message": {
            "total-results": 1234,
            "items": [
                crossref_work,
                {
                    "title": "Scalar Title",
                    "author": [{"family": "Solo"}],
                    "created": {"date-parts": [[2018, 5, 1]]},
                    "URL": "https://doi.org/10.2/y",
                },
            ],
        },
    }


def _numbered_items(count: int, **overrides) -> list[ResearchItem]:
    return [
        ResearchItem(
            title=f"Paper {i:02d}",
            authors=[f"Author {i:02d}"],
            journal="Journal",
            year=2000 + i,
            doi=f"10.1000/{i:02d}",
            **overrides,
        )
        for i in range(count)
    ]


@pytest.fixture
def make_items():
    """Factory for numbered ResearchItems titled "Paper 00", "Paper 01", ..."""
    return _numbered_items

