"""Integration tests against the live Crossref works API."""

import pytest

from research_finder.models.research import SearchQuery
from research_finder.services.normalizer import normalize
from research_finder.services.rate_limiter import SlidingWindowRateLimiter
from research_finder.services.search_gateway import SearchGateway

pytestmark = pytest.mark.asyncio


async def test_fetch_records_returns_page(crossref_client):
    page = await crossref_client.fetch_records(SearchQuery(text="machine learning", rows=5))

    assert 0 < len(page.items) <= 5
    assert page.total is not None and page.total >= len(page.items)


async def test_records_normalize_to_canonical_items(crossref_client):
    page = await crossref_client.fetch_records(SearchQuery(text="graphene oxide", rows=5))

    items = [normalize(record) for record in page.items]
    assert all(isinstance(item.title, str) for item in items)
    assert any(item.doi for item in items)


async def test_gateway_search_end_to_end(crossref_client):
    gateway = SearchGateway(
        crossref_client, SlidingWindowRateLimiter(30, 60.0), max_rows=25
    )

    result = await gateway.search("protein folding", "3", "127.0.0.1")

    assert len(result.results) <= 3
    assert result.total >= len(result.results)
