"""Shared fixtures for integration tests.

These tests call the live Crossref API and only run when RUN_NETWORK_TESTS is set.
"""

import os

import pytest

from research_finder.config import get_settings
from research_finder.data_sources.base_client import ClientConfig
from research_finder.data_sources.crossref import CrossrefClient


def pytest_collection_modifyitems(config, items):
    if os.environ.get("RUN_NETWORK_TESTS"):
        return
    skip = pytest.mark.skip(reason="RUN_NETWORK_TESTS not set, skipping live Crossref test")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest.fixture
async def crossref_client():
    """Create and tear down a CrossrefClient."""
    settings = get_settings()
    c = CrossrefClient(
        ClientConfig(timeout_seconds=settings.upstream_timeout_seconds),
        base_url=settings.crossref_url,
        mailto=settings.crossref_mailto,
    )
    yield c
    await c.close()
