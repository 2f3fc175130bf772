"""
Search gateway: the request-handling entry point.

validate → rate-limit (keyed by client address) → fetch upstream →
normalize every record → assemble SearchResult.

Outcomes, in order of precedence:
  1. QueryValidationError — client fault, no network call made
  2. RateLimitExceeded    — client fault, retry later
  3. UpstreamTimeout      — service unavailable
  4. UpstreamFailure      — internal error
  5. SearchResult         — success
"""

import logging
from typing import Any

from research_finder.config import Settings
from research_finder.data_sources.base_client import ClientConfig
from research_finder.data_sources.crossref import CrossrefClient
from research_finder.errors import RateLimitExceeded
from research_finder.models.research import SearchResult
from research_finder.services.normalizer import normalize
from research_finder.services.query_validator import validate_query
from research_finder.services.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


class SearchGateway:
    """Composes the validator, rate limiter, Crossref client and normalizer."""

    def __init__(
        self,
        upstream: CrossrefClient,
        rate_limiter: SlidingWindowRateLimiter,
        *,
        max_rows: int,
    ):
        self.upstream = upstream
        self.rate_limiter = rate_limiter
        self.max_rows = max_rows

    @classmethod
    def from_settings(cls, settings: Settings) -> "SearchGateway":
        upstream = CrossrefClient(
            ClientConfig(timeout_seconds=settings.upstream_timeout_seconds),
            base_url=settings.crossref_url,
            mailto=settings.crossref_mailto,
        )
        rate_limiter = SlidingWindowRateLimiter(
            settings.rate_limit,
            settings.rate_window_seconds,
            max_keys=settings.rate_limit_max_keys,
        )
        return cls(upstream, rate_limiter, max_rows=settings.max_rows)

    async def search(self, raw_query: Any, raw_rows: Any, client_key: str) -> SearchResult:
        query = validate_query(raw_query, raw_rows, max_rows=self.max_rows)

        if not await self.rate_limiter.admit(client_key):
            raise RateLimitExceeded(client_key)

        page = await self.upstream.fetch_records(query)
        results = [normalize(record) for record in page.items]

        logger.info(
            "Search q=%r rows=%d → %d results (total=%s)",
            query.text,
            query.rows,
            len(results),
            page.total,
        )
        return SearchResult(total=page.total or len(results), results=results)

    async def close(self) -> None:
        await self.upstream.close()
