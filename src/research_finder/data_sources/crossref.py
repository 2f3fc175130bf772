"""
Crossref works API client.

One method:
  fetch_records — free-text query → raw work records plus the reported total
"""

from __future__ import annotations

import logging
from typing import Any

from research_finder.constants import CROSSREF_WORKS_URL
from research_finder.data_sources.base_client import (
    BaseClient,
    ClientConfig,
    RequestContext,
)
from research_finder.models.model_crossref import CrossrefPage, UpstreamRecord
from research_finder.models.research import SearchQuery

logger = logging.getLogger(__name__)


class CrossrefClient(BaseClient):
    """Client for the Crossref `/works` endpoint."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        base_url: str = CROSSREF_WORKS_URL,
        mailto: str = "",
    ) -> None:
        super().__init__(config)
        self.base_url = base_url
        self.mailto = mailto

    @property
    def _source_name(self) -> str:
        return "crossref"

    def _build_params(self, query: SearchQuery) -> dict[str, Any]:
        params: dict[str, Any] = {"query": query.text, "rows": query.rows}
        if self.mailto:
            params["mailto"] = self.mailto
        return params

    async def fetch_records(self, query: SearchQuery) -> CrossrefPage:
        """Run one works query and return its items with the reported total."""
        params = self._build_params(query)
        context = RequestContext(
            source=self._source_name, method="fetch_records", params=params
        )
        data = await self._rest_get(self.base_url, params, context=context)
        return self._parse_page(data)

    @staticmethod
    def _parse_page(data: Any) -> CrossrefPage:
        # Crossref nests results like: {"message": {"items": [...], "total-results": N}}
        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict):
            logger.warning("Crossref response without a message object")
            return CrossrefPage()

        raw_items = message.get("items")
        items = raw_items if isinstance(raw_items, list) else []

        total = message.get("total-results")
        if isinstance(total, bool) or not isinstance(total, int) or total < 0:
            total = None

        return CrossrefPage(
            items=[UpstreamRecord.from_raw(item) for item in items],
            total=total,
        )
