"""
Consumer-side client for the search gateway's HTTP API.

Used by the search controller (and the CLI) to call `GET /api/search` on a
running gateway. Any non-success outcome surfaces as ``SearchRequestError``
carrying the gateway's `error` message and HTTP status.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from research_finder.constants import CONTROLLER_ROWS
from research_finder.data_sources.base_client import (
    BaseClient,
    ClientConfig,
    DataSourceError,
    RequestContext,
)
from research_finder.errors import SearchRequestError
from research_finder.models.research import SearchResult

logger = logging.getLogger(__name__)


class SearchApiClient(BaseClient):
    """Calls the gateway's search endpoint over HTTP."""

    def __init__(
        self, base_url: str = "http://localhost:3000", config: ClientConfig | None = None
    ) -> None:
        super().__init__(config)
        self.base_url = base_url.rstrip("/")

    @property
    def _source_name(self) -> str:
        return "search_api"

    async def search(self, query: str, rows: int = CONTROLLER_ROWS) -> SearchResult:
        params: dict[str, Any] = {"q": query, "rows": str(rows)}
        context = RequestContext(source=self._source_name, method="search", params=params)
        try:
            data = await self._rest_get(f"{self.base_url}/api/search", params, context=context)
        except DataSourceError as e:
            raise SearchRequestError(_gateway_message(e), status_code=e.status_code) from e

        try:
            return SearchResult.model_validate(data)
        except ValidationError as e:
            raise SearchRequestError(f"Malformed search response: {e}") from e

    async def health(self) -> bool:
        """Return True when the gateway answers its health probe with status ok."""
        context = RequestContext(source=self._source_name, method="health")
        try:
            data = await self._rest_get(f"{self.base_url}/api/health", {}, context=context)
        except DataSourceError as e:
            logger.warning("Gateway health check failed: %s", e)
            return False
        return isinstance(data, dict) and data.get("status") == "ok"


def _gateway_message(error: DataSourceError) -> str:
    """Pull the gateway's `{"error": ...}` message out of an HTTP failure, if any."""
    if error.body:
        try:
            payload = json.loads(error.body)
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("error"), str):
            return payload["error"]
    return str(error)
