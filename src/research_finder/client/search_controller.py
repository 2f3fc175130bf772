"""
Search controller: reacts to query text changes and holds the latest results.

State machine over IDLE → SEARCHING → SETTLED | FAILED. Text changes are
debounced (quiet period) and deduplicated against the last emitted value
before a search is dispatched. In-flight searches are never cancelled; each
one carries a sequence number and only the most recently dispatched search
may update the state, so the last query the user typed always wins.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Protocol

from research_finder.client.table_state import TableState
from research_finder.constants import (
    CONTROLLER_ROWS,
    DEBOUNCE_SECONDS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_QUERY,
)
from research_finder.errors import SearchError
from research_finder.models.research import ResearchItem, SearchResult

logger = logging.getLogger(__name__)


class SearchBackend(Protocol):
    async def search(self, query: str, rows: int = ...) -> SearchResult: ...


class SearchStatus(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    SETTLED = "settled"
    FAILED = "failed"


class SearchController:
    """Debounced search driver for an interactive results table."""

    def __init__(
        self,
        backend: SearchBackend,
        *,
        rows: int = CONTROLLER_ROWS,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        default_query: str = DEFAULT_QUERY,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_change: Callable[[SearchController], None] | None = None,
    ):
        self.backend = backend
        self.rows = rows
        self.debounce_seconds = debounce_seconds
        self.default_query = default_query
        self.page_size = page_size
        self.on_change = on_change

        self.status = SearchStatus.IDLE
        self.loading = False
        self.current_query = ""
        self.result = SearchResult()
        self.error: SearchError | None = None
        self.table = TableState(page_size=page_size)

        self._seq = 0
        self._last_emitted: str | None = None
        self._pending: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    # -- Input ----------------------------------------------------------------

    def on_text_change(self, text: str) -> None:
        """Schedule a search for `text` once input has been quiet for the debounce period."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.create_task(self._debounced(text))

    async def _debounced(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if text == self._last_emitted:
            return
        self._last_emitted = text
        if not text or len(text) <= 1:
            return
        self._dispatch(text)

    def _dispatch(self, text: str) -> None:
        task = asyncio.create_task(self.search(text))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def start(self) -> None:
        """Run the initial search with the default query so the table is not empty."""
        self._dispatch(self.default_query)

    # -- Search ---------------------------------------------------------------

    async def search(self, query: str) -> None:
        self._seq += 1
        seq = self._seq

        self.loading = True
        self.status = SearchStatus.SEARCHING
        self.current_query = query
        self._notify()

        try:
            result = await self.backend.search(query, self.rows)
        except SearchError as e:
            if seq != self._seq:
                logger.debug("Discarding stale failure for %r (seq=%d)", query, seq)
                return
            logger.warning("Search for %r failed: %s", query, e)
            self.error = e
            self.loading = False
            self.status = SearchStatus.FAILED
            self._notify()
            return

        if seq != self._seq:
            logger.debug("Discarding stale result for %r (seq=%d)", query, seq)
            return

        self.result = result
        self.error = None
        self.table = TableState(page_size=self.page_size)
        self.loading = False
        self.status = SearchStatus.SETTLED
        self._notify()

    async def wait_idle(self) -> None:
        """Wait for the pending debounce and every in-flight search to finish."""
        while True:
            tasks = [t for t in (self._pending, *self._inflight) if t is not None and not t.done()]
            if not tasks:
                return
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
            for outcome in outcomes:
                if isinstance(outcome, Exception):
                    raise outcome

    # -- View -----------------------------------------------------------------

    @property
    def results(self) -> list[ResearchItem]:
        return self.result.results

    def visible_rows(self) -> list[ResearchItem]:
        return self.table.visible_rows(self.result.results)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
