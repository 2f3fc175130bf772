"""
Base client for outbound HTTP clients.

Provides: lazy aiohttp session management, a bounded total timeout,
structured request logging, and the mapping of transport failures onto typed
errors. One attempt per call; callers decide whether to re-issue.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import aiohttp
from pydantic import BaseModel

from research_finder.constants import UPSTREAM_TIMEOUT_SECONDS, USER_AGENT
from research_finder.errors import SearchError

logger = logging.getLogger("research_finder.data_sources")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Session-level settings shared by every request of a client."""

    timeout_seconds: float = UPSTREAM_TIMEOUT_SECONDS
    user_agent: str = USER_AGENT


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "crossref", "search_api"
    method: str  # e.g. "fetch_records"
    params: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DataSourceError(SearchError):
    """Base exception for data source failures."""

    def __init__(
        self,
        source: str,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.source = source
        self.status_code = status_code
        self.body = body
        super().__init__(f"[{source}] {message}")


class UpstreamTimeout(DataSourceError):
    """Raised when the data source does not answer within the timeout."""

    pass


class UpstreamFailure(DataSourceError):
    """Raised on transport errors, non-2xx responses and undecodable bodies."""

    pass


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for the Crossref client and the gateway API client.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()`.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'crossref'."""
        ...

    # -- Session management --------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.config.user_agent},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # -- Core request --------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """
        Make a single HTTP request and return the decoded JSON body.

        Parameters
        ----------
        method : str
            HTTP method, "GET" or "POST".
        url : str
            Full URL.
        params : dict, optional
            Query string parameters.
        headers : dict, optional
            Additional HTTP headers.
        context : RequestContext, optional
            Logging context.

        Raises
        ------
        UpstreamTimeout
            The request did not complete within ``config.timeout_seconds``.
        UpstreamFailure
            Connection error, HTTP status >= 400, or a body that is not JSON.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        start = time.monotonic()

        logger.info("Request [%s.%s] url=%s", ctx.source, ctx.method, url)

        try:
            session = await self._get_session()
            resp = await session.request(
                method.upper(), url, params=params, headers=headers
            )

            if resp.status >= 400:
                body = await resp.text()
                raise UpstreamFailure(
                    ctx.source,
                    f"HTTP {resp.status}: {body[:500]}",
                    status_code=resp.status,
                    body=body,
                )

            data = await resp.json(content_type=None)

        except asyncio.TimeoutError as e:
            elapsed = time.monotonic() - start
            raise UpstreamTimeout(
                ctx.source, f"Timeout after {elapsed:.1f}s"
            ) from e

        except aiohttp.ClientError as e:
            raise UpstreamFailure(ctx.source, f"Connection error: {e}") from e

        except ValueError as e:
            raise UpstreamFailure(ctx.source, f"Invalid JSON body: {e}") from e

        elapsed = time.monotonic() - start
        logger.info(
            "Success [%s.%s] elapsed=%.2fs", ctx.source, ctx.method, elapsed
        )
        return data

    # -- Convenience methods for subclasses ----------------------------------

    async def _rest_get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        context: RequestContext | None = None,
    ) -> Any:
        """Convenience wrapper for REST GET requests."""
        return await self._request("GET", url, params=params, context=context)
