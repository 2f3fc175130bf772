"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from research_finder import __version__
from research_finder.config import Settings, get_settings
from research_finder.constants import (
    ERROR_INTERNAL,
    ERROR_QUERY_TOO_SHORT,
    ERROR_RATE_LIMITED,
    ERROR_UPSTREAM_TIMEOUT,
)
from research_finder.data_sources.base_client import DataSourceError, UpstreamTimeout
from research_finder.errors import QueryValidationError, RateLimitExceeded, SearchError
from research_finder.models.research import SearchResult
from research_finder.services.search_gateway import SearchGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def client_key(request: Request) -> str:
    """Rate-limit key: peer address, else first X-Forwarded-For hop, else "unknown"."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or "unknown"


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/search", response_model=SearchResult)
async def search(
    request: Request,
    q: str = Query(default=""),
    rows: str | None = Query(default=None),
) -> SearchResult:
    gateway: SearchGateway = request.app.state.gateway
    try:
        return await gateway.search(q, rows, client_key(request))
    except SearchError:
        raise
    except Exception as e:
        # App-level Exception handlers run outside CORSMiddleware.
        return await _unexpected_error(request, e)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


async def _validation_error(_: Request, exc: QueryValidationError) -> JSONResponse:
    logger.info("Rejected query: %s", exc)
    return JSONResponse(status_code=400, content={"error": ERROR_QUERY_TOO_SHORT})


async def _rate_limited(_: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content={"error": ERROR_RATE_LIMITED})


async def _upstream_error(_: Request, exc: DataSourceError) -> JSONResponse:
    if isinstance(exc, UpstreamTimeout):
        logger.warning("Search error: %s", exc)
        return JSONResponse(status_code=504, content={"error": ERROR_UPSTREAM_TIMEOUT})
    logger.error("Search error: %s (status=%s)", exc, exc.status_code)
    return JSONResponse(status_code=500, content={"error": ERROR_INTERNAL})


async def _unexpected_error(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"error": ERROR_INTERNAL})


# ---------------------------------------------------------------------------
# Static frontend (production only)
# ---------------------------------------------------------------------------


class SPAStaticFiles(StaticFiles):
    """Static files that fall back to index.html for client-side routes."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None, gateway: SearchGateway | None = None
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.gateway = gateway or SearchGateway.from_settings(settings)
        try:
            yield
        finally:
            await app.state.gateway.close()

    app = FastAPI(
        title="Research Finder API",
        description="Search gateway over the Crossref works API",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    app.add_exception_handler(QueryValidationError, _validation_error)
    app.add_exception_handler(RateLimitExceeded, _rate_limited)
    app.add_exception_handler(DataSourceError, _upstream_error)
    app.add_exception_handler(Exception, _unexpected_error)

    app.include_router(router)

    if settings.is_production:
        if settings.static_dir.is_dir():
            app.mount("/", SPAStaticFiles(directory=settings.static_dir, html=True), name="frontend")
        else:
            logger.warning("Static directory %s not found; frontend not served", settings.static_dir)

    return app
