"""
Exception hierarchy shared by the gateway and the consumer side.

Upstream (data source) failures subclass ``SearchError`` via
``research_finder.data_sources.base_client.DataSourceError``.
"""

from research_finder.constants import ERROR_QUERY_TOO_SHORT, ERROR_RATE_LIMITED


class SearchError(Exception):
    """Base exception for every search outcome other than success."""


class QueryValidationError(SearchError):
    """Raised when a query is rejected before any network call."""

    def __init__(self, message: str = ERROR_QUERY_TOO_SHORT):
        super().__init__(message)


class RateLimitExceeded(SearchError):
    """Raised when a client key has used up its admissions for the window."""

    def __init__(self, key: str, message: str = ERROR_RATE_LIMITED):
        self.key = key
        super().__init__(message)


class SearchRequestError(SearchError):
    """Raised on the consumer side when the gateway call does not succeed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
