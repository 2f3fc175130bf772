"""Project-wide constants."""

from pathlib import Path

# -- Crossref ---------------------------------------------------------------
CROSSREF_WORKS_URL: str = "https://api.crossref.org/works"
UPSTREAM_TIMEOUT_SECONDS: float = 10.0
USER_AGENT: str = "research-finder/0.1"

# -- Query validation -------------------------------------------------------
MIN_QUERY_LENGTH: int = 2
DEFAULT_ROWS: int = 20
DEFAULT_MAX_ROWS: int = 25

# -- Rate limiting (per client address) -------------------------------------
RATE_LIMIT: int = 30  # requests
RATE_WINDOW_SECONDS: float = 60.0
RATE_LIMIT_MAX_KEYS: int = 10_000

# -- Consumer side ----------------------------------------------------------
DEBOUNCE_SECONDS: float = 0.5
CONTROLLER_ROWS: int = 25
DEFAULT_QUERY: str = "machine learning"
DEFAULT_PAGE_SIZE: int = 10
PAGE_SIZE_OPTIONS: tuple[int, ...] = (5, 10, 25)
DOI_RESOLVER_URL: str = "https://doi.org"

# -- Export -----------------------------------------------------------------
EXPORT_COLUMNS: tuple[str, ...] = ("title", "authors", "journal", "year", "doi")
EXPORT_LABELS: tuple[str, ...] = ("Title", "Authors", "Journal", "Year", "DOI")
EXPORT_FILENAME_STEM: str = "research-results"

# -- HTTP responses ---------------------------------------------------------
ERROR_QUERY_TOO_SHORT: str = "Query must be at least 2 characters"
ERROR_RATE_LIMITED: str = "Too many requests, slow down"
ERROR_UPSTREAM_TIMEOUT: str = "Upstream timeout"
ERROR_INTERNAL: str = "Internal server error"

# -- Static assets ----------------------------------------------------------
# Project root is the directory that holds src/ (three parents up from this module).
_PROJECT_ROOT: Path = Path(__file__).parent.parent.parent
DEFAULT_STATIC_DIR: Path = _PROJECT_ROOT / "frontend" / "dist" / "frontend"
