"""research-finder: search bibliographic metadata and export result pages."""

__version__ = "0.1.0"
