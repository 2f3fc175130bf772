"""
Pydantic models for Crossref works payloads.

Crossref's schema is documented but not under our control: titles arrive as
lists or scalars, author entries drop name parts, and date fields may be
missing at any level. Every field is therefore optional and untyped, so that
validating any mapping succeeds. Reading values is left to the normalizer's
default-on-absence combinators.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UpstreamRecord(BaseModel):
    """Raw Crossref work, as loose as the API itself."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Any = None
    author: Any = None
    container_title: Any = Field(default=None, alias="container-title")
    issued: Any = None
    created: Any = None
    doi: Any = Field(default=None, alias="DOI")
    abstract: Any = None
    url: Any = Field(default=None, alias="URL")

    @classmethod
    def from_raw(cls, raw: Any) -> "UpstreamRecord":
        """Build a record from any decoded JSON value; non-mappings become empty records."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(raw)


class CrossrefPage(BaseModel):
    """Records and reported total extracted from one works response."""

    items: list[UpstreamRecord] = []
    total: int | None = None
