"""Pydantic schemas for search API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


# ── Request Schemas ──────────────────────────────────────────────────


class SearchRequest(BaseModel):
    """Request body for a semantic search.

    ``query`` is optional at the schema level so a missing value is
    reported as a 400 by the endpoint rather than a validation 422.
    """

    query: str | None = Field(default=None, description="Free-text search query")


# ── Response Schemas ─────────────────────────────────────────────────


class SearchHitSchema(BaseModel):
    """A single ranked training resource.

    Any other fields the source item carried (links, ids) are passed
    through unchanged alongside the named ones.
    """

    model_config = ConfigDict(extra="allow")

    Title: str
    Topic: str
    Description: str
    score: float
