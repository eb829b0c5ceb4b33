"""Pydantic schemas for the refresh and health endpoints."""

from datetime import datetime

from pydantic import BaseModel


class RefreshResponse(BaseModel):
    """Outcome of a manual index refresh."""

    success: bool
    message: str
    timestamp: datetime


class HealthResponse(BaseModel):
    """Service health, index state, and cache freshness."""

    status: str = "healthy"
    embeddingsLoaded: bool
    cacheValid: bool
    resourceCount: int = 0
    buildInProgress: bool = False
    nextRefreshAt: datetime | None = None
    timestamp: datetime
