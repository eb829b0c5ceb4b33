"""Health check endpoint: reports index and cache state, never builds."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from resource_search.application.schemas import HealthResponse
from resource_search.infrastructure.dependencies import ServiceContainer, get_container

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """Returns whether embeddings are loaded and the cache is still fresh."""
    cache_valid = await asyncio.to_thread(container.cache_store.is_valid)
    return HealthResponse(
        status="healthy",
        embeddingsLoaded=container.search_index.is_loaded,
        cacheValid=cache_valid,
        resourceCount=container.search_index.size,
        buildInProgress=container.refresh_service.is_building,
        nextRefreshAt=container.scheduler.next_run_at,
        timestamp=datetime.now(timezone.utc),
    )
