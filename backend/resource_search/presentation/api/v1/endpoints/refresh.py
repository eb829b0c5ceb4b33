"""Manual refresh endpoint: forces a rebuild and republishes the index."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status

from resource_search.application.schemas import RefreshResponse
from resource_search.application.services import IndexRefreshService
from resource_search.domain.exceptions import (
    BuildError,
    BuildInProgressError,
    CacheIOError,
    SourceFetchError,
)
from resource_search.infrastructure.dependencies import get_refresh_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Refresh"])


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    resume: bool = Query(default=False, description="Resume from the partial-progress file"),
    service: IndexRefreshService = Depends(get_refresh_service),
) -> RefreshResponse:
    """Run a forced build now, outside the midnight schedule.

    The request waits for the build to finish; a concurrent request is
    rejected with 409 while one is running.
    """
    logger.info("Manual refresh requested (resume=%s)...", resume)
    try:
        records = await service.refresh(force=True, resume=resume)
    except BuildInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (BuildError, SourceFetchError, CacheIOError) as e:
        logger.error("Manual refresh failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Refresh failed"
        )
    except Exception:
        logger.exception("Manual refresh failed unexpectedly")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Refresh failed"
        )

    return RefreshResponse(
        success=True,
        message=f"Refreshed {len(records)} embeddings",
        timestamp=datetime.now(timezone.utc),
    )
