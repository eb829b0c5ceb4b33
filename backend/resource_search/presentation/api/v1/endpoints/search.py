"""Search endpoint: ranks training resources against a free-text query."""

from fastapi import APIRouter, Depends, HTTPException, status

from resource_search.application.schemas import SearchHitSchema, SearchRequest
from resource_search.application.services import SearchService
from resource_search.domain.exceptions import (
    IndexNotReadyError,
    QuerySearchError,
    QueryValidationError,
)
from resource_search.infrastructure.dependencies import get_search_service

router = APIRouter(tags=["Search"])


@router.post("/search", response_model=list[SearchHitSchema])
async def search(
    body: SearchRequest | None = None,
    service: SearchService = Depends(get_search_service),
) -> list[SearchHitSchema]:
    """Return up to six resources ranked by cosine similarity to the query."""
    try:
        hits = await service.search(body.query if body else None)
    except QueryValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except IndexNotReadyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except QuerySearchError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return [
        SearchHitSchema(
            **{
                **hit.resource.extra,
                "Title": hit.resource.title,
                "Topic": hit.resource.topic,
                "Description": hit.resource.description,
                "score": hit.score,
            }
        )
        for hit in hits
    ]
