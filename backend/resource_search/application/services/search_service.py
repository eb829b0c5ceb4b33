"""Search service: embeds a query and ranks the served resources against it."""

import logging

from resource_search.application.interfaces.embedding_provider import EmbeddingProvider
from resource_search.application.services.search_index import DEFAULT_TOP_K, SearchIndex
from resource_search.domain.entities import SearchHit
from resource_search.domain.exceptions import (
    IndexNotReadyError,
    QuerySearchError,
    QueryValidationError,
    VectorProviderError,
)

logger = logging.getLogger(__name__)


class SearchService:
    """Application service for the query path.

    Reads only the published SearchIndex, so it never waits on a build.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        index: SearchIndex,
        top_k: int = DEFAULT_TOP_K,
    ):
        self._provider = embedding_provider
        self._index = index
        self._top_k = top_k

    async def search(self, query: str | None, k: int | None = None) -> list[SearchHit]:
        if query is None or not query.strip():
            raise QueryValidationError("Missing query")

        if not self._index.is_loaded:
            raise IndexNotReadyError("Embeddings not yet loaded")

        try:
            vector = await self._provider.embed(query)
        except VectorProviderError as exc:
            logger.error("Search error: %s", exc)
            raise QuerySearchError("Failed to process query") from exc

        try:
            hits = self._index.query(vector, k=k if k is not None else self._top_k)
        except ValueError as exc:
            logger.error("Search error: %s", exc)
            raise QuerySearchError("Failed to process query") from exc

        logger.info(
            "Search %r -> %d hits (top score %.3f)",
            query,
            len(hits),
            hits[0].score if hits else 0.0,
        )
        return hits
