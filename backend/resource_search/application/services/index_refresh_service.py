"""Index refresh service: runs builds one at a time and publishes the result."""

import asyncio
import logging

from resource_search.application.interfaces.cache_store import CacheStore
from resource_search.application.services.embedding_builder import EmbeddingBuilder
from resource_search.application.services.search_index import SearchIndex
from resource_search.domain.entities import TrainingResource
from resource_search.domain.exceptions import BuildInProgressError
from resource_search.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)

plog = PipelineLogger("EmbeddingBuilder")


class IndexRefreshService:
    """Owns the single-build-in-flight rule for the served index.

    The snapshot files are not safe for concurrent writers, so a refresh
    requested while another is running is rejected with
    BuildInProgressError rather than queued. On failure the previously
    published collection stays in place.
    """

    def __init__(
        self,
        builder: EmbeddingBuilder,
        index: SearchIndex,
        cache_store: CacheStore,
    ) -> None:
        self._builder = builder
        self._index = index
        self._store = cache_store
        self._lock = asyncio.Lock()

    @property
    def is_building(self) -> bool:
        return self._lock.locked()

    async def refresh(
        self,
        force: bool = True,
        resume: bool = False,
    ) -> list[TrainingResource]:
        """Build a new collection and publish it to the search index."""
        if self._lock.locked():
            raise BuildInProgressError()

        async with self._lock:
            try:
                records = await self._builder.build(
                    force_refresh=force, resume_from_partial=resume
                )
            except Exception as exc:
                plog.step_error(
                    PipelineStage.PUBLISH,
                    f"Refresh failed; still serving {self._index.size} resources",
                    error=exc,
                )
                raise

            self._index.publish(records)
            plog.step_complete(PipelineStage.PUBLISH, f"Published {len(records)} resources")
            return records

    async def load_initial(self) -> int:
        """Publish the cached snapshot if one exists, otherwise build one.

        A stale snapshot is still served; the scheduled refresh replaces it.
        """
        if await asyncio.to_thread(self._store.has_snapshot):
            logger.info("Loading cached embeddings...")
            records = await asyncio.to_thread(self._store.load)
            self._index.publish(records)
            logger.info("Loaded %d cached embeddings.", len(records))
            return len(records)

        logger.info("No cached embeddings found. Generating initial embeddings...")
        records = await self.refresh(force=False)
        return len(records)
