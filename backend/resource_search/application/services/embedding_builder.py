"""Embedding builder: fetches the training library and embeds it item by item.

This is an application service that coordinates:
1. Short-circuiting to the cached snapshot while it is still fresh
2. Fetching the full collection from the ResourceSource
3. Embedding each item in order via the EmbeddingProvider, pacing calls
   and checkpointing progress so an interrupted build can resume
4. Writing the finished collection and its metadata through the CacheStore
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from resource_search.application.interfaces.cache_store import CacheStore
from resource_search.application.interfaces.embedding_provider import EmbeddingProvider
from resource_search.application.interfaces.resource_source import ResourceSource
from resource_search.domain.entities import CacheMetadata, TrainingResource
from resource_search.domain.exceptions import BuildError, CacheIOError, VectorProviderError
from resource_search.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)

plog = PipelineLogger("EmbeddingBuilder")

# ── Pacing constants (milliseconds) ─────────────────────────────────
_DEFAULT_ITEM_DELAY_MS = 200
_DEFAULT_ERROR_DELAY_STEP_MS = 500
_DEFAULT_ERROR_DELAY_CAP_MS = 5000
_DEFAULT_CHECKPOINT_INTERVAL = 25

CACHE_SCHEMA_VERSION = "1.0"


class EmbeddingBuilder:
    """Drives the fetch → embed → persist pipeline.

    Builds are strictly sequential: each embedding call is awaited before
    the next one starts. A single instance must not run two builds at once;
    IndexRefreshService serializes callers.
    """

    def __init__(
        self,
        source: ResourceSource,
        embedding_provider: EmbeddingProvider,
        cache_store: CacheStore,
        *,
        item_delay_ms: int = _DEFAULT_ITEM_DELAY_MS,
        error_delay_step_ms: int = _DEFAULT_ERROR_DELAY_STEP_MS,
        error_delay_cap_ms: int = _DEFAULT_ERROR_DELAY_CAP_MS,
        checkpoint_interval: int = _DEFAULT_CHECKPOINT_INTERVAL,
        cache_version: str = CACHE_SCHEMA_VERSION,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._source = source
        self._provider = embedding_provider
        self._store = cache_store
        self._item_delay_ms = item_delay_ms
        self._error_delay_step_ms = error_delay_step_ms
        self._error_delay_cap_ms = error_delay_cap_ms
        self._checkpoint_interval = checkpoint_interval
        self._cache_version = cache_version
        self._sleep = sleep

    def pacing_delay(self, consecutive_errors: int) -> float:
        """Seconds to wait between items, growing with consecutive failures."""
        penalty = min(consecutive_errors * self._error_delay_step_ms, self._error_delay_cap_ms)
        return (self._item_delay_ms + penalty) / 1000

    async def build(
        self,
        force_refresh: bool = False,
        resume_from_partial: bool = False,
    ) -> list[TrainingResource]:
        """Return a fully embedded collection, rebuilding it when needed.

        Raises:
            SourceFetchError: the collection could not be fetched.
            BuildError: an item failed to embed; progress was checkpointed.
            CacheIOError: the snapshot or a checkpoint could not be written.
        """
        if not force_refresh and not resume_from_partial:
            if await asyncio.to_thread(self._store.is_valid):
                plog.step_complete(
                    PipelineStage.CACHE, "Cache is still valid. Skipping embedding generation."
                )
                return await asyncio.to_thread(self._store.load)

        with plog.timed_step(PipelineStage.FETCH, "Fetching training library data"):
            raw_items = await self._source.fetch_all()
        items = [TrainingResource.from_dict(raw) for raw in raw_items]
        total = len(items)

        processed = await self._resume_prefix() if resume_from_partial else []
        if len(processed) > total:
            plog.detail(
                "Partial snapshot is longer than the source; truncating",
                partial=len(processed),
                source=total,
            )
            processed = processed[:total]
        start_index = len(processed)

        plog.step_start(
            PipelineStage.EMBED,
            f"Processing {total} items",
            start_index=start_index,
        )
        start = time.monotonic()
        consecutive_errors = 0

        for index in range(start_index, total):
            item = items[index]
            try:
                vector = await self._provider.embed(item.combined_text)
            except VectorProviderError as exc:
                consecutive_errors += 1
                plog.step_error(
                    PipelineStage.EMBED,
                    f"Failed to generate embedding for item {index + 1}: {item.title}",
                    error=exc,
                )
                await self._checkpoint_after_failure(processed)
                raise BuildError(completed=len(processed), total=total, cause=exc) from exc

            processed.append(item.with_embedding(vector))
            consecutive_errors = 0
            logger.debug("Processed item %d/%d: %s", index + 1, total, item.title)

            if len(processed) % self._checkpoint_interval == 0:
                await asyncio.to_thread(self._store.save_partial, list(processed))
                plog.progress(len(processed), total)

            if index < total - 1:
                await self._sleep(self.pacing_delay(consecutive_errors))

        metadata = CacheMetadata.now(item_count=total, version=self._cache_version)
        try:
            with plog.timed_step(PipelineStage.CACHE, "Writing cache snapshot", items=total):
                await asyncio.to_thread(self._store.save, processed, metadata)
        except CacheIOError:
            # Keep the finished embeddings resumable
            await self._checkpoint_after_failure(processed)
            raise
        await asyncio.to_thread(self._store.clear_partial)

        plog.step_complete(
            PipelineStage.COMPLETE,
            f"All {len(processed)} embeddings generated and cached",
        )
        plog.stats(
            embedded=total - start_index,
            resumed=start_index,
            duration=f"{time.monotonic() - start:.1f}s",
        )
        return processed

    async def _resume_prefix(self) -> list[TrainingResource]:
        """Load the partial-progress snapshot, or start fresh when unusable."""
        try:
            partial = await asyncio.to_thread(self._store.load_partial)
        except CacheIOError as exc:
            logger.warning("Failed to read partial file, starting fresh: %s", exc)
            return []

        if partial is None:
            plog.detail("No partial file found, starting from the first item")
            return []

        plog.detail(f"Resuming from partial file: {len(partial)} items already processed")
        return list(partial)

    async def _checkpoint_after_failure(self, processed: list[TrainingResource]) -> None:
        try:
            await asyncio.to_thread(self._store.save_partial, list(processed))
        except CacheIOError as exc:
            logger.error("Could not save partial results before failure: %s", exc)
            return
        plog.step_complete(
            PipelineStage.CHECKPOINT,
            f"Partial results saved ({len(processed)} items) before failure",
        )
