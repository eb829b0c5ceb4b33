"""In-memory fakes for the application ports, shared by unit and API tests."""

import asyncio
from datetime import datetime, timezone
from typing import Any

from resource_search.application.interfaces import CacheStore, EmbeddingProvider, ResourceSource
from resource_search.domain.entities import CacheMetadata, TrainingResource
from resource_search.domain.exceptions import SourceFetchError, VectorProviderError


def make_items(count: int) -> list[dict[str, Any]]:
    """Source items ``item-0 .. item-{count-1}``."""
    return [
        {"Title": f"item-{i}", "Topic": f"topic-{i % 3}", "Description": f"desc {i}"}
        for i in range(count)
    ]


class FakeSource(ResourceSource):
    """Returns a fixed list of raw items, or fails like an unreachable endpoint."""

    def __init__(self, items: list[dict[str, Any]] | None = None, fail: bool = False):
        self.items = items or []
        self.fail = fail
        self.calls = 0

    async def fetch_all(self) -> list[dict[str, Any]]:
        self.calls += 1
        if self.fail:
            raise SourceFetchError("Service Unavailable", status_code=503)
        return [dict(item) for item in self.items]


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic provider.

    Vectors come from ``vectors`` (keyed by text) or default to ``[1.0, n]``
    where n is the call number. Texts in ``fail_on`` raise VectorProviderError.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        fail_on: set[str] | None = None,
    ):
        self.vectors = vectors or {}
        self.fail_on = fail_on or set()
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    @property
    def provider_name(self) -> str:
        return "fake"

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.gate is not None:
            await self.gate.wait()
        if text in self.fail_on:
            raise VectorProviderError(provider="fake", status_code=500, message="boom")
        if text in self.vectors:
            return list(self.vectors[text])
        return [1.0, float(len(self.calls))]


class InMemoryCacheStore(CacheStore):
    """CacheStore keeping snapshot, metadata, and partial progress in memory."""

    def __init__(self, max_age_hours: float = 24.0):
        self.snapshot: list[TrainingResource] | None = None
        self.metadata: CacheMetadata | None = None
        self.partial: list[TrainingResource] | None = None
        self.partial_saves: list[int] = []
        self._max_age_hours = max_age_hours

    def is_valid(self, now: datetime | None = None) -> bool:
        if self.metadata is None or self.metadata.last_updated is None:
            return False
        age = self.metadata.age_hours(now or datetime.now(timezone.utc))
        return age < self._max_age_hours and self.snapshot is not None

    def has_snapshot(self) -> bool:
        return self.snapshot is not None

    def load(self) -> list[TrainingResource]:
        return list(self.snapshot or [])

    def save(self, records: list[TrainingResource], metadata: CacheMetadata) -> None:
        self.snapshot = list(records)
        self.metadata = metadata

    def read_metadata(self) -> CacheMetadata | None:
        return self.metadata

    def load_partial(self) -> list[TrainingResource] | None:
        return None if self.partial is None else list(self.partial)

    def save_partial(self, records: list[TrainingResource]) -> None:
        self.partial = list(records)
        self.partial_saves.append(len(records))

    def clear_partial(self) -> None:
        self.partial = None


async def no_sleep(_: float) -> None:
    return None


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
