"""In-memory search index over embedded training resources.

Queries are an exact linear scan scored by cosine similarity. The served
collection is an immutable tuple; ``publish`` swaps the reference in one
assignment, so a query always scores one complete collection.
"""

import logging
import math
from collections.abc import Sequence

from resource_search.domain.entities import SearchHit, TrainingResource

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 6


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product over the product of norms; 0.0 when either norm is zero.

    Raises:
        ValueError: if the vectors have different lengths.
    """
    if len(a) != len(b):
        raise ValueError(f"Vector dimensions differ: {len(a)} != {len(b)}")

    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (norm_a * norm_b)


class SearchIndex:
    """Holds the currently served collection and answers top-K queries."""

    def __init__(self, records: Sequence[TrainingResource] = ()):
        self._records: tuple[TrainingResource, ...] = tuple(records)

    @property
    def records(self) -> tuple[TrainingResource, ...]:
        return self._records

    @property
    def size(self) -> int:
        return len(self._records)

    @property
    def is_loaded(self) -> bool:
        return len(self._records) > 0

    def publish(self, records: Sequence[TrainingResource]) -> None:
        """Replace the served collection."""
        snapshot = tuple(records)
        self._records = snapshot
        logger.info("Search index now serving %d resources", len(snapshot))

    def query(self, vector: Sequence[float], k: int = DEFAULT_TOP_K) -> list[SearchHit]:
        """Return up to ``k`` hits ordered by descending similarity."""
        if k <= 0:
            return []

        records = self._records
        hits = [
            SearchHit(resource=record, score=cosine_similarity(vector, record.embedding))
            for record in records
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[:k]
