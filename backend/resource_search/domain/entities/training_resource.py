"""Domain entity for training-library items and their embedding vectors."""

from dataclasses import dataclass, field, replace
from typing import Any

# Field names used by the training library API and the snapshot files.
_TITLE_KEY = "Title"
_TOPIC_KEY = "Topic"
_DESCRIPTION_KEY = "Description"
_EMBEDDING_KEY = "embedding"
_KNOWN_KEYS = frozenset({_TITLE_KEY, _TOPIC_KEY, _DESCRIPTION_KEY, _EMBEDDING_KEY})


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class TrainingResource:
    """A training-library item, optionally carrying its embedding vector.

    Identity is positional: the item's index in the source collection.
    Fields the source sends besides Title/Topic/Description are kept
    in ``extra`` so they survive a round-trip through the snapshot files.
    """

    title: str
    topic: str
    description: str
    embedding: tuple[float, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def combined_text(self) -> str:
        """The text sent to the embedding provider."""
        return f"{self.title} {self.topic} {self.description}"

    @property
    def is_embedded(self) -> bool:
        return len(self.embedding) > 0

    def with_embedding(self, vector: list[float]) -> "TrainingResource":
        """Return a copy of this resource carrying ``vector``."""
        return replace(self, embedding=tuple(float(v) for v in vector))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrainingResource":
        """Build a resource from a source item or a snapshot entry."""
        raw_embedding = data.get(_EMBEDDING_KEY) or ()
        return cls(
            title=_as_text(data.get(_TITLE_KEY)),
            topic=_as_text(data.get(_TOPIC_KEY)),
            description=_as_text(data.get(_DESCRIPTION_KEY)),
            embedding=tuple(float(v) for v in raw_embedding),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data[_TITLE_KEY] = self.title
        data[_TOPIC_KEY] = self.topic
        data[_DESCRIPTION_KEY] = self.description
        data[_EMBEDDING_KEY] = list(self.embedding)
        return data
