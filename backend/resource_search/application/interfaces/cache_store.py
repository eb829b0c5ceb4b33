"""Abstract interface (port) for the durable embedding snapshot."""

from abc import ABC, abstractmethod
from datetime import datetime

from resource_search.domain.entities import CacheMetadata, TrainingResource


class CacheStore(ABC):
    """Port for the cache snapshot, its metadata, and the partial-progress file."""

    @abstractmethod
    def is_valid(self, now: datetime | None = None) -> bool:
        """Whether the stored snapshot is fresh enough to serve without a rebuild."""
        ...

    @abstractmethod
    def has_snapshot(self) -> bool:
        ...

    @abstractmethod
    def load(self) -> list[TrainingResource]:
        ...

    @abstractmethod
    def save(self, records: list[TrainingResource], metadata: CacheMetadata) -> None:
        """Write the snapshot, then its metadata."""
        ...

    @abstractmethod
    def read_metadata(self) -> CacheMetadata | None:
        ...

    @abstractmethod
    def load_partial(self) -> list[TrainingResource] | None:
        """Return the partial-progress prefix, or ``None`` when there is none."""
        ...

    @abstractmethod
    def save_partial(self, records: list[TrainingResource]) -> None:
        ...

    @abstractmethod
    def clear_partial(self) -> None:
        ...
