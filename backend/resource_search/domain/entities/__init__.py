"""Domain entities: pure Python business objects, no framework dependencies."""

from .cache_metadata import CacheMetadata
from .search import SearchHit
from .training_resource import TrainingResource

__all__ = [
    "CacheMetadata",
    "SearchHit",
    "TrainingResource",
]
