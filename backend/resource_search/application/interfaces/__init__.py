from .cache_store import CacheStore
from .embedding_provider import EmbeddingProvider
from .resource_source import ResourceSource

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "ResourceSource",
]
