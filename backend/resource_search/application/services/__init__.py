from .embedding_builder import EmbeddingBuilder
from .index_refresh_service import IndexRefreshService
from .refresh_scheduler import RefreshScheduler
from .search_index import SearchIndex, cosine_similarity
from .search_service import SearchService

__all__ = [
    "EmbeddingBuilder",
    "IndexRefreshService",
    "RefreshScheduler",
    "SearchIndex",
    "SearchService",
    "cosine_similarity",
]
