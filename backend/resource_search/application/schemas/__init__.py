from .search import SearchHitSchema, SearchRequest
from .system import HealthResponse, RefreshResponse

__all__ = [
    "HealthResponse",
    "RefreshResponse",
    "SearchHitSchema",
    "SearchRequest",
]
