from .json_cache_store import JsonCacheStore

__all__ = ["JsonCacheStore"]
