from .keys import derive_cache_key
from .store import CacheEntry, CacheStore

__all__ = (
    "derive_cache_key",
    "CacheEntry",
    "CacheStore",
)
