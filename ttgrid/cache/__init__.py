from .manager import DEFAULT_NAMESPACE, DEFAULT_TTL_SECONDS, CacheManager
from .store import JsonFileStore, KeyValueStore, MemoryStore, QuotaExceededError, cache_key

__all__ = [
    "CacheManager",
    "DEFAULT_NAMESPACE",
    "DEFAULT_TTL_SECONDS",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "QuotaExceededError",
    "cache_key",
]
