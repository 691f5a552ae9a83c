from .grix_client import DEFAULT_BASE_URL, GrixClient
from .ttl_cache import CacheEntry, TTLCache, is_stale, now_ms

__all__ = ["DEFAULT_BASE_URL", "GrixClient", "CacheEntry", "TTLCache", "is_stale", "now_ms"]
