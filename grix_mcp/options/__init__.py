from .service import OptionsService, cache_key, normalize_query

__all__ = ["OptionsService", "cache_key", "normalize_query"]
