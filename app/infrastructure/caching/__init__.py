"""In-process caching for API lookups."""

from infrastructure.caching.ttl_cache import TTLCache

__all__ = ["TTLCache"]
