"""Pluggable lookup cache backends behind the ICacheBackend Protocol."""

from __future__ import annotations

from uacaps.cache.memory_backend import MemoryCacheBackend
from uacaps.cache.redis_backend import RedisCacheBackend
from uacaps.cache.service import CachedLookup
from uacaps.core.config import AppSettings
from uacaps.core.protocols import ICacheBackend


def create_cache(settings: AppSettings | None = None) -> ICacheBackend | None:
    """Create the cache backend selected by ``settings.cache.backend``.

    Returns:
        None when caching is disabled.
    """
    if settings is None:
        settings = AppSettings()

    if settings.cache.backend == "memory":
        return MemoryCacheBackend()
    if settings.cache.backend == "redis":
        return RedisCacheBackend.from_config(settings.redis)
    return None


__all__ = ["CachedLookup", "MemoryCacheBackend", "RedisCacheBackend", "create_cache"]
