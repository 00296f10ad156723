"""Lookup memoization in front of the engine.

The engine stays correct and fast without a cache; this layer only saves
repeat work for hot user-agent strings. Cache failures are logged and the
lookup falls through to the engine.
"""

from __future__ import annotations

import hashlib
import logging

from uacaps.core.exceptions import CacheError
from uacaps.core.protocols import ICacheBackend, ILookup
from uacaps.models.capabilities import Capabilities

logger = logging.getLogger(__name__)


class CachedLookup:
    """ILookup that memoizes another ILookup by exact input string."""

    KEY_PREFIX = "uacaps:lookup:"

    def __init__(self, engine: ILookup, cache: ICacheBackend, ttl: int = 3600) -> None:
        self._engine = engine
        self._cache = cache
        self._ttl = ttl

    @classmethod
    def cache_key(cls, user_agent: str) -> str:
        digest = hashlib.sha256(user_agent.encode("utf-8")).hexdigest()
        return f"{cls.KEY_PREFIX}{digest}"

    def lookup(self, user_agent: str) -> Capabilities:
        if not isinstance(user_agent, str) or not user_agent.strip():
            # Let the engine raise InvalidInputError; invalid input is never cached.
            return self._engine.lookup(user_agent)

        key = self.cache_key(user_agent)
        try:
            cached = self._cache.get(key)
        except CacheError as exc:
            logger.warning("Lookup cache read failed, bypassing cache: %s", exc)
            return self._engine.lookup(user_agent)
        if cached is not None:
            return Capabilities.model_validate_json(cached)

        capabilities = self._engine.lookup(user_agent)
        try:
            self._cache.setex(key, self._ttl, capabilities.model_dump_json())
        except CacheError as exc:
            logger.warning("Lookup cache write failed: %s", exc)
        return capabilities
