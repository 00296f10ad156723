"""Redis cache backend implementing ICacheBackend."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import redis

from uacaps.core.config import RedisConfig
from uacaps.core.exceptions import CacheError


@contextmanager
def _wrapped(operation: str, key: str) -> Iterator[None]:
    try:
        yield
    except redis.RedisError as exc:
        raise CacheError(f"Redis {operation} failed for key={key!r}: {exc}") from exc


class RedisCacheBackend:
    """Shared lookup cache backed by Redis, for multi-worker deployments."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: RedisConfig) -> RedisCacheBackend:
        return cls(redis.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            decode_responses=config.decode_responses,
        ))

    def get(self, key: str) -> str | None:
        with _wrapped("GET", key):
            return self._client.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        with _wrapped("SETEX", key):
            self._client.setex(key, ttl, value)

    def delete(self, key: str) -> None:
        with _wrapped("DELETE", key):
            self._client.delete(key)

    def ping(self) -> bool:
        """True when the server answers; used by the readiness probe."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False
