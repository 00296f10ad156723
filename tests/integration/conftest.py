"""Integration test fixtures: the bundled sample dataset and a live Redis."""

from __future__ import annotations

import os

import pytest
import redis

from tests.fakes import SAMPLE_DATASET
from uacaps.core.config import DatasetConfig
from uacaps.engine.lookup import LookupEngine

REDIS_URL = os.environ.get("UACAPS_TEST_REDIS_URL", "redis://localhost:6379/15")


def _redis_available() -> bool:
    """Check if a Redis server is reachable."""
    try:
        return bool(redis.Redis.from_url(REDIS_URL, socket_connect_timeout=0.5).ping())
    except redis.RedisError:
        return False


skip_no_redis = pytest.mark.skipif(
    not _redis_available(),
    reason="Redis not available",
)


@pytest.fixture(scope="session")
def sample_engine() -> LookupEngine:
    """Engine over the browscap-shaped sample file (two preamble lines)."""
    return LookupEngine.initialize(SAMPLE_DATASET, DatasetConfig(skip_rows=2))


@pytest.fixture
def redis_client():
    client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    client.flushdb()
    yield client
    client.flushdb()
