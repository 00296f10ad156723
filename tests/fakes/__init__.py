"""Shared test doubles and small datasets."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from uacaps.cache.memory_backend import MemoryCacheBackend
from uacaps.core.exceptions import CacheError
from uacaps.models.capabilities import Capabilities
from uacaps.models.entry import Entry

SAMPLE_DATASET = Path(__file__).resolve().parent.parent / "fixtures" / "sample_dataset.csv"

HEADER = ["Pattern", "Parent", "Browser", "Platform", "Device_Type"]

# Minimal well-formed dataset: a default root, a "*" fallback and a small
# iPhone family.
BASIC_ROWS: list[list[str]] = [
    ["DefaultProperties", "", "Default Browser", "unknown", "unknown"],
    ["Mobile Safari", "DefaultProperties", "Safari", "iOS", "Mobile Phone"],
    ["iPhone*", "Mobile Safari", "", "", ""],
    ["iPhone 6*", "Mobile Safari", "Safari 8", "", ""],
    ["iPad*", "Mobile Safari", "", "iPadOS", "Tablet"],
    ["*", "DefaultProperties", "", "", ""],
]


def make_entry(pattern: str, parent: str | None = None, **properties: Any) -> Entry:
    return Entry(pattern=pattern, parent=parent, properties=properties)


class CountingLookup:
    """ILookup wrapper that counts calls reaching the real engine."""

    def __init__(self, engine) -> None:
        self._engine = engine
        self.calls = 0

    def lookup(self, user_agent: str) -> Capabilities:
        self.calls += 1
        return self._engine.lookup(user_agent)


class BrokenCacheBackend:
    """ICacheBackend whose every operation fails."""

    def get(self, key: str) -> str | None:
        raise CacheError(f"unavailable: {key}")

    def setex(self, key: str, ttl: int, value: str) -> None:
        raise CacheError(f"unavailable: {key}")

    def delete(self, key: str) -> None:
        raise CacheError(f"unavailable: {key}")


__all__ = [
    "BASIC_ROWS",
    "HEADER",
    "SAMPLE_DATASET",
    "BrokenCacheBackend",
    "CountingLookup",
    "MemoryCacheBackend",
    "make_entry",
]
