"""Protocol interfaces for uacaps abstractions.

Components talk to each other through these Protocols: structural typing,
no inheritance required, easy to fake in tests with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uacaps.models.capabilities import Capabilities
    from uacaps.models.entry import Entry


# ---------------------------------------------------------------------------
# Parent lookup (Capability Resolver input)
# ---------------------------------------------------------------------------

@runtime_checkable
class IParentLookup(Protocol):
    """Resolves a parent reference (pattern string) to its Entry."""

    def get(self, pattern: str) -> Entry | None: ...


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

@runtime_checkable
class ILookup(Protocol):
    """Anything that classifies a user-agent string."""

    def lookup(self, user_agent: str) -> Capabilities: ...


# ---------------------------------------------------------------------------
# Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
