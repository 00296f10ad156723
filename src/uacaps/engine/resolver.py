"""Capability resolver: walks an entry's parent chain and merges properties.

Parent links are pattern strings, not object references. ``EntryTable`` keeps
the entries in an arena (a tuple ordered like the source file) plus a
``pattern -> slot`` dict, and the resolver walks ancestry through repeated
lookups in that dict.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from uacaps.core.exceptions import BrokenInheritanceError, MalformedDatasetError
from uacaps.core.protocols import IParentLookup
from uacaps.core.types import PropertyMap, PropertyValue
from uacaps.models.entry import Entry

DEFAULT_UNKNOWN = "unknown"
DEFAULT_MAX_DEPTH = 16


class EntryTable:
    """Entry arena with a pattern -> slot index. Implements IParentLookup."""

    def __init__(self, entries: Iterable[Entry]) -> None:
        self._entries = tuple(entries)
        self._slots: dict[str, int] = {}
        for slot, entry in enumerate(self._entries):
            if entry.pattern in self._slots:
                raise MalformedDatasetError(f"Duplicate pattern {entry.pattern!r}", entry.line_number or None)
            self._slots[entry.pattern] = slot

    def get(self, pattern: str) -> Entry | None:
        slot = self._slots.get(pattern)
        return None if slot is None else self._entries[slot]

    def __getitem__(self, slot: int) -> Entry:
        return self._entries[slot]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)


class CapabilityResolver:
    """Merges properties along an inheritance chain into a fixed-schema dict.

    The most specific entry wins; an ancestor only fills properties that no
    more specific entry declared. Every name in ``property_names`` is present
    in the output, with ``unknown`` where nothing in the chain declares it.
    """

    def __init__(
        self,
        lookup: IParentLookup,
        property_names: Sequence[str],
        *,
        unknown: PropertyValue = DEFAULT_UNKNOWN,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._lookup = lookup
        self._property_names = tuple(property_names)
        self._unknown = unknown
        self._max_depth = max_depth

    @property
    def property_names(self) -> tuple[str, ...]:
        return self._property_names

    def ancestry(self, entry: Entry) -> list[Entry]:
        """The chain from ``entry`` up to its root, most specific first.

        Raises:
            BrokenInheritanceError: dangling parent, cycle, or chain deeper
                than ``max_depth`` parent hops.
        """
        chain = [entry]
        seen = {entry.pattern}
        current = entry
        while current.parent is not None:
            if len(chain) > self._max_depth:
                raise BrokenInheritanceError(
                    entry.pattern, entry.parent,
                    f"inheritance chain deeper than {self._max_depth} levels",
                )
            parent = self._lookup.get(current.parent)
            if parent is None:
                raise BrokenInheritanceError(
                    current.pattern, current.parent, "parent pattern not found",
                )
            if parent.pattern in seen:
                raise BrokenInheritanceError(
                    current.pattern, current.parent, "inheritance cycle",
                )
            seen.add(parent.pattern)
            chain.append(parent)
            current = parent
        return chain

    def resolve(self, entry: Entry) -> PropertyMap:
        """Resolved property values for ``entry``, one per property name."""
        merged: PropertyMap = {}
        for node in self.ancestry(entry):
            for name, value in node.properties.items():
                if name not in merged:
                    merged[name] = value
        return {name: merged.get(name, self._unknown) for name in self._property_names}

    def validate_all(self, entries: Iterable[Entry]) -> None:
        """Check every entry's chain once, sharing work between common ancestors.

        Raises:
            BrokenInheritanceError: on the first dangling, cyclic or too deep chain.
        """
        depths: dict[str, int] = {}  # pattern -> parent hops to its root
        for entry in entries:
            path: list[Entry] = []
            on_path: set[str] = set()
            current: Entry | None = entry
            depth = -1
            while current is not None:
                known = depths.get(current.pattern)
                if known is not None:
                    depth = known
                    break
                if current.pattern in on_path:
                    raise BrokenInheritanceError(
                        current.pattern, current.parent, "inheritance cycle",
                    )
                path.append(current)
                on_path.add(current.pattern)
                if current.parent is None:
                    break
                parent = self._lookup.get(current.parent)
                if parent is None:
                    raise BrokenInheritanceError(
                        current.pattern, current.parent, "parent pattern not found",
                    )
                current = parent

            for node in reversed(path):
                depth += 1
                if depth > self._max_depth:
                    raise BrokenInheritanceError(
                        node.pattern, node.parent,
                        f"inheritance chain deeper than {self._max_depth} levels",
                    )
                depths[node.pattern] = depth
