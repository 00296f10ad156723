"""Lookup engine: builds the index once and answers lookup(user_agent) calls."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence

from uacaps.core.config import DatasetConfig
from uacaps.core.exceptions import InvalidInputError
from uacaps.core.types import PropertyValue
from uacaps.dataset.loader import DatasetSource, load_dataset_with_schema
from uacaps.engine.resolver import CapabilityResolver, EntryTable
from uacaps.models.capabilities import Capabilities
from uacaps.models.entry import Entry
from uacaps.patterns.compiler import compile_all
from uacaps.patterns.index import IndexStats, PatternIndex

logger = logging.getLogger(__name__)

# Device_Type values (lower-cased) that count as mobile / tablet.
MOBILE_DEVICE_TYPES = frozenset({
    "mobile phone",
    "mobile device",
    "tablet",
    "ebook reader",
    "phablet",
    "smartphone",
    "feature phone",
})
TABLET_DEVICE_TYPES = frozenset({"tablet"})


class LookupEngine:
    """Read-only classifier over a fully built pattern index.

    Construct with ``initialize`` (from a dataset file) or ``from_entries``.
    Both run the whole build and validation before returning, so an engine
    instance is always complete. ``lookup`` only reads shared state and is
    safe to call from many threads at once.
    """

    def __init__(
        self,
        entries: EntryTable,
        index: PatternIndex,
        resolver: CapabilityResolver,
        *,
        device_type_column: str = "Device_Type",
    ) -> None:
        self._entries = entries
        self._index = index
        self._resolver = resolver
        self._device_type_column = device_type_column

    @classmethod
    def initialize(cls, source: DatasetSource, config: DatasetConfig | None = None) -> LookupEngine:
        """Load, compile, index and validate a dataset.

        Raises:
            DatasetError: any build-phase failure (malformed file, invalid
                pattern, missing default pattern, broken inheritance).
        """
        config = config or DatasetConfig()
        started = time.perf_counter()
        schema, entries = load_dataset_with_schema(
            source,
            delimiter=config.delimiter,
            skip_rows=config.skip_rows,
            encoding=config.encoding,
        )
        engine = cls.from_entries(entries, schema.property_names, config=config)
        logger.info(
            "Lookup engine ready: %d entries in %.2fs",
            len(engine), time.perf_counter() - started,
        )
        return engine

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Entry],
        property_names: Sequence[str] | None = None,
        *,
        config: DatasetConfig | None = None,
    ) -> LookupEngine:
        """Build an engine from already loaded entries.

        Entries are renumbered by position so that earlier entries win ties.
        When ``property_names`` is omitted, the names declared by the entries
        are used in order of first appearance.
        """
        config = config or DatasetConfig()
        ordered = [
            entry if entry.ordinal == slot else entry.model_copy(update={"ordinal": slot})
            for slot, entry in enumerate(entries)
        ]
        if property_names is None:
            property_names = _declared_names(ordered)

        table = EntryTable(ordered)
        index = PatternIndex.build(compile_all(table))
        resolver = CapabilityResolver(
            table,
            property_names,
            unknown=config.unknown_marker,
            max_depth=config.max_inheritance_depth,
        )
        resolver.validate_all(table)
        return cls(table, index, resolver, device_type_column=config.device_type_column)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def property_names(self) -> tuple[str, ...]:
        return self._resolver.property_names

    def stats(self) -> IndexStats:
        return self._index.stats()

    def match(self, user_agent: str) -> Entry:
        """The dataset entry that best describes ``user_agent``.

        Raises:
            InvalidInputError: ``user_agent`` is empty or blank.
        """
        if not isinstance(user_agent, str) or not user_agent.strip():
            raise InvalidInputError("User agent must be a non-empty string")
        compiled = self._index.query(user_agent) or self._index.default
        return self._entries[compiled.slot]

    def lookup(self, user_agent: str) -> Capabilities:
        """Resolve the capabilities of ``user_agent``.

        Raises:
            InvalidInputError: ``user_agent`` is empty or blank.
        """
        entry = self.match(user_agent)
        properties = self._resolver.resolve(entry)
        device_type = _device_type(properties.get(self._device_type_column))
        return Capabilities(
            user_agent=user_agent,
            matched_pattern=entry.pattern,
            properties=properties,
            is_mobile=device_type in MOBILE_DEVICE_TYPES,
            is_tablet=device_type in TABLET_DEVICE_TYPES,
        )


def _declared_names(entries: Iterable[Entry]) -> list[str]:
    names: dict[str, None] = {}
    for entry in entries:
        for name in entry.properties:
            names.setdefault(name, None)
    return list(names)


def _device_type(value: PropertyValue | None) -> str:
    return value.strip().lower() if isinstance(value, str) else ""
