"""Dataset loader: parses the delimited pattern dataset into Entry records.

The file is a CSV-style table. The first row after any skipped preamble is the
header; it must name a ``Pattern`` column (browscap exports call it
``PropertyName``) and a ``Parent`` column. Every other column is a capability
property. Empty cells are left out of an entry's properties so they inherit
from the parent chain; ``true``/``false`` cells become booleans. ``Pattern``
and ``Parent`` cells are trimmed alike, so parent references match patterns
regardless of surrounding whitespace.
"""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, Union

from uacaps.core.exceptions import MalformedDatasetError
from uacaps.core.types import PropertyValue
from uacaps.models.entry import DatasetSchema, Entry

logger = logging.getLogger(__name__)

PATTERN_COLUMNS = ("Pattern", "PropertyName")
PARENT_COLUMN = "Parent"

DatasetSource = Union[str, os.PathLike, IO[str], Iterable[str]]


def load_dataset(
    source: DatasetSource,
    *,
    delimiter: str = ",",
    skip_rows: int = 0,
    encoding: str = "utf-8-sig",
) -> list[Entry]:
    """Load entries in file order. See load_dataset_with_schema."""
    _, entries = load_dataset_with_schema(
        source, delimiter=delimiter, skip_rows=skip_rows, encoding=encoding,
    )
    return entries


def load_dataset_with_schema(
    source: DatasetSource,
    *,
    delimiter: str = ",",
    skip_rows: int = 0,
    encoding: str = "utf-8-sig",
) -> tuple[DatasetSchema, list[Entry]]:
    """Load the dataset and its column layout.

    Args:
        source: Path to the dataset file, or an open text stream / iterable of lines.
        delimiter: Field delimiter.
        skip_rows: Number of preamble lines to skip before the header.
        encoding: File encoding when ``source`` is a path. The default
            ``utf-8-sig`` drops a leading byte-order mark wherever the file
            starts, preamble or header.

    Returns:
        Tuple of (schema, entries) with entries in file order.

    Raises:
        MalformedDatasetError: unreadable file, bad header, ragged row,
            empty or duplicate pattern.
    """
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            with path.open(newline="", encoding=encoding) as fh:
                schema, entries = _parse(fh, delimiter, skip_rows)
        except (OSError, UnicodeDecodeError) as exc:
            raise MalformedDatasetError(f"Cannot read dataset {str(path)!r}: {exc}") from exc
        origin = str(path)
    else:
        schema, entries = _parse(source, delimiter, skip_rows)
        origin = "<stream>"

    logger.info(
        "Loaded %d entries with %d property columns from %s",
        len(entries), len(schema.property_names), origin,
    )
    return schema, entries


def _parse(
    lines: Iterable[str], delimiter: str, skip_rows: int,
) -> tuple[DatasetSchema, list[Entry]]:
    reader = csv.reader(lines, delimiter=delimiter)
    try:
        for _ in range(skip_rows):
            next(reader, None)
        header = _read_header(reader)
        schema, pattern_idx, parent_idx, property_idx = _resolve_columns(header, reader.line_num)
        entries = list(_read_entries(reader, len(header), pattern_idx, parent_idx, property_idx))
    except csv.Error as exc:
        raise MalformedDatasetError(f"CSV parse error: {exc}", reader.line_num) from exc
    return schema, entries


def _read_header(reader: Iterator[list[str]]) -> list[str]:
    for row in reader:
        if row:
            return [name.strip() for name in row]
    raise MalformedDatasetError("Dataset is empty: no header row")


def _resolve_columns(
    header: list[str], line_number: int,
) -> tuple[DatasetSchema, int, int, list[tuple[str, int]]]:
    seen: set[str] = set()
    for name in header:
        if not name:
            raise MalformedDatasetError("Header contains a blank column name", line_number)
        if name in seen:
            raise MalformedDatasetError(f"Duplicate column {name!r} in header", line_number)
        seen.add(name)

    pattern_column = next((c for c in PATTERN_COLUMNS if c in seen), None)
    missing = []
    if pattern_column is None:
        missing.append(PATTERN_COLUMNS[0])
    if PARENT_COLUMN not in seen:
        missing.append(PARENT_COLUMN)
    if missing:
        raise MalformedDatasetError(
            f"Header is missing required column(s): {', '.join(missing)}", line_number,
        )

    pattern_idx = header.index(pattern_column)
    parent_idx = header.index(PARENT_COLUMN)
    property_idx = [
        (name, i) for i, name in enumerate(header) if i not in (pattern_idx, parent_idx)
    ]
    schema = DatasetSchema(
        pattern_column=pattern_column,
        parent_column=PARENT_COLUMN,
        property_names=tuple(name for name, _ in property_idx),
    )
    return schema, pattern_idx, parent_idx, property_idx


def _read_entries(
    reader: Iterator[list[str]],
    width: int,
    pattern_idx: int,
    parent_idx: int,
    property_idx: list[tuple[str, int]],
) -> Iterator[Entry]:
    first_seen: dict[str, int] = {}
    ordinal = 0
    previous_line = reader.line_num  # type: ignore[attr-defined]
    for row in reader:
        line_number = previous_line + 1
        previous_line = reader.line_num  # type: ignore[attr-defined]
        if not row:
            continue
        if len(row) != width:
            raise MalformedDatasetError(
                f"Expected {width} columns, found {len(row)}", line_number,
            )

        pattern = row[pattern_idx].strip()
        if pattern == "":
            raise MalformedDatasetError("Empty Pattern", line_number)
        if pattern in first_seen:
            raise MalformedDatasetError(
                f"Duplicate pattern {pattern!r} (first declared on line {first_seen[pattern]})",
                line_number,
            )
        first_seen[pattern] = line_number

        yield Entry(
            pattern=pattern,
            parent=row[parent_idx].strip() or None,
            properties={
                name: _convert(row[i]) for name, i in property_idx if row[i].strip()
            },
            ordinal=ordinal,
            line_number=line_number,
        )
        ordinal += 1


def _convert(cell: str) -> PropertyValue:
    value = cell.strip()
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value
