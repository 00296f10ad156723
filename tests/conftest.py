"""Shared fixtures: small datasets written to tmp_path and engines built from them."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable

import pytest

from tests.fakes import BASIC_ROWS, HEADER
from uacaps.engine.lookup import LookupEngine


@pytest.fixture
def write_dataset(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (after an optional preamble and the header) to a CSV file."""

    def _write(
        rows: list[list[str]],
        header: list[str] | None = None,
        name: str = "dataset.csv",
        delimiter: str = ",",
        preamble: list[list[str]] | None = None,
    ) -> Path:
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh, delimiter=delimiter)
            for line in preamble or []:
                writer.writerow(line)
            writer.writerow(HEADER if header is None else header)
            writer.writerows(rows)
        return path

    return _write


@pytest.fixture
def basic_dataset(write_dataset) -> Path:
    return write_dataset(BASIC_ROWS)


@pytest.fixture
def basic_engine(basic_dataset: Path) -> LookupEngine:
    return LookupEngine.initialize(basic_dataset)
