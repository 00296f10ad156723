"""uacaps: user-agent capability lookup over a wildcard pattern dataset."""

from __future__ import annotations

from uacaps.core.exceptions import (
    BrokenInheritanceError,
    DatasetError,
    InvalidInputError,
    InvalidPatternError,
    MalformedDatasetError,
    MissingDefaultPatternError,
    UACapsError,
)
from uacaps.engine.lookup import LookupEngine
from uacaps.engine.registry import get_engine, init_engine
from uacaps.models.capabilities import Capabilities
from uacaps.models.entry import Entry

__version__ = "0.1.0"

__all__ = [
    "BrokenInheritanceError",
    "Capabilities",
    "DatasetError",
    "Entry",
    "InvalidInputError",
    "InvalidPatternError",
    "LookupEngine",
    "MalformedDatasetError",
    "MissingDefaultPatternError",
    "UACapsError",
    "get_engine",
    "init_engine",
]
