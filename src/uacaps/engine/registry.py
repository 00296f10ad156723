"""Process-wide engine, installed once by an explicit init_engine() call.

There is no lazy initialization: get_engine() fails until init_engine() has
run, and init_engine() refuses to run twice.
"""

from __future__ import annotations

import threading

from uacaps.core.config import DatasetConfig
from uacaps.core.exceptions import EngineAlreadyInitializedError, EngineNotInitializedError
from uacaps.dataset.loader import DatasetSource
from uacaps.engine.lookup import LookupEngine

_engine: LookupEngine | None = None
_init_lock = threading.Lock()


def init_engine(source: DatasetSource, config: DatasetConfig | None = None) -> LookupEngine:
    """Build the process engine from ``source`` and install it.

    Raises:
        EngineAlreadyInitializedError: an engine is already installed.
        DatasetError: the dataset failed to build; nothing is installed.
    """
    global _engine
    with _init_lock:
        if _engine is not None:
            raise EngineAlreadyInitializedError("Process engine is already initialized")
        _engine = LookupEngine.initialize(source, config)
        return _engine


def get_engine() -> LookupEngine:
    if _engine is None:
        raise EngineNotInitializedError("init_engine() has not been called")
    return _engine


def is_initialized() -> bool:
    return _engine is not None
