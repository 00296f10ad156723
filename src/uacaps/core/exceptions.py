"""uacaps exception hierarchy."""

from __future__ import annotations


class UACapsError(Exception):
    """Base exception for all uacaps errors."""


class DatasetError(UACapsError):
    """Build-phase failure. Fatal to engine construction."""


class MalformedDatasetError(DatasetError):
    """Structural problem in the dataset file (header, row shape, empty pattern)."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class InvalidPatternError(DatasetError):
    """A pattern entry cannot be compiled."""

    def __init__(self, pattern: str, message: str = "pattern is empty") -> None:
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {message}")


class MissingDefaultPatternError(DatasetError):
    """Dataset has no universal '*' fallback entry."""


class BrokenInheritanceError(DatasetError):
    """Dangling, cyclic or overly deep parent reference."""

    def __init__(self, pattern: str, parent: str | None, message: str) -> None:
        self.pattern = pattern
        self.parent = parent
        super().__init__(f"Broken inheritance at {pattern!r} (parent={parent!r}): {message}")


class InvalidInputError(UACapsError):
    """Lookup called with an empty or blank user-agent string."""


class EngineNotInitializedError(UACapsError):
    """The process-wide engine was requested before init_engine() ran."""


class EngineAlreadyInitializedError(UACapsError):
    """init_engine() was called a second time."""


class CacheError(UACapsError):
    """Lookup cache backend operation failed."""
