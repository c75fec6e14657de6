"""Exception hierarchy for PatternShift."""

from __future__ import annotations


class PatternShiftError(Exception):
    """Base class for all PatternShift errors."""


class ConfigError(PatternShiftError):
    """Raised when patternshift.toml holds an invalid value."""


class RetrievalError(PatternShiftError):
    """Raised when the search backend is unavailable or returns malformed data."""


class GenerationError(PatternShiftError):
    """Raised when the text-generation backend fails to produce a completion."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BackupError(PatternShiftError):
    """Raised when a backup cannot be created. Fatal for a live run."""


class RestoreError(PatternShiftError):
    """Raised internally when a backup cannot be restored."""
