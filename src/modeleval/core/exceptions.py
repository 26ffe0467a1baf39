"""Custom exception hierarchy for modeleval.

Never use bare except clauses. Always catch specific exceptions.
"""
from __future__ import annotations

from typing import Any


class ModelEvalError(Exception):
    """Base exception for all modeleval errors."""


# Input validation
class ColumnNotFoundError(ModelEvalError, KeyError):
    """A referenced column does not exist in the input table."""

    def __init__(self, column: str, available: list[str] | None = None) -> None:
        available_str = ", ".join(available) if available else "none"
        super().__init__(f"Column '{column}' not found. Available: {available_str}")
        self.column = column
        self.available = available or []

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class InvalidThresholdError(ModelEvalError, ValueError):
    """Threshold is neither a number in [0, 1] nor a known criterion name."""

    def __init__(self, threshold: Any, criteria: list[str] | None = None) -> None:
        criteria_str = ", ".join(criteria) if criteria else "none"
        super().__init__(
            f"Invalid threshold {threshold!r}: expected a number in [0, 1] "
            f"or one of: {criteria_str}"
        )
        self.threshold = threshold


class InvalidLabelError(ModelEvalError, ValueError):
    """Label column cannot be coerced to boolean."""


# Computation
class EmptyDataError(ModelEvalError):
    """No usable rows remain after dropping missing values."""


class GroupComputationError(ModelEvalError):
    """A per-group computation failed; the whole grouped call is aborted."""

    def __init__(self, message: str, group: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.group = group or {}


# I/O
class UnsupportedFormatError(ModelEvalError):
    """Unsupported input file format."""

    def __init__(self, format: str, supported: list[str] | None = None) -> None:  # noqa: A002
        supported_str = ", ".join(supported) if supported else "unknown"
        super().__init__(f"Unsupported format '{format}'. Supported: {supported_str}")
        self.format = format
        self.supported = supported or []
