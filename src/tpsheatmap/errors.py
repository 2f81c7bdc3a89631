"""Exceptions raised by tpsheatmap.

All of them are precondition failures detected before any work starts;
the pipeline either returns a complete grid or raises.
"""

from __future__ import annotations


class HeatmapError(ValueError):
    """Base class for tpsheatmap input and configuration errors."""


class EmptyInputError(HeatmapError):
    """No samples were given, or no days reached the layout engine."""


class LengthMismatchError(HeatmapError):
    """Two sequences that must pair up (timestamps and values, slots and slice values) differ in length."""

    def __init__(self, expected: int, actual: int, *, what: str = "timestamps and values") -> None:
        super().__init__(f"{what} are not the same length ({expected} != {actual})")
        self.expected = expected
        self.actual = actual


class InvalidConfigurationError(HeatmapError):
    """An option is out of range or a reducer is unusable."""


class UnsortedInputError(HeatmapError):
    """Timestamps (or days handed to the layout engine) go backwards in time."""
