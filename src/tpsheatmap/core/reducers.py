"""Reduction functions that collapse one slice of samples into a scalar.

A reducer takes a 1D float array (possibly empty, always read-only) and
returns a float. It must be deterministic and defined on the empty array.
"""

from __future__ import annotations

import math
from typing import Callable, Union

import numpy as np

from tpsheatmap.errors import InvalidConfigurationError

Reducer = Callable[[np.ndarray], float]

DEFAULT_PERCENT = 1.0


def average(values: np.ndarray) -> float:
    """Arithmetic mean, 0.0 for an empty slice."""
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return 0.0
    return float(values.mean())


def percentile(values: np.ndarray, percent: float = DEFAULT_PERCENT) -> float:
    """Nearest-rank percentile without interpolation.

    rank = ceil(percent / 100 * n), clamped to [1, n]. With the default 1st
    percentile and fewer than 100 samples the rank is 1, i.e. the minimum.
    Empty slices reduce to 0.0, single samples to themselves.
    """
    values = np.asarray(values, dtype=np.float64)
    n = values.size
    if n == 0:
        return 0.0
    if n == 1:
        return float(values[0])
    # round() absorbs float noise such as 7.000000000000001
    rank = math.ceil(round(percent * n / 100.0, 9))
    rank = min(max(rank, 1), n)
    return float(np.partition(values, rank - 1)[rank - 1])


def percentile_reducer(percent: float = DEFAULT_PERCENT) -> Reducer:
    """Bind ``percent`` into a one-argument reducer."""
    if not 0.0 <= percent <= 100.0:
        raise InvalidConfigurationError(f"percentile must be within [0, 100], got {percent}")

    def _reduce(values: np.ndarray) -> float:
        return percentile(values, percent)

    _reduce.__name__ = f"percentile_{percent:g}"
    return _reduce


REDUCERS: dict[str, Callable[..., Reducer]] = {
    "average": lambda percent=DEFAULT_PERCENT: average,
    "percentile": percentile_reducer,
}


def resolve_reducer(
    reduction: Union[str, Reducer],
    *,
    percent: float = DEFAULT_PERCENT,
) -> Reducer:
    """Turn a reducer name ("average", "percentile") or callable into a Reducer."""
    if callable(reduction):
        return reduction
    factory = REDUCERS.get(str(reduction).lower())
    if factory is None:
        raise InvalidConfigurationError(
            f"Unknown reduction {reduction!r}, expected one of {sorted(REDUCERS)} or a callable"
        )
    return factory(percent=percent)


def validate_reducer(reducer: Reducer) -> float:
    """Check that ``reducer`` is defined on the empty collection.

    Returns:
        The reducer's value for an empty slice.

    Raises:
        InvalidConfigurationError: If the reducer raises or returns a
            non-finite value for an empty slice.
    """
    empty = np.empty(0, dtype=np.float64)
    empty.flags.writeable = False
    try:
        result = float(reducer(empty))
    except Exception as e:
        raise InvalidConfigurationError(
            f"Reducer {getattr(reducer, '__name__', reducer)!r} is not defined for an empty slice: {e}"
        ) from e
    if not math.isfinite(result):
        raise InvalidConfigurationError(
            f"Reducer {getattr(reducer, '__name__', reducer)!r} returned {result} for an empty slice"
        )
    return result
