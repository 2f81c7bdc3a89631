"""
Slice aggregation: reduce each day bucket to a fixed-length scalar strip.

The day is divided into N slices. Slice edges are computed in integer
nanoseconds as ``day_start + (k * 24h) // N`` for k = 0..N, so the N
half-open windows [edge_k, edge_k+1) tile the day exactly even when 24h is
not divisible by N. Every sample of the bucket therefore reaches exactly
one slice.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional

import numpy as np

from tpsheatmap.core.partition import NS_PER_DAY, NS_PER_SECOND, DayBucket, ns_to_date
from tpsheatmap.core.reducers import Reducer, average, validate_reducer
from tpsheatmap.errors import InvalidConfigurationError
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)

# keeps k * NS_PER_DAY inside int64 for every slice edge
MAX_DAY_WIDTH = 100_000


@dataclass(frozen=True)
class AggregatedDay:
    """One day reduced to ``len(values)`` slice scalars."""

    start_ns: int
    values: np.ndarray

    @property
    def day(self) -> date:
        return ns_to_date(self.start_ns)

    @property
    def start(self) -> datetime:
        return datetime.fromtimestamp(self.start_ns // NS_PER_SECOND, tz=timezone.utc)

    def __len__(self) -> int:
        return int(self.values.size)


def check_day_width(day_width: int) -> int:
    """Validate the slice count; returns it as int."""
    if isinstance(day_width, bool) or not isinstance(day_width, (int, np.integer)):
        raise InvalidConfigurationError(f"day width must be an integer, got {day_width!r}")
    if day_width <= 0:
        raise InvalidConfigurationError(f"day width must be > 0, got {day_width}")
    if day_width > MAX_DAY_WIDTH:
        raise InvalidConfigurationError(f"day width must be <= {MAX_DAY_WIDTH}, got {day_width}")
    return int(day_width)


def slice_edges(start_ns: int, day_width: int) -> np.ndarray:
    """The N + 1 slice boundaries of the day starting at ``start_ns``."""
    k = np.arange(day_width + 1, dtype=np.int64)
    return np.int64(start_ns) + (k * np.int64(NS_PER_DAY)) // np.int64(day_width)


def aggregate_day(
    bucket: DayBucket,
    day_width: int,
    reducer: Reducer = average,
    *,
    empty_value: Optional[float] = None,
) -> AggregatedDay:
    """Reduce one day bucket to ``day_width`` scalars.

    Args:
        bucket: Samples of the day.
        day_width: Number of slices N.
        reducer: Slice reducer; called only for slices holding samples.
        empty_value: Value for empty slices. Defaults to ``reducer`` applied
            to an empty array (validated).

    Returns:
        AggregatedDay whose ``values`` has exactly ``day_width`` entries.
    """
    day_width = check_day_width(day_width)
    if empty_value is None:
        empty_value = validate_reducer(reducer)

    out = np.full(day_width, empty_value, dtype=np.float64)
    if len(bucket) == 0:
        return AggregatedDay(start_ns=bucket.start_ns, values=out)

    edges = slice_edges(bucket.start_ns, day_width)
    cuts = np.searchsorted(bucket.timestamps, edges, side="left")
    # only slices with at least one sample need the reducer
    for s in np.flatnonzero(cuts[1:] > cuts[:-1]):
        out[s] = float(reducer(bucket.values[cuts[s]:cuts[s + 1]]))
    return AggregatedDay(start_ns=bucket.start_ns, values=out)


def aggregate_days(
    buckets: Iterable[DayBucket],
    day_width: int,
    reducer: Reducer = average,
) -> list[AggregatedDay]:
    """Aggregate every bucket. Days are independent of each other."""
    day_width = check_day_width(day_width)
    empty_value = validate_reducer(reducer)
    days = [aggregate_day(b, day_width, reducer, empty_value=empty_value) for b in buckets]
    logger.debug(
        f"Aggregated {len(days)} days into {day_width} slices "
        f"with {getattr(reducer, '__name__', 'reducer')}"
    )
    return days
