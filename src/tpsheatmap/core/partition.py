"""
Day partitioning: split an ordered sample series into UTC calendar days.

Assumptions (documented):
  1. Ordering: samples arrive non-decreasing by timestamp. The partitioner
     does not sort; out-of-order input raises UnsortedInputError.
  2. Boundaries: a day bucket covers the half-open window
     [midnight, midnight + 24h). A sample exactly at midnight belongs to the
     day that starts there, so every sample lands in exactly one bucket.
  3. Gaps: every calendar day between the first and the last sample gets a
     bucket, including days without samples.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Sequence

import numpy as np
import pandas as pd

from tpsheatmap.errors import EmptyInputError, LengthMismatchError, UnsortedInputError
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)

NS_PER_SECOND = 1_000_000_000
NS_PER_DAY = 24 * 60 * 60 * NS_PER_SECOND


def to_utc_nanoseconds(timestamps: Any) -> np.ndarray:
    """Convert timestamps to an int64 array of UTC nanoseconds.

    Accepts datetime objects (naive ones are taken as UTC), pandas
    Timestamps, numpy datetime64 arrays, or numbers (unix seconds).
    The result never aliases the caller's data.
    """
    if isinstance(timestamps, np.ndarray) and timestamps.dtype.kind == "M":
        return timestamps.astype("datetime64[ns]").astype(np.int64)

    raw = np.asarray(timestamps)
    if raw.dtype.kind in "iuf":
        index = pd.to_datetime(raw, unit="s", utc=True)
    else:
        index = pd.to_datetime(raw, utc=True)
    return np.array(pd.DatetimeIndex(index).as_unit("ns").asi8, dtype=np.int64)


def prepare_samples(timestamps: Any, values: Any) -> tuple[np.ndarray, np.ndarray]:
    """Validate a (timestamps, values) pair and normalize it.

    Returns:
        (timestamps_ns, values) as int64 / float64 arrays.

    Raises:
        LengthMismatchError: If the two sequences differ in length.
        EmptyInputError: If there are no samples.
        UnsortedInputError: If timestamps decrease anywhere.
    """
    n_ts = len(timestamps)
    n_vals = len(values)
    if n_ts != n_vals:
        raise LengthMismatchError(n_ts, n_vals)
    if n_ts == 0:
        raise EmptyInputError("Nothing to draw: no samples given")

    ts_ns = to_utc_nanoseconds(timestamps)
    vals = np.array(values, dtype=np.float64)

    if ts_ns.size > 1 and bool(np.any(np.diff(ts_ns) < 0)):
        raise UnsortedInputError("timestamps must be non-decreasing")
    return ts_ns, vals


def truncate_to_day(ts_ns: int) -> int:
    """Midnight UTC (in ns) of the day containing ts_ns."""
    ts_ns = int(ts_ns)
    return ts_ns - ts_ns % NS_PER_DAY


def ns_to_date(ts_ns: int) -> date:
    """UTC calendar date of a nanosecond timestamp."""
    return datetime.fromtimestamp(int(ts_ns) // NS_PER_SECOND, tz=timezone.utc).date()


@dataclass(frozen=True)
class DayBucket:
    """All samples of one UTC calendar day.

    ``timestamps`` and ``values`` are read-only views into the prepared
    sample arrays; an empty day holds zero-length arrays.
    """

    start_ns: int
    timestamps: np.ndarray
    values: np.ndarray

    @property
    def day(self) -> date:
        return ns_to_date(self.start_ns)

    @property
    def start(self) -> datetime:
        return datetime.fromtimestamp(self.start_ns // NS_PER_SECOND, tz=timezone.utc)

    def __len__(self) -> int:
        return int(self.timestamps.size)


def _readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


def partition_days(timestamps: Any, values: Any) -> list[DayBucket]:
    """Split samples into consecutive UTC day buckets.

    Produces one bucket for every day from the first sample's day through the
    last sample's day, inclusive. Bucket edges are located with
    ``np.searchsorted`` over the sorted timestamps, which walks forward
    through the series once per day boundary and never rewinds.

    Args:
        timestamps: Non-decreasing timestamps (see ``to_utc_nanoseconds``).
        values: One value per timestamp.

    Returns:
        List of DayBucket in chronological order.
    """
    ts_ns, vals = prepare_samples(timestamps, values)

    first_day = truncate_to_day(ts_ns[0])
    last_day = truncate_to_day(ts_ns[-1])
    n_days = (last_day - first_day) // NS_PER_DAY + 1

    edges = first_day + np.arange(n_days + 1, dtype=np.int64) * NS_PER_DAY
    cuts = np.searchsorted(ts_ns, edges, side="left")

    ts_ro = _readonly(ts_ns)
    vals_ro = _readonly(vals)
    buckets = [
        DayBucket(
            start_ns=int(edges[i]),
            timestamps=ts_ro[cuts[i]:cuts[i + 1]],
            values=vals_ro[cuts[i]:cuts[i + 1]],
        )
        for i in range(n_days)
    ]
    logger.debug(f"Partitioned {ts_ns.size} samples into {n_days} days")
    return buckets


def days_spanned(buckets: Sequence[DayBucket]) -> int:
    """Number of calendar days covered by a bucket list."""
    if not buckets:
        return 0
    return (buckets[-1].start_ns - buckets[0].start_ns) // NS_PER_DAY + 1
