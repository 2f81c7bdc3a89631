"""Unit tests for day partitioning."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import numpy as np
import pytest

from tpsheatmap.core.partition import (
    NS_PER_DAY,
    NS_PER_SECOND,
    days_spanned,
    partition_days,
    prepare_samples,
    to_utc_nanoseconds,
    truncate_to_day,
)
from tpsheatmap.errors import EmptyInputError, LengthMismatchError, UnsortedInputError


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_bucket_per_calendar_day_including_gaps():
    """Days without samples between first and last sample still get a bucket."""
    ts = [utc(2024, 1, 1, 10), utc(2024, 1, 4, 5)]
    buckets = partition_days(ts, [1.0, 2.0])

    assert [b.day for b in buckets] == [
        date(2024, 1, 1),
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 4),
    ]
    assert [len(b) for b in buckets] == [1, 0, 0, 1]
    assert days_spanned(buckets) == 4


def test_every_sample_lands_in_exactly_one_bucket():
    """Concatenating the buckets gives back the input series."""
    rng = np.random.default_rng(0)
    start = int(utc(2023, 12, 28, 7).timestamp())
    seconds = np.sort(rng.integers(start, start + 10 * 86400, size=5000))
    values = rng.random(5000) * 20

    buckets = partition_days(seconds, values)

    first = truncate_to_day(seconds[0] * NS_PER_SECOND)
    last = truncate_to_day(seconds[-1] * NS_PER_SECOND)
    assert len(buckets) == (last - first) // NS_PER_DAY + 1
    assert sum(len(b) for b in buckets) == 5000
    np.testing.assert_array_equal(np.concatenate([b.values for b in buckets]), values)
    for b in buckets:
        if len(b):
            assert b.timestamps[0] >= b.start_ns
            assert b.timestamps[-1] < b.start_ns + NS_PER_DAY


def test_sample_at_midnight_belongs_to_the_day_it_starts():
    """Buckets are half-open [midnight, next midnight)."""
    ts = [utc(2024, 1, 1, 12), utc(2024, 1, 2, 0, 0, 0)]
    buckets = partition_days(ts, [1.0, 2.0])

    assert len(buckets) == 2
    assert list(buckets[0].values) == [1.0]
    assert list(buckets[1].values) == [2.0]


def test_single_sample_gives_single_bucket():
    buckets = partition_days([utc(2024, 5, 17, 23, 59, 59)], [7.0])
    assert len(buckets) == 1
    assert buckets[0].start == utc(2024, 5, 17)


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        partition_days([], [])


def test_length_mismatch_raises():
    with pytest.raises(LengthMismatchError) as exc_info:
        partition_days([utc(2024, 1, 1)], [1.0, 2.0])
    assert "not the same length" in str(exc_info.value)


def test_length_mismatch_is_reported_before_empty():
    """Empty timestamps with values is a mismatch, not an empty input."""
    with pytest.raises(LengthMismatchError):
        partition_days([], [1.0])


def test_unsorted_timestamps_raise():
    with pytest.raises(UnsortedInputError):
        partition_days([utc(2024, 1, 2), utc(2024, 1, 1)], [1.0, 2.0])


def test_caller_data_is_not_mutated_and_buckets_are_read_only():
    ts = [utc(2024, 1, 1, h) for h in range(3)]
    values = [3.0, 1.0, 2.0]
    buckets = partition_days(ts, values)

    assert values == [3.0, 1.0, 2.0]
    assert not buckets[0].values.flags.writeable
    with pytest.raises(ValueError):
        buckets[0].values[0] = 99.0


def test_naive_datetimes_are_utc():
    aware = to_utc_nanoseconds([utc(2024, 1, 1, 12)])
    naive = to_utc_nanoseconds([datetime(2024, 1, 1, 12)])
    np.testing.assert_array_equal(aware, naive)


def test_offset_datetimes_are_converted_to_utc():
    """23:30 at UTC+2 is 21:30 UTC on the same day."""
    tz = timezone(timedelta(hours=2))
    buckets = partition_days([datetime(2024, 1, 1, 23, 30, tzinfo=tz)], [1.0])
    assert buckets[0].day == date(2024, 1, 1)


def test_datetime64_and_unix_seconds_agree():
    dt64 = np.array(["2024-01-01T00:00:01", "2024-01-02T10:00:00"], dtype="datetime64[s]")
    seconds = dt64.astype(np.int64)
    np.testing.assert_array_equal(to_utc_nanoseconds(dt64), to_utc_nanoseconds(seconds))
    np.testing.assert_array_equal(to_utc_nanoseconds(seconds), seconds * NS_PER_SECOND)


def test_prepare_samples_returns_typed_copies():
    seconds = np.array([10, 20], dtype=np.int64)
    ts_ns, vals = prepare_samples(seconds, [1, 2])
    assert ts_ns.dtype == np.int64
    assert vals.dtype == np.float64
    ts_ns[0] = 0
    assert seconds[0] == 10


def test_truncate_to_day():
    ts = int(utc(2024, 2, 29, 13, 45, 10).timestamp()) * NS_PER_SECOND
    assert truncate_to_day(ts) == int(utc(2024, 2, 29).timestamp()) * NS_PER_SECOND
