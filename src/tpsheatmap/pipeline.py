"""Samples in, positioned heatmap grid out.

``build_heatmap`` runs the three core stages in order:

    samples -> partition_days -> aggregate_days -> compute_layout

All preconditions (lengths, empty input, options, reducer) are checked
before any stage runs, so a call either returns a complete HeatmapGrid or
raises a HeatmapError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from tpsheatmap.core.aggregate import AggregatedDay, aggregate_days
from tpsheatmap.core.layout import CalendarLayout, GridCell, LabelMetrics, compute_layout
from tpsheatmap.core.partition import partition_days
from tpsheatmap.core.reducers import Reducer, resolve_reducer, validate_reducer
from tpsheatmap.options import HeatmapOptions
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HeatmapGrid:
    """Aggregated days plus the layout that places them."""
    days: list[AggregatedDay]
    layout: CalendarLayout
    options: HeatmapOptions
    sample_count: int

    def __iter__(self) -> Iterator[tuple[GridCell, AggregatedDay]]:
        for cell in self.layout.cells:
            yield cell, self.days[cell.day_index]

    def __len__(self) -> int:
        return len(self.days)


def options_reducer(options: HeatmapOptions) -> Reducer:
    """The validated reducer configured by ``options``."""
    reducer = resolve_reducer(options.reduction, percent=options.percentile)
    validate_reducer(reducer)
    return reducer


def build_heatmap(
    timestamps: Any,
    values: Any,
    options: Optional[HeatmapOptions] = None,
    *,
    metrics: Optional[LabelMetrics] = None,
) -> HeatmapGrid:
    """Bucket, aggregate and lay out a sample series.

    Args:
        timestamps: Non-decreasing timestamps (datetimes, datetime64, or unix seconds).
        values: One float per timestamp.
        options: Heatmap options; defaults to ``HeatmapOptions()``.
        metrics: Label sizes reserved in the geometry (from the renderer's font).

    Raises:
        LengthMismatchError, EmptyInputError, UnsortedInputError,
        InvalidConfigurationError.
    """
    options = (options or HeatmapOptions()).validate()
    reducer = options_reducer(options)

    logger.info("Analyzing data...")
    buckets = partition_days(timestamps, values)
    sample_count = sum(len(b) for b in buckets)
    days = aggregate_days(buckets, options.day_width_columns, reducer)
    layout = compute_layout(days, options, metrics)
    logger.info(f"Analyzed {len(days)} days, {sample_count} samples, {layout.row_count} rows")
    return HeatmapGrid(days=days, layout=layout, options=options, sample_count=sample_count)
