"""
tpsheatmap: calendar heatmaps of irregular per-second time series.

This package provides:
- partition_days / aggregate_days / compute_layout: the core bucketing,
  slice reduction and calendar layout stages
- build_heatmap: all three stages in one call
- render_heatmap / draw_heatmap: Pillow rendering of a built grid
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from tpsheatmap.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from tpsheatmap.utils.logging import configure_logging, get_logger

from tpsheatmap.core.aggregate import AggregatedDay, aggregate_day, aggregate_days
from tpsheatmap.core.layout import (
    CalendarLayout,
    GridCell,
    LabelMetrics,
    LayoutGeometry,
    WeekIndexMode,
    compute_layout,
)
from tpsheatmap.core.partition import DayBucket, partition_days
from tpsheatmap.core.reducers import average, percentile, resolve_reducer
from tpsheatmap.errors import (
    EmptyInputError,
    HeatmapError,
    InvalidConfigurationError,
    LengthMismatchError,
    UnsortedInputError,
)
from tpsheatmap.options import HeatmapOptions
from tpsheatmap.pipeline import HeatmapGrid, build_heatmap

# NullHandler so logs don't reach the root logger unless an application
# (or the tpsheatmap CLI) calls configure_logging().
_logger = logging.getLogger("tpsheatmap")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "AggregatedDay",
    "CalendarLayout",
    "DayBucket",
    "EmptyInputError",
    "GridCell",
    "HeatmapError",
    "HeatmapGrid",
    "HeatmapOptions",
    "InvalidConfigurationError",
    "LabelMetrics",
    "LayoutGeometry",
    "LengthMismatchError",
    "UnsortedInputError",
    "WeekIndexMode",
    "aggregate_day",
    "aggregate_days",
    "average",
    "build_heatmap",
    "compute_layout",
    "configure_logging",
    "get_logger",
    "partition_days",
    "percentile",
    "resolve_reducer",
]

__version__ = "0.1.0"
