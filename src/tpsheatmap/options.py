"""Heatmap options.

HeatmapOptions holds every knob of the pipeline: slice count, cell geometry,
calendar rules and the reduction. It serializes to a JSON-friendly dict so
it can be persisted by ``tpsheatmap.heatmap_config``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Union

from tpsheatmap.core.aggregate import check_day_width
from tpsheatmap.core.layout import WeekIndexMode
from tpsheatmap.core.reducers import DEFAULT_PERCENT, REDUCERS, Reducer
from tpsheatmap.errors import InvalidConfigurationError
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HeatmapOptions:
    """Configuration for one heatmap.

    ``day_width_columns`` is both the number of slices per day and the pixel
    width of a day cell (one pixel column per slice).
    """
    day_width_columns: int = 250
    day_height: int = 50
    padding: int = 10
    spacing: int = 4
    sample_height: int = 20            # height of the gradient legend strip
    week_starts_monday: bool = True    # False: weeks (and column 0) start on Sunday
    break_on_month_change: bool = True
    suppress_break_on_week_start: bool = False  # skip the month break when the month starts in column 0
    week_index_mode: WeekIndexMode = WeekIndexMode.EXACT
    reduction: Union[str, Reducer] = "percentile"
    percentile: float = DEFAULT_PERCENT
    debug: bool = False                # draw week/month numbers and cell outlines
    comment: str = ""

    def validate(self) -> "HeatmapOptions":
        """Check every field and return a validated copy; ``self`` is left untouched.

        The copy has ``week_index_mode`` as a WeekIndexMode member.

        Raises:
            InvalidConfigurationError: On an out-of-range or unknown value.
        """
        day_width = check_day_width(self.day_width_columns)
        if self.day_height <= 0:
            raise InvalidConfigurationError(f"day_height must be > 0, got {self.day_height}")
        for name in ("padding", "spacing", "sample_height"):
            if getattr(self, name) < 0:
                raise InvalidConfigurationError(f"{name} must be >= 0, got {getattr(self, name)}")
        if not callable(self.reduction) and str(self.reduction).lower() not in REDUCERS:
            raise InvalidConfigurationError(
                f"Unknown reduction {self.reduction!r}, expected one of {sorted(REDUCERS)} or a callable"
            )
        if not 0.0 <= float(self.percentile) <= 100.0:
            raise InvalidConfigurationError(f"percentile must be within [0, 100], got {self.percentile}")
        try:
            mode = WeekIndexMode(self.week_index_mode)
        except ValueError as e:
            raise InvalidConfigurationError(str(e)) from e
        return replace(self, day_width_columns=day_width, week_index_mode=mode)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict.

        Raises:
            ValueError: If ``reduction`` is a callable (only names persist).
        """
        if callable(self.reduction):
            raise ValueError("HeatmapOptions with a custom reducer cannot be serialized")
        return {
            "day_width_columns": self.day_width_columns,
            "day_height": self.day_height,
            "padding": self.padding,
            "spacing": self.spacing,
            "sample_height": self.sample_height,
            "week_starts_monday": self.week_starts_monday,
            "break_on_month_change": self.break_on_month_change,
            "suppress_break_on_week_start": self.suppress_break_on_week_start,
            "week_index_mode": WeekIndexMode(self.week_index_mode).value,
            "reduction": self.reduction,
            "percentile": self.percentile,
            "debug": self.debug,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HeatmapOptions":
        """Tolerant loader: unknown keys are ignored with a warning, missing keys use defaults."""
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Unknown key '{key}' in heatmap options, ignoring")

        d = cls()
        return cls(
            day_width_columns=int(data.get("day_width_columns", d.day_width_columns)),
            day_height=int(data.get("day_height", d.day_height)),
            padding=int(data.get("padding", d.padding)),
            spacing=int(data.get("spacing", d.spacing)),
            sample_height=int(data.get("sample_height", d.sample_height)),
            week_starts_monday=bool(data.get("week_starts_monday", d.week_starts_monday)),
            break_on_month_change=bool(data.get("break_on_month_change", d.break_on_month_change)),
            suppress_break_on_week_start=bool(
                data.get("suppress_break_on_week_start", d.suppress_break_on_week_start)
            ),
            week_index_mode=WeekIndexMode(data.get("week_index_mode", d.week_index_mode.value)),
            reduction=str(data.get("reduction", d.reduction)),
            percentile=float(data.get("percentile", d.percentile)),
            debug=bool(data.get("debug", d.debug)),
            comment=str(data.get("comment", d.comment)),
        )
