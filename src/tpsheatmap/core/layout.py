"""
Calendar layout: place aggregated days on a week-row / weekday-column grid.

Rules, applied in one chronological pass:
  1. Column = weekday, remapped so the configured week start is column 0.
  2. A new row starts whenever the week index changes.
  3. With month breaks enabled, a new row also starts when the calendar month
     changes, unless break suppression is on and the month's first day falls
     in column 0 (the week break already started a fresh row).

The pass yields the cell assignments, the month label anchors and the row
count; the pixel geometry is derived from the row count afterwards, so image
sizing and drawing consume the same assignments.

Known limitation of WeekIndexMode.ISO_APPROX: ``isoWeek + round(isoYear *
52.1429)`` only approximates a monotone week counter across year boundaries.
It is kept for layouts that must match the historical rendering; EXACT counts
whole weeks from the proleptic Gregorian epoch instead.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence, Union

from tpsheatmap.errors import EmptyInputError, LengthMismatchError, UnsortedInputError
from tpsheatmap.utils.logging import get_logger

if TYPE_CHECKING:
    from tpsheatmap.core.aggregate import AggregatedDay
    from tpsheatmap.options import HeatmapOptions

logger = get_logger(__name__)

DAYS_PER_WEEK = 7
ISO_WEEKS_PER_YEAR = 52.1429
DAY_LABEL_OFFSET = 4  # px from the cell's left edge to the day number


class WeekIndexMode(str, Enum):
    """How consecutive days are grouped into week rows."""
    EXACT = "exact"            # sequential weeks counted from the configured week start
    ISO_APPROX = "iso_approx"  # isoWeek + round(isoYear * 52.1429), shifted a day for Sunday starts


def iso_week_index(d: date) -> int:
    """Heuristic absolute week index: isoWeek + round(isoYear * 52.1429)."""
    iso_year, iso_week, _ = d.isocalendar()
    # half-up rounding; all inputs are positive
    return iso_week + int(math.floor(iso_year * ISO_WEEKS_PER_YEAR + 0.5))


def exact_week_index(d: date, week_starts_monday: bool = True) -> int:
    """Number of whole weeks since 0001-01-01, split on the configured week start.

    date(1, 1, 1) has ordinal 1 and is a Monday.
    """
    offset = 0 if week_starts_monday else 1
    return (d.toordinal() - 1 + offset) // DAYS_PER_WEEK


def weekday_column(d: date, week_starts_monday: bool = True) -> int:
    """Grid column 0-6 of ``d``; column 0 is the configured week start."""
    wd = d.weekday()  # Monday == 0
    if week_starts_monday:
        return wd
    return (wd + 1) % DAYS_PER_WEEK


def week_index(d: date, mode: Union[WeekIndexMode, str], week_starts_monday: bool = True) -> int:
    """Row key of ``d``; it changes when a new week starts on column 0."""
    if WeekIndexMode(mode) is WeekIndexMode.ISO_APPROX:
        if not week_starts_monday:
            # ISO weeks start on Monday; shifting by a day makes them start on Sunday
            d = d + timedelta(days=1)
        return iso_week_index(d)
    return exact_week_index(d, week_starts_monday)


@dataclass(frozen=True)
class LabelMetrics:
    """Pixel sizes of the labels, measured by the renderer's font."""
    month_width: float = 0.0   # widest month name
    month_height: float = 0.0  # tallest month name
    digit_height: float = 0.0  # height of "1234567890"


@dataclass(frozen=True)
class GridCell:
    """Position of one day: ``day_index`` refers into the aggregated day list."""
    row: int
    column: int
    day_index: int
    week_index: int


@dataclass(frozen=True)
class MonthLabel:
    row: int
    month: int
    year: int

    @property
    def name(self) -> str:
        return calendar.month_name[self.month]


@dataclass(frozen=True)
class LayoutGeometry:
    """Pixel geometry of the whole image, derived from the row count.

    All coordinates are integer pixels with the origin at the top left.
    """
    width: int
    height: int
    cell_width: int
    cell_height: int
    padding: int
    spacing: int
    sample_height: int
    grid_x: int
    grid_y: int
    month_label_width: int
    month_label_height: int
    digit_height: int

    @classmethod
    def compute(
        cls,
        row_count: int,
        *,
        cell_width: int,
        cell_height: int,
        padding: int,
        spacing: int,
        sample_height: int,
        metrics: Optional[LabelMetrics] = None,
    ) -> "LayoutGeometry":
        m = metrics or LabelMetrics()
        month_w = int(math.ceil(m.month_width))
        month_h = int(math.ceil(m.month_height))
        digit_h = int(math.ceil(m.digit_height))

        width = (
            padding * 2 + month_w + spacing * 2 + 1
            + DAYS_PER_WEEK * cell_width + (DAYS_PER_WEEK - 1) * spacing
        )
        height = (
            padding * 4 + (cell_height + spacing) * row_count
            + sample_height + month_h * 2
        )
        return cls(
            width=width,
            height=height,
            cell_width=cell_width,
            cell_height=cell_height,
            padding=padding,
            spacing=spacing,
            sample_height=sample_height,
            grid_x=month_w + padding,
            grid_y=padding,
            month_label_width=month_w,
            month_label_height=month_h,
            digit_height=digit_h,
        )

    @property
    def row_pitch(self) -> int:
        return self.cell_height + self.spacing

    @property
    def column_pitch(self) -> int:
        return self.cell_width + self.spacing

    def cell_origin(self, cell: GridCell) -> tuple[int, int]:
        """Top-left pixel of a day cell."""
        return (
            self.grid_x + cell.column * self.column_pitch,
            self.grid_y + cell.row * self.row_pitch,
        )

    def day_label_origin(self, cell: GridCell) -> tuple[int, int]:
        """Baseline-left pixel of the day-of-month number."""
        x, y = self.cell_origin(cell)
        return x + DAY_LABEL_OFFSET, y + self.digit_height + 1

    def month_label_origin(self, row: int) -> tuple[int, int]:
        """Baseline-left pixel of a month name shown beside ``row``."""
        return self.padding, row * self.row_pitch + self.month_label_height * 2

    def sample_strip_box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) of the gradient legend strip, right/bottom exclusive."""
        bottom = self.height - self.padding * 2 - self.month_label_height * 2
        return self.padding, bottom - self.sample_height, self.width - self.padding, bottom

    def comment_origin(self) -> tuple[int, int]:
        """Baseline-left pixel of the comment line."""
        return self.padding, self.height - self.padding


@dataclass
class CalendarLayout:
    cells: list[GridCell]
    month_labels: list[MonthLabel]
    row_count: int
    geometry: LayoutGeometry
    days: list[date] = field(default_factory=list)

    def rows(self) -> dict[int, list[GridCell]]:
        """Cells grouped by row, in order."""
        out: dict[int, list[GridCell]] = {}
        for cell in self.cells:
            out.setdefault(cell.row, []).append(cell)
        return out


def assign_cells(
    days: Sequence[date],
    *,
    week_starts_monday: bool = True,
    break_on_month_change: bool = True,
    suppress_break_on_week_start: bool = False,
    week_index_mode: Union[WeekIndexMode, str] = WeekIndexMode.EXACT,
) -> tuple[list[GridCell], list[MonthLabel], int]:
    """Assign each day a (row, column) in one pass.

    Returns:
        (cells, month_labels, row_count)

    Raises:
        EmptyInputError: If ``days`` is empty.
        UnsortedInputError: If ``days`` is not strictly increasing.
    """
    if not days:
        raise EmptyInputError("Nothing to lay out: no days given")

    first = days[0]
    prev_day = first
    prev_week = week_index(first, week_index_mode, week_starts_monday)
    prev_month = (first.year, first.month)
    row = 0

    cells: list[GridCell] = []
    labels = [MonthLabel(row=0, month=first.month, year=first.year)]

    for i, d in enumerate(days):
        if i > 0 and d <= prev_day:
            raise UnsortedInputError(f"days must be strictly increasing ({d} after {prev_day})")
        prev_day = d

        column = weekday_column(d, week_starts_monday)
        wk = week_index(d, week_index_mode, week_starts_monday)
        if wk != prev_week:
            prev_week = wk
            row += 1

        if (d.year, d.month) != prev_month:
            prev_month = (d.year, d.month)
            if break_on_month_change and not (suppress_break_on_week_start and column == 0):
                row += 1
            labels.append(MonthLabel(row=row, month=d.month, year=d.year))

        cells.append(GridCell(row=row, column=column, day_index=i, week_index=wk))

    return cells, labels, row + 1


def compute_layout(
    days: Sequence["AggregatedDay"],
    options: "HeatmapOptions",
    metrics: Optional[LabelMetrics] = None,
) -> CalendarLayout:
    """Lay out aggregated days and size the image.

    Raises:
        EmptyInputError: If ``days`` is empty.
        LengthMismatchError: If a day's value strip is not
            ``options.day_width_columns`` long.
    """
    if not days:
        raise EmptyInputError("Nothing to draw: no days given")
    for d in days:
        if len(d) != options.day_width_columns:
            raise LengthMismatchError(
                options.day_width_columns, len(d), what=f"day width and values of {d.day}"
            )

    dates = [d.day for d in days]
    cells, labels, row_count = assign_cells(
        dates,
        week_starts_monday=options.week_starts_monday,
        break_on_month_change=options.break_on_month_change,
        suppress_break_on_week_start=options.suppress_break_on_week_start,
        week_index_mode=options.week_index_mode,
    )
    geometry = LayoutGeometry.compute(
        row_count,
        cell_width=options.day_width_columns,
        cell_height=options.day_height,
        padding=options.padding,
        spacing=options.spacing,
        sample_height=options.sample_height,
        metrics=metrics,
    )
    logger.debug(f"Laid out {len(cells)} days on {row_count} rows ({geometry.width}x{geometry.height} px)")
    return CalendarLayout(
        cells=cells,
        month_labels=labels,
        row_count=row_count,
        geometry=geometry,
        days=dates,
    )
