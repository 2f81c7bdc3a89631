"""Tests for Pillow rendering of heatmap grids."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tpsheatmap.options import HeatmapOptions
from tpsheatmap.pipeline import build_heatmap
from tpsheatmap.render import DrawStyle, draw_heatmap, load_font, measure_labels, render_heatmap
from tpsheatmap.render.gradient import color_to_rgb255


@pytest.fixture
def samples():
    """Hourly samples over three days, value cycling 1..20."""
    start = datetime(2024, 2, 27, tzinfo=timezone.utc)
    ts = [start + timedelta(hours=i) for i in range(72)]
    values = [float(i % 20 + 1) for i in range(72)]
    return ts, values


@pytest.fixture
def options():
    return HeatmapOptions(day_width_columns=24, day_height=40, padding=5, spacing=2, sample_height=6)


def test_measure_labels_positive():
    m = measure_labels(load_font())
    assert m.month_width > 0
    assert m.month_height > 0
    assert m.digit_height > 0


def test_image_matches_geometry(samples, options):
    ts, values = samples
    font = load_font()
    grid = build_heatmap(ts, values, options, metrics=measure_labels(font))
    image = draw_heatmap(grid, font=font)

    geom = grid.layout.geometry
    assert image.size == (geom.width, geom.height)
    assert image.mode == "RGB"


def test_day_strip_and_legend_pixels(samples, options):
    ts, values = samples
    font = load_font()
    grid = build_heatmap(ts, values, options, metrics=measure_labels(font))
    style = DrawStyle()
    image = draw_heatmap(grid, style=style, font=font)
    geom = grid.layout.geometry

    cell, day = next(iter(grid))
    x, y = geom.cell_origin(cell)
    last = geom.cell_width - 1
    expected = tuple(int(c) for c in style.gradient.rgb(day.values)[last])
    assert image.getpixel((x + last, y + geom.cell_height - 1)) == expected

    left, top, _, _ = geom.sample_strip_box()
    assert image.getpixel((left, top)) == color_to_rgb255("darkred")
    assert image.getpixel((0, 0)) == color_to_rgb255(style.background)


def test_debug_mode_draws_outline(samples, options):
    ts, values = samples
    opts = HeatmapOptions(**{**options.to_dict(), "debug": True})
    grid = build_heatmap(ts, values, opts)
    image = draw_heatmap(grid)
    cell, _ = next(iter(grid))
    x, y = grid.layout.geometry.cell_origin(cell)
    assert image.getpixel((x + grid.layout.geometry.cell_width - 1, y + 20)) == (255, 255, 255)


def test_render_heatmap_one_call(samples, options):
    ts, values = samples
    image = render_heatmap(ts, values, options)
    assert image.size[0] > 7 * options.day_width_columns
