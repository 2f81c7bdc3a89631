"""Paint a HeatmapGrid into a Pillow image.

Day strips and the legend strip are written into a numpy RGB canvas (one
pixel column per slice); labels are drawn on top with ImageDraw.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np
from PIL import Image, ImageDraw

from tpsheatmap.options import HeatmapOptions
from tpsheatmap.pipeline import HeatmapGrid, build_heatmap
from tpsheatmap.render.fonts import FontType, load_font, measure_labels
from tpsheatmap.render.gradient import Gradient, color_to_rgb255
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DrawStyle:
    background: str = "#181818"
    font_color: str = "white"
    debug_outline: str = "white"
    gradient: Gradient = field(default_factory=Gradient)


def _text_at_baseline(draw: ImageDraw.ImageDraw, xy: tuple[int, int], text: str, font: FontType, fill: Any) -> None:
    # bitmap fonts do not support anchors, so shift by the text height instead
    x, y = xy
    _, top, _, bottom = font.getbbox(text)
    draw.text((x, y - (bottom - top)), text, font=font, fill=fill)


def draw_heatmap(
    grid: HeatmapGrid,
    *,
    style: Optional[DrawStyle] = None,
    font: Optional[FontType] = None,
) -> Image.Image:
    """Render ``grid`` as an RGB image sized by its layout geometry."""
    style = style or DrawStyle()
    font = font if font is not None else load_font()
    geom = grid.layout.geometry
    gradient = style.gradient

    canvas = np.empty((geom.height, geom.width, 3), dtype=np.uint8)
    canvas[:, :] = color_to_rgb255(style.background)

    left, top, right, bottom = geom.sample_strip_box()
    if right > left and bottom > top:
        canvas[top:bottom, left:right] = gradient.sample(right - left)[np.newaxis, :, :]

    for cell, day in grid:
        x, y = geom.cell_origin(cell)
        canvas[y:y + geom.cell_height, x:x + geom.cell_width] = gradient.rgb(day.values)[np.newaxis, :, :]

    image = Image.fromarray(canvas)
    draw = ImageDraw.Draw(image)
    fg = style.font_color

    if grid.options.comment:
        _text_at_baseline(draw, geom.comment_origin(), grid.options.comment, font, fg)

    for label in grid.layout.month_labels:
        _text_at_baseline(draw, geom.month_label_origin(label.row), label.name, font, fg)

    for cell, day in grid:
        d = day.day
        lx, ly = geom.day_label_origin(cell)
        _text_at_baseline(draw, (lx, ly), str(d.day), font, fg)
        if grid.options.debug:
            step = geom.digit_height + 3
            _text_at_baseline(draw, (lx, ly + step), str(cell.week_index), font, fg)
            _text_at_baseline(draw, (lx, ly + 2 * step), str(d.month), font, fg)
            x, y = geom.cell_origin(cell)
            draw.rectangle(
                [x, y, x + geom.cell_width - 1, y + geom.cell_height - 1],
                outline=style.debug_outline,
            )

    logger.debug(f"Drew {len(grid)} days into a {geom.width}x{geom.height} image")
    return image


def render_heatmap(
    timestamps: Any,
    values: Any,
    options: Optional[HeatmapOptions] = None,
    *,
    style: Optional[DrawStyle] = None,
    font: Optional[FontType] = None,
) -> Image.Image:
    """Measure labels, build the grid and draw it in one call."""
    font = font if font is not None else load_font()
    grid = build_heatmap(timestamps, values, options, metrics=measure_labels(font))
    logger.info("Drawing...")
    return draw_heatmap(grid, style=style, font=font)
