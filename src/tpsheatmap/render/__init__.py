"""Pillow/matplotlib rendering of heatmap grids."""

from tpsheatmap.render.drawer import DrawStyle, draw_heatmap, render_heatmap
from tpsheatmap.render.fonts import load_font, measure_labels
from tpsheatmap.render.gradient import Gradient

__all__ = [
    "DrawStyle",
    "Gradient",
    "draw_heatmap",
    "load_font",
    "measure_labels",
    "render_heatmap",
]
