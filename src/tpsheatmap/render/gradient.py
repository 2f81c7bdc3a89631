"""Map slice scalars to RGB colours with a matplotlib colormap.

Default: darkred -> gold -> green over [0, 20], with an exact 0 (an empty
slice) drawn in a neutral grey.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from matplotlib.colors import LinearSegmentedColormap, to_rgb

DEFAULT_COLORS = ("darkred", "gold", "green")
DEFAULT_DOMAIN = (0.0, 20.0)
EMPTY_COLOR = "#333333"


def color_to_rgb255(color: str) -> tuple[int, int, int]:
    """A matplotlib colour (name or hex) as an 8-bit RGB tuple."""
    r, g, b = to_rgb(color)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


class Gradient:
    """Scalar to RGB mapping over a fixed domain; values outside are clamped."""

    def __init__(
        self,
        colors: Sequence[str] = DEFAULT_COLORS,
        domain: tuple[float, float] = DEFAULT_DOMAIN,
        empty_color: str | None = EMPTY_COLOR,
    ) -> None:
        lo, hi = float(domain[0]), float(domain[1])
        if hi <= lo:
            raise ValueError(f"Gradient domain must be increasing, got {domain}")
        self.domain = (lo, hi)
        self.colors = tuple(colors)
        self.empty_color = empty_color
        self._cmap = LinearSegmentedColormap.from_list("tpsheatmap", list(self.colors))

    def rgb(self, values, *, mark_empty: bool = True) -> np.ndarray:
        """Colour ``values``; returns a uint8 array of shape values.shape + (3,)."""
        arr = np.asarray(values, dtype=np.float64)
        lo, hi = self.domain
        norm = np.clip((arr - lo) / (hi - lo), 0.0, 1.0)
        rgba = self._cmap(norm)
        rgb = np.round(rgba[..., :3] * 255).astype(np.uint8)
        if mark_empty and self.empty_color is not None:
            rgb[arr == 0] = color_to_rgb255(self.empty_color)
        return rgb

    def sample(self, n: int) -> np.ndarray:
        """``n`` evenly spaced colours across the domain, for the legend strip."""
        lo, hi = self.domain
        return self.rgb(np.linspace(lo, hi, n, endpoint=False), mark_empty=False)
