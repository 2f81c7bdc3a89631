"""Font loading and label measurement with Pillow."""

from __future__ import annotations

import calendar
from pathlib import Path
from typing import Optional, Union

from PIL import ImageFont

from tpsheatmap.core.layout import LabelMetrics

DIGITS = "1234567890"

FontType = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]


def load_font(path: Optional[Union[str, Path]] = None, size: int = 12) -> FontType:
    """TrueType font from ``path``, or Pillow's built-in default font."""
    if path is None:
        return ImageFont.load_default()
    return ImageFont.truetype(str(path), size)


def _text_size(font: FontType, text: str) -> tuple[int, int]:
    left, top, right, bottom = font.getbbox(text)
    return right - left, bottom - top


def measure_labels(font: Optional[FontType] = None) -> LabelMetrics:
    """Widest/tallest month name and the digit height for ``font``."""
    if font is None:
        font = load_font()
    month_w = month_h = 0
    for m in range(1, 13):
        w, h = _text_size(font, calendar.month_name[m])
        month_w = max(month_w, w)
        month_h = max(month_h, h)
    _, digit_h = _text_size(font, DIGITS)
    return LabelMetrics(month_width=month_w, month_height=month_h, digit_height=digit_h)
