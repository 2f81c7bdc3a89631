"""Unit tests for the scalar -> colour gradient."""

import numpy as np
import pytest

from tpsheatmap.render.gradient import Gradient, color_to_rgb255


def test_zero_is_empty_color():
    g = Gradient()
    assert tuple(g.rgb([0.0])[0]) == (0x33, 0x33, 0x33)


def test_domain_ends_and_clamping():
    g = Gradient()
    green = color_to_rgb255("green")
    darkred = color_to_rgb255("darkred")
    assert tuple(g.rgb([20.0])[0]) == green
    assert tuple(g.rgb([500.0])[0]) == green
    assert tuple(g.rgb([-5.0])[0]) == darkred


def test_rgb_shape_and_dtype():
    out = Gradient().rgb(np.linspace(0, 20, 5))
    assert out.shape == (5, 3)
    assert out.dtype == np.uint8


def test_sample_starts_at_low_end_without_empty_marker():
    strip = Gradient().sample(10)
    assert strip.shape == (10, 3)
    assert tuple(strip[0]) == color_to_rgb255("darkred")


def test_empty_color_can_be_disabled():
    g = Gradient(empty_color=None)
    assert tuple(g.rgb([0.0])[0]) == color_to_rgb255("darkred")


def test_invalid_domain_raises():
    with pytest.raises(ValueError):
        Gradient(domain=(5.0, 5.0))
