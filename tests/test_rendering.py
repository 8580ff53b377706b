"""Tests for display rendering helpers."""

import jax.numpy as jnp
import numpy as np
import pytest
from PIL import Image
from chipjax import display_to_rgb, create_color_scheme, save_frame


@pytest.fixture
def display():
    """Blank display with pixel (x=1, y=2) lit."""
    return jnp.zeros((64, 32), dtype=jnp.bool_).at[1, 2].set(True)


def test_unscaled_layout(display):
    frame = display_to_rgb(display, scale=1)

    assert frame.shape == (32, 64, 3)
    assert frame.dtype == np.uint8
    assert tuple(frame[2, 1]) == (0, 255, 0)
    assert tuple(frame[1, 2]) == (0, 0, 0)


def test_scaled(display):
    frame = display_to_rgb(display, scale=4, on_color=(10, 20, 30), off_color=(1, 2, 3))

    assert frame.shape == (128, 256, 3)
    assert (frame[8:12, 4:8] == (10, 20, 30)).all()
    assert tuple(frame[0, 0]) == (1, 2, 3)
    assert tuple(frame[12, 4]) == (1, 2, 3)


def test_invalid_scale(display):
    with pytest.raises(ValueError):
        display_to_rgb(display, scale=0)


@pytest.mark.parametrize("scheme", ["chipjax", "classic", "amber", "white", "blue", "retro"])
def test_color_schemes(scheme):
    on_color, off_color = create_color_scheme(scheme)

    assert len(on_color) == 3
    assert len(off_color) == 3
    assert on_color != off_color


def test_unknown_color_scheme():
    with pytest.raises(ValueError, match="Unknown color scheme"):
        create_color_scheme("sepia")


def test_save_frame(display, tmp_path):
    path = tmp_path / "frame.png"

    save_frame(display, str(path), scale=2, color_scheme="white")

    with Image.open(path) as image:
        assert image.size == (128, 64)
        assert image.getpixel((2, 4)) == (255, 255, 255)
        assert image.getpixel((0, 0)) == (0, 0, 0)
