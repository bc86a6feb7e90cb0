"""Tests for framebuffer rendering utilities."""

import jax.numpy as jnp
import numpy as np
import pytest
from PIL import Image

from chipjax import framebuffer_to_rgb, create_color_scheme, save_screenshot, create_video, PIXEL_ON
from chipjax.rendering import framebuffer_to_pixels


@pytest.fixture
def framebuffer():
    # Top-left and bottom-right pixels lit
    return jnp.zeros(64 * 32, dtype=jnp.uint32).at[0].set(PIXEL_ON).at[64 * 32 - 1].set(PIXEL_ON)


def test_framebuffer_to_pixels(framebuffer):
    pixels = framebuffer_to_pixels(framebuffer)
    assert pixels.shape == (32, 64)
    assert pixels[0, 0] and pixels[31, 63]
    assert pixels.sum() == 2


def test_framebuffer_to_pixels_rejects_2d():
    with pytest.raises(ValueError):
        framebuffer_to_pixels(jnp.zeros((32, 64), dtype=jnp.uint32))


def test_framebuffer_to_rgb(framebuffer):
    rgb = framebuffer_to_rgb(framebuffer, scale=2, on_color=(1, 2, 3), off_color=(9, 9, 9))
    assert rgb.shape == (64, 128, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 0]) == (1, 2, 3)
    assert tuple(rgb[1, 1]) == (1, 2, 3)
    assert tuple(rgb[0, 2]) == (9, 9, 9)


def test_framebuffer_to_rgb_unscaled(framebuffer):
    assert framebuffer_to_rgb(framebuffer, scale=1).shape == (32, 64, 3)


def test_color_schemes():
    assert create_color_scheme() == ((0, 255, 0), (0, 0, 0))
    for name in ("amber", "white", "blue", "retro", "plum"):
        on_color, off_color = create_color_scheme(name)
        assert len(on_color) == 3 and len(off_color) == 3


def test_unknown_color_scheme():
    with pytest.raises(ValueError, match="Unknown color scheme"):
        create_color_scheme("sepia")


def test_save_screenshot(framebuffer, tmp_path):
    path = tmp_path / "shot.png"
    save_screenshot(framebuffer, str(path), scale=3, color_scheme="white")
    with Image.open(path) as image:
        assert image.size == (64 * 3, 32 * 3)
        assert image.getpixel((0, 0)) == (255, 255, 255)
        assert image.getpixel((10, 10)) == (0, 0, 0)


def test_create_video_without_output_is_noop(framebuffer):
    assert create_video([framebuffer]) is None


def test_create_video_requires_frames(tmp_path):
    with pytest.raises(ValueError):
        create_video([], filename=str(tmp_path / "out.mp4"))
