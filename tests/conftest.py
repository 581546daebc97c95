"""
Shared fixtures for crackscan tests.
"""

import numpy as np
import pytest

from crackscan.models.pixel_buffer import PixelBuffer


def solid_pixels(width, height, rgba):
    """Flat RGBA bytes of a single-colour image."""
    return bytes(rgba) * (width * height)


def stripe_image(width, height, columns, bright=255, dark=0):
    """Opaque image with the given columns bright and everything else dark."""
    data = np.full((height, width, 4), dark, dtype=np.uint8)
    data[:, :, 3] = 255
    for col in columns:
        data[:, col, :3] = bright
    return PixelBuffer.from_array(data)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_buffer(rng):
    def _make(width, height):
        return PixelBuffer.from_array(rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8))
    return _make
