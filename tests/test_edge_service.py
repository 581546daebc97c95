"""
Unit tests for Sobel edge detection.
"""

import numpy as np
import pytest

from crackscan.models.pixel_buffer import PixelBuffer
from crackscan.services.edge_service import (
    SOBEL_X,
    SOBEL_Y,
    SobelEdgeDetector,
    gradient_magnitude,
    to_edge_map,
)
from crackscan.services.grayscale_service import to_grayscale

from conftest import solid_pixels, stripe_image


def reference_magnitude(gray):
    """Straightforward per-pixel Sobel used to cross-check the vectorised version."""
    luma = gray.red.astype(np.int64)
    h, w = luma.shape
    out = np.zeros((h, w), dtype=np.float64)
    for y in range(1, h - 1):
        for x in range(1, w - 1):
            gx = gy = 0
            for ky in range(3):
                for kx in range(3):
                    pixel = luma[y + ky - 1, x + kx - 1]
                    gx += SOBEL_X[ky, kx] * pixel
                    gy += SOBEL_Y[ky, kx] * pixel
            out[y, x] = np.sqrt(float(gx * gx + gy * gy))
    return out


class TestSobelEdgeDetector:
    """Test cases for SobelEdgeDetector."""

    def setup_method(self):
        """Set up test fixtures."""
        self.detector = SobelEdgeDetector(workers=1)

    def test_uniform_image_has_no_gradient(self):
        """Test that a solid image yields an all-zero map."""
        gray = to_grayscale(PixelBuffer.from_raw(solid_pixels(6, 4, (90, 30, 200, 255)), 6, 4))
        assert not self.detector.gradient_magnitude(gray).any()

    def test_vertical_step_response(self):
        """Test gx response across a dark/bright vertical step."""
        gray = to_grayscale(stripe_image(5, 5, columns=[2, 3, 4]))
        mag = self.detector.gradient_magnitude(gray)
        # left column of neighbourhood dark, right bright: gx = 4 * 255
        assert mag[2, 2] == pytest.approx(1020.0)
        assert mag[2, 1] == pytest.approx(1020.0)
        assert mag[2, 3] == 0.0

    def test_border_ring_is_zero(self, random_buffer):
        """Test that the outermost ring is never convolved."""
        mag = self.detector.gradient_magnitude(to_grayscale(random_buffer(9, 7)))
        assert not mag[0, :].any()
        assert not mag[-1, :].any()
        assert not mag[:, 0].any()
        assert not mag[:, -1].any()

    def test_matches_reference(self, random_buffer):
        """Test vectorised convolution against a per-pixel loop."""
        gray = to_grayscale(random_buffer(12, 9))
        assert np.array_equal(self.detector.gradient_magnitude(gray), reference_magnitude(gray))

    @pytest.mark.parametrize("width,height", [(1, 1), (2, 2), (2, 10), (10, 2), (1, 5)])
    def test_degenerate_sizes(self, width, height, random_buffer):
        """Test that images without interior pixels give a zero map of the right shape."""
        mag = self.detector.gradient_magnitude(to_grayscale(random_buffer(width, height)))
        assert mag.shape == (height, width)
        assert not mag.any()

    @pytest.mark.parametrize("workers,band_rows", [(4, 5), (3, 1), (2, 100)])
    def test_parallel_bands_match_serial(self, workers, band_rows, random_buffer):
        """Test that row-band parallelism is bit-identical to the serial path."""
        gray = to_grayscale(random_buffer(40, 37))
        serial = self.detector.gradient_magnitude(gray)
        parallel = SobelEdgeDetector(workers=workers, band_rows=band_rows).gradient_magnitude(gray)
        assert np.array_equal(serial, parallel)

    def test_row_bands_cover_interior(self):
        """Test that bands cover rows 1..h-2 exactly once."""
        detector = SobelEdgeDetector(workers=2, band_rows=4)
        bands = detector._row_bands(12)
        rows = [r for start, stop in bands for r in range(start, stop)]
        assert rows == list(range(1, 11))

    def test_module_shortcut(self, random_buffer):
        """Test the module-level gradient_magnitude helper."""
        gray = to_grayscale(random_buffer(6, 6))
        assert np.array_equal(gradient_magnitude(gray), reference_magnitude(gray))


class TestEdgeMap:
    """Test cases for 8-bit quantisation of the magnitude map."""

    def test_clamp_and_truncate(self):
        """Test clamping to [0, 255] with truncation."""
        mag = np.array([[0.0, 100.9, 255.0, 1020.0]])
        assert to_edge_map(mag).tolist() == [[0, 100, 255, 255]]
        assert to_edge_map(mag).dtype == np.uint8
