"""Перевод буфера RGBA в оттенки серого (яркость BT.601)."""
from __future__ import annotations

import logging

import numpy as np

from crackscan.config.analysis_config import LUMA_SCALE, LUMA_WEIGHTS
from crackscan.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class GrayscaleConverter:
    def luminance(self, pixels: PixelBuffer) -> np.ndarray:
        """
        Яркость каждого пикселя, массив uint8 (height, width).

        L = 0.299·R + 0.587·G + 0.114·B считается в целочисленной фиксированной
        точке: (299·R + 587·G + 114·B) // 1000. Дробная часть отбрасывается
        (усечение), результат ограничен [0, 255]. При R == G == B получается
        ровно то же значение, поэтому преобразование идемпотентно.
        """
        rgb = pixels.data[:, :, :3].astype(np.int32)
        wr, wg, wb = LUMA_WEIGHTS
        weighted = rgb[:, :, 0] * wr + rgb[:, :, 1] * wg + rgb[:, :, 2] * wb
        return np.clip(weighted // LUMA_SCALE, 0, 255).astype(np.uint8)

    def to_grayscale(self, pixels: PixelBuffer) -> PixelBuffer:
        """
        Буфер той же формы, где R = G = B = L; альфа-канал не меняется.
        """
        luma = self.luminance(pixels)
        out = np.empty_like(pixels.data)
        out[:, :, 0] = luma
        out[:, :, 1] = luma
        out[:, :, 2] = luma
        out[:, :, 3] = pixels.alpha
        logger.debug(f"Grayscale conversion done for {pixels.width}x{pixels.height}")
        return PixelBuffer.from_array(out)


def to_grayscale(pixels: PixelBuffer) -> PixelBuffer:
    """Сокращение для `GrayscaleConverter().to_grayscale`."""
    return GrayscaleConverter().to_grayscale(pixels)
