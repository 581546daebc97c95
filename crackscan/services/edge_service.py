"""Выделение границ оператором Собеля.

Принципы:
- SRP: только модуль градиента и его 8-битное представление; порог в `crack_service`.
- Внешнее кольцо шириной 1 px не сворачивается и сохраняет модуль 0.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Tuple

import numpy as np

from crackscan.config.analysis_config import get_analysis_config
from crackscan.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

SOBEL_X = np.array([
    [-1, 0, 1],
    [-2, 0, 2],
    [-1, 0, 1],
], dtype=np.int64)

SOBEL_Y = np.array([
    [-1, -2, -1],
    [0, 0, 0],
    [1, 2, 1],
], dtype=np.int64)


class SobelEdgeDetector:
    """Модуль градиента по ядрам Собеля, при необходимости по полосам строк в потоках."""

    def __init__(self, workers: Optional[int] = None, band_rows: Optional[int] = None):
        config = get_analysis_config()
        self.workers = max(1, int(workers if workers is not None else config['edge_workers']))
        self.band_rows = max(1, int(band_rows if band_rows is not None else config['edge_band_rows']))

    def gradient_magnitude(self, gray: PixelBuffer) -> np.ndarray:
        """
        Карта модуля sqrt(gx² + gy²) формы (height, width), float64.

        Берётся только красный канал (после перевода в серое каналы равны).
        У изображений уже или ниже 3 px нет внутренних пикселей: карта нулевая.
        """
        height, width = gray.height, gray.width
        magnitude = np.zeros((height, width), dtype=np.float64)
        if width < 3 or height < 3:
            logger.debug(f"No interior pixels in {width}x{height} image, skipping convolution")
            return magnitude

        luma = gray.red.astype(np.int64)
        bands = self._row_bands(height)

        if self.workers > 1 and len(bands) > 1:
            # Каждая полоса пишет только свои строки; чтение перекрывается на строку
            with ThreadPoolExecutor(max_workers=self.workers) as ex:
                futs = {
                    ex.submit(self._convolve_band, luma, start, stop): (start, stop)
                    for start, stop in bands
                }
                for f in as_completed(futs):
                    start, stop = futs[f]
                    magnitude[start:stop, 1:width - 1] = f.result()
        else:
            for start, stop in bands:
                magnitude[start:stop, 1:width - 1] = self._convolve_band(luma, start, stop)

        logger.debug(
            f"Sobel magnitude for {width}x{height}: {len(bands)} band(s), "
            f"workers={self.workers}, max={float(magnitude.max()):.2f}"
        )
        return magnitude

    def _row_bands(self, height: int) -> List[Tuple[int, int]]:
        """Диапазоны внутренних строк [start, stop), покрывающие строки 1..height-2."""
        last = height - 1
        return [
            (start, min(start + self.band_rows, last))
            for start in range(1, last, self.band_rows)
        ]

    def _convolve_band(self, luma: np.ndarray, row_start: int, row_stop: int) -> np.ndarray:
        """
        Корреляция обоих ядер по внутренним строкам [row_start, row_stop).

        Читает строки row_start-1 .. row_stop (ореол в одну строку с каждой стороны).
        Возвращает модуль только для внутренних столбцов, форма (rows, width-2).
        """
        cols = luma.shape[1] - 2
        gx = np.zeros((row_stop - row_start, cols), dtype=np.int64)
        gy = np.zeros_like(gx)
        for ky in range(3):
            rows = slice(row_start + ky - 1, row_stop + ky - 1)
            for kx in range(3):
                window = luma[rows, kx:kx + cols]
                if SOBEL_X[ky, kx]:
                    gx += SOBEL_X[ky, kx] * window
                if SOBEL_Y[ky, kx]:
                    gy += SOBEL_Y[ky, kx] * window
        # Целая сумма точно представима в float64, sqrt округляется корректно
        return np.sqrt((gx * gx + gy * gy).astype(np.float64))


def to_edge_map(magnitude: np.ndarray) -> np.ndarray:
    """
    8-битная карта границ: модуль ограничен [0, 255], дробная часть отбрасывается.
    """
    return np.floor(np.clip(magnitude, 0.0, 255.0)).astype(np.uint8)


def gradient_magnitude(gray: PixelBuffer) -> np.ndarray:
    """Сокращение для `SobelEdgeDetector().gradient_magnitude`."""
    return SobelEdgeDetector().gradient_magnitude(gray)
