"""Конвейер анализа трещин: серое → Собель → порог → показатели.

Принципы:
- Чистая функция: никакого глобального изменяемого состояния, один проход на вызов.
- Предусловия проверяются до вычислений (`InvalidInputError`), частичных результатов нет.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

from crackscan.models.analysis_model import AnalysisResult, Metrics
from crackscan.models.errors import InvalidInputError
from crackscan.models.pixel_buffer import PixelBuffer, RawPixels
from crackscan.services.crack_service import CrackClassifier
from crackscan.services.edge_service import SobelEdgeDetector, to_edge_map
from crackscan.services.grayscale_service import GrayscaleConverter

logger = logging.getLogger(__name__)


class AnalysisService:
    """Оркестрация трёх этапов над одним изображением."""

    def __init__(
        self,
        converter: Optional[GrayscaleConverter] = None,
        detector: Optional[SobelEdgeDetector] = None,
        classifier: Optional[CrackClassifier] = None,
    ) -> None:
        self.converter = converter or GrayscaleConverter()
        self.detector = detector or SobelEdgeDetector()
        self.classifier = classifier or CrackClassifier()

    def run(self, pixels: RawPixels | PixelBuffer, width: int, height: int) -> AnalysisResult:
        """Выполняет конвейер и возвращает результат с промежуточными буферами.

        Args:
            pixels: Плоский буфер RGBA (bytes, последовательность, numpy) или `PixelBuffer`.
            width: Ширина, px (> 0).
            height: Высота, px (> 0).

        Raises:
            InvalidInputError: при несовпадении размеров и длины буфера.
        """
        try:
            source = self._as_buffer(pixels, width, height)
        except InvalidInputError as exc:
            logger.warning(f"Rejected input: {exc}")
            raise

        started = time.perf_counter()
        gray = self.converter.to_grayscale(source)
        magnitude = self.detector.gradient_magnitude(gray)
        annotated, crack_pixels = self.classifier.annotate(magnitude, gray)
        metrics = self.classifier.build_metrics(crack_pixels, source.width, source.height)

        logger.info(
            f"Analyzed {metrics.dimensions} image: {metrics.crack_percentage_display}% cracks, "
            f"severity={metrics.severity.value} ({(time.perf_counter() - started) * 1000:.1f} ms)"
        )
        return AnalysisResult(
            annotated=annotated,
            metrics=metrics,
            grayscale=gray,
            edge_map=to_edge_map(magnitude),
        )

    def analyze(self, pixels: RawPixels | PixelBuffer, width: int, height: int) -> Tuple[PixelBuffer, Metrics]:
        result = self.run(pixels, width, height)
        return result.annotated, result.metrics

    @staticmethod
    def _as_buffer(pixels: RawPixels | PixelBuffer, width: int, height: int) -> PixelBuffer:
        if isinstance(pixels, PixelBuffer):
            if (pixels.width, pixels.height) != (width, height):
                raise InvalidInputError(
                    f"buffer is {pixels.width}x{pixels.height}, expected {width}x{height}"
                )
            return pixels
        return PixelBuffer.from_raw(pixels, width, height)


def analyze(pixels: RawPixels | PixelBuffer, width: int, height: int) -> Tuple[PixelBuffer, Metrics]:
    """Анализирует изображение: возвращает (размеченный буфер, показатели)."""
    return AnalysisService().analyze(pixels, width, height)
