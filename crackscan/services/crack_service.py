"""Классификация пикселей трещин и расчёт показателей.

Принципы:
- SRP: порог, раскраска, агрегирование; свёртка и перевод в серое вынесены в свои сервисы.
- Решение об уровне повреждения принимается по числу, а не по строке отображения.
"""
from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from crackscan.config.analysis_config import (
    CRACK_THRESHOLD,
    CRITICAL_BREAKPOINT,
    MODERATE_BREAKPOINT,
    RECOMMENDATIONS,
)
from crackscan.models.analysis_model import Metrics, Severity
from crackscan.models.pixel_buffer import PixelBuffer
from crackscan.services.edge_service import to_edge_map

logger = logging.getLogger(__name__)

CRACK_COLOR = (255, 0, 0)


def classify_severity(crack_percentage: float) -> Severity:
    """Уровень повреждения по доле трещин (%): <1 Minor, [1, 3) Moderate, ≥3 Critical."""
    if crack_percentage < MODERATE_BREAKPOINT:
        return Severity.MINOR
    if crack_percentage < CRITICAL_BREAKPOINT:
        return Severity.MODERATE
    return Severity.CRITICAL


def recommendation_for(severity: Severity) -> str:
    return RECOMMENDATIONS[severity.value]


class CrackClassifier:
    def __init__(self, threshold: int = CRACK_THRESHOLD) -> None:
        self.threshold = threshold

    def crack_mask(self, magnitude: np.ndarray) -> np.ndarray:
        """
        Булева маска трещин (height, width).

        Сравнивается 8-битное значение градиента (ограничено [0, 255], дробь
        отброшена) со строгим `> threshold`. Граница изображения имеет модуль 0
        и потому никогда не попадает в маску.
        """
        return to_edge_map(magnitude) > self.threshold

    def annotate(self, magnitude: np.ndarray, gray: PixelBuffer) -> Tuple[PixelBuffer, int]:
        """
        Раскрашивает пиксели трещин в чистый красный, остальные берёт из серого буфера.

        Returns:
            (размеченный буфер, число пикселей трещин). Альфа-канал сохраняется.
        """
        if magnitude.shape != (gray.height, gray.width):
            raise ValueError(
                f"magnitude shape {magnitude.shape} does not match {gray.height}x{gray.width}"
            )
        mask = self.crack_mask(magnitude)
        out = np.array(gray.data, copy=True)
        out[mask, 0] = CRACK_COLOR[0]
        out[mask, 1] = CRACK_COLOR[1]
        out[mask, 2] = CRACK_COLOR[2]
        return PixelBuffer.from_array(out), int(np.count_nonzero(mask))

    def build_metrics(self, crack_pixel_count: int, width: int, height: int) -> Metrics:
        """Собирает `Metrics`: процент (2 знака), уровень и рекомендацию."""
        total_pixels = width * height
        # Уровень выбирается по тому же округлённому значению, что и показывается
        crack_percentage = round(crack_pixel_count / total_pixels * 100, 2)
        severity = classify_severity(crack_percentage)
        metrics = Metrics(
            crack_pixel_count=crack_pixel_count,
            total_pixels=total_pixels,
            crack_percentage=crack_percentage,
            width=width,
            height=height,
            severity=severity,
            recommendation=recommendation_for(severity),
        )
        logger.debug(
            f"{crack_pixel_count}/{total_pixels} crack pixels "
            f"({metrics.crack_percentage_display}%), severity={severity.value}"
        )
        return metrics
