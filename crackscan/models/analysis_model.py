"""Модели результатов анализа трещин.

Принципы:
- SRP: только структуры данных, без логики обработки.
- Закрытое перечисление `Severity` вместо строк для решающих правил;
  строки используются лишь для отображения.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import numpy as np

from crackscan.models.pixel_buffer import PixelBuffer


class Severity(Enum):
    """Уровень повреждения поверхности, упорядочен по возрастанию."""
    MINOR = "Minor"
    MODERATE = "Moderate"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    def __lt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self) -> str:
        return self.value


_SEVERITY_ORDER = (Severity.MINOR, Severity.MODERATE, Severity.CRITICAL)


@dataclass(frozen=True)
class Metrics:
    """Сводные показатели одного прогона анализа.

    Fields:
        crack_pixel_count: Число пикселей, классифицированных как трещина.
        total_pixels: width * height.
        crack_percentage: Доля трещин в процентах, округлена до 2 знаков.
        width: Ширина, px.
        height: Высота, px.
        severity: Уровень повреждения.
        recommendation: Текст рекомендации для уровня `severity`.
    """
    crack_pixel_count: int
    total_pixels: int
    crack_percentage: float
    width: int
    height: int
    severity: Severity
    recommendation: str

    @property
    def dimensions(self) -> str:
        return f"{self.width} x {self.height}"

    @property
    def crack_percentage_display(self) -> str:
        return f"{self.crack_percentage:.2f}"

    def to_dict(self) -> Dict:
        return {
            "crack_pixel_count": self.crack_pixel_count,
            "total_pixels": self.total_pixels,
            "crack_percentage": self.crack_percentage_display,
            "width": self.width,
            "height": self.height,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Полный результат конвейера вместе с промежуточными буферами.

    Fields:
        annotated: Серое изображение с пикселями трещин, окрашенными в красный.
        metrics: Сводные показатели.
        grayscale: Промежуточный буфер в оттенках серого, если сохранён.
        edge_map: Модуль градиента, приведённый к uint8 (height, width), если сохранён.
    """
    annotated: PixelBuffer
    metrics: Metrics
    grayscale: Optional[PixelBuffer] = None
    edge_map: Optional[np.ndarray] = None
