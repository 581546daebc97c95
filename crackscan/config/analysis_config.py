"""Настройки анализа трещин.

Принципы:
- Константы алгоритма фиксированы.
- Через переменные окружения меняются только параллелизм и логирование.
"""

import logging
import os
from typing import Dict, Optional, Tuple

# Порог классификации трещин (в единицах 8-битного модуля градиента)
CRACK_THRESHOLD: int = 100

# Веса яркости ITU-R BT.601 в фиксированной точке (масштаб LUMA_SCALE)
LUMA_WEIGHTS: Tuple[int, int, int] = (299, 587, 114)
LUMA_SCALE: int = 1000

# Границы уровней повреждения, % площади изображения
MODERATE_BREAKPOINT: float = 1.0
CRITICAL_BREAKPOINT: float = 3.0

RECOMMENDATIONS: Dict[str, str] = {
    'Critical': 'Immediate repair required',
    'Moderate': 'Schedule maintenance soon',
    'Minor': 'Monitor regularly',
}

# Число потоков для свёртки Собеля (1 = последовательно)
EDGE_WORKERS: int = int(os.getenv('CRACKSCAN_EDGE_WORKERS', '1'))

# Внутренних строк в одной параллельной полосе
EDGE_BAND_ROWS: int = int(os.getenv('CRACKSCAN_EDGE_BAND_ROWS', '256'))

LOG_LEVEL: str = os.getenv('CRACKSCAN_LOG_LEVEL', 'INFO')
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_analysis_config() -> Dict:
    """
    Словарь параметров анализа.

    Returns:
        Словарь с параметрами конфигурации анализа
    """
    return {
        'crack_threshold': CRACK_THRESHOLD,
        'luma_weights': LUMA_WEIGHTS,
        'luma_scale': LUMA_SCALE,
        'moderate_breakpoint': MODERATE_BREAKPOINT,
        'critical_breakpoint': CRITICAL_BREAKPOINT,
        'edge_workers': max(1, EDGE_WORKERS),
        'edge_band_rows': max(1, EDGE_BAND_ROWS),
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Настраивает корневой логгер для приложений, встраивающих конвейер."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT
    )
