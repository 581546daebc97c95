"""Модель буфера пикселей RGBA.

Принципы:
- SRP: только структура данных и проверка её инвариантов, без обработки.
- Чистый код: неизменяемость (`frozen=True` и read-only массив) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from crackscan.models.errors import InvalidInputError

CHANNELS = 4

RawPixels = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]


def _validate_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidInputError(f"{name} должен быть целым числом, получено {value!r}")
        if value <= 0:
            raise InvalidInputError(f"{name} должен быть положительным, получено {value}")


def _channel_values(pixels) -> np.ndarray:
    """Плоский массив uint8 из последовательности или numpy-массива.

    Допускаются только целые значения в [0, 255]: NaN, бесконечности и дробные
    числа отклоняются, а не усекаются молча.
    """
    try:
        flat = np.asarray(pixels).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError("буфер пикселей должен содержать целые числа") from exc
    if flat.size == 0:
        return flat.astype(np.uint8)

    if flat.dtype == np.bool_ or not (
        np.issubdtype(flat.dtype, np.integer) or np.issubdtype(flat.dtype, np.floating)
    ):
        raise InvalidInputError(f"буфер пикселей должен содержать целые числа, получено {flat.dtype}")
    if np.issubdtype(flat.dtype, np.floating):
        if not np.isfinite(flat).all():
            raise InvalidInputError("буфер пикселей содержит NaN или бесконечность")
        if not np.array_equal(flat, np.floor(flat)):
            raise InvalidInputError("значения каналов должны быть целыми")
    if flat.min() < 0 or flat.max() > 255:
        raise InvalidInputError("значения каналов должны лежать в диапазоне [0, 255]")
    return flat.astype(np.uint8)


@dataclass(frozen=True)
class PixelBuffer:
    """Неизменяемый буфер пикселей width×height, 4 канала по 8 бит (RGBA), построчно.

    Fields:
        data: Массив uint8 формы (height, width, 4), только для чтения.
        width: Ширина, px.
        height: Высота, px.
    """
    data: np.ndarray
    width: int
    height: int

    @classmethod
    def from_raw(cls, pixels: RawPixels, width: int, height: int) -> "PixelBuffer":
        """Создаёт буфер из плоской последовательности байтов RGBA.

        Данные всегда копируются: исходный буфер вызывающей стороны
        никогда не изменяется конвейером.

        Raises:
            InvalidInputError: если размеры не положительны или длина буфера
                не равна `width * height * 4`, или значения каналов не целые
                числа из [0, 255].
        """
        _validate_dimensions(width, height)
        width, height = int(width), int(height)

        if isinstance(pixels, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(bytes(pixels), dtype=np.uint8)
        else:
            flat = _channel_values(pixels)

        expected = width * height * CHANNELS
        if flat.size != expected:
            raise InvalidInputError(
                f"длина буфера {flat.size} не совпадает с {width}x{height}x{CHANNELS} = {expected}"
            )
        return cls.from_array(flat.reshape(height, width, CHANNELS))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Создаёт буфер из массива формы (height, width, 4); массив копируется."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidInputError(f"ожидался массив формы (h, w, 4), получено {array.shape}")
        height, width = array.shape[:2]
        _validate_dimensions(width, height)
        data = np.array(array, dtype=np.uint8, copy=True)
        data.setflags(write=False)
        return cls(data=data, width=int(width), height=int(height))

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @property
    def red(self) -> np.ndarray:
        """Красный канал (height, width); после перевода в серое равен яркости."""
        return self.data[:, :, 0]

    @property
    def alpha(self) -> np.ndarray:
        return self.data[:, :, 3]

    def to_bytes(self) -> bytes:
        """Плоское представление RGBA построчно."""
        return self.data.tobytes()

    def pixel(self, x: int, y: int) -> tuple:
        """RGBA пикселя (x, y)."""
        return tuple(int(v) for v in self.data[y, x])

    def __len__(self) -> int:
        return self.data.size
