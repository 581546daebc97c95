"""Мост между декодированными изображениями PIL и `PixelBuffer`.

Принципы:
- SRP: только преобразование представлений в памяти; чтение и запись файлов
  (декодирование/кодирование форматов) остаются за вызывающей стороной.
- Исходное изображение не мутируется.
"""
from __future__ import annotations

import numpy as np
from PIL import Image

from crackscan.models.pixel_buffer import PixelBuffer


class ImageService:
    def buffer_from_image(self, image: Image.Image) -> PixelBuffer:
        """Возвращает `PixelBuffer` для уже декодированного изображения.

        Args:
            image: Изображение PIL в любом режиме; приводится к RGBA.

        Returns:
            `PixelBuffer` размером `image.size`.
        """
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return PixelBuffer.from_array(np.asarray(rgba, dtype=np.uint8))

    def image_from_buffer(self, buffer: PixelBuffer) -> Image.Image:
        """Преобразует буфер в новое изображение PIL (RGBA) для показа или сохранения."""
        return Image.fromarray(np.array(buffer.data, copy=True))

    def edge_map_image(self, edge_map: np.ndarray) -> Image.Image:
        """8-битная карта границ (height, width) как изображение в режиме L."""
        return Image.fromarray(np.ascontiguousarray(edge_map, dtype=np.uint8))
