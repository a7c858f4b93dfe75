"""Мост между `PnmImage` и растровыми изображениями Pillow.

Принципы:
- Односторонний экспорт для отображения (`to_pil`) и импорт из любого формата,
  который открывает Pillow (`from_pil`).
- Каналы нормализуются к 0..255 по `max_value`.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
from PIL import Image

from pnmlab.models.errors import InvalidArgumentError
from pnmlab.models.image_model import PnmImage
from pnmlab.models.pixel import BiLevelPixel, FormatTag, GrayPixel, RgbPixel


class ExportService:
    def to_array(self, image: PnmImage) -> np.ndarray:
        """
        Возвращает numpy-массив uint8 формы (H, W, 3) в диапазоне [0, 255].
        Для P1 «включённый» пиксель — чёрный. Значения выше max_value обрезаются.
        """
        rows = image.pixels
        if not rows or not rows[0]:
            raise InvalidArgumentError("Пустая сетка пикселей")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidArgumentError("Сетка пикселей не прямоугольная")

        max_value = image.max_value
        raw = np.array(
            [[pixel.rgb(max_value) for pixel in row] for row in rows], dtype=np.float64
        )
        scaled = np.clip(raw, 0, max_value) * (255.0 / max_value)
        return np.rint(scaled).astype(np.uint8)

    def to_pil(self, image: PnmImage) -> Image.Image:
        """Преобразует буфер в `PIL.Image.Image` в режиме RGBA (альфа = 255)."""
        rgb = self.to_array(image)
        alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
        return Image.fromarray(np.concatenate([rgb, alpha], axis=2))

    def from_pil(
        self,
        pil_image: Image.Image,
        format: FormatTag = FormatTag.RGB,
        max_value: Optional[int] = None,
    ) -> PnmImage:
        """Строит `PnmImage` из изображения Pillow.

        Args:
            pil_image: Исходное изображение в любом режиме.
            format: Целевой формат.
            max_value: Для P2/P3 — верхняя граница каналов (по умолчанию 255);
                значения 0..255 масштабируются к ней.
        """
        width, height = pil_image.size
        if format is FormatTag.BILEVEL:
            arr = np.asarray(pil_image.convert("1"), dtype=bool)
            # Pillow mode "1": True = white, PBM: on = black
            pixels = [[BiLevelPixel(on=not bool(v)) for v in row] for row in arr]
            return PnmImage(format, width, height, pixels)

        if max_value is None:
            max_value = 255
        if max_value < 1:
            raise InvalidArgumentError(f"max_value должен быть ≥ 1: {max_value}")

        if format is FormatTag.GRAYSCALE:
            arr = self._rescale(np.asarray(pil_image.convert("L")), max_value)
            pixels = [[GrayPixel(int(v)) for v in row] for row in arr]
        else:
            arr = self._rescale(np.asarray(pil_image.convert("RGB")), max_value)
            pixels = [[RgbPixel(int(r), int(g), int(b)) for r, g, b in row] for row in arr]
        return PnmImage(format, width, height, pixels, max_value)

    def _rescale(self, arr_0_255: np.ndarray, max_value: int) -> np.ndarray:
        if max_value == 255:
            return arr_0_255.astype(np.int64)
        return np.rint(arr_0_255.astype(np.float64) * (max_value / 255.0)).astype(np.int64)
