from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from pnmlab.models.errors import InvalidArgumentError
from pnmlab.models.image_model import PnmImage
from pnmlab.models.pixel import BiLevelPixel, FormatTag, GrayPixel, RgbPixel

logger = logging.getLogger(__name__)


class ProcessService:
    def convert(self, image: PnmImage, target: FormatTag) -> PnmImage:
        """Преобразует изображение в другой вариант PNM. Исходный буфер не меняется."""
        if target is FormatTag.GRAYSCALE:
            return self.to_grayscale(image)
        if target is FormatTag.BILEVEL:
            return self.to_bilevel(image)
        return self.to_rgb(image)

    def to_grayscale(self, image: PnmImage) -> PnmImage:
        """
        Преобразование в оттенки серого (P2).
        RGB -> L = R*299/1000 + G*587/1000 + B*114/1000 (ITU-R 601-2, как в Pillow).
        P1 -> P2 с max_value = 1 («включённый» = 0, чёрный).
        """
        if image.format is FormatTag.GRAYSCALE:
            return image.copy()
        pixels = [
            [GrayPixel(self._luma(*pixel.rgb(image.max_value))) for pixel in row]
            for row in image.pixels
        ]
        return PnmImage(
            FormatTag.GRAYSCALE, image.width, image.height, pixels, image.max_value, strict=False
        )

    def to_rgb(self, image: PnmImage) -> PnmImage:
        """Преобразование в P3: серый канал копируется во все три."""
        if image.format is FormatTag.RGB:
            return image.copy()
        pixels = [[RgbPixel(*pixel.rgb(image.max_value)) for pixel in row] for row in image.pixels]
        return PnmImage(FormatTag.RGB, image.width, image.height, pixels, image.max_value, strict=False)

    def to_bilevel(self, image: PnmImage, threshold: Optional[float] = None) -> PnmImage:
        """
        Бинаризация в P1: пиксель «включён» (чёрный), если его яркость < T.
        T задаётся в единицах [0..255]; по умолчанию — порог Отсу.
        """
        if image.format is FormatTag.BILEVEL:
            return image.copy()
        gray = self.to_grayscale(image)
        arr = self._gray_to_np(gray)
        if threshold is None:
            threshold = self._otsu_threshold(arr)
            logger.debug("Otsu threshold: %.1f", threshold)
        elif not 0 <= threshold <= 255:
            raise InvalidArgumentError(f"Порог должен быть в диапазоне [0, 255]: {threshold}")

        pixels = [[BiLevelPixel(on=bool(v < threshold)) for v in row] for row in arr]
        return PnmImage(FormatTag.BILEVEL, image.width, image.height, pixels, strict=False)

    # ---------- Вспомогательные функции ----------
    def _luma(self, r: int, g: int, b: int) -> int:
        return (r * 299 + g * 587 + b * 114 + 500) // 1000

    def _gray_to_np(self, gray: PnmImage) -> np.ndarray:
        """
        Возвращает numpy-массив float32 в диапазоне [0, 255] для P2-буфера.
        """
        rows = gray.pixels
        width = len(rows[0]) if rows else 0
        if any(len(row) != width for row in rows):
            raise InvalidArgumentError("Сетка пикселей не прямоугольная")
        arr = np.array([[p.intensity for p in row] for row in rows], dtype=np.float32)
        arr = arr.reshape(len(rows), width)
        return np.clip(arr, 0, gray.max_value) * (255.0 / gray.max_value)

    def _otsu_threshold(self, arr_0_255: np.ndarray) -> float:
        """
        Порог Отсу для массива значений [0..255] (float/uint8).
        Возвращает порог T в тех же единицах.
        """
        # Приведём к uint8 для стабильной гистограммы
        arr_u8 = np.clip(np.rint(arr_0_255), 0, 255).astype(np.uint8)
        hist = np.bincount(arr_u8.flatten(), minlength=256).astype(np.float64)
        total = arr_u8.size
        if total == 0:
            return 0.0

        prob = hist / total
        omega = np.cumsum(prob)  # кумулятивные вероятности
        mu = np.cumsum(prob * np.arange(256))  # кумулятивные средние
        mu_t = mu[-1]

        # Межклассовая дисперсия
        numerator = (mu_t * omega - mu) ** 2
        denominator = omega * (1.0 - omega)
        # избегаем деления на ноль
        with np.errstate(divide="ignore", invalid="ignore"):
            sigma_b2 = np.where(denominator > 0, numerator / denominator, 0.0)
        t = np.argmax(sigma_b2)
        # pixels <= t form the dark class
        return float(t) + 1.0
