"""Модели данных для изображений.

Принципы:
- SRP: `PnmImage` владеет сеткой пикселей и метаданными, алгоритмы разбора и
  растеризации живут в сервисах.
- Размеры и формат неизменяемы после создания, содержимое пикселей — изменяемо.
- Чистый код: `ImageData` неизменяема (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image

from pnmlab.models.errors import InvalidArgumentError, OutOfBoundsError
from pnmlab.models.pixel import FormatTag, Pixel, background
from pnmlab.services.raster_service import Point, RasterService


class PnmImage:
    """Буфер изображения PNM: формат, размеры, max-value и сетка пикселей.

    Сетка хранится построчно, строка 0 — верхняя. Для P1 `max_value` всегда 1.

    При `strict=True` (прямое создание) проверяется, что `height` равно числу
    строк, а `width` — длине каждой строки. Парсер создаёт буфер с
    `strict=False`: фактическая сетка важнее заявленной высоты.
    """

    def __init__(
        self,
        format: FormatTag,
        width: int,
        height: int,
        pixels: Sequence[Sequence[Pixel]],
        max_value: int = 1,
        *,
        strict: bool = True,
    ) -> None:
        if width < 1 or height < 1:
            raise InvalidArgumentError(f"Размеры должны быть положительными: {width}×{height}")
        if format is not FormatTag.BILEVEL and max_value < 1:
            raise InvalidArgumentError(f"max_value должен быть ≥ 1: {max_value}")

        self._format = format
        self._width = width
        self._height = height
        self._max_value = 1 if format is FormatTag.BILEVEL else max_value
        self.pixels: List[List[Pixel]] = [list(row) for row in pixels]

        self._check_variants()
        if strict:
            self._check_shape()

    # ---- Read-only metadata ----
    @property
    def format(self) -> FormatTag:
        return self._format

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def max_value(self) -> int:
        return self._max_value

    @property
    def grid_size(self) -> Tuple[int, int]:
        """Фактический размер сетки: (число столбцов первой строки, число строк)."""
        cols = len(self.pixels[0]) if self.pixels else 0
        return cols, len(self.pixels)

    # ---- Pixel access ----
    def get_pixel(self, row: int, col: int) -> Pixel:
        self._check_cell(row, col)
        return self.pixels[row][col]

    def set_pixel(self, row: int, col: int, pixel: Pixel) -> None:
        """Заменяет ячейку; вариант пикселя обязан совпадать с форматом буфера."""
        if pixel.format is not self._format:
            raise InvalidArgumentError(
                f"Пиксель {pixel!r} не соответствует формату {self._format.name}"
            )
        self._check_cell(row, col)
        self.pixels[row][col] = pixel

    # ---- Operations ----
    def scaled(self, factor: int) -> "PnmImage":
        """Увеличение методом ближайшего соседа.

        Каждый пиксель превращается в блок `factor × factor`. Исходный буфер не
        меняется.

        Raises:
            InvalidArgumentError: если `factor` не целое число ≥ 1.
        """
        if isinstance(factor, bool) or not isinstance(factor, int) or factor < 1:
            raise InvalidArgumentError(f"Коэффициент масштаба должен быть целым ≥ 1: {factor!r}")

        h_scaled = [[pixel for pixel in row for _ in range(factor)] for row in self.pixels]
        # each replicated row gets its own list so in-place edits stay local
        scaled = [list(row) for row in h_scaled for _ in range(factor)]

        return PnmImage(
            self._format,
            self._width * factor,
            self._height * factor,
            scaled,
            self._max_value,
            strict=False,
        )

    def draw_line(self, start: Point, end: Point) -> None:
        """Рисует отрезок между точками `(x, y)` цветом переднего плана."""
        RasterService().draw_line(self, start, end)

    def copy(self) -> "PnmImage":
        return PnmImage(
            self._format, self._width, self._height, self.pixels, self._max_value, strict=False
        )

    # ---- Dunder ----
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PnmImage):
            return NotImplemented
        return (
            self._format is other._format
            and self._width == other._width
            and self._height == other._height
            and self._max_value == other._max_value
            and self.pixels == other.pixels
        )

    def __repr__(self) -> str:
        return (
            f"PnmImage({self._format.name}, {self._width}×{self._height}, "
            f"max_value={self._max_value}, rows={len(self.pixels)})"
        )

    # ---- Internals ----
    def _check_variants(self) -> None:
        for r, row in enumerate(self.pixels):
            for c, pixel in enumerate(row):
                if getattr(pixel, "format", None) is not self._format:
                    raise InvalidArgumentError(
                        f"Ячейка ({r}, {c}) содержит {pixel!r}, ожидался формат {self._format.name}"
                    )

    def _check_shape(self) -> None:
        if len(self.pixels) != self._height:
            raise InvalidArgumentError(
                f"Высота {self._height} не совпадает с числом строк {len(self.pixels)}"
            )
        for r, row in enumerate(self.pixels):
            if len(row) != self._width:
                raise InvalidArgumentError(
                    f"Строка {r}: {len(row)} пикселей вместо {self._width}"
                )

    def _check_cell(self, row: int, col: int) -> None:
        if not (0 <= row < len(self.pixels) and 0 <= col < len(self.pixels[row])):
            raise OutOfBoundsError(f"Ячейка ({row}, {col}) вне сетки изображения")


def image_of_size(
    width: int,
    height: int,
    format: FormatTag = FormatTag.BILEVEL,
    max_value: Optional[int] = None,
) -> PnmImage:
    """Создаёт холст, залитый фоновым значением.

    Args:
        width: Ширина, px.
        height: Высота, px.
        format: Формат буфера (по умолчанию P1).
        max_value: Для P2/P3 по умолчанию 255, для P1 всегда 1.
    """
    if width < 1 or height < 1:
        raise InvalidArgumentError(f"Размеры должны быть положительными: {width}×{height}")
    if max_value is None:
        max_value = 1 if format is FormatTag.BILEVEL else 255
    fill = background(format, max_value)
    pixels = [[fill] * width for _ in range(height)]
    return PnmImage(format, width, height, pixels, max_value)


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель загруженного файла и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        image: Разобранный буфер PNM.
        pil_image: Представление для отображения (RGBA).
        width: Заявленная ширина, px.
        height: Заявленная высота, px.
        mode: Тег формата, например "P3".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    image: PnmImage
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]
