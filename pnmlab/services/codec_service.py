"""Разбор и сериализация текстовых форматов PNM (P1, P2, P3).

Принципы:
- SRP: только преобразование «строки ↔ `PnmImage`», без работы с файлами.
- На вход парсера подаются уже отфильтрованные строки (без пустых строк и
  комментариев), см. `ImageService.filter_lines`.
- Ошибка разбора фатальна для операции: частичное изображение не возвращается.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from pnmlab.models.errors import MalformedHeaderError, MalformedPixelDataError
from pnmlab.models.image_model import PnmImage
from pnmlab.models.pixel import BiLevelPixel, FormatTag, GrayPixel, Pixel, RgbPixel

logger = logging.getLogger(__name__)


def _to_int(token: str, line_no: int) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise MalformedPixelDataError(f"Строка {line_no}: не целое число {token!r}") from exc


def _bilevel_row(tokens: List[str], line_no: int) -> List[Pixel]:
    return [BiLevelPixel(on=_to_int(t, line_no) != 0) for t in tokens]


def _gray_row(tokens: List[str], line_no: int) -> List[Pixel]:
    # values above max_value are passed through unchanged
    return [GrayPixel(_to_int(t, line_no)) for t in tokens]


def _rgb_row(tokens: List[str], line_no: int) -> List[Pixel]:
    values = [_to_int(t, line_no) for t in tokens]
    # a trailing partial triplet is dropped
    usable = len(values) - len(values) % 3
    return [RgbPixel(*values[i:i + 3]) for i in range(0, usable, 3)]


_ROW_READERS: Dict[FormatTag, Callable[[List[str], int], List[Pixel]]] = {
    FormatTag.BILEVEL: _bilevel_row,
    FormatTag.GRAYSCALE: _gray_row,
    FormatTag.RGB: _rgb_row,
}


class PnmCodec:
    def parse(self, lines: Sequence[str]) -> PnmImage:
        """Разбирает отфильтрованные строки PNM в `PnmImage`.

        Args:
            lines: Строки без пустых строк и комментариев.

        Returns:
            Буфер, у которого число строк сетки равно числу строк пиксельных
            данных; заявленная высота сохраняется как метаданные.

        Raises:
            MalformedHeaderError: тег формата, размеры или max-value отсутствуют
                либо не разбираются.
            MalformedPixelDataError: в пиксельных данных встретился не целый токен.
        """
        try:
            return self._parse(lines)
        except (MalformedHeaderError, MalformedPixelDataError) as exc:
            logger.debug("Parse failed: %s", exc)
            raise

    def _parse(self, lines: Sequence[str]) -> PnmImage:
        if not lines:
            raise MalformedHeaderError("Пустой вход: нет тега формата")

        fmt = FormatTag.from_magic(lines[0])
        if len(lines) < 3:
            raise MalformedHeaderError(f"Заголовок обрезан: строк {len(lines)}")

        width, height = self._parse_dimensions(lines[1])

        if fmt.has_max_value:
            max_value = self._parse_max_value(lines[2])
            pixel_start = 3
        else:
            max_value = 1
            pixel_start = 2

        read_row = _ROW_READERS[fmt]
        pixels = [
            read_row(line.split(), line_no)
            for line_no, line in enumerate(lines[pixel_start:], start=pixel_start)
        ]

        if len(pixels) != height:
            logger.debug("Declared height %d, grid has %d rows", height, len(pixels))

        return PnmImage(fmt, width, height, pixels, max_value, strict=False)

    def serialize(self, image: PnmImage) -> str:
        """Возвращает каноническое текстовое представление, заканчивающееся переводом строки."""
        return "\n".join(self.to_lines(image)) + "\n"

    def to_lines(self, image: PnmImage) -> List[str]:
        lines = [image.format.magic, f"{image.width} {image.height}"]
        if image.format.has_max_value:
            lines.append(str(image.max_value))
        lines.extend(" ".join(self._row_tokens(row)) for row in image.pixels)
        return lines

    # ---- Internals ----
    def _row_tokens(self, row: Iterable[Pixel]) -> List[str]:
        return [token for pixel in row for token in pixel.tokens()]

    def _parse_dimensions(self, line: str) -> Tuple[int, int]:
        tokens = line.split()
        if len(tokens) < 2:
            raise MalformedHeaderError(f"Ожидались ширина и высота: {line!r}")
        try:
            width, height = int(tokens[0]), int(tokens[1])
        except ValueError as exc:
            raise MalformedHeaderError(f"Размеры не числовые: {line!r}") from exc
        if width < 1 or height < 1:
            raise MalformedHeaderError(f"Размеры должны быть положительными: {line!r}")
        return width, height

    def _parse_max_value(self, line: str) -> int:
        try:
            max_value = int(line.strip())
        except ValueError as exc:
            raise MalformedHeaderError(f"Строка max-value не числовая: {line!r}") from exc
        if max_value < 1:
            raise MalformedHeaderError(f"max-value должен быть ≥ 1: {line!r}")
        return max_value
