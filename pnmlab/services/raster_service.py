"""Растеризация отрезков в сетку пикселей.

Алгоритм — DDA в два прохода (по столбцам и по строкам), оба выполняются
всегда, поэтому крутые и пологие отрезки получаются без разрывов.
Повторная запись в ячейку идемпотентна.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, List, Tuple

from pnmlab.models.errors import OutOfBoundsError
from pnmlab.models.pixel import foreground

if TYPE_CHECKING:
    from pnmlab.models.image_model import PnmImage

logger = logging.getLogger(__name__)

Point = Tuple[int, int]  # (x, y) == (column, row)


def _round(value: float) -> int:
    # half away from zero, not Python's banker's rounding
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _inclusive(a: int, b: int) -> range:
    return range(a, b + 1) if a <= b else range(a, b - 1, -1)


class RasterService:
    def line_cells(self, start: Point, end: Point) -> List[Tuple[int, int]]:
        """Возвращает ячейки `(row, column)`, которые покрывает отрезок.

        Порядок: сначала проход по столбцам, затем по строкам; дубликаты не
        удаляются.

        Вертикальный отрезок проверяется раньше горизонтального, поэтому
        вырожденный отрезок из одной точки не приводит к делению на ноль.
        """
        x0, y0 = start
        x1, y1 = end
        vertical = x0 == x1
        horizontal = y0 == y1

        m = 0.0 if vertical else (y1 - y0) / (x1 - x0)
        b = y0 - m * x0

        cells: List[Tuple[int, int]] = []

        # column-driven pass
        for x in _inclusive(x0, x1):
            row = y0 if vertical else _round(m * x + b)
            cells.append((row, x))

        # row-driven pass
        for y in _inclusive(y0, y1):
            if vertical or horizontal:
                column = x0
            else:
                column = _round((y - b) / m)
            cells.append((y, column))

        return cells

    def draw_line(self, image: "PnmImage", start: Point, end: Point) -> None:
        """Закрашивает ячейки отрезка значением переднего плана формата.

        Raises:
            OutOfBoundsError: если одна из конечных точек вне изображения.
                Ни одна ячейка при этом не изменяется.
        """
        for x, y in (start, end):
            if not (0 <= x < image.width and 0 <= y < image.height):
                raise OutOfBoundsError(
                    f"Точка {(x, y)} вне изображения {image.width}×{image.height}"
                )

        cells = self.line_cells(start, end)
        grid = image.pixels
        # parsed grids may disagree with the declared size
        for row, column in cells:
            if row >= len(grid) or column >= len(grid[row]):
                raise OutOfBoundsError(f"Ячейка ({row}, {column}) вне фактической сетки пикселей")

        fill = foreground(image.format, image.max_value)
        for row, column in cells:
            grid[row][column] = fill
        logger.debug("Line %s -> %s: %d cells written", start, end, len(cells))
