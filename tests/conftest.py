from __future__ import annotations

from typing import Callable, List

import pytest

from pnmlab.models.image_model import PnmImage
from pnmlab.models.pixel import BiLevelPixel, FormatTag


def _on_cells(image: PnmImage) -> List[tuple]:
    return [
        (r, c)
        for r, row in enumerate(image.pixels)
        for c, pixel in enumerate(row)
        if pixel.on
    ]


def _bilevel(*rows: str) -> PnmImage:
    pixels = [[BiLevelPixel(ch == "1") for ch in row] for row in rows]
    return PnmImage(FormatTag.BILEVEL, len(rows[0]), len(rows), pixels)


@pytest.fixture
def on_cells() -> Callable[[PnmImage], List[tuple]]:
    """Список ячеек (row, col) «включённых» пикселей P1-буфера."""
    return _on_cells


@pytest.fixture
def bilevel() -> Callable[..., PnmImage]:
    """Строит P1-буфер из строк вида "0110"."""
    return _bilevel
