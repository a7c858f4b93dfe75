"""Модель пикселя: тег формата и три варианта кодирования значения.

Принципы:
- Каждый вариант хранит только свои каналы, вся зависящая от формата логика
  выбирается по `FormatTag`.
- Неизменяемость (`frozen=True`): запись в буфер означает замену ячейки.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from pnmlab.models.errors import MalformedHeaderError


class FormatTag(Enum):
    """Тег формата PNM; значение совпадает с цифрой заголовка `P<k>`."""
    BILEVEL = 1
    GRAYSCALE = 2
    RGB = 3

    @property
    def magic(self) -> str:
        return f"P{self.value}"

    @property
    def has_max_value(self) -> bool:
        """Есть ли в заголовке строка max-value (у P1 её нет)."""
        return self is not FormatTag.BILEVEL

    @classmethod
    def from_magic(cls, line: str) -> "FormatTag":
        """Разбирает строку вида `P1`/`P2`/`P3`.

        Raises:
            MalformedHeaderError: префикс не `P` или цифра вне {1, 2, 3}.
        """
        text = line.strip()
        if len(text) < 2 or text[0] != "P":
            raise MalformedHeaderError(f"Нет тега формата: {line!r}")
        # exactly one digit: int() alone would accept "P+1", "P 1" or "P01"
        if len(text) != 2 or text[1] not in "123":
            raise MalformedHeaderError(f"Неизвестный тег формата: {line!r}")
        return cls(int(text[1]))


@dataclass(frozen=True)
class BiLevelPixel:
    """Пиксель P1: `on=True` означает передний план (чёрный)."""
    on: bool

    @property
    def format(self) -> FormatTag:
        return FormatTag.BILEVEL

    def tokens(self) -> Tuple[str, ...]:
        return ("1" if self.on else "0",)

    def rgb(self, max_value: int = 1) -> Tuple[int, int, int]:
        v = 0 if self.on else max_value
        return (v, v, v)


@dataclass(frozen=True)
class GrayPixel:
    """Пиксель P2: интенсивность в диапазоне 0..max_value."""
    intensity: int

    @property
    def format(self) -> FormatTag:
        return FormatTag.GRAYSCALE

    def tokens(self) -> Tuple[str, ...]:
        return (str(self.intensity),)

    def rgb(self, max_value: int = 255) -> Tuple[int, int, int]:
        return (self.intensity, self.intensity, self.intensity)


@dataclass(frozen=True)
class RgbPixel:
    """Пиксель P3: три канала в диапазоне 0..max_value."""
    red: int
    green: int
    blue: int

    @property
    def format(self) -> FormatTag:
        return FormatTag.RGB

    def tokens(self) -> Tuple[str, ...]:
        return (str(self.red), str(self.green), str(self.blue))

    def rgb(self, max_value: int = 255) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)


Pixel = Union[BiLevelPixel, GrayPixel, RgbPixel]


def foreground(fmt: FormatTag, max_value: int) -> Pixel:
    """Значение «включённого» пикселя для рисования линий.

    P1 — `on`, P2 — максимальная интенсивность, P3 — максимум по всем каналам.
    """
    if fmt is FormatTag.BILEVEL:
        return BiLevelPixel(on=True)
    if fmt is FormatTag.GRAYSCALE:
        return GrayPixel(max_value)
    return RgbPixel(max_value, max_value, max_value)


def background(fmt: FormatTag, max_value: int = 1) -> Pixel:
    """Значение фона: `off` для P1, нули для P2/P3."""
    if fmt is FormatTag.BILEVEL:
        return BiLevelPixel(on=False)
    if fmt is FormatTag.GRAYSCALE:
        return GrayPixel(0)
    return RgbPixel(0, 0, 0)
