"""Иерархия исключений библиотеки PNM.

Принципы:
- Библиотека только бросает исключения, решение о завершении процесса принимает вызывающий код.
- Узкие типы ошибок: по одному на класс нарушения контракта.
"""
from __future__ import annotations


class PnmError(Exception):
    """Базовая ошибка для всех операций с PNM-изображениями."""


class MalformedHeaderError(PnmError):
    """Отсутствует или не разбирается тег формата, размеры или строка max-value."""


class MalformedPixelDataError(PnmError):
    """Токен в пиксельных данных не является целым числом."""


class InvalidArgumentError(PnmError, ValueError):
    """Недопустимый аргумент операции (например, коэффициент масштаба < 1)."""


class OutOfBoundsError(PnmError, IndexError):
    """Координата выходит за пределы изображения."""
