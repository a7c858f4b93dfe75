"""Конфигурация приложения и настройка логирования.

Значения по умолчанию переопределяются переменными окружения `PNMLAB_*`.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from pnmlab.models.errors import InvalidArgumentError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class AppConfig:
    """Настройки CLI и окна просмотра."""
    appearance_mode: str = "system"
    color_theme: str = "blue"
    log_level: str = "WARNING"
    default_scale: int = 1

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Читает переменные окружения:
        PNMLAB_APPEARANCE, PNMLAB_THEME, PNMLAB_LOG_LEVEL, PNMLAB_DEFAULT_SCALE.
        """
        raw_scale = os.environ.get("PNMLAB_DEFAULT_SCALE", "1")
        try:
            default_scale = int(raw_scale)
        except ValueError as exc:
            raise InvalidArgumentError(f"PNMLAB_DEFAULT_SCALE не целое число: {raw_scale!r}") from exc
        if default_scale < 1:
            raise InvalidArgumentError(f"PNMLAB_DEFAULT_SCALE должен быть ≥ 1: {default_scale}")

        return cls(
            appearance_mode=os.environ.get("PNMLAB_APPEARANCE", "system"),
            color_theme=os.environ.get("PNMLAB_THEME", "blue"),
            log_level=os.environ.get("PNMLAB_LOG_LEVEL", "WARNING").upper(),
            default_scale=default_scale,
        )


def configure_logging(level: str = "WARNING") -> None:
    """Настраивает корневой логгер; неизвестный уровень заменяется на WARNING."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
