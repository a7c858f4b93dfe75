"""Загрузка и сохранение PNM-файлов, упаковка метаданных.

Принципы:
- SRP: класс отвечает только за источник строк (файл или stdin) и приёмник
  текста (файл или stdout); разбор делегируется `PnmCodec`.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- LSP/ISP: возвращает `PnmImage`/`ImageData` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from pnmlab.models.image_model import ImageData, PnmImage
from pnmlab.services.codec_service import PnmCodec
from pnmlab.services.export_service import ExportService

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._codec = PnmCodec()
        self._export = ExportService()

    @staticmethod
    def filter_lines(lines: Iterable[str]) -> List[str]:
        """Убирает переводы строк, пустые строки и комментарии (`#` в начале)."""
        result = []
        for line in lines:
            text = line.rstrip("\r\n")
            if not text.strip() or text.lstrip().startswith("#"):
                continue
            result.append(text)
        return result

    def read_lines(self, file_path: Optional[str | Path] = None) -> List[str]:
        """Читает строки из файла или, если путь не задан, из stdin.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
        """
        if file_path is None:
            return self.filter_lines(sys.stdin)

        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        with path.open("r", encoding=self._encoding) as fh:
            return self.filter_lines(fh)

    def load(self, file_path: Optional[str | Path] = None) -> PnmImage:
        """Загружает и разбирает PNM из файла или stdin."""
        image = self._codec.parse(self.read_lines(file_path))
        logger.info("Loaded %r from %s", image, file_path or "<stdin>")
        return image

    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает PNM с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c разобранным буфером, `PIL.Image.Image` (в режиме RGBA),
            размерами, тегом формата и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            PnmError: если содержимое не разбирается как PNM.
        """
        path = Path(file_path)
        image = self.load(path)

        return ImageData(
            path=path,
            image=image,
            pil_image=self._export.to_pil(image),
            width=image.width,
            height=image.height,
            mode=image.format.magic,
            size_bytes=self.file_size(path),
        )

    @staticmethod
    def file_size(file_path: str | Path) -> Optional[int]:
        """Размер файла в байтах или `None`, если его не удалось получить."""
        try:
            return Path(file_path).stat().st_size
        except OSError:
            return None

    def save(self, image: PnmImage, file_path: Optional[str | Path] = None) -> None:
        """Записывает изображение в файл (перезаписывая его) или в stdout."""
        text = self._codec.serialize(image)
        if file_path is None:
            sys.stdout.write(text)
            return
        path = Path(file_path)
        path.write_text(text, encoding=self._encoding)
        logger.info("Saved %r to %s", image, path)
