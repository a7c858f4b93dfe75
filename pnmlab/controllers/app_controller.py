"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от абстрактных ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; разбор, растеризация и преобразования вынесены в сервисы и модель.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from tkinter import TclError, filedialog, messagebox
from typing import Optional, Tuple

import customtkinter as ctk

from pnmlab.models.errors import PnmError
from pnmlab.models.image_model import PnmImage
from pnmlab.models.pixel import FormatTag
from pnmlab.services.export_service import ExportService
from pnmlab.services.image_service import ImageService
from pnmlab.services.process_service import ProcessService
from pnmlab.ui.bottom_bar import BottomBar
from pnmlab.ui.image_viewer import ImageViewer
from pnmlab.ui.sidebar import CONVERT_CHOICES, Sidebar

logger = logging.getLogger(__name__)

PNM_FILETYPES = (
    ("PNM", "*.pbm *.pgm *.ppm *.pnm"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка/сохранение через `ImageService`.
    - Редактирование текущего `PnmImage`: линии, увеличение, смена формата.
    - Синхронизация состояния зума.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _image_service: ImageService = ImageService()
    _process_service: ProcessService = ProcessService()
    _export_service: ExportService = ExportService()
    _current_image: Optional[PnmImage] = None
    _current_path: Optional[Path] = None
    _size_bytes: Optional[int] = None
    _line_start: Optional[Tuple[int, int]] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Сохраняет слабую связность: компоненты UI ничего не знают друг о друге,
        общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_save_file = self._handle_save_file
        self.sidebar.on_convert = self._handle_convert
        self.sidebar.on_scale = self._handle_scale
        self.sidebar.on_line_mode_change = self._handle_line_mode_change

        self.viewer.on_cursor_move = self._handle_cursor_move
        self.viewer.on_pixel_click = self._handle_pixel_click
        self.viewer.on_zoom_change = self._handle_viewer_zoom_changed

        self.bottom.on_zoom_change = self._handle_zoom_change
        self.bottom.on_zoom_preset = self._handle_zoom_change
        self.bottom.on_zoom_fit = self._handle_zoom_fit

    def show_image(self, image: PnmImage, path: Optional[Path] = None, size_bytes: Optional[int] = None) -> None:
        """Делает изображение текущим и перерисовывает все панели."""
        self._current_image = image
        self._current_path = path
        self._size_bytes = size_bytes
        self._line_start = None
        self.viewer.set_image(self._export_service.to_pil(image))
        self.viewer.mark_pixel(None)
        self._refresh_info()
        self._handle_zoom_fit()

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(title="Выберите изображение PNM", filetypes=PNM_FILETYPES)
        except TclError:
            # Silent fail if dialog cannot open
            return
        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except (PnmError, OSError) as exc:
            logger.warning("Cannot open %s: %s", file_path, exc)
            messagebox.showerror("Ошибка открытия", str(exc), parent=self.window)
            return

        self.show_image(image_data.image, image_data.path, image_data.size_bytes)
        self.bottom.set_status(f"Открыт {image_data.path.name}")

    def _handle_save_file(self) -> None:
        if self._current_image is None:
            return
        ext = {FormatTag.BILEVEL: ".pbm", FormatTag.GRAYSCALE: ".pgm", FormatTag.RGB: ".ppm"}
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить изображение",
                defaultextension=ext[self._current_image.format],
                filetypes=PNM_FILETYPES,
            )
        except TclError:
            return
        if not file_path:
            return

        try:
            self._image_service.save(self._current_image, file_path)
        except OSError as exc:
            messagebox.showerror("Ошибка сохранения", str(exc), parent=self.window)
            return
        self._current_path = Path(file_path)
        self._size_bytes = self._image_service.file_size(self._current_path)
        self._refresh_info()
        self.bottom.set_status(f"Сохранён {self._current_path.name}")

    def _handle_convert(self, choice: str) -> None:
        if self._current_image is None:
            return
        target = FormatTag(CONVERT_CHOICES.index(choice) + 1)
        if target is self._current_image.format:
            return
        try:
            converted = self._process_service.convert(self._current_image, target)
        except PnmError as exc:
            self.bottom.set_status(f"Ошибка: {exc}")
            return
        self._replace_image(converted, keep_view=True)
        self.bottom.set_status(f"Преобразовано в {target.magic}")

    def _handle_scale(self, raw_factor: str) -> None:
        if self._current_image is None:
            return
        try:
            scaled = self._current_image.scaled(int(raw_factor))
        except (ValueError, PnmError) as exc:
            self.bottom.set_status(f"Ошибка: {exc}")
            return
        self._replace_image(scaled, keep_view=False)
        self._handle_zoom_fit()
        self.bottom.set_status(f"Увеличено ×{raw_factor}")

    def _handle_line_mode_change(self, enabled: bool) -> None:
        self._line_start = None
        self.viewer.mark_pixel(None)
        self.sidebar.set_line_status("Кликните начальную точку" if enabled else "")

    def _handle_pixel_click(self, x: int, y: int) -> None:
        if self._current_image is None or not self.sidebar.is_line_mode():
            return
        if self._line_start is None:
            self._line_start = (x, y)
            self.viewer.mark_pixel(self._line_start)
            self.sidebar.set_line_status(f"Начало {self._line_start}, кликните конец")
            return

        start, self._line_start = self._line_start, None
        self.viewer.mark_pixel(None)
        try:
            self._current_image.draw_line(start, (x, y))
        except PnmError as exc:
            self.sidebar.set_line_status(f"Ошибка: {exc}")
            return
        self.viewer.set_image(self._export_service.to_pil(self._current_image), keep_view=True)
        self.sidebar.set_line_status("Кликните начальную точку")
        self.bottom.set_status(f"Линия {start} → {(x, y)}")

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int]) -> None:
        pixel = None
        if self._current_image is not None and x is not None and y is not None:
            try:
                pixel = self._current_image.get_pixel(y, x)
            except PnmError:
                pixel = None
        self.sidebar.update_cursor_info(x, y, pixel)
        self.bottom.set_position(x, y)

    def _handle_zoom_change(self, zoom_percent: int) -> None:
        self.viewer.set_zoom_percent(zoom_percent)

    def _handle_viewer_zoom_changed(self, zoom_percent: int) -> None:
        # Sync bottom slider when user zooms with mouse wheel
        self.bottom.set_zoom_percent(zoom_percent)

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    # ---- Helpers ----
    def _replace_image(self, image: PnmImage, keep_view: bool) -> None:
        self._current_image = image
        self._line_start = None
        self.viewer.mark_pixel(None)
        self.viewer.set_image(self._export_service.to_pil(image), keep_view=keep_view)
        self._refresh_info()

    def _refresh_info(self) -> None:
        if self._current_image is None:
            return
        path = str(self._current_path) if self._current_path else None
        self.sidebar.set_image_info(path, self._size_bytes, self._current_image)
