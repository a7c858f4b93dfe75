"""Боковая панель: файл, информация, курсор и инструменты редактирования.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: состояние отдаётся через `is_line_mode`, события через колбэки `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from pnmlab.models.image_model import PnmImage
from pnmlab.models.pixel import Pixel

CONVERT_CHOICES = ("P1 (bi-level)", "P2 (grayscale)", "P3 (RGB)")


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, курсор, редактирование."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_file: Optional[Callable[[], None]] = None
        self.on_convert: Optional[Callable[[str], None]] = None
        self.on_scale: Optional[Callable[[str], None]] = None
        self.on_line_mode_change: Optional[Callable[[bool], None]] = None

        bold = ctk.CTkFont(size=16, weight="bold")

        # File
        self._title = ctk.CTkLabel(self, text="Файл", font=bold)
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")
        self._open_btn = ctk.CTkButton(self, text="Открыть PNM…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._save_btn = ctk.CTkButton(self, text="Сохранить как…", command=self._emit_save_file)
        self._save_btn.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=bold)
        self._info_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._mode_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_mode = ctk.CTkLabel(self, textvariable=self._mode_val, anchor="w", justify="left")

        self._info_path.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=6, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_mode.grid(row=7, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Cursor section
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=bold)
        self._cursor_title.grid(row=8, column=0, padx=8, pady=(8, 4), sticky="w")

        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_pixel_val = ctk.StringVar(value="—")
        self._cursor_xy = ctk.CTkLabel(self, textvariable=self._cursor_xy_val, anchor="w", justify="left")
        self._cursor_pixel = ctk.CTkLabel(self, textvariable=self._cursor_pixel_val, anchor="w", justify="left")
        self._cursor_xy.grid(row=9, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._cursor_pixel.grid(row=10, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Editing
        self._edit_title = ctk.CTkLabel(self, text="Редактирование", font=bold)
        self._edit_title.grid(row=11, column=0, padx=8, pady=(8, 4), sticky="w")

        self._line_mode = ctk.BooleanVar(value=False)
        self._line_switch = ctk.CTkSwitch(
            self, text="Рисовать линию (2 клика)", variable=self._line_mode, command=self._emit_line_mode
        )
        self._line_switch.grid(row=12, column=0, padx=8, pady=(0, 2), sticky="w")
        self._line_status_val = ctk.StringVar(value="")
        self._line_status = ctk.CTkLabel(self, textvariable=self._line_status_val, anchor="w", justify="left")
        self._line_status.grid(row=13, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._scale_label = ctk.CTkLabel(self, text="Коэффициент увеличения:")
        self._scale_label.grid(row=14, column=0, padx=8, pady=(0, 2), sticky="w")
        self._scale_val = ctk.StringVar(value="2")
        self._scale_entry = ctk.CTkEntry(self, textvariable=self._scale_val, width=80)
        self._scale_entry.grid(row=15, column=0, padx=8, pady=(0, 2), sticky="w")
        self._scale_entry.bind("<Return>", lambda _e: self._emit_scale())
        self._scale_btn = ctk.CTkButton(self, text="Увеличить", command=self._emit_scale)
        self._scale_btn.grid(row=16, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._convert_label = ctk.CTkLabel(self, text="Преобразовать в:")
        self._convert_label.grid(row=17, column=0, padx=8, pady=(0, 2), sticky="w")
        self._convert_menu = ctk.CTkOptionMenu(self, values=list(CONVERT_CHOICES), command=self._emit_convert)
        self._convert_menu.set(CONVERT_CHOICES[0])
        self._convert_menu.grid(row=18, column=0, padx=8, pady=(0, 8), sticky="ew")

        # filler
        self.grid_rowconfigure(99, weight=1)

    # ---- Public API ----
    def set_image_info(self, path: Optional[str], size_bytes: Optional[int], image: PnmImage) -> None:
        """Отображает метаданные текущего изображения."""
        self._path_val.set(path or "(без имени)")
        self._size_val.set(self._format_size(size_bytes))
        cols, rows = image.grid_size
        dims = f"{image.width} × {image.height} px"
        if (cols, rows) != (image.width, image.height):
            dims += f" (сетка {cols} × {rows})"
        self._dims_val.set(dims)
        mode = image.format.magic
        if image.format.has_max_value:
            mode += f", max {image.max_value}"
        self._mode_val.set(mode)
        self._convert_menu.set(CONVERT_CHOICES[image.format.value - 1])

    def update_cursor_info(self, x: Optional[int], y: Optional[int], pixel: Optional[Pixel]) -> None:
        """Обновляет информацию по курсору (координаты и значение пикселя)."""
        if x is None or y is None or pixel is None:
            self._cursor_xy_val.set("—")
            self._cursor_pixel_val.set("—")
            return
        self._cursor_xy_val.set(f"({x}, {y})")
        self._cursor_pixel_val.set("Значение: " + " ".join(pixel.tokens()))

    def set_line_status(self, text: str) -> None:
        self._line_status_val.set(text)

    def is_line_mode(self) -> bool:
        return bool(self._line_mode.get())

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_save_file(self) -> None:
        if self.on_save_file:
            self.on_save_file()

    def _emit_convert(self, value: str) -> None:
        if self.on_convert:
            self.on_convert(value)

    def _emit_scale(self) -> None:
        if self.on_scale:
            self.on_scale(self._scale_val.get())

    def _emit_line_mode(self) -> None:
        if self.on_line_mode_change:
            self.on_line_mode_change(self.is_line_mode())

    # ---- Helpers ----
    @staticmethod
    def _format_size(size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        units = ["Б", "КБ", "МБ", "ГБ"]
        size = float(size_bytes)
        for unit in units:
            if size < 1024 or unit == units[-1]:
                return f"{size:.0f} {unit}" if unit == "Б" else f"{size:.1f} {unit}"
            size /= 1024
        return f"{size_bytes} Б"
