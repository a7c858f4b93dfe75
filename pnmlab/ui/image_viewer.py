"""Виджет просмотра PNM: масштаб, панорама, выбор пикселей.

Принципы:
- SRP: отвечает только за представление и интеракции с изображением.
- Увеличение без интерполяции (NEAREST), чтобы отдельные пиксели PNM оставались видны;
  при крупном масштабе поверх рисуется сетка пикселей.
- Координаты наружу отдаются в пикселях изображения `(x, y)`, а не канвы.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

MIN_SCALE = 0.1
MAX_SCALE = 32.0
WHEEL_STEP = 1.25
GRID_MIN_SCALE = 8.0
MARKER_COLOR = "#e0443e"

ImagePoint = Tuple[int, int]


class ImageViewer(ctk.CTkFrame):
    """Канва с изображением: колесо меняет масштаб, правая кнопка двигает, левая выбирает пиксель."""

    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        dark = ctk.get_appearance_mode().lower() == "dark"
        self._grid_color = "#3a3a3a" if dark else "#c8c8c8"
        self._canvas = tk.Canvas(self, highlightthickness=0, bg="#1f1f1f" if dark else "#f2f2f2")
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._source: Optional[Image.Image] = None
        self._photo: Optional[ImageTk.PhotoImage] = None
        self._scale = 1.0
        self._origin: Optional[ImagePoint] = None  # canvas position of the image's top-left corner
        self._drag_from: Optional[Tuple[ImagePoint, ImagePoint]] = None
        self._marked: Optional[ImagePoint] = None

        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int]], None]] = None
        self.on_pixel_click: Optional[Callable[[int, int], None]] = None
        self.on_zoom_change: Optional[Callable[[int], None]] = None

        bindings = {
            "<Configure>": lambda _e: self._redraw(),
            "<Motion>": self._on_motion,
            "<Leave>": self._on_leave,
            "<MouseWheel>": self._on_wheel,
            "<Button-4>": self._on_wheel,
            "<Button-5>": self._on_wheel,
            "<ButtonRelease-1>": self._on_click,
            "<ButtonPress-3>": self._on_drag_start,
            "<B3-Motion>": self._on_drag,
            "<ButtonRelease-3>": self._on_drag_end,
        }
        for sequence, handler in bindings.items():
            self._canvas.bind(sequence, handler)

    # ---- Public API ----
    def set_image(self, image: Image.Image, keep_view: bool = False) -> None:
        """Показывает изображение; без `keep_view` (или при смене размера) вписывает его в окно."""
        resized = self._source is None or self._source.size != image.size
        self._source = image
        if resized:
            self._marked = None
        if not keep_view or resized:
            self._scale = self._fit_scale()
            self._origin = None
        self._redraw()

    def set_zoom_to_fit(self) -> None:
        self._scale = self._fit_scale()
        self._origin = None
        self._redraw()

    def set_zoom_percent(self, zoom_percent: int) -> None:
        """Устанавливает масштаб в процентах (10–3200%)."""
        self._scale = self._clamp_scale(zoom_percent / 100.0)
        self._redraw()

    def get_zoom_percent(self) -> int:
        return int(round(self._scale * 100))

    def mark_pixel(self, point: Optional[ImagePoint]) -> None:
        """Подсвечивает пиксель (например, начало отрезка); `None` снимает отметку."""
        self._marked = point
        self._redraw()

    # ---- Rendering ----
    def _redraw(self) -> None:
        self._canvas.delete("all")
        if self._source is None:
            return

        img_w, img_h = self._source.size
        scaled_w = max(1, int(img_w * self._scale))
        scaled_h = max(1, int(img_h * self._scale))
        self._origin = self._clamp_origin(scaled_w, scaled_h)
        ox, oy = self._origin

        self._photo = ImageTk.PhotoImage(self._source.resize((scaled_w, scaled_h), Image.Resampling.NEAREST))
        self._canvas.create_image(ox, oy, image=self._photo, anchor="nw")

        if self._scale >= GRID_MIN_SCALE:
            self._draw_pixel_grid(img_w, img_h)
        if self._marked is not None:
            mx, my = self._marked
            step = self._scale
            self._canvas.create_rectangle(
                ox + mx * step, oy + my * step, ox + (mx + 1) * step, oy + (my + 1) * step,
                outline=MARKER_COLOR, width=2,
            )

    def _draw_pixel_grid(self, img_w: int, img_h: int) -> None:
        ox, oy = self._origin
        right = ox + img_w * self._scale
        bottom = oy + img_h * self._scale
        for col in range(img_w + 1):
            x = ox + col * self._scale
            self._canvas.create_line(x, oy, x, bottom, fill=self._grid_color)
        for row in range(img_h + 1):
            y = oy + row * self._scale
            self._canvas.create_line(ox, y, right, y, fill=self._grid_color)

    def _clamp_origin(self, scaled_w: int, scaled_h: int) -> ImagePoint:
        """Центрирует изображение, если оно меньше канвы, иначе не даёт увести его за край."""
        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())

        def axis(canvas: int, scaled: int, current: Optional[int]) -> int:
            if scaled <= canvas:
                return (canvas - scaled) // 2
            if current is None:
                return 0
            return max(canvas - scaled, min(0, current))

        ox, oy = self._origin if self._origin is not None else (None, None)
        return axis(canvas_w, scaled_w, ox), axis(canvas_h, scaled_h, oy)

    def _fit_scale(self) -> float:
        if self._source is None:
            return 1.0
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._source.size
        return self._clamp_scale(min(canvas_w / img_w, canvas_h / img_h))

    @staticmethod
    def _clamp_scale(scale: float) -> float:
        return max(MIN_SCALE, min(MAX_SCALE, scale))

    def _image_point(self, cx: int, cy: int) -> Optional[ImagePoint]:
        if self._source is None or self._origin is None:
            return None
        ox, oy = self._origin
        x = int((cx - ox) // self._scale)
        y = int((cy - oy) // self._scale)
        img_w, img_h = self._source.size
        if 0 <= x < img_w and 0 <= y < img_h:
            return x, y
        return None

    # ---- Events ----
    def _on_motion(self, event: tk.Event) -> None:
        if self.on_cursor_move is None:
            return
        point = self._image_point(event.x, event.y)
        if point is None:
            self.on_cursor_move(None, None)
        else:
            self.on_cursor_move(*point)

    def _on_leave(self, _event: tk.Event) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(None, None)

    def _on_click(self, event: tk.Event) -> None:
        point = self._image_point(event.x, event.y)
        if point is not None and self.on_pixel_click is not None:
            self.on_pixel_click(*point)

    def _on_wheel(self, event: tk.Event) -> None:
        # X11 reports the wheel as buttons 4 (up) and 5 (down), others use delta
        if self._source is None or self._origin is None:
            return
        num = getattr(event, "num", None)
        if num in (4, 5):
            zoom_in = num == 4
        elif event.delta:
            zoom_in = event.delta > 0
        else:
            return

        old_scale = self._scale
        new_scale = self._clamp_scale(old_scale * (WHEEL_STEP if zoom_in else 1.0 / WHEEL_STEP))
        if abs(new_scale - old_scale) < 1e-6:
            return
        # keep the pixel under the cursor in place
        ox, oy = self._origin
        ix = (event.x - ox) / old_scale
        iy = (event.y - oy) / old_scale
        self._scale = new_scale
        self._origin = (int(round(event.x - ix * new_scale)), int(round(event.y - iy * new_scale)))
        self._redraw()

        if self.on_zoom_change:
            self.on_zoom_change(self.get_zoom_percent())

    def _on_drag_start(self, event: tk.Event) -> None:
        if self._origin is not None:
            self._drag_from = ((event.x, event.y), self._origin)

    def _on_drag(self, event: tk.Event) -> None:
        if self._drag_from is None:
            return
        (sx, sy), (ox, oy) = self._drag_from
        self._origin = (ox + event.x - sx, oy + event.y - sy)
        self._redraw()

    def _on_drag_end(self, _event: tk.Event) -> None:
        self._drag_from = None
