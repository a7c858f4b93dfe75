from __future__ import annotations

from typing import Callable, Dict, Optional

import customtkinter as ctk

FIT_LABEL = "Fit"
# integer multiples keep every source pixel a square block on screen
ZOOM_PRESETS: Dict[str, int] = {f"{p}%": p for p in (100, 200, 400, 800, 1600)}
ZOOM_MIN_PERCENT = 10
ZOOM_MAX_PERCENT = 3200


class BottomBar(ctk.CTkFrame):
    """Нижняя панель: масштаб, координаты курсора и строка статуса."""

    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        self.on_zoom_change: Optional[Callable[[int], None]] = None
        self.on_zoom_preset: Optional[Callable[[int], None]] = None
        self.on_zoom_fit: Optional[Callable[[], None]] = None

        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="Масштаб").grid(row=0, column=0, padx=(10, 6), pady=8, sticky="w")

        self._percent_text = ctk.StringVar(value="100%")
        self._slider = ctk.CTkSlider(
            self,
            from_=ZOOM_MIN_PERCENT,
            to=ZOOM_MAX_PERCENT,
            number_of_steps=ZOOM_MAX_PERCENT - ZOOM_MIN_PERCENT,
            command=self._slider_moved,
        )
        self._slider.set(100)
        self._slider.grid(row=0, column=1, padx=6, pady=8, sticky="ew")
        ctk.CTkLabel(self, textvariable=self._percent_text, width=56, anchor="w").grid(
            row=0, column=2, padx=(6, 12), pady=8, sticky="w"
        )

        self._presets = ctk.CTkSegmentedButton(
            self, values=[FIT_LABEL, *ZOOM_PRESETS], command=self._preset_chosen
        )
        self._presets.set(FIT_LABEL)
        self._presets.grid(row=0, column=3, padx=6, pady=8, sticky="w")

        self._position_text = ctk.StringVar(value="x: —  y: —")
        ctk.CTkLabel(self, textvariable=self._position_text, width=110, anchor="w").grid(
            row=0, column=4, padx=6, pady=8, sticky="w"
        )

        self._status_text = ctk.StringVar(value="")
        ctk.CTkLabel(self, textvariable=self._status_text, anchor="e").grid(
            row=0, column=5, padx=(6, 10), pady=8, sticky="e"
        )

    def set_zoom_percent(self, percent: int) -> None:
        self._slider.set(percent)
        self._percent_text.set(f"{percent}%")
        label = f"{percent}%"
        if label in ZOOM_PRESETS:
            self._presets.set(label)

    def set_position(self, x: Optional[int], y: Optional[int]) -> None:
        if x is None or y is None:
            self._position_text.set("x: —  y: —")
        else:
            self._position_text.set(f"x: {x}  y: {y}")

    def set_status(self, text: str) -> None:
        self._status_text.set(text)

    def _slider_moved(self, value: float) -> None:
        percent = int(round(value))
        self._percent_text.set(f"{percent}%")
        if self.on_zoom_change:
            self.on_zoom_change(percent)

    def _preset_chosen(self, label: str) -> None:
        if label == FIT_LABEL:
            if self.on_zoom_fit:
                self.on_zoom_fit()
        elif label in ZOOM_PRESETS and self.on_zoom_preset:
            self.on_zoom_preset(ZOOM_PRESETS[label])
