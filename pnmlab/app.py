from __future__ import annotations

from pathlib import Path
from typing import Optional

import customtkinter as ctk

from pnmlab.config import AppConfig
from pnmlab.controllers.app_controller import AppController
from pnmlab.models.image_model import PnmImage
from pnmlab.ui.bottom_bar import BottomBar
from pnmlab.ui.image_viewer import ImageViewer
from pnmlab.ui.sidebar import Sidebar


class PnmViewerApp(ctk.CTk):
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        image: Optional[PnmImage] = None,
        path: Optional[Path] = None,
    ) -> None:
        super().__init__()
        config = config or AppConfig()
        ctk.set_appearance_mode(config.appearance_mode)
        ctk.set_default_color_theme(config.color_theme)

        self.title("PNM Lab")
        self.minsize(900, 600)

        # root layout: left viewer, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self)
        self._controller.bind_events()

        if image is not None:
            # canvas size is known only after the first layout pass
            self.after(50, lambda: self._controller.show_image(image, path))
