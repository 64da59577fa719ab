"""Fullscreen carousel window driving the controller from a fixed-rate QTimer."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QRectF, Qt, QTimer
from PyQt6.QtGui import QColor, QFont, QFontMetrics, QPainter, QPixmap
from PyQt6.QtWidgets import QWidget

from launcher_client.carousel import CarouselState, crop_square
from launcher_client.gamepad import GamepadSampler
from launcher_client.settings import LauncherSettings
from launcher_core.app_controller import AppController
from launcher_core.controller_mode import AppMode

_LOGGER = logging.getLogger("ArcadeLauncher.Client")

_BACKGROUND = QColor(0, 0, 0)
_PLACEHOLDER = QColor(48, 50, 58)
_CAPTION = QColor(255, 255, 255)


def load_thumbnail(path: Optional[Path]) -> Optional[QPixmap]:
    """Load ``path`` and crop it to its centered square; None when missing or unreadable."""
    if path is None:
        return None
    pixmap = QPixmap(str(path))
    if pixmap.isNull():
        _LOGGER.warning("Could not load thumbnail %s", path)
        return None
    x, y, side = crop_square(pixmap.width(), pixmap.height())
    return pixmap.copy(x, y, side, side)


class LauncherWindow(QWidget):
    """Ticks the controller, eases the carousel and paints the catalog."""

    def __init__(
        self,
        controller: AppController,
        sampler: GamepadSampler,
        settings: LauncherSettings,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._sampler = sampler
        self._settings = settings
        self._carousel = CarouselState(len(controller.entries))
        self._thumbnails: List[Optional[QPixmap]] = [
            load_thumbnail(getattr(entry, "thumbnail_path", None)) for entry in controller.entries
        ]
        self._font = QFont()
        self._font.setPixelSize(settings.font_size)
        self._last_mode = controller.mode

        self.setWindowTitle(settings.window_title)
        self.setCursor(Qt.CursorShape.BlankCursor)

        self._tick_timer = QTimer(self)
        self._tick_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._tick_timer.setInterval(settings.tick_interval_ms)
        self._tick_timer.timeout.connect(self._on_tick)

    @property
    def carousel(self) -> CarouselState:
        return self._carousel

    def show_launcher(self) -> None:
        if self._settings.fullscreen:
            self.showFullScreen()
        else:
            self.resize(1280, 720)
            self.showNormal()

    def start(self) -> None:
        _LOGGER.debug("Tick loop started (interval=%dms)", self._settings.tick_interval_ms)
        self._tick_timer.start()

    def stop(self) -> None:
        self._tick_timer.stop()

    def _on_tick(self) -> None:
        mode = self._controller.tick(self._sampler.sample())
        if mode is AppMode.BROWSING:
            if self._last_mode is AppMode.RUNNING:
                self._restore_window()
            self._carousel.update(self._controller.selected_index)
        self._last_mode = mode
        self.update()

    def _restore_window(self) -> None:
        _LOGGER.debug("Child exited; restoring launcher window")
        self.show_launcher()
        self.raise_()
        self.activateWindow()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.stop()
        super().closeEvent(event)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            width, height = self.width(), self.height()
            painter.fillRect(self.rect(), _BACKGROUND)
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            for tile in self._carousel.placements(width, height):
                half = tile.size / 2
                if tile.center_x + half < 0 or tile.center_x - half > width:
                    continue
                rect = QRectF(tile.center_x - half, tile.center_y - half, tile.size, tile.size)
                pixmap = self._thumbnails[tile.index]
                if pixmap is not None:
                    painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))
                else:
                    painter.fillRect(rect, _PLACEHOLDER)
                if tile.brightness < 1.0:
                    shade = QColor(0, 0, 0, int(round((1.0 - tile.brightness) * 255)))
                    painter.fillRect(rect, shade)

            entry = self._controller.selected_entry
            caption = getattr(entry, "caption", entry.name)
            metrics = QFontMetrics(self._font)
            painter.setFont(self._font)
            painter.setPen(_CAPTION)
            text_width = metrics.horizontalAdvance(caption)
            painter.drawText(int(width / 2 - text_width / 2), int(height - metrics.height()), caption)
        finally:
            painter.end()
