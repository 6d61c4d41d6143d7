"""Dark/light palettes for the connection screen.

Usage:
    from embyconnect.ui.theme import theme_manager

    palette = theme_manager.palette
    label.setStyleSheet(f"color: {palette.error};")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QGuiApplication

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThemePalette:
    """Named color palette. All values are CSS color strings."""

    name: str
    background: str
    surface: str  # Input background
    border: str
    text: str
    text_secondary: str  # Normal status text
    text_disabled: str
    error: str  # Error status text
    accent: str  # Emby green, primary button


DARK_PALETTE = ThemePalette(
    name="dark",
    background="#1e1e1e",
    surface="#2d2d2d",
    border="#444444",
    text="#e0e0e0",
    text_secondary="#aaaaaa",
    text_disabled="#666666",
    error="#F44336",
    accent="#52B54B",
)

LIGHT_PALETTE = ThemePalette(
    name="light",
    background="#f5f5f5",
    surface="#ffffff",
    border="#cccccc",
    text="#1a1a1a",
    text_secondary="#555555",
    text_disabled="#999999",
    error="#D32F2F",
    accent="#3D8B37",
)


class ThemeManager(QObject):
    """Tracks the system color scheme and exposes the matching palette.

    Emits ``theme_changed`` when the palette switches.
    """

    theme_changed = Signal()

    def __init__(self) -> None:
        super().__init__()
        self._palette = DARK_PALETTE

    @property
    def palette(self) -> ThemePalette:
        """Return the current color palette."""
        return self._palette

    def detect_system_theme(self) -> ThemePalette:
        """Detect the system color scheme and return the matching palette.

        Uses Qt 6.5+ ``QStyleHints.colorScheme()``; falls back to dark.
        """
        raw_app = QGuiApplication.instance()
        if raw_app is None:
            return DARK_PALETTE
        try:
            scheme = cast(QGuiApplication, raw_app).styleHints().colorScheme()
        except AttributeError:
            logger.debug("System theme detection not available, using dark theme")
            return DARK_PALETTE
        return LIGHT_PALETTE if scheme == Qt.ColorScheme.Light else DARK_PALETTE

    def apply_theme(self, palette: ThemePalette | None = None) -> None:
        """Switch to a palette, auto-detecting from the system if None."""
        if palette is None:
            palette = self.detect_system_theme()
        changed = palette.name != self._palette.name
        self._palette = palette
        logger.debug("Theme applied: %s", palette.name)
        if changed:
            self.theme_changed.emit()

    def connect_system_theme_changes(self) -> None:
        """Re-apply the theme when the system color scheme changes."""
        raw_app = QGuiApplication.instance()
        if raw_app is None:
            return
        try:
            cast(QGuiApplication, raw_app).styleHints().colorSchemeChanged.connect(
                lambda _scheme: self.apply_theme()
            )
        except AttributeError:
            logger.debug("System theme change signal not available")


# Module-level singleton
theme_manager = ThemeManager()
