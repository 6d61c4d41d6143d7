"""Design tokens: spacing, sizing, typography.

Color tokens live in theme.py (ThemePalette). Layout tokens live here.

Usage:
    from embyconnect.ui.tokens import spacing, typography, sizing

    layout.setContentsMargins(spacing.xl, spacing.xl, spacing.xl, spacing.xl)
    header.setStyleSheet(f"font-size: {typography.heading}pt;")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpacingTokens:
    """Spacing scale based on a 4px base unit."""

    sm: int = 4  # Between label and field
    md: int = 8  # Between controls in a row
    lg: int = 12  # Between rows
    xl: int = 24  # Window padding


@dataclass(frozen=True)
class TypographyTokens:
    """Font size scale in points and font family stack."""

    font_family: str = "'SF Pro Text', 'Segoe UI', 'Helvetica Neue', sans-serif"
    small: int = 10  # Status text
    body: int = 11  # Input and buttons
    heading: int = 18  # Welcome heading


@dataclass(frozen=True)
class SizingTokens:
    """Widget sizing constants in pixels."""

    border_radius_md: int = 6  # Inputs, buttons
    input_min_width: int = 280  # Address field
    window_min_width: int = 480
    button_min_width: int = 110


spacing = SpacingTokens()
typography = TypographyTokens()
sizing = SizingTokens()
