"""Color palette for the teacher console supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the console."""

    TEXT_PRIMARY = ThemeColors(light="#2D2A4A", dark="#F4F1FF")
    TEXT_SECONDARY = ThemeColors(light="#7A7799", dark="#B3AFD1")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1F1B33")
    BACKGROUND_SECONDARY = ThemeColors(light="#F4F1FF", dark="#2A2545")

    # Waai brand purple
    ACCENT_PRIMARY = ThemeColors(light="#6C4CF1", dark="#9C86FF")

    SUCCESS = ThemeColors(light="#22A45D", dark="#5FD68E")
    ERROR = ThemeColors(light="#E04848", dark="#FF7A7A")

    BORDER_PRIMARY = ThemeColors(light="#E4DEFD", dark="#4A4366")

    BUTTON_PRIMARY_BG = ThemeColors(light="#6C4CF1", dark="#9C86FF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#1F1B33")
    BUTTON_SECONDARY_BG = ThemeColors(light="#EDE8FF", dark="#3A3358")
    BUTTON_HOVER_BG = ThemeColors(light="#DCD3FF", dark="#4A4270")
