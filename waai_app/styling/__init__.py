"""Styling module for the Waai Classroom console."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
