"""Qt stylesheets for the teacher console, built from the active theme."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Stylesheet fragments for the console window and its panels."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT, font_size: int = 10) -> str:
        return "\n".join(
            (
                Styles._surface_rules(theme, font_size),
                Styles._button_rules(theme),
                Styles._field_rules(theme),
                Styles._container_rules(theme),
            )
        )

    @staticmethod
    def _surface_rules(theme: Theme, font_size: int) -> str:
        text = ColorPalette.TEXT_PRIMARY.get(theme)
        return f"""
            QMainWindow {{ background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)}; }}
            QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {text};
                font-family: 'Nunito', 'Segoe UI', sans-serif;
                font-size: {font_size}pt;
            }}
            QToolTip {{ color: {text}; border: 1px solid {ColorPalette.ACCENT_PRIMARY.get(theme)}; }}
        """

    @staticmethod
    def _button_rules(theme: Theme) -> str:
        accent = ColorPalette.BUTTON_PRIMARY_BG.get(theme)
        return f"""
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                border: none;
                border-radius: 10px;
                padding: 8px 14px;
            }}
            QPushButton:hover {{ background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)}; }}
            QPushButton:checked, QPushButton:default {{
                background-color: {accent};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
            }}
            QPushButton:disabled {{ color: {ColorPalette.TEXT_SECONDARY.get(theme)}; }}
        """

    @staticmethod
    def _field_rules(theme: Theme) -> str:
        return f"""
            QLineEdit, QPlainTextEdit, QSpinBox, QDoubleSpinBox, QComboBox {{
                border: 2px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 8px;
                padding: 5px;
            }}
            QLineEdit:focus, QPlainTextEdit:focus, QComboBox:focus {{
                border-color: {ColorPalette.ACCENT_PRIMARY.get(theme)};
            }}
        """

    @staticmethod
    def _container_rules(theme: Theme) -> str:
        border = ColorPalette.BORDER_PRIMARY.get(theme)
        return f"""
            QListWidget, QTableWidget {{ border: 2px solid {border}; border-radius: 8px; }}
            QListWidget::item:selected, QTableWidget::item:selected {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QHeaderView::section {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                border: none;
                padding: 4px;
                font-weight: bold;
            }}
            QGroupBox {{ border: 2px solid {border}; border-radius: 10px; margin-top: 8px; padding-top: 12px; }}
            QGroupBox::title {{ subcontrol-origin: margin; left: 12px; padding: 0 4px; }}
        """

    @staticmethod
    def get_large_label_style(theme: Theme = Theme.LIGHT) -> str:
        return f"font-size: 16pt; font-weight: bold; color: {ColorPalette.ACCENT_PRIMARY.get(theme)};"

    @staticmethod
    def get_pin_display_style() -> str:
        return "font-size: 28pt; letter-spacing: 8px;"

    @staticmethod
    def get_result_color(is_correct: bool | None, theme: Theme = Theme.LIGHT) -> str:
        """Text color for a reviewed answer; unanswered questions are muted."""
        if is_correct is None:
            return ColorPalette.TEXT_SECONDARY.get(theme)
        return (ColorPalette.SUCCESS if is_correct else ColorPalette.ERROR).get(theme)
