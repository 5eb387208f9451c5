"""Settings dialog for configuring console preferences."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QDoubleSpinBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from waai_app.styling.color_palette import Theme


class SettingsDialog(QDialog):
    """Dialog for configuring application settings."""

    def __init__(
        self,
        parent=None,
        ui_font_size: int = 10,
        theme: Theme = Theme.LIGHT,
        feedback_delay_ms: int = 2000,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(400)

        self._ui_font_size = ui_font_size
        self._theme = theme
        self._feedback_delay_ms = max(0, feedback_delay_ms)

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Appearance group
        appearance_group = QGroupBox("Appearance")
        appearance_layout = QVBoxLayout()
        appearance_group.setLayout(appearance_layout)

        ui_font_row = QHBoxLayout()
        ui_font_label = QLabel("UI Font Size:")
        ui_font_label.setToolTip("Font size for buttons, lists and forms")
        self.ui_font_spinbox = QSpinBox()
        self.ui_font_spinbox.setRange(8, 24)
        self.ui_font_spinbox.setValue(self._ui_font_size)
        self.ui_font_spinbox.setSuffix(" pt")
        ui_font_row.addWidget(ui_font_label)
        ui_font_row.addStretch()
        ui_font_row.addWidget(self.ui_font_spinbox)
        appearance_layout.addLayout(ui_font_row)

        theme_row = QHBoxLayout()
        theme_row.addWidget(QLabel("Theme:"))
        theme_row.addStretch()
        self.theme_combo = QComboBox()
        self.theme_combo.addItem("Light", userData=Theme.LIGHT)
        self.theme_combo.addItem("Dark", userData=Theme.DARK)
        self.theme_combo.setCurrentIndex(0 if self._theme == Theme.LIGHT else 1)
        theme_row.addWidget(self.theme_combo)
        appearance_layout.addLayout(theme_row)

        layout.addWidget(appearance_group)

        # Activity group
        activity_group = QGroupBox("Activities")
        activity_layout = QVBoxLayout()
        activity_group.setLayout(activity_layout)

        delay_row = QHBoxLayout()
        delay_label = QLabel("Feedback time before next question:")
        delay_label.setToolTip("How long children see whether their answer was right. Applies to newly started activities.")
        self.delay_spinbox = QDoubleSpinBox()
        self.delay_spinbox.setRange(0.5, 10.0)
        self.delay_spinbox.setSingleStep(0.5)
        self.delay_spinbox.setDecimals(1)
        self.delay_spinbox.setSuffix(" s")
        self.delay_spinbox.setValue(self._feedback_delay_ms / 1000)
        delay_row.addWidget(delay_label)
        delay_row.addStretch()
        delay_row.addWidget(self.delay_spinbox)
        activity_layout.addLayout(delay_row)

        layout.addWidget(activity_group)

        # Buttons
        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.apply_button.setDefault(True)
        button_row.addWidget(self.apply_button)

        layout.addLayout(button_row)

    def get_ui_font_size(self) -> int:
        return self.ui_font_spinbox.value()

    def get_theme(self) -> Theme:
        return self.theme_combo.currentData()

    def get_feedback_delay_ms(self) -> int:
        """Get the feedback delay in milliseconds."""
        return int(round(self.delay_spinbox.value() * 1000))
