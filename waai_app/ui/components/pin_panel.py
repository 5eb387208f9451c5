"""Component for creating or entering the teacher PIN with an on-screen keypad."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGridLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from waai_app.constants.ui_constants import (
    PIN_CONFIRM_PROMPT,
    PIN_ENTRY_PROMPT,
    PIN_SETUP_PROMPT,
)
from waai_app.core.access_gate import GateState, TeacherPinGate
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import GateMismatchError, WaaiError
from waai_app.styling.styles import Styles
from waai_app.ui.dialog_helpers import report_error

_KEYPAD_LAYOUT = (
    ("1", "2", "3"),
    ("4", "5", "6"),
    ("7", "8", "9"),
    ("C", "0", "⌫"),
)


class PinPanel(QWidget):
    """Drives a TeacherPinGate from keypad buttons and the keyboard."""

    def __init__(
        self,
        classroom_manager: ClassroomManager,
        on_passed: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.classroom_manager = classroom_manager
        self.on_passed = on_passed
        self._gate: TeacherPinGate | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        self.prompt_label = QLabel(PIN_ENTRY_PROMPT, self)
        self.prompt_label.setAlignment(Qt.AlignCenter)
        self.prompt_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.prompt_label)

        self.display_label = QLabel(self)
        self.display_label.setAlignment(Qt.AlignCenter)
        self.display_label.setStyleSheet(Styles.get_pin_display_style())
        layout.addWidget(self.display_label)

        self.status_label = QLabel("", self)
        self.status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.status_label)

        keypad = QGridLayout()
        for row_index, row in enumerate(_KEYPAD_LAYOUT):
            for column_index, label in enumerate(row):
                button = QPushButton(label, self)
                button.setMinimumSize(64, 64)
                button.clicked.connect(lambda _checked=False, key=label: self._handle_key(key))
                keypad.addWidget(button, row_index, column_index)
        layout.addLayout(keypad)

    def start(self) -> None:
        """Create a fresh gate for the signed-in teacher."""
        self._gate = self.classroom_manager.create_teacher_gate()
        self.status_label.setText("")
        self._refresh()
        if self._gate.passed:
            self.on_passed()

    def keyPressEvent(self, event) -> None:  # noqa: N802 - Qt override
        text = event.text()
        if text.isdigit():
            self._handle_key(text)
        elif event.key() == Qt.Key_Backspace:
            self._handle_key("⌫")
        else:
            super().keyPressEvent(event)

    def _handle_key(self, key: str) -> None:
        if self._gate is None:
            return
        try:
            if key == "C":
                self._gate.clear()
            elif key == "⌫":
                self._gate.backspace()
            else:
                self._gate.press_digit(key)
                self.status_label.setText("")
        except GateMismatchError as exc:
            self.status_label.setText(exc.user_message)
        except WaaiError as exc:
            report_error(self, "PIN", exc)
        self._refresh()
        if self._gate.passed:
            self.on_passed()

    def _refresh(self) -> None:
        if self._gate is None:
            return
        if not self._gate.is_setup:
            prompt = PIN_ENTRY_PROMPT
        elif self._gate.state is GateState.AWAITING_CONFIRMATION:
            prompt = PIN_CONFIRM_PROMPT
        else:
            prompt = PIN_SETUP_PROMPT
        self.prompt_label.setText(prompt)
        self.display_label.setText(self._gate.masked)
