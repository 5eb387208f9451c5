"""Dialog for adding a child profile with an avatar and optional PIN."""

from __future__ import annotations

from PySide6.QtCore import QRegularExpression
from PySide6.QtGui import QRegularExpressionValidator
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from waai_app.constants.quiz_constants import PIN_LENGTH
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import WaaiError
from waai_app.core.models import Child
from waai_app.ui.dialog_helpers import report_error


class AddChildDialog(QDialog):
    """Collects name, avatar and an optional confirmed PIN, then stores the child."""

    def __init__(self, classroom_manager: ClassroomManager, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add Child")
        self.setModal(True)
        self.setMinimumWidth(360)
        self.classroom_manager = classroom_manager
        self.created_child: Child | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        form = QFormLayout()
        self.name_input = QLineEdit(self)
        self.name_input.setPlaceholderText("Child's name")
        form.addRow("Name", self.name_input)

        self.avatar_combo = QComboBox(self)
        self.avatar_combo.addItem("Select an avatar…", userData=None)
        for avatar in self.classroom_manager.get_avatars():
            self.avatar_combo.addItem(avatar.description, userData=avatar.id)
        form.addRow("Avatar", self.avatar_combo)

        pin_validator = QRegularExpressionValidator(QRegularExpression(f"\\d{{0,{PIN_LENGTH}}}"), self)
        self.pin_input = QLineEdit(self)
        self.pin_input.setEchoMode(QLineEdit.Password)
        self.pin_input.setValidator(pin_validator)
        self.pin_input.setPlaceholderText("Optional")
        form.addRow(f"{PIN_LENGTH}-digit PIN", self.pin_input)

        self.pin_confirm_input = QLineEdit(self)
        self.pin_confirm_input.setEchoMode(QLineEdit.Password)
        self.pin_confirm_input.setValidator(pin_validator)
        form.addRow("Confirm PIN", self.pin_confirm_input)
        layout.addLayout(form)

        button_row = QHBoxLayout()
        button_row.addStretch()
        self.cancel_button = QPushButton("Cancel", self)
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.save_button = QPushButton("Add Child", self)
        self.save_button.setDefault(True)
        self.save_button.clicked.connect(self._handle_save)
        button_row.addWidget(self.save_button)
        layout.addLayout(button_row)

    def _handle_save(self) -> None:
        pin = self.pin_input.text()
        try:
            self.created_child = self.classroom_manager.add_child(
                self.name_input.text(),
                self.avatar_combo.currentData() or "",
                pin or None,
                self.pin_confirm_input.text() if pin else None,
            )
        except WaaiError as exc:
            report_error(self, "Could not add child", exc)
            return
        self.accept()
