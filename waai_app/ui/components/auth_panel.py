"""Component for teacher login and registration."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from waai_app.constants.ui_constants import (
    AUTH_LOGIN_BUTTON,
    AUTH_LOGIN_TITLE,
    AUTH_REGISTER_BUTTON,
    AUTH_REGISTER_TITLE,
    AUTH_SWITCH_TO_LOGIN,
    AUTH_SWITCH_TO_REGISTER,
)
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import WaaiError
from waai_app.core.models import Teacher
from waai_app.styling.styles import Styles
from waai_app.ui.dialog_helpers import report_error


class AuthPanel(QWidget):
    """Login form that can switch to account registration."""

    def __init__(
        self,
        classroom_manager: ClassroomManager,
        on_authenticated: Callable[[Teacher], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.classroom_manager = classroom_manager
        self.on_authenticated = on_authenticated
        self._register_mode = False

        self._build_ui()
        self._apply_mode()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setAlignment(Qt.AlignCenter)
        self.setLayout(layout)

        self.title_label = QLabel(self)
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.title_label)

        form = QFormLayout()
        self.name_label = QLabel("Name", self)
        self.name_input = QLineEdit(self)
        form.addRow(self.name_label, self.name_input)

        self.email_input = QLineEdit(self)
        self.email_input.setPlaceholderText("teacher@example.com")
        form.addRow("Email", self.email_input)

        self.password_input = QLineEdit(self)
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.returnPressed.connect(self._handle_submit)
        form.addRow("Password", self.password_input)
        layout.addLayout(form)

        self.submit_button = QPushButton(self)
        self.submit_button.setDefault(True)
        self.submit_button.clicked.connect(self._handle_submit)
        layout.addWidget(self.submit_button)

        self.switch_button = QPushButton(self)
        self.switch_button.setFlat(True)
        self.switch_button.clicked.connect(self._toggle_mode)
        layout.addWidget(self.switch_button)

    def _toggle_mode(self) -> None:
        self._register_mode = not self._register_mode
        self._apply_mode()

    def _apply_mode(self) -> None:
        self.title_label.setText(AUTH_REGISTER_TITLE if self._register_mode else AUTH_LOGIN_TITLE)
        self.submit_button.setText(AUTH_REGISTER_BUTTON if self._register_mode else AUTH_LOGIN_BUTTON)
        self.switch_button.setText(AUTH_SWITCH_TO_LOGIN if self._register_mode else AUTH_SWITCH_TO_REGISTER)
        self.name_label.setVisible(self._register_mode)
        self.name_input.setVisible(self._register_mode)

    def _handle_submit(self) -> None:
        email = self.email_input.text()
        password = self.password_input.text()
        try:
            if self._register_mode:
                teacher = self.classroom_manager.register(self.name_input.text(), email, password)
            else:
                teacher = self.classroom_manager.login(email, password)
        except WaaiError as exc:
            title = "Registration failed" if self._register_mode else "Login failed"
            report_error(self, title, exc)
            return

        self.reset_state()
        self.on_authenticated(teacher)

    def reset_state(self) -> None:
        self.password_input.clear()
        self.name_input.clear()
