"""Message boxes and confirmations used across the teacher console."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget

from waai_app.core.errors import GatewayError, WaaiError


def _ask(parent: QWidget, title: str, question: str) -> bool:
    """Yes/No question defaulting to No."""
    reply = QMessageBox.question(
        parent,
        title,
        question,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def _message(
    parent: QWidget,
    icon: QMessageBox.Icon,
    title: str,
    text: str,
    font_point_size: int | None = None,
) -> None:
    box = QMessageBox(icon, title, text, QMessageBox.Ok, parent)
    if font_point_size:
        box.setStyleSheet(f"QLabel, QPushButton {{ font-size: {font_point_size}pt; }}")
    box.exec()


def confirm_delete_activity(parent: QWidget, activity_title: str) -> bool:
    return _ask(
        parent,
        "Delete Activity",
        f"Delete \"{activity_title}\"? Answers children already gave stay stored.",
    )


def confirm_discard_draft(parent: QWidget) -> bool:
    return _ask(parent, "Unsaved Activity", "This activity has not been saved. Leave the editor anyway?")


def report_error(parent: QWidget, title: str, exc: WaaiError) -> None:
    """Show a core error; only gateway failures get the error icon."""
    if isinstance(exc, GatewayError):
        show_error(parent, title, exc.user_message)
    else:
        show_warning(parent, title, exc.user_message)


def show_error(parent: QWidget, title: str, message: str) -> None:
    _message(parent, QMessageBox.Critical, title, message)


def show_info(parent: QWidget, title: str, message: str, *, font_point_size: int | None = None) -> None:
    _message(parent, QMessageBox.Information, title, message, font_point_size)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    _message(parent, QMessageBox.Warning, title, message)
