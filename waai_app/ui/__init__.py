"""Qt UI components for the teacher console."""

from .dialog_helpers import (
    confirm_delete_activity,
    confirm_discard_draft,
    report_error,
    show_error,
    show_info,
    show_warning,
)
from .question_renderer import render_question_with_options
from .teacher_main_window import TeacherMainWindow

__all__ = [
    "TeacherMainWindow",
    "confirm_delete_activity",
    "confirm_discard_draft",
    "report_error",
    "show_error",
    "show_info",
    "show_warning",
    "render_question_with_options",
]
