"""Component for authoring an activity: details, questions, options and preview."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from waai_app.constants.quiz_constants import MULTIPLE_CHOICE_OPTION_COUNT
from waai_app.constants.ui_constants import (
    ACTIVITY_SAVED_MESSAGE,
    EDITOR_ADD_MULTIPLE_CHOICE,
    EDITOR_ADD_TRUE_FALSE,
    EDITOR_GOALS_PLACEHOLDER,
    EDITOR_QUESTION_PLACEHOLDER,
    EDITOR_REMOVE_QUESTION,
    EDITOR_SAVE_ACTIVITY,
    EDITOR_STATEMENT_PLACEHOLDER,
    EDITOR_TITLE_PLACEHOLDER,
)
from waai_app.core.activity_builder import ActivityDraft, QuestionDraft
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import WaaiError
from waai_app.core.models import QuestionType
from waai_app.ui.dialog_helpers import confirm_discard_draft, report_error, show_info
from waai_app.ui.question_renderer import render_question_with_options


class ActivityEditorPanel(QWidget):
    """Edits an ActivityDraft; saving validates it and writes it through the manager."""

    def __init__(
        self,
        classroom_manager: ClassroomManager,
        on_finished: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.classroom_manager = classroom_manager
        self.on_finished = on_finished
        self._draft = ActivityDraft()
        self._current_question_id: str | None = None
        self._has_unsaved_changes = False
        self._loading = False

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        details = QFormLayout()
        self.title_input = QLineEdit(self)
        self.title_input.setPlaceholderText(EDITOR_TITLE_PLACEHOLDER)
        self.title_input.textChanged.connect(self._on_details_changed)
        details.addRow("Title", self.title_input)
        self.goals_input = QPlainTextEdit(self)
        self.goals_input.setPlaceholderText(EDITOR_GOALS_PLACEHOLDER)
        self.goals_input.setMaximumHeight(70)
        self.goals_input.textChanged.connect(self._on_details_changed)
        details.addRow("Learning goals", self.goals_input)
        layout.addLayout(details)

        body = QHBoxLayout()

        # Question list
        list_column = QVBoxLayout()
        self.question_list = QListWidget(self)
        self.question_list.currentItemChanged.connect(self._handle_question_selected)
        list_column.addWidget(self.question_list, stretch=1)

        self.add_mc_button = QPushButton(EDITOR_ADD_MULTIPLE_CHOICE, self)
        self.add_mc_button.clicked.connect(lambda: self._add_question(QuestionType.MULTIPLE_CHOICE))
        list_column.addWidget(self.add_mc_button)
        self.add_tf_button = QPushButton(EDITOR_ADD_TRUE_FALSE, self)
        self.add_tf_button.clicked.connect(lambda: self._add_question(QuestionType.TRUE_FALSE))
        list_column.addWidget(self.add_tf_button)
        self.remove_button = QPushButton(EDITOR_REMOVE_QUESTION, self)
        self.remove_button.clicked.connect(self._handle_remove_question)
        list_column.addWidget(self.remove_button)
        body.addLayout(list_column, stretch=1)

        # Question editor
        editor_column = QVBoxLayout()
        self.question_input = QPlainTextEdit(self)
        self.question_input.textChanged.connect(self._on_question_changed)
        editor_column.addWidget(self.question_input)

        self.option_inputs: list[QLineEdit] = []
        options_row = QHBoxLayout()
        for index in range(MULTIPLE_CHOICE_OPTION_COUNT):
            option_input = QLineEdit(self)
            option_input.setPlaceholderText(f"Option {chr(ord('A') + index)}")
            option_input.textChanged.connect(self._on_question_changed)
            options_row.addWidget(option_input)
            self.option_inputs.append(option_input)
        editor_column.addLayout(options_row)

        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Correct answer:", self))
        self.correct_option_combo = QComboBox(self)
        self.correct_option_combo.currentIndexChanged.connect(self._on_question_changed)
        selector_row.addWidget(self.correct_option_combo, stretch=1)
        editor_column.addLayout(selector_row)

        self.preview_view = QWebEngineView(self)
        editor_column.addWidget(self.preview_view, stretch=1)
        body.addLayout(editor_column, stretch=3)

        layout.addLayout(body, stretch=1)

        action_row = QHBoxLayout()
        self.status_label = QLabel("", self)
        action_row.addWidget(self.status_label, stretch=1)
        self.cancel_button = QPushButton("Back to Dashboard", self)
        self.cancel_button.clicked.connect(self._handle_cancel)
        action_row.addWidget(self.cancel_button)
        self.save_button = QPushButton(EDITOR_SAVE_ACTIVITY, self)
        self.save_button.setDefault(True)
        self.save_button.clicked.connect(self._handle_save)
        action_row.addWidget(self.save_button)
        layout.addLayout(action_row)

        self._show_question(None)

    # --- Draft lifecycle ---

    def load_new(self) -> None:
        self._load_draft(ActivityDraft())

    def load_activity(self, activity_id: str) -> None:
        try:
            activity = self.classroom_manager.get_activity(activity_id)
        except WaaiError as exc:
            report_error(self, "Activity", exc)
            return
        self._load_draft(ActivityDraft.from_activity(activity))

    def _load_draft(self, draft: ActivityDraft) -> None:
        self._draft = draft
        self._loading = True
        self.title_input.setText(draft.title)
        self.goals_input.setPlainText(draft.goals)
        self._loading = False
        self._rebuild_question_list()
        first = draft.questions[0].id if draft.questions else None
        self._select_question(first)
        self._has_unsaved_changes = False
        self.status_label.setText("Editing existing activity." if not draft.is_new else "New activity.")

    def check_unsaved_changes(self) -> bool:
        """Return True when it is fine to leave the editor."""
        if not self._has_unsaved_changes:
            return True
        return confirm_discard_draft(self)

    # --- Question list ---

    def _rebuild_question_list(self) -> None:
        self._loading = True
        self.question_list.clear()
        for number, draft in enumerate(self._draft.questions, start=1):
            item = QListWidgetItem(self._question_label(number, draft), self.question_list)
            item.setData(Qt.UserRole, draft.id)
        self._loading = False

    @staticmethod
    def _question_label(number: int, draft: QuestionDraft) -> str:
        kind = "True/False" if draft.type is QuestionType.TRUE_FALSE else "Multiple choice"
        preview = draft.text.strip().splitlines()[0][:40] if draft.text.strip() else "(empty)"
        return f"{number}. {kind}: {preview}"

    def _select_question(self, question_id: str | None) -> None:
        for row in range(self.question_list.count()):
            item = self.question_list.item(row)
            if item.data(Qt.UserRole) == question_id:
                self.question_list.setCurrentItem(item)
                return
        self._show_question(None)

    def _handle_question_selected(self, current: QListWidgetItem | None, _previous) -> None:
        if self._loading:
            return
        self._show_question(current.data(Qt.UserRole) if current is not None else None)

    def _add_question(self, question_type: QuestionType) -> None:
        if question_type is QuestionType.TRUE_FALSE:
            draft = self._draft.add_true_false()
        else:
            draft = self._draft.add_multiple_choice()
        self._has_unsaved_changes = True
        self._rebuild_question_list()
        self._select_question(draft.id)

    def _handle_remove_question(self) -> None:
        if self._current_question_id is None:
            show_info(self, "No question", "Select a question to remove.")
            return
        self._draft.remove_question(self._current_question_id)
        self._has_unsaved_changes = True
        self._rebuild_question_list()
        first = self._draft.questions[0].id if self._draft.questions else None
        self._select_question(first)

    # --- Question editor ---

    def _show_question(self, question_id: str | None) -> None:
        self._current_question_id = question_id
        draft = self._draft.question(question_id) if question_id is not None else None
        self._loading = True
        enabled = draft is not None
        self.question_input.setEnabled(enabled)
        self.correct_option_combo.setEnabled(enabled)
        self.correct_option_combo.clear()
        self.correct_option_combo.addItem("Select…", userData=None)
        if draft is None:
            self.question_input.setPlainText("")
            for option_input in self.option_inputs:
                option_input.setText("")
                option_input.setEnabled(False)
            self._loading = False
            self.preview_view.setHtml(render_question_with_options("", []))
            return

        is_true_false = draft.type is QuestionType.TRUE_FALSE
        self.question_input.setPlaceholderText(
            EDITOR_STATEMENT_PLACEHOLDER if is_true_false else EDITOR_QUESTION_PLACEHOLDER
        )
        self.question_input.setPlainText(draft.text)
        for index, option_input in enumerate(self.option_inputs):
            visible = index < len(draft.options)
            option_input.setVisible(visible)
            option_input.setEnabled(visible and not is_true_false)
            option_input.setText(draft.options[index].text if visible else "")
        for index, option in enumerate(draft.options):
            label = option.text if is_true_false else chr(ord("A") + index)
            self.correct_option_combo.addItem(label, userData=option.id)
            if option.is_correct:
                self.correct_option_combo.setCurrentIndex(index + 1)
        self._loading = False
        self._refresh_preview()

    def _on_details_changed(self) -> None:
        if self._loading:
            return
        self._draft.title = self.title_input.text()
        self._draft.goals = self.goals_input.toPlainText()
        self._has_unsaved_changes = True

    def _on_question_changed(self) -> None:
        if self._loading or self._current_question_id is None:
            return
        draft = self._draft.question(self._current_question_id)
        draft.text = self.question_input.toPlainText()
        if draft.type is QuestionType.MULTIPLE_CHOICE:
            for option, option_input in zip(draft.options, self.option_inputs):
                option.text = option_input.text()
        correct_id = self.correct_option_combo.currentData()
        if correct_id is not None:
            draft.mark_correct(correct_id)
        self._has_unsaved_changes = True
        item = self.question_list.currentItem()
        if item is not None:
            item.setText(self._question_label(self.question_list.row(item) + 1, draft))
        self._refresh_preview()

    def _refresh_preview(self) -> None:
        if self._current_question_id is None:
            return
        draft = self._draft.question(self._current_question_id)
        correct_index = next((index for index, option in enumerate(draft.options) if option.is_correct), None)
        html = render_question_with_options(draft.text, [option.text for option in draft.options], correct_index)
        self.preview_view.setHtml(html)

    # --- Actions ---

    def _handle_save(self) -> None:
        was_new = self._draft.is_new
        try:
            activity = self.classroom_manager.save_draft(self._draft)
        except WaaiError as exc:
            report_error(self, "Activity not saved", exc)
            return
        self._has_unsaved_changes = False
        self.status_label.setText(f"Saved \"{activity.title}\".")
        if was_new:
            show_info(self, "Activity created", ACTIVITY_SAVED_MESSAGE)
        self.on_finished()

    def _handle_cancel(self) -> None:
        if not self.check_unsaved_changes():
            return
        self._has_unsaved_changes = False
        self.on_finished()

    def apply_font_size(self, font_size: int) -> None:
        self.question_input.setStyleSheet(f"font-size: {font_size}pt;")
        self.question_list.setStyleSheet(f"font-size: {font_size}pt;")
