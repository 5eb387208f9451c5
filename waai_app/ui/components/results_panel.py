"""Component showing a child's results per activity with a question review."""

from __future__ import annotations

from typing import Callable

from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import WaaiError
from waai_app.core.results import ActivityResultSummary
from waai_app.styling.styles import Styles
from waai_app.ui.dialog_helpers import report_error
from waai_app.utils.time_utils import format_timestamp

_COLUMNS = ("Activity", "Questions", "Score", "Started", "Completed")


class ResultsPanel(QWidget):
    """Results table for one child; selecting a row lists every question's outcome."""

    def __init__(
        self,
        classroom_manager: ClassroomManager,
        on_back: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.classroom_manager = classroom_manager
        self.on_back = on_back
        self._summaries: list[ActivityResultSummary] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Child:", self))
        self.child_combo = QComboBox(self)
        self.child_combo.currentIndexChanged.connect(lambda _: self._load_results())
        selector_row.addWidget(self.child_combo, stretch=1)
        self.refresh_button = QPushButton("Refresh", self)
        self.refresh_button.clicked.connect(self._load_results)
        selector_row.addWidget(self.refresh_button)
        self.back_button = QPushButton("Back to Dashboard", self)
        self.back_button.clicked.connect(self.on_back)
        selector_row.addWidget(self.back_button)
        layout.addLayout(selector_row)

        self.results_table = QTableWidget(0, len(_COLUMNS), self)
        self.results_table.setHorizontalHeaderLabels(_COLUMNS)
        self.results_table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.results_table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.results_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.results_table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.results_table.itemSelectionChanged.connect(self._show_review)
        layout.addWidget(self.results_table, stretch=2)

        self.review_label = QLabel("Question Details", self)
        layout.addWidget(self.review_label)
        self.review_list = QListWidget(self)
        layout.addWidget(self.review_list, stretch=1)

    def show_child(self, child_id: str | None) -> None:
        """Reload the child selector and select ``child_id``."""
        self.child_combo.blockSignals(True)
        self.child_combo.clear()
        for child in self.classroom_manager.get_children():
            self.child_combo.addItem(child.name, userData=child.id)
        index = self.child_combo.findData(child_id) if child_id is not None else 0
        self.child_combo.setCurrentIndex(max(index, 0))
        self.child_combo.blockSignals(False)
        self._load_results()

    def _load_results(self) -> None:
        child_id = self.child_combo.currentData()
        self.results_table.setRowCount(0)
        self.review_list.clear()
        self._summaries = []
        if child_id is None:
            return
        try:
            self._summaries = self.classroom_manager.get_results_for_child(child_id)
        except WaaiError as exc:
            report_error(self, "Failed to load results", exc)
            return

        self.results_table.setRowCount(len(self._summaries))
        for row, summary in enumerate(self._summaries):
            values = (
                summary.activity_title,
                f"{summary.answered_count} / {summary.total}",
                f"{summary.percentage}%",
                format_timestamp(summary.started_at, fallback="Not started"),
                format_timestamp(summary.completed_at, fallback="Not completed yet"),
            )
            for column, value in enumerate(values):
                self.results_table.setItem(row, column, QTableWidgetItem(value))
        if self._summaries:
            self.results_table.selectRow(0)

    def _show_review(self) -> None:
        self.review_list.clear()
        rows = self.results_table.selectionModel().selectedRows()
        if not rows:
            return
        summary = self._summaries[rows[0].row()]
        if summary.answered_count == 0:
            self.review_list.addItem("No activity data yet.")
            return
        for number, review in enumerate(summary.reviews, start=1):
            if not review.answered:
                text = f"{number}. {review.question_text} (not answered)"
            elif review.is_correct:
                text = f"{number}. {review.question_text} ✓ {review.selected_option_text}"
            else:
                text = (
                    f"{number}. {review.question_text} ✗ {review.selected_option_text or '?'}"
                    f" (correct: {review.correct_option_text})"
                )
            item = QListWidgetItem(text, self.review_list)
            item.setForeground(QColor(Styles.get_result_color(review.is_correct)))

    def apply_font_size(self, font_size: int) -> None:
        self.results_table.setStyleSheet(f"font-size: {font_size}pt;")
        self.review_list.setStyleSheet(f"font-size: {font_size}pt;")
