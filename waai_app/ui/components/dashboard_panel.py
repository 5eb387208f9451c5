"""Component listing the teacher's children and activities."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from waai_app.constants.ui_constants import NO_ACTIVITIES_MESSAGE, NO_CHILDREN_MESSAGE
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import WaaiError
from waai_app.styling.styles import Styles
from waai_app.ui.dialog_helpers import confirm_delete_activity, report_error, show_info
from waai_app.utils.time_utils import format_timestamp


class DashboardPanel(QWidget):
    """Children and activities overview, refreshed from the live stores."""

    def __init__(
        self,
        classroom_manager: ClassroomManager,
        child_url: str,
        on_edit_activity: Callable[[str], None],
        on_show_results: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.classroom_manager = classroom_manager
        self.child_url = child_url
        self.on_edit_activity = on_edit_activity
        self.on_show_results = on_show_results
        self._children_snapshot: list[tuple[str, str, bool]] = []
        self._activities_snapshot: list[tuple[str, str, int]] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.welcome_label = QLabel("", self)
        self.welcome_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.welcome_label)

        self.network_label = QLabel(f"Children connect to: {self.child_url}", self)
        self.network_label.setWordWrap(True)
        self.network_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        layout.addWidget(self.network_label)

        columns = QHBoxLayout()

        children_group = QGroupBox("Children", self)
        children_layout = QVBoxLayout()
        children_group.setLayout(children_layout)
        self.children_list = QListWidget(self)
        self.children_list.setAlternatingRowColors(True)
        self.children_list.itemDoubleClicked.connect(self._handle_child_activated)
        children_layout.addWidget(self.children_list, stretch=1)
        self.children_empty_label = QLabel(NO_CHILDREN_MESSAGE, self)
        self.children_empty_label.setAlignment(Qt.AlignCenter)
        children_layout.addWidget(self.children_empty_label)
        self.child_results_button = QPushButton("View Results", self)
        self.child_results_button.clicked.connect(self._handle_child_results)
        children_layout.addWidget(self.child_results_button)
        columns.addWidget(children_group)

        activities_group = QGroupBox("Activities", self)
        activities_layout = QVBoxLayout()
        activities_group.setLayout(activities_layout)
        self.activities_list = QListWidget(self)
        self.activities_list.setAlternatingRowColors(True)
        self.activities_list.itemDoubleClicked.connect(self._handle_activity_activated)
        activities_layout.addWidget(self.activities_list, stretch=1)
        self.activities_empty_label = QLabel(NO_ACTIVITIES_MESSAGE, self)
        self.activities_empty_label.setAlignment(Qt.AlignCenter)
        activities_layout.addWidget(self.activities_empty_label)

        activity_buttons = QHBoxLayout()
        self.edit_activity_button = QPushButton("Edit", self)
        self.edit_activity_button.clicked.connect(self._handle_edit_activity)
        activity_buttons.addWidget(self.edit_activity_button)
        self.delete_activity_button = QPushButton("Delete", self)
        self.delete_activity_button.clicked.connect(self._handle_delete_activity)
        activity_buttons.addWidget(self.delete_activity_button)
        activities_layout.addLayout(activity_buttons)
        columns.addWidget(activities_group)

        layout.addLayout(columns, stretch=1)

    def refresh(self) -> None:
        teacher = self.classroom_manager.current_teacher()
        self.welcome_label.setText(f"Welcome, {teacher.name}!" if teacher else "")
        self._refresh_children()
        self._refresh_activities()

    def _refresh_children(self) -> None:
        children = self.classroom_manager.get_children()
        snapshot = [(child.id, child.name, child.has_pin) for child in children]
        if snapshot == self._children_snapshot:
            return
        self._children_snapshot = snapshot
        self.children_list.clear()
        for child in children:
            lock = " 🔒" if child.has_pin else ""
            item = QListWidgetItem(f"{child.name}{lock}  ·  added {format_timestamp(child.created_at)}", self.children_list)
            item.setData(Qt.UserRole, child.id)
        self.children_empty_label.setVisible(not children)

    def _refresh_activities(self) -> None:
        activities = self.classroom_manager.get_activities()
        snapshot = [(activity.id, activity.title, activity.question_count) for activity in activities]
        if snapshot == self._activities_snapshot:
            return
        self._activities_snapshot = snapshot
        self.activities_list.clear()
        for activity in activities:
            item = QListWidgetItem(f"{activity.title} ({activity.question_count} questions)", self.activities_list)
            item.setData(Qt.UserRole, activity.id)
            item.setToolTip(activity.goals)
        self.activities_empty_label.setVisible(not activities)

    def reset_state(self) -> None:
        self._children_snapshot = []
        self._activities_snapshot = []
        self.children_list.clear()
        self.activities_list.clear()

    def update_child_url(self, url: str) -> None:
        self.child_url = url
        self.network_label.setText(f"Children connect to: {url}")

    def _selected_id(self, list_widget: QListWidget) -> str | None:
        item = list_widget.currentItem()
        return item.data(Qt.UserRole) if item is not None else None

    def _handle_child_activated(self, item: QListWidgetItem) -> None:
        self.on_show_results(item.data(Qt.UserRole))

    def _handle_child_results(self) -> None:
        child_id = self._selected_id(self.children_list)
        if child_id is None:
            show_info(self, "No child selected", "Select a child to view their results.")
            return
        self.on_show_results(child_id)

    def _handle_activity_activated(self, item: QListWidgetItem) -> None:
        self.on_edit_activity(item.data(Qt.UserRole))

    def _handle_edit_activity(self) -> None:
        activity_id = self._selected_id(self.activities_list)
        if activity_id is None:
            show_info(self, "No activity selected", "Select an activity to edit.")
            return
        self.on_edit_activity(activity_id)

    def _handle_delete_activity(self) -> None:
        activity_id = self._selected_id(self.activities_list)
        if activity_id is None:
            show_info(self, "No activity selected", "Select an activity to delete.")
            return
        try:
            activity = self.classroom_manager.get_activity(activity_id)
            if not confirm_delete_activity(self, activity.title):
                return
            self.classroom_manager.delete_activity(activity_id)
        except WaaiError as exc:
            report_error(self, "Delete failed", exc)
            return
        self.refresh()

    def apply_font_size(self, font_size: int) -> None:
        self.children_list.setStyleSheet(f"font-size: {font_size}pt;")
        self.activities_list.setStyleSheet(f"font-size: {font_size}pt;")
