"""Qt main window switching between login, PIN, dashboard, editor and results."""

from __future__ import annotations

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from waai_app.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from waai_app.constants.ui_constants import (
    CHILD_URL_PLACEHOLDER,
    DASHBOARD_REFRESH_INTERVAL_MS,
    NAV_BUTTON_ADD_CHILD,
    NAV_BUTTON_DASHBOARD,
    NAV_BUTTON_LOGOUT,
    NAV_BUTTON_NEW_ACTIVITY,
    NAV_BUTTON_RESULTS,
    WINDOW_TITLE,
)
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.models import Teacher
from waai_app.ui.dialog_helpers import show_info
from waai_app.ui.settings_dialog import SettingsDialog
from waai_app.ui.components.activity_editor_panel import ActivityEditorPanel
from waai_app.ui.components.add_child_dialog import AddChildDialog
from waai_app.ui.components.auth_panel import AuthPanel
from waai_app.ui.components.dashboard_panel import DashboardPanel
from waai_app.ui.components.pin_panel import PinPanel
from waai_app.ui.components.results_panel import ResultsPanel
from waai_app.styling.color_palette import Theme
from waai_app.styling.styles import Styles
from enum import Enum, auto

class TeacherMode(Enum):
    """High-level UI mode for the teacher console."""

    AUTH = auto()
    PIN = auto()
    DASHBOARD = auto()
    EDITOR = auto()
    RESULTS = auto()


class TeacherMainWindow(QMainWindow):
    """Main Qt window orchestrating the console modes."""

    def __init__(self, classroom_manager: ClassroomManager, child_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.classroom_manager = classroom_manager
        self.child_url = child_url or CHILD_URL_PLACEHOLDER

        self._mode = TeacherMode.AUTH
        self._ui_font_size: int = 10
        self._theme: Theme = Theme.LIGHT

        self._build_ui()
        self._configure_refresh_timer()
        self._apply_styles()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_nav_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)

        # Initialize components
        self.auth_panel = AuthPanel(self.classroom_manager, on_authenticated=self._handle_authenticated, parent=self)
        self.pin_panel = PinPanel(self.classroom_manager, on_passed=self._handle_pin_passed, parent=self)
        self.dashboard_panel = DashboardPanel(
            self.classroom_manager,
            self.child_url,
            on_edit_activity=self._handle_edit_activity,
            on_show_results=self._handle_show_results,
            parent=self,
        )
        self.editor_panel = ActivityEditorPanel(
            self.classroom_manager,
            on_finished=self._show_dashboard,
            parent=self,
        )
        self.results_panel = ResultsPanel(self.classroom_manager, on_back=self._show_dashboard, parent=self)

        self.mode_stack.addWidget(self.auth_panel)
        self.mode_stack.addWidget(self.pin_panel)
        self.mode_stack.addWidget(self.dashboard_panel)
        self.mode_stack.addWidget(self.editor_panel)
        self.mode_stack.addWidget(self.results_panel)

        root_layout.addWidget(self.mode_stack)

        self._set_mode(TeacherMode.AUTH)

    def _build_nav_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.dashboard_button = QPushButton(NAV_BUTTON_DASHBOARD, self)
        self.dashboard_button.setCheckable(True)
        self.dashboard_button.clicked.connect(self._handle_dashboard_button)
        button_row.addWidget(self.dashboard_button)

        self.new_activity_button = QPushButton(NAV_BUTTON_NEW_ACTIVITY, self)
        self.new_activity_button.setCheckable(True)
        self.new_activity_button.clicked.connect(self._handle_new_activity)
        button_row.addWidget(self.new_activity_button)

        self.add_child_button = QPushButton(NAV_BUTTON_ADD_CHILD, self)
        self.add_child_button.clicked.connect(self._handle_add_child)
        button_row.addWidget(self.add_child_button)

        self.results_button = QPushButton(NAV_BUTTON_RESULTS, self)
        self.results_button.setCheckable(True)
        self.results_button.clicked.connect(lambda: self._handle_show_results(None))
        button_row.addWidget(self.results_button)

        button_row.addStretch()

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        self.settings_button = QPushButton("Settings", self)
        self.settings_button.clicked.connect(self._handle_settings)
        button_row.addWidget(self.settings_button)

        self.logout_button = QPushButton(NAV_BUTTON_LOGOUT, self)
        self.logout_button.clicked.connect(self._handle_logout)
        button_row.addWidget(self.logout_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(DASHBOARD_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        # store snapshots arrive on gateway threads; the widgets poll them here
        if self._mode == TeacherMode.DASHBOARD:
            self.dashboard_panel.refresh()

    def _set_mode(self, mode: TeacherMode) -> None:
        self._mode = mode
        unlocked = mode in (TeacherMode.DASHBOARD, TeacherMode.EDITOR, TeacherMode.RESULTS)
        for button in (
            self.dashboard_button,
            self.new_activity_button,
            self.add_child_button,
            self.results_button,
        ):
            button.setEnabled(unlocked)
        self.logout_button.setEnabled(mode != TeacherMode.AUTH)

        self.dashboard_button.setChecked(mode == TeacherMode.DASHBOARD)
        self.new_activity_button.setChecked(mode == TeacherMode.EDITOR)
        self.results_button.setChecked(mode == TeacherMode.RESULTS)

        index_map = {
            TeacherMode.AUTH: 0,
            TeacherMode.PIN: 1,
            TeacherMode.DASHBOARD: 2,
            TeacherMode.EDITOR: 3,
            TeacherMode.RESULTS: 4,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    def _leave_editor_allowed(self) -> bool:
        return self._mode != TeacherMode.EDITOR or self.editor_panel.check_unsaved_changes()

    # --- Session flow ---

    def _handle_authenticated(self, teacher: Teacher) -> None:
        self._set_mode(TeacherMode.PIN)
        self.pin_panel.start()
        self.pin_panel.setFocus()

    def _handle_pin_passed(self) -> None:
        self._show_dashboard()

    def _handle_logout(self) -> None:
        if not self._leave_editor_allowed():
            self._set_mode(self._mode)
            return
        self.classroom_manager.logout()
        self.dashboard_panel.reset_state()
        self._set_mode(TeacherMode.AUTH)

    # --- Navigation ---

    def _show_dashboard(self) -> None:
        self._set_mode(TeacherMode.DASHBOARD)
        self.dashboard_panel.refresh()

    def _handle_dashboard_button(self) -> None:
        if not self._leave_editor_allowed():
            self._set_mode(self._mode)
            return
        self._show_dashboard()

    def _handle_new_activity(self) -> None:
        if not self._leave_editor_allowed():
            self._set_mode(self._mode)
            return
        self.editor_panel.load_new()
        self._set_mode(TeacherMode.EDITOR)

    def _handle_edit_activity(self, activity_id: str) -> None:
        self.editor_panel.load_activity(activity_id)
        self._set_mode(TeacherMode.EDITOR)

    def _handle_show_results(self, child_id: str | None) -> None:
        if not self._leave_editor_allowed():
            self._set_mode(self._mode)
            return
        self.results_panel.show_child(child_id)
        self._set_mode(TeacherMode.RESULTS)

    def _handle_add_child(self) -> None:
        dialog = AddChildDialog(self.classroom_manager, self)
        if dialog.exec() and dialog.created_child is not None:
            show_info(self, "Child added", f"{dialog.created_child.name} has been added.")
            if self._mode == TeacherMode.DASHBOARD:
                self.dashboard_panel.refresh()

    # --- About, help and settings ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def _handle_settings(self) -> None:
        dialog = SettingsDialog(
            self,
            self._ui_font_size,
            self._theme,
            self.classroom_manager.feedback_delay_ms,
        )
        if dialog.exec():
            self._ui_font_size = dialog.get_ui_font_size()
            self._theme = dialog.get_theme()
            self.classroom_manager.set_feedback_delay(dialog.get_feedback_delay_ms())
            self._apply_styles()

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style(self._theme, self._ui_font_size))

        # Pass settings to components
        self.dashboard_panel.apply_font_size(self._ui_font_size)
        self.editor_panel.apply_font_size(self._ui_font_size)
        self.results_panel.apply_font_size(self._ui_font_size)
