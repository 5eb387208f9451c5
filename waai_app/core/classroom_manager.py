"""Facade shared by the teacher console and the child HTTP API."""

from __future__ import annotations

import logging
from threading import Lock

from waai_app.constants.quiz_constants import FEEDBACK_DELAY_MS
from waai_app.core.access_gate import ChildPinGate, TeacherPinGate
from waai_app.core.activity_builder import ActivityDraft
from waai_app.core.errors import AuthError, GateMismatchError, NotFoundError
from waai_app.core.gateway import PersistenceGateway
from waai_app.core.models import Activity, Avatar, Child, MediaFile, Question, Teacher
from waai_app.core.quiz_progress import QuizProgressEngine, QuizProgressState
from waai_app.core.results import ActivityResultSummary, summarize_progress
from waai_app.core.scheduler import Scheduler, ThreadingScheduler
from waai_app.core.services.activity_store import ActivityStore
from waai_app.core.services.roster_store import RosterStore
from waai_app.core.services.session_store import SessionStore
from waai_app.core.session_context import SessionContext

logger = logging.getLogger(__name__)

QuizKey = tuple[str, str]


class ClassroomManager:
    """Facade for the session, roster and activity stores plus live quiz sessions."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        scheduler: Scheduler | None = None,
        feedback_delay_ms: int = FEEDBACK_DELAY_MS,
    ) -> None:
        self._lock = Lock()
        self._gateway = gateway
        self._scheduler = scheduler or ThreadingScheduler()
        self._feedback_delay_ms = feedback_delay_ms

        # Services
        self._context = SessionContext()
        self._session_store = SessionStore(gateway, self._context)
        self._roster = RosterStore(gateway, self._context)
        self._activity_store = ActivityStore(gateway, self._context)

        self._quizzes: dict[QuizKey, QuizProgressEngine] = {}

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def roster(self) -> RosterStore:
        return self._roster

    @property
    def activity_store(self) -> ActivityStore:
        return self._activity_store

    # --- Session Delegation ---

    def register(self, name: str, email: str, password: str) -> Teacher:
        with self._lock:
            self._close_quizzes()
            return self._session_store.register(name, email, password)

    def login(self, email: str, password: str) -> Teacher:
        with self._lock:
            self._close_quizzes()
            return self._session_store.login(email, password)

    def logout(self) -> None:
        with self._lock:
            self._close_quizzes()
            self._session_store.logout()

    def current_teacher(self) -> Teacher | None:
        return self._session_store.current_teacher

    def is_signed_in(self) -> bool:
        return self._context.is_active

    def is_pin_verified(self) -> bool:
        return self._session_store.pin_verified

    def create_teacher_gate(self) -> TeacherPinGate:
        self._context.require_teacher()
        return TeacherPinGate(self._session_store)

    # --- Roster Delegation ---

    def get_children(self) -> list[Child]:
        return self._roster.children

    def get_avatars(self) -> list[Avatar]:
        return self._roster.available_avatars

    def get_child(self, child_id: str) -> Child:
        return self._roster.require_child(child_id)

    def add_child(
        self,
        name: str,
        avatar_id: str,
        pin: str | None = None,
        pin_confirmation: str | None = None,
    ) -> Child:
        """Add a child; when a confirmation is supplied it must repeat the PIN."""
        if pin and pin_confirmation is not None and pin != pin_confirmation:
            raise GateMismatchError("PINs do not match. Please try again.")
        with self._lock:
            return self._roster.add_child(name, avatar_id, pin or None)

    def select_child(self, child_id: str) -> Child:
        return self._roster.set_active_child(child_id)

    def create_child_gate(self, child_id: str) -> ChildPinGate:
        self._context.require_teacher()
        return ChildPinGate(self._roster, self._context, child_id)

    def unlock_child(self, child_id: str, pin: str | None = None) -> Child:
        """Open a child's profile for this session; raises on a wrong or missing PIN."""
        gate = self.create_child_gate(child_id)
        if not gate.passed:
            if not pin:
                raise GateMismatchError("Please enter your PIN.")
            gate.enter(pin)
        return self._roster.set_active_child(child_id)

    def is_child_unlocked(self, child_id: str) -> bool:
        return self._context.is_child_unlocked(child_id)

    def _require_unlocked(self, child_id: str) -> Child:
        child = self._roster.require_child(child_id)
        if not self._context.is_child_unlocked(child_id):
            raise AuthError("Please enter this child's PIN first.")
        return child

    # --- Activity Delegation ---

    def get_activities(self) -> list[Activity]:
        return self._activity_store.activities

    def get_activity(self, activity_id: str) -> Activity:
        return self._activity_store.require_activity(activity_id)

    def get_activities_for_child(self, child_id: str) -> list[Activity]:
        self._require_unlocked(child_id)
        return self._activity_store.activities

    def create_activity(
        self,
        title: str,
        goals: str,
        questions: list[Question],
        cover_media: MediaFile | None = None,
    ) -> Activity:
        with self._lock:
            return self._activity_store.create_activity(title, goals, questions, cover_media)

    def save_draft(self, draft: ActivityDraft) -> Activity:
        """Validate the editor draft and create or update the stored activity."""
        questions = draft.build_questions()
        with self._lock:
            if draft.is_new:
                activity = self._activity_store.create_activity(
                    draft.title, draft.goals, questions, draft.cover_media
                )
                draft.activity_id = activity.id
                return activity
            return self._activity_store.update_activity(
                draft.activity_id,
                title=draft.title,
                goals=draft.goals,
                questions=questions,
                cover_media=draft.cover_media,
            )

    def delete_activity(self, activity_id: str) -> None:
        with self._lock:
            for key in [key for key in self._quizzes if key[1] == activity_id]:
                self._quizzes.pop(key).close()
            self._activity_store.delete_activity(activity_id)

    # --- Quiz Session Delegation ---

    def start_quiz(self, child_id: str, activity_id: str) -> QuizProgressState:
        """Start or resume a quiz; resuming restarts at question one."""
        self._require_unlocked(child_id)
        activity = self._activity_store.require_activity(activity_id)
        with self._lock:
            previous = self._quizzes.pop((child_id, activity_id), None)
            if previous is not None:
                previous.close()
            engine = QuizProgressEngine(
                activity,
                child_id,
                self._activity_store,
                self._scheduler,
                self._feedback_delay_ms,
            )
            self._quizzes[(child_id, activity_id)] = engine
        logger.info("Child %s started activity %s", child_id, activity_id)
        return engine.start()

    def get_quiz(self, child_id: str, activity_id: str) -> QuizProgressEngine:
        with self._lock:
            engine = self._quizzes.get((child_id, activity_id))
        if engine is None:
            raise NotFoundError("This activity has not been started.")
        return engine

    def get_quiz_state(self, child_id: str, activity_id: str) -> QuizProgressState:
        return self.get_quiz(child_id, activity_id).state

    def answer(self, child_id: str, activity_id: str, option_id: str) -> QuizProgressState:
        engine = self.get_quiz(child_id, activity_id)
        engine.select_option(option_id)
        return engine.state

    def restart_quiz(self, child_id: str, activity_id: str) -> QuizProgressState:
        return self.get_quiz(child_id, activity_id).restart()

    def leave_quiz(self, child_id: str, activity_id: str) -> None:
        with self._lock:
            engine = self._quizzes.pop((child_id, activity_id), None)
        if engine is not None:
            engine.close()

    def active_quiz_count(self) -> int:
        with self._lock:
            return len(self._quizzes)

    def _close_quizzes(self) -> None:
        for engine in self._quizzes.values():
            engine.close()
        self._quizzes.clear()

    # --- Results ---

    def get_results(self, child_id: str, activity_id: str) -> ActivityResultSummary:
        self._roster.require_child(child_id)
        activity = self._activity_store.require_activity(activity_id)
        progress = self._activity_store.get_progress(child_id, activity_id)
        return summarize_progress(activity, child_id, progress)

    def get_results_for_child(self, child_id: str) -> list[ActivityResultSummary]:
        self._roster.require_child(child_id)
        stored = {
            progress.activity_id: progress
            for progress in self._activity_store.get_child_progress(child_id)
        }
        return [
            summarize_progress(activity, child_id, stored.get(activity.id))
            for activity in self._activity_store.activities
        ]

    # --- Settings ---

    @property
    def feedback_delay_ms(self) -> int:
        return self._feedback_delay_ms

    def set_feedback_delay(self, delay_ms: int) -> None:
        """Applies to quizzes started after the change."""
        with self._lock:
            self._feedback_delay_ms = max(0, int(delay_ms))
