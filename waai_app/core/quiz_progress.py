"""State machine that walks one child through one activity.

A session starts at the first question with the score seeded from any answers
already stored for the (child, activity) pair. Selecting an option shows
feedback immediately, stores the answer, and schedules the move to the next
question after the feedback delay; the last question completes the session.

Resuming a session always restarts at question one but keeps the answers
already counted, so replaying a question never scores it twice.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from threading import RLock

from waai_app.constants.quiz_constants import FEEDBACK_DELAY_MS
from waai_app.core.errors import WaaiError
from waai_app.core.models import Activity, Question, QuizScore
from waai_app.core.scheduler import ScheduledCall, Scheduler
from waai_app.core.services.activity_store import ActivityStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuizProgressState:
    """Snapshot of a running quiz session."""

    current_question_index: int = 0
    selected_option_id: str | None = None
    is_correct: bool | None = None
    show_feedback: bool = False
    completed: bool = False
    score: QuizScore = field(default_factory=QuizScore)
    answered_questions: frozenset[str] = frozenset()


class QuizProgressEngine:
    """Drives question progression, feedback, scoring and completion."""

    def __init__(
        self,
        activity: Activity,
        child_id: str,
        activity_store: ActivityStore,
        scheduler: Scheduler,
        feedback_delay_ms: int = FEEDBACK_DELAY_MS,
    ) -> None:
        self._activity = activity
        self._child_id = child_id
        self._activity_store = activity_store
        self._scheduler = scheduler
        self._feedback_delay_ms = feedback_delay_ms
        self._lock = RLock()
        self._state = QuizProgressState(score=QuizScore(0, activity.question_count))
        self._answered: set[str] = set()
        self._pending_advance: ScheduledCall | None = None
        # bumped on restart/close so a timer that already fired cannot advance a reset session
        self._generation = 0

    @property
    def activity(self) -> Activity:
        return self._activity

    @property
    def child_id(self) -> str:
        return self._child_id

    @property
    def state(self) -> QuizProgressState:
        with self._lock:
            return replace(
                self._state,
                score=replace(self._state.score),
                answered_questions=frozenset(self._answered),
            )

    def current_question(self) -> Question:
        with self._lock:
            return self._activity.questions[self._state.current_question_index]

    # --- Lifecycle ---

    def start(self) -> QuizProgressState:
        """Enter (or re-enter) the session: index 0, score seeded from stored answers."""
        with self._lock:
            self._cancel_pending()
            question_ids = {question.id for question in self._activity.questions}
            answered: set[str] = set()
            correct = 0
            try:
                progress = self._activity_store.get_progress(self._child_id, self._activity.id)
            except WaaiError:
                logger.warning(
                    "Could not load progress for child %s on activity %s; starting fresh",
                    self._child_id,
                    self._activity.id,
                )
                progress = None
            if progress is not None:
                for question_id, answer in progress.answers.items():
                    if question_id not in question_ids:
                        continue
                    answered.add(question_id)
                    if answer.is_correct:
                        correct += 1

            self._answered = answered
            self._state = QuizProgressState(score=QuizScore(correct, self._activity.question_count))
            return self.state

    def restart(self) -> QuizProgressState:
        return self.start()

    def close(self) -> None:
        """Leave the session; a pending advance is cancelled, stored answers stay."""
        with self._lock:
            self._cancel_pending()

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None

    # --- Transitions ---

    def select_option(self, option_id: str) -> bool:
        """Answer the current question; returns False when the selection is ignored."""
        with self._lock:
            state = self._state
            if state.show_feedback or state.completed:
                return False

            state.selected_option_id = option_id
            question = self._activity.questions[state.current_question_index]
            option = question.find_option(option_id)
            if option is None:
                return False

            first_answer = question.id not in self._answered
            state.is_correct = option.is_correct
            state.show_feedback = True
            self._answered.add(question.id)

            self._persist_answer(question.id, option_id, option.is_correct)

            if first_answer and option.is_correct:
                state.score.correct += 1

            generation = self._generation
            self._pending_advance = self._scheduler.call_later(
                self._feedback_delay_ms,
                lambda: self._advance(generation),
            )
            return True

    def _advance(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state.completed:
                return
            self._pending_advance = None
            state = self._state
            if state.current_question_index >= self._activity.question_count - 1:
                state.completed = True
                logger.info(
                    "Child %s completed activity %s with %d/%d",
                    self._child_id,
                    self._activity.id,
                    state.score.correct,
                    state.score.total,
                )
                self._persist_completion(state.score.correct)
                return
            state.current_question_index += 1
            state.selected_option_id = None
            state.is_correct = None
            state.show_feedback = False

    # --- Best-effort persistence ---

    def _persist_answer(self, question_id: str, option_id: str, is_correct: bool) -> None:
        try:
            self._activity_store.save_progress(
                self._child_id,
                self._activity.id,
                question_id,
                option_id,
                is_correct,
            )
        except WaaiError:
            logger.warning(
                "Answer for question %s of activity %s was not saved",
                question_id,
                self._activity.id,
                exc_info=True,
            )

    def _persist_completion(self, correct: int) -> None:
        try:
            self._activity_store.mark_completed(self._child_id, self._activity.id, correct)
        except WaaiError:
            logger.warning("Completion of activity %s was not saved", self._activity.id, exc_info=True)
