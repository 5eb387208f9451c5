"""Service holding the current teacher's activities and children's progress."""

from __future__ import annotations

from dataclasses import replace
import logging
from threading import Lock
from typing import Any

from waai_app.core.errors import GatewayError, NotFoundError, ValidationError
from waai_app.core.gateway import PersistenceGateway, Subscription
from waai_app.core.models import (
    Activity,
    ActivityProgress,
    AnswerRecord,
    MediaFile,
    Question,
    Teacher,
)
from waai_app.core.paths import activities_path, activity_path, answer_path, progress_path
from waai_app.core.session_context import SessionContext
from waai_app.utils.time_utils import now_ms

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class ActivityStore:
    """Mirrors ``teachers/{id}/activities`` and reads/writes answer progress."""

    def __init__(self, gateway: PersistenceGateway, context: SessionContext) -> None:
        self._gateway = gateway
        self._context = context
        self._lock = Lock()
        self._activities: list[Activity] = []
        self._current_activity_id: str | None = None
        self._subscription: Subscription | None = None
        self._is_loading = False
        context.add_listener(self._handle_session_change)

    # --- Session lifecycle ---

    def _handle_session_change(self, teacher: Teacher | None) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        with self._lock:
            self._activities = []
            self._current_activity_id = None
            self._is_loading = teacher is not None
        if teacher is not None:
            self._subscription = self._gateway.subscribe(activities_path(teacher.id), self._replace_snapshot)

    def _replace_snapshot(self, snapshot: Any) -> None:
        activities: list[Activity] = []
        for activity_id, record in (snapshot or {}).items():
            if not isinstance(record, dict):
                continue
            try:
                activities.append(Activity.from_record(activity_id, record))
            except (ValidationError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid activity record %s: %s", activity_id, exc)
        activities.sort(key=lambda activity: (activity.created_at, activity.id))
        with self._lock:
            self._activities = activities
            self._is_loading = False

    # --- Queries ---

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def activities(self) -> list[Activity]:
        with self._lock:
            return list(self._activities)

    def get_activity_by_id(self, activity_id: str) -> Activity | None:
        with self._lock:
            return next((activity for activity in self._activities if activity.id == activity_id), None)

    def require_activity(self, activity_id: str) -> Activity:
        activity = self.get_activity_by_id(activity_id)
        if activity is None:
            raise NotFoundError("Could not find this activity.")
        return activity

    @property
    def current_activity(self) -> Activity | None:
        if self._current_activity_id is None:
            return None
        return self.get_activity_by_id(self._current_activity_id)

    def set_current_activity(self, activity_id: str | None) -> None:
        if activity_id is not None:
            self.require_activity(activity_id)
        self._current_activity_id = activity_id

    # --- Authoring ---

    def create_activity(
        self,
        title: str,
        goals: str,
        questions: list[Question],
        cover_media: MediaFile | None = None,
    ) -> Activity:
        teacher = self._context.require_teacher()
        activity = Activity(
            id=self._gateway.push_key(activities_path(teacher.id)),
            title=title,
            goals=goals,
            questions=list(questions),
            created_at=now_ms(),
            teacher_id=teacher.id,
            cover_media=cover_media,
        )
        try:
            self._gateway.write_path(activity_path(teacher.id, activity.id), activity.to_record())
        except GatewayError:
            logger.exception("Could not create activity for teacher %s", teacher.id)
            raise
        logger.info("Created activity %s with %d question(s)", activity.id, activity.question_count)
        return activity

    def update_activity(
        self,
        activity_id: str,
        *,
        title: str | None = None,
        goals: str | None = None,
        questions: list[Question] | None = None,
        cover_media: MediaFile | None = _UNSET,
    ) -> Activity:
        """Validate the edited activity as a whole, then merge only the changed fields."""
        teacher = self._context.require_teacher()
        current = self.require_activity(activity_id)

        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if goals is not None:
            changes["goals"] = goals
        if questions is not None:
            changes["questions"] = list(questions)
        if cover_media is not _UNSET:
            changes["cover_media"] = cover_media
        updated = replace(current, **changes)

        record = updated.to_record()
        partial: dict[str, Any] = {}
        for field_name, record_key in (
            ("title", "title"),
            ("goals", "goals"),
            ("questions", "questions"),
            ("cover_media", "coverMedia"),
        ):
            if field_name in changes:
                partial[record_key] = record.get(record_key)
        if not partial:
            return current

        try:
            self._gateway.merge_path(activity_path(teacher.id, activity_id), partial)
        except GatewayError:
            logger.exception("Could not update activity %s", activity_id)
            raise
        return updated

    def delete_activity(self, activity_id: str) -> None:
        teacher = self._context.require_teacher()
        self.require_activity(activity_id)
        try:
            self._gateway.delete_path(activity_path(teacher.id, activity_id))
        except GatewayError:
            logger.exception("Could not delete activity %s", activity_id)
            raise
        if self._current_activity_id == activity_id:
            self._current_activity_id = None

    # --- Progress ---

    def save_progress(
        self,
        child_id: str,
        activity_id: str,
        question_id: str,
        selected_option_id: str,
        is_correct: bool,
    ) -> AnswerRecord:
        """Store one answer and stamp ``startedAt`` on the first one."""
        teacher = self._context.require_teacher()
        answer = AnswerRecord(
            selected_option_id=selected_option_id,
            is_correct=is_correct,
            answered_at=now_ms(),
        )
        self._gateway.write_path(
            answer_path(teacher.id, child_id, activity_id, question_id),
            answer.to_record(),
        )
        activity_progress_path = progress_path(teacher.id, child_id, activity_id)
        if self._gateway.read_path(f"{activity_progress_path}/startedAt") is None:
            self._gateway.merge_path(activity_progress_path, {"startedAt": answer.answered_at})
        return answer

    def mark_completed(self, child_id: str, activity_id: str, score: int) -> None:
        teacher = self._context.require_teacher()
        self._gateway.merge_path(
            progress_path(teacher.id, child_id, activity_id),
            {"completedAt": now_ms(), "score": score},
        )

    def get_child_progress(self, child_id: str, activity_id: str | None = None) -> list[ActivityProgress]:
        """Progress for one activity, or for every activity the child has started."""
        teacher = self._context.require_teacher()
        try:
            data = self._gateway.read_path(progress_path(teacher.id, child_id, activity_id))
        except GatewayError:
            logger.exception("Could not read progress of child %s", child_id)
            raise
        if not data:
            return []
        if activity_id is not None:
            return [ActivityProgress.from_record(child_id, activity_id, data)]
        return [
            ActivityProgress.from_record(child_id, progress_activity_id, record)
            for progress_activity_id, record in data.items()
            if isinstance(record, dict)
        ]

    def get_progress(self, child_id: str, activity_id: str) -> ActivityProgress | None:
        records = self.get_child_progress(child_id, activity_id)
        return records[0] if records else None
