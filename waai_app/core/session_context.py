"""Explicit lifecycle for the signed-in teacher's session."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Callable

from waai_app.core.errors import AuthError
from waai_app.core.models import Teacher

logger = logging.getLogger(__name__)

SessionListener = Callable[["Teacher | None"], None]


class SessionContext:
    """Holds the current teacher, PIN verification and per-session child unlocks.

    Stores register a listener and rebuild their state whenever a session
    begins or ends; nothing is carried over from one teacher to the next.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._teacher: Teacher | None = None
        self._pin_verified = False
        self._unlocked_children: set[str] = set()
        self._listeners: list[SessionListener] = []

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def begin(self, teacher: Teacher) -> None:
        with self._lock:
            if self._teacher is not None:
                self._reset()
            self._teacher = teacher
        logger.info("Session started for teacher %s", teacher.id)
        self._notify(teacher)

    def end(self) -> None:
        with self._lock:
            if self._teacher is None:
                return
            teacher_id = self._teacher.id
            self._reset()
        logger.info("Session ended for teacher %s", teacher_id)
        self._notify(None)

    def _reset(self) -> None:
        self._teacher = None
        self._pin_verified = False
        self._unlocked_children.clear()

    def _notify(self, teacher: Teacher | None) -> None:
        for listener in list(self._listeners):
            listener(teacher)

    @property
    def is_active(self) -> bool:
        return self._teacher is not None

    @property
    def teacher(self) -> Teacher | None:
        return self._teacher

    def require_teacher(self) -> Teacher:
        teacher = self._teacher
        if teacher is None:
            raise AuthError("No teacher is signed in.")
        return teacher

    def update_teacher(self, teacher: Teacher) -> None:
        """Replace the teacher record of the running session (e.g. after PIN setup)."""
        with self._lock:
            current = self.require_teacher()
            if current.id != teacher.id:
                raise AuthError("Cannot switch teachers without ending the session.")
            self._teacher = teacher

    # --- PIN verification ---

    @property
    def pin_verified(self) -> bool:
        return self._pin_verified

    def mark_pin_verified(self) -> None:
        with self._lock:
            self.require_teacher()
            self._pin_verified = True

    # --- Child unlocks (session-scoped, never persisted) ---

    def mark_child_unlocked(self, child_id: str) -> None:
        with self._lock:
            self.require_teacher()
            self._unlocked_children.add(child_id)

    def is_child_unlocked(self, child_id: str) -> bool:
        with self._lock:
            return child_id in self._unlocked_children
