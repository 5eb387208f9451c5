"""Service holding the current teacher's child profiles and avatar catalog."""

from __future__ import annotations

import hmac
import logging
from threading import Lock
from typing import Any

from waai_app.core.avatars import get_avatar, list_avatars
from waai_app.core.errors import GatewayError, NotFoundError, ValidationError
from waai_app.core.gateway import PersistenceGateway, Subscription
from waai_app.core.models import Avatar, Child, Teacher
from waai_app.core.paths import child_path, children_path
from waai_app.core.session_context import SessionContext
from waai_app.utils.time_utils import now_ms

logger = logging.getLogger(__name__)


class RosterStore:
    """Mirrors ``teachers/{id}/children`` and adds children with unique PINs."""

    def __init__(self, gateway: PersistenceGateway, context: SessionContext) -> None:
        self._gateway = gateway
        self._context = context
        self._lock = Lock()
        self._children: list[Child] = []
        self._active_child_id: str | None = None
        self._subscription: Subscription | None = None
        self._is_loading = False
        context.add_listener(self._handle_session_change)

    # --- Session lifecycle ---

    def _handle_session_change(self, teacher: Teacher | None) -> None:
        self._stop_listening()
        with self._lock:
            self._children = []
            self._active_child_id = None
            self._is_loading = teacher is not None
        if teacher is not None:
            self._subscription = self._gateway.subscribe(children_path(teacher.id), self._replace_snapshot)

    def _stop_listening(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _replace_snapshot(self, snapshot: Any) -> None:
        children: list[Child] = []
        for child_id, record in (snapshot or {}).items():
            if not isinstance(record, dict):
                continue
            try:
                children.append(Child.from_record(child_id, record))
            except (ValidationError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid child record %s: %s", child_id, exc)
        children.sort(key=lambda child: (child.created_at, child.id))
        with self._lock:
            self._children = children
            self._is_loading = False
            if self._active_child_id and not any(c.id == self._active_child_id for c in children):
                self._active_child_id = None

    # --- Queries ---

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def children(self) -> list[Child]:
        with self._lock:
            return list(self._children)

    @property
    def available_avatars(self) -> list[Avatar]:
        return list_avatars()

    @property
    def active_child(self) -> Child | None:
        with self._lock:
            return self._find(self._active_child_id) if self._active_child_id else None

    def get_child_by_id(self, child_id: str) -> Child | None:
        with self._lock:
            return self._find(child_id)

    def require_child(self, child_id: str) -> Child:
        child = self.get_child_by_id(child_id)
        if child is None:
            raise NotFoundError("Could not find this child profile.")
        return child

    def _find(self, child_id: str) -> Child | None:
        return next((child for child in self._children if child.id == child_id), None)

    # --- Commands ---

    def add_child(self, name: str, avatar_id: str, pin: str | None = None) -> Child:
        """Validate and store a new child; a PIN must be unique among siblings."""
        teacher = self._context.require_teacher()
        if get_avatar(avatar_id) is None:
            raise ValidationError("Please select an avatar for the child.")

        parent_path = children_path(teacher.id)
        child = Child(
            id=self._gateway.push_key(parent_path),
            name=name,
            avatar_id=avatar_id,
            created_at=now_ms(),
            pin=pin,
        )
        if child.pin is not None:
            with self._lock:
                taken = any(sibling.pin == child.pin for sibling in self._children)
            if taken:
                raise ValidationError(
                    "This PIN is already assigned to another child. Please use a different PIN."
                )

        try:
            self._gateway.write_path(child_path(teacher.id, child.id), child.to_record())
        except GatewayError:
            logger.exception("Could not add child for teacher %s", teacher.id)
            raise
        logger.info("Added child %s for teacher %s", child.id, teacher.id)
        return child

    def set_active_child(self, child_id: str) -> Child:
        child = self.require_child(child_id)
        with self._lock:
            self._active_child_id = child.id
        return child

    def verify_child_pin(self, child_id: str, pin: str) -> bool:
        """Compare ``pin`` with the child's PIN; children without a PIN always pass."""
        child = self.require_child(child_id)
        if child.pin is None:
            return True
        return hmac.compare_digest(child.pin.encode("utf-8"), pin.encode("utf-8"))
