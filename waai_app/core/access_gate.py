"""PIN gates for the teacher dashboard and for each child profile."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
import logging

from waai_app.core.errors import GateMismatchError
from waai_app.core.models import validate_pin
from waai_app.core.pin_buffer import PinBuffer
from waai_app.core.services.roster_store import RosterStore
from waai_app.core.services.session_store import SessionStore
from waai_app.core.session_context import SessionContext

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    AWAITING_ENTRY = "awaiting_entry"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    PASSED = "passed"


class PinGate(ABC):
    """Keypad-driven gate; a full buffer is submitted automatically.

    Subclasses implement ``_submit``. A mismatch clears the buffer and raises
    ``GateMismatchError``; there is no attempt limit.
    """

    def __init__(self) -> None:
        self._buffer = PinBuffer()
        self._state = GateState.AWAITING_ENTRY

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def passed(self) -> bool:
        return self._state is GateState.PASSED

    @property
    def masked(self) -> str:
        return self._buffer.masked()

    @property
    def entered_length(self) -> int:
        return len(self._buffer)

    def press_digit(self, digit: int | str) -> GateState:
        if self.passed:
            return self._state
        if self._buffer.append(digit):
            pin = self._buffer.value
            self._buffer.clear()
            self._submit(pin)
        return self._state

    def backspace(self) -> None:
        self._buffer.backspace()

    def clear(self) -> None:
        self._buffer.clear()

    def enter(self, pin: str) -> GateState:
        """Submit a whole PIN at once (API and tests)."""
        if self.passed:
            return self._state
        self._buffer.clear()
        validate_pin(pin)
        self._submit(pin)
        return self._state

    @abstractmethod
    def _submit(self, pin: str) -> None:
        """Check a complete PIN; raise ``GateMismatchError`` when it does not match."""


class TeacherPinGate(PinGate):
    """Creates the teacher PIN (entry + confirmation) or verifies the existing one."""

    def __init__(self, session_store: SessionStore) -> None:
        super().__init__()
        self._session_store = session_store
        self._candidate: str | None = None
        teacher = session_store.current_teacher
        if teacher is not None and teacher.has_pin and session_store.pin_verified:
            self._state = GateState.PASSED

    @property
    def is_setup(self) -> bool:
        teacher = self._session_store.current_teacher
        return teacher is None or not teacher.has_pin

    def _submit(self, pin: str) -> None:
        if not self.is_setup:
            if not self._session_store.verify_pin(pin):
                logger.info("Teacher PIN mismatch")
                raise GateMismatchError("Incorrect PIN. Please try again.")
            self._state = GateState.PASSED
            return

        if self._state is GateState.AWAITING_ENTRY:
            self._candidate = pin
            self._state = GateState.AWAITING_CONFIRMATION
            return

        candidate, self._candidate = self._candidate, None
        if candidate != pin:
            self._state = GateState.AWAITING_ENTRY
            raise GateMismatchError("PINs do not match. Please try again.")
        self._session_store.setup_pin(pin)
        self._state = GateState.PASSED


class ChildPinGate(PinGate):
    """Unlocks one child profile for the rest of the teacher session."""

    def __init__(self, roster_store: RosterStore, context: SessionContext, child_id: str) -> None:
        super().__init__()
        self._roster_store = roster_store
        self._context = context
        self._child = roster_store.require_child(child_id)
        if not self._child.has_pin or context.is_child_unlocked(child_id):
            self._unlock()

    @property
    def child_id(self) -> str:
        return self._child.id

    def _submit(self, pin: str) -> None:
        if not self._roster_store.verify_child_pin(self._child.id, pin):
            raise GateMismatchError("Incorrect PIN. Please try again.")
        self._unlock()

    def _unlock(self) -> None:
        self._context.mark_child_unlocked(self._child.id)
        self._state = GateState.PASSED
