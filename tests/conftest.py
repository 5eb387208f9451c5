"""Shared fixtures for the Waai Classroom test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import WriteError
from waai_app.core.gateway import InMemoryGateway
from waai_app.core.models import Activity

from tests.factories import multiple_choice

TEACHER_EMAIL = "frizzle@example.com"
TEACHER_PASSWORD = "magicbus"


class ManualCall:
    def __init__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that only runs callbacks when the test says so."""

    def __init__(self) -> None:
        self.calls: list[ManualCall] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(delay_ms, callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> list[ManualCall]:
        return [call for call in self.calls if not call.cancelled]

    def run_pending(self) -> int:
        calls = self.pending
        self.calls = []
        for call in calls:
            call.callback()
        return len(calls)


class FlakyGateway(InMemoryGateway):
    """In-memory gateway whose writes can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.write_log: list[str] = []

    def write_path(self, path: str, value: Any) -> None:
        if self.fail_writes:
            raise WriteError(f"simulated outage writing {path}")
        self.write_log.append(path)
        super().write_path(path, value)

    def merge_path(self, path: str, partial: dict[str, Any]) -> None:
        if self.fail_writes:
            raise WriteError(f"simulated outage merging {path}")
        self.write_log.append(path)
        super().merge_path(path, partial)


@pytest.fixture()
def gateway() -> FlakyGateway:
    return FlakyGateway()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def manager(gateway: FlakyGateway, scheduler: ManualScheduler) -> ClassroomManager:
    return ClassroomManager(gateway, scheduler=scheduler)


@pytest.fixture()
def signed_in_manager(manager: ClassroomManager) -> ClassroomManager:
    """Manager with a registered teacher whose PIN is set up."""
    manager.register("Ms Frizzle", TEACHER_EMAIL, TEACHER_PASSWORD)
    gate = manager.create_teacher_gate()
    gate.enter("1234")
    gate.enter("1234")
    return manager


@pytest.fixture()
def activity(signed_in_manager: ClassroomManager) -> Activity:
    """Three multiple-choice questions, the correct answer is always option 0."""
    return signed_in_manager.create_activity(
        "Counting",
        "Count to ten",
        [multiple_choice("q1"), multiple_choice("q2"), multiple_choice("q3")],
    )
