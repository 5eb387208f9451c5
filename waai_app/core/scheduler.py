"""Cancellable delayed callbacks used for timed state transitions."""

from __future__ import annotations

from threading import Timer
from typing import Callable, Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall: ...


class ThreadingScheduler:
    """Runs each callback once on a daemon timer thread."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        timer = Timer(max(0, delay_ms) / 1000, callback)
        timer.daemon = True
        timer.start()
        return timer
