"""Timestamp helpers; stored timestamps are epoch milliseconds."""

from __future__ import annotations

from datetime import datetime, timezone
import time


def now_ms() -> int:
    return int(time.time() * 1000)


def format_timestamp(timestamp_ms: int | None, fallback: str = "—") -> str:
    """Render an epoch-milliseconds timestamp as local date and time."""
    if not timestamp_ms:
        return fallback
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).astimezone()
    return moment.strftime("%d %b %Y, %H:%M")
