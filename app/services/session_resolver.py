from __future__ import annotations

import math
from datetime import timedelta

from app.schemas.attendance import AttendanceEvent
from app.schemas.attendance_report import Session

MS_PER_MINUTE = 60_000


def round_minutes(duration_ms: float) -> int:
    """
    Convert milliseconds to whole minutes, rounding halves up.
    """
    return math.floor(duration_ms / MS_PER_MINUTE + 0.5)


def average_minutes(total_ms: int, count: int) -> int:
    """
    Average duration in whole minutes; 0 when there is nothing to average.
    """
    if count <= 0:
        return 0
    return round_minutes(total_ms / count)


def resolve_session(event: AttendanceEvent) -> Session:
    """
    Interpret one check-in row as a session.

    The row already carries its own check-out, so no other events are looked
    at. A check-out before the check-in makes the session invalid: it keeps
    no duration instead of being clamped to zero.
    """
    start = event.check_in_at
    end = event.check_out_at

    if end is None:
        return Session(
            event_id=event.id,
            start=start,
            end=None,
            is_open=True,
            is_valid=True,
        )

    duration_ms = (end - start) // timedelta(milliseconds=1)
    if duration_ms < 0:
        return Session(
            event_id=event.id,
            start=start,
            end=end,
            is_open=False,
            is_valid=False,
        )

    return Session(
        event_id=event.id,
        start=start,
        end=end,
        duration_ms=duration_ms,
        duration_minutes=round_minutes(duration_ms),
        is_open=False,
        is_valid=True,
    )
