from __future__ import annotations

from collections.abc import Sequence

from app.schemas.attendance import AttendanceEvent
from app.schemas.attendance_report import GlobalStats
from app.services.session_resolver import average_minutes, resolve_session


def compute_global_stats(events: Sequence[AttendanceEvent]) -> GlobalStats:
    """
    Reduce the filtered event set into headline statistics.

    - total_check_ins: number of events
    - active_count: number of events flagged active (rows, not distinct users)
    - average_completed_session_minutes: summed valid durations divided once
      by the number of valid completed sessions (not an average of per-user
      averages)
    """
    total_ms = 0
    completed = 0
    active = 0

    for event in events:
        if event.is_active:
            active += 1

        session = resolve_session(event)
        if session.is_completed:
            total_ms += session.duration_ms  # type: ignore[operator]
            completed += 1

    return GlobalStats(
        total_check_ins=len(events),
        active_count=active,
        completed_session_count=completed,
        average_completed_session_minutes=average_minutes(total_ms, completed),
    )
