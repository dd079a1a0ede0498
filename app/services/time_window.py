from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from app.core.config import get_settings
from app.schemas.attendance import (
    AttendanceEvent,
    RoleFilter,
    TimeWindow,
    UserIdentity,
)


def local_now() -> datetime:
    """
    Current time in the configured gym timezone.
    """
    return datetime.now(tz=ZoneInfo(get_settings().LOCAL_TIMEZONE))


def window_start(time_window: TimeWindow, now: datetime) -> datetime | None:
    """
    Inclusive lower bound on check-in time for the given window.

    Rules
    -----
    - today: local midnight of `now`'s day
    - week:  `now` minus 7*24h of elapsed time (rolling, not a calendar week)
    - month: local midnight on the first day of `now`'s month
    - all:   no bound (None)

    "Local" is whatever timezone `now` carries.
    """
    if time_window is TimeWindow.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if time_window is TimeWindow.WEEK:
        # elapsed time, not wall-clock: stays 168h across DST changes
        return now.astimezone(timezone.utc) - timedelta(days=7)
    if time_window is TimeWindow.MONTH:
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def filter_events(
    events: Iterable[AttendanceEvent],
    identities: Mapping[str, UserIdentity],
    time_window: TimeWindow,
    role_filter: RoleFilter,
    now: datetime,
) -> list[AttendanceEvent]:
    """
    Keep events inside the time window that match the role filter.

    The role check uses the joined identity's role, not the role stored on
    the event. With a role filter other than ALL, events whose user has no
    identity are dropped. Future-dated check-ins are kept. Input order is
    preserved.
    """
    start_at = window_start(time_window, now)
    wanted_role = role_filter.role

    kept: list[AttendanceEvent] = []
    for event in events:
        if start_at is not None and event.check_in_at < start_at:
            continue

        if wanted_role is not None:
            identity = identities.get(event.user_id)
            if identity is None or identity.role is not wanted_role:
                continue

        kept.append(event)
    return kept
