from __future__ import annotations

from collections.abc import Iterable, Mapping

from app.schemas.attendance import (
    UNKNOWN_USER_LABEL,
    AttendanceEvent,
    UserIdentity,
    UserRole,
)
from app.schemas.attendance_report import UserSummary
from app.services.session_resolver import average_minutes, resolve_session


def group_events_by_user(
    events: Iterable[AttendanceEvent],
) -> dict[str, list[AttendanceEvent]]:
    """
    Group events by user id.

    Users appear in the order they are first seen; each user's events keep
    their input order.
    """
    grouped: dict[str, list[AttendanceEvent]] = {}
    for event in events:
        grouped.setdefault(event.user_id, []).append(event)
    return grouped


def build_user_summary(
    user_id: str,
    display_name: str,
    role: UserRole,
    events: list[AttendanceEvent],
) -> UserSummary:
    """
    Fold one user's events into a UserSummary.

    Steps
    -----
    1) total_check_ins = number of events
    2) is_currently_active = OR of every event's is_active flag
    3) last_check_in_at = latest check_in_at
    4) every valid closed session adds its duration and counts as completed;
       open and invalid sessions only count as check-ins

    The result does not depend on the order of `events` apart from the
    order of the `events`/`sessions` history lists.
    """
    if not events:
        raise ValueError(f"cannot summarize user {user_id!r} without events")

    sessions = [resolve_session(event) for event in events]
    completed = [s for s in sessions if s.is_completed]
    total_ms = sum(s.duration_ms for s in completed)  # type: ignore[misc]

    return UserSummary(
        user_id=user_id,
        display_name=display_name,
        role=role,
        total_check_ins=len(events),
        is_currently_active=any(event.is_active for event in events),
        last_check_in_at=max(event.check_in_at for event in events),
        completed_session_count=len(completed),
        total_session_duration_ms=total_ms,
        average_session_duration_minutes=average_minutes(total_ms, len(completed)),
        events=list(events),
        sessions=sessions,
    )


def aggregate_by_user(
    events: Iterable[AttendanceEvent],
    identities: Mapping[str, UserIdentity],
) -> dict[str, UserSummary]:
    """
    Build one UserSummary per distinct user id in `events`.

    Events whose user has no identity are still aggregated, labelled
    "Unknown User" with the role recorded on their first event, so totals
    always reconcile with the raw event count. An identity without a
    member/trainer role also falls back to the first event's role. A fresh
    map is returned on every call.
    """
    summaries: dict[str, UserSummary] = {}
    for user_id, user_events in group_events_by_user(events).items():
        identity = identities.get(user_id)
        if identity is not None:
            display_name = identity.display_name
            role = identity.role or user_events[0].user_role
        else:
            display_name = UNKNOWN_USER_LABEL
            role = user_events[0].user_role

        summaries[user_id] = build_user_summary(user_id, display_name, role, user_events)
    return summaries


def merge_summaries(
    left: Mapping[str, UserSummary],
    right: Mapping[str, UserSummary],
) -> dict[str, UserSummary]:
    """
    Combine two aggregation results.

    Each user's events are unioned by event id and re-folded, so merging a
    result with itself (or with an overlapping re-aggregation) never double
    counts. Display name and role come from `left` when a user is in both.
    """
    merged: dict[str, UserSummary] = {}

    for user_id in list(left) + [uid for uid in right if uid not in left]:
        base = left.get(user_id) or right[user_id]

        seen: set[str] = set()
        events: list[AttendanceEvent] = []
        for source in (left.get(user_id), right.get(user_id)):
            if source is None:
                continue
            for event in source.events:
                if event.id in seen:
                    continue
                seen.add(event.id)
                events.append(event)

        merged[user_id] = build_user_summary(user_id, base.display_name, base.role, events)
    return merged
