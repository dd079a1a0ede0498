from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

from app.core.logging import get_logger
from app.schemas.attendance import AttendanceEvent, ReportFilter, UserIdentity
from app.schemas.attendance_report import AttendanceReport
from app.services.attendance_aggregator import aggregate_by_user
from app.services.global_stats import compute_global_stats
from app.services.report_sorter import sort_summaries
from app.services.time_window import filter_events, local_now, window_start

logger = get_logger(__name__)


def build_attendance_report(
    events: Sequence[AttendanceEvent],
    identities: Mapping[str, UserIdentity],
    report_filter: ReportFilter,
    now: datetime | None = None,
) -> AttendanceReport:
    """
    Run the full attendance pipeline for one filter selection.

    Steps
    -----
    1) Apply the time window and role filter (even if the upstream query
       already did, so a missing or wrong pushdown cannot skew the report).
    2) Aggregate the filtered events per user.
    3) Sort the summaries by most recent check-in.
    4) Compute global statistics over the same filtered events.

    The function keeps no state between calls: the same inputs (and `now`)
    always produce the same report.

    Parameters
    ----------
    events:
        Raw check-in rows, in the order the caller fetched them.
    identities:
        Profiles keyed by user id. Missing entries degrade to "Unknown User".
    report_filter:
        Selected time window and role filter.
    now:
        Reference time for the window. Defaults to the current time in the
        configured gym timezone.
    """
    if now is None:
        now = local_now()

    filtered = filter_events(
        events,
        identities,
        time_window=report_filter.time_window,
        role_filter=report_filter.role_filter,
        now=now,
    )

    by_user = aggregate_by_user(filtered, identities)
    summaries = sort_summaries(by_user.values())
    stats = compute_global_stats(filtered)

    missing_identities = [uid for uid in by_user if uid not in identities]
    invalid_sessions = sum(
        1 for s in summaries for session in s.sessions if not session.is_valid
    )

    if missing_identities:
        logger.warning("attendance_missing_identity", user_ids=missing_identities)
    if invalid_sessions:
        # check-out earlier than check-in; counted as check-ins only
        logger.warning("attendance_invalid_session", invalid_sessions=invalid_sessions)

    logger.info(
        "attendance_report_built",
        time_window=report_filter.time_window.value,
        role_filter=report_filter.role_filter.value,
        raw_events=len(events),
        filtered_events=len(filtered),
        users=len(summaries),
    )

    return AttendanceReport(
        time_window=report_filter.time_window,
        role_filter=report_filter.role_filter,
        window_start=window_start(report_filter.time_window, now),
        generated_at=now,
        summaries=summaries,
        stats=stats,
    )
