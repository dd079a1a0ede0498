from __future__ import annotations

from collections.abc import Iterable
from operator import attrgetter

from app.schemas.attendance_report import UserSummary


def sort_summaries(summaries: Iterable[UserSummary]) -> list[UserSummary]:
    """
    Order summaries by most recent check-in first.

    Python's sort is stable (also with reverse=True), so users with the same
    last check-in keep their first-seen order. Every summary has a
    last_check_in_at, so there is no "never checked in" bucket to place.
    """
    return sorted(summaries, key=attrgetter("last_check_in_at"), reverse=True)
