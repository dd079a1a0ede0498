from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.attendance import AttendanceEvent, RoleFilter, TimeWindow, UserRole


class Session(BaseModel):
    """
    A single check-in reinterpreted as a time interval.

    A closed session whose check-out precedes its check-in is invalid: it has
    no duration and is left out of every duration total.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str
    start: datetime
    end: datetime | None = None
    duration_ms: int | None = Field(
        None,
        description="end - start in milliseconds; None when open or invalid.",
    )
    duration_minutes: int | None = Field(
        None,
        description="duration_ms rounded half-up to whole minutes.",
    )
    is_open: bool
    is_valid: bool

    @property
    def is_completed(self) -> bool:
        """
        True when the session contributes to duration totals.
        """
        return self.duration_ms is not None


class UserSummary(BaseModel):
    """
    Rolled-up attendance for one user within the filtered event set.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    display_name: str = Field(..., examples=["Jane Doe"])
    role: UserRole

    total_check_ins: int = Field(
        ...,
        description="Number of check-ins for this user in the filtered set.",
        examples=[4],
    )
    is_currently_active: bool = Field(
        ...,
        description="True if any of the user's check-ins is flagged active.",
    )
    last_check_in_at: datetime = Field(
        ...,
        description="Most recent check-in time across the user's check-ins.",
    )
    completed_session_count: int = Field(
        ...,
        description="Check-ins with a valid check-out.",
        examples=[3],
    )
    total_session_duration_ms: int = Field(
        ...,
        description="Sum of valid completed session durations, in milliseconds.",
    )
    average_session_duration_minutes: int = Field(
        ...,
        description=(
            "total_session_duration_ms / completed_session_count in whole "
            "minutes (half-up). 0 when there are no completed sessions."
        ),
        examples=[45],
    )

    events: list[AttendanceEvent] = Field(
        default_factory=list,
        description="The user's raw check-ins, in input order, for history views.",
    )
    sessions: list[Session] = Field(
        default_factory=list,
        description="Resolved sessions aligned one-to-one with `events`.",
    )


class GlobalStats(BaseModel):
    """
    Headline numbers across the whole filtered event set.
    """

    model_config = ConfigDict(frozen=True)

    total_check_ins: int = Field(0, examples=[42])
    active_count: int = Field(
        0,
        description=(
            "Number of check-in rows flagged active. Counts rows, not people: a "
            "user with two active-flagged rows contributes 2."
        ),
        examples=[7],
    )
    completed_session_count: int = Field(0, examples=[30])
    average_completed_session_minutes: int = Field(
        0,
        description=(
            "Total valid completed duration divided by the number of completed "
            "sessions, in whole minutes (half-up)."
        ),
        examples=[52],
    )


class AttendanceReport(BaseModel):
    """
    Ordered per-user summaries plus global statistics for one filter selection.
    """

    model_config = ConfigDict(frozen=True)

    time_window: TimeWindow
    role_filter: RoleFilter
    window_start: datetime | None = Field(
        None,
        description="Inclusive lower bound applied to check-in times; None for 'all'.",
    )
    generated_at: datetime
    summaries: list[UserSummary] = Field(default_factory=list)
    stats: GlobalStats = Field(default_factory=GlobalStats)


class ActiveCountResponse(BaseModel):
    """
    Number of check-in rows currently flagged active, across all time.
    """

    active_count: int = Field(..., examples=[12])
