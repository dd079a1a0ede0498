from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

UNKNOWN_USER_LABEL = "Unknown User"


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC value.

    Naive values are interpreted as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserRole(str, Enum):
    """
    Role of a person at the gym.
    """

    MEMBER = "member"
    TRAINER = "trainer"


class TimeWindow(str, Enum):
    """
    Named reporting period that bounds which check-ins are included.
    """

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

    @property
    def label(self) -> str:
        return _TIME_WINDOW_LABELS[self]


_TIME_WINDOW_LABELS = {
    TimeWindow.TODAY: "Today",
    TimeWindow.WEEK: "This Week",
    TimeWindow.MONTH: "This Month",
    TimeWindow.ALL: "All Time",
}


class RoleFilter(str, Enum):
    """
    Which population a report covers.
    """

    ALL = "all"
    MEMBERS = "members"
    TRAINERS = "trainers"

    @property
    def role(self) -> UserRole | None:
        """
        The identity role matched by this filter, or None for ALL.
        """
        if self is RoleFilter.MEMBERS:
            return UserRole.MEMBER
        if self is RoleFilter.TRAINERS:
            return UserRole.TRAINER
        return None


class AttendanceEvent(BaseModel):
    """
    One check-in record, with its optional check-out on the same row.

    `is_active` is the source-of-truth "currently inside" flag. It is kept
    independent of `check_out_at` because upstream updates the two fields
    separately.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier of the check-in row.")
    user_id: str = Field(..., description="Identifier of the person who checked in.")
    user_role: UserRole = Field(
        ...,
        description="Role of the user at the time the check-in was recorded.",
        examples=["member"],
    )
    check_in_at: datetime = Field(..., description="Check-in timestamp.")
    check_out_at: datetime | None = Field(
        None,
        description="Check-out timestamp; absent while the session is still open.",
    )
    is_active: bool = Field(
        False,
        description="Whether the user is flagged as currently checked in.",
    )
    reason: str | None = Field(
        None,
        description="Free-text annotation supplied at check-in. Passed through untouched.",
    )

    @field_validator("check_in_at")
    @classmethod
    def _check_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("check_out_at")
    @classmethod
    def _check_out_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class UserIdentity(BaseModel):
    """
    Profile data joined onto check-ins by `user_id`.

    `role` is None when the profile carries a role outside member/trainer
    (e.g. an admin who checked in). Such users only match RoleFilter.ALL.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    full_name: str | None = None
    username: str | None = None
    role: UserRole | None = UserRole.MEMBER

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return self.full_name or self.username or UNKNOWN_USER_LABEL


class ReportFilter(BaseModel):
    """
    Filter parameters selected by the caller.
    """

    model_config = ConfigDict(frozen=True)

    time_window: TimeWindow = TimeWindow.TODAY
    role_filter: RoleFilter = RoleFilter.ALL
