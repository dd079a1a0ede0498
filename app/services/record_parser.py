from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from app.schemas.attendance import AttendanceEvent, UserIdentity, UserRole

# Upstream stores members as "user".
_ROLE_ALIASES = {
    "user": UserRole.MEMBER,
    "member": UserRole.MEMBER,
    "trainer": UserRole.TRAINER,
}


class AttendanceDataError(ValueError):
    """
    Raised when a check-in record cannot be interpreted at all, e.g. a
    missing or unparseable check-in timestamp.

    Data-quality problems (unknown user, check-out before check-in) are not
    errors and never raise this.
    """

    def __init__(self, message: str, *, record_id: str | None = None, field: str | None = None):
        super().__init__(message)
        self.record_id = record_id
        self.field = field


def parse_role(value: Any, *, record_id: str | None = None, field: str = "user_type") -> UserRole:
    """
    Map an upstream role string onto UserRole.
    """
    if isinstance(value, UserRole):
        return value
    role = _ROLE_ALIASES.get(str(value or "").strip().lower())
    if role is None:
        raise AttendanceDataError(
            f"Unknown role {value!r} on record {record_id!r}",
            record_id=record_id,
            field=field,
        )
    return role


def parse_identity_role(value: Any) -> UserRole | None:
    """
    Map a profile role onto UserRole, or None for roles outside
    member/trainer (staff, admins). An empty value means a member.

    Unlike `parse_role`, an unknown profile role is not an error: the user
    is still reported, only without a member/trainer classification.
    """
    if isinstance(value, UserRole):
        return value
    return _ROLE_ALIASES.get(str(value or "").strip().lower() or "user")


def parse_timestamp(value: Any, *, record_id: str | None = None, field: str) -> datetime:
    """
    Parse an ISO-8601 timestamp (or datetime) and normalize to UTC.

    Naive values are treated as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise AttendanceDataError(
                f"Unparseable {field} {value!r} on record {record_id!r}",
                record_id=record_id,
                field=field,
            ) from exc
    else:
        raise AttendanceDataError(
            f"Missing or invalid {field} on record {record_id!r}",
            record_id=record_id,
            field=field,
        )

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_checkin_record(row: Mapping[str, Any]) -> tuple[AttendanceEvent, UserIdentity | None]:
    """
    Convert one upstream `gym_checkins` row into an event and, when the row
    embeds a `user_profiles` object, the matching identity.
    """
    record_id = row.get("id")
    user_id = row.get("user_id")
    if not record_id:
        raise AttendanceDataError("Check-in record without an id", field="id")
    if not user_id:
        raise AttendanceDataError(
            f"Check-in record {record_id!r} without a user_id",
            record_id=str(record_id),
            field="user_id",
        )
    record_id = str(record_id)
    user_id = str(user_id)

    try:
        event, identity = _build(row, record_id, user_id)
    except ValidationError as exc:
        raise AttendanceDataError(
            f"Invalid check-in record {record_id!r}: {exc.errors()[0]['msg']}",
            record_id=record_id,
        ) from exc
    return event, identity


def _build(
    row: Mapping[str, Any],
    record_id: str,
    user_id: str,
) -> tuple[AttendanceEvent, UserIdentity | None]:
    check_out_raw = row.get("check_out_time")
    # pydantic parses "true"/"false" strings and rejects anything else
    active_raw = row.get("is_checked_in")
    event = AttendanceEvent(
        id=record_id,
        user_id=user_id,
        user_role=parse_role(row.get("user_type") or "user", record_id=record_id),
        check_in_at=parse_timestamp(
            row.get("check_in_time"), record_id=record_id, field="check_in_time"
        ),
        check_out_at=(
            parse_timestamp(check_out_raw, record_id=record_id, field="check_out_time")
            if check_out_raw
            else None
        ),
        is_active=False if active_raw is None else active_raw,
        reason=row.get("check_in_reason"),
    )

    identity = None
    profile = row.get("user_profiles")
    if isinstance(profile, Mapping):
        identity = UserIdentity(
            user_id=user_id,
            full_name=profile.get("full_name"),
            username=profile.get("username"),
            role=parse_identity_role(profile.get("user_type")),
        )

    return event, identity


def parse_checkin_records(
    rows: Iterable[Mapping[str, Any]],
) -> tuple[list[AttendanceEvent], dict[str, UserIdentity]]:
    """
    Parse a batch of upstream rows into events (input order) and an identity
    map keyed by user id.
    """
    events: list[AttendanceEvent] = []
    identities: dict[str, UserIdentity] = {}

    for row in rows:
        event, identity = parse_checkin_record(row)
        events.append(event)
        if identity is not None:
            identities.setdefault(identity.user_id, identity)

    return events, identities
