from datetime import datetime, timedelta, timezone

from app.schemas.attendance import AttendanceEvent, UserRole
from app.services.session_resolver import average_minutes, resolve_session, round_minutes

START = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


def _event(check_out_at: datetime | None) -> AttendanceEvent:
    return AttendanceEvent(
        id="e1",
        user_id="u1",
        user_role=UserRole.MEMBER,
        check_in_at=START,
        check_out_at=check_out_at,
        is_active=check_out_at is None,
    )


def test_open_session_has_no_duration():
    session = resolve_session(_event(None))

    assert session.is_open is True
    assert session.is_valid is True
    assert session.duration_ms is None
    assert session.duration_minutes is None
    assert session.is_completed is False


def test_closed_session_duration():
    session = resolve_session(_event(START + timedelta(minutes=45, seconds=20)))

    assert session.event_id == "e1"
    assert session.is_open is False
    assert session.is_valid is True
    assert session.duration_ms == 45 * 60_000 + 20_000
    assert session.duration_minutes == 45
    assert session.is_completed is True


def test_zero_length_session_is_valid():
    session = resolve_session(_event(START))

    assert session.is_valid is True
    assert session.duration_ms == 0
    assert session.is_completed is True


def test_check_out_before_check_in_is_invalid_not_clamped():
    session = resolve_session(_event(START - timedelta(hours=1)))

    assert session.is_open is False
    assert session.is_valid is False
    assert session.duration_ms is None
    assert session.is_completed is False


def test_round_minutes_rounds_half_up():
    assert round_minutes(30_000) == 1
    assert round_minutes(29_999) == 0
    assert round_minutes(90_000) == 2
    assert round_minutes(149_999) == 2


def test_average_minutes_is_zero_without_sessions():
    assert average_minutes(0, 0) == 0
    assert average_minutes(3_600_000, 2) == 30
