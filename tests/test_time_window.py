from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from app.schemas.attendance import (
    AttendanceEvent,
    RoleFilter,
    TimeWindow,
    UserIdentity,
    UserRole,
)
from app.services.time_window import filter_events, window_start

BERLIN = ZoneInfo("Europe/Berlin")
NOW = datetime(2026, 10, 18, 15, 30, tzinfo=BERLIN)


def _event(event_id: str, user_id: str, check_in_at: datetime, role=UserRole.MEMBER) -> AttendanceEvent:
    return AttendanceEvent(
        id=event_id,
        user_id=user_id,
        user_role=role,
        check_in_at=check_in_at,
    )


def test_window_start_today_is_local_midnight():
    assert window_start(TimeWindow.TODAY, NOW) == datetime(2026, 10, 18, 0, 0, tzinfo=BERLIN)


def test_window_start_week_is_rolling_seven_days():
    assert window_start(TimeWindow.WEEK, NOW) == NOW - timedelta(days=7)


def test_week_window_is_168_hours_across_dst_start():
    # New York moves clocks forward on 2026-03-08, inside this week
    new_york = ZoneInfo("America/New_York")
    now = datetime(2026, 3, 10, 12, 0, tzinfo=new_york)

    start_at = window_start(TimeWindow.WEEK, now)

    assert now - start_at == timedelta(hours=168)

    inside = _event("e1", "u1", now - timedelta(hours=167, minutes=30))
    outside = _event("e2", "u1", now - timedelta(hours=168, minutes=30))
    kept = filter_events([inside, outside], {}, TimeWindow.WEEK, RoleFilter.ALL, now)
    assert [e.id for e in kept] == ["e1"]


def test_week_window_is_168_hours_across_dst_end():
    # Berlin moves clocks back on 2026-10-25
    now = datetime(2026, 10, 28, 9, 0, tzinfo=BERLIN)

    assert now - window_start(TimeWindow.WEEK, now) == timedelta(hours=168)


def test_window_start_month_is_first_of_month_midnight():
    assert window_start(TimeWindow.MONTH, NOW) == datetime(2026, 10, 1, 0, 0, tzinfo=BERLIN)


def test_window_start_all_has_no_bound():
    assert window_start(TimeWindow.ALL, NOW) is None


def test_time_window_labels():
    assert TimeWindow.TODAY.label == "Today"
    assert TimeWindow.WEEK.label == "This Week"
    assert TimeWindow.MONTH.label == "This Month"
    assert TimeWindow.ALL.label == "All Time"


def test_filter_keeps_check_in_exactly_at_window_start():
    midnight = datetime(2026, 10, 18, 0, 0, tzinfo=BERLIN)
    events = [
        _event("e1", "u1", midnight),
        _event("e2", "u1", midnight - timedelta(seconds=1)),
    ]

    kept = filter_events(events, {}, TimeWindow.TODAY, RoleFilter.ALL, NOW)

    assert [e.id for e in kept] == ["e1"]


def test_filter_compares_across_timezones():
    # 22:30 UTC on the 17th is 00:30 on the 18th in Berlin (CEST, UTC+2)
    event = _event("e1", "u1", datetime(2026, 10, 17, 22, 30, tzinfo=timezone.utc))

    kept = filter_events([event], {}, TimeWindow.TODAY, RoleFilter.ALL, NOW)

    assert kept == [event]


def test_filter_does_not_drop_future_check_ins():
    event = _event("e1", "u1", NOW + timedelta(hours=3))

    kept = filter_events([event], {}, TimeWindow.TODAY, RoleFilter.ALL, NOW)

    assert kept == [event]


def test_role_filter_uses_identity_role_not_event_role():
    identities = {
        "u1": UserIdentity(user_id="u1", full_name="Ann", role=UserRole.MEMBER),
        "u2": UserIdentity(user_id="u2", full_name="Bob", role=UserRole.TRAINER),
    }
    events = [
        _event("e1", "u1", NOW, role=UserRole.TRAINER),
        _event("e2", "u2", NOW, role=UserRole.MEMBER),
    ]

    trainers = filter_events(events, identities, TimeWindow.ALL, RoleFilter.TRAINERS, NOW)
    members = filter_events(events, identities, TimeWindow.ALL, RoleFilter.MEMBERS, NOW)

    assert [e.id for e in trainers] == ["e2"]
    assert [e.id for e in members] == ["e1"]


def test_user_without_identity_only_passes_role_filter_all():
    event = _event("e1", "ghost", NOW)

    assert filter_events([event], {}, TimeWindow.ALL, RoleFilter.ALL, NOW) == [event]
    assert filter_events([event], {}, TimeWindow.ALL, RoleFilter.MEMBERS, NOW) == []
    assert filter_events([event], {}, TimeWindow.ALL, RoleFilter.TRAINERS, NOW) == []


def test_identity_without_role_only_passes_role_filter_all():
    identities = {"u1": UserIdentity(user_id="u1", full_name="Ada Admin", role=None)}
    event = _event("e1", "u1", NOW, role=UserRole.MEMBER)

    assert filter_events([event], identities, TimeWindow.ALL, RoleFilter.ALL, NOW) == [event]
    assert filter_events([event], identities, TimeWindow.ALL, RoleFilter.MEMBERS, NOW) == []
    assert filter_events([event], identities, TimeWindow.ALL, RoleFilter.TRAINERS, NOW) == []


def test_filter_preserves_input_order():
    events = [
        _event("e3", "u1", NOW - timedelta(hours=1)),
        _event("e1", "u2", NOW - timedelta(hours=3)),
        _event("e2", "u1", NOW - timedelta(hours=2)),
    ]

    kept = filter_events(events, {}, TimeWindow.TODAY, RoleFilter.ALL, NOW)

    assert [e.id for e in kept] == ["e3", "e1", "e2"]
