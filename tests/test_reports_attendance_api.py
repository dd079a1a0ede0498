from datetime import datetime, timedelta, timezone
from http import HTTPStatus

import pytest

from app.api.dependencies.repositories import get_checkin_repository
from app.schemas.attendance import AttendanceEvent, UserIdentity, UserRole


class FakeCheckInRepository:
    """
    Stand-in for CheckInRepository that returns a fixed dataset and records
    the filter it was asked for.
    """

    def __init__(self, events, identities, active_count: int = 0):
        self.events = events
        self.identities = identities
        self.active_count = active_count
        self.calls = []

    async def fetch_events(self, time_window, role_filter, now):
        self.calls.append((time_window, role_filter))
        # Deliberately ignores the filter: the pipeline must still apply it.
        return self.events, self.identities

    async def count_active(self):
        return self.active_count


@pytest.fixture
def fake_repo(client):
    now = datetime.now(tz=timezone.utc)
    events = [
        AttendanceEvent(
            id="c-1",
            user_id="u-member",
            user_role=UserRole.MEMBER,
            check_in_at=now - timedelta(days=2, minutes=40),
            check_out_at=now - timedelta(days=2),
            is_active=False,
        ),
        AttendanceEvent(
            id="c-2",
            user_id="u-trainer",
            user_role=UserRole.TRAINER,
            check_in_at=now - timedelta(days=1),
            check_out_at=None,
            is_active=True,
        ),
        AttendanceEvent(
            id="c-3",
            user_id="u-member",
            user_role=UserRole.MEMBER,
            check_in_at=now - timedelta(days=30),
            check_out_at=now - timedelta(days=30) + timedelta(minutes=20),
            is_active=False,
        ),
    ]
    identities = {
        "u-member": UserIdentity(user_id="u-member", full_name="Jane Doe", role=UserRole.MEMBER),
        "u-trainer": UserIdentity(user_id="u-trainer", username="coach", role=UserRole.TRAINER),
    }
    repo = FakeCheckInRepository(events, identities, active_count=5)

    client.app.dependency_overrides[get_checkin_repository] = lambda: repo
    yield repo
    client.app.dependency_overrides.pop(get_checkin_repository, None)


def test_attendance_report_all_time(client, fake_repo):
    resp = client.get("/reports/attendance?time_window=all&role_filter=all")
    assert resp.status_code == HTTPStatus.OK

    data = resp.json()
    assert data["time_window"] == "all"
    assert data["role_filter"] == "all"
    assert data["window_start"] is None

    summaries = data["summaries"]
    assert [s["user_id"] for s in summaries] == ["u-trainer", "u-member"]

    member = summaries[1]
    assert member["display_name"] == "Jane Doe"
    assert member["role"] == "member"
    assert member["total_check_ins"] == 2
    assert member["completed_session_count"] == 2
    assert member["average_session_duration_minutes"] == 30
    assert [e["id"] for e in member["events"]] == ["c-1", "c-3"]
    assert [s["duration_minutes"] for s in member["sessions"]] == [40, 20]

    trainer = summaries[0]
    assert trainer["display_name"] == "coach"
    assert trainer["is_currently_active"] is True

    assert data["stats"] == {
        "total_check_ins": 3,
        "active_count": 1,
        "completed_session_count": 2,
        "average_completed_session_minutes": 30,
    }


def test_attendance_report_applies_window_and_role(client, fake_repo):
    resp = client.get("/reports/attendance?time_window=week&role_filter=members")
    assert resp.status_code == HTTPStatus.OK

    data = resp.json()
    assert [s["user_id"] for s in data["summaries"]] == ["u-member"]
    assert data["summaries"][0]["total_check_ins"] == 1
    assert data["stats"]["total_check_ins"] == 1
    assert data["window_start"] is not None


def test_attendance_report_defaults_to_today_and_all(client, fake_repo):
    resp = client.get("/reports/attendance")
    assert resp.status_code == HTTPStatus.OK

    data = resp.json()
    assert data["time_window"] == "today"
    assert data["role_filter"] == "all"
    assert fake_repo.calls[-1][0].value == "today"


def test_attendance_report_rejects_unknown_filter_values(client, fake_repo):
    assert client.get("/reports/attendance?time_window=year").status_code == (
        HTTPStatus.UNPROCESSABLE_ENTITY
    )
    assert client.get("/reports/attendance?role_filter=users").status_code == (
        HTTPStatus.UNPROCESSABLE_ENTITY
    )


def test_active_count_endpoint(client, fake_repo):
    resp = client.get("/reports/attendance/active")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {"active_count": 5}
