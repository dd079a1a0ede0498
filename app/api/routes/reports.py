from http import HTTPStatus

from fastapi import APIRouter, Depends, Query

from app.api.dependencies.repositories import get_checkin_repository
from app.schemas.attendance import ReportFilter, RoleFilter, TimeWindow
from app.schemas.attendance_report import ActiveCountResponse, AttendanceReport
from app.services.attendance_report import build_attendance_report
from app.services.checkin_repository import CheckInRepository
from app.services.time_window import local_now

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


@router.get(
    "/attendance",
    response_model=AttendanceReport,
    status_code=HTTPStatus.OK,
    summary="Per-user attendance report for a time window and role filter",
    description=(
        "Aggregate gym check-ins into one summary per user plus global statistics.\n\n"
        "**Time windows** (lower bound on check-in time, upper bound is now):\n"
        "- `today`: local midnight\n"
        "- `week`: rolling last 7 days\n"
        "- `month`: first day of the current month, local midnight\n"
        "- `all`: no bound\n\n"
        "**Role filter** uses the user's current profile role; check-ins of users "
        "without a profile only appear under `all`.\n\n"
        "Summaries are ordered by most recent check-in. Each summary carries the "
        "user's check-ins and resolved sessions for history views.\n\n"
        "`stats.active_count` counts check-in rows flagged active, not distinct users."
    ),
    responses={
        200: {
            "description": "Report computed.",
            "content": {
                "application/json": {
                    "example": {
                        "time_window": "today",
                        "role_filter": "all",
                        "window_start": "2026-10-18T00:00:00Z",
                        "generated_at": "2026-10-18T12:00:00Z",
                        "summaries": [
                            {
                                "user_id": "u1",
                                "display_name": "Jane Doe",
                                "role": "member",
                                "total_check_ins": 2,
                                "is_currently_active": True,
                                "last_check_in_at": "2026-10-18T09:00:00Z",
                                "completed_session_count": 1,
                                "total_session_duration_ms": 1800000,
                                "average_session_duration_minutes": 30,
                                "events": [],
                                "sessions": [],
                            }
                        ],
                        "stats": {
                            "total_check_ins": 2,
                            "active_count": 1,
                            "completed_session_count": 1,
                            "average_completed_session_minutes": 30,
                        },
                    }
                }
            },
        },
        422: {
            "description": "Invalid time_window / role_filter, or unreadable check-in data.",
        },
    },
)
async def get_attendance_report(
    time_window: TimeWindow = Query(
        TimeWindow.TODAY,
        description="Reporting period: today, week, month or all.",
    ),
    role_filter: RoleFilter = Query(
        RoleFilter.ALL,
        description="Population: all, members or trainers.",
    ),
    repository: CheckInRepository = Depends(get_checkin_repository),
) -> AttendanceReport:
    """
    Fetch check-ins for the selection and run the report pipeline on them.
    """
    now = local_now()
    events, identities = await repository.fetch_events(
        time_window=time_window,
        role_filter=role_filter,
        now=now,
    )
    return build_attendance_report(
        events,
        identities,
        ReportFilter(time_window=time_window, role_filter=role_filter),
        now=now,
    )


@router.get(
    "/attendance/active",
    response_model=ActiveCountResponse,
    status_code=HTTPStatus.OK,
    summary="Number of check-ins currently flagged active",
    description=(
        "Dashboard tile: how many check-in rows are flagged as currently checked "
        "in, regardless of when they started."
    ),
)
async def get_active_count(
    repository: CheckInRepository = Depends(get_checkin_repository),
) -> ActiveCountResponse:
    return ActiveCountResponse(active_count=await repository.count_active())
