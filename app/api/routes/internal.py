from http import HTTPStatus
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.dependencies.internal_auth import verify_internal_api_key
from app.schemas.attendance import ReportFilter, RoleFilter, TimeWindow
from app.schemas.attendance_report import AttendanceReport
from app.services.attendance_report import build_attendance_report
from app.services.record_parser import parse_checkin_records

router = APIRouter(
    prefix="/internal",
    tags=["Internal"],
    dependencies=[Depends(verify_internal_api_key)],
)


class AttendanceRecomputeRequest(BaseModel):
    """
    Raw check-in rows pushed by the live-update feed, plus the filter the
    client currently has selected.
    """

    time_window: TimeWindow = Field(TimeWindow.TODAY, examples=["today"])
    role_filter: RoleFilter = Field(RoleFilter.ALL, examples=["all"])
    records: list[dict[str, Any]] = Field(
        default_factory=list,
        description=(
            "Check-in rows as stored upstream (`id`, `user_id`, `user_type`, "
            "`check_in_time`, `check_out_time`, `is_checked_in`, "
            "`check_in_reason`), optionally embedding `user_profiles` "
            "(`full_name`, `username`, `user_type`)."
        ),
    )


@router.post(
    "/attendance-report",
    response_model=AttendanceReport,
    status_code=HTTPStatus.OK,
    summary="Recompute an attendance report from pushed check-in rows",
    description=(
        "Used by the live-update feed: instead of re-querying the database, the "
        "caller sends the current check-in rows and receives a freshly computed "
        "report. Every call recomputes from scratch; callers should keep only "
        "the latest response if two calls overlap.\n\n"
        "Protected via the `X-Internal-Api-Key` header when configured."
    ),
    responses={
        401: {
            "description": "Missing or invalid internal API key (if configured).",
        },
        422: {
            "description": "A record has a missing or unparseable timestamp, id or role.",
        },
    },
)
async def recompute_attendance_report(
    payload: AttendanceRecomputeRequest,
) -> AttendanceReport:
    """
    Parse the pushed rows and run the report pipeline on them.

    Unparseable rows raise AttendanceDataError, turned into a 422 by the
    application's exception handler.
    """
    events, identities = parse_checkin_records(payload.records)
    return build_attendance_report(
        events,
        identities,
        ReportFilter(time_window=payload.time_window, role_filter=payload.role_filter),
    )
