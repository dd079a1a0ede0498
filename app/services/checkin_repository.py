from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.gym_checkin import GymCheckIn
from app.models.user_profile import UserProfile
from app.schemas.attendance import (
    AttendanceEvent,
    RoleFilter,
    TimeWindow,
    UserIdentity,
    UserRole,
)
from app.services.record_parser import parse_identity_role, parse_role
from app.services.time_window import window_start

logger = get_logger(__name__)

_ROLE_DB_VALUES = {
    UserRole.MEMBER: ("user", "member"),
    UserRole.TRAINER: ("trainer",),
}


class CheckInRepository:
    """
    Reads check-ins and the profiles they join against.

    The window and role predicates are pushed down into SQL only to shrink
    the result; the report pipeline applies them again on the returned rows.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def fetch_events(
        self,
        time_window: TimeWindow,
        role_filter: RoleFilter,
        now: datetime,
    ) -> tuple[list[AttendanceEvent], dict[str, UserIdentity]]:
        """
        Fetch check-ins for the selection, newest first, plus the identities
        of the users that appear in them.

        Profiles are outer-joined so check-ins of users without a profile
        are still returned when the role filter is ALL.
        """
        stmt = (
            select(GymCheckIn, UserProfile)
            .outerjoin(UserProfile, GymCheckIn.user_id == UserProfile.id)
            .order_by(GymCheckIn.check_in_time.desc(), GymCheckIn.id)
        )

        start_at = window_start(time_window, now)
        if start_at is not None:
            stmt = stmt.where(GymCheckIn.check_in_time >= start_at.astimezone(timezone.utc))

        wanted_role = role_filter.role
        if wanted_role is not None:
            profile_role = func.lower(func.trim(UserProfile.user_type))
            stmt = stmt.where(profile_role.in_(_ROLE_DB_VALUES[wanted_role]))

        result = await self.db.execute(stmt)

        events: list[AttendanceEvent] = []
        identities: dict[str, UserIdentity] = {}
        for checkin, profile in result.all():
            events.append(self._to_event(checkin))
            if profile is not None and profile.id not in identities:
                identities[profile.id] = self._to_identity(profile)

        logger.debug(
            "checkins_fetched",
            time_window=time_window.value,
            role_filter=role_filter.value,
            rows=len(events),
        )
        return events, identities

    async def count_active(self) -> int:
        """
        Number of check-in rows currently flagged as checked in, over all time.
        """
        stmt = (
            select(func.count())
            .select_from(GymCheckIn)
            .where(GymCheckIn.is_checked_in.is_(True))
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    def _to_event(checkin: GymCheckIn) -> AttendanceEvent:
        return AttendanceEvent(
            id=checkin.id,
            user_id=checkin.user_id,
            user_role=parse_role(checkin.user_type, record_id=checkin.id),
            check_in_at=checkin.check_in_time,
            check_out_at=checkin.check_out_time,
            is_active=checkin.is_checked_in,
            reason=checkin.check_in_reason,
        )

    @staticmethod
    def _to_identity(profile: UserProfile) -> UserIdentity:
        return UserIdentity(
            user_id=profile.id,
            full_name=profile.full_name,
            username=profile.username,
            role=parse_identity_role(profile.user_type),
        )
