from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.checkin_repository import CheckInRepository


async def get_checkin_repository(
    db: AsyncSession = Depends(get_db),
) -> CheckInRepository:
    """
    Provide a CheckInRepository bound to the request's DB session.
    """
    return CheckInRepository(db)
