from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    Text,
    func,
)
from app.db.base import Base


class GymCheckIn(Base):
    """
    One check-in at the gym. The check-out is recorded on the same row.

    `is_checked_in` and `check_out_time` are written by separate updates
    upstream and may briefly disagree.
    """

    __tablename__ = "gym_checkins"

    id = Column(String(36), primary_key=True)

    user_id = Column(
        String(36),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Role at check-in time; the profile may have changed since.
    user_type = Column(String(16), nullable=False, default="user")

    check_in_time = Column(DateTime(timezone=True), nullable=False, index=True)
    check_out_time = Column(DateTime(timezone=True), nullable=True)

    is_checked_in = Column(Boolean, nullable=False, default=True, index=True)

    check_in_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return (
            f"<GymCheckIn id={self.id} user_id={self.user_id} "
            f"check_in_time={self.check_in_time} is_checked_in={self.is_checked_in}>"
        )
