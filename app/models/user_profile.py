from sqlalchemy import Column, DateTime, String, func

from app.db.base import Base


class UserProfile(Base):
    """
    Profile of a gym member or trainer, joined onto check-ins by id.
    """

    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True)

    username = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)

    # "user" for members, "trainer" for trainers
    user_type = Column(String(16), nullable=False, default="user", index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<UserProfile id={self.id} user_type={self.user_type}>"
