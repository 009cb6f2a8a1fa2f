from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from storefront.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    avatar = Column(String, nullable=True)

    role = Column(String(20), nullable=False, default="user")  # user, admin, moderator
    status = Column(String(20), nullable=False, default="active")  # active, inactive, pending, locked

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
