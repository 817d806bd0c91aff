"""Streak day ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, UniqueConstraint, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from mentiva.db.base import Base


class StreakDay(Base):
    __tablename__ = "streaks"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_streaks_user_date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    non_negotiable_completed = Column(Boolean, nullable=False, default=False, server_default=sa_text("false"))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
