"""Enfoque (weekly focus area) ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from mentiva.db.base import Base


class Enfoque(Base):
    __tablename__ = "enfoques"
    __table_args__ = (Index("ix_enfoques_user_week", "user_id", "week_start"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    north_star_id = Column(
        UUID(as_uuid=True),
        ForeignKey("north_stars.id", ondelete="SET NULL"),
        nullable=True,
    )
    week_start = Column(Date, nullable=False)
    position = Column(Integer, nullable=False, default=0, server_default=sa_text("0"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
