"""North Star ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from mentiva.db.base import Base


class NorthStar(Base):
    __tablename__ = "north_stars"
    __table_args__ = (
        Index("ix_north_stars_user_id", "user_id"),
        # At most one active goal per user.
        Index(
            "uq_north_stars_active_user",
            "user_id",
            unique=True,
            postgresql_where=sa_text("is_active"),
            sqlite_where=sa_text("is_active = 1"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    goal_text = Column(Text, nullable=False)
    source_board_id = Column(
        UUID(as_uuid=True),
        ForeignKey("vision_boards.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default=sa_text("true"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
