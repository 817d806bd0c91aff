"""Daily task (mission) ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from mentiva.db.base import Base

TASK_TYPES = ("non_negotiable", "secondary", "micro")
SORT_ORDER = {"non_negotiable": 0, "secondary": 1, "micro": 2}


class DailyTask(Base):
    __tablename__ = "daily_tasks"
    __table_args__ = (
        Index("ix_daily_tasks_user_date", "user_id", "date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    task_text = Column(Text, nullable=False)
    goal_name = Column(Text, nullable=True)
    enfoque_name = Column(Text, nullable=True)
    # NULL for legacy untyped tasks.
    task_type = Column(String(length=32), nullable=True)
    priority = Column(String(length=16), nullable=True)
    estimated_minutes = Column(Integer, nullable=True)
    completed = Column(Boolean, nullable=False, default=False, server_default=sa_text("false"))
    completed_at = Column(DateTime(timezone=True), nullable=True)
    date = Column(Date, nullable=False)
    lang = Column(String(length=8), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0, server_default=sa_text("0"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
