"""Vision board and System Instruction Profile ORM models.

Both tables are written by other services (board analysis, onboarding);
this backend only reads them.
"""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from mentiva.db.base import Base
from mentiva.db.types import JSONDocument


class VisionBoard(Base):
    __tablename__ = "vision_boards"
    __table_args__ = (Index("ix_vision_boards_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    image_url = Column(Text, nullable=True)
    analysis = Column(JSONDocument, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SystemInstructionProfile(Base):
    __tablename__ = "system_instruction_profiles"
    __table_args__ = (Index("ix_system_instruction_profiles_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    prompt_text = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, default=1, server_default=sa_text("1"))
    is_active = Column(Boolean, nullable=False, default=True, server_default=sa_text("true"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
