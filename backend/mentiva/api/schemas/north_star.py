"""Schemas for the North Star endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NorthStarOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    goal_text: str
    source_board_id: Optional[UUID] = None
    is_active: bool
    created_at: Optional[datetime] = None


class NorthStarRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    goal_text: Optional[str] = Field(default=None, alias="goalText")
    source_board_id: Optional[UUID] = Field(default=None, alias="sourceBoardId")


class NorthStarResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    north_star: Optional[NorthStarOut] = Field(default=None, alias="northStar")
