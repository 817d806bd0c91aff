"""Schemas for weekly enfoques."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EnfoqueOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    north_star_id: Optional[UUID] = None
    week_start: date
    position: int = 0
    created_at: Optional[datetime] = None


class EnfoquesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enfoque_names: Optional[List[str]] = Field(default=None, alias="enfoqueNames")
    north_star_id: Optional[UUID] = Field(default=None, alias="northStarId")
    week_start: Optional[date] = Field(default=None, alias="weekStart")


class EnfoquesResponse(BaseModel):
    enfoques: List[EnfoqueOut]
