"""Schemas for daily missions, task swaps and completion toggles."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DailyTaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    task_text: str
    goal_name: Optional[str] = None
    enfoque_name: Optional[str] = None
    task_type: Optional[str] = None
    priority: Optional[str] = None
    estimated_minutes: Optional[int] = None
    completed: bool
    completed_at: Optional[datetime] = None
    date: date
    lang: Optional[str] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None


class GenerateMissionsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lang: Optional[str] = None
    force_regenerate: bool = Field(default=False, alias="forceRegenerate")


class GenerateMissionsResponse(BaseModel):
    missions: List[DailyTaskOut]
    motivational_pulse: Optional[str] = None
    streak: int
    generated: bool


class SwapTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: Optional[UUID] = Field(default=None, alias="taskId")
    lang: Optional[str] = None


class SwapTaskResponse(BaseModel):
    task: DailyTaskOut


class TaskUpdateRequest(BaseModel):
    completed: bool


class TaskUpdateResponse(BaseModel):
    task: DailyTaskOut
    streak: int
