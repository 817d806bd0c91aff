"""Schemas for the weekly plan endpoint."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mentiva.api.schemas.missions import DailyTaskOut


class WeeklyPlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[UUID] = Field(default=None, alias="userId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    lang: Optional[str] = None
    focus_goals: Optional[List[str]] = Field(default=None, alias="focusGoals")
    context: Optional[Dict[str, str]] = None
    week_start: Optional[date] = Field(default=None, alias="weekStart")


class WeeklyPlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tasks: List[DailyTaskOut]
    core_count: int = Field(alias="coreCount")
    bonus_count: int = Field(alias="bonusCount")
    generated: bool = True
