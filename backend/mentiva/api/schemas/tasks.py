"""Schemas for board-driven task generation."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mentiva.api.schemas.missions import DailyTaskOut


class GenerateTasksRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[UUID] = Field(default=None, alias="userId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    lang: Optional[str] = None


class GenerateTasksResponse(BaseModel):
    tasks: List[DailyTaskOut]
    generated: bool
