"""Schemas for focus areas and the System Instruction Profile lookup."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FocusAreasRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[UUID] = Field(default=None, alias="userId")
    areas: Optional[List[str]] = None


class FocusAreasResponse(BaseModel):
    areas: List[str]


class FocusAreasUpdateResponse(BaseModel):
    success: bool


class SipResponse(BaseModel):
    sip: Optional[str] = None
    version: Optional[int] = None
