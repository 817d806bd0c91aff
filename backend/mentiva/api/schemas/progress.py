"""Schemas for the progress summary."""
from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel


class DayDotOut(BaseModel):
    date: date
    completed: bool
    is_today: bool
    is_future: bool


class EnfoqueProgressOut(BaseModel):
    name: str
    completed: int
    total: int


class ProgressResponse(BaseModel):
    week: List[DayDotOut]
    monthly_percentage: int
    enfoques: List[EnfoqueProgressOut]
    current_streak: int
    longest_streak: int
