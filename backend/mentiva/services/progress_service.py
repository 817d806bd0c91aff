"""Read-only progress summary: week dots, monthly rate, per-enfoque counts and streaks."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.core.clock import CalendarClock
from mentiva.db.models.daily_task import DailyTask
from mentiva.db.models.streak import StreakDay
from mentiva.services.streaks import compute_streak, load_completed_days, longest_streak


@dataclass
class DayDot:
    date: date
    completed: bool
    is_today: bool
    is_future: bool


@dataclass
class EnfoqueProgress:
    name: str
    completed: int = 0
    total: int = 0


@dataclass
class ProgressSummary:
    week: List[DayDot]
    monthly_percentage: int
    enfoques: List[EnfoqueProgress] = field(default_factory=list)
    current_streak: int = 0
    longest_streak: int = 0


def _completed_days_between(db: Session, user_id: UUID, start: date, end: date) -> set[date]:
    rows = (
        db.query(StreakDay.date)
        .filter(
            StreakDay.user_id == user_id,
            StreakDay.date >= start,
            StreakDay.date <= end,
            StreakDay.non_negotiable_completed.is_(True),
        )
        .all()
    )
    return {row.date for row in rows}


def _enfoque_progress(db: Session, user_id: UUID, start: date, end: date) -> List[EnfoqueProgress]:
    tasks = (
        db.query(DailyTask)
        .filter(DailyTask.user_id == user_id, DailyTask.date >= start, DailyTask.date <= end)
        .order_by(DailyTask.date.asc(), DailyTask.sort_order.asc())
        .all()
    )
    buckets: Dict[str, EnfoqueProgress] = {}
    for task in tasks:
        name = task.enfoque_name or task.goal_name or "General"
        bucket = buckets.setdefault(name, EnfoqueProgress(name=name))
        bucket.total += 1
        if task.completed:
            bucket.completed += 1
    return list(buckets.values())


def build_progress(db: Session, user_id: UUID, clock: CalendarClock) -> ProgressSummary:
    today = clock.today()
    week = clock.week_dates(today)
    month_start = clock.month_start(today)

    week_done = _completed_days_between(db, user_id, week[0], week[-1])
    month_done = _completed_days_between(db, user_id, month_start, today)
    elapsed = (today - month_start).days + 1

    all_days = load_completed_days(db, user_id, limit=None)
    return ProgressSummary(
        week=[
            DayDot(date=day, completed=day in week_done, is_today=day == today, is_future=day > today)
            for day in week
        ],
        monthly_percentage=round(100 * len(month_done) / elapsed),
        enfoques=_enfoque_progress(db, user_id, week[0], week[-1]),
        current_streak=compute_streak(all_days, today),
        longest_streak=longest_streak(all_days),
    )
