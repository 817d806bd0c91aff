"""Shared reads/writes on the daily_tasks table."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.core.errors import NotFound
from mentiva.db.models.daily_task import DailyTask
from mentiva.services.prompts import HistoryItem
from mentiva.services.streaks import get_current_streak, upsert_streak_day

HISTORY_DAYS = 7


@dataclass
class CompletionToggle:
    task: DailyTask
    streak: int
    changed: bool


def list_tasks_for_day(db: Session, user_id: UUID, day: date) -> List[DailyTask]:
    return (
        db.query(DailyTask)
        .filter(DailyTask.user_id == user_id, DailyTask.date == day)
        .order_by(DailyTask.sort_order.asc(), DailyTask.created_at.asc())
        .all()
    )


def delete_tasks_for_day(db: Session, user_id: UUID, day: date) -> int:
    """Remove the day's rows inside the caller's transaction (not committed here)."""
    return (
        db.query(DailyTask)
        .filter(DailyTask.user_id == user_id, DailyTask.date == day)
        .delete(synchronize_session=False)
    )


def load_recent_history(db: Session, user_id: UUID, today: date, days: int = HISTORY_DAYS) -> List[HistoryItem]:
    """Tasks from the ``days`` days before ``today``, newest first."""
    rows = (
        db.query(DailyTask)
        .filter(
            DailyTask.user_id == user_id,
            DailyTask.date >= today - timedelta(days=days),
            DailyTask.date < today,
        )
        .order_by(DailyTask.date.desc(), DailyTask.sort_order.asc())
        .all()
    )
    return [
        HistoryItem(
            task_text=row.task_text,
            completed=bool(row.completed),
            date=row.date.isoformat(),
            task_type=row.task_type or "secondary",
            goal_name=row.goal_name,
        )
        for row in rows
    ]


def get_owned_task(db: Session, user_id: UUID, task_id: UUID) -> DailyTask:
    task = (
        db.query(DailyTask)
        .filter(DailyTask.id == task_id, DailyTask.user_id == user_id)
        .first()
    )
    if task is None:
        raise NotFound("Task not found")
    return task


def set_task_completion(
    db: Session,
    user_id: UUID,
    task_id: UUID,
    completed: bool,
    today: date,
) -> CompletionToggle:
    """Toggle a task; a non-negotiable task also updates that day's streak row."""
    task = get_owned_task(db, user_id, task_id)
    changed = bool(task.completed) != completed
    if changed:
        task.completed = completed
        task.completed_at = datetime.now(timezone.utc) if completed else None
    if task.task_type == "non_negotiable":
        upsert_streak_day(db, user_id, task.date, completed)
    db.commit()
    db.refresh(task)
    return CompletionToggle(task=task, streak=get_current_streak(db, user_id, today), changed=changed)
