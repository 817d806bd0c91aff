"""Streak bookkeeping for non-negotiable completions."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.db.models.streak import StreakDay

STREAK_LOOKBACK_ROWS = 60


def compute_streak(completed_days: Iterable[date], today: date) -> int:
    """Count the run of completed days ending yesterday, plus today when it is done.

    ``completed_days`` must be ordered newest first. Today extends the run
    without taking part in the backward walk, so a run that stopped yesterday
    still counts before today's non-negotiable is done.
    """
    streak = 0
    cursor = today - timedelta(days=1)
    for day in completed_days:
        if day == cursor:
            streak += 1
            cursor -= timedelta(days=1)
        elif day == today:
            streak += 1
        else:
            break
    return streak


def longest_streak(completed_days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days in ``completed_days`` (any order)."""
    longest = 0
    current = 0
    previous: date | None = None
    for day in sorted(set(completed_days)):
        if previous is not None and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


def load_completed_days(db: Session, user_id: UUID, limit: int | None = STREAK_LOOKBACK_ROWS) -> List[date]:
    query = (
        db.query(StreakDay.date)
        .filter(StreakDay.user_id == user_id, StreakDay.non_negotiable_completed.is_(True))
        .order_by(StreakDay.date.desc())
    )
    if limit:
        query = query.limit(limit)
    return [row.date for row in query.all()]


def get_current_streak(db: Session, user_id: UUID, today: date) -> int:
    return compute_streak(load_completed_days(db, user_id), today)


def upsert_streak_day(db: Session, user_id: UUID, day: date, completed: bool) -> StreakDay:
    """Create or update the (user, day) streak row; the caller commits."""
    row = (
        db.query(StreakDay)
        .filter(StreakDay.user_id == user_id, StreakDay.date == day)
        .first()
    )
    if row is None:
        row = StreakDay(user_id=user_id, date=day, non_negotiable_completed=completed)
        db.add(row)
    else:
        row.non_negotiable_completed = completed
    db.flush()
    return row
