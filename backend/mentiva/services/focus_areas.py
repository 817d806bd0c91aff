"""Free-form focus area labels."""
from __future__ import annotations

from typing import List, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.db.models.weekly_plan import FocusArea


def list_focus_areas(db: Session, user_id: UUID) -> List[FocusArea]:
    return (
        db.query(FocusArea)
        .filter(FocusArea.user_id == user_id)
        .order_by(FocusArea.created_at.asc())
        .all()
    )


def stage_focus_areas(db: Session, user_id: UUID, areas: Sequence[str]) -> List[FocusArea]:
    """Swap the user's labels for ``areas`` without committing."""
    db.query(FocusArea).filter(FocusArea.user_id == user_id).delete(synchronize_session=False)
    rows = [FocusArea(user_id=user_id, area=area.strip()) for area in areas if area and area.strip()]
    db.add_all(rows)
    db.flush()
    return rows


def replace_focus_areas(db: Session, user_id: UUID, areas: Sequence[str]) -> List[FocusArea]:
    rows = stage_focus_areas(db, user_id, areas)
    db.commit()
    return rows
