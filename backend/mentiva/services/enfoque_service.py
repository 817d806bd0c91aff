"""Weekly focus areas (enfoques)."""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.core.errors import ValidationError
from mentiva.db.models.enfoque import Enfoque

MAX_ENFOQUES = 3


def list_enfoques(db: Session, user_id: UUID, week_start: date) -> List[Enfoque]:
    return (
        db.query(Enfoque)
        .filter(Enfoque.user_id == user_id, Enfoque.week_start == week_start)
        .order_by(Enfoque.position.asc(), Enfoque.created_at.asc())
        .all()
    )


def replace_enfoques(
    db: Session,
    user_id: UUID,
    names: Optional[Sequence[str]],
    week_start: date,
    north_star_id: Optional[UUID] = None,
) -> List[Enfoque]:
    """Swap the week's enfoques for ``names`` atomically (at most three)."""
    if not names:
        raise ValidationError("enfoqueNames required (array)")
    if len(names) > MAX_ENFOQUES:
        raise ValidationError("Maximum 3 enfoques")
    cleaned = [name.strip() for name in names]
    if any(not name for name in cleaned):
        raise ValidationError("Enfoque names must not be empty")

    db.query(Enfoque).filter(
        Enfoque.user_id == user_id,
        Enfoque.week_start == week_start,
    ).delete(synchronize_session=False)

    rows = [
        Enfoque(
            user_id=user_id,
            name=name,
            north_star_id=north_star_id,
            week_start=week_start,
            position=index,
        )
        for index, name in enumerate(cleaned)
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows
