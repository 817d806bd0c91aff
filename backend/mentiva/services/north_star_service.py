"""North Star reads and replacement."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.core.errors import ValidationError
from mentiva.db.models.north_star import NorthStar


def get_active_north_star(db: Session, user_id: UUID) -> Optional[NorthStar]:
    return (
        db.query(NorthStar)
        .filter(NorthStar.user_id == user_id, NorthStar.is_active.is_(True))
        .first()
    )


def set_north_star(
    db: Session,
    user_id: UUID,
    goal_text: str,
    source_board_id: Optional[UUID] = None,
) -> NorthStar:
    """Deactivate the current goal and activate ``goal_text`` in one transaction."""
    text = (goal_text or "").strip()
    if not text:
        raise ValidationError("goalText required")

    db.query(NorthStar).filter(
        NorthStar.user_id == user_id,
        NorthStar.is_active.is_(True),
    ).update({NorthStar.is_active: False}, synchronize_session="fetch")

    north_star = NorthStar(
        user_id=user_id,
        goal_text=text,
        source_board_id=source_board_id,
        is_active=True,
    )
    db.add(north_star)
    db.commit()
    db.refresh(north_star)
    return north_star
