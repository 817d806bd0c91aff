"""System Instruction Profile lookup."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from mentiva.db.models.vision_board import SystemInstructionProfile


def get_active_profile(db: Session, user_id: UUID) -> Optional[SystemInstructionProfile]:
    return (
        db.query(SystemInstructionProfile)
        .filter(
            SystemInstructionProfile.user_id == user_id,
            SystemInstructionProfile.is_active.is_(True),
        )
        .order_by(SystemInstructionProfile.version.desc())
        .first()
    )


def get_active_sip(db: Session, user_id: UUID) -> Optional[str]:
    """Prompt text of the user's newest active profile, if any."""
    profile = get_active_profile(db, user_id)
    return profile.prompt_text if profile else None
