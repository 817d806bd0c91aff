"""Progress summary route."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mentiva.api.deps import get_clock, get_current_user
from mentiva.api.schemas.progress import ProgressResponse
from mentiva.core.clock import CalendarClock
from mentiva.db.deps import get_db
from mentiva.db.models.user import User
from mentiva.services.progress_service import build_progress

router = APIRouter()


@router.get("/progress", response_model=ProgressResponse, tags=["progress"])
def read_progress(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_clock),
) -> ProgressResponse:
    return ProgressResponse.model_validate(asdict(build_progress(db, user.id, clock)))
