"""Focus area and System Instruction Profile routes keyed by ``userId``."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentiva.api.schemas.profile import FocusAreasRequest, FocusAreasResponse, FocusAreasUpdateResponse, SipResponse
from mentiva.core.errors import ValidationError
from mentiva.db.deps import get_db
from mentiva.services.focus_areas import list_focus_areas, replace_focus_areas
from mentiva.services.instruction_profiles import get_active_profile
from mentiva.services.user_service import get_or_create_user

router = APIRouter()


@router.get("/focus-areas", response_model=FocusAreasResponse, tags=["profile"])
def read_focus_areas(
    user_id: Optional[UUID] = Query(default=None, alias="userId"),
    db: Session = Depends(get_db),
) -> FocusAreasResponse:
    if user_id is None:
        raise ValidationError("userId required")
    return FocusAreasResponse(areas=[row.area for row in list_focus_areas(db, user_id)])


@router.post("/focus-areas", response_model=FocusAreasUpdateResponse, tags=["profile"])
def write_focus_areas(
    payload: FocusAreasRequest,
    db: Session = Depends(get_db),
) -> FocusAreasUpdateResponse:
    if payload.user_id is None or payload.areas is None:
        raise ValidationError("userId and areas required")
    try:
        get_or_create_user(db, payload.user_id)
        replace_focus_areas(db, payload.user_id, payload.areas)
    except Exception:
        db.rollback()
        raise
    return FocusAreasUpdateResponse(success=True)


@router.get("/sip", response_model=SipResponse, tags=["profile"])
def read_sip(
    user_id: Optional[UUID] = Query(default=None, alias="userId"),
    db: Session = Depends(get_db),
) -> SipResponse:
    if user_id is None:
        raise ValidationError("userId required")
    profile = get_active_profile(db, user_id)
    if profile is None:
        return SipResponse()
    return SipResponse(sip=profile.prompt_text, version=profile.version)
