"""North Star routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mentiva.api.deps import get_current_user
from mentiva.api.schemas.north_star import NorthStarOut, NorthStarRequest, NorthStarResponse
from mentiva.db.deps import get_db
from mentiva.db.models.user import User
from mentiva.observability.metrics import log_metric
from mentiva.observability.tracing import trace
from mentiva.services.north_star_service import get_active_north_star, set_north_star

router = APIRouter()


@router.get("/north-star", response_model=NorthStarResponse, tags=["north-star"])
def read_north_star(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NorthStarResponse:
    north_star = get_active_north_star(db, user.id)
    return NorthStarResponse(north_star=NorthStarOut.model_validate(north_star) if north_star else None)


@router.post("/north-star", response_model=NorthStarResponse, tags=["north-star"])
def replace_north_star(
    payload: NorthStarRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NorthStarResponse:
    """Make ``goalText`` the user's only active North Star."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "north_star.set",
            metadata={"route": "/north-star", "source_board_id": str(payload.source_board_id) if payload.source_board_id else None},
            user_id=str(user.id),
            request_id=request_id,
        ):
            north_star = set_north_star(db, user.id, payload.goal_text or "", payload.source_board_id)
    except Exception:
        db.rollback()
        raise

    log_metric("north_star.set.success", 1, metadata={"user_id": str(user.id)})
    return NorthStarResponse(north_star=NorthStarOut.model_validate(north_star))
