"""Weekly enfoque routes."""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from mentiva.api.deps import get_clock, get_current_user
from mentiva.api.schemas.enfoque import EnfoqueOut, EnfoquesRequest, EnfoquesResponse
from mentiva.core.clock import CalendarClock
from mentiva.db.deps import get_db
from mentiva.db.models.user import User
from mentiva.observability.metrics import log_metric
from mentiva.observability.tracing import trace
from mentiva.services.enfoque_service import list_enfoques, replace_enfoques

router = APIRouter()


@router.get("/enfoques", response_model=EnfoquesResponse, tags=["enfoques"])
def read_enfoques(
    week_start: Optional[date] = Query(default=None, alias="weekStart"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_clock),
) -> EnfoquesResponse:
    rows = list_enfoques(db, user.id, clock.week_start(week_start))
    return EnfoquesResponse(enfoques=[EnfoqueOut.model_validate(row) for row in rows])


@router.post("/enfoques", response_model=EnfoquesResponse, tags=["enfoques"])
def set_enfoques(
    payload: EnfoquesRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_clock),
) -> EnfoquesResponse:
    """Replace the enfoques (at most three) of the week containing ``weekStart``."""
    request_id = getattr(http_request.state, "request_id", None)
    week_start = clock.week_start(payload.week_start)
    try:
        with trace(
            "enfoques.replace",
            metadata={"route": "/enfoques", "week_start": week_start.isoformat(), "names": payload.enfoque_names},
            user_id=str(user.id),
            request_id=request_id,
        ):
            rows = replace_enfoques(db, user.id, payload.enfoque_names, week_start, payload.north_star_id)
    except Exception:
        db.rollback()
        raise

    log_metric("enfoques.replace.count", len(rows), metadata={"user_id": str(user.id)})
    return EnfoquesResponse(enfoques=[EnfoqueOut.model_validate(row) for row in rows])
