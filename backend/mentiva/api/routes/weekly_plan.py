"""Weekly plan route."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mentiva.api.deps import get_clock, get_completion_client
from mentiva.api.schemas.missions import DailyTaskOut
from mentiva.api.schemas.weekly_plan import WeeklyPlanRequest, WeeklyPlanResponse
from mentiva.core.clock import CalendarClock
from mentiva.core.errors import ValidationError
from mentiva.db.deps import get_db
from mentiva.observability.metrics import timed
from mentiva.observability.tracing import trace
from mentiva.services.completion_client import CompletionClient
from mentiva.services.user_service import get_or_create_user
from mentiva.services.weekly_planner import run_weekly_planning

router = APIRouter()


@router.post("/weekly-plan", response_model=WeeklyPlanResponse, tags=["weekly-plan"])
def create_weekly_plan(
    payload: WeeklyPlanRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    clock: CalendarClock = Depends(get_clock),
) -> WeeklyPlanResponse:
    """Store the week's focus goals and rebuild today's tasks around them."""
    if payload.user_id is None or not payload.focus_goals:
        raise ValidationError("userId and focusGoals required")

    request_id = getattr(http_request.state, "request_id", None)
    try:
        with timed("weekly_plan.run", metadata={"user_id": str(payload.user_id)}), trace(
            "weekly_plan.request",
            metadata={"route": "/weekly-plan", "week_start": payload.week_start.isoformat() if payload.week_start else None},
            user_id=str(payload.user_id),
            request_id=request_id,
        ):
            user = get_or_create_user(db, payload.user_id)
            result = run_weekly_planning(
                db,
                user,
                focus_goals=payload.focus_goals,
                client=client,
                clock=clock,
                context=payload.context,
                week_start=payload.week_start,
                user_name=payload.user_name,
                lang=payload.lang,
            )
    except Exception:
        db.rollback()
        raise

    return WeeklyPlanResponse(
        tasks=[DailyTaskOut.model_validate(task) for task in result.tasks],
        core_count=result.core_count,
        bonus_count=result.bonus_count,
        generated=True,
    )
