"""Daily mission routes: generate, swap and complete."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mentiva.api.deps import get_clock, get_completion_client, get_current_user
from mentiva.api.schemas.missions import (
    DailyTaskOut,
    GenerateMissionsRequest,
    GenerateMissionsResponse,
    SwapTaskRequest,
    SwapTaskResponse,
    TaskUpdateRequest,
    TaskUpdateResponse,
)
from mentiva.core.clock import CalendarClock
from mentiva.core.errors import ValidationError
from mentiva.db.deps import get_db
from mentiva.db.models.user import User
from mentiva.observability.metrics import log_metric
from mentiva.observability.tracing import trace
from mentiva.services.completion_client import CompletionClient
from mentiva.services.daily_tasks import set_task_completion
from mentiva.services.mission_planner import ensure_today_tasks, swap_task

router = APIRouter()


@router.post("/generate-missions", response_model=GenerateMissionsResponse, tags=["missions"])
def generate_missions(
    payload: GenerateMissionsRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    clock: CalendarClock = Depends(get_clock),
) -> GenerateMissionsResponse:
    """Return today's three missions, generating them when the day has none."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/generate-missions",
        "lang": payload.lang,
        "force_regenerate": payload.force_regenerate,
    }

    start_time = datetime.now(timezone.utc)
    try:
        with trace("missions.request", metadata=metadata, user_id=str(user.id), request_id=request_id):
            result = ensure_today_tasks(
                db,
                user,
                client=client,
                clock=clock,
                lang=payload.lang,
                force_regenerate=payload.force_regenerate,
            )
    except Exception:
        db.rollback()
        log_metric("missions.generate.success", 0, metadata={"user_id": str(user.id)})
        raise

    latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    log_metric("missions.generate.success", 1, metadata={"user_id": str(user.id), "generated": result.generated})
    log_metric("missions.generate.latency_ms", latency_ms, metadata={"generated": result.generated})

    return GenerateMissionsResponse(
        missions=[DailyTaskOut.model_validate(task) for task in result.missions],
        motivational_pulse=result.motivational_pulse,
        streak=result.streak,
        generated=result.generated,
    )


@router.post("/swap-task", response_model=SwapTaskResponse, tags=["missions"])
def swap_daily_task(
    payload: SwapTaskRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> SwapTaskResponse:
    """Replace a secondary or micro task with a fresh alternative."""
    if payload.task_id is None:
        raise ValidationError("taskId required")

    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "missions.swap_request",
            metadata={"route": "/swap-task", "task_id": str(payload.task_id)},
            user_id=str(user.id),
            request_id=request_id,
        ):
            task = swap_task(db, user, payload.task_id, client=client, lang=payload.lang)
    except Exception:
        db.rollback()
        raise

    log_metric("missions.swap.success", 1, metadata={"user_id": str(user.id), "task_type": task.task_type})
    return SwapTaskResponse(task=DailyTaskOut.model_validate(task))


@router.patch("/tasks/{task_id}", response_model=TaskUpdateResponse, tags=["missions"])
def update_task_completion(
    task_id: UUID,
    payload: TaskUpdateRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_clock),
) -> TaskUpdateResponse:
    """Mark a task complete or incomplete; non-negotiable tasks also move the streak."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "task.complete",
            metadata={"route": f"/tasks/{task_id}", "task_id": str(task_id), "completed": payload.completed},
            user_id=str(user.id),
            request_id=request_id,
        ):
            toggle = set_task_completion(db, user.id, task_id, payload.completed, clock.today())
    except Exception:
        db.rollback()
        raise

    log_metric("task.complete.changed", 1 if toggle.changed else 0, metadata={"task_id": str(task_id)})
    return TaskUpdateResponse(task=DailyTaskOut.model_validate(toggle.task), streak=toggle.streak)
