"""Board-driven task generation for users without a weekly plan."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mentiva.api.deps import get_clock, get_completion_client
from mentiva.api.schemas.missions import DailyTaskOut
from mentiva.api.schemas.tasks import GenerateTasksRequest, GenerateTasksResponse
from mentiva.core.clock import CalendarClock
from mentiva.core.errors import ValidationError
from mentiva.db.deps import get_db
from mentiva.observability.metrics import log_metric
from mentiva.observability.tracing import trace
from mentiva.services.board_tasks import generate_daily_tasks_from_boards
from mentiva.services.completion_client import CompletionClient
from mentiva.services.user_service import get_or_create_user

router = APIRouter()


@router.post("/generate-tasks", response_model=GenerateTasksResponse, tags=["tasks"])
def generate_tasks(
    payload: GenerateTasksRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    clock: CalendarClock = Depends(get_clock),
) -> GenerateTasksResponse:
    if payload.user_id is None:
        raise ValidationError("userId required")

    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "tasks.request",
            metadata={"route": "/generate-tasks", "lang": payload.lang},
            user_id=str(payload.user_id),
            request_id=request_id,
        ):
            user = get_or_create_user(db, payload.user_id)
            batch = generate_daily_tasks_from_boards(
                db,
                user,
                client=client,
                clock=clock,
                user_name=payload.user_name,
                lang=payload.lang,
            )
    except Exception:
        db.rollback()
        raise

    log_metric(
        "tasks.generate.count",
        len(batch.tasks),
        metadata={"user_id": str(payload.user_id), "source": batch.source},
    )
    return GenerateTasksResponse(
        tasks=[DailyTaskOut.model_validate(task) for task in batch.tasks],
        generated=batch.generated,
    )
