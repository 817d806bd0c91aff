"""Board-driven daily tasks for users who skip weekly planning."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import Session

from mentiva.core.clock import CalendarClock
from mentiva.core.config import settings
from mentiva.core.errors import GenerationParseError
from mentiva.db.models.daily_task import DailyTask
from mentiva.db.models.user import User
from mentiva.db.models.vision_board import VisionBoard
from mentiva.observability.tracing import trace
from mentiva.services.completion_client import CompletionClient
from mentiva.services.daily_tasks import list_tasks_for_day, load_recent_history
from mentiva.services.focus_areas import list_focus_areas
from mentiva.services.instruction_profiles import get_active_sip
from mentiva.services.prompts import TASKS_USER_MESSAGE, BoardPromptContext, DayContext, build_board_tasks_prompt
from mentiva.services.response_parser import FlatTaskDraft, complete_and_parse, parse_flat_tasks

logger = logging.getLogger(__name__)

BOARD_LOOKBACK = 5
MAX_BOARD_TASKS = 5


@dataclass
class TaskBatch:
    tasks: List[DailyTask]
    generated: bool
    source: str = "cached"


def board_goal_lines(analysis: Optional[Mapping[str, Any]]) -> List[str]:
    """``goal: step, step`` lines from one analysis, or its plain goals."""
    if not isinstance(analysis, Mapping):
        return []
    with_steps = analysis.get("goalsWithSteps")
    if isinstance(with_steps, list) and with_steps:
        lines = []
        for entry in with_steps:
            if not isinstance(entry, Mapping) or not entry.get("goal"):
                continue
            steps = [str(step) for step in entry.get("steps") or [] if step]
            lines.append(f"{entry['goal']}: {', '.join(steps)}")
        return lines
    goals = analysis.get("goals")
    if isinstance(goals, list):
        return [str(goal) for goal in goals if goal]
    return []


def tasks_from_goal_steps(analysis: Optional[Mapping[str, Any]], limit: int = MAX_BOARD_TASKS) -> List[FlatTaskDraft]:
    """Turn a board's goal steps directly into tasks, without the completion service."""
    if not isinstance(analysis, Mapping):
        return []
    drafts: List[FlatTaskDraft] = []
    for entry in analysis.get("goalsWithSteps") or []:
        if not isinstance(entry, Mapping):
            continue
        label = str(entry.get("area") or entry.get("goal") or "General")
        for step in entry.get("steps") or []:
            text = str(step).strip() if step else ""
            if not text:
                continue
            drafts.append(FlatTaskDraft(task_text=text, goal_name=label))
            if len(drafts) >= limit:
                return drafts
    return drafts


def _recent_boards(db: Session, user: User) -> List[VisionBoard]:
    return (
        db.query(VisionBoard)
        .filter(VisionBoard.user_id == user.id)
        .order_by(VisionBoard.created_at.desc())
        .limit(BOARD_LOOKBACK)
        .all()
    )


def generate_daily_tasks_from_boards(
    db: Session,
    user: User,
    *,
    client: CompletionClient,
    clock: CalendarClock,
    user_name: Optional[str] = None,
    lang: Optional[str] = None,
) -> TaskBatch:
    today = clock.today()
    existing = list_tasks_for_day(db, user.id, today)
    if existing:
        return TaskBatch(tasks=existing, generated=False)

    target_lang = lang or settings.default_lang
    boards = _recent_boards(db, user)
    board_goals = [line for board in boards for line in board_goal_lines(board.analysis)]
    prompt = build_board_tasks_prompt(
        BoardPromptContext(
            board_goals=board_goals,
            focus_areas=[row.area for row in list_focus_areas(db, user.id)],
            recent_tasks=load_recent_history(db, user.id, today),
            day=DayContext(
                day_name=clock.day_name(today),
                is_weekend=clock.is_weekend(today),
                lang=target_lang,
            ),
            user_name=user_name or "friend",
        ),
        get_active_sip(db, user.id),
    )

    source = "completion"
    with trace(
        "tasks.generate_from_boards",
        metadata={"boards": len(boards), "lang": target_lang},
        user_id=str(user.id),
    ):
        try:
            drafts = complete_and_parse(
                client,
                prompt,
                TASKS_USER_MESSAGE,
                parse_flat_tasks,
                max_tokens=settings.completion_max_tokens,
            )
        except GenerationParseError:
            drafts = tasks_from_goal_steps(boards[0].analysis) if boards else []
            if not drafts:
                raise
            source = "goal_steps"
            logger.warning("Falling back to %s board goal steps for today's tasks", len(drafts))

    rows = [
        DailyTask(
            user_id=user.id,
            task_text=draft.task_text,
            goal_name=draft.goal_name,
            priority=draft.priority,
            completed=False,
            date=today,
            lang=target_lang,
            sort_order=index,
        )
        for index, draft in enumerate(drafts[:MAX_BOARD_TASKS])
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return TaskBatch(tasks=rows, generated=True, source=source)
