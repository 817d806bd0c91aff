"""Weekly plan persistence and plan-driven task regeneration."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from mentiva.core.clock import CalendarClock
from mentiva.core.config import settings
from mentiva.core.errors import ValidationError
from mentiva.db.models.daily_task import DailyTask
from mentiva.db.models.user import User
from mentiva.db.models.weekly_plan import WeeklyPlan
from mentiva.observability.tracing import trace
from mentiva.services.completion_client import CompletionClient
from mentiva.services.daily_tasks import delete_tasks_for_day, load_recent_history
from mentiva.services.focus_areas import stage_focus_areas
from mentiva.services.instruction_profiles import get_active_sip
from mentiva.services.prompts import TASKS_USER_MESSAGE, DayContext, WeeklyTaskPromptContext, build_weekly_tasks_prompt
from mentiva.services.response_parser import complete_and_parse, parse_weekly_tasks

logger = logging.getLogger(__name__)


@dataclass
class WeeklyPlanResult:
    plan: WeeklyPlan
    tasks: List[DailyTask]
    core_count: int
    bonus_count: int


def get_weekly_plan(db: Session, user_id, week_start: date) -> Optional[WeeklyPlan]:
    return (
        db.query(WeeklyPlan)
        .filter(WeeklyPlan.user_id == user_id, WeeklyPlan.week_start == week_start)
        .first()
    )


def _upsert_weekly_plan(
    db: Session,
    user_id,
    week_start: date,
    focus_goals: List[str],
    context: Dict[str, str],
) -> WeeklyPlan:
    plan = get_weekly_plan(db, user_id, week_start)
    if plan is None:
        plan = WeeklyPlan(user_id=user_id, week_start=week_start)
        db.add(plan)
    plan.focus_goals = focus_goals
    plan.context = context
    db.flush()
    return plan


def run_weekly_planning(
    db: Session,
    user: User,
    *,
    focus_goals: Sequence[str],
    client: CompletionClient,
    clock: CalendarClock,
    context: Optional[Dict[str, str]] = None,
    week_start: Optional[date] = None,
    user_name: Optional[str] = None,
    lang: Optional[str] = None,
) -> WeeklyPlanResult:
    """
    Store the week's focus goals and regenerate today's tasks from them.

    The plan upsert, focus-area replacement and task replacement commit
    together; a failed generation leaves all three untouched.
    """
    goals = [goal.strip() for goal in focus_goals or [] if goal and goal.strip()]
    if not goals:
        raise ValidationError("userId and focusGoals required")

    today = clock.today()
    target_lang = lang or settings.default_lang
    goal_context = {str(key): str(value) for key, value in (context or {}).items() if value}

    plan = _upsert_weekly_plan(db, user.id, week_start or clock.week_start(today), goals, goal_context)
    stage_focus_areas(db, user.id, goals)
    history = load_recent_history(db, user.id, today)
    delete_tasks_for_day(db, user.id, today)

    prompt = build_weekly_tasks_prompt(
        WeeklyTaskPromptContext(
            focus_goals=goals,
            goal_context=goal_context,
            recent_tasks=history,
            day=DayContext(
                day_name=clock.day_name(today),
                is_weekend=clock.is_weekend(today),
                lang=target_lang,
            ),
            user_name=user_name or "friend",
        ),
        get_active_sip(db, user.id),
    )

    with trace(
        "weekly_plan.generate",
        metadata={"week_start": plan.week_start.isoformat(), "focus_goals": goals, "lang": target_lang},
        user_id=str(user.id),
    ):
        drafts = complete_and_parse(
            client,
            prompt,
            TASKS_USER_MESSAGE,
            parse_weekly_tasks,
            max_tokens=settings.completion_max_tokens,
        )

    core = [draft for draft in drafts if draft.type == "core"]
    bonus = [draft for draft in drafts if draft.type == "bonus"]
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
        for index, draft in enumerate(core + bonus)
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    db.refresh(plan)

    logger.info("Weekly plan stored for %s with %s core and %s bonus tasks", plan.week_start, len(core), len(bonus))
    return WeeklyPlanResult(plan=plan, tasks=rows, core_count=len(core), bonus_count=len(bonus))
