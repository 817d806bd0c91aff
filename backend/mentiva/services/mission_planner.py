"""Daily mission orchestration: one coherent set of three missions per user per day."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from mentiva.core.clock import CalendarClock
from mentiva.core.config import settings
from mentiva.core.errors import ImmutableTask, NoEnfoques, NoNorthStar
from mentiva.db.models.daily_task import SORT_ORDER, DailyTask
from mentiva.db.models.user import User
from mentiva.observability.tracing import trace
from mentiva.services.completion_client import CompletionClient
from mentiva.services.daily_tasks import (
    delete_tasks_for_day,
    get_owned_task,
    list_tasks_for_day,
    load_recent_history,
)
from mentiva.services.enfoque_service import list_enfoques
from mentiva.services.instruction_profiles import get_active_sip
from mentiva.services.north_star_service import get_active_north_star
from mentiva.services.prompts import (
    MISSIONS_USER_MESSAGE,
    DayContext,
    MissionPromptContext,
    SwapPromptContext,
    build_mission_prompt,
    build_swap_prompt,
)
from mentiva.services.response_parser import complete_and_parse, parse_missions, parse_swap
from mentiva.services.streaks import get_current_streak, upsert_streak_day
from mentiva.services.user_service import first_name

logger = logging.getLogger(__name__)

SWAP_SYSTEM_PROMPT = "You are Menti, an AI life mentor. You replace one daily task with a fresh alternative."


@dataclass
class MissionDay:
    missions: List[DailyTask]
    streak: int
    generated: bool
    motivational_pulse: Optional[str] = None


def ensure_today_tasks(
    db: Session,
    user: User,
    *,
    client: CompletionClient,
    clock: CalendarClock,
    lang: Optional[str] = None,
    force_regenerate: bool = False,
) -> MissionDay:
    """
    Return today's missions, generating them when needed.

    Existing rows are reused unless ``force_regenerate`` is set or they were
    generated in another language. Replacing the day's rows happens in one
    transaction: if generation fails the previous set is kept.
    """
    today = clock.today()
    user_id = user.id

    if not force_regenerate:
        existing = list_tasks_for_day(db, user_id, today)
        if existing and (not lang or existing[0].lang == lang):
            return MissionDay(
                missions=existing,
                streak=get_current_streak(db, user_id, today),
                generated=False,
            )

    target_lang = lang or settings.default_lang
    deleted = delete_tasks_for_day(db, user_id, today)

    north_star = get_active_north_star(db, user_id)
    if north_star is None:
        raise NoNorthStar()

    enfoques = list_enfoques(db, user_id, clock.week_start(today))
    if not enfoques:
        raise NoEnfoques()
    enfoque_names = [enfoque.name for enfoque in enfoques]

    history = load_recent_history(db, user_id, today)
    streak = get_current_streak(db, user_id, today)
    yesterday = clock.yesterday().isoformat()
    skipped_yesterday = any(
        item.date == yesterday and item.task_type == "non_negotiable" and not item.completed
        for item in history
    )

    prompt = build_mission_prompt(
        MissionPromptContext(
            north_star=north_star.goal_text,
            enfoques=enfoque_names,
            recent_tasks=history,
            day=DayContext(
                day_name=clock.day_name(today),
                is_weekend=clock.is_weekend(today),
                lang=target_lang,
            ),
            current_streak=streak,
            user_name=first_name(user),
            non_negotiable_skipped_yesterday=skipped_yesterday,
        ),
        get_active_sip(db, user_id),
    )

    with trace(
        "missions.generate",
        metadata={
            "lang": target_lang,
            "force_regenerate": force_regenerate,
            "replaced_rows": deleted,
            "enfoques": enfoque_names,
            "streak": streak,
        },
        user_id=str(user_id),
    ):
        batch = complete_and_parse(
            client,
            prompt,
            MISSIONS_USER_MESSAGE,
            lambda text: parse_missions(text, enfoque_names),
            max_tokens=settings.completion_max_tokens,
            failure_message="Failed to generate missions",
        )

    rows = [
        DailyTask(
            user_id=user_id,
            task_text=mission.task_text,
            goal_name=mission.enfoque_name,
            enfoque_name=mission.enfoque_name,
            task_type=mission.task_type,
            estimated_minutes=mission.estimated_minutes,
            completed=False,
            date=today,
            lang=target_lang,
            sort_order=SORT_ORDER[mission.task_type],
        )
        for mission in batch.missions
    ]
    db.add_all(rows)
    upsert_streak_day(db, user_id, today, False)
    db.commit()
    for row in rows:
        db.refresh(row)

    logger.info("Generated %s missions for %s (replaced %s rows)", len(rows), today, deleted)
    return MissionDay(
        missions=rows,
        streak=streak,
        generated=True,
        motivational_pulse=batch.motivational_pulse,
    )


def swap_task(
    db: Session,
    user: User,
    task_id,
    *,
    client: CompletionClient,
    lang: Optional[str] = None,
) -> DailyTask:
    """Replace a secondary/micro (or untyped) task with a different one of the same kind."""
    task = get_owned_task(db, user.id, task_id)
    if task.task_type == "non_negotiable":
        raise ImmutableTask()

    existing_texts = [row.task_text for row in list_tasks_for_day(db, user.id, task.date)]
    north_star = get_active_north_star(db, user.id)
    prompt = build_swap_prompt(
        SwapPromptContext(
            task_text=task.task_text,
            task_type=task.task_type,
            enfoque_name=task.enfoque_name or task.goal_name,
            existing_texts=existing_texts,
            north_star=north_star.goal_text if north_star else None,
            lang=lang or task.lang or settings.default_lang,
        )
    )

    with trace(
        "missions.swap",
        metadata={"task_id": str(task.id), "task_type": task.task_type},
        user_id=str(user.id),
    ):
        replacement = complete_and_parse(
            client,
            SWAP_SYSTEM_PROMPT,
            prompt,
            lambda text: parse_swap(text, existing_texts),
            max_tokens=settings.swap_max_tokens,
            failure_message="Failed to swap task",
        )

    task.task_text = replacement.task_text
    task.estimated_minutes = replacement.estimated_minutes
    db.commit()
    db.refresh(task)
    return task
