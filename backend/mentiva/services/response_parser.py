"""Validation of completion-service output.

The completion service is an untrusted producer: its text may be wrapped in a
markdown fence, may not be JSON, and may carry unexpected fields. Each response
shape is checked against a pydantic envelope, then normalized (valid mission
types only, minutes clamped, labels defaulted).
"""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Callable, List, Literal, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as SchemaError

from mentiva.core.errors import GenerationParseError
from mentiva.db.models.daily_task import SORT_ORDER, TASK_TYPES
from mentiva.services.completion_client import CompletionClient

logger = logging.getLogger(__name__)

MIN_MINUTES = 1
MAX_MINUTES = 60
DEFAULT_MINUTES = 15
PRIORITIES = ("high", "medium", "low")
DEFAULT_PRIORITY = "medium"
GENERATION_ATTEMPTS = 2

_LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?```\s*$")

MissionType = Literal["non_negotiable", "secondary", "micro"]
T = TypeVar("T")


class MissionDraft(BaseModel):
    task_text: str
    task_type: MissionType
    enfoque_name: str
    estimated_minutes: int = Field(..., ge=MIN_MINUTES, le=MAX_MINUTES)


class MissionBatch(BaseModel):
    missions: List[MissionDraft]
    motivational_pulse: str = ""


class FlatTaskDraft(BaseModel):
    task_text: str
    goal_name: str = "General"
    priority: Literal["high", "medium", "low"] = DEFAULT_PRIORITY
    type: Optional[Literal["core", "bonus"]] = None


class SwapDraft(BaseModel):
    task_text: str
    estimated_minutes: int = Field(..., ge=MIN_MINUTES, le=MAX_MINUTES)


class _MissionsEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    missions: List[Any]
    motivational_pulse: Any = ""


class _SwapEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    task_text: Any
    estimated_minutes: Any = None


_flat_envelope = TypeAdapter(List[Any])


def strip_code_fence(text: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    cleaned = (text or "").strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def load_json(text: str) -> Any:
    try:
        return json.loads(strip_code_fence(text))
    except (TypeError, ValueError) as exc:
        raise GenerationParseError("Completion output is not valid JSON", raw=text) from exc


def clamp_minutes(value: Any, default: int = DEFAULT_MINUTES) -> int:
    """Coerce to an int in [1, 60]; anything non-numeric becomes ``default``."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return max(MIN_MINUTES, min(MAX_MINUTES, int(round(number))))


def coerce_priority(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in PRIORITIES:
        return value.strip().lower()
    return DEFAULT_PRIORITY


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_missions(text: str, enfoque_names: Sequence[str] = ()) -> MissionBatch:
    """Parse the ``{"missions": [...], "motivational_pulse": "..."}`` shape.

    Exactly one mission of each type is kept (the first one seen), ordered
    non_negotiable, secondary, micro. A response missing any type is rejected.
    """
    payload = load_json(text)
    try:
        envelope = _MissionsEnvelope.model_validate(payload)
    except SchemaError as exc:
        raise GenerationParseError("Missing missions array", raw=text) from exc

    fallback_enfoque = enfoque_names[0] if enfoque_names else "General"
    by_type: dict[str, MissionDraft] = {}
    for entry in envelope.missions:
        if not isinstance(entry, dict):
            continue
        task_type = entry.get("task_type")
        task_text = _text(entry.get("task_text"))
        if task_type not in TASK_TYPES or not task_text or task_type in by_type:
            continue
        by_type[task_type] = MissionDraft(
            task_text=task_text,
            task_type=task_type,
            enfoque_name=_text(entry.get("enfoque_name")) or fallback_enfoque,
            estimated_minutes=clamp_minutes(entry.get("estimated_minutes")),
        )

    missing = [task_type for task_type in TASK_TYPES if task_type not in by_type]
    if missing:
        raise GenerationParseError(f"Missing mission types: {', '.join(missing)}", raw=text)

    missions = sorted(by_type.values(), key=lambda mission: SORT_ORDER[mission.task_type])
    return MissionBatch(missions=missions[:3], motivational_pulse=_text(envelope.motivational_pulse))


def parse_flat_tasks(text: str) -> List[FlatTaskDraft]:
    """Parse the ``[{"task_text", "goal_name", "priority", "type"?}]`` shape."""
    payload = load_json(text)
    try:
        entries = _flat_envelope.validate_python(payload)
    except SchemaError as exc:
        raise GenerationParseError("Completion output is not a task array", raw=text) from exc

    tasks: List[FlatTaskDraft] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        task_text = _text(entry.get("task_text"))
        if not task_text:
            continue
        kind = entry.get("type")
        tasks.append(
            FlatTaskDraft(
                task_text=task_text,
                goal_name=_text(entry.get("goal_name")) or "General",
                priority=coerce_priority(entry.get("priority")),
                type=kind if kind in ("core", "bonus") else None,
            )
        )
    if not tasks:
        raise GenerationParseError("Completion output contained no tasks", raw=text)
    return tasks


def parse_weekly_tasks(text: str) -> List[FlatTaskDraft]:
    """Flat tasks typed core or bonus; untyped drafts are dropped and a core task is required."""
    tasks = [task for task in parse_flat_tasks(text) if task.type in ("core", "bonus")]
    if not any(task.type == "core" for task in tasks):
        raise GenerationParseError("Completion output contained no core tasks", raw=text)
    return tasks


def parse_swap(text: str, existing_texts: Sequence[str] = ()) -> SwapDraft:
    """Parse the single replacement task ``{"task_text", "estimated_minutes"}``.

    A replacement repeating one of ``existing_texts`` (ignoring case) is rejected.
    """
    payload = load_json(text)
    try:
        envelope = _SwapEnvelope.model_validate(payload)
    except SchemaError as exc:
        raise GenerationParseError("Completion output is not a task object", raw=text) from exc
    task_text = _text(envelope.task_text)
    if not task_text:
        raise GenerationParseError("Replacement task has no text", raw=text)
    if task_text.casefold() in {_text(existing).casefold() for existing in existing_texts}:
        raise GenerationParseError("Replacement repeats an existing task", raw=text)
    return SwapDraft(task_text=task_text, estimated_minutes=clamp_minutes(envelope.estimated_minutes))


def complete_and_parse(
    client: CompletionClient,
    system_prompt: str,
    user_prompt: str,
    parse: Callable[[str], T],
    *,
    max_tokens: int,
    attempts: int = GENERATION_ATTEMPTS,
    failure_message: str = GenerationParseError.default_message,
) -> T:
    """Call the completion service and parse its output, retrying once on a schema mismatch.

    The final failure is re-raised with ``failure_message`` so the client sees a
    generic error while the raw text stays in the logs.
    """
    last_raw = ""
    for attempt in range(1, attempts + 1):
        raw = client.complete(system_prompt, user_prompt, max_tokens=max_tokens)
        try:
            return parse(raw)
        except GenerationParseError as exc:
            last_raw = raw
            logger.warning(
                "Completion output rejected (attempt %s/%s): %s. Raw text: %r",
                attempt,
                attempts,
                exc.message,
                exc.raw,
            )
    logger.error("Giving up on completion output after %s attempts: %r", attempts, last_raw)
    raise GenerationParseError(failure_message, raw=last_raw)
