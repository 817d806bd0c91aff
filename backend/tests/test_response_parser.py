from __future__ import annotations

import json

import pytest

from mentiva.core.errors import GenerationParseError
from mentiva.services.completion_client import CompletionClient
from mentiva.services.response_parser import (
    clamp_minutes,
    complete_and_parse,
    parse_flat_tasks,
    parse_missions,
    parse_swap,
    parse_weekly_tasks,
    strip_code_fence,
)


class ScriptedClient(CompletionClient):
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    def complete(self, system_prompt: str, user_prompt: str, *, max_tokens: int) -> str:
        self.calls += 1
        return self.responses.pop(0)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(-5, 1), (0, 1), (7, 7), (999, 60), ("not a number", 15), (None, 15), (True, 15), ("12", 12), (4.6, 5)],
)
def test_clamp_minutes(raw, expected) -> None:
    assert clamp_minutes(raw) == expected


def test_strip_code_fence_variants() -> None:
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('```\n[1]\n```') == "[1]"
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_parse_missions_keeps_first_of_each_type_in_order() -> None:
    raw = json.dumps(
        {
            "missions": [
                {"task_text": "Tiny", "task_type": "micro", "enfoque_name": "Health", "estimated_minutes": 2},
                {"task_text": "Big", "task_type": "non_negotiable", "enfoque_name": "Work", "estimated_minutes": 30},
                {"task_text": "Duplicate big", "task_type": "non_negotiable", "enfoque_name": "Work"},
                {"task_text": "Mid", "task_type": "secondary", "estimated_minutes": "ten"},
                {"task_text": "Odd", "task_type": "bonus", "enfoque_name": "Work"},
            ],
            "motivational_pulse": "  Keep going.  ",
            "extra": "ignored",
        }
    )

    batch = parse_missions(raw, ["Work", "Health"])

    assert [m.task_type for m in batch.missions] == ["non_negotiable", "secondary", "micro"]
    assert [m.task_text for m in batch.missions] == ["Big", "Mid", "Tiny"]
    assert batch.missions[1].enfoque_name == "Work"
    assert batch.missions[1].estimated_minutes == 15
    assert batch.motivational_pulse == "Keep going."


def test_parse_missions_rejects_missing_type() -> None:
    raw = json.dumps({"missions": [{"task_text": "Big", "task_type": "non_negotiable"}]})

    with pytest.raises(GenerationParseError) as excinfo:
        parse_missions(raw)

    assert "secondary" in excinfo.value.message
    assert excinfo.value.raw == raw


@pytest.mark.parametrize("raw", ["Here you go!", "[]", json.dumps({"missions": "three"})])
def test_parse_missions_rejects_wrong_shape(raw) -> None:
    with pytest.raises(GenerationParseError):
        parse_missions(raw)


def test_parse_flat_tasks_normalizes_entries() -> None:
    raw = "```json\n" + json.dumps(
        [
            {"task_text": "Walk", "goal_name": "Health", "priority": "HIGH", "type": "core"},
            {"task_text": "Read", "priority": "someday", "type": "optional"},
            "not a task",
            {"goal_name": "Empty"},
        ]
    ) + "\n```"

    tasks = parse_flat_tasks(raw)

    assert [(t.task_text, t.goal_name, t.priority, t.type) for t in tasks] == [
        ("Walk", "Health", "high", "core"),
        ("Read", "General", "medium", None),
    ]


def test_parse_flat_tasks_requires_array_with_tasks() -> None:
    with pytest.raises(GenerationParseError):
        parse_flat_tasks(json.dumps({"tasks": []}))
    with pytest.raises(GenerationParseError):
        parse_flat_tasks("[]")


def test_parse_swap() -> None:
    draft = parse_swap('{"task_text": " Stretch ", "estimated_minutes": 90}')

    assert draft.task_text == "Stretch"
    assert draft.estimated_minutes == 60

    with pytest.raises(GenerationParseError):
        parse_swap('{"task_text": ""}')


def test_parse_swap_rejects_repeated_text() -> None:
    existing = ["Plan meals for the week", "Fill your water bottle"]

    with pytest.raises(GenerationParseError):
        parse_swap('{"task_text": "plan MEALS for the week ", "estimated_minutes": 10}', existing)

    draft = parse_swap('{"task_text": "Buy groceries", "estimated_minutes": 10}', existing)
    assert draft.task_text == "Buy groceries"


def test_parse_weekly_tasks_requires_core() -> None:
    with pytest.raises(GenerationParseError):
        parse_weekly_tasks(json.dumps([{"task_text": "Walk 10 min", "goal_name": "Health", "priority": "high"}]))
    with pytest.raises(GenerationParseError):
        parse_weekly_tasks(json.dumps([{"task_text": "Stretch", "type": "bonus"}]))

    drafts = parse_weekly_tasks(
        json.dumps(
            [
                {"task_text": "Untyped", "goal_name": "Health"},
                {"task_text": "Walk", "goal_name": "Health", "type": "core"},
                {"task_text": "Stretch", "goal_name": "Health", "type": "bonus"},
            ]
        )
    )
    assert [(draft.task_text, draft.type) for draft in drafts] == [("Walk", "core"), ("Stretch", "bonus")]


def test_complete_and_parse_retries_once() -> None:
    client = ScriptedClient(["oops", "[{\"task_text\": \"Walk\"}]"])

    tasks = complete_and_parse(client, "system", "user", parse_flat_tasks, max_tokens=100)

    assert client.calls == 2
    assert tasks[0].task_text == "Walk"


def test_complete_and_parse_gives_up_with_generic_message() -> None:
    client = ScriptedClient(["oops", "still oops", "never asked"])

    with pytest.raises(GenerationParseError) as excinfo:
        complete_and_parse(client, "s", "u", parse_flat_tasks, max_tokens=100, failure_message="Failed to swap task")

    assert client.calls == 2
    assert excinfo.value.message == "Failed to swap task"
    assert excinfo.value.raw == "still oops"
