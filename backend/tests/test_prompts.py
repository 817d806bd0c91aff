from __future__ import annotations

from mentiva.services.prompts import (
    BoardPromptContext,
    DayContext,
    HistoryItem,
    MissionPromptContext,
    SwapPromptContext,
    build_board_tasks_prompt,
    build_mission_prompt,
    build_swap_prompt,
    frequently_skipped,
    with_instruction_profile,
)


def _mission_ctx(**overrides) -> MissionPromptContext:
    values = dict(
        north_star="Launch my bakery",
        enfoques=["Recipes", "Marketing"],
        recent_tasks=[],
        day=DayContext(day_name="Wednesday", is_weekend=False, lang="en"),
    )
    values.update(overrides)
    return MissionPromptContext(**values)


def test_frequently_skipped_normalizes_text() -> None:
    history = [
        HistoryItem(task_text="Go for a run", completed=False),
        HistoryItem(task_text="  go for a RUN ", completed=False),
        HistoryItem(task_text="Read", completed=False),
        HistoryItem(task_text="Read", completed=True),
    ]

    assert frequently_skipped(history) == ["go for a run"]


def test_instruction_profile_is_prepended_verbatim() -> None:
    assert with_instruction_profile("body", None, "HEADING") == "body"
    assert with_instruction_profile("body", "Profile text", "HEADING") == "Profile text\n\n---\n\nHEADING:\nbody"


def test_mission_prompt_first_day() -> None:
    prompt = build_mission_prompt(_mission_ctx())

    assert "Launch my bakery" in prompt
    assert "Recipes, Marketing" in prompt
    assert "None yet - this might be their first day." in prompt
    assert "ALL output must be in ENGLISH" in prompt
    assert "impressive!" not in prompt
    assert "WEEKEND" not in prompt


def test_mission_prompt_truncates_history() -> None:
    history = [HistoryItem(task_text=f"done {i}", completed=True) for i in range(15)]
    history += [HistoryItem(task_text=f"skipped {i}", completed=False) for i in range(8)]

    prompt = build_mission_prompt(_mission_ctx(recent_tasks=history))

    assert prompt.count("[DONE]") == 10
    assert prompt.count("[SKIPPED]") == 5


def test_mission_prompt_weekend_streak_and_language() -> None:
    prompt = build_mission_prompt(
        _mission_ctx(day=DayContext(day_name="Sunday", is_weekend=True, lang="es"), current_streak=9)
    )

    assert "(WEEKEND - lighter, more personal tasks)" in prompt
    assert "9 consecutive days - impressive!" in prompt
    assert "ALL output must be in SPANISH" in prompt
    assert "(or lighter, 10-15 min)" in prompt


def test_mission_prompt_without_enfoques_uses_north_star_hint() -> None:
    prompt = build_mission_prompt(_mission_ctx(enfoques=[]))

    assert "Not set yet - use the North Star to guide tasks." in prompt


def test_swap_prompt_lists_existing_tasks() -> None:
    prompt = build_swap_prompt(
        SwapPromptContext(
            task_text="Post on Instagram",
            task_type="secondary",
            enfoque_name=None,
            existing_texts=["Bake bread", "Post on Instagram"],
            lang="es",
        )
    )

    assert "ENFOQUE: General" in prompt
    assert "NORTH STAR: General improvement" in prompt
    assert "Bake bread\nPost on Instagram" in prompt
    assert "ALL text in SPANISH" in prompt


def test_board_prompt_without_boards() -> None:
    prompt = build_board_tasks_prompt(
        BoardPromptContext(
            board_goals=[],
            focus_areas=["Health"],
            recent_tasks=[HistoryItem(task_text="Stretch", completed=True, goal_name="Health")],
            day=DayContext(day_name="Saturday", is_weekend=True),
            user_name="Ana",
        )
    )

    assert "No vision board uploaded yet." in prompt
    assert "[DONE] Stretch (Health)" in prompt
    assert "TODAY IS A WEEKEND" in prompt
