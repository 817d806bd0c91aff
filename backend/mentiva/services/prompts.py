"""Prompt templates for the mission, swap and task generators.

Every builder is a pure function returning a string; nothing here talks to the
store or the completion service.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

COMPLETED_HISTORY_LIMIT = 10
SKIPPED_HISTORY_LIMIT = 5
FREQUENT_SKIP_THRESHOLD = 2
STREAK_CELEBRATION_DAYS = 7

MISSIONS_USER_MESSAGE = "Generate my 3 daily missions based on the instructions above."
TASKS_USER_MESSAGE = "Generate my daily tasks for today based on the instructions."


@dataclass
class HistoryItem:
    task_text: str
    completed: bool
    date: str = ""
    task_type: Optional[str] = None
    goal_name: Optional[str] = None


@dataclass
class DayContext:
    day_name: str
    is_weekend: bool
    lang: str = "en"


@dataclass
class MissionPromptContext:
    north_star: str
    enfoques: List[str]
    recent_tasks: List[HistoryItem]
    day: DayContext
    current_streak: int = 0
    user_name: str = "friend"
    non_negotiable_skipped_yesterday: bool = False


@dataclass
class BoardPromptContext:
    board_goals: List[str]
    focus_areas: List[str]
    recent_tasks: List[HistoryItem]
    day: DayContext
    user_name: str = "friend"


@dataclass
class WeeklyTaskPromptContext:
    focus_goals: List[str]
    goal_context: Dict[str, str]
    recent_tasks: List[HistoryItem]
    day: DayContext
    user_name: str = "friend"


@dataclass
class SwapPromptContext:
    task_text: str
    task_type: Optional[str]
    enfoque_name: Optional[str]
    existing_texts: List[str] = field(default_factory=list)
    north_star: Optional[str] = None
    lang: str = "en"


def language_name(lang: Optional[str]) -> str:
    return "SPANISH" if (lang or "en") == "es" else "ENGLISH"


def frequently_skipped(history: Iterable[HistoryItem], threshold: int = FREQUENT_SKIP_THRESHOLD) -> List[str]:
    """Normalized texts of tasks left undone at least ``threshold`` times."""
    counts = Counter(item.task_text.lower().strip() for item in history if not item.completed)
    return [text for text, count in counts.items() if text and count >= threshold]


def with_instruction_profile(prompt: str, sip_text: Optional[str], heading: str) -> str:
    """Prepend the user's System Instruction Profile verbatim when present."""
    if not sip_text:
        return prompt
    return f"{sip_text}\n\n---\n\n{heading}:\n{prompt}"


def _lines(items: Sequence[str], empty: str) -> str:
    return "\n".join(items) if items else empty


def build_mission_prompt(ctx: MissionPromptContext, sip_text: Optional[str] = None) -> str:
    lang = language_name(ctx.day.lang)
    completed = [f"[DONE] {t.task_text}" for t in ctx.recent_tasks if t.completed][:COMPLETED_HISTORY_LIMIT]
    skipped = [f"[SKIPPED] {t.task_text}" for t in ctx.recent_tasks if not t.completed][:SKIPPED_HISTORY_LIMIT]
    repeat_skips = frequently_skipped(ctx.recent_tasks)
    weekend_note = "(WEEKEND - lighter, more personal tasks)" if ctx.day.is_weekend else ""
    streak_note = " - impressive! Acknowledge this." if ctx.current_streak >= STREAK_CELEBRATION_DAYS else ""
    skipped_note = (
        "NOTE: Yesterday's non-negotiable was SKIPPED. Make today's slightly easier to rebuild momentum."
        if ctx.non_negotiable_skipped_yesterday
        else ""
    )

    prompt = f"""You are Menti, an AI life mentor for {ctx.user_name}. CRITICAL: ALL output must be in {lang} - every task_text, enfoque_name, and motivational_pulse must be in {lang}, no exceptions.

NORTH STAR (the user's overarching life goal):
{ctx.north_star}

WEEKLY FOCUSES (enfoques):
{", ".join(ctx.enfoques) or "Not set yet - use the North Star to guide tasks."}

TODAY: {ctx.day.day_name} {weekend_note}
CURRENT STREAK: {ctx.current_streak} consecutive days{streak_note}
{skipped_note}

RECENTLY COMPLETED (last 7 days):
{_lines(completed, "None yet - this might be their first day.")}

RECENTLY SKIPPED (last 7 days):
{_lines(skipped, "None.")}

FREQUENTLY SKIPPED (2+ times, make these SMALLER):
{", ".join(repeat_skips) or "None."}

GENERATE EXACTLY 3 MISSIONS:

1. NON-NEGOTIABLE (task_type: "non_negotiable")
   - The MOST important task advancing their North Star
   - 15-30 minutes{" (or lighter, 10-15 min)" if ctx.day.is_weekend else ""}
   - Must feel meaningful and achievable
   - If they do NOTHING else today, this is the one
   - Connect it to one of their enfoques

2. SECONDARY (task_type: "secondary")
   - Supporting task for a DIFFERENT enfoque than the non-negotiable
   - 10-20 minutes
   - Should feel productive but not overwhelming

3. MICRO WIN (task_type: "micro")
   - Quick task, UNDER 5 minutes
   - Builds momentum, easy dopamine hit
   - Can be any enfoque

Also generate a MOTIVATIONAL PULSE - a 1-2 sentence message from Menti. Make it warm and specific to their North Star or current streak, not a generic quote.

RULES:
- Each task MUST include estimated_minutes (integer)
- Each task MUST include enfoque_name (use their enfoque names, 1-3 words)
- Spread tasks across different enfoques when possible
- If they skipped a similar task before, make it SMALLER
- Be specific: not "work on business" but "spend 20 min outlining 3 product features"
- ALL text in {lang}
- NO emojis in task text or pulse

Respond ONLY with valid JSON, no other text:
{{
  "missions": [
    {{"task_text": "...", "task_type": "non_negotiable", "enfoque_name": "...", "estimated_minutes": 25}},
    {{"task_text": "...", "task_type": "secondary", "enfoque_name": "...", "estimated_minutes": 15}},
    {{"task_text": "...", "task_type": "micro", "enfoque_name": "...", "estimated_minutes": 5}}
  ],
  "motivational_pulse": "..."
}}"""
    return with_instruction_profile(prompt, sip_text, "MISSION GENERATION INSTRUCTIONS")


def build_swap_prompt(ctx: SwapPromptContext) -> str:
    lang = language_name(ctx.lang)
    label = "MICRO WIN (under 5 minutes)" if ctx.task_type == "micro" else "SECONDARY (10-20 minutes)"
    return f"""Generate ONE alternative {label} task. ALL text in {lang}.

NORTH STAR: {ctx.north_star or "General improvement"}
ENFOQUE: {ctx.enfoque_name or "General"}

DO NOT repeat any of these existing tasks:
{_lines(ctx.existing_texts, "None.")}

The original task was: "{ctx.task_text}"
Generate something DIFFERENT but in the same enfoque.

Respond ONLY with JSON:
{{"task_text": "...", "estimated_minutes": N}}"""


def build_board_tasks_prompt(ctx: BoardPromptContext, sip_text: Optional[str] = None) -> str:
    lang = language_name(ctx.day.lang)
    completed = [f"[DONE] {t.task_text} ({t.goal_name or 'General'})" for t in ctx.recent_tasks if t.completed]
    skipped = [f"[SKIPPED] {t.task_text} ({t.goal_name or 'General'})" for t in ctx.recent_tasks if not t.completed]
    weekend = "TODAY IS A WEEKEND" if ctx.day.is_weekend else "today is a weekday"

    prompt = f"""You are Menti, an AI life mentor. Generate exactly 3-5 daily tasks for {ctx.user_name} for today ({ctx.day.day_name}).

USER'S VISION BOARD GOALS:
{_lines(ctx.board_goals, "No vision board uploaded yet.")}

USER'S CURRENT FOCUS AREAS:
{", ".join(ctx.focus_areas) or "No specific focus areas set yet. Use vision board goals."}

RECENTLY COMPLETED (last 7 days):
{_lines(completed, "None yet - this might be their first day.")}

RECENTLY SKIPPED/NOT COMPLETED (last 7 days):
{_lines(skipped, "None.")}

FREQUENTLY SKIPPED TASKS (skipped 2+ times):
{", ".join(frequently_skipped(ctx.recent_tasks)) or "None."}

RULES:
1. Generate 3-5 tasks. On weekends ({weekend}), lean toward 3 lighter tasks.
2. Each task must be specific and completable today.
3. If a task has been skipped 2+ times, make it SMALLER and EASIER.
4. Mix tasks from different life areas for balance, but prioritize the user's focus areas.
5. Include at least one quick win (under 5 minutes) to build momentum.
6. Don't repeat a task completed yesterday; move to the next step.
7. Each task needs a goal_name (the life area it belongs to) and priority (high/medium/low).
8. goal_name must be a SHORT label (1-3 words) in {lang}.
9. ALL text in {lang}.

Respond ONLY with valid JSON array, no other text:
[{{"task_text": "...", "goal_name": "...", "priority": "high|medium|low"}}]"""
    return with_instruction_profile(prompt, sip_text, "TASK GENERATION INSTRUCTIONS")


def build_weekly_tasks_prompt(ctx: WeeklyTaskPromptContext, sip_text: Optional[str] = None) -> str:
    lang = language_name(ctx.day.lang)
    context_lines = [f'- {goal}: "{detail}"' for goal, detail in ctx.goal_context.items() if detail]
    completed = [f"[DONE] {t.task_text}" for t in ctx.recent_tasks if t.completed]
    not_done = [f"[NOT DONE] {t.task_text}" for t in ctx.recent_tasks if not t.completed]
    weekend = "TODAY IS A WEEKEND - lighter tasks, max 3 total." if ctx.day.is_weekend else ""

    prompt = f"""You are Menti, an AI life mentor. Generate daily tasks for {ctx.user_name} for today ({ctx.day.day_name}).

THE USER CHOSE THESE FOCUS GOALS FOR THIS WEEK:
{", ".join(ctx.focus_goals)}

THE USER'S CONTEXT FOR EACH GOAL:
{_lines(context_lines, "No additional context provided.")}

RECENTLY COMPLETED (last 7 days):
{_lines(completed, "None yet.")}

RECENTLY NOT COMPLETED:
{_lines(not_done, "None.")}

FREQUENTLY SKIPPED (2+ times):
{", ".join(frequently_skipped(ctx.recent_tasks)) or "None."}

{weekend}

STRICT RULES:
1. Generate exactly 3 NON-NEGOTIABLE tasks (type: "core") + 2 BONUS tasks (type: "bonus"). On weekends: 2 core + 1 bonus.
2. Tasks MUST directly relate to the user's chosen focus goals and their context. NEVER generate tasks for areas the user did not choose.
3. Spread tasks across the selected focus goals only.
4. Each task must include a time estimate in parentheses.
5. If a task has been frequently skipped, make it SMALLER.
6. goal_name must be SHORT (1-3 words) in the SAME language as tasks.
7. ALL text in {lang}.
8. Include at least one quick win (under 5 min) in core tasks.

Respond ONLY with valid JSON array:
[{{"task_text": "...", "goal_name": "...", "priority": "high|medium|low", "type": "core|bonus"}}]"""
    return with_instruction_profile(prompt, sip_text, "TASK GENERATION INSTRUCTIONS")
