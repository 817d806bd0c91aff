from mentiva.db.base import Base
from mentiva.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_core_tables() -> None:
    table_names = set(Base.metadata.tables.keys())
    expected = {
        "users",
        "user_sessions",
        "allowed_emails",
        "north_stars",
        "enfoques",
        "daily_tasks",
        "streaks",
        "weekly_plans",
        "user_focus_areas",
        "vision_boards",
        "system_instruction_profiles",
    }

    assert expected.issubset(table_names)


def test_one_active_north_star_index_is_partial_and_unique() -> None:
    table = Base.metadata.tables["north_stars"]
    index = next(ix for ix in table.indexes if ix.name == "uq_north_stars_active_user")

    assert index.unique is True
    assert [column.name for column in index.columns] == ["user_id"]
    assert index.dialect_options["postgresql"]["where"] is not None


def test_streaks_and_weekly_plans_are_unique_per_day_and_week() -> None:
    streak_constraints = {c.name for c in Base.metadata.tables["streaks"].constraints}
    plan_constraints = {c.name for c in Base.metadata.tables["weekly_plans"].constraints}

    assert "uq_streaks_user_date" in streak_constraints
    assert "uq_weekly_plans_user_week" in plan_constraints
