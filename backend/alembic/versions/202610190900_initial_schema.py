"""Initial Mentiva schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "202610190900"
down_revision = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True, unique=True),
        sa.Column("full_name", sa.Text(), nullable=True),
        _created_at(),
    )

    op.create_table(
        "user_sessions",
        sa.Column("token", sa.String(length=255), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"], unique=False)

    op.create_table(
        "allowed_emails",
        sa.Column("email", sa.String(length=320), primary_key=True, nullable=False),
        _created_at(),
    )

    op.create_table(
        "vision_boards",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("analysis", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_vision_boards_user_id", "vision_boards", ["user_id"], unique=False)

    op.create_table(
        "system_instruction_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("prompt_text", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_system_instruction_profiles_user_id",
        "system_instruction_profiles",
        ["user_id"],
        unique=False,
    )

    op.create_table(
        "north_stars",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("goal_text", sa.Text(), nullable=False),
        sa.Column("source_board_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["source_board_id"], ["vision_boards.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_north_stars_user_id", "north_stars", ["user_id"], unique=False)
    op.create_index(
        "uq_north_stars_active_user",
        "north_stars",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "enfoques",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("north_star_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["north_star_id"], ["north_stars.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_enfoques_user_week", "enfoques", ["user_id", "week_start"], unique=False)

    op.create_table(
        "daily_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("task_text", sa.Text(), nullable=False),
        sa.Column("goal_name", sa.Text(), nullable=True),
        sa.Column("enfoque_name", sa.Text(), nullable=True),
        sa.Column("task_type", sa.String(length=32), nullable=True),
        sa.Column("priority", sa.String(length=16), nullable=True),
        sa.Column("estimated_minutes", sa.Integer(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("lang", sa.String(length=8), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_daily_tasks_user_date", "daily_tasks", ["user_id", "date"], unique=False)

    op.create_table(
        "streaks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("non_negotiable_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "date", name="uq_streaks_user_date"),
    )

    op.create_table(
        "weekly_plans",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column(
            "focus_goals",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "context",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "week_start", name="uq_weekly_plans_user_week"),
    )

    op.create_table(
        "user_focus_areas",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("area", sa.Text(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_user_focus_areas_user_id", "user_focus_areas", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_focus_areas_user_id", table_name="user_focus_areas")
    op.drop_table("user_focus_areas")
    op.drop_table("weekly_plans")
    op.drop_table("streaks")
    op.drop_index("ix_daily_tasks_user_date", table_name="daily_tasks")
    op.drop_table("daily_tasks")
    op.drop_index("ix_enfoques_user_week", table_name="enfoques")
    op.drop_table("enfoques")
    op.drop_index("uq_north_stars_active_user", table_name="north_stars")
    op.drop_index("ix_north_stars_user_id", table_name="north_stars")
    op.drop_table("north_stars")
    op.drop_index("ix_system_instruction_profiles_user_id", table_name="system_instruction_profiles")
    op.drop_table("system_instruction_profiles")
    op.drop_index("ix_vision_boards_user_id", table_name="vision_boards")
    op.drop_table("vision_boards")
    op.drop_table("allowed_emails")
    op.drop_index("ix_user_sessions_user_id", table_name="user_sessions")
    op.drop_table("user_sessions")
    op.drop_table("users")
