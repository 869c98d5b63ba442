"""Initial schema for ADHD Todo

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates every table of the service:
- Accounts (users, login sessions, password reset tokens, settings)
- Tasks with categories, history and subtasks
- Templates and recurring schedules
- Focus sessions
- Projects and goals

Default categories and templates are created per user by the API, so this
revision seeds nothing.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names.
PRIORITY = sa.Enum("none", "low", "medium", "high", "urgent", name="priority")
EMOTION = sa.Enum("excited", "neutral", "anxious", "overwhelmed", "confident", name="emotion")
FREQUENCY = sa.Enum("daily", "weekly", "monthly", "yearly", "custom", name="recurrencefrequency")
CHANGE_TYPE = sa.Enum("created", "updated", "completed", "deleted", "restored", name="changetype")
PROJECT_STATUS = sa.Enum("active", "completed", "archived", name="projectstatus")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("email_verified_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
    )

    op.create_table(
        "user_sessions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.Index("ix_user_sessions_user_id", "user_id"),
        sa.Index("ix_user_sessions_token_hash", "token_hash", unique=True),
    )

    op.create_table(
        "verification_tokens",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("identifier", sa.String(320), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_verification_tokens_identifier", "identifier"),
        sa.Index("ix_verification_tokens_token_hash", "token_hash", unique=True),
    )

    op.create_table(
        "user_settings",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("theme", sa.String(16), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False),
        sa.Column("week_starts_on", sa.Integer(), nullable=False),
        sa.Column("hour_format", sa.String(2), nullable=False),
        sa.Column("enable_notifications", sa.Boolean(), nullable=False),
        sa.Column("notification_sound", sa.String(255), nullable=False),
        sa.Column("notification_volume", sa.Integer(), nullable=False),
        sa.Column("language", sa.String(16), nullable=False),
        sa.Column("date_format", sa.String(32), nullable=False),
        sa.Column("focus_mode", sa.Text(), nullable=False),
        sa.Column("ai_assistant", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.Index("ix_user_settings_user_id", "user_id", unique=True),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(30), nullable=False),
        sa.Column("color", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.Index("ix_categories_user_id", "user_id"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(32), nullable=True),
        sa.Column("status", PROJECT_STATUS, nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("user_id", sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.Index("ix_projects_user_id", "user_id"),
    )

    op.create_table(
        "goals",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("project_id", sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.Index("ix_goals_project_id", "project_id"),
    )

    op.create_table(
        "task_templates",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", PRIORITY, nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=True),
        sa.Column("emotion", EMOTION, nullable=True),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("is_recurring", sa.Boolean(), nullable=False),
        sa.Column("recurrence", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("name", "user_id", name="uq_task_templates_name_user"),
        sa.Index("ix_task_templates_user_id", "user_id"),
    )

    op.create_table(
        "template_categories",
        sa.Column("template_id", sa.String(32), nullable=False),
        sa.Column("category_id", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("template_id", "category_id"),
        sa.ForeignKeyConstraint(["template_id"], ["task_templates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "recurring_tasks",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("template_id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("next_due_date", sa.DateTime(), nullable=False),
        sa.Column("frequency", FREQUENCY, nullable=False),
        sa.Column("interval", sa.Integer(), nullable=False),
        sa.Column("days_of_week", sa.String(), nullable=True),
        sa.Column("day_of_month", sa.Integer(), nullable=True),
        sa.Column("month_of_year", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("count", sa.Integer(), nullable=True),
        sa.Column("last_generated_date", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["template_id"], ["task_templates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("template_id", "user_id", name="uq_recurring_tasks_template_user"),
        sa.Index("ix_recurring_tasks_template_id", "template_id"),
        sa.Index("ix_recurring_tasks_user_id", "user_id"),
        sa.Index("ix_recurring_tasks_next_due_date", "next_due_date"),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", PRIORITY, nullable=False),
        sa.Column("emotion", EMOTION, nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("estimated_duration", sa.Integer(), nullable=True),
        sa.Column("actual_duration", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("goal_id", sa.String(32), nullable=True),
        sa.Column("parent_id", sa.String(32), nullable=True),
        sa.Column("recurring_task_id", sa.String(32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["parent_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recurring_task_id"], ["recurring_tasks.id"], ondelete="SET NULL"),
        sa.Index("ix_tasks_user_id", "user_id"),
        sa.Index("ix_tasks_goal_id", "goal_id"),
        sa.Index("ix_tasks_parent_id", "parent_id"),
        sa.Index("ix_tasks_recurring_task_id", "recurring_task_id"),
        sa.Index("ix_tasks_due_date", "due_date"),
    )

    op.create_table(
        "task_categories",
        sa.Column("task_id", sa.String(32), nullable=False),
        sa.Column("category_id", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("task_id", "category_id"),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
    )

    # No FK to tasks: DELETED entries outlive the task row
    op.create_table(
        "task_history",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("task_id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("change_type", CHANGE_TYPE, nullable=False),
        sa.Column("change_data", sa.Text(), nullable=False),
        sa.Column("previous_data", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.Index("ix_task_history_task_id", "task_id"),
        sa.Index("ix_task_history_user_id", "user_id"),
        sa.Index("ix_task_history_created_at", "created_at"),
    )

    op.create_table(
        "focus_sessions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("session_metadata", sa.Text(), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("task_id", sa.String(32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="SET NULL"),
        sa.Index("ix_focus_sessions_user_id", "user_id"),
        sa.Index("ix_focus_sessions_task_id", "task_id"),
        sa.Index("ix_focus_sessions_start_time", "start_time"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("focus_sessions")
    op.drop_table("task_history")
    op.drop_table("task_categories")
    op.drop_table("tasks")
    op.drop_table("recurring_tasks")
    op.drop_table("template_categories")
    op.drop_table("task_templates")
    op.drop_table("goals")
    op.drop_table("projects")
    op.drop_table("categories")
    op.drop_table("user_settings")
    op.drop_table("verification_tokens")
    op.drop_table("user_sessions")
    op.drop_table("users")

    for enum_type in (PRIORITY, EMOTION, FREQUENCY, CHANGE_TYPE, PROJECT_STATUS):
        enum_type.drop(op.get_bind(), checkfirst=True)
