"""create training tables and seed muscle groups

Revision ID: 0001_initial_training
Revises:
Create Date: 2026-10-19 09:00:00
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_training"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MUSCLE_GROUPS = [
    "Chest",
    "Back",
    "Shoulders",
    "Biceps",
    "Triceps",
    "Forearms",
    "Quads",
    "Hamstrings",
    "Glutes",
    "Calves",
    "Abs",
    "Traps",
]


def _prescription_columns() -> list[sa.Column]:
    return [
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("rep_range_lower_bound", sa.Integer(), nullable=False),
        sa.Column("rep_range_upper_bound", sa.Integer(), nullable=False),
        sa.Column("rir", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=True),
    ]


def upgrade() -> None:
    muscle_groups = op.create_table(
        "muscle_groups",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_muscle_groups_id", "muscle_groups", ["id"])

    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("shared", sa.Boolean(), nullable=False),
        sa.Column(
            "primary_muscle_group_id",
            sa.Integer(),
            sa.ForeignKey("muscle_groups.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_exercises_user_name"),
    )
    op.create_index("ix_exercises_id", "exercises", ["id"])
    op.create_index("ix_exercises_user_id", "exercises", ["user_id"])
    op.create_index("ix_exercises_name", "exercises", ["name"])

    op.create_table(
        "exercise_muscle_groups",
        sa.Column(
            "exercise_id", sa.Integer(), sa.ForeignKey("exercises.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "muscle_group_id",
            sa.Integer(),
            sa.ForeignKey("muscle_groups.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "mesocycles",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("goal", sa.Text(), nullable=True),
        sa.Column("duration_in_weeks", sa.Integer(), nullable=False),
        sa.Column("training_days_per_week", sa.Integer(), nullable=False),
        sa.Column("microcycle_length", sa.Integer(), nullable=False),
        sa.Column("rest_days", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_mesocycles_user_name"),
    )
    op.create_index("ix_mesocycles_id", "mesocycles", ["id"])
    op.create_index("ix_mesocycles_user_id", "mesocycles", ["user_id"])
    op.create_index("ix_mesocycles_status", "mesocycles", ["status"])

    op.create_table(
        "mesocycle_runs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "mesocycle_id", sa.Integer(), sa.ForeignKey("mesocycles.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_mesocycle_runs_id", "mesocycle_runs", ["id"])
    op.create_index("ix_mesocycle_runs_mesocycle_id", "mesocycle_runs", ["mesocycle_id"])
    op.create_index("ix_mesocycle_runs_user_id", "mesocycle_runs", ["user_id"])

    op.create_table(
        "training_days",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "mesocycle_id", sa.Integer(), sa.ForeignKey("mesocycles.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=50), nullable=False),
    )
    op.create_index("ix_training_days_id", "training_days", ["id"])
    op.create_index("ix_training_days_mesocycle_id", "training_days", ["mesocycle_id"])

    op.create_table(
        "training_day_exercises",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "training_day_id",
            sa.Integer(),
            sa.ForeignKey("training_days.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "exercise_id", sa.Integer(), sa.ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_training_day_exercises_id", "training_day_exercises", ["id"])
    op.create_index("ix_training_day_exercises_training_day_id", "training_day_exercises", ["training_day_id"])
    op.create_index("ix_training_day_exercises_exercise_id", "training_day_exercises", ["exercise_id"])

    op.create_table(
        "training_day_sets",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "training_day_exercise_id",
            sa.Integer(),
            sa.ForeignKey("training_day_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_prescription_columns(),
    )
    op.create_index("ix_training_day_sets_id", "training_day_sets", ["id"])
    op.create_index(
        "ix_training_day_sets_training_day_exercise_id", "training_day_sets", ["training_day_exercise_id"]
    )

    op.create_table(
        "training_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column(
            "run_id", sa.Integer(), sa.ForeignKey("mesocycle_runs.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "training_day_id",
            sa.Integer(),
            sa.ForeignKey("training_days.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("microcycle_number", sa.Integer(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("propagated_set_counts", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("run_id", "microcycle_number", "day_number", name="uq_training_sessions_run_slot"),
    )
    op.create_index("ix_training_sessions_id", "training_sessions", ["id"])
    op.create_index("ix_training_sessions_user_id", "training_sessions", ["user_id"])
    op.create_index("ix_training_sessions_run_id", "training_sessions", ["run_id"])
    op.create_index("ix_training_sessions_training_day_id", "training_sessions", ["training_day_id"])

    op.create_table(
        "session_exercises",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "session_id",
            sa.Integer(),
            sa.ForeignKey("training_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "exercise_id", sa.Integer(), sa.ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_session_exercises_id", "session_exercises", ["id"])
    op.create_index("ix_session_exercises_session_id", "session_exercises", ["session_id"])
    op.create_index("ix_session_exercises_exercise_id", "session_exercises", ["exercise_id"])

    op.create_table(
        "session_sets",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "session_exercise_id",
            sa.Integer(),
            sa.ForeignKey("session_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_prescription_columns(),
        sa.Column("completed", sa.Boolean(), nullable=False),
        sa.Column("reps_completed", sa.Integer(), nullable=True),
    )
    op.create_index("ix_session_sets_id", "session_sets", ["id"])
    op.create_index("ix_session_sets_session_exercise_id", "session_sets", ["session_exercise_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"])

    op.bulk_insert(muscle_groups, [{"name": name} for name in MUSCLE_GROUPS])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("session_sets")
    op.drop_table("session_exercises")
    op.drop_table("training_sessions")
    op.drop_table("training_day_sets")
    op.drop_table("training_day_exercises")
    op.drop_table("training_days")
    op.drop_table("mesocycle_runs")
    op.drop_table("mesocycles")
    op.drop_table("exercise_muscle_groups")
    op.drop_table("exercises")
    op.drop_table("muscle_groups")
