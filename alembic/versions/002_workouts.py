"""Add workout logs

Revision ID: 002
Revises: 001
Create Date: 2026-10-17 15:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("resistance_details", sa.JSON(), nullable=True),
        sa.Column("cardio_details", sa.JSON(), nullable=True),
        sa.Column("mobility_details", sa.JSON(), nullable=True),
        sa.Column("activity_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_workout_user_created", "workouts", ["user_id", "created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("idx_workout_user_created", table_name="workouts")
    op.drop_table("workouts")
