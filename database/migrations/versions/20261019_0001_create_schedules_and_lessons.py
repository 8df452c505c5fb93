"""create schedules and lessons

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    lesson_type = sa.Enum("lecture", "seminar", "lab", "exam", name="lesson_type")
    week_type = sa.Enum("all", "odd", "even", name="week_type")

    op.create_table(
        "schedules",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("group_name", sa.String(length=200), nullable=True),
        sa.Column("semester_id", sa.String(length=36), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("group_id", "semester_id", name="uq_schedules_group_semester"),
    )
    op.create_index("ix_schedules_group_id", "schedules", ["group_id"])
    op.create_index("ix_schedules_semester_id", "schedules", ["semester_id"])

    op.create_table(
        "lessons",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "schedule_id",
            sa.String(length=36),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("semester_id", sa.String(length=36), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=True),
        sa.Column("room", sa.String(length=50), nullable=False),
        sa.Column("type", lesson_type, nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("week_type", week_type, nullable=False, server_default="all"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_lessons_schedule_id", "lessons", ["schedule_id"])
    op.create_index("ix_lessons_group_id", "lessons", ["group_id"])
    op.create_index("ix_lessons_semester_id", "lessons", ["semester_id"])
    op.create_index("ix_lessons_teacher_id", "lessons", ["teacher_id"])
    op.create_index("ix_lessons_room", "lessons", ["room"])


def downgrade() -> None:
    op.drop_table("lessons")
    op.drop_table("schedules")
    sa.Enum(name="week_type").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="lesson_type").drop(op.get_bind(), checkfirst=True)
