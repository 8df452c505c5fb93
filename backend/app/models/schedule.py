import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base


class WeekType(str, Enum):
    all = "all"
    odd = "odd"
    even = "even"


class LessonType(str, Enum):
    lecture = "lecture"
    seminar = "seminar"
    lab = "lab"
    exam = "exam"


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (UniqueConstraint("group_id", "semester_id", name="uq_schedules_group_semester"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    group_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    group_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    semester_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    lessons: Mapped[list["Lesson"]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by=lambda: [Lesson.day_of_week, Lesson.start_time],
    )


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    schedule_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("schedules.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # Denormalized from the schedule so teacher/room scope lookups need no join.
    group_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    semester_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False)
    teacher_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    room: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    type: Mapped[LessonType] = mapped_column(SAEnum(LessonType, name="lesson_type"), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    week_type: Mapped[WeekType] = mapped_column(
        SAEnum(WeekType, name="week_type"), nullable=False, default=WeekType.all
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    schedule: Mapped[Schedule] = relationship(back_populates="lessons")
