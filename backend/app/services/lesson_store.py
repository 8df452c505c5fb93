from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.schedule import Lesson, Schedule


@dataclass(frozen=True)
class LessonScope:
    """Which persisted lessons a candidate must be compared with.

    Always the candidate's group within the semester; additionally every
    lesson of the same teacher or in the same room in that semester, whatever
    group owns it.
    """

    semester_id: str
    group_id: str
    day_of_week: int | None = None
    teacher_id: str | None = None
    room: str | None = None


class LessonStore(Protocol):
    def fetch_lessons_for_scope(self, scope: LessonScope) -> list[Lesson]: ...

    def commit_lesson(self, lesson: Lesson) -> Lesson: ...


class SqlLessonStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def lock_schedule(self, schedule_id: str) -> Schedule | None:
        # Row lock serializes lesson writes per schedule; SQLite ignores FOR UPDATE.
        return self.db.execute(
            select(Schedule).where(Schedule.id == schedule_id).with_for_update()
        ).scalar_one_or_none()

    def fetch_lessons_for_scope(self, scope: LessonScope) -> list[Lesson]:
        shared = [Lesson.group_id == scope.group_id]
        if scope.teacher_id:
            shared.append(Lesson.teacher_id == scope.teacher_id)
        if scope.room:
            shared.append(Lesson.room == scope.room)

        stmt = select(Lesson).where(Lesson.semester_id == scope.semester_id, or_(*shared))
        if scope.day_of_week is not None:
            stmt = stmt.where(Lesson.day_of_week == scope.day_of_week)
        stmt = stmt.order_by(Lesson.day_of_week, Lesson.start_time)
        return list(self.db.execute(stmt).scalars())

    def get_lesson(self, schedule_id: str, lesson_id: str) -> Lesson | None:
        lesson = self.db.get(Lesson, lesson_id)
        if lesson is None or lesson.schedule_id != schedule_id:
            return None
        return lesson

    def lessons_for_schedule(self, schedule_id: str) -> list[Lesson]:
        stmt = (
            select(Lesson)
            .where(Lesson.schedule_id == schedule_id)
            .order_by(Lesson.day_of_week, Lesson.start_time)
        )
        return list(self.db.execute(stmt).scalars())

    def lessons_outside_schedule(self, schedule: Schedule) -> list[Lesson]:
        """Lessons of other groups that share a teacher or room with ``schedule``."""
        teacher_ids = {lesson.teacher_id for lesson in schedule.lessons if lesson.teacher_id}
        rooms = {lesson.room for lesson in schedule.lessons if lesson.room}
        shared = []
        if teacher_ids:
            shared.append(Lesson.teacher_id.in_(teacher_ids))
        if rooms:
            shared.append(Lesson.room.in_(rooms))
        if not shared:
            return []

        stmt = select(Lesson).where(
            Lesson.semester_id == schedule.semester_id,
            Lesson.schedule_id != schedule.id,
            or_(*shared),
        )
        return list(self.db.execute(stmt).scalars())

    def commit_lesson(self, lesson: Lesson) -> Lesson:
        self.db.add(lesson)
        self.db.commit()
        self.db.refresh(lesson)
        return lesson

    def commit_lessons(self, lessons: list[Lesson]) -> list[Lesson]:
        self.db.add_all(lessons)
        self.db.commit()
        for lesson in lessons:
            self.db.refresh(lesson)
        return lessons

    def delete_lesson(self, lesson: Lesson) -> None:
        self.db.delete(lesson)
        self.db.commit()
