from typing import Literal

from pydantic import Field

from app.schemas.lesson import CamelModel, LessonCandidate

ConflictDimension = Literal["group", "teacher", "room"]


class Violation(CamelModel):
    lesson_id: str
    dimension: ConflictDimension
    message: str


class ExistingLesson(LessonCandidate):
    id: str = Field(min_length=1, max_length=36)


class ConflictCheckRequest(CamelModel):
    candidate: LessonCandidate
    existing_lessons: list[ExistingLesson] = Field(default_factory=list, max_length=2000)


class ConflictCheckResult(CamelModel):
    allowed: bool
    violations: list[Violation]


class LessonAuditEntry(CamelModel):
    lesson_id: str
    violations: list[Violation]


class ScheduleAuditReport(CamelModel):
    schedule_id: str
    checked_lessons: int
    conflicts: list[LessonAuditEntry]
