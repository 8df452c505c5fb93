from datetime import datetime

from pydantic import Field

from app.schemas.lesson import CamelModel, LessonOut


class ScheduleBase(CamelModel):
    group_id: str = Field(min_length=1, max_length=36)
    group_name: str | None = Field(default=None, max_length=200)
    semester_id: str = Field(min_length=1, max_length=36)
    semester: int = Field(default=1, ge=1, le=3)
    year: int = Field(ge=2000, le=2100)


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(CamelModel):
    group_name: str | None = Field(default=None, max_length=200)
    semester: int | None = Field(default=None, ge=1, le=3)
    year: int | None = Field(default=None, ge=2000, le=2100)


class ScheduleSummary(ScheduleBase):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ScheduleOut(ScheduleSummary):
    lessons: list[LessonOut] = Field(default_factory=list)


class TimetableDay(CamelModel):
    day_of_week: int
    day_name: str
    lessons: list[LessonOut]


class WeeklyTimetable(CamelModel):
    schedule_id: str
    days: list[TimetableDay]
