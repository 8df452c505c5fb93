from datetime import datetime

from pydantic import Field, model_validator

from app.schemas.lesson import CamelModel, LessonCreate


class ScheduleTemplateCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    lessons: list[LessonCreate] = Field(default_factory=list)
    source_schedule_id: str | None = None

    @model_validator(mode="after")
    def require_lessons_or_source(self) -> "ScheduleTemplateCreate":
        if not self.lessons and self.source_schedule_id is None:
            raise ValueError("Template needs lessons or a sourceScheduleId to copy them from")
        return self


class ScheduleTemplateUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    lessons: list[LessonCreate] | None = Field(default=None, min_length=1)


class ScheduleTemplateOut(CamelModel):
    id: str
    name: str
    description: str
    lessons: list[LessonCreate]
    created_at: datetime | None = None
    updated_at: datetime | None = None
