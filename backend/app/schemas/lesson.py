from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.schedule import LessonType, WeekType

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

# Spellings for "no teacher" found in older lesson records.
NO_TEACHER_VALUES = {"", "no_teacher"}

LEGACY_LESSON_TYPES = {
    "practice": LessonType.seminar.value,
    "laboratory": LessonType.lab.value,
}


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_teacher_id(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip()
    if cleaned in NO_TEACHER_VALUES:
        return None
    return cleaned


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LessonPayload(CamelModel):
    subject_id: str = Field(min_length=1, max_length=36)
    teacher_id: str | None = Field(default=None, max_length=36)
    room: str = Field(min_length=1, max_length=50)
    type: LessonType = LessonType.lecture
    day_of_week: int = Field(ge=1, le=7)
    start_time: str
    end_time: str
    week_type: WeekType = WeekType.all

    @field_validator("teacher_id", mode="before")
    @classmethod
    def normalize_teacher(cls, value: str | None) -> str | None:
        return normalize_teacher_id(value)

    @field_validator("room", mode="before")
    @classmethod
    def strip_room(cls, value: str) -> str:
        return value.strip() if isinstance(value, str) else value

    @field_validator("type", mode="before")
    @classmethod
    def map_legacy_type(cls, value: str) -> str:
        if isinstance(value, str):
            return LEGACY_LESSON_TYPES.get(value, value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "LessonPayload":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("endTime must be after startTime")
        return self


class LessonCreate(LessonPayload):
    pass


class LessonUpdate(CamelModel):
    subject_id: str | None = Field(default=None, min_length=1, max_length=36)
    teacher_id: str | None = Field(default=None, max_length=36)
    room: str | None = Field(default=None, min_length=1, max_length=50)
    type: LessonType | None = None
    day_of_week: int | None = Field(default=None, ge=1, le=7)
    start_time: str | None = None
    end_time: str | None = None
    week_type: WeekType | None = None

    @field_validator("teacher_id", mode="before")
    @classmethod
    def normalize_teacher(cls, value: str | None) -> str | None:
        return normalize_teacher_id(value)

    @field_validator("type", mode="before")
    @classmethod
    def map_legacy_type(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            return LEGACY_LESSON_TYPES.get(value, value)
        return value


class LessonCandidate(LessonPayload):
    """A lesson as the conflict validator sees it: the payload plus its owners."""

    id: str | None = Field(default=None, max_length=36)
    group_id: str = Field(min_length=1, max_length=36)
    semester_id: str = Field(min_length=1, max_length=36)


class LessonOut(LessonPayload):
    id: str
    schedule_id: str
    group_id: str
    semester_id: str


class BulkLessonCreate(CamelModel):
    subject_id: str = Field(min_length=1, max_length=36)
    teacher_id: str | None = Field(default=None, max_length=36)
    room: str = Field(min_length=1, max_length=50)
    type: LessonType = LessonType.lecture
    week_type: WeekType = WeekType.all
    days: list[int] = Field(min_length=1, max_length=7)
    time_slots: list[str] | None = Field(default=None, max_length=20)

    @field_validator("teacher_id", mode="before")
    @classmethod
    def normalize_teacher(cls, value: str | None) -> str | None:
        return normalize_teacher_id(value)

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: list[int]) -> list[int]:
        invalid = [day for day in value if day not in DAY_NAMES]
        if invalid:
            raise ValueError(f"Invalid day(s) of week: {', '.join(str(day) for day in invalid)}")
        return sorted(set(value))

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        for slot in value:
            split_time_slot(slot)
        return value


def split_time_slot(slot: str) -> tuple[str, str]:
    """Split an ``HH:MM-HH:MM`` slot into its start and end times."""
    start, sep, end = slot.partition("-")
    start, end = start.strip(), end.strip()
    if not sep or not TIME_PATTERN.match(start) or not TIME_PATTERN.match(end):
        raise ValueError(f"Time slot {slot!r} must look like HH:MM-HH:MM")
    if parse_time_to_minutes(end) <= parse_time_to_minutes(start):
        raise ValueError(f"Time slot {slot!r} must end after it starts")
    return start, end
