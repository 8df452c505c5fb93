import pytest
from pydantic import ValidationError

from app.models.schedule import LessonType, WeekType
from app.schemas.lesson import BulkLessonCreate, LessonCreate, split_time_slot


def lesson_payload(**overrides):
    payload = {
        "subjectId": "math",
        "teacherId": "T1",
        "room": "101",
        "type": "lecture",
        "dayOfWeek": 1,
        "startTime": "08:00",
        "endTime": "09:30",
        "weekType": "all",
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize("teacher", ["", "   ", "no_teacher", None])
def test_missing_teacher_spellings_normalize_to_none(teacher):
    lesson = LessonCreate.model_validate(lesson_payload(teacherId=teacher))
    assert lesson.teacher_id is None


def test_legacy_lesson_types_are_mapped():
    assert LessonCreate.model_validate(lesson_payload(type="practice")).type == LessonType.seminar
    assert LessonCreate.model_validate(lesson_payload(type="laboratory")).type == LessonType.lab


def test_snake_case_input_is_accepted():
    lesson = LessonCreate(
        subject_id="math",
        room=" 101 ",
        day_of_week=3,
        start_time="10:00",
        end_time="11:30",
    )
    assert lesson.room == "101"
    assert lesson.week_type == WeekType.all
    assert lesson.model_dump(by_alias=True)["dayOfWeek"] == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"startTime": "8:00"},
        {"endTime": "24:00"},
        {"startTime": "10:00", "endTime": "10:00"},
        {"startTime": "11:00", "endTime": "10:00"},
        {"dayOfWeek": 0},
        {"dayOfWeek": 8},
        {"weekType": "biweekly"},
        {"type": "workshop"},
        {"room": ""},
    ],
)
def test_invalid_lesson_input_is_rejected(overrides):
    with pytest.raises(ValidationError):
        LessonCreate.model_validate(lesson_payload(**overrides))


def test_bulk_days_are_deduplicated_and_sorted():
    payload = BulkLessonCreate.model_validate(
        {"subjectId": "math", "room": "101", "days": [3, 1, 3], "timeSlots": ["08:00-09:30"]}
    )
    assert payload.days == [1, 3]


def test_bulk_rejects_bad_slots_and_days():
    with pytest.raises(ValidationError):
        BulkLessonCreate.model_validate({"subjectId": "math", "room": "101", "days": [1], "timeSlots": ["08:00"]})
    with pytest.raises(ValidationError):
        BulkLessonCreate.model_validate({"subjectId": "math", "room": "101", "days": [0]})


def test_split_time_slot():
    assert split_time_slot("09:40-11:10") == ("09:40", "11:10")
    with pytest.raises(ValueError):
        split_time_slot("11:10-09:40")
