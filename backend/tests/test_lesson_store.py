import pytest

from app.models.schedule import Lesson, LessonType, Schedule, WeekType
from app.services.lesson_store import LessonScope, SqlLessonStore


def _lesson(schedule, lesson_id, **overrides):
    data = {
        "id": lesson_id,
        "schedule": schedule,
        "group_id": schedule.group_id,
        "semester_id": schedule.semester_id,
        "subject_id": "math",
        "teacher_id": "T1",
        "room": "101",
        "type": LessonType.lecture,
        "day_of_week": 2,
        "start_time": "09:00",
        "end_time": "10:30",
        "week_type": WeekType.all,
    }
    data.update(overrides)
    return Lesson(**data)


@pytest.fixture
def store(db_session):
    g1 = Schedule(id="s-g1", group_id="G1", semester_id="fall", year=2026)
    g2 = Schedule(id="s-g2", group_id="G2", semester_id="fall", year=2026)
    g3 = Schedule(id="s-g3", group_id="G3", semester_id="fall", year=2026)
    spring = Schedule(id="s-spring", group_id="G4", semester_id="spring", year=2027)
    db_session.add_all(
        [
            _lesson(g1, "own", teacher_id="T9", room="909"),
            _lesson(g1, "own-friday", day_of_week=5),
            _lesson(g2, "same-teacher", room="202"),
            _lesson(g3, "same-room", teacher_id="T3"),
            _lesson(g3, "unrelated", teacher_id="T4", room="404"),
            _lesson(spring, "other-semester"),
        ]
    )
    db_session.commit()
    return SqlLessonStore(db_session)


def test_scope_covers_group_teacher_and_room(store):
    scope = LessonScope(semester_id="fall", group_id="G1", day_of_week=2, teacher_id="T1", room="101")
    found = {lesson.id for lesson in store.fetch_lessons_for_scope(scope)}
    assert found == {"own", "same-teacher", "same-room"}


def test_scope_without_teacher_or_day(store):
    scope = LessonScope(semester_id="fall", group_id="G1", room="404")
    found = {lesson.id for lesson in store.fetch_lessons_for_scope(scope)}
    assert found == {"own", "own-friday", "unrelated"}


def test_lessons_outside_schedule(store, db_session):
    schedule = db_session.get(Schedule, "s-g1")
    found = {lesson.id for lesson in store.lessons_outside_schedule(schedule)}
    assert found == {"same-teacher", "same-room"}


def test_commit_and_delete_lesson(store, db_session):
    schedule = db_session.get(Schedule, "s-g2")
    lesson = store.commit_lesson(_lesson(schedule, "extra", day_of_week=6))
    assert lesson.schedule_id == "s-g2"
    assert [item.id for item in store.lessons_for_schedule("s-g2")] == ["same-teacher", "extra"]

    store.delete_lesson(lesson)
    assert [item.id for item in store.lessons_for_schedule("s-g2")] == ["same-teacher"]
    assert store.lock_schedule("s-g2") is schedule


def test_get_lesson_is_limited_to_its_schedule(store):
    assert store.get_lesson("s-g1", "own").id == "own"
    assert store.get_lesson("s-g1", "same-teacher") is None
    assert store.get_lesson("s-g1", "missing") is None
