from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.db.session import SessionLocal
from app.models.schedule import Lesson, Schedule
from app.models.schedule_template import ScheduleTemplate
from app.services.lesson_store import SqlLessonStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_lesson_store(db: Session = Depends(get_db)) -> SqlLessonStore:
    return SqlLessonStore(db)


def get_schedule_or_404(schedule_id: str, db: Session = Depends(get_db)) -> Schedule:
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        raise ResourceNotFoundError("Schedule", schedule_id)
    return schedule


def get_lesson_or_404(
    lesson_id: str,
    schedule: Schedule = Depends(get_schedule_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
) -> Lesson:
    lesson = store.get_lesson(schedule.id, lesson_id)
    if lesson is None:
        raise ResourceNotFoundError("Lesson", lesson_id)
    return lesson


def get_template_or_404(template_id: str, db: Session = Depends(get_db)) -> ScheduleTemplate:
    template = db.get(ScheduleTemplate, template_id)
    if template is None:
        raise ResourceNotFoundError("Template", template_id)
    return template
