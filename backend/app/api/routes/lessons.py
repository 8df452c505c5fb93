from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_lesson_or_404, get_lesson_store, get_schedule_or_404, get_template_or_404
from app.core.config import Settings, get_settings
from app.models.schedule import Lesson, Schedule
from app.models.schedule_template import ScheduleTemplate
from app.schemas.conflict import ConflictCheckResult
from app.schemas.lesson import BulkLessonCreate, LessonCreate, LessonOut, LessonUpdate
from app.services import lessons as lesson_service
from app.services.lesson_store import SqlLessonStore

router = APIRouter()


@router.post("/{schedule_id}/lessons", response_model=LessonOut, status_code=status.HTTP_201_CREATED)
def add_lesson(
    payload: LessonCreate,
    schedule: Schedule = Depends(get_schedule_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
    settings: Settings = Depends(get_settings),
) -> LessonOut:
    return lesson_service.add_lesson(store, schedule, payload, settings)


@router.post("/{schedule_id}/lessons/bulk", response_model=list[LessonOut], status_code=status.HTTP_201_CREATED)
def bulk_add_lessons(
    payload: BulkLessonCreate,
    schedule: Schedule = Depends(get_schedule_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
    settings: Settings = Depends(get_settings),
) -> list[LessonOut]:
    return lesson_service.bulk_add_lessons(store, schedule, payload, settings)


@router.post(
    "/{schedule_id}/lessons/from-template/{template_id}",
    response_model=list[LessonOut],
    status_code=status.HTTP_201_CREATED,
)
def apply_template(
    schedule: Schedule = Depends(get_schedule_or_404),
    template: ScheduleTemplate = Depends(get_template_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
    settings: Settings = Depends(get_settings),
) -> list[LessonOut]:
    return lesson_service.apply_template(store, schedule, template, settings)


@router.post("/{schedule_id}/lessons/check", response_model=ConflictCheckResult)
def check_lesson(
    payload: LessonCreate,
    lesson_id: str | None = Query(default=None, alias="lessonId"),
    schedule: Schedule = Depends(get_schedule_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
    settings: Settings = Depends(get_settings),
) -> ConflictCheckResult:
    violations = lesson_service.check_lesson(store, schedule, payload, settings, lesson_id=lesson_id)
    return ConflictCheckResult(allowed=not violations, violations=violations)


@router.put("/{schedule_id}/lessons/{lesson_id}", response_model=LessonOut)
def update_lesson(
    payload: LessonUpdate,
    schedule: Schedule = Depends(get_schedule_or_404),
    lesson: Lesson = Depends(get_lesson_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
    settings: Settings = Depends(get_settings),
) -> LessonOut:
    return lesson_service.update_lesson(store, schedule, lesson, payload, settings)


@router.delete("/{schedule_id}/lessons/{lesson_id}")
def delete_lesson(
    lesson: Lesson = Depends(get_lesson_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
) -> dict:
    lesson_service.delete_lesson(store, lesson)
    return {"success": True}
