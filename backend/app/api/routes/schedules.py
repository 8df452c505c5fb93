import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_lesson_store, get_schedule_or_404
from app.core.exceptions import DuplicateScheduleError
from app.models.schedule import Schedule
from app.schemas.conflict import ScheduleAuditReport
from app.schemas.schedule import ScheduleCreate, ScheduleOut, ScheduleSummary, ScheduleUpdate, WeeklyTimetable
from app.services.lesson_store import SqlLessonStore
from app.services.lessons import audit, weekly_timetable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[ScheduleSummary])
def list_schedules(
    group_id: str | None = Query(default=None, alias="groupId"),
    semester_id: str | None = Query(default=None, alias="semesterId"),
    db: Session = Depends(get_db),
) -> list[ScheduleSummary]:
    stmt = select(Schedule)
    if group_id:
        stmt = stmt.where(Schedule.group_id == group_id)
    if semester_id:
        stmt = stmt.where(Schedule.semester_id == semester_id)
    stmt = stmt.order_by(Schedule.year.desc(), Schedule.semester, Schedule.group_id)
    return list(db.execute(stmt).scalars())


@router.post("/", response_model=ScheduleOut, status_code=status.HTTP_201_CREATED)
def create_schedule(payload: ScheduleCreate, db: Session = Depends(get_db)) -> ScheduleOut:
    existing = db.execute(
        select(Schedule).where(Schedule.group_id == payload.group_id, Schedule.semester_id == payload.semester_id)
    ).scalar_one_or_none()
    if existing:
        raise DuplicateScheduleError(payload.group_id, payload.semester_id)
    schedule = Schedule(**payload.model_dump())
    db.add(schedule)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateScheduleError(payload.group_id, payload.semester_id) from exc
    db.refresh(schedule)
    logger.info("Created schedule %s for group %s, semester %s", schedule.id, schedule.group_id, schedule.semester_id)
    return schedule


@router.get("/{schedule_id}", response_model=ScheduleOut)
def get_schedule(schedule: Schedule = Depends(get_schedule_or_404)) -> ScheduleOut:
    return schedule


@router.put("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(
    payload: ScheduleUpdate,
    schedule: Schedule = Depends(get_schedule_or_404),
    db: Session = Depends(get_db),
) -> ScheduleOut:
    data = payload.model_dump(exclude_unset=True)
    for key, value in data.items():
        setattr(schedule, key, value)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/{schedule_id}")
def delete_schedule(schedule: Schedule = Depends(get_schedule_or_404), db: Session = Depends(get_db)) -> dict:
    logger.info("Deleting schedule %s with %d lesson(s)", schedule.id, len(schedule.lessons))
    db.delete(schedule)
    db.commit()
    return {"success": True}


@router.get("/{schedule_id}/timetable", response_model=WeeklyTimetable)
def get_timetable(
    schedule: Schedule = Depends(get_schedule_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
) -> WeeklyTimetable:
    return weekly_timetable(schedule, store.lessons_for_schedule(schedule.id))


@router.get("/{schedule_id}/audit", response_model=ScheduleAuditReport)
def audit_schedule(
    schedule: Schedule = Depends(get_schedule_or_404),
    store: SqlLessonStore = Depends(get_lesson_store),
) -> ScheduleAuditReport:
    return audit(store, schedule)
