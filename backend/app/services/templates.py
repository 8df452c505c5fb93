"""Reusable sets of weekly lessons that can be stamped onto a schedule."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.schedule import Schedule
from app.models.schedule_template import ScheduleTemplate
from app.schemas.lesson import LessonCreate
from app.schemas.template import ScheduleTemplateCreate, ScheduleTemplateUpdate

logger = logging.getLogger(__name__)


def _stored_lessons(lessons: list[LessonCreate]) -> list[dict]:
    return [lesson.model_dump(mode="json") for lesson in lessons]


def template_lessons(template: ScheduleTemplate) -> list[LessonCreate]:
    return [LessonCreate.model_validate(item) for item in template.lessons]


def list_templates(db: Session) -> list[ScheduleTemplate]:
    stmt = select(ScheduleTemplate).order_by(ScheduleTemplate.created_at.desc(), ScheduleTemplate.name)
    return list(db.execute(stmt).scalars())


def create_template(db: Session, payload: ScheduleTemplateCreate) -> ScheduleTemplate:
    lessons = list(payload.lessons)
    if payload.source_schedule_id is not None:
        schedule = db.get(Schedule, payload.source_schedule_id)
        if schedule is None:
            raise ResourceNotFoundError("Schedule", payload.source_schedule_id)
        lessons.extend(LessonCreate.model_validate(lesson) for lesson in schedule.lessons)

    template = ScheduleTemplate(
        name=payload.name,
        description=payload.description,
        lessons=_stored_lessons(lessons),
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info("Saved template %s with %d lesson(s)", template.id, len(lessons))
    return template


def update_template(db: Session, template: ScheduleTemplate, payload: ScheduleTemplateUpdate) -> ScheduleTemplate:
    data = payload.model_dump(exclude_unset=True, exclude={"lessons"})
    for key, value in data.items():
        if value is not None:
            setattr(template, key, value)
    if payload.lessons is not None:
        template.lessons = _stored_lessons(payload.lessons)
    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template: ScheduleTemplate) -> None:
    template_id = template.id
    db.delete(template)
    db.commit()
    logger.info("Deleted template %s", template_id)
