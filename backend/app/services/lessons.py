from __future__ import annotations

import logging
from collections import defaultdict

from pydantic import ValidationError

from app.core.config import Settings
from app.core.exceptions import InvalidLessonError, LessonConflictError, LessonTimeError, ResourceNotFoundError
from app.models.schedule import Lesson, Schedule
from app.models.schedule_template import ScheduleTemplate
from app.schemas.conflict import ScheduleAuditReport, Violation
from app.schemas.lesson import (
    DAY_NAMES,
    BulkLessonCreate,
    LessonCandidate,
    LessonCreate,
    LessonOut,
    LessonPayload,
    LessonUpdate,
    parse_time_to_minutes,
    split_time_slot,
)
from app.schemas.schedule import TimetableDay, WeeklyTimetable
from app.services.lesson_store import LessonScope, SqlLessonStore
from app.services.schedule_validation import audit_schedule, can_add_lesson
from app.services.templates import template_lessons

logger = logging.getLogger(__name__)

PAYLOAD_FIELDS = tuple(LessonPayload.model_fields)


def _candidate(schedule: Schedule, payload: LessonPayload, lesson_id: str | None = None) -> LessonCandidate:
    return LessonCandidate(
        id=lesson_id,
        group_id=schedule.group_id,
        semester_id=schedule.semester_id,
        **payload.model_dump(include=set(PAYLOAD_FIELDS)),
    )


def _scope_for(candidate: LessonCandidate) -> LessonScope:
    return LessonScope(
        semester_id=candidate.semester_id,
        group_id=candidate.group_id,
        day_of_week=candidate.day_of_week,
        teacher_id=candidate.teacher_id,
        room=candidate.room,
    )


def ensure_within_teaching_day(candidate: LessonPayload, settings: Settings) -> None:
    day_start = parse_time_to_minutes(settings.lesson_day_start)
    day_end = parse_time_to_minutes(settings.lesson_day_end)
    if parse_time_to_minutes(candidate.start_time) < day_start or parse_time_to_minutes(candidate.end_time) > day_end:
        raise LessonTimeError(
            f"Lesson time must be between {settings.lesson_day_start} and {settings.lesson_day_end}",
            details={"startTime": candidate.start_time, "endTime": candidate.end_time},
        )


def _reject_if_conflicting(candidate: LessonCandidate, violations: list[Violation]) -> None:
    if not violations:
        return
    logger.info(
        "Rejected lesson for group %s on day %s %s-%s: %d violation(s)",
        candidate.group_id,
        candidate.day_of_week,
        candidate.start_time,
        candidate.end_time,
        len(violations),
    )
    raise LessonConflictError(violations)


def check_lesson(
    store: SqlLessonStore,
    schedule: Schedule,
    payload: LessonPayload,
    settings: Settings,
    *,
    lesson_id: str | None = None,
) -> list[Violation]:
    """Dry run of add (or, with ``lesson_id``, of an edit of that lesson of ``schedule``)."""
    if lesson_id is not None and store.get_lesson(schedule.id, lesson_id) is None:
        raise ResourceNotFoundError("Lesson", lesson_id)
    ensure_within_teaching_day(payload, settings)
    candidate = _candidate(schedule, payload, lesson_id)
    return can_add_lesson(candidate, store.fetch_lessons_for_scope(_scope_for(candidate)))


def add_lesson(store: SqlLessonStore, schedule: Schedule, payload: LessonCreate, settings: Settings) -> Lesson:
    store.lock_schedule(schedule.id)
    ensure_within_teaching_day(payload, settings)
    candidate = _candidate(schedule, payload)
    _reject_if_conflicting(candidate, can_add_lesson(candidate, store.fetch_lessons_for_scope(_scope_for(candidate))))

    lesson = Lesson(schedule=schedule, group_id=schedule.group_id, semester_id=schedule.semester_id, **payload.model_dump())
    lesson = store.commit_lesson(lesson)
    logger.info("Added lesson %s to schedule %s", lesson.id, schedule.id)
    return lesson


def update_lesson(
    store: SqlLessonStore,
    schedule: Schedule,
    lesson: Lesson,
    payload: LessonUpdate,
    settings: Settings,
) -> Lesson:
    data = payload.model_dump(exclude_unset=True)
    if not data:
        return lesson

    store.lock_schedule(schedule.id)
    merged = {field: data.get(field, getattr(lesson, field)) for field in PAYLOAD_FIELDS}
    try:
        normalized = LessonPayload.model_validate(merged)
    except ValidationError as exc:
        raise InvalidLessonError(
            "Updated lesson is invalid",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc
    ensure_within_teaching_day(normalized, settings)

    candidate = _candidate(schedule, normalized, lesson.id)
    _reject_if_conflicting(candidate, can_add_lesson(candidate, store.fetch_lessons_for_scope(_scope_for(candidate))))

    for key, value in normalized.model_dump().items():
        setattr(lesson, key, value)
    lesson = store.commit_lesson(lesson)
    logger.info("Updated lesson %s in schedule %s (%s)", lesson.id, schedule.id, ", ".join(sorted(data)))
    return lesson


def delete_lesson(store: SqlLessonStore, lesson: Lesson) -> None:
    lesson_id, schedule_id = lesson.id, lesson.schedule_id
    store.delete_lesson(lesson)
    logger.info("Deleted lesson %s from schedule %s", lesson_id, schedule_id)


def expand_bulk_lessons(payload: BulkLessonCreate, settings: Settings) -> list[LessonCreate]:
    slots = payload.time_slots or settings.lesson_time_slots
    lessons = []
    for day in payload.days:
        for slot in slots:
            start_time, end_time = split_time_slot(slot)
            lessons.append(
                LessonCreate(
                    subject_id=payload.subject_id,
                    teacher_id=payload.teacher_id,
                    room=payload.room,
                    type=payload.type,
                    week_type=payload.week_type,
                    day_of_week=day,
                    start_time=start_time,
                    end_time=end_time,
                )
            )
    return lessons


def add_lessons_all_or_nothing(
    store: SqlLessonStore,
    schedule: Schedule,
    requested: list[LessonPayload],
    settings: Settings,
    *,
    details: dict | None = None,
) -> list[Lesson]:
    """Save every requested lesson or none of them.

    Each lesson is checked against the persisted scope and every earlier
    lesson of the batch, so clashes between batch members are reported even
    when one of them was already rejected.
    """
    store.lock_schedule(schedule.id)
    batch: list[LessonCandidate] = []
    violations: list[Violation] = []

    for index, item in enumerate(requested):
        ensure_within_teaching_day(item, settings)
        # Batch members get provisional ids so clashes inside the batch can be reported.
        candidate = _candidate(schedule, item, f"new-{index}")
        violations.extend(can_add_lesson(candidate, store.fetch_lessons_for_scope(_scope_for(candidate)) + batch))
        batch.append(candidate)

    if violations:
        logger.info("Rejected %d lesson(s) for schedule %s: %d violation(s)", len(requested), schedule.id, len(violations))
        raise LessonConflictError(violations, details={**(details or {}), "requested": len(requested)})

    lessons = [
        Lesson(
            schedule=schedule,
            group_id=schedule.group_id,
            semester_id=schedule.semester_id,
            **candidate.model_dump(include=set(PAYLOAD_FIELDS)),
        )
        for candidate in batch
    ]
    lessons = store.commit_lessons(lessons)
    logger.info("Added %d lessons to schedule %s", len(lessons), schedule.id)
    return lessons


def bulk_add_lessons(
    store: SqlLessonStore,
    schedule: Schedule,
    payload: BulkLessonCreate,
    settings: Settings,
) -> list[Lesson]:
    """Add one lesson per (day, time slot) pair; either all are saved or none."""
    return add_lessons_all_or_nothing(store, schedule, expand_bulk_lessons(payload, settings), settings)


def apply_template(
    store: SqlLessonStore,
    schedule: Schedule,
    template: ScheduleTemplate,
    settings: Settings,
) -> list[Lesson]:
    requested = template_lessons(template)
    lessons = add_lessons_all_or_nothing(store, schedule, requested, settings, details={"templateId": template.id})
    logger.info("Applied template %s to schedule %s", template.id, schedule.id)
    return lessons


def audit(store: SqlLessonStore, schedule: Schedule) -> ScheduleAuditReport:
    lessons = store.lessons_for_schedule(schedule.id)
    entries = audit_schedule(lessons, store.lessons_outside_schedule(schedule))
    if entries:
        logger.warning("Schedule %s has %d conflicting lesson(s)", schedule.id, len(entries))
    return ScheduleAuditReport(schedule_id=schedule.id, checked_lessons=len(lessons), conflicts=entries)


def weekly_timetable(schedule: Schedule, lessons: list[Lesson]) -> WeeklyTimetable:
    by_day: dict[int, list[Lesson]] = defaultdict(list)
    for lesson in lessons:
        by_day[lesson.day_of_week].append(lesson)

    days = [
        TimetableDay(
            day_of_week=day,
            day_name=DAY_NAMES[day],
            lessons=[LessonOut.model_validate(lesson) for lesson in sorted(by_day[day], key=lambda item: item.start_time)],
        )
        for day in sorted(by_day)
    ]
    return WeeklyTimetable(schedule_id=schedule.id, days=days)
