"""Lesson-scheduling conflict checks.

A lesson recurs weekly on one weekday, every week or only on odd/even weeks.
Two lessons clash when they share a weekday, can fall in the same week and
their time ranges overlap; a clash is a violation for every resource (group,
teacher, room) the two lessons have in common.

Everything here is pure: callers assemble the set of lessons to compare
against and decide what to do with the returned violations.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from app.models.schedule import WeekType
from app.schemas.conflict import LessonAuditEntry, Violation
from app.schemas.lesson import DAY_NAMES, normalize_teacher_id, parse_time_to_minutes

logger = logging.getLogger(__name__)

WEEK_LABELS = {
    WeekType.all.value: "every week",
    WeekType.odd.value: "odd weeks",
    WeekType.even.value: "even weeks",
}


def _week_value(value: Any) -> str:
    # Missing or unrecognised week types recur every week.
    value = getattr(value, "value", value)
    if value not in WEEK_LABELS:
        return WeekType.all.value
    return value


def week_types_compatible(first: Any, second: Any) -> bool:
    """Return True when lessons with these week types can meet in the same week."""
    first_value, second_value = _week_value(first), _week_value(second)
    if WeekType.all.value in (first_value, second_value):
        return True
    return first_value == second_value


def time_ranges_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    # Strict comparisons: a lesson ending at 10:30 and one starting at 10:30 do not clash.
    return parse_time_to_minutes(start_a) < parse_time_to_minutes(end_b) and parse_time_to_minutes(
        start_b
    ) < parse_time_to_minutes(end_a)


def _is_well_formed(lesson: Any) -> bool:
    if lesson.day_of_week not in DAY_NAMES:
        logger.warning("Lesson %s has invalid day of week %r; skipping", lesson.id, lesson.day_of_week)
        return False
    try:
        start = parse_time_to_minutes(lesson.start_time)
        end = parse_time_to_minutes(lesson.end_time)
    except (TypeError, ValueError):
        logger.warning(
            "Lesson %s has malformed time range %r-%r; skipping",
            lesson.id,
            lesson.start_time,
            lesson.end_time,
        )
        return False
    if start >= end:
        logger.warning("Lesson %s ends before it starts (%s-%s); skipping", lesson.id, lesson.start_time, lesson.end_time)
        return False
    return True


def _room(lesson: Any) -> str:
    return (lesson.room or "").strip()


def _describe(lesson: Any) -> str:
    week = WEEK_LABELS[_week_value(lesson.week_type)]
    return f"{DAY_NAMES[lesson.day_of_week]} {lesson.start_time}-{lesson.end_time} ({week})"


def _shared_resource_violations(candidate: Any, other: Any) -> list[Violation]:
    violations: list[Violation] = []
    slot = _describe(other)

    if candidate.group_id == other.group_id:
        violations.append(
            Violation(
                lesson_id=other.id,
                dimension="group",
                message=f"Group already has a lesson on {slot}",
            )
        )

    teacher_id = normalize_teacher_id(candidate.teacher_id)
    if teacher_id is not None and teacher_id == normalize_teacher_id(other.teacher_id):
        violations.append(
            Violation(
                lesson_id=other.id,
                dimension="teacher",
                message=f"Teacher {teacher_id} is already teaching on {slot}",
            )
        )

    room = _room(candidate)
    if room and room == _room(other):
        violations.append(
            Violation(
                lesson_id=other.id,
                dimension="room",
                message=f"Room {room} is already booked on {slot}",
            )
        )

    return violations


def can_add_lesson(candidate: Any, existing_lessons: Iterable[Any]) -> list[Violation]:
    """Return every violation adding ``candidate`` next to ``existing_lessons`` causes.

    ``candidate`` and the existing lessons may be ORM rows or schema objects;
    only their attributes are read. A lesson whose id equals the candidate's
    id is its own previous version and is skipped. An empty list means the
    candidate can be saved.

    Malformed lessons (bad time strings, day outside 1..7) never match
    anything; they are logged instead of raising.
    """
    if not _is_well_formed(candidate):
        return []

    violations: list[Violation] = []
    for other in existing_lessons:
        if candidate.id is not None and other.id == candidate.id:
            continue
        if other.day_of_week != candidate.day_of_week:
            continue
        if not week_types_compatible(candidate.week_type, other.week_type):
            continue
        if not _is_well_formed(other):
            continue
        if not time_ranges_overlap(candidate.start_time, candidate.end_time, other.start_time, other.end_time):
            continue
        violations.extend(_shared_resource_violations(candidate, other))
    return violations


def audit_schedule(lessons: Iterable[Any], other_lessons: Iterable[Any] = ()) -> list[LessonAuditEntry]:
    """Check every lesson of a schedule against the schedule and lessons elsewhere."""
    lessons = list(lessons)
    scope = lessons + list(other_lessons)

    entries: list[LessonAuditEntry] = []
    for lesson in lessons:
        violations = can_add_lesson(lesson, scope)
        if violations:
            entries.append(LessonAuditEntry(lesson_id=lesson.id, violations=violations))
    return entries
