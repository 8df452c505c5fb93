from __future__ import annotations

import logging

from sqlalchemy import inspect

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "schedules": {"id", "group_id", "semester_id", "semester", "year"},
    "lessons": {
        "id",
        "schedule_id",
        "group_id",
        "semester_id",
        "teacher_id",
        "room",
        "day_of_week",
        "start_time",
        "end_time",
        "week_type",
    },
    "schedule_templates": {"id", "name", "description", "lessons"},
}


def missing_schema_items() -> dict[str, list[str]]:
    """Map each required table to the columns it lacks (all of them if the table is absent)."""
    missing: dict[str, list[str]] = {}
    with engine.connect() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        for table_name, columns in REQUIRED_COLUMNS.items():
            if table_name not in table_names:
                missing[table_name] = sorted(columns)
                continue
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            absent = sorted(columns - existing)
            if absent:
                missing[table_name] = absent
    return missing


def ensure_schema() -> None:
    import app.models  # noqa: F401

    if get_settings().auto_create_schema:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")

    missing = missing_schema_items()
    for table_name, columns in missing.items():
        logger.warning("Table %s is missing columns %s; run the migrations", table_name, ", ".join(columns))
