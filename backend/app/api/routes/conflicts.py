from fastapi import APIRouter

from app.schemas.conflict import ConflictCheckRequest, ConflictCheckResult
from app.services.schedule_validation import can_add_lesson

router = APIRouter()


@router.post("/check", response_model=ConflictCheckResult)
def check_conflicts(payload: ConflictCheckRequest) -> ConflictCheckResult:
    # Scope comes from the caller; nothing is read from the database here.
    violations = can_add_lesson(payload.candidate, payload.existing_lessons)
    return ConflictCheckResult(allowed=not violations, violations=violations)
