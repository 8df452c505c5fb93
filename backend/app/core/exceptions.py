class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class DuplicateScheduleError(AppError):
    """Raised when a group already has a schedule for the semester."""
    def __init__(self, group_id: str, semester_id: str):
        super().__init__(
            f"Group {group_id} already has a schedule for semester {semester_id}",
            status_code=409,
            details={"group_id": group_id, "semester_id": semester_id},
        )

class LessonConflictError(AppError):
    """Raised when a lesson would double-book a group, teacher or room.

    Every violation found is carried in ``details["violations"]`` so the
    caller can fix all of them in one pass.
    """
    def __init__(self, violations: list, details: dict = None):
        payload = dict(details or {})
        payload["violations"] = [violation.model_dump(by_alias=True) for violation in violations]
        super().__init__(
            f"Lesson conflicts with {len(violations)} existing booking(s)",
            status_code=409,
            details=payload,
        )
        self.violations = violations

class InvalidLessonError(AppError):
    """Raised when a lesson built on the server fails lesson validation."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class LessonTimeError(InvalidLessonError):
    """Raised when a lesson falls outside the teaching day."""
