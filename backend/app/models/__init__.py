from app.models.schedule import Lesson, LessonType, Schedule, WeekType  # noqa: F401
from app.models.schedule_template import ScheduleTemplate  # noqa: F401
