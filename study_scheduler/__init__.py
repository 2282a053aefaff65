from .models import (
    Assignment, Course, ExistingEvent, Preferences, ScheduleStatistics, StudyBlock,
    TimeSlot, TimeWindow,
)
from .scheduler import StudyScheduler, plan_study_blocks

__all__ = [
    "Assignment", "Course", "ExistingEvent", "Preferences", "ScheduleStatistics",
    "StudyBlock", "TimeSlot", "TimeWindow", "StudyScheduler", "plan_study_blocks",
]
