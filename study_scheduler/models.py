# study_scheduler/models.py
import logging
from dataclasses import dataclass, field, fields, replace
from datetime import date as Date
from typing import Any, Dict, Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)


ASSIGNMENT_TYPES = (
    "reading", "video", "quiz", "exam", "assignment", "project", "paper",
    "presentation", "discussion", "lab", "clinical", "simulation",
    "activity", "prep", "remediation", "other",
)
PRIORITIES = ("low", "medium", "high", "urgent")


def _parse_hours(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("ignoring unparseable hours value %r", value)
        return None


@dataclass(frozen=True)
class Course:
    id: str
    priority: Optional[int] = None  # tie-break, higher first
    name: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Course":
        priority = record.get("priority")
        try:
            priority = int(priority) if priority is not None else None
        except (TypeError, ValueError):
            priority = None
        return cls(
            id=record.get("id", ""),
            priority=priority,
            name=record.get("name") or record.get("code") or "",
        )


@dataclass(frozen=True)
class Assignment:
    id: str
    course_id: Optional[str]
    title: str
    date: Any                     # due date: date, ISO string or Timestamp
    time: Optional[str] = None    # "HH:MM", informational
    type: str = "assignment"
    hours: Optional[float] = None  # declared estimate, a hint
    priority: str = "medium"
    completed: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Assignment":
        """Build an assignment from a stored planner record.

        Accepts the camelCase keys the planner UI stores (``courseId``) as
        well as snake_case. Title, type, priority and due time get the UI's
        defaults; missing hours stay None so the type estimate applies, and a
        missing date stays None so the assignment is skipped.
        """
        return cls(
            id=record.get("id", ""),
            course_id=record.get("course_id", record.get("courseId")),
            title=record.get("title") or "Untitled Assignment",
            date=record.get("date") or record.get("due"),
            time=record.get("time") or "23:59",
            type=(record.get("type") or "assignment").lower(),
            hours=_parse_hours(record.get("hours")),
            priority=(record.get("priority") or "medium").lower(),
            completed=bool(record.get("completed", False)),
        )


@dataclass(frozen=True)
class ExistingEvent:
    start: pd.Timestamp
    end: Optional[pd.Timestamp] = None  # defaults to start + 1h
    title: str = ""
    id: str = ""

    @classmethod
    def coerce(cls, obj) -> Optional["ExistingEvent"]:
        """Turn a calendar item into an event; None if it has no start."""
        if isinstance(obj, ExistingEvent):
            return obj
        if isinstance(obj, Mapping):
            if not obj.get("start"):
                return None
            return cls(
                start=obj["start"],
                end=obj.get("end"),
                title=obj.get("title", ""),
                id=str(obj.get("id", "")),
            )
        start = getattr(obj, "start", None)
        if start is None:
            return None
        return cls(start=start, end=getattr(obj, "end", None),
                   title=getattr(obj, "title", getattr(obj, "label", "")),
                   id=str(getattr(obj, "id", "")))


@dataclass(frozen=True)
class TimeWindow:
    start: float   # hour of day, 24h
    end: float
    weight: float = 1.0


def _default_preferred_times() -> Dict[str, TimeWindow]:
    return {
        "morning": TimeWindow(start=8, end=12, weight=1),
        "afternoon": TimeWindow(start=13, end=17, weight=1),
        "evening": TimeWindow(start=18, end=22, weight=1),
    }


def _default_energy_levels() -> Dict[str, float]:
    return {
        "monday": 0.9,
        "tuesday": 1.0,
        "wednesday": 0.95,
        "thursday": 0.85,
        "friday": 0.7,
        "saturday": 0.8,
        "sunday": 0.9,
    }


@dataclass
class Preferences:
    daily_max_hours: float = 6
    weekend_max_hours: float = 4
    block_duration: float = 1.5
    preferred_times: Dict[str, TimeWindow] = field(default_factory=_default_preferred_times)
    energy_levels: Dict[str, float] = field(default_factory=_default_energy_levels)
    buffer_before_exam: int = 2        # days
    review_percentage: float = 0.2     # extra exam time for review
    break_between_blocks: float = 0.25  # hours, informational only
    tz: Optional[str] = None           # None = naive local wall-clock

    def __post_init__(self):
        self.preferred_times = {
            name: w if isinstance(w, TimeWindow) else TimeWindow(**w)
            for name, w in self.preferred_times.items()
        }
        self.energy_levels = {
            day.lower(): float(level) for day, level in self.energy_levels.items()
        }
        if isinstance(self.buffer_before_exam, float):
            self.buffer_before_exam = int(self.buffer_before_exam)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Preferences":
        return cls().merged(data)

    def merged(self, partial: Mapping[str, Any]) -> "Preferences":
        """Shallow-merge ``partial`` over these preferences."""
        known = {f.name for f in fields(self)}
        updates = {}
        for key, value in partial.items():
            if key in known:
                updates[key] = value
            else:
                logger.warning("ignoring unknown preference %r", key)
        return replace(self, **updates)


@dataclass(frozen=True)
class TimeSlot:
    date: Date
    start: pd.Timestamp
    end: pd.Timestamp


@dataclass
class StudyBlock:
    id: str
    assignment_id: str
    course_id: Optional[str]
    title: str
    kind: str                  # "study" | "review"
    date: Date
    start: pd.Timestamp
    end: pd.Timestamp
    hours: float
    priority: str
    energy_required: str       # "low" | "medium" | "high"
    assignment_title: str = ""
    assignment_type: str = ""
    suboptimal: bool = False


@dataclass
class ScheduleStatistics:
    total_hours: float = 0.0
    average_per_day: float = 0.0
    by_type: Dict[str, float] = field(default_factory=dict)
    by_course: Dict[Any, float] = field(default_factory=dict)
    by_day: Dict[str, float] = field(default_factory=dict)
    block_count: int = 0
