# study_scheduler/estimates.py
"""
Type- and priority-driven lookup tables.

Each table is a read-only mapping paired with a default used for keys it
does not know about.
"""
import math
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Assignment, Course, Preferences
from .timeutils import to_day

DEFAULT_HOURS = 2.0
HOURS_BY_TYPE = MappingProxyType({
    "reading": 2.5,
    "video": 0.5,
    "quiz": 1.5,
    "exam": 8.0,
    "assignment": 3.0,
    "project": 6.0,
    "paper": 8.0,
    "presentation": 4.0,
    "discussion": 1.0,
    "lab": 2.0,
    "clinical": 0.0,  # no prep modeled
    "simulation": 1.0,
    "activity": 1.0,
    "prep": 2.0,
    "remediation": 2.5,
})

PRIORITY_MULTIPLIERS = MappingProxyType({
    "low": 0.8,
    "medium": 1.0,
    "high": 1.3,
    "urgent": 1.5,
})

TYPE_MULTIPLIERS = MappingProxyType({
    "exam": 1.5,
    "project": 1.3,
    "paper": 1.3,
    "quiz": 1.1,
    "assignment": 1.0,
    "reading": 0.9,
    "video": 0.7,
})

# lower rank is scheduled first
PRIORITY_RANK = MappingProxyType({
    "urgent": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
})
DEFAULT_PRIORITY_RANK = PRIORITY_RANK["medium"]

PREFERRED_PERIODS = MappingProxyType({
    "exam": ("morning", "afternoon"),
    "quiz": ("morning", "evening"),
    "reading": ("evening", "afternoon"),
    "video": ("evening", "afternoon"),
    "assignment": ("afternoon", "evening"),
    "project": ("afternoon", "morning"),
    "review": ("morning", "afternoon"),
})

ENERGY_REQUIRED = MappingProxyType({
    "exam": "high",
    "quiz": "high",
    "project": "high",
    "paper": "high",
    "review": "high",
    "assignment": "medium",
    "reading": "medium",
    "video": "low",
    "discussion": "low",
})
DEFAULT_ENERGY = "medium"


def estimate_hours(assignment_type: str) -> float:
    return HOURS_BY_TYPE.get(assignment_type, DEFAULT_HOURS)


def priority_multiplier(priority: str) -> float:
    return PRIORITY_MULTIPLIERS.get(priority, 1.0)


def type_multiplier(assignment_type: str) -> float:
    return TYPE_MULTIPLIERS.get(assignment_type, 1.0)


def energy_required(assignment_type: str) -> str:
    return ENERGY_REQUIRED.get(assignment_type, DEFAULT_ENERGY)


def round_half_hour(hours: float) -> float:
    """Round to the nearest 0.5h, halves rounding up."""
    return math.floor(hours * 2 + 0.5) / 2


def calculate_study_time(assignment: Assignment, prefs: Preferences) -> float:
    """
    Total study hours (the quota) an assignment needs before its due date.

    Declared hours win over the type estimate; both are scaled by priority
    and type. Exams get ``prefs.review_percentage`` on top.
    """
    base = assignment.hours or estimate_hours(assignment.type)
    total = base * priority_multiplier(assignment.priority) * type_multiplier(assignment.type)
    if assignment.type == "exam":
        total += total * prefs.review_percentage
    return round_half_hour(total)


def prioritize_assignments(assignments: Iterable[Assignment],
                           courses: Iterable[Course]) -> List[Assignment]:
    """
    Order assignments for placement: priority, then due date, then course
    priority (high first), then declared hours (long first).

    Returns a new list; the sort is stable.
    """
    course_priority: Dict[Optional[str], int] = {
        c.id: (c.priority or 0) for c in courses
    }

    def key(a: Assignment) -> Tuple:
        due = to_day(a.date)
        return (
            PRIORITY_RANK.get(a.priority, DEFAULT_PRIORITY_RANK),
            # undated assignments sort last
            (due is None, due.value if due is not None else 0),
            -course_priority.get(a.course_id, 0),
            -(a.hours or 0),
        )

    return sorted(assignments, key=key)
