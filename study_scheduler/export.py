# study_scheduler/export.py
from typing import List, Sequence

import pandas as pd

from .models import ScheduleStatistics, StudyBlock

BLOCK_COLUMNS = [
    "id", "assignment_id", "course_id", "title", "kind", "date", "start", "end",
    "hours", "priority", "energy_required", "suboptimal",
]

REVIEW_COLOR = "#7c3aed"
STUDY_COLOR = "#000000"
TEXT_COLOR = "#ffffff"

# divisor for average_per_day, a week regardless of the scheduled span
STATS_DAYS = 7


def block_color(kind: str) -> str:
    return REVIEW_COLOR if kind == "review" else STUDY_COLOR


def blocks_to_frame(blocks: Sequence[StudyBlock]) -> pd.DataFrame:
    """Study blocks as a DataFrame sorted by start time."""
    if not blocks:
        return pd.DataFrame(columns=BLOCK_COLUMNS)
    df = pd.DataFrame([{
        "id": b.id,
        "assignment_id": b.assignment_id,
        "course_id": b.course_id,
        "title": b.title,
        "kind": b.kind,
        "date": b.date,
        "start": b.start,
        "end": b.end,
        "hours": b.hours,
        "priority": b.priority,
        "energy_required": b.energy_required,
        "suboptimal": b.suboptimal,
    } for b in blocks])
    return df.sort_values("start", kind="stable").reset_index(drop=True)


def export_for_calendar(blocks: Sequence[StudyBlock]) -> List[dict]:
    """FullCalendar event dicts for the given blocks."""
    events = []
    for b in blocks:
        events.append({
            "id": b.id,
            "title": b.title,
            "start": b.start.isoformat(),
            "end": b.end.isoformat(),
            "backgroundColor": block_color(b.kind),
            "textColor": TEXT_COLOR,
            "extendedProps": {
                "type": b.kind,
                "assignment_id": b.assignment_id,
                "course_id": b.course_id,
                "hours": b.hours,
                "priority": b.priority,
                "energy_required": b.energy_required,
                "assignment_title": b.assignment_title,
                "assignment_type": b.assignment_type,
                "suboptimal": b.suboptimal,
            },
        })
    return events


def _sum_by(df: pd.DataFrame, key) -> dict:
    grouped = df.groupby(key, sort=False)["hours"].sum()
    return {k: float(v) for k, v in grouped.items()}


def summarize(blocks: Sequence[StudyBlock]) -> ScheduleStatistics:
    """Aggregate hours by block kind, course and weekday."""
    if not blocks:
        return ScheduleStatistics()

    df = pd.DataFrame([{
        "kind": b.kind,
        "course_id": b.course_id if b.course_id is not None else "unassigned",
        "weekday": b.start.day_name(),
        "hours": b.hours,
    } for b in blocks])

    total = float(df["hours"].sum())
    return ScheduleStatistics(
        total_hours=total,
        average_per_day=total / STATS_DAYS,
        by_type=_sum_by(df, "kind"),
        by_course=_sum_by(df, "course_id"),
        by_day=_sum_by(df, "weekday"),
        block_count=len(blocks),
    )
