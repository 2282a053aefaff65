# study_scheduler/scheduler.py
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date as Date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .estimates import calculate_study_time, energy_required, prioritize_assignments
from .export import export_for_calendar, summarize
from .models import (
    Assignment, Course, ExistingEvent, Preferences, ScheduleStatistics, StudyBlock,
)
from .slots import find_best_time_slot, normalize_events
from .timeutils import is_weekend, shift_days, to_day, to_timestamp, weekday_name

logger = logging.getLogger(__name__)

MIN_BLOCK_HOURS = 0.5
LOOKBACK_DAYS = 3
REVIEW_HOURS = 2.0
LOW_ENERGY_THRESHOLD = 0.8


class _Run:
    """Mutable state of one scheduling pass."""

    def __init__(self, prefs: Preferences, events: List[ExistingEvent]):
        self.prefs = prefs
        self.events = events
        self.blocks: List[StudyBlock] = []
        self.hours_by_day: Dict[Date, float] = defaultdict(float)
        self.block_seq: Dict[tuple, int] = defaultdict(int)

    def add(self, block: StudyBlock) -> None:
        self.blocks.append(block)
        self.hours_by_day[block.date] += block.hours

    def next_block_id(self, kind: str, assignment_id) -> str:
        key = (kind, assignment_id)
        self.block_seq[key] += 1
        return f"{kind}_{assignment_id}_{self.block_seq[key]}"


def daily_capacity(day: pd.Timestamp, prefs: Preferences) -> float:
    """Hours of study allowed on ``day`` after energy scaling."""
    energy = prefs.energy_levels.get(weekday_name(day), 1.0)
    cap = prefs.weekend_max_hours if is_weekend(day) else prefs.daily_max_hours
    return cap * energy


def schedule_assignment(run: _Run,
                        assignment: Assignment,
                        start_day: pd.Timestamp,
                        end: pd.Timestamp) -> float:
    """
    Greedily place ``assignment``'s quota one chunk per day, walking from
    its earliest start toward the due date. Returns the hours placed.
    """
    prefs = run.prefs
    due = to_day(assignment.date, prefs.tz)
    if due is None:
        logger.warning("schedule_assignment: skipping %r, bad due date %r",
                       assignment.id, assignment.date)
        return 0.0

    quota = calculate_study_time(assignment, prefs)
    lookback = int(prefs.buffer_before_exam) + LOOKBACK_DAYS if assignment.type == "exam" else LOOKBACK_DAYS
    current = max(start_day, shift_days(due, -lookback))
    scheduled = 0.0

    while scheduled < quota and current < due and current < end:
        cap = daily_capacity(current, prefs)
        committed = run.hours_by_day[current.date()]

        if committed < cap:
            hours = min(prefs.block_duration, quota - scheduled, cap - committed)
            if hours >= MIN_BLOCK_HOURS:
                slot = find_best_time_slot(current, hours, run.events, assignment.type, prefs)
                run.add(StudyBlock(
                    id=run.next_block_id("study", assignment.id),
                    assignment_id=assignment.id,
                    course_id=assignment.course_id,
                    title=f"Study: {assignment.title}",
                    kind="study",
                    date=slot.date,
                    start=slot.start,
                    end=slot.end,
                    hours=hours,
                    priority=assignment.priority,
                    energy_required=energy_required(assignment.type),
                    assignment_title=assignment.title,
                    assignment_type=assignment.type,
                ))
                scheduled += hours
                logger.debug("placed %.1fh of %r on %s at %s",
                             hours, assignment.id, slot.date, slot.start.time())

        current = shift_days(current, 1)

    if scheduled < quota:
        logger.debug("schedule_assignment: %r placed %.1fh of %.1fh", assignment.id, scheduled, quota)
    return scheduled


def add_review_sessions(run: _Run,
                        assignments: Sequence[Assignment],
                        start: pd.Timestamp,
                        end: pd.Timestamp) -> None:
    """
    Place a fixed 2h review block on each of the ``buffer_before_exam`` days
    before every exam. Review blocks do not count against the daily cap.
    """
    prefs = run.prefs
    for exam in assignments:
        if exam.type != "exam":
            continue
        exam_day = to_day(exam.date, prefs.tz)
        if exam_day is None:
            continue
        for i in range(1, int(prefs.buffer_before_exam) + 1):
            review_day = shift_days(exam_day, -i)
            if not (start < review_day < end):
                continue
            slot = find_best_time_slot(review_day, REVIEW_HOURS, run.events, "review", prefs)
            run.add(StudyBlock(
                id=run.next_block_id("review", exam.id),
                assignment_id=exam.id,
                course_id=exam.course_id,
                title=f"Review: {exam.title}",
                kind="review",
                date=slot.date,
                start=slot.start,
                end=slot.end,
                hours=REVIEW_HOURS,
                priority="high",
                energy_required=energy_required("review"),
                assignment_title=exam.title,
                assignment_type=exam.type,
            ))


def flag_low_energy_blocks(blocks: Iterable[StudyBlock], prefs: Preferences) -> None:
    # advisory only, blocks are not moved
    for block in blocks:
        if block.energy_required != "high":
            continue
        energy = prefs.energy_levels.get(weekday_name(block.start))
        if energy is not None and energy < LOW_ENERGY_THRESHOLD:
            block.suboptimal = True


def plan_study_blocks(assignments: Iterable[Assignment],
                      courses: Iterable[Course],
                      existing_events: Iterable,
                      start_date,
                      end_date,
                      prefs: Optional[Preferences] = None) -> List[StudyBlock]:
    """
    Build a fresh list of study and review blocks.

    assignments: incomplete assignments to plan for (completed ones are the
                 caller's to filter out).
    existing_events: calendar items the blocks must avoid; ExistingEvents or
                     mappings with "start"/"end".
    start_date, end_date: the planning window. Blocks land on days from the
                          start day up to, but not at or after, end_date.
    """
    prefs = prefs or Preferences()
    start = to_timestamp(start_date, prefs.tz)
    end = to_timestamp(end_date, prefs.tz)
    if start is None or end is None:
        logger.warning("plan_study_blocks: bad window %r..%r", start_date, end_date)
        return []
    if start > end:
        logger.warning("plan_study_blocks: start %s is after end %s", start, end)
        return []

    assignments = list(assignments)
    run = _Run(prefs, normalize_events(existing_events, prefs.tz))
    ordered = prioritize_assignments(assignments, list(courses or []))

    for assignment in ordered:
        schedule_assignment(run, assignment, start.normalize(), end)

    add_review_sessions(run, ordered, start, end)
    flag_low_energy_blocks(run.blocks, prefs)

    logger.info("plan_study_blocks: %d assignments -> %d blocks (%.1fh)",
                len(assignments), len(run.blocks), sum(b.hours for b in run.blocks))
    return run.blocks


class StudyScheduler:
    """
    Holds preferences and the blocks of the most recent run.

    Every generate_schedule call replaces the previous result. Use one
    instance per scheduling request; instances are not thread-safe.
    """

    def __init__(self, preferences: Optional[Preferences] = None):
        self.preferences = preferences or Preferences()
        self.study_blocks: List[StudyBlock] = []

    def generate_schedule(self, assignments, courses, existing_events,
                          start_date, end_date) -> List[StudyBlock]:
        self.study_blocks = []
        self.study_blocks = plan_study_blocks(
            assignments, courses, existing_events, start_date, end_date, self.preferences,
        )
        return [replace(b) for b in self.study_blocks]

    def update_preferences(self, partial: Optional[Mapping[str, Any]] = None, **kwargs) -> None:
        """Shallow-merge new values into the live preferences."""
        updates = dict(partial or {}, **kwargs)
        self.preferences = self.preferences.merged(updates)

    def get_statistics(self) -> ScheduleStatistics:
        return summarize(self.study_blocks)

    def export_for_calendar(self) -> List[dict]:
        return export_for_calendar(self.study_blocks)
