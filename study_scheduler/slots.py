# study_scheduler/slots.py
import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .estimates import PREFERRED_PERIODS
from .models import ExistingEvent, Preferences, TimeSlot, TimeWindow
from .timeutils import at_hour, localize_like, to_timestamp, wall_clock

logger = logging.getLogger(__name__)

SCAN_STEP = "30min"
FALLBACK_START_HOUR = 19
DEFAULT_EVENT_DURATION = pd.Timedelta(hours=1)


def normalize_events(existing_events: Iterable, tz: Optional[str] = None) -> List[ExistingEvent]:
    """
    Coerce calendar items to ExistingEvents with concrete start/end
    Timestamps. Items without a usable start are dropped.
    """
    out = []
    for raw in existing_events or []:
        ev = ExistingEvent.coerce(raw)
        if ev is None:
            continue
        start = to_timestamp(ev.start, tz)
        if start is None:
            logger.warning("normalize_events: skipped event %r with bad start %r", ev.title, ev.start)
            continue
        end = to_timestamp(ev.end, tz) if ev.end is not None else None
        if end is None:
            end = start + DEFAULT_EVENT_DURATION
        out.append(ExistingEvent(start=start, end=end, title=ev.title, id=ev.id))
    return out


def events_on_day(day: pd.Timestamp, events: Sequence[ExistingEvent]) -> List[ExistingEvent]:
    """Events whose start falls on ``day``."""
    return [ev for ev in events if ev.start.normalize() == day]


def preferred_windows(assignment_type: str, prefs: Preferences) -> List[TimeWindow]:
    """Time-of-day windows to try, in order, for an assignment type."""
    names = PREFERRED_PERIODS.get(assignment_type)
    if names is None:
        return windows_by_weight(prefs)
    return [prefs.preferred_times[n] for n in names if n in prefs.preferred_times]


def windows_by_weight(prefs: Preferences) -> List[TimeWindow]:
    # sorted() is stable, so equal weights keep configured order
    return sorted(prefs.preferred_times.values(), key=lambda w: -w.weight)


def find_available_slots(day: pd.Timestamp,
                         window: TimeWindow,
                         day_events: Sequence[ExistingEvent],
                         hours_needed: float) -> List[TimeSlot]:
    """
    All conflict-free slots of ``hours_needed`` inside ``window`` on ``day``,
    trying starts every 30 minutes.

    The scan runs on local wall-clock time so windows keep their hours on
    DST transition days.
    """
    local_day = wall_clock(day).normalize()
    window_start = local_day + pd.Timedelta(hours=window.start)
    window_end = local_day + pd.Timedelta(hours=window.end)
    starts = pd.date_range(window_start, window_end, freq=SCAN_STEP, inclusive="left")
    if len(starts) == 0:
        return []
    ends = starts + pd.Timedelta(hours=hours_needed)

    ok = np.asarray(ends <= window_end)
    for ev in day_events:
        ev_start, ev_end = wall_clock(ev.start), wall_clock(ev.end)
        ok &= ~np.asarray((starts < ev_end) & (ends > ev_start))

    return [
        TimeSlot(date=local_day.date(), start=localize_like(s, day), end=localize_like(e, day))
        for s, e, free in zip(starts, ends, ok) if free
    ]


def find_best_time_slot(day: pd.Timestamp,
                        hours_needed: float,
                        existing_events: Sequence[ExistingEvent],
                        assignment_type: str,
                        prefs: Preferences) -> TimeSlot:
    """
    Pick a slot for a chunk of study time on ``day``.

    Preferred windows for the assignment type come first, then every window
    by descending weight. When the whole day is taken, a fixed 19:00 slot is
    returned so a chunk that was decided on always gets placed.
    """
    day = day.normalize()
    day_events = events_on_day(day, existing_events)

    for window in preferred_windows(assignment_type, prefs):
        slots = find_available_slots(day, window, day_events, hours_needed)
        if slots:
            return slots[0]

    for window in windows_by_weight(prefs):
        slots = find_available_slots(day, window, day_events, hours_needed)
        if slots:
            return slots[0]

    start = at_hour(day, FALLBACK_START_HOUR)
    logger.debug("find_best_time_slot: no free window on %s, falling back to %s", day.date(), start)
    end = at_hour(day, FALLBACK_START_HOUR + hours_needed)
    return TimeSlot(date=day.date(), start=start, end=end)
