"""Tests for slot search within a day."""

import pandas as pd

from study_scheduler.models import ExistingEvent, Preferences, TimeWindow
from study_scheduler.slots import (
    events_on_day, find_available_slots, find_best_time_slot, normalize_events,
    preferred_windows,
)

from conftest import at, busy, day


def test_available_slots_stay_inside_window():
    window = TimeWindow(start=8, end=12)
    slots = find_available_slots(day(0), window, [], 1.0)
    assert [s.start for s in slots] == [at(0, h) for h in (8, 8.5, 9, 9.5, 10, 10.5, 11)]
    assert all(s.end <= at(0, 12) for s in slots)
    assert all(s.date == day(0).date() for s in slots)


def test_available_slots_skip_conflicts():
    window = TimeWindow(start=8, end=12)
    slots = find_available_slots(day(0), window, [busy(0, 9, 10)], 1.0)
    # touching an event's edge is not a conflict
    assert [s.start for s in slots] == [at(0, 8), at(0, 10), at(0, 10.5), at(0, 11)]


def test_exam_prefers_morning(prefs):
    slot = find_best_time_slot(day(0), 1.5, [], "exam", prefs)
    assert slot.start == at(0, 8)
    assert slot.end == at(0, 9.5)


def test_reading_prefers_evening(prefs):
    slot = find_best_time_slot(day(0), 1.5, [], "reading", prefs)
    assert slot.start == at(0, 18)


def test_review_prefers_morning_then_afternoon(prefs):
    slot = find_best_time_slot(day(0), 2, [busy(0, 8, 12)], "review", prefs)
    assert slot.start == at(0, 13)
    assert slot.end == at(0, 15)


def test_next_free_start_after_conflict(prefs):
    slot = find_best_time_slot(day(0), 1.5, [busy(0, 8, 9)], "exam", prefs)
    assert slot.start == at(0, 9)


def test_events_on_other_days_are_ignored(prefs):
    slot = find_best_time_slot(day(0), 1.5, [busy(1, 8, 12)], "exam", prefs)
    assert slot.start == at(0, 8)


def test_unknown_type_follows_window_weights():
    prefs = Preferences(preferred_times={
        "morning": {"start": 8, "end": 12, "weight": 1},
        "afternoon": {"start": 13, "end": 17, "weight": 1},
        "evening": {"start": 18, "end": 22, "weight": 3},
    })
    slot = find_best_time_slot(day(0), 1, [], "lab", prefs)
    assert slot.start == at(0, 18)


def test_equal_weights_keep_configured_order(prefs):
    names = [w.start for w in preferred_windows("field trip", prefs)]
    assert names == [8, 13, 18]


def test_falls_back_to_other_windows(prefs):
    # exam prefers morning/afternoon, both taken
    events = [busy(0, 8, 12), busy(0, 13, 17)]
    slot = find_best_time_slot(day(0), 1.5, events, "exam", prefs)
    assert slot.start == at(0, 18)


def test_fixed_fallback_when_nothing_fits(prefs):
    slot = find_best_time_slot(day(0), 4.5, [], "exam", prefs)
    assert slot.start == at(0, 19)
    assert slot.end == at(0, 23.5)


def test_fallback_when_day_is_full(prefs):
    events = [busy(0, 0, 23.99)]
    slot = find_best_time_slot(day(0), 1, events, "reading", prefs)
    assert slot.start == at(0, 19)


def test_normalize_events_defaults_and_skips():
    events = normalize_events([
        {"start": "2025-11-03T08:00:00", "title": "no end"},
        {"title": "no start"},
        {"start": "not a date"},
        ExistingEvent(start=at(0, 13), end=at(0, 14)),
    ])
    assert len(events) == 2
    assert events[0].end == at(0, 9)
    assert events[1].start == at(0, 13)


def test_event_without_end_blocks_one_hour(prefs):
    events = normalize_events([{"start": at(0, 8)}])
    slot = find_best_time_slot(day(0), 1, events, "exam", prefs)
    assert slot.start == at(0, 9)


def test_events_on_day_uses_start_day():
    late = busy(0, 23, 25)
    assert events_on_day(day(0), [late]) == [late]
    assert events_on_day(day(1), [late]) == []


def test_normalize_events_with_timezone():
    events = normalize_events(
        [{"start": pd.Timestamp("2025-11-03T13:00:00Z")}], tz="America/New_York",
    )
    assert events[0].start.hour == 8
    assert str(events[0].start.tz) == "America/New_York"


def test_windows_keep_wall_clock_hours_on_dst_day(prefs):
    tz = "America/New_York"
    spring = pd.Timestamp("2026-03-08", tz=tz)
    slot = find_best_time_slot(spring, 1.5, [], "exam", prefs)
    assert slot.start == pd.Timestamp("2026-03-08 08:00", tz=tz)
    assert slot.end == pd.Timestamp("2026-03-08 09:30", tz=tz)
    assert slot.date == spring.date()

    fall = pd.Timestamp("2026-11-01", tz=tz)
    fallback = find_best_time_slot(fall, 4.5, [], "exam", prefs)
    assert fallback.start == pd.Timestamp("2026-11-01 19:00", tz=tz)
    assert fallback.end == pd.Timestamp("2026-11-01 23:30", tz=tz)


def test_conflicts_use_wall_clock_on_dst_day(prefs):
    tz = "America/New_York"
    spring = pd.Timestamp("2026-03-08", tz=tz)
    events = normalize_events([{"start": "2026-03-08 08:00", "end": "2026-03-08 12:00"}], tz=tz)
    slot = find_best_time_slot(spring, 1.5, events, "exam", prefs)
    assert slot.start == pd.Timestamp("2026-03-08 13:00", tz=tz)
