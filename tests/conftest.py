"""Shared test fixtures."""

import pandas as pd
import pytest

from study_scheduler.models import Assignment, ExistingEvent, Preferences

# Monday
MONDAY = pd.Timestamp("2025-11-03")


def day(n: int) -> pd.Timestamp:
    """Midnight ``n`` days after MONDAY."""
    return MONDAY + pd.Timedelta(days=n)


def at(n: int, hour: float) -> pd.Timestamp:
    return day(n) + pd.Timedelta(hours=hour)


def busy(n: int, start_hour: float, end_hour: float, title: str = "busy") -> ExistingEvent:
    return ExistingEvent(start=at(n, start_hour), end=at(n, end_hour), title=title)


def overlaps(block, event) -> bool:
    return block.start < event.end and block.end > event.start


@pytest.fixture
def prefs():
    return Preferences()


@pytest.fixture
def flat_energy_prefs():
    """Preferences with every weekday at full energy."""
    return Preferences(energy_levels={
        d: 1.0 for d in ("monday", "tuesday", "wednesday", "thursday",
                         "friday", "saturday", "sunday")
    })


@pytest.fixture
def make_assignment():
    counter = {"n": 0}

    def _make(**kwargs):
        counter["n"] += 1
        defaults = dict(
            id=f"a{counter['n']}",
            course_id="c1",
            title=f"Assignment {counter['n']}",
            date=day(7).date(),
            type="assignment",
            priority="medium",
        )
        defaults.update(kwargs)
        return Assignment(**defaults)

    return _make
