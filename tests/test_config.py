"""Tests for loading preferences from files."""

import json

import pytest

from study_scheduler.config import dump_preferences, load_preferences
from study_scheduler.models import Preferences, TimeWindow


def test_missing_file_gives_defaults(tmp_path):
    assert load_preferences(tmp_path / "nope.yaml") == Preferences()


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "prefs.yaml"
    path.write_text("")
    assert load_preferences(path) == Preferences()


def test_yaml_overrides(tmp_path):
    path = tmp_path / "prefs.yaml"
    path.write_text(
        "daily_max_hours: 5\n"
        "block_duration: 1.0\n"
        "preferred_times:\n"
        "  morning: {start: 7, end: 11, weight: 2}\n"
        "  evening: {start: 19, end: 23, weight: 1}\n"
    )
    prefs = load_preferences(path)
    assert prefs.daily_max_hours == 5
    assert prefs.block_duration == 1.0
    assert prefs.weekend_max_hours == 4
    # shallow merge replaces the whole window table
    assert prefs.preferred_times == {
        "morning": TimeWindow(start=7, end=11, weight=2),
        "evening": TimeWindow(start=19, end=23, weight=1),
    }


def test_partial_energy_table_keeps_other_days(tmp_path):
    path = tmp_path / "prefs.yaml"
    path.write_text("energy_levels:\n  Friday: 0.5\n")
    prefs = load_preferences(path)
    assert prefs.energy_levels["friday"] == 0.5
    assert prefs.energy_levels["tuesday"] == 1.0


def test_json_file(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"buffer_before_exam": 3, "tz": "Europe/Berlin"}))
    prefs = load_preferences(path)
    assert prefs.buffer_before_exam == 3
    assert prefs.tz == "Europe/Berlin"


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "prefs.yaml"
    path.write_text("daily_max_hours: 2\ncolor_scheme: dark\n")
    assert load_preferences(path).daily_max_hours == 2


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "prefs.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_preferences(path)


def test_dump_then_load(tmp_path):
    prefs = Preferences(daily_max_hours=3.5, buffer_before_exam=4)
    path = tmp_path / "prefs.yaml"
    path.write_text(dump_preferences(prefs))
    assert load_preferences(path) == prefs
