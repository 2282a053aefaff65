# study_scheduler/config.py
"""
Loading scheduler preferences from a YAML (or JSON) file.

Example ``preferences.yaml``::

    daily_max_hours: 5
    block_duration: 1.0
    preferred_times:
      morning: {start: 7, end: 11, weight: 2}
      afternoon: {start: 13, end: 17, weight: 1}
      evening: {start: 19, end: 23, weight: 1}
    energy_levels:
      friday: 0.6
"""
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .models import Preferences

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "preferences.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.info("no preferences file at %s, using defaults", path)
        return {}
    text = path.read_text(encoding="utf-8")
    # JSON documents are valid YAML
    return yaml.safe_load(text) or {}


def load_preferences(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Preferences:
    data = _load_yaml(Path(path))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of preferences")

    # a partial energy table only overrides the days it names
    energy = data.get("energy_levels")
    if isinstance(energy, dict):
        merged = Preferences().energy_levels
        merged.update({str(k).lower(): v for k, v in energy.items()})
        data = dict(data, energy_levels=merged)
    return Preferences.from_dict(data)


def dump_preferences(prefs: Preferences) -> str:
    """Serialize preferences back to YAML text."""
    data = {
        "daily_max_hours": prefs.daily_max_hours,
        "weekend_max_hours": prefs.weekend_max_hours,
        "block_duration": prefs.block_duration,
        "preferred_times": {
            name: {"start": w.start, "end": w.end, "weight": w.weight}
            for name, w in prefs.preferred_times.items()
        },
        "energy_levels": dict(prefs.energy_levels),
        "buffer_before_exam": prefs.buffer_before_exam,
        "review_percentage": prefs.review_percentage,
        "break_between_blocks": prefs.break_between_blocks,
        "tz": prefs.tz,
    }
    return yaml.safe_dump(data, sort_keys=False)
