"""Shared test fixtures and data loading for story-calendar.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Calendar definitions use the camelCase wire format accepted by
story_calendar.loaders.  Reference calendar: "gregorian_test", where day 1
of year 0 is a Monday and one day is 1440 minutes.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_calendars = _load_json(FIXTURES_DIR / "calendars.json")


# ---------------------------------------------------------------------------
# Reference constants
# ---------------------------------------------------------------------------
MINUTES_PER_DAY = 1440
MINUTES_PER_YEAR = 525600

# Weekday phases (0-indexed) in calendars with Sunday-first week labels
WEEKDAYS = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def day_time(day_of_year: int, year: int = 0, minutes: int = 0) -> int:
    """StoryTime of a 1-indexed day in a 1440-minute-day, 365-day calendar.

    >>> day_time(1)
    0
    >>> day_time(359)
    515520
    """
    return year * MINUTES_PER_YEAR + (day_of_year - 1) * MINUTES_PER_DAY + minutes


def calendar_data(name: str, **overrides) -> dict:
    """Raw wire-format dict for a named calendar, with top-level overrides.

    ``display`` overrides are merged into the calendar's display block.
    """
    data = copy.deepcopy(_calendars[name])
    data["id"] = name
    display = overrides.pop("display", None)
    if display:
        data["display"] = {**data["display"], **display}
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Calendar factories
# ---------------------------------------------------------------------------
def make_config(name: str, **overrides):
    """Build a CalendarConfig from calendars.json by name."""
    from story_calendar.loaders import calendar_from_dict

    return calendar_from_dict(calendar_data(name, **overrides), source=name)


def make_engine(name: str, **overrides):
    """Build a CalendarEngine from calendars.json by name."""
    from story_calendar.engine import CalendarEngine

    return CalendarEngine(make_config(name, **overrides))


# ---------------------------------------------------------------------------
# Scenario loader
# ---------------------------------------------------------------------------
def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


def engine_for(spec: dict):
    """Engine for a scenario: its calendar plus any holidays/overrides."""
    overrides = dict(spec.get("overrides", {}))
    if "holidays" in spec:
        overrides["holidays"] = spec["holidays"]
    return make_engine(spec["calendar"], **overrides)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def gregorian_engine():
    return make_engine("gregorian_test")


@pytest.fixture
def medieval_engine():
    return make_engine("medieval")


@pytest.fixture
def coruscant_engine():
    return make_engine("coruscant")


@pytest.fixture
def simple_engine():
    return make_engine("simple")


@pytest.fixture
def tidal_engine():
    return make_engine("tidal")
