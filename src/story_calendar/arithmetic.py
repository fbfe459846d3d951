"""Time arithmetic on StoryTime integers: offsets, rounding, ages."""

from __future__ import annotations

import math
from dataclasses import replace

from story_calendar.conversion import date_to_story_time, story_time_to_date
from story_calendar.types import CalendarConfig, StoryTime


def add_minutes(time: StoryTime, minutes: int) -> StoryTime:
    return time + minutes


def add_hours(config: CalendarConfig, time: StoryTime, hours: int) -> StoryTime:
    return time + hours * config.minutes_per_hour


def add_days(config: CalendarConfig, time: StoryTime, days: int) -> StoryTime:
    return time + days * config.minutes_per_day


def round_to_hour(config: CalendarConfig, time: StoryTime) -> StoryTime:
    """Round to the nearest hour boundary. Ties round up.

    Floored modulo keeps the remainder non-negative, so negative times round
    the same way as positive ones.
    """
    remainder = time % config.minutes_per_hour
    if remainder * 2 < config.minutes_per_hour:
        return time - remainder
    return time + (config.minutes_per_hour - remainder)


def start_of_day(config: CalendarConfig, time: StoryTime) -> StoryTime:
    date = story_time_to_date(config, time)
    return date_to_story_time(config, replace(date, hour=0, minute=0))


def start_of_year(config: CalendarConfig, time: StoryTime) -> StoryTime:
    date = story_time_to_date(config, time)
    return date_to_story_time(
        config, replace(date, day_of_year=1, hour=0, minute=0)
    )


def calculate_age(
    config: CalendarConfig, birthdate: StoryTime, current_time: StoryTime
) -> float:
    """Age in (fractional) years.

    Divides by ``minutes_per_year`` only; the subdivision structure of the
    calendar plays no part.
    """
    return (current_time - birthdate) / config.minutes_per_year


def format_age(
    config: CalendarConfig, birthdate: StoryTime, current_time: StoryTime
) -> str:
    """Age truncated to one decimal, e.g. '12 years old' or '12.5 years old'."""
    age = calculate_age(config, birthdate, current_time)
    truncated = math.floor(age * 10) / 10
    if truncated == math.floor(truncated):
        return f"{math.floor(truncated)} years old"
    return f"{truncated} years old"
