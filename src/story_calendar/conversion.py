"""Boundary: StoryTime <-> ParsedDate conversion."""

from __future__ import annotations

from story_calendar.subdivisions import resolve_subdivisions
from story_calendar.types import CalendarConfig, ParsedDate, StoryTime


def story_time_to_date(config: CalendarConfig, time: StoryTime) -> ParsedDate:
    """Convert minutes from epoch to a structured date.

    Year boundaries land on exact multiples of ``minutes_per_year``; for
    negative times the remainder is still in [0, minutes_per_year), so
    ``date_to_story_time`` inverts this exactly.
    """
    adjusted = time - config.epoch_offset * config.minutes_per_year

    year, remainder = divmod(adjusted, config.minutes_per_year)
    day_index, remainder = divmod(remainder, config.minutes_per_day)
    hour, minute = divmod(remainder, config.minutes_per_hour)
    day_of_year = day_index + 1

    return ParsedDate(
        year=year,
        era="negative" if year < 0 else "positive",
        day_of_year=day_of_year,
        hour=hour,
        minute=minute,
        subdivisions=resolve_subdivisions(config, day_of_year, year),
    )


def date_to_story_time(config: CalendarConfig, date: ParsedDate) -> StoryTime:
    """Convert a structured date back to minutes from epoch.

    Only year, day_of_year, hour and minute are used.
    """
    total = date.year * config.minutes_per_year
    total += (date.day_of_year - 1) * config.minutes_per_day
    total += date.hour * config.minutes_per_hour
    total += date.minute
    return total + config.epoch_offset * config.minutes_per_year
