"""CalendarEngine: StoryTime <-> calendar dates, holidays and formatting."""

from __future__ import annotations

from typing import Mapping

from story_calendar import arithmetic
from story_calendar.conversion import date_to_story_time, story_time_to_date
from story_calendar.formatting import DateFormatter, subdivision_label
from story_calendar.holidays import HolidayEvaluator
from story_calendar.subdivisions import (
    day_of_subdivision,
    find_subdivision,
    iter_cycles,
    resolve_subdivisions,
    unit_end_day,
    unit_start_day,
)
from story_calendar.types import (
    CalendarConfig,
    CalendarSubdivision,
    ParsedDate,
    StoryTime,
)


class CalendarEngine:
    """One engine per calendar configuration.

    The only mutable state is the per-year holiday cache; build a new
    engine when the configuration changes. Sharing one engine across
    threads needs external locking around holiday lookups.
    """

    def __init__(self, config: CalendarConfig) -> None:
        self.config = config
        self._holidays = HolidayEvaluator(config)
        self._formatter = DateFormatter(config, self._holidays)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def story_time_to_date(self, time: StoryTime) -> ParsedDate:
        return story_time_to_date(self.config, time)

    def date_to_story_time(self, date: ParsedDate) -> StoryTime:
        return date_to_story_time(self.config, date)

    # ------------------------------------------------------------------
    # Subdivisions and cycles
    # ------------------------------------------------------------------

    def get_subdivisions(self, day_of_year: int, year: int) -> dict[str, int]:
        """Subdivision values for a day without building a full date."""
        return resolve_subdivisions(self.config, day_of_year, year)

    def get_day_of_subdivision(self, date: ParsedDate, subdivision_id: str) -> int:
        """1-indexed day within the current unit, e.g. 14 for March 14."""
        return day_of_subdivision(self.config, date, subdivision_id)

    def find_subdivision(self, subdivision_id: str) -> CalendarSubdivision | None:
        return find_subdivision(self.config.subdivisions, subdivision_id)

    def get_cycle_position(
        self, date: ParsedDate, cycle_id: str
    ) -> tuple[int, str] | None:
        """(0-indexed phase, label) of a date in a cycle.

        None if ``cycle_id`` is not a cycle or the date carries no value
        for it.
        """
        cycle = self.find_subdivision(cycle_id)
        if cycle is None or not cycle.is_cycle:
            return None
        value = date.subdivisions.get(cycle_id)
        if value is None:
            return None

        index = value - 1
        if cycle.labels and 0 <= index < len(cycle.labels):
            return index, cycle.labels[index]
        return index, f"{cycle.name} {value}"

    def get_cycle_subdivisions(self) -> list[CalendarSubdivision]:
        return list(iter_cycles(self.config.subdivisions))

    def unit_start_day(self, subdivision_id: str, unit: int) -> int:
        return unit_start_day(self.config, subdivision_id, unit)

    def unit_end_day(self, subdivision_id: str, unit: int) -> int:
        return unit_end_day(self.config, subdivision_id, unit)

    def label_for(self, subdivision_id: str, value: int) -> str | None:
        """Display label of a 1-indexed unit, as templates see it."""
        sub = self.find_subdivision(subdivision_id)
        if sub is None:
            return None
        return subdivision_label(sub, value)

    # ------------------------------------------------------------------
    # Holidays
    # ------------------------------------------------------------------

    def get_holiday(self, date: ParsedDate) -> str | None:
        return self._holidays.holiday_for(date)

    def get_holidays_by_day_for_year(self, year: int) -> Mapping[int, str]:
        """Day of year -> name, cached per year. First declared wins a day."""
        return self._holidays.holidays_by_day_for_year(year)

    def get_all_holidays_for_year(self, year: int) -> dict[str, int]:
        """Name -> day of year, uncached. Later rules overwrite same names."""
        return self._holidays.all_holidays_for_year(year)

    def get_holiday_description(self, name: str) -> str | None:
        return self._holidays.description_for(name)

    def clear_cache(self) -> None:
        self._holidays.clear()

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format_date(self, date: ParsedDate, include_time: bool = True) -> str:
        return self._formatter.format_date(date, include_time)

    def format_story_time(
        self, time: StoryTime, include_time: bool | None = None
    ) -> str:
        """Convert and format. ``include_time=None`` follows the config."""
        if include_time is None:
            include_time = self.config.display.include_time_by_default
        return self.format_date(self.story_time_to_date(time), include_time)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add_minutes(self, time: StoryTime, minutes: int) -> StoryTime:
        return arithmetic.add_minutes(time, minutes)

    def add_hours(self, time: StoryTime, hours: int) -> StoryTime:
        return arithmetic.add_hours(self.config, time, hours)

    def add_days(self, time: StoryTime, days: int) -> StoryTime:
        return arithmetic.add_days(self.config, time, days)

    def round_to_hour(self, time: StoryTime) -> StoryTime:
        return arithmetic.round_to_hour(self.config, time)

    def start_of_day(self, time: StoryTime) -> StoryTime:
        return arithmetic.start_of_day(self.config, time)

    def start_of_year(self, time: StoryTime) -> StoryTime:
        return arithmetic.start_of_year(self.config, time)

    def calculate_age(self, birthdate: StoryTime, current_time: StoryTime) -> float:
        return arithmetic.calculate_age(self.config, birthdate, current_time)

    def format_age(self, birthdate: StoryTime, current_time: StoryTime) -> str:
        return arithmetic.format_age(self.config, birthdate, current_time)
