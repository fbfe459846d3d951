"""Holiday rule evaluation with a per-year memoized day -> name table.

Rules are evaluated in declared order. A rule that resolves records its
name for later ``OffsetFromHoliday`` rules in the same pass; a rule that
does not resolve (``None``) simply has no day that year.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from story_calendar.subdivisions import (
    cycle_phase,
    find_subdivision,
    unit_end_day,
    unit_start_day,
)
from story_calendar.types import (
    CalendarConfig,
    CalendarSubdivision,
    ComputedHoliday,
    FindInCycleStep,
    FixedHoliday,
    FixedStep,
    HolidayRule,
    HolidayStep,
    LastCycleDayHoliday,
    LastDayHoliday,
    NthCycleDayHoliday,
    OffsetFromHoliday,
    OffsetStep,
    ParsedDate,
    StartOfYearStep,
)

logger = logging.getLogger(__name__)


class HolidayEvaluator:
    """Resolves a config's holiday rules to days of year.

    Owns the per-year cache. Not thread-safe: populating a year is
    check-then-write, so callers sharing one evaluator across threads must
    lock around it.
    """

    def __init__(self, config: CalendarConfig) -> None:
        self.config = config
        self._cache: dict[int, Mapping[int, str]] = {}

    def holidays_by_day_for_year(self, year: int) -> Mapping[int, str]:
        """Day of year -> holiday name. The first declared holiday wins a day.

        The returned table is the cached one, exposed read-only.
        """
        cached = self._cache.get(year)
        if cached is not None:
            return cached

        logger.debug("Evaluating %d holiday rules for year %d",
                     len(self.config.holidays), year)
        by_day: dict[int, str] = {}
        by_name: dict[str, int] = {}
        for rule in self.config.holidays:
            day = self.evaluate_rule(rule, year, by_name)
            if day is None:
                continue
            by_name[rule.name] = day
            if day not in by_day:
                by_day[day] = rule.name

        table = MappingProxyType(by_day)
        self._cache[year] = table
        return table

    def all_holidays_for_year(self, year: int) -> dict[str, int]:
        """Holiday name -> day of year, uncached.

        A name declared twice keeps the later rule's day.
        """
        by_name: dict[str, int] = {}
        for rule in self.config.holidays:
            day = self.evaluate_rule(rule, year, by_name)
            if day is not None:
                by_name[rule.name] = day
        return by_name

    def holiday_for(self, date: ParsedDate) -> str | None:
        if not self.config.holidays:
            return None
        return self.holidays_by_day_for_year(date.year).get(date.day_of_year)

    def description_for(self, name: str) -> str | None:
        """Description of the first rule with this name that has one."""
        for rule in self.config.holidays:
            if rule.name == name and rule.description:
                return rule.description
        return None

    def clear(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Rule dispatch
    # ------------------------------------------------------------------

    def evaluate_rule(
        self, rule: HolidayRule, year: int, resolved: Mapping[str, int]
    ) -> int | None:
        """Day of year a rule falls on, or None if it does not resolve.

        ``resolved`` holds the holidays already evaluated in this pass.
        """
        if isinstance(rule, FixedHoliday):
            start = unit_start_day(self.config, rule.subdivision_id, rule.unit)
            return start + rule.day - 1

        if isinstance(rule, LastDayHoliday):
            return unit_end_day(self.config, rule.subdivision_id, rule.unit)

        if isinstance(rule, NthCycleDayHoliday):
            matches = self._matching_days(rule, year)
            for count, day in enumerate(matches, start=1):
                if count == rule.n:
                    return day
            return None

        if isinstance(rule, LastCycleDayHoliday):
            matches = self._matching_days(rule, year)
            return matches[-1] if matches else None

        if isinstance(rule, ComputedHoliday):
            return self._evaluate_steps(rule.steps, year)

        if isinstance(rule, OffsetFromHoliday):
            base = resolved.get(rule.base_holiday)
            if base is None:
                logger.debug(
                    "Holiday %r: base %r not resolved (yet) in year %d",
                    rule.name, rule.base_holiday, year,
                )
                return None
            return base + rule.offset_days

        raise TypeError(f"Unknown holiday rule: {rule!r}")

    def _matching_days(
        self, rule: NthCycleDayHoliday | LastCycleDayHoliday, year: int
    ) -> list[int]:
        """Days in the rule's unit whose cycle phase equals ``day_in_cycle``."""
        cycle = self._cycle(rule.cycle_id)
        if cycle is None:
            return []

        start = unit_start_day(self.config, rule.subdivision_id, rule.unit)
        end = unit_end_day(self.config, rule.subdivision_id, rule.unit)
        return [
            day
            for day in range(start, end + 1)
            if self._phase(cycle, day, year) == rule.day_in_cycle
        ]

    # ------------------------------------------------------------------
    # Computed pipelines
    # ------------------------------------------------------------------

    def _evaluate_steps(
        self, steps: tuple[HolidayStep, ...], year: int
    ) -> int | None:
        if not steps:
            return None

        day = 1
        for step in steps:
            if isinstance(step, StartOfYearStep):
                day = 1
            elif isinstance(step, FixedStep):
                start = unit_start_day(self.config, step.subdivision_id, step.unit)
                day = start + step.day - 1
            elif isinstance(step, OffsetStep):
                day += step.days
            elif isinstance(step, FindInCycleStep):
                day = self._find_in_cycle(day, year, step)
            else:
                raise TypeError(f"Unknown holiday step: {step!r}")
        return day

    def _find_in_cycle(self, start: int, year: int, step: FindInCycleStep) -> int:
        """Nearest day from ``start`` (inclusive) with the requested phase.

        Searches one full cycle; keeps ``start`` if nothing matches.
        """
        cycle = self._cycle(step.cycle_id)
        if cycle is None:
            return start

        direction = 1 if step.direction == "on_or_after" else -1
        for offset in range(cycle.count):
            day = start + offset * direction
            if self._phase(cycle, day, year) == step.day_in_cycle:
                return day

        logger.debug(
            "No day with phase %d of %r within one cycle of day %d",
            step.day_in_cycle, step.cycle_id, start,
        )
        return start

    # ------------------------------------------------------------------
    # Cycle helpers
    # ------------------------------------------------------------------

    def _cycle(self, cycle_id: str) -> CalendarSubdivision | None:
        cycle = find_subdivision(self.config.subdivisions, cycle_id)
        if cycle is None or not cycle.is_cycle:
            logger.debug("No cycle subdivision %r", cycle_id)
            return None
        return cycle

    def _phase(self, cycle: CalendarSubdivision, day: int, year: int) -> int:
        return cycle_phase(cycle, day, year, self.config.days_per_year)
