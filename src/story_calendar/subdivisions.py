"""Subdivision resolver: hierarchical units and parallel cycles.

Hierarchical subdivisions partition the year (or their parent's unit) into
consecutive day ranges. Cycles repeat independently of year boundaries and
are positioned by modulo arithmetic on the day count from epoch.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from story_calendar.types import CalendarConfig, CalendarSubdivision, ParsedDate

logger = logging.getLogger(__name__)


def find_subdivision(
    subdivisions: Iterable[CalendarSubdivision], subdivision_id: str
) -> CalendarSubdivision | None:
    """Depth-first lookup by id. First match wins."""
    for sub in subdivisions:
        if sub.id == subdivision_id:
            return sub
        found = find_subdivision(sub.subdivisions, subdivision_id)
        if found is not None:
            return found
    return None


def iter_cycles(
    subdivisions: Iterable[CalendarSubdivision],
) -> Iterator[CalendarSubdivision]:
    """Yield every cycle subdivision in the tree, depth first."""
    for sub in subdivisions:
        if sub.is_cycle:
            yield sub
        yield from iter_cycles(sub.subdivisions)


def cycle_phase(
    cycle: CalendarSubdivision, day_of_year: int, year: int, days_per_year: int
) -> int:
    """0-indexed position of a day within a cycle.

    Python's floored modulo keeps the result in [0, count) for negative
    day totals, so the phase runs on without a break across year 0.
    """
    if cycle.count <= 0:
        return 0
    total_days = year * days_per_year + (day_of_year - 1)
    return (total_days + cycle.epoch_starts_on_unit) % cycle.count


def locate_unit(sub: CalendarSubdivision, day_offset: int) -> tuple[int, int]:
    """Find the unit containing a 0-indexed day offset.

    Returns (unit_index, days_consumed): the 0-indexed unit and the number
    of days taken by the units before it. Offsets past the end of a
    variable-width table fall back to (0, 0).
    """
    if sub.days_per_unit_fixed:
        unit_index = day_offset // sub.days_per_unit_fixed
        return unit_index, unit_index * sub.days_per_unit_fixed

    if sub.days_per_unit:
        consumed = 0
        for i, days in enumerate(sub.days_per_unit[: sub.count]):
            if consumed + days > day_offset:
                return i, consumed
            consumed += days

    return 0, 0


def days_before_unit(sub: CalendarSubdivision, unit: int) -> int:
    """Days in the units before ``unit`` (1-indexed)."""
    if sub.days_per_unit_fixed:
        return (unit - 1) * sub.days_per_unit_fixed
    if sub.days_per_unit:
        return sum(sub.days_per_unit[: max(unit - 1, 0)])
    return 0


def resolve_subdivisions(
    config: CalendarConfig, day_of_year: int, year: int
) -> dict[str, int]:
    """Compute every subdivision's 1-indexed position for a day."""
    result: dict[str, int] = {}
    _walk(config, config.subdivisions, day_of_year - 1, day_of_year, year, result, {})
    return result


def _walk(
    config: CalendarConfig,
    subdivisions: Iterable[CalendarSubdivision],
    day_offset: int,
    day_of_year: int,
    year: int,
    result: dict[str, int],
    unit_starts: dict[str, int],
    unit_start: int = 0,
    nested: bool = False,
) -> None:
    """Resolve one level of the tree.

    ``day_offset`` is relative to the enclosing unit, which starts at the
    0-indexed year day ``unit_start``. ``unit_starts`` collects, per
    hierarchical id, the year day its current unit starts on.
    """
    for sub in subdivisions:
        if sub.is_cycle:
            # Nested cycles are positioned from the day of year alone, as if
            # every year were year 0.
            cycle_year = 0 if nested else year
            phase = cycle_phase(sub, day_of_year, cycle_year, config.days_per_year)
            result[sub.id] = phase + 1
            continue

        unit_index, consumed = locate_unit(sub, day_offset)
        result[sub.id] = unit_index + 1
        unit_starts[sub.id] = unit_start + consumed

        if sub.subdivisions:
            _walk(
                config,
                sub.subdivisions,
                day_offset - consumed,
                day_of_year,
                year,
                result,
                unit_starts,
                unit_start + consumed,
                nested=True,
            )


def unit_start_day(config: CalendarConfig, subdivision_id: str, unit: int) -> int:
    """First day of year (1-indexed) of a hierarchical unit.

    Unknown ids and cycles resolve to day 1.
    """
    sub = find_subdivision(config.subdivisions, subdivision_id)
    if sub is None or sub.is_cycle:
        logger.debug("No hierarchical subdivision %r; using day 1", subdivision_id)
        return 1
    return days_before_unit(sub, unit) + 1


def unit_end_day(config: CalendarConfig, subdivision_id: str, unit: int) -> int:
    """Last day of year (1-indexed) of a hierarchical unit.

    Unknown ids and cycles resolve to the last day of the year.
    """
    sub = find_subdivision(config.subdivisions, subdivision_id)
    if sub is None or sub.is_cycle:
        logger.debug(
            "No hierarchical subdivision %r; using day %d",
            subdivision_id,
            config.days_per_year,
        )
        return config.days_per_year
    return days_before_unit(sub, unit + 1)


def day_of_subdivision(
    config: CalendarConfig, date: ParsedDate, subdivision_id: str
) -> int:
    """1-indexed day within the unit of ``subdivision_id`` containing the date.

    Recomputed from ``date.day_of_year``; unknown ids and cycles give 1.
    A nested unit counts from its own first day, not from a prefix of
    unit lengths taken from the start of the year.
    """
    sub = find_subdivision(config.subdivisions, subdivision_id)
    if sub is None or sub.is_cycle:
        return 1

    unit_starts: dict[str, int] = {}
    _walk(
        config,
        config.subdivisions,
        date.day_of_year - 1,
        date.day_of_year,
        date.year,
        {},
        unit_starts,
    )
    if subdivision_id not in unit_starts:
        return 1
    return date.day_of_year - unit_starts[subdivision_id]
