"""Shared types: calendar configuration, parsed dates and holiday rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

StoryTime = int  # signed minutes from epoch 0

EraTag = Literal["positive", "negative"]
Direction = Literal["on_or_after", "on_or_before"]


class CalendarConfigError(ValueError):
    """Raised by the loaders when a calendar definition cannot be built."""

    def __init__(self, source: str, errors: list[str]) -> None:
        self.source = source
        self.errors = errors
        super().__init__(
            f"Validation errors in {source}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


@dataclass(frozen=True)
class CalendarSubdivision:
    """A named division of the year: hierarchical (nests) or a cycle.

    Hierarchical subdivisions carry exactly one of ``days_per_unit_fixed``
    or ``days_per_unit``. Cycles use ``count`` as the cycle length and
    ignore both day tables.
    """

    id: str
    name: str
    plural_name: str
    count: int
    days_per_unit: tuple[int, ...] | None = None
    days_per_unit_fixed: int | None = None
    labels: tuple[str, ...] | None = None
    label_format: str | None = None
    use_custom_labels: bool | None = None
    subdivisions: tuple[CalendarSubdivision, ...] = ()
    is_cycle: bool = False
    epoch_starts_on_unit: int = 0


@dataclass(frozen=True)
class Eras:
    positive: str
    negative: str
    zero_label: str | None = None


@dataclass(frozen=True)
class DisplayFormat:
    """Template strings. ``default_format`` includes the time of day."""

    default_format: str
    short_format: str
    include_time_by_default: bool = True
    hour_format: Literal["12", "24"] = "24"


# ---------------------------------------------------------------------------
# Holiday steps (only used inside ComputedHoliday)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StartOfYearStep:
    """Reset the running day to day 1."""


@dataclass(frozen=True)
class FixedStep:
    subdivision_id: str
    unit: int
    day: int


@dataclass(frozen=True)
class OffsetStep:
    days: int


@dataclass(frozen=True)
class FindInCycleStep:
    """Move to the nearest day whose cycle phase matches ``day_in_cycle``.

    ``day_in_cycle`` is 0-indexed. The search covers at most one full cycle.
    """

    cycle_id: str
    day_in_cycle: int
    direction: Direction


HolidayStep = Union[StartOfYearStep, FixedStep, OffsetStep, FindInCycleStep]


# ---------------------------------------------------------------------------
# Holiday rules
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FixedHoliday:
    """``day`` of ``unit`` (1-indexed) of a hierarchical subdivision."""

    name: str
    subdivision_id: str
    unit: int
    day: int
    description: str | None = None


@dataclass(frozen=True)
class LastDayHoliday:
    name: str
    subdivision_id: str
    unit: int
    description: str | None = None


@dataclass(frozen=True)
class NthCycleDayHoliday:
    """The ``n``-th day in ``unit`` whose ``cycle_id`` phase is ``day_in_cycle``.

    e.g. 4th Thursday of November.
    """

    name: str
    subdivision_id: str
    unit: int
    cycle_id: str
    day_in_cycle: int
    n: int
    description: str | None = None


@dataclass(frozen=True)
class LastCycleDayHoliday:
    """e.g. last Monday of May."""

    name: str
    subdivision_id: str
    unit: int
    cycle_id: str
    day_in_cycle: int
    description: str | None = None


@dataclass(frozen=True)
class ComputedHoliday:
    """Step pipeline applied to a running day that starts at day 1."""

    name: str
    steps: tuple[HolidayStep, ...]
    description: str | None = None


@dataclass(frozen=True)
class OffsetFromHoliday:
    """``offset_days`` from a holiday declared earlier in the list."""

    name: str
    base_holiday: str
    offset_days: int
    description: str | None = None


HolidayRule = Union[
    FixedHoliday,
    LastDayHoliday,
    NthCycleDayHoliday,
    LastCycleDayHoliday,
    ComputedHoliday,
    OffsetFromHoliday,
]


@dataclass(frozen=True)
class CalendarConfig:
    """Immutable calendar definition.

    Invariants (caller's responsibility, checked by the loaders):
        - minutes_per_day == minutes_per_hour * hours_per_day
        - minutes_per_year == minutes_per_day * days_per_year
    """

    id: str
    name: str
    minutes_per_hour: int
    hours_per_day: int
    minutes_per_day: int
    days_per_year: int
    minutes_per_year: int
    subdivisions: tuple[CalendarSubdivision, ...]
    eras: Eras
    display: DisplayFormat
    holidays: tuple[HolidayRule, ...] = ()
    epoch_offset: int = 0
    description: str = ""


@dataclass(frozen=True)
class ParsedDate:
    """Structured view of a StoryTime.

    ``subdivisions`` maps subdivision id to its 1-indexed position; it is a
    derived view and never consulted when converting back to StoryTime.
    """

    year: int
    era: EraTag
    day_of_year: int
    hour: int
    minute: int
    subdivisions: Mapping[str, int] = field(default_factory=dict, hash=False)
