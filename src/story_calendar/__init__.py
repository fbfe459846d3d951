"""story-calendar: StoryTime conversion, holiday rules and date formatting for configurable calendars."""

from story_calendar.engine import CalendarEngine
from story_calendar.loaders import (
    calendar_from_dict,
    load_calendar_json,
    load_calendars_json,
)
from story_calendar.types import (
    CalendarConfig,
    CalendarConfigError,
    CalendarSubdivision,
    ComputedHoliday,
    DisplayFormat,
    Eras,
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
    StoryTime,
)

__all__ = [
    "CalendarConfig",
    "CalendarConfigError",
    "CalendarEngine",
    "CalendarSubdivision",
    "ComputedHoliday",
    "DisplayFormat",
    "Eras",
    "FindInCycleStep",
    "FixedHoliday",
    "FixedStep",
    "HolidayRule",
    "HolidayStep",
    "LastCycleDayHoliday",
    "LastDayHoliday",
    "NthCycleDayHoliday",
    "OffsetFromHoliday",
    "OffsetStep",
    "ParsedDate",
    "StartOfYearStep",
    "StoryTime",
    "calendar_from_dict",
    "load_calendar_json",
    "load_calendars_json",
]
