"""Data loading utilities for calendar definitions."""

from __future__ import annotations

import json
from pathlib import Path

from story_calendar.schema import validate_config
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
    StartOfYearStep,
)

_DIRECTIONS = {"onOrAfter": "on_or_after", "onOrBefore": "on_or_before"}


def calendar_from_dict(data: dict, source: str = "calendar") -> CalendarConfig:
    """Build a CalendarConfig from the camelCase wire format.

    Accepts either the bare calendar object or one wrapped as
    ``{"calendar": {...}}``.

    Raises CalendarConfigError if validation fails.
    """
    cal_data = data.get("calendar", data)

    errors = validate_config(cal_data)
    if errors:
        raise CalendarConfigError(source, errors)

    eras = cal_data["eras"]
    display = cal_data["display"]

    return CalendarConfig(
        id=cal_data.get("id", source),
        name=cal_data.get("name", cal_data.get("id", source)),
        description=cal_data.get("description", ""),
        minutes_per_hour=cal_data["minutesPerHour"],
        hours_per_day=cal_data["hoursPerDay"],
        minutes_per_day=cal_data["minutesPerDay"],
        days_per_year=cal_data["daysPerYear"],
        minutes_per_year=cal_data["minutesPerYear"],
        epoch_offset=cal_data.get("epochOffset") or 0,
        subdivisions=tuple(
            _subdivision(s) for s in cal_data.get("subdivisions", [])
        ),
        eras=Eras(
            positive=eras["positive"],
            negative=eras["negative"],
            zero_label=eras.get("zeroLabel"),
        ),
        display=DisplayFormat(
            default_format=display["defaultFormat"],
            short_format=display["shortFormat"],
            include_time_by_default=display.get("includeTimeByDefault", True),
            hour_format=display.get("hourFormat", "24"),
        ),
        holidays=tuple(_rule(r) for r in cal_data.get("holidays") or []),
    )


def load_calendar_json(path: str | Path) -> CalendarConfig:
    """Load a CalendarConfig from a JSON file.

    Raises CalendarConfigError if validation fails.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    return calendar_from_dict(data, source=path.name)


def load_calendars_json(path: str | Path) -> dict[str, CalendarConfig]:
    """Load several calendars from a JSON file keyed by calendar id.

    The JSON must be an object: { "gregorian": {...}, "medieval": {...} }
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    return {
        cal_id: calendar_from_dict(
            {"id": cal_id, **cal_data}, source=f"{path.name}:{cal_id}"
        )
        for cal_id, cal_data in data.items()
    }


def _subdivision(data: dict) -> CalendarSubdivision:
    table = data.get("daysPerUnit")
    labels = data.get("labels")
    return CalendarSubdivision(
        id=data["id"],
        name=data.get("name", data["id"]),
        plural_name=data.get("pluralName", data.get("name", data["id"])),
        count=data["count"],
        days_per_unit=tuple(table) if table is not None else None,
        days_per_unit_fixed=data.get("daysPerUnitFixed"),
        labels=tuple(labels) if labels is not None else None,
        label_format=data.get("labelFormat"),
        use_custom_labels=data.get("useCustomLabels"),
        subdivisions=tuple(
            _subdivision(s) for s in data.get("subdivisions") or []
        ),
        is_cycle=bool(data.get("isCycle", False)),
        epoch_starts_on_unit=data.get("epochStartsOnUnit") or 0,
    )


def _rule(data: dict) -> HolidayRule:
    rule_type = data["type"]
    name = data["name"]
    description = data.get("description")

    if rule_type == "fixed":
        return FixedHoliday(
            name=name,
            subdivision_id=data["subdivisionId"],
            unit=data["unit"],
            day=data["day"],
            description=description,
        )
    if rule_type == "lastDay":
        return LastDayHoliday(
            name=name,
            subdivision_id=data["subdivisionId"],
            unit=data["unit"],
            description=description,
        )
    if rule_type == "nthCycleDay":
        return NthCycleDayHoliday(
            name=name,
            subdivision_id=data["subdivisionId"],
            unit=data["unit"],
            cycle_id=data["cycleId"],
            day_in_cycle=data["dayInCycle"],
            n=data["n"],
            description=description,
        )
    if rule_type == "lastCycleDay":
        return LastCycleDayHoliday(
            name=name,
            subdivision_id=data["subdivisionId"],
            unit=data["unit"],
            cycle_id=data["cycleId"],
            day_in_cycle=data["dayInCycle"],
            description=description,
        )
    if rule_type == "computed":
        return ComputedHoliday(
            name=name,
            steps=tuple(_step(s) for s in data["steps"]),
            description=description,
        )
    if rule_type == "offsetFromHoliday":
        return OffsetFromHoliday(
            name=name,
            base_holiday=data["baseHoliday"],
            offset_days=data["offsetDays"],
            description=description,
        )
    raise ValueError(f"Unknown holiday rule type: {rule_type!r}")


def _step(data: dict) -> HolidayStep:
    step_type = data["type"]
    if step_type == "startOfYear":
        return StartOfYearStep()
    if step_type == "fixed":
        return FixedStep(
            subdivision_id=data["subdivisionId"],
            unit=data["unit"],
            day=data["day"],
        )
    if step_type == "offset":
        return OffsetStep(days=data["days"])
    if step_type == "findInCycle":
        return FindInCycleStep(
            cycle_id=data["cycleId"],
            day_in_cycle=data["dayInCycle"],
            direction=_DIRECTIONS[data["direction"]],
        )
    raise ValueError(f"Unknown holiday step type: {step_type!r}")
