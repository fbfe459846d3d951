"""Input validation for calendar definitions in their JSON wire format."""

from __future__ import annotations

from typing import Any

RULE_FIELDS: dict[str, tuple[str, ...]] = {
    "fixed": ("subdivisionId", "unit", "day"),
    "lastDay": ("subdivisionId", "unit"),
    "nthCycleDay": ("subdivisionId", "unit", "cycleId", "dayInCycle", "n"),
    "lastCycleDay": ("subdivisionId", "unit", "cycleId", "dayInCycle"),
    "computed": ("steps",),
    "offsetFromHoliday": ("baseHoliday", "offsetDays"),
}

STEP_FIELDS: dict[str, tuple[str, ...]] = {
    "startOfYear": (),
    "fixed": ("subdivisionId", "unit", "day"),
    "offset": ("days",),
    "findInCycle": ("cycleId", "dayInCycle", "direction"),
}

DIRECTIONS = ("onOrAfter", "onOrBefore")

_TIME_FIELDS = (
    "minutesPerHour",
    "hoursPerDay",
    "minutesPerDay",
    "daysPerYear",
    "minutesPerYear",
)

_STRING_FIELDS = {"subdivisionId", "cycleId", "baseHoliday", "direction"}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


_OPTIONAL_SUBDIVISION_FIELDS = (
    ("isCycle", _is_bool, "a boolean"),
    ("epochStartsOnUnit", _is_int, "an integer"),
    ("labelFormat", _is_str, "a string"),
    ("useCustomLabels", _is_bool, "a boolean"),
)


def validate_config(data: dict) -> list[str]:
    """Validate a calendar definition. Returns list of error messages (empty = valid).

    Checks:
    - Time constants are positive integers and consistent with each other
    - Subdivisions are well formed (see ``validate_subdivisions``)
    - Eras and display templates are present
    - Holiday rules and computed steps have a known type and their fields

    References between rules and subdivisions are not checked; the engine
    degrades gracefully on unknown ids.
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        return [f"Calendar must be an object, got {type(data).__name__}"]

    for field in _TIME_FIELDS:
        value = data.get(field)
        if not _is_int(value) or value <= 0:
            errors.append(f"'{field}' must be a positive integer, got {value!r}")

    if not errors:
        if data["minutesPerDay"] != data["minutesPerHour"] * data["hoursPerDay"]:
            errors.append(
                f"'minutesPerDay' ({data['minutesPerDay']}) must equal "
                f"minutesPerHour * hoursPerDay "
                f"({data['minutesPerHour'] * data['hoursPerDay']})"
            )
        if data["minutesPerYear"] != data["minutesPerDay"] * data["daysPerYear"]:
            errors.append(
                f"'minutesPerYear' ({data['minutesPerYear']}) must equal "
                f"minutesPerDay * daysPerYear "
                f"({data['minutesPerDay'] * data['daysPerYear']})"
            )

    if "epochOffset" in data and data["epochOffset"] is not None:
        if not _is_int(data["epochOffset"]):
            errors.append(
                f"'epochOffset' must be an integer, got {data['epochOffset']!r}"
            )

    errors.extend(validate_subdivisions(data.get("subdivisions", [])))

    eras = data.get("eras")
    if not isinstance(eras, dict):
        errors.append("'eras' must be an object with 'positive' and 'negative'")
    else:
        for field in ("positive", "negative"):
            if not isinstance(eras.get(field), str):
                errors.append(f"Eras: '{field}' must be a string")

    display = data.get("display")
    if not isinstance(display, dict):
        errors.append(
            "'display' must be an object with 'defaultFormat' and 'shortFormat'"
        )
    else:
        for field in ("defaultFormat", "shortFormat"):
            if not isinstance(display.get(field), str):
                errors.append(f"Display: '{field}' must be a string")
        hour_format = display.get("hourFormat", "24")
        if hour_format not in ("12", "24"):
            errors.append(
                f"Display: 'hourFormat' must be '12' or '24', got {hour_format!r}"
            )

    errors.extend(validate_holidays(data.get("holidays") or []))
    return errors


def validate_subdivisions(subdivisions: Any, path: str = "") -> list[str]:
    """Validate a subdivision tree. Returns list of error messages.

    Checks:
    - Each entry has a string id and a positive integer count
    - isCycle / useCustomLabels are booleans, epochStartsOnUnit an integer
      and labelFormat a string, when given
    - Hierarchical entries have exactly one of daysPerUnitFixed / daysPerUnit
    - daysPerUnit and labels, when given, have ``count`` entries
    """
    errors: list[str] = []

    if not isinstance(subdivisions, list):
        return [f"Subdivisions{path}: expected a list, got {subdivisions!r}"]

    for i, sub in enumerate(subdivisions):
        where = f"Subdivision {path}{i}"
        if not isinstance(sub, dict):
            errors.append(f"{where}: expected an object, got {sub!r}")
            continue

        sub_id = sub.get("id")
        if not isinstance(sub_id, str) or not sub_id:
            errors.append(f"{where}: missing 'id'")
            continue
        where = f"{where} ({sub_id!r})"

        count = sub.get("count")
        if not _is_int(count) or count <= 0:
            errors.append(f"{where}: 'count' must be a positive integer")
            continue

        for field, check, kind in _OPTIONAL_SUBDIVISION_FIELDS:
            value = sub.get(field)
            if value is not None and not check(value):
                errors.append(f"{where}: '{field}' must be {kind}")

        fixed = sub.get("daysPerUnitFixed")
        table = sub.get("daysPerUnit")
        if not sub.get("isCycle", False):
            if (fixed is None) == (table is None):
                errors.append(
                    f"{where}: exactly one of 'daysPerUnitFixed' "
                    f"and 'daysPerUnit' is required"
                )
            if fixed is not None and (not _is_int(fixed) or fixed <= 0):
                errors.append(
                    f"{where}: 'daysPerUnitFixed' must be a positive integer"
                )
            if table is not None:
                if not isinstance(table, list) or not all(
                    _is_int(d) and d >= 0 for d in table
                ):
                    errors.append(
                        f"{where}: 'daysPerUnit' must be a list of "
                        f"non-negative integers"
                    )
                elif len(table) != count:
                    errors.append(
                        f"{where}: 'daysPerUnit' has {len(table)} entries, "
                        f"expected {count}"
                    )
        elif sub.get("subdivisions"):
            errors.append(f"{where}: cycles cannot have nested subdivisions")

        labels = sub.get("labels")
        if labels is not None:
            if not isinstance(labels, list) or not all(
                isinstance(label, str) for label in labels
            ):
                errors.append(f"{where}: 'labels' must be a list of strings")
            elif len(labels) != count:
                errors.append(
                    f"{where}: 'labels' has {len(labels)} entries, expected {count}"
                )

        errors.extend(
            validate_subdivisions(sub.get("subdivisions") or [], f"{path}{i}.")
        )

    return errors


def validate_holidays(holidays: Any) -> list[str]:
    """Validate holiday rules. Returns list of error messages.

    Checks:
    - Each rule has a name and a known type
    - Each rule has the fields its type needs, with the right types
    - Computed rules have valid steps
    """
    errors: list[str] = []

    if not isinstance(holidays, list):
        return [f"Holidays: expected a list, got {holidays!r}"]

    for i, rule in enumerate(holidays):
        if not isinstance(rule, dict):
            errors.append(f"Holiday {i}: expected an object, got {rule!r}")
            continue
        if not isinstance(rule.get("name"), str):
            errors.append(f"Holiday {i}: missing 'name'")

        rule_type = rule.get("type")
        if rule_type not in RULE_FIELDS:
            errors.append(f"Holiday {i}: unknown type {rule_type!r}")
            continue

        errors.extend(_check_fields(rule, RULE_FIELDS[rule_type], f"Holiday {i}"))

        if rule_type == "computed" and isinstance(rule.get("steps"), list):
            for j, step in enumerate(rule["steps"]):
                errors.extend(_validate_step(step, f"Holiday {i}, step {j}"))

    return errors


def _validate_step(step: Any, where: str) -> list[str]:
    if not isinstance(step, dict):
        return [f"{where}: expected an object, got {step!r}"]
    step_type = step.get("type")
    if step_type not in STEP_FIELDS:
        return [f"{where}: unknown type {step_type!r}"]
    errors = _check_fields(step, STEP_FIELDS[step_type], where)
    if step_type == "findInCycle" and step.get("direction") not in DIRECTIONS:
        errors.append(
            f"{where}: 'direction' must be one of {DIRECTIONS}, "
            f"got {step.get('direction')!r}"
        )
    return errors


def _check_fields(entry: dict, fields: tuple[str, ...], where: str) -> list[str]:
    errors: list[str] = []
    for field in fields:
        if field not in entry:
            errors.append(f"{where}: missing '{field}'")
        elif field == "steps":
            if not isinstance(entry[field], list):
                errors.append(f"{where}: 'steps' must be a list")
        elif field in _STRING_FIELDS:
            if not isinstance(entry[field], str):
                errors.append(f"{where}: '{field}' must be a string")
        elif not _is_int(entry[field]):
            errors.append(f"{where}: '{field}' must be an integer")
    return errors
