"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from story_calendar.types import ParsedDate


def show_year(
    engine: "CalendarEngine",  # noqa: F821
    year: int,
    subdivision_id: str | None = None,
    width: int = 30,
) -> str:
    """Print ASCII view of one year with holidays marked.

    Each row is one unit of ``subdivision_id`` (a hierarchical subdivision),
    or ``width`` days when no subdivision is given or it is not
    hierarchical. One char per day.
    Returns the string and also prints to stdout.

    Legend: '.' = ordinary day, '*' = holiday
    """
    config = engine.config
    by_day = engine.get_holidays_by_day_for_year(year)

    # Row bounds: list of (label, first_day, last_day), days 1-indexed
    rows: list[tuple[str, int, int]] = []
    sub = engine.find_subdivision(subdivision_id) if subdivision_id else None

    if sub is not None and not sub.is_cycle:
        for unit in range(1, sub.count + 1):
            first = engine.unit_start_day(sub.id, unit)
            last = min(engine.unit_end_day(sub.id, unit), config.days_per_year)
            if first > last:
                continue
            rows.append((engine.label_for(sub.id, unit) or str(unit), first, last))
    else:
        for first in range(1, config.days_per_year + 1, width):
            last = min(first + width - 1, config.days_per_year)
            rows.append((f"{first}-{last}", first, last))

    label_width = max((len(label) for label, _, _ in rows), default=0)
    lines: list[str] = [f"{config.name}, year {year}"]

    for label, first, last in rows:
        row = "".join(
            "*" if day in by_day else "." for day in range(first, last + 1)
        )
        lines.append(f"{label:>{label_width}s}  {row}")

    # Legend: holidays inside the year, in calendar order
    in_year = sorted(
        (day, name) for day, name in by_day.items()
        if 1 <= day <= config.days_per_year
    )
    if in_year:
        lines.append("")
        lines.append("Holidays:")
        for day, name in in_year:
            time = engine.date_to_story_time(
                ParsedDate(year, "negative" if year < 0 else "positive", day, 0, 0)
            )
            date = engine.story_time_to_date(time)
            lines.append(f"  {day:>4d}  {engine.format_date(date, False)}  {name}")

    result = "\n".join(lines)
    print(result)
    return result
