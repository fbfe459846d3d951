"""Template formatting of parsed dates.

Templates use Jinja2 syntax and render in a sandbox against a flat dict of
date fields. A field the active calendar does not define (``{{ week }}`` on
a calendar without weeks) is Jinja2's ``Undefined``: it renders empty and
tests false. Any other rendering failure becomes an inline error string.
"""

from __future__ import annotations

import logging
from typing import Any

from jinja2 import Template, Undefined
from jinja2.sandbox import SandboxedEnvironment

from story_calendar.holidays import HolidayEvaluator
from story_calendar.subdivisions import day_of_subdivision, find_subdivision
from story_calendar.types import CalendarConfig, CalendarSubdivision, ParsedDate

logger = logging.getLogger(__name__)


def _blank_none(value: Any) -> Any:
    """Render None as an empty string rather than 'None'."""
    return "" if value is None else value


def _capitalize(s: str) -> str:
    return s[:1].upper() + s[1:]


def subdivision_label(sub: CalendarSubdivision, value: int) -> str:
    """Display label for a 1-indexed subdivision value.

    Custom labels (unless disabled) win when the slot is non-blank, then
    ``label_format`` with ``{n}`` substituted, then the bare number.
    """
    if sub.use_custom_labels is not False and sub.labels:
        if 1 <= value <= len(sub.labels) and sub.labels[value - 1].strip():
            return sub.labels[value - 1]
    if sub.label_format:
        return sub.label_format.replace("{n}", str(value), 1)
    return str(value)


class DateFormatter:
    """Renders ParsedDate values through the config's display templates."""

    def __init__(self, config: CalendarConfig, holidays: HolidayEvaluator) -> None:
        self.config = config
        self.holidays = holidays
        self._env = SandboxedEnvironment(
            undefined=Undefined,
            finalize=_blank_none,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._templates: dict[str, Template] = {}

    def format_date(self, date: ParsedDate, include_time: bool = True) -> str:
        display = self.config.display
        source = display.default_format if include_time else display.short_format
        try:
            context = self.build_context(date)
        except Exception as exc:  # noqa: BLE001
            return self._template_error(source, exc)
        return self.render(source, context)

    def render(self, source: str, context: dict[str, Any]) -> str:
        """Render a template; failures come back as '[Template error: ...]'."""
        try:
            template = self._templates.get(source)
            if template is None:
                template = self._env.from_string(source)
                self._templates[source] = template
            return template.render(context)
        except Exception as exc:  # noqa: BLE001
            return self._template_error(source, exc)

    def _template_error(self, source: str, exc: Exception) -> str:
        logger.warning("Template error rendering %r: %s", source, exc)
        return f"[Template error: {exc}]"

    def build_context(self, date: ParsedDate) -> dict[str, Any]:
        """Flat field -> value mapping exposed to templates.

        ``holiday`` and ``holidayDescription`` are left out when there is
        none, so templates see them as ``Undefined`` like any absent field.
        """
        config = self.config
        holiday = self.holidays.holiday_for(date)

        half_day = max(config.hours_per_day // 2, 1)
        hour12 = date.hour % half_day or half_day
        hour = hour12 if config.display.hour_format == "12" else date.hour

        context: dict[str, Any] = {
            "year": abs(date.year),
            "era": self._era_label(date),
            "dayOfYear": date.day_of_year,
            "hour": f"{hour:02d}",
            "minute": f"{date.minute:02d}",
            "hour12": f"{hour12:02d}",
            "ampm": "AM" if date.hour < half_day else "PM",
        }
        if holiday:
            context["holiday"] = holiday
            description = self.holidays.description_for(holiday)
            if description:
                context["holidayDescription"] = description

        for sub_id, value in date.subdivisions.items():
            sub = find_subdivision(config.subdivisions, sub_id)
            if sub is None:
                continue
            context[sub_id] = subdivision_label(sub, value)
            context[f"{sub_id}Number"] = value
            if not sub.is_cycle:
                context[f"dayOf{_capitalize(sub_id)}"] = day_of_subdivision(
                    config, date, sub_id
                )

        return context

    def _era_label(self, date: ParsedDate) -> str:
        eras = self.config.eras
        if date.year == 0 and eras.zero_label:
            return eras.zero_label
        return eras.negative if date.era == "negative" else eras.positive
