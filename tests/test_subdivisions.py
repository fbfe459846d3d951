"""Tests for the subdivision resolver, unit bounds and cycle lookups."""

from __future__ import annotations

import pytest

from conftest import day_time


def _sub(**kwargs):
    from story_calendar.types import CalendarSubdivision

    defaults = {"id": "x", "name": "X", "plural_name": "Xs", "count": 3}
    defaults.update(kwargs)
    return CalendarSubdivision(**defaults)


# ---------------------------------------------------------------------------
# Tree lookup
# ---------------------------------------------------------------------------
class TestFindSubdivision:

    def test_top_level(self, gregorian_engine):
        assert gregorian_engine.find_subdivision("month").count == 12

    def test_nested(self, coruscant_engine):
        week = coruscant_engine.find_subdivision("week")
        assert week is not None
        assert week.days_per_unit_fixed == 7

    def test_unknown(self, gregorian_engine):
        assert gregorian_engine.find_subdivision("season") is None

    def test_cycle_subdivisions_depth_first(self, tidal_engine):
        ids = [c.id for c in tidal_engine.get_cycle_subdivisions()]
        assert ids == ["tide", "market"]

    def test_no_cycles(self, coruscant_engine):
        assert coruscant_engine.get_cycle_subdivisions() == []


# ---------------------------------------------------------------------------
# Unit location
# ---------------------------------------------------------------------------
class TestLocateUnit:

    def test_fixed_width(self):
        from story_calendar.subdivisions import locate_unit

        sub = _sub(count=4, days_per_unit_fixed=92)
        assert locate_unit(sub, 0) == (0, 0)
        assert locate_unit(sub, 91) == (0, 0)
        assert locate_unit(sub, 92) == (1, 92)
        assert locate_unit(sub, 367) == (3, 276)

    def test_variable_width(self):
        from story_calendar.subdivisions import locate_unit

        sub = _sub(count=3, days_per_unit=(10, 5, 20))
        assert locate_unit(sub, 9) == (0, 0)
        assert locate_unit(sub, 10) == (1, 10)
        assert locate_unit(sub, 15) == (2, 15)

    def test_past_table_end_falls_back_to_first_unit(self):
        from story_calendar.subdivisions import locate_unit

        sub = _sub(count=2, days_per_unit=(10, 10))
        assert locate_unit(sub, 25) == (0, 0)

    def test_days_before_unit(self):
        from story_calendar.subdivisions import days_before_unit

        assert days_before_unit(_sub(count=3, days_per_unit=(10, 5, 20)), 3) == 15
        assert days_before_unit(_sub(count=4, days_per_unit_fixed=7), 1) == 0
        assert days_before_unit(_sub(count=4, days_per_unit_fixed=7), 4) == 21


# ---------------------------------------------------------------------------
# Unit bounds
# ---------------------------------------------------------------------------
class TestUnitBounds:

    @pytest.mark.parametrize(
        "unit, start, end",
        [(1, 1, 31), (2, 32, 59), (3, 60, 90), (11, 305, 334), (12, 335, 365)],
    )
    def test_gregorian_months(self, gregorian_engine, unit, start, end):
        assert gregorian_engine.unit_start_day("month", unit) == start
        assert gregorian_engine.unit_end_day("month", unit) == end

    def test_fixed_quarters(self, coruscant_engine):
        assert coruscant_engine.unit_start_day("quarter", 2) == 93
        assert coruscant_engine.unit_end_day("quarter", 2) == 184
        assert coruscant_engine.unit_end_day("quarter", 4) == 368

    def test_unknown_subdivision(self, gregorian_engine):
        assert gregorian_engine.unit_start_day("season", 3) == 1
        assert gregorian_engine.unit_end_day("season", 3) == 365

    def test_cycle_has_no_bounds(self, gregorian_engine):
        assert gregorian_engine.unit_start_day("week", 2) == 1
        assert gregorian_engine.unit_end_day("week", 2) == 365


# ---------------------------------------------------------------------------
# Day within a unit
# ---------------------------------------------------------------------------
class TestDayOfSubdivision:

    def test_day_of_month(self, gregorian_engine):
        date = gregorian_engine.story_time_to_date(day_time(74))
        assert gregorian_engine.get_day_of_subdivision(date, "month") == 15

    def test_first_and_last_of_month(self, gregorian_engine):
        first = gregorian_engine.story_time_to_date(day_time(32))
        last = gregorian_engine.story_time_to_date(day_time(59))
        assert gregorian_engine.get_day_of_subdivision(first, "month") == 1
        assert gregorian_engine.get_day_of_subdivision(last, "month") == 28

    def test_nested_unit_counts_from_its_own_start(self, coruscant_engine):
        date = coruscant_engine.story_time_to_date(99 * 1440)  # day 100
        assert coruscant_engine.get_day_of_subdivision(date, "quarter") == 8
        assert coruscant_engine.get_day_of_subdivision(date, "week") == 1

    def test_unclamped_last_week(self, coruscant_engine):
        date = coruscant_engine.story_time_to_date(91 * 1440)  # day 92
        assert date.subdivisions["week"] == 14
        assert coruscant_engine.get_day_of_subdivision(date, "week") == 1
        assert coruscant_engine.get_day_of_subdivision(date, "quarter") == 92

    def test_cycle_and_unknown_give_one(self, gregorian_engine):
        date = gregorian_engine.story_time_to_date(day_time(74))
        assert gregorian_engine.get_day_of_subdivision(date, "week") == 1
        assert gregorian_engine.get_day_of_subdivision(date, "season") == 1


# ---------------------------------------------------------------------------
# Cycle positions
# ---------------------------------------------------------------------------
class TestCyclePosition:

    def test_labelled_cycle(self, gregorian_engine):
        date = gregorian_engine.story_time_to_date(0)
        assert gregorian_engine.get_cycle_position(date, "week") == (1, "Monday")

    def test_unlabelled_cycle(self, tidal_engine):
        date = tidal_engine.story_time_to_date(0)
        assert tidal_engine.get_cycle_position(date, "tide") == (0, "Tide 1")

    def test_hierarchical_is_not_a_cycle(self, gregorian_engine):
        date = gregorian_engine.story_time_to_date(0)
        assert gregorian_engine.get_cycle_position(date, "month") is None

    def test_unknown_cycle(self, simple_engine):
        date = simple_engine.story_time_to_date(0)
        assert simple_engine.get_cycle_position(date, "week") is None

    def test_phase_continues_across_epoch(self):
        from story_calendar.subdivisions import cycle_phase

        week = _sub(id="week", count=7, is_cycle=True, epoch_starts_on_unit=1)
        assert cycle_phase(week, 1, 0, 365) == 1
        assert cycle_phase(week, 365, -1, 365) == 0
        assert cycle_phase(week, 364, -1, 365) == 6

    def test_zero_length_cycle(self):
        from story_calendar.subdivisions import cycle_phase

        assert cycle_phase(_sub(count=0, is_cycle=True), 10, 3, 365) == 0


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
class TestLabels:

    def test_custom_label(self, gregorian_engine):
        assert gregorian_engine.label_for("month", 3) == "March"

    def test_label_format(self, coruscant_engine):
        assert coruscant_engine.label_for("week", 2) == "Week 2"

    def test_number_fallback(self, tidal_engine):
        assert tidal_engine.label_for("quarter", 2) == "2"

    def test_unknown(self, gregorian_engine):
        assert gregorian_engine.label_for("season", 1) is None

    def test_custom_labels_disabled(self):
        from story_calendar.formatting import subdivision_label

        sub = _sub(labels=("A", "B", "C"), label_format="Unit {n}",
                   use_custom_labels=False)
        assert subdivision_label(sub, 2) == "Unit 2"

    def test_blank_label_falls_through(self):
        from story_calendar.formatting import subdivision_label

        sub = _sub(labels=("A", "  ", "C"), label_format="Unit {n}")
        assert subdivision_label(sub, 2) == "Unit 2"
        assert subdivision_label(sub, 3) == "C"

    def test_out_of_range_label(self):
        from story_calendar.formatting import subdivision_label

        sub = _sub(labels=("A", "B", "C"))
        assert subdivision_label(sub, 4) == "4"

    def test_label_format_substitutes_once(self):
        from story_calendar.formatting import subdivision_label

        sub = _sub(label_format="{n} of {n}")
        assert subdivision_label(sub, 5) == "5 of {n}"
