from __future__ import annotations

import calendar
import datetime

import pytest

from longweekend.calendar_builder import (
    DayRecord,
    DayType,
    MonthView,
    build_calendar,
    build_timeline,
    is_year_boundary_pair,
    overlay,
)
from longweekend.errors import YearOutOfRangeError
from longweekend.optimizer import analyze_vacation_strategies


def _day(months: list[MonthView], d: datetime.date) -> DayRecord:
    for record in months[d.month - 1].current_days():
        if record.date == d:
            return record
    raise AssertionError(f"{d} not found")


def _ghost(view: MonthView, d: datetime.date) -> DayRecord | None:
    for record in view.days():
        if record.date == d and not record.is_current_month:
            return record
    return None


class TestBuildCalendar:
    def test_twelve_months(self) -> None:
        months = build_calendar(2025)
        assert [m.month for m in months] == list(range(1, 13))
        assert months[0].name == "Styczeń"
        assert months[11].name == "Grudzień"

    @pytest.mark.parametrize("year", [2024, 2025, 2028, 2096, 2099])
    def test_current_days_cover_year(self, year: int) -> None:
        months = build_calendar(year)
        total = sum(len(m.current_days()) for m in months)
        assert total == (366 if calendar.isleap(year) else 365)

    def test_weeks_are_full_and_monday_first(self) -> None:
        for view in build_calendar(2026):
            for week in view.weeks:
                assert len(week) == 7
                assert week[0].date.weekday() == 0

    def test_no_empty_rows(self) -> None:
        for view in build_calendar(2024):
            for week in view.weeks:
                assert any(r.is_current_month or r.in_sequence for r in week)

    def test_out_of_range_year(self) -> None:
        with pytest.raises(YearOutOfRangeError):
            build_calendar(1990)
        with pytest.raises(ValueError):
            build_calendar(2100)


class TestClassification:
    def test_christmas_eve_cutover(self) -> None:
        assert _day(build_calendar(2024), datetime.date(2024, 12, 24)).day_type is DayType.WORKDAY
        eve = _day(build_calendar(2025), datetime.date(2025, 12, 24))
        assert eve.day_type is DayType.HOLIDAY
        assert eve.holiday_name == "Wigilia Bożego Narodzenia"

    def test_may_2029_bridges(self) -> None:
        months = build_calendar(2029)
        for d in (datetime.date(2029, 4, 30), datetime.date(2029, 5, 2), datetime.date(2029, 5, 4)):
            assert _day(months, d).day_type is DayType.BRIDGE

    def test_holiday_wins_over_weekend(self) -> None:
        # 6 January 2024 is a Saturday.
        assert _day(build_calendar(2024), datetime.date(2024, 1, 6)).day_type is DayType.HOLIDAY

    def test_bridge_needs_free_days_on_both_sides(self) -> None:
        months = build_calendar(2024)
        assert _day(months, datetime.date(2024, 5, 2)).day_type is DayType.BRIDGE
        assert _day(months, datetime.date(2024, 1, 2)).day_type is DayType.WORKDAY


class TestSequences:
    def test_majowka_2024_sequence(self) -> None:
        months = build_calendar(2024)
        may = [_day(months, datetime.date(2024, 5, n)) for n in range(1, 6)]
        assert all(r.in_sequence for r in may)
        assert len({r.sequence.id for r in may}) == 1
        assert may[0].is_sequence_start
        assert may[-1].is_sequence_end
        assert all(r.has_bridge for r in may)

    def test_two_day_weekend_is_not_a_sequence(self) -> None:
        months = build_calendar(2024)
        assert not _day(months, datetime.date(2024, 1, 13)).in_sequence

    def test_week_connections(self) -> None:
        months = build_calendar(2024)
        sunday = _day(months, datetime.date(2024, 11, 10))
        monday = _day(months, datetime.date(2024, 11, 11))
        assert sunday.connects_to_next_week
        assert monday.connects_to_prev_week
        assert not _day(months, datetime.date(2024, 5, 5)).connects_to_next_week

    @pytest.mark.parametrize("year", [2024, 2025, 2029])
    def test_every_sequence_is_one_contiguous_run(self, year: int) -> None:
        timeline = build_timeline(year)
        members: dict[str, list[datetime.date]] = {}
        for record in timeline:
            assert record.in_sequence == (record.sequence is not None)
            if record.sequence is not None:
                members.setdefault(record.sequence.id, []).append(record.date)

        assert members
        for seq in timeline.sequences():
            dates = members[seq.id]
            assert seq.length >= 3
            assert len(dates) == seq.length
            assert dates[0] == seq.start
            assert dates[-1] == seq.end
            assert (seq.end - seq.start).days + 1 == seq.length

    def test_timeline_spans_buffer(self) -> None:
        timeline = build_timeline(2024)
        assert timeline.start == datetime.date(2023, 12, 24)
        assert timeline.end == datetime.date(2025, 1, 7)


class TestGhostDays:
    def test_january_view_keeps_new_year_sequence(self) -> None:
        january = build_calendar(2024)[0]
        assert january.weeks[0][0].date == datetime.date(2023, 12, 25)

        eve = _ghost(january, datetime.date(2023, 12, 31))
        assert eve is not None
        assert eve.in_sequence
        assert eve.sequence.id == "2023-12-30_2024-01-01"

    def test_unrelated_ghost_sequence_cleared(self) -> None:
        january = build_calendar(2024)[0]
        christmas = _ghost(january, datetime.date(2023, 12, 25))
        if christmas is not None:
            assert not christmas.in_sequence
            assert christmas.sequence is None

    def test_ghosts_outside_year_boundary_have_no_sequence(self) -> None:
        for view in build_calendar(2024)[1:11]:
            for record in view.days():
                if not record.is_current_month:
                    assert not record.in_sequence

    def test_ghosts_never_current(self) -> None:
        for view in build_calendar(2025):
            for record in view.days():
                same_month = (record.date.year, record.date.month) == (view.year, view.month)
                assert record.is_current_month == same_month


class TestYearBoundaryPair:
    def test_pairs(self) -> None:
        assert is_year_boundary_pair(datetime.date(2023, 12, 31), datetime.date(2024, 1, 1))
        assert is_year_boundary_pair(datetime.date(2024, 1, 1), datetime.date(2023, 12, 31))
        assert not is_year_boundary_pair(datetime.date(2024, 1, 31), datetime.date(2024, 2, 1))


class TestOverlay:
    def test_overlay_marks_planned_leave(self) -> None:
        months = build_calendar(2029)
        opp = next(
            o
            for o in analyze_vacation_strategies(2029)
            if o.start_date == datetime.date(2029, 4, 21) and o.end_date == datetime.date(2029, 5, 6)
        )
        april = overlay(months[3], opp)

        leave = {r.date for r in april.days() if r.is_planned_leave}
        assert datetime.date(2029, 4, 23) in leave
        assert datetime.date(2029, 4, 22) not in leave

        stamped = [r for r in april.days() if r.in_sequence]
        assert {r.sequence.id for r in stamped} == {opp.id}
        assert not any(r.in_sequence for r in april.days() if r.date < opp.start_date)

    def test_overlay_does_not_modify_view(self) -> None:
        months = build_calendar(2029)
        opp = analyze_vacation_strategies(2029)[0]
        view = months[opp.month - 1]
        overlay(view, opp)
        assert not any(r.is_planned_leave for r in view.days())
