from __future__ import annotations

import datetime

import pytest

from longweekend.calendar_builder import build_calendar
from longweekend.config import EngineConfig
from longweekend.stats import (
    GlobalStats,
    Span,
    efficiency_class,
    global_stats_range,
    year_curiosities,
    year_stats,
)


@pytest.fixture(scope="module")
def months_2024():
    return build_calendar(2024)


class TestEfficiencyClass:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (90, "A"),
            (79, "A"),
            (78, "B"),
            (73, "B"),
            (68, "C"),
            (63, "D"),
            (58, "E"),
            (53, "F"),
            (52, "G"),
            (-5, "G"),
        ],
    )
    def test_thresholds(self, score: int, expected: str) -> None:
        assert efficiency_class(score) == expected


class TestYearStats:
    def test_holiday_buckets_2024(self, months_2024) -> None:
        s = year_stats(months_2024)
        assert s.total_holidays == 13
        assert s.holidays_on_sundays == 2
        assert s.holidays_on_saturdays == 1
        assert s.holidays_on_workdays == 10
        assert len(s.holidays) == 13

    def test_bridges_2024(self, months_2024) -> None:
        s = year_stats(months_2024)
        assert [d.date for d in s.bridge_days] == [
            datetime.date(2024, 5, 2),
            datetime.date(2024, 5, 31),
            datetime.date(2024, 8, 16),
            datetime.date(2024, 12, 27),
        ]
        assert s.bridge_days_count == 4

    def test_long_weekends_2024(self, months_2024) -> None:
        s = year_stats(months_2024)
        assert s.long_weekends_list == [
            Span(datetime.date(2023, 12, 30), datetime.date(2024, 1, 1), 3),
            Span(datetime.date(2024, 3, 30), datetime.date(2024, 4, 1), 3),
            Span(datetime.date(2024, 11, 1), datetime.date(2024, 11, 3), 3),
            Span(datetime.date(2024, 11, 9), datetime.date(2024, 11, 11), 3),
        ]
        assert s.long_weekends_count == 4

    def test_new_year_weekend_counted_once(self, months_2024) -> None:
        new_year = Span(datetime.date(2023, 12, 30), datetime.date(2024, 1, 1), 3)
        assert new_year in year_stats(months_2024).long_weekends_list
        assert new_year not in year_stats(build_calendar(2023)).long_weekends_list

    def test_potential_weekends_2024(self, months_2024) -> None:
        s = year_stats(months_2024)
        assert Span(datetime.date(2024, 5, 30), datetime.date(2024, 6, 2), 4) in s.potential_weekends_list
        assert Span(datetime.date(2024, 5, 1), datetime.date(2024, 5, 5), 5) in s.potential_weekends_list

    def test_score_2024(self, months_2024) -> None:
        s = year_stats(months_2024)
        assert s.efficiency_score == 6 * 10 + 4 * 4 + 3 * 4 - 3 * 2 - 1
        assert s.efficiency_class == "A"
        assert s.effective_days == 10
        assert s.lost_days == 3

    def test_redeem_saturdays_shifts_score(self, months_2024) -> None:
        plain = year_stats(months_2024, redeem_saturdays=False)
        redeemed = year_stats(months_2024, redeem_saturdays=True)
        assert redeemed.efficiency_score - plain.efficiency_score == plain.holidays_on_saturdays
        assert redeemed.effective_days == plain.effective_days + plain.holidays_on_saturdays
        assert redeemed.lost_days == plain.holidays_on_sundays

    def test_counts_are_consistent(self) -> None:
        for year in (1991, 2025, 2060, 2099):
            s = year_stats(build_calendar(year))
            assert (
                s.holidays_on_workdays + s.holidays_on_saturdays + s.holidays_on_sundays
                == s.total_holidays
            )


class TestGlobalStats:
    def test_range_over_configured_span(self) -> None:
        config = EngineConfig(min_year=2024, max_year=2026)
        g = global_stats_range(False, config)
        assert isinstance(g, GlobalStats)
        assert g.total_holidays.min == 13
        assert g.total_holidays.max == 14
        for r in g:
            assert r.min <= r.avg <= r.max

    def test_average_rounded_to_one_decimal(self) -> None:
        config = EngineConfig(min_year=2024, max_year=2026)
        g = global_stats_range(True, config)
        for r in g:
            assert round(r.avg, 1) == r.avg


class TestCuriosities:
    def test_2024(self) -> None:
        c = year_curiosities(2024)
        assert c.is_leap
        assert c.christmas_eve_weekday == "wtorek"
        assert c.holidays_on_saturday == 1
        assert c.working_days_count + c.free_days_count == 366
        assert c.max_drought_range is not None
        start, end = c.max_drought_range
        assert (end - start).days - 1 == c.max_drought

    @pytest.mark.parametrize(
        ("year", "leap"), [(2024, True), (2025, False), (2028, True), (2096, True), (2099, False)]
    )
    def test_leap_years(self, year: int, leap: bool) -> None:
        c = year_curiosities(year)
        assert c.is_leap is leap
        assert c.working_days_count + c.free_days_count == (366 if leap else 365)
