"""Year-level statistics and efficiency scoring.

``year_stats`` grades a single calendar; ``global_stats_range`` repeats it
for every supported year to give min/avg/max reference values.
"""

from __future__ import annotations

import calendar
import datetime
import logging
from typing import NamedTuple

from longweekend.calendar_builder import (
    DayRecord,
    DayType,
    MonthView,
    build_calendar,
    requires_leave,
)
from longweekend.config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

# Minimum score for each efficiency class, best first.
CLASS_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (79, "A"),
    (73, "B"),
    (68, "C"),
    (63, "D"),
    (58, "E"),
    (53, "F"),
)
LOWEST_CLASS = "G"

WEEKDAY_NAMES = ("poniedziałek", "wtorek", "środa", "czwartek", "piątek", "sobota", "niedziela")

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class Span(NamedTuple):
    start: datetime.date
    end: datetime.date
    length: int


class YearStats(NamedTuple):
    total_holidays: int
    holidays_on_workdays: int
    holidays_on_saturdays: int
    holidays_on_sundays: int
    long_weekends_count: int
    bridge_days_count: int
    efficiency_score: int
    efficiency_class: str
    effective_days: int
    lost_days: int
    long_weekends_list: list[Span]
    potential_weekends_list: list[Span]
    holidays: list[DayRecord]
    bridge_days: list[DayRecord]


class StatRange(NamedTuple):
    min: float
    max: float
    avg: float


class GlobalStats(NamedTuple):
    total_holidays: StatRange
    holidays_on_workdays: StatRange
    holidays_on_saturdays: StatRange
    holidays_on_sundays: StatRange
    long_weekends_count: StatRange
    bridge_days_count: StatRange
    effective_days: StatRange
    lost_days: StatRange


class YearCuriosities(NamedTuple):
    max_drought: int
    max_drought_range: tuple[datetime.date, datetime.date] | None
    max_free_days: int
    lazy_month_names: list[str]
    christmas_eve_weekday: str
    is_leap: bool
    working_days_count: int
    free_days_count: int
    holidays_on_saturday: int
    long_weekends_count: int
    efficiency_class: str


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def efficiency_class(score: int) -> str:
    for threshold, label in CLASS_THRESHOLDS:
        if score >= threshold:
            return label
    return LOWEST_CLASS


def _current_days(months: list[MonthView]) -> list[DayRecord]:
    days: list[DayRecord] = []
    for view in months:
        days.extend(view.current_days())
    return days


def _potential_runs(days: list[DayRecord]) -> list[Span]:
    """Maximal runs of consecutive days flagged ``has_bridge``."""
    spans: list[Span] = []
    run: list[DayRecord] = []
    for d in days:
        if d.has_bridge:
            run.append(d)
            continue
        if run:
            spans.append(Span(run[0].date, run[-1].date, len(run)))
        run = []
    if run:
        spans.append(Span(run[0].date, run[-1].date, len(run)))
    return spans


def year_stats(months: list[MonthView], redeem_saturdays: bool = False) -> YearStats:
    """Aggregate a built calendar into counts, lists and an efficiency grade.

    Parameters
    ----------
    months : list of MonthView
        The output of :func:`build_calendar`.  Only current-month days are
        counted, so ghost days never count twice.  A long weekend spanning
        New Year is listed under the year in which it ends.
    redeem_saturdays : bool
        Whether a holiday falling on Saturday is compensated with another
        day off.
    """
    days = _current_days(months)

    holidays = [d for d in days if d.day_type is DayType.HOLIDAY]
    on_sundays = sum(1 for d in holidays if d.date.weekday() == 6)
    on_saturdays = sum(1 for d in holidays if d.date.weekday() == 5)
    on_workdays = len(holidays) - on_sundays - on_saturdays
    bridge_days = [d for d in days if d.day_type is DayType.BRIDGE]

    # A sequence crossing New Year belongs to the year it ends in.
    year = months[0].year if months else None
    long_weekends: dict[str, Span] = {}
    for d in days:
        seq = d.sequence
        if (
            seq is not None
            and not seq.has_bridge
            and seq.end.year == year
            and seq.id not in long_weekends
        ):
            long_weekends[seq.id] = Span(seq.start, seq.end, seq.length)
    long_weekends_list = list(long_weekends.values())

    score = (
        6 * on_workdays
        + 4 * len(long_weekends_list)
        + 3 * len(bridge_days)
        - 3 * on_sundays
        - (0 if redeem_saturdays else on_saturdays)
    )

    return YearStats(
        total_holidays=len(holidays),
        holidays_on_workdays=on_workdays,
        holidays_on_saturdays=on_saturdays,
        holidays_on_sundays=on_sundays,
        long_weekends_count=len(long_weekends_list),
        bridge_days_count=len(bridge_days),
        efficiency_score=score,
        efficiency_class=efficiency_class(score),
        effective_days=on_workdays + (on_saturdays if redeem_saturdays else 0),
        lost_days=on_sundays + (0 if redeem_saturdays else on_saturdays),
        long_weekends_list=long_weekends_list,
        potential_weekends_list=_potential_runs(days),
        holidays=holidays,
        bridge_days=bridge_days,
    )


# ---------------------------------------------------------------------------
# Global ranges
# ---------------------------------------------------------------------------


def _stat_range(values: list[int]) -> StatRange:
    return StatRange(
        min=min(values),
        max=max(values),
        avg=round(sum(values) / len(values), 1),
    )


def global_stats_range(
    redeem_saturdays: bool, config: EngineConfig = DEFAULT_CONFIG
) -> GlobalStats:
    """Min/avg/max of every year metric across the supported span.

    This rebuilds one calendar per year on every call.  Callers that need
    the result repeatedly should memoize it per ``redeem_saturdays``.
    """
    stats_list = [
        year_stats(build_calendar(y, config), redeem_saturdays)
        for y in range(config.min_year, config.max_year + 1)
    ]
    logger.debug("Computed global ranges over %d years", len(stats_list))

    return GlobalStats(
        **{
            field: _stat_range([getattr(s, field) for s in stats_list])
            for field in GlobalStats._fields
        }
    )


# ---------------------------------------------------------------------------
# Curiosities
# ---------------------------------------------------------------------------


def year_curiosities(year: int, config: EngineConfig = DEFAULT_CONFIG) -> YearCuriosities:
    """Assorted facts about *year*: holiday droughts, laziest months, and so on."""
    months = build_calendar(year, config)
    days = _current_days(months)

    holiday_dates = sorted(d.date for d in days if d.day_type is DayType.HOLIDAY)
    max_drought = 0
    drought_range: tuple[datetime.date, datetime.date] | None = None
    for current, following in zip(holiday_dates, holiday_dates[1:]):
        between = (following - current).days - 1
        if between > max_drought:
            max_drought = between
            drought_range = (current, following)

    max_free = 0
    lazy: list[str] = []
    for view in months:
        free = sum(1 for d in view.current_days() if not requires_leave(d))
        if free > max_free:
            max_free = free
            lazy = [view.name]
        elif free == max_free:
            lazy.append(view.name)

    working = sum(1 for d in days if requires_leave(d))
    stats = year_stats(months, redeem_saturdays=True)

    return YearCuriosities(
        max_drought=max_drought,
        max_drought_range=drought_range,
        max_free_days=max_free,
        lazy_month_names=lazy,
        christmas_eve_weekday=WEEKDAY_NAMES[datetime.date(year, 12, 24).weekday()],
        is_leap=calendar.isleap(year),
        working_days_count=working,
        free_days_count=len(days) - working,
        holidays_on_saturday=stats.holidays_on_saturdays,
        long_weekends_count=stats.long_weekends_count,
        efficiency_class=stats.efficiency_class,
    )

