"""Vacation Strategy Finder

Find the leave-day allocations that buy the most contiguous free time.

Weekends and holidays are already days off.  Spending leave on the short
gaps between them *bridges* separate free blocks into one long break.
The finder linearizes a year's calendar into free segments and tries every
ordered pair of segments, accumulating the cost of the gaps in between:

  * extending stops once the cost exceeds ``max_cost`` (12 days),
  * a pair is accepted once the cost reaches ``min_cost`` (2 days),
  * only opportunities strictly better than an ordinary work week
    (9 free days for 5 taken, efficiency 1.8) are kept.

Overlapping windows are all kept, so callers can present the trade-offs
between a short cheap break and a longer, costlier one.
"""

from __future__ import annotations

import datetime
import logging
from typing import NamedTuple

from longweekend.calendar_builder import (
    MONTH_NAMES,
    DayRecord,
    DayType,
    MonthView,
    build_calendar,
    requires_leave,
)
from longweekend.config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class VacationOpportunity(NamedTuple):
    """A window of free time bought with a given number of leave days."""

    id: str
    start_date: datetime.date
    end_date: datetime.date
    days_to_take: int
    vacation_days: list[datetime.date]
    free_days: int
    efficiency: float
    description: str
    period_name: str | None
    month: int


class FreeSegment(NamedTuple):
    """Inclusive index range of consecutive days needing no leave."""

    start: int
    end: int


# Period label and the holiday-name fragments that select it, in priority order.
PERIOD_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Boże Narodzenie", ("Boże Narodzenie", "Wigilia")),
    ("Sylwester / Nowy Rok", ("Nowy Rok",)),
    ("Trzech Króli", ("Trzech Króli",)),
    ("Majówka", ("Święto Pracy", "3 Maja")),
    ("Wielkanoc", ("Wielkanoc",)),
    ("Boże Ciało", ("Boże Ciało",)),
    ("Sierpniówka", ("Wniebowzięcie",)),
    ("Wszystkich Świętych", ("Wszystkich",)),
    ("Święto Niepodległości", ("Niepodległości",)),
)

DESCRIPTION_PREFIX = "Urlop w miesiącu "


def month_label(month: int) -> str:
    return MONTH_NAMES[month - 1].lower()


def period_name(holiday_names: list[str], start: datetime.date) -> str:
    """Group a window under the yearly event it is built around.

    Falls back to the first holiday in the window, then to the month name
    when the window holds no holiday at all.
    """
    if not holiday_names:
        return month_label(start.month)
    for label, fragments in PERIOD_RULES:
        if any(fragment in name for name in holiday_names for fragment in fragments):
            return label
    return holiday_names[0]


def linearize(months: list[MonthView]) -> list[DayRecord]:
    """Flatten month grids into one date-sorted list without duplicates.

    A date shown in two grids keeps its current-month copy.
    """
    by_date: dict[datetime.date, DayRecord] = {}
    for view in months:
        for record in view.days():
            if record.date not in by_date or record.is_current_month:
                by_date[record.date] = record
    return [by_date[d] for d in sorted(by_date)]


# ---------------------------------------------------------------------------
# Finder
# ---------------------------------------------------------------------------


class VacationStrategyFinder:
    """Enumerates gap-filling vacation windows for one target year.

    The linearized calendar reaches slightly into the adjacent years, so a
    break spanning New Year is measured with its full length.  A window is
    only reported when at least one of its leave days falls in the target
    year.
    """

    def __init__(
        self,
        year: int,
        config: EngineConfig = DEFAULT_CONFIG,
        *,
        months: list[MonthView] | None = None,
    ):
        self.year = year
        self.config = config
        self.months = months if months is not None else build_calendar(year, config)

        self.days: list[DayRecord] = linearize(self.months)
        self.dates: list[datetime.date] = [d.date for d in self.days]
        for prev, cur in zip(self.dates, self.dates[1:]):
            if (cur - prev).days != 1:
                raise ValueError(f"Calendar has a hole between {prev} and {cur}")

        self.needs_leave: list[bool] = [requires_leave(d) for d in self.days]
        self.segments: list[FreeSegment] = self._free_segments()

    def _free_segments(self) -> list[FreeSegment]:
        segments: list[FreeSegment] = []
        start: int | None = None
        for i, needs in enumerate(self.needs_leave):
            if not needs:
                if start is None:
                    start = i
            elif start is not None:
                segments.append(FreeSegment(start, i - 1))
                start = None
        if start is not None:
            segments.append(FreeSegment(start, len(self.days) - 1))
        return segments

    def _gap_days(self, first: int, last: int) -> list[datetime.date]:
        """Dates between segments *first* .. *last* that must be taken off."""
        days: list[datetime.date] = []
        for k in range(first, last):
            gap_start = self.segments[k].end + 1
            gap_end = self.segments[k + 1].start
            days.extend(self.dates[gap_start:gap_end])
        return days

    def _holiday_names(self, start_idx: int, end_idx: int) -> list[str]:
        names: list[str] = []
        for record in self.days[start_idx : end_idx + 1]:
            if (
                record.day_type is DayType.HOLIDAY
                and record.holiday_name
                and record.holiday_name not in names
            ):
                names.append(record.holiday_name)
        return names

    def _make_opportunity(self, first: int, last: int, cost: int) -> VacationOpportunity | None:
        vacation_days = self._gap_days(first, last)
        if not any(d.year == self.year for d in vacation_days):
            return None

        start_idx = self.segments[first].start
        end_idx = self.segments[last].end
        start = self.dates[start_idx]
        end = self.dates[end_idx]
        free_days = (end - start).days + 1

        return VacationOpportunity(
            id=f"{start.isoformat()}_{end.isoformat()}",
            start_date=start,
            end_date=end,
            days_to_take=cost,
            vacation_days=vacation_days,
            free_days=free_days,
            efficiency=round(free_days / cost, 2),
            description=f"{DESCRIPTION_PREFIX}{month_label(start.month)}",
            period_name=period_name(self._holiday_names(start_idx, end_idx), start),
            month=vacation_days[0].month,
        )

    def find_opportunities(self) -> list[VacationOpportunity]:
        """All accepted windows, best efficiency first, longer first on ties."""
        cfg = self.config
        found: list[VacationOpportunity] = []

        for i in range(len(self.segments)):
            cost = 0
            for j in range(i + 1, len(self.segments)):
                cost += self.segments[j].start - self.segments[j - 1].end - 1
                if cost > cfg.max_cost:
                    break
                if cost < cfg.min_cost:
                    continue

                opp = self._make_opportunity(i, j, cost)
                if opp is not None and opp.free_days / opp.days_to_take > cfg.min_efficiency:
                    found.append(opp)

        found.sort(key=lambda o: (-o.efficiency, -o.free_days))
        logger.debug("Found %d vacation opportunities for %d", len(found), self.year)
        return found


def analyze_vacation_strategies(
    year: int, config: EngineConfig = DEFAULT_CONFIG
) -> list[VacationOpportunity]:
    """Shortcut for ``VacationStrategyFinder(year, config).find_opportunities()``."""
    return VacationStrategyFinder(year, config).find_opportunities()


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_opportunity(opportunity: VacationOpportunity, index: int | None = None) -> str:
    """Return a human-readable summary of one opportunity."""
    o = opportunity
    if o.start_date.year == o.end_date.year:
        dr = f"{o.start_date.strftime('%d.%m')} -> {o.end_date.strftime('%d.%m.%Y')}"
    else:
        dr = f"{o.start_date.strftime('%d.%m.%Y')} -> {o.end_date.strftime('%d.%m.%Y')}"
    prefix = f"  {index:>2}. " if index is not None else "  "

    lines = [
        f"{prefix}{o.period_name or o.description}: {dr}",
        f"      {o.days_to_take} dni urlopu -> {o.free_days} dni wolnego"
        f" (efektywność {o.efficiency:.2f})",
        "      Weź wolne: " + ", ".join(d.strftime("%d.%m") for d in o.vacation_days),
    ]
    return "\n".join(lines)
