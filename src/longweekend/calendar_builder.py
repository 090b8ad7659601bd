"""Day classification, long-weekend sequences and month grids.

A calendar for year *Y* is built from a buffered timeline running from
Dec 24 of *Y-1* to Jan 7 of *Y+1*, so that bridges and sequences crossing
the New Year are detected with their full extent.  Month views are then
cut out of that timeline as Monday-first grids.

All records are immutable; every view gets its own rows, and changing
what a day shows is always done through ``_replace``.
"""

from __future__ import annotations

import calendar
import datetime
import logging
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from longweekend.config import DEFAULT_CONFIG, EngineConfig
from longweekend.holidays import polish_holidays

if TYPE_CHECKING:
    from longweekend.optimizer import VacationOpportunity

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "Styczeń",
    "Luty",
    "Marzec",
    "Kwiecień",
    "Maj",
    "Czerwiec",
    "Lipiec",
    "Sierpień",
    "Wrzesień",
    "Październik",
    "Listopad",
    "Grudzień",
)

ONE_DAY = datetime.timedelta(days=1)
ONE_WEEK = datetime.timedelta(days=7)

MIN_SEQUENCE_LENGTH = 3

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class DayType(Enum):
    WORKDAY = "WORKDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"
    HOLIDAY = "HOLIDAY"
    BRIDGE = "BRIDGE"


class SequenceInfo(NamedTuple):
    """A maximal run of 3+ consecutive non-working days."""

    id: str
    start: datetime.date
    end: datetime.date
    length: int
    has_bridge: bool
    linked_holiday_name: str | None = None


class DayRecord(NamedTuple):
    """One calendar date with its classification and sequence membership."""

    date: datetime.date
    day_type: DayType
    holiday_name: str | None = None
    in_sequence: bool = False
    sequence: SequenceInfo | None = None
    has_bridge: bool = False
    is_sequence_start: bool = False
    is_sequence_end: bool = False
    connects_to_prev_week: bool = False
    connects_to_next_week: bool = False
    is_current_month: bool = True
    is_planned_leave: bool = False

    def without_sequence(self) -> DayRecord:
        """Copy of this record with every sequence flag cleared."""
        return self._replace(
            in_sequence=False,
            sequence=None,
            has_bridge=False,
            is_sequence_start=False,
            is_sequence_end=False,
            connects_to_prev_week=False,
            connects_to_next_week=False,
        )


class MonthView(NamedTuple):
    """A month laid out as Monday-to-Sunday weeks."""

    year: int
    month: int
    name: str
    weeks: list[list[DayRecord]]

    def days(self) -> Iterator[DayRecord]:
        for week in self.weeks:
            yield from week

    def current_days(self) -> list[DayRecord]:
        return [d for d in self.days() if d.is_current_month]


# ---------------------------------------------------------------------------
# Derived classifications
# ---------------------------------------------------------------------------


def is_day_off(record: DayRecord) -> bool:
    """Display view: anything but a plain workday is shown as free."""
    return record.day_type is not DayType.WORKDAY


def requires_leave(record: DayRecord) -> bool:
    """Cost view: a bridge is free on the calendar but still needs a leave day."""
    return record.day_type in (DayType.WORKDAY, DayType.BRIDGE)


def is_year_boundary_pair(first: datetime.date, second: datetime.date) -> bool:
    """True when the months of *first* and *second* are Dec and the following Jan."""
    earlier, later = sorted((first, second))
    return earlier.month == 12 and later.month == 1 and later.year == earlier.year + 1


def classify_day(d: datetime.date, holidays: dict[datetime.date, str]) -> DayRecord:
    name = holidays.get(d)
    if name is not None:
        return DayRecord(date=d, day_type=DayType.HOLIDAY, holiday_name=name)
    if d.weekday() == 6:
        return DayRecord(date=d, day_type=DayType.SUNDAY)
    if d.weekday() == 5:
        return DayRecord(date=d, day_type=DayType.SATURDAY)
    return DayRecord(date=d, day_type=DayType.WORKDAY)


# ---------------------------------------------------------------------------
# Buffered timeline
# ---------------------------------------------------------------------------


class Timeline:
    """Contiguous, date-ordered day records indexed by offset from ``start``."""

    def __init__(self, year: int, days: list[DayRecord]):
        if not days:
            raise ValueError("A timeline needs at least one day.")
        self.year = year
        self.days = days
        self.start = days[0].date
        self.end = days[-1].date

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[DayRecord]:
        return iter(self.days)

    def index_of(self, d: datetime.date) -> int | None:
        idx = (d - self.start).days
        if 0 <= idx < len(self.days):
            return idx
        return None

    def get(self, d: datetime.date) -> DayRecord | None:
        idx = self.index_of(d)
        return None if idx is None else self.days[idx]

    def sequences(self) -> list[SequenceInfo]:
        seen: dict[str, SequenceInfo] = {}
        for record in self.days:
            if record.sequence is not None:
                seen.setdefault(record.sequence.id, record.sequence)
        return list(seen.values())


def _detect_bridges(types: list[DayType]) -> list[DayType]:
    result = list(types)
    for i in range(1, len(types) - 1):
        if (
            types[i] is DayType.WORKDAY
            and types[i - 1] is not DayType.WORKDAY
            and types[i + 1] is not DayType.WORKDAY
        ):
            result[i] = DayType.BRIDGE
    return result


def _off_runs(days: list[DayRecord]) -> list[tuple[int, int]]:
    """Inclusive ``(start, end)`` index pairs of maximal non-workday runs."""
    runs: list[tuple[int, int]] = []
    start: int | None = None
    for i, record in enumerate(days):
        if is_day_off(record):
            if start is None:
                start = i
        elif start is not None:
            runs.append((start, i - 1))
            start = None
    if start is not None:
        runs.append((start, len(days) - 1))
    return runs


def _mark_sequences(days: list[DayRecord]) -> list[DayRecord]:
    marked = list(days)
    for start, end in _off_runs(days):
        length = end - start + 1
        if length < MIN_SEQUENCE_LENGTH:
            continue

        members = days[start : end + 1]
        has_bridge = any(m.day_type is DayType.BRIDGE for m in members)
        linked = next((m.holiday_name for m in members if m.day_type is DayType.HOLIDAY), None)
        info = SequenceInfo(
            id=f"{days[start].date.isoformat()}_{days[end].date.isoformat()}",
            start=days[start].date,
            end=days[end].date,
            length=length,
            has_bridge=has_bridge,
            linked_holiday_name=linked,
        )

        for i in range(start, end + 1):
            weekday = days[i].date.weekday()
            marked[i] = days[i]._replace(
                in_sequence=True,
                sequence=info,
                has_bridge=has_bridge,
                is_sequence_start=i == start,
                is_sequence_end=i == end,
                connects_to_next_week=weekday == 6 and i < end,
                connects_to_prev_week=weekday == 0 and i > start,
            )
    return marked


def build_timeline(year: int, config: EngineConfig = DEFAULT_CONFIG) -> Timeline:
    """Classify every day from Dec 24 of ``year-1`` through Jan 7 of ``year+1``."""
    config.check_year(year)

    holidays: dict[datetime.date, str] = {}
    for y in (year - 1, year, year + 1):
        holidays.update(polish_holidays(y, config))

    start = datetime.date(year - 1, 12, 24)
    end = datetime.date(year + 1, 1, 7)
    num_days = (end - start).days + 1

    base = [classify_day(start + datetime.timedelta(days=i), holidays) for i in range(num_days)]
    types = _detect_bridges([r.day_type for r in base])
    days = [r._replace(day_type=t) for r, t in zip(base, types, strict=True)]
    timeline = Timeline(year, _mark_sequences(days))

    logger.debug(
        "Built %d-day timeline for %d with %d sequences",
        len(timeline),
        year,
        len(timeline.sequences()),
    )
    return timeline


# ---------------------------------------------------------------------------
# Month grids
# ---------------------------------------------------------------------------


def _continues_across_week(
    timeline: Timeline, sunday: datetime.date, monday: datetime.date
) -> bool:
    sun = timeline.get(sunday)
    mon = timeline.get(monday)
    if sun is None or mon is None or sun.sequence is None or mon.sequence is None:
        return False
    return (
        sun.sequence.id == mon.sequence.id
        and not mon.is_sequence_start
        and not sun.is_sequence_end
    )


def _grid_bounds(timeline: Timeline, year: int, month: int) -> tuple[datetime.date, datetime.date]:
    first = datetime.date(year, month, 1)
    last = datetime.date(year, month, calendar.monthrange(year, month)[1])
    grid_start = first - datetime.timedelta(days=first.weekday())
    grid_end = last + datetime.timedelta(days=6 - last.weekday())

    # Each step moves a full week towards the edge of the finite timeline,
    # and a row is only added when it lies entirely inside it.
    while (
        _continues_across_week(timeline, grid_start - ONE_DAY, grid_start)
        and timeline.index_of(grid_start - ONE_WEEK) is not None
    ):
        grid_start -= ONE_WEEK
    while (
        _continues_across_week(timeline, grid_end, grid_end + ONE_DAY)
        and timeline.index_of(grid_end + ONE_WEEK) is not None
    ):
        grid_end += ONE_WEEK

    return grid_start, grid_end


def _month_view(timeline: Timeline, year: int, month: int) -> MonthView:
    grid_start, grid_end = _grid_bounds(timeline, year, month)
    view_date = datetime.date(year, month, 1)

    grid: list[DayRecord] = []
    d = grid_start
    while d <= grid_end:
        record = timeline.get(d)
        if record is None:
            raise ValueError(f"{d.isoformat()} is outside the buffered timeline")
        grid.append(record)
        d += ONE_DAY

    relevant_ids = {
        r.sequence.id
        for r in grid
        if r.sequence is not None and (r.date.year, r.date.month) == (year, month)
    }

    weeks: list[list[DayRecord]] = []
    for w in range(0, len(grid), 7):
        row: list[DayRecord] = []
        for record in grid[w : w + 7]:
            if (record.date.year, record.date.month) == (year, month):
                row.append(record._replace(is_current_month=True))
            elif (
                record.sequence is not None
                and record.sequence.id in relevant_ids
                and is_year_boundary_pair(record.date, view_date)
            ):
                row.append(record._replace(is_current_month=False))
            else:
                row.append(record.without_sequence()._replace(is_current_month=False))

        if any(r.is_current_month or r.in_sequence for r in row):
            weeks.append(row)

    return MonthView(year=year, month=month, name=MONTH_NAMES[month - 1], weeks=weeks)


def build_calendar(year: int, config: EngineConfig = DEFAULT_CONFIG) -> list[MonthView]:
    """Return the twelve month views of *year*."""
    timeline = build_timeline(year, config)
    return [_month_view(timeline, year, month) for month in range(1, 13)]


# ---------------------------------------------------------------------------
# Strategy overlay
# ---------------------------------------------------------------------------


def overlay(view: MonthView, opportunity: VacationOpportunity) -> MonthView:
    """Return a copy of *view* showing *opportunity* as the only sequence.

    Days inside the opportunity window are stamped as one sequence, and the
    leave days to request get ``is_planned_leave``.  *view* is left untouched.
    """
    start = opportunity.start_date
    end = opportunity.end_date
    leave = set(opportunity.vacation_days)
    info = SequenceInfo(
        id=opportunity.id,
        start=start,
        end=end,
        length=opportunity.free_days,
        has_bridge=False,
        linked_holiday_name=opportunity.period_name,
    )

    weeks: list[list[DayRecord]] = []
    for week in view.weeks:
        row: list[DayRecord] = []
        for record in week:
            if start <= record.date <= end:
                weekday = record.date.weekday()
                row.append(
                    record._replace(
                        in_sequence=True,
                        sequence=info,
                        has_bridge=False,
                        is_sequence_start=record.date == start,
                        is_sequence_end=record.date == end,
                        connects_to_next_week=weekday == 6 and record.date < end,
                        connects_to_prev_week=weekday == 0 and record.date > start,
                        is_planned_leave=record.date in leave,
                    )
                )
            else:
                row.append(record.without_sequence()._replace(is_planned_leave=False))
        weeks.append(row)

    return view._replace(weeks=weeks)
