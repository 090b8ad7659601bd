"""Polish statutory holidays.

The table combines fixed-date holidays with the movable feasts derived
from Easter Sunday.  Fixed holidays are expressed as rules so that a
legislated change (Wigilia becoming a day off) is a year-conditional
entry rather than a hardcoded switch.
"""

from __future__ import annotations

import datetime
from typing import NamedTuple

from longweekend.config import DEFAULT_CONFIG, EngineConfig
from longweekend.errors import HolidayTableError

NEW_YEAR = "Nowy Rok"
EPIPHANY = "Trzech Króli"
LABOUR_DAY = "Święto Pracy"
CONSTITUTION_DAY = "Święto Konstytucji 3 Maja"
ASSUMPTION = "Wniebowzięcie NMP"
ALL_SAINTS = "Wszystkich Świętych"
INDEPENDENCE_DAY = "Święto Niepodległości"
CHRISTMAS_EVE = "Wigilia Bożego Narodzenia"
CHRISTMAS_1 = "Boże Narodzenie (1)"
CHRISTMAS_2 = "Boże Narodzenie (2)"

EASTER_SUNDAY = "Wielkanoc"
EASTER_MONDAY = "Poniedziałek Wielkanocny"
PENTECOST = "Zielone Świątki"
CORPUS_CHRISTI = "Boże Ciało"


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class FixedHoliday(NamedTuple):
    """A holiday on the same calendar date every year it is in force."""

    month: int
    day: int
    name: str
    first_year: int | None = None

    def applies_to(self, year: int) -> bool:
        return self.first_year is None or year >= self.first_year


class MovableHoliday(NamedTuple):
    """A holiday at a fixed offset (in days) from Easter Sunday."""

    offset: int
    name: str


FIXED_HOLIDAYS: tuple[FixedHoliday, ...] = (
    FixedHoliday(1, 1, NEW_YEAR),
    FixedHoliday(1, 6, EPIPHANY),
    FixedHoliday(5, 1, LABOUR_DAY),
    FixedHoliday(5, 3, CONSTITUTION_DAY),
    FixedHoliday(8, 15, ASSUMPTION),
    FixedHoliday(11, 1, ALL_SAINTS),
    FixedHoliday(11, 11, INDEPENDENCE_DAY),
    FixedHoliday(12, 25, CHRISTMAS_1),
    FixedHoliday(12, 26, CHRISTMAS_2),
)

MOVABLE_HOLIDAYS: tuple[MovableHoliday, ...] = (
    MovableHoliday(0, EASTER_SUNDAY),
    MovableHoliday(1, EASTER_MONDAY),
    MovableHoliday(49, PENTECOST),
    MovableHoliday(60, CORPUS_CHRISTI),
)


def fixed_holiday_rules(config: EngineConfig = DEFAULT_CONFIG) -> tuple[FixedHoliday, ...]:
    """Fixed rules including the configured Wigilia cutover."""
    return FIXED_HOLIDAYS + (
        FixedHoliday(12, 24, CHRISTMAS_EVE, first_year=config.christmas_eve_first_year),
    )


# ---------------------------------------------------------------------------
# Computation
# ---------------------------------------------------------------------------


def easter_sunday(year: int) -> datetime.date:
    """Gregorian Easter Sunday (Meeus/Jones/Butcher algorithm)."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return datetime.date(year, month, day)


def polish_holidays(
    year: int, config: EngineConfig = DEFAULT_CONFIG
) -> dict[datetime.date, str]:
    """Return ``{date: name}`` for every Polish statutory holiday in *year*.

    Raises :class:`HolidayTableError` if a movable feast lands on a date
    already taken by another holiday, which the calendar rules never allow.
    """
    table: dict[datetime.date, str] = {}
    for rule in fixed_holiday_rules(config):
        if rule.applies_to(year):
            table[datetime.date(year, rule.month, rule.day)] = rule.name

    easter = easter_sunday(year)
    for rule in MOVABLE_HOLIDAYS:
        d = easter + datetime.timedelta(days=rule.offset)
        if d in table:
            msg = f"{rule.name} ({d.isoformat()}) collides with {table[d]}"
            raise HolidayTableError(msg)
        table[d] = rule.name

    return dict(sorted(table.items()))


def find_holiday(
    year: int, name: str, config: EngineConfig = DEFAULT_CONFIG
) -> datetime.date:
    """Return the date of holiday *name* in *year*.

    Raises :class:`HolidayTableError` when the holiday is not in the table.
    """
    for d, holiday_name in polish_holidays(year, config).items():
        if holiday_name == name:
            return d
    raise HolidayTableError(f"No holiday named {name!r} in {year}")


# ---------------------------------------------------------------------------
# Country presets
# ---------------------------------------------------------------------------

PRESETS: dict[str, str] = {
    "pl": "Polskie święta ustawowe",
}


def get_holidays(
    country: str, year: int, config: EngineConfig = DEFAULT_CONFIG
) -> list[tuple[datetime.date, str]]:
    """Return ``(date, name)`` pairs for the given *country* preset and *year*.

    Raises ``KeyError`` if the country is not supported.
    """
    if country not in PRESETS:
        supported = ", ".join(sorted(PRESETS))
        msg = f"Unknown country preset {country!r}. Supported: {supported}"
        raise KeyError(msg)
    return list(polish_holidays(year, config).items())
