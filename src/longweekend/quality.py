"""Holiday Quality Scorer

Rates how well a single holiday falls in a given year.  Holidays are
grouped into families that share a weekday table; the family anchor
(e.g. 1 May for the May-Day cluster) determines the score, which is then
ranked against every year of the supported span.
"""

from __future__ import annotations

import datetime
import logging
from typing import NamedTuple

from longweekend import holidays as hol
from longweekend.config import DEFAULT_CONFIG, EngineConfig
from longweekend.history import fair_percentile

logger = logging.getLogger(__name__)

SHORT_DAY_NAMES = ("Pon", "Wt", "Śr", "Czw", "Pt", "Sob", "Nd")


class HolidayQualityResult(NamedTuple):
    holiday_name: str
    year: int
    layout: str
    is_standard: bool
    is_optimal: bool
    score: int | None
    percentile: int | None
    next_occurrence_year: int | None
    description: str


class HolidayFamily(NamedTuple):
    """Holidays scored together by the weekday of one anchor date."""

    name: str
    members: tuple[str, ...]
    anchor: tuple[int, int]
    span: tuple[tuple[int, int], ...]
    scores: dict[int, int]


# Weekday (Monday=0) -> score.  A Monday or Friday holiday makes a long
# weekend on its own; Thursday or Tuesday needs one bridge day.
SINGLE_DAY_SCORES = {0: 4, 4: 4, 1: 3, 3: 3, 2: 2, 5: 1, 6: 0}

SINGLE_DAY_HOLIDAYS = (
    hol.NEW_YEAR,
    hol.EPIPHANY,
    hol.ASSUMPTION,
    hol.ALL_SAINTS,
    hol.INDEPENDENCE_DAY,
)

FAMILIES: tuple[HolidayFamily, ...] = (
    HolidayFamily(
        "Majówka",
        (hol.LABOUR_DAY, hol.CONSTITUTION_DAY),
        (5, 1),
        ((5, 1), (5, 3)),
        {0: 5, 1: 4, 2: 5, 3: 3, 4: 2, 5: 2, 6: 2},
    ),
    HolidayFamily(
        "Boże Narodzenie",
        (hol.CHRISTMAS_EVE, hol.CHRISTMAS_1, hol.CHRISTMAS_2),
        (12, 25),
        ((12, 24), (12, 26)),
        {0: 5, 1: 4, 2: 4, 3: 5, 4: 3, 5: 0, 6: 2},
    ),
    *(
        HolidayFamily(
            rule.name,
            (rule.name,),
            (rule.month, rule.day),
            ((rule.month, rule.day), (rule.month, rule.day)),
            SINGLE_DAY_SCORES,
        )
        for rule in hol.FIXED_HOLIDAYS
        if rule.name in SINGLE_DAY_HOLIDAYS
    ),
)

FIXED_PATTERN: dict[str, str] = {
    hol.EASTER_SUNDAY: "Zawsze w niedzielę, bez wpływu na dni robocze.",
    hol.EASTER_MONDAY: "Zawsze w poniedziałek, co roku daje długi weekend.",
    hol.PENTECOST: "Zawsze w niedzielę, bez wpływu na dni robocze.",
    hol.CORPUS_CHRISTI: "Zawsze w czwartek, co roku jeden dzień mostu do długiego weekendu.",
}


def family_of(name: str) -> HolidayFamily | None:
    for family in FAMILIES:
        if name in family.members:
            return family
    return None


def family_score(family: HolidayFamily, year: int) -> int:
    month, day = family.anchor
    return family.scores[datetime.date(year, month, day).weekday()]


def _layout(family: HolidayFamily, year: int, config: EngineConfig) -> str:
    (first_month, first_day), (last_month, last_day) = family.span
    first = datetime.date(year, first_month, first_day)
    if hol.CHRISTMAS_EVE in family.members and year < config.christmas_eve_first_year:
        first = datetime.date(year, 12, 25)
    last = datetime.date(year, last_month, last_day)
    if first == last:
        return SHORT_DAY_NAMES[first.weekday()]
    return f"{SHORT_DAY_NAMES[first.weekday()]}–{SHORT_DAY_NAMES[last.weekday()]}"


def score_holiday(
    name: str, year: int, config: EngineConfig = DEFAULT_CONFIG
) -> HolidayQualityResult | None:
    """Score the placement of holiday *name* in *year*.

    Returns ``None`` for names that are not scored holidays and for
    holidays not yet in force that year.
    """
    config.check_year(year)

    if name in FIXED_PATTERN:
        d = hol.find_holiday(year, name, config)
        return HolidayQualityResult(
            holiday_name=name,
            year=year,
            layout=SHORT_DAY_NAMES[d.weekday()],
            is_standard=True,
            is_optimal=False,
            score=None,
            percentile=None,
            next_occurrence_year=None,
            description=FIXED_PATTERN[name],
        )

    family = family_of(name)
    if family is None:
        return None
    if name == hol.CHRISTMAS_EVE and year < config.christmas_eve_first_year:
        return None

    years = range(config.min_year, config.max_year + 1)
    all_scores = [family_score(family, y) for y in years]
    score = family_score(family, year)
    best = max(family.scores.values())

    month, day = family.anchor
    weekday = datetime.date(year, month, day).weekday()
    next_year = next(
        (y for y in years if y > year and datetime.date(y, month, day).weekday() == weekday),
        None,
    )

    layout = _layout(family, year, config)
    if score == best:
        description = f"Najlepszy możliwy układ ({layout})."
    elif score == min(family.scores.values()):
        description = f"Najgorszy możliwy układ ({layout})."
    else:
        description = f"Układ {layout}: {score} z {best} punktów."

    logger.debug("%s %d scored %d (family %s)", name, year, score, family.name)
    return HolidayQualityResult(
        holiday_name=name,
        year=year,
        layout=layout,
        is_standard=False,
        is_optimal=score == best,
        score=score,
        percentile=fair_percentile(score, all_scores),
        next_occurrence_year=next_year,
        description=description,
    )
