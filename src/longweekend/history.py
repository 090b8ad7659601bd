"""Historical strategy statistics.

An offline scan runs the strategy finder over many years and aggregates the
opportunities by period name.  The resulting table lets a single
opportunity be rated against everything that period has ever offered.

Table layout (JSON, keyed by period name)::

    {
      "Majówka": {
        "samples": 231,
        "efficiencies": [1.86, 2.0, ...],
        "maxEfficiency": 4.5,
        "combinations": {"2.00_10": {"count": 33, "years": [2026, ...]}},
        ...
      }
    }
"""

from __future__ import annotations

import datetime
import json
import logging
import math
import pathlib
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from longweekend.config import DEFAULT_CONFIG, EngineConfig
from longweekend.errors import HistoricalTableError
from longweekend.optimizer import (
    DESCRIPTION_PREFIX,
    VacationOpportunity,
    analyze_vacation_strategies,
    month_label,
)

logger = logging.getLogger(__name__)

HistoricalTable = Mapping[str, Mapping[str, Any]]

REQUIRED_KEYS = ("samples", "efficiencies", "maxEfficiency", "combinations")

# Two efficiencies closer than this are treated as the same value.
EQUALITY_TOLERANCE = 1e-3

RATING_RARE = "RARE"
RATING_BEST = "BEST"
RATING_VERY_GOOD = "VERY_GOOD"
RATING_GOOD = "GOOD"
RATING_AVERAGE = "AVERAGE"

MONTH_GENITIVE = (
    "stycznia",
    "lutego",
    "marca",
    "kwietnia",
    "maja",
    "czerwca",
    "lipca",
    "sierpnia",
    "września",
    "października",
    "listopada",
    "grudnia",
)


class StrategyStatsResult(NamedTuple):
    period_name: str
    stats: Mapping[str, Any]
    percentile: int
    is_best_possible: bool
    is_standard_sequence: bool
    is_rare: bool
    recurrence_interval: float | None
    frequency_text: str
    next_occurrence: int | None
    rating: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def fair_percentile(value: float, samples: Iterable[float], total: int | None = None) -> int:
    """Tie-aware percentile of *value* within *samples*.

    Samples strictly below *value* count fully, samples equal to it count
    half, so a value shared by a whole tie group lands in the middle of
    that group.
    """
    values = list(samples)
    n = len(values) if total is None else total
    if n <= 0:
        return 0
    equal = sum(1 for s in values if abs(s - value) < EQUALITY_TOLERANCE)
    below = sum(1 for s in values if s < value and abs(s - value) >= EQUALITY_TOLERANCE)
    return round_half_up((below + 0.5 * equal) / n * 100)


def combination_key(efficiency: float, free_days: int) -> str:
    return f"{efficiency:.2f}_{free_days}"


def frequency_text(interval: int) -> str:
    """Polish description of how often a combination recurs."""
    if interval >= 20:
        return f"Bardzo rzadko (raz na {interval} lat)"
    if interval >= 5:
        return f"Raz na {interval} lat"
    if interval <= 1:
        return "Co roku"
    return f"Co ok. {interval} lata"


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def analyze_strategy_stats(
    opportunity: VacationOpportunity,
    table: HistoricalTable,
    config: EngineConfig = DEFAULT_CONFIG,
) -> StrategyStatsResult | None:
    """Rate *opportunity* against the historical distribution of its period.

    Returns ``None`` when the table has no entry for the period; that simply
    means there is not enough history.  The table is only read.
    """
    period = opportunity.period_name or opportunity.description.removeprefix(DESCRIPTION_PREFIX)
    stats = table.get(period)
    if stats is None:
        return None

    efficiency = opportunity.efficiency
    efficiencies: list[float] = list(stats.get("efficiencies", ()))
    max_efficiency = float(stats.get("maxEfficiency", 0))
    samples = int(stats.get("samples", len(efficiencies)))
    combination = stats.get("combinations", {}).get(
        combination_key(efficiency, opportunity.free_days)
    )

    percentile = fair_percentile(efficiency, efficiencies, samples)
    is_best = efficiency >= max_efficiency
    is_constant = bool(efficiencies) and min(efficiencies) == max(efficiencies)

    interval: float | None = None
    freq_text = ""
    next_occurrence: int | None = None
    is_standard = is_constant
    is_rare = False

    if combination and combination.get("count"):
        interval = config.history_span_years / combination["count"]
        rounded = round_half_up(interval)
        freq_text = frequency_text(rounded)

        # The year after the window ends; a break spanning New Year must not
        # report its own second half as the next occurrence.
        baseline = opportunity.end_date.year
        next_occurrence = min((y for y in combination.get("years", ()) if y > baseline), default=None)

        is_standard = is_constant or (is_best and rounded <= config.standard_interval_years)
        high_in_distribution = percentile > config.rare_percentile or (
            is_best and any(e < efficiency for e in efficiencies)
        )
        is_rare = (
            not is_standard
            and efficiency >= max_efficiency * config.rare_quality_ratio
            and interval >= config.rare_interval_years
            and high_in_distribution
        )

    if is_standard:
        rating = RATING_GOOD
    elif is_rare:
        rating = RATING_RARE
    elif is_best:
        rating = RATING_BEST
    elif percentile >= 70:
        rating = RATING_VERY_GOOD
    elif percentile >= 40:
        rating = RATING_GOOD
    else:
        rating = RATING_AVERAGE

    return StrategyStatsResult(
        period_name=period,
        stats=MappingProxyType(dict(stats)),
        percentile=percentile,
        is_best_possible=is_best,
        is_standard_sequence=is_standard,
        is_rare=is_rare,
        recurrence_interval=interval,
        frequency_text=freq_text,
        next_occurrence=next_occurrence,
        rating=rating,
    )


def _polish_date(d: datetime.date) -> str:
    return f"{d.day} {MONTH_GENITIVE[d.month - 1]}"


def strategy_text(opportunity: VacationOpportunity, rating: str | None = None) -> str:
    """One-sentence Polish recommendation for *opportunity*.

    The wording escalates with *rating* and with the length of the break.
    Windows named only after their month get no event label.
    """
    o = opportunity
    label = ""
    if o.period_name and o.period_name != month_label(o.start_date.month):
        label = f"{o.period_name} {o.start_date.year}"
    dates = f"{_polish_date(o.start_date)} - {_polish_date(o.end_date)}"

    if rating in (RATING_BEST, RATING_RARE):
        return (
            f"Hit! {label or 'Genialny termin'}. Biorąc {o.days_to_take} dni urlopu ({dates}), "
            f"zyskujesz aż {o.free_days} dni wolnego. To idealny czas na dłuższy wyjazd."
        )
    if o.free_days >= 9:
        return (
            f"Super okazja na {label or 'długie wakacje'}. Tylko {o.days_to_take} dni urlopu "
            f"zamieniasz na {o.free_days}-dniowy wypoczynek ({dates})."
        )
    if o.efficiency >= 2.0:
        target = f" na {label}" if label else ""
        return (
            f"Opłacalny termin{target}. Zyskujesz {o.free_days} dni wolnego "
            f"kosztem {o.days_to_take} dni urlopu."
        )
    target = f" ({label})" if label else ""
    return (
        f"Dobry moment na krótki urlop{target}. Odpocznij {o.free_days} dni, "
        f"wykorzystując {o.days_to_take} dni urlopu w terminie {dates}."
    )


# ---------------------------------------------------------------------------
# Producing and loading the table
# ---------------------------------------------------------------------------


def build_historical_table(
    first_year: int | None = None,
    last_year: int | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[str, dict[str, Any]]:
    """Scan every year in the range and aggregate opportunities per period."""
    first = config.history_first_year if first_year is None else first_year
    last = config.history_last_year if last_year is None else last_year

    table: dict[str, dict[str, Any]] = {}
    for year in range(first, last + 1):
        for opp in analyze_vacation_strategies(year, config):
            period = opp.period_name or "Inne"
            entry = table.setdefault(
                period,
                {
                    "samples": 0,
                    "efficiencies": [],
                    "maxFreeDays": [],
                    "minCost": [],
                    "combinations": {},
                    "maxEfficiency": 0,
                    "maxPossibleLength": 0,
                    "avgEfficiency": 0,
                    "avgLength": 0,
                },
            )
            entry["samples"] += 1
            entry["efficiencies"].append(opp.efficiency)
            entry["maxFreeDays"].append(opp.free_days)
            entry["minCost"].append(opp.days_to_take)
            entry["maxEfficiency"] = max(entry["maxEfficiency"], opp.efficiency)
            entry["maxPossibleLength"] = max(entry["maxPossibleLength"], opp.free_days)

            combo = entry["combinations"].setdefault(
                combination_key(opp.efficiency, opp.free_days), {"count": 0, "years": []}
            )
            combo["count"] += 1
            combo["years"].append(year)

    for entry in table.values():
        entry["avgEfficiency"] = round(sum(entry["efficiencies"]) / entry["samples"], 2)
        entry["avgLength"] = round(sum(entry["maxFreeDays"]) / entry["samples"], 1)
        entry["efficiencies"].sort()

    logger.info("Aggregated %d periods over %d-%d", len(table), first, last)
    return table


def validate_historical_table(data: object) -> dict[str, dict[str, Any]]:
    """Check the table schema, raising :class:`HistoricalTableError` on mismatch."""
    if not isinstance(data, dict):
        raise HistoricalTableError("Historical table must be a JSON object.")
    for period, entry in data.items():
        if not isinstance(entry, dict):
            raise HistoricalTableError(f"Entry {period!r} must be an object.")
        missing = [k for k in REQUIRED_KEYS if k not in entry]
        if missing:
            raise HistoricalTableError(f"Entry {period!r} is missing: {', '.join(missing)}")
        if not isinstance(entry["efficiencies"], list):
            raise HistoricalTableError(f"Entry {period!r}: 'efficiencies' must be a list.")
        for key, combo in entry["combinations"].items():
            if not isinstance(combo, dict) or "count" not in combo or "years" not in combo:
                raise HistoricalTableError(
                    f"Entry {period!r}: combination {key!r} needs 'count' and 'years'."
                )
    return data


def load_historical_table(path: str | pathlib.Path) -> dict[str, dict[str, Any]]:
    p = pathlib.Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise HistoricalTableError(f"Invalid JSON in {str(p)!r}: {exc}") from exc
    return validate_historical_table(data)


def save_historical_table(table: Mapping[str, Any], path: str | pathlib.Path) -> None:
    p = pathlib.Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(table, ensure_ascii=False, indent=2), encoding="utf-8")
