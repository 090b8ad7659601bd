"""Typer CLI for the long-weekend calendar engine."""

from __future__ import annotations

import datetime
import json
import logging
import pathlib
import sys

import typer

from longweekend.calendar_builder import DayType, MonthView, build_calendar, overlay
from longweekend.config import DEFAULT_CONFIG, EngineConfig, load_config
from longweekend.errors import LongWeekendError
from longweekend.history import (
    analyze_strategy_stats,
    build_historical_table,
    load_historical_table,
    save_historical_table,
    strategy_text,
)
from longweekend.holidays import PRESETS, get_holidays
from longweekend.optimizer import (
    VacationOpportunity,
    VacationStrategyFinder,
    format_opportunity,
)
from longweekend.quality import score_holiday
from longweekend.stats import (
    Span,
    YearStats,
    global_stats_range,
    year_curiosities,
    year_stats,
)

app = typer.Typer(
    name="longweekend",
    help="Polish holiday calendar: long weekends, year statistics and the "
    "cheapest ways to turn leave days into long breaks.",
    add_completion=False,
)

DAY_MARKS = {
    DayType.WORKDAY: ".",
    DayType.SATURDAY: "s",
    DayType.SUNDAY: "n",
    DayType.HOLIDAY: "Ś",
    DayType.BRIDGE: "m",
}


def _current_year() -> int:
    return datetime.date.today().year


def _resolve_config(path: str | None) -> EngineConfig:
    if path is None:
        return DEFAULT_CONFIG
    if not pathlib.Path(path).exists():
        typer.echo(f"Error: Config file not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        return load_config(path)
    except (LongWeekendError, TypeError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


def _dump(data: object) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    typer.echo()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def holidays(
    year: int = typer.Option(None, "--year", "-y", help="Year. Defaults to the current year."),
    country: str = typer.Option(
        "pl",
        "--country",
        "-c",
        help=f"Holiday preset ({', '.join(sorted(PRESETS))}).",
    ),
    config: str | None = typer.Option(None, "--config", help="Path to a JSON config file."),
) -> None:
    """List the statutory holidays of a year."""
    cfg = _resolve_config(config)
    resolved_year = year if year is not None else _current_year()
    try:
        table = get_holidays(country, resolved_year, cfg)
    except KeyError as exc:
        typer.echo(f"Error: {exc.args[0]}", err=True)
        raise typer.Exit(code=1) from None

    typer.echo(f"{PRESETS[country]} {resolved_year}:")
    for d, name in table:
        typer.echo(f"  {d.isoformat()}  {name}")


@app.command()
def calendar(
    year: int = typer.Option(None, "--year", "-y", help="Year. Defaults to the current year."),
    month: int = typer.Option(None, "--month", "-m", min=1, max=12, help="Show one month only."),
    plan: int = typer.Option(
        None, "--plan", "-p", min=1, help="Overlay the N-th best vacation strategy."
    ),
    config: str | None = typer.Option(None, "--config", help="Path to a JSON config file."),
) -> None:
    """Print month grids with day types and long-weekend sequences."""
    cfg = _resolve_config(config)
    resolved_year = year if year is not None else _current_year()
    try:
        months = build_calendar(resolved_year, cfg)
    except LongWeekendError as exc:
        raise _fail(exc) from None

    opportunity: VacationOpportunity | None = None
    if plan is not None:
        found = VacationStrategyFinder(resolved_year, cfg, months=months).find_opportunities()
        if plan > len(found):
            typer.echo(f"Error: Only {len(found)} strategies found for {resolved_year}.", err=True)
            raise typer.Exit(code=1)
        opportunity = found[plan - 1]
        typer.echo(format_opportunity(opportunity, plan))
        typer.echo()

    for view in months:
        if month is not None and view.month != month:
            continue
        if opportunity is not None:
            view = overlay(view, opportunity)
        typer.echo(_format_month(view))


def _format_month(view: MonthView) -> str:
    lines = [f"{view.name} {view.year}", " Pn  Wt  Śr  Cz  Pt  So  Nd"]
    for week in view.weeks:
        cells = []
        for d in week:
            if not d.is_current_month:
                cells.append("   ")
                continue
            mark = "U" if d.is_planned_leave else DAY_MARKS[d.day_type]
            cells.append(f"{d.date.day:>2}{mark}")
        lines.append(" ".join(cells))
    lines.append("")
    return "\n".join(lines)


@app.command()
def stats(
    year: int = typer.Option(None, "--year", "-y", help="Year. Defaults to the current year."),
    redeem_saturdays: bool = typer.Option(
        False,
        "--redeem-saturdays/--no-redeem-saturdays",
        help="Treat Saturday holidays as compensated with another day off.",
    ),
    show_global: bool = typer.Option(
        False, "--global", help="Also show min/avg/max over every supported year."
    ),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
    config: str | None = typer.Option(None, "--config", help="Path to a JSON config file."),
) -> None:
    """Score the holiday placement of a year."""
    cfg = _resolve_config(config)
    resolved_year = year if year is not None else _current_year()
    try:
        result = year_stats(build_calendar(resolved_year, cfg), redeem_saturdays)
        facts = year_curiosities(resolved_year, cfg)
    except LongWeekendError as exc:
        raise _fail(exc) from None
    ranges = global_stats_range(redeem_saturdays, cfg) if show_global else None

    if output_json:
        payload: dict[str, object] = {"year": resolved_year, **_serialize_stats(result)}
        if ranges is not None:
            payload["global"] = {k: v._asdict() for k, v in ranges._asdict().items()}
        _dump(payload)
        return

    w = 64
    typer.echo("=" * w)
    typer.echo(f"  ROK {resolved_year}: klasa {result.efficiency_class} ({result.efficiency_score} pkt)")
    typer.echo("=" * w)
    typer.echo(f"  Święta ogółem:        {result.total_holidays}")
    typer.echo(f"  W dni robocze:        {result.holidays_on_workdays}")
    typer.echo(f"  W soboty:             {result.holidays_on_saturdays}")
    typer.echo(f"  W niedziele:          {result.holidays_on_sundays}")
    typer.echo(f"  Długie weekendy:      {result.long_weekends_count}")
    typer.echo(f"  Dni mostowe:          {result.bridge_days_count}")
    typer.echo(f"  Dni efektywne/utracone: {result.effective_days}/{result.lost_days}")
    typer.echo()
    for span in result.long_weekends_list:
        typer.echo(f"    {span.start.isoformat()} -> {span.end.isoformat()} ({span.length} dni)")
    typer.echo()
    typer.echo(f"  Wigilia wypada w: {facts.christmas_eve_weekday}")
    typer.echo(f"  Najdłuższa przerwa bez świąt: {facts.max_drought} dni")
    typer.echo(f"  Najluźniejsze miesiące: {', '.join(facts.lazy_month_names)}")

    if ranges is not None:
        typer.echo()
        typer.echo(f"  Zakres {cfg.min_year}-{cfg.max_year} (min / śr / max):")
        for field, r in ranges._asdict().items():
            typer.echo(f"    {field:<22} {r.min:>4} / {r.avg:>5} / {r.max:>4}")


def _serialize_stats(s: YearStats) -> dict[str, object]:
    def _span(span: Span) -> dict[str, object]:
        return {"start": span.start.isoformat(), "end": span.end.isoformat(), "length": span.length}

    return {
        "total_holidays": s.total_holidays,
        "holidays_on_workdays": s.holidays_on_workdays,
        "holidays_on_saturdays": s.holidays_on_saturdays,
        "holidays_on_sundays": s.holidays_on_sundays,
        "long_weekends_count": s.long_weekends_count,
        "bridge_days_count": s.bridge_days_count,
        "efficiency_score": s.efficiency_score,
        "efficiency_class": s.efficiency_class,
        "effective_days": s.effective_days,
        "lost_days": s.lost_days,
        "long_weekends": [_span(x) for x in s.long_weekends_list],
        "potential_weekends": [_span(x) for x in s.potential_weekends_list],
        "bridge_days": [d.date.isoformat() for d in s.bridge_days],
    }


@app.command()
def strategies(
    year: int = typer.Option(None, "--year", "-y", help="Year. Defaults to the current year."),
    history: str | None = typer.Option(
        None, "--history", help="Historical statistics JSON used to rate each strategy."
    ),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Show at most N strategies."),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
    config: str | None = typer.Option(None, "--config", help="Path to a JSON config file."),
) -> None:
    """Find the most efficient ways to spend leave days."""
    cfg = _resolve_config(config)
    resolved_year = year if year is not None else _current_year()

    table = None
    if history is not None:
        if not pathlib.Path(history).exists():
            typer.echo(f"Error: History file not found: {history}", err=True)
            raise typer.Exit(code=1)
        try:
            table = load_historical_table(history)
        except LongWeekendError as exc:
            raise _fail(exc) from None

    try:
        found = VacationStrategyFinder(resolved_year, cfg).find_opportunities()[:limit]
    except LongWeekendError as exc:
        raise _fail(exc) from None

    rated = [
        (o, analyze_strategy_stats(o, table, cfg) if table is not None else None) for o in found
    ]

    if output_json:
        items = []
        for o, r in rated:
            item: dict[str, object] = {
                "id": o.id,
                "period_name": o.period_name,
                "start_date": o.start_date.isoformat(),
                "end_date": o.end_date.isoformat(),
                "days_to_take": o.days_to_take,
                "free_days": o.free_days,
                "efficiency": o.efficiency,
                "vacation_days": [d.isoformat() for d in o.vacation_days],
            }
            if r is not None:
                item["rating"] = r.rating
                item["percentile"] = r.percentile
                item["is_rare"] = r.is_rare
                item["next_occurrence"] = r.next_occurrence
            item["text"] = strategy_text(o, r.rating if r is not None else None)
            items.append(item)
        _dump({"year": resolved_year, "strategies": items})
        return

    typer.echo(f"Strategie urlopowe na rok {resolved_year}:")
    if not rated:
        typer.echo("  Brak opłacalnych strategii.")
    for i, (o, r) in enumerate(rated, 1):
        typer.echo(format_opportunity(o, i))
        if r is not None:
            extra = f"      Ocena: {r.rating}, percentyl {r.percentile}"
            if r.frequency_text:
                extra += f", {r.frequency_text.lower()}"
            typer.echo(extra)
        typer.echo(f"      {strategy_text(o, r.rating if r is not None else None)}")


@app.command("history")
def history_cmd(
    first_year: int = typer.Option(None, "--from", help="First scanned year."),
    last_year: int = typer.Option(None, "--to", help="Last scanned year."),
    output: str = typer.Option(
        "vacation-stats.json", "--output", "-o", help="Where to write the table."
    ),
    config: str | None = typer.Option(None, "--config", help="Path to a JSON config file."),
) -> None:
    """Produce the historical statistics table used by ``strategies --history``."""
    cfg = _resolve_config(config)
    try:
        table = build_historical_table(first_year, last_year, cfg)
    except LongWeekendError as exc:
        raise _fail(exc) from None
    save_historical_table(table, output)
    typer.echo(f"Wrote {len(table)} periods to {output}")


@app.command()
def quality(
    holiday: str = typer.Option(..., "--holiday", "-H", help="Holiday name, e.g. 'Nowy Rok'."),
    year: int = typer.Option(None, "--year", "-y", help="Year. Defaults to the current year."),
    config: str | None = typer.Option(None, "--config", help="Path to a JSON config file."),
) -> None:
    """Rate how well a holiday falls in a year."""
    cfg = _resolve_config(config)
    resolved_year = year if year is not None else _current_year()
    try:
        result = score_holiday(holiday, resolved_year, cfg)
    except LongWeekendError as exc:
        raise _fail(exc) from None

    if result is None:
        typer.echo(f"Error: {holiday!r} is not scored in {resolved_year}.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{result.holiday_name} {result.year}: {result.layout}")
    typer.echo(f"  {result.description}")
    if not result.is_standard:
        typer.echo(f"  Percentyl: {result.percentile}")
        if result.next_occurrence_year is not None:
            typer.echo(f"  Ten sam układ ponownie: {result.next_occurrence_year}")


def main() -> None:
    app()
