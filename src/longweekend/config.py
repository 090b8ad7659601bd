"""Engine configuration.

Every tunable of the engine lives on :class:`EngineConfig`.  The value is
passed explicitly into the entry points that need it; nothing reads global
state.
"""

from __future__ import annotations

import dataclasses
import json
import pathlib
from dataclasses import dataclass

from longweekend.errors import LongWeekendError, YearOutOfRangeError


@dataclass(frozen=True)
class EngineConfig:
    # Supported span for calendars and global ranges
    min_year: int = 1991
    max_year: int = 2099

    # Wigilia (Dec 24) became a public holiday from this year on
    christmas_eve_first_year: int = 2025

    # Gap search
    min_cost: int = 2
    max_cost: int = 12
    min_efficiency: float = 1.8

    # Years scanned when producing the historical table
    history_first_year: int = 2024
    history_last_year: int = 2099

    # Strategy rating thresholds
    rare_interval_years: float = 4.0
    standard_interval_years: float = 1.0
    rare_quality_ratio: float = 0.85
    rare_percentile: int = 80

    @property
    def history_span_years(self) -> int:
        return self.history_last_year - self.history_first_year + 1

    def check_year(self, year: int) -> int:
        """Return *year* unchanged, or raise if it is outside the supported span."""
        if not self.min_year <= year <= self.max_year:
            raise YearOutOfRangeError(year, self.min_year, self.max_year)
        return year


DEFAULT_CONFIG = EngineConfig()


def load_config(path: str | pathlib.Path) -> EngineConfig:
    """Build an :class:`EngineConfig` from a JSON file of overrides.

    Unknown keys are rejected so that typos do not silently fall back to
    defaults.
    """
    p = pathlib.Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise LongWeekendError(f"Invalid JSON in config file {str(p)!r}: {exc}") from exc

    if not isinstance(data, dict):
        raise LongWeekendError("Config file must contain a JSON object.")

    known = {f.name for f in dataclasses.fields(EngineConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise LongWeekendError(f"Unknown config key(s): {', '.join(unknown)}")

    overrides: dict[str, int | float] = {}
    for name, value in data.items():
        expected = type(getattr(DEFAULT_CONFIG, name))
        # bool is an int subclass; JSON true/false is never a valid number here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise LongWeekendError(f"Config key {name!r} must be a number, got {value!r}")
        if expected is int and not isinstance(value, int):
            raise LongWeekendError(f"Config key {name!r} must be an integer, got {value!r}")
        overrides[name] = expected(value)

    return dataclasses.replace(DEFAULT_CONFIG, **overrides)
