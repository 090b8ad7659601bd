"""Exceptions raised by the long-weekend engine."""


class LongWeekendError(Exception):
    """Base error for calendar and strategy computations."""


class YearOutOfRangeError(LongWeekendError, ValueError):
    """Raised when a year falls outside the supported span."""

    def __init__(self, year: int, min_year: int, max_year: int):
        self.year = year
        self.min_year = min_year
        self.max_year = max_year
        super().__init__(f"Year {year} is outside the supported range {min_year}-{max_year}.")


class HolidayTableError(LongWeekendError):
    """Raised when the holiday table breaks an internal invariant."""


class HistoricalTableError(LongWeekendError):
    """Raised when a historical statistics file does not match the schema."""
