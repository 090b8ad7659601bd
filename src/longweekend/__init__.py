"""Long Weekend.

Classify every day of a Polish calendar year, detect long weekends and
bridge days, grade the year's holiday placement, and find the leave-day
allocations that buy the longest breaks.
"""

from longweekend.calendar_builder import DayRecord, DayType, MonthView, build_calendar
from longweekend.config import DEFAULT_CONFIG, EngineConfig, load_config
from longweekend.errors import (
    HistoricalTableError,
    HolidayTableError,
    LongWeekendError,
    YearOutOfRangeError,
)
from longweekend.history import StrategyStatsResult, analyze_strategy_stats
from longweekend.holidays import easter_sunday, get_holidays, polish_holidays
from longweekend.optimizer import (
    VacationOpportunity,
    VacationStrategyFinder,
    analyze_vacation_strategies,
)
from longweekend.quality import HolidayQualityResult, score_holiday
from longweekend.stats import GlobalStats, YearStats, global_stats_range, year_stats

__all__ = [
    "DEFAULT_CONFIG",
    "DayRecord",
    "DayType",
    "EngineConfig",
    "GlobalStats",
    "HistoricalTableError",
    "HolidayQualityResult",
    "HolidayTableError",
    "LongWeekendError",
    "MonthView",
    "StrategyStatsResult",
    "VacationOpportunity",
    "VacationStrategyFinder",
    "YearOutOfRangeError",
    "YearStats",
    "analyze_strategy_stats",
    "analyze_vacation_strategies",
    "build_calendar",
    "easter_sunday",
    "get_holidays",
    "global_stats_range",
    "load_config",
    "polish_holidays",
    "score_holiday",
    "year_stats",
]
