"""
Calendar projection engine — occurrence generation, day ledger, running
balance, pressure points and year chaining.
"""

from .entities import (
    CalendarEvent,
    DayLedger,
    MonthProjection,
    PeriodSummary,
    PressurePoint,
    YearForecast,
)
from .occurrences import generate_occurrences
from .pressure import detect_pressure_points
from .runner import CalendarEngine, build_month
from .year import build_year

__all__ = [
    "CalendarEvent",
    "DayLedger",
    "MonthProjection",
    "PeriodSummary",
    "PressurePoint",
    "YearForecast",
    "generate_occurrences",
    "detect_pressure_points",
    "CalendarEngine",
    "build_month",
    "build_year",
]
