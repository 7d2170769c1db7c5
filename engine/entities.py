"""
Derived entities produced by one build. Constructed fresh on every call,
never persisted. All money is Decimal quantized to cents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import FrozenSet, Optional, Tuple

from core.schema import EventSource, Kind


@dataclass(frozen=True)
class CalendarEvent:
    """One income or expense placed on a day."""
    kind: Kind
    name: str
    amount: Decimal  # always >= 0; direction comes from kind
    projected: bool
    source: EventSource
    origin_id: Optional[str]  # RecurringDefinition / PaycheckStream / ActualTransaction id
    category: Optional[str] = None


@dataclass(frozen=True)
class DayLedger:
    date: date
    day: int
    events: Tuple[CalendarEvent, ...]
    income_total: Decimal
    expense_total: Decimal
    end_balance: Decimal

    @property
    def date_key(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregate shape shared by a month and a year."""
    total_income: Decimal
    total_expenses: Decimal
    net_change: Decimal
    ending_balance: Decimal
    lowest_balance: Decimal
    highest_balance: Decimal


@dataclass(frozen=True)
class PressurePoint:
    date: date
    expense_total: Decimal
    end_balance: Decimal

    @property
    def date_key(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class MonthProjection:
    year: int
    month: int
    start_date: date
    end_date: date
    starting_balance: Decimal
    days: Tuple[DayLedger, ...]
    summary: PeriodSummary
    pressure_points: Tuple[PressurePoint, ...]
    warnings: Tuple[str, ...] = ()
    # record sources whose fetch failed and were defaulted
    degraded_sources: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_sources)

    def day(self, day_of_month: int) -> DayLedger:
        """DayLedger for day-of-month ``day_of_month`` (1-based)."""
        if not 1 <= day_of_month <= len(self.days):
            raise IndexError(f"day {day_of_month} outside 1..{len(self.days)}")
        return self.days[day_of_month - 1]


@dataclass(frozen=True)
class YearForecast:
    year: int
    months: Tuple[MonthProjection, ...]
    summary: PeriodSummary
    warnings: Tuple[str, ...] = ()
    degraded_sources: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_sources)
