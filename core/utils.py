from __future__ import annotations

import calendar
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

import pandas as pd

CENT = Decimal("0.01")


def normalize_date(value) -> date:
    """Strip time-of-day from anything pandas can read as a timestamp."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Unparseable date: {value!r}")
    return ts.normalize().date()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month, both inclusive."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def to_cents(amount) -> int:
    """Money in, integer cents out (half away from zero, like excel_round)."""
    if amount is None:
        return 0
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return int(amount.quantize(CENT, rounding=ROUND_HALF_UP) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
