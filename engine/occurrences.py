"""
Occurrence generation — expand one recurring definition into concrete dates.

Weekly and biweekly occurrences are a fixed number of days apart. Monthly
occurrences follow one of two month-end policies:

  clamp  The k-th occurrence is ``start + k months`` measured from the anchor
         (dateutil.relativedelta), so a 31st lands on Feb 28/29 and returns
         to the 31st in long months. No drift.
  roll   The cursor is advanced one month at a time and an overflowing day
         spills into the following month (Jan 31 -> Mar 3 -> Apr 3 ...).
         The drift is carried forward, matching native date rollover.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, List, Optional

from dateutil.relativedelta import relativedelta

from core.config import MONTH_END_POLICIES
from core.errors import UnsupportedFrequencyError
from core.schema import Frequency, frequency_text
from core.utils import days_in_month, normalize_date

_DAY_STEPS = {
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}


def parse_frequency(value, origin_id: Optional[str] = None) -> Frequency:
    try:
        return Frequency(frequency_text(value))
    except ValueError:
        raise UnsupportedFrequencyError(value, origin_id) from None


def check_month_end_policy(policy: str) -> str:
    if policy not in MONTH_END_POLICIES:
        raise ValueError(f"Unknown month_end_policy: {policy!r}")
    return policy


def _roll_one_month(d: date) -> date:
    year = d.year + (1 if d.month == 12 else 0)
    month = 1 if d.month == 12 else d.month + 1
    last = days_in_month(year, month)
    if d.day <= last:
        return d.replace(year=year, month=month)
    return date(year, month, last) + timedelta(days=d.day - last)


def _stepper(anchor: date, frequency: Frequency, month_end_policy: str) -> Callable[[int, date], Optional[date]]:
    """Return f(k, previous) -> k-th occurrence after the anchor, or None past date.max."""
    if frequency in _DAY_STEPS:
        step = timedelta(days=_DAY_STEPS[frequency])
        advance = lambda k, prev: anchor + step * k
    elif month_end_policy == "roll":
        advance = lambda k, prev: _roll_one_month(prev)
    else:
        advance = lambda k, prev: anchor + relativedelta(months=k)

    def step_or_end(k: int, prev: date) -> Optional[date]:
        try:
            return advance(k, prev)
        except (OverflowError, ValueError):
            # the calendar ends at 9999-12-31, so does the series
            return None

    return step_or_end


def generate_occurrences(
    start_date,
    range_start,
    range_end,
    frequency,
    *,
    month_end_policy: str = "clamp",
    origin_id: Optional[str] = None,
) -> List[date]:
    """
    All occurrence dates of a recurring item inside [range_start, range_end].

    Parameters
    ----------
    start_date : date-like or None
        Anchor of the series. None yields no occurrences.
    range_start, range_end : date-like
        Inclusive window.
    frequency : str or Frequency
        "weekly" | "biweekly" | "monthly". Anything else raises
        UnsupportedFrequencyError.
    month_end_policy : str
        "clamp" (default) or "roll", see module docstring.

    Returns
    -------
    Ascending list of dates. Pure: same inputs, same output.
    """
    freq = parse_frequency(frequency, origin_id)
    check_month_end_policy(month_end_policy)
    if start_date is None:
        return []

    anchor = normalize_date(start_date)
    lo = normalize_date(range_start)
    hi = normalize_date(range_end)
    if lo > hi:
        return []

    step = _stepper(anchor, freq, month_end_policy)

    # Fast-forward to the first occurrence on or after the window start.
    k = 0
    current = anchor
    if freq in _DAY_STEPS and current < lo:
        days = _DAY_STEPS[freq]
        k = -(-(lo - anchor).days // days)
        current = step(k, current)
    while current is not None and current < lo:
        k += 1
        current = step(k, current)

    out: List[date] = []
    while current is not None and current <= hi:
        out.append(current)
        if current == hi:
            break
        k += 1
        current = step(k, current)
    return out
