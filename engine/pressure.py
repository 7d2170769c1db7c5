"""
Pressure points — the days carrying the heaviest expense load of the month.
Pure and deterministic: ties keep ascending date order.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .entities import DayLedger, PressurePoint


def detect_pressure_points(days: Sequence[DayLedger], limit: int = 3) -> Tuple[PressurePoint, ...]:
    if limit <= 0 or not days:
        return ()
    cents = np.array([int(d.expense_total * 100) for d in days], dtype=np.int64)
    order = np.argsort(-cents, kind="stable")
    picked = [i for i in order if cents[i] > 0][:limit]
    return tuple(
        PressurePoint(
            date=days[i].date,
            expense_total=days[i].expense_total,
            end_balance=days[i].end_balance,
        )
        for i in picked
    )
