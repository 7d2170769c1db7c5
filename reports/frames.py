"""
DataFrame exports of projections — for notebooks, CSV dumps and whatever
presentation layer sits on top. Money is converted to float rounded to 2dp
here and nowhere else.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from engine.entities import MonthProjection, YearForecast

DAY_COLUMNS = [
    "date", "day", "n_events", "income_total", "expense_total", "end_balance", "is_pressure_point",
]
EVENT_COLUMNS = [
    "date", "kind", "name", "amount", "projected", "source", "origin_id", "category",
]
YEAR_COLUMNS = [
    "month", "starting_balance", "total_income", "total_expenses", "net_change",
    "ending_balance", "lowest_balance", "highest_balance", "is_degraded",
]


def _money(value) -> float:
    return round(float(value), 2)


def month_to_frame(projection: MonthProjection) -> pd.DataFrame:
    """One row per calendar day."""
    pressure = {p.date for p in projection.pressure_points}
    rows = [
        {
            "date": pd.Timestamp(d.date),
            "day": d.day,
            "n_events": len(d.events),
            "income_total": _money(d.income_total),
            "expense_total": _money(d.expense_total),
            "end_balance": _money(d.end_balance),
            "is_pressure_point": d.date in pressure,
        }
        for d in projection.days
    ]
    return pd.DataFrame(rows, columns=DAY_COLUMNS)


def events_to_frame(projection: MonthProjection) -> pd.DataFrame:
    """One row per event, in day order then placement order."""
    rows: List[dict] = []
    for d in projection.days:
        for e in d.events:
            rows.append({
                "date": pd.Timestamp(d.date),
                "kind": e.kind.value,
                "name": e.name,
                "amount": _money(e.amount),
                "projected": e.projected,
                "source": e.source.value,
                "origin_id": e.origin_id,
                "category": e.category,
            })
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)


def year_to_frame(forecast: YearForecast) -> pd.DataFrame:
    """One row per month, plus a trailing "Total" row built from the year summary."""
    rows = []
    for p in forecast.months:
        s = p.summary
        rows.append({
            "month": f"{p.year:04d}-{p.month:02d}",
            "starting_balance": _money(p.starting_balance),
            "total_income": _money(s.total_income),
            "total_expenses": _money(s.total_expenses),
            "net_change": _money(s.net_change),
            "ending_balance": _money(s.ending_balance),
            "lowest_balance": _money(s.lowest_balance),
            "highest_balance": _money(s.highest_balance),
            "is_degraded": p.is_degraded,
        })

    ys = forecast.summary
    rows.append({
        "month": "Total",
        "starting_balance": _money(forecast.months[0].starting_balance),
        "total_income": _money(ys.total_income),
        "total_expenses": _money(ys.total_expenses),
        "net_change": _money(ys.net_change),
        "ending_balance": _money(ys.ending_balance),
        "lowest_balance": _money(ys.lowest_balance),
        "highest_balance": _money(ys.highest_balance),
        "is_degraded": forecast.is_degraded,
    })
    return pd.DataFrame(rows, columns=YEAR_COLUMNS)
