"""
Year forecast — twelve month builds chained through their ending balances.

Months run strictly in order: month m starts where month m-1 ended, so they
cannot be built concurrently. Any month failing aborts the whole forecast.
"""

from __future__ import annotations

from typing import List, Optional

from core.config import EngineConfig
from core.logging_config import get_logger
from records.validators import validate_year

from .entities import MonthProjection, PeriodSummary, YearForecast
from .runner import build_month

logger = get_logger("engine.year")


def summarize_year(months: List[MonthProjection]) -> PeriodSummary:
    total_income = sum((m.summary.total_income for m in months), start=0)
    total_expenses = sum((m.summary.total_expenses for m in months), start=0)
    return PeriodSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_change=total_income - total_expenses,
        ending_balance=months[-1].summary.ending_balance,
        lowest_balance=min(m.summary.lowest_balance for m in months),
        highest_balance=max(m.summary.highest_balance for m in months),
    )


async def build_year(
    store,
    user_id: str,
    year,
    starting_balance_override=None,
    *,
    config: Optional[EngineConfig] = None,
) -> YearForecast:
    """
    Chain January..December. January uses ``starting_balance_override`` when
    given, otherwise the stored starting balance (resolved by the first month
    build); every later month uses the previous month's ending balance.
    """
    cfg = config or EngineConfig()
    y = validate_year(year)

    months: List[MonthProjection] = []
    carry = starting_balance_override
    for m in range(1, 13):
        projection = await build_month(store, user_id, y, m, carry, config=cfg)
        months.append(projection)
        carry = projection.summary.ending_balance

    warnings = []
    degraded = set()
    for p in months:
        warnings.extend(f"{p.year:04d}-{p.month:02d}: {w}" for w in p.warnings)
        degraded.update(p.degraded_sources)

    summary = summarize_year(months)
    logger.debug(
        "built year user=%s %04d end=%s low=%s high=%s",
        user_id, y, summary.ending_balance, summary.lowest_balance, summary.highest_balance,
    )
    return YearForecast(
        year=y,
        months=tuple(months),
        summary=summary,
        warnings=tuple(warnings),
        degraded_sources=frozenset(degraded),
    )
