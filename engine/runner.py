"""
Month build — fetch one snapshot, assemble the day arena, project balances,
rank pressure points.

    snapshot (4 concurrent reads, failures defaulted + flagged)
      -> validate records (strict mode rejects unknown frequencies)
      -> place projections, overlay actuals          (ledger.py)
      -> running balance + summary                   (balance.py)
      -> pressure points                             (pressure.py)

Nothing is written anywhere; identical snapshots give identical projections.
"""

from __future__ import annotations

from typing import List, Optional

from core.config import EngineConfig
from core.errors import UnsupportedFrequencyError
from core.logging_config import get_logger
from core.utils import from_cents, month_bounds, to_cents
from records.validators import validate_period, validate_records

from .balance import check_ledger, project_balances
from .entities import MonthProjection, YearForecast
from .fetch import fetch_month_snapshot
from .ledger import assemble_days
from .pressure import detect_pressure_points

logger = get_logger("engine.runner")


def _resolve_starting_cents(override, snapshot) -> int:
    if override is not None:
        return to_cents(override)
    if snapshot.starting_balance is not None:
        return to_cents(snapshot.starting_balance.amount)
    return 0


async def build_month(
    store,
    user_id: str,
    year,
    month,
    starting_balance_override=None,
    *,
    config: Optional[EngineConfig] = None,
) -> MonthProjection:
    """
    Build the day-by-day projection of one calendar month.

    Parameters
    ----------
    store : RecordStore
        Read-only source of the user's four record collections.
    user_id : str
        Opaque identifier from the identity provider.
    year, month : int
        Target month; validated before any read (InputValidationError).
    starting_balance_override : number, optional
        Takes precedence over the stored starting balance.
    config : EngineConfig, optional

    Returns
    -------
    MonthProjection. ``degraded_sources`` names every record source whose
    read failed and was replaced by its empty default.
    """
    cfg = config or EngineConfig()
    y, m = validate_period(year, month)
    start, end = month_bounds(y, m)

    snapshot = await fetch_month_snapshot(store, user_id, start, end)

    warnings: List[str] = [
        f"{source} unavailable; treated as empty" for source in sorted(snapshot.failures)
    ]

    checks = validate_records(snapshot.recurring, snapshot.paycheck, snapshot.transactions)
    if cfg.strict_frequencies and checks.unsupported:
        origin_id, frequency = checks.unsupported[0]
        raise UnsupportedFrequencyError(frequency, origin_id)
    warnings.extend(checks.warnings)

    starting_cents = _resolve_starting_cents(starting_balance_override, snapshot)

    slots, skipped = assemble_days(
        y, m, snapshot.recurring, snapshot.paycheck, snapshot.transactions, cfg
    )
    warnings.extend(skipped)

    days, summary = project_balances(slots, starting_cents)
    starting_balance = from_cents(starting_cents)
    if cfg.check_invariants:
        check_ledger(days, starting_balance)

    projection = MonthProjection(
        year=y,
        month=m,
        start_date=start,
        end_date=end,
        starting_balance=starting_balance,
        days=days,
        summary=summary,
        pressure_points=detect_pressure_points(days, cfg.pressure_point_limit),
        warnings=tuple(warnings),
        degraded_sources=frozenset(snapshot.failures),
    )
    logger.debug(
        "built month user=%s %04d-%02d start=%s end=%s degraded=%s",
        user_id, y, m, starting_balance, summary.ending_balance,
        sorted(projection.degraded_sources),
    )
    return projection


class CalendarEngine:
    """
    Caller-facing entry point bound to one record store and one config.

    Usage:
        engine = CalendarEngine(store)
        month = await engine.build_month("u1", 2025, 2)
        year = await engine.build_year("u1", 2025, starting_balance_override=Decimal("1000"))
    """

    def __init__(self, store, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or EngineConfig()

    async def build_month(
        self, user_id: str, year, month, starting_balance_override=None
    ) -> MonthProjection:
        return await build_month(
            self.store, user_id, year, month, starting_balance_override, config=self.config
        )

    async def build_year(
        self, user_id: str, year, starting_balance_override=None
    ) -> YearForecast:
        from .year import build_year

        return await build_year(
            self.store, user_id, year, starting_balance_override, config=self.config
        )
