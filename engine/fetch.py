"""
Snapshot fetch — the only place a build suspends.

The four record-store reads for one month are independent and run
concurrently. Each read is captured as a FetchResult; a failed read is
defaulted (empty list / absent) and reported, never raised.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Generic, List, Optional, TypeVar

from core.errors import DataSourceUnavailable
from core.logging_config import get_logger
from core.schema import (
    ActualTransaction,
    PaycheckStream,
    RecurringDefinition,
    StartingBalanceRecord,
)

logger = get_logger("engine.fetch")

T = TypeVar("T")

SOURCE_RECURRING = "recurring"
SOURCE_PAYCHECK = "paycheckStream"
SOURCE_STARTING_BALANCE = "startingBalance"
SOURCE_TRANSACTIONS = "transactions"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    source: str
    value: T
    error: Optional[DataSourceUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MonthSnapshot:
    """Everything one month build reads, after defaulting failed sources."""
    recurring: List[RecurringDefinition]
    paycheck: Optional[PaycheckStream]
    starting_balance: Optional[StartingBalanceRecord]
    transactions: List[ActualTransaction]
    failures: Dict[str, DataSourceUnavailable]


def _capture(source: str, outcome: Any, default: Any) -> FetchResult:
    if isinstance(outcome, asyncio.CancelledError):
        raise outcome
    if isinstance(outcome, Exception):
        error = DataSourceUnavailable(source, outcome)
        logger.warning("record source %s unavailable, defaulting: %r", source, outcome)
        return FetchResult(source, default, error)
    if outcome is None and default is not None:
        return FetchResult(source, default)
    return FetchResult(source, outcome)


async def fetch_month_snapshot(store, user_id: str, start: date, end: date) -> MonthSnapshot:
    outcomes = await asyncio.gather(
        store.list_recurring(user_id),
        store.get_paycheck_stream(user_id),
        store.get_starting_balance(user_id),
        store.list_transactions(user_id, start, end),
        return_exceptions=True,
    )
    results = [
        _capture(SOURCE_RECURRING, outcomes[0], []),
        _capture(SOURCE_PAYCHECK, outcomes[1], None),
        _capture(SOURCE_STARTING_BALANCE, outcomes[2], None),
        _capture(SOURCE_TRANSACTIONS, outcomes[3], []),
    ]
    failures = {r.source: r.error for r in results if not r.ok}
    logger.debug(
        "fetched snapshot user=%s range=%s..%s failures=%s",
        user_id, start, end, sorted(failures),
    )
    return MonthSnapshot(
        recurring=list(results[0].value),
        paycheck=results[1].value,
        starting_balance=results[2].value,
        transactions=list(results[3].value),
        failures=failures,
    )
