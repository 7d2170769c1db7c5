"""
Day ledger assembly — place projected occurrences, then reconcile actuals.

Works on an arena of mutable day slots indexed by day-of-month (slot 0 is
day 1), all money in integer cents. The balance projector freezes the arena
into DayLedger records.

Reconciliation rule: on a date where an actual transaction of a kind exists,
no projected event of that kind survives. Projections are pre-filtered
against the actual (date, kind) pairs AND removed again when each actual is
overlaid, so the result does not depend on iteration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from core.config import EngineConfig
from core.errors import UnsupportedFrequencyError
from core.logging_config import get_logger
from core.schema import (
    ActualTransaction,
    EventSource,
    Kind,
    PaycheckStream,
    RecurringDefinition,
)
from core.utils import days_in_month, to_cents

from .occurrences import generate_occurrences

logger = get_logger("engine.ledger")


@dataclass
class LedgerEntry:
    """Mutable event while the arena is being assembled (amount in cents)."""
    kind: Kind
    name: str
    cents: int
    projected: bool
    source: EventSource
    origin_id: Optional[str]
    category: Optional[str] = None


@dataclass
class DaySlot:
    date: date
    entries: List[LedgerEntry] = field(default_factory=list)
    income_cents: int = 0
    expense_cents: int = 0

    def add(self, entry: LedgerEntry) -> None:
        self.entries.append(entry)
        if entry.kind is Kind.INCOME:
            self.income_cents += entry.cents
        else:
            self.expense_cents += entry.cents

    def drop_projected(self, kind: Kind) -> int:
        """Remove projected entries of ``kind``; returns how many were removed."""
        keep, removed = [], 0
        for e in self.entries:
            if e.projected and e.kind is kind:
                if kind is Kind.INCOME:
                    self.income_cents -= e.cents
                else:
                    self.expense_cents -= e.cents
                removed += 1
            else:
                keep.append(e)
        self.entries = keep
        return removed


def init_days(year: int, month: int) -> List[DaySlot]:
    return [DaySlot(date(year, month, d)) for d in range(1, days_in_month(year, month) + 1)]


def _slot_for(days: Sequence[DaySlot], d: date) -> Optional[DaySlot]:
    first = days[0].date
    if d.year != first.year or d.month != first.month:
        return None
    return days[d.day - 1]


def actual_kind_dates(transactions: Iterable[ActualTransaction]) -> Dict[Kind, Set[date]]:
    covered: Dict[Kind, Set[date]] = {Kind.INCOME: set(), Kind.EXPENSE: set()}
    for tx in transactions:
        covered[tx.kind].add(tx.date)
    return covered


def _place_series(
    days: Sequence[DaySlot],
    *,
    kind: Kind,
    name: str,
    amount,
    frequency: str,
    start_date: Optional[date],
    source: EventSource,
    origin_id: Optional[str],
    covered: Dict[Kind, Set[date]],
    config: EngineConfig,
) -> None:
    occurrences = generate_occurrences(
        start_date,
        days[0].date,
        days[-1].date,
        frequency,
        month_end_policy=config.month_end_policy,
        origin_id=origin_id,
    )
    cents = to_cents(amount)
    for occ in occurrences:
        if occ in covered[kind]:
            continue
        slot = _slot_for(days, occ)
        if slot is None:
            continue
        slot.add(LedgerEntry(kind, name, cents, True, source, origin_id))


def place_projections(
    days: Sequence[DaySlot],
    recurring: Sequence[RecurringDefinition],
    paycheck: Optional[PaycheckStream],
    covered: Dict[Kind, Set[date]],
    config: EngineConfig,
) -> List[str]:
    """
    Place recurring definitions (in record order) then the paycheck stream.

    Returns warnings for definitions skipped because of an unsupported
    frequency (only possible when ``config.strict_frequencies`` is False).
    """
    warnings: List[str] = []

    series: List[dict] = [
        dict(
            kind=rec.kind,
            name=rec.name,
            amount=rec.amount,
            frequency=rec.frequency,
            start_date=rec.start_date,
            source=EventSource.RECURRING,
            origin_id=rec.id,
        )
        for rec in recurring
    ]
    if paycheck is not None and paycheck.is_active:
        series.append(
            dict(
                kind=Kind.INCOME,
                name=config.paycheck_name,
                amount=paycheck.amount,
                frequency=paycheck.frequency or config.default_paycheck_frequency,
                start_date=paycheck.start_date,
                source=EventSource.PAYCHECK_STREAM,
                origin_id=paycheck.id,
            )
        )

    for kwargs in series:
        try:
            _place_series(days, covered=covered, config=config, **kwargs)
        except UnsupportedFrequencyError as exc:
            if config.strict_frequencies:
                raise
            logger.warning("skipping %s: %s", kwargs["name"], exc)
            warnings.append(f"Skipped {kwargs['name']!r}: {exc}")
    return warnings


def overlay_actuals(days: Sequence[DaySlot], transactions: Iterable[ActualTransaction]) -> None:
    """Overlay actual transactions; each supersedes same-kind projections on its date."""
    for tx in transactions:
        slot = _slot_for(days, tx.date)
        if slot is None:
            continue
        kind = tx.kind
        slot.drop_projected(kind)
        slot.add(
            LedgerEntry(
                kind=kind,
                name=tx.description,
                cents=abs(to_cents(tx.amount)),
                projected=False,
                source=EventSource.TRANSACTION,
                origin_id=tx.id,
                category=tx.category or None,
            )
        )


def assemble_days(
    year: int,
    month: int,
    recurring: Sequence[RecurringDefinition],
    paycheck: Optional[PaycheckStream],
    transactions: Sequence[ActualTransaction],
    config: EngineConfig,
) -> Tuple[List[DaySlot], List[str]]:
    """Steps 2-4 of a month build: empty arena, projections, actual overlay."""
    days = init_days(year, month)
    covered = actual_kind_dates(transactions)
    warnings = place_projections(days, recurring, paycheck, covered, config)
    overlay_actuals(days, transactions)
    return days, warnings
