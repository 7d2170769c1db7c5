"""
Balance projection — walk the day arena and compute the running balance.

Integer cents all the way through; Decimal only at the output boundary, so a
28-31 day walk (or a 365 day chain) never drifts.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from core.errors import ComputationError
from core.schema import Kind
from core.utils import from_cents

from .entities import CalendarEvent, DayLedger, PeriodSummary
from .ledger import DaySlot


def _freeze_events(slot: DaySlot) -> Tuple[CalendarEvent, ...]:
    return tuple(
        CalendarEvent(
            kind=e.kind,
            name=e.name,
            amount=from_cents(e.cents),
            projected=e.projected,
            source=e.source,
            origin_id=e.origin_id,
            category=e.category,
        )
        for e in slot.entries
    )


def project_balances(
    days: Sequence[DaySlot],
    starting_balance_cents: int,
) -> Tuple[Tuple[DayLedger, ...], PeriodSummary]:
    """
    endBalance[d] = endBalance[d-1] + income[d] - expense[d], starting from
    ``starting_balance_cents``. Lowest/highest include the starting value.
    """
    running = starting_balance_cents
    lowest = highest = starting_balance_cents
    total_income = total_expenses = 0

    ledgers = []
    for i, slot in enumerate(days, start=1):
        total_income += slot.income_cents
        total_expenses += slot.expense_cents
        running = running + slot.income_cents - slot.expense_cents
        lowest = min(lowest, running)
        highest = max(highest, running)
        ledgers.append(
            DayLedger(
                date=slot.date,
                day=i,
                events=_freeze_events(slot),
                income_total=from_cents(slot.income_cents),
                expense_total=from_cents(slot.expense_cents),
                end_balance=from_cents(running),
            )
        )

    summary = PeriodSummary(
        total_income=from_cents(total_income),
        total_expenses=from_cents(total_expenses),
        net_change=from_cents(total_income - total_expenses),
        ending_balance=from_cents(running),
        lowest_balance=from_cents(lowest),
        highest_balance=from_cents(highest),
    )
    return tuple(ledgers), summary


def check_ledger(days: Sequence[DayLedger], starting_balance) -> None:
    """Re-verify day totals and the balance recurrence. Raises ComputationError."""
    previous = starting_balance
    for i, day in enumerate(days):
        if day.day != i + 1 or (i and (day.date - days[i - 1].date).days != 1):
            raise ComputationError(f"day sequence broken at {day.date_key}")
        income = sum((e.amount for e in day.events if e.kind is Kind.INCOME), start=0)
        expense = sum((e.amount for e in day.events if e.kind is Kind.EXPENSE), start=0)
        if income != day.income_total or expense != day.expense_total:
            raise ComputationError(f"event totals disagree with day totals on {day.date_key}")
        if previous + day.income_total - day.expense_total != day.end_balance:
            raise ComputationError(f"balance recurrence broken on {day.date_key}")
        previous = day.end_balance
