"""
Record store contract and an in-memory implementation.

The engine only reads: four async calls per month build, nothing else.
Persistence, retries and authentication belong to whoever implements
RecordStore.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Union

from core.schema import (
    ActualTransaction,
    PaycheckStream,
    RecurringDefinition,
    StartingBalanceRecord,
)
from core.utils import normalize_date


class RecordStore(Protocol):
    async def list_recurring(self, user_id: str) -> List[RecurringDefinition]: ...

    async def get_paycheck_stream(self, user_id: str) -> Optional[PaycheckStream]: ...

    async def get_starting_balance(self, user_id: str) -> Optional[StartingBalanceRecord]: ...

    async def list_transactions(
        self, user_id: str, start: date, end: date
    ) -> List[ActualTransaction]: ...


@dataclass
class UserRecords:
    """Everything the store holds for one user."""
    recurring: List[RecurringDefinition] = field(default_factory=list)
    paycheck: Optional[PaycheckStream] = None
    starting_balance: Optional[StartingBalanceRecord] = None
    transactions: List[ActualTransaction] = field(default_factory=list)


def _parse(model, item):
    return item if isinstance(item, model) else model.model_validate(item)


class InMemoryRecordStore:
    """
    Dict-backed RecordStore. Accepts typed records or raw documents
    (parsed with the pydantic schema).

    Usage:
        store = InMemoryRecordStore()
        store.put_user(
            "u1",
            recurring=[{"_id": "r1", "name": "Rent", "amount": 500, "type": "expense",
                        "frequency": "monthly", "startDate": "2025-01-01"}],
            starting_balance={"startingBalance": 1000},
        )
    """

    def __init__(self, users: Optional[Mapping[str, UserRecords]] = None):
        self._users: Dict[str, UserRecords] = dict(users or {})

    def put_user(
        self,
        user_id: str,
        *,
        recurring: Iterable[Union[RecurringDefinition, Mapping]] = (),
        paycheck: Union[PaycheckStream, Mapping, None] = None,
        starting_balance: Union[StartingBalanceRecord, Mapping, None] = None,
        transactions: Iterable[Union[ActualTransaction, Mapping]] = (),
    ) -> UserRecords:
        records = UserRecords(
            recurring=[_parse(RecurringDefinition, r) for r in recurring],
            paycheck=None if paycheck is None else _parse(PaycheckStream, paycheck),
            starting_balance=(
                None if starting_balance is None
                else _parse(StartingBalanceRecord, starting_balance)
            ),
            transactions=[_parse(ActualTransaction, t) for t in transactions],
        )
        self._users[str(user_id)] = records
        return records

    def _get(self, user_id: str) -> UserRecords:
        return self._users.get(str(user_id), UserRecords())

    async def list_recurring(self, user_id: str) -> List[RecurringDefinition]:
        return list(self._get(user_id).recurring)

    async def get_paycheck_stream(self, user_id: str) -> Optional[PaycheckStream]:
        return self._get(user_id).paycheck

    async def get_starting_balance(self, user_id: str) -> Optional[StartingBalanceRecord]:
        return self._get(user_id).starting_balance

    async def list_transactions(
        self, user_id: str, start: date, end: date
    ) -> List[ActualTransaction]:
        lo, hi = normalize_date(start), normalize_date(end)
        return [t for t in self._get(user_id).transactions if lo <= t.date <= hi]
