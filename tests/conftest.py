"""
Shared fixtures for the calendar engine tests.

Provides:
- Record stores seeded with the canonical Rent scenario
- Stores whose individual sources fail (degraded-build tests)
- A helper to drive the async entry points from sync tests
"""

import asyncio

import pytest

from core.logging_config import reset_logging
from records.store import InMemoryRecordStore

USER = "user-1"

RENT = {
    "_id": "rec-rent",
    "name": "Rent",
    "amount": 500,
    "type": "expense",
    "frequency": "monthly",
    "startDate": "2025-01-01",
}


def run(coro):
    return asyncio.run(coro)


class FailingStore(InMemoryRecordStore):
    """InMemoryRecordStore whose named sources raise on read."""

    def __init__(self, failing=(), **kwargs):
        super().__init__(**kwargs)
        self.failing = set(failing)

    def _maybe_fail(self, source):
        if source in self.failing:
            raise ConnectionError(f"{source} backend down")

    async def list_recurring(self, user_id):
        self._maybe_fail("recurring")
        return await super().list_recurring(user_id)

    async def get_paycheck_stream(self, user_id):
        self._maybe_fail("paycheckStream")
        return await super().get_paycheck_stream(user_id)

    async def get_starting_balance(self, user_id):
        self._maybe_fail("startingBalance")
        return await super().get_starting_balance(user_id)

    async def list_transactions(self, user_id, start, end):
        self._maybe_fail("transactions")
        return await super().list_transactions(user_id, start, end)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def rent_store():
    """StartingBalance=1000 and one monthly Rent of 500 from 2025-01-01."""
    store = InMemoryRecordStore()
    store.put_user(USER, recurring=[RENT], starting_balance={"startingBalance": 1000})
    return store


@pytest.fixture
def busy_store():
    """Rent, weekly groceries, biweekly paycheck and a handful of actuals."""
    store = InMemoryRecordStore()
    store.put_user(
        USER,
        recurring=[
            RENT,
            {"_id": "rec-groceries", "name": "Groceries", "amount": "85.40",
             "type": "expense", "frequency": "weekly", "startDate": "2025-01-04"},
            {"_id": "rec-side", "name": "Side gig", "amount": "120.00",
             "type": "income", "frequency": "monthly", "startDate": "2024-11-15"},
        ],
        paycheck={"payAmount": "1850.25", "frequency": "biweekly", "startDate": "2025-01-03"},
        starting_balance={"startingBalance": "312.10"},
        transactions=[
            {"_id": "tx-1", "description": "Rent", "amount": "-520.00",
             "category": "housing", "date": "2025-02-01"},
            {"_id": "tx-2", "description": "Coffee", "amount": "-4.75",
             "category": "food", "date": "2025-02-08"},
            {"_id": "tx-3", "description": "Payroll", "amount": "1849.99",
             "category": "salary", "date": "2025-02-14"},
            {"_id": "tx-4", "description": "Refund", "amount": "12.30",
             "category": "misc", "date": "2025-03-02"},
        ],
    )
    return store
