from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

import pandas as pd

from core.schema import ActualTransaction, RecurringDefinition
from core.utils import require_columns

from .store import InMemoryRecordStore

PathLike = Union[str, Path]

TRANSACTION_COLUMNS = ("id", "description", "amount", "date")
RECURRING_COLUMNS = ("id", "name", "amount", "kind", "frequency", "start_date")


def _rows(df: pd.DataFrame) -> List[dict]:
    # NaN -> None so optional fields fall back to their defaults
    clean = df.astype(object).where(df.notna(), None)
    return [{k: v for k, v in row.items() if v is not None} for row in clean.to_dict("records")]


def load_transactions_csv(path: PathLike) -> List[ActualTransaction]:
    """
    Load actual transactions exported as CSV (id, description, amount, date[, category]).
    """
    df = pd.read_csv(path, dtype={"id": str, "amount": str})
    require_columns(df, TRANSACTION_COLUMNS)
    return [ActualTransaction.model_validate(row) for row in _rows(df)]


def load_recurring_csv(path: PathLike) -> List[RecurringDefinition]:
    """
    Load recurring definitions exported as CSV
    (id, name, amount, kind, frequency, start_date).
    """
    df = pd.read_csv(path, dtype={"id": str, "amount": str})
    require_columns(df, RECURRING_COLUMNS)
    return [RecurringDefinition.model_validate(row) for row in _rows(df)]


def load_snapshot_json(path: PathLike) -> InMemoryRecordStore:
    """
    Seed an InMemoryRecordStore from a JSON document of the form
    {"<user_id>": {"recurring": [...], "paycheck": {...},
                   "starting_balance": {...}, "transactions": [...]}}.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    store = InMemoryRecordStore()
    for user_id, doc in payload.items():
        store.put_user(
            user_id,
            recurring=doc.get("recurring", []),
            paycheck=doc.get("paycheck"),
            starting_balance=doc.get("starting_balance"),
            transactions=doc.get("transactions", []),
        )
    return store
