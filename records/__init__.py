"""
Records — the record-store contract, an in-memory store, file loaders and
snapshot validation.
"""

from .store import InMemoryRecordStore, RecordStore, UserRecords
from .loader import load_recurring_csv, load_snapshot_json, load_transactions_csv
from .validators import ValidationResult, validate_period, validate_records, validate_year

__all__ = [
    "InMemoryRecordStore",
    "RecordStore",
    "UserRecords",
    "load_recurring_csv",
    "load_snapshot_json",
    "load_transactions_csv",
    "ValidationResult",
    "validate_period",
    "validate_records",
    "validate_year",
]
