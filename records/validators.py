"""
Validation of caller input and of the record snapshot before it enters the engine.

Catches problems early:
- Malformed year/month (raised immediately, never defaulted)
- Recurring definitions whose frequency the generator cannot step
- Definitions that can never produce an occurrence (no start date, zero amount)
- Duplicate record ids
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR
from typing import List, Optional, Sequence, Tuple

from core.errors import InputValidationError
from core.schema import ActualTransaction, Frequency, PaycheckStream, RecurringDefinition

_FREQUENCIES = {f.value for f in Frequency}


@dataclass
class ValidationResult:
    """Collects validation errors/warnings for one snapshot."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    # (origin_id, frequency) for every definition the generator would reject
    unsupported: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  x {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ! {w}")
        if not lines:
            lines.append("All checks passed.")
        return "\n".join(lines)


def _as_int(field_name: str, value) -> int:
    if isinstance(value, bool):
        raise InputValidationError(field_name, value, "must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InputValidationError(field_name, value, "must be an integer")


def validate_year(year) -> int:
    y = _as_int("year", year)
    if not MINYEAR <= y <= MAXYEAR:
        raise InputValidationError("year", year, f"must be within {MINYEAR}..{MAXYEAR}")
    return y


def validate_period(year, month) -> Tuple[int, int]:
    """
    Coerce and check a (year, month) request. Raises InputValidationError.
    Numeric strings are accepted ("2025"); floats, bools and junk are not.
    """
    y = validate_year(year)
    m = _as_int("month", month)
    if not 1 <= m <= 12:
        raise InputValidationError("month", month, "must be within 1..12")
    return y, m


def validate_records(
    recurring: Sequence[RecurringDefinition],
    paycheck: Optional[PaycheckStream] = None,
    transactions: Sequence[ActualTransaction] = (),
) -> ValidationResult:
    """
    Run all snapshot checks.
    Returns a ValidationResult with errors (blocking in strict mode) and warnings (informational).
    """
    result = ValidationResult()

    # --- Frequencies ---
    for rec in recurring:
        if rec.frequency not in _FREQUENCIES:
            result.unsupported.append((rec.id, rec.frequency))
            result.errors.append(
                f"Recurring {rec.id!r} ({rec.name}) has unsupported frequency {rec.frequency!r}."
            )
    # an inactive stream is never stepped; a missing frequency falls back to the engine default
    if (
        paycheck is not None
        and paycheck.is_active
        and paycheck.frequency is not None
        and paycheck.frequency not in _FREQUENCIES
    ):
        result.unsupported.append((paycheck.id, paycheck.frequency))
        result.errors.append(f"Paycheck stream has unsupported frequency {paycheck.frequency!r}.")

    # --- Definitions that never fire ---
    for rec in recurring:
        if rec.start_date is None:
            result.warnings.append(f"Recurring {rec.id!r} ({rec.name}) has no start date; never projected.")
        elif rec.amount == 0:
            result.warnings.append(f"Recurring {rec.id!r} ({rec.name}) has a zero amount.")
    if paycheck is not None and not paycheck.is_active:
        result.warnings.append("Paycheck stream has no start date or a zero amount; never projected.")

    # --- Duplicate ids ---
    for label, ids in (
        ("recurring", [r.id for r in recurring]),
        ("transaction", [t.id for t in transactions]),
    ):
        dups = sorted(i for i, n in Counter(ids).items() if n > 1)
        if dups:
            result.warnings.append(f"{len(dups)} duplicate {label} ids found: {dups}")

    return result
