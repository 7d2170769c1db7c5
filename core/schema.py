"""
Record schema — the four collections the record store hands to the engine.

Documents are parsed with pydantic so that stored field names (``type``,
``startDate``, ``payAmount``, ``startingBalance``, ``_id``) and typed attribute
names are both accepted. Dates are normalized to calendar days at parse time.
"""

from __future__ import annotations

import datetime as dt
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .utils import normalize_date


class Kind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


def frequency_text(value) -> str:
    """Lowercased frequency text. Enum members contribute their value, not their name."""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


class EventSource(str, Enum):
    RECURRING = "recurring"
    PAYCHECK_STREAM = "paycheckStream"
    TRANSACTION = "transaction"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def stringify_id(cls, v):
        return None if v is None else str(v)


class RecurringDefinition(_Record):
    """A repeating bill or income stream."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    amount: Decimal = Field(ge=0)
    kind: Kind = Field(validation_alias=AliasChoices("kind", "type"))
    # Kept as the raw string: an unknown value must reach the occurrence generator.
    frequency: str
    start_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("start_date", "startDate")
    )

    @field_validator("frequency", mode="before")
    @classmethod
    def clean_frequency(cls, v):
        return frequency_text(v)

    @field_validator("start_date", mode="before")
    @classmethod
    def normalize_start(cls, v):
        return None if v is None else normalize_date(v)


class PaycheckStream(_Record):
    """The user's single paycheck definition; projected like recurring income."""

    id: str = Field(default="paycheck", validation_alias=AliasChoices("id", "_id"))
    amount: Decimal = Field(ge=0, validation_alias=AliasChoices("amount", "payAmount"))
    # None means "use the engine default" (EngineConfig.default_paycheck_frequency).
    frequency: Optional[str] = None
    start_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("start_date", "startDate")
    )

    @field_validator("frequency", mode="before")
    @classmethod
    def clean_frequency(cls, v):
        if v is None or frequency_text(v) == "":
            return None
        return frequency_text(v)

    @field_validator("start_date", mode="before")
    @classmethod
    def normalize_start(cls, v):
        return None if v is None else normalize_date(v)

    @property
    def is_active(self) -> bool:
        return self.start_date is not None and self.amount > 0


class StartingBalanceRecord(_Record):
    amount: Decimal = Field(
        default=Decimal("0"), validation_alias=AliasChoices("amount", "startingBalance")
    )


class ActualTransaction(_Record):
    """A recorded transaction. Negative amount = expense, otherwise income."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    description: str = ""
    amount: Decimal
    category: str = ""
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def normalize_day(cls, v):
        return normalize_date(v)

    @property
    def kind(self) -> Kind:
        return Kind.EXPENSE if self.amount < 0 else Kind.INCOME
