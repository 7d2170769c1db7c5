"""
Core package — record schema, engine configuration, errors, logging and
shared date/money utilities.
No business logic lives here.
"""

from .schema import (
    ActualTransaction,
    EventSource,
    Frequency,
    Kind,
    PaycheckStream,
    RecurringDefinition,
    StartingBalanceRecord,
    frequency_text,
)
from .config import EngineConfig
from .errors import (
    CalendarEngineError,
    ComputationError,
    DataSourceUnavailable,
    InputValidationError,
    UnsupportedFrequencyError,
)
from .utils import (
    normalize_date,
    month_bounds,
    days_in_month,
    to_cents,
    from_cents,
    require_columns,
)

__all__ = [
    "ActualTransaction",
    "EventSource",
    "Frequency",
    "Kind",
    "PaycheckStream",
    "RecurringDefinition",
    "StartingBalanceRecord",
    "frequency_text",
    "EngineConfig",
    "CalendarEngineError",
    "ComputationError",
    "DataSourceUnavailable",
    "InputValidationError",
    "UnsupportedFrequencyError",
    "normalize_date",
    "month_bounds",
    "days_in_month",
    "to_cents",
    "from_cents",
    "require_columns",
]
