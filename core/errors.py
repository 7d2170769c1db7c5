"""
Typed exceptions for the calendar engine.

Every class carries a machine-readable ``code`` so callers (an HTTP layer,
a CLI) can branch on type and code instead of parsing messages.

    CalendarEngineError
    +-- InputValidationError        INVALID_PERIOD
    +-- UnsupportedFrequencyError   UNSUPPORTED_FREQUENCY
    +-- DataSourceUnavailable       DATA_SOURCE_UNAVAILABLE
    +-- ComputationError            COMPUTATION_ERROR

DataSourceUnavailable is never raised out of a build: it is recorded on the
projection (``degraded_sources`` / ``warnings``) and the source is defaulted.
"""

from __future__ import annotations

from typing import Optional


class CalendarEngineError(Exception):
    """Base exception for all calendar engine errors."""

    code: str = "CALENDAR_ENGINE_ERROR"


class InputValidationError(CalendarEngineError, ValueError):
    """Malformed year/month supplied by the caller."""

    code: str = "INVALID_PERIOD"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class UnsupportedFrequencyError(CalendarEngineError, ValueError):
    """A recurring definition uses a frequency the generator cannot step."""

    code: str = "UNSUPPORTED_FREQUENCY"

    def __init__(self, frequency: object, origin_id: Optional[str] = None):
        self.frequency = frequency
        self.origin_id = origin_id
        where = f" (definition {origin_id!r})" if origin_id else ""
        super().__init__(f"Unsupported frequency {frequency!r}{where}")


class DataSourceUnavailable(CalendarEngineError):
    """One of the four record-store reads failed."""

    code: str = "DATA_SOURCE_UNAVAILABLE"

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        self.cause = cause
        super().__init__(f"Record source {source!r} unavailable: {cause!r}")


class ComputationError(CalendarEngineError):
    """A ledger invariant failed after the build. Always a bug, never retryable."""

    code: str = "COMPUTATION_ERROR"
