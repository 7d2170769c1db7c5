"""
Engine configuration.
One frozen object per engine; every build reads it, nothing writes it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .schema import Frequency, frequency_text

MONTH_END_POLICIES = ("clamp", "roll")


@dataclass(frozen=True)
class EngineConfig:
    # raise on an unknown frequency instead of silently skipping the definition
    strict_frequencies: bool = True

    # "clamp": the 31st lands on the last day of short months
    # "roll":  overflow spills into the next month and the drift carries forward
    month_end_policy: Literal["clamp", "roll"] = "clamp"

    pressure_point_limit: int = 3

    paycheck_name: str = "Paycheck"
    # used when the stored paycheck stream carries no frequency
    default_paycheck_frequency: str = Frequency.BIWEEKLY.value

    # re-verify ledger totals and the balance recurrence after every build
    check_invariants: bool = True

    def __post_init__(self):
        if self.month_end_policy not in MONTH_END_POLICIES:
            raise ValueError(f"Unknown month_end_policy: {self.month_end_policy!r}")
        freq = frequency_text(self.default_paycheck_frequency)
        if freq not in {f.value for f in Frequency}:
            raise ValueError(f"Unknown default_paycheck_frequency: {self.default_paycheck_frequency!r}")
        object.__setattr__(self, "default_paycheck_frequency", freq)
