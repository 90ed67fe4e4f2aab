"""Domain models and pure logic for tally.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Ledger arithmetic separated from storage and the command line
"""

from tally.domain.models import (
    DEFAULT_CASH,
    DayStartConfig,
    EntryId,
    MethodId,
    Money,
    PaymentMethod,
    PaymentType,
    SpeedDialPreset,
    SpendEntry,
)

__all__ = [
    "DEFAULT_CASH",
    "DayStartConfig",
    "EntryId",
    "MethodId",
    "Money",
    "PaymentMethod",
    "PaymentType",
    "SpeedDialPreset",
    "SpendEntry",
]
