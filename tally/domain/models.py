"""Domain type definitions for tally.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in the user's currency as a Decimal
- EntryId: Opaque identifier of a logged spend
- MethodId: UUID string of a payment method
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType

# Money amounts are Decimals so sums never pick up floating point drift
Money = NewType("Money", Decimal)

# Entry ids are uuid4 hex strings, assigned once at creation
EntryId = NewType("EntryId", str)

# Payment method ids are canonical UUID strings
MethodId = NewType("MethodId", str)

ZERO = Money(Decimal("0"))


@dataclass(frozen=True)
class SpendEntry:
    """A single logged expense.

    Timestamps are naive local wall-clock times. Only the note may change
    after creation, and that goes through the store.
    """

    id: EntryId
    timestamp: datetime
    amount: Money
    note: str | None = None
    payment_method_id: MethodId | None = None

    @classmethod
    def create(
        cls,
        amount: Money,
        timestamp: datetime,
        note: str | None = None,
        payment_method_id: MethodId | None = None,
    ) -> "SpendEntry":
        """Create a new entry with a fresh id."""
        return cls(
            id=EntryId(uuid.uuid4().hex),
            timestamp=timestamp,
            amount=amount,
            note=note,
            payment_method_id=payment_method_id,
        )


class PaymentType(str, Enum):
    """Kind of spending channel."""

    CASH = "cash"
    CARD = "card"


@dataclass(frozen=True)
class PaymentMethod:
    """A named spending channel."""

    id: MethodId
    name: str
    color_hex: str
    type: PaymentType
    is_default: bool = False


@dataclass(frozen=True)
class SpeedDialPreset:
    """A one-tap amount bound to a keypad digit."""

    amount: Money
    label: str = ""


@dataclass(frozen=True)
class DayStartConfig:
    """When a ritual day begins. Defaults to midnight."""

    hour: int = 0
    minute: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be in 0..23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute must be in 0..59, got {self.minute}")

    @classmethod
    def clamped(cls, hour: int, minute: int) -> "DayStartConfig":
        """Build a config, pulling out-of-range values into bounds."""
        return cls(hour=min(max(hour, 0), 23), minute=min(max(minute, 0), 59))

    @property
    def minutes(self) -> int:
        """Minutes past midnight at which the day starts."""
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


DEFAULT_CASH = PaymentMethod(
    id=MethodId("00000000-0000-0000-0000-000000000001"),
    name="Cash",
    color_hex="#50C878",
    type=PaymentType.CASH,
    is_default=True,
)

PRESET_COLORS = [
    "#4A90A4",  # Teal
    "#7B68EE",  # Soft Purple
    "#F5A623",  # Warm Orange
    "#50C878",  # Emerald
    "#E8B4B8",  # Blush Pink
    "#6B8E23",  # Olive
    "#87CEEB",  # Sky Blue
    "#DDA0DD",  # Plum
    "#F0E68C",  # Khaki
    "#20B2AA",  # Light Sea Green
    "#CD853F",  # Peru
    "#708090",  # Slate Gray
]
