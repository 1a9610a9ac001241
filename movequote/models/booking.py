"""
Booking-side domain types: the items being moved, property access details at
each end of the move, and the enumerations shared by the scheduling and
pricing services.

These are plain immutable values.  Nothing here is persisted; a caller builds
them per booking attempt and throws them away once a quote is produced.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal


class SlotType(str, enum.Enum):
    """Time-of-day bucket of a slot, derived from its start time."""
    EARLY = "early"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    LATE = "late"


class DemandLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Ordering used when two demand signals have to be reconciled
DEMAND_SEVERITY: dict[DemandLevel, int] = {
    DemandLevel.LOW: 0,
    DemandLevel.MEDIUM: 1,
    DemandLevel.HIGH: 2,
}


class Flexibility(str, enum.Enum):
    """How far a customer is willing to move their date."""
    EXACT = "exact"
    ASAP = "asap"
    FLEXIBLE = "flexible"


class TimePreference(str, enum.Enum):
    FAST = "fast"
    ECONOMICAL = "economical"
    PREMIUM = "premium"


class BusyLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class BookingItem:
    """One line item to move, already resolved from the item catalog."""
    id: str
    name: str
    category: str
    volume: Decimal
    quantity: int = 1
    weight: Decimal = Decimal("0")
    fragile: bool = False
    valuable: bool = False

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Item '{self.id}' must have a quantity of at least 1")
        if self.volume < 0 or self.weight < 0:
            raise ValueError(f"Item '{self.id}' cannot have negative volume or weight")

    @property
    def total_volume(self) -> Decimal:
        return self.volume * self.quantity

    @property
    def total_weight(self) -> Decimal:
        return self.weight * self.quantity


@dataclass(frozen=True)
class PropertyAccessDetails:
    """Access conditions at a pickup or dropoff address."""
    floor: int = 0
    has_lift: bool = False
    narrow_access: bool = False
    long_carry: bool = False
