"""
Catalog-side domain types: service tiers and promotional codes.

Service tiers are static.  Promo codes are static except for ``used_count``,
which only moves forward when a booking redeems the code.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class PromoType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_SERVICE = "free_service"


@dataclass(frozen=True)
class ServiceType:
    """A bookable service tier."""
    id: str
    name: str
    description: str
    base_price: Decimal
    price_per_km: Decimal
    max_volume: Decimal
    max_weight: Decimal
    crew_size: int
    vehicle_type: str
    price_per_hour: Optional[Decimal] = None
    included_services: tuple[str, ...] = ()


@dataclass(frozen=True)
class PromoConditions:
    """Eligibility rules attached to a promo code.  ``None`` means unrestricted."""
    first_time_customer: bool = False
    service_types: Optional[frozenset[str]] = None
    minimum_distance: Optional[Decimal] = None
    minimum_volume: Optional[Decimal] = None


@dataclass
class PromoCode:
    code: str
    type: PromoType
    value: Decimal
    description: str
    min_order_value: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    valid_until: Optional[datetime] = None
    usage_limit: Optional[int] = None
    used_count: int = 0
    conditions: PromoConditions = field(default_factory=PromoConditions)

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit
