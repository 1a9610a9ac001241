"""
Pricing constants for the quote engine.

Every rate, threshold and cap lives on one frozen ``PricingConfig`` that is
handed to the engine at construction time, so a test (or a deployment) can
swap values without touching shared module state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from movequote.models import DemandLevel

CENTS = Decimal("0.01")

# Per-tier multiplier applied to the core charges
SERVICE_MULTIPLIERS: dict[str, Decimal] = {
    "man-and-van": Decimal("1.0"),
    "van-only": Decimal("0.8"),
    "large-van": Decimal("1.3"),
    "multiple-trips": Decimal("1.2"),
    "premium": Decimal("1.5"),
}

# Months -> season.  Peak: summer and December; high: spring and autumn.
PEAK_MONTHS: frozenset[int] = frozenset({6, 7, 8, 12})
HIGH_MONTHS: frozenset[int] = frozenset({3, 4, 5, 9, 10, 11})

DEMAND_MULTIPLIERS: dict[DemandLevel, Decimal] = {
    DemandLevel.LOW: Decimal("0.95"),
    DemandLevel.MEDIUM: Decimal("1.0"),
    DemandLevel.HIGH: Decimal("1.15"),
}


@dataclass(frozen=True)
class PricingConfig:
    """Every tunable of the quote engine."""

    # Base
    base_fee: Decimal = Decimal("25.00")
    vat_rate: Decimal = Decimal("0.20")
    currency: str = "GBP"

    # Distance
    free_distance_km: Decimal = Decimal("5")
    price_per_km: Decimal = Decimal("1.50")
    long_distance_threshold_km: Decimal = Decimal("50")
    long_distance_surcharge_per_km: Decimal = Decimal("0.25")

    # Volume
    price_per_cubic_meter: Decimal = Decimal("8.00")
    volume_discount_threshold: Decimal = Decimal("10")
    volume_discount_rate: Decimal = Decimal("0.10")

    # Time
    minimum_duration_hours: Decimal = Decimal("2")
    price_per_hour: Decimal = Decimal("35.00")

    # Multipliers
    service_multipliers: dict[str, Decimal] = field(default_factory=lambda: dict(SERVICE_MULTIPLIERS))
    seasonal_peak: Decimal = Decimal("1.2")
    seasonal_high: Decimal = Decimal("1.1")
    seasonal_normal: Decimal = Decimal("1.0")
    peak_months: frozenset[int] = PEAK_MONTHS
    high_months: frozenset[int] = HIGH_MONTHS
    demand_multipliers: dict[DemandLevel, Decimal] = field(default_factory=lambda: dict(DEMAND_MULTIPLIERS))

    # Special item surcharges (per unit)
    piano_surcharge: Decimal = Decimal("50.00")
    fragile_surcharge: Decimal = Decimal("15.00")
    valuable_surcharge: Decimal = Decimal("20.00")
    heavy_surcharge: Decimal = Decimal("10.00")
    heavy_item_weight_kg: Decimal = Decimal("50")

    # Property access surcharges
    no_lift_per_floor: Decimal = Decimal("15.00")
    narrow_access_surcharge: Decimal = Decimal("20.00")
    long_carry_surcharge: Decimal = Decimal("25.00")

    # Global promo caps
    max_discount_percentage: Decimal = Decimal("30")
    max_discount_amount: Decimal = Decimal("100.00")

    # Memoization
    cache_ttl_seconds: int = 300


DEFAULT_PRICING_CONFIG = PricingConfig()


def money(value: Decimal) -> Decimal:
    """Quantize to pence, half-up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
