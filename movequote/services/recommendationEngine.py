"""
Service-tier recommendation scoring.

Ranks every registered service tier against a load (volume, weight, fragile
and valuable items), a trip distance and optional customer requirements.

Scoring rules (each tier starts at 0):
- Volume fits capacity: +20, otherwise -30
- Weight fits capacity: +15, otherwise -20
- Long distance (> 50km) on premium: +10
- Fragile items with premium or a crew of 2+: +15
- Valuable items on premium: +10
- Budget covers the estimate: +10, otherwise -15
- Time preference: fast -> crew of 2+ (+10), economical -> self-drive (+15),
  premium -> premium (+20)
- No help needed -> self-drive (+10); help needed -> any crewed tier (+10)

Scores are floored at 0.  The price shown next to each tier is a quick
estimate (base + volume + distance), not a full quote.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from movequote.models import BookingItem, ServiceType, TimePreference
from movequote.services.pricingConfig import DEFAULT_PRICING_CONFIG, PricingConfig, money
from movequote.services.serviceCatalog import (
    PREMIUM_SERVICE_ID,
    SELF_DRIVE_SERVICE_ID,
    SERVICE_TYPES,
)

logger = logging.getLogger(__name__)

LONG_DISTANCE_KM = Decimal("50")


# ---------------------------------------------------------------------------
# DTOs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ServiceRequirements:
    budget: Optional[Decimal] = None
    time_preference: Optional[TimePreference] = None
    help_needed: Optional[bool] = None


@dataclass
class ServiceRecommendation:
    service_type: ServiceType
    score: int
    estimated_price: Decimal
    reasons: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def estimate_service_price(
    service: ServiceType,
    volume: Decimal,
    distance: Decimal,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> Decimal:
    """Quick price for ranking: base + volume + chargeable distance."""
    volume_cost = volume * config.price_per_cubic_meter
    distance_cost = max(Decimal("0"), distance - config.free_distance_km) * config.price_per_km
    return money(service.base_price + volume_cost + distance_cost)


def get_service_recommendations(
    items: Sequence[BookingItem],
    distance: Decimal,
    requirements: Optional[ServiceRequirements] = None,
    service_types: Mapping[str, ServiceType] = SERVICE_TYPES,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> list[ServiceRecommendation]:
    """Score every service tier and return them best first."""
    requirements = requirements or ServiceRequirements()
    total_volume = sum((item.total_volume for item in items), Decimal("0"))
    total_weight = sum((item.total_weight for item in items), Decimal("0"))
    has_fragile = any(item.fragile for item in items)
    has_valuable = any(item.valuable for item in items)

    recommendations = [
        _score_service(
            service,
            total_volume=total_volume,
            total_weight=total_weight,
            has_fragile=has_fragile,
            has_valuable=has_valuable,
            distance=distance,
            requirements=requirements,
            config=config,
        )
        for service in service_types.values()
    ]
    recommendations.sort(key=lambda r: r.score, reverse=True)

    logger.debug(
        "Service ranking for %.2fm3 over %skm: %s",
        total_volume,
        distance,
        ", ".join(f"{r.service_type.id}={r.score}" for r in recommendations),
    )
    return recommendations


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _score_service(
    service: ServiceType,
    *,
    total_volume: Decimal,
    total_weight: Decimal,
    has_fragile: bool,
    has_valuable: bool,
    distance: Decimal,
    requirements: ServiceRequirements,
    config: PricingConfig,
) -> ServiceRecommendation:
    score = 0
    reasons: list[str] = []
    is_premium = service.id == PREMIUM_SERVICE_ID
    is_self_drive = service.id == SELF_DRIVE_SERVICE_ID
    estimated_price = estimate_service_price(service, total_volume, distance, config)

    if total_volume <= service.max_volume:
        score += 20
        reasons.append("Suitable for your volume")
    else:
        score -= 30
        reasons.append("May require multiple trips")

    if total_weight <= service.max_weight:
        score += 15
    else:
        score -= 20

    if distance > LONG_DISTANCE_KM and is_premium:
        score += 10
        reasons.append("Best for long-distance moves")

    if has_fragile and (is_premium or service.crew_size >= 2):
        score += 15
        reasons.append("Professional handling for fragile items")

    if has_valuable and is_premium:
        score += 10
        reasons.append("Premium insurance included")

    if requirements.budget is not None:
        if estimated_price <= requirements.budget:
            score += 10
            reasons.append("Within your budget")
        else:
            score -= 15

    preference = requirements.time_preference
    if preference == TimePreference.FAST and service.crew_size >= 2:
        score += 10
        reasons.append("Faster with professional crew")
    elif preference == TimePreference.ECONOMICAL and is_self_drive:
        score += 15
        reasons.append("Most economical option")
    elif preference == TimePreference.PREMIUM and is_premium:
        score += 20
        reasons.append("Premium service quality")

    if requirements.help_needed is False and is_self_drive:
        score += 10
        reasons.append("Perfect for DIY moves")
    elif requirements.help_needed is not False and service.crew_size > 0:
        score += 10
        reasons.append("Professional help included")

    return ServiceRecommendation(
        service_type=service,
        score=max(0, score),
        estimated_price=estimated_price,
        reasons=reasons,
    )
