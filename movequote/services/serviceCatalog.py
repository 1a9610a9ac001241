"""
Static service-tier and promo-code registry.

Service tiers never change at runtime.  Promo codes are handed out as fresh
copies per engine (``default_promo_codes``) because their usage counters move
when bookings redeem them.
"""

from __future__ import annotations

from decimal import Decimal

from movequote.models import PromoCode, PromoConditions, PromoType, ServiceType

PREMIUM_SERVICE_ID = "premium"
SELF_DRIVE_SERVICE_ID = "van-only"

SERVICE_TYPES: dict[str, ServiceType] = {
    "man-and-van": ServiceType(
        id="man-and-van",
        name="Man & Van",
        description="Professional driver with helper for loading/unloading",
        base_price=Decimal("45.00"),
        price_per_km=Decimal("1.50"),
        price_per_hour=Decimal("35.00"),
        included_services=("Loading/unloading", "Basic packing materials", "Furniture protection"),
        max_volume=Decimal("15"),
        max_weight=Decimal("1000"),
        crew_size=2,
        vehicle_type="Transit Van",
    ),
    "van-only": ServiceType(
        id="van-only",
        name="Van Only",
        description="Self-drive van rental for DIY moves",
        base_price=Decimal("35.00"),
        price_per_km=Decimal("1.20"),
        included_services=("Van rental", "Basic insurance", "Fuel included"),
        max_volume=Decimal("12"),
        max_weight=Decimal("800"),
        crew_size=0,
        vehicle_type="Transit Van",
    ),
    "large-van": ServiceType(
        id="large-van",
        name="Large Van Service",
        description="Larger vehicle for bigger moves with 2-person crew",
        base_price=Decimal("65.00"),
        price_per_km=Decimal("2.00"),
        price_per_hour=Decimal("45.00"),
        included_services=("2-person crew", "Loading/unloading", "Furniture protection", "Blankets & straps"),
        max_volume=Decimal("25"),
        max_weight=Decimal("1500"),
        crew_size=2,
        vehicle_type="Luton Van",
    ),
    "multiple-trips": ServiceType(
        id="multiple-trips",
        name="Multiple Trips",
        description="Multiple van trips for large moves",
        base_price=Decimal("55.00"),
        price_per_km=Decimal("1.75"),
        price_per_hour=Decimal("40.00"),
        included_services=("Multiple trips", "2-person crew", "Coordination", "Flexible scheduling"),
        max_volume=Decimal("50"),
        max_weight=Decimal("3000"),
        crew_size=2,
        vehicle_type="Multiple Vans",
    ),
    PREMIUM_SERVICE_ID: ServiceType(
        id=PREMIUM_SERVICE_ID,
        name="Premium Service",
        description="White-glove service with full packing and insurance",
        base_price=Decimal("85.00"),
        price_per_km=Decimal("2.50"),
        price_per_hour=Decimal("60.00"),
        included_services=(
            "Full packing service",
            "Premium insurance",
            "Disassembly/assembly",
            "White-glove handling",
        ),
        max_volume=Decimal("30"),
        max_weight=Decimal("2000"),
        crew_size=3,
        vehicle_type="Premium Van",
    ),
}

PREMIUM_UPGRADE_BENEFITS: tuple[str, ...] = (
    "Full packing service",
    "Premium insurance",
    "White-glove handling",
)


def default_promo_codes() -> dict[str, PromoCode]:
    """Build a fresh promo-code table keyed by upper-case code."""
    codes = [
        PromoCode(
            code="FIRST20",
            type=PromoType.PERCENTAGE,
            value=Decimal("20"),
            description="20% off your first booking",
            max_discount=Decimal("50.00"),
            conditions=PromoConditions(first_time_customer=True),
        ),
        PromoCode(
            code="SAVE15",
            type=PromoType.PERCENTAGE,
            value=Decimal("15"),
            description="15% off any booking",
            min_order_value=Decimal("100.00"),
            max_discount=Decimal("75.00"),
        ),
        PromoCode(
            code="FREEPACKING",
            type=PromoType.FREE_SERVICE,
            value=Decimal("25.00"),
            description="Free packing materials",
            min_order_value=Decimal("80.00"),
        ),
        PromoCode(
            code="STUDENT10",
            type=PromoType.PERCENTAGE,
            value=Decimal("10"),
            description="Student discount",
            max_discount=Decimal("30.00"),
        ),
    ]
    return {promo.code: promo for promo in codes}
