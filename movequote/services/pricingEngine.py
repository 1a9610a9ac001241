"""
Quote Computation Engine.

Turns a set of items, a distance, a duration estimate, a service tier, a
priced time slot and property access details into one itemized quote.

Calculation order:
1. Core charges: base fee + service (tier) charge + volume + distance + time
2. Multipliers, folded into one product and applied to the core charges:
   - service tier (van-only 0.8x ... premium 1.5x)
   - the slot's own multiplier (weekend, peak, popular, time of day, weather)
   - season, from the calendar month only
   - demand, the more severe of weekend-ness and the slot's demand class
3. Surcharges added after multiplication: special items (piano, fragile,
   valuable, heavy) and access difficulty at each end of the move
4. Promo discount on the surcharge-inclusive subtotal, clamped so the
   subtotal never goes negative
5. VAT on the discounted subtotal

All money is ``Decimal`` quantized to pence with ROUND_HALF_UP.  Quotes are
memoized for a few minutes so repeated UI re-renders do not recompute; the
engine never touches reservation state.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from threading import Lock
from typing import Callable, Mapping, Optional, Sequence

from movequote.models import (
    DEMAND_SEVERITY,
    BookingItem,
    DemandLevel,
    PromoCode,
    PromoType,
    PropertyAccessDetails,
    ServiceType,
)
from movequote.services.pricingConfig import DEFAULT_PRICING_CONFIG, PricingConfig, money
from movequote.services.quoteCache import TTLCache
from movequote.services.recommendationEngine import get_service_recommendations
from movequote.services.scheduleService import MULTIPLIER_PRECISION, EnhancedTimeSlot, is_weekend
from movequote.services.serviceCatalog import (
    PREMIUM_SERVICE_ID,
    PREMIUM_UPGRADE_BENEFITS,
    SERVICE_TYPES,
    default_promo_codes,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class PricingError(ValueError):
    """Raised when a quote cannot be produced from the given input."""


class EmptyItemsError(PricingError):
    def __init__(self) -> None:
        super().__init__("No items provided")


class InvalidServiceTypeError(PricingError):
    def __init__(self, service_type: str) -> None:
        self.service_type = service_type
        super().__init__(f"Invalid service type: {service_type}")


# ---------------------------------------------------------------------------
# Request / response DTOs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PricingInput:
    """Everything a quote depends on.

    ``date`` defaults to the time slot's date; when given it must match it.
    """
    items: Sequence[BookingItem]
    service_type: str
    distance: Decimal
    estimated_duration: Decimal
    time_slot: EnhancedTimeSlot
    pickup_property: PropertyAccessDetails = field(default_factory=PropertyAccessDetails)
    dropoff_property: PropertyAccessDetails = field(default_factory=PropertyAccessDetails)
    promo_code: Optional[str] = None
    is_first_time_customer: bool = False
    date: Optional[date] = None

    @property
    def service_date(self) -> date:
        return self.date or self.time_slot.date


@dataclass(frozen=True)
class MultiplierDetail:
    """A single pricing multiplier that was applied."""
    rule_name: str
    rule_type: str
    multiplier: Decimal
    reason: str


@dataclass(frozen=True)
class SurchargeLine:
    name: str
    amount: Decimal
    reason: str


@dataclass(frozen=True)
class DiscountLine:
    """A discount; ``amount`` is the positive amount saved."""
    name: str
    amount: Decimal
    reason: str


@dataclass(frozen=True)
class PromoValidation:
    valid: bool
    discount: Decimal = ZERO
    error: Optional[str] = None
    promo_code: Optional[PromoCode] = None


@dataclass(frozen=True)
class PotentialSaving:
    description: str
    amount: Decimal


@dataclass(frozen=True)
class UpgradeOption:
    service: str
    additional_cost: Decimal
    benefits: tuple[str, ...]


@dataclass(frozen=True)
class QuoteRecommendations:
    suggested_service: Optional[str] = None
    potential_savings: tuple[PotentialSaving, ...] = ()
    upgrade_options: tuple[UpgradeOption, ...] = ()


@dataclass(frozen=True)
class DetailedPricingBreakdown:
    """Itemized quote.  ``subtotal`` is after discounts and before VAT."""
    service_type: str
    base_price: Decimal
    service_price: Decimal
    items_price: Decimal
    distance_price: Decimal
    time_price: Decimal
    combined_multiplier: Decimal
    multiplier_details: tuple[MultiplierDetail, ...]
    surcharges: tuple[SurchargeLine, ...]
    discounts: tuple[DiscountLine, ...]
    subtotal: Decimal
    vat_rate: Decimal
    vat: Decimal
    total: Decimal
    recommendations: QuoteRecommendations
    total_volume: Decimal
    chargeable_hours: Decimal
    currency: str
    calculated_at: datetime


# ---------------------------------------------------------------------------
# Multipliers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QuoteContext:
    """What the multiplier rules look at.  One per calculation."""
    service: ServiceType
    slot: EnhancedTimeSlot
    day: date
    config: PricingConfig


QuoteMultiplier = Callable[[QuoteContext], MultiplierDetail]


def _service_multiplier(ctx: QuoteContext) -> MultiplierDetail:
    value = ctx.config.service_multipliers.get(ctx.service.id, ONE)
    return MultiplierDetail(
        rule_name="Service Tier",
        rule_type="service",
        multiplier=value,
        reason=f"{ctx.service.name} service",
    )


def _time_slot_multiplier(ctx: QuoteContext) -> MultiplierDetail:
    factors = ", ".join(ctx.slot.factors) or "standard"
    return MultiplierDetail(
        rule_name="Time Slot",
        rule_type="time_slot",
        multiplier=ctx.slot.multiplier,
        reason=f"{ctx.slot.type.value.capitalize()} slot at {ctx.slot.start_time.strftime('%H:%M')} ({factors})",
    )


def _seasonal_multiplier(ctx: QuoteContext) -> MultiplierDetail:
    month = ctx.day.month
    if month in ctx.config.peak_months:
        value, season = ctx.config.seasonal_peak, "Peak season"
    elif month in ctx.config.high_months:
        value, season = ctx.config.seasonal_high, "High season"
    else:
        value, season = ctx.config.seasonal_normal, "Normal season"
    return MultiplierDetail(
        rule_name="Seasonal",
        rule_type="seasonal",
        multiplier=value,
        reason=f"{season} ({ctx.day.strftime('%B')})",
    )


def _demand_multiplier(ctx: QuoteContext) -> MultiplierDetail:
    level = ctx.slot.demand
    if is_weekend(ctx.day) and DEMAND_SEVERITY[DemandLevel.HIGH] > DEMAND_SEVERITY[level]:
        level = DemandLevel.HIGH
    return MultiplierDetail(
        rule_name="Demand",
        rule_type="demand",
        multiplier=ctx.config.demand_multipliers[level],
        reason=f"{level.value.capitalize()} demand",
    )


QUOTE_MULTIPLIERS: tuple[QuoteMultiplier, ...] = (
    _service_multiplier,
    _time_slot_multiplier,
    _seasonal_multiplier,
    _demand_multiplier,
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class PricingEngine:
    """Computes quotes and validates promo codes against one catalog."""

    def __init__(
        self,
        config: PricingConfig = DEFAULT_PRICING_CONFIG,
        service_types: Mapping[str, ServiceType] = SERVICE_TYPES,
        promo_codes: Optional[dict[str, PromoCode]] = None,
        clock: Callable[[], datetime] = datetime.now,
        cache_clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.service_types = service_types
        self.promo_codes = promo_codes if promo_codes is not None else default_promo_codes()
        self._clock = clock
        self._cache: TTLCache[DetailedPricingBreakdown] = TTLCache(
            config.cache_ttl_seconds, clock=cache_clock,
        )
        self._promo_lock = Lock()

    # -- Quotes ---------------------------------------------------------------

    def calculate_pricing(self, pricing_input: PricingInput) -> DetailedPricingBreakdown:
        """Compute (or return the memoized) breakdown for ``pricing_input``.

        Raises:
            EmptyItemsError: If no items were given.
            InvalidServiceTypeError: If the service tier is unknown.
            PricingError: On negative distance or duration, or a date that
                does not match the time slot.
        """
        service = self._validate(pricing_input)

        cache_key = self._cache_key(pricing_input)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Quote cache hit: %s", cache_key)
            return cached

        breakdown = self._compute(pricing_input, service)
        self._cache.set(cache_key, breakdown)
        logger.info(
            "Quote computed: service=%s, date=%s, slot=%s, subtotal=%s, total=%s %s",
            service.id,
            pricing_input.service_date.isoformat(),
            pricing_input.time_slot.id,
            breakdown.subtotal,
            breakdown.total,
            breakdown.currency,
        )
        return breakdown

    def _validate(self, pricing_input: PricingInput) -> ServiceType:
        if not pricing_input.items:
            raise EmptyItemsError()
        service = self.service_types.get(pricing_input.service_type)
        if service is None:
            raise InvalidServiceTypeError(pricing_input.service_type)
        if pricing_input.distance < 0:
            raise PricingError("Distance cannot be negative")
        if pricing_input.estimated_duration < 0:
            raise PricingError("Estimated duration cannot be negative")
        if pricing_input.date is not None and pricing_input.date != pricing_input.time_slot.date:
            raise PricingError(
                f"Quote date {pricing_input.date.isoformat()} does not match "
                f"time slot date {pricing_input.time_slot.date.isoformat()}"
            )
        return service

    def _compute(self, pricing_input: PricingInput, service: ServiceType) -> DetailedPricingBreakdown:
        config = self.config
        total_volume = sum((item.total_volume for item in pricing_input.items), ZERO)

        base_fee = money(config.base_fee)
        service_charge = money(service.base_price)
        items_price = self._items_price(total_volume)
        distance_price = self._distance_price(pricing_input.distance, service)
        chargeable_hours = max(pricing_input.estimated_duration, config.minimum_duration_hours)
        time_price = money(chargeable_hours * (service.price_per_hour or config.price_per_hour))

        ctx = QuoteContext(
            service=service,
            slot=pricing_input.time_slot,
            day=pricing_input.service_date,
            config=config,
        )
        details = tuple(rule(ctx) for rule in QUOTE_MULTIPLIERS)
        combined = reduce(lambda acc, detail: acc * detail.multiplier, details, ONE)

        core = base_fee + service_charge + items_price + distance_price + time_price
        surcharges = (
            self._special_item_surcharges(pricing_input.items)
            + self._access_surcharges("Pickup", pricing_input.pickup_property)
            + self._access_surcharges("Dropoff", pricing_input.dropoff_property)
        )
        pre_discount = money(core * combined) + sum((s.amount for s in surcharges), ZERO)

        discounts: tuple[DiscountLine, ...] = ()
        if pricing_input.promo_code:
            validation = self.validate_promo_code(
                pricing_input.promo_code,
                pre_discount,
                is_first_time_customer=pricing_input.is_first_time_customer,
                service_type=service.id,
                distance=pricing_input.distance,
                total_volume=total_volume,
            )
            discount = min(validation.discount, pre_discount)
            if validation.valid and discount > 0:
                discounts = (DiscountLine(
                    name=validation.promo_code.code,
                    amount=discount,
                    reason=validation.promo_code.description,
                ),)
            elif not validation.valid:
                logger.info(
                    "Promo code %s not applied: %s",
                    pricing_input.promo_code,
                    validation.error,
                )

        subtotal = max(ZERO, pre_discount - sum((d.amount for d in discounts), ZERO))
        vat = money(subtotal * config.vat_rate)

        return DetailedPricingBreakdown(
            service_type=service.id,
            base_price=base_fee,
            service_price=service_charge,
            items_price=items_price,
            distance_price=distance_price,
            time_price=time_price,
            combined_multiplier=combined.quantize(MULTIPLIER_PRECISION, rounding=ROUND_HALF_UP),
            multiplier_details=details,
            surcharges=surcharges,
            discounts=discounts,
            subtotal=subtotal,
            vat_rate=config.vat_rate,
            vat=vat,
            total=subtotal + vat,
            recommendations=self._recommendations(pricing_input, service, pre_discount),
            total_volume=total_volume,
            chargeable_hours=chargeable_hours,
            currency=config.currency,
            calculated_at=self._clock(),
        )

    def _items_price(self, total_volume: Decimal) -> Decimal:
        """Volume charge; only the volume above the threshold is discounted."""
        config = self.config
        charge = total_volume * config.price_per_cubic_meter
        excess = max(ZERO, total_volume - config.volume_discount_threshold)
        charge -= excess * config.price_per_cubic_meter * config.volume_discount_rate
        return money(charge)

    def _distance_price(self, distance: Decimal, service: ServiceType) -> Decimal:
        config = self.config
        if distance <= config.free_distance_km:
            return money(ZERO)
        charge = (distance - config.free_distance_km) * service.price_per_km
        if distance > config.long_distance_threshold_km:
            charge += (distance - config.long_distance_threshold_km) * config.long_distance_surcharge_per_km
        return money(charge)

    def _special_item_surcharges(self, items: Sequence[BookingItem]) -> tuple[SurchargeLine, ...]:
        config = self.config
        lines: list[SurchargeLine] = []
        for item in items:
            qty = item.quantity
            reason = f"Special handling for {item.name}"
            if "piano" in item.name.lower():
                lines.append(SurchargeLine("Piano", money(config.piano_surcharge * qty), reason))
            if item.fragile:
                lines.append(SurchargeLine("Fragile Items", money(config.fragile_surcharge * qty), reason))
            if item.valuable:
                lines.append(SurchargeLine("Valuable Items", money(config.valuable_surcharge * qty), reason))
            if item.weight > config.heavy_item_weight_kg:
                lines.append(SurchargeLine("Heavy Items", money(config.heavy_surcharge * qty), reason))
        return tuple(lines)

    def _access_surcharges(self, endpoint: str, access: PropertyAccessDetails) -> tuple[SurchargeLine, ...]:
        config = self.config
        lines: list[SurchargeLine] = []
        if access.floor > 0 and not access.has_lift:
            lines.append(SurchargeLine(
                f"{endpoint} - No Lift",
                money(config.no_lift_per_floor * access.floor),
                f"Access difficulty: floor {access.floor} without a lift",
            ))
        if access.narrow_access:
            lines.append(SurchargeLine(
                f"{endpoint} - Narrow Access",
                money(config.narrow_access_surcharge),
                "Access difficulty: narrow access",
            ))
        if access.long_carry:
            lines.append(SurchargeLine(
                f"{endpoint} - Long Carry",
                money(config.long_carry_surcharge),
                "Access difficulty: long carry to vehicle",
            ))
        return tuple(lines)

    def _recommendations(
        self,
        pricing_input: PricingInput,
        service: ServiceType,
        pre_discount: Decimal,
    ) -> QuoteRecommendations:
        ranked = get_service_recommendations(
            pricing_input.items,
            pricing_input.distance,
            service_types=self.service_types,
            config=self.config,
        )
        current_score = next((r.score for r in ranked if r.service_type.id == service.id), 0)
        best = ranked[0] if ranked else None
        suggested = None
        if best is not None and best.service_type.id != service.id and best.score > current_score:
            suggested = best.service_type.id

        savings: tuple[PotentialSaving, ...] = ()
        if pricing_input.time_slot.savings:
            savings = (PotentialSaving(
                description="Choose off-peak time slot",
                amount=money(pre_discount * pricing_input.time_slot.savings / HUNDRED),
            ),)

        upgrades: tuple[UpgradeOption, ...] = ()
        premium = self.service_types.get(PREMIUM_SERVICE_ID)
        if premium is not None and service.id != PREMIUM_SERVICE_ID:
            upgrades = (UpgradeOption(
                service=PREMIUM_SERVICE_ID,
                additional_cost=money(premium.base_price - service.base_price),
                benefits=PREMIUM_UPGRADE_BENEFITS,
            ),)

        return QuoteRecommendations(
            suggested_service=suggested,
            potential_savings=savings,
            upgrade_options=upgrades,
        )

    def _cache_key(self, pricing_input: PricingInput) -> str:
        slot = pricing_input.time_slot
        return json.dumps(
            {
                "items": [dataclasses.asdict(item) for item in pricing_input.items],
                "service_type": pricing_input.service_type,
                "distance": str(pricing_input.distance),
                "duration": str(pricing_input.estimated_duration),
                "time_slot": slot.id,
                "slot_multiplier": str(slot.multiplier),
                "slot_demand": slot.demand.value,
                "date": pricing_input.service_date.isoformat(),
                "promo_code": (pricing_input.promo_code or "").upper() or None,
                "promo_expired": self._promo_expired(pricing_input.promo_code),
                "first_time": pricing_input.is_first_time_customer,
                "pickup": _access_key(pricing_input.pickup_property),
                "dropoff": _access_key(pricing_input.dropoff_property),
            },
            sort_keys=True,
            default=str,
        )

    def _promo_expired(self, code: Optional[str]) -> bool:
        if not code:
            return False
        promo = self.promo_codes.get(code.strip().upper())
        return promo is not None and promo.valid_until is not None and self._clock() > promo.valid_until

    # -- Promo codes ----------------------------------------------------------

    def validate_promo_code(
        self,
        code: str,
        order_value: Decimal,
        *,
        is_first_time_customer: bool = False,
        service_type: Optional[str] = None,
        distance: Optional[Decimal] = None,
        total_volume: Optional[Decimal] = None,
    ) -> PromoValidation:
        """Check ``code`` against ``order_value`` and the booking context.

        Conditions whose context value is not supplied (service type,
        distance, volume) are not checked.  The returned discount is already
        clamped to the global caps.
        """
        with self._promo_lock:
            promo = self.promo_codes.get(code.strip().upper())
            if promo is None:
                return PromoValidation(valid=False, error="Invalid promo code")

            if promo.min_order_value is not None and order_value < promo.min_order_value:
                return PromoValidation(
                    valid=False,
                    error=f"Minimum order value £{_fmt(promo.min_order_value)} required",
                )

            if promo.valid_until is not None and self._clock() > promo.valid_until:
                return PromoValidation(valid=False, error="Promo code has expired")

            if promo.is_exhausted:
                return PromoValidation(valid=False, error="Promo code usage limit reached")

            conditions = promo.conditions
            if conditions.first_time_customer and not is_first_time_customer:
                return PromoValidation(valid=False, error="This code is for first-time customers only")

            if (
                conditions.service_types is not None
                and service_type is not None
                and service_type not in conditions.service_types
            ):
                return PromoValidation(valid=False, error="This code is not valid for the selected service")

            if (
                conditions.minimum_distance is not None
                and distance is not None
                and distance < conditions.minimum_distance
            ):
                return PromoValidation(
                    valid=False,
                    error=f"Minimum distance of {_fmt(conditions.minimum_distance)}km required",
                )

            if (
                conditions.minimum_volume is not None
                and total_volume is not None
                and total_volume < conditions.minimum_volume
            ):
                return PromoValidation(
                    valid=False,
                    error=f"Minimum volume of {_fmt(conditions.minimum_volume)}m³ required",
                )

            return PromoValidation(
                valid=True,
                discount=self._promo_discount(promo, order_value),
                promo_code=promo,
            )

    def _promo_discount(self, promo: PromoCode, order_value: Decimal) -> Decimal:
        if promo.type == PromoType.PERCENTAGE:
            discount = order_value * promo.value / HUNDRED
            if promo.max_discount is not None:
                discount = min(discount, promo.max_discount)
        else:
            discount = promo.value

        discount = min(discount, self.config.max_discount_amount)
        discount = min(discount, order_value * self.config.max_discount_percentage / HUNDRED)
        return money(max(discount, ZERO))

    def redeem_promo_code(self, code: str) -> PromoCode:
        """Count one use of ``code`` after a confirmed booking.

        Raises:
            ValueError: If the code is unknown or its usage limit is reached.
        """
        with self._promo_lock:
            promo = self.promo_codes.get(code.strip().upper())
            if promo is None:
                raise ValueError(f"Promo code '{code}' not found")
            if promo.is_exhausted:
                raise ValueError(f"Promo code '{promo.code}' usage limit reached")
            promo.used_count += 1

        # Cached quotes may have applied a code that is now exhausted
        self._cache.clear()
        logger.info(
            "Promo code redeemed: code=%s, used=%d, limit=%s",
            promo.code,
            promo.used_count,
            promo.usage_limit,
        )
        return promo


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _access_key(access: PropertyAccessDetails) -> list:
    return [access.floor, access.has_lift, access.narrow_access, access.long_carry]


def _fmt(value: Decimal) -> str:
    """Render a threshold without trailing zeros (``100``, ``12.5``)."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
