"""
Pydantic v2 schemas for the Pricing API.

Covers:
- Quote requests and the itemized breakdown response
- Promo code validation
- Service-tier recommendations and the service-type catalog
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from movequote.models import TimePreference


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class BookingItemIn(BaseModel):
    """An item already resolved from the item catalog."""

    id: str = Field(min_length=1, description="Catalog item identifier")
    name: str = Field(min_length=1)
    category: str = Field(default="general", description="Catalog category tag")
    volume: Decimal = Field(ge=0, description="Volume of one unit in m³")
    quantity: int = Field(default=1, ge=1)
    weight: Decimal = Field(default=Decimal("0"), ge=0, description="Weight of one unit in kg")
    fragile: bool = False
    valuable: bool = False


class PropertyAccessIn(BaseModel):
    floor: int = Field(default=0, ge=0, description="0 is the ground floor")
    has_lift: bool = False
    narrow_access: bool = False
    long_carry: bool = False


class QuoteRequest(BaseModel):
    """Inputs for a full quote.  The slot is looked up from date + start time."""

    items: list[BookingItemIn] = Field(description="Items to move")
    service_type: str = Field(description="Service tier id, e.g. 'man-and-van'")
    distance: Decimal = Field(ge=0, description="Trip distance in km")
    estimated_duration: Decimal = Field(ge=0, description="Estimated job duration in hours")
    service_date: date = Field(description="Service date (YYYY-MM-DD)")
    start_time: time = Field(description="Slot start time (HH:MM)")
    travel_time: int = Field(
        default=0,
        ge=0,
        description="Minutes after opening during which no slot may start",
    )
    pickup_property: PropertyAccessIn = Field(default_factory=PropertyAccessIn)
    dropoff_property: PropertyAccessIn = Field(default_factory=PropertyAccessIn)
    promo_code: Optional[str] = None
    is_first_time_customer: bool = False


class PromoValidateRequest(BaseModel):
    code: str = Field(min_length=1)
    order_value: Decimal = Field(ge=0, description="Order value the discount applies to")
    is_first_time_customer: bool = False
    service_type: Optional[str] = None
    distance: Optional[Decimal] = Field(default=None, ge=0)
    total_volume: Optional[Decimal] = Field(default=None, ge=0)


class RecommendationRequest(BaseModel):
    items: list[BookingItemIn]
    distance: Decimal = Field(ge=0, description="Trip distance in km")
    budget: Optional[Decimal] = Field(default=None, ge=0)
    time_preference: Optional[TimePreference] = None
    help_needed: Optional[bool] = Field(
        default=None,
        description="False for a self-drive move; omitted means help is wanted",
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ServiceTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    base_price: Decimal
    price_per_km: Decimal
    price_per_hour: Optional[Decimal] = None
    included_services: list[str]
    max_volume: Decimal
    max_weight: Decimal
    crew_size: int
    vehicle_type: str


class MultiplierDetailOut(BaseModel):
    """A single pricing multiplier that was applied."""

    model_config = ConfigDict(from_attributes=True)

    rule_name: str
    rule_type: str
    multiplier: Decimal
    reason: str


class ChargeLineOut(BaseModel):
    """A surcharge or a discount line; discounts carry the amount saved."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    amount: Decimal
    reason: str


class PotentialSavingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    amount: Decimal


class UpgradeOptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    service: str
    additional_cost: Decimal
    benefits: list[str]


class QuoteRecommendationsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    suggested_service: Optional[str] = None
    potential_savings: list[PotentialSavingOut]
    upgrade_options: list[UpgradeOptionOut]


class QuoteOut(BaseModel):
    """Itemized quote.  ``subtotal`` is after discounts and before VAT."""

    model_config = ConfigDict(from_attributes=True)

    service_type: str
    base_price: Decimal
    service_price: Decimal
    items_price: Decimal
    distance_price: Decimal
    time_price: Decimal
    combined_multiplier: Decimal
    multiplier_details: list[MultiplierDetailOut]
    surcharges: list[ChargeLineOut]
    discounts: list[ChargeLineOut]
    subtotal: Decimal
    vat_rate: Decimal
    vat: Decimal
    total: Decimal
    recommendations: QuoteRecommendationsOut
    total_volume: Decimal
    chargeable_hours: Decimal
    currency: str
    calculated_at: datetime


class PromoValidationOut(BaseModel):
    valid: bool
    discount: Decimal
    error: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None


class ServiceRecommendationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    service_type: ServiceTypeOut
    score: int
    estimated_price: Decimal
    reasons: list[str]
