"""
Pydantic v2 schemas for the Schedule API.

Covers:
- Date availability and generated time slots
- Slot bookings and cancellations
- Schedule recommendations and the busy-period calendar
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from movequote.models import BusyLevel, DemandLevel, SlotType


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class BookingRequest(BaseModel):
    date: dt.date = Field(description="Service date (YYYY-MM-DD)")
    start_time: str = Field(
        pattern=r"^\d{2}:\d{2}$",
        description="Slot start time (HH:MM)",
    )
    promo_code: Optional[str] = Field(
        default=None,
        description="Promo code to count as used once the slot is reserved",
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class AvailabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    available: bool
    reason: Optional[str] = None
    alternative_dates: list[dt.date]


class WeatherImpactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    condition: str
    message: str
    available: bool


class TimeSlotOut(BaseModel):
    """A bookable window with its price multiplier and demand class."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    type: SlotType
    multiplier: Decimal
    demand: DemandLevel
    popular: bool
    factors: list[str]
    weather_impact: Optional[WeatherImpactOut] = None
    travel_time: int
    savings: Optional[int] = Field(
        default=None,
        description="Percentage below the standard price, when discounted",
    )
    available: bool


class BookingOut(BaseModel):
    booking_id: str
    date: dt.date
    start_time: str
    promo_redeemed: bool = False


class ScheduleRecommendationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    time_slot: TimeSlotOut
    reason: str
    priority: int
    savings: Optional[int] = None


class BusyPeriodOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    busy_level: BusyLevel
    available_slots: int
    total_slots: int
