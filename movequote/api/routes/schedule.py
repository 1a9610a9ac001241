"""
Schedule API routes
===================

Endpoints for date availability, time slots, bookings and scheduling hints.

  GET    /api/v1/schedule/availability/{service_date}            -- Can this date be booked?
  GET    /api/v1/schedule/slots/{service_date}                   -- Open slots for a date
  POST   /api/v1/schedule/bookings                               -- Reserve a slot
  DELETE /api/v1/schedule/bookings/{service_date}/{start_time}   -- Release a slot
  GET    /api/v1/schedule/recommendations                        -- Suggested slots
  GET    /api/v1/schedule/busy-periods                           -- Occupancy calendar
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from movequote.api.deps import PricingEngineDep, ScheduleServiceDep
from movequote.api.schemas.schedule import (
    AvailabilityOut,
    BookingOut,
    BookingRequest,
    BusyPeriodOut,
    ScheduleRecommendationOut,
    TimeSlotOut,
)
from movequote.models import Flexibility
from movequote.services.scheduleService import SLOT_TAKEN_ERROR

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["Schedule"])

# Longest range the busy-period calendar will compute in one request
MAX_BUSY_PERIOD_DAYS = 62


# ---------------------------------------------------------------------------
# GET /api/v1/schedule/availability/{service_date}
# ---------------------------------------------------------------------------

@router.get(
    "/availability/{service_date}",
    response_model=AvailabilityOut,
    summary="Check whether a date can be booked",
)
async def check_availability(
    service_date: date,
    schedule: ScheduleServiceDep,
) -> AvailabilityOut:
    return AvailabilityOut.model_validate(schedule.check_date_availability(service_date))


# ---------------------------------------------------------------------------
# GET /api/v1/schedule/slots/{service_date}
# ---------------------------------------------------------------------------

@router.get(
    "/slots/{service_date}",
    response_model=list[TimeSlotOut],
    summary="List the open time slots for a date",
)
async def list_slots(
    service_date: date,
    schedule: ScheduleServiceDep,
    travel_time: int = Query(
        default=0,
        ge=0,
        description="Minutes after opening during which no slot may start",
    ),
) -> list[TimeSlotOut]:
    slots = schedule.get_available_time_slots(service_date, travel_time=travel_time)
    return [TimeSlotOut.model_validate(s) for s in slots]


# ---------------------------------------------------------------------------
# POST /api/v1/schedule/bookings
# ---------------------------------------------------------------------------

@router.post(
    "/bookings",
    response_model=BookingOut,
    status_code=status.HTTP_201_CREATED,
    summary="Reserve a time slot",
    description=(
        "Re-validates the date and atomically claims the slot.  A slot that "
        "was taken in the meantime returns 409; any other rejection returns "
        "422.  A promo code, if given, is counted as used once the slot is "
        "reserved."
    ),
)
async def create_booking(
    body: BookingRequest,
    schedule: ScheduleServiceDep,
    engine: PricingEngineDep,
) -> BookingOut:
    result = schedule.book_time_slot(body.date, body.start_time)
    if not result.success:
        raise HTTPException(
            status_code=(
                status.HTTP_409_CONFLICT
                if result.error == SLOT_TAKEN_ERROR
                else status.HTTP_422_UNPROCESSABLE_ENTITY
            ),
            detail=result.error,
        )

    promo_redeemed = False
    if body.promo_code:
        try:
            engine.redeem_promo_code(body.promo_code)
            promo_redeemed = True
        except ValueError as exc:
            logger.warning(
                "Booking %s kept without promo redemption: %s",
                result.booking_id,
                exc,
            )

    return BookingOut(
        booking_id=result.booking_id,
        date=body.date,
        start_time=body.start_time,
        promo_redeemed=promo_redeemed,
    )


# ---------------------------------------------------------------------------
# DELETE /api/v1/schedule/bookings/{service_date}/{start_time}
# ---------------------------------------------------------------------------

@router.delete(
    "/bookings/{service_date}/{start_time}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Release a reserved time slot",
)
async def cancel_booking(
    service_date: date,
    start_time: str,
    schedule: ScheduleServiceDep,
) -> Response:
    if not schedule.cancel_booking(service_date, start_time):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No booking found for {service_date.isoformat()} {start_time}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# GET /api/v1/schedule/recommendations
# ---------------------------------------------------------------------------

@router.get(
    "/recommendations",
    response_model=list[ScheduleRecommendationOut],
    summary="Suggest the best slots in a search window",
)
async def recommend_slots(
    schedule: ScheduleServiceDep,
    start_date: Optional[date] = Query(default=None, description="First day to search; defaults to today"),
    flexibility: Flexibility = Query(default=Flexibility.FLEXIBLE),
    preferred_times: list[str] = Query(default=[], description="Preferred start times (HH:MM)"),
    avoid_weekends: bool = Query(default=False),
    prefer_weekends: bool = Query(default=False),
    max_recommendations: int = Query(default=5, ge=1, le=50),
) -> list[ScheduleRecommendationOut]:
    try:
        recommendations = schedule.get_schedule_recommendations(
            start_date=start_date,
            flexibility=flexibility,
            preferred_times=preferred_times,
            avoid_weekends=avoid_weekends,
            prefer_weekends=prefer_weekends,
            max_recommendations=max_recommendations,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )
    return [ScheduleRecommendationOut.model_validate(r) for r in recommendations]


# ---------------------------------------------------------------------------
# GET /api/v1/schedule/busy-periods
# ---------------------------------------------------------------------------

@router.get(
    "/busy-periods",
    response_model=list[BusyPeriodOut],
    summary="Occupancy level per day for a date range",
)
async def busy_periods(
    schedule: ScheduleServiceDep,
    start_date: date = Query(description="First day (inclusive)"),
    end_date: date = Query(description="Last day (inclusive)"),
) -> list[BusyPeriodOut]:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date",
        )
    if (end_date - start_date).days >= MAX_BUSY_PERIOD_DAYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Date range cannot exceed {MAX_BUSY_PERIOD_DAYS} days",
        )
    periods = schedule.get_busy_periods(start_date, end_date)
    return [BusyPeriodOut.model_validate(p) for p in periods]
