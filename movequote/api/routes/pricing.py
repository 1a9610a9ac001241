"""
Pricing API routes
==================

Endpoints for quotes, promo codes and service-tier recommendations.

  POST /api/v1/pricing/quote              -- Itemized quote for a slot
  POST /api/v1/pricing/promo/validate     -- Check a promo code
  POST /api/v1/pricing/recommendations    -- Rank service tiers for a load
  GET  /api/v1/pricing/service-types      -- Service-tier catalog
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from movequote.api.deps import PricingEngineDep, ScheduleServiceDep
from movequote.api.schemas.pricing import (
    BookingItemIn,
    PromoValidateRequest,
    PromoValidationOut,
    QuoteOut,
    QuoteRequest,
    RecommendationRequest,
    ServiceRecommendationOut,
    ServiceTypeOut,
)
from movequote.models import BookingItem, PropertyAccessDetails
from movequote.services.pricingEngine import InvalidServiceTypeError, PricingInput
from movequote.services.recommendationEngine import (
    ServiceRequirements,
    get_service_recommendations,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def _to_items(items: list[BookingItemIn]) -> list[BookingItem]:
    return [BookingItem(**item.model_dump()) for item in items]


# ---------------------------------------------------------------------------
# POST /api/v1/pricing/quote
# ---------------------------------------------------------------------------

@router.post(
    "/quote",
    response_model=QuoteOut,
    summary="Compute an itemized quote",
    description=(
        "Looks up the requested slot among the open slots of the service "
        "date, then prices the move: core charges times the service, slot, "
        "seasonal and demand multipliers, plus handling and access "
        "surcharges, less any promo discount, plus VAT."
    ),
)
async def create_quote(
    body: QuoteRequest,
    engine: PricingEngineDep,
    schedule: ScheduleServiceDep,
) -> QuoteOut:
    slots = schedule.get_available_time_slots(body.service_date, travel_time=body.travel_time)
    slot = next((s for s in slots if s.start_time == body.start_time), None)
    if slot is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Time slot {body.start_time.strftime('%H:%M')} is not available "
                f"on {body.service_date.isoformat()}"
            ),
        )

    try:
        breakdown = engine.calculate_pricing(PricingInput(
            items=_to_items(body.items),
            service_type=body.service_type,
            distance=body.distance,
            estimated_duration=body.estimated_duration,
            time_slot=slot,
            pickup_property=PropertyAccessDetails(**body.pickup_property.model_dump()),
            dropoff_property=PropertyAccessDetails(**body.dropoff_property.model_dump()),
            promo_code=body.promo_code,
            is_first_time_customer=body.is_first_time_customer,
        ))
    except InvalidServiceTypeError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    return QuoteOut.model_validate(breakdown)


# ---------------------------------------------------------------------------
# POST /api/v1/pricing/promo/validate
# ---------------------------------------------------------------------------

@router.post(
    "/promo/validate",
    response_model=PromoValidationOut,
    summary="Validate a promo code against an order value",
)
async def validate_promo(
    body: PromoValidateRequest,
    engine: PricingEngineDep,
) -> PromoValidationOut:
    result = engine.validate_promo_code(
        body.code,
        body.order_value,
        is_first_time_customer=body.is_first_time_customer,
        service_type=body.service_type,
        distance=body.distance,
        total_volume=body.total_volume,
    )
    return PromoValidationOut(
        valid=result.valid,
        discount=result.discount,
        error=result.error,
        code=result.promo_code.code if result.promo_code else None,
        description=result.promo_code.description if result.promo_code else None,
    )


# ---------------------------------------------------------------------------
# POST /api/v1/pricing/recommendations
# ---------------------------------------------------------------------------

@router.post(
    "/recommendations",
    response_model=list[ServiceRecommendationOut],
    summary="Rank service tiers for a load and distance",
)
async def recommend_services(
    body: RecommendationRequest,
    engine: PricingEngineDep,
) -> list[ServiceRecommendationOut]:
    if not body.items:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No items provided",
        )

    recommendations = get_service_recommendations(
        _to_items(body.items),
        body.distance,
        ServiceRequirements(
            budget=body.budget,
            time_preference=body.time_preference,
            help_needed=body.help_needed,
        ),
        service_types=engine.service_types,
        config=engine.config,
    )
    return [ServiceRecommendationOut.model_validate(r) for r in recommendations]


# ---------------------------------------------------------------------------
# GET /api/v1/pricing/service-types
# ---------------------------------------------------------------------------

@router.get(
    "/service-types",
    response_model=list[ServiceTypeOut],
    summary="List the bookable service tiers",
)
async def list_service_types(engine: PricingEngineDep) -> list[ServiceTypeOut]:
    return [ServiceTypeOut.model_validate(s) for s in engine.service_types.values()]
