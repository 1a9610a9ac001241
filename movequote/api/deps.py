"""
Shared FastAPI dependencies for the MoveQuote backend.

The pricing engine and the schedule service hold process-wide state (the
quote cache, promo usage counters, the reservation store), so each is built
once from ``settings`` and handed to every request.  Tests swap them out via
``app.dependency_overrides``.
"""

from __future__ import annotations

import dataclasses
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from movequote.core.config import settings
from movequote.services.pricingConfig import DEFAULT_PRICING_CONFIG
from movequote.services.pricingEngine import PricingEngine
from movequote.services.scheduleService import DEFAULT_SCHEDULE_CONFIG, ScheduleService


@lru_cache(maxsize=1)
def get_pricing_engine() -> PricingEngine:
    config = dataclasses.replace(
        DEFAULT_PRICING_CONFIG,
        vat_rate=settings.vat_rate,
        currency=settings.currency,
        cache_ttl_seconds=settings.quote_cache_ttl_seconds,
    )
    return PricingEngine(config=config)


@lru_cache(maxsize=1)
def get_schedule_service() -> ScheduleService:
    config = dataclasses.replace(
        DEFAULT_SCHEDULE_CONFIG,
        min_advance_booking_hours=settings.min_advance_booking_hours,
        max_advance_booking_days=settings.max_advance_booking_days,
    )
    return ScheduleService(config=config)


# Annotated type aliases for convenience
PricingEngineDep = Annotated[PricingEngine, Depends(get_pricing_engine)]
ScheduleServiceDep = Annotated[ScheduleService, Depends(get_schedule_service)]
