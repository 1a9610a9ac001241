"""
E2E test fixtures for the MoveQuote API.

Provides:
- The real FastAPI app with the pricing engine and schedule service swapped
  for instances on a fixed clock (Monday 2 June 2025, 08:00) with clear
  weather everywhere
- httpx AsyncClient wired via ASGI transport (no network needed)
"""

from __future__ import annotations

from datetime import date
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from movequote.api.deps import get_pricing_engine, get_schedule_service
from movequote.main import app
from movequote.services.pricingEngine import PricingEngine
from movequote.services.scheduleService import ScheduleService

API = "/api/v1"

# Tuesday after the fixed clock; a plain weekday in peak season
SERVICE_DATE = date(2025, 6, 3)

SAMPLE_ITEMS = [
    {"id": "sofa-3", "name": "Three-seat sofa", "category": "furniture", "volume": "2.5", "weight": "40"},
    {"id": "box-medium", "name": "Medium box", "category": "boxes", "volume": "0.1", "quantity": 10,
     "weight": "8"},
]


def quote_body(**overrides) -> dict:
    """Reference quote: 3.5m3, 15km, 0.5h man-and-van at 12:00 on SERVICE_DATE."""
    body = {
        "items": SAMPLE_ITEMS,
        "service_type": "man-and-van",
        "distance": "15",
        "estimated_duration": "0.5",
        "service_date": SERVICE_DATE.isoformat(),
        "start_time": "12:00",
    }
    body.update(overrides)
    return body


@pytest_asyncio.fixture
async def client(
    pricing_engine: PricingEngine,
    schedule_service: ScheduleService,
) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient connected to the app via ASGI transport."""
    app.dependency_overrides[get_pricing_engine] = lambda: pricing_engine
    app.dependency_overrides[get_schedule_service] = lambda: schedule_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
