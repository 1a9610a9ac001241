"""
Shared pytest fixtures for MoveQuote unit tests.

Every service gets a fixed clock (Monday 2 June 2025, 08:00) and a weather
provider that reports clear skies unless a test says otherwise, so slot
grids, multipliers and prices are fully deterministic.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest

from movequote.integrations.weatherApi import (
    WeatherCondition,
    WeatherInfo,
    clear_weather_overrides,
)
from movequote.models import BookingItem, DemandLevel, SlotType
from movequote.services.pricingEngine import PricingEngine
from movequote.services.reservationStore import ReservationStore
from movequote.services.scheduleService import EnhancedTimeSlot, ScheduleService

# Monday, outside any bank holiday, peak season
NOW = datetime(2025, 6, 2, 8, 0)
TODAY = NOW.date()
TUESDAY = date(2025, 6, 3)
WEDNESDAY = date(2025, 6, 4)
SATURDAY = date(2025, 6, 7)


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMonotonic:
    """Monotonic seconds counter for cache expiry."""

    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_clock() -> FakeMonotonic:
    return FakeMonotonic()


# ---------------------------------------------------------------------------
# Weather
# ---------------------------------------------------------------------------


@pytest.fixture
def weather() -> dict[date, WeatherCondition]:
    """Per-date forecast overrides; any other date is clear."""
    return {}


@pytest.fixture(autouse=True)
def _reset_weather_overrides():
    yield
    clear_weather_overrides()


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def reservation_store() -> ReservationStore:
    return ReservationStore()


@pytest.fixture
def schedule_service(clock, weather, reservation_store) -> ScheduleService:
    def forecast(day: date) -> WeatherInfo:
        return WeatherInfo(date=day, condition=weather.get(day, WeatherCondition.CLEAR))

    return ScheduleService(
        store=reservation_store,
        weather_provider=forecast,
        clock=clock,
    )


@pytest.fixture
def pricing_engine(clock, cache_clock) -> PricingEngine:
    return PricingEngine(clock=clock, cache_clock=cache_clock)


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_items() -> list[BookingItem]:
    """3.5 m³ and 120 kg in total; nothing fragile, valuable or heavy."""
    return [
        BookingItem(
            id="sofa-3",
            name="Three-seat sofa",
            category="furniture",
            volume=Decimal("2.5"),
            weight=Decimal("40"),
        ),
        BookingItem(
            id="box-medium",
            name="Medium box",
            category="boxes",
            volume=Decimal("0.1"),
            quantity=10,
            weight=Decimal("8"),
        ),
    ]


@pytest.fixture
def make_slot() -> Callable[..., EnhancedTimeSlot]:
    """Build a slot directly, bypassing availability rules."""

    def _make(
        day: date = TUESDAY,
        start: time = time(12, 0),
        multiplier: Decimal = Decimal("1.0000"),
        demand: DemandLevel = DemandLevel.MEDIUM,
        slot_type: SlotType = SlotType.AFTERNOON,
        savings: Optional[int] = None,
    ) -> EnhancedTimeSlot:
        return EnhancedTimeSlot(
            id=f"{day.isoformat()}-{start.strftime('%H:%M')}",
            date=day,
            start_time=start,
            end_time=time(start.hour + 2, start.minute),
            type=slot_type,
            multiplier=multiplier,
            demand=demand,
            savings=savings,
        )

    return _make
