"""
Weather API Integration Stub.

Provides the per-date weather signal consumed by the scheduling service.  In
production this would call an external forecast API (Met Office, OpenWeather)
for the service area.  The scheduling service uses it two ways:

- conditions flagged unavailable (heavy rain, snow, storm) close the whole day
  and trigger the alternative-date search;
- available conditions still carry a price multiplier that is folded into
  every slot of that day (light rain: 1.1x for extra item protection).

This is a stub implementation.  It cycles deterministically through
clear / cloudy / light rain by day of year, unless overridden for testing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Weather condition types
# ---------------------------------------------------------------------------

class WeatherCondition(str, Enum):
    """Known weather condition types."""
    CLEAR = "clear"
    CLOUDY = "cloudy"
    LIGHT_RAIN = "light_rain"
    HEAVY_RAIN = "heavy_rain"
    SNOW = "snow"
    STORM = "storm"


@dataclass(frozen=True)
class WeatherImpact:
    """How a condition affects moving on that day."""
    available: bool
    multiplier: Decimal
    message: str = ""


WEATHER_IMPACT: dict[WeatherCondition, WeatherImpact] = {
    WeatherCondition.CLEAR: WeatherImpact(True, Decimal("1.0")),
    WeatherCondition.CLOUDY: WeatherImpact(True, Decimal("1.0")),
    WeatherCondition.LIGHT_RAIN: WeatherImpact(
        True, Decimal("1.1"), "Light rain expected - extra care for items",
    ),
    WeatherCondition.HEAVY_RAIN: WeatherImpact(
        False, Decimal("1.3"), "Heavy rain - moving not recommended",
    ),
    WeatherCondition.SNOW: WeatherImpact(
        False, Decimal("1.5"), "Snow conditions - moving not available",
    ),
    WeatherCondition.STORM: WeatherImpact(
        False, Decimal("2.0"), "Storm warning - moving suspended",
    ),
}

# Rotation used by the stub when no override is set
_STUB_ROTATION: tuple[WeatherCondition, ...] = (
    WeatherCondition.CLEAR,
    WeatherCondition.CLOUDY,
    WeatherCondition.LIGHT_RAIN,
)


# ---------------------------------------------------------------------------
# Response DTO
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeatherInfo:
    """Weather forecast for a single service date."""
    date: date
    condition: WeatherCondition

    @property
    def impact(self) -> WeatherImpact:
        return WEATHER_IMPACT[self.condition]

    @property
    def available(self) -> bool:
        return self.impact.available

    @property
    def multiplier(self) -> Decimal:
        return self.impact.multiplier

    @property
    def message(self) -> str:
        return self.impact.message


# ---------------------------------------------------------------------------
# Stub override for testing
# ---------------------------------------------------------------------------

_override_conditions: dict[date, WeatherCondition] = {}


def set_weather_override(day: date, condition: Optional[WeatherCondition]) -> None:
    """Force the condition returned for ``day``.

    Pass None to clear the override for that day and return to the stub
    rotation.
    """
    if condition is None:
        _override_conditions.pop(day, None)
        logger.info("Weather override cleared for %s", day.isoformat())
        return
    _override_conditions[day] = condition
    logger.info("Weather override set: date=%s, condition=%s", day.isoformat(), condition.value)


def clear_weather_overrides() -> None:
    """Drop every override.  Useful for testing."""
    _override_conditions.clear()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_weather_forecast(day: date) -> WeatherInfo:
    """Get the forecast condition for a service date.

    In production, this would make an HTTP call to a forecast API.
    The stub returns a deterministic rotation unless an override is set.
    """
    override = _override_conditions.get(day)
    if override is not None:
        logger.debug("Returning overridden weather for %s: %s", day.isoformat(), override.value)
        return WeatherInfo(date=day, condition=override)

    condition = _STUB_ROTATION[day.timetuple().tm_yday % len(_STUB_ROTATION)]
    logger.debug(
        "WEATHER STUB: %s for %s. In production, this would call a forecast API.",
        condition.value,
        day.isoformat(),
    )
    return WeatherInfo(date=day, condition=condition)
