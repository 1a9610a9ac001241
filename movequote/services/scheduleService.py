"""
Slot Availability & Demand Model.

Decides which days and which time windows can be booked, and how much demand
each window carries:

- Date availability: past dates, minimum notice (2h), maximum horizon
  (30 days), UK bank holidays and unavailable weather are rejected, in that
  order.  Holiday, weather and too-soon rejections come with nearby
  alternative dates.
- Slot generation: the weekday (07:00-20:00) or weekend (08:00-18:00) window
  is walked in steps of slot duration + buffer (2h + 30min).  Reserved slots,
  slots inside the travel-time offset and slots inside the notice window are
  dropped.
- Slot multiplier: product of independent factors (weekend, peak hour,
  popular slot, early / late / evening, weather), each evaluated once against
  the slot's own date and start time.
- Reservations: process-wide, keyed by date, held in a ``ReservationStore``.

Slots are never mutated; every query regenerates the day from scratch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from functools import reduce
from typing import Callable, Iterable, NamedTuple, Optional, Sequence, Union

from movequote.integrations.holidayCalendar import UK_BANK_HOLIDAYS
from movequote.integrations.weatherApi import WeatherInfo, get_weather_forecast
from movequote.models import BusyLevel, DemandLevel, Flexibility, SlotType
from movequote.services.reservationStore import ReservationStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ONE = Decimal("1")

# Slot price factors
WEEKEND_MULTIPLIER = Decimal("1.15")
PEAK_MULTIPLIER = Decimal("1.2")
POPULAR_MULTIPLIER = Decimal("1.1")
EVENING_MULTIPLIER = Decimal("1.05")
EARLY_MULTIPLIER = Decimal("0.95")
LATE_MULTIPLIER = Decimal("0.9")

# Start-time buckets, checked in order; anything outside them is LATE
SLOT_TYPE_BUCKETS: tuple[tuple[time, time, SlotType], ...] = (
    (time(7, 0), time(9, 0), SlotType.EARLY),
    (time(9, 0), time(12, 0), SlotType.MORNING),
    (time(12, 0), time(17, 0), SlotType.AFTERNOON),
    (time(17, 0), time(20, 0), SlotType.EVENING),
)

MULTIPLIER_PRECISION = Decimal("0.0001")

SLOT_TAKEN_ERROR = "Time slot is no longer available"


@dataclass(frozen=True)
class OperatingHours:
    start: time
    end: time


@dataclass(frozen=True)
class ScheduleConfig:
    """Every tunable of the scheduling model."""
    max_advance_booking_days: int = 30
    min_advance_booking_hours: int = 2
    weekday_hours: OperatingHours = OperatingHours(time(7, 0), time(20, 0))
    weekend_hours: OperatingHours = OperatingHours(time(8, 0), time(18, 0))
    slot_duration_minutes: int = 120
    buffer_minutes: int = 30
    max_slots_per_day: int = 8
    peak_windows: tuple[tuple[time, time], ...] = (
        (time(8, 0), time(10, 0)),
        (time(17, 0), time(19, 0)),
    )
    # Mid-morning and mid-afternoon starts on the weekday and weekend grids
    popular_starts: frozenset[time] = frozenset({
        time(9, 30), time(10, 30), time(14, 30), time(15, 30),
    })
    alternative_search_days: int = 14
    alternative_count: int = 3


DEFAULT_SCHEDULE_CONFIG = ScheduleConfig()

SEARCH_DAYS: dict[Flexibility, int] = {
    Flexibility.EXACT: 1,
    Flexibility.ASAP: 7,
    Flexibility.FLEXIBLE: 14,
}


# ---------------------------------------------------------------------------
# Response DTOs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeatherImpactNote:
    """Weather annotation carried by a slot when the forecast affects price."""
    condition: str
    message: str
    available: bool


@dataclass(frozen=True)
class EnhancedTimeSlot:
    """A bookable window on a specific date, priced and demand-classified."""
    id: str
    date: date
    start_time: time
    end_time: time
    type: SlotType
    multiplier: Decimal
    demand: DemandLevel
    popular: bool = False
    factors: tuple[str, ...] = ()
    weather_impact: Optional[WeatherImpactNote] = None
    travel_time: int = 0
    savings: Optional[int] = None
    available: bool = True


@dataclass(frozen=True)
class AvailabilityCheck:
    date: date
    available: bool
    reason: Optional[str] = None
    alternative_dates: tuple[date, ...] = ()


@dataclass(frozen=True)
class BookingResult:
    success: bool
    booking_id: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ScheduleRecommendation:
    date: date
    time_slot: EnhancedTimeSlot
    reason: str
    priority: int
    savings: Optional[int] = None


class _Rejection(NamedTuple):
    reason: str
    offer_alternatives: bool


@dataclass(frozen=True)
class BusyPeriod:
    date: date
    busy_level: BusyLevel
    available_slots: int
    total_slots: int


# ---------------------------------------------------------------------------
# Slot multiplier factors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SlotContext:
    """Everything a slot factor may look at.  Built once per candidate."""
    day: date
    start: time
    slot_type: SlotType
    popular: bool
    weather: WeatherInfo
    config: ScheduleConfig

    @property
    def is_weekend(self) -> bool:
        return is_weekend(self.day)


SlotFactor = Callable[[SlotContext], Decimal]


def _weekend_factor(ctx: SlotContext) -> Decimal:
    return WEEKEND_MULTIPLIER if ctx.is_weekend else ONE


def _peak_factor(ctx: SlotContext) -> Decimal:
    in_peak = any(_in_window(ctx.start, start, end) for start, end in ctx.config.peak_windows)
    return PEAK_MULTIPLIER if in_peak else ONE


def _popular_factor(ctx: SlotContext) -> Decimal:
    return POPULAR_MULTIPLIER if ctx.popular else ONE


def _time_of_day_factor(ctx: SlotContext) -> Decimal:
    if ctx.slot_type == SlotType.EARLY:
        return EARLY_MULTIPLIER
    if ctx.slot_type == SlotType.LATE:
        return LATE_MULTIPLIER
    if ctx.slot_type == SlotType.EVENING:
        return EVENING_MULTIPLIER
    return ONE


def _weather_factor(ctx: SlotContext) -> Decimal:
    return ctx.weather.multiplier


SLOT_FACTORS: tuple[tuple[str, SlotFactor], ...] = (
    ("weekend", _weekend_factor),
    ("peak", _peak_factor),
    ("popular", _popular_factor),
    ("time_of_day", _time_of_day_factor),
    ("weather", _weather_factor),
)


def compute_slot_multiplier(ctx: SlotContext) -> tuple[Decimal, tuple[str, ...]]:
    """Fold every slot factor into one multiplier.

    Returns the multiplier and the names of the factors that moved it away
    from 1.0.
    """
    evaluated = [(name, factor(ctx)) for name, factor in SLOT_FACTORS]
    product = reduce(lambda acc, item: acc * item[1], evaluated, ONE)
    applied = tuple(name for name, value in evaluated if value != ONE)
    return product.quantize(MULTIPLIER_PRECISION, rounding=ROUND_HALF_UP), applied


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def _in_window(t: time, start: time, end: time) -> bool:
    return start <= t < end


def classify_slot_type(start: time) -> SlotType:
    for bucket_start, bucket_end, slot_type in SLOT_TYPE_BUCKETS:
        if _in_window(start, bucket_start, bucket_end):
            return slot_type
    return SlotType.LATE


def _demand_for(slot_type: SlotType, popular: bool) -> DemandLevel:
    if popular:
        return DemandLevel.HIGH
    if slot_type in (SlotType.EARLY, SlotType.LATE):
        return DemandLevel.LOW
    return DemandLevel.MEDIUM


def _savings_for(multiplier: Decimal) -> Optional[int]:
    if multiplier >= ONE:
        return None
    return int(((ONE - multiplier) * 100).quantize(ONE, rounding=ROUND_HALF_UP))


def parse_slot_time(value: Union[str, time]) -> time:
    """Accept ``HH:MM`` strings as well as ``time`` objects."""
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError as exc:
        raise ValueError(f"Invalid slot time '{value}', expected HH:MM") from exc


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def _from_minutes(total: int) -> time:
    return time(total // 60, total % 60)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class ScheduleService:
    """Availability, slot generation, reservations and schedule suggestions."""

    def __init__(
        self,
        config: ScheduleConfig = DEFAULT_SCHEDULE_CONFIG,
        store: Optional[ReservationStore] = None,
        holidays: Iterable[date] = UK_BANK_HOLIDAYS,
        weather_provider: Callable[[date], WeatherInfo] = get_weather_forecast,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self.store = store if store is not None else ReservationStore()
        self._holidays = frozenset(holidays)
        self._weather_provider = weather_provider
        self._clock = clock

    # -- Date availability --------------------------------------------------

    def check_date_availability(self, day: date) -> AvailabilityCheck:
        """Check whether any booking can be taken on ``day``.

        A ``datetime`` is checked against its own time for the notice window;
        a plain ``date`` is checked against the latest slot start of that day.
        """
        now = self._clock()
        target, requested_at = self._split(day)
        rejection = self._rejection(target, requested_at, now)
        if rejection is None:
            return AvailabilityCheck(date=target, available=True)

        alternatives: tuple[date, ...] = ()
        if rejection.offer_alternatives:
            alternatives = self._nearby_available_dates(target, now)

        logger.debug("Date %s unavailable: %s", target.isoformat(), rejection.reason)
        return AvailabilityCheck(
            date=target,
            available=False,
            reason=rejection.reason,
            alternative_dates=alternatives,
        )

    @property
    def _notice_reason(self) -> str:
        return f"Minimum {self.config.min_advance_booking_hours} hours advance booking required"

    def _rejection(
        self,
        target: date,
        requested_at: Optional[datetime],
        now: datetime,
    ) -> Optional[_Rejection]:
        today = now.date()
        if target < today:
            return _Rejection("Date is in the past", offer_alternatives=False)

        if requested_at is None:
            starts = self._slot_starts(target)
            latest = starts[-1] if starts else self._hours_for(target).end
            requested_at = datetime.combine(target, latest)
        if requested_at < now + self._notice:
            return _Rejection(self._notice_reason, offer_alternatives=True)

        if target > today + timedelta(days=self.config.max_advance_booking_days):
            return _Rejection(
                f"Bookings only available up to {self.config.max_advance_booking_days} days in advance",
                offer_alternatives=False,
            )

        if target in self._holidays:
            return _Rejection("Bank holiday - no service available", offer_alternatives=True)

        weather = self._weather_provider(target)
        if not weather.available:
            return _Rejection(
                weather.message or "Weather conditions - moving not available",
                offer_alternatives=True,
            )

        return None

    def _nearby_available_dates(self, target: date, now: datetime) -> tuple[date, ...]:
        """Probe outward day by day (after first, then before) for open dates."""
        found: list[date] = []
        for offset in range(1, self.config.alternative_search_days + 1):
            for candidate in (target + timedelta(days=offset), target - timedelta(days=offset)):
                if len(found) >= self.config.alternative_count:
                    break
                if self._rejection(candidate, None, now) is None:
                    found.append(candidate)
            if len(found) >= self.config.alternative_count:
                break
        return tuple(sorted(found))

    # -- Slots ----------------------------------------------------------------

    def get_available_time_slots(self, day: date, travel_time: int = 0) -> list[EnhancedTimeSlot]:
        """Generate the open slots for ``day``.

        ``travel_time`` is the number of minutes after opening during which no
        slot may start, leaving transit time from a previous job.
        """
        now = self._clock()
        target, _ = self._split(day)
        if self._rejection(target, None, now) is not None:
            return []

        hours = self._hours_for(target)
        reserved = self.store.reserved_on(target)
        weather = self._weather_provider(target)
        earliest_start = _minutes(hours.start) + max(travel_time, 0)
        notice_cutoff = now + self._notice

        slots: list[EnhancedTimeSlot] = []
        for start in self._slot_starts(target):
            if start in reserved:
                continue
            if _minutes(start) < earliest_start:
                continue
            if datetime.combine(target, start) < notice_cutoff:
                continue
            slots.append(self._build_slot(target, start, weather, travel_time))
        return slots

    def _build_slot(
        self,
        day: date,
        start: time,
        weather: WeatherInfo,
        travel_time: int,
    ) -> EnhancedTimeSlot:
        slot_type = classify_slot_type(start)
        popular = start in self.config.popular_starts
        ctx = SlotContext(
            day=day,
            start=start,
            slot_type=slot_type,
            popular=popular,
            weather=weather,
            config=self.config,
        )
        multiplier, factors = compute_slot_multiplier(ctx)

        weather_impact = None
        if weather.message or weather.multiplier != ONE:
            weather_impact = WeatherImpactNote(
                condition=weather.condition.value,
                message=weather.message,
                available=weather.available,
            )

        return EnhancedTimeSlot(
            id=f"{day.isoformat()}-{start.strftime('%H:%M')}",
            date=day,
            start_time=start,
            end_time=_from_minutes(_minutes(start) + self.config.slot_duration_minutes),
            type=slot_type,
            multiplier=multiplier,
            demand=_demand_for(slot_type, popular),
            popular=popular,
            factors=factors,
            weather_impact=weather_impact,
            travel_time=travel_time,
            savings=_savings_for(multiplier),
        )

    def _slot_starts(self, day: date) -> list[time]:
        hours = self._hours_for(day)
        step = self.config.slot_duration_minutes + self.config.buffer_minutes
        current = _minutes(hours.start)
        end = _minutes(hours.end)
        starts: list[time] = []
        while current + self.config.slot_duration_minutes <= end:
            starts.append(_from_minutes(current))
            current += step
        return starts[:self.config.max_slots_per_day]

    def _hours_for(self, day: date) -> OperatingHours:
        return self.config.weekend_hours if is_weekend(day) else self.config.weekday_hours

    @property
    def _notice(self) -> timedelta:
        return timedelta(hours=self.config.min_advance_booking_hours)

    @staticmethod
    def _split(day: date) -> tuple[date, Optional[datetime]]:
        if isinstance(day, datetime):
            return day.date(), day
        return day, None

    # -- Reservations ---------------------------------------------------------

    def book_time_slot(self, day: date, start_time: Union[str, time]) -> BookingResult:
        """Reserve a slot.

        The date is re-validated and the slot claimed atomically, immediately
        before the reservation set changes.
        """
        now = self._clock()
        target, _ = self._split(day)
        try:
            start = parse_slot_time(start_time)
        except ValueError as exc:
            return BookingResult(success=False, error=str(exc))

        rejection = self._rejection(target, None, now)
        if rejection is not None:
            logger.warning(
                "Booking rejected for %s %s: %s",
                target.isoformat(),
                start.strftime("%H:%M"),
                rejection.reason,
            )
            return BookingResult(success=False, error=rejection.reason)

        if start not in self._slot_starts(target):
            return BookingResult(success=False, error="Invalid time slot")

        if datetime.combine(target, start) < now + self._notice:
            return BookingResult(success=False, error=self._notice_reason)

        if not self.store.reserve(target, start):
            logger.warning(
                "Booking conflict: %s %s already reserved",
                target.isoformat(),
                start.strftime("%H:%M"),
            )
            return BookingResult(success=False, error=SLOT_TAKEN_ERROR)

        booking_id = (
            f"booking_{target.isoformat()}_{start.strftime('%H%M')}_"
            f"{int(now.timestamp() * 1000)}"
        )
        logger.info("Slot booked: %s (%s %s)", booking_id, target.isoformat(), start.strftime("%H:%M"))
        return BookingResult(success=True, booking_id=booking_id)

    def cancel_booking(self, day: date, start_time: Union[str, time]) -> bool:
        """Release a reserved slot; False if nothing was reserved or the time is malformed."""
        target, _ = self._split(day)
        try:
            start = parse_slot_time(start_time)
        except ValueError as exc:
            logger.warning("Cancel rejected for %s: %s", target.isoformat(), exc)
            return False
        released = self.store.release(target, start)
        if released:
            logger.info("Booking cancelled: %s %s", target.isoformat(), start.strftime("%H:%M"))
        return released

    # -- Recommendations ------------------------------------------------------

    def get_schedule_recommendations(
        self,
        start_date: Optional[date] = None,
        flexibility: Flexibility = Flexibility.FLEXIBLE,
        preferred_times: Sequence[Union[str, time]] = (),
        avoid_weekends: bool = False,
        prefer_weekends: bool = False,
        max_recommendations: int = 5,
    ) -> list[ScheduleRecommendation]:
        """Score every open slot in the search window and return the best.

        Priority starts at 1: +2 preferred time, +1 discounted slot, +1 popular
        slot (not for ASAP), +3 today / +2 tomorrow for ASAP, -1 weekend
        (unless weekends were asked for), -1 early or late slot.
        """
        today = self._clock().date()
        first_day, _ = self._split(start_date) if start_date is not None else (today, None)
        preferred = {parse_slot_time(t) for t in preferred_times}

        recommendations: list[ScheduleRecommendation] = []
        for offset in range(SEARCH_DAYS[flexibility]):
            day = first_day + timedelta(days=offset)
            weekend = is_weekend(day)
            if avoid_weekends and weekend:
                continue

            for slot in self.get_available_time_slots(day):
                priority = 1
                reason = "Available slot"
                savings = None

                if slot.start_time in preferred:
                    priority += 2
                    reason = "Matches your preferred time"

                if slot.savings:
                    priority += 1
                    savings = slot.savings
                    reason = f"Save {slot.savings}% with off-peak booking"

                if slot.popular and flexibility != Flexibility.ASAP:
                    priority += 1
                    reason = "Popular time slot"

                if flexibility == Flexibility.ASAP:
                    if day == today:
                        priority += 3
                    elif day == today + timedelta(days=1):
                        priority += 2
                    reason = "Earliest available"

                if weekend and not prefer_weekends:
                    priority -= 1

                if slot.type in (SlotType.EARLY, SlotType.LATE):
                    priority -= 1

                recommendations.append(ScheduleRecommendation(
                    date=day,
                    time_slot=slot,
                    reason=reason,
                    priority=priority,
                    savings=savings,
                ))

        recommendations.sort(key=lambda r: r.priority, reverse=True)
        return recommendations[:max_recommendations]

    # -- Calendar -------------------------------------------------------------

    def get_busy_periods(self, start_date: date, end_date: date) -> list[BusyPeriod]:
        """Occupancy per day between ``start_date`` and ``end_date`` inclusive."""
        periods: list[BusyPeriod] = []
        day = start_date
        while day <= end_date:
            total = len(self._slot_starts(day))
            available = len(self.get_available_time_slots(day))
            occupancy = (total - available) / total if total else 1.0
            if occupancy > 0.8:
                level = BusyLevel.HIGH
            elif occupancy > 0.5:
                level = BusyLevel.MEDIUM
            else:
                level = BusyLevel.LOW
            periods.append(BusyPeriod(
                date=day,
                busy_level=level,
                available_slots=available,
                total_slots=total,
            ))
            day += timedelta(days=1)
        return periods
