"""
Unit tests for the Quote Computation Engine.

Tests core charges, the multiplier fold, surcharges, promo codes, VAT,
memoization and the recommendation block of the breakdown.
"""

import dataclasses
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from movequote.models import (
    BookingItem,
    DemandLevel,
    PromoCode,
    PromoConditions,
    PromoType,
    PropertyAccessDetails,
    SlotType,
)
from movequote.services.pricingConfig import money
from movequote.services.pricingEngine import (
    EmptyItemsError,
    InvalidServiceTypeError,
    PricingEngine,
    PricingError,
    PricingInput,
)
from tests.conftest import NOW, SATURDAY, TUESDAY


def _input(items, slot, service_type="man-and-van", distance="15", duration="0.5", **kwargs):
    return PricingInput(
        items=items,
        service_type=service_type,
        distance=Decimal(distance),
        estimated_duration=Decimal(duration),
        time_slot=slot,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:

    def test_empty_items_raises(self, pricing_engine, make_slot):
        with pytest.raises(EmptyItemsError, match="No items provided"):
            pricing_engine.calculate_pricing(_input([], make_slot()))

    def test_unknown_service_type_raises(self, pricing_engine, sample_items, make_slot):
        with pytest.raises(InvalidServiceTypeError, match="Invalid service type: spaceship"):
            pricing_engine.calculate_pricing(_input(sample_items, make_slot(), service_type="spaceship"))

    def test_errors_are_value_errors(self):
        assert issubclass(EmptyItemsError, ValueError)
        assert issubclass(InvalidServiceTypeError, PricingError)

    def test_negative_distance_raises(self, pricing_engine, sample_items, make_slot):
        with pytest.raises(PricingError, match="Distance cannot be negative"):
            pricing_engine.calculate_pricing(_input(sample_items, make_slot(), distance="-1"))

    def test_date_must_match_slot(self, pricing_engine, sample_items, make_slot):
        with pytest.raises(PricingError, match="does not match"):
            pricing_engine.calculate_pricing(
                _input(sample_items, make_slot(day=TUESDAY), date=date(2025, 6, 4))
            )

    def test_matching_date_is_accepted(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), date=TUESDAY))
        assert result.total > 0


# ---------------------------------------------------------------------------
# Core charges
# ---------------------------------------------------------------------------


class TestCoreCharges:

    def test_reference_quote(self, pricing_engine, sample_items, make_slot):
        """3.5m3, 15km, 0.5h man-and-van on a plain June weekday slot."""
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))

        assert result.base_price == Decimal("25.00")
        assert result.service_price == Decimal("45.00")
        assert result.items_price == Decimal("28.00")
        assert result.distance_price == Decimal("15.00")
        assert result.time_price == Decimal("70.00")
        assert result.combined_multiplier == Decimal("1.2000")
        assert result.subtotal == Decimal("219.60")
        assert result.vat == Decimal("43.92")
        assert result.total == Decimal("263.52")
        assert result.currency == "GBP"
        assert result.calculated_at == NOW

    def test_minimum_duration_applies(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), duration="0.5"))
        assert result.chargeable_hours == Decimal("2")
        assert result.time_price == Decimal("70.00")

    def test_longer_duration_uses_tier_hourly_rate(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(
            _input(sample_items, make_slot(), service_type="large-van", duration="3")
        )
        assert result.time_price == Decimal("135.00")

    def test_self_drive_falls_back_to_default_hourly_rate(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), service_type="van-only"))
        assert result.time_price == Decimal("70.00")

    def test_zero_distance_is_free_but_total_positive(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), distance="0"))
        assert result.distance_price == Decimal("0.00")
        assert result.total > 0

    def test_distance_within_free_allowance(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), distance="5"))
        assert result.distance_price == Decimal("0.00")

    def test_long_distance_surcharge(self, pricing_engine, sample_items, make_slot):
        # (60 - 5) * 1.50 + (60 - 50) * 0.25
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), distance="60"))
        assert result.distance_price == Decimal("85.00")

    def test_distance_uses_tier_rate(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(
            _input(sample_items, make_slot(), service_type="premium", distance="15")
        )
        assert result.distance_price == Decimal("25.00")

    def test_items_price_is_monotonic_in_volume(self, pricing_engine):
        volumes = ["0", "1", "5", "9.9", "10", "10.1", "12", "25", "50"]
        prices = [pricing_engine._items_price(Decimal(v)) for v in volumes]
        assert prices == sorted(prices)
        assert len(set(prices)) == len(prices)

    def test_volume_discount_only_applies_above_threshold(self, pricing_engine):
        assert pricing_engine._items_price(Decimal("10")) == Decimal("80.00")
        # 80 + 10 * 8 * 0.9
        assert pricing_engine._items_price(Decimal("20")) == Decimal("152.00")


# ---------------------------------------------------------------------------
# Multipliers
# ---------------------------------------------------------------------------


class TestMultipliers:

    @staticmethod
    def _multiplier(result, rule_type):
        return next(d.multiplier for d in result.multiplier_details if d.rule_type == rule_type)

    def test_all_four_multipliers_listed(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))
        assert [d.rule_type for d in result.multiplier_details] == [
            "service", "time_slot", "seasonal", "demand",
        ]

    @pytest.mark.parametrize("service_type,expected", [
        ("man-and-van", Decimal("1.0")),
        ("van-only", Decimal("0.8")),
        ("large-van", Decimal("1.3")),
        ("multiple-trips", Decimal("1.2")),
        ("premium", Decimal("1.5")),
    ])
    def test_service_multiplier(self, pricing_engine, sample_items, make_slot, service_type, expected):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), service_type=service_type))
        assert self._multiplier(result, "service") == expected

    @pytest.mark.parametrize("day,expected", [
        (date(2026, 1, 13), Decimal("1.0")),
        (date(2026, 4, 14), Decimal("1.1")),
        (date(2025, 7, 15), Decimal("1.2")),
        (date(2025, 10, 14), Decimal("1.1")),
        (date(2025, 12, 16), Decimal("1.2")),
    ])
    def test_seasonal_multiplier_by_month(self, pricing_engine, sample_items, make_slot, day, expected):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(day=day)))
        assert self._multiplier(result, "seasonal") == expected

    def test_seasonal_ignores_weekend(self, pricing_engine, sample_items, make_slot):
        weekday = pricing_engine.calculate_pricing(_input(sample_items, make_slot(day=TUESDAY)))
        weekend = pricing_engine.calculate_pricing(_input(sample_items, make_slot(day=SATURDAY)))
        assert self._multiplier(weekday, "seasonal") == self._multiplier(weekend, "seasonal")

    def test_weekend_raises_demand_to_high(self, pricing_engine, sample_items, make_slot):
        slot = make_slot(day=SATURDAY, demand=DemandLevel.LOW, slot_type=SlotType.EARLY)
        result = pricing_engine.calculate_pricing(_input(sample_items, slot))
        assert self._multiplier(result, "demand") == Decimal("1.15")

    def test_weekday_low_demand_slot_is_discounted(self, pricing_engine, sample_items, make_slot):
        slot = make_slot(start=time(7, 0), demand=DemandLevel.LOW, slot_type=SlotType.EARLY)
        result = pricing_engine.calculate_pricing(_input(sample_items, slot))
        assert self._multiplier(result, "demand") == Decimal("0.95")

    def test_weekday_popular_slot_is_high_demand(self, pricing_engine, sample_items, make_slot):
        slot = make_slot(start=time(14, 30), demand=DemandLevel.HIGH)
        result = pricing_engine.calculate_pricing(_input(sample_items, slot))
        assert self._multiplier(result, "demand") == Decimal("1.15")

    def test_slot_multiplier_is_applied(self, pricing_engine, sample_items, make_slot):
        plain = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))
        pricier = pricing_engine.calculate_pricing(
            _input(sample_items, make_slot(start=time(17, 0), multiplier=Decimal("1.2600")))
        )
        assert self._multiplier(pricier, "time_slot") == Decimal("1.2600")
        assert pricier.subtotal == money(Decimal("183.00") * Decimal("1.2") * Decimal("1.26"))
        assert pricier.subtotal > plain.subtotal


# ---------------------------------------------------------------------------
# Surcharges
# ---------------------------------------------------------------------------


class TestSurcharges:

    def test_special_item_surcharges(self, pricing_engine, make_slot):
        items = [
            BookingItem(id="piano", name="Upright Piano", category="music", volume=Decimal("1.5"),
                        weight=Decimal("200")),
            BookingItem(id="mirror", name="Mirror", category="decor", volume=Decimal("0.2"),
                        quantity=2, fragile=True),
            BookingItem(id="art", name="Painting", category="decor", volume=Decimal("0.1"),
                        valuable=True),
        ]
        result = pricing_engine.calculate_pricing(_input(items, make_slot()))

        lines = {(s.name, s.amount) for s in result.surcharges}
        assert lines == {
            ("Piano", Decimal("50.00")),
            ("Heavy Items", Decimal("10.00")),
            ("Fragile Items", Decimal("30.00")),
            ("Valuable Items", Decimal("20.00")),
        }

    def test_access_surcharges_per_endpoint(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(
            sample_items,
            make_slot(),
            pickup_property=PropertyAccessDetails(floor=3, has_lift=False),
            dropoff_property=PropertyAccessDetails(floor=2, has_lift=True, narrow_access=True, long_carry=True),
        ))

        assert [(s.name, s.amount) for s in result.surcharges] == [
            ("Pickup - No Lift", Decimal("45.00")),
            ("Dropoff - Narrow Access", Decimal("20.00")),
            ("Dropoff - Long Carry", Decimal("25.00")),
        ]

    def test_surcharges_are_added_after_multipliers(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(
            sample_items,
            make_slot(),
            pickup_property=PropertyAccessDetails(narrow_access=True),
        ))
        assert result.subtotal == Decimal("219.60") + Decimal("20.00")

    def test_ground_floor_has_no_lift_surcharge(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(
            sample_items, make_slot(), pickup_property=PropertyAccessDetails(floor=0),
        ))
        assert result.surcharges == ()


# ---------------------------------------------------------------------------
# VAT invariants
# ---------------------------------------------------------------------------


class TestVat:

    @pytest.mark.parametrize("distance,duration,service_type", [
        ("0", "0", "van-only"),
        ("7.3", "2.25", "man-and-van"),
        ("51", "4", "large-van"),
        ("120", "9.5", "premium"),
    ])
    def test_total_is_subtotal_plus_vat(self, pricing_engine, sample_items, make_slot,
                                        distance, duration, service_type):
        result = pricing_engine.calculate_pricing(
            _input(sample_items, make_slot(), service_type=service_type, distance=distance, duration=duration)
        )
        assert result.vat == money(result.subtotal * Decimal("0.20"))
        assert result.total == result.subtotal + result.vat
        assert result.subtotal >= 0


# ---------------------------------------------------------------------------
# Promo codes
# ---------------------------------------------------------------------------


class TestValidatePromoCode:

    def test_unknown_code(self, pricing_engine):
        result = pricing_engine.validate_promo_code("NOPE", Decimal("100"))
        assert result.valid is False
        assert result.error == "Invalid promo code"
        assert result.discount == 0

    def test_lookup_is_case_insensitive(self, pricing_engine):
        result = pricing_engine.validate_promo_code("student10", Decimal("100"))
        assert result.valid is True
        assert result.promo_code.code == "STUDENT10"

    def test_first_time_only_code_rejected_for_returning_customer(self, pricing_engine):
        result = pricing_engine.validate_promo_code("FIRST20", Decimal("100"), is_first_time_customer=False)
        assert result.valid is False
        assert result.error == "This code is for first-time customers only"

    def test_first_time_only_code_accepted_for_new_customer(self, pricing_engine):
        result = pricing_engine.validate_promo_code("FIRST20", Decimal("100"), is_first_time_customer=True)
        assert result.valid is True
        assert result.discount == Decimal("20.00")

    def test_minimum_order_value(self, pricing_engine):
        result = pricing_engine.validate_promo_code("SAVE15", Decimal("50"))
        assert result.error == "Minimum order value £100 required"

    def test_minimum_order_checked_before_first_time(self, pricing_engine):
        pricing_engine.promo_codes["WELCOME"] = PromoCode(
            code="WELCOME",
            type=PromoType.FIXED,
            value=Decimal("10"),
            description="Welcome",
            min_order_value=Decimal("60"),
            conditions=PromoConditions(first_time_customer=True),
        )
        result = pricing_engine.validate_promo_code("WELCOME", Decimal("20"))
        assert result.error == "Minimum order value £60 required"

    def test_expired_code(self, pricing_engine):
        pricing_engine.promo_codes["OLD"] = PromoCode(
            code="OLD",
            type=PromoType.FIXED,
            value=Decimal("10"),
            description="Expired",
            valid_until=datetime(2025, 1, 1),
        )
        result = pricing_engine.validate_promo_code("OLD", Decimal("100"))
        assert result.error == "Promo code has expired"

    def test_usage_limit(self, pricing_engine):
        pricing_engine.promo_codes["ONCE"] = PromoCode(
            code="ONCE",
            type=PromoType.FIXED,
            value=Decimal("10"),
            description="Single use",
            usage_limit=1,
        )
        assert pricing_engine.validate_promo_code("ONCE", Decimal("100")).valid is True

        pricing_engine.redeem_promo_code("ONCE")

        result = pricing_engine.validate_promo_code("ONCE", Decimal("100"))
        assert result.error == "Promo code usage limit reached"

    def test_service_type_condition(self, pricing_engine):
        pricing_engine.promo_codes["PREMIUMONLY"] = PromoCode(
            code="PREMIUMONLY",
            type=PromoType.FIXED,
            value=Decimal("10"),
            description="Premium only",
            conditions=PromoConditions(service_types=frozenset({"premium"})),
        )
        rejected = pricing_engine.validate_promo_code("PREMIUMONLY", Decimal("100"), service_type="van-only")
        accepted = pricing_engine.validate_promo_code("PREMIUMONLY", Decimal("100"), service_type="premium")
        assert rejected.error == "This code is not valid for the selected service"
        assert accepted.valid is True

    def test_minimum_distance_and_volume(self, pricing_engine):
        pricing_engine.promo_codes["FARBIG"] = PromoCode(
            code="FARBIG",
            type=PromoType.FIXED,
            value=Decimal("10"),
            description="Long big moves",
            conditions=PromoConditions(minimum_distance=Decimal("30"), minimum_volume=Decimal("12.5")),
        )
        too_short = pricing_engine.validate_promo_code("FARBIG", Decimal("100"), distance=Decimal("10"))
        too_small = pricing_engine.validate_promo_code(
            "FARBIG", Decimal("100"), distance=Decimal("40"), total_volume=Decimal("5"),
        )
        assert too_short.error == "Minimum distance of 30km required"
        assert too_small.error == "Minimum volume of 12.5m³ required"

    def test_percentage_discount_capped_by_code(self, pricing_engine):
        # 10% of 250 = 25, code cap 30, global 30% cap 75
        assert pricing_engine.validate_promo_code("STUDENT10", Decimal("250")).discount == Decimal("25.00")
        # 10% of 1000 = 100, code cap 30
        assert pricing_engine.validate_promo_code("STUDENT10", Decimal("1000")).discount == Decimal("30.00")

    def test_free_service_capped_at_thirty_percent(self, pricing_engine):
        # 25 credit, but 30% of 80 is 24
        result = pricing_engine.validate_promo_code("FREEPACKING", Decimal("80"))
        assert result.discount == Decimal("24.00")

    def test_fixed_discount_capped_at_global_amount(self, pricing_engine):
        pricing_engine.promo_codes["BIG"] = PromoCode(
            code="BIG", type=PromoType.FIXED, value=Decimal("200"), description="Big",
        )
        assert pricing_engine.validate_promo_code("BIG", Decimal("1000")).discount == Decimal("100.00")


class TestRedeemPromoCode:

    def test_increments_used_count(self, pricing_engine):
        promo = pricing_engine.redeem_promo_code("save15")
        assert promo.used_count == 1

    def test_unknown_code_raises(self, pricing_engine):
        with pytest.raises(ValueError, match="not found"):
            pricing_engine.redeem_promo_code("NOPE")

    def test_exhausted_code_raises(self, pricing_engine):
        pricing_engine.promo_codes["ONCE"] = PromoCode(
            code="ONCE", type=PromoType.FIXED, value=Decimal("5"), description="x", usage_limit=1,
        )
        pricing_engine.redeem_promo_code("ONCE")
        with pytest.raises(ValueError, match="usage limit reached"):
            pricing_engine.redeem_promo_code("ONCE")

    def test_engines_do_not_share_counters(self, pricing_engine):
        pricing_engine.redeem_promo_code("SAVE15")
        assert PricingEngine().promo_codes["SAVE15"].used_count == 0


class TestPromoInQuote:

    def test_first_time_discount_applied(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(
            sample_items, make_slot(), promo_code="FIRST20", is_first_time_customer=True,
        ))
        assert len(result.discounts) == 1
        assert result.discounts[0].name == "FIRST20"
        assert result.discounts[0].amount == Decimal("43.92")
        assert result.subtotal == Decimal("175.68")
        assert result.vat == Decimal("35.14")
        assert result.total == Decimal("210.82")

    def test_ineligible_code_is_ignored(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), promo_code="FIRST20"))
        assert result.discounts == ()
        assert result.subtotal == Decimal("219.60")

    def test_discount_never_exceeds_subtotal(self, clock, cache_clock, sample_items, make_slot):
        engine = PricingEngine(clock=clock, cache_clock=cache_clock)
        engine.promo_codes["ALL"] = PromoCode(
            code="ALL", type=PromoType.FIXED, value=Decimal("5000"), description="Everything",
        )
        result = engine.calculate_pricing(_input(sample_items, make_slot(), promo_code="ALL"))
        assert result.subtotal >= 0
        assert result.discounts[0].amount <= Decimal("219.60")


# ---------------------------------------------------------------------------
# Memoization
# ---------------------------------------------------------------------------


class TestQuoteCache:

    def test_repeat_call_returns_cached_breakdown(self, pricing_engine, sample_items, make_slot):
        pricing_input = _input(sample_items, make_slot())
        first = pricing_engine.calculate_pricing(pricing_input)
        second = pricing_engine.calculate_pricing(pricing_input)
        assert second is first

    def test_cached_and_fresh_results_agree(self, pricing_engine, clock, sample_items, make_slot):
        pricing_input = _input(sample_items, make_slot())
        cached = pricing_engine.calculate_pricing(pricing_input)
        cached = pricing_engine.calculate_pricing(pricing_input)
        fresh = PricingEngine(clock=clock).calculate_pricing(pricing_input)
        assert cached == fresh

    def test_entry_expires_after_ttl(self, pricing_engine, cache_clock, sample_items, make_slot):
        pricing_input = _input(sample_items, make_slot())
        first = pricing_engine.calculate_pricing(pricing_input)

        cache_clock.advance(299)
        assert pricing_engine.calculate_pricing(pricing_input) is first

        cache_clock.advance(1)
        refreshed = pricing_engine.calculate_pricing(pricing_input)
        assert refreshed is not first
        assert refreshed == first

    def test_different_inputs_do_not_collide(self, pricing_engine, sample_items, make_slot):
        near = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), distance="10"))
        far = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), distance="40"))
        assert near.total != far.total

    def test_access_details_are_part_of_key(self, pricing_engine, sample_items, make_slot):
        plain = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))
        harder = pricing_engine.calculate_pricing(_input(
            sample_items, make_slot(), pickup_property=PropertyAccessDetails(long_carry=True),
        ))
        assert harder.subtotal == plain.subtotal + Decimal("25.00")

    def test_item_volume_is_part_of_key(self, pricing_engine, make_slot):
        def sofa(volume):
            return [BookingItem(id="sofa-3", name="Three-seat sofa", category="furniture",
                                volume=Decimal(volume))]

        small = pricing_engine.calculate_pricing(_input(sofa("2"), make_slot()))
        big = pricing_engine.calculate_pricing(_input(sofa("20"), make_slot()))
        assert small.items_price == Decimal("16.00")
        # 20 * 8.00, less 10% on the 10 m³ above the threshold
        assert big.items_price == Decimal("152.00")
        assert big.total > small.total

    def test_item_flags_are_part_of_key(self, pricing_engine, make_slot):
        plain = BookingItem(id="mirror", name="Mirror", category="decor", volume=Decimal("0.2"))
        fragile = dataclasses.replace(plain, fragile=True)

        first = pricing_engine.calculate_pricing(_input([plain], make_slot()))
        second = pricing_engine.calculate_pricing(_input([fragile], make_slot()))
        assert first.surcharges == ()
        assert [(s.name, s.amount) for s in second.surcharges] == [("Fragile Items", Decimal("15.00"))]

    def test_promo_expiry_is_part_of_key(self, pricing_engine, clock, sample_items, make_slot):
        pricing_engine.promo_codes["FLASH"] = PromoCode(
            code="FLASH",
            type=PromoType.FIXED,
            value=Decimal("10"),
            description="Flash sale",
            valid_until=NOW + timedelta(minutes=1),
        )
        pricing_input = _input(sample_items, make_slot(), promo_code="FLASH")
        assert pricing_engine.calculate_pricing(pricing_input).discounts[0].amount == Decimal("10.00")

        clock.advance(minutes=2)
        assert pricing_engine.calculate_pricing(pricing_input).discounts == ()

    def test_redemption_clears_cache(self, pricing_engine, sample_items, make_slot):
        pricing_input = _input(sample_items, make_slot())
        first = pricing_engine.calculate_pricing(pricing_input)
        pricing_engine.redeem_promo_code("SAVE15")
        assert pricing_engine.calculate_pricing(pricing_input) is not first


# ---------------------------------------------------------------------------
# Recommendations block
# ---------------------------------------------------------------------------


class TestQuoteRecommendations:

    def test_no_suggestion_when_requested_tier_ranks_first(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))
        assert result.recommendations.suggested_service is None

    def test_suggests_better_tier(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), service_type="van-only"))
        assert result.recommendations.suggested_service == "man-and-van"

    def test_premium_upgrade_offered(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))
        (upgrade,) = result.recommendations.upgrade_options
        assert upgrade.service == "premium"
        assert upgrade.additional_cost == Decimal("40.00")
        assert "Premium insurance" in upgrade.benefits

    def test_no_upgrade_from_premium(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot(), service_type="premium"))
        assert result.recommendations.upgrade_options == ()

    def test_off_peak_savings_reported(self, pricing_engine, sample_items, make_slot):
        slot = make_slot(
            start=time(7, 0),
            multiplier=Decimal("0.9500"),
            demand=DemandLevel.LOW,
            slot_type=SlotType.EARLY,
            savings=5,
        )
        result = pricing_engine.calculate_pricing(_input(sample_items, slot))
        (saving,) = result.recommendations.potential_savings
        assert saving.description == "Choose off-peak time slot"
        assert saving.amount == money(result.subtotal * Decimal("5") / Decimal("100"))

    def test_no_savings_without_discounted_slot(self, pricing_engine, sample_items, make_slot):
        result = pricing_engine.calculate_pricing(_input(sample_items, make_slot()))
        assert result.recommendations.potential_savings == ()
