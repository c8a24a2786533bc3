from datetime import date, datetime

import pytest

from fare_engine.core.exceptions import ValidationError
from fare_engine.fare import FareBreakdown, FareCalculator, compute_fare, count_trip_days
from fare_engine.itinerary import ServiceType
from fare_engine.settings import PricingSettings

PICKUP = datetime(2024, 1, 1, 10, 0)


class TestFareCalculator:
    @pytest.fixture
    def calculator(self):
        return FareCalculator()

    def test_fare_basic_calculation(self, calculator):
        breakdown = calculator.calculate(250.0, 12.0, ServiceType.ONE_WAY, PICKUP, None, 300.0)

        assert isinstance(breakdown, FareBreakdown)
        assert breakdown.trip_day_count == 1
        assert breakdown.effective_distance == pytest.approx(250.0)
        assert breakdown.base_fare == pytest.approx(3000.0)
        assert breakdown.driver_surcharge == pytest.approx(300.0)
        assert breakdown.subtotal == pytest.approx(3300.0)

    def test_round_trip_next_day_drop_is_single_day(self, calculator):
        breakdown = calculator.calculate(
            100.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, date(2024, 1, 2), 0.0
        )

        assert breakdown.trip_day_count == 1
        assert breakdown.effective_distance == pytest.approx(100.0)
        assert breakdown.base_fare == pytest.approx(1000.0)

    def test_round_trip_without_drop_date_doubles_distance(self, calculator):
        breakdown = calculator.calculate(50.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, None, 0.0)

        assert breakdown.effective_distance == pytest.approx(100.0)
        assert breakdown.base_fare == pytest.approx(1000.0)

    def test_round_trip_closed_loop_without_drop_date_doubled(self, calculator):
        breakdown = calculator.calculate(
            120.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, None, 0.0, return_leg_included=True
        )

        assert breakdown.effective_distance == pytest.approx(240.0)
        assert breakdown.base_fare == pytest.approx(2400.0)

    def test_closed_loop_not_doubled_when_disabled(self):
        calculator = FareCalculator(PricingSettings(double_looped_round_trip=False))

        looped = calculator.calculate(
            300.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, None, 0.0, return_leg_included=True
        )
        one_way_leg = calculator.calculate(150.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, None, 0.0)

        assert looped.effective_distance == pytest.approx(300.0)
        assert one_way_leg.effective_distance == pytest.approx(300.0)

    def test_multi_day_round_trip_multiplies_per_day(self, calculator):
        breakdown = calculator.calculate(
            100.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, date(2024, 1, 4), 500.0
        )

        assert breakdown.trip_day_count == 3
        assert breakdown.effective_distance == pytest.approx(300.0)
        assert breakdown.base_fare == pytest.approx(3000.0)
        assert breakdown.subtotal == pytest.approx(3500.0)

    def test_same_day_round_trip_is_one_day(self, calculator):
        breakdown = calculator.calculate(
            80.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, date(2024, 1, 1), 0.0
        )

        assert breakdown.trip_day_count == 1
        assert breakdown.base_fare == pytest.approx(800.0)

    def test_drop_date_ignored_for_one_way(self, calculator):
        breakdown = calculator.calculate(
            100.0, 10.0, ServiceType.ONE_WAY, PICKUP, date(2024, 1, 10), 0.0
        )

        assert breakdown.trip_day_count == 1
        assert breakdown.base_fare == pytest.approx(1000.0)

    def test_base_fare_rounded_to_cents(self, calculator):
        breakdown = calculator.calculate(33.333, 3.0, ServiceType.ONE_WAY, PICKUP, None, 0.0)
        assert breakdown.base_fare == 100.0

    def test_package_price_used_as_base_fare(self, calculator):
        breakdown = calculator.calculate(
            80.0, 12.0, ServiceType.HOURLY_PACKAGE, PICKUP, None, 250.0, package_price=1999.0
        )

        assert breakdown.base_fare == pytest.approx(1999.0)
        assert breakdown.subtotal == pytest.approx(2249.0)

    def test_package_price_ignored_for_distance_services(self, calculator):
        breakdown = calculator.calculate(
            80.0, 12.0, ServiceType.ONE_WAY, PICKUP, None, 0.0, package_price=1999.0
        )
        assert breakdown.base_fare == pytest.approx(960.0)

    def test_round_trip_multiplier_from_settings(self):
        calculator = FareCalculator(PricingSettings(round_trip_multiplier=1.5))
        breakdown = calculator.calculate(100.0, 10.0, ServiceType.ROUND_TRIP, PICKUP, None, 0.0)
        assert breakdown.base_fare == pytest.approx(1500.0)

    def test_fare_zero_distance(self, calculator):
        breakdown = calculator.calculate(0.0, 10.0, ServiceType.ONE_WAY, PICKUP, None, 200.0)

        assert breakdown.base_fare == 0.0
        assert breakdown.subtotal == pytest.approx(200.0)

    def test_fare_negative_distance(self, calculator):
        with pytest.raises(ValidationError):
            calculator.calculate(-5.0, 10.0, ServiceType.ONE_WAY, PICKUP, None, 0.0)

    def test_fare_negative_rate(self, calculator):
        with pytest.raises(ValidationError):
            calculator.calculate(5.0, -10.0, ServiceType.ONE_WAY, PICKUP, None, 0.0)

    def test_fare_negative_surcharge(self, calculator):
        with pytest.raises(ValidationError):
            calculator.calculate(5.0, 10.0, ServiceType.ONE_WAY, PICKUP, None, -1.0)

    def test_fare_deterministic(self, calculator):
        breakdown1 = calculator.calculate(
            123.45, 11.7, ServiceType.ROUND_TRIP, PICKUP, date(2024, 1, 3), 300.0
        )
        breakdown2 = calculator.calculate(
            123.45, 11.7, ServiceType.ROUND_TRIP, PICKUP, date(2024, 1, 3), 300.0
        )

        assert breakdown1 == breakdown2

    @pytest.mark.parametrize("service_type", list(ServiceType))
    def test_fare_monotonic_in_distance_and_rate(self, service_type):
        distances = [0.0, 1.0, 12.5, 100.0, 640.3]
        rates = [0.0, 0.5, 9.99, 14.0]

        for rate in rates:
            fares = [
                compute_fare(d, rate, service_type, PICKUP, None, 100.0).base_fare
                for d in distances
            ]
            assert fares == sorted(fares)

        for distance in distances:
            fares = [
                compute_fare(distance, r, service_type, PICKUP, None, 100.0).base_fare
                for r in rates
            ]
            assert fares == sorted(fares)


@pytest.mark.unit
class TestCountTripDays:
    @pytest.mark.parametrize(
        ("drop_date", "days"),
        [(None, 1), (date(2024, 1, 1), 1), (date(2024, 1, 2), 1), (date(2024, 1, 5), 4)],
    )
    def test_round_trip_days(self, drop_date, days):
        assert count_trip_days(ServiceType.ROUND_TRIP, PICKUP, drop_date) == days

    def test_other_services_always_one_day(self):
        assert count_trip_days(ServiceType.DAY_PACKAGE, PICKUP, date(2024, 1, 9)) == 1
