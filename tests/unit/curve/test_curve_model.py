"""Tests for the two-segment bonding curve.

Reference curve: p0=0.001, p1=0.01, L=10000, S=1e9, for which
dy = 20_000_000/11, y1 = 10_980_000_000/11 and b = 109_690_000/11.
"""

from fractions import Fraction

import pytest

from launchpad.curve.model import CurveConfig, linear_segment_supply
from launchpad.errors import CurveConfigError

P0 = Fraction(1, 1000)
P1 = Fraction(1, 100)
L = Fraction(10_000)
S = Fraction(10**9)


class TestDerive:
    """Parameter derivation from (p0, p1, L, S)."""

    def test_reference_parameters(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.base_price == P0
        assert reference_curve.slope == Fraction(9, 10**7)
        assert reference_curve.curve_limit == L
        assert reference_curve.total_supply == S
        assert reference_curve.linear_supply == Fraction(20_000_000, 11)
        assert reference_curve.boundary_supply == Fraction(10_980_000_000, 11)
        assert reference_curve.reserve_offset == Fraction(109_690_000, 11)
        assert reference_curve.k == Fraction(109_800_000, 11) * Fraction(10_980_000_000, 11)

    def test_linear_supply_is_trapezoid(self) -> None:
        """L reserve buys 2L/(p0+p1) tokens on the linear segment."""
        assert linear_segment_supply(P0, P1, L) == 2 * L / (P0 + P1)

    def test_boundary_identity(self, reference_curve: CurveConfig) -> None:
        """p0 + M*L == (b + L) / y1."""
        c = reference_curve
        assert c.base_price + c.slope * c.curve_limit == (c.reserve_offset + c.curve_limit) / c.boundary_supply

    def test_transition_price(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.transition_price == P1

    def test_accepts_strings_and_floats(self) -> None:
        curve = CurveConfig.derive("0.001", 0.01, 10000, "1000000000")
        assert curve.base_price == P0
        assert curve.transition_price == P1

    @pytest.mark.parametrize(
        "p0, p1, limit, supply, message",
        [
            (0, "0.01", 10_000, 10**9, "Starting price"),
            ("-0.001", "0.01", 10_000, 10**9, "Starting price"),
            ("0.01", "0.01", 10_000, 10**9, "Transition price"),
            ("0.01", "0.001", 10_000, 10**9, "Transition price"),
            ("0.001", "0.01", 0, 10**9, "Curve limit"),
            ("0.001", "0.01", 10_000, 1_000_000, "Total supply"),
        ],
    )
    def test_invalid_inputs_rejected(self, p0, p1, limit, supply, message: str) -> None:
        with pytest.raises(CurveConfigError, match=message):
            CurveConfig.derive(p0, p1, limit, supply)

    def test_non_numeric_input_is_config_error(self) -> None:
        with pytest.raises(CurveConfigError, match="Invalid starting price"):
            CurveConfig.derive("abc", "0.01", 10_000, 10**9)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            CurveConfig.derive(0, "0.01", 10_000, 10**9)


class TestPrice:
    """price(x) on both segments."""

    def test_price_at_zero_is_base_price(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.price(0) == P0

    def test_linear_midpoint(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.price(5_000) == Fraction(55, 10_000)

    def test_price_at_limit_is_transition_price(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.price(L) == P1

    def test_continuous_at_limit(self, reference_curve: CurveConfig) -> None:
        """Just past L the constant-product price matches p1."""
        epsilon = Fraction(1, 10**9)
        after = reference_curve.price(L + epsilon)
        assert after > P1
        assert after - P1 < Fraction(1, 10**9)

    def test_constant_product_segment(self, reference_curve: CurveConfig) -> None:
        c = reference_curve
        x = 2 * L
        assert c.price(x) == (c.reserve_offset + x) ** 2 / c.k

    def test_monotonically_increasing(self, reference_curve: CurveConfig) -> None:
        prices = [reference_curve.price(x) for x in range(0, 100_001, 2_500)]
        assert all(b > a for a, b in zip(prices, prices[1:], strict=False))

    def test_negative_purchase_rejected(self, reference_curve: CurveConfig) -> None:
        with pytest.raises(ValueError, match="negative"):
            reference_curve.price(-1)


class TestSupplyAndMarketCap:
    def test_remaining_supply_at_zero(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.remaining_supply(0) == S

    def test_remaining_supply_continuous_at_limit(self, reference_curve: CurveConfig) -> None:
        c = reference_curve
        assert c.remaining_supply(L) == c.boundary_supply
        assert c.k / (c.reserve_offset + L) == c.boundary_supply

    def test_remaining_supply_decreases(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.remaining_supply(3 * L) < reference_curve.remaining_supply(2 * L)

    def test_market_cap_at_base_price(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.market_cap() == Fraction(1_000_000)

    def test_market_cap_at_given_price(self, reference_curve: CurveConfig) -> None:
        assert reference_curve.market_cap("0.01") == Fraction(10_000_000)


class TestFromParameters:
    """Rebuilding a curve from stored (p0, M, L, b, S)."""

    def test_round_trips_derived_curve(self, reference_curve: CurveConfig) -> None:
        c = reference_curve
        rebuilt = CurveConfig.from_parameters(c.base_price, c.slope, c.curve_limit, c.reserve_offset, c.total_supply)
        assert rebuilt == c

    def test_keeps_stored_offset(self, reference_curve: CurveConfig) -> None:
        c = reference_curve
        floored = Fraction(int(c.reserve_offset))
        rebuilt = CurveConfig.from_parameters(c.base_price, c.slope, c.curve_limit, floored, c.total_supply)
        assert rebuilt.reserve_offset == floored
        assert rebuilt.k == (c.curve_limit + floored) * rebuilt.boundary_supply

    def test_rejects_zero_slope(self) -> None:
        with pytest.raises(CurveConfigError, match="Slope"):
            CurveConfig.from_parameters(P0, 0, L, 0, S)

    def test_rejects_supply_below_linear_segment(self) -> None:
        with pytest.raises(CurveConfigError, match="Total supply"):
            CurveConfig.from_parameters(P0, Fraction(9, 10**7), L, 0, 1_000)


class TestSamples:
    """Chart sampling."""

    def test_default_sampling_covers_ten_times_limit(self, reference_curve: CurveConfig) -> None:
        samples = reference_curve.samples()
        points = list(samples)
        assert samples.step == Fraction(200)
        assert len(points) == len(samples) == 501
        assert points[0] == (Fraction(0), P0)
        assert points[50] == (L, P1)
        assert points[-1][0] == 10 * L

    def test_samples_follow_price(self, reference_curve: CurveConfig) -> None:
        for x, price in reference_curve.samples(steps=10, horizon=3):
            assert price == reference_curve.price(x)

    def test_restartable(self, reference_curve: CurveConfig) -> None:
        samples = reference_curve.samples(steps=5, horizon=2)
        assert list(samples) == list(samples)

    def test_horizon_one_stops_at_limit(self, reference_curve: CurveConfig) -> None:
        points = list(reference_curve.samples(steps=4, horizon=1))
        assert [x for x, _ in points] == [0, 2_500, 5_000, 7_500, 10_000]

    @pytest.mark.parametrize("steps, horizon", [(0, 10), (-1, 10), (50, "0.5")])
    def test_invalid_sampling_rejected(self, reference_curve: CurveConfig, steps, horizon) -> None:
        with pytest.raises(ValueError):
            reference_curve.samples(steps=steps, horizon=horizon)
