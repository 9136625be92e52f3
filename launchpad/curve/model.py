"""Two-segment bonding curve: linear up to the curve limit, then constant product.

For cumulative reserve-token purchases ``x``:

- ``0 <= x <= L``: ``price(x) = p0 + M * x``
- ``x > L``: with ``vx = b + x`` the curve holds ``vx * y(x) = K``, so
  ``price(x) = vx / y(x) = vx**2 / K``

Parameters are derived from ``(p0, p1, L, S)``:

- ``M = (p1 - p0) / L``
- ``dy = 2 * L / (p0 + p1)`` launch tokens sold over the linear segment
  (``L`` is the trapezoid under the linear price from 0 to ``L``)
- ``y1 = S - dy`` launch tokens left for the constant-product segment
- ``b = p1 * y1 - L`` so that ``(b + L) / y1 == p1`` at the boundary
- ``K = (L + b) * y1``

Everything is exact ``Fraction`` arithmetic; rounding happens only when a raw
integer is emitted (see ``launchpad.curve.launch``).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from fractions import Fraction

from launchpad.errors import CurveConfigError
from launchpad.math.fixed_point import HumanValue, to_fraction


def linear_segment_supply(base_price: Fraction, transition_price: Fraction, curve_limit: Fraction) -> Fraction:
    """Launch tokens sold while cumulative reserve goes from 0 to curve_limit."""
    return 2 * curve_limit / (base_price + transition_price)


@dataclass(frozen=True)
class CurveConfig:
    """Immutable bonding-curve parameters (human, decimal-adjusted units).

    Attributes:
        base_price: p0, reserve units per launch token at zero purchases
        slope: M, price increase per reserve unit on the linear segment
        curve_limit: L, cumulative reserve at the linear/constant-product switch
        reserve_offset: b, virtual reserve added on the constant-product segment
        total_supply: S, launch-token supply the curve was sized for
        linear_supply: dy, launch tokens consumed by the linear segment
        boundary_supply: y1, launch tokens remaining at x = L
        k: constant product of the second segment
    """

    base_price: Fraction
    slope: Fraction
    curve_limit: Fraction
    reserve_offset: Fraction
    total_supply: Fraction
    linear_supply: Fraction
    boundary_supply: Fraction
    k: Fraction

    @classmethod
    def derive(
        cls,
        base_price: HumanValue,
        transition_price: HumanValue,
        curve_limit: HumanValue,
        total_supply: HumanValue,
    ) -> CurveConfig:
        """Derive curve parameters from launch inputs.

        Raises:
            CurveConfigError: If p0 <= 0, p1 <= p0, L <= 0 or S <= dy
        """
        p0 = _as_fraction("starting price", base_price)
        p1 = _as_fraction("transition price", transition_price)
        limit = _as_fraction("curve limit", curve_limit)
        supply = _as_fraction("total supply", total_supply)

        if p0 <= 0:
            raise CurveConfigError(f"Starting price must be positive, got {p0}")
        if p1 <= p0:
            raise CurveConfigError(
                f"Transition price ({p1}) must be greater than starting price ({p0})"
            )
        if limit <= 0:
            raise CurveConfigError(f"Curve limit must be positive, got {limit}")

        dy = linear_segment_supply(p0, p1, limit)
        if supply <= dy:
            raise CurveConfigError(
                f"Total supply ({supply}) must exceed the {dy} tokens sold on the linear segment"
            )

        y1 = supply - dy
        offset = p1 * y1 - limit
        return cls(
            base_price=p0,
            slope=(p1 - p0) / limit,
            curve_limit=limit,
            reserve_offset=offset,
            total_supply=supply,
            linear_supply=dy,
            boundary_supply=y1,
            k=(limit + offset) * y1,
        )

    @classmethod
    def from_parameters(
        cls,
        base_price: HumanValue,
        slope: HumanValue,
        curve_limit: HumanValue,
        reserve_offset: HumanValue,
        total_supply: HumanValue,
    ) -> CurveConfig:
        """Rebuild a curve from stored parameters (e.g. read back from a pool).

        The stored reserve offset is used as-is rather than re-derived, so
        on-chain rounding is preserved.

        Raises:
            CurveConfigError: If the stored parameters do not form a valid curve
        """
        p0 = _as_fraction("base price", base_price)
        m = _as_fraction("slope", slope)
        limit = _as_fraction("curve limit", curve_limit)
        offset = _as_fraction("reserve offset", reserve_offset)
        supply = _as_fraction("total supply", total_supply)

        if p0 <= 0:
            raise CurveConfigError(f"Base price must be positive, got {p0}")
        if limit <= 0:
            raise CurveConfigError(f"Curve limit must be positive, got {limit}")
        if m <= 0:
            raise CurveConfigError(f"Slope must be positive, got {m}")

        dy = linear_segment_supply(p0, p0 + m * limit, limit)
        y1 = supply - dy
        if y1 <= 0:
            raise CurveConfigError(
                f"Total supply ({supply}) must exceed the {dy} tokens sold on the linear segment"
            )
        if limit + offset <= 0:
            raise CurveConfigError(f"Reserve offset {offset} leaves no virtual reserve at the limit")

        return cls(
            base_price=p0,
            slope=m,
            curve_limit=limit,
            reserve_offset=offset,
            total_supply=supply,
            linear_supply=dy,
            boundary_supply=y1,
            k=(limit + offset) * y1,
        )

    @property
    def transition_price(self) -> Fraction:
        """p1, the price at x = L."""
        return self.base_price + self.slope * self.curve_limit

    def price(self, x: HumanValue) -> Fraction:
        """Price after ``x`` cumulative reserve-token purchases.

        Raises:
            ValueError: If x is negative
        """
        amount = to_fraction(x)
        if amount < 0:
            raise ValueError(f"Cumulative purchase cannot be negative: {x}")
        if amount <= self.curve_limit:
            return self.base_price + self.slope * amount
        vx = self.reserve_offset + amount
        return vx * vx / self.k

    def remaining_supply(self, x: HumanValue) -> Fraction:
        """Launch tokens still held by the curve after ``x`` reserve purchases."""
        amount = to_fraction(x)
        if amount < 0:
            raise ValueError(f"Cumulative purchase cannot be negative: {x}")
        if amount <= self.curve_limit:
            # Trapezoid under the linear segment: x = dy_x * (p0 + price(x)) / 2
            sold = 2 * amount / (self.base_price + self.price(amount))
            return self.total_supply - sold
        return self.k / (self.reserve_offset + amount)

    def market_cap(self, price: HumanValue | None = None) -> Fraction:
        """Total supply valued at ``price`` (defaults to the base price)."""
        value = self.base_price if price is None else to_fraction(price)
        return self.total_supply * value

    def samples(self, steps: int = 50, horizon: HumanValue = 10) -> CurveSamples:
        """Chart samples; see CurveSamples."""
        return CurveSamples(self, steps=steps, horizon=horizon)


class CurveSamples:
    """Lazy, finite, restartable sequence of ``(x, price(x))`` pairs.

    ``steps`` uniform steps of ``L / steps`` cover ``[0, L]`` (inclusive of
    both ends), then the same step continues over ``(L, L * horizon]`` using
    the constant-product formula. Each ``iter()`` starts over.
    """

    def __init__(self, curve: CurveConfig, steps: int = 50, horizon: HumanValue = 10) -> None:
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        horizon_frac = to_fraction(horizon)
        if horizon_frac < 1:
            raise ValueError(f"horizon must be at least 1, got {horizon}")
        self._curve = curve
        self._steps = steps
        self._step = curve.curve_limit / steps
        self._max_x = curve.curve_limit * horizon_frac

    @property
    def step(self) -> Fraction:
        return self._step

    def __iter__(self) -> Iterator[tuple[Fraction, Fraction]]:
        i = 0
        x = Fraction(0)
        while x <= self._max_x:
            yield x, self._curve.price(x)
            i += 1
            x = self._step * i

    def __len__(self) -> int:
        return int(self._max_x / self._step) + 1


def _as_fraction(name: str, value: HumanValue) -> Fraction:
    try:
        return to_fraction(value)
    except ValueError as e:
        raise CurveConfigError(f"Invalid {name}: {e}") from e


__all__ = ["CurveConfig", "CurveSamples", "linear_segment_supply"]
