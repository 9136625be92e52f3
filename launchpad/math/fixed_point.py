"""Conversions between human decimal values and on-chain fixed point.

Three encodings are used on-chain:

- Token amounts: integers scaled by ``10**decimals``.
- Curve prices: a 128-bit fractional encoding of reserve-token units per
  launch-token unit, ``floor(price * 10**reserve_decimals) * 2**128 // 10**launch_decimals``.
- Pool prices: ``sqrtPriceX96``, the square root of the raw token1/token0 ratio
  scaled by ``2**96``.

All arithmetic is integer or ``Fraction``; binary floating point never touches
an amount that will be submitted on-chain. Float inputs are accepted for
convenience and converted through their shortest decimal repr.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from fractions import Fraction
from math import isqrt

__all__ = [
    # Constants
    "Q96",
    "Q128",
    "Q192",
    "DECIMAL_HIGH_PREC_CONTEXT",
    # Helpers
    "to_fraction",
    "to_decimal",
    # Amounts
    "to_raw_amount",
    "from_raw_amount",
    "format_units",
    "rescale_amount",
    # Q128 prices
    "price_to_q128",
    "q128_to_price",
    # sqrtPriceX96
    "sqrt_price_x96_to_price",
    "price_to_sqrt_price_x96",
]

Q96 = 2**96
Q128 = 2**128
Q192 = 2**192

# 78 digits of precision, enough for uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

HumanValue = int | str | Decimal | Fraction | float


def to_fraction(value: HumanValue) -> Fraction:
    """Convert a human value to an exact Fraction.

    Strings and Decimals are converted exactly. Floats go through ``repr`` so
    that ``0.1`` becomes 1/10 rather than its binary approximation.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise ValueError("Boolean is not a numeric amount")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        value = repr(value)
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except decimal.InvalidOperation as err:
            raise ValueError(f"Not a decimal number: {value!r}") from err
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Not a finite number: {value}")
        return Fraction(value)
    raise ValueError(f"Unsupported numeric type: {type(value).__name__}")


def to_decimal(value: Fraction | int) -> Decimal:
    """Render an exact value as a high-precision Decimal (for display)."""
    frac = Fraction(value)
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(frac.numerator) / Decimal(frac.denominator)


# =============================================================================
# Token amounts
# =============================================================================


def to_raw_amount(amount: HumanValue, decimals: int) -> int:
    """Scale a human amount to its raw integer representation.

    Digits beyond ``decimals`` are truncated (rounded toward zero).

    Raises:
        ValueError: If amount is negative or decimals is negative
    """
    if decimals < 0:
        raise ValueError(f"Decimals cannot be negative: {decimals}")
    frac = to_fraction(amount)
    if frac < 0:
        raise ValueError(f"Amount cannot be negative: {amount}")
    return (frac.numerator * 10**decimals) // frac.denominator


def from_raw_amount(raw: int, decimals: int) -> Fraction:
    """Exact human value of a raw integer amount."""
    if decimals < 0:
        raise ValueError(f"Decimals cannot be negative: {decimals}")
    return Fraction(raw, 10**decimals)


def format_units(raw: int, decimals: int) -> str:
    """Format a raw amount as a decimal string, e.g. ``1500000, 6 -> "1.5"``.

    Always includes a fractional part (``"1.0"``), like ethers' formatUnits.
    """
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{frac_str or '0'}"


def rescale_amount(raw: int, from_decimals: int, to_decimals: int) -> int:
    """Re-express a raw amount with a different number of decimals.

    Applied as an exact power-of-ten multiplier; scaling down truncates.
    """
    diff = to_decimals - from_decimals
    if diff >= 0:
        return raw * 10**diff
    return raw // 10**-diff


# =============================================================================
# Q128 curve prices
# =============================================================================


def price_to_q128(price: HumanValue, launch_decimals: int, reserve_decimals: int) -> int:
    """Encode a human price (reserve per launch token) as a Q128 raw price.

    ``floor(price * 10**reserve_decimals) * 2**128 // 10**launch_decimals``

    Raises:
        ValueError: If price is negative
    """
    frac = to_fraction(price)
    if frac < 0:
        raise ValueError(f"Price cannot be negative: {price}")
    reserve_units = (frac.numerator * 10**reserve_decimals) // frac.denominator
    return reserve_units * Q128 // 10**launch_decimals


def q128_to_price(raw_price: int, launch_decimals: int, reserve_decimals: int) -> Fraction:
    """Decode a Q128 raw price into an exact human price.

    The result never exceeds the price that was encoded, and is within one
    unit of ``10**-reserve_decimals`` of it.
    """
    return Fraction(raw_price * 10**launch_decimals, Q128 * 10**reserve_decimals)


# =============================================================================
# sqrtPriceX96 pool prices
# =============================================================================


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    decimals0: int,
    decimals1: int,
    *,
    reserve_is_token0: bool = False,
) -> Fraction:
    """Human price of the launch token in reserve-token units.

    ``(sqrtPriceX96 / 2**96)**2 * 10**(decimals0 - decimals1)`` is the price of
    token0 in token1. When the reserve token is token0 the launch token is
    token1 and the reciprocal is returned.

    Raises:
        ZeroDivisionError: If reserve_is_token0 and sqrt_price_x96 is 0
    """
    ratio = Fraction(sqrt_price_x96 * sqrt_price_x96, Q192) * Fraction(10) ** (decimals0 - decimals1)
    if reserve_is_token0:
        return 1 / ratio
    return ratio


def price_to_sqrt_price_x96(
    price: HumanValue,
    decimals0: int,
    decimals1: int,
    *,
    reserve_is_token0: bool = False,
) -> int:
    """Inverse of sqrt_price_x96_to_price (floored integer square root).

    Raises:
        ValueError: If price is not positive
    """
    frac = to_fraction(price)
    if frac <= 0:
        raise ValueError(f"Price must be positive: {price}")
    ratio = 1 / frac if reserve_is_token0 else frac
    raw_ratio = ratio / Fraction(10) ** (decimals0 - decimals1)
    return isqrt(raw_ratio.numerator * Q192 // raw_ratio.denominator)
