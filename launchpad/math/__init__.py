"""Fixed-point and decimal conversion helpers."""

from launchpad.math.fixed_point import (
    DECIMAL_HIGH_PREC_CONTEXT,
    Q96,
    Q128,
    Q192,
    format_units,
    from_raw_amount,
    price_to_q128,
    price_to_sqrt_price_x96,
    q128_to_price,
    rescale_amount,
    sqrt_price_x96_to_price,
    to_decimal,
    to_fraction,
    to_raw_amount,
)

__all__ = [
    "Q96",
    "Q128",
    "Q192",
    "DECIMAL_HIGH_PREC_CONTEXT",
    "to_fraction",
    "to_decimal",
    "to_raw_amount",
    "from_raw_amount",
    "format_units",
    "rescale_amount",
    "price_to_q128",
    "q128_to_price",
    "sqrt_price_x96_to_price",
    "price_to_sqrt_price_x96",
]
