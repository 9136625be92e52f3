"""Launch inputs and the raw parameters of a curve-bearing deploy call."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any

import structlog
from pydantic import BaseModel, Field, model_validator

from launchpad.constants import (
    DEFAULT_CURVE_LIMIT,
    DEFAULT_CURVE_LIMITS,
    DEFAULT_DECIMALS,
    FEE_TIER,
    RESERVE_DECIMALS,
)
from launchpad.curve.model import CurveConfig
from launchpad.errors import CurveConfigError
from launchpad.math.fixed_point import price_to_q128, to_fraction, to_raw_amount
from launchpad.models.types import normalize_address

logger = structlog.get_logger()

UINT96_MAX = 2**96 - 1
UINT128_MAX = 2**128 - 1


class LaunchInputs(BaseModel):
    """Human-facing launch configuration, as entered on the deploy form."""

    name: str = ""
    symbol: str = ""
    description: str = ""
    starting_price: Decimal = Field(alias="startingPrice")
    transition_price: Decimal = Field(alias="transitionPrice")
    total_supply: Decimal = Field(alias="totalSupply")
    curve_limit: Decimal = Field(
        alias="curveLimit",
        description="Cumulative reserve-token amount where the curve turns constant-product.",
    )
    reserve_token_symbol: str = Field(default="USDC", alias="reserveTokenSymbol")
    launch_token_decimals: int = Field(default=18, ge=0, le=77, alias="launchTokenDecimals")
    reserve_token_decimals: int = Field(
        ge=0,
        le=77,
        alias="reserveTokenDecimals",
        description="Defaults to the known decimals of reserve_token_symbol.",
    )
    purchase_percent: Decimal = Field(default=Decimal(0), ge=0, le=100, alias="purchasePercent")

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _default_reserve_decimals(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        decimals = data.get("reserveTokenDecimals", data.get("reserve_token_decimals"))
        if decimals is not None:
            return data
        symbol = data.get("reserveTokenSymbol", data.get("reserve_token_symbol", "USDC"))
        data = {k: v for k, v in data.items() if k not in ("reserveTokenDecimals", "reserve_token_decimals")}
        data["reserve_token_decimals"] = reserve_decimals_for(str(symbol))
        return data

    @property
    def market_cap(self) -> Decimal:
        """Initial market cap: starting price times total supply."""
        return self.starting_price * self.total_supply

    def curve(self) -> CurveConfig:
        """Derive the bonding curve for these inputs.

        Raises:
            CurveConfigError: If the inputs do not form a valid curve
        """
        return CurveConfig.derive(
            self.starting_price,
            self.transition_price,
            self.curve_limit,
            self.total_supply,
        )


@dataclass(frozen=True)
class DeployParams:
    """Raw arguments for the factory's launchToken call.

    Prices are Q128 raw prices; amounts are raw integers in their token's
    decimals (curve_limit and reserve_offset in reserve decimals, supplies in
    launch decimals).
    """

    name: str
    symbol: str
    description: str
    decimals: int
    reserve_token: str
    fee: int
    start_price: int
    switch_price: int
    curve_limit: int
    reserve_offset: int
    total_supply: int
    amount_to_purchase: int

    def as_call_args(self) -> tuple:
        """Positional arguments in launchToken's ABI order."""
        return (
            self.name,
            self.symbol,
            self.description,
            self.decimals,
            self.reserve_token,
            self.fee,
            self.start_price,
            self.switch_price,
            self.curve_limit,
            self.reserve_offset,
            self.total_supply,
        )


def derive_deploy_params(
    inputs: LaunchInputs,
    reserve_token: str,
    fee: int = FEE_TIER,
) -> DeployParams:
    """Map launch inputs to the raw values of a deploy call.

    The curve is validated and derived exactly before anything is rounded;
    the reserve offset is floored to reserve-token units only at the end.

    Raises:
        CurveConfigError: If the inputs are invalid or a raw value overflows
            its on-chain type
    """
    curve = inputs.curve()
    launch_decimals = inputs.launch_token_decimals
    reserve_decimals = inputs.reserve_token_decimals

    if curve.reserve_offset < 0:
        raise CurveConfigError(
            f"Reserve offset is negative ({float(curve.reserve_offset):.6g}); "
            "raise the transition price or the total supply"
        )

    start_price = price_to_q128(curve.base_price, launch_decimals, reserve_decimals)
    switch_price = price_to_q128(curve.transition_price, launch_decimals, reserve_decimals)
    if start_price == 0 or start_price >= switch_price:
        raise CurveConfigError(
            "Prices are indistinguishable at "
            f"{reserve_decimals} reserve decimals: {inputs.starting_price} / {inputs.transition_price}"
        )

    curve_limit = to_raw_amount(curve.curve_limit, reserve_decimals)
    reserve_offset = _floor(curve.reserve_offset * 10**reserve_decimals)
    total_supply = to_raw_amount(curve.total_supply, launch_decimals)

    _check_bound("curve limit", curve_limit, UINT96_MAX)
    _check_bound("reserve offset", reserve_offset, UINT128_MAX)
    _check_bound("total supply", total_supply, UINT128_MAX)

    # Basis points of supply bought at launch: floor(percent * 100) / 10000
    purchase_bps = _floor(to_fraction(inputs.purchase_percent) * 100)
    amount_to_purchase = total_supply * purchase_bps // 10_000

    params = DeployParams(
        name=inputs.name,
        symbol=inputs.symbol,
        description=inputs.description,
        decimals=launch_decimals,
        reserve_token=normalize_address(reserve_token),
        fee=fee,
        start_price=start_price,
        switch_price=switch_price,
        curve_limit=curve_limit,
        reserve_offset=reserve_offset,
        total_supply=total_supply,
        amount_to_purchase=amount_to_purchase,
    )
    logger.debug(
        "deploy_params_derived",
        symbol=inputs.symbol,
        start_price=start_price,
        switch_price=switch_price,
        curve_limit=curve_limit,
        reserve_offset=reserve_offset,
        total_supply=total_supply,
    )
    return params


def rescale_starting_price(inputs: LaunchInputs, new_price: Decimal) -> LaunchInputs:
    """Deploy-form preview: move the starting price at constant market cap.

    Total supply is re-derived from the unchanged market cap; the transition
    price keeps its ratio to the starting price and the curve limit keeps its
    ratio to the market cap.

    Raises:
        CurveConfigError: If either price is not positive
    """
    if new_price <= 0 or inputs.starting_price <= 0:
        raise CurveConfigError("Starting price must be positive")
    factor = new_price / inputs.starting_price
    market_cap = inputs.market_cap
    return inputs.model_copy(
        update={
            "starting_price": new_price,
            "total_supply": market_cap / new_price,
            "transition_price": inputs.transition_price * factor,
        }
    )


def rescale_market_cap(inputs: LaunchInputs, new_market_cap: Decimal) -> LaunchInputs:
    """Deploy-form preview: change the market cap at a constant starting price.

    Supply follows the new market cap and the curve limit keeps its ratio to it.
    """
    if new_market_cap <= 0 or inputs.market_cap <= 0:
        raise CurveConfigError("Market cap must be positive")
    factor = new_market_cap / inputs.market_cap
    return inputs.model_copy(
        update={
            "total_supply": new_market_cap / inputs.starting_price,
            "curve_limit": inputs.curve_limit * factor,
        }
    )


def reserve_decimals_for(reserve_symbol: str) -> int:
    """Decimals of a known reserve token; unknown symbols get the ERC-20 default."""
    return RESERVE_DECIMALS.get(reserve_symbol.upper(), DEFAULT_DECIMALS)


def default_curve_limit(reserve_symbol: str) -> int:
    """Suggested linear-segment limit for a reserve token (in its units)."""
    return DEFAULT_CURVE_LIMITS.get(reserve_symbol.upper(), DEFAULT_CURVE_LIMIT)


def _floor(value: Fraction) -> int:
    return value.numerator // value.denominator


def _check_bound(name: str, value: int, maximum: int) -> None:
    if value > maximum:
        raise CurveConfigError(f"Raw {name} {value} exceeds on-chain maximum {maximum}")


__all__ = [
    "LaunchInputs",
    "DeployParams",
    "derive_deploy_params",
    "rescale_starting_price",
    "rescale_market_cap",
    "default_curve_limit",
    "reserve_decimals_for",
]
