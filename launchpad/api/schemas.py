"""Pydantic request/response models for the HTTP API.

Raw on-chain integers are carried as decimal strings (Uint256); exact
rational values are rendered as plain decimal strings.
"""

from fractions import Fraction

from pydantic import BaseModel, Field

from launchpad.curve.launch import DeployParams
from launchpad.curve.model import CurveConfig
from launchpad.math.fixed_point import to_decimal
from launchpad.models.records import PoolLiveState, PoolMetadata, SwapQuote, TokenMetadata, TokenRecord
from launchpad.models.types import Address, Uint256


def decimal_string(value: Fraction | int) -> str:
    """Plain (non-scientific) decimal rendering of an exact value."""
    return format(to_decimal(value), "f")


class CurveParams(BaseModel):
    """Decimal-adjusted curve parameters."""

    base_price: str = Field(alias="basePrice")
    transition_price: str = Field(alias="transitionPrice")
    slope: str
    curve_limit: str = Field(alias="curveLimit")
    reserve_offset: str = Field(alias="reserveOffset")
    total_supply: str = Field(alias="totalSupply")
    linear_supply: str = Field(alias="linearSupply")
    boundary_supply: str = Field(alias="boundarySupply")
    k: str
    market_cap: str = Field(alias="marketCap")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_curve(cls, curve: CurveConfig) -> "CurveParams":
        return cls(
            base_price=decimal_string(curve.base_price),
            transition_price=decimal_string(curve.transition_price),
            slope=decimal_string(curve.slope),
            curve_limit=decimal_string(curve.curve_limit),
            reserve_offset=decimal_string(curve.reserve_offset),
            total_supply=decimal_string(curve.total_supply),
            linear_supply=decimal_string(curve.linear_supply),
            boundary_supply=decimal_string(curve.boundary_supply),
            k=decimal_string(curve.k),
            market_cap=decimal_string(curve.market_cap()),
        )


class DeployParamsResponse(BaseModel):
    """Raw launchToken arguments."""

    name: str
    symbol: str
    description: str
    decimals: int
    reserve_token: Address = Field(alias="reserveToken")
    fee: int
    start_price: Uint256 = Field(alias="startPrice")
    switch_price: Uint256 = Field(alias="switchPrice")
    curve_limit: Uint256 = Field(alias="curveLimit")
    reserve_offset: Uint256 = Field(alias="reserveOffset")
    total_supply: Uint256 = Field(alias="totalSupply")
    amount_to_purchase: Uint256 = Field(alias="amountToPurchase")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_params(cls, params: DeployParams) -> "DeployParamsResponse":
        return cls(
            name=params.name,
            symbol=params.symbol,
            description=params.description,
            decimals=params.decimals,
            reserve_token=params.reserve_token,
            fee=params.fee,
            start_price=params.start_price,
            switch_price=params.switch_price,
            curve_limit=params.curve_limit,
            reserve_offset=params.reserve_offset,
            total_supply=params.total_supply,
            amount_to_purchase=params.amount_to_purchase,
        )


class ChartPoint(BaseModel):
    """One chart sample; floats are for plotting only."""

    x: float
    price: float


class CurvePreviewResponse(BaseModel):
    curve: CurveParams
    deploy: DeployParamsResponse
    chart: list[ChartPoint]


class TokenRecordResponse(BaseModel):
    address: Address
    name: str
    symbol: str
    owner: str
    decimals: int
    label: str

    @classmethod
    def from_record(cls, record: TokenRecord) -> "TokenRecordResponse":
        return cls(
            address=record.address,
            name=record.name,
            symbol=record.symbol,
            owner=record.owner,
            decimals=record.decimals,
            label=record.label,
        )


class TokenListResponse(BaseModel):
    network: str
    order: str
    count: int
    tokens: list[TokenRecordResponse]


class TokenMetadataResponse(BaseModel):
    address: Address
    symbol: str
    name: str
    decimals: int
    owner: str
    total_supply: str = Field(alias="totalSupply")
    explorer_url: str = Field(alias="explorerUrl")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_metadata(cls, metadata: TokenMetadata, explorer_url: str) -> "TokenMetadataResponse":
        return cls(
            address=metadata.address,
            symbol=metadata.symbol,
            name=metadata.name,
            decimals=metadata.decimals,
            owner=metadata.owner,
            total_supply=metadata.total_supply,
            explorer_url=explorer_url,
        )


class PoolResponse(BaseModel):
    """Pool attributes, curve and live state."""

    address: Address
    token0: Address
    token1: Address
    fee_tier: int = Field(alias="feeTier")
    fee_percent: float = Field(alias="feePercent")
    reserve_token: Address = Field(alias="reserveToken")
    launch_token: Address = Field(alias="launchToken")
    curve: CurveParams
    sqrt_price_x96: Uint256 = Field(alias="sqrtPriceX96")
    reserve0: Uint256
    reserve1: Uint256
    price: str
    reserve_invested: str = Field(alias="reserveInvested")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(
        cls,
        metadata: PoolMetadata,
        live: PoolLiveState,
        *,
        fee_percent: float,
        price: Fraction,
        reserve_invested: Fraction,
    ) -> "PoolResponse":
        return cls(
            address=metadata.address,
            token0=metadata.token0,
            token1=metadata.token1,
            fee_tier=metadata.fee_tier,
            fee_percent=fee_percent,
            reserve_token=metadata.reserve_token_address,
            launch_token=metadata.launch_token_address,
            curve=CurveParams.from_curve(metadata.curve),
            sqrt_price_x96=live.sqrt_price_x96,
            reserve0=live.reserve0,
            reserve1=live.reserve1,
            price=decimal_string(price),
            reserve_invested=decimal_string(reserve_invested),
        )


class QuoteRequest(BaseModel):
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount: Uint256 = Field(description="Raw amount spent (exact input) or received (exact output)")
    exact_input: bool = Field(default=True, alias="exactInput")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    pool: Address
    zero_for_one: bool = Field(alias="zeroForOne")
    exact_input: bool = Field(alias="exactInput")
    tokens_in: Uint256 = Field(alias="tokensIn")
    tokens_out: Uint256 = Field(alias="tokensOut")
    quoted_tokens_in: Uint256 = Field(alias="quotedTokensIn")
    quoted_tokens_out: Uint256 = Field(alias="quotedTokensOut")
    sqrt_price_x96: Uint256 = Field(alias="sqrtPriceX96")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> "QuoteResponse":
        return cls(
            pool=quote.pool_address,
            zero_for_one=quote.zero_for_one,
            exact_input=quote.exact_input,
            tokens_in=quote.tokens_in,
            tokens_out=quote.tokens_out,
            quoted_tokens_in=quote.quoted_tokens_in,
            quoted_tokens_out=quote.quoted_tokens_out,
            sqrt_price_x96=quote.sqrt_price_x96,
        )
