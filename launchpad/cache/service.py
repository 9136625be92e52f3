"""Typed metadata getters layered over MetadataCache and the contract readers.

Immutable fields go through the cache; balances, allowances and live pool
state are always read fresh. Read failures propagate as RpcError.
"""

from __future__ import annotations

from fractions import Fraction

import structlog

from launchpad.cache.metadata import MetadataCache
from launchpad.chain.interfaces import PoolReader, RawCurveParams, TokenReader
from launchpad.constants import FEE_MARKUP_PERCENT
from launchpad.curve.model import CurveConfig
from launchpad.errors import PoolNotInitializedError
from launchpad.math.fixed_point import (
    format_units,
    from_raw_amount,
    q128_to_price,
    sqrt_price_x96_to_price,
    to_fraction,
)
from launchpad.models.records import PoolLiveState, PoolMetadata, TokenMetadata
from launchpad.models.types import normalize_address

logger = structlog.get_logger()


class MetadataService:
    """Resolves token and pool attributes, caching the immutable ones."""

    def __init__(self, cache: MetadataCache, tokens: TokenReader, pools: PoolReader) -> None:
        self.cache = cache
        self._tokens = tokens
        self._pools = pools

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def token_symbol(self, token: str) -> str:
        return await self.cache.get(token, "symbol", lambda: self._tokens.symbol(token))

    async def token_name(self, token: str) -> str:
        return await self.cache.get(token, "name", lambda: self._tokens.name(token))

    async def token_decimals(self, token: str) -> int:
        decimals = await self.cache.get(token, "decimals", lambda: self._tokens.decimals(token))
        return int(decimals)

    async def token_owner(self, token: str) -> str:
        """Token owner, cached permanently. Use ``cache.invalidate`` to refresh."""
        return await self.cache.get(token, "owner", lambda: self._tokens.owner(token))

    async def token_total_supply(self, token: str) -> str:
        """Total supply formatted with the token's decimals."""

        async def load() -> str:
            decimals = await self.token_decimals(token)
            raw = await self._tokens.total_supply(token)
            return format_units(raw, decimals)

        return await self.cache.get(token, "supply", load)

    async def token_balance(self, token: str, holder: str) -> str:
        """Formatted balance of ``holder``. Never cached."""
        decimals = await self.token_decimals(token)
        raw = await self._tokens.balance_of(token, holder)
        return format_units(raw, decimals)

    async def token_metadata(self, token: str) -> TokenMetadata:
        return TokenMetadata(
            address=token,
            symbol=await self.token_symbol(token),
            name=await self.token_name(token),
            decimals=await self.token_decimals(token),
            owner=await self.token_owner(token),
            total_supply=await self.token_total_supply(token),
        )

    # ------------------------------------------------------------------
    # Pools
    # ------------------------------------------------------------------

    async def pool_token0(self, pool: str) -> str:
        return await self.cache.get(pool, "token0", lambda: self._pools.token0(pool))

    async def pool_token1(self, pool: str) -> str:
        return await self.cache.get(pool, "token1", lambda: self._pools.token1(pool))

    async def pool_fee(self, pool: str) -> int:
        return int(await self.cache.get(pool, "fee", lambda: self._pools.fee(pool)))

    async def pool_owner(self, pool: str) -> str:
        return await self.cache.get(pool, "owner", lambda: self._pools.owner(pool))

    async def pool_reserve_token(self, pool: str) -> str:
        return await self.cache.get(pool, "reserve", lambda: self._pools.reserve_token(pool))

    async def pool_launch_token(self, pool: str) -> str:
        return await self.cache.get(pool, "launch", lambda: self._pools.launch_token(pool))

    async def pool_raw_curve(self, pool: str) -> RawCurveParams:
        async def load() -> dict[str, int]:
            raw = await self._pools.curve(pool)
            return {
                "start_price": raw.start_price,
                "switch_price": raw.switch_price,
                "curve_limit": raw.curve_limit,
                "reserve_offset": raw.reserve_offset,
            }

        stored = await self.cache.get(pool, "curve", load)
        return RawCurveParams(**{name: int(value) for name, value in stored.items()})

    async def pool_curve(self, pool: str) -> CurveConfig:
        """The pool's curve in human units (reserve per launch token).

        Raises:
            CurveConfigError: If the stored parameters are not a valid curve
        """
        reserve = await self.pool_reserve_token(pool)
        launch = await self.pool_launch_token(pool)
        reserve_decimals = await self.token_decimals(reserve)
        launch_decimals = await self.token_decimals(launch)
        raw = await self.pool_raw_curve(pool)
        supply = to_fraction(await self.token_total_supply(launch))

        p0 = q128_to_price(raw.start_price, launch_decimals, reserve_decimals)
        p1 = q128_to_price(raw.switch_price, launch_decimals, reserve_decimals)
        limit = from_raw_amount(raw.curve_limit, reserve_decimals)
        return CurveConfig.from_parameters(
            base_price=p0,
            slope=(p1 - p0) / limit if limit else Fraction(0),
            curve_limit=limit,
            reserve_offset=from_raw_amount(raw.reserve_offset, reserve_decimals),
            total_supply=supply,
        )

    async def pool_metadata(self, pool: str) -> PoolMetadata:
        return PoolMetadata(
            address=pool,
            token0=await self.pool_token0(pool),
            token1=await self.pool_token1(pool),
            fee_tier=await self.pool_fee(pool),
            reserve_token_address=await self.pool_reserve_token(pool),
            launch_token_address=await self.pool_launch_token(pool),
            curve=await self.pool_curve(pool),
        )

    async def pool_live_state(self, pool: str) -> PoolLiveState:
        """Current sqrt price and reserves. Never cached."""
        sqrt_price_x96 = await self._pools.sqrt_price_x96(pool)
        reserve0, reserve1 = await self._pools.reserves(pool)
        return PoolLiveState(sqrt_price_x96=sqrt_price_x96, reserve0=reserve0, reserve1=reserve1)

    async def current_price(self, pool: str) -> Fraction:
        """Launch-token price in reserve-token units, from live sqrtPriceX96.

        Raises:
            PoolNotInitializedError: If the pool has no price yet
        """
        token0 = await self.pool_token0(pool)
        token1 = await self.pool_token1(pool)
        decimals0 = await self.token_decimals(token0)
        decimals1 = await self.token_decimals(token1)
        reserve = await self.pool_reserve_token(pool)
        sqrt_price_x96 = await self._pools.sqrt_price_x96(pool)
        if sqrt_price_x96 == 0:
            raise PoolNotInitializedError(pool)
        return sqrt_price_x96_to_price(
            sqrt_price_x96,
            decimals0,
            decimals1,
            reserve_is_token0=normalize_address(reserve) == normalize_address(token0),
        )

    async def reserve_invested(self, pool: str) -> Fraction:
        """Reserve tokens currently held by the pool (cumulative purchases x)."""
        token0 = await self.pool_token0(pool)
        reserve = await self.pool_reserve_token(pool)
        reserve_decimals = await self.token_decimals(reserve)
        reserve0, reserve1 = await self._pools.reserves(pool)
        raw = reserve0 if normalize_address(reserve) == normalize_address(token0) else reserve1
        return from_raw_amount(raw, reserve_decimals)

    async def fee_percent(self, pool: str) -> float:
        """Displayed trading fee: pool fee tier plus the platform markup."""
        return await self.pool_fee(pool) / 10_000 + FEE_MARKUP_PERCENT


__all__ = ["MetadataService"]
