"""Domain records produced by the cache, the quote engine and the enumerator.

These are plain frozen dataclasses handed out by value; the API layer turns
them into pydantic response schemas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from launchpad.models.types import normalize_address

if TYPE_CHECKING:
    from launchpad.curve.model import CurveConfig


@dataclass(frozen=True)
class TokenMetadata:
    """Read-only ERC-20 attributes of a launched token.

    ``total_supply`` is decimal-formatted (e.g. "1000000000.0").
    """

    address: str
    symbol: str
    name: str
    decimals: int
    owner: str
    total_supply: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address))


@dataclass(frozen=True)
class PoolMetadata:
    """Immutable attributes of a launch pool, with its decimal-adjusted curve."""

    address: str
    token0: str
    token1: str
    fee_tier: int
    reserve_token_address: str
    launch_token_address: str
    curve: CurveConfig

    def __post_init__(self) -> None:
        for name in ("address", "token0", "token1", "reserve_token_address", "launch_token_address"):
            object.__setattr__(self, name, normalize_address(getattr(self, name)))

    @property
    def reserve_is_token0(self) -> bool:
        return self.reserve_token_address == self.token0

    @property
    def fee_percent(self) -> float:
        """Pool fee as percentage (e.g., 1.0 for 1%)."""
        return self.fee_tier / 10_000


@dataclass(frozen=True)
class PoolLiveState:
    """Time-varying pool state. Always read fresh, never cached."""

    sqrt_price_x96: int
    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class SwapQuote:
    """An executable swap quote.

    In exact-input mode ``tokens_out`` is the slippage-adjusted minimum out;
    in exact-output mode ``tokens_in`` is the slippage-adjusted maximum in.
    ``quoted_tokens_in``/``quoted_tokens_out`` keep the pool's raw answer.
    """

    pool_address: str
    zero_for_one: bool
    tokens_in: int
    tokens_out: int
    exact_input: bool
    quoted_tokens_in: int
    quoted_tokens_out: int
    sqrt_price_x96: int

    @property
    def bound(self) -> int:
        """The on-chain limit: minimum out (exact in) or maximum in (exact out)."""
        return self.tokens_out if self.exact_input else self.tokens_in


@dataclass(frozen=True)
class TokenRecord:
    """One token yielded by registry enumeration.

    ``label`` is the display name with fallbacks applied
    (name, then symbol, then address).
    """

    address: str
    name: str
    symbol: str
    owner: str
    decimals: int
    label: str


__all__ = [
    "TokenMetadata",
    "PoolMetadata",
    "PoolLiveState",
    "SwapQuote",
    "TokenRecord",
]
