"""Typed capability interfaces for the contracts the engine talks to.

Each protocol covers one contract role with one method per on-chain call the
engine actually makes. Read methods raise RpcError; write methods raise
TransactionError. Implementations: ``launchpad.chain.web3_client`` for a live
node, in-memory fakes in the test suite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class TokenDetail:
    """One row of the factory's listManyTokenDetails range read."""

    token: str
    owner: str
    name: str
    symbol: str


@dataclass(frozen=True)
class RawCurveParams:
    """Curve parameters as stored by a pool (raw on-chain encodings).

    Attributes:
        start_price: Q128 base price
        switch_price: Q128 transition price
        curve_limit: Raw reserve amount where the curve turns constant-product
        reserve_offset: Raw virtual reserve offset
    """

    start_price: int
    switch_price: int
    curve_limit: int
    reserve_offset: int


@dataclass(frozen=True)
class ExpectedSwap:
    """Result of a pool's own quote simulation."""

    tokens_in: int
    tokens_out: int
    new_sqrt_price_x96: int


@dataclass(frozen=True)
class PendingTransaction:
    """A submitted, not yet confirmed, transaction."""

    tx_hash: str
    method: str
    to: str


@dataclass(frozen=True)
class TransactionReceipt:
    """A confirmed transaction.

    ``events`` maps event names to their decoded arguments for the events the
    engine cares about (e.g. TokenCreated).
    """

    tx_hash: str
    block_number: int
    status: int = 1
    events: dict[str, dict[str, object]] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class TokenReader(Protocol):
    """Read-only ERC-20 calls."""

    async def symbol(self, token: str) -> str: ...

    async def name(self, token: str) -> str: ...

    async def decimals(self, token: str) -> int: ...

    async def owner(self, token: str) -> str: ...

    async def total_supply(self, token: str) -> int: ...

    async def balance_of(self, token: str, holder: str) -> int: ...

    async def allowance(self, token: str, owner: str, spender: str) -> int: ...


class PoolReader(Protocol):
    """Read-only calls on a launch pool."""

    async def token0(self, pool: str) -> str: ...

    async def token1(self, pool: str) -> str: ...

    async def fee(self, pool: str) -> int: ...

    async def owner(self, pool: str) -> str: ...

    async def reserve_token(self, pool: str) -> str: ...

    async def launch_token(self, pool: str) -> str: ...

    async def sqrt_price_x96(self, pool: str) -> int: ...

    async def reserves(self, pool: str) -> tuple[int, int]: ...

    async def curve(self, pool: str) -> RawCurveParams: ...

    async def compute_expected_tokens_out(
        self,
        pool: str,
        input_token: str,
        max_tokens_in: int,
        sqrt_price_x96: int,
        sqrt_price_limit_x96: int,
    ) -> ExpectedSwap: ...

    async def compute_expected_tokens_in(
        self,
        pool: str,
        input_token: str,
        max_tokens_out: int,
        sqrt_price_x96: int,
        sqrt_price_limit_x96: int,
    ) -> ExpectedSwap: ...


class FactoryReader(Protocol):
    """Read-only calls on the launchpad factory and the pool factory."""

    async def total_tokens(self) -> int: ...

    async def list_many_tokens(self, start: int, end: int) -> list[str]: ...

    async def list_many_token_details(self, start: int, end: int) -> list[TokenDetail]: ...

    async def get_pool(self, token_a: str, token_b: str, fee: int) -> str: ...


class TransactionSubmitter(Protocol):
    """State-changing calls, submitted from ``account``."""

    @property
    def account(self) -> str: ...

    async def approve(self, token: str, spender: str, amount: int) -> PendingTransaction: ...

    async def swap_exact_in(
        self, swapper: str, pool: str, zero_for_one: bool, amount_in: int, minimum_out: int
    ) -> PendingTransaction: ...

    async def swap_exact_out(
        self, swapper: str, pool: str, zero_for_one: bool, amount_out: int, maximum_in: int
    ) -> PendingTransaction: ...

    async def collect(
        self,
        pool: str,
        recipient: str,
        tick_lower: int,
        tick_upper: int,
        amount0_requested: int,
        amount1_requested: int,
    ) -> PendingTransaction: ...

    async def launch_token(self, factory: str, args: tuple) -> PendingTransaction: ...

    async def wait_for_confirmation(self, tx: PendingTransaction) -> TransactionReceipt: ...


__all__ = [
    "TokenDetail",
    "RawCurveParams",
    "ExpectedSwap",
    "PendingTransaction",
    "TransactionReceipt",
    "TokenReader",
    "PoolReader",
    "FactoryReader",
    "TransactionSubmitter",
]
