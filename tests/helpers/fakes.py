"""In-memory contract collaborators for tests.

Every fake records its calls in ``calls`` for assertions, and raises RpcError
(or TransactionError) for reads/writes configured to fail.

Usage:
    tokens = FakeTokenReader({LAUNCH: FakeToken(symbol="LNCH")})
    tokens.fail(LAUNCH, "symbol")
"""

import asyncio
from dataclasses import dataclass, field

from launchpad.chain.interfaces import (
    ExpectedSwap,
    PendingTransaction,
    RawCurveParams,
    TokenDetail,
    TransactionReceipt,
)
from launchpad.errors import RpcError, TransactionError
from launchpad.models.types import ZERO_ADDRESS, normalize_address
from tests.helpers.constants import ACCOUNT, CREATOR, LAUNCH, USDC


def _revert(method: str, address: str) -> RpcError:
    return RpcError(
        f"{method} reverted (action=\"call\", code=CALL_EXCEPTION, address={address})",
        address=address,
        method=method,
    )


# =============================================================================
# Tokens
# =============================================================================


@dataclass
class FakeToken:
    """ERC-20 state served by FakeTokenReader."""

    symbol: str = "TKN"
    name: str = "Token"
    decimals: int = 18
    owner: str = CREATOR
    total_supply: int = 1_000_000_000 * 10**18
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)


class FakeTokenReader:
    """TokenReader over a dict of FakeToken keyed by address."""

    def __init__(self, tokens: dict[str, FakeToken] | None = None) -> None:
        self.tokens = {normalize_address(a): t for a, t in (tokens or {}).items()}
        self.failing: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def fail(self, token: str, method: str) -> None:
        """Make ``method`` revert for ``token``."""
        self.failing.add((normalize_address(token), method))

    def count(self, method: str, token: str | None = None) -> int:
        return sum(1 for m, t in self.calls if m == method and (token is None or t == normalize_address(token)))

    def _token(self, method: str, token: str) -> FakeToken:
        address = normalize_address(token)
        self.calls.append((method, address))
        if (address, method) in self.failing or address not in self.tokens:
            raise _revert(method, address)
        return self.tokens[address]

    async def symbol(self, token: str) -> str:
        return self._token("symbol", token).symbol

    async def name(self, token: str) -> str:
        return self._token("name", token).name

    async def decimals(self, token: str) -> int:
        return self._token("decimals", token).decimals

    async def owner(self, token: str) -> str:
        return self._token("owner", token).owner

    async def total_supply(self, token: str) -> int:
        return self._token("total_supply", token).total_supply

    async def balance_of(self, token: str, holder: str) -> int:
        return self._token("balance_of", token).balances.get(normalize_address(holder), 0)

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        state = self._token("allowance", token)
        return state.allowances.get((normalize_address(owner), normalize_address(spender)), 0)


# =============================================================================
# Pools
# =============================================================================


@dataclass
class FakePool:
    """Launch pool state served by FakePoolReader.

    Defaults describe a USDC (token0) / LAUNCH (token1) pool.
    """

    token0: str = USDC
    token1: str = LAUNCH
    fee: int = 10_000
    owner: str = CREATOR
    reserve: str = USDC
    launch: str = LAUNCH
    sqrt_price_x96: int = 2**96
    reserve0: int = 0
    reserve1: int = 0
    curve: RawCurveParams = field(default_factory=lambda: RawCurveParams(0, 0, 0, 0))
    expected_out: ExpectedSwap = field(default_factory=lambda: ExpectedSwap(1_000_000, 1_000 * 10**18, 2**96))
    expected_in: ExpectedSwap = field(default_factory=lambda: ExpectedSwap(1_000_000, 1_000 * 10**18, 2**96))


class FakePoolReader:
    """PoolReader over a dict of FakePool keyed by address."""

    def __init__(self, pools: dict[str, FakePool] | None = None) -> None:
        self.pools = {normalize_address(a): p for a, p in (pools or {}).items()}
        self.failing: set[tuple[str, str]] = set()
        self.calls: list[tuple] = []

    def fail(self, pool: str, method: str) -> None:
        self.failing.add((normalize_address(pool), method))

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    def _pool(self, method: str, pool: str, *args) -> FakePool:
        address = normalize_address(pool)
        self.calls.append((method, address, *args))
        if (address, method) in self.failing or address not in self.pools:
            raise _revert(method, address)
        return self.pools[address]

    async def token0(self, pool: str) -> str:
        return self._pool("token0", pool).token0

    async def token1(self, pool: str) -> str:
        return self._pool("token1", pool).token1

    async def fee(self, pool: str) -> int:
        return self._pool("fee", pool).fee

    async def owner(self, pool: str) -> str:
        return self._pool("owner", pool).owner

    async def reserve_token(self, pool: str) -> str:
        return self._pool("reserve_token", pool).reserve

    async def launch_token(self, pool: str) -> str:
        return self._pool("launch_token", pool).launch

    async def sqrt_price_x96(self, pool: str) -> int:
        return self._pool("sqrt_price_x96", pool).sqrt_price_x96

    async def reserves(self, pool: str) -> tuple[int, int]:
        state = self._pool("reserves", pool)
        return state.reserve0, state.reserve1

    async def curve(self, pool: str) -> RawCurveParams:
        return self._pool("curve", pool).curve

    async def compute_expected_tokens_out(
        self,
        pool: str,
        input_token: str,
        max_tokens_in: int,
        sqrt_price_x96: int,
        sqrt_price_limit_x96: int,
    ) -> ExpectedSwap:
        state = self._pool(
            "compute_expected_tokens_out", pool, input_token, max_tokens_in, sqrt_price_x96, sqrt_price_limit_x96
        )
        return state.expected_out

    async def compute_expected_tokens_in(
        self,
        pool: str,
        input_token: str,
        max_tokens_out: int,
        sqrt_price_x96: int,
        sqrt_price_limit_x96: int,
    ) -> ExpectedSwap:
        state = self._pool(
            "compute_expected_tokens_in", pool, input_token, max_tokens_out, sqrt_price_x96, sqrt_price_limit_x96
        )
        return state.expected_in


# =============================================================================
# Factory
# =============================================================================


class FakeFactoryReader:
    """FactoryReader over an in-memory registry and pool map.

    Registry reads yield to the event loop once, like a real RPC round trip.

    Args:
        details: Registry entries, oldest first
        pools: (token_a, token_b) -> pool address, looked up in either order
    """

    def __init__(
        self,
        details: list[TokenDetail] | None = None,
        pools: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self.details = list(details or [])
        self.pools = {
            frozenset((normalize_address(a), normalize_address(b))): normalize_address(p)
            for (a, b), p in (pools or {}).items()
        }
        self.failing_ranges: set[tuple[int, int]] = set()
        self.fail_total = False
        self.calls: list[tuple] = []

    def range_calls(self) -> list[tuple[int, int]]:
        return [(call[1], call[2]) for call in self.calls if call[0] in ("list_many_token_details", "list_many_tokens")]

    async def total_tokens(self) -> int:
        self.calls.append(("total_tokens",))
        await asyncio.sleep(0)
        if self.fail_total:
            raise _revert("totalTokens", "factory")
        return len(self.details)


    async def list_many_tokens(self, start: int, end: int) -> list[str]:
        self.calls.append(("list_many_tokens", start, end))
        if (start, end) in self.failing_ranges:
            raise _revert("listManyTokens", "factory")
        return [d.token for d in self.details[start:end]]

    async def list_many_token_details(self, start: int, end: int) -> list[TokenDetail]:
        self.calls.append(("list_many_token_details", start, end))
        await asyncio.sleep(0)
        if (start, end) in self.failing_ranges:
            raise _revert("listManyTokenDetails", "factory")
        return self.details[start:end]

    async def get_pool(self, token_a: str, token_b: str, fee: int) -> str:
        self.calls.append(("get_pool", normalize_address(token_a), normalize_address(token_b), fee))
        key = frozenset((normalize_address(token_a), normalize_address(token_b)))
        return self.pools.get(key, ZERO_ADDRESS)


# =============================================================================
# Transactions
# =============================================================================


class FakeSubmitter:
    """TransactionSubmitter that confirms everything immediately.

    Methods listed in ``reverting`` confirm with status 0; methods listed in
    ``rejecting`` raise TransactionError on submission.
    """

    def __init__(self, account: str = ACCOUNT, created_token: str | None = None) -> None:
        self._account = normalize_address(account)
        self.created_token = created_token
        self.reverting: set[str] = set()
        self.rejecting: set[str] = set()
        self.calls: list[tuple] = []
        self.confirmed: list[str] = []

    @property
    def account(self) -> str:
        return self._account

    def methods(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _submit(self, method: str, to: str, *args) -> PendingTransaction:
        self.calls.append((method, normalize_address(to), *args))
        if method in self.rejecting:
            raise TransactionError(f"{method} rejected (user denied transaction signature)")
        return PendingTransaction(tx_hash=f"0x{len(self.calls):064x}", method=method, to=normalize_address(to))

    async def approve(self, token: str, spender: str, amount: int) -> PendingTransaction:
        return self._submit("approve", token, normalize_address(spender), amount)

    async def swap_exact_in(
        self, swapper: str, pool: str, zero_for_one: bool, amount_in: int, minimum_out: int
    ) -> PendingTransaction:
        return self._submit("swapV3ExactIn", swapper, normalize_address(pool), zero_for_one, amount_in, minimum_out)

    async def swap_exact_out(
        self, swapper: str, pool: str, zero_for_one: bool, amount_out: int, maximum_in: int
    ) -> PendingTransaction:
        return self._submit("swapV3ExactOut", swapper, normalize_address(pool), zero_for_one, amount_out, maximum_in)

    async def collect(
        self,
        pool: str,
        recipient: str,
        tick_lower: int,
        tick_upper: int,
        amount0_requested: int,
        amount1_requested: int,
    ) -> PendingTransaction:
        return self._submit(
            "collect", pool, normalize_address(recipient), tick_lower, tick_upper, amount0_requested, amount1_requested
        )

    async def launch_token(self, factory: str, args: tuple) -> PendingTransaction:
        return self._submit("launchToken", factory, args)

    async def wait_for_confirmation(self, tx: PendingTransaction) -> TransactionReceipt:
        self.confirmed.append(tx.method)
        events: dict[str, dict[str, object]] = {}
        if tx.method == "launchToken" and self.created_token:
            events["TokenCreated"] = {"token": self.created_token}
        return TransactionReceipt(
            tx_hash=tx.tx_hash,
            block_number=len(self.confirmed),
            status=0 if tx.method in self.reverting else 1,
            events=events,
        )


__all__ = [
    "FakeToken",
    "FakeTokenReader",
    "FakePool",
    "FakePoolReader",
    "FakeFactoryReader",
    "FakeSubmitter",
]
