"""web3.py implementations of the contract capability interfaces.

Reads use ``eth_call`` through an ``AsyncWeb3`` provider; writes are sent
from an account the node can sign for. Library exceptions are wrapped into
RpcError / TransactionError at this boundary.
"""

from __future__ import annotations

from typing import Any

import structlog
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.logs import DISCARD

from launchpad.chain.abi import ERC20_ABI, FACTORY_ABI, POOL_ABI, POOL_FACTORY_ABI, SWAPPER_ABI
from launchpad.chain.interfaces import (
    ExpectedSwap,
    PendingTransaction,
    RawCurveParams,
    TokenDetail,
    TransactionReceipt,
)
from launchpad.config import NetworkConfig
from launchpad.errors import RpcError, TransactionError
from launchpad.models.types import normalize_address

logger = structlog.get_logger()


def create_web3(rpc_url: str) -> AsyncWeb3:
    """Async web3 client for an HTTP RPC endpoint."""
    return AsyncWeb3(AsyncHTTPProvider(rpc_url))


class _ContractCaller:
    """Shared contract construction and read-call error wrapping."""

    def __init__(self, w3: AsyncWeb3) -> None:
        self.w3 = w3

    def _contract(self, address: str, abi: list[dict]) -> Any:
        return self.w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)

    async def _call(self, address: str, abi: list[dict], method: str, *args: Any) -> Any:
        contract = self._contract(address, abi)
        try:
            return await getattr(contract.functions, method)(*args).call()
        except Exception as e:
            raise RpcError(f"{method} call failed for {address}: {e}", address=address, method=method) from e


def _checksum(address: str) -> str:
    return AsyncWeb3.to_checksum_address(address)


class Web3TokenReader(_ContractCaller):
    """ERC-20 reads."""

    async def symbol(self, token: str) -> str:
        return str(await self._call(token, ERC20_ABI, "symbol"))

    async def name(self, token: str) -> str:
        return str(await self._call(token, ERC20_ABI, "name"))

    async def decimals(self, token: str) -> int:
        return int(await self._call(token, ERC20_ABI, "decimals"))

    async def owner(self, token: str) -> str:
        return normalize_address(await self._call(token, ERC20_ABI, "owner"))

    async def total_supply(self, token: str) -> int:
        return int(await self._call(token, ERC20_ABI, "totalSupply"))

    async def balance_of(self, token: str, holder: str) -> int:
        return int(await self._call(token, ERC20_ABI, "balanceOf", _checksum(holder)))

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        return int(
            await self._call(token, ERC20_ABI, "allowance", _checksum(owner), _checksum(spender))
        )


class Web3PoolReader(_ContractCaller):
    """Launch pool reads, including the pool's own quote simulation."""

    async def token0(self, pool: str) -> str:
        return normalize_address(await self._call(pool, POOL_ABI, "token0"))

    async def token1(self, pool: str) -> str:
        return normalize_address(await self._call(pool, POOL_ABI, "token1"))

    async def fee(self, pool: str) -> int:
        return int(await self._call(pool, POOL_ABI, "fee"))

    async def owner(self, pool: str) -> str:
        return normalize_address(await self._call(pool, POOL_ABI, "owner"))

    async def reserve_token(self, pool: str) -> str:
        return normalize_address(await self._call(pool, POOL_ABI, "reserve"))

    async def launch_token(self, pool: str) -> str:
        return normalize_address(await self._call(pool, POOL_ABI, "launch"))

    async def sqrt_price_x96(self, pool: str) -> int:
        slot0 = await self._call(pool, POOL_ABI, "slot0")
        return int(slot0[0])

    async def reserves(self, pool: str) -> tuple[int, int]:
        reserve0, reserve1 = await self._call(pool, POOL_ABI, "getReserves")
        return int(reserve0), int(reserve1)

    async def curve(self, pool: str) -> RawCurveParams:
        start_price, switch_price, curve_limit, reserve_offset = await self._call(pool, POOL_ABI, "curve")
        return RawCurveParams(
            start_price=int(start_price),
            switch_price=int(switch_price),
            curve_limit=int(curve_limit),
            reserve_offset=int(reserve_offset),
        )

    async def compute_expected_tokens_out(
        self,
        pool: str,
        input_token: str,
        max_tokens_in: int,
        sqrt_price_x96: int,
        sqrt_price_limit_x96: int,
    ) -> ExpectedSwap:
        result = await self._call(
            pool,
            POOL_ABI,
            "computeExpectedTokensOut",
            _checksum(input_token),
            max_tokens_in,
            sqrt_price_x96,
            sqrt_price_limit_x96,
        )
        return ExpectedSwap(int(result[0]), int(result[1]), int(result[2]))

    async def compute_expected_tokens_in(
        self,
        pool: str,
        input_token: str,
        max_tokens_out: int,
        sqrt_price_x96: int,
        sqrt_price_limit_x96: int,
    ) -> ExpectedSwap:
        result = await self._call(
            pool,
            POOL_ABI,
            "computeExpectedTokensIn",
            _checksum(input_token),
            max_tokens_out,
            sqrt_price_x96,
            sqrt_price_limit_x96,
        )
        return ExpectedSwap(int(result[0]), int(result[1]), int(result[2]))


class Web3FactoryReader(_ContractCaller):
    """Launchpad factory registry reads plus the pool factory's getPool."""

    def __init__(self, w3: AsyncWeb3, network: NetworkConfig) -> None:
        super().__init__(w3)
        self.network = network

    async def total_tokens(self) -> int:
        return int(await self._call(self.network.factory_address, FACTORY_ABI, "totalTokens"))

    async def list_many_tokens(self, start: int, end: int) -> list[str]:
        addresses = await self._call(self.network.factory_address, FACTORY_ABI, "listManyTokens", start, end)
        return [normalize_address(a) for a in addresses]

    async def list_many_token_details(self, start: int, end: int) -> list[TokenDetail]:
        rows = await self._call(self.network.factory_address, FACTORY_ABI, "listManyTokenDetails", start, end)
        return [
            TokenDetail(
                token=normalize_address(token),
                owner=normalize_address(owner),
                name=name,
                symbol=symbol,
            )
            for token, owner, name, symbol in rows
        ]

    async def get_pool(self, token_a: str, token_b: str, fee: int) -> str:
        pool = await self._call(
            self.network.pool_factory_address,
            POOL_FACTORY_ABI,
            "getPool",
            _checksum(token_a),
            _checksum(token_b),
            fee,
        )
        return normalize_address(pool)


class Web3TransactionSubmitter(_ContractCaller):
    """Sends transactions from ``account`` (signed by the connected node)."""

    def __init__(self, w3: AsyncWeb3, account: str, confirmation_timeout: float = 120.0) -> None:
        super().__init__(w3)
        self._account = _checksum(account)
        self.confirmation_timeout = confirmation_timeout

    @property
    def account(self) -> str:
        return normalize_address(self._account)

    async def _send(self, address: str, abi: list[dict], method: str, *args: Any) -> PendingTransaction:
        contract = self._contract(address, abi)
        try:
            tx_hash = await getattr(contract.functions, method)(*args).transact({"from": self._account})
        except Exception as e:
            raise TransactionError(f"{method} submission failed: {e}") from e
        pending = PendingTransaction(tx_hash=AsyncWeb3.to_hex(tx_hash), method=method, to=normalize_address(address))
        logger.info("transaction_submitted", method=method, to=pending.to, tx_hash=pending.tx_hash)
        return pending

    async def approve(self, token: str, spender: str, amount: int) -> PendingTransaction:
        return await self._send(token, ERC20_ABI, "approve", _checksum(spender), amount)

    async def swap_exact_in(
        self, swapper: str, pool: str, zero_for_one: bool, amount_in: int, minimum_out: int
    ) -> PendingTransaction:
        return await self._send(
            swapper, SWAPPER_ABI, "swapV3ExactIn", _checksum(pool), zero_for_one, amount_in, minimum_out
        )

    async def swap_exact_out(
        self, swapper: str, pool: str, zero_for_one: bool, amount_out: int, maximum_in: int
    ) -> PendingTransaction:
        return await self._send(
            swapper, SWAPPER_ABI, "swapV3ExactOut", _checksum(pool), zero_for_one, amount_out, maximum_in
        )

    async def collect(
        self,
        pool: str,
        recipient: str,
        tick_lower: int,
        tick_upper: int,
        amount0_requested: int,
        amount1_requested: int,
    ) -> PendingTransaction:
        return await self._send(
            pool,
            POOL_ABI,
            "collect",
            _checksum(recipient),
            tick_lower,
            tick_upper,
            amount0_requested,
            amount1_requested,
        )

    async def launch_token(self, factory: str, args: tuple) -> PendingTransaction:
        name, symbol, description, decimals, reserve, *rest = args
        return await self._send(
            factory, FACTORY_ABI, "launchToken", name, symbol, description, decimals, _checksum(reserve), *rest
        )

    async def wait_for_confirmation(self, tx: PendingTransaction) -> TransactionReceipt:
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx.tx_hash, timeout=self.confirmation_timeout
            )
        except Exception as e:
            raise TransactionError(f"{tx.method} confirmation failed: {e}", tx_hash=tx.tx_hash) from e

        events: dict[str, dict[str, object]] = {}
        if tx.method == "launchToken":
            factory = self._contract(tx.to, FACTORY_ABI)
            for log in factory.events.TokenCreated().process_receipt(receipt, errors=DISCARD):
                events["TokenCreated"] = {
                    "token": normalize_address(log["args"]["token"]),
                    "decimals": int(log["args"]["decimals"]),
                    "name": log["args"]["name"],
                    "symbol": log["args"]["symbol"],
                }

        return TransactionReceipt(
            tx_hash=tx.tx_hash,
            block_number=int(receipt["blockNumber"]),
            status=int(receipt["status"]),
            events=events,
        )


__all__ = [
    "create_web3",
    "Web3TokenReader",
    "Web3PoolReader",
    "Web3FactoryReader",
    "Web3TransactionSubmitter",
]
