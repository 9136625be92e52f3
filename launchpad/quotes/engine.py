"""Swap quoting and execution against launch pools.

The pool simulates the trade itself (computeExpectedTokensOut/In); this
engine resolves the pool, reads the live sqrt price, picks the direction and
price limit, and applies the client-side slippage margin with integer math.
"""

from __future__ import annotations

import structlog

from launchpad.chain.interfaces import (
    FactoryReader,
    PendingTransaction,
    PoolReader,
    TokenReader,
    TransactionReceipt,
    TransactionSubmitter,
)
from launchpad.config import DEFAULT_ENGINE_CONFIG, EngineConfig, NetworkConfig
from launchpad.constants import COLLECT_AMOUNT_REQUESTED, MAX_TICK, MIN_TICK
from launchpad.curve.launch import DeployParams
from launchpad.errors import PoolNotFoundError, TransactionError
from launchpad.models.records import SwapQuote
from launchpad.models.types import is_zero_address, normalize_address, sorts_before

logger = structlog.get_logger()


def apply_slippage(amount: int, percent: int) -> int:
    """Scale a raw amount by ``percent``/100 with integer floor division."""
    return amount * percent // 100


class SwapQuoteEngine:
    """Quotes and executes swaps for one network.

    Read collaborators are always required; ``submitter`` is only needed for
    approval, swap, fee collection and deploy calls.
    """

    def __init__(
        self,
        network: NetworkConfig,
        factory: FactoryReader,
        pools: PoolReader,
        tokens: TokenReader,
        submitter: TransactionSubmitter | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self.network = network
        self.config = config
        self._factory = factory
        self._pools = pools
        self._tokens = tokens
        self._submitter = submitter

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    async def find_pool(self, token_a: str, token_b: str) -> str:
        """Resolve the pool for a pair at the configured fee tier.

        Raises:
            PoolNotFoundError: If the registry returns the zero address
        """
        pool = await self._factory.get_pool(token_a, token_b, self.config.fee_tier)
        if is_zero_address(pool):
            raise PoolNotFoundError(token_a, token_b, self.config.fee_tier)
        return normalize_address(pool)

    def price_limit(self, zero_for_one: bool) -> int:
        """Worst-case sqrtPriceX96 bound for the pool's simulation."""
        if zero_for_one:
            return self.config.sqrt_price_limit_down
        return self.config.sqrt_price_limit_up

    async def estimate_swap(
        self,
        token_in: str,
        token_out: str,
        amount: int,
        exact_input: bool = True,
    ) -> SwapQuote:
        """Quote a swap of ``amount`` raw units.

        In exact-input mode ``amount`` is spent and the quoted output is
        reduced by the slippage margin (minimum out). In exact-output mode
        ``amount`` is received and the quoted input is raised by the margin
        (maximum in).

        Raises:
            PoolNotFoundError: If no pool exists for the pair
            RpcError: If a read fails
            ValueError: If amount is not positive or the tokens are the same
        """
        if amount <= 0:
            raise ValueError(f"Swap amount must be positive, got {amount}")
        if normalize_address(token_in) == normalize_address(token_out):
            raise ValueError("Cannot swap a token for itself")

        pool = await self.find_pool(token_in, token_out)
        sqrt_price_x96 = await self._pools.sqrt_price_x96(pool)
        zero_for_one = sorts_before(token_in, token_out)
        limit = self.price_limit(zero_for_one)

        if exact_input:
            expected = await self._pools.compute_expected_tokens_out(
                pool, token_in, amount, sqrt_price_x96, limit
            )
            tokens_in = expected.tokens_in
            tokens_out = apply_slippage(expected.tokens_out, self.config.slippage_exact_in_percent)
        else:
            expected = await self._pools.compute_expected_tokens_in(
                pool, token_in, amount, sqrt_price_x96, limit
            )
            tokens_in = apply_slippage(expected.tokens_in, self.config.slippage_exact_out_percent)
            tokens_out = expected.tokens_out

        logger.debug(
            "swap_estimated",
            pool=pool,
            zero_for_one=zero_for_one,
            exact_input=exact_input,
            amount=amount,
            quoted_in=expected.tokens_in,
            quoted_out=expected.tokens_out,
        )
        return SwapQuote(
            pool_address=pool,
            zero_for_one=zero_for_one,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            exact_input=exact_input,
            quoted_tokens_in=expected.tokens_in,
            quoted_tokens_out=expected.tokens_out,
            sqrt_price_x96=sqrt_price_x96,
        )

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def _require_submitter(self) -> TransactionSubmitter:
        if self._submitter is None:
            raise TransactionError("No transaction submitter configured (wallet not connected)")
        return self._submitter

    def _require_swapper(self) -> str:
        if not self.network.swapper_address:
            raise TransactionError(f"Swapper not configured for {self.network.name}")
        return self.network.swapper_address

    async def _confirm(self, tx: PendingTransaction) -> TransactionReceipt:
        receipt = await self._require_submitter().wait_for_confirmation(tx)
        if not receipt.succeeded:
            raise TransactionError(f"Transaction {tx.method} reverted", tx_hash=receipt.tx_hash)
        return receipt

    async def ensure_approval(self, token: str, amount: int) -> TransactionReceipt | None:
        """Approve the swapper for ``amount`` of ``token`` if the allowance is short.

        Returns the approval receipt, or None when no approval was needed.
        The check and the later swap are not atomic.
        """
        submitter = self._require_submitter()
        spender = self._require_swapper()
        allowance = await self._tokens.allowance(token, submitter.account, spender)
        if allowance >= amount:
            return None

        logger.info("approval_required", token=normalize_address(token), allowance=allowance, amount=amount)
        tx = await submitter.approve(token, spender, amount)
        return await self._confirm(tx)

    async def execute_swap(
        self,
        token_in: str,
        token_out: str,
        amount: int,
        exact_input: bool = True,
    ) -> TransactionReceipt:
        """Quote, approve if needed, then submit the swap and await confirmation.

        Raises:
            PoolNotFoundError: If no pool exists for the pair
            TransactionError: If approval or swap fails; never retried
        """
        submitter = self._require_submitter()
        swapper = self._require_swapper()
        quote = await self.estimate_swap(token_in, token_out, amount, exact_input)

        await self.ensure_approval(token_in, quote.tokens_in)

        if exact_input:
            tx = await submitter.swap_exact_in(
                swapper, quote.pool_address, quote.zero_for_one, quote.tokens_in, quote.tokens_out
            )
        else:
            tx = await submitter.swap_exact_out(
                swapper, quote.pool_address, quote.zero_for_one, quote.tokens_out, quote.tokens_in
            )
        receipt = await self._confirm(tx)
        logger.info(
            "swap_executed",
            pool=quote.pool_address,
            tx_hash=receipt.tx_hash,
            exact_input=exact_input,
            tokens_in=quote.tokens_in,
            tokens_out=quote.tokens_out,
        )
        return receipt

    async def collect_fees(self, pool: str, recipient: str | None = None) -> TransactionReceipt:
        """Collect all accrued pool fees over the full tick range."""
        submitter = self._require_submitter()
        tx = await submitter.collect(
            pool,
            recipient or submitter.account,
            MIN_TICK,
            MAX_TICK,
            COLLECT_AMOUNT_REQUESTED,
            COLLECT_AMOUNT_REQUESTED,
        )
        return await self._confirm(tx)

    async def deploy_token(self, params: DeployParams) -> str:
        """Launch a token through the factory; returns the new token address.

        Raises:
            TransactionError: If the launch fails or emits no TokenCreated event
        """
        submitter = self._require_submitter()
        tx = await submitter.launch_token(self.network.factory_address, params.as_call_args())
        receipt = await self._confirm(tx)
        created = receipt.events.get("TokenCreated", {})
        token = created.get("token")
        if not token:
            raise TransactionError("TokenCreated event not found", tx_hash=receipt.tx_hash)
        logger.info("token_deployed", token=normalize_address(str(token)), tx_hash=receipt.tx_hash)
        return normalize_address(str(token))


__all__ = ["SwapQuoteEngine", "apply_slippage"]
