"""Tests for swap quoting, approval and transaction flows."""

import asyncio

import pytest

from launchpad.chain.interfaces import ExpectedSwap
from launchpad.constants import SQRT_PRICE_LIMIT_DOWN, SQRT_PRICE_LIMIT_UP
from launchpad.curve.launch import derive_deploy_params
from launchpad.errors import PoolNotFoundError, TransactionError
from launchpad.quotes.engine import SwapQuoteEngine, apply_slippage
from tests.helpers import (
    ACCOUNT,
    LAUNCH,
    POOL,
    SWAPPER,
    USDC,
    WETH,
    FakeSubmitter,
    make_launch_inputs,
    make_network,
    make_pool_world,
)


def make_engine(submitter: FakeSubmitter | None = None, swapper: str | None = SWAPPER):
    tokens, pools, factory = make_pool_world()
    engine = SwapQuoteEngine(make_network(swapper=swapper), factory, pools, tokens, submitter=submitter)
    return engine, tokens, pools, factory


class TestApplySlippage:
    @pytest.mark.parametrize("quoted", [1, 99, 100, 12_345, 10**18 + 7])
    def test_minimum_out_never_above_quote(self, quoted: int) -> None:
        assert apply_slippage(quoted, 98) <= quoted

    @pytest.mark.parametrize("quoted", [1, 99, 100, 12_345, 10**18 + 7])
    def test_maximum_in_never_below_quote(self, quoted: int) -> None:
        assert apply_slippage(quoted, 102) >= quoted

    def test_floor_division(self) -> None:
        assert apply_slippage(99, 98) == 97
        assert apply_slippage(99, 102) == 100


class TestEstimateSwap:
    def test_exact_input_reduces_output(self) -> None:
        engine, _, _, _ = make_engine()

        quote = asyncio.run(engine.estimate_swap(USDC, LAUNCH, 1_000_000))

        assert quote.pool_address == POOL
        assert quote.zero_for_one is True
        assert quote.exact_input is True
        assert quote.tokens_in == 1_000_000
        assert quote.tokens_out == 980 * 10**18
        assert quote.quoted_tokens_out == 1_000 * 10**18
        assert quote.bound == quote.tokens_out

    def test_exact_input_passes_down_limit(self) -> None:
        engine, _, pools, _ = make_engine()
        asyncio.run(engine.estimate_swap(USDC, LAUNCH, 1_000_000))

        method, pool, token_in, amount, sqrt_price, limit = pools.calls[-1]
        assert (method, pool, token_in, amount) == ("compute_expected_tokens_out", POOL, USDC, 1_000_000)
        assert sqrt_price == pools.pools[POOL].sqrt_price_x96
        assert limit == SQRT_PRICE_LIMIT_DOWN

    def test_exact_output_raises_input(self) -> None:
        engine, _, pools, _ = make_engine()
        pools.pools[POOL].expected_in = ExpectedSwap(500 * 10**18, 1_000_000, 0)

        quote = asyncio.run(engine.estimate_swap(LAUNCH, USDC, 1_000_000, exact_input=False))

        assert quote.zero_for_one is False
        assert quote.tokens_in == 510 * 10**18
        assert quote.tokens_out == 1_000_000
        assert quote.bound == quote.tokens_in
        assert pools.calls[-1][0] == "compute_expected_tokens_in"
        assert pools.calls[-1][-1] == SQRT_PRICE_LIMIT_UP

    def test_price_limit_values_per_direction(self) -> None:
        engine, _, _, _ = make_engine()
        assert engine.price_limit(True) == 0x00FFFD8963EFD1FC6A506488495D951D5263988D00
        assert engine.price_limit(False) == 0x1000276FF

    def test_direction_uses_lowercase_ordering(self) -> None:
        engine, _, _, _ = make_engine()
        quote = asyncio.run(engine.estimate_swap(LAUNCH.upper().replace("0X", "0x"), USDC, 10**18))
        assert quote.zero_for_one is False

    def test_pool_lookup_uses_fee_tier(self) -> None:
        engine, _, _, factory = make_engine()
        asyncio.run(engine.estimate_swap(USDC, LAUNCH, 1_000_000))
        assert factory.calls[0] == ("get_pool", USDC, LAUNCH, 10_000)

    def test_missing_pool(self) -> None:
        engine, _, pools, _ = make_engine()

        with pytest.raises(PoolNotFoundError, match="Pool not found"):
            asyncio.run(engine.estimate_swap(WETH, LAUNCH, 10**18))
        assert pools.calls == []

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount_rejected(self, amount: int) -> None:
        engine, _, _, _ = make_engine()
        with pytest.raises(ValueError, match="positive"):
            asyncio.run(engine.estimate_swap(USDC, LAUNCH, amount))

    def test_same_token_rejected(self) -> None:
        engine, _, _, _ = make_engine()
        with pytest.raises(ValueError, match="itself"):
            asyncio.run(engine.estimate_swap(USDC, USDC, 1))


class TestApproval:
    def test_approves_when_allowance_short(self) -> None:
        submitter = FakeSubmitter()
        engine, _, _, _ = make_engine(submitter)

        receipt = asyncio.run(engine.ensure_approval(USDC, 1_000_000))

        assert receipt is not None and receipt.succeeded
        assert submitter.calls == [("approve", USDC, SWAPPER, 1_000_000)]
        assert submitter.confirmed == ["approve"]

    def test_skips_when_allowance_sufficient(self) -> None:
        submitter = FakeSubmitter()
        engine, tokens, _, _ = make_engine(submitter)
        tokens.tokens[USDC].allowances[(ACCOUNT, SWAPPER)] = 10**12

        assert asyncio.run(engine.ensure_approval(USDC, 1_000_000)) is None
        assert submitter.calls == []

    def test_reverted_approval_raises(self) -> None:
        submitter = FakeSubmitter()
        submitter.reverting.add("approve")
        engine, _, _, _ = make_engine(submitter)

        with pytest.raises(TransactionError, match="reverted"):
            asyncio.run(engine.ensure_approval(USDC, 1_000_000))


class TestExecuteSwap:
    def test_exact_input_flow(self) -> None:
        submitter = FakeSubmitter()
        engine, _, _, _ = make_engine(submitter)

        receipt = asyncio.run(engine.execute_swap(USDC, LAUNCH, 1_000_000))

        assert receipt.succeeded
        assert submitter.methods() == ["approve", "swapV3ExactIn"]
        assert submitter.calls[1] == ("swapV3ExactIn", SWAPPER, POOL, True, 1_000_000, 980 * 10**18)

    def test_exact_output_flow(self) -> None:
        submitter = FakeSubmitter()
        engine, tokens, pools, _ = make_engine(submitter)
        tokens.tokens[LAUNCH].allowances[(ACCOUNT, SWAPPER)] = 10**30
        pools.pools[POOL].expected_in = ExpectedSwap(500 * 10**18, 1_000_000, 0)

        asyncio.run(engine.execute_swap(LAUNCH, USDC, 1_000_000, exact_input=False))

        assert submitter.calls == [("swapV3ExactOut", SWAPPER, POOL, False, 1_000_000, 510 * 10**18)]

    def test_rejected_swap_not_retried(self) -> None:
        submitter = FakeSubmitter()
        submitter.rejecting.add("swapV3ExactIn")
        engine, tokens, _, _ = make_engine(submitter)
        tokens.tokens[USDC].allowances[(ACCOUNT, SWAPPER)] = 10**12

        with pytest.raises(TransactionError, match="rejected"):
            asyncio.run(engine.execute_swap(USDC, LAUNCH, 1_000_000))
        assert submitter.methods() == ["swapV3ExactIn"]

    def test_requires_submitter(self) -> None:
        engine, _, _, _ = make_engine(None)
        with pytest.raises(TransactionError, match="submitter"):
            asyncio.run(engine.execute_swap(USDC, LAUNCH, 1_000_000))

    def test_requires_swapper(self) -> None:
        engine, _, _, _ = make_engine(FakeSubmitter(), swapper=None)
        with pytest.raises(TransactionError, match="Swapper not configured"):
            asyncio.run(engine.execute_swap(USDC, LAUNCH, 1_000_000))


class TestCollectAndDeploy:
    def test_collect_full_range(self) -> None:
        submitter = FakeSubmitter()
        engine, _, _, _ = make_engine(submitter)

        asyncio.run(engine.collect_fees(POOL))

        assert submitter.calls == [("collect", POOL, ACCOUNT, -887272, 887272, 2**127, 2**127)]

    def test_deploy_returns_created_token(self) -> None:
        submitter = FakeSubmitter(created_token=LAUNCH.upper().replace("0X", "0x"))
        engine, _, _, _ = make_engine(submitter)
        params = derive_deploy_params(make_launch_inputs(), USDC)

        assert asyncio.run(engine.deploy_token(params)) == LAUNCH
        method, factory, args = submitter.calls[0]
        assert method == "launchToken"
        assert factory == engine.network.factory_address
        assert args == params.as_call_args()

    def test_deploy_without_event_raises(self) -> None:
        engine, _, _, _ = make_engine(FakeSubmitter())
        params = derive_deploy_params(make_launch_inputs(), USDC)

        with pytest.raises(TransactionError, match="TokenCreated"):
            asyncio.run(engine.deploy_token(params))
