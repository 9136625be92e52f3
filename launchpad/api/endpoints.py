"""API endpoints for the launchpad engine."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from launchpad.api.schemas import (
    ChartPoint,
    CurveParams,
    CurvePreviewResponse,
    DeployParamsResponse,
    PoolResponse,
    QuoteRequest,
    QuoteResponse,
    TokenListResponse,
    TokenMetadataResponse,
    TokenRecordResponse,
)
from launchpad.config import get_network
from launchpad.curve.launch import LaunchInputs, derive_deploy_params
from launchpad.engine import LaunchpadEngine, NetworkSession, get_default_engine
from launchpad.errors import (
    CurveConfigError,
    PoolNotFoundError,
    PoolNotInitializedError,
    RpcError,
    summarize_error,
)
from launchpad.models.types import normalize_address
from launchpad.registry.enumerator import EnumerationOrder

logger = structlog.get_logger()

router = APIRouter()


def get_engine() -> LaunchpadEngine:
    """Dependency provider for the engine instance.

    Override this in tests to inject fake collaborators:
        app.dependency_overrides[get_engine] = lambda: engine
    """
    return get_default_engine()


def _session(engine: LaunchpadEngine, network: str) -> NetworkSession:
    try:
        return engine.session(network)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unsupported network: {network}") from e


def _address(value: str) -> str:
    try:
        return normalize_address(value, validate=True)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _rpc_failure(error: RpcError, **context: object) -> HTTPException:
    logger.warning("rpc_read_failed", error=str(error), **context)
    return HTTPException(status_code=502, detail=summarize_error(error))


@router.post("/curve/preview")
async def preview_curve(
    inputs: LaunchInputs,
    network: str = Query(default="mainnet"),
    engine: LaunchpadEngine = Depends(get_engine),
) -> CurvePreviewResponse:
    """Derive the curve, the raw deploy arguments and chart samples for a launch.

    Error Handling:
        - Invalid curve inputs: 422 with the validation message
        - Unknown network or reserve token symbol: 404
        - Reserve decimals disagreeing with the network token: 422
    """
    try:
        reserve = get_network(network).reserve_token(inputs.reserve_token_symbol)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=e.args[0]) from e
    if inputs.reserve_token_decimals != reserve.decimals:
        raise HTTPException(
            status_code=422,
            detail=(
                f"{inputs.reserve_token_symbol} has {reserve.decimals} decimals on {network}, "
                f"not {inputs.reserve_token_decimals}"
            ),
        )

    try:
        curve = inputs.curve()
        params = derive_deploy_params(inputs, reserve.address, fee=engine.config.fee_tier)
    except CurveConfigError as e:
        logger.info("curve_preview_rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e)) from e

    samples = curve.samples(steps=engine.config.chart_steps, horizon=engine.config.chart_horizon)
    return CurvePreviewResponse(
        curve=CurveParams.from_curve(curve),
        deploy=DeployParamsResponse.from_params(params),
        chart=[ChartPoint(x=float(x), price=float(price)) for x, price in samples],
    )


@router.get("/{network}/tokens")
async def list_tokens(
    network: str,
    order: EnumerationOrder = EnumerationOrder.NEWEST_FIRST,
    owner: str | None = None,
    engine: LaunchpadEngine = Depends(get_engine),
) -> TokenListResponse:
    """List launched tokens from the factory registry.

    Error Handling:
        - A list for the same network and order already loading: 409
        - Failed registry batches are skipped, not reported as errors
    """
    _session(engine, network)
    owner_address = _address(owner) if owner else None

    records = await engine.list_tokens(network, order=order, owner=owner_address)
    if records is None:
        raise HTTPException(status_code=409, detail="Token list is already loading")

    logger.info("tokens_listed", network=network, order=order.value, count=len(records))
    return TokenListResponse(
        network=network,
        order=order.value,
        count=len(records),
        tokens=[TokenRecordResponse.from_record(r) for r in records],
    )


@router.get("/{network}/tokens/{address}")
async def token_details(
    network: str,
    address: str,
    engine: LaunchpadEngine = Depends(get_engine),
) -> TokenMetadataResponse:
    """Cached token metadata."""
    session = _session(engine, network)
    token = _address(address)
    try:
        metadata = await session.metadata.token_metadata(token)
    except RpcError as e:
        raise _rpc_failure(e, network=network, token=token) from e
    return TokenMetadataResponse.from_metadata(metadata, session.network.explorer_link(token))


@router.get("/{network}/pools/{address}")
async def pool_details(
    network: str,
    address: str,
    engine: LaunchpadEngine = Depends(get_engine),
) -> PoolResponse:
    """Pool attributes and curve (cached) with live price and reserves (fresh).

    Error Handling:
        - Read failure: 502 with a summarized message
        - Stored curve parameters invalid: 422
        - Pool not initialized (zero sqrtPriceX96): 409
    """
    session = _session(engine, network)
    pool = _address(address)
    try:
        metadata = await session.metadata.pool_metadata(pool)
        live = await session.metadata.pool_live_state(pool)
        price = await session.metadata.current_price(pool)
        invested = await session.metadata.reserve_invested(pool)
        fee_percent = await session.metadata.fee_percent(pool)
    except RpcError as e:
        raise _rpc_failure(e, network=network, pool=pool) from e
    except PoolNotInitializedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except CurveConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return PoolResponse.build(
        metadata,
        live,
        fee_percent=fee_percent,
        price=price,
        reserve_invested=invested,
    )


@router.post("/{network}/quote")
async def quote(
    network: str,
    request: QuoteRequest,
    engine: LaunchpadEngine = Depends(get_engine),
) -> QuoteResponse:
    """Quote a swap with the slippage bound applied.

    Error Handling:
        - No pool for the pair: 404
        - Same token on both sides or zero amount: 422
        - Read failure: 502 with a summarized message
    """
    session = _session(engine, network)
    try:
        swap_quote = await session.quotes.estimate_swap(
            request.token_in,
            request.token_out,
            int(request.amount),
            exact_input=request.exact_input,
        )
    except PoolNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except RpcError as e:
        raise _rpc_failure(e, network=network, token_in=request.token_in, token_out=request.token_out) from e

    logger.info(
        "quote_served",
        network=network,
        pool=swap_quote.pool_address,
        exact_input=swap_quote.exact_input,
        tokens_in=swap_quote.tokens_in,
        tokens_out=swap_quote.tokens_out,
    )
    return QuoteResponse.from_quote(swap_quote)
