"""Configuration for the launchpad engine.

Network addresses come from ``launchpad.constants``; tunables can be
overridden through ``LAUNCHPAD_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from launchpad import constants
from launchpad.models.types import normalize_address


@dataclass(frozen=True)
class ReserveToken:
    """A token that can back a launch curve on a given network."""

    symbol: str
    address: str
    decimals: int


@dataclass(frozen=True)
class NetworkConfig:
    """Addresses and endpoints for one supported network.

    Attributes:
        name: Network key ("mainnet" or "testnet"); also scopes cache entries
        chain_id: EVM chain id
        rpc_url: JSON-RPC endpoint used for reads
        explorer_url: Block explorer base URL
        factory_address: Launchpad factory (registry and launchToken)
        pool_factory_address: Pool factory resolving pair+fee to a pool
        swapper_address: Swap router the user approves and calls, if deployed
        reserve_tokens: Reserve tokens by symbol
    """

    name: str
    chain_id: int
    rpc_url: str
    explorer_url: str
    factory_address: str
    pool_factory_address: str
    swapper_address: str | None = None
    reserve_tokens: dict[str, ReserveToken] = field(default_factory=dict)

    def reserve_token(self, symbol: str) -> ReserveToken:
        """Look up a reserve token by symbol.

        Raises:
            KeyError: If the symbol is not a reserve token on this network
        """
        try:
            return self.reserve_tokens[symbol.upper()]
        except KeyError:
            raise KeyError(f"Reserve token {symbol} not configured for {self.name}") from None

    def explorer_link(self, address: str, root: str = "/address/") -> str:
        return f"{self.explorer_url}{root}{address}"


@dataclass(frozen=True)
class EngineConfig:
    """Centralized tunables for quoting, enumeration and charting.

    Attributes:
        fee_tier: Pool fee tier used to resolve pools (10000 = 1%)
        batch_size: Registry records fetched per range call
        fetch_cap: Maximum number of registry records enumerated
        slippage_exact_in_percent: Percent of quoted output kept as minimum-out
        slippage_exact_out_percent: Percent of quoted input allowed as maximum-in
        sqrt_price_limit_down: Price limit for zero-for-one quotes
        sqrt_price_limit_up: Price limit for one-for-zero quotes
        chart_steps: Samples over the linear segment of the chart
        chart_horizon: Chart extends to curve_limit * chart_horizon
        cache_path: Directory holding one JSON cache file per network
            (None = in memory)
    """

    fee_tier: int = constants.FEE_TIER
    batch_size: int = constants.BATCH_SIZE
    fetch_cap: int = constants.MAX_TOKENS_FETCH
    slippage_exact_in_percent: int = constants.SLIPPAGE_EXACT_IN_PERCENT
    slippage_exact_out_percent: int = constants.SLIPPAGE_EXACT_OUT_PERCENT
    sqrt_price_limit_down: int = constants.SQRT_PRICE_LIMIT_DOWN
    sqrt_price_limit_up: int = constants.SQRT_PRICE_LIMIT_UP
    chart_steps: int = constants.CHART_STEPS
    chart_horizon: int = constants.CHART_HORIZON
    cache_path: Path | None = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.fetch_cap < 0:
            raise ValueError(f"fetch_cap cannot be negative, got {self.fetch_cap}")
        if not 0 < self.slippage_exact_in_percent < 100:
            raise ValueError("slippage_exact_in_percent must be in (0, 100)")
        if self.slippage_exact_out_percent <= 100:
            raise ValueError("slippage_exact_out_percent must be above 100")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EngineConfig:
        """Build a config from LAUNCHPAD_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        int_vars = {
            "LAUNCHPAD_FEE_TIER": "fee_tier",
            "LAUNCHPAD_BATCH_SIZE": "batch_size",
            "LAUNCHPAD_FETCH_CAP": "fetch_cap",
            "LAUNCHPAD_CHART_STEPS": "chart_steps",
            "LAUNCHPAD_CHART_HORIZON": "chart_horizon",
        }
        for var, attr in int_vars.items():
            if env.get(var):
                overrides[attr] = int(env[var])

        if env.get("LAUNCHPAD_CACHE_PATH"):
            overrides["cache_path"] = Path(env["LAUNCHPAD_CACHE_PATH"])

        return replace(cls(), **overrides)


def _build_network(name: str, swapper_address: str | None = None) -> NetworkConfig:
    return NetworkConfig(
        name=name,
        chain_id=constants.CHAIN_IDS[name],
        rpc_url=constants.RPC_URLS[name],
        explorer_url=constants.EXPLORER_URLS[name],
        factory_address=constants.FACTORY_ADDRESSES[name],
        pool_factory_address=constants.POOL_FACTORY_ADDRESS,
        swapper_address=normalize_address(swapper_address) if swapper_address else None,
        reserve_tokens={
            symbol: ReserveToken(symbol=symbol, address=address, decimals=decimals)
            for symbol, (address, decimals) in constants.RESERVE_TOKENS[name].items()
        },
    )


def get_network(name: str, environ: dict[str, str] | None = None) -> NetworkConfig:
    """Build the NetworkConfig for a supported network.

    The swapper address and RPC URL can be overridden with
    LAUNCHPAD_<NETWORK>_SWAPPER and LAUNCHPAD_<NETWORK>_RPC_URL.

    Raises:
        KeyError: If the network is not supported
    """
    if name not in constants.CHAIN_IDS:
        raise KeyError(f"Unsupported network: {name}")
    env = os.environ if environ is None else environ
    prefix = f"LAUNCHPAD_{name.upper()}"
    network = _build_network(name, env.get(f"{prefix}_SWAPPER"))
    if env.get(f"{prefix}_RPC_URL"):
        network = replace(network, rpc_url=env[f"{prefix}_RPC_URL"])
    return network


def network_for_chain_id(chain_id: int) -> str | None:
    """Map a chain id to a supported network name, or None if unsupported."""
    for name, known_id in constants.CHAIN_IDS.items():
        if known_id == chain_id:
            return name
    return None


SUPPORTED_NETWORKS = tuple(constants.CHAIN_IDS)

# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()


__all__ = [
    "ReserveToken",
    "NetworkConfig",
    "EngineConfig",
    "get_network",
    "network_for_chain_id",
    "SUPPORTED_NETWORKS",
    "DEFAULT_ENGINE_CONFIG",
]
