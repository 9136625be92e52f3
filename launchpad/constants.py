"""Protocol constants for the launchpad engine.

Centralizes well-known addresses and protocol parameters for the supported
networks (Base mainnet and Base Sepolia).
"""

from launchpad.models.types import is_valid_address, normalize_address


def _validate_address(name: str, address: str) -> str:
    """Validate an address and return it normalized to lowercase.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return normalize_address(address)


MAINNET = "mainnet"
TESTNET = "testnet"

CHAIN_IDS = {
    MAINNET: 8453,  # Base
    TESTNET: 84532,  # Base Sepolia
}

RPC_URLS = {
    MAINNET: "https://mainnet.base.org",
    TESTNET: "https://sepolia.base.org",
}

EXPLORER_URLS = {
    MAINNET: "https://basescan.org",
    TESTNET: "https://sepolia.basescan.org",
}

# Launchpad factory (token registry + launchToken)
FACTORY_ADDRESSES = {
    MAINNET: _validate_address("mainnet factory", "0x88B49d6F0BC138f52C60B33CaB2245ADe9597189"),
    TESTNET: _validate_address("testnet factory", "0x1be2351ce3840de7eea5f701688427606cd55c79"),
}

# V3-style pool factory (getPool registry)
POOL_FACTORY_ADDRESS = _validate_address(
    "pool factory", "0x263a00623e00e135ec1810280d491c0fd4e5b8dd"
)

# Reserve tokens per network: symbol -> (address, decimals)
RESERVE_TOKENS: dict[str, dict[str, tuple[str, int]]] = {
    MAINNET: {
        "USDC": (_validate_address("USDC", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"), 6),
        "WETH": (_validate_address("WETH", "0x4200000000000000000000000000000000000006"), 18),
        "USDS": (_validate_address("USDS", "0x820C137fa70C8691f0e44Dc420a5e53c168921Dc"), 18),
    },
    TESTNET: {
        "USDC": (_validate_address("USDC", "0x036CbD53842c5426634e7929541eC2318f3dCF7e"), 6),
        "WETH": (_validate_address("WETH", "0x4200000000000000000000000000000000000006"), 18),
    },
}

# Reserve decimals by symbol, the same on every network
RESERVE_DECIMALS = {
    symbol: decimals for tokens in RESERVE_TOKENS.values() for symbol, (_, decimals) in tokens.items()
}

# Pool fee tier in hundredths of a basis point (10000 = 1%)
FEE_TIER = 10_000

# Platform markup added on top of the pool fee when displaying fee percent
FEE_MARKUP_PERCENT = 0.5

# Fixed worst-case sqrtPriceX96 bounds for the pool's quote simulation.
# DOWN is sent with zero-for-one quotes and UP with the reverse direction.
# The launchpad pool reads them in the opposite sense to Uniswap V3 limits.
SQRT_PRICE_LIMIT_DOWN = 0x00FFFD8963EFD1FC6A506488495D951D5263988D00
SQRT_PRICE_LIMIT_UP = 0x1000276FF

# Client-side slippage margin applied to quoted amounts (percent of quote)
SLIPPAGE_EXACT_IN_PERCENT = 98
SLIPPAGE_EXACT_OUT_PERCENT = 102

# Registry enumeration
BATCH_SIZE = 25
MAX_TOKENS_FETCH = 50

# Fallback decimals when a token's decimals() read fails during enumeration
DEFAULT_DECIMALS = 18

# Full-range ticks and requested amounts for fee collection
MIN_TICK = -887272
MAX_TICK = 887272
COLLECT_AMOUNT_REQUESTED = 2**127

# Curve chart sampling defaults
CHART_STEPS = 50
CHART_HORIZON = 10

# Default linear-segment limit (reserve units) suggested per reserve token
DEFAULT_CURVE_LIMITS = {"WETH": 2}
DEFAULT_CURVE_LIMIT = 10_000
