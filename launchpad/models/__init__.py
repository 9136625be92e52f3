"""Launchpad data models."""

from launchpad.models.records import (
    PoolLiveState,
    PoolMetadata,
    SwapQuote,
    TokenMetadata,
    TokenRecord,
)
from launchpad.models.types import (
    UINT256_MAX,
    ZERO_ADDRESS,
    Address,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
    sorts_before,
)

__all__ = [
    "TokenMetadata",
    "PoolMetadata",
    "PoolLiveState",
    "SwapQuote",
    "TokenRecord",
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "is_zero_address",
    "sorts_before",
]
