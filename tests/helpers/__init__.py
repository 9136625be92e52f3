"""Test helpers module for shared test utilities.

- constants: Token, pool and account addresses
- fakes: In-memory contract readers and transaction submitter
- factories: Launch inputs, registries, pools and wired sessions
"""

from tests.helpers.constants import (
    ACCOUNT,
    CREATOR,
    EARLY_LAUNCH,
    EARLY_POOL,
    LAUNCH,
    OTHER_CREATOR,
    POOL,
    SWAPPER,
    USDC,
    WETH,
    registry_token,
)
from tests.helpers.factories import (
    make_launch_inputs,
    make_network,
    make_pool_world,
    make_registry,
    make_registry_tokens,
    make_service,
    make_session,
)
from tests.helpers.fakes import (
    FakeFactoryReader,
    FakePool,
    FakePoolReader,
    FakeSubmitter,
    FakeToken,
    FakeTokenReader,
)

__all__ = [
    # Constants
    "USDC",
    "WETH",
    "LAUNCH",
    "EARLY_LAUNCH",
    "POOL",
    "EARLY_POOL",
    "SWAPPER",
    "ACCOUNT",
    "CREATOR",
    "OTHER_CREATOR",
    "registry_token",
    # Fakes
    "FakeToken",
    "FakeTokenReader",
    "FakePool",
    "FakePoolReader",
    "FakeFactoryReader",
    "FakeSubmitter",
    # Factories
    "make_launch_inputs",
    "make_registry",
    "make_registry_tokens",
    "make_pool_world",
    "make_service",
    "make_network",
    "make_session",
]
