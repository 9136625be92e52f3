"""Per-network wiring of the cache, metadata service, quote engine and registry.

A NetworkSession bundles every collaborator for one network; LaunchpadEngine
hands sessions out by network name and owns the single-flight guards of the
list views.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from launchpad.cache.metadata import MetadataCache
from launchpad.cache.service import MetadataService
from launchpad.cache.store import CacheStore, InMemoryCacheStore, JsonFileCacheStore
from launchpad.chain.interfaces import FactoryReader, PoolReader, TokenReader, TransactionSubmitter
from launchpad.config import DEFAULT_ENGINE_CONFIG, EngineConfig, NetworkConfig, get_network
from launchpad.models.records import TokenRecord
from launchpad.quotes.engine import SwapQuoteEngine
from launchpad.registry.enumerator import EnumerationOrder, TokenEnumerator
from launchpad.registry.single_flight import SingleFlightGroup

logger = structlog.get_logger()


@dataclass
class NetworkSession:
    """Everything needed to serve one network."""

    network: NetworkConfig
    config: EngineConfig
    factory: FactoryReader
    metadata: MetadataService
    quotes: SwapQuoteEngine

    @classmethod
    def build(
        cls,
        network: NetworkConfig,
        *,
        tokens: TokenReader,
        pools: PoolReader,
        factory: FactoryReader,
        submitter: TransactionSubmitter | None = None,
        store: CacheStore | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> NetworkSession:
        """Wire a session from explicit collaborators."""
        cache = MetadataCache(store if store is not None else _default_store(network, config), network.name)
        return cls(
            network=network,
            config=config,
            factory=factory,
            metadata=MetadataService(cache, tokens, pools),
            quotes=SwapQuoteEngine(network, factory, pools, tokens, submitter=submitter, config=config),
        )

    @classmethod
    def from_web3(
        cls,
        network: NetworkConfig,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        account: str | None = None,
    ) -> NetworkSession:
        """Wire a session over the network's JSON-RPC endpoint.

        Transactions are only available when ``account`` is given.
        """
        from launchpad.chain.web3_client import (
            Web3FactoryReader,
            Web3PoolReader,
            Web3TokenReader,
            Web3TransactionSubmitter,
            create_web3,
        )

        w3 = create_web3(network.rpc_url)
        submitter = Web3TransactionSubmitter(w3, account) if account else None
        logger.info(
            "network_session_created",
            network=network.name,
            rpc_url=network.rpc_url[:50],
            transactions_enabled=submitter is not None,
        )
        return cls.build(
            network,
            tokens=Web3TokenReader(w3),
            pools=Web3PoolReader(w3),
            factory=Web3FactoryReader(w3, network),
            submitter=submitter,
            config=config,
        )

    def enumerator(
        self,
        order: EnumerationOrder = EnumerationOrder.NEWEST_FIRST,
        owner: str | None = None,
    ) -> TokenEnumerator:
        return TokenEnumerator(self.factory, self.metadata, order=order, owner=owner, config=self.config)


def _default_store(network: NetworkConfig, config: EngineConfig) -> CacheStore:
    if config.cache_path is None:
        return InMemoryCacheStore()
    return JsonFileCacheStore(config.cache_path / f"{network.name}.json")


class LaunchpadEngine:
    """Hands out NetworkSessions, creating each on first use.

    Args:
        session_factory: Builds the session for a network name; raises
            KeyError for unsupported networks
        config: Engine tunables shared by every session
    """

    def __init__(
        self,
        session_factory: Callable[[str], NetworkSession],
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self._session_factory = session_factory
        self._sessions: dict[str, NetworkSession] = {}
        self.config = config
        self.flights = SingleFlightGroup()

    @classmethod
    def with_sessions(cls, sessions: dict[str, NetworkSession], config: EngineConfig = DEFAULT_ENGINE_CONFIG):
        """Engine over pre-built sessions (tests, scripts)."""

        def lookup(name: str) -> NetworkSession:
            if name not in sessions:
                raise KeyError(f"Unsupported network: {name}")
            return sessions[name]

        return cls(lookup, config)

    def session(self, network: str) -> NetworkSession:
        """Session for a network name.

        Raises:
            KeyError: If the network is not supported
        """
        if network not in self._sessions:
            self._sessions[network] = self._session_factory(network)
        return self._sessions[network]

    async def list_tokens(
        self,
        network: str,
        order: EnumerationOrder = EnumerationOrder.NEWEST_FIRST,
        owner: str | None = None,
    ) -> list[TokenRecord] | None:
        """Enumerate the registry, or None if this view is already loading.

        Raises:
            KeyError: If the network is not supported
        """
        session = self.session(network)
        view = f"{network}:tokens:{order.value}"

        async def collect() -> list[TokenRecord]:
            return [record async for record in session.enumerator(order=order, owner=owner)]

        return await self.flights[view].run(collect)


def _create_default_engine() -> LaunchpadEngine:
    """Create the default engine over public RPC endpoints.

    Set LAUNCHPAD_ACCOUNT to enable transactions signed by the RPC node.
    """
    config = EngineConfig.from_env()
    account = os.environ.get("LAUNCHPAD_ACCOUNT")

    def factory(name: str) -> NetworkSession:
        return NetworkSession.from_web3(get_network(name), config, account=account)

    return LaunchpadEngine(factory, config)


_default_engine: LaunchpadEngine | None = None


def get_default_engine() -> LaunchpadEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = _create_default_engine()
    return _default_engine


__all__ = ["NetworkSession", "LaunchpadEngine", "get_default_engine"]
