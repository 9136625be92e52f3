"""Paginated enumeration of the launchpad factory's token registry.

Records are read in batches of ``batch_size`` through the factory's range
calls and yielded one at a time, newest-first or oldest-first. A failed batch
is logged and skipped; a failed per-token lookup gets a fallback value. The
enumeration is capped at ``fetch_cap`` registry entries.
"""

from __future__ import annotations

from collections import deque
from enum import Enum

import structlog

from launchpad.cache.service import MetadataService
from launchpad.chain.interfaces import FactoryReader, TokenDetail
from launchpad.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from launchpad.constants import DEFAULT_DECIMALS
from launchpad.errors import RpcError
from launchpad.models.records import TokenRecord
from launchpad.models.types import normalize_address

logger = structlog.get_logger()


class EnumerationOrder(str, Enum):
    """Order in which registry entries are yielded."""

    NEWEST_FIRST = "newest"
    OLDEST_FIRST = "oldest"


def record_label(name: str, symbol: str, address: str) -> str:
    """Display label with fallbacks: name, then symbol, then address."""
    return name or symbol or address


def batch_ranges(total: int, batch_size: int, order: EnumerationOrder) -> list[tuple[int, int]]:
    """Half-open ``[start, end)`` index ranges covering ``[0, total)`` in order."""
    if order is EnumerationOrder.NEWEST_FIRST:
        return [(max(end - batch_size, 0), end) for end in range(total, 0, -batch_size)]
    return [(start, min(start + batch_size, total)) for start in range(0, total, batch_size)]


class TokenEnumerator:
    """Finite, non-restartable async iterator of TokenRecord.

    Batches are fetched only when the consumer pulls past the end of the
    previous one, so stopping early never reads unread batches.

    Args:
        factory: Registry reader
        metadata: Used for per-token lookups (decimals, and any field the
            batch read did not supply)
        order: Newest-first or oldest-first
        owner: If set, only tokens whose owner matches (case-insensitive)
        detailed: Read ``listManyTokenDetails`` (address, owner, name, symbol)
            rather than bare addresses from ``listManyTokens``
        config: Batch size and fetch cap
    """

    def __init__(
        self,
        factory: FactoryReader,
        metadata: MetadataService,
        *,
        order: EnumerationOrder = EnumerationOrder.NEWEST_FIRST,
        owner: str | None = None,
        detailed: bool = True,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self._factory = factory
        self._metadata = metadata
        self._order = order
        self._owner = normalize_address(owner) if owner else None
        self._detailed = detailed
        self._batch_size = config.batch_size
        self._fetch_cap = config.fetch_cap

        self._ranges: deque[tuple[int, int]] | None = None
        self._buffer: deque[TokenDetail] = deque()
        self._exhausted = False
        self.batches_fetched = 0
        self.batches_failed = 0

    def __aiter__(self) -> TokenEnumerator:
        return self

    async def __anext__(self) -> TokenRecord:
        while True:
            while not self._buffer:
                if not await self._advance():
                    raise StopAsyncIteration
            detail = self._buffer.popleft()
            record = await self._resolve(detail)
            if self._owner is None or normalize_address(record.owner or "0x") == self._owner:
                return record

    async def _advance(self) -> bool:
        """Load the next non-empty batch into the buffer; False when done."""
        if self._exhausted:
            return False
        if self._ranges is None:
            total = await self._read_total()
            self._ranges = deque(batch_ranges(total, self._batch_size, self._order))

        while self._ranges:
            start, end = self._ranges.popleft()
            details = await self._read_batch(start, end)
            if not details:
                continue
            if self._order is EnumerationOrder.NEWEST_FIRST:
                details.reverse()
            self._buffer.extend(details)
            return True

        self._exhausted = True
        return False

    async def _read_total(self) -> int:
        try:
            total = await self._factory.total_tokens()
        except RpcError as e:
            logger.error("registry_total_failed", error=str(e))
            return 0
        capped = min(total, self._fetch_cap)
        logger.debug("registry_total", total=total, capped=capped, order=self._order.value)
        return capped

    async def _read_batch(self, start: int, end: int) -> list[TokenDetail]:
        try:
            if self._detailed:
                details = await self._factory.list_many_token_details(start, end)
            else:
                addresses = await self._factory.list_many_tokens(start, end)
                details = [TokenDetail(token=a, owner="", name="", symbol="") for a in addresses]
        except RpcError as e:
            self.batches_failed += 1
            logger.warning("registry_batch_failed", start=start, end=end, error=str(e))
            return []
        self.batches_fetched += 1
        return list(details)

    async def _resolve(self, detail: TokenDetail) -> TokenRecord:
        """Fill in per-token fields; each failed lookup falls back independently."""
        address = normalize_address(detail.token)
        name = detail.name or await self._lookup(address, "name", self._metadata.token_name, "")
        symbol = detail.symbol or await self._lookup(address, "symbol", self._metadata.token_symbol, "")
        owner = detail.owner or await self._lookup(address, "owner", self._metadata.token_owner, "")
        decimals = await self._lookup(address, "decimals", self._metadata.token_decimals, DEFAULT_DECIMALS)
        return TokenRecord(
            address=address,
            name=name,
            symbol=symbol,
            owner=normalize_address(owner) if owner else "",
            decimals=int(decimals),
            label=record_label(name, symbol, address),
        )

    async def _lookup(self, address: str, field: str, getter, fallback):
        try:
            return await getter(address)
        except RpcError as e:
            logger.warning("token_field_fallback", token=address, field=field, error=str(e))
            return fallback


async def count_tokens(factory: FactoryReader) -> int | None:
    """Registry size, or None if the read fails."""
    try:
        return await factory.total_tokens()
    except RpcError as e:
        logger.warning("registry_total_failed", error=str(e))
        return None


__all__ = [
    "EnumerationOrder",
    "TokenEnumerator",
    "batch_ranges",
    "count_tokens",
    "record_label",
]
