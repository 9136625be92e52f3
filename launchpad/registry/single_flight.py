"""Single-flight guard for list views.

While one run is in flight, further requests are dropped rather than queued.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class SingleFlight:
    """Boolean guard allowing one in-flight run at a time."""

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._busy = False
        self.dropped = 0

    @property
    def busy(self) -> bool:
        return self._busy

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T | None:
        """Await ``operation()`` unless a run is already in flight.

        Returns None when the request is dropped. The guard is released even
        if the operation raises or its result is discarded.
        """
        if self._busy:
            self.dropped += 1
            logger.debug("single_flight_dropped", view=self.name, dropped=self.dropped)
            return None
        self._busy = True
        try:
            return await operation()
        finally:
            self._busy = False


class SingleFlightGroup:
    """One SingleFlight per view key, created on first use."""

    def __init__(self) -> None:
        self._flights: dict[str, SingleFlight] = {}

    def __getitem__(self, key: str) -> SingleFlight:
        if key not in self._flights:
            self._flights[key] = SingleFlight(key)
        return self._flights[key]


__all__ = ["SingleFlight", "SingleFlightGroup"]
