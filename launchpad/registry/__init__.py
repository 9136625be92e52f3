"""Registry enumeration and list-view guards."""

from launchpad.registry.enumerator import (
    EnumerationOrder,
    TokenEnumerator,
    batch_ranges,
    count_tokens,
    record_label,
)
from launchpad.registry.single_flight import SingleFlight, SingleFlightGroup

__all__ = [
    "EnumerationOrder",
    "TokenEnumerator",
    "batch_ranges",
    "count_tokens",
    "record_label",
    "SingleFlight",
    "SingleFlightGroup",
]
