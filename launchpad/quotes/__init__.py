"""Swap quotes with slippage bounds, and transaction helpers."""

from launchpad.quotes.engine import SwapQuoteEngine, apply_slippage

__all__ = ["SwapQuoteEngine", "apply_slippage"]
