"""Launchpad engine error classes.

Single-item operations propagate these unmodified; batch operations catch
them per item and substitute a fallback.
"""


class LaunchpadError(Exception):
    """Base error for launchpad engine operations."""

    pass


class CurveConfigError(LaunchpadError, ValueError):
    """Launch inputs do not describe a valid bonding curve."""

    pass


class RpcError(LaunchpadError):
    """A read call against a contract failed."""

    def __init__(self, message: str, *, address: str | None = None, method: str | None = None):
        super().__init__(message)
        self.address = address
        self.method = method


class PoolNotFoundError(LaunchpadError):
    """No pool exists for the requested pair and fee tier."""

    def __init__(self, token_a: str, token_b: str, fee: int):
        super().__init__(f"Pool not found for {token_a}/{token_b} (fee {fee})")
        self.token_a = token_a
        self.token_b = token_b
        self.fee = fee


class PoolNotInitializedError(LaunchpadError):
    """The pool has no price yet (sqrtPriceX96 is zero)."""

    def __init__(self, pool: str):
        super().__init__(f"Pool {pool} is not initialized")
        self.pool = pool


class TransactionError(LaunchpadError):
    """Submitting a transaction or waiting for its confirmation failed.

    Never retried automatically.
    """

    def __init__(self, message: str, *, tx_hash: str | None = None):
        super().__init__(message)
        self.tx_hash = tx_hash


def summarize_error(error: BaseException) -> str:
    """Human-readable summary: the first clause of the error message.

    RPC libraries append long parenthesised payloads to their messages;
    everything from the first ``(`` on is dropped.
    """
    message = str(error) or type(error).__name__
    summary = message.split("(", 1)[0].strip()
    return summary or message


__all__ = [
    "LaunchpadError",
    "CurveConfigError",
    "RpcError",
    "PoolNotFoundError",
    "PoolNotInitializedError",
    "TransactionError",
    "summarize_error",
]
