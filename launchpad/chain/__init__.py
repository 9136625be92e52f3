"""Contract capability interfaces.

The web3-backed implementations live in ``launchpad.chain.web3_client`` and
are imported from there explicitly.
"""

from launchpad.chain.interfaces import (
    ExpectedSwap,
    FactoryReader,
    PendingTransaction,
    PoolReader,
    RawCurveParams,
    TokenDetail,
    TokenReader,
    TransactionReceipt,
    TransactionSubmitter,
)

__all__ = [
    "TokenDetail",
    "RawCurveParams",
    "ExpectedSwap",
    "PendingTransaction",
    "TransactionReceipt",
    "TokenReader",
    "PoolReader",
    "FactoryReader",
    "TransactionSubmitter",
]
