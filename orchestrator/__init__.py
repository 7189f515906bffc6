"""
Pool orchestration.

Public API:
- ShieldedPool: deposit / withdraw / transfer state machine
- PayoutSink, InMemoryLedger, Payout: value delivery out of the pool
- FactLog: append-only record of emitted facts
- HTLCSwap: hashlock/timelock swap book
"""

from orchestrator.facts import FactLog
from orchestrator.htlc import (
    MAX_TIMELOCK_SECONDS,
    MIN_TIMELOCK_SECONDS,
    HTLCSwap,
    Swap,
    SwapStatus,
    compute_hashlock,
)
from orchestrator.ledger import InMemoryLedger, Payout, PayoutSink
from orchestrator.pool import BPS_DENOMINATOR, FeeInfo, PoolSnapshot, ShieldedPool

__all__ = [
    "FactLog",
    "MAX_TIMELOCK_SECONDS",
    "MIN_TIMELOCK_SECONDS",
    "HTLCSwap",
    "Swap",
    "SwapStatus",
    "compute_hashlock",
    "InMemoryLedger",
    "Payout",
    "PayoutSink",
    "BPS_DENOMINATOR",
    "FeeInfo",
    "PoolSnapshot",
    "ShieldedPool",
]
