"""
Ledger / Payout Sink

The pool never moves value itself; it hands a batch of payouts to a
PayoutSink. A sink must apply a batch all-or-nothing and raise
PayoutFailedException when any recipient cannot accept funds, so the pool
can revert the whole operation.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Literal, Protocol, Sequence

from core.crypto.hashing import to_hex
from core.schemas.errors import PayoutFailedException


logger = logging.getLogger(__name__)


PayoutPurpose = Literal["withdrawal", "relayer_fee", "protocol_fee"]


@dataclass(frozen=True)
class Payout:
    """A single transfer of value out of the pool."""
    recipient: bytes
    amount: int
    purpose: PayoutPurpose = "withdrawal"


class PayoutSink(Protocol):
    """Delivers value out of the pool, atomically per batch."""

    def payout(self, payouts: Sequence[Payout]) -> None: ...


class InMemoryLedger:
    """
    Balance book used as the default payout sink.

    Addresses can be blocked to simulate a recipient that rejects funds;
    a batch touching a blocked address is refused as a whole.

    Usage:
        ledger = InMemoryLedger()
        ledger.block(bad_address)
        pool = ShieldedPool(owner, ledger=ledger, ...)
    """

    def __init__(self, blocked: Iterable[bytes] = ()) -> None:
        self._balances: dict[bytes, int] = {}
        self._blocked: set[bytes] = set(blocked)
        self._history: list[Payout] = []
        self._lock = threading.Lock()

    def block(self, address: bytes) -> None:
        with self._lock:
            self._blocked.add(address)

    def unblock(self, address: bytes) -> None:
        with self._lock:
            self._blocked.discard(address)

    def balance_of(self, address: bytes) -> int:
        with self._lock:
            return self._balances.get(address, 0)

    def history(self) -> list[Payout]:
        with self._lock:
            return list(self._history)

    @property
    def total_paid(self) -> int:
        with self._lock:
            return sum(p.amount for p in self._history)

    def payout(self, payouts: Sequence[Payout]) -> None:
        """
        Credit every payout or none of them.

        Raises:
            PayoutFailedException: If a recipient is blocked or an amount is negative
        """
        with self._lock:
            for p in payouts:
                if p.recipient in self._blocked:
                    raise PayoutFailedException(to_hex(p.recipient), p.amount)
                if p.amount < 0:
                    raise PayoutFailedException(to_hex(p.recipient), p.amount, reason="negative amount")

            for p in payouts:
                self._balances[p.recipient] = self._balances.get(p.recipient, 0) + p.amount
                self._history.append(p)

        logger.debug(f"Paid out {len(payouts)} transfers totalling {sum(p.amount for p in payouts)}")


__all__ = [
    "PayoutPurpose",
    "Payout",
    "PayoutSink",
    "InMemoryLedger",
]
