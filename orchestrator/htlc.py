"""
HTLC Swap

Hashlock/timelock atomic swap, independent of the commitment tree and the
proof verifiers.

Lifecycle:
    Active --redeem(preimage), before timelock--> Redeemed
    Active --refund(), at or after timelock-----> Refunded

- The hashlock is sha256(preimage), deliberately a different hash from the
  tree's keccak-256
- The timelock must lie in [now + 1 hour, now + 7 days] at initiation
- Redeem pays the recipient, refund pays the sender, through a PayoutSink;
  a refused payout leaves the swap Active
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Union

from core.crypto.hashing import (
    ADDRESS_SIZE,
    WORD_SIZE,
    from_hex,
    int_to_word,
    keccak256,
    parse_fixed,
    sha256,
    short_hex,
    to_hex,
)
from core.schemas.errors import (
    ErrorCodes,
    InvalidAmountException,
    InvalidPreimageException,
    InvalidRecipientException,
    InvalidTimelockException,
    SwapNotActiveException,
    SwapNotFoundException,
    TimelockExpiredException,
    TimelockNotExpiredException,
    ValidationException,
)
from core.schemas.facts import Fact, SwapInitiatedFact, SwapRedeemedFact, SwapRefundedFact
from orchestrator.facts import FactLog
from orchestrator.ledger import InMemoryLedger, Payout, PayoutSink


logger = logging.getLogger(__name__)


MIN_TIMELOCK_SECONDS = 60 * 60
MAX_TIMELOCK_SECONDS = 7 * 24 * 60 * 60

Bytesish = Union[bytes, str]


class SwapStatus(str, Enum):
    ACTIVE = "Active"
    REDEEMED = "Redeemed"
    REFUNDED = "Refunded"


@dataclass(frozen=True)
class Swap:
    swap_id: bytes
    sender: bytes
    recipient: bytes
    amount: int
    hashlock: bytes
    timelock: int
    status: SwapStatus = SwapStatus.ACTIVE
    preimage: Optional[bytes] = None


def compute_hashlock(preimage: bytes) -> bytes:
    """Hashlock for a preimage: sha256(preimage)."""
    return sha256(preimage)


def _address(value: Bytesish, name: str) -> bytes:
    try:
        raw = parse_fixed(value, ADDRESS_SIZE, name)
    except ValueError as e:
        raise InvalidRecipientException(str(e)) from e
    if raw == bytes(ADDRESS_SIZE):
        raise InvalidRecipientException(f"{name} must not be the zero address")
    return raw


def _word(value: Bytesish, name: str) -> bytes:
    try:
        return parse_fixed(value, WORD_SIZE, name)
    except ValueError as e:
        raise ValidationException(str(e), code=ErrorCodes.INVALID_INPUT) from e


def _preimage(value: Bytesish) -> bytes:
    """Preimage of any length, as raw bytes or 0x-hex."""
    if isinstance(value, str):
        try:
            return from_hex(value)
        except ValueError as e:
            raise ValidationException(f"preimage: {e}", code=ErrorCodes.INVALID_INPUT) from e
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ValidationException(
        f"preimage must be bytes or 0x-hex, got {type(value).__name__}",
        code=ErrorCodes.INVALID_INPUT,
    )


class HTLCSwap:
    """
    Book of hashlock/timelock swaps.

    Usage:
        book = HTLCSwap(clock=lambda: now)
        swap_id = book.initiate(sender, compute_hashlock(secret), now + 7200, recipient, 100)
        book.redeem(swap_id, secret)
    """

    def __init__(
        self,
        ledger: Optional[PayoutSink] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.facts = FactLog()
        self._clock = clock or (lambda: int(time.time()))
        self._swaps: dict[bytes, Swap] = {}
        self._nonce = 0
        self._lock = threading.RLock()

    def initiate(
        self,
        sender: Bytesish,
        hashlock: Bytesish,
        timelock: int,
        recipient: Bytesish,
        amount: int,
    ) -> bytes:
        """
        Lock `amount` for `recipient` under a hashlock and timelock.

        Returns:
            The 32-byte swap id

        Raises:
            InvalidAmountException: If amount is not positive
            InvalidRecipientException: On a malformed or zero address
            InvalidTimelockException: If timelock is outside [now + 1h, now + 7d]
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidAmountException("Swap amount must be a positive integer", {"amount": amount})
        from_addr = _address(sender, "sender")
        to_addr = _address(recipient, "recipient")
        lock = _word(hashlock, "hashlock")

        with self._lock:
            now = self._clock()
            earliest = now + MIN_TIMELOCK_SECONDS
            latest = now + MAX_TIMELOCK_SECONDS
            if timelock < earliest or timelock > latest:
                logger.warning(f"Swap initiation rejected: timelock {timelock} outside [{earliest}, {latest}]")
                raise InvalidTimelockException(timelock, earliest, latest)

            self._nonce += 1
            swap_id = keccak256(
                from_addr + to_addr + int_to_word(amount) + lock + int_to_word(timelock) + int_to_word(self._nonce)
            )
            self._swaps[swap_id] = Swap(
                swap_id=swap_id,
                sender=from_addr,
                recipient=to_addr,
                amount=amount,
                hashlock=lock,
                timelock=timelock,
            )
            self.facts.record(SwapInitiatedFact(
                swap_id=to_hex(swap_id),
                sender=to_hex(from_addr),
                recipient=to_hex(to_addr),
                amount=amount,
                hashlock=to_hex(lock),
                timelock=timelock,
            ))

        logger.info(f"Swap {short_hex(swap_id)} initiated for {amount}, timelock {timelock}")
        return swap_id

    def _get_active(self, swap_id: bytes) -> Swap:
        swap = self._swaps.get(swap_id)
        if swap is None:
            raise SwapNotFoundException(to_hex(swap_id))
        if swap.status != SwapStatus.ACTIVE:
            raise SwapNotActiveException(to_hex(swap_id), swap.status.value)
        return swap

    def redeem(self, swap_id: Bytesish, preimage: Bytesish) -> Swap:
        """
        Release the swap to its recipient.

        Raises:
            SwapNotFoundException, SwapNotActiveException: On an unknown or settled swap
            TimelockExpiredException: If now >= timelock
            ValidationException: If the preimage is neither bytes nor 0x-hex
            InvalidPreimageException: If sha256(preimage) != hashlock
            PayoutFailedException: If the recipient cannot accept funds
        """
        sid = _word(swap_id, "swap_id")
        secret = _preimage(preimage)
        with self._lock:
            swap = self._get_active(sid)
            if self._clock() >= swap.timelock:
                raise TimelockExpiredException(to_hex(sid), swap.timelock)
            if compute_hashlock(secret) != swap.hashlock:
                raise InvalidPreimageException(to_hex(sid))

            self.ledger.payout([Payout(swap.recipient, swap.amount)])
            settled = replace(swap, status=SwapStatus.REDEEMED, preimage=secret)
            self._swaps[sid] = settled
            self.facts.record(SwapRedeemedFact(swap_id=to_hex(sid), preimage=to_hex(secret)))

        logger.info(f"Swap {short_hex(sid)} redeemed")
        return settled

    def refund(self, swap_id: Bytesish) -> Swap:
        """
        Return the swap to its sender once the timelock has passed.

        Raises:
            SwapNotFoundException, SwapNotActiveException: On an unknown or settled swap
            TimelockNotExpiredException: If now < timelock
            PayoutFailedException: If the sender cannot accept funds
        """
        sid = _word(swap_id, "swap_id")
        with self._lock:
            swap = self._get_active(sid)
            if self._clock() < swap.timelock:
                raise TimelockNotExpiredException(to_hex(sid), swap.timelock)

            self.ledger.payout([Payout(swap.sender, swap.amount)])
            settled = replace(swap, status=SwapStatus.REFUNDED)
            self._swaps[sid] = settled
            self.facts.record(SwapRefundedFact(swap_id=to_hex(sid)))

        logger.info(f"Swap {short_hex(sid)} refunded")
        return settled

    def get_swap(self, swap_id: Bytesish) -> Swap:
        sid = _word(swap_id, "swap_id")
        with self._lock:
            swap = self._swaps.get(sid)
            if swap is None:
                raise SwapNotFoundException(to_hex(sid))
            return swap

    def can_redeem(self, swap_id: Bytesish) -> bool:
        sid = _word(swap_id, "swap_id")
        with self._lock:
            swap = self._swaps.get(sid)
            return swap is not None and swap.status == SwapStatus.ACTIVE and self._clock() < swap.timelock

    def can_refund(self, swap_id: Bytesish) -> bool:
        sid = _word(swap_id, "swap_id")
        with self._lock:
            swap = self._swaps.get(sid)
            return swap is not None and swap.status == SwapStatus.ACTIVE and self._clock() >= swap.timelock

    def get_facts(self) -> list[Fact]:
        with self._lock:
            return self.facts.get_facts()


__all__ = [
    "MIN_TIMELOCK_SECONDS",
    "MAX_TIMELOCK_SECONDS",
    "SwapStatus",
    "Swap",
    "compute_hashlock",
    "HTLCSwap",
]
