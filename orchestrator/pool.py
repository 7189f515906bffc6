"""
Shielded Pool

State machine tying the commitment tree, the nullifier set and the proof
verifiers together.

Operations:
- deposit(commitment, value): insert into the tree, credit the pool
- withdraw(proof, nullifier, recipient, amount, relayer, fee): spend a note
  and pay value out
- transfer(proof, nullifier, a, b): spend a note into two new commitments

Every mutating operation runs under one re-entrant lock and inside an
atomic section: if anything raises, the tree, the nullifiers added, the
balance, the fee counters and the fact log are restored. Authoritative
state (nullifier spent, balance debited) is updated before the payout is
handed to the sink.

Fee accounting:
- A relayer fee is only accepted from an allow-listed relayer
- The protocol fee is amount * protocol_fee_bps / 10000, paid to the
  configured fee recipient (no recipient means no protocol fee)
- Both are carved out of `amount`; fee + protocol_fee must not exceed it
- Each fee payout emits a FeeFact with the next fee nonce
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from core.config.runtime import MAX_PROTOCOL_FEE_BPS, RuntimeConfig
from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import ADDRESS_SIZE, WORD_SIZE, parse_fixed, short_hex, to_hex, word_to_int
from core.merkle.merkle_tree import IncrementalMerkleTree, TreeSnapshot
from core.schemas.errors import (
    InsufficientPoolBalanceException,
    InvalidAmountException,
    InvalidCommitmentException,
    InvalidDepositAmountException,
    InvalidFeeException,
    InvalidProofException,
    InvalidPublicInputException,
    InvalidRecipientException,
    NotOwnerException,
    NullifierAlreadySpentException,
    PoolException,
    PoolPausedException,
    RangeVerifierNotConfiguredException,
    RelayerNotAuthorizedException,
    TreeFullException,
)
from core.schemas.facts import DepositFact, Fact, FactKind, FeeFact, TransferFact, WithdrawalFact
from core.verifier.base import (
    ROLE_ARITY,
    ProofRole,
    ProofVerifier,
    check_public_inputs,
    range_inputs,
    transfer_inputs,
    withdrawal_inputs,
)
from core.verifier.groth16 import Groth16Verifier
from core.verifier.keys import load_verifying_key
from core.verifier.static import StaticVerifier
from orchestrator.facts import FactLog
from orchestrator.ledger import InMemoryLedger, Payout, PayoutSink


logger = logging.getLogger(__name__)


BPS_DENOMINATOR = 10_000

Bytesish = Union[bytes, str]

_ZERO_WORD = bytes(WORD_SIZE)
_ZERO_ADDRESS = bytes(ADDRESS_SIZE)


# =============================================================================
# Input parsing
# =============================================================================

def _commitment(value: Bytesish) -> bytes:
    try:
        raw = parse_fixed(value, WORD_SIZE, "commitment")
    except ValueError as e:
        raise InvalidCommitmentException(str(e)) from e
    if raw == _ZERO_WORD:
        raise InvalidCommitmentException("Commitment must not be zero")
    if word_to_int(raw) >= CURVE_ORDER:
        raise InvalidCommitmentException("Commitment is outside the scalar field")
    return raw


def _nullifier(value: Bytesish) -> bytes:
    try:
        raw = parse_fixed(value, WORD_SIZE, "nullifier")
    except ValueError as e:
        raise InvalidPublicInputException(str(e), index=1) from e
    # N and N + r reduce to the same public input
    if word_to_int(raw) >= CURVE_ORDER:
        raise InvalidPublicInputException("nullifier is outside the scalar field", index=1)
    return raw


def _address(value: Optional[Bytesish], name: str = "recipient") -> bytes:
    if value is None:
        raise InvalidRecipientException(f"{name} is required")
    try:
        raw = parse_fixed(value, ADDRESS_SIZE, name)
    except ValueError as e:
        raise InvalidRecipientException(str(e)) from e
    if raw == _ZERO_ADDRESS:
        raise InvalidRecipientException(f"{name} must not be the zero address")
    return raw


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Pool state snapshot
# =============================================================================

@dataclass(frozen=True)
class PoolSnapshot:
    """Everything an atomic section restores on failure."""
    tree: TreeSnapshot
    balance: int
    fee_nonce: int
    total_fees_collected: int
    total_relayer_fees: int
    facts_length: int


@dataclass(frozen=True)
class FeeInfo:
    protocol_fee_bps: int
    fee_recipient: Optional[str]
    fee_nonce: int
    total_fees_collected: int
    total_relayer_fees: int


# =============================================================================
# Pool
# =============================================================================

class ShieldedPool:
    """
    Shielded-value pool.

    Args:
        owner: Admin address (None disables every admin call)
        withdraw_verifier: Verifier for [root, nullifier, recipient, amount]
        transfer_verifier: Verifier for [root, nullifier, commitment_a, commitment_b]
        range_verifier: Optional verifier for [commitment, min_value]
        tree: Commitment tree (a fresh depth-20 tree by default)
        ledger: Payout sink (an InMemoryLedger by default)
        protocol_fee_bps: Protocol fee in basis points (<= MAX_PROTOCOL_FEE_BPS)
        fee_recipient: Protocol fee recipient
        relayers: Relayer allow-list
        clock: Returns the current unix time in seconds

    A missing withdraw or transfer verifier is replaced by StaticVerifier(False),
    so an unconfigured pool rejects every proof.
    """

    def __init__(
        self,
        owner: Optional[Bytesish] = None,
        *,
        withdraw_verifier: Optional[ProofVerifier] = None,
        transfer_verifier: Optional[ProofVerifier] = None,
        range_verifier: Optional[ProofVerifier] = None,
        tree: Optional[IncrementalMerkleTree] = None,
        ledger: Optional[PayoutSink] = None,
        protocol_fee_bps: int = 0,
        fee_recipient: Optional[Bytesish] = None,
        relayers: Iterable[Bytesish] = (),
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.tree = tree or IncrementalMerkleTree()
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.facts = FactLog()
        self._clock = clock or (lambda: int(time.time()))
        self._lock = threading.RLock()

        self._verifiers: dict[ProofRole, Optional[ProofVerifier]] = {
            ProofRole.WITHDRAWAL: withdraw_verifier or StaticVerifier(False),
            ProofRole.TRANSFER: transfer_verifier or StaticVerifier(False),
            ProofRole.RANGE: range_verifier,
        }

        self._owner = _address(owner, "owner") if owner is not None else None
        self._paused = False
        self._nullifiers: set[bytes] = set()
        self._spent_in_operation: list[bytes] = []
        self._balance = 0

        _check_fee_bps(protocol_fee_bps)
        self._protocol_fee_bps = protocol_fee_bps
        self._fee_recipient = _address(fee_recipient, "fee_recipient") if fee_recipient is not None else None
        self._relayers: set[bytes] = {_address(r, "relayer") for r in relayers}
        self._fee_nonce = 0
        self._total_fees_collected = 0
        self._total_relayer_fees = 0

        if self._owner is None:
            logger.warning("Pool created without an owner; admin operations are disabled")

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        ledger: Optional[PayoutSink] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> "ShieldedPool":
        """
        Build a pool from runtime configuration.

        Roles without a configured verifying key fail closed.
        """
        verifiers: dict[str, Optional[ProofVerifier]] = {}
        for role, path in (
            ("withdraw", config.verifiers.withdraw_vk),
            ("transfer", config.verifiers.transfer_vk),
            ("range", config.verifiers.range_vk),
        ):
            if path:
                verifiers[role] = Groth16Verifier(load_verifying_key(path, label=role))
            else:
                if role != "range":
                    logger.warning(f"No {role} verifying key configured; {role} proofs will be rejected")
                verifiers[role] = None

        return cls(
            owner=config.pool.owner,
            withdraw_verifier=verifiers["withdraw"],
            transfer_verifier=verifiers["transfer"],
            range_verifier=verifiers["range"],
            tree=IncrementalMerkleTree(
                depth=config.pool.tree_depth,
                root_history_size=config.pool.root_history_size,
            ),
            ledger=ledger,
            protocol_fee_bps=config.fees.protocol_fee_bps,
            fee_recipient=config.fees.fee_recipient,
            relayers=config.fees.relayers,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Atomic sections
    # ------------------------------------------------------------------

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return PoolSnapshot(
                tree=self.tree.snapshot(),
                balance=self._balance,
                fee_nonce=self._fee_nonce,
                total_fees_collected=self._total_fees_collected,
                total_relayer_fees=self._total_relayer_fees,
                facts_length=len(self.facts),
            )

    @contextmanager
    def _atomic(self, operation: str) -> Iterator[None]:
        with self._lock:
            saved = self.snapshot()
            self._spent_in_operation = []
            try:
                yield
            except PoolException as e:
                self._rollback(saved)
                logger.warning(f"{operation} rejected: {e.code} {e.message}")
                raise
            except Exception:
                self._rollback(saved)
                logger.exception(f"{operation} failed; state restored")
                raise
            finally:
                self._spent_in_operation = []

    def _rollback(self, saved: PoolSnapshot) -> None:
        self.tree.restore(saved.tree)
        for nullifier in self._spent_in_operation:
            self._nullifiers.discard(nullifier)
        self._balance = saved.balance
        self._fee_nonce = saved.fee_nonce
        self._total_fees_collected = saved.total_fees_collected
        self._total_relayer_fees = saved.total_relayer_fees
        self.facts.truncate(saved.facts_length)

    def _mark_spent(self, nullifier: bytes) -> None:
        self._nullifiers.add(nullifier)
        self._spent_in_operation.append(nullifier)

    def _require_unspent(self, nullifier: bytes) -> None:
        if nullifier in self._nullifiers:
            raise NullifierAlreadySpentException(to_hex(nullifier))

    def _require_not_paused(self) -> None:
        if self._paused:
            raise PoolPausedException()

    def _check_proof(self, role: ProofRole, proof: bytes, inputs: list[int]) -> None:
        check_public_inputs(inputs, ROLE_ARITY[role])
        verifier = self._verifiers[role]
        if verifier is None or not verifier.verify(proof, inputs):
            raise InvalidProofException(role.value)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def deposit(self, commitment: Bytesish, value: int) -> DepositFact:
        """
        Insert a commitment into the tree and credit `value` to the pool.

        Raises:
            InvalidDepositAmountException: If value is not a positive integer
            InvalidCommitmentException: If the commitment is malformed or zero
            PoolPausedException: If the pool is paused
            TreeFullException: If the tree has no free slot
        """
        if not _is_int(value) or value <= 0:
            raise InvalidDepositAmountException(value if _is_int(value) else 0)
        leaf = _commitment(commitment)

        with self._atomic("deposit"):
            self._require_not_paused()
            leaf_index = self.tree.next_index
            root = self.tree.insert(leaf)
            self._balance += value

            fact = self.facts.record(DepositFact(
                commitment=to_hex(leaf),
                leaf_index=leaf_index,
                timestamp=self._clock(),
                value=value,
                root=to_hex(root),
            ))

        logger.info(f"Deposit {short_hex(leaf)} at leaf {leaf_index}, value {value}")
        return fact

    def withdraw(
        self,
        proof: bytes,
        nullifier: Bytesish,
        recipient: Bytesish,
        amount: int,
        relayer: Optional[Bytesish] = None,
        fee: int = 0,
    ) -> WithdrawalFact:
        """
        Spend a note and release `amount` from the pool.

        The Withdrawal verifier is checked against
        [current_root, nullifier, recipient, amount]. The recipient receives
        amount - fee - protocol_fee; the relayer receives fee.

        Raises:
            InvalidAmountException, InvalidRecipientException, InvalidFeeException:
                On malformed input
            RelayerNotAuthorizedException: If a relayer is not allow-listed
            PoolPausedException: If the pool is paused
            NullifierAlreadySpentException: If the nullifier was spent before
            InvalidProofException: If the verifier rejects the proof
            InsufficientPoolBalanceException: If the pool cannot cover amount
            PayoutFailedException: If the payout sink refuses; nothing is applied
        """
        if not _is_int(amount) or amount <= 0:
            raise InvalidAmountException("Withdrawal amount must be a positive integer", {"amount": amount})
        if not _is_int(fee) or fee < 0:
            raise InvalidFeeException("Relayer fee must be a non-negative integer", {"fee": fee})
        null = _nullifier(nullifier)
        to = _address(recipient)

        relayer_addr = _address(relayer, "relayer") if relayer is not None else None
        if fee > 0 and relayer_addr is None:
            raise InvalidFeeException("A relayer fee requires a relayer", {"fee": fee})

        with self._atomic("withdraw"):
            if relayer_addr is not None and relayer_addr not in self._relayers:
                raise RelayerNotAuthorizedException(to_hex(relayer_addr))

            protocol_fee = self._protocol_fee(amount)
            if fee + protocol_fee > amount:
                raise InvalidFeeException(
                    "Fees exceed the withdrawal amount",
                    {"amount": amount, "fee": fee, "protocol_fee": protocol_fee},
                )

            self._require_not_paused()
            self._require_unspent(null)
            self._check_proof(
                ProofRole.WITHDRAWAL,
                proof,
                withdrawal_inputs(self.tree.root, null, to, amount),
            )
            if amount > self._balance:
                raise InsufficientPoolBalanceException(self._balance, amount)

            self._mark_spent(null)
            self._balance -= amount

            payouts = [Payout(to, amount - fee - protocol_fee, "withdrawal")]
            if fee > 0:
                payouts.append(Payout(relayer_addr, fee, "relayer_fee"))
            if protocol_fee > 0:
                payouts.append(Payout(self._fee_recipient, protocol_fee, "protocol_fee"))
            self.ledger.payout([p for p in payouts if p.amount > 0])

            if fee > 0:
                self._total_relayer_fees += fee
                self._record_fee(relayer_addr, fee)
            if protocol_fee > 0:
                self._total_fees_collected += protocol_fee
                self._record_fee(self._fee_recipient, protocol_fee)

            fact = self.facts.record(WithdrawalFact(
                nullifier=to_hex(null),
                recipient=to_hex(to),
                amount=amount,
                relayer=to_hex(relayer_addr) if relayer_addr is not None else None,
                fee=fee,
                protocol_fee=protocol_fee,
            ))

        logger.info(f"Withdrawal {short_hex(null)} to {to_hex(to)}, amount {amount}, fee {fee}")
        return fact

    def transfer(
        self,
        proof: bytes,
        nullifier: Bytesish,
        new_commitment_a: Bytesish,
        new_commitment_b: Bytesish,
    ) -> TransferFact:
        """
        Spend a note into two new commitments without moving value out.

        The Transfer verifier is checked against
        [current_root, nullifier, commitment_a, commitment_b]; both
        commitments are then inserted, A first, and the root is read
        after the second insertion.

        Raises:
            InvalidCommitmentException: If either commitment is malformed or zero
            PoolPausedException: If the pool is paused
            NullifierAlreadySpentException: If the nullifier was spent before
            TreeFullException: If fewer than two slots are free
            InvalidProofException: If the verifier rejects the proof
        """
        null = _nullifier(nullifier)
        a = _commitment(new_commitment_a)
        b = _commitment(new_commitment_b)

        with self._atomic("transfer"):
            self._require_not_paused()
            self._require_unspent(null)
            if self.tree.free_slots < 2:
                raise TreeFullException(capacity=self.tree.capacity, requested=2)
            self._check_proof(
                ProofRole.TRANSFER,
                proof,
                transfer_inputs(self.tree.root, null, a, b),
            )

            self._mark_spent(null)
            index_a = self.tree.next_index
            self.tree.insert(a)
            index_b = self.tree.next_index
            self.tree.insert(b)
            root = self.tree.root

            fact = self.facts.record(TransferFact(
                nullifier=to_hex(null),
                new_commitment_a=to_hex(a),
                new_commitment_b=to_hex(b),
                leaf_index_a=index_a,
                leaf_index_b=index_b,
                root=to_hex(root),
            ))

        logger.info(f"Transfer {short_hex(null)} into leaves {index_a} and {index_b}")
        return fact

    def verify_range(self, proof: bytes, commitment: Bytesish, min_value: int) -> bool:
        """
        Check a range proof that `commitment` hides a value >= min_value.

        Read-only; nothing is recorded.

        Raises:
            RangeVerifierNotConfiguredException: If the pool has no range verifier
        """
        verifier = self._verifiers[ProofRole.RANGE]
        if verifier is None:
            raise RangeVerifierNotConfiguredException()
        c = _commitment(commitment)
        if not _is_int(min_value) or min_value < 0:
            raise InvalidAmountException("min_value must be a non-negative integer", {"min_value": min_value})
        inputs = check_public_inputs(range_inputs(c, min_value), ROLE_ARITY[ProofRole.RANGE])
        return verifier.verify(proof, inputs)

    # ------------------------------------------------------------------
    # Fees
    # ------------------------------------------------------------------

    def _protocol_fee(self, amount: int) -> int:
        if self._fee_recipient is None:
            return 0
        return amount * self._protocol_fee_bps // BPS_DENOMINATOR

    def _record_fee(self, recipient: bytes, amount: int) -> Fact:
        self._fee_nonce += 1
        return self.facts.record(FeeFact(
            fee_recipient=to_hex(recipient),
            amount=amount,
            fee_nonce=self._fee_nonce,
        ))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_root(self) -> bytes:
        with self._lock:
            return self.tree.root

    def is_spent(self, nullifier: Bytesish) -> bool:
        null = _nullifier(nullifier)
        with self._lock:
            return null in self._nullifiers

    def next_leaf_index(self) -> int:
        with self._lock:
            return self.tree.next_index

    def is_known_root(self, root: Bytesish) -> bool:
        try:
            raw = parse_fixed(root, WORD_SIZE, "root")
        except ValueError:
            return False
        with self._lock:
            return self.tree.is_known_root(raw)

    def fee_info(self) -> FeeInfo:
        with self._lock:
            return FeeInfo(
                protocol_fee_bps=self._protocol_fee_bps,
                fee_recipient=to_hex(self._fee_recipient) if self._fee_recipient else None,
                fee_nonce=self._fee_nonce,
                total_fees_collected=self._total_fees_collected,
                total_relayer_fees=self._total_relayer_fees,
            )

    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    def pool_balance(self) -> int:
        with self._lock:
            return self._balance

    def get_facts(self, kind: Optional[FactKind] = None) -> list[Fact]:
        with self._lock:
            return self.facts.get_facts(kind)

    def owner(self) -> Optional[str]:
        with self._lock:
            return to_hex(self._owner) if self._owner else None

    def relayers(self) -> list[str]:
        with self._lock:
            return sorted(to_hex(r) for r in self._relayers)

    def status(self) -> dict[str, Any]:
        """Consistent view of the pool for status endpoints."""
        with self._lock:
            info = self.fee_info()
            return {
                "root": to_hex(self.tree.root),
                "next_leaf_index": self.tree.next_index,
                "capacity": self.tree.capacity,
                "depth": self.tree.depth,
                "paused": self._paused,
                "balance": self._balance,
                "spent_nullifiers": len(self._nullifiers),
                "owner": self.owner(),
                "protocol_fee_bps": info.protocol_fee_bps,
                "fee_recipient": info.fee_recipient,
                "fee_nonce": info.fee_nonce,
                "total_fees_collected": info.total_fees_collected,
                "total_relayer_fees": info.total_relayer_fees,
            }

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def _require_owner(self, caller: Bytesish) -> None:
        try:
            who = parse_fixed(caller, ADDRESS_SIZE, "caller")
        except ValueError as e:
            raise NotOwnerException(str(caller)) from e
        if self._owner is None or who != self._owner:
            raise NotOwnerException(to_hex(who))

    def pause(self, caller: Bytesish) -> None:
        with self._lock:
            self._require_owner(caller)
            self._paused = True
        logger.info("Pool paused")

    def unpause(self, caller: Bytesish) -> None:
        with self._lock:
            self._require_owner(caller)
            self._paused = False
        logger.info("Pool unpaused")

    def set_protocol_fee(self, caller: Bytesish, fee_bps: int) -> None:
        with self._lock:
            self._require_owner(caller)
            _check_fee_bps(fee_bps)
            self._protocol_fee_bps = fee_bps
        logger.info(f"Protocol fee set to {fee_bps} bps")

    def set_fee_recipient(self, caller: Bytesish, recipient: Bytesish) -> None:
        with self._lock:
            self._require_owner(caller)
            self._fee_recipient = _address(recipient, "fee_recipient")
        logger.info(f"Fee recipient set to {to_hex(self._fee_recipient)}")

    def add_relayer(self, caller: Bytesish, relayer: Bytesish) -> None:
        with self._lock:
            self._require_owner(caller)
            addr = _address(relayer, "relayer")
            self._relayers.add(addr)
        logger.info(f"Relayer {to_hex(addr)} allowed")

    def remove_relayer(self, caller: Bytesish, relayer: Bytesish) -> None:
        with self._lock:
            self._require_owner(caller)
            addr = _address(relayer, "relayer")
            self._relayers.discard(addr)
        logger.info(f"Relayer {to_hex(addr)} removed")

    def transfer_ownership(self, caller: Bytesish, new_owner: Bytesish) -> None:
        with self._lock:
            self._require_owner(caller)
            self._owner = _address(new_owner, "new_owner")
        logger.info(f"Ownership transferred to {to_hex(self._owner)}")


def _check_fee_bps(fee_bps: int) -> None:
    if not _is_int(fee_bps) or fee_bps < 0 or fee_bps > MAX_PROTOCOL_FEE_BPS:
        raise InvalidFeeException(
            f"Protocol fee must be between 0 and {MAX_PROTOCOL_FEE_BPS} bps",
            {"fee_bps": fee_bps},
        )


__all__ = [
    "BPS_DENOMINATOR",
    "PoolSnapshot",
    "FeeInfo",
    "ShieldedPool",
]
