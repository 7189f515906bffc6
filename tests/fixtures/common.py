"""
Common test fixtures shared by all modules.

Provides factory functions for the pool's building blocks:
- addresses and 32-byte digests
- ShieldedPool wired to static verifiers and an in-memory ledger
- a controllable clock for timelock tests

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Optional

from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import int_to_word, keccak256, word_to_int
from core.verifier.static import StaticVerifier
from orchestrator.ledger import InMemoryLedger
from orchestrator.pool import ShieldedPool
from core.merkle.merkle_tree import IncrementalMerkleTree


# =============================================================================
# Addresses
# =============================================================================

OWNER = bytes.fromhex("00000000000000000000000000000000000000a1")
ALICE = bytes.fromhex("00000000000000000000000000000000000000b2")
BOB = bytes.fromhex("00000000000000000000000000000000000000c3")
RELAYER = bytes.fromhex("00000000000000000000000000000000000000d4")
FEE_SINK = bytes.fromhex("00000000000000000000000000000000000000e5")
STRANGER = bytes.fromhex("00000000000000000000000000000000000000f6")

DUMMY_PROOF = bytes(256)


# =============================================================================
# Digests
# =============================================================================

def _field_word(data: bytes) -> bytes:
    return int_to_word(word_to_int(keccak256(data)) % CURVE_ORDER)


def make_commitment(seed: int | str = 0) -> bytes:
    """Deterministic non-zero 32-byte commitment, a canonical field element."""
    return _field_word(f"commitment:{seed}".encode())


def make_nullifier(seed: int | str = 0) -> bytes:
    """Deterministic 32-byte nullifier, a canonical field element."""
    return _field_word(f"nullifier:{seed}".encode())


# =============================================================================
# Clock
# =============================================================================

class FakeClock:
    """Callable clock that tests move by hand."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


# =============================================================================
# Pool Factory
# =============================================================================

def make_pool(
    verify_result: bool = True,
    depth: int = 20,
    root_history_size: int = 30,
    ledger: Optional[InMemoryLedger] = None,
    clock: Optional[FakeClock] = None,
    **kwargs,
) -> ShieldedPool:
    """
    Create a ShieldedPool for testing.

    Args:
        verify_result: What the withdraw and transfer verifiers return.
        depth: Tree depth (small depths make fullness cheap to reach).
        root_history_size: Root history ring size.
        ledger: Payout sink (a fresh InMemoryLedger by default).
        clock: Clock for deposit timestamps.
        **kwargs: Passed through to ShieldedPool.

    Returns:
        A pool owned by OWNER.
    """
    kwargs.setdefault("owner", OWNER)
    kwargs.setdefault("withdraw_verifier", StaticVerifier(verify_result, arity=4))
    kwargs.setdefault("transfer_verifier", StaticVerifier(verify_result, arity=4))
    return ShieldedPool(
        tree=IncrementalMerkleTree(depth=depth, root_history_size=root_history_size),
        ledger=ledger if ledger is not None else InMemoryLedger(),
        clock=clock or FakeClock(),
        **kwargs,
    )


def make_funded_pool(value: int = 1_000, deposits: int = 1, **kwargs) -> ShieldedPool:
    """Create a pool and deposit `deposits` commitments of `value` each."""
    pool = make_pool(**kwargs)
    for i in range(deposits):
        pool.deposit(make_commitment(f"funding-{i}"), value)
    return pool
