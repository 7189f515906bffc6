"""
Test fixtures package for shielded pool tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: addresses, digests, clock, pool factories
- groth16_fixtures.py: toy verifying keys and forged proofs

Usage:
    from fixtures import make_pool, make_commitment

    def test_something():
        pool = make_pool()
        pool.deposit(make_commitment(1), 100)
"""

from .common import (
    OWNER,
    ALICE,
    BOB,
    RELAYER,
    FEE_SINK,
    STRANGER,
    DUMMY_PROOF,
    FakeClock,
    make_commitment,
    make_nullifier,
    make_pool,
    make_funded_pool,
)

from .groth16_fixtures import (
    ToyTrapdoor,
    make_toy_key,
    make_toy_proof,
)

__all__ = [
    # Common
    "OWNER",
    "ALICE",
    "BOB",
    "RELAYER",
    "FEE_SINK",
    "STRANGER",
    "DUMMY_PROOF",
    "FakeClock",
    "make_commitment",
    "make_nullifier",
    "make_pool",
    "make_funded_pool",
    # Groth16
    "ToyTrapdoor",
    "make_toy_key",
    "make_toy_proof",
]
