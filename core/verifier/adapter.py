"""
Bytes32 input adapter.

Lets the pool drive a proof backend whose verifier takes public inputs as
32-byte big-endian words instead of field integers. The adapter validates
the vector exactly as the Groth16 engine does, re-encodes, and delegates.
"""
from __future__ import annotations

from typing import Protocol, Sequence

from core.crypto.hashing import int_to_word
from core.verifier.base import check_public_inputs


class Bytes32Backend(Protocol):
    """A verifier that takes its public inputs as 32-byte words."""

    def verify(self, proof: bytes, public_inputs: list[bytes]) -> bool: ...


class Bytes32InputAdapter:
    """ProofVerifier over a Bytes32Backend."""

    def __init__(self, backend: Bytes32Backend, arity: int) -> None:
        if arity < 1:
            raise ValueError("arity must be positive")
        self.backend = backend
        self.arity = arity

    def encode_inputs(self, public_inputs: Sequence[int]) -> list[bytes]:
        inputs = check_public_inputs(public_inputs, self.arity)
        return [int_to_word(v) for v in inputs]

    def verify(self, proof: bytes, public_inputs: Sequence[int]) -> bool:
        return bool(self.backend.verify(proof, self.encode_inputs(public_inputs)))


__all__ = [
    "Bytes32Backend",
    "Bytes32InputAdapter",
]
