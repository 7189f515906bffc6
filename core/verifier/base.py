"""
Proof Verification Capability

One contract, `verify(proof, public_inputs) -> bool`, implemented by
interchangeable backends (Groth16 pairing engine, bytes32 adapter, static
double). Backends are chosen when the pool is built; nothing inherits
from a common base class.

Roles and public-input layouts:
- withdrawal: [merkle_root, nullifier, recipient, amount]
- transfer:   [merkle_root, nullifier, new_commitment_a, new_commitment_b]
- range:      [commitment, min_value]

32-byte digests enter the scalar field as big-endian integers reduced
mod r; addresses as left-padded integers (always < r).
"""
from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import word_to_int
from core.schemas.errors import InvalidPublicInputException


class ProofRole(str, Enum):
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    RANGE = "range"


ROLE_ARITY: dict[ProofRole, int] = {
    ProofRole.WITHDRAWAL: 4,
    ProofRole.TRANSFER: 4,
    ProofRole.RANGE: 2,
}


class ProofVerifier(Protocol):
    """Capability: check a proof against a fixed-arity vector of field elements."""

    def verify(self, proof: bytes, public_inputs: Sequence[int]) -> bool: ...


def digest_to_field(digest: bytes) -> int:
    """Map a 32-byte digest into the scalar field."""
    return word_to_int(digest) % CURVE_ORDER


def address_to_field(address: bytes) -> int:
    return word_to_int(address)


def check_public_inputs(public_inputs: Sequence[int], arity: int) -> list[int]:
    """
    Validate a public-input vector.

    Returns:
        The inputs as a list

    Raises:
        InvalidPublicInputException: On wrong arity, a non-integer, a negative
            value or a value >= the scalar field modulus
    """
    inputs = list(public_inputs)
    if len(inputs) != arity:
        raise InvalidPublicInputException(
            f"Expected {arity} public inputs, got {len(inputs)}",
            details={"expected": arity, "actual": len(inputs)},
        )
    for i, value in enumerate(inputs):
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidPublicInputException(
                f"Public input {i} must be an integer", index=i
            )
        if value < 0 or value >= CURVE_ORDER:
            raise InvalidPublicInputException(
                f"Public input {i} is outside the scalar field", index=i
            )
    return inputs


def withdrawal_inputs(root: bytes, nullifier: bytes, recipient: bytes, amount: int) -> list[int]:
    return [digest_to_field(root), digest_to_field(nullifier), address_to_field(recipient), amount]


def transfer_inputs(root: bytes, nullifier: bytes, commitment_a: bytes, commitment_b: bytes) -> list[int]:
    return [
        digest_to_field(root),
        digest_to_field(nullifier),
        digest_to_field(commitment_a),
        digest_to_field(commitment_b),
    ]


def range_inputs(commitment: bytes, min_value: int) -> list[int]:
    return [digest_to_field(commitment), min_value]


__all__ = [
    "ProofRole",
    "ROLE_ARITY",
    "ProofVerifier",
    "digest_to_field",
    "address_to_field",
    "check_public_inputs",
    "withdrawal_inputs",
    "transfer_inputs",
    "range_inputs",
]
