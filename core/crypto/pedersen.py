"""
Pedersen Commitment Engine

Binds a (value, blinding) pair to a single BN254 G1 point:

    C = value * G + blinding * H

G is the canonical generator (1, 2). H is derived by try-and-increment
hash-to-curve over a fixed domain tag, so nobody knows log_G(H). H is
computed once at import and treated as a process-wide constant.

Stored commitments are the keccak-256 digest of the 64-byte point encoding,
reduced mod r so that every digest is a canonical scalar field element.
The digest loses the linear structure, so homomorphic operations work on
points (commit_point / add / scalar_mul).
"""
from __future__ import annotations

import logging
from typing import Optional

from core.crypto.curve import (
    CURVE_ORDER,
    DEFAULT_PROVIDER,
    FIELD_MODULUS,
    G1_GENERATOR,
    CurveProvider,
    G1Point,
    encode_g1,
)
from core.crypto.hashing import int_to_word, keccak256, word_to_int
from core.schemas.errors import CurveOperationFailedException


logger = logging.getLogger(__name__)


H_DOMAIN_TAG = b"shielded_pool.pedersen.H"

# Upper bound on try-and-increment attempts; about half of all x values
# land on the curve, so this is never reached in practice.
MAX_HASH_TO_CURVE_ATTEMPTS = 256

_CURVE_B = 3


def hash_to_curve(tag: bytes) -> G1Point:
    """
    Map a domain tag to a G1 point with unknown discrete log.

    Algorithm (try-and-increment):
    1. x = keccak256(tag || counter_be32) mod p
    2. if x^3 + 3 is a square mod p, y = sqrt, choosing the even root
    3. otherwise counter += 1 and retry

    BN254 has p = 3 (mod 4), so sqrt(a) = a^((p+1)/4).

    Raises:
        CurveOperationFailedException: If no point is found
    """
    for counter in range(MAX_HASH_TO_CURVE_ATTEMPTS):
        x = word_to_int(keccak256(tag + counter.to_bytes(4, "big"))) % FIELD_MODULUS
        rhs = (pow(x, 3, FIELD_MODULUS) + _CURVE_B) % FIELD_MODULUS
        y = pow(rhs, (FIELD_MODULUS + 1) // 4, FIELD_MODULUS)
        if (y * y) % FIELD_MODULUS != rhs:
            continue
        if y % 2 == 1:
            y = FIELD_MODULUS - y
        return (x, y)

    raise CurveOperationFailedException("hash_to_curve", f"no point found for tag {tag!r}")


G: G1Point = G1_GENERATOR
H: G1Point = hash_to_curve(H_DOMAIN_TAG)


def hash_to_scalar(data: bytes) -> int:
    """Deterministically map arbitrary bytes to a scalar in [0, r)."""
    return word_to_int(keccak256(data)) % CURVE_ORDER


def point_digest(point: G1Point) -> bytes:
    """Compact 32-byte digest of a commitment point: keccak256(x || y) mod r."""
    return int_to_word(word_to_int(keccak256(encode_g1(point))) % CURVE_ORDER)


class PedersenCommitments:
    """
    Pedersen commitment engine over BN254 G1.

    All group operations are delegated to a CurveProvider; provider
    failures propagate as CurveOperationFailedException.

    Example:
        >>> engine = PedersenCommitments()
        >>> c1 = engine.commit_point(10, 7)
        >>> c2 = engine.commit_point(5, 3)
        >>> engine.add(c1, c2) == engine.commit_point(15, 10)
        True
    """

    def __init__(self, provider: Optional[CurveProvider] = None) -> None:
        self.provider = provider or DEFAULT_PROVIDER
        self.g = G
        self.h = H

    def commit_point(self, value: int, blinding: int) -> G1Point:
        """Compute value*G + blinding*H, scalars reduced mod r."""
        v = value % CURVE_ORDER
        r = blinding % CURVE_ORDER
        return self.provider.g1_add(
            self.provider.g1_mul(self.g, v),
            self.provider.g1_mul(self.h, r),
        )

    def commit(self, value: int, blinding: int) -> bytes:
        """Return the 32-byte digest of the commitment point."""
        return point_digest(self.commit_point(value, blinding))

    def verify(self, digest: bytes, value: int, blinding: int) -> bool:
        """Recompute the commitment and compare digests."""
        return self.commit(value, blinding) == digest

    def add(self, c1: G1Point, c2: G1Point) -> G1Point:
        return self.provider.g1_add(c1, c2)

    def scalar_mul(self, c: G1Point, k: int) -> G1Point:
        return self.provider.g1_mul(c, k % CURVE_ORDER)

    def hash_to_scalar(self, data: bytes) -> int:
        return hash_to_scalar(data)


__all__ = [
    "H_DOMAIN_TAG",
    "G",
    "H",
    "hash_to_curve",
    "hash_to_scalar",
    "point_digest",
    "PedersenCommitments",
]
