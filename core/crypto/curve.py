"""
Curve Arithmetic Provider
BN254 (alt_bn128) group operations behind a single capability.

Every group operation the commitment engine and the Groth16 verifier need
goes through a CurveProvider. The default implementation is backed by
py_ecc's optimized BN254 module; any conformant library can be swapped in.

Boundary encoding (affine integers):
- G1 point: (x, y)
- G2 point: ((x_c0, x_c1), (y_c0, y_c1)), element = c0 + c1 * i
- Point at infinity: (0, 0) in G1, ((0, 0), (0, 0)) in G2

Byte encoding follows the EVM precompile layout:
- G1: x || y, 32 bytes each (64 bytes)
- G2: x_c1 || x_c0 || y_c1 || y_c0, 32 bytes each (128 bytes)

All failures (coordinate out of range, point not on curve, G2 point outside
the prime-order subgroup, library error) raise CurveOperationFailedException.
"""
from __future__ import annotations

import logging
from typing import Protocol, Sequence

from py_ecc import optimized_bn128 as bn128

from core.crypto.hashing import WORD_SIZE, int_to_word, word_to_int
from core.schemas.errors import CurveOperationFailedException


logger = logging.getLogger(__name__)


# Base field modulus p and group order r of BN254
FIELD_MODULUS: int = bn128.field_modulus
CURVE_ORDER: int = bn128.curve_order

G1Point = tuple[int, int]
G2Point = tuple[tuple[int, int], tuple[int, int]]

G1_INFINITY: G1Point = (0, 0)
G2_INFINITY: G2Point = ((0, 0), (0, 0))

G1_GENERATOR: G1Point = (1, 2)

G1_ENCODED_SIZE = 2 * WORD_SIZE
G2_ENCODED_SIZE = 4 * WORD_SIZE


class CurveProvider(Protocol):
    """
    Capability for the group arithmetic used by commitments and proofs.

    Implementations must raise CurveOperationFailedException instead of
    returning a placeholder value when an operation cannot be performed.
    """

    def g1_add(self, p1: G1Point, p2: G1Point) -> G1Point: ...

    def g1_mul(self, point: G1Point, scalar: int) -> G1Point: ...

    def g1_neg(self, point: G1Point) -> G1Point: ...

    def pairing_check(self, pairs: Sequence[tuple[G1Point, G2Point]]) -> bool: ...

    def is_on_g1(self, point: G1Point) -> bool: ...

    def is_on_g2(self, point: G2Point) -> bool: ...


# =============================================================================
# py_ecc conversions
# =============================================================================

def _check_coordinate(value: int, operation: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise CurveOperationFailedException(operation, f"coordinate must be int, got {type(value).__name__}")
    if value < 0 or value >= FIELD_MODULUS:
        raise CurveOperationFailedException(operation, "coordinate outside base field")


def _to_g1(point: G1Point, operation: str):
    x, y = point
    _check_coordinate(x, operation)
    _check_coordinate(y, operation)
    if x == 0 and y == 0:
        return bn128.Z1
    pt = (bn128.FQ(x), bn128.FQ(y), bn128.FQ.one())
    if not bn128.is_on_curve(pt, bn128.b):
        raise CurveOperationFailedException(operation, "G1 point not on curve")
    return pt


def _from_g1(pt) -> G1Point:
    if bn128.is_inf(pt):
        return G1_INFINITY
    x, y = bn128.normalize(pt)
    return (int(x), int(y))


def _to_g2(point: G2Point, operation: str):
    (x0, x1), (y0, y1) = point
    for coord in (x0, x1, y0, y1):
        _check_coordinate(coord, operation)
    if x0 == x1 == y0 == y1 == 0:
        return bn128.Z2
    pt = (bn128.FQ2([x0, x1]), bn128.FQ2([y0, y1]), bn128.FQ2.one())
    if not bn128.is_on_curve(pt, bn128.b2):
        raise CurveOperationFailedException(operation, "G2 point not on twist curve")
    if not bn128.is_inf(bn128.multiply(pt, CURVE_ORDER)):
        raise CurveOperationFailedException(operation, "G2 point outside prime-order subgroup")
    return pt


# =============================================================================
# Default provider
# =============================================================================

class PyEccCurveProvider:
    """
    CurveProvider backed by py_ecc.optimized_bn128.

    Stateless; a single shared instance is exposed as DEFAULT_PROVIDER.
    """

    def g1_add(self, p1: G1Point, p2: G1Point) -> G1Point:
        a = _to_g1(p1, "g1_add")
        b = _to_g1(p2, "g1_add")
        return _from_g1(bn128.add(a, b))

    def g1_mul(self, point: G1Point, scalar: int) -> G1Point:
        if scalar < 0:
            raise CurveOperationFailedException("g1_mul", "scalar must be non-negative")
        pt = _to_g1(point, "g1_mul")
        return _from_g1(bn128.multiply(pt, scalar % CURVE_ORDER))

    def g1_neg(self, point: G1Point) -> G1Point:
        pt = _to_g1(point, "g1_neg")
        return _from_g1(bn128.neg(pt))

    def pairing_check(self, pairs: Sequence[tuple[G1Point, G2Point]]) -> bool:
        """
        Return True iff the product of e(P_i, Q_i) is the identity in GT.

        Miller loops are accumulated and the final exponentiation is
        applied once to the product.
        """
        if not pairs:
            raise CurveOperationFailedException("pairing_check", "no pairs given")

        accumulated = bn128.FQ12.one()
        for g1, g2 in pairs:
            p = _to_g1(g1, "pairing_check")
            q = _to_g2(g2, "pairing_check")
            try:
                accumulated = accumulated * bn128.pairing(q, p, final_exponentiate=False)
            except (AssertionError, ValueError, ZeroDivisionError) as e:
                raise CurveOperationFailedException("pairing_check", str(e)) from e

        return bn128.final_exponentiate(accumulated) == bn128.FQ12.one()

    def is_on_g1(self, point: G1Point) -> bool:
        try:
            _to_g1(point, "is_on_g1")
        except CurveOperationFailedException:
            return False
        return True

    def is_on_g2(self, point: G2Point) -> bool:
        try:
            _to_g2(point, "is_on_g2")
        except CurveOperationFailedException:
            return False
        return True


DEFAULT_PROVIDER = PyEccCurveProvider()


# =============================================================================
# Byte encoding (EVM precompile layout)
# =============================================================================

def encode_g1(point: G1Point) -> bytes:
    """Encode a G1 point as x || y (64 bytes)."""
    x, y = point
    return int_to_word(x) + int_to_word(y)


def decode_g1(data: bytes) -> G1Point:
    """
    Decode 64 bytes into a G1 point.

    Only checks width and field range; curve membership is checked by the
    provider when the point is used.

    Raises:
        CurveOperationFailedException: On wrong length or out-of-range coordinate
    """
    if len(data) != G1_ENCODED_SIZE:
        raise CurveOperationFailedException("decode_g1", f"expected {G1_ENCODED_SIZE} bytes, got {len(data)}")
    x = word_to_int(data[:WORD_SIZE])
    y = word_to_int(data[WORD_SIZE:])
    _check_coordinate(x, "decode_g1")
    _check_coordinate(y, "decode_g1")
    return (x, y)


def encode_g2(point: G2Point) -> bytes:
    """Encode a G2 point with the imaginary coefficient first (128 bytes)."""
    (x0, x1), (y0, y1) = point
    return int_to_word(x1) + int_to_word(x0) + int_to_word(y1) + int_to_word(y0)


def decode_g2(data: bytes) -> G2Point:
    """
    Decode 128 bytes into a G2 point.

    Raises:
        CurveOperationFailedException: On wrong length or out-of-range coordinate
    """
    if len(data) != G2_ENCODED_SIZE:
        raise CurveOperationFailedException("decode_g2", f"expected {G2_ENCODED_SIZE} bytes, got {len(data)}")
    words = [word_to_int(data[i:i + WORD_SIZE]) for i in range(0, G2_ENCODED_SIZE, WORD_SIZE)]
    for w in words:
        _check_coordinate(w, "decode_g2")
    x1, x0, y1, y0 = words
    return ((x0, x1), (y0, y1))


def g2_generator() -> G2Point:
    """Return the standard BN254 G2 generator in boundary encoding."""
    x, y = bn128.normalize(bn128.G2)
    return (
        (int(x.coeffs[0]), int(x.coeffs[1])),
        (int(y.coeffs[0]), int(y.coeffs[1])),
    )


def g2_mul(point: G2Point, scalar: int) -> G2Point:
    """
    Multiply a G2 point by a scalar.

    Not part of the provider capability: only key generation in tooling
    and tests needs G2 arithmetic.
    """
    pt = _to_g2(point, "g2_mul")
    result = bn128.multiply(pt, scalar % CURVE_ORDER)
    if bn128.is_inf(result):
        return G2_INFINITY
    x, y = bn128.normalize(result)
    return (
        (int(x.coeffs[0]), int(x.coeffs[1])),
        (int(y.coeffs[0]), int(y.coeffs[1])),
    )


__all__ = [
    "FIELD_MODULUS",
    "CURVE_ORDER",
    "G1Point",
    "G2Point",
    "G1_INFINITY",
    "G2_INFINITY",
    "G1_GENERATOR",
    "G1_ENCODED_SIZE",
    "G2_ENCODED_SIZE",
    "CurveProvider",
    "PyEccCurveProvider",
    "DEFAULT_PROVIDER",
    "encode_g1",
    "decode_g1",
    "encode_g2",
    "decode_g2",
    "g2_generator",
    "g2_mul",
]
