"""
Core cryptographic utilities.

Hashing primitives, the BN254 curve arithmetic provider, the
Pedersen commitment engine and deposit notes.
"""
from .hashing import (
    keccak256,
    sha256,
    hash_pair,
    hash_canonical,
    to_hex,
    from_hex,
    parse_fixed,
)
from .curve import (
    CURVE_ORDER,
    FIELD_MODULUS,
    CurveProvider,
    PyEccCurveProvider,
    DEFAULT_PROVIDER,
)
from .pedersen import (
    PedersenCommitments,
    hash_to_scalar,
)
from .notes import (
    Note,
    generate_note,
    compute_nullifier,
    serialize_note,
    parse_note,
)

__all__ = [
    "keccak256",
    "sha256",
    "hash_pair",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "parse_fixed",
    "CURVE_ORDER",
    "FIELD_MODULUS",
    "CurveProvider",
    "PyEccCurveProvider",
    "DEFAULT_PROVIDER",
    "PedersenCommitments",
    "hash_to_scalar",
    "Note",
    "generate_note",
    "compute_nullifier",
    "serialize_note",
    "parse_note",
]
