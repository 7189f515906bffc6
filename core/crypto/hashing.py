"""
Hashing Utilities
Hash primitives and hex helpers shared by the tree, commitments and swaps.

This module provides:
- keccak-256 for tree nodes, commitment digests and hash-to-curve
- SHA-256 as the secondary hash used by swap hashlocks
- Canonical hashing for objects (via dumps_canonical)
- Hex encoding/decoding with 0x prefix
- Fixed-width 32-byte / 20-byte value parsing

Security/Determinism Notes:
- Tree nodes always hash a fixed 64-byte concatenation, never a
  variable-length encoding
- Swap preimages use SHA-256 so a tree hash can never double as a hashlock
"""
from __future__ import annotations

import hashlib
from typing import Any

from eth_utils import keccak

from core.schemas.canonical import dumps_canonical


WORD_SIZE = 32
ADDRESS_SIZE = 20


def keccak256(data: bytes) -> bytes:
    """
    Compute the keccak-256 digest of raw bytes.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def sha256(data: bytes) -> bytes:
    """Compute SHA-256 hash of raw bytes."""
    return hashlib.sha256(data).digest()


def hash_pair(left: bytes, right: bytes) -> bytes:
    """
    Hash two 32-byte tree children into their parent.

    parent = keccak256(left || right), matching abi.encode(bytes32, bytes32).

    Raises:
        ValueError: If either child is not exactly 32 bytes
    """
    if len(left) != WORD_SIZE or len(right) != WORD_SIZE:
        raise ValueError(
            f"Tree children must be {WORD_SIZE} bytes, got {len(left)} and {len(right)}"
        )
    return keccak256(left + right)


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: digest = keccak256(dumps_canonical(obj).encode("utf-8"))

    Args:
        obj: Any object that can be canonically serialized
             (Pydantic model, dict, list, primitives)
    """
    canonical_json = dumps_canonical(obj)
    return keccak256(canonical_json.encode("utf-8"))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def parse_fixed(value: bytes | str, size: int, name: str = "value") -> bytes:
    """
    Accept raw bytes or a 0x-prefixed hex string of exactly ``size`` bytes.

    Raises:
        ValueError: On wrong type, bad hex or wrong length
    """
    if isinstance(value, str):
        raw = from_hex(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise ValueError(f"{name} must be bytes or 0x-hex, got {type(value).__name__}")

    if len(raw) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(raw)}")
    return raw


def int_to_word(value: int) -> bytes:
    """Encode a non-negative integer as a 32-byte big-endian word."""
    return int(value).to_bytes(WORD_SIZE, "big")


def word_to_int(word: bytes) -> int:
    """Decode a big-endian word."""
    return int.from_bytes(word, "big")


def short_hex(data: bytes, prefix_len: int = 8) -> str:
    """Return a shortened hex string like 0xabcd1234...9f0a for log lines."""
    h = data.hex()
    if len(h) <= prefix_len * 2:
        return "0x" + h
    return "0x" + h[:prefix_len] + "..." + h[-4:]


__all__ = [
    "WORD_SIZE",
    "ADDRESS_SIZE",
    "keccak256",
    "sha256",
    "hash_pair",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "parse_fixed",
    "int_to_word",
    "word_to_int",
    "short_hex",
]
