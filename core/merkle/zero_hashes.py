"""
Zero-subtree hashes for the commitment tree.

Z[0] = keccak256("laundry_zero"), Z[i] = keccak256(Z[i-1] || Z[i-1]).
Z[i] is the root of an empty subtree of height i; Z[20] is the root of an
empty depth-20 tree.

These values are embedded constants and must stay bit-exact across
implementations. Runtime code never recomputes them; use
`shielded zero-hashes --check` to recompute and compare offline.
"""
from __future__ import annotations

from core.crypto.hashing import hash_pair, keccak256


TREE_DEPTH = 20

ZERO_SEED = b"laundry_zero"

ZERO_HASHES: tuple[bytes, ...] = tuple(bytes.fromhex(h) for h in (
    "1af8af579191064f2206cca9793817aefb56ab970bdb90c4b66cd0323c54fa17",
    "57b941e9b3e46d30c35d893403c51cf638bd4d519ca6a69a684c6cd60774e296",
    "5594e960e29dcbc13918ae9c1d0be4b01a077d86746aa782120361728df4c9d8",
    "0ccd143040f0aa22a626a102995a0812001ea4a6567692750dc218c099b7f663",
    "c5e120dd5de73f5495ad5c1899e42955740ba290ee02317edc6cf620deb78a35",
    "e4437d3cb5dd9880e67492801a632144dd2dc2371bea795272b2d333d6087c41",
    "e9c2e5ed6aae28987bf0a88370ad57ec91e1104b2d390e3d8845e8066c975cc8",
    "67d362c487a4e2d1e806e6414c66e4829d0af3b811593434e631dc2643d01935",
    "410336056ac1fb076559b540373a9b4baeac14566f4cb28a97f4485430a4186b",
    "62575a93e9247696312fb3273c4b3ce3cc8d924097852e4ea56fa0abcce0049b",
    "be06ada78bb896fcf56821c38fb7ef2b279748f6e4e3444d5ab04e446716577c",
    "b0c34e211ae4d464f90b93d058af9927803e7f5869735b333246aa76d760b722",
    "96336e0c89be99c887f413d45d5a62b4f79a99b0553f68bf1e913ddc4f89b35c",
    "ec2819d9d95ddcaf66941d3e22d6a4d5778312dce9e63fd70a12b2c447cfe533",
    "47ce2c434234b1d1f6f7b5ecc6357b52550b23ed43a04baab8e79bb2cf8840d5",
    "1f9e75b88ab31acd1041ee14580781d408134c0b1b2134be25a062b5f721bc1d",
    "b395ba66cf7ca9b6a9ceaea9c5521ed33bd6ab854a505998b8bcc6be79a15211",
    "2c7a590ac7d408a9498e27b6ff5db346cd857d481ea4401bd0275704d730df11",
    "fd1c1283762d697ad27d11e0e72ef35529f11f4d65a786a062825d5350985029",
    "ada83948c9ed6fb3c417c9afbe8d3f3d7155c123bdda632875c1adc6f3600dba",
    "3439793663d4c0a4741efa4d163879df4f1ac45ff63a4a9db00c0d3e4a8bdec4",
))

EMPTY_ROOT: bytes = ZERO_HASHES[TREE_DEPTH]


def empty_root(depth: int) -> bytes:
    """Root of an empty tree of the given depth (<= TREE_DEPTH)."""
    if depth < 1 or depth > TREE_DEPTH:
        raise ValueError(f"Tree depth must be in [1, {TREE_DEPTH}], got {depth}")
    return ZERO_HASHES[depth]


def recompute_zero_hashes(depth: int = TREE_DEPTH) -> list[bytes]:
    """
    Recompute Z[0..depth] from the seed.

    Offline check only; the tree uses the embedded table.
    """
    zeros = [keccak256(ZERO_SEED)]
    for _ in range(depth):
        zeros.append(hash_pair(zeros[-1], zeros[-1]))
    return zeros


__all__ = [
    "TREE_DEPTH",
    "ZERO_SEED",
    "ZERO_HASHES",
    "EMPTY_ROOT",
    "empty_root",
    "recompute_zero_hashes",
]
