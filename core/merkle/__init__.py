"""
Commitment Tree
Fixed-depth incremental Merkle tree over 32-byte commitments.

This module provides:
- ZERO_HASHES / TREE_DEPTH / EMPTY_ROOT: embedded empty-subtree constants
- IncrementalMerkleTree: O(depth) insertion with a bounded root history
- MerkleProof, verify_merkle_proof, verify_path: inclusion proofs
- MerkleProver / MerkleVerifier: full-node mirror for proving older leaves

Commitment Rules:
1. Parent hashing: keccak256(left || right)
2. Z[0] = keccak256("laundry_zero"), Z[i] = keccak256(Z[i-1] || Z[i-1])
3. Directions: 0 = current is left, 1 = current is right

Usage:
    from core.merkle import IncrementalMerkleTree, verify_merkle_proof

    tree = IncrementalMerkleTree()
    proof = tree.insert_with_proof(commitment)
    assert verify_merkle_proof(proof)
"""
from .zero_hashes import (
    TREE_DEPTH,
    ZERO_HASHES,
    EMPTY_ROOT,
    empty_root,
    recompute_zero_hashes,
)

from .merkle_tree import (
    DEFAULT_ROOT_HISTORY_SIZE,
    MerkleProof,
    TreeSnapshot,
    IncrementalMerkleTree,
    get_path_indices,
    verify_path,
    verify_merkle_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Constants
    "TREE_DEPTH",
    "ZERO_HASHES",
    "EMPTY_ROOT",
    "DEFAULT_ROOT_HISTORY_SIZE",
    "empty_root",
    "recompute_zero_hashes",
    # Core types
    "MerkleProof",
    "TreeSnapshot",
    "IncrementalMerkleTree",
    # Functions
    "get_path_indices",
    "verify_path",
    "verify_merkle_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
