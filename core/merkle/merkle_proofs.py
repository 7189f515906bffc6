"""
Merkle Proofs - Full-Node Prover
Node-store mirror of the commitment tree for serving inclusion proofs.

The incremental tree keeps only O(depth) state, so it can prove a leaf
only at the moment it is inserted. Wallets and indexers that need a proof
for an older leaf keep every filled node instead:

- MerkleProver: append leaves, prove any leaf index, root equal to the
  incremental tree's root after the same insertions
- MerkleVerifier: static verification helpers
"""
from __future__ import annotations

from typing import Iterable, Sequence

from core.crypto.hashing import WORD_SIZE, hash_pair
from core.merkle.merkle_tree import MerkleProof, get_path_indices, verify_path, verify_merkle_proof
from core.merkle.zero_hashes import TREE_DEPTH, ZERO_HASHES
from core.schemas.errors import TreeFullException


class MerkleProver:
    """
    Full-node commitment tree.

    levels[0] holds the leaves, levels[depth] holds the root once any leaf
    exists. Missing right-hand nodes are the empty subtree Z[level].

    Example:
        >>> prover = MerkleProver.from_leaves(leaves, depth=8)
        >>> proof = prover.prove(3)
        >>> MerkleVerifier.verify(proof)
        True
    """

    def __init__(self, depth: int = TREE_DEPTH) -> None:
        if depth < 1 or depth > TREE_DEPTH:
            raise ValueError(f"Tree depth must be in [1, {TREE_DEPTH}], got {depth}")
        self.depth = depth
        self.levels: list[list[bytes]] = [[] for _ in range(depth + 1)]

    @classmethod
    def from_leaves(cls, leaves: Iterable[bytes], depth: int = TREE_DEPTH) -> "MerkleProver":
        prover = cls(depth)
        for leaf in leaves:
            prover.append(leaf)
        return prover

    def __len__(self) -> int:
        return len(self.levels[0])

    @property
    def root(self) -> bytes:
        if not self.levels[0]:
            return ZERO_HASHES[self.depth]
        return self.levels[self.depth][0]

    def leaf_index(self, leaf: bytes) -> int:
        """
        Return the first index holding `leaf`.

        Raises:
            ValueError: If the leaf is not in the tree
        """
        return self.levels[0].index(leaf)

    def append(self, leaf: bytes) -> int:
        """
        Append a leaf and refresh its path to the root.

        Returns:
            The new leaf's index

        Raises:
            ValueError: If leaf is not 32 bytes
            TreeFullException: If the tree has no free slot
        """
        if len(leaf) != WORD_SIZE:
            raise ValueError(f"Leaf must be {WORD_SIZE} bytes, got {len(leaf)}")
        index = len(self.levels[0])
        if index >= (1 << self.depth):
            raise TreeFullException(capacity=1 << self.depth)

        self.levels[0].append(leaf)
        current_index = index
        for level in range(self.depth):
            nodes = self.levels[level]
            left_index = current_index & ~1
            left = nodes[left_index]
            right = nodes[left_index + 1] if left_index + 1 < len(nodes) else ZERO_HASHES[level]
            parent = hash_pair(left, right)

            parent_index = current_index // 2
            parents = self.levels[level + 1]
            if parent_index < len(parents):
                parents[parent_index] = parent
            else:
                parents.append(parent)
            current_index = parent_index

        return index

    def prove(self, index: int) -> MerkleProof:
        """
        Build the inclusion proof for the leaf at `index` against the current root.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self.levels[0]):
            raise IndexError(f"Leaf index {index} out of range for {len(self.levels[0])} leaves")

        siblings: list[bytes] = []
        current_index = index
        for level in range(self.depth):
            nodes = self.levels[level]
            sibling_index = current_index ^ 1
            siblings.append(nodes[sibling_index] if sibling_index < len(nodes) else ZERO_HASHES[level])
            current_index //= 2

        return MerkleProof(
            leaf=self.levels[0][index],
            index=index,
            siblings=siblings,
            path_indices=get_path_indices(index, self.depth),
            root=self.root,
        )


class MerkleVerifier:
    """Static verification helpers for commitment-tree proofs."""

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        index: int,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """
        Verify a leaf at a known index, deriving directions from the index.

        Returns False if the index does not fit the number of siblings.
        """
        depth = len(siblings)
        if index < 0 or index >= (1 << depth):
            return False
        return verify_path(root, leaf, siblings, get_path_indices(index, depth))


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
