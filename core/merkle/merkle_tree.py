"""
Incremental Merkle Tree
Fixed-depth, append-only commitment tree with O(depth) insertion.

This module provides:
- IncrementalMerkleTree: sparse incremental tree with a bounded root history
- MerkleProof: inclusion proof for one leaf
- verify_merkle_proof / verify_path: pure proof verification
- get_path_indices: bit decomposition of a leaf index

Commitment Rules (Hard Contracts):
1. Parent hashing: parent = keccak256(left || right), both exactly 32 bytes
2. Empty subtrees: the embedded ZERO_HASHES table, never recomputed
3. Directions: 0 = current node is the left child, 1 = right child
4. Path indices are least-significant bit first

Insertion Algorithm:
For level i in 0..depth-1, with bit = (next_index >> i) & 1:
- bit 0: cache the current hash as filled_subtrees[i], pair it with Z[i]
- bit 1: pair filled_subtrees[i] (left) with the current hash (right)
The final hash is the new root. Each insertion costs exactly `depth` hashes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import WORD_SIZE, hash_pair, short_hex
from core.merkle.zero_hashes import TREE_DEPTH, ZERO_HASHES
from core.schemas.errors import TreeFullException


logger = logging.getLogger(__name__)


DEFAULT_ROOT_HISTORY_SIZE = 30

_ZERO_WORD = bytes(WORD_SIZE)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf of the commitment tree.

    Attributes:
        leaf: The 32-byte leaf being proven
        index: The 0-based leaf index
        siblings: Sibling hashes from the leaf level up to just below the root
        path_indices: Direction bits matching siblings (0 = left, 1 = right)
        root: The root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    path_indices: list[int]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        if len(self.siblings) != len(self.path_indices):
            raise ValueError(
                f"siblings and path_indices differ in length: "
                f"{len(self.siblings)} != {len(self.path_indices)}"
            )


@dataclass(frozen=True)
class TreeSnapshot:
    """Copy of the mutable tree state, O(depth + history) in size."""
    depth: int
    filled_subtrees: tuple[bytes, ...]
    next_index: int
    current_root: bytes
    roots: tuple[bytes, ...]
    root_cursor: int


def get_path_indices(leaf_index: int, depth: int = TREE_DEPTH) -> list[int]:
    """
    Bit decomposition of a leaf index across `depth` levels, LSB first.

    Example:
        >>> get_path_indices(5, depth=4)
        [1, 0, 1, 0]

    Raises:
        ValueError: If the index does not fit in `depth` bits
    """
    if leaf_index < 0 or leaf_index >= (1 << depth):
        raise ValueError(f"Leaf index {leaf_index} out of range for depth {depth}")
    return [(leaf_index >> level) & 1 for level in range(depth)]


def verify_path(
    root: bytes,
    leaf: bytes,
    siblings: Sequence[bytes],
    directions: Sequence[int],
) -> bool:
    """
    Recompute a root from a leaf and its path and compare.

    Pure function. Returns False (never raises) on a length mismatch,
    a direction other than 0/1, or a node that is not 32 bytes.
    """
    if len(siblings) != len(directions):
        return False
    if len(leaf) != WORD_SIZE or len(root) != WORD_SIZE:
        return False

    current = leaf
    for sibling, direction in zip(siblings, directions):
        if len(sibling) != WORD_SIZE:
            return False
        if direction == 0:
            current = hash_pair(current, sibling)
        elif direction == 1:
            current = hash_pair(sibling, current)
        else:
            return False

    return current == root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """Verify a MerkleProof against its own claimed root."""
    return verify_path(proof.root, proof.leaf, proof.siblings, proof.path_indices)


class IncrementalMerkleTree:
    """
    Sparse incremental Merkle tree over 32-byte commitments.

    Keeps only the cached left siblings per level plus a ring buffer of
    recent roots. The tree is not thread-safe on its own; the pool
    serializes access.

    Example:
        >>> tree = IncrementalMerkleTree(depth=4)
        >>> proof = tree.insert_with_proof(bytes(31) + b"\\x01")
        >>> verify_merkle_proof(proof)
        True
    """

    def __init__(
        self,
        depth: int = TREE_DEPTH,
        root_history_size: int = DEFAULT_ROOT_HISTORY_SIZE,
    ) -> None:
        if depth < 1 or depth > TREE_DEPTH:
            raise ValueError(f"Tree depth must be in [1, {TREE_DEPTH}], got {depth}")
        if root_history_size < 1:
            raise ValueError("root_history_size must be at least 1")

        self.depth = depth
        self.root_history_size = root_history_size
        self._filled_subtrees: list[bytes] = [ZERO_HASHES[i] for i in range(depth)]
        self._next_index = 0
        self._root = ZERO_HASHES[depth]
        self._roots: list[bytes] = [_ZERO_WORD] * root_history_size
        self._roots[0] = self._root
        self._root_cursor = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def next_index(self) -> int:
        return self._next_index

    @property
    def root(self) -> bytes:
        return self._root

    @property
    def free_slots(self) -> int:
        return self.capacity - self._next_index

    def is_known_root(self, root: bytes) -> bool:
        """True if `root` is one of the last `root_history_size` roots."""
        if root == _ZERO_WORD:
            return False
        return root in self._roots

    def filled_subtrees(self) -> list[bytes]:
        return list(self._filled_subtrees)

    def get_path_indices(self, leaf_index: int) -> list[int]:
        return get_path_indices(leaf_index, self.depth)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert(self, leaf: bytes) -> bytes:
        """
        Append a leaf and return the new root.

        Raises:
            ValueError: If leaf is not 32 bytes
            TreeFullException: If every slot is taken
        """
        return self._insert(leaf)[0]

    def insert_with_proof(self, leaf: bytes) -> MerkleProof:
        """
        Append a leaf and return its inclusion proof against the new root.

        The proof is rebuilt from the cached state during the same walk:
        a right-hand step pairs with the cached left sibling, a left-hand
        step pairs with the empty subtree Z[level].
        """
        new_root, index, siblings = self._insert(leaf)
        return MerkleProof(
            leaf=leaf,
            index=index,
            siblings=siblings,
            path_indices=get_path_indices(index, self.depth),
            root=new_root,
        )

    def _insert(self, leaf: bytes) -> tuple[bytes, int, list[bytes]]:
        if len(leaf) != WORD_SIZE:
            raise ValueError(f"Leaf must be {WORD_SIZE} bytes, got {len(leaf)}")
        if self._next_index >= self.capacity:
            raise TreeFullException(capacity=self.capacity)

        index = self._next_index
        current_index = index
        current = leaf
        siblings: list[bytes] = []

        for level in range(self.depth):
            if current_index % 2 == 0:
                siblings.append(ZERO_HASHES[level])
                self._filled_subtrees[level] = current
                current = hash_pair(current, ZERO_HASHES[level])
            else:
                left = self._filled_subtrees[level]
                siblings.append(left)
                current = hash_pair(left, current)
            current_index //= 2

        self._root = current
        self._next_index = index + 1
        self._root_cursor = (self._root_cursor + 1) % self.root_history_size
        self._roots[self._root_cursor] = current

        logger.debug(f"Inserted leaf {short_hex(leaf)} at index {index}, root {short_hex(current)}")
        return current, index, siblings

    # ------------------------------------------------------------------
    # Snapshot / restore
    # ------------------------------------------------------------------

    def snapshot(self) -> TreeSnapshot:
        return TreeSnapshot(
            depth=self.depth,
            filled_subtrees=tuple(self._filled_subtrees),
            next_index=self._next_index,
            current_root=self._root,
            roots=tuple(self._roots),
            root_cursor=self._root_cursor,
        )

    def restore(self, snapshot: TreeSnapshot) -> None:
        """
        Reset the tree to a previously taken snapshot.

        Raises:
            ValueError: If the snapshot was taken from a tree of a different shape
        """
        if snapshot.depth != self.depth or len(snapshot.roots) != self.root_history_size:
            raise ValueError("Snapshot does not match this tree's depth or history size")
        if snapshot.next_index < 0 or snapshot.next_index > self.capacity:
            raise ValueError(f"Snapshot next_index {snapshot.next_index} out of range")

        self._filled_subtrees = list(snapshot.filled_subtrees)
        self._next_index = snapshot.next_index
        self._root = snapshot.current_root
        self._roots = list(snapshot.roots)
        self._root_cursor = snapshot.root_cursor


__all__ = [
    "DEFAULT_ROOT_HISTORY_SIZE",
    "MerkleProof",
    "TreeSnapshot",
    "IncrementalMerkleTree",
    "get_path_indices",
    "verify_path",
    "verify_merkle_proof",
]
