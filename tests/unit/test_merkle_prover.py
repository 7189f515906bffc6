"""
Full-Node Prover Unit Tests
Tests for core/merkle/merkle_proofs.py

The prover must agree with the incremental tree on every root and must
produce proofs for old leaves against the latest root.
"""
import pytest

from core.crypto.hashing import keccak256
from core.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from core.merkle.merkle_tree import IncrementalMerkleTree
from core.merkle.zero_hashes import ZERO_HASHES
from core.schemas.errors import TreeFullException


def leaf(i: int) -> bytes:
    return keccak256(f"leaf-{i}".encode())


class TestProverAgreesWithTree:
    """The full-node store and the incremental tree compute the same roots."""

    @pytest.mark.parametrize("count", [1, 2, 3, 8, 13])
    def test_same_root(self, count):
        tree = IncrementalMerkleTree(depth=6)
        prover = MerkleProver(depth=6)
        for i in range(count):
            tree.insert(leaf(i))
            prover.append(leaf(i))
            assert prover.root == tree.root

    def test_empty_root(self):
        assert MerkleProver(depth=7).root == ZERO_HASHES[7]


class TestProofs:
    """Tests for proofs against the latest root."""

    def test_every_old_leaf_proves_against_latest_root(self):
        leaves = [leaf(i) for i in range(11)]
        prover = MerkleProver.from_leaves(leaves, depth=5)
        for i in range(len(leaves)):
            proof = prover.prove(i)
            assert proof.root == prover.root
            assert MerkleVerifier.verify(proof)

    def test_verify_leaf_in_root(self):
        prover = MerkleProver.from_leaves([leaf(i) for i in range(4)], depth=3)
        proof = prover.prove(2)
        assert MerkleVerifier.verify_leaf_in_root(leaf(2), 2, proof.siblings, prover.root)
        assert not MerkleVerifier.verify_leaf_in_root(leaf(2), 3, proof.siblings, prover.root)
        assert not MerkleVerifier.verify_leaf_in_root(leaf(2), 8, proof.siblings, prover.root)

    def test_prove_out_of_range(self):
        prover = MerkleProver.from_leaves([leaf(0)], depth=3)
        with pytest.raises(IndexError):
            prover.prove(1)

    def test_leaf_index(self):
        prover = MerkleProver.from_leaves([leaf(0), leaf(1)], depth=3)
        assert prover.leaf_index(leaf(1)) == 1
        with pytest.raises(ValueError):
            prover.leaf_index(leaf(5))


class TestCapacity:
    """Tests for capacity and input checks."""

    def test_full(self):
        prover = MerkleProver.from_leaves([leaf(i) for i in range(4)], depth=2)
        assert len(prover) == 4
        with pytest.raises(TreeFullException):
            prover.append(leaf(4))

    def test_bad_leaf(self):
        with pytest.raises(ValueError):
            MerkleProver(depth=2).append(b"short")
