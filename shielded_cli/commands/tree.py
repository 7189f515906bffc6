"""
CLI Tree Commands

- zero-hashes: print the empty-subtree table, optionally recomputing it
- tree-proof: build an inclusion proof for one leaf of a list of leaves

Usage:
    shielded zero-hashes [--check] [--json]
    shielded tree-proof --leaves leaves.txt --index 3 [--depth 20] [--json]

Leaves files hold one 0x-prefixed 32-byte leaf per line; blank lines and
lines starting with '#' are skipped.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import WORD_SIZE, parse_fixed, to_hex
from core.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from core.merkle.zero_hashes import TREE_DEPTH, ZERO_HASHES, recompute_zero_hashes
from core.schemas.errors import TreeFullException


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def zero_hashes_cmd(args: Namespace) -> int:
    """Handle zero-hashes command."""
    table = [to_hex(z) for z in ZERO_HASHES]
    ok = True

    if args.check:
        recomputed = [to_hex(z) for z in recompute_zero_hashes(TREE_DEPTH)]
        mismatches = [i for i, (a, b) in enumerate(zip(table, recomputed)) if a != b]
        ok = not mismatches
        if mismatches:
            logger.error(f"Zero hash mismatch at levels {mismatches}")

    if args.json:
        out: dict = {"depth": TREE_DEPTH, "zero_hashes": table}
        if args.check:
            out["check_ok"] = ok
        print(json.dumps(out, indent=2))
    else:
        for level, value in enumerate(table):
            print(f"Z[{level:2d}] {value}")
        if args.check:
            print("check: OK" if ok else "check: MISMATCH")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED


def read_leaves(path: Path) -> list[bytes]:
    """Read a leaves file, one hex leaf per line."""
    leaves = []
    for lineno, line in enumerate(path.read_text().splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            leaves.append(parse_fixed(line, WORD_SIZE, f"leaf on line {lineno}"))
        except ValueError as e:
            raise ValueError(f"{path}: {e}") from e
    return leaves


def tree_proof_cmd(args: Namespace) -> int:
    """Handle tree-proof command."""
    path = Path(args.leaves)
    if not path.exists():
        print(f"Error: leaves file not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        leaves = read_leaves(path)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        prover = MerkleProver.from_leaves(leaves, depth=args.depth)
        proof = prover.prove(args.index)
    except (TreeFullException, ValueError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    valid = MerkleVerifier.verify(proof)
    logger.debug(f"Proof for leaf {args.index} of {len(prover)} verifies: {valid}")

    if args.json:
        print(json.dumps({
            "leaf": to_hex(proof.leaf),
            "index": proof.index,
            "root": to_hex(proof.root),
            "siblings": [to_hex(s) for s in proof.siblings],
            "path_indices": proof.path_indices,
            "valid": valid,
        }, indent=2))
    else:
        print(f"leaf:  {to_hex(proof.leaf)}")
        print(f"index: {proof.index}")
        print(f"root:  {to_hex(proof.root)}")
        for level, (sibling, bit) in enumerate(zip(proof.siblings, proof.path_indices)):
            print(f"  [{level:2d}] {bit} {to_hex(sibling)}")
        print(f"valid: {valid}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
