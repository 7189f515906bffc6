"""
CLI Crypto Commands

- commit: build a Pedersen commitment for (value, blinding)
- hashlock: sha256 hashlock for an HTLC preimage

Usage:
    shielded commit --value 100 [--blinding N] [--json]
    shielded hashlock [--preimage 0x..] [--json]
"""

from __future__ import annotations

import json
import logging
import secrets
import sys
from argparse import Namespace

from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import WORD_SIZE, from_hex, to_hex
from core.crypto.pedersen import PedersenCommitments, point_digest
from orchestrator.htlc import compute_hashlock


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def commit_cmd(args: Namespace) -> int:
    """Handle commit command."""
    if args.value < 0:
        print("Error: --value must be non-negative", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    blinding = args.blinding if args.blinding is not None else secrets.randbelow(CURVE_ORDER)
    engine = PedersenCommitments()
    point = engine.commit_point(args.value, blinding)
    digest = to_hex(point_digest(point))

    if args.json:
        print(json.dumps({
            "commitment": digest,
            "point": [str(point[0]), str(point[1])],
            "value": args.value,
            "blinding": str(blinding),
        }, indent=2))
    else:
        print(f"commitment: {digest}")
        print(f"value:      {args.value}")
        print(f"blinding:   {blinding}")
    return EXIT_SUCCESS


def hashlock_cmd(args: Namespace) -> int:
    """Handle hashlock command."""
    if args.preimage:
        try:
            preimage = from_hex(args.preimage)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
    else:
        preimage = secrets.token_bytes(WORD_SIZE)

    hashlock = to_hex(compute_hashlock(preimage))
    if args.json:
        print(json.dumps({"preimage": to_hex(preimage), "hashlock": hashlock}, indent=2))
    else:
        print(f"preimage: {to_hex(preimage)}")
        print(f"hashlock: {hashlock}")
    return EXIT_SUCCESS
