"""
CLI Verifying Key Command

Load a snarkjs-format verifying key and report its shape and validity.

Usage:
    shielded vk-info verification_key.json [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.curve import DEFAULT_PROVIDER
from core.schemas.errors import CurveOperationFailedException
from core.verifier.keys import load_verifying_key


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def vk_info_cmd(args: Namespace) -> int:
    """Handle vk-info command."""
    path = Path(args.path)
    if not path.exists():
        print(f"Error: verifying key not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        vk = load_verifying_key(path, label=path.stem)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    error = None
    try:
        vk.check_points(DEFAULT_PROVIDER)
    except CurveOperationFailedException as e:
        error = e.message

    if args.json:
        out = {"path": str(path), "key_id": vk.key_id(), "n_public": vk.n_public, "points_ok": error is None}
        if error:
            out["error"] = error
        print(json.dumps(out, indent=2))
    else:
        print(f"path:      {path}")
        print(f"key_id:    {vk.key_id()}")
        print(f"n_public:  {vk.n_public}")
        print(f"points_ok: {error is None}")
        if error:
            print(f"error:     {error}")

    return EXIT_SUCCESS if error is None else EXIT_VERIFICATION_FAILED
