"""
Shielded Pool CLI - Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m shielded_cli zero-hashes [--check] [--json]
    python -m shielded_cli commit --value 100 [--blinding N] [--json]
    python -m shielded_cli hashlock [--preimage 0x..] [--json]
    python -m shielded_cli note new --value 100 [--leaf-index N] [--json]
    python -m shielded_cli note show <note> [--leaf-index N] [--json]
    python -m shielded_cli tree-proof --leaves leaves.txt --index 0 [--depth 20] [--json]
    python -m shielded_cli vk-info verification_key.json [--json]
    python -m shielded_cli serve [--host H] [--port P]

Environment Variables:
    SHIELDED_LOG_LEVEL          Log level (default: INFO)
    SHIELDED_API_HOST           Host for `serve` (default: 127.0.0.1)
    SHIELDED_API_PORT           Port for `serve` (default: 8000)
    SHIELDED_WITHDRAW_VK        Withdrawal verifying key used by `serve`
    SHIELDED_TRANSFER_VK        Transfer verifying key used by `serve`
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import load_config
from core.merkle.zero_hashes import TREE_DEPTH
from shielded_cli.commands import crypto, keys, notes, tree


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="shielded",
        description="Shielded Pool CLI - Inspect tree constants, build commitments and proofs, serve the API.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./shielded.json or ~/.config/shielded/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- zero-hashes command ---
    zero_parser = subparsers.add_parser(
        "zero-hashes",
        help="Print the empty-subtree hashes Z[0..20]",
    )
    zero_parser.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Recompute the table from the seed and compare",
    )
    zero_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    zero_parser.set_defaults(func=tree.zero_hashes_cmd)

    # --- commit command ---
    commit_parser = subparsers.add_parser(
        "commit",
        help="Build a Pedersen commitment",
    )
    commit_parser.add_argument("--value", "-v", type=int, required=True, help="Value to commit to")
    commit_parser.add_argument(
        "--blinding", "-r",
        type=int,
        default=None,
        help="Blinding factor (random if omitted)",
    )
    commit_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    commit_parser.set_defaults(func=crypto.commit_cmd)

    # --- hashlock command ---
    hashlock_parser = subparsers.add_parser(
        "hashlock",
        help="Compute an HTLC hashlock",
    )
    hashlock_parser.add_argument(
        "--preimage", "-p",
        type=str,
        default=None,
        help="0x-prefixed preimage (random 32 bytes if omitted)",
    )
    hashlock_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    hashlock_parser.set_defaults(func=crypto.hashlock_cmd)

    # --- note command ---
    note_parser = subparsers.add_parser(
        "note",
        help="Generate or inspect a deposit note",
    )
    note_sub = note_parser.add_subparsers(dest="note_command", required=True)

    note_new_parser = note_sub.add_parser("new", help="Generate a fresh note")
    note_new_parser.add_argument("--value", "-v", type=int, required=True, help="Value the note commits to")
    note_new_parser.add_argument("--leaf-index", type=int, default=None, help="Tree position, to derive the nullifier")
    note_new_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    note_new_parser.set_defaults(func=notes.note_new_cmd)

    note_show_parser = note_sub.add_parser("show", help="Print the values derived from a note")
    note_show_parser.add_argument("note", type=str, help="Note text (shielded-note-v1-...)")
    note_show_parser.add_argument("--leaf-index", type=int, default=None, help="Tree position (overrides the note's)")
    note_show_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    note_show_parser.set_defaults(func=notes.note_show_cmd)

    # --- tree-proof command ---
    proof_parser = subparsers.add_parser(
        "tree-proof",
        help="Build an inclusion proof from a leaves file",
    )
    proof_parser.add_argument("--leaves", "-l", type=str, required=True, help="File with one hex leaf per line")
    proof_parser.add_argument("--index", "-i", type=int, required=True, help="Leaf index to prove")
    proof_parser.add_argument(
        "--depth", "-d",
        type=int,
        default=TREE_DEPTH,
        help=f"Tree depth (default: {TREE_DEPTH})",
    )
    proof_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    proof_parser.set_defaults(func=tree.tree_proof_cmd)

    # --- vk-info command ---
    vk_parser = subparsers.add_parser(
        "vk-info",
        help="Inspect a snarkjs verifying key",
    )
    vk_parser.add_argument("path", type=str, help="Path to verification_key.json")
    vk_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    vk_parser.set_defaults(func=keys.vk_info_cmd)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument("--host", type=str, default=None, help="Bind host (overrides config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
    serve_parser.set_defaults(func=serve_cmd)

    return parser


def serve_cmd(args: argparse.Namespace) -> int:
    """Handle serve command."""
    import uvicorn

    config = args.runtime_config
    host = args.host or config.api.host
    port = args.port or config.api.port
    logging.getLogger(__name__).info(f"Serving shielded pool API on {host}:{port}")
    uvicorn.run("api.app:app", host=host, port=port, log_level=config.log_level.lower())
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.log_level)

    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
