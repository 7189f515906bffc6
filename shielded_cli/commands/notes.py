"""
CLI Note Commands

- note new: generate a fresh deposit note
- note show: parse a note and print its derived values

Usage:
    shielded note new --value 100 [--leaf-index N] [--json]
    shielded note show shielded-note-v1-... [--leaf-index N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.crypto.hashing import to_hex
from core.crypto.notes import Note, generate_note, parse_note, serialize_note


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def _print_note(note: Note, as_json: bool) -> None:
    nullifier = to_hex(note.nullifier()) if note.leaf_index is not None else None
    out = {
        "note": serialize_note(note),
        "value": note.value,
        "commitment": to_hex(note.commitment()),
        "leaf": to_hex(note.leaf()),
        "leaf_index": note.leaf_index,
        "nullifier": nullifier,
    }
    if as_json:
        print(json.dumps(out, indent=2))
        return

    print(f"note:       {out['note']}")
    print(f"value:      {note.value}")
    print(f"commitment: {out['commitment']}")
    print(f"leaf:       {out['leaf']}")
    if nullifier is not None:
        print(f"leaf_index: {note.leaf_index}")
        print(f"nullifier:  {nullifier}")


def note_new_cmd(args: Namespace) -> int:
    """Handle note new command."""
    try:
        note = generate_note(args.value)
        if args.leaf_index is not None:
            note = note.at_index(args.leaf_index)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    _print_note(note, args.json)
    return EXIT_SUCCESS


def note_show_cmd(args: Namespace) -> int:
    """Handle note show command."""
    try:
        note = parse_note(args.note)
        if args.leaf_index is not None:
            note = note.at_index(args.leaf_index)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    _print_note(note, args.json)
    return EXIT_SUCCESS
