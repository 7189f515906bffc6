"""
Deposit Notes

A note is everything a depositor must keep to spend a deposit later:

    value       amount committed to
    secret      spending key, never revealed on-chain
    blinding    Pedersen blinding factor
    leaf_index  tree position, known once the deposit is accepted

Derived values (all canonical scalar field words, i.e. < r):

    commitment = Pedersen(value, blinding) digest
    nullifier  = keccak256(secret || leaf_index) mod r
    leaf       = keccak256(commitment || secret) mod r

Text form, for backing a note up outside the process:

    shielded-note-v1-<value>-0x<secret>-0x<blinding>[-<leaf_index>]

with secret and blinding as 32-byte hex words.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, replace
from typing import Optional

from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import WORD_SIZE, int_to_word, keccak256, parse_fixed, short_hex, word_to_int
from core.crypto.pedersen import PedersenCommitments


logger = logging.getLogger(__name__)


NOTE_PREFIX = "shielded-note-v1"


def _field_digest(data: bytes) -> bytes:
    return int_to_word(word_to_int(keccak256(data)) % CURVE_ORDER)


def _scalar(value: int, name: str, allow_zero: bool = False) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    low = 0 if allow_zero else 1
    if not low <= value < CURVE_ORDER:
        raise ValueError(f"{name} must be in [{low}, r)")
    return value


def generate_secret() -> int:
    """Uniform non-zero scalar."""
    return secrets.randbelow(CURVE_ORDER - 1) + 1


def compute_commitment(value: int, blinding: int, engine: Optional[PedersenCommitments] = None) -> bytes:
    return (engine or PedersenCommitments()).commit(value, blinding)


def compute_nullifier(secret: int, leaf_index: int) -> bytes:
    """
    Nullifier for the note at `leaf_index`.

    Bound to the tree position, so the same secret deposited twice
    yields two independent nullifiers.
    """
    _scalar(secret, "secret")
    if not isinstance(leaf_index, int) or isinstance(leaf_index, bool) or leaf_index < 0:
        raise ValueError("leaf_index must be a non-negative integer")
    return _field_digest(int_to_word(secret) + int_to_word(leaf_index))


def compute_leaf(commitment: bytes, secret: int) -> bytes:
    """Leaf hash binding a commitment to its spending secret."""
    raw = parse_fixed(commitment, WORD_SIZE, "commitment")
    return _field_digest(raw + int_to_word(_scalar(secret, "secret")))


@dataclass(frozen=True)
class Note:
    """Private deposit note."""

    value: int
    secret: int
    blinding: int
    leaf_index: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool) or self.value < 0:
            raise ValueError("value must be a non-negative integer")
        _scalar(self.secret, "secret")
        _scalar(self.blinding, "blinding")
        if self.leaf_index is not None and (
            not isinstance(self.leaf_index, int) or isinstance(self.leaf_index, bool) or self.leaf_index < 0
        ):
            raise ValueError("leaf_index must be a non-negative integer")

    def commitment(self, engine: Optional[PedersenCommitments] = None) -> bytes:
        return compute_commitment(self.value, self.blinding, engine)

    def nullifier(self) -> bytes:
        """
        Raises:
            ValueError: If the note has not been placed in the tree yet
        """
        if self.leaf_index is None:
            raise ValueError("note has no leaf index; deposit it first")
        return compute_nullifier(self.secret, self.leaf_index)

    def leaf(self, engine: Optional[PedersenCommitments] = None) -> bytes:
        return compute_leaf(self.commitment(engine), self.secret)

    def at_index(self, leaf_index: int) -> "Note":
        """Copy of this note placed at `leaf_index`."""
        return replace(self, leaf_index=leaf_index)


def generate_note(value: int) -> Note:
    """Fresh note for `value` with random secret and blinding."""
    note = Note(value=value, secret=generate_secret(), blinding=generate_secret())
    logger.debug(f"Generated note for value {value}, commitment {short_hex(note.commitment())}")
    return note


def serialize_note(note: Note) -> str:
    parts = [
        NOTE_PREFIX,
        str(note.value),
        "0x" + int_to_word(note.secret).hex(),
        "0x" + int_to_word(note.blinding).hex(),
    ]
    if note.leaf_index is not None:
        parts.append(str(note.leaf_index))
    return "-".join(parts)


def parse_note(text: str) -> Note:
    """
    Parse the text form produced by serialize_note.

    Raises:
        ValueError: On a wrong prefix, wrong field count or a bad field
    """
    if not isinstance(text, str):
        raise ValueError("note must be a string")
    text = text.strip()
    if not text.startswith(NOTE_PREFIX + "-"):
        raise ValueError(f"note must start with '{NOTE_PREFIX}-'")

    fields = text[len(NOTE_PREFIX) + 1:].split("-")
    if len(fields) not in (3, 4):
        raise ValueError(f"note must have 3 or 4 fields, got {len(fields)}")

    if not fields[0].isdigit():
        raise ValueError(f"note value is not a decimal integer: {fields[0]!r}")
    value = int(fields[0])
    secret = word_to_int(parse_fixed(fields[1], WORD_SIZE, "secret"))
    blinding = word_to_int(parse_fixed(fields[2], WORD_SIZE, "blinding"))

    leaf_index = None
    if len(fields) == 4:
        if not fields[3].isdigit():
            raise ValueError(f"note leaf index is not a decimal integer: {fields[3]!r}")
        leaf_index = int(fields[3])

    return Note(value=value, secret=secret, blinding=blinding, leaf_index=leaf_index)


__all__ = [
    "NOTE_PREFIX",
    "Note",
    "generate_secret",
    "generate_note",
    "compute_commitment",
    "compute_nullifier",
    "compute_leaf",
    "serialize_note",
    "parse_note",
]
