"""
Fact Log

Append-only record of emitted facts. Every recorded fact is stamped with
its position in the log and the canonical hash of its committed fields.
The log is owned by the pool (or the swap book) and only mutated under
its lock.
"""

from __future__ import annotations

from typing import Any, Optional

from core.crypto.hashing import hash_canonical, to_hex
from core.schemas.facts import Fact, FactKind


class FactLog:
    """
    Records facts emitted by accepted operations.

    Usage:
        log = FactLog()
        stamped = log.record(DepositFact(...))
        deposits = log.get_facts("deposit")
    """

    def __init__(self) -> None:
        self._facts: list[Fact] = []

    def __len__(self) -> int:
        return len(self._facts)

    def record(self, fact: Fact) -> Fact:
        """Stamp a fact with its sequence number and hash, then append it."""
        stamped = fact.model_copy(update={
            "sequence": len(self._facts),
            "fact_hash": to_hex(hash_canonical(fact.committed_fields())),
        })
        self._facts.append(stamped)
        return stamped

    def get_facts(self, kind: Optional[FactKind] = None) -> list[Fact]:
        """Get recorded facts, optionally filtered by kind."""
        if kind is None:
            return list(self._facts)
        return [f for f in self._facts if f.kind == kind]

    def truncate(self, length: int) -> None:
        """Drop facts recorded after `length`; used when an operation is reverted."""
        del self._facts[length:]

    def clear(self) -> None:
        self._facts.clear()

    def to_dict_list(self) -> list[dict[str, Any]]:
        """Convert all facts to JSON-serializable dicts."""
        return [f.model_dump(mode="json", exclude_none=True) for f in self._facts]


__all__ = ["FactLog"]
