"""Fixed-outcome verifier."""
from __future__ import annotations

from typing import Optional, Sequence

from core.verifier.base import check_public_inputs


class StaticVerifier:
    """
    ProofVerifier that returns a fixed result without looking at the proof.

    Used as the test double, and as the fail-closed default
    (StaticVerifier(False)) when no verifying key is configured for a role.
    When `arity` is given the public inputs are still validated.
    """

    def __init__(self, result: bool, arity: Optional[int] = None) -> None:
        self.result = result
        self.arity = arity
        self.calls: list[tuple[bytes, list[int]]] = []

    def verify(self, proof: bytes, public_inputs: Sequence[int]) -> bool:
        inputs = list(public_inputs)
        if self.arity is not None:
            inputs = check_public_inputs(inputs, self.arity)
        self.calls.append((bytes(proof), inputs))
        return self.result

    def __repr__(self) -> str:
        return f"StaticVerifier({self.result})"


__all__ = ["StaticVerifier"]
