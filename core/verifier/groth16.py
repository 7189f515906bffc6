"""
Groth16 Verifier

Pairing-check engine for BN254 Groth16 proofs.

Proof encoding (256 bytes, EVM layout):
    A (G1, 64 bytes) || B (G2, 128 bytes, imaginary first) || C (G1, 64 bytes)

Verification:
1. len(proof) != 256                    -> InvalidProofLengthException
2. wrong arity or input >= r            -> InvalidPublicInputException
3. vk_x = IC[0] + sum(input[i] * IC[i+1])
4. accept iff e(-A, B) * e(alpha, beta) * e(vk_x, gamma) * e(C, delta) == 1

A curve failure while decoding points or pairing is a rejection: verify
returns False and logs a warning. It never returns True on an error.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from core.crypto.curve import (
    DEFAULT_PROVIDER,
    G1_ENCODED_SIZE,
    G2_ENCODED_SIZE,
    CurveProvider,
    G1Point,
    G2Point,
    decode_g1,
    decode_g2,
    encode_g1,
    encode_g2,
)
from core.schemas.errors import CurveOperationFailedException, InvalidProofLengthException
from core.verifier.base import check_public_inputs
from core.verifier.keys import VerifyingKey


logger = logging.getLogger(__name__)


PROOF_SIZE = 2 * G1_ENCODED_SIZE + G2_ENCODED_SIZE


def encode_proof(a: G1Point, b: G2Point, c: G1Point) -> bytes:
    """Serialize proof points into the 256-byte wire format."""
    return encode_g1(a) + encode_g2(b) + encode_g1(c)


def decode_proof(proof: bytes) -> tuple[G1Point, G2Point, G1Point]:
    """
    Split a 256-byte proof into (A, B, C).

    Raises:
        InvalidProofLengthException: If the proof is not 256 bytes
        CurveOperationFailedException: If a coordinate is out of range
    """
    if len(proof) != PROOF_SIZE:
        raise InvalidProofLengthException(expected=PROOF_SIZE, actual=len(proof))
    a = decode_g1(proof[:G1_ENCODED_SIZE])
    b = decode_g2(proof[G1_ENCODED_SIZE:G1_ENCODED_SIZE + G2_ENCODED_SIZE])
    c = decode_g1(proof[G1_ENCODED_SIZE + G2_ENCODED_SIZE:])
    return a, b, c


class Groth16Verifier:
    """
    Groth16 verifier bound to one immutable verifying key.

    Args:
        vk: The verifying key
        provider: Curve arithmetic provider (py_ecc by default)
        check_key: Validate every key point on construction
    """

    def __init__(
        self,
        vk: VerifyingKey,
        provider: Optional[CurveProvider] = None,
        check_key: bool = True,
    ) -> None:
        self.vk = vk
        self.provider = provider or DEFAULT_PROVIDER
        if check_key:
            vk.check_points(self.provider)

    @property
    def arity(self) -> int:
        return self.vk.n_public

    def compute_vk_x(self, public_inputs: Sequence[int]) -> G1Point:
        """IC[0] + sum(input[i] * IC[i+1])."""
        vk_x = self.vk.ic[0]
        for value, point in zip(public_inputs, self.vk.ic[1:]):
            if value == 0:
                continue
            vk_x = self.provider.g1_add(vk_x, self.provider.g1_mul(point, value))
        return vk_x

    def verify(self, proof: bytes, public_inputs: Sequence[int]) -> bool:
        """
        Check a proof against the public inputs.

        Raises:
            InvalidProofLengthException: If the proof is not 256 bytes
            InvalidPublicInputException: On wrong arity or out-of-field input
        """
        if len(proof) != PROOF_SIZE:
            raise InvalidProofLengthException(expected=PROOF_SIZE, actual=len(proof))
        inputs = check_public_inputs(public_inputs, self.arity)

        try:
            a, b, c = decode_proof(proof)
            vk_x = self.compute_vk_x(inputs)
            ok = self.provider.pairing_check([
                (self.provider.g1_neg(a), b),
                (self.vk.alpha_g1, self.vk.beta_g2),
                (vk_x, self.vk.gamma_g2),
                (c, self.vk.delta_g2),
            ])
        except CurveOperationFailedException as e:
            logger.warning(f"Groth16 verification rejected on curve failure: {e.message}")
            return False

        if not ok:
            logger.debug(f"Groth16 pairing check failed for key {self.vk.label or 'unnamed'}")
        return ok


__all__ = [
    "PROOF_SIZE",
    "encode_proof",
    "decode_proof",
    "Groth16Verifier",
]
