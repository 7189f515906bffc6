"""
Proof verification capability.

Interchangeable verifier backends behind one `verify(proof, inputs)` call:
- Groth16Verifier: BN254 pairing check against an immutable VerifyingKey
- Bytes32InputAdapter: re-encodes inputs for a bytes32-word backend
- StaticVerifier: fixed outcome (test double, fail-closed default)
"""
from .base import (
    ProofRole,
    ROLE_ARITY,
    ProofVerifier,
    check_public_inputs,
    digest_to_field,
    address_to_field,
    withdrawal_inputs,
    transfer_inputs,
    range_inputs,
)
from .keys import (
    VerifyingKey,
    verifying_key_from_snarkjs,
    load_verifying_key,
)
from .groth16 import (
    PROOF_SIZE,
    Groth16Verifier,
    encode_proof,
    decode_proof,
)
from .adapter import (
    Bytes32Backend,
    Bytes32InputAdapter,
)
from .static import StaticVerifier

__all__ = [
    "ProofRole",
    "ROLE_ARITY",
    "ProofVerifier",
    "check_public_inputs",
    "digest_to_field",
    "address_to_field",
    "withdrawal_inputs",
    "transfer_inputs",
    "range_inputs",
    "VerifyingKey",
    "verifying_key_from_snarkjs",
    "load_verifying_key",
    "PROOF_SIZE",
    "Groth16Verifier",
    "encode_proof",
    "decode_proof",
    "Bytes32Backend",
    "Bytes32InputAdapter",
    "StaticVerifier",
]
