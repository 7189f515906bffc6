"""
API Request Models

Pydantic models for API request validation. Byte values travel as
0x-prefixed hex strings; the pool validates widths and semantics.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DepositRequest(BaseModel):
    """Request body for POST /pool/deposit."""

    commitment: str = Field(..., description="32-byte commitment digest (0x-hex)")
    value: int = Field(..., description="Value attached to the deposit")


class WithdrawRequest(BaseModel):
    """Request body for POST /pool/withdraw."""

    proof: str = Field(..., description="Serialized proof (0x-hex)")
    nullifier: str = Field(..., description="32-byte nullifier (0x-hex)")
    recipient: str = Field(..., description="20-byte recipient address (0x-hex)")
    amount: int = Field(..., description="Gross amount released, fees included")
    relayer: Optional[str] = Field(default=None, description="Allow-listed relayer address")
    fee: int = Field(default=0, ge=0, description="Relayer fee taken out of amount")


class TransferRequest(BaseModel):
    """Request body for POST /pool/transfer."""

    proof: str = Field(..., description="Serialized proof (0x-hex)")
    nullifier: str = Field(..., description="32-byte nullifier (0x-hex)")
    new_commitment_a: str = Field(..., description="First output commitment (0x-hex)")
    new_commitment_b: str = Field(..., description="Second output commitment (0x-hex)")


class CommitmentRequest(BaseModel):
    """Request body for POST /commitments."""

    value: int = Field(..., ge=0, description="Committed value")
    blinding: Optional[int] = Field(
        default=None,
        ge=0,
        description="Blinding factor; a random one is drawn when omitted",
    )
