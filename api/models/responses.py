"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "shielded-pool-api"
    version: str = "v1"


class ReadyResponse(BaseModel):
    """Response for GET /health/ready."""

    ok: bool = True
    root: str
    next_leaf_index: int
    paused: bool


class PoolStatusResponse(BaseModel):
    """Response for GET /pool/status."""

    ok: bool = True
    root: str = Field(..., description="Current tree root")
    next_leaf_index: int
    capacity: int
    depth: int
    paused: bool
    balance: int
    spent_nullifiers: int
    owner: Optional[str] = None
    protocol_fee_bps: int
    fee_recipient: Optional[str] = None
    fee_nonce: int
    total_fees_collected: int
    total_relayer_fees: int


class NullifierResponse(BaseModel):
    """Response for GET /pool/nullifiers/{nullifier}."""

    ok: bool = True
    nullifier: str
    spent: bool


class RootResponse(BaseModel):
    """Response for GET /pool/roots/{root}."""

    ok: bool = True
    root: str
    known: bool
    current: bool


class FactResponse(BaseModel):
    """Response for accepted pool operations."""

    ok: bool = True
    fact: dict[str, Any] = Field(..., description="The recorded fact")
    root: str = Field(..., description="Tree root after the operation")


class CommitmentResponse(BaseModel):
    """Response for POST /commitments."""

    ok: bool = True
    commitment: str = Field(..., description="32-byte digest of the commitment point")
    point: list[str] = Field(..., description="Affine (x, y) as decimal strings")
    value: int
    blinding: str = Field(..., description="Blinding factor as a decimal string")


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
