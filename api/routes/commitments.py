"""
Commitment Route

POST /commitments builds a Pedersen commitment for a (value, blinding)
pair. A convenience for wallets and tests; the pool itself never sees
the opening.
"""

from __future__ import annotations

import secrets

from fastapi import APIRouter, Depends

from api.deps import get_commitments
from api.models.requests import CommitmentRequest
from api.models.responses import CommitmentResponse
from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import to_hex
from core.crypto.pedersen import PedersenCommitments, point_digest


router = APIRouter(tags=["commitments"])


@router.post("/commitments", response_model=CommitmentResponse)
def create_commitment(
    request: CommitmentRequest,
    engine: PedersenCommitments = Depends(get_commitments),
) -> CommitmentResponse:
    blinding = request.blinding if request.blinding is not None else secrets.randbelow(CURVE_ORDER)
    point = engine.commit_point(request.value, blinding)
    return CommitmentResponse(
        ok=True,
        commitment=to_hex(point_digest(point)),
        point=[str(point[0]), str(point[1])],
        value=request.value,
        blinding=str(blinding),
    )
