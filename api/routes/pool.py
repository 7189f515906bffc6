"""
Pool Routes

HTTP surface over the process-wide ShieldedPool:
- GET  /pool/status
- GET  /pool/nullifiers/{nullifier}
- GET  /pool/roots/{root}
- POST /pool/deposit
- POST /pool/withdraw
- POST /pool/transfer

Handlers are plain `def` so proof verification runs in the worker
threadpool; the pool's own lock serializes state changes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_pool
from api.errors import InvalidRequestError
from api.models.requests import DepositRequest, TransferRequest, WithdrawRequest
from api.models.responses import FactResponse, NullifierResponse, PoolStatusResponse, RootResponse
from core.crypto.hashing import from_hex, to_hex
from orchestrator.pool import ShieldedPool


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pool", tags=["pool"])


def _proof_bytes(proof_hex: str) -> bytes:
    try:
        return from_hex(proof_hex)
    except ValueError as e:
        raise InvalidRequestError(f"proof: {e}") from e


@router.get("/status", response_model=PoolStatusResponse)
def pool_status(pool: ShieldedPool = Depends(get_pool)) -> PoolStatusResponse:
    """Current root, leaf count, balance and fee state."""
    return PoolStatusResponse(ok=True, **pool.status())


@router.get("/nullifiers/{nullifier}", response_model=NullifierResponse)
def nullifier_status(nullifier: str, pool: ShieldedPool = Depends(get_pool)) -> NullifierResponse:
    return NullifierResponse(ok=True, nullifier=nullifier, spent=pool.is_spent(nullifier))


@router.get("/roots/{root}", response_model=RootResponse)
def root_status(root: str, pool: ShieldedPool = Depends(get_pool)) -> RootResponse:
    current = to_hex(pool.current_root())
    return RootResponse(
        ok=True,
        root=root,
        known=pool.is_known_root(root),
        current=root.lower() == current,
    )


@router.post("/deposit", response_model=FactResponse)
def deposit(request: DepositRequest, pool: ShieldedPool = Depends(get_pool)) -> FactResponse:
    fact = pool.deposit(request.commitment, request.value)
    return FactResponse(ok=True, fact=fact.model_dump(mode="json"), root=fact.root)


@router.post("/withdraw", response_model=FactResponse)
def withdraw(request: WithdrawRequest, pool: ShieldedPool = Depends(get_pool)) -> FactResponse:
    fact = pool.withdraw(
        _proof_bytes(request.proof),
        request.nullifier,
        request.recipient,
        request.amount,
        relayer=request.relayer,
        fee=request.fee,
    )
    return FactResponse(ok=True, fact=fact.model_dump(mode="json"), root=to_hex(pool.current_root()))


@router.post("/transfer", response_model=FactResponse)
def transfer(request: TransferRequest, pool: ShieldedPool = Depends(get_pool)) -> FactResponse:
    fact = pool.transfer(
        _proof_bytes(request.proof),
        request.nullifier,
        request.new_commitment_a,
        request.new_commitment_b,
    )
    return FactResponse(ok=True, fact=fact.model_dump(mode="json"), root=fact.root)
