"""
Health Routes

- GET /health, GET /: liveness, no pool access
- GET /health/ready: readiness, builds the pool on first call and reads
  its root
"""

from fastapi import APIRouter, Depends

from api.deps import get_pool
from api.models.responses import HealthResponse, ReadyResponse
from core.crypto.hashing import to_hex
from orchestrator.pool import ShieldedPool


router = APIRouter(tags=["health"])


def _alive() -> HealthResponse:
    return HealthResponse(ok=True)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check."""
    return _alive()


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    return _alive()


@router.get("/health/ready", response_model=ReadyResponse)
def readiness(pool: ShieldedPool = Depends(get_pool)) -> ReadyResponse:
    """Readiness check: the pool is configured and its state is readable."""
    return ReadyResponse(
        ok=True,
        root=to_hex(pool.current_root()),
        next_leaf_index=pool.next_leaf_index(),
        paused=pool.is_paused(),
    )
