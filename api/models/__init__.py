"""API request and response models."""

from api.models.requests import (
    CommitmentRequest,
    DepositRequest,
    TransferRequest,
    WithdrawRequest,
)
from api.models.responses import (
    CommitmentResponse,
    ErrorDetail,
    ErrorResponse,
    FactResponse,
    HealthResponse,
    NullifierResponse,
    PoolStatusResponse,
    ReadyResponse,
    RootResponse,
)

__all__ = [
    "CommitmentRequest",
    "DepositRequest",
    "TransferRequest",
    "WithdrawRequest",
    "CommitmentResponse",
    "ErrorDetail",
    "ErrorResponse",
    "FactResponse",
    "HealthResponse",
    "NullifierResponse",
    "PoolStatusResponse",
    "ReadyResponse",
    "RootResponse",
]
