"""
Schemas & Canonicalization

Purpose: Export the public API for the schemas module: the error taxonomy,
emitted fact models and canonical JSON serialization.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    ErrorCodes,
    PoolError,
    PoolException,
    ValidationException,
    StateConsistencyException,
    CryptographicException,
    PayoutException,
    CanonicalizationException,
    InvalidProofLengthException,
    InvalidPublicInputException,
    InvalidAmountException,
    InvalidDepositAmountException,
    InvalidRecipientException,
    InvalidCommitmentException,
    InvalidFeeException,
    InvalidTimelockException,
    NullifierAlreadySpentException,
    TreeFullException,
    PoolPausedException,
    NotOwnerException,
    RelayerNotAuthorizedException,
    InsufficientPoolBalanceException,
    SwapNotFoundException,
    SwapNotActiveException,
    TimelockExpiredException,
    TimelockNotExpiredException,
    RangeVerifierNotConfiguredException,
    CurveOperationFailedException,
    InvalidProofException,
    InvalidPreimageException,
    PayoutFailedException,
)

# Emitted facts
from .facts import (
    FactKind,
    Fact,
    DepositFact,
    WithdrawalFact,
    TransferFact,
    FeeFact,
    SwapInitiatedFact,
    SwapRedeemedFact,
    SwapRefundedFact,
    AnyFact,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "ErrorCodes",
    "PoolError",
    "PoolException",
    "ValidationException",
    "StateConsistencyException",
    "CryptographicException",
    "PayoutException",
    "CanonicalizationException",
    "InvalidProofLengthException",
    "InvalidPublicInputException",
    "InvalidAmountException",
    "InvalidDepositAmountException",
    "InvalidRecipientException",
    "InvalidCommitmentException",
    "InvalidFeeException",
    "InvalidTimelockException",
    "NullifierAlreadySpentException",
    "TreeFullException",
    "PoolPausedException",
    "NotOwnerException",
    "RelayerNotAuthorizedException",
    "InsufficientPoolBalanceException",
    "SwapNotFoundException",
    "SwapNotActiveException",
    "TimelockExpiredException",
    "TimelockNotExpiredException",
    "RangeVerifierNotConfiguredException",
    "CurveOperationFailedException",
    "InvalidProofException",
    "InvalidPreimageException",
    "PayoutFailedException",
    # Facts
    "FactKind",
    "Fact",
    "DepositFact",
    "WithdrawalFact",
    "TransferFact",
    "FeeFact",
    "SwapInitiatedFact",
    "SwapRedeemedFact",
    "SwapRefundedFact",
    "AnyFact",
]
