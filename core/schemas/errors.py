"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy across the shielded pool.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Categories:
- Validation errors: malformed input, rejected before any state mutation
- State-consistency errors: permanent for the entity involved
- Cryptographic errors: curve/pairing failures, rejected proofs
- Payout errors: the whole operation is rolled back
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pool."""

    # Validation Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_PROOF_LENGTH = "INVALID_PROOF_LENGTH"
    INVALID_PUBLIC_INPUT = "INVALID_PUBLIC_INPUT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_DEPOSIT_AMOUNT = "INVALID_DEPOSIT_AMOUNT"
    INVALID_RECIPIENT = "INVALID_RECIPIENT"
    INVALID_COMMITMENT = "INVALID_COMMITMENT"
    INVALID_FEE = "INVALID_FEE"
    INVALID_TIMELOCK = "INVALID_TIMELOCK"

    # State-Consistency Errors
    NULLIFIER_ALREADY_SPENT = "NULLIFIER_ALREADY_SPENT"
    TREE_FULL = "TREE_FULL"
    POOL_PAUSED = "POOL_PAUSED"
    NOT_OWNER = "NOT_OWNER"
    RELAYER_NOT_AUTHORIZED = "RELAYER_NOT_AUTHORIZED"
    INSUFFICIENT_POOL_BALANCE = "INSUFFICIENT_POOL_BALANCE"
    SWAP_NOT_FOUND = "SWAP_NOT_FOUND"
    SWAP_NOT_ACTIVE = "SWAP_NOT_ACTIVE"
    TIMELOCK_EXPIRED = "TIMELOCK_EXPIRED"
    TIMELOCK_NOT_EXPIRED = "TIMELOCK_NOT_EXPIRED"
    RANGE_VERIFIER_NOT_CONFIGURED = "RANGE_VERIFIER_NOT_CONFIGURED"

    # Cryptographic Errors
    CURVE_OPERATION_FAILED = "CURVE_OPERATION_FAILED"
    INVALID_PROOF = "INVALID_PROOF"
    INVALID_PREIMAGE = "INVALID_PREIMAGE"

    # Payout Errors
    PAYOUT_FAILED = "PAYOUT_FAILED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class PoolError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the HTTP layer to serialize a raised PoolException.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NULLIFIER_ALREADY_SPENT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the same call could succeed if retried",
    )

    def to_exception(self) -> "PoolException":
        """Convert this error model to a raised exception."""
        return PoolException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PoolException(Exception):
    """
    Base exception for all shielded pool errors.

    Carries structured error information and can be converted
    to a PoolError model. The core never retries, so retryable
    is False for every error it raises.
    """

    category = "pool"

    def __init__(
        self,
        message: str,
        code: str = "POOL_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> PoolError:
        """Convert this exception to a PoolError model."""
        return PoolError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationException(PoolException):
    """Malformed input; raised before any state is touched."""

    category = "validation"


class StateConsistencyException(PoolException):
    """The entity is in a state that permanently rejects this call."""

    category = "state"


class CryptographicException(PoolException):
    """A curve, pairing or proof check rejected the call."""

    category = "cryptographic"


class PayoutException(PoolException):
    """Funds could not be delivered; the operation was reverted."""

    category = "payout"


def _with(details: dict[str, Any] | None, **extra: Any) -> dict[str, Any]:
    merged = dict(details or {})
    for key, value in extra.items():
        if value is not None:
            merged[key] = value
    return merged


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

class CanonicalizationException(ValidationException):
    """Raised when an object cannot be canonically serialized for hashing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class InvalidProofLengthException(ValidationException):
    """Proof byte length does not match the verifier's fixed encoding."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            message=f"Proof must be {expected} bytes, got {actual}",
            code=ErrorCodes.INVALID_PROOF_LENGTH,
            details={"expected": expected, "actual": actual},
        )


class InvalidPublicInputException(ValidationException):
    """A public input is out of the scalar field or the arity is wrong."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PUBLIC_INPUT,
            details=_with(details, index=index),
        )


class InvalidAmountException(ValidationException):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.INVALID_AMOUNT, details=details)


class InvalidDepositAmountException(ValidationException):
    def __init__(self, value: int) -> None:
        super().__init__(
            message="Deposit must attach a positive value",
            code=ErrorCodes.INVALID_DEPOSIT_AMOUNT,
            details={"value": value},
        )


class InvalidRecipientException(ValidationException):
    def __init__(self, message: str = "Recipient must be a non-zero 20-byte address") -> None:
        super().__init__(message=message, code=ErrorCodes.INVALID_RECIPIENT)


class InvalidCommitmentException(ValidationException):
    def __init__(self, message: str = "Commitment must be a non-zero 32-byte digest") -> None:
        super().__init__(message=message, code=ErrorCodes.INVALID_COMMITMENT)


class InvalidFeeException(ValidationException):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.INVALID_FEE, details=details)


class InvalidTimelockException(ValidationException):
    def __init__(self, timelock: int, earliest: int, latest: int) -> None:
        super().__init__(
            message=f"Timelock {timelock} outside allowed window [{earliest}, {latest}]",
            code=ErrorCodes.INVALID_TIMELOCK,
            details={"timelock": timelock, "earliest": earliest, "latest": latest},
        )


# -----------------------------------------------------------------------------
# State consistency
# -----------------------------------------------------------------------------

class NullifierAlreadySpentException(StateConsistencyException):
    def __init__(self, nullifier_hex: str) -> None:
        super().__init__(
            message="Nullifier has already been spent",
            code=ErrorCodes.NULLIFIER_ALREADY_SPENT,
            details={"nullifier": nullifier_hex},
        )


class TreeFullException(StateConsistencyException):
    def __init__(self, capacity: int, requested: int = 1) -> None:
        super().__init__(
            message=f"Merkle tree is full (capacity {capacity})",
            code=ErrorCodes.TREE_FULL,
            details={"capacity": capacity, "requested": requested},
        )


class PoolPausedException(StateConsistencyException):
    def __init__(self) -> None:
        super().__init__(message="Pool is paused", code=ErrorCodes.POOL_PAUSED)


class NotOwnerException(StateConsistencyException):
    def __init__(self, caller_hex: str) -> None:
        super().__init__(
            message="Caller is not the pool owner",
            code=ErrorCodes.NOT_OWNER,
            details={"caller": caller_hex},
        )


class RelayerNotAuthorizedException(StateConsistencyException):
    def __init__(self, relayer_hex: str | None) -> None:
        super().__init__(
            message="Relayer is not on the allow-list",
            code=ErrorCodes.RELAYER_NOT_AUTHORIZED,
            details=_with(None, relayer=relayer_hex),
        )


class InsufficientPoolBalanceException(StateConsistencyException):
    def __init__(self, balance: int, requested: int) -> None:
        super().__init__(
            message="Pool balance does not cover the withdrawal",
            code=ErrorCodes.INSUFFICIENT_POOL_BALANCE,
            details={"balance": balance, "requested": requested},
        )


class SwapNotFoundException(StateConsistencyException):
    def __init__(self, swap_id_hex: str) -> None:
        super().__init__(
            message="Swap not found",
            code=ErrorCodes.SWAP_NOT_FOUND,
            details={"swap_id": swap_id_hex},
        )


class SwapNotActiveException(StateConsistencyException):
    def __init__(self, swap_id_hex: str, status: str) -> None:
        super().__init__(
            message=f"Swap is {status}, not active",
            code=ErrorCodes.SWAP_NOT_ACTIVE,
            details={"swap_id": swap_id_hex, "status": status},
        )


class TimelockExpiredException(StateConsistencyException):
    def __init__(self, swap_id_hex: str, timelock: int) -> None:
        super().__init__(
            message="Swap timelock has expired",
            code=ErrorCodes.TIMELOCK_EXPIRED,
            details={"swap_id": swap_id_hex, "timelock": timelock},
        )


class TimelockNotExpiredException(StateConsistencyException):
    def __init__(self, swap_id_hex: str, timelock: int) -> None:
        super().__init__(
            message="Swap timelock has not expired yet",
            code=ErrorCodes.TIMELOCK_NOT_EXPIRED,
            details={"swap_id": swap_id_hex, "timelock": timelock},
        )


class RangeVerifierNotConfiguredException(StateConsistencyException):
    def __init__(self) -> None:
        super().__init__(
            message="No range verifier configured for this pool",
            code=ErrorCodes.RANGE_VERIFIER_NOT_CONFIGURED,
        )


# -----------------------------------------------------------------------------
# Cryptographic
# -----------------------------------------------------------------------------

class CurveOperationFailedException(CryptographicException):
    """The curve arithmetic provider reported an error."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(
            message=f"{operation} failed: {message}",
            code=ErrorCodes.CURVE_OPERATION_FAILED,
            details={"operation": operation},
        )


class InvalidProofException(CryptographicException):
    def __init__(self, role: str) -> None:
        super().__init__(
            message=f"{role} proof rejected by verifier",
            code=ErrorCodes.INVALID_PROOF,
            details={"role": role},
        )


class InvalidPreimageException(CryptographicException):
    def __init__(self, swap_id_hex: str) -> None:
        super().__init__(
            message="Preimage does not match hashlock",
            code=ErrorCodes.INVALID_PREIMAGE,
            details={"swap_id": swap_id_hex},
        )


# -----------------------------------------------------------------------------
# Payout
# -----------------------------------------------------------------------------

class PayoutFailedException(PayoutException):
    def __init__(self, recipient_hex: str, amount: int, reason: str = "recipient rejected funds") -> None:
        super().__init__(
            message=f"Payout of {amount} failed: {reason}",
            code=ErrorCodes.PAYOUT_FAILED,
            details={"recipient": recipient_hex, "amount": amount},
        )
