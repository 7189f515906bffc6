"""
API Error Handling

Standardized error handling for the API. Pool exceptions map to HTTP
status by category:

- validation     -> 400
- state          -> 409
- cryptographic  -> 422
- payout         -> 502
"""

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import PoolException


CATEGORY_STATUS = {
    "validation": 400,
    "state": 409,
    "cryptographic": 422,
    "payout": 502,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def pool_error_handler(request: Request, exc: PoolException) -> JSONResponse:
    """Handle PoolException by category."""
    model = exc.to_error_model()
    return JSONResponse(
        status_code=CATEGORY_STATUS.get(exc.category, 400),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(code=model.code, message=model.message, details=model.details),
        ).model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the standard error shape."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INVALID_REQUEST",
                message="Request body failed validation",
                details={"errors": [str(e.get("msg")) for e in exc.errors()]},
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
