"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, pool, commitments
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    pool_error_handler,
    request_validation_handler,
)
from core.schemas.errors import PoolException


# Configure logging; respects SHIELDED_LOG_LEVEL
logging.basicConfig(
    level=getattr(logging, os.getenv("SHIELDED_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Shielded Pool API",
        description="""
HTTP API for the shielded-value pool.

## Endpoints

- **GET /pool/status** - Current root, next leaf index, balance, fee state
- **GET /pool/nullifiers/{nullifier}** - Whether a nullifier is spent
- **GET /pool/roots/{root}** - Whether a root is in the recent history
- **POST /pool/deposit** - Insert a commitment
- **POST /pool/withdraw** - Spend a note and release value
- **POST /pool/transfer** - Spend a note into two new commitments
- **POST /commitments** - Build a Pedersen commitment
- **GET /health**, **GET /health/ready** - Liveness and readiness

All digests, addresses and proofs are 0x-prefixed hex.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(PoolException, pool_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(pool.router)
    app.include_router(commitments.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
