"""
Shielded Pool HTTP API (FastAPI)

- GET  /health, /health/ready - Liveness and readiness
- GET  /pool/status - Root, leaf count, balance and fees
- POST /pool/deposit, /pool/withdraw, /pool/transfer - Pool operations
- POST /commitments - Build a Pedersen commitment

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
