"""API route handlers."""

from api.routes import health, pool, commitments

__all__ = ["health", "pool", "commitments"]
