"""
API Dependencies

Dependency injection for the API. One process-wide pool is built lazily
from runtime configuration; tests install their own with set_pool().
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from core.config.runtime import RuntimeConfig, load_config
from core.crypto.pedersen import PedersenCommitments
from orchestrator.pool import ShieldedPool

logger = logging.getLogger(__name__)


_pool: Optional[ShieldedPool] = None
_pool_lock = threading.Lock()
_commitments = PedersenCommitments()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./shielded.json
      2. ./shielded.yaml
      3. ~/.config/shielded/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    return load_config()


def get_pool() -> ShieldedPool:
    """Return the process-wide pool, building it on first use."""
    global _pool
    with _pool_lock:
        if _pool is None:
            config = _load_runtime_config()
            _pool = ShieldedPool.from_config(config)
            logger.info(f"Pool initialised at depth {_pool.tree.depth}")
        return _pool


def set_pool(pool: Optional[ShieldedPool]) -> None:
    """Install (or clear, with None) the process-wide pool."""
    global _pool
    with _pool_lock:
        _pool = pool


def get_commitments() -> PedersenCommitments:
    return _commitments
