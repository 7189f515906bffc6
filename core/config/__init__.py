"""
Runtime Configuration Module

Provides configuration loading and management for the shielded pool.
"""

from .runtime import (
    MAX_PROTOCOL_FEE_BPS,
    ApiConfig,
    FeeConfig,
    PoolSettings,
    RuntimeConfig,
    VerifierConfig,
    get_default_config,
    load_config,
    set_default_config,
)

__all__ = [
    "MAX_PROTOCOL_FEE_BPS",
    "ApiConfig",
    "FeeConfig",
    "PoolSettings",
    "RuntimeConfig",
    "VerifierConfig",
    "get_default_config",
    "load_config",
    "set_default_config",
]
