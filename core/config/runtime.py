"""
Runtime Configuration

Central configuration for the pool: owner, fees, relayers, verifying keys,
tree settings and the HTTP service.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "SHIELDED_"

MAX_PROTOCOL_FEE_BPS = 500


@dataclass
class VerifierConfig:
    """Paths of snarkjs verification_key.json files, one per proof role."""
    withdraw_vk: Optional[str] = None
    transfer_vk: Optional[str] = None
    range_vk: Optional[str] = None


@dataclass
class FeeConfig:
    """Protocol fee and relayer allow-list."""
    protocol_fee_bps: int = 0
    fee_recipient: Optional[str] = None  # 0x-prefixed 20-byte address
    relayers: list[str] = field(default_factory=list)

    def __post_init__(self):
        if self.protocol_fee_bps < 0 or self.protocol_fee_bps > MAX_PROTOCOL_FEE_BPS:
            raise ValueError(
                f"protocol_fee_bps must be in [0, {MAX_PROTOCOL_FEE_BPS}], got {self.protocol_fee_bps}"
            )


@dataclass
class PoolSettings:
    """Pool ownership and tree settings."""
    owner: Optional[str] = None  # 0x-prefixed 20-byte address
    root_history_size: int = 30
    tree_depth: int = 20

    def __post_init__(self):
        if self.tree_depth < 1 or self.tree_depth > 20:
            raise ValueError(f"tree_depth must be in [1, 20], got {self.tree_depth}")
        if self.root_history_size < 1:
            raise ValueError("root_history_size must be at least 1")


@dataclass
class ApiConfig:
    """HTTP service settings."""
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the shielded pool.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML or JSON file
    - Programmatic construction
    """
    pool: PoolSettings = field(default_factory=PoolSettings)
    fees: FeeConfig = field(default_factory=FeeConfig)
    verifiers: VerifierConfig = field(default_factory=VerifierConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - SHIELDED_OWNER: owner address
        - SHIELDED_PROTOCOL_FEE_BPS: protocol fee in basis points (<= 500)
        - SHIELDED_FEE_RECIPIENT: protocol fee recipient address
        - SHIELDED_RELAYERS: comma-separated relayer addresses
        - SHIELDED_WITHDRAW_VK / SHIELDED_TRANSFER_VK / SHIELDED_RANGE_VK: key paths
        - SHIELDED_ROOT_HISTORY_SIZE: number of recent roots kept
        - SHIELDED_LOG_LEVEL: logging level
        - SHIELDED_API_HOST / SHIELDED_API_PORT: HTTP bind address
        """
        overrides: dict[str, Any] = {}

        # Pool settings
        if os.getenv(f"{ENV_PREFIX}OWNER"):
            overrides.setdefault("pool", {})["owner"] = os.getenv(f"{ENV_PREFIX}OWNER")
        if os.getenv(f"{ENV_PREFIX}ROOT_HISTORY_SIZE"):
            overrides.setdefault("pool", {})["root_history_size"] = int(
                os.getenv(f"{ENV_PREFIX}ROOT_HISTORY_SIZE", "30")
            )

        # Fees
        if os.getenv(f"{ENV_PREFIX}PROTOCOL_FEE_BPS"):
            overrides.setdefault("fees", {})["protocol_fee_bps"] = int(
                os.getenv(f"{ENV_PREFIX}PROTOCOL_FEE_BPS", "0")
            )
        if os.getenv(f"{ENV_PREFIX}FEE_RECIPIENT"):
            overrides.setdefault("fees", {})["fee_recipient"] = os.getenv(f"{ENV_PREFIX}FEE_RECIPIENT")
        if os.getenv(f"{ENV_PREFIX}RELAYERS"):
            overrides.setdefault("fees", {})["relayers"] = [
                r.strip() for r in os.getenv(f"{ENV_PREFIX}RELAYERS", "").split(",") if r.strip()
            ]

        # Verifying keys
        for role in ("withdraw", "transfer", "range"):
            value = os.getenv(f"{ENV_PREFIX}{role.upper()}_VK")
            if value:
                overrides.setdefault("verifiers", {})[f"{role}_vk"] = value

        # API
        if os.getenv(f"{ENV_PREFIX}API_HOST"):
            overrides.setdefault("api", {})["host"] = os.getenv(f"{ENV_PREFIX}API_HOST")
        if os.getenv(f"{ENV_PREFIX}API_PORT"):
            overrides.setdefault("api", {})["port"] = int(os.getenv(f"{ENV_PREFIX}API_PORT", "8000"))

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        pool_data = data.get("pool", {})
        fees_data = data.get("fees", {})
        verifiers_data = data.get("verifiers", {})
        api_data = data.get("api", {})

        return cls(
            pool=PoolSettings(**pool_data) if pool_data else PoolSettings(),
            fees=FeeConfig(**fees_data) if fees_data else FeeConfig(),
            verifiers=VerifierConfig(**verifiers_data) if verifiers_data else VerifierConfig(),
            api=ApiConfig(**api_data) if api_data else ApiConfig(),
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for section in ("pool", "fees", "verifiers", "api"):
            if section in overrides:
                target = getattr(new_config, section)
                for key, value in overrides[section].items():
                    setattr(target, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        # Re-run section validation on the overlaid values
        new_config.pool.__post_init__()
        new_config.fees.__post_init__()

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "pool": {
                "owner": self.pool.owner,
                "root_history_size": self.pool.root_history_size,
                "tree_depth": self.pool.tree_depth,
            },
            "fees": {
                "protocol_fee_bps": self.fees.protocol_fee_bps,
                "fee_recipient": self.fees.fee_recipient,
                "relayers": list(self.fees.relayers),
            },
            "verifiers": {
                "withdraw_vk": self.verifiers.withdraw_vk,
                "transfer_vk": self.verifiers.transfer_vk,
                "range_vk": self.verifiers.range_vk,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit path
    the first existing default location is used.
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = _load_file(Path(config_path))
    else:
        default_paths = [
            Path.cwd() / "shielded.json",
            Path.cwd() / "shielded.yaml",
            Path.home() / ".config" / "shielded" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = _load_file(default_path)
                break

    return config.with_env_overrides()


def _load_file(path: Path) -> RuntimeConfig:
    if path.suffix in (".yaml", ".yml"):
        return RuntimeConfig.from_yaml(path)
    return RuntimeConfig.from_json(path)


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
