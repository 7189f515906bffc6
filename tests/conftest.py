"""
Pytest configuration and shared fixtures for shielded pool tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_groth16 = importlib.import_module("fixtures.groth16_fixtures")

# Extract factory functions
make_pool = _common.make_pool
make_funded_pool = _common.make_funded_pool
make_commitment = _common.make_commitment
make_nullifier = _common.make_nullifier
FakeClock = _common.FakeClock

make_toy_key = _groth16.make_toy_key
make_toy_proof = _groth16.make_toy_proof


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def clock():
    """Provide a hand-driven clock."""
    return FakeClock()


@pytest.fixture
def pool(clock):
    """Provide an empty pool whose verifiers accept every proof."""
    return make_pool(clock=clock)


@pytest.fixture
def funded_pool():
    """Provide a pool holding one deposit of 1000."""
    return make_funded_pool(value=1_000)


@pytest.fixture(scope="session")
def toy_key():
    """Provide a 4-input toy verifying key and its trapdoor (built once)."""
    return make_toy_key(n_public=4)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_pool_error():
    """Helper to assert a PoolException with a given code is raised."""
    def _assert(excinfo, code: str):
        assert excinfo.value.code == code, f"Expected {code}, got {excinfo.value.code}: {excinfo.value.message}"
        return excinfo.value
    return _assert
