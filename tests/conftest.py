"""Global test fixtures for PeerLedger test suite."""

from __future__ import annotations

import os

import pytest

from peerledger.cli.config import reset_cli_config
from peerledger.core.config import LedgerSettings, clear_config_cache
from peerledger.system import LedgerSystem

HASH_A = "a" * 64
HASH_B = "b" * 64


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all PEERLEDGER_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("PEERLEDGER_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset config singletons between tests."""
    clear_config_cache()
    reset_cli_config()
    yield
    clear_config_cache()
    reset_cli_config()


# ============================================================================
# Ledger Fixtures
# ============================================================================


@pytest.fixture
def settings(clean_env) -> LedgerSettings:
    """Default settings, unaffected by the caller's environment."""
    return LedgerSettings(_env_file=None)


@pytest.fixture
def system(settings) -> LedgerSystem:
    """A fresh ledger at height 0 with no authorities bound."""
    return LedgerSystem(settings=settings)


@pytest.fixture
def make_system(clean_env):
    """Factory for ledgers with overridden settings."""

    def factory(**overrides) -> LedgerSystem:
        return LedgerSystem(settings=LedgerSettings(_env_file=None, **overrides))

    return factory


def _bootstrap(system: LedgerSystem, admin: str = "admin") -> LedgerSystem:
    """Bind ``admin`` as every module's authority."""
    for module in ("identity", "governance", "reviews"):
        system.bind_authority(admin, module, admin).unwrap()
    return system


def _enroll(system: LedgerSystem, principal: str, role: str = "author", stake: int = 1000, funds: int = 5000) -> None:
    """Fund and register ``principal``."""
    system.credit(principal, funds).unwrap()
    system.register(principal, role, HASH_A, stake).unwrap()


@pytest.fixture
def ledger(system) -> LedgerSystem:
    """Ledger with ``admin`` bound everywhere and alice, bob, carol registered."""
    _bootstrap(system)
    for name in ("alice", "bob", "carol"):
        _enroll(system, name)
    return system


@pytest.fixture
def bootstrap():
    """Helper binding an admin principal as every module's authority."""
    return _bootstrap


@pytest.fixture
def enroll():
    """Helper that funds and registers a principal."""
    return _enroll
