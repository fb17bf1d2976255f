"""Pytest fixtures for kitties tests.

Common fixtures for testing the kitties runtime.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from pathlib import Path
from typing import Iterator

import pytest

from kitties import config as config_module
from kitties.runtime import (
    EventLogger,
    KeyValueStore,
    KittiesModule,
    Ledger,
    OwnedKitties,
    Origin,
)
from tests.testing_utils import FixedRandomness, dna


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "feature(name): mark test as belonging to a feature. "
        "Usage: @pytest.mark.feature('marketplace')"
    )


@pytest.fixture(autouse=True)
def reset_global_config() -> Iterator[None]:
    """Make sure no test sees config loaded by another."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def store() -> KeyValueStore:
    """Create an empty KeyValueStore."""
    return KeyValueStore()


@pytest.fixture
def owned_kitties(store: KeyValueStore) -> OwnedKitties:
    """Create an empty linked-list ownership index."""
    return OwnedKitties(store)


@pytest.fixture
def randomness() -> FixedRandomness:
    """Randomness handing out 0x11.., 0x22.., 0x33.., ... then repeating the last."""
    return FixedRandomness([dna(0x11 * i) for i in range(1, 10)])


@pytest.fixture
def events() -> EventLogger:
    """In-memory event log."""
    return EventLogger()


@pytest.fixture
def module(store: KeyValueStore, randomness: FixedRandomness, events: EventLogger) -> KittiesModule:
    """KittiesModule with funded accounts and fixed randomness.

    - alice: 1000
    - bob: 500
    - charlie: 10
    """
    ledger = Ledger(store)
    ledger.create_account("alice", 1000)
    ledger.create_account("bob", 500)
    ledger.create_account("charlie", 10)
    return KittiesModule(store=store, ledger=ledger, randomness=randomness, events=events)


@pytest.fixture
def alice() -> Origin:
    return Origin.signed("alice")


@pytest.fixture
def bob() -> Origin:
    return Origin.signed("bob")


@pytest.fixture
def charlie() -> Origin:
    return Origin.signed("charlie")


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a small valid config file and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "kitties:\n"
        "  max_kitty_index: 1000\n"
        "randomness:\n"
        "  seed: test-seed\n"
        "balances:\n"
        "  genesis:\n"
        "    alice: 100\n"
        "    bob: 50\n"
    )
    return path
