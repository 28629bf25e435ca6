"""Pytest fixtures for kitty registry tests.

Common fixtures for building registries and runtimes without config files.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from typing import Iterator

import pytest

from kitty_registry import config as config_module
from kitty_registry.config_schema import AppConfig
from kitty_registry.kitties.events import MemoryEventSink
from kitty_registry.kitties.randomness import RandomnessSource
from kitty_registry.kitties.registry import KittyRegistry
from kitty_registry.kitties.runtime import Runtime
from kitty_registry.kitties.storage import KittyStorage

from tests.testing_utils import TEST_SEED


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "invariant: test checks a registry invariant that must hold after every call"
    )


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterator[None]:
    """Keep module-level config state from leaking between tests."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def app_config() -> AppConfig:
    """Default configuration, no file needed."""
    return AppConfig()


@pytest.fixture
def storage() -> KittyStorage:
    return KittyStorage.create()


@pytest.fixture
def sink() -> MemoryEventSink:
    return MemoryEventSink()


@pytest.fixture
def registry(storage: KittyStorage, sink: MemoryEventSink) -> KittyRegistry:
    """Registry with a fixed seed and a sequential nonce (0, 1, 2, ...)."""
    return KittyRegistry(storage, RandomnessSource.fixed(TEST_SEED), events=sink)


@pytest.fixture
def runtime(app_config: AppConfig) -> Runtime:
    """Runtime already advanced to block 10."""
    rt = Runtime(app_config)
    rt.run_to_block(10)
    return rt
