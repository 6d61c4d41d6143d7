"""Test fixtures for embyconnect tests."""

import os
from collections.abc import Generator

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from embyconnect.core.config import ConfigManager
from fakes import FakeCache, FakeDiscovery, FakeProbe, Recorder


@pytest.fixture
def recorder() -> Recorder:
    """Return a fresh event recorder."""
    return Recorder()


@pytest.fixture
def cache() -> FakeCache:
    """Return an empty in-memory address cache."""
    return FakeCache()


@pytest.fixture
def probe() -> FakeProbe:
    """Return a probe for which every address is unreachable."""
    return FakeProbe()


@pytest.fixture
def discovery() -> FakeDiscovery:
    """Return a discovery that finds nothing."""
    return FakeDiscovery()


@pytest.fixture
def config() -> Generator[ConfigManager, None, None]:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid touching real settings
    config = ConfigManager("EmbyConnectTest", "TestConfig")
    config.clear()
    yield config
    config.clear()
