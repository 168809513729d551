"""
Shared fixtures for under file system tests.
"""
import pytest

from underfs.config import Configuration, PropertyKey
from underfs.swift.simulation import reset_simulation


FULL_CREDENTIALS = {
    PropertyKey.SWIFT_API_KEY: "api-key",
    PropertyKey.SWIFT_TENANT_KEY: "tenant",
    PropertyKey.SWIFT_AUTH_URL_KEY: "http://keystone:5000/v2.0",
    PropertyKey.SWIFT_USER_KEY: "alice",
}


@pytest.fixture(autouse=True)
def clean_simulation():
    """Start every test with an empty simulated Swift cluster."""
    reset_simulation()
    yield
    reset_simulation()


@pytest.fixture
def configuration():
    """Empty persistent configuration."""
    return Configuration()


@pytest.fixture
def simulated_configuration():
    """Configuration with Swift simulation mode enabled."""
    return Configuration({PropertyKey.SWIFT_SIMULATION: True})


@pytest.fixture
def credentials_configuration():
    """Configuration holding a complete Swift credential set."""
    return Configuration(FULL_CREDENTIALS)
