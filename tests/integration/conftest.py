"""Shared fixtures for integration tests."""

import os

import pytest

# Skip all integration tests unless RUN_ESFETCH_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_ESFETCH_NETWORK_TESTS") != "1",
    reason="Requires a running store. Set RUN_ESFETCH_NETWORK_TESTS=1 to run",
)


@pytest.fixture
def store_url() -> str:
    return os.environ.get("ESFETCH_TEST_URL", "http://localhost:9200")


@pytest.fixture
def store_index() -> str:
    return os.environ.get("ESFETCH_TEST_INDEX", "esfetch-test")
