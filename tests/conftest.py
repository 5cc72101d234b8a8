"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from pronoun_resolver.core.config.settings import Settings  # noqa: E402
from pronoun_resolver.resolution.resolver import Resolver  # noqa: E402
from tests.test_fixtures import CountingBackend, RecordingTransport  # noqa: E402

TEST_WINDOW = 0.01


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_settings():
    """
    Real Settings with a short coalescing window and no retry backoff.
    """
    return Settings(
        COALESCE_WINDOW_SECONDS=TEST_WINDOW,
        LOOKUP_MAX_RETRIES=3,
        LOOKUP_RETRY_BASE_DELAY=0,
        LOOKUP_RETRY_MAX_DELAY=0,
        PERSISTENCE_BACKEND="memory",
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def mock_settings():
    """
    Mock application settings for testing.

    Returns a MagicMock with common settings attributes.
    """
    settings = MagicMock(spec=Settings)
    settings.PERSISTENCE_BACKEND = "memory"
    settings.COALESCE_WINDOW_SECONDS = TEST_WINDOW
    settings.OVERRIDE_KEY_PREFIX = "pronoundb-local-override"
    settings.OVERRIDE_INDEX_KEY = "pronoundb-local-override-list"
    return settings


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def backend():
    """In-memory persistence backend that counts reads."""
    return CountingBackend()


@pytest.fixture
def transport():
    """
    Fake PronounDB answering for a handful of users.

    Users without an entry are omitted from responses, like PronounDB does.
    """
    return RecordingTransport(
        responses={
            "100": "hh",
            "200": "sh",
            "300": "tt",
            "400": "any",
        }
    )


@pytest.fixture
def make_resolver(test_settings, backend):
    """Build a Resolver around a given transport, sharing the test backend."""

    def _make(transport, window: float = TEST_WINDOW) -> Resolver:
        return Resolver(transport, backend, test_settings, window=window)

    return _make


@pytest.fixture
async def resolver(make_resolver, transport):
    """Resolver wired to the default fake transport; closed after the test."""
    instance = make_resolver(transport)
    yield instance
    await instance.close()
