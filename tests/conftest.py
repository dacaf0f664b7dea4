"""Pytest fixtures for the smoke test suite."""

from __future__ import annotations

import logging
import socket

import httpx
import pytest

from monasca_smoke.config import Settings, get_settings
from monasca_smoke.models import RunContext
from monasca_smoke.services import MonascaClient, SmokeTestRunner
from tests.fixtures import KEYSTONE_URL, MONASCA_URL, TEST_PASSWORD, TEST_TOKEN, FakeMonasca

# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at the fake APIs with a fast webhook poll."""
    return Settings(
        _env_file=None,
        os_auth_url=KEYSTONE_URL,
        os_username="smoke",
        os_password=TEST_PASSWORD,
        os_project_name="monitoring",
        monasca_url=MONASCA_URL,
        webhook_ip="127.0.0.1",
        webhook_bind_host="127.0.0.1",
        webhook_poll_iterations=3,
        webhook_poll_interval_seconds=0.01,
    )


@pytest.fixture
def clean_settings_cache():
    """Clear the cached settings around tests that read the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def free_port() -> int:
    """A TCP port that is free at the time of the call."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# =============================================================================
# Fake API Fixtures
# =============================================================================


@pytest.fixture
def fake_monasca() -> FakeMonasca:
    return FakeMonasca()


@pytest.fixture
def mock_transport(fake_monasca) -> httpx.MockTransport:
    return httpx.MockTransport(fake_monasca.handler)


@pytest.fixture
def monasca_client(mock_transport) -> MonascaClient:
    return MonascaClient(MONASCA_URL, TEST_TOKEN, timeout=5, transport=mock_transport)


@pytest.fixture
def run_context() -> RunContext:
    return RunContext()


@pytest.fixture
def runner(monasca_client, run_context, test_settings) -> SmokeTestRunner:
    return SmokeTestRunner(monasca_client, run_context, test_settings)


@pytest.fixture
def restore_logging():
    """Undo the root logger changes made by the entrypoint's logging setup."""
    root = logging.getLogger()
    httpx_logger = logging.getLogger("httpx")
    saved = (root.level, list(root.handlers), httpx_logger.level)
    yield
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    httpx_logger.setLevel(saved[2])


@pytest.fixture
def occupied_port():
    """A port held by a listening socket for the duration of the test."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen()
        yield sock.getsockname()[1]
