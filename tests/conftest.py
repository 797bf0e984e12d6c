"""
Global test configuration: environment isolation and HTTP fakes.
"""

from collections.abc import Callable
import os
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from naya_daur.config import resolve_config
from tests.fixtures.api_responses import ScriptedTransport

TEST_API_KEY = "test_api_key_12345_67890_abcdef_ghijkl"


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch):
    """Ensure a clean GEMINI_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the environment.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked HTTP",
        "allow_env_pollution: Keep GEMINI_* environment variables for this test",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def frozen_config():
    """Default configuration, isolated from the developer's environment."""
    return resolve_config().to_frozen()


@pytest.fixture
def scripted_client() -> Callable[..., tuple[httpx.AsyncClient, ScriptedTransport]]:
    """Factory for an AsyncClient backed by a ScriptedTransport."""

    def _make(
        *script: httpx.Response | Exception,
    ) -> tuple[httpx.AsyncClient, ScriptedTransport]:
        transport = ScriptedTransport(script)
        client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        return client, transport

    return _make


@pytest.fixture
def no_sleep():
    """Patch asyncio.sleep so backoff delays are recorded instead of waited."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as sleep_mock:
        yield sleep_mock
