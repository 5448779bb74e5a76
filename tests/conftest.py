"""
Root conftest.py — shared fixtures for the entire test suite.

Guidelines:
    • No __init__.py in test sub-directories (avoids shadowing root packages).
    • pytest.ini_options lives in pyproject.toml with pythonpath=["."].
    • No live network calls: HTTP goes through httpx.MockTransport or mocked ports.
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from unittest.mock import MagicMock

import pytest

from domain.models import FileParam, RestResponse


# ---------------------------------------------------------------------------
# Marker registration
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

BASE_SETTINGS_KWARGS: Dict[str, str] = {
    "access_token": "test-token",
}


@pytest.fixture()
def base_settings_kwargs() -> Dict[str, str]:
    """Provide the minimal kwargs needed to instantiate ``Settings``."""
    return {**BASE_SETTINGS_KWARGS}


@pytest.fixture(autouse=True)
def _isolated_linkedin_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer LINKEDIN_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("LINKEDIN_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Responses & ports
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_response() -> Callable[..., RestResponse]:
    """Factory for RestResponse objects returned by mocked clients."""

    def _make(body: Any = None, status: int = 200, headers: Optional[Dict[str, str]] = None) -> RestResponse:
        return RestResponse(status=status, headers=headers or {}, body=body)

    return _make


@pytest.fixture()
def mock_rest_client() -> MagicMock:
    """RestClientPort mock; configure ``call``/``put_bytes`` per test."""
    return MagicMock()


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

SAMPLE_BYTES = bytes(range(250))


@pytest.fixture()
def sample_bytes() -> bytes:
    return SAMPLE_BYTES


@pytest.fixture()
def sample_file(tmp_path: Path) -> FileParam:
    """A 250-byte local file with distinct byte values."""
    path = tmp_path / "clip.mp4"
    path.write_bytes(SAMPLE_BYTES)
    return FileParam(path=path, file_name="clip.mp4")
