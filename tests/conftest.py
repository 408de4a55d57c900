"""
Shared fixtures for GoCardless client tests.
"""

from typing import Any, Dict, Optional

import httpx
import pytest

from gocardless_bank_data.token_manager import TokenManager

BASE_URL = "https://bankaccountdata.test"
SECRET_ID = "test-secret-id"
SECRET_KEY = "test-secret-key"


def _make_response(
    status_code: int,
    json: Any = None,
    headers: Optional[Dict[str, str]] = None,
    method: str = "GET",
    url: str = f"{BASE_URL}/api/v2/test/",
    content: Optional[bytes] = None,
) -> httpx.Response:
    kwargs: Dict[str, Any] = {"headers": headers or {}, "request": httpx.Request(method, url)}
    if content is not None:
        kwargs["content"] = content
    elif json is not None:
        kwargs["json"] = json
    return httpx.Response(status_code, **kwargs)


def _token_pair(
    access: str = "access-token-123",
    access_expires: float = 86400,
    refresh: str = "refresh-token-456",
    refresh_expires: float = 2592000,
) -> Dict[str, Any]:
    return {
        "access": access,
        "access_expires": access_expires,
        "refresh": refresh,
        "refresh_expires": refresh_expires,
    }


@pytest.fixture(autouse=True)
def _clear_gocardless_env(monkeypatch):
    """Never pick up real credentials from the developer's shell."""
    for name in ("GOCARDLESS_SECRET_ID", "GOCARDLESS_SECRET_KEY", "GOCARDLESS_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_response():
    """Factory for real httpx.Response objects bound to a request (raise_for_status works)."""
    return _make_response


@pytest.fixture
def token_pair():
    """Factory for /token/new/ response bodies."""
    return _token_pair


@pytest.fixture
def mock_env(monkeypatch):
    """Set up mock environment variables."""
    monkeypatch.setenv("GOCARDLESS_SECRET_ID", "env-secret-id")
    monkeypatch.setenv("GOCARDLESS_SECRET_KEY", "env-secret-key")
    monkeypatch.setenv("GOCARDLESS_BASE_URL", BASE_URL)


@pytest.fixture
def token_manager():
    """Token manager with its own HTTP client (patched per test)."""
    return TokenManager(SECRET_ID, SECRET_KEY, BASE_URL)
