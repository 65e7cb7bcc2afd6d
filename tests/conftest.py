"""Shared test fixtures for ldp-config tests."""

import argparse
import io
import logging
import sys
from pathlib import Path

import pytest
import responses

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ldp_config.client import FolioSession
from ldp_config.models import LOGGER_NAME

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_OKAPI_URL = "https://folio.example.com"
MOCK_TENANT = "diku"


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers installed by setup_logging so each test starts clean."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def folio_env(monkeypatch):
    """OKAPI_* environment pointing at the mock gateway."""
    monkeypatch.setenv("OKAPI_URL", MOCK_OKAPI_URL)
    monkeypatch.setenv("OKAPI_TENANT", MOCK_TENANT)
    monkeypatch.setenv("OKAPI_USER", "diku_admin")
    monkeypatch.setenv("OKAPI_PW", "admin")


@pytest.fixture
def mock_session():
    """FolioSession pointing at the mock gateway, not logged in."""
    session = FolioSession(MOCK_OKAPI_URL, MOCK_TENANT)
    yield session
    session.close()


@pytest.fixture
def close_calls(monkeypatch):
    """Sessions whose close() was called, in call order."""
    calls = []
    original = FolioSession.close

    def tracking_close(self):
        calls.append(self)
        original(self)

    monkeypatch.setattr(FolioSession, "close", tracking_close)
    return calls


def add_login(status: int = 201) -> None:
    """Register a successful cookie login on the active responses mock."""
    responses.add(
        responses.POST,
        f"{MOCK_OKAPI_URL}/authn/login-with-expiry",
        json={"accessTokenExpiration": "2099-01-01T00:00:00Z"},
        status=status,
        headers={"Set-Cookie": "folioAccessToken=abc; Path=/"},
    )


def set_stdin(monkeypatch, text: str) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


def put_calls() -> list:
    return [c for c in responses.calls if c.request.method == "PUT"]


def make_args(**kwargs) -> argparse.Namespace:
    """Helper to create argparse.Namespace with default values."""
    defaults = {
        "okapi_url": None,
        "tenant": None,
        "dry_run": False,
        "keep_going": False,
        "json_output": False,
        "verbose": False,
        "max_retries": 0,
        "operation": None,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)
