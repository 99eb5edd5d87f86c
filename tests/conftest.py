import asyncio
import logging

import pytest
from typer.testing import CliRunner

from bulkdelete.infrastructure.config import settings

@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()

class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)

@pytest.fixture
def fake_clock():
    return FakeClock()

@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keeps configuration from the developer's environment out of the tests."""
    for key in (settings.DOMAIN_KEY, settings.CLIENT_ID_KEY, settings.CLIENT_SECRET_KEY,
                "LOGGING_LEVEL", "LOGGING_FILE", "LOGGING_FORMAT", "HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(settings, "_loaded", True)
    monkeypatch.setattr(settings, "_config", {})
    settings.clear_test_config()
    yield
    settings.clear_test_config()

@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

@pytest.fixture
def tenant_env(monkeypatch):
    monkeypatch.setenv(settings.DOMAIN_KEY, "acme.eu.auth0.com")
    monkeypatch.setenv(settings.CLIENT_ID_KEY, "client-123")
    monkeypatch.setenv(settings.CLIENT_SECRET_KEY, "s3cret")
