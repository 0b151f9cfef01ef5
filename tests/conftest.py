"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from tests.fakes import FakeDriver


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Clear the settings LRU cache between tests."""
    from stealthscraper.settings.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Fake driver
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_driver() -> FakeDriver:
    """A fresh ``FakeDriver``."""
    return FakeDriver()


@pytest.fixture()
def no_sleep(monkeypatch):
    """Make every wait return immediately; collects requested durations (ms)."""
    waited: list[float] = []

    async def _fake_wait(time_ms: float) -> None:
        waited.append(time_ms)

    monkeypatch.setattr("stealthscraper.utils.wait", _fake_wait)
    return waited


@pytest.fixture()
def proxy_dict() -> dict[str, str]:
    return {"url": "http://gate.example.net:7000", "username": "scraper", "password": "s3cret"}



@pytest.fixture()
def anyio_backend() -> str:
    """The library is asyncio-based; run anyio-marked tests on asyncio only."""
    return "asyncio"
