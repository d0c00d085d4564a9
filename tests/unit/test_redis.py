"""Tests for the optional Redis client."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.siteline.core import redis as redis_core
from src.siteline.core.config import get_settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset():
    redis_core.reset_redis_state()
    yield
    redis_core.reset_redis_state()


def _use_redis_url(monkeypatch, url):
    settings = get_settings().model_copy(update={"redis_url": url})
    monkeypatch.setattr(redis_core, "get_settings", lambda: settings)


async def test_unconfigured_returns_none(monkeypatch):
    _use_redis_url(monkeypatch, None)

    assert await redis_core.get_redis() is None


async def test_connects_once_and_reuses_client(monkeypatch):
    _use_redis_url(monkeypatch, "redis://cache:6379/0")
    client = MagicMock()
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(redis_core, "Redis", factory)

    assert await redis_core.get_redis() is client
    assert await redis_core.get_redis() is client
    factory.assert_called_once()

    await redis_core.close_redis()
    client.aclose.assert_awaited_once()


async def test_unreachable_server_is_not_retried(monkeypatch):
    _use_redis_url(monkeypatch, "redis://cache:6379/0")
    client = MagicMock()
    client.ping = AsyncMock(side_effect=ConnectionError("refused"))
    client.aclose = AsyncMock()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(redis_core, "Redis", factory)

    assert await redis_core.get_redis() is None
    assert await redis_core.get_redis() is None
    factory.assert_called_once()
