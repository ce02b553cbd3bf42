"""Tests for the shared Temporal client."""

from unittest.mock import AsyncMock, patch

import pytest

from src.provisioner.core.config import get_settings
from src.provisioner.temporal.client import close_temporal_client, get_temporal_client

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


@pytest.fixture(autouse=True)
async def reset_client():
    await close_temporal_client()
    yield
    await close_temporal_client()


async def test_connects_once_with_namespace():
    settings = get_settings()
    with patch("src.provisioner.temporal.client.Client.connect", new_callable=AsyncMock) as connect:
        first = await get_temporal_client()
        second = await get_temporal_client()

    assert first is second
    connect.assert_awaited_once_with(settings.temporal_host, namespace=settings.temporal_namespace)


async def test_close_forces_reconnect():
    with patch("src.provisioner.temporal.client.Client.connect", new_callable=AsyncMock) as connect:
        await get_temporal_client()
        await close_temporal_client()
        await get_temporal_client()

    assert connect.await_count == 2
