"""Fixtures for testing the overlay server."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from unittest.mock import Mock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from beat_overlay.http_server import OverlayHTTPServer
from beat_overlay.models import ColorItem, DeviceAnnouncement, SearchableItem, TrackMetadata


@pytest.fixture
def devices() -> list[DeviceAnnouncement]:
    """Return two players, as announced on the network."""
    return [
        DeviceAnnouncement(number=1, name="CDJ-2000NXS2", address="192.168.1.11"),
        DeviceAnnouncement(number=2, name="CDJ-3000", address="192.168.1.12"),
    ]


@pytest.fixture
def track_metadata() -> TrackMetadata:
    """Return metadata for a track with no color assigned."""
    return TrackMetadata(
        rekordbox_id=42,
        source_slot=3,
        track_type=1,
        title="Test Track",
        artist=SearchableItem(id=7, label="Test Artist"),
        album=SearchableItem(id=9, label="Test Album"),
        color=ColorItem(),
        duration=245,
    )


@pytest.fixture
def registry_mock(devices: list[DeviceAnnouncement]) -> Mock:
    """Return a mock device registry reporting the two players."""
    registry = Mock()
    registry.current_devices = Mock(return_value=devices)
    return registry


@pytest.fixture
def metadata_cache_mock(track_metadata: TrackMetadata) -> Mock:
    """Return a mock metadata cache where only player 1 has a track loaded."""
    cache = Mock()
    cache.latest_metadata_for = Mock(side_effect=lambda number: {1: track_metadata}.get(number))
    return cache


@pytest.fixture
def server(registry_mock: Mock, metadata_cache_mock: Mock) -> OverlayHTTPServer:
    """Return an OverlayHTTPServer using the mock collaborators, not yet started."""
    return OverlayHTTPServer(0, registry=registry_mock, metadata_cache=metadata_cache_mock)


@pytest.fixture
async def http_client(server: OverlayHTTPServer) -> AsyncGenerator[TestClient, None]:
    """Return an aiohttp TestClient for the overlay server."""
    client = TestClient(TestServer(server.app))
    await client.start_server()
    yield client
    await client.close()
