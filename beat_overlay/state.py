"""Aggregation of live device and track state into a PlayersView."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from .errors import UpstreamUnavailable
from .mappers import map_device
from .models import DeviceRecord, PlayersView

logger = logging.getLogger(__name__)


class DeviceRegistry(Protocol):
    """Read-only view of the devices currently visible on the network."""

    def current_devices(self) -> Iterable[Any]:
        """Return the devices currently known, each with number, name and address."""


class MetadataCache(Protocol):
    """Read-only view of the metadata of tracks loaded in players."""

    def latest_metadata_for(self, number: int) -> Any | None:
        """Return metadata for the track loaded in a player, or None."""


class StaticRegistry:
    """A registry with a fixed list of devices."""

    def __init__(self, devices: Iterable[Any] = ()) -> None:
        """Initialize with the devices to report."""
        self._devices = list(devices)

    def current_devices(self) -> list[Any]:
        """Return the fixed device list."""
        return list(self._devices)


class EmptyMetadataCache:
    """A metadata cache that never has anything loaded."""

    def latest_metadata_for(self, number: int) -> None:
        """Return None for every player."""
        return None


def _lookup_metadata(metadata_cache: MetadataCache, number: int) -> Any | None:
    try:
        return metadata_cache.latest_metadata_for(number)
    except UpstreamUnavailable as exc:
        logger.debug("No metadata available for player %s: %s", number, exc)
    except Exception:
        logger.warning("Failed to fetch metadata for player %s", number, exc_info=True)
    return None


def build_players_view(registry: DeviceRegistry, metadata_cache: MetadataCache) -> PlayersView:
    """Build the map of device number to DeviceRecord from the current snapshots.

    Holds no state of its own, so concurrent calls need no locking. Upstream
    failures degrade to fewer players or tracks rather than raising.
    """
    try:
        devices = list(registry.current_devices() or ())
    except UpstreamUnavailable as exc:
        logger.debug("Device registry unavailable: %s", exc)
        return {}
    except Exception:
        logger.warning("Failed to list current devices", exc_info=True)
        return {}

    players: dict[int, DeviceRecord] = {}
    for device in devices:
        try:
            number = int(device.number)
        except (AttributeError, TypeError, ValueError):
            logger.warning("Skipping malformed device announcement %r", device)
            continue
        if number in players:
            continue
        metadata = _lookup_metadata(metadata_cache, number)
        if metadata is not None:
            try:
                players[number] = map_device(device, metadata)
                continue
            except Exception:
                logger.warning(
                    "Ignoring unreadable metadata for player %s", number, exc_info=True
                )
        try:
            players[number] = map_device(device)
        except (TypeError, ValueError):
            logger.warning("Skipping malformed device announcement %r", device)
    return players


def players_context(players: PlayersView) -> dict[str, Any]:
    """Return the template parameters describing the given players."""
    return {
        "players": {
            number: record.model_dump(exclude_none=True) for number, record in players.items()
        }
    }
