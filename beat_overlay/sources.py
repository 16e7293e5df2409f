"""Snapshot-file source of device and track state.

Lets the overlay run without live hardware: a JSON file describes the
devices on the network and what each of them has loaded, e.g.::

    {
      "devices": [{"number": 1, "name": "CDJ-2000NXS2", "address": "192.168.1.11"}],
      "metadata": {"1": {"title": "Test Track", "source_slot": 3, "track_type": 1}}
    }

The file is re-read on every call, so editing it changes the next page load.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from .errors import UpstreamUnavailable
from .models import DeviceAnnouncement, TrackMetadata

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """Contents of a snapshot file."""

    devices: list[DeviceAnnouncement] = Field(default_factory=list)
    metadata: dict[int, TrackMetadata] = Field(default_factory=dict)


class SnapshotSource:
    """Device registry and metadata cache backed by a JSON snapshot file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Initialize with the snapshot file to read."""
        self.path = Path(path)

    def load(self) -> Snapshot:
        """Read and validate the snapshot file."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            snapshot = Snapshot.model_validate(data)
        except (OSError, ValueError) as exc:
            # ValidationError and JSONDecodeError are both ValueErrors
            raise UpstreamUnavailable(f"Unable to read snapshot {self.path}: {exc}") from exc
        logger.debug("Loaded %d devices from %s", len(snapshot.devices), self.path)
        return snapshot

    def current_devices(self) -> list[DeviceAnnouncement]:
        """Return the devices listed in the snapshot."""
        return self.load().devices

    def latest_metadata_for(self, number: int) -> TrackMetadata | None:
        """Return the metadata of the track loaded in a player, if the snapshot has it."""
        return self.load().metadata.get(number)
