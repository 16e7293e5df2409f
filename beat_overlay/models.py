"""Pydantic models for overlay state and configuration."""

from __future__ import annotations

from enum import Enum, IntEnum
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_PORT,
    DEFAULT_SHOW,
    DEFAULT_UPSTREAM_TIMEOUT,
    LABEL_NO_TRACK,
    NO_COLOR_ID,
    REKORDBOX_COLORS,
)


class TrackSourceSlot(IntEnum):
    """Slot from which a player loaded its track, as reported in status packets."""

    NO_TRACK = 0
    CD_SLOT = 1
    SD_SLOT = 2
    USB_SLOT = 3
    COLLECTION = 4


class TrackType(IntEnum):
    """Kind of track loaded in a player, as reported in status packets."""

    NO_TRACK = 0
    REKORDBOX = 1
    UNANALYZED = 2
    CD_DIGITAL_AUDIO = 5


class ServerState(str, Enum):
    """Lifecycle states of the overlay server."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


# --- Collaborator inputs ---


class DeviceAnnouncement(BaseModel):
    """A device currently visible on the network."""

    model_config = ConfigDict(frozen=True)

    number: int
    name: str = ""
    address: str = ""


class SearchableItem(BaseModel):
    """A labelled entity of a track, such as its artist or genre."""

    id: int = 0
    label: str | None = None


class ColorItem(BaseModel):
    """The color assigned to a track in rekordbox."""

    color_id: int = NO_COLOR_ID
    color_name: str | None = None
    rgb: int = 0

    @property
    def is_no_color(self) -> bool:
        """Return True when this is the "no color" sentinel."""
        return self.color_id == NO_COLOR_ID

    @classmethod
    def from_id(cls, color_id: int) -> ColorItem:
        """Build a color from the standard rekordbox palette."""
        name, rgb = REKORDBOX_COLORS.get(color_id, (None, 0))
        return cls(color_id=color_id, color_name=name, rgb=rgb)


class TrackMetadata(BaseModel):
    """Raw metadata of the track loaded in a player."""

    rekordbox_id: int = 0
    # Raw protocol codes; unknown values must survive validation
    source_slot: int = TrackSourceSlot.NO_TRACK
    track_type: int = TrackType.NO_TRACK
    title: str | None = None
    album: SearchableItem | None = None
    artist: SearchableItem | None = None
    color: ColorItem | None = None
    comment: str | None = None
    date_added: str | None = None
    duration: int | None = None
    genre: SearchableItem | None = None
    key: SearchableItem | None = None
    label: SearchableItem | None = None
    original_artist: SearchableItem | None = None
    rating: int | None = None
    remixer: SearchableItem | None = None
    year: int | None = None


# --- Render-ready records ---


class TrackRecord(BaseModel):
    """Template-friendly description of a loaded track."""

    id: int = 0
    source_slot: str = LABEL_NO_TRACK
    track_type: str = LABEL_NO_TRACK
    title: str | None = None
    album: str | None = None
    artist: str | None = None
    color_name: str | None = None
    color_hex: str | None = None
    comment: str | None = None
    date_added: str | None = None
    duration: int | None = None
    genre: str | None = None
    key: str | None = None
    label: str | None = None
    original_artist: str | None = None
    rating: int | None = None
    remixer: str | None = None
    year: int | None = None


class DeviceRecord(BaseModel):
    """Template-friendly description of a device and what it is playing."""

    number: int
    name: str = ""
    address: str = ""
    track: TrackRecord | None = None


PlayersView = dict[int, DeviceRecord]


# --- Configuration ---


class FileResource(BaseModel):
    """A user-supplied template or stylesheet on disk."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: Path

    @property
    def name(self) -> str:
        """Return a human-readable name for log and error messages."""
        return str(self.path)


class BundledResource(BaseModel):
    """A template or stylesheet shipped inside the package."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bundled"] = "bundled"
    name: str


ResourceRef = Union[FileResource, BundledResource]


class ServerConfig(BaseModel):
    """Resolved configuration of a running overlay server."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(DEFAULT_PORT, ge=0, le=65535)
    template: ResourceRef = Field(discriminator="kind")
    css: ResourceRef = Field(discriminator="kind")
    show: bool = DEFAULT_SHOW
    upstream_timeout: float = Field(DEFAULT_UPSTREAM_TIMEOUT, gt=0)

    @property
    def url(self) -> str:
        """Return the local URL of the overlay page."""
        return f"http://127.0.0.1:{self.port}/"
