"""Mappers for converting raw player state into template-friendly records."""

from __future__ import annotations

import logging
from typing import Any

from .constants import (
    LABEL_NO_TRACK,
    LABEL_UNKNOWN_SLOT,
    LABEL_UNKNOWN_TYPE,
    NO_COLOR_ID,
    RGB_MASK,
)
from .models import DeviceRecord, TrackRecord, TrackSourceSlot, TrackType

logger = logging.getLogger(__name__)

SOURCE_SLOT_LABELS = {
    TrackSourceSlot.NO_TRACK: LABEL_NO_TRACK,
    TrackSourceSlot.CD_SLOT: "CD Slot",
    TrackSourceSlot.SD_SLOT: "SD Slot",
    TrackSourceSlot.USB_SLOT: "USB Slot",
    TrackSourceSlot.COLLECTION: "rekordbox",
}

TRACK_TYPE_LABELS = {
    TrackType.NO_TRACK: LABEL_NO_TRACK,
    TrackType.CD_DIGITAL_AUDIO: "CD Digital Audio",
    TrackType.REKORDBOX: "Rekordbox",
    TrackType.UNANALYZED: "Unanalyzed",
}


def _coerce_enum(enum_cls: Any, value: Any) -> Any:
    """Return the enum member for a raw code, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def format_source_slot(slot: Any) -> str:
    """Convert the slot from which a track was loaded to a readable label."""
    return SOURCE_SLOT_LABELS.get(_coerce_enum(TrackSourceSlot, slot), LABEL_UNKNOWN_SLOT)


def format_track_type(track_type: Any) -> str:
    """Convert the type of track loaded in a player to a readable label."""
    return TRACK_TYPE_LABELS.get(_coerce_enum(TrackType, track_type), LABEL_UNKNOWN_TYPE)


def item_label(item: Any) -> str | None:
    """Return the label of a searchable item, if there is one."""
    if item is None:
        return None
    label = getattr(item, "label", None)
    return str(label) if label is not None else None


def _is_no_color(color: Any) -> bool:
    is_no_color = getattr(color, "is_no_color", None)
    if isinstance(is_no_color, bool):
        return is_no_color
    return getattr(color, "color_id", NO_COLOR_ID) == NO_COLOR_ID


def color_name(color: Any) -> str | None:
    """Return the name of a track color, or None for no color."""
    if color is None or _is_no_color(color):
        return None
    name = getattr(color, "color_name", None)
    return str(name) if name is not None else None


def color_code(color: Any) -> str | None:
    """Return the CSS color code of a track color, or None for no color."""
    if color is None or _is_no_color(color):
        return None
    try:
        rgb = int(getattr(color, "rgb", 0))
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric color value %r", getattr(color, "rgb", None))
        return None
    return f"#{rgb & RGB_MASK:06x}"


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def map_metadata_to_track(metadata: Any) -> TrackRecord:
    """Map the raw metadata of a loaded track to a TrackRecord.

    Every attribute is optional on the input side; anything missing or
    malformed degrades to the record's default instead of raising.
    """
    color = getattr(metadata, "color", None)
    return TrackRecord(
        id=_optional_int(getattr(metadata, "rekordbox_id", None)) or 0,
        source_slot=format_source_slot(getattr(metadata, "source_slot", None)),
        track_type=format_track_type(getattr(metadata, "track_type", None)),
        title=_optional_str(getattr(metadata, "title", None)),
        album=item_label(getattr(metadata, "album", None)),
        artist=item_label(getattr(metadata, "artist", None)),
        color_name=color_name(color),
        color_hex=color_code(color),
        comment=_optional_str(getattr(metadata, "comment", None)),
        date_added=_optional_str(getattr(metadata, "date_added", None)),
        duration=_optional_int(getattr(metadata, "duration", None)),
        genre=item_label(getattr(metadata, "genre", None)),
        key=item_label(getattr(metadata, "key", None)),
        label=item_label(getattr(metadata, "label", None)),
        original_artist=item_label(getattr(metadata, "original_artist", None)),
        rating=_optional_int(getattr(metadata, "rating", None)),
        remixer=item_label(getattr(metadata, "remixer", None)),
        year=_optional_int(getattr(metadata, "year", None)),
    )


def map_device(device: Any, metadata: Any = None) -> DeviceRecord:
    """Map a device announcement and its optional track metadata to a DeviceRecord."""
    return DeviceRecord(
        number=int(device.number),
        name=_optional_str(getattr(device, "name", None)) or "",
        address=_optional_str(getattr(device, "address", None)) or "",
        track=map_metadata_to_track(metadata) if metadata is not None else None,
    )
