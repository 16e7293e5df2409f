"""Tests for the overlay pydantic models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from beat_overlay.models import (
    BundledResource,
    ColorItem,
    DeviceRecord,
    FileResource,
    ServerConfig,
    TrackRecord,
)


def test_track_record_defaults() -> None:
    """A bare track record should describe an empty player."""
    track = TrackRecord()
    assert track.id == 0
    assert track.source_slot == "No Track"
    assert track.track_type == "No Track"
    assert track.title is None


def test_device_record_without_track_dumps_no_track_key() -> None:
    """Dumping without None values should drop the track entirely."""
    record = DeviceRecord(number=2, name="CDJ-3000", address="192.168.1.12")
    data = record.model_dump(exclude_none=True)
    assert data == {"number": 2, "name": "CDJ-3000", "address": "192.168.1.12"}


def test_color_from_unknown_id() -> None:
    """Unknown palette ids should still build a color, without a name."""
    color = ColorItem.from_id(42)
    assert not color.is_no_color
    assert color.color_name is None
    assert ColorItem.from_id(0).is_no_color


def test_server_config_resources() -> None:
    """Server config should accept both kinds of resource reference."""
    config = ServerConfig(
        port=17081,
        template=FileResource(path=Path("/tmp/overlay.html")),
        css=BundledResource(name="styles.css"),
    )
    assert isinstance(config.template, FileResource)
    assert config.template.name == "/tmp/overlay.html"
    assert config.css.name == "styles.css"
    assert config.url == "http://127.0.0.1:17081/"
    assert config.show is False


def test_server_config_is_frozen() -> None:
    """Server config should be immutable once built."""
    config = ServerConfig(
        template=BundledResource(name="overlay.html"),
        css=BundledResource(name="styles.css"),
    )
    with pytest.raises(ValidationError):
        config.port = 1234  # type: ignore[misc]


def test_server_config_rejects_bad_timeout() -> None:
    """The upstream timeout must be positive."""
    with pytest.raises(ValidationError):
        ServerConfig(
            template=BundledResource(name="overlay.html"),
            css=BundledResource(name="styles.css"),
            upstream_timeout=0,
        )


@pytest.mark.parametrize("port", [-1, 65536])
def test_server_config_rejects_bad_port(port: int) -> None:
    """The port must be a valid TCP port."""
    with pytest.raises(ValidationError):
        ServerConfig(
            port=port,
            template=BundledResource(name="overlay.html"),
            css=BundledResource(name="styles.css"),
        )
