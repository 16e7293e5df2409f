"""
Live-state overlay server.

Renders the current playback state of the players on a DJ Link network as
an HTML page and stylesheet, for capture by OBS Studio or a similar tool.
Device discovery and metadata lookup are supplied by the caller through the
DeviceRegistry and MetadataCache interfaces.
"""

from __future__ import annotations

import os

from .constants import DEFAULT_PORT, DEFAULT_SHOW, DEFAULT_UPSTREAM_TIMEOUT
from .errors import (
    BindError,
    MissingResourceError,
    OverlayError,
    RenderError,
    ResourceNotFound,
    TemplateRenderError,
    UpstreamUnavailable,
)
from .http_server import OverlayHTTPServer
from .state import DeviceRegistry, MetadataCache, build_players_view

__all__ = [
    "BindError",
    "DeviceRegistry",
    "MetadataCache",
    "MissingResourceError",
    "OverlayError",
    "OverlayHTTPServer",
    "RenderError",
    "ResourceNotFound",
    "TemplateRenderError",
    "UpstreamUnavailable",
    "build_players_view",
    "start_server",
    "stop_server",
]


async def start_server(
    port: int = DEFAULT_PORT,
    *,
    template: str | os.PathLike[str] | None = None,
    css: str | os.PathLike[str] | None = None,
    show: bool = DEFAULT_SHOW,
    registry: DeviceRegistry | None = None,
    metadata_cache: MetadataCache | None = None,
    upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT,
) -> OverlayHTTPServer:
    """Create, start and return an overlay server on the given port.

    `template` and `css` are optional files used instead of the bundled
    overlay page and stylesheet. With `show`, a browser is opened on the page
    once the server is listening. Pass the returned server to stop_server()
    to shut it down.
    """
    server = OverlayHTTPServer(
        port,
        template=template,
        css=css,
        show=show,
        registry=registry,
        metadata_cache=metadata_cache,
        upstream_timeout=upstream_timeout,
    )
    await server.start()
    return server


async def stop_server(server: OverlayHTTPServer) -> None:
    """Shut down an overlay server returned by start_server()."""
    await server.stop()
