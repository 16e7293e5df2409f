"""Run the overlay server from the command line.

Configuration comes from the environment:

    OVERLAY_PORT              port to listen on (default 17081)
    OVERLAY_TEMPLATE          template file to use instead of the bundled page
    OVERLAY_CSS               stylesheet template to use instead of the bundled one
    OVERLAY_SHOW              "true" to open a browser once started
    OVERLAY_SNAPSHOT          JSON snapshot of devices and tracks to display
    OVERLAY_UPSTREAM_TIMEOUT  seconds to wait for device state per request
    LOG_LEVEL                 logging level name (default INFO)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from typing import Any

from . import start_server, stop_server
from .constants import (
    CONF_CSS,
    CONF_PORT,
    CONF_SHOW,
    CONF_SNAPSHOT,
    CONF_TEMPLATE,
    CONF_UPSTREAM_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_UPSTREAM_TIMEOUT,
    ENV_LOG_LEVEL,
    ENV_PREFIX,
)
from .errors import OverlayError
from .sources import SnapshotSource

logger = logging.getLogger(__name__)


def _env(environ: Mapping[str, str], key: str) -> str | None:
    value = environ.get(f"{ENV_PREFIX}{key.upper()}")
    return value or None


def load_config(environ: Mapping[str, str] = os.environ) -> dict[str, Any]:
    """Build the server configuration from environment variables."""
    return {
        CONF_PORT: int(_env(environ, CONF_PORT) or DEFAULT_PORT),
        CONF_TEMPLATE: _env(environ, CONF_TEMPLATE),
        CONF_CSS: _env(environ, CONF_CSS),
        CONF_SHOW: (_env(environ, CONF_SHOW) or "false").lower() == "true",
        CONF_SNAPSHOT: _env(environ, CONF_SNAPSHOT),
        CONF_UPSTREAM_TIMEOUT: float(
            _env(environ, CONF_UPSTREAM_TIMEOUT) or DEFAULT_UPSTREAM_TIMEOUT
        ),
    }


async def run(config: dict[str, Any]) -> None:
    """Start the server and keep it running until cancelled."""
    source = SnapshotSource(config[CONF_SNAPSHOT]) if config[CONF_SNAPSHOT] else None
    server = await start_server(
        config[CONF_PORT],
        template=config[CONF_TEMPLATE],
        css=config[CONF_CSS],
        show=config[CONF_SHOW],
        registry=source,
        metadata_cache=source,
        upstream_timeout=config[CONF_UPSTREAM_TIMEOUT],
    )
    logger.info("Overlay available at %s", server.url)
    try:
        await asyncio.Event().wait()
    finally:
        await stop_server(server)


def main() -> int:
    """Console script entry point."""
    logging.basicConfig(
        level=getattr(logging, os.getenv(ENV_LOG_LEVEL, "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    try:
        asyncio.run(run(config))
    except OverlayError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
