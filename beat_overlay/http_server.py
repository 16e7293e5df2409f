"""Embedded HTTP server for the live-state overlay."""

from __future__ import annotations

import asyncio
import logging
import os
import webbrowser
from typing import Any

from aiohttp import web

from .constants import (
    CONTENT_TYPE_CSS,
    CONTENT_TYPE_HTML,
    CONTENT_TYPE_PAGE,
    DEFAULT_CSS,
    DEFAULT_PORT,
    DEFAULT_SHOW,
    DEFAULT_TEMPLATE,
    DEFAULT_UPSTREAM_TIMEOUT,
    NOT_FOUND_BODY,
)
from .errors import BindError, RenderError
from .models import ServerConfig, ServerState
from .renderer import TemplateRenderer
from .resources import resolve_resource
from .state import (
    DeviceRegistry,
    EmptyMetadataCache,
    MetadataCache,
    StaticRegistry,
    build_players_view,
    players_context,
)

logger = logging.getLogger(__name__)


def open_browser(url: str) -> None:
    """Open a browser window at the given URL, logging rather than raising on failure."""
    try:
        if not webbrowser.open(url):
            logger.warning("No browser available to show %s", url)
    except Exception:
        logger.warning("Unable to open a browser at %s", url, exc_info=True)


def _check_port(port: Any) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
        raise BindError(port, "not a valid TCP port")
    return port


class OverlayHTTPServer:
    """HTTP server that renders the overlay page and its stylesheet.

    Everything is resolved in the constructor: an overridden template or
    stylesheet that does not exist raises ResourceNotFound before any socket
    is bound. The instance returned by start_server() is the handle needed to
    stop it again.
    """

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        *,
        template: str | os.PathLike[str] | None = None,
        css: str | os.PathLike[str] | None = None,
        show: bool = DEFAULT_SHOW,
        registry: DeviceRegistry | None = None,
        metadata_cache: MetadataCache | None = None,
        upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT,
    ) -> None:
        """Initialize the HTTP server."""
        self.config = ServerConfig(
            port=_check_port(port),
            template=resolve_resource(template, DEFAULT_TEMPLATE),
            css=resolve_resource(css, DEFAULT_CSS),
            show=show,
            upstream_timeout=upstream_timeout,
        )
        self.registry: DeviceRegistry = registry if registry is not None else StaticRegistry()
        self.metadata_cache: MetadataCache = (
            metadata_cache if metadata_cache is not None else EmptyMetadataCache()
        )
        self.page_renderer = TemplateRenderer(
            self.config.template, CONTENT_TYPE_PAGE, autoescape=True
        )
        self.styles_renderer = TemplateRenderer(self.config.css, CONTENT_TYPE_CSS)
        self.app = web.Application(middlewares=[self._error_middleware])
        self.state = ServerState.STOPPED
        self._runner: web.AppRunner | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Register the overlay routes; anything else is answered by the middleware."""
        self.app.router.add_get("/", self._handle_overlay, allow_head=False)
        self.app.router.add_get("/styles.css", self._handle_styles, allow_head=False)

    @property
    def port(self) -> int:
        """Return the port actually bound, which differs from the config for port 0."""
        if self._runner is not None:
            for address in self._runner.addresses:
                if isinstance(address, tuple) and len(address) >= 2:
                    return int(address[1])
        return self.config.port

    @property
    def url(self) -> str:
        """Return the local URL of the overlay page."""
        return f"http://127.0.0.1:{self.port}/"

    @property
    def running(self) -> bool:
        """Return True while the listener is bound."""
        return self.state is ServerState.RUNNING

    @web.middleware
    async def _error_middleware(self, request: web.Request, handler: Any) -> web.StreamResponse:
        """Answer unknown paths and methods with 404 and keep render failures per request."""
        try:
            response: web.StreamResponse = await handler(request)
        except (web.HTTPNotFound, web.HTTPMethodNotAllowed):
            return self._not_found()
        except RenderError as exc:
            logger.exception("Failed to render %s", request.path)
            return web.Response(status=500, text=str(exc))
        return response

    async def start(self) -> None:
        """Start the HTTP server, raising BindError if the port cannot be bound."""
        if self.state is not ServerState.STOPPED:
            logger.warning("Overlay server already %s on port %s", self.state.value, self.port)
            return
        self.state = ServerState.STARTING
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "0.0.0.0", self.config.port, reuse_address=True)
        try:
            await site.start()
        except (OSError, OverflowError) as exc:
            await self._runner.cleanup()
            self._runner = None
            self.state = ServerState.STOPPED
            raise BindError(self.config.port, str(exc)) from exc
        self.state = ServerState.RUNNING
        logger.info("Overlay server started on port %s", self.port)
        if self.config.show:
            self._show()

    async def stop(self) -> None:
        """Stop the HTTP server and release its port. Stopping twice is a no-op."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Overlay server stopped")
        self.state = ServerState.STOPPED

    def _show(self) -> None:
        """Open a browser on the overlay page without waiting for it."""
        loop = asyncio.get_running_loop()
        loop.run_in_executor(None, open_browser, self.url)

    def _not_found(self) -> web.Response:
        return web.Response(status=404, text=NOT_FOUND_BODY, content_type=CONTENT_TYPE_HTML)

    def _respond(self, renderer: TemplateRenderer, context: dict[str, Any]) -> web.Response:
        body = renderer.render(context).encode("utf-8")
        return web.Response(body=body, headers={"Content-Type": renderer.content_type})

    # --- Routes ---

    async def _handle_overlay(self, request: web.Request) -> web.Response:
        """Render the overlay page from a fresh snapshot of the players."""
        try:
            players = await asyncio.wait_for(
                asyncio.to_thread(build_players_view, self.registry, self.metadata_cache),
                timeout=self.config.upstream_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Device state not available within %.1fs", self.config.upstream_timeout
            )
            return web.Response(status=504, text="Upstream timeout")
        return self._respond(self.page_renderer, players_context(players))

    async def _handle_styles(self, request: web.Request) -> web.Response:
        """Render the stylesheet."""
        return self._respond(self.styles_renderer, {})
