"""Tests for starting and stopping the overlay server."""

from __future__ import annotations

import asyncio
import socket
import webbrowser
from pathlib import Path
from unittest.mock import Mock, patch

import aiohttp
import pytest

from beat_overlay import start_server, stop_server
from beat_overlay.errors import BindError, ResourceNotFound
from beat_overlay.http_server import OverlayHTTPServer, open_browser
from beat_overlay.models import ServerState


def _port_is_free(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(("0.0.0.0", port))
        except OSError:
            return False
        return True


async def _wait_for(mock: Mock, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not mock.called and loop.time() < deadline:
        await asyncio.sleep(0.01)


async def test_start_serves_page(unused_tcp_port: int) -> None:
    """A started server should answer GET / on its port."""
    server = await start_server(unused_tcp_port)
    try:
        assert server.state is ServerState.RUNNING
        assert server.running
        assert server.port == unused_tcp_port
        assert server.url == f"http://127.0.0.1:{unused_tcp_port}/"
        async with aiohttp.ClientSession() as session:
            async with session.get(server.url) as resp:
                assert resp.status == 200
                assert resp.headers["Content-Type"] == "text/html; charset=utf-8"
                assert 'class="players"' in await resp.text()
    finally:
        await stop_server(server)


async def test_stop_releases_port(unused_tcp_port: int) -> None:
    """Stopping should free the port so the server can be started on it again."""
    server = await start_server(unused_tcp_port)
    await stop_server(server)
    assert server.state is ServerState.STOPPED
    assert _port_is_free(unused_tcp_port)

    again = await start_server(unused_tcp_port)
    try:
        assert again.running
    finally:
        await stop_server(again)


async def test_restart_same_server(unused_tcp_port: int) -> None:
    """A stopped server should start again on its port and serve requests."""
    server = await start_server(unused_tcp_port)
    await stop_server(server)
    assert server.state is ServerState.STOPPED

    await server.start()
    try:
        assert server.state is ServerState.RUNNING
        assert server.port == unused_tcp_port
        async with aiohttp.ClientSession() as session:
            async with session.get(server.url) as resp:
                assert resp.status == 200
    finally:
        await stop_server(server)
    assert _port_is_free(unused_tcp_port)


async def test_stop_twice_is_noop(unused_tcp_port: int) -> None:
    """Stopping an already stopped server should do nothing."""
    server = await start_server(unused_tcp_port)
    await stop_server(server)
    await stop_server(server)
    assert server.state is ServerState.STOPPED


async def test_start_when_running_is_noop(unused_tcp_port: int) -> None:
    """Starting a running server again should leave it running on the same port."""
    server = await start_server(unused_tcp_port)
    try:
        await server.start()
        assert server.running
        assert server.port == unused_tcp_port
    finally:
        await stop_server(server)


async def test_ephemeral_port() -> None:
    """Port 0 should bind a free port and report it."""
    server = await start_server(0)
    try:
        assert server.port != 0
        assert server.config.port == 0
    finally:
        await stop_server(server)


async def test_port_in_use(unused_tcp_port: int) -> None:
    """Binding a port someone else is listening on should raise BindError."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("0.0.0.0", unused_tcp_port))
        sock.listen()
        server = OverlayHTTPServer(unused_tcp_port)
        with pytest.raises(BindError):
            await server.start()
        assert server.state is ServerState.STOPPED
        assert not server.running


@pytest.mark.parametrize("port", [-1, 65536, "8080", None, True])
async def test_invalid_port(port: object) -> None:
    """Ports outside the TCP range, or not integers at all, should raise BindError."""
    with pytest.raises(BindError):
        await start_server(port)  # type: ignore[arg-type]


async def test_missing_template_fails_before_bind(unused_tcp_port: int, tmp_path: Path) -> None:
    """A missing override should abort startup without binding the port."""
    with pytest.raises(ResourceNotFound):
        await start_server(unused_tcp_port, template=tmp_path / "missing.html")
    assert _port_is_free(unused_tcp_port)


async def test_missing_css_fails_before_bind(unused_tcp_port: int, tmp_path: Path) -> None:
    """A missing stylesheet override should abort startup too."""
    with pytest.raises(ResourceNotFound):
        await start_server(unused_tcp_port, css=str(tmp_path / "missing.css"))
    assert _port_is_free(unused_tcp_port)


async def test_show_opens_browser(unused_tcp_port: int) -> None:
    """With show, a browser should be pointed at the overlay page."""
    with patch("beat_overlay.http_server.webbrowser.open", return_value=True) as mock_open:
        server = await start_server(unused_tcp_port, show=True)
        try:
            await _wait_for(mock_open)
            mock_open.assert_called_once_with(f"http://127.0.0.1:{unused_tcp_port}/")
        finally:
            await stop_server(server)


async def test_no_show_no_browser(unused_tcp_port: int) -> None:
    """Without show, no browser should be opened."""
    with patch("beat_overlay.http_server.webbrowser.open") as mock_open:
        server = await start_server(unused_tcp_port)
        await stop_server(server)
    mock_open.assert_not_called()


async def test_show_browser_failure_does_not_fail_start(unused_tcp_port: int) -> None:
    """A browser that cannot be opened should not stop the server from running."""
    with patch(
        "beat_overlay.http_server.webbrowser.open", side_effect=webbrowser.Error("no display")
    ) as mock_open:
        server = await start_server(unused_tcp_port, show=True)
        try:
            await _wait_for(mock_open)
            assert server.running
        finally:
            await stop_server(server)


def test_open_browser_logs_failure(caplog: pytest.LogCaptureFixture) -> None:
    """open_browser should log instead of raising."""
    with patch("beat_overlay.http_server.webbrowser.open", side_effect=webbrowser.Error("x")):
        open_browser("http://127.0.0.1:1/")
    assert "Unable to open a browser" in caplog.text

    caplog.clear()
    with patch("beat_overlay.http_server.webbrowser.open", return_value=False):
        open_browser("http://127.0.0.1:1/")
    assert "No browser available" in caplog.text
