"""Exceptions raised by the overlay server."""

from __future__ import annotations


class OverlayError(Exception):
    """Base class for overlay server errors."""


class BindError(OverlayError):
    """The HTTP listener could not be bound to the requested port."""

    def __init__(self, port: object, reason: str) -> None:
        """Initialize with the offending port and the underlying reason."""
        super().__init__(f"Unable to bind overlay server to port {port}: {reason}")
        self.port = port


class ResourceNotFound(OverlayError):
    """An overridden template or stylesheet file is missing or unreadable."""

    def __init__(self, path: object) -> None:
        """Initialize with the path that could not be used."""
        super().__init__(f"Resource not found or unreadable: {path}")
        self.path = path


class RenderError(OverlayError):
    """A template could not be rendered for a single request."""


class MissingResourceError(RenderError):
    """The resource backing a renderer could not be read at render time."""

    def __init__(self, name: str, reason: object = None) -> None:
        """Initialize with the resource name."""
        message = f"Missing resource: {name}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.name = name


class TemplateRenderError(RenderError):
    """The template itself failed to parse or evaluate."""

    def __init__(self, name: str, reason: object) -> None:
        """Initialize with the template name and the engine's complaint."""
        super().__init__(f"Template error in {name}: {reason}")
        self.name = name


class UpstreamUnavailable(OverlayError):
    """The device registry or metadata cache could not answer."""
