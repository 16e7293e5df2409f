"""Jinja2 rendering of the overlay page and stylesheet."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from jinja2 import BaseLoader, Environment

from .errors import MissingResourceError, TemplateRenderError
from .models import FileResource, ResourceRef
from .resources import read_resource


class ResourceLoader(BaseLoader):
    """Jinja2 loader serving a single resolved resource.

    File-backed resources are re-read whenever their modification time
    changes, so an overridden template can be edited while the server runs.
    """

    def __init__(self, resource: ResourceRef) -> None:
        """Initialize the loader for one resource."""
        self.resource = resource

    def _mtime(self) -> float | None:
        if not isinstance(self.resource, FileResource):
            return None
        try:
            return self.resource.path.stat().st_mtime
        except OSError:
            return None

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, Callable[[], bool]]:
        """Return the template source, its filename and an up-to-date check."""
        mtime = self._mtime()
        source = read_resource(self.resource)
        if isinstance(self.resource, FileResource):
            filename: str | None = str(self.resource.path)

            def uptodate() -> bool:
                return mtime is not None and self._mtime() == mtime

        else:
            filename = None

            def uptodate() -> bool:
                return True

        return source, filename, uptodate


class TemplateRenderer:
    """Renders one resource with Jinja2 and knows the content type to serve it as."""

    def __init__(
        self, resource: ResourceRef, content_type: str, *, autoescape: bool = False
    ) -> None:
        """Initialize the renderer; the resource is fixed for its lifetime.

        Escaping follows the role of the renderer, not the file name, so an
        HTML page is escaped whatever its override file is called.
        """
        self.resource = resource
        self.content_type = content_type
        self.environment = Environment(
            loader=ResourceLoader(resource),
            autoescape=autoescape,
            auto_reload=True,
        )

    def render(self, context: dict[str, Any] | None = None) -> str:
        """Render the resource with the given parameters.

        Raises MissingResourceError if the resource can no longer be read and
        TemplateRenderError if the template fails to parse or evaluate.
        """
        name = self.resource.name
        try:
            template = self.environment.get_template(name)
            return template.render(context or {})
        except MissingResourceError:
            raise
        except Exception as exc:
            raise TemplateRenderError(name, exc) from exc
