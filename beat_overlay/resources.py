"""Resolution of template and stylesheet resources."""

from __future__ import annotations

import logging
import os
from importlib import resources
from pathlib import Path

from .constants import TEMPLATES_DIR, TEMPLATES_PACKAGE
from .errors import MissingResourceError, ResourceNotFound
from .models import BundledResource, FileResource, ResourceRef

logger = logging.getLogger(__name__)


def resolve_resource(override: str | os.PathLike[str] | None, default_name: str) -> ResourceRef:
    """Pick the user-supplied file if there is one, otherwise the bundled default.

    An override must name an existing, readable file right now; otherwise
    ResourceNotFound is raised so that startup fails before anything is bound.
    """
    if override is None or override == "":
        return BundledResource(name=default_name)
    path = Path(override).expanduser().resolve()
    if not path.is_file() or not os.access(path, os.R_OK):
        raise ResourceNotFound(path)
    logger.debug("Using %s instead of bundled %s", path, default_name)
    return FileResource(path=path)


def read_resource(ref: ResourceRef) -> str:
    """Return the current contents of a resource."""
    try:
        if isinstance(ref, FileResource):
            return ref.path.read_text(encoding="utf-8")
        return (
            resources.files(TEMPLATES_PACKAGE)
            .joinpath(TEMPLATES_DIR)
            .joinpath(ref.name)
            .read_text(encoding="utf-8")
        )
    except (OSError, UnicodeDecodeError) as exc:
        raise MissingResourceError(ref.name, exc) from exc
