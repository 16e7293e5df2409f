"""Constants for the overlay server."""

CONF_PORT = "port"
CONF_TEMPLATE = "template"
CONF_CSS = "css"
CONF_SHOW = "show"
CONF_SNAPSHOT = "snapshot"
CONF_UPSTREAM_TIMEOUT = "upstream_timeout"

DEFAULT_PORT = 17081
DEFAULT_SHOW = False
DEFAULT_UPSTREAM_TIMEOUT = 2.0  # seconds

# Environment variables read by the command line launcher
ENV_PREFIX = "OVERLAY_"
ENV_LOG_LEVEL = "LOG_LEVEL"

# Bundled resources, shipped in the package's templates directory
TEMPLATES_PACKAGE = "beat_overlay"
TEMPLATES_DIR = "templates"
DEFAULT_TEMPLATE = "overlay.html"
DEFAULT_CSS = "styles.css"

CONTENT_TYPE_HTML = "text/html"
CONTENT_TYPE_PAGE = "text/html; charset=utf-8"
CONTENT_TYPE_CSS = "text/css"

NOT_FOUND_BODY = "<p>Page not found.</p>"

LABEL_NO_TRACK = "No Track"
LABEL_UNKNOWN_SLOT = "Unknown Slot"
LABEL_UNKNOWN_TYPE = "Unknown"

# Packed ARGB colors carry an alpha byte we never render
RGB_MASK = 0xFFFFFF

# rekordbox track color palette: id -> (name, rgb). Id 0 means no color.
NO_COLOR_ID = 0
REKORDBOX_COLORS = {
    0: ("No Color", 0x000000),
    1: ("Pink", 0xF870F8),
    2: ("Red", 0xF00000),
    3: ("Orange", 0xF8A030),
    4: ("Yellow", 0xF8E331),
    5: ("Green", 0x10B176),
    6: ("Aqua", 0x22FFFF),
    7: ("Blue", 0x1022FF),
    8: ("Purple", 0x9808F8),
}
