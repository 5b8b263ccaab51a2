"""cloudflared integration: command adapter and output parsers."""

from .adapter import INSTALL_DOCS_URL, CloudflaredAdapter
from .parser import (
    extract_tunnel_id,
    is_connected,
    parse_tunnel_list,
    parse_version,
    requires_login,
)

__all__ = [
    "CloudflaredAdapter",
    "INSTALL_DOCS_URL",
    "parse_tunnel_list",
    "extract_tunnel_id",
    "parse_version",
    "is_connected",
    "requires_login",
]
