"""Parsers for cloudflared's human-readable output.

cloudflared does not commit to a stable text format, so everything here is
best-effort: unexpected output yields an empty or None result, never an
exception.

``tunnel list`` prints a few informational lines followed by a table::

    You can obtain more detailed information for each tunnel with `cloudflared tunnel info <name/uuid>`
    ID                                   NAME      CREATED              CONNECTIONS
    6ff42ae2-765d-4adf-8112-31c55c1551ef my-app    2024-01-01T10:00:00Z 2xdfw01, 2xlhr01

Rows are split on runs of whitespace into ``id``, ``name``, ``created`` and
the remainder joined back as ``connections``.
"""

import re

from ..common.logging import get_logger
from ..tunnels.models import ExternalTunnelDescriptor

logger = get_logger(__name__)

HEADER_MARKERS = ("ID", "NAME", "CREATED")
LOGIN_REQUIRED_MARKER = "Please login"

_TUNNEL_ID_RE = re.compile(r"([a-f0-9-]{36})")
_VERSION_RE = re.compile(r"version\s+(\S+)", re.IGNORECASE)
# "2xdfw01" style tokens: connection count followed by the edge location
_CONNECTION_RE = re.compile(r"\d+x\w+", re.IGNORECASE)


def is_connected(connections: str) -> bool:
    """Guess whether a tunnel has live connections from its connections column.

    Args:
        connections: Raw CONNECTIONS column text

    Returns:
        True if the text contains a ``<count>x<location>`` token
    """
    return bool(connections) and _CONNECTION_RE.search(connections) is not None


def parse_tunnel_list(output: str) -> list[ExternalTunnelDescriptor]:
    """Parse ``cloudflared tunnel list`` output.

    Args:
        output: Raw stdout of the list command

    Returns:
        One descriptor per data row; empty if no header row is found
    """
    tunnels: list[ExternalTunnelDescriptor] = []
    data_started = False

    for line in output.splitlines():
        if all(marker in line for marker in HEADER_MARKERS):
            data_started = True
            continue

        if not data_started or not line.strip():
            continue

        parts = line.split()
        if len(parts) < 3:
            logger.debug("Skipping malformed tunnel list row", row=line)
            continue

        tunnel_id, name, created, *connection_parts = parts
        connections = " ".join(connection_parts)
        tunnels.append(
            ExternalTunnelDescriptor(
                id=tunnel_id,
                name=name,
                created=created,
                connections=connections,
                is_connected=is_connected(connections),
            )
        )

    if not data_started and output.strip():
        logger.debug("No header row found in tunnel list output")

    return tunnels


def extract_tunnel_id(output: str) -> str | None:
    """Extract the UUID printed by ``cloudflared tunnel create``.

    Args:
        output: Raw stdout of the create command

    Returns:
        The first UUID-shaped token, or None
    """
    match = _TUNNEL_ID_RE.search(output)
    return match.group(1) if match else None


def parse_version(output: str) -> str | None:
    """Extract the version from ``cloudflared --version`` output.

    Args:
        output: Raw stdout of the version probe

    Returns:
        Version token such as ``2024.1.5``, the first line if no token is
        found, or None for empty output
    """
    text = output.strip()
    if not text:
        return None

    match = _VERSION_RE.search(text)
    if match:
        return match.group(1)
    return text.splitlines()[0]


def requires_login(output: str) -> bool:
    """Return True if the output says the user must log in first."""
    return LOGIN_REQUIRED_MARKER in output
