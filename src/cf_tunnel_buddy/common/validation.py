"""Input validation for tunnel names, service URLs, hostnames and ports."""

import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from .exceptions import ValidationError

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535

MIN_TUNNEL_NAME_LENGTH = 3
MAX_HOSTNAME_LENGTH = 253

SUPPORTED_URL_SCHEMES = ("http", "https", "tcp", "ssh", "rdp")

_TUNNEL_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")
_HOSTNAME_RE = re.compile(
    r"(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)*"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
)


def validate_tunnel_name(name: str) -> str:
    """Validate a tunnel name.

    Args:
        name: Candidate tunnel name

    Returns:
        The name, unchanged

    Raises:
        ValidationError: If the name is empty, too short or has invalid characters
    """
    if not name or not isinstance(name, str):
        raise ValidationError("Tunnel name is required")

    if len(name) < MIN_TUNNEL_NAME_LENGTH:
        raise ValidationError(
            f"Tunnel name must be at least {MIN_TUNNEL_NAME_LENGTH} characters long"
        )

    if not _TUNNEL_NAME_RE.fullmatch(name):
        raise ValidationError(
            "Tunnel name can only contain letters, numbers, hyphens, and underscores"
        )

    return name


def validate_url(url: str) -> str:
    """Validate a service URL the tunnel forwards traffic to.

    Args:
        url: Candidate URL such as ``http://localhost:8080`` or ``ssh://host:22``

    Returns:
        The URL, stripped of surrounding whitespace

    Raises:
        ValidationError: If the URL cannot be parsed, has no host or uses an
            unsupported scheme
    """
    if not url or not url.strip():
        raise ValidationError("Invalid URL format")

    url = url.strip()
    if any(char.isspace() for char in url):
        raise ValidationError("Invalid URL format")

    try:
        parsed = urlparse(url)
        # Accessing .port raises for out-of-range or non-numeric ports
        parsed.port
    except ValueError as e:
        raise ValidationError("Invalid URL format") from e

    if not parsed.scheme or not parsed.hostname:
        raise ValidationError("Invalid URL format")

    if parsed.scheme.lower() not in SUPPORTED_URL_SCHEMES:
        raise ValidationError("URL must use http, https, tcp, ssh, or rdp protocol")

    return url


def validate_hostname(hostname: str) -> str:
    """Validate a public DNS hostname.

    Args:
        hostname: Candidate hostname, e.g. ``app.example.com``

    Returns:
        The hostname, unchanged

    Raises:
        ValidationError: If the hostname is empty or malformed
    """
    if not hostname or not isinstance(hostname, str):
        raise ValidationError("Hostname is required")

    if len(hostname) > MAX_HOSTNAME_LENGTH or not _HOSTNAME_RE.fullmatch(hostname):
        raise ValidationError("Invalid hostname format")

    return hostname


def validate_port(port: str | int) -> int:
    """Validate a port number given as text or integer.

    Args:
        port: Port value entered by the user

    Returns:
        The port as an integer

    Raises:
        ValidationError: If the port is not a number in range 1-65535
    """
    try:
        port_num = int(str(port).strip())
    except ValueError as e:
        raise ValidationError("Port must be a number") from e

    if not (MIN_PORT <= port_num <= MAX_PORT):
        raise ValidationError(f"Port must be between {MIN_PORT} and {MAX_PORT}")

    return port_num


def prompt_validator(
    validate: Callable[[str], Any], allow_empty: bool = False
) -> Callable[[str], bool | str]:
    """Adapt a raising validator to the ``True``-or-message protocol of prompts.

    Args:
        validate: Validator raising ValidationError on bad input
        allow_empty: Accept an empty answer without calling the validator

    Returns:
        Callable returning True for valid input or the error message
    """

    def _check(value: str) -> bool | str:
        if allow_empty and not value:
            return True
        try:
            validate(value)
        except ValidationError as e:
            return str(e)
        return True

    return _check
