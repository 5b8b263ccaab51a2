"""Common utilities and shared functionality."""

from .exceptions import (
    AlreadyRunningError,
    AuthError,
    BinaryNotFoundError,
    ConfigurationError,
    DuplicateNameError,
    ExternalToolError,
    NotFoundError,
    NotRunningError,
    TunnelBuddyError,
    ValidationError,
)
from .logging import get_logger, setup_logging
from .validation import (
    MAX_PORT,
    MIN_PORT,
    prompt_validator,
    validate_hostname,
    validate_port,
    validate_tunnel_name,
    validate_url,
)

__all__ = [
    # Exceptions
    "TunnelBuddyError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "DuplicateNameError",
    "AlreadyRunningError",
    "NotRunningError",
    "ExternalToolError",
    "BinaryNotFoundError",
    "AuthError",
    # Logging
    "get_logger",
    "setup_logging",
    # Validation
    "validate_tunnel_name",
    "validate_url",
    "validate_hostname",
    "validate_port",
    "prompt_validator",
    "MIN_PORT",
    "MAX_PORT",
]
