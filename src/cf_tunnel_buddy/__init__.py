"""Cloudflare Tunnel Buddy - interactive management of cloudflared tunnels."""

from .common.exceptions import (
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
from .config import ResetScope, Settings, reset_config
from .tunnels.models import ExternalTunnelDescriptor, TunnelRecord, TunnelView

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "ResetScope",
    "reset_config",
    # Models
    "TunnelRecord",
    "ExternalTunnelDescriptor",
    "TunnelView",
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
]
