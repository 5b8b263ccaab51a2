"""Custom exceptions for cf-tunnel-buddy."""


class TunnelBuddyError(Exception):
    """Base exception for all cf-tunnel-buddy errors."""

    pass


class ValidationError(TunnelBuddyError, ValueError):
    """Raised when user input fails validation."""

    pass


class ConfigurationError(TunnelBuddyError):
    """Raised when the configuration directory cannot be prepared."""

    pass


class NotFoundError(TunnelBuddyError):
    """Raised when a named tunnel record or process does not exist."""

    pass


class DuplicateNameError(TunnelBuddyError):
    """Raised when adding a tunnel whose name is already taken."""

    pass


class AlreadyRunningError(TunnelBuddyError):
    """Raised when starting a tunnel that already has a running process."""

    pass


class NotRunningError(TunnelBuddyError):
    """Raised when stopping a tunnel that has no running process."""

    pass


class ExternalToolError(TunnelBuddyError):
    """Raised when the cloudflared binary exits non-zero or cannot be invoked."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
    ):
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode


class BinaryNotFoundError(ExternalToolError):
    """Raised when the cloudflared binary is not installed."""

    pass


class AuthError(TunnelBuddyError):
    """Raised when logging in to Cloudflare fails."""

    pass
