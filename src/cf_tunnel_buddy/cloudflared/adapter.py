"""Invocation of the cloudflared binary."""

import subprocess

from ..common.exceptions import AuthError, BinaryNotFoundError, ExternalToolError
from ..common.logging import get_logger
from ..tunnels.models import ExternalTunnelDescriptor, TunnelRecord
from .parser import (
    extract_tunnel_id,
    parse_tunnel_list,
    parse_version,
    requires_login,
)

logger = get_logger(__name__)

INSTALL_DOCS_URL = (
    "https://developers.cloudflare.com/cloudflare-one/connections/"
    "connect-apps/install-and-setup/installation"
)


class CloudflaredAdapter:
    """Runs cloudflared subcommands and turns their results into Python values.

    No timeouts are applied: a hanging cloudflared hangs the caller.
    """

    def __init__(self, binary: str = "cloudflared"):
        """Initialize adapter.

        Args:
            binary: cloudflared executable name or path
        """
        self.binary = binary

    def _command(self, *args: str) -> list[str]:
        return [self.binary, *args]

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a subcommand capturing its output.

        Raises:
            ExternalToolError: If the binary cannot be executed
        """
        command = self._command(*args)
        logger.debug("Running cloudflared", command=command)
        try:
            return subprocess.run(command, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise BinaryNotFoundError(
                f"{self.binary} is not installed", command=command
            ) from e
        except OSError as e:
            raise ExternalToolError(
                f"Failed to run {self.binary}: {e}", command=command
            ) from e

    def _run_checked(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a subcommand and raise on non-zero exit.

        Raises:
            ExternalToolError: If the binary fails or exits non-zero
        """
        result = self._run(*args)
        if result.returncode != 0:
            message = (result.stderr or result.stdout or "").strip()
            raise ExternalToolError(
                message or f"{self.binary} exited with code {result.returncode}",
                command=self._command(*args),
                returncode=result.returncode,
            )
        return result

    def is_installed(self) -> bool:
        """Check whether cloudflared can be executed."""
        try:
            return self._run("--version").returncode == 0
        except ExternalToolError:
            return False

    def version(self) -> str | None:
        """Get the installed cloudflared version, or None if unavailable."""
        try:
            result = self._run_checked("--version")
        except ExternalToolError:
            return None
        return parse_version(result.stdout or result.stderr)

    def is_authenticated(self) -> bool:
        """Check whether cloudflared holds a valid login certificate.

        Any failure to list tunnels counts as not authenticated.
        """
        try:
            result = self._run("tunnel", "list")
        except ExternalToolError:
            return False

        if requires_login(result.stdout) or requires_login(result.stderr):
            return False
        return result.returncode == 0

    def ensure_authenticated(self) -> None:
        """Make sure cloudflared is installed and logged in.

        Starts the interactive login when no valid login is found.

        Raises:
            BinaryNotFoundError: If cloudflared is not installed
            AuthError: If the login fails
        """
        if not self.is_installed():
            raise BinaryNotFoundError(
                f"{self.binary} is not installed. Please install it first: "
                f"{INSTALL_DOCS_URL}"
            )

        if not self.is_authenticated():
            logger.info("Not authenticated, starting cloudflared login")
            self.login()

    def login(self) -> None:
        """Run the interactive browser login on the controlling terminal.

        Raises:
            AuthError: If the login process fails or exits non-zero
        """
        command = self._command("tunnel", "login")
        try:
            result = subprocess.run(command, check=False)
        except OSError as e:
            raise AuthError(f"Authentication failed: {e}") from e

        if result.returncode != 0:
            raise AuthError(
                f"Authentication failed: {self.binary} exited with code "
                f"{result.returncode}"
            )
        logger.info("Authenticated with Cloudflare")

    def create(self, name: str) -> str | None:
        """Create a named tunnel.

        Args:
            name: Tunnel name

        Returns:
            Tunnel UUID parsed from the output, or None if none was printed
        """
        result = self._run_checked("tunnel", "create", name)
        tunnel_id = extract_tunnel_id(result.stdout)
        if tunnel_id is None:
            logger.warning("No tunnel ID in create output", name=name)
        logger.info("Tunnel created", name=name, tunnel_id=tunnel_id)
        return tunnel_id

    def delete(self, name: str) -> None:
        """Delete a named tunnel."""
        self._run_checked("tunnel", "delete", name)
        logger.info("Tunnel deleted", name=name)

    def route_dns(self, name: str, hostname: str) -> None:
        """Point ``hostname`` at the tunnel with a DNS route."""
        self._run_checked("tunnel", "route", "dns", name, hostname)
        logger.info("DNS route added", name=name, hostname=hostname)

    def build_run_args(self, record: TunnelRecord) -> list[str]:
        """Build the ``tunnel run`` command line for a record.

        HTTPS origins get ``--no-tls-verify`` so self-signed origin
        certificates are accepted. This weakens verification of the origin.

        Args:
            record: Tunnel to run

        Returns:
            Full argument vector including the binary
        """
        args = ["tunnel", "run"]
        if record.url:
            args.extend(["--url", record.url])
            if record.url.startswith("https://"):
                args.append("--no-tls-verify")
        args.append(record.name)
        return self._command(*args)

    def run(self, record: TunnelRecord, background: bool = True) -> subprocess.Popen:
        """Spawn ``cloudflared tunnel run`` for a record.

        Args:
            record: Tunnel to run
            background: Detach the child into its own session with output
                discarded; otherwise inherit the terminal's standard streams

        Returns:
            Handle of the spawned process

        Raises:
            ExternalToolError: If the process cannot be spawned
        """
        command = self.build_run_args(record)
        logger.info("Starting cloudflared", command=command, background=background)
        try:
            if background:
                return subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
            return subprocess.Popen(command)
        except FileNotFoundError as e:
            raise BinaryNotFoundError(
                f"{self.binary} is not installed", command=command
            ) from e
        except OSError as e:
            raise ExternalToolError(
                f"Failed to start {self.binary}: {e}", command=command
            ) from e

    def list_text(self) -> str:
        """Return the raw ``tunnel list`` output for display."""
        try:
            return self._run_checked("tunnel", "list").stdout
        except ExternalToolError as e:
            raise ExternalToolError(
                "Failed to list tunnels from Cloudflare",
                command=e.command,
                returncode=e.returncode,
            ) from e

    def info(self, name: str) -> str | None:
        """Return the raw ``tunnel info`` output, or None if unavailable."""
        try:
            return self._run_checked("tunnel", "info", name).stdout
        except ExternalToolError:
            return None

    def parse_list(self) -> list[ExternalTunnelDescriptor]:
        """List externally known tunnels as descriptors.

        Returns:
            Parsed descriptors; empty on any failure
        """
        try:
            output = self._run_checked("tunnel", "list").stdout
        except ExternalToolError as e:
            logger.warning("Failed to parse Cloudflare tunnels", error=str(e))
            return []
        return parse_tunnel_list(output)
