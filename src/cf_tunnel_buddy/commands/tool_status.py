"""Report cloudflared installation, login state and remote tunnels."""

from .. import ui
from ..cloudflared.adapter import INSTALL_DOCS_URL
from .base import CommandContext


def tool_status_command(ctx: CommandContext) -> None:
    adapter = ctx.adapter

    with ui.spinner("Checking cloudflared..."):
        installed = adapter.is_installed()
    if not installed:
        ui.error(f"{adapter.binary} is not installed")
        ui.hint(f"Install it from: {INSTALL_DOCS_URL}")
        return

    version = adapter.version()
    ui.success(f"{adapter.binary} is installed")
    ui.field("Version", version or "unknown")

    with ui.spinner("Checking authentication..."):
        authenticated = adapter.is_authenticated()
    if not authenticated:
        ui.warning("Not authenticated with Cloudflare")
        ui.hint(f"Log in with: {adapter.binary} tunnel login")
        return
    ui.success("Authenticated with Cloudflare")

    with ui.spinner("Fetching tunnels..."):
        tunnels = adapter.parse_list()

    ui.blank()
    if not tunnels:
        ui.info("No tunnels found in Cloudflare.")
        return

    rows = [
        [
            t.name,
            ui.CONNECTED if t.is_connected else ui.DISCONNECTED,
            t.connections or "-",
            t.created,
        ]
        for t in tunnels
    ]
    ui.console.print(ui.table(["Name", "Status", "Connections", "Created"], rows))
    connected = sum(1 for t in tunnels if t.is_connected)
    ui.blank()
    ui.console.print(f"Connected: {connected}/{len(tunnels)}")
