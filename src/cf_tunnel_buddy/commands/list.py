"""List local and Cloudflare tunnels in one table."""

from .. import ui
from ..tunnels.models import TunnelSource, merge_tunnels
from .base import CommandContext


def list_command(ctx: CommandContext) -> None:
    with ui.spinner("Loading tunnels..."):
        local, external = ctx.manager.load_views()
    views = merge_tunnels(local, external)

    if not views:
        ui.info("No tunnels found.")
        ui.blank()
        ui.hint("To create a tunnel:")
        ui.console.print("  [cyan]cf-tunnel-buddy add[/cyan]")
        return

    rows = [
        [
            view.name,
            view.url or "-",
            view.hostname or "-",
            ui.running_status(ctx.supervisor.is_running(view.name)),
            "Local" if view.source == TunnelSource.LOCAL else "External",
        ]
        for view in views
    ]
    ui.console.print(ui.table(["Name", "URL", "Hostname", "Status", "Source"], rows))

    external_only = sum(1 for view in views if view.source == TunnelSource.EXTERNAL)
    ui.blank()
    ui.console.print(f"Total: {ui.plural(len(views), 'tunnel')}")
    ui.console.print(f"Local: {len(local)}, External: {external_only}")
