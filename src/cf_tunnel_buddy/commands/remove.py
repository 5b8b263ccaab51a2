"""Remove a tunnel locally and from Cloudflare."""

from .. import ui
from ..common.exceptions import NotFoundError
from ..tunnels.models import TunnelSource
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext


def remove_command(ctx: CommandContext, name: str | None = None) -> NavResult | None:
    """Remove a tunnel after confirmation.

    Local tunnels are stopped, deleted from Cloudflare and dropped from the
    record store. Tunnels only known to Cloudflare are deleted there.

    Args:
        ctx: Command context
        name: Tunnel to remove; prompts when omitted

    Returns:
        ``BACK``/``CANCEL`` if a prompt was left, otherwise None

    Raises:
        NotFoundError: If ``name`` is neither local nor external
    """
    with ui.spinner("Loading tunnels..."):
        views = ctx.manager.merged_views()

    if not views:
        ui.info("No tunnels found.")
        return None

    if name is None:
        selected = ctx.prompter.select(
            "Select tunnel to remove:",
            [(view.name, view.label) for view in views],
        )
        if not isinstance(selected, Proceed):
            return selected
        name = selected.value

    tunnel = next((view for view in views if view.name == name), None)
    if tunnel is None:
        raise NotFoundError(f"Tunnel '{name}' not found")

    ui.blank()
    ui.warning("This will remove the following tunnel:")
    ui.field("Name", tunnel.name)
    ui.field("ID", tunnel.id)
    ui.field("URL", tunnel.url)
    ui.field("Hostname", tunnel.hostname)
    ui.field(
        "Source", "Local" if tunnel.source == TunnelSource.LOCAL else "External"
    )
    ui.blank()

    proceed = ctx.prompter.confirm(
        f"Are you sure you want to remove tunnel '{name}'?", default=False
    )
    if not isinstance(proceed, Proceed):
        return proceed
    if not proceed.value:
        ui.info("Removal cancelled")
        return None

    if tunnel.source == TunnelSource.EXTERNAL:
        with ui.spinner(f"Deleting tunnel '{name}' from Cloudflare..."):
            ctx.manager.delete_external(name)
        ui.success(f"Tunnel '{name}' deleted from Cloudflare")
        return None

    with ui.spinner(f"Removing tunnel '{name}'..."):
        report = ctx.manager.remove_tunnel(name)

    if report.stopped:
        ui.success("Tunnel stopped")
    if report.deleted_external:
        ui.success("Tunnel deleted from Cloudflare")
    for message in report.warnings:
        ui.warning(message)
    ui.success(f"Tunnel '{name}' removed successfully")
    return None
