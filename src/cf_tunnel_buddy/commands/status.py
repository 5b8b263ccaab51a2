"""Show the status of one or all tunnels."""

from .. import ui
from ..common.exceptions import ExternalToolError, NotFoundError
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext

SHOW_ALL_VALUE = "__all__"
OVERVIEW_LIMIT = 5


def status_command(ctx: CommandContext, name: str | None = None) -> NavResult | None:
    """Show tunnel status.

    With a name, shows that tunnel's details. Without one, shows an overview
    when there are few tunnels and otherwise asks which tunnel to inspect.

    Args:
        ctx: Command context
        name: Tunnel to inspect

    Returns:
        ``BACK``/``CANCEL`` if the selection was left, otherwise None
    """
    if name is not None:
        show_tunnel_status(ctx, name)
        return None

    records = ctx.store.load()
    if not records:
        ui.info("No tunnels configured.")
        return None

    if len(records) <= OVERVIEW_LIMIT:
        show_overview(ctx)
        return None

    choices = [(SHOW_ALL_VALUE, "Show all tunnels")]
    choices.extend((r.name, r.name) for r in records)
    selected = ctx.prompter.select("Select tunnel to check:", choices)
    if not isinstance(selected, Proceed):
        return selected

    if selected.value == SHOW_ALL_VALUE:
        show_overview(ctx)
    else:
        show_tunnel_status(ctx, selected.value)
    return None


def show_tunnel_status(ctx: CommandContext, name: str) -> None:
    """Print the details of one local tunnel.

    Raises:
        NotFoundError: If no record has that name
    """
    record = ctx.store.get(name)
    if record is None:
        raise NotFoundError(f"Tunnel '{name}' not found")

    ui.console.print(f"[bold]Tunnel: {name}[/bold]")
    ui.console.print(
        f"  [dim]Local Status:[/dim] {ui.running_status(ctx.supervisor.is_running(name))}"
    )
    ui.field("URL", record.url)
    ui.field("Hostname", record.hostname)
    ui.field("Created", record.created_at)

    with ui.spinner("Fetching Cloudflare status..."):
        info = ctx.adapter.info(name)

    ui.blank()
    if info:
        ui.console.print("[bold]Cloudflare Status:[/bold]")
        ui.console.print(info, markup=False, highlight=False)
    else:
        ui.warning("Not found in Cloudflare")


def show_overview(ctx: CommandContext) -> None:
    """Print a table of all local tunnels followed by the Cloudflare listing."""
    records = ctx.store.load()
    rows = [
        [
            r.name,
            ui.running_status(ctx.supervisor.is_running(r.name)),
            r.url or "-",
            r.hostname or "-",
        ]
        for r in records
    ]
    ui.console.print("[bold]Tunnel Status Overview[/bold]")
    ui.console.print(ui.table(["Name", "Local", "URL", "Hostname"], rows))

    ui.blank()
    ui.console.print("[bold]Cloudflare Tunnels:[/bold]")
    try:
        with ui.spinner("Fetching Cloudflare tunnels..."):
            output = ctx.adapter.list_text()
    except ExternalToolError as e:
        ui.warning(str(e))
        return
    ui.console.print(output, markup=False, highlight=False)
