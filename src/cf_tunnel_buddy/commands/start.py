"""Start a local tunnel in the background or attached to the terminal."""

from .. import ui
from ..common.exceptions import AlreadyRunningError, NotFoundError
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext


def start_command(
    ctx: CommandContext, name: str | None = None, foreground: bool = False
) -> NavResult | None:
    """Start a tunnel.

    Args:
        ctx: Command context
        name: Tunnel to start; prompts among stopped tunnels when omitted
        foreground: Stay attached until the tunnel exits

    Returns:
        ``BACK``/``CANCEL`` if the selection was left, otherwise None

    Raises:
        NotFoundError: If ``name`` has no local record
        AlreadyRunningError: If ``name`` is already running
    """
    local, external = ctx.manager.load_views()
    local_names = {record.name for record in local}
    external_only = [t for t in external if t.name not in local_names]

    if not local:
        if external_only:
            ui.info("No local tunnels to start.")
            ui.blank()
            ui.console.print(
                f"Found {len(external_only)} external tunnel(s) that need to be "
                "imported first:"
            )
            for tunnel in external_only:
                ui.console.print(f"  • {tunnel.name}")
            ui.blank()
            ui.hint('Use the "sync" command to import external tunnels before starting.')
        else:
            ui.info("No tunnels found.")
            ui.hint("Create one first with: cf-tunnel-buddy add")
        return None

    if name is None:
        stopped = [r for r in local if not ctx.supervisor.is_running(r.name)]
        if not stopped:
            ui.info("All tunnels are already running.")
            return None

        choices = []
        for record in stopped:
            title = f"{record.name} ({record.url or 'no url'})"
            if record.hostname:
                title += f" → {record.hostname}"
            choices.append((record.name, title))

        selected = ctx.prompter.select("Select tunnel to start:", choices)
        if not isinstance(selected, Proceed):
            return selected
        name = selected.value

    record = next((r for r in local if r.name == name), None)
    if record is None:
        if any(t.name == name for t in external_only):
            raise NotFoundError(
                f"Tunnel '{name}' exists only in Cloudflare. Import it with "
                "sync before starting it"
            )
        raise NotFoundError(f"Tunnel '{name}' not found")

    if ctx.supervisor.is_running(name):
        raise AlreadyRunningError(f"Tunnel '{name}' is already running")

    if not record.url:
        ui.warning(
            f"Tunnel '{name}' has no service URL configured; starting without one"
        )

    if foreground:
        ui.info(f"Running tunnel '{name}' in the foreground (Ctrl+C to stop)...")
        if record.hostname:
            ui.field("Public URL", f"https://{record.hostname}")
        returncode = ctx.supervisor.run_foreground(name)
        ui.info(f"Tunnel '{name}' exited with code {returncode}")
        return None

    # no spinner: start may open the interactive cloudflared login
    ui.info(f"Starting tunnel '{name}'...")
    handle = ctx.supervisor.start(name)

    ui.success(f"Tunnel '{name}' started (PID {handle.pid})")
    if record.url:
        ui.field("Local URL", record.url)
    if record.hostname:
        ui.field("Public URL", f"https://{record.hostname}")
    return None
