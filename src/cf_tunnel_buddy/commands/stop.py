"""Stop a running tunnel."""

from .. import ui
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext


def stop_command(ctx: CommandContext, name: str | None = None) -> NavResult | None:
    running = ctx.supervisor.list_running()

    if name is None:
        if not running:
            ui.info("No tunnels are currently running.")
            return None
        if len(running) == 1:
            name = running[0]
        else:
            selected = ctx.prompter.select(
                "Select tunnel to stop:", [(n, n) for n in running]
            )
            if not isinstance(selected, Proceed):
                return selected
            name = selected.value

    ctx.supervisor.stop(name)
    ui.success(f"Tunnel '{name}' stopped")
    return None
