"""Delete local configuration: tunnel records only, or the whole directory."""

from .. import ui
from ..config import ResetScope, reset_config
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext

CONFIRM_TOKEN = "RESET"
CANCEL_SCOPE = "cancel"

SCOPE_CHOICES = [
    (ResetScope.ALL, "Everything (complete reset)"),
    (ResetScope.TUNNELS, "Tunnel configurations only"),
    (CANCEL_SCOPE, "Cancel"),
]


def _confirm_token(value: str) -> bool | str:
    if value.strip().upper() == CONFIRM_TOKEN:
        return True
    return f"Please type {CONFIRM_TOKEN} to confirm"


def reset_command(
    ctx: CommandContext,
    scope: ResetScope | None = None,
    force: bool = False,
) -> NavResult | None:
    """Reset local configuration.

    Running tunnels are stopped first. Resetting everything asks for the
    word ``RESET`` to be typed; resetting tunnels asks a yes/no question.

    Args:
        ctx: Command context
        scope: What to delete; asked interactively when None unless ``force``
        force: Skip confirmation; resets everything when ``scope`` is None

    Returns:
        ``BACK``/``CANCEL`` if a prompt was left, otherwise None
    """
    settings = ctx.settings
    if not settings.config_dir.exists():
        ui.info("No configuration found to reset.")
        return None

    running = ctx.supervisor.list_running()
    if running:
        ui.warning(f"{ui.plural(len(running), 'tunnel')} currently running.")
        stop_all = ctx.prompter.confirm(
            "Stop all running tunnels before reset?", default=True
        )
        if not isinstance(stop_all, Proceed):
            return stop_all
        if not stop_all.value:
            ui.info("Reset cancelled. Please stop all tunnels before resetting.")
            return None
        for name, error in ctx.supervisor.stop_all().items():
            if error is None:
                ui.success(f"Stopped tunnel '{name}'")
            else:
                ui.error(f"Failed to stop tunnel '{name}': {error}")

    if scope is None:
        if force:
            scope = ResetScope.ALL
        else:
            selected = ctx.prompter.select(
                "What would you like to reset?", SCOPE_CHOICES, navigation=False
            )
            if not isinstance(selected, Proceed):
                return selected
            if selected.value == CANCEL_SCOPE:
                ui.info("Reset cancelled")
                return None
            scope = selected.value

    ui.blank()
    ui.warning("The following will be deleted:")
    if scope == ResetScope.ALL:
        ui.console.print(f"  [red]•[/red] Configuration directory: {settings.config_dir}")
        ui.console.print("  [red]•[/red] All tunnel configurations")
        ui.console.print(f"  [red]•[/red] Stored credentials: {settings.credentials_file}")
        ui.console.print("  [red]•[/red] Any cached data")
    else:
        ui.console.print(f"  [red]•[/red] Tunnel configurations: {settings.tunnels_file}")
    ui.blank()

    if not force:
        if scope == ResetScope.ALL:
            typed = ctx.prompter.text(
                f'Type "{CONFIRM_TOKEN}" to confirm complete reset:',
                validate=_confirm_token,
            )
            confirmed = isinstance(typed, Proceed) and _confirm_token(typed.value) is True
        else:
            answer = ctx.prompter.confirm(
                "Are you sure you want to continue?", default=False
            )
            if not isinstance(answer, Proceed):
                return answer
            confirmed = answer.value
        if not confirmed:
            ui.info("Reset cancelled")
            return None

    with ui.spinner("Resetting configuration..."):
        reset_config(settings, scope)
    ui.success("Configuration reset successfully")

    ui.blank()
    if scope == ResetScope.ALL:
        ui.info("All configuration has been removed.")
        ui.hint("Run cf-tunnel-buddy add to create a new tunnel.")
    else:
        ui.info("Tunnel configurations have been removed.")
    return None
