"""Command line entry point: the interactive menu and direct sub-commands."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from . import __version__, ui
from .commands import (
    CommandContext,
    add_command,
    edit_command,
    list_command,
    remove_command,
    reset_command,
    start_command,
    status_command,
    stop_command,
    sync_command,
    tool_status_command,
)
from .common.exceptions import ConfigurationError, TunnelBuddyError
from .common.logging import get_logger, setup_logging
from .config import ResetScope, Settings
from .wizard.navigation import CANCEL, Back, Cancel

logger = get_logger(__name__)

BANNER = "[bold cyan]☁  Cloudflare Tunnel Buddy[/bold cyan]"
GOODBYE = "Thanks for using Cloudflare Tunnel Buddy!"

MENU_CHOICES = [
    ("add", "Create new tunnel"),
    ("list", "List tunnels"),
    ("start", "Start tunnel"),
    ("stop", "Stop tunnel"),
    ("status", "Tunnel status"),
    ("edit", "Edit tunnel"),
    ("remove", "Remove tunnel"),
    ("sync", "Import tunnels from Cloudflare"),
    ("reset", "Reset configuration"),
    ("exit", "Exit"),
]

MENU_ACTIONS: dict[str, Callable[[CommandContext], Any]] = {
    "add": add_command,
    "list": list_command,
    "start": start_command,
    "stop": stop_command,
    "status": status_command,
    "edit": edit_command,
    "remove": remove_command,
    "sync": sync_command,
    "reset": reset_command,
}


def run_menu(ctx: CommandContext) -> None:
    """Show the top-level menu until the user exits.

    Errors raised by an action are reported and the menu is shown again.
    """
    while True:
        ui.console.clear()
        ui.console.print(BANNER)
        ui.blank()

        choice = ctx.prompter.menu("What would you like to do?", MENU_CHOICES)
        if choice is None or choice == "exit":
            break

        ui.console.clear()
        result = None
        try:
            result = MENU_ACTIONS[choice](ctx)
        except TunnelBuddyError as e:
            ui.error(str(e))
        except KeyboardInterrupt:
            result = CANCEL
        except Exception as e:
            logger.exception("Unexpected error", action=choice)
            ui.error(f"Error: {e}")

        if isinstance(result, Back):
            continue
        if isinstance(result, Cancel):
            ui.info("Operation cancelled")

        ui.blank()
        ctx.prompter.pause()

    ui.blank()
    ui.console.print(GOODBYE)
    running = ctx.supervisor.list_running()
    if running:
        ui.hint(f"{ui.plural(len(running), 'tunnel')} left running in the background.")


def _invoke(handler: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Run a handler for a direct sub-command.

    Raises:
        click.ClickException: If the handler raises a domain error
    """
    ctx = click.get_current_context().find_object(CommandContext)
    try:
        result = handler(ctx, *args, **kwargs)
    except TunnelBuddyError as e:
        raise click.ClickException(str(e)) from e

    if isinstance(result, Cancel):
        ui.info("Operation cancelled")


@click.group(invoke_without_command=True)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Configuration directory (default: ~/.cf-tunnel-buddy)",
)
@click.option(
    "--binary",
    default="cloudflared",
    show_default=True,
    help="cloudflared executable name or path",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose diagnostic output")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write diagnostic logs to this file",
)
@click.version_option(__version__, prog_name="cf-tunnel-buddy")
@click.pass_context
def cli(
    click_ctx: click.Context,
    config_dir: Path | None,
    binary: str,
    verbose: bool,
    log_file: str | None,
) -> None:
    """Cloudflare Tunnel Buddy - manage cloudflared tunnels interactively.

    Run without a command to open the interactive menu.
    """
    setup_logging(level="DEBUG" if verbose else "WARNING", log_file=log_file)

    settings_kwargs: dict[str, Any] = {"binary": binary}
    if config_dir is not None:
        settings_kwargs["config_dir"] = config_dir
    settings = Settings(**settings_kwargs)
    logger.debug("Settings loaded", config_dir=str(settings.config_dir), binary=binary)

    click_ctx.obj = CommandContext.create(settings)

    if click_ctx.invoked_subcommand is None:
        try:
            settings.ensure_config_directory()
        except ConfigurationError as e:
            ui.error(str(e))
            click_ctx.exit(1)
        run_menu(click_ctx.obj)


@cli.command()
@click.argument("name", required=False)
def add(name: str | None) -> None:
    """Create a new tunnel with the step-by-step wizard."""
    _invoke(add_command, name)


@cli.command()
@click.argument("name", required=False)
def create(name: str | None) -> None:
    """Create a new tunnel (alias of add)."""
    _invoke(add_command, name)


@cli.command(name="list")
def list_() -> None:
    """List local and Cloudflare tunnels."""
    _invoke(list_command)


@cli.command()
@click.argument("name", required=False)
@click.option(
    "--foreground", "-f", is_flag=True, help="Stay attached until the tunnel exits"
)
def start(name: str | None, foreground: bool) -> None:
    """Start a tunnel."""
    _invoke(start_command, name, foreground=foreground)


@cli.command()
@click.argument("name", required=False)
def stop(name: str | None) -> None:
    """Stop a running tunnel."""
    _invoke(stop_command, name)


@cli.command()
@click.argument("name", required=False)
def status(name: str | None) -> None:
    """Show tunnel status."""
    _invoke(status_command, name)


@cli.command()
@click.argument("name", required=False)
def edit(name: str | None) -> None:
    """Change a tunnel's service URL or hostname."""
    _invoke(edit_command, name)


@cli.command()
@click.argument("name", required=False)
def remove(name: str | None) -> None:
    """Remove a tunnel."""
    _invoke(remove_command, name)


@cli.command()
def sync() -> None:
    """Import tunnels that exist in Cloudflare but not locally."""
    _invoke(sync_command)


@cli.command()
@click.option("--all", "reset_all", is_flag=True, help="Reset everything")
@click.option("--tunnels-only", is_flag=True, help="Reset tunnel configurations only")
@click.option("--force", is_flag=True, help="Skip confirmation")
def reset(reset_all: bool, tunnels_only: bool, force: bool) -> None:
    """Reset local configuration."""
    if reset_all and tunnels_only:
        raise click.UsageError("--all and --tunnels-only are mutually exclusive")

    scope = None
    if reset_all:
        scope = ResetScope.ALL
    elif tunnels_only:
        scope = ResetScope.TUNNELS
    _invoke(reset_command, scope=scope, force=force)


@cli.command(name="tool-status")
def tool_status() -> None:
    """Check the cloudflared installation and login."""
    _invoke(tool_status_command)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
