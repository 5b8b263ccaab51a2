"""Create a tunnel through the step-by-step wizard."""

from .. import ui
from ..common.exceptions import DuplicateNameError
from ..common.validation import validate_tunnel_name
from ..wizard.forms import build_add_tunnel_wizard
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext


def add_command(ctx: CommandContext, name: str | None = None) -> NavResult | None:
    """Run the create-tunnel wizard and create the tunnel.

    Args:
        ctx: Command context
        name: Tunnel name; skips the name step when given

    Returns:
        ``BACK``/``CANCEL`` if the wizard was left, otherwise None
    """
    existing = ctx.store.names()
    answers = {}
    if name is not None:
        validate_tunnel_name(name)
        if name in existing:
            raise DuplicateNameError(f"Tunnel '{name}' already exists")
        answers["name"] = name

    ui.console.print("[bold]Create a new Cloudflare tunnel[/bold]")
    ui.hint('Use "Go back" to navigate between steps')

    wizard = build_add_tunnel_wizard(
        ctx.prompter, existing_names=existing, include_name=name is None
    )
    result = wizard.run(answers)
    if not isinstance(result, Proceed):
        return result

    values = result.value
    ui.info(f"Creating tunnel '{values['name']}'...")
    record = ctx.manager.create_tunnel(
        values["name"], url=values["url"], hostname=values.get("hostname")
    )

    ui.blank()
    ui.success(f"Tunnel '{record.name}' created successfully!")
    if record.id:
        ui.field("ID", record.id)
    if record.hostname:
        ui.success(f"DNS route added for {record.hostname}")
    ui.blank()
    ui.hint("To start the tunnel, run:")
    ui.console.print(f"  [cyan]cf-tunnel-buddy start {record.name}[/cyan]")
    return None
