"""Change the service URL and/or hostname of a local tunnel."""

from .. import ui
from ..common.exceptions import NotFoundError
from ..common.validation import prompt_validator, validate_hostname, validate_url
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext

EDIT_CHOICES = [
    ("url", "Service URL"),
    ("hostname", "Hostname"),
    ("both", "Both URL and Hostname"),
]


def edit_command(ctx: CommandContext, name: str | None = None) -> NavResult | None:
    local, external = ctx.manager.load_views()
    local_names = {record.name for record in local}
    external_only = [t for t in external if t.name not in local_names]

    if not local:
        if external_only:
            ui.info("No local tunnels to edit.")
            ui.blank()
            ui.console.print(
                f"Found {len(external_only)} external tunnel(s) that need to be "
                "imported first:"
            )
            for tunnel in external_only:
                ui.console.print(f"  • {tunnel.name}")
            ui.blank()
            ui.hint('Use the "sync" command to import external tunnels before editing.')
        else:
            ui.info("No tunnels to edit.")
        return None

    if name is None:
        choices = []
        for record in local:
            title = _label(record.name, record.url, record.hostname)
            choices.append((record.name, title))
        selected = ctx.prompter.select("Select tunnel to edit:", choices)
        if not isinstance(selected, Proceed):
            return selected
        name = selected.value
        if external_only:
            ui.hint(
                f"{len(external_only)} external tunnel(s) can be edited after "
                "importing them with sync."
            )

    tunnel = next((record for record in local if record.name == name), None)
    if tunnel is None:
        raise NotFoundError(f"Tunnel '{name}' not found")

    ui.blank()
    ui.info("Current configuration:")
    ui.field("Name", tunnel.name)
    ui.field("URL", tunnel.url)
    ui.field("Hostname", tunnel.hostname)
    ui.blank()

    choice = ctx.prompter.select("What would you like to edit?", EDIT_CHOICES)
    if not isinstance(choice, Proceed):
        return choice

    updates: dict[str, str | None] = {}

    if choice.value in ("url", "both"):
        new_url = ctx.prompter.text(
            "New service URL:",
            default=tunnel.url or "",
            validate=prompt_validator(validate_url),
        )
        if not isinstance(new_url, Proceed):
            return new_url
        updates["url"] = new_url.value

    if choice.value in ("hostname", "both"):
        new_hostname = ctx.prompter.text(
            "New hostname (leave empty to remove):",
            default=tunnel.hostname or "",
            validate=prompt_validator(validate_hostname, allow_empty=True),
        )
        if not isinstance(new_hostname, Proceed):
            return new_hostname
        updates["hostname"] = new_hostname.value or None

    ui.blank()
    ui.info("Changes to apply:")
    changed = False
    if "url" in updates and updates["url"] != tunnel.url:
        ui.console.print(
            f"  [dim]URL:[/dim] [red]{tunnel.url or '(none)'}[/red] → "
            f"[green]{updates['url']}[/green]"
        )
        changed = True
    if "hostname" in updates and updates["hostname"] != tunnel.hostname:
        ui.console.print(
            f"  [dim]Hostname:[/dim] [red]{tunnel.hostname or '(none)'}[/red] → "
            f"[green]{updates['hostname'] or '(none)'}[/green]"
        )
        changed = True
    if not changed:
        ui.hint("  (no changes)")
    ui.blank()

    proceed = ctx.prompter.confirm("Apply these changes?", default=True)
    if not isinstance(proceed, Proceed):
        return proceed
    if not proceed.value:
        ui.info("Edit cancelled")
        return None

    report = ctx.manager.update_tunnel(name, **updates)
    if report.dns_routed:
        ui.success("DNS route updated")
    for message in report.warnings:
        ui.warning(message)
    ui.success(f"Tunnel '{name}' updated successfully")
    return None


def _label(name: str, url: str | None, hostname: str | None) -> str:
    text = f"{name} ({url or 'no url'})"
    if hostname:
        text += f" → {hostname}"
    return text
