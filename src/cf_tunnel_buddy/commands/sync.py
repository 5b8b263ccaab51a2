"""Import tunnels that exist in Cloudflare but not in the local configuration."""

from .. import ui
from ..wizard.navigation import NavResult, Proceed
from .base import CommandContext

NONE_VALUE = "__none__"


def sync_command(ctx: CommandContext) -> NavResult | None:
    """Offer to import external tunnels missing locally.

    Returns:
        ``BACK``/``CANCEL`` if a prompt was left, otherwise None
    """
    with ui.spinner("Checking Cloudflare for tunnels..."):
        local, external = ctx.manager.load_views()

    local_names = {record.name for record in local}
    missing = [t for t in external if t.name not in local_names]

    if not missing:
        ui.success("All tunnels are in sync.")
        return None

    ui.info(f"Found {ui.plural(len(missing), 'tunnel')} not in local configuration:")
    for tunnel in missing:
        ui.console.print(f"  • {tunnel.name} [dim]({tunnel.id})[/dim]")
    ui.blank()

    import_all = ctx.prompter.confirm("Import all tunnels?", default=True)
    if not isinstance(import_all, Proceed):
        return import_all

    if import_all.value:
        selected = missing
    else:
        choices = [(t.name, t.name) for t in missing]
        choices.append((NONE_VALUE, "None - cancel import"))
        picked = ctx.prompter.select("Select tunnel to import:", choices)
        if not isinstance(picked, Proceed):
            return picked
        if picked.value == NONE_VALUE:
            ui.info("Import cancelled")
            return None
        selected = [t for t in missing if t.name == picked.value]

    imported = ctx.manager.import_external(selected)
    for record in imported:
        ui.success(f"Imported '{record.name}'")

    ui.blank()
    ui.success(f"Imported {ui.plural(len(imported), 'tunnel')}")
    ui.hint("Imported tunnels have no service URL. Set one with: cf-tunnel-buddy edit")
    return None
