"""Terminal output: status lines, tables and spinners rendered with rich."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

RUNNING = "[green]● Running[/green]"
STOPPED = "[dim]○ Stopped[/dim]"
CONNECTED = "[green]● Connected[/green]"
DISCONNECTED = "[dim]○ Disconnected[/dim]"


def info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")


def field(label: str, value: str | None) -> None:
    """Print an indented ``label: value`` line."""
    console.print(f"  [dim]{escape(label)}:[/dim] {escape(value or '-')}")


def hint(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/dim]")


def blank() -> None:
    console.print()


def running_status(running: bool) -> str:
    return RUNNING if running else STOPPED


def table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Table:
    """Build a table; cells are escaped unless they are status markers.

    Args:
        headers: Column headings
        rows: Cell values per row

    Returns:
        Table ready for ``console.print``
    """
    markers = {RUNNING, STOPPED, CONNECTED, DISCONNECTED}
    result = Table(*[f"[cyan]{escape(h)}[/cyan]" for h in headers])
    for row in rows:
        result.add_row(*[cell if cell in markers else escape(cell) for cell in row])
    return result


@contextmanager
def spinner(text: str) -> Iterator[None]:
    """Show a spinner while the block runs."""
    with console.status(escape(text), spinner="dots"):
        yield


def plural(count: int, word: str) -> str:
    """Return ``"1 tunnel"`` / ``"2 tunnels"``."""
    return f"{count} {word}{'' if count == 1 else 's'}"
