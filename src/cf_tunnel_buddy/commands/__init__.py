"""Command handlers, one per user-facing action."""

from .add import add_command
from .base import CommandContext
from .edit import edit_command
from .list import list_command
from .remove import remove_command
from .reset import reset_command
from .start import start_command
from .status import status_command
from .stop import stop_command
from .sync import sync_command
from .tool_status import tool_status_command

__all__ = [
    "CommandContext",
    "add_command",
    "edit_command",
    "list_command",
    "remove_command",
    "reset_command",
    "start_command",
    "status_command",
    "stop_command",
    "sync_command",
    "tool_status_command",
]
