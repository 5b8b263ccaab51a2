"""Multi-step interactive wizards with back/cancel navigation."""

from .engine import Step, Wizard
from .forms import AddTunnelForm, build_add_tunnel_wizard
from .navigation import BACK, CANCEL, Back, Cancel, NavResult, Proceed, is_navigation
from .prompts import Prompter

__all__ = [
    "Proceed",
    "Back",
    "Cancel",
    "BACK",
    "CANCEL",
    "NavResult",
    "is_navigation",
    "Step",
    "Wizard",
    "Prompter",
    "AddTunnelForm",
    "build_add_tunnel_wizard",
]
