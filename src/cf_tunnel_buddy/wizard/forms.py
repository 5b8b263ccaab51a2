"""Step sequence of the "create a tunnel" wizard."""

from collections.abc import Callable, Collection
from typing import Any

from .. import ui
from ..common.exceptions import ValidationError
from ..common.validation import (
    prompt_validator,
    validate_hostname,
    validate_port,
    validate_tunnel_name,
    validate_url,
)
from .engine import Step, Wizard
from .navigation import BACK, CANCEL, Cancel, NavResult, Proceed
from .prompts import Prompter

SERVICE_TYPES = [
    ("http", "HTTP/HTTPS web service"),
    ("tcp", "TCP service (SSH, database, etc.)"),
    ("custom", "Custom URL"),
]
HTTP_PROTOCOLS = [("http", "HTTP"), ("https", "HTTPS")]
TCP_SERVICES = [("ssh", "SSH"), ("rdp", "RDP (Remote Desktop)"), ("tcp", "Generic TCP")]

DEFAULT_HOST = "localhost"
DEFAULT_PORTS = {"http": "80", "https": "443", "ssh": "22", "rdp": "3389", "tcp": "8080"}


def _name_validator(existing_names: Collection[str]) -> Callable[[str], Any]:
    def _validate(name: str) -> str:
        validate_tunnel_name(name)
        if name in existing_names:
            raise ValidationError(f"Tunnel '{name}' already exists")
        return name

    return _validate


class AddTunnelForm:
    """Prompts collecting name, service URL and hostname for a new tunnel."""

    def __init__(self, prompter: Prompter, existing_names: Collection[str] = ()):
        self.prompter = prompter
        self.existing_names = set(existing_names)

    def ask_name(self, answers: dict[str, Any]) -> NavResult:
        return self.prompter.text(
            "Tunnel name:",
            default=answers.get("name") or "",
            validate=prompt_validator(_name_validator(self.existing_names)),
        )

    def ask_service_type(self, answers: dict[str, Any]) -> NavResult:
        return self.prompter.select(
            "Service type:", SERVICE_TYPES, default=answers.get("service_type")
        )

    def ask_service_config(self, answers: dict[str, Any]) -> NavResult:
        """Show the sub-form matching the chosen service type."""
        service_type = answers.get("service_type")
        if service_type == "http":
            return self._host_port_form(
                "Protocol:", HTTP_PROTOCOLS, "Host (e.g., localhost or 127.0.0.1):"
            )
        if service_type == "tcp":
            return self._host_port_form("TCP service type:", TCP_SERVICES, "Host:")
        return self.prompter.text(
            "Service URL:",
            default=answers.get("url") or "",
            validate=prompt_validator(validate_url),
        )

    def _host_port_form(
        self, scheme_message: str, schemes: list[tuple[str, str]], host_message: str
    ) -> NavResult:
        scheme = self.prompter.select(scheme_message, schemes)
        if not isinstance(scheme, Proceed):
            return scheme

        host = self.prompter.text(host_message, default=DEFAULT_HOST)
        if isinstance(host, Cancel):
            return CANCEL

        port = self.prompter.text(
            "Port:",
            default=DEFAULT_PORTS[scheme.value],
            validate=prompt_validator(validate_port),
        )
        if isinstance(port, Cancel):
            return CANCEL

        hostname = host.value or DEFAULT_HOST
        return Proceed(f"{scheme.value}://{hostname}:{validate_port(port.value)}")

    def ask_hostname(self, answers: dict[str, Any]) -> NavResult:
        use_hostname = self.prompter.confirm(
            "Do you want to assign a hostname?", default=True
        )
        if not isinstance(use_hostname, Proceed):
            return use_hostname
        if not use_hostname.value:
            return Proceed(None)

        return self.prompter.text(
            "Hostname (e.g., app.example.com):",
            default=answers.get("hostname") or "",
            validate=prompt_validator(validate_hostname),
        )

    def confirm(self, answers: dict[str, Any]) -> NavResult:
        """Show the collected values; declining returns to the previous step."""
        ui.blank()
        ui.info("Review your tunnel configuration:")
        ui.field("Name", answers.get("name"))
        ui.field("URL", answers.get("url"))
        if answers.get("hostname"):
            ui.field("Hostname", answers["hostname"])
        ui.blank()

        proceed = self.prompter.confirm("Create this tunnel?", default=True)
        if not isinstance(proceed, Proceed):
            return proceed
        return Proceed(True) if proceed.value else BACK

    def steps(self, include_name: bool = True) -> list[Step]:
        steps = [
            Step("Tunnel Name", self.ask_name, key="name"),
            Step("Service Type", self.ask_service_type, key="service_type"),
            Step("Service Configuration", self.ask_service_config, key="url"),
            Step("Hostname", self.ask_hostname, key="hostname"),
            Step("Confirmation", self.confirm, key="confirmed"),
        ]
        return steps if include_name else steps[1:]


def show_step(index: int, total: int, step: Step) -> None:
    ui.blank()
    ui.console.print(f"[bold]Step {index + 1} of {total}: {step.title}[/bold]")


def build_add_tunnel_wizard(
    prompter: Prompter,
    existing_names: Collection[str] = (),
    include_name: bool = True,
) -> Wizard:
    """Build the create-tunnel wizard.

    Args:
        prompter: Prompt backend
        existing_names: Names that are already taken locally
        include_name: Ask for the name; False when it was given up front

    Returns:
        Wizard whose answers hold ``name``, ``service_type``, ``url`` and
        ``hostname``
    """
    form = AddTunnelForm(prompter, existing_names)
    return Wizard("Create a new tunnel", form.steps(include_name), on_step=show_step)
