"""Shared state handed to every command handler."""

from dataclasses import dataclass

from ..cloudflared.adapter import CloudflaredAdapter
from ..config import Settings
from ..tunnels.manager import TunnelManager
from ..tunnels.store import RecordStore
from ..tunnels.supervisor import ProcessSupervisor
from ..wizard.prompts import Prompter


@dataclass
class CommandContext:
    """Collaborators built once per tool run and passed to each handler."""

    settings: Settings
    store: RecordStore
    adapter: CloudflaredAdapter
    supervisor: ProcessSupervisor
    manager: TunnelManager
    prompter: Prompter

    @classmethod
    def create(
        cls, settings: Settings, prompter: Prompter | None = None
    ) -> "CommandContext":
        """Wire up the store, adapter, supervisor and manager for ``settings``."""
        store = RecordStore(settings.tunnels_file)
        adapter = CloudflaredAdapter(settings.binary)
        supervisor = ProcessSupervisor(store, adapter)
        manager = TunnelManager(store, adapter, supervisor)
        return cls(
            settings=settings,
            store=store,
            adapter=adapter,
            supervisor=supervisor,
            manager=manager,
            prompter=prompter or Prompter(),
        )
