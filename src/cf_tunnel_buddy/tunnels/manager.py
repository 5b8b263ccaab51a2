"""Tunnel lifecycle operations spanning the store, cloudflared and running processes."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..common.exceptions import DuplicateNameError, NotFoundError, TunnelBuddyError
from ..common.logging import get_logger
from .models import (
    ExternalTunnelDescriptor,
    TunnelRecord,
    TunnelView,
    merge_tunnels,
    utc_timestamp,
)
from .store import RecordStore
from .supervisor import ProcessSupervisor

if TYPE_CHECKING:
    from ..cloudflared.adapter import CloudflaredAdapter

logger = get_logger(__name__)


@dataclass
class RemovalReport:
    """Outcome of removing a tunnel; warnings list the best-effort steps that failed."""

    name: str
    stopped: bool = False
    deleted_external: bool = False
    removed_local: bool = False
    warnings: list[str] = field(default_factory=list)


@dataclass
class UpdateReport:
    """Outcome of editing a tunnel."""

    record: TunnelRecord
    dns_routed: bool = False
    warnings: list[str] = field(default_factory=list)


class TunnelManager:
    """Creates, edits, imports and removes tunnels."""

    def __init__(
        self,
        store: RecordStore,
        adapter: "CloudflaredAdapter",
        supervisor: ProcessSupervisor,
    ):
        self.store = store
        self.adapter = adapter
        self.supervisor = supervisor

    def load_views(self) -> tuple[list[TunnelRecord], list[ExternalTunnelDescriptor]]:
        """Load local records and externally reported tunnels."""
        return self.store.load(), self.adapter.parse_list()

    def merged_views(self) -> list[TunnelView]:
        """Local and external tunnels merged by name, local first on conflict."""
        local, external = self.load_views()
        return merge_tunnels(local, external)

    def create_tunnel(
        self, name: str, url: str | None, hostname: str | None = None
    ) -> TunnelRecord:
        """Create a tunnel in Cloudflare and save it locally.

        Args:
            name: Tunnel name
            url: Service URL the tunnel forwards to
            hostname: Optional public hostname to route to the tunnel

        Returns:
            The saved record

        Raises:
            DuplicateNameError: If a local record already uses ``name``
        """
        if self.store.get(name) is not None:
            raise DuplicateNameError(f"Tunnel '{name}' already exists")

        self.adapter.ensure_authenticated()

        tunnel_id = self.adapter.create(name)

        if hostname:
            self.adapter.route_dns(name, hostname)

        record = TunnelRecord(name=name, id=tunnel_id, url=url, hostname=hostname)
        self.store.add(record)
        logger.info("Tunnel created", name=name, tunnel_id=tunnel_id, url=url)
        return record

    def update_tunnel(self, name: str, **updates: str | None) -> UpdateReport:
        """Change the URL and/or hostname of a tunnel.

        A DNS route is added when the hostname changes to a non-empty value.
        Failing to route DNS leaves the local update in place.

        Args:
            name: Tunnel name
            **updates: ``url`` and/or ``hostname``; a None hostname clears it

        Returns:
            Report with the updated record

        Raises:
            NotFoundError: If no record has that name
        """
        current = self.store.get(name)
        if current is None:
            raise NotFoundError(f"Tunnel '{name}' not found")

        record = self.store.update(name, updates)
        report = UpdateReport(record=record)

        new_hostname = updates.get("hostname")
        if "hostname" in updates and new_hostname and new_hostname != current.hostname:
            try:
                self.adapter.route_dns(name, new_hostname)
                report.dns_routed = True
            except TunnelBuddyError as e:
                logger.warning("Could not update DNS route", name=name, error=str(e))
                report.warnings.append(f"Could not update DNS route: {e}")

        return report

    def remove_tunnel(self, name: str) -> RemovalReport:
        """Remove a local tunnel, its process and its Cloudflare counterpart.

        Stopping the process and deleting the Cloudflare tunnel are best
        effort; the local record is removed even if they fail.

        Args:
            name: Tunnel name

        Returns:
            Report of what was done

        Raises:
            NotFoundError: If no record has that name
        """
        if self.store.get(name) is None:
            raise NotFoundError(f"Tunnel '{name}' not found in configuration")

        report = RemovalReport(name=name)

        if self.supervisor.is_running(name):
            try:
                self.supervisor.stop(name)
                report.stopped = True
            except TunnelBuddyError as e:
                logger.warning("Could not stop tunnel", name=name, error=str(e))
                report.warnings.append(f"Could not stop tunnel: {e}")

        try:
            self.adapter.delete(name)
            report.deleted_external = True
        except TunnelBuddyError as e:
            logger.warning(
                "Could not delete tunnel from Cloudflare", name=name, error=str(e)
            )
            report.warnings.append(f"Could not delete tunnel from Cloudflare: {e}")

        self.store.remove(name)
        report.removed_local = True
        return report

    def delete_external(self, name: str) -> None:
        """Delete a tunnel that only exists in Cloudflare."""
        self.adapter.delete(name)

    def import_external(
        self, descriptors: list[ExternalTunnelDescriptor]
    ) -> list[TunnelRecord]:
        """Copy external tunnels into the store as unconfigured records.

        Descriptors whose name is already stored are skipped.

        Args:
            descriptors: Tunnels to import

        Returns:
            The records that were added
        """
        imported = []
        existing = self.store.names()
        for descriptor in descriptors:
            if descriptor.name in existing:
                continue
            record = TunnelRecord(
                name=descriptor.name,
                id=descriptor.id,
                url=None,
                hostname=None,
                created_at=descriptor.created,
                imported=True,
                imported_at=utc_timestamp(),
            )
            self.store.add(record)
            existing.add(record.name)
            imported.append(record)
            logger.info("Imported tunnel", name=record.name, tunnel_id=record.id)
        return imported
