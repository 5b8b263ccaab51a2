"""Tunnel models.

``TunnelRecord`` is the persisted description of one tunnel,
``ExternalTunnelDescriptor`` is a row reported by ``cloudflared tunnel list``
and ``TunnelView`` is the merged, display-only combination of both.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TunnelSource(str, Enum):
    """Where a tunnel shown to the user is known from."""

    LOCAL = "local"
    EXTERNAL = "external"


class TunnelRecord(BaseModel):
    """Locally persisted tunnel configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(min_length=1, description="Unique tunnel name")
    id: str | None = Field(default=None, description="Cloudflare tunnel ID")
    url: str | None = Field(default=None, description="Service URL to forward to")
    hostname: str | None = Field(default=None, description="Public DNS hostname")
    created_at: str = Field(
        default_factory=utc_timestamp, alias="createdAt", description="Creation time"
    )
    imported: bool | None = Field(
        default=None, description="Copied in from the external tunnel list"
    )
    imported_at: str | None = Field(
        default=None, alias="importedAt", description="Import timestamp"
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk field names.

        Provenance fields are only written for imported records.
        """
        data = self.model_dump(by_alias=True)
        for key in ("imported", "importedAt"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    def merged_with(self, updates: dict[str, Any]) -> "TunnelRecord":
        """Return a new record with ``updates`` shallow-merged over this one.

        Args:
            updates: Field values keyed by attribute name or on-disk alias

        Returns:
            New validated record
        """
        data = self.model_dump(by_alias=True)
        aliases = {
            name: field.alias
            for name, field in type(self).model_fields.items()
            if field.alias
        }
        for key, value in updates.items():
            data[aliases.get(key, key)] = value
        return type(self).model_validate(data)


class ExternalTunnelDescriptor(BaseModel):
    """A tunnel as reported by the external tool's listing."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    created: str
    connections: str = ""
    is_connected: bool = False


class TunnelView(BaseModel):
    """Display row combining local and external knowledge of one tunnel."""

    model_config = ConfigDict(frozen=True)

    name: str
    id: str | None = None
    url: str | None = None
    hostname: str | None = None
    created: str | None = None
    source: TunnelSource

    @property
    def label(self) -> str:
        """One-line description used in selection prompts."""
        text = f"{self.name} ({self.url or 'no url'})"
        if self.hostname:
            text += f" → {self.hostname}"
        return text


def merge_tunnels(
    local: list[TunnelRecord], external: list[ExternalTunnelDescriptor]
) -> list[TunnelView]:
    """Merge local records and external descriptors into one view keyed by name.

    A local record wins over an external descriptor with the same name since
    it carries the service URL and hostname.

    Args:
        local: Records from the record store
        external: Descriptors parsed from the external listing

    Returns:
        Views in first-seen order, external entries first
    """
    views: dict[str, TunnelView] = {}

    for descriptor in external:
        views[descriptor.name] = TunnelView(
            name=descriptor.name,
            id=descriptor.id,
            created=descriptor.created,
            source=TunnelSource.EXTERNAL,
        )

    for record in local:
        views[record.name] = TunnelView(
            name=record.name,
            id=record.id,
            url=record.url,
            hostname=record.hostname,
            created=record.created_at,
            source=TunnelSource.LOCAL,
        )

    return list(views.values())
