"""Tunnel records, their storage and running processes."""

from .manager import RemovalReport, TunnelManager, UpdateReport
from .models import (
    ExternalTunnelDescriptor,
    TunnelRecord,
    TunnelSource,
    TunnelView,
    merge_tunnels,
    utc_timestamp,
)
from .store import RecordStore
from .supervisor import ProcessExit, ProcessSupervisor, RunningProcess

__all__ = [
    # Models
    "TunnelRecord",
    "ExternalTunnelDescriptor",
    "TunnelView",
    "TunnelSource",
    "merge_tunnels",
    "utc_timestamp",
    # Storage
    "RecordStore",
    # Processes
    "ProcessSupervisor",
    "RunningProcess",
    "ProcessExit",
    # Manager
    "TunnelManager",
    "RemovalReport",
    "UpdateReport",
]
