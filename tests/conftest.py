"""Shared pytest fixtures for cf-tunnel-buddy tests."""

import itertools
import logging
import subprocess
import threading
from unittest.mock import Mock

import pytest
import structlog

from cf_tunnel_buddy.cloudflared.adapter import CloudflaredAdapter
from cf_tunnel_buddy.commands.base import CommandContext
from cf_tunnel_buddy.config import Settings
from cf_tunnel_buddy.tunnels.manager import TunnelManager
from cf_tunnel_buddy.tunnels.models import TunnelRecord
from cf_tunnel_buddy.tunnels.store import RecordStore
from cf_tunnel_buddy.tunnels.supervisor import ProcessSupervisor
from cf_tunnel_buddy.wizard.prompts import Prompter

_pids = itertools.count(40000)


class FakeProcess:
    """Stand-in for ``subprocess.Popen`` that never spawns anything.

    The process "runs" until ``exit`` is called; ``terminate``, ``kill`` and
    ``send_signal`` make it exit unless ``ignore_terminate`` is set.
    """

    def __init__(self, pid=None, ignore_terminate=False):
        self.pid = pid if pid is not None else next(_pids)
        self.returncode = None
        self.ignore_terminate = ignore_terminate
        self.terminated = False
        self.killed = False
        self.signals = []
        self._exited = threading.Event()

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired("cloudflared", timeout)
        return self.returncode

    def exit(self, returncode=0):
        self.returncode = returncode
        self._exited.set()

    def terminate(self):
        self.terminated = True
        if not self.ignore_terminate:
            self.exit(-15)

    def kill(self):
        self.killed = True
        self.exit(-9)

    def send_signal(self, signum):
        self.signals.append(signum)
        self.exit(-signum)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a temporary configuration directory.

    Returns:
        Settings: Settings whose config_dir lives under tmp_path
    """
    return Settings(config_dir=tmp_path / "config")


@pytest.fixture
def store(settings):
    """Record store backed by the temporary tunnels file."""
    return RecordStore(settings.tunnels_file)


@pytest.fixture
def sample_record():
    """A fully configured tunnel record."""
    return TunnelRecord(
        name="my-app",
        id="6ff42ae2-765d-4adf-8112-31c55c1551ef",
        url="http://localhost:8080",
        hostname="app.example.com",
        created_at="2024-01-01T10:00:00.000Z",
    )


@pytest.fixture
def processes():
    """FakeProcess instances handed out by the mock adapter, in spawn order."""
    return []


@pytest.fixture
def mock_adapter(processes):
    """Mock cloudflared adapter whose ``run`` returns FakeProcess objects.

    Returns:
        Mock: Adapter mock specced on CloudflaredAdapter
    """
    adapter = Mock(spec=CloudflaredAdapter)
    adapter.binary = "cloudflared"
    adapter.parse_list.return_value = []
    adapter.create.return_value = "6ff42ae2-765d-4adf-8112-31c55c1551ef"

    def _run(record, background=True):
        process = FakeProcess()
        processes.append(process)
        return process

    adapter.run.side_effect = _run
    return adapter


@pytest.fixture
def supervisor(store, mock_adapter):
    """Process supervisor wired to the temporary store and mock adapter."""
    supervisor = ProcessSupervisor(store, mock_adapter)
    yield supervisor
    # Release watcher threads still blocked on fake processes
    for name in supervisor.list_running():
        entry = supervisor.get(name)
        if entry is not None and entry.handle is not None:
            entry.handle.exit(0)


@pytest.fixture
def manager(store, mock_adapter, supervisor):
    """Tunnel manager over the temporary store, mock adapter and supervisor."""
    return TunnelManager(store, mock_adapter, supervisor)


@pytest.fixture
def prompter():
    """Prompter mock; tests queue answers through ``side_effect``."""
    return Mock(spec=Prompter)


@pytest.fixture
def command_context(settings, store, mock_adapter, supervisor, manager, prompter):
    """Command context assembled from the test doubles."""
    return CommandContext(
        settings=settings,
        store=store,
        adapter=mock_adapter,
        supervisor=supervisor,
        manager=manager,
        prompter=prompter,
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test.

    The CLI configures handlers on streams that only live for one test.
    """
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    structlog.reset_defaults()
