"""Tests for the process supervisor."""

import signal
from unittest.mock import patch

import pytest

from cf_tunnel_buddy.common.exceptions import (
    AlreadyRunningError,
    NotFoundError,
    NotRunningError,
)
from cf_tunnel_buddy.tunnels import supervisor as supervisor_module
from cf_tunnel_buddy.tunnels.models import TunnelRecord
from cf_tunnel_buddy.tunnels.supervisor import ProcessExit

from conftest import FakeProcess


@pytest.fixture
def stored(store):
    """Store holding two startable tunnels."""
    store.add(TunnelRecord(name="alpha", url="http://localhost:8080"))
    store.add(TunnelRecord(name="beta", url="https://localhost:8443"))
    return store


class TestStart:
    """Test starting tunnels."""

    def test_start_registers_process(self, stored, supervisor, mock_adapter, processes):
        """start() spawns the tunnel and records it as running"""
        handle = supervisor.start("alpha")

        assert handle is processes[0]
        assert supervisor.is_running("alpha")
        assert supervisor.get("alpha").pid == handle.pid
        mock_adapter.ensure_authenticated.assert_called_once_with()
        record = mock_adapter.run.call_args[0][0]
        assert record.name == "alpha"

    def test_start_unknown_tunnel(self, stored, supervisor, mock_adapter):
        """Starting a name without a record raises NotFoundError"""
        with pytest.raises(NotFoundError):
            supervisor.start("ghost")

        mock_adapter.run.assert_not_called()

    def test_double_start_fails(self, stored, supervisor, mock_adapter):
        """A second start of a running tunnel raises AlreadyRunningError"""
        supervisor.start("alpha")

        with pytest.raises(AlreadyRunningError):
            supervisor.start("alpha")

        assert mock_adapter.run.call_count == 1

    def test_stop_then_restart(self, stored, supervisor, processes):
        """After stop() the tunnel is not running and can be started again"""
        supervisor.start("alpha")
        supervisor.stop("alpha")

        assert not supervisor.is_running("alpha")
        assert processes[0].terminated

        supervisor.start("alpha")
        assert supervisor.is_running("alpha")
        assert len(processes) == 2

    def test_list_running_tracks_table(self, stored, supervisor):
        """list_running() reflects exactly the active entries"""
        assert supervisor.list_running() == []

        supervisor.start("alpha")
        supervisor.start("beta")
        assert supervisor.list_running() == ["alpha", "beta"]

        supervisor.stop("alpha")
        assert supervisor.list_running() == ["beta"]


class TestExitNotification:
    """Test removal of entries when processes exit on their own."""

    def test_exited_process_is_deregistered(self, stored, supervisor, processes):
        """A background process that exits disappears from the table"""
        supervisor.start("alpha")
        entry = supervisor.get("alpha")

        processes[0].exit(1)
        entry.watcher.join(timeout=2)

        assert not entry.watcher.is_alive()
        assert not supervisor.is_running("alpha")

    def test_stale_exit_is_ignored(self, stored, supervisor):
        """An exit event for an old pid does not remove a newer process"""
        handle = supervisor.start("alpha")

        supervisor.notify_exit(ProcessExit(name="alpha", pid=handle.pid + 1, returncode=0))

        assert supervisor.is_running("alpha")

    def test_exit_for_unknown_name_is_ignored(self, supervisor):
        """Exit events for names not in the table are harmless"""
        supervisor.notify_exit(ProcessExit(name="ghost", pid=1, returncode=0))

        assert supervisor.list_running() == []


class TestStop:
    """Test stopping tunnels."""

    def test_stop_not_running(self, supervisor):
        """Stopping a tunnel without an entry raises NotRunningError"""
        with pytest.raises(NotRunningError):
            supervisor.stop("alpha")

    def test_force_kill_after_timeout(self, supervisor, monkeypatch):
        """A process ignoring SIGTERM is killed after the timeout"""
        monkeypatch.setattr(supervisor_module, "STOP_TIMEOUT", 0.01)
        process = FakeProcess(ignore_terminate=True)
        supervisor.register("alpha", process, watch=False)

        supervisor.stop("alpha")

        assert process.terminated
        assert process.killed
        assert not supervisor.is_running("alpha")

    def test_already_exited_process(self, supervisor):
        """Stopping a process that already exited sends nothing"""
        process = FakeProcess()
        supervisor.register("alpha", process, watch=False)
        process.exit(0)

        supervisor.stop("alpha")

        assert not process.terminated
        assert not supervisor.is_running("alpha")

    @patch("os.kill")
    def test_pid_fallback(self, mock_kill, supervisor):
        """Without a handle the stored pid is signalled"""
        supervisor.register("alpha", None, pid=4321)

        supervisor.stop("alpha")

        mock_kill.assert_called_once_with(4321, signal.SIGTERM)
        assert not supervisor.is_running("alpha")

    @patch("os.kill")
    def test_pid_fallback_tolerates_dead_process(self, mock_kill, supervisor):
        """A pid that no longer exists is not an error"""
        mock_kill.side_effect = ProcessLookupError()
        supervisor.register("alpha", None, pid=4321)

        supervisor.stop("alpha")

        assert not supervisor.is_running("alpha")

    def test_stop_all(self, stored, supervisor, processes):
        """stop_all() stops every tunnel and reports per-name results"""
        supervisor.start("alpha")
        supervisor.start("beta")

        results = supervisor.stop_all()

        assert results == {"alpha": None, "beta": None}
        assert supervisor.list_running() == []
        assert all(p.terminated for p in processes)


class TestRegister:
    """Test manual registration."""

    def test_register_requires_handle_or_pid(self, supervisor):
        """Registering without a handle or pid is a programming error"""
        with pytest.raises(ValueError):
            supervisor.register("alpha", None)

    def test_register_duplicate(self, supervisor):
        """A name can only be registered once"""
        supervisor.register("alpha", None, pid=1)

        with pytest.raises(AlreadyRunningError):
            supervisor.register("alpha", None, pid=2)

    def test_watch_controls_exit_watcher(self, supervisor):
        """Only watched processes get an exit watcher thread"""
        watched = supervisor.register("alpha", FakeProcess())
        unwatched = supervisor.register("beta", FakeProcess(), watch=False)

        assert watched.watcher is not None
        assert unwatched.watcher is None
        assert not hasattr(unwatched, "background")
        watched.handle.exit(0)


class ForegroundProcess(FakeProcess):
    """Fake foreground child that receives an interrupt while waited on."""

    def wait(self, timeout=None):
        if self.returncode is None:
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)
        return super().wait(timeout)


class TestRunForeground:
    """Test attached tunnels and interrupt forwarding."""

    def test_returns_exit_code_and_deregisters(self, stored, supervisor, mock_adapter):
        """The exit code is returned and the entry removed"""
        process = FakeProcess()
        process.exit(3)
        mock_adapter.run.side_effect = None
        mock_adapter.run.return_value = process

        assert supervisor.run_foreground("alpha") == 3
        assert not supervisor.is_running("alpha")
        assert mock_adapter.run.call_args.kwargs == {"background": False}

    def test_interrupt_is_forwarded_and_handlers_restored(
        self, stored, supervisor, mock_adapter
    ):
        """SIGINT goes to the child and the previous handlers come back"""
        process = ForegroundProcess()
        mock_adapter.run.side_effect = None
        mock_adapter.run.return_value = process
        previous_int = signal.getsignal(signal.SIGINT)
        previous_term = signal.getsignal(signal.SIGTERM)

        returncode = supervisor.run_foreground("alpha")

        assert process.signals == [signal.SIGINT]
        assert returncode == -signal.SIGINT
        assert signal.getsignal(signal.SIGINT) is previous_int
        assert signal.getsignal(signal.SIGTERM) is previous_term
        assert not supervisor.is_running("alpha")
