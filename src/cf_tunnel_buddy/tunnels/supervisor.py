"""Supervision of running cloudflared processes, keyed by tunnel name."""

import os
import queue
import signal
import subprocess
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..common.exceptions import AlreadyRunningError, NotFoundError, NotRunningError
from ..common.logging import get_logger
from .store import RecordStore

if TYPE_CHECKING:
    from ..cloudflared.adapter import CloudflaredAdapter

logger = get_logger(__name__)

STOP_TIMEOUT = 5.0


@dataclass
class RunningProcess:
    """In-memory entry for one running tunnel process."""

    name: str
    pid: int
    handle: Any | None = None
    watcher: threading.Thread | None = field(default=None, repr=False)


@dataclass(frozen=True)
class ProcessExit:
    """Notification that a supervised process has exited."""

    name: str
    pid: int
    returncode: int | None


class ProcessSupervisor:
    """Owns the table of running tunnel processes.

    At most one process runs per tunnel name. Exit watchers never touch the
    table: they post ``ProcessExit`` events to a queue that only the
    supervisor's own methods drain, so every mutation happens on the calling
    thread. The table lives as long as this object and is not persisted.
    """

    def __init__(self, store: RecordStore, adapter: "CloudflaredAdapter"):
        """Initialize process supervisor.

        Args:
            store: Record store used to look up tunnels by name
            adapter: cloudflared adapter used to spawn processes
        """
        self._store = store
        self._adapter = adapter
        self._running: dict[str, RunningProcess] = {}
        self._exits: queue.SimpleQueue[ProcessExit] = queue.SimpleQueue()

    def _drain_exits(self) -> None:
        """Apply pending exit notifications to the table."""
        while True:
            try:
                event = self._exits.get_nowait()
            except queue.Empty:
                return
            self.notify_exit(event)

    def notify_exit(self, event: ProcessExit) -> None:
        """Remove the entry a process exit refers to.

        Events for a pid that no longer owns the name are ignored, so a late
        notification cannot remove a newer process started under that name.
        """
        entry = self._running.get(event.name)
        if entry is not None and entry.pid == event.pid:
            del self._running[event.name]
            logger.info(
                "Tunnel process exited",
                name=event.name,
                pid=event.pid,
                returncode=event.returncode,
            )

    def _watch(self, name: str, handle: Any) -> None:
        """Wait for a background process and post its exit."""
        try:
            returncode = handle.wait()
        except Exception as e:
            logger.warning("Error waiting for tunnel process", name=name, error=str(e))
            returncode = None
        self._exits.put(ProcessExit(name=name, pid=handle.pid, returncode=returncode))

    def register(
        self, name: str, handle: Any | None, pid: int | None = None, watch: bool = True
    ) -> RunningProcess:
        """Add a process to the table.

        Args:
            name: Tunnel name
            handle: Process handle; None when only the pid is known
            pid: Process id, taken from the handle when omitted
            watch: Start a thread that reports the process exit

        Returns:
            The new entry

        Raises:
            AlreadyRunningError: If the name already has an entry
        """
        self._drain_exits()
        if name in self._running:
            raise AlreadyRunningError(f"Tunnel '{name}' is already running")

        if pid is None:
            if handle is None:
                raise ValueError("Either handle or pid is required")
            pid = handle.pid

        entry = RunningProcess(name=name, pid=pid, handle=handle)
        if handle is not None and watch:
            entry.watcher = threading.Thread(
                target=self._watch,
                args=(name, handle),
                name=f"tunnel-watch-{name}",
                daemon=True,
            )
            entry.watcher.start()

        self._running[name] = entry
        logger.debug("Registered tunnel process", name=name, pid=pid)
        return entry

    def start(self, name: str, background: bool = True) -> Any:
        """Start the tunnel called ``name``.

        Logs in to Cloudflare first if needed.

        Args:
            name: Tunnel name
            background: Run detached from this process

        Returns:
            Handle of the spawned process

        Raises:
            NotFoundError: If no record has that name
            AlreadyRunningError: If the tunnel is already running
        """
        self._drain_exits()
        record = self._store.get(name)
        if record is None:
            raise NotFoundError(f"Tunnel '{name}' not found")

        if name in self._running:
            raise AlreadyRunningError(f"Tunnel '{name}' is already running")

        self._adapter.ensure_authenticated()

        handle = self._adapter.run(record, background=background)
        self.register(name, handle, watch=background)
        logger.info(
            "Tunnel started", name=name, pid=handle.pid, background=background
        )
        return handle

    def run_foreground(self, name: str) -> int | None:
        """Start a tunnel attached to the terminal and wait for it to exit.

        While the tunnel runs, SIGINT and SIGTERM received by this process are
        forwarded to the child instead of interrupting us. The previous
        handlers are restored before returning.

        Args:
            name: Tunnel name

        Returns:
            Exit code of the tunnel process
        """
        handle = self.start(name, background=False)
        forwarded = (signal.SIGINT, signal.SIGTERM)

        def _forward(signum: int, _frame: Any) -> None:
            if handle.poll() is None:
                logger.debug("Forwarding signal to tunnel", name=name, signal=signum)
                handle.send_signal(signum)

        previous = {signum: signal.getsignal(signum) for signum in forwarded}
        try:
            for signum in forwarded:
                signal.signal(signum, _forward)
            returncode = handle.wait()
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)
            self.notify_exit(
                ProcessExit(name=name, pid=handle.pid, returncode=handle.poll())
            )

        logger.info("Foreground tunnel exited", name=name, returncode=returncode)
        return returncode

    def stop(self, name: str) -> None:
        """Stop the tunnel called ``name``.

        Args:
            name: Tunnel name

        Raises:
            NotRunningError: If the tunnel has no running process
        """
        self._drain_exits()
        entry = self._running.get(name)
        if entry is None:
            raise NotRunningError(f"Tunnel '{name}' is not running")

        try:
            if entry.handle is not None:
                self._terminate_handle(entry)
            else:
                self._terminate_pid(entry)
        finally:
            self._running.pop(name, None)

        logger.info("Tunnel stopped", name=name, pid=entry.pid)

    def _terminate_handle(self, entry: RunningProcess) -> None:
        handle = entry.handle
        if handle.poll() is not None:
            return

        handle.terminate()
        try:
            handle.wait(timeout=STOP_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning(
                "Process did not terminate gracefully, force killing",
                name=entry.name,
                pid=entry.pid,
            )
            handle.kill()

    def _terminate_pid(self, entry: RunningProcess) -> None:
        try:
            os.kill(entry.pid, signal.SIGTERM)
        except ProcessLookupError:
            logger.debug("Process already gone", name=entry.name, pid=entry.pid)

    def stop_all(self) -> dict[str, Exception | None]:
        """Stop every running tunnel.

        Returns:
            Mapping of tunnel name to the error raised while stopping it, or None
        """
        results: dict[str, Exception | None] = {}
        for name in self.list_running():
            try:
                self.stop(name)
                results[name] = None
            except Exception as e:
                logger.error("Error stopping tunnel", name=name, error=str(e))
                results[name] = e
        return results

    def get(self, name: str) -> RunningProcess | None:
        """Get the table entry for ``name``."""
        self._drain_exits()
        return self._running.get(name)

    def is_running(self, name: str) -> bool:
        self._drain_exits()
        return name in self._running

    def list_running(self) -> list[str]:
        """Names of tunnels with a running process, in start order."""
        self._drain_exits()
        return list(self._running)
