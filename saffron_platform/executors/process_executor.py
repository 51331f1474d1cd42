"""
    ProcessCommandExecutor — runs commands through the real zed binary.

    One child per command, no shell.  Connection flags are injected from
    configuration unless the user already passed them.  Both pipes are
    drained on reader threads into capped buffers; the child is killed
    when it outlives ``process_timeout`` or when the caller's cancel event
    is set.  A bounded semaphore caps concurrent children.
"""
import logging
import subprocess
import threading
import time
from typing import IO, List, Optional

from saffron_api.executors.base import CommandExecutor
from saffron_api.models.command import ZedCommand
from saffron_api.models.execution import ExecutionResult, utc_now

from ..config import PlatformConfig

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096
_POLL_INTERVAL = 0.05
_READER_JOIN_TIMEOUT = 2.0


class _BoundedBuffer:
    """Keeps the first ``limit`` bytes written to it and drops the rest."""

    def __init__(self, limit: int):
        self._limit = limit
        self._chunks: List[bytes] = []
        self._size = 0
        self.truncated = False

    def write(self, data: bytes) -> None:
        room = self._limit - self._size
        if len(data) > room:
            self.truncated = True
            data = data[:max(room, 0)]
        if data:
            self._chunks.append(data)
            self._size += len(data)

    def getvalue(self) -> str:
        return b"".join(self._chunks).decode("utf-8", errors="replace")


def _drain(stream: IO[bytes], buffer: _BoundedBuffer) -> None:
    """Read ``stream`` until EOF; past the cap, data is read and discarded."""
    try:
        for chunk in iter(lambda: stream.read1(_CHUNK_SIZE), b""):
            buffer.write(chunk)
    except (OSError, ValueError) as e:
        logger.debug("Output stream closed early: %s", e)
    finally:
        stream.close()


class ProcessCommandExecutor(CommandExecutor):
    """
    Supervised external-process strategy.

    ``ok`` is ``exit_code == 0``; a child that cannot be started yields
    ``exit_code=None`` with the reason in ``error``.
    """

    def __init__(self, config: Optional[PlatformConfig] = None):
        self._config = config or PlatformConfig()
        self._slots = threading.BoundedSemaphore(self._config.executor.max_processes)

    def get_executor_name(self) -> str:
        return "zed CLI"

    @property
    def spawns_processes(self) -> bool:
        return True

    # ── Command line ─────────────────────────────────────────────

    def build_argv(self, command: ZedCommand) -> List[str]:
        """
        Binary prefix + user arguments (root keyword stripped) +
        connection flags the user did not supply.

        The configured token and ``--insecure`` belong to the configured
        server, so they are only added when the user kept that server.
        """
        argv = list(self._config.executor.zed_command) + list(command.arguments)
        present = {token.split("=", 1)[0] for token in command.arguments
                   if token.startswith("--")}

        spicedb = self._config.spicedb
        if "--endpoint" in present:
            return argv
        if spicedb.cli_endpoint:
            argv += ["--endpoint", spicedb.cli_endpoint]
        if spicedb.token and "--token" not in present:
            argv += ["--token", spicedb.token]
        if spicedb.insecure and "--insecure" not in present:
            argv.append("--insecure")
        return argv

    # ── Execution ────────────────────────────────────────────────

    def execute(self, command: ZedCommand,
                cancel: Optional[threading.Event] = None) -> ExecutionResult:
        started_at = utc_now()
        limit = self._config.executor.max_processes

        if not self._slots.acquire(blocking=False):
            logger.warning("Refusing to spawn: %d processes already running.", limit)
            return self._not_started(
                f"Too many concurrent commands (limit {limit}). Try again shortly.",
                started_at,
            )
        try:
            if cancel is not None and cancel.is_set():
                return self._not_started("Command cancelled.", started_at)
            return self._run(self.build_argv(command), started_at, cancel)
        finally:
            self._slots.release()

    def _run(self, argv: List[str], started_at,
             cancel: Optional[threading.Event]) -> ExecutionResult:
        executor_config = self._config.executor
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", argv[0], e)
            return self._not_started(f"Failed to start {argv[0]}: {e}", started_at)

        stdout_buffer = _BoundedBuffer(executor_config.max_output_bytes)
        stderr_buffer = _BoundedBuffer(executor_config.max_output_bytes)
        readers = [
            threading.Thread(target=_drain, args=(proc.stdout, stdout_buffer), daemon=True),
            threading.Thread(target=_drain, args=(proc.stderr, stderr_buffer), daemon=True),
        ]
        for reader in readers:
            reader.start()

        reason = self._supervise(proc, executor_config.process_timeout, cancel)

        for reader in readers:
            reader.join(_READER_JOIN_TIMEOUT)

        stderr = stderr_buffer.getvalue()
        if reason == "timeout":
            stderr += (f"\n[timeout] Command exceeded {executor_config.process_timeout:g}s "
                       f"and was killed")
            logger.error("%s killed after %.1fs", argv[0], executor_config.process_timeout)
        elif reason == "cancelled":
            stderr += "\n[cancelled] Command was cancelled and killed"
            logger.warning("%s cancelled by caller", argv[0])

        exit_code = proc.returncode
        return ExecutionResult(
            ok=exit_code == 0,
            exit_code=exit_code,
            stdout=stdout_buffer.getvalue(),
            stderr=stderr,
            started_at=started_at,
            ended_at=utc_now(),
            timed_out=reason == "timeout",
            truncated=stdout_buffer.truncated or stderr_buffer.truncated,
        )

    @staticmethod
    def _supervise(proc: subprocess.Popen, timeout: float,
                   cancel: Optional[threading.Event]) -> Optional[str]:
        """
        Wait for ``proc``; kill it on timeout or cancellation.

        Returns:
            ``"timeout"`` / ``"cancelled"`` when the child was killed,
            otherwise ``None``.
        """
        deadline = time.monotonic() + timeout
        reason = None
        try:
            while True:
                try:
                    proc.wait(timeout=_POLL_INTERVAL)
                    break
                except subprocess.TimeoutExpired:
                    pass
                if cancel is not None and cancel.is_set():
                    reason = "cancelled"
                    break
                if time.monotonic() >= deadline:
                    reason = "timeout"
                    break
        finally:
            killed = proc.poll() is None
            if killed:
                proc.kill()
                proc.wait()
        # a child that exited on its own keeps its exit status
        return reason if killed else None

    @staticmethod
    def _not_started(message: str, started_at) -> ExecutionResult:
        return ExecutionResult(
            ok=False,
            exit_code=None,
            stdout="",
            stderr=message,
            started_at=started_at,
            ended_at=utc_now(),
            error=message,
        )
