"""
    ApiCommandExecutor — runs commands in-process against the HTTP API.

    No child process and no shell are involved; each command becomes at
    most one outbound request.  ``ok`` is defined by an empty stderr.
"""
import logging
import threading
from typing import Dict, Optional, Tuple

from saffron_api.executors.base import CommandExecutor
from saffron_api.models.command import ZedCommand
from saffron_api.models.execution import ExecutionResult, utc_now

from ..adapters import ADAPTERS, Adapter
from ..client import SpiceDBClient
from ..config import PlatformConfig
from ..exceptions import BackendError, CommandArgumentError

logger = logging.getLogger(__name__)


class ApiCommandExecutor(CommandExecutor):
    """
    In-process strategy: dispatches to the backend adapter registered for
    the command's ``(subcommand, action)``.
    """

    def __init__(self, config: Optional[PlatformConfig] = None,
                 client: Optional[SpiceDBClient] = None,
                 adapters: Optional[Dict[Tuple[str, str], Adapter]] = None):
        config = config or PlatformConfig()
        self._client = client or SpiceDBClient(config.spicedb)
        self._adapters = adapters if adapters is not None else ADAPTERS

    def get_executor_name(self) -> str:
        return "SpiceDB HTTP API"

    @property
    def client(self) -> SpiceDBClient:
        return self._client

    def execute(self, command: ZedCommand,
                cancel: Optional[threading.Event] = None) -> ExecutionResult:
        started_at = utc_now()

        adapter = self._adapters.get(command.key)
        if adapter is None:
            return ExecutionResult.failure(
                f"No adapter registered for '{command.subcommand} {command.action}'.",
                started_at,
            )
        if cancel is not None and cancel.is_set():
            return ExecutionResult.failure("Command cancelled.", started_at)

        stdout, stderr = "", ""
        try:
            stdout = adapter(self._client, command)
        except CommandArgumentError as e:
            stderr = str(e)
        except BackendError as e:
            logger.error("Backend call for '%s %s' failed: %s",
                         command.subcommand, command.action, e)
            stderr = str(e)

        return ExecutionResult.from_output(stdout, stderr, started_at)
