"""
    Abstract base class for executors.
    Defines the "Contract" that every execution strategy must follow.
"""
import threading
from abc import ABC, abstractmethod
from typing import Optional

from ..models.command import ZedCommand
from ..models.execution import ExecutionResult


class CommandExecutor(ABC):
    """
        Abstract base class for command executors.
        Pattern: Strategy (for command execution).
    """

    @abstractmethod
    def get_executor_name(self) -> str:
        """
            Returns the human-readable name of the executor.
            Example: "SpiceDB HTTP API"
        """
        pass

    @abstractmethod
    def execute(self, command: ZedCommand,
                cancel: Optional[threading.Event] = None) -> ExecutionResult:
        """
        Main method: runs a dispatched command and reports the outcome.

        Failures are returned as a failed ``ExecutionResult``; executors
        never raise for backend or process errors.

        Args:
            command: A command whose subcommand/action is registered and
                     whose arguments have been extracted.
            cancel:  Optional event; once set, in-flight work is abandoned.

        Returns:
            ExecutionResult: outcome with stdout/stderr and timings.
        """
        pass

    @property
    def spawns_processes(self) -> bool:
        """Whether commands reach an external process (and thus a shell-like argv)."""
        return False
