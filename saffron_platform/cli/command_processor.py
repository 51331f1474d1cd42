"""
    CommandProcessor — parses raw zed command lines and dispatches them.

    Design Patterns
    ───────────────
    • Interpreter   – parses the CLI text into a structured ``ZedCommand``.
    • State table   – ``CommandRegistry`` decides which ``(subcommand,
                      action)`` pairs exist and which arguments they take.
    • Strategy      – the bound command is handed to whichever
                      ``CommandExecutor`` the platform was configured with.
    • Facade        – single ``process(text)`` entry-point hides all parsing.

    Malformed input (blank command, wrong root keyword, shell
    metacharacters) raises ``CommandRejected``.  Everything after that —
    unsupported commands, bad arguments, backend or process failures — is
    returned as a failed ``ExecutionResult``.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Tuple

from saffron_api.executors.base import CommandExecutor
from saffron_api.models.command import ZedCommand
from saffron_api.models.execution import ExecutionResult, utc_now

from ..config import InterpreterConfig
from ..exceptions import (
    CommandArgumentError,
    EmptyCommandError,
    RootKeywordError,
    UnsupportedCommandError,
)
from .commands import (
    CommandRegistry,
    CommandSpec,
    GLOBAL_BOOLEAN_FLAGS,
    GLOBAL_VALUE_FLAGS,
)
from .tokenizer import ensure_safe, split_args

logger = logging.getLogger(__name__)


class CommandProcessor:
    """
    Parses raw CLI input, binds it against the command registry and
    executes it with the configured executor.

    Usage from the web layer:
        processor = CommandProcessor(executor)
        result = processor.process("zed permission check doc:1 view user:alice")
    """

    def __init__(self, executor: CommandExecutor,
                 config: Optional[InterpreterConfig] = None,
                 registry: Optional[CommandRegistry] = None):
        self._executor = executor
        self._config = config or InterpreterConfig()
        self._registry = registry or CommandRegistry()

    # ── Public API ───────────────────────────────────────────────

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    @property
    def hardened(self) -> bool:
        """Whether shell metacharacters are rejected before tokenizing."""
        if self._config.reject_unsafe is not None:
            return self._config.reject_unsafe
        return self._executor.spawns_processes

    def process(self, text: str,
                cancel: Optional[threading.Event] = None) -> ExecutionResult:
        """
        Parse and execute a single command line.

        Args:
            text:   Raw command string from the user.
            cancel: Optional event forwarded to the executor.

        Returns:
            ``ExecutionResult`` for every command that passes input
            validation.

        Raises:
            CommandRejected: blank command, wrong root keyword, or
                             disallowed characters.
        """
        started_at = utc_now()
        command = self._tokenize(text)

        try:
            self._bind(command)
        except (UnsupportedCommandError, CommandArgumentError) as e:
            logger.warning("Command not dispatched: %s", e)
            return ExecutionResult.failure(str(e), started_at)

        result = self._executor.execute(command, cancel)
        logger.info("Executed '%s %s' via %s: ok=%s (%d ms)",
                    command.subcommand, command.action,
                    self._executor.get_executor_name(),
                    result.ok, result.duration_ms)
        return result

    def parse(self, text: str) -> ZedCommand:
        """
        Parse and bind ``text`` without executing it.

        Raises:
            CommandRejected, UnsupportedCommandError, CommandArgumentError
        """
        command = self._tokenize(text)
        self._bind(command)
        return command

    # ── Tokenizing ───────────────────────────────────────────────

    def _tokenize(self, text: Optional[str]) -> ZedCommand:
        """Validate the raw line and split off root / subcommand / action."""
        text = (text or "").strip()
        if not text:
            raise EmptyCommandError("Command is required")

        if self.hardened:
            ensure_safe(text)

        tokens = split_args(text)
        root = self._config.root_keyword
        if not tokens or tokens[0] != root:
            raise RootKeywordError(f'Command must start with "{root}"')

        return ZedCommand(
            root=tokens[0],
            subcommand=tokens[1] if len(tokens) > 1 else "",
            action=tokens[2] if len(tokens) > 2 else "",
            arguments=tokens[1:],
        )

    # ── Binding ──────────────────────────────────────────────────

    def _bind(self, command: ZedCommand) -> None:
        """Resolve the registry state and fill positional / flag fields."""
        spec = self._resolve(command)
        positional, flags = self._extract_arguments(
            command.arguments[2:], spec, self._config.strict_flags
        )

        if len(positional) < len(spec.positionals):
            raise CommandArgumentError(spec.usage(self._config.root_keyword))
        if self._config.strict_flags and len(positional) > len(spec.positionals):
            surplus = positional[len(spec.positionals):]
            raise CommandArgumentError(f"Unexpected argument(s): {' '.join(surplus)}")

        command.positional = positional[:len(spec.positionals)]
        command.flags = flags

    def _resolve(self, command: ZedCommand) -> CommandSpec:
        subcommands = self._registry.subcommands()
        if command.subcommand not in subcommands:
            raise UnsupportedCommandError(
                f"Unsupported command: {command.subcommand or '(none)'}. "
                f"Supported: {', '.join(subcommands)}"
            )

        spec = self._registry.get(command.subcommand, command.action)
        if spec is None:
            actions = self._registry.actions(command.subcommand)
            raise UnsupportedCommandError(
                f"Unsupported {command.subcommand} action: {command.action or '(none)'}. "
                f"Supported: {', '.join(actions)}"
            )
        return spec

    @staticmethod
    def _extract_arguments(tokens: List[str], spec: CommandSpec,
                           strict: bool = False) -> Tuple[List[str], Dict[str, str]]:
        """
        Split tokens into positionals and recognized flags.

        ``--name value`` and ``--name=value`` are both accepted.  Unknown
        flags are dropped, or rejected when ``strict``.

        Returns:
            (positional_list, flags_dict)
        """
        positional: List[str] = []
        flags: Dict[str, str] = {}
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if not token.startswith("--") or len(token) == 2:
                positional.append(token)
                i += 1
                continue

            name, has_inline, inline = token[2:].partition("=")
            if name in GLOBAL_BOOLEAN_FLAGS:
                flags[name] = inline if has_inline else "true"
            elif name in spec.flags or name in GLOBAL_VALUE_FLAGS:
                if has_inline:
                    flags[name] = inline
                elif i + 1 < len(tokens):
                    flags[name] = tokens[i + 1]
                    i += 1
                else:
                    raise CommandArgumentError(f"Flag --{name} requires a value.")
            elif strict:
                recognized = [f"--{f}" for f in spec.flags + GLOBAL_VALUE_FLAGS + GLOBAL_BOOLEAN_FLAGS]
                raise CommandArgumentError(
                    f"Unknown flag --{name}. Recognized: {', '.join(recognized)}"
                )
            else:
                logger.debug("Ignoring unknown flag --%s", name)
            i += 1

        return positional, flags
