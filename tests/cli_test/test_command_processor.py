# tests/cli_test/test_command_processor.py
"""
CommandProcessor tests — rejection, routing, argument binding, strict mode.
"""
import threading

import pytest

from saffron_api.executors.base import CommandExecutor
from saffron_api.models.command import ZedCommand
from saffron_api.models.execution import ExecutionResult, utc_now
from saffron_platform.cli.command_processor import CommandProcessor
from saffron_platform.cli.commands import COMMAND_SPECS, CommandRegistry, CommandSpec
from saffron_platform.config import InterpreterConfig
from saffron_platform.exceptions import (
    CommandArgumentError,
    EmptyCommandError,
    RootKeywordError,
    UnsafeCharacterError,
    UnsupportedCommandError,
)
from saffron_platform.executors.api_executor import ApiCommandExecutor

from conftest import FakeClient


# ── Helpers ──────────────────────────────────────────────────────

class RecordingExecutor(CommandExecutor):
    """Executor that records commands instead of running them."""

    def __init__(self, spawns=False):
        self.commands = []
        self._spawns = spawns

    def get_executor_name(self) -> str:
        return "recording"

    @property
    def spawns_processes(self) -> bool:
        return self._spawns

    def execute(self, command, cancel=None):
        self.commands.append(command)
        now = utc_now()
        return ExecutionResult.from_output("done", "", now, now)


def _api_processor(client=None, **config):
    client = client or FakeClient(read_schema="definition user {}")
    return CommandProcessor(ApiCommandExecutor(client=client), InterpreterConfig(**config)), client


# ═════════════════════════════════════════════════════════════════
#  Registry
# ═════════════════════════════════════════════════════════════════

class TestCommandRegistry:

    def test_all_specs_registered(self):
        registry = CommandRegistry()
        assert len(registry) == len(COMMAND_SPECS)
        assert ("permission", "lookup-subjects") in registry

    def test_subcommands_in_registration_order(self):
        assert CommandRegistry().subcommands() == ["schema", "relationship", "permission"]

    def test_actions_for_subcommand(self):
        assert CommandRegistry().actions("permission") == ["check", "expand", "lookup-subjects"]

    def test_unknown_pair(self):
        assert CommandRegistry().get("schema", "write") is None

    def test_usage_line(self):
        spec = CommandSpec("permission", "check", ("resource", "permission", "subject"))
        assert spec.usage() == "Usage: zed permission check <resource> <permission> <subject>"


# ═════════════════════════════════════════════════════════════════
#  Rejections (raised, 400-class)
# ═════════════════════════════════════════════════════════════════

class TestRejections:

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_command(self, text):
        processor, _ = _api_processor()
        with pytest.raises(EmptyCommandError, match="Command is required"):
            processor.process(text)

    def test_wrong_root_keyword(self):
        processor, client = _api_processor()
        with pytest.raises(RootKeywordError, match='Command must start with "zed"'):
            processor.process("spicedb schema read")
        assert client.calls == []

    def test_root_keyword_is_configurable(self):
        processor, _ = _api_processor(root_keyword="zcli")
        assert processor.process("zcli schema read").ok is True
        with pytest.raises(RootKeywordError):
            processor.process("zed schema read")

    def test_metacharacters_pass_in_process_by_default(self):
        processor, _ = _api_processor()
        assert processor.hardened is False
        result = processor.process("zed schema read ; ls")
        assert result.ok is True

    def test_metacharacters_rejected_when_forced(self):
        processor, client = _api_processor(reject_unsafe=True)
        with pytest.raises(UnsafeCharacterError):
            processor.process('zed schema read "a;b"')
        assert client.calls == []

    def test_spawning_executor_is_hardened(self):
        executor = RecordingExecutor(spawns=True)
        processor = CommandProcessor(executor)
        assert processor.hardened is True
        with pytest.raises(UnsafeCharacterError):
            processor.process("zed schema read `id`")
        assert executor.commands == []

    def test_hardening_can_be_disabled_explicitly(self):
        processor = CommandProcessor(RecordingExecutor(spawns=True),
                                     InterpreterConfig(reject_unsafe=False))
        assert processor.hardened is False


# ═════════════════════════════════════════════════════════════════
#  Routing (failed results, never raised)
# ═════════════════════════════════════════════════════════════════

class TestRouting:

    def test_schema_read_routes_to_schema_adapter_only(self):
        processor, client = _api_processor()
        result = processor.process("zed schema read")
        assert result.ok is True
        assert result.stdout == "definition user {}"
        assert client.methods() == ["read_schema"]

    def test_unknown_subcommand_lists_supported(self):
        processor, client = _api_processor()
        result = processor.process("zed bogus foo")
        assert result.ok is False
        assert result.stdout == ""
        assert result.stderr == ("Unsupported command: bogus. "
                                 "Supported: schema, relationship, permission")
        assert client.calls == []

    def test_missing_subcommand(self):
        processor, _ = _api_processor()
        result = processor.process("zed")
        assert result.ok is False
        assert "Unsupported command: (none)" in result.stderr

    def test_unknown_action_lists_actions(self):
        processor, _ = _api_processor()
        result = processor.process("zed schema write")
        assert result.ok is False
        assert result.stderr == "Unsupported schema action: write. Supported: read"

    def test_failed_result_shape(self):
        processor, _ = _api_processor()
        result = processor.process("zed bogus")
        assert result.exit_code == 1
        assert result.duration_ms >= 0

    def test_cancel_event_is_forwarded(self):
        processor, client = _api_processor()
        cancel = threading.Event()
        cancel.set()
        result = processor.process("zed schema read", cancel)
        assert result.ok is False
        assert client.calls == []


# ═════════════════════════════════════════════════════════════════
#  Argument binding
# ═════════════════════════════════════════════════════════════════

class TestArgumentBinding:

    def test_positionals_bound(self):
        processor = CommandProcessor(RecordingExecutor())
        command = processor.parse("zed permission check document:readme view user:alice")
        assert isinstance(command, ZedCommand)
        assert command.positional == ["document:readme", "view", "user:alice"]
        assert command.arguments == ["permission", "check", "document:readme", "view", "user:alice"]

    def test_missing_positional_gives_usage(self):
        processor, client = _api_processor()
        result = processor.process("zed permission check document:readme view")
        assert result.ok is False
        assert result.stderr.startswith("Usage: zed permission check")
        assert client.calls == []

    def test_invalid_reference_reported_as_stderr(self):
        client = FakeClient(check_permission={"permissionship": "PERMISSIONSHIP_HAS_PERMISSION"})
        processor, _ = _api_processor(client)
        result = processor.process("zed permission check docreadme view user:alice")
        assert result.ok is False
        assert "Invalid format" in result.stderr
        assert client.calls == []

    def test_valid_reference_reaches_adapter(self):
        client = FakeClient(check_permission={"permissionship": "PERMISSIONSHIP_HAS_PERMISSION"})
        processor, _ = _api_processor(client)
        result = processor.process("zed permission check document:readme view user:alice")
        assert result.ok is True
        assert client.methods() == ["check_permission"]

    def test_flags_space_and_inline_forms(self):
        processor = CommandProcessor(RecordingExecutor())
        command = processor.parse(
            "zed relationship read --resource-type document --relation=viewer"
        )
        assert command.flags == {"resource-type": "document", "relation": "viewer"}
        assert command.positional == []

    def test_flag_without_value(self):
        with pytest.raises(CommandArgumentError, match="--resource-id requires a value"):
            CommandProcessor(RecordingExecutor()).parse("zed relationship read --resource-id")

    def test_global_flags_recognized(self):
        command = CommandProcessor(RecordingExecutor()).parse(
            "zed schema read --endpoint localhost:50051 --insecure"
        )
        assert command.flags == {"endpoint": "localhost:50051", "insecure": "true"}

    def test_unknown_flag_ignored_in_lenient_mode(self):
        command = CommandProcessor(RecordingExecutor()).parse(
            "zed relationship read --colour=blue --resource-type document"
        )
        assert command.flags == {"resource-type": "document"}

    def test_surplus_positionals_dropped_in_lenient_mode(self):
        command = CommandProcessor(RecordingExecutor()).parse("zed schema read extra")
        assert command.positional == []


class TestStrictMode:

    def _processor(self):
        return CommandProcessor(RecordingExecutor(), InterpreterConfig(strict_flags=True))

    def test_unknown_flag_rejected(self):
        with pytest.raises(CommandArgumentError, match="Unknown flag --colour"):
            self._processor().parse("zed relationship read --colour blue")

    def test_unknown_flag_lists_recognized(self):
        with pytest.raises(CommandArgumentError, match="--resource-type"):
            self._processor().parse("zed relationship read --colour=blue")

    def test_surplus_positionals_rejected(self):
        with pytest.raises(CommandArgumentError, match="Unexpected argument"):
            self._processor().parse("zed schema read extra")

    def test_strict_failure_is_a_result_when_processed(self):
        executor = RecordingExecutor()
        processor = CommandProcessor(executor, InterpreterConfig(strict_flags=True))
        result = processor.process("zed schema read --colour blue")
        assert result.ok is False
        assert executor.commands == []

    def test_unsupported_raised_by_parse(self):
        with pytest.raises(UnsupportedCommandError):
            self._processor().parse("zed nope")
