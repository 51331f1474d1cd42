"""
    SaffronPlatform — the central orchestrator of the console.

    Design Patterns applied
    ───────────────────────
    • Singleton          – one platform instance per process
                           (via ``SaffronPlatform.get_instance()``).
    • Strategy           – pluggable command executors, resolved by
                           entry-point name from configuration.
    • Facade             – single entry-point for the web layer; hides
                           the processor, the SpiceDB client, the schema
                           parser and the highlighter.
"""
import logging
import threading
from typing import List, Optional

from saffron_api.executors.base import CommandExecutor
from saffron_api.models.execution import ExecutionResult
from saffron_api.models.schema import NamespaceInfo
from saffron_services.highlight_service import SchemaHighlighter
from saffron_services.schema_parser import SchemaParser

from .cli.command_processor import CommandProcessor
from .client import SpiceDBClient
from .config import PlatformConfig
from .exceptions import ConfigurationError
from .plugin_loader import PluginLoader, create_executor_loader

logger = logging.getLogger(__name__)


class SaffronPlatform:
    """
    Central orchestrator — Facade for the web layer.

    Manages:
        • Executor selection (``api`` / ``process``) and the processor.
        • Schema read / write through the SpiceDB client.
        • Schema parsing and highlighting.
    """

    _instance: Optional['SaffronPlatform'] = None
    _instance_lock = threading.Lock()

    # ── Singleton ────────────────────────────────────────────────

    @classmethod
    def get_instance(cls, config: Optional[PlatformConfig] = None) -> 'SaffronPlatform':
        """
        Return the singleton platform instance, creating it on first call.

        Args:
            config: Optional custom config (only used on first call);
                    defaults to ``PlatformConfig.from_env()``.
        """
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(config or PlatformConfig.from_env())
            return cls._instance

    @classmethod
    def set_instance(cls, platform: Optional['SaffronPlatform']) -> None:
        """
        Install a pre-built platform (or clear it with ``None``).

        The platform being replaced is shut down, which kills any zed
        child it still supervises.
        """
        with cls._instance_lock:
            previous, cls._instance = cls._instance, platform
        if previous is not None and previous is not platform:
            previous.shutdown()

    @classmethod
    def reset_instance(cls) -> None:
        """Destroy the singleton (useful for testing)."""
        cls.set_instance(None)

    # ── Constructor ──────────────────────────────────────────────

    def __init__(self, config: Optional[PlatformConfig] = None,
                 executor: Optional[CommandExecutor] = None,
                 client: Optional[SpiceDBClient] = None,
                 loader: Optional[PluginLoader[CommandExecutor]] = None):
        """
        Args:
            config:   Platform configuration.
            executor: Explicit executor; skips entry-point lookup.
            client:   Explicit SpiceDB client (shared with the API executor
                      when that strategy is loaded by name).
            loader:   Executor plugin loader.
        """
        self._config: PlatformConfig = config or PlatformConfig()
        self._client = client or SpiceDBClient(self._config.spicedb)
        self._loader = loader or create_executor_loader()
        self._executor = executor or self._load_executor(self._config.executor.strategy)
        self._processor = CommandProcessor(self._executor, self._config.interpreter)
        self._parser = SchemaParser()
        self._highlighter = SchemaHighlighter()
        self._shutdown = threading.Event()

        logger.info("SaffronPlatform initialized with executor '%s'.",
                    self._executor.get_executor_name())

    def _load_executor(self, name: str) -> CommandExecutor:
        kwargs = {"client": self._client} if name == "api" else {}
        try:
            return self._loader.create(name, self._config, **kwargs)
        except LookupError as e:
            raise ConfigurationError(
                f"Executor '{name}' not found. Available: {self._loader.get_names()}"
            ) from e

    # ── Properties ───────────────────────────────────────────────

    @property
    def config(self) -> PlatformConfig:
        return self._config

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    @property
    def processor(self) -> CommandProcessor:
        return self._processor

    @property
    def client(self) -> SpiceDBClient:
        return self._client

    # ── Terminal ─────────────────────────────────────────────────

    def run_command(self, text: str,
                    cancel: Optional[threading.Event] = None) -> ExecutionResult:
        """
        Interpret one command line.

        Raises:
            CommandRejected: For malformed input (see ``CommandProcessor``).
        """
        if cancel is None:
            cancel = self._shutdown
        return self._processor.process(text, cancel)

    def shutdown(self) -> None:
        """Cancel every command still running on this platform."""
        if not self._shutdown.is_set():
            logger.info("SaffronPlatform shutting down; cancelling running commands.")
            self._shutdown.set()

    # ── Schema ───────────────────────────────────────────────────

    def read_schema(self) -> str:
        """Current schema text.  Raises ``BackendError``."""
        return self._client.read_schema()

    def write_schema(self, schema_text: str) -> None:
        """Replace the schema.  Raises ``BackendError``."""
        self._client.write_schema(schema_text)
        logger.info("Schema written (%d definitions).", len(self.parse_schema(schema_text)))

    def parse_schema(self, schema_text: str) -> List[NamespaceInfo]:
        return self._parser.parse(schema_text)

    def describe_schema(self) -> List[NamespaceInfo]:
        """Read and parse the current schema.  Raises ``BackendError``."""
        return self.parse_schema(self.read_schema())

    def highlight_schema(self, schema_text: str) -> str:
        return self._highlighter.highlight(schema_text)
