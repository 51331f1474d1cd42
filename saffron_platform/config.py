"""
    Platform configuration - backend connection, executor limits,
    interpreter options.

    Every value comes from the environment; nothing here resembles a
    usable credential.  ``from_env`` accepts an explicit mapping so tests
    never have to touch ``os.environ``.
"""
import math
import os
import shlex
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .exceptions import ConfigurationError

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got '{raw}'.")
    if not math.isfinite(value):
        raise ConfigurationError(f"{key} must be a finite number, got '{raw}'.")
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got '{raw}'.")
    return value


@dataclass
class SpiceDBConfig:
    """
    Connection to the authorization service.

    Attributes:
        endpoint:  Base URL of the HTTP gateway (``SPICEDB_URL``).
        token:     Bearer token (``SPICEDB_TOKEN``).
        insecure:  Skip TLS verification for the HTTP client and pass
                   ``--insecure`` to the zed binary (``SPICEDB_INSECURE``).
        timeout:   Seconds applied to every outbound call (``SPICEDB_TIMEOUT``).
        grpc_endpoint: ``host:port`` handed to the zed binary
                   (``SPICEDB_GRPC_ENDPOINT``); defaults to ``endpoint``
                   without its scheme.
    """
    endpoint: Optional[str] = None
    token: str = ""
    insecure: bool = False
    timeout: float = 10.0
    grpc_endpoint: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint)

    @property
    def cli_endpoint(self) -> Optional[str]:
        if self.grpc_endpoint:
            return self.grpc_endpoint
        if not self.endpoint:
            return None
        return self.endpoint.split("://", 1)[-1]

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'SpiceDBConfig':
        env = os.environ if env is None else env
        endpoint = (env.get('SPICEDB_URL') or '').strip() or None
        return cls(
            endpoint=endpoint.rstrip('/') if endpoint else None,
            token=env.get('SPICEDB_TOKEN', ''),
            insecure=_env_bool(env, 'SPICEDB_INSECURE', False),
            timeout=_env_number(env, 'SPICEDB_TIMEOUT', 10.0, float),
            grpc_endpoint=(env.get('SPICEDB_GRPC_ENDPOINT') or '').strip() or None,
        )


@dataclass
class ExecutorConfig:
    """
    Execution strategy selection and process limits.

    Attributes:
        strategy:           Entry-point name of the executor
                            (``api`` or ``process``).
        zed_command:        argv prefix used to start the CLI binary.
        process_timeout:    Seconds before a child is killed.
        max_output_bytes:   Cap per stream (stdout / stderr).
        max_processes:      Concurrent children allowed.
    """
    strategy: str = "api"
    zed_command: Tuple[str, ...] = ("zed",)
    process_timeout: float = 30.0
    max_output_bytes: int = 1024 * 1024
    max_processes: int = 4

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'ExecutorConfig':
        env = os.environ if env is None else env
        zed_command = tuple(shlex.split(env.get('SAFFRON_ZED_COMMAND', ''))) or ("zed",)
        return cls(
            strategy=(env.get('SAFFRON_EXECUTOR') or 'api').strip().lower(),
            zed_command=zed_command,
            process_timeout=_env_number(env, 'SAFFRON_PROCESS_TIMEOUT', 30.0, float),
            max_output_bytes=_env_number(env, 'SAFFRON_MAX_OUTPUT_BYTES', 1024 * 1024, int),
            max_processes=_env_number(env, 'SAFFRON_MAX_PROCESSES', 4, int),
        )


@dataclass
class InterpreterConfig:
    """
    Command-line interpretation options.

    Attributes:
        root_keyword:    Keyword every command must start with.
        strict_flags:    Reject unknown flags and surplus positionals
                         instead of ignoring them.
        reject_unsafe:   Force the shell-metacharacter check.  ``None``
                         applies it only when the executor spawns processes.
    """
    root_keyword: str = "zed"
    strict_flags: bool = False
    reject_unsafe: Optional[bool] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'InterpreterConfig':
        env = os.environ if env is None else env
        reject_unsafe = None
        if (env.get('SAFFRON_REJECT_UNSAFE') or '').strip():
            reject_unsafe = _env_bool(env, 'SAFFRON_REJECT_UNSAFE', False)
        return cls(
            strict_flags=_env_bool(env, 'SAFFRON_STRICT_FLAGS', False),
            reject_unsafe=reject_unsafe,
        )


@dataclass
class PlatformConfig:
    """
    Top-level configuration for the console platform.
    """
    spicedb: SpiceDBConfig = field(default_factory=SpiceDBConfig)
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    interpreter: InterpreterConfig = field(default_factory=InterpreterConfig)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'PlatformConfig':
        return cls(
            spicedb=SpiceDBConfig.from_env(env),
            executor=ExecutorConfig.from_env(env),
            interpreter=InterpreterConfig.from_env(env),
        )
