# tests/core_test/test_config.py
"""
Configuration tests — environment parsing with explicit mappings.
"""
import pytest

from saffron_platform.config import (
    ExecutorConfig,
    InterpreterConfig,
    PlatformConfig,
    SpiceDBConfig,
)
from saffron_platform.exceptions import ConfigurationError


class TestSpiceDBConfig:

    def test_defaults_have_no_credentials(self):
        config = SpiceDBConfig.from_env({})
        assert config.endpoint is None
        assert config.token == ""
        assert config.is_configured is False
        assert config.cli_endpoint is None

    def test_from_env(self):
        config = SpiceDBConfig.from_env({
            "SPICEDB_URL": "https://authz.internal:8443/",
            "SPICEDB_TOKEN": "secret",
            "SPICEDB_INSECURE": "true",
            "SPICEDB_TIMEOUT": "2.5",
        })
        assert config.endpoint == "https://authz.internal:8443"
        assert config.token == "secret"
        assert config.insecure is True
        assert config.timeout == 2.5
        assert config.cli_endpoint == "authz.internal:8443"

    def test_grpc_endpoint_overrides(self):
        config = SpiceDBConfig.from_env({
            "SPICEDB_URL": "http://authz:8443",
            "SPICEDB_GRPC_ENDPOINT": "authz:50051",
        })
        assert config.cli_endpoint == "authz:50051"

    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_bad_timeout(self, value):
        with pytest.raises(ConfigurationError, match="SPICEDB_TIMEOUT"):
            SpiceDBConfig.from_env({"SPICEDB_TIMEOUT": value})


class TestExecutorConfig:

    def test_defaults(self):
        config = ExecutorConfig.from_env({})
        assert config.strategy == "api"
        assert config.zed_command == ("zed",)
        assert config.max_processes == 4

    def test_from_env(self):
        config = ExecutorConfig.from_env({
            "SAFFRON_EXECUTOR": "Process",
            "SAFFRON_ZED_COMMAND": "/usr/local/bin/zed --log-level warn",
            "SAFFRON_PROCESS_TIMEOUT": "15",
            "SAFFRON_MAX_OUTPUT_BYTES": "2048",
            "SAFFRON_MAX_PROCESSES": "1",
        })
        assert config.strategy == "process"
        assert config.zed_command == ("/usr/local/bin/zed", "--log-level", "warn")
        assert config.process_timeout == 15.0
        assert config.max_output_bytes == 2048
        assert config.max_processes == 1

    def test_integer_fields_reject_fractions(self):
        with pytest.raises(ConfigurationError):
            ExecutorConfig.from_env({"SAFFRON_MAX_PROCESSES": "1.5"})

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "Infinity"])
    def test_timeouts_must_be_finite(self, value):
        with pytest.raises(ConfigurationError, match="SAFFRON_PROCESS_TIMEOUT must be a finite number"):
            ExecutorConfig.from_env({"SAFFRON_PROCESS_TIMEOUT": value})
        with pytest.raises(ConfigurationError, match="SPICEDB_TIMEOUT must be a finite number"):
            SpiceDBConfig.from_env({"SPICEDB_TIMEOUT": value})


class TestInterpreterConfig:

    def test_defaults(self):
        config = InterpreterConfig.from_env({})
        assert config.strict_flags is False
        assert config.reject_unsafe is None

    def test_from_env(self):
        config = InterpreterConfig.from_env({
            "SAFFRON_STRICT_FLAGS": "yes",
            "SAFFRON_REJECT_UNSAFE": "0",
        })
        assert config.strict_flags is True
        assert config.reject_unsafe is False


class TestPlatformConfig:

    def test_aggregates_sections(self):
        config = PlatformConfig.from_env({"SPICEDB_URL": "http://x", "SAFFRON_STRICT_FLAGS": "1"})
        assert config.spicedb.endpoint == "http://x"
        assert config.executor.strategy == "api"
        assert config.interpreter.strict_flags is True
