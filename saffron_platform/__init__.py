"""
Saffron Platform — core package.

Public API:
    SaffronPlatform     – central orchestrator (Facade / Singleton)
    CommandProcessor    – zed command interpreter
    SpiceDBClient       – HTTP client for the authorization service
    PlatformConfig      – top-level configuration
    PluginLoader        – generic executor discovery
"""
from .core import SaffronPlatform
from .cli.command_processor import CommandProcessor
from .client import SpiceDBClient
from .config import PlatformConfig, SpiceDBConfig, ExecutorConfig, InterpreterConfig
from .plugin_loader import PluginLoader, create_executor_loader

__all__ = [
    'SaffronPlatform',
    'CommandProcessor',
    'SpiceDBClient',
    'PlatformConfig',
    'SpiceDBConfig',
    'ExecutorConfig',
    'InterpreterConfig',
    'PluginLoader',
    'create_executor_loader',
]
