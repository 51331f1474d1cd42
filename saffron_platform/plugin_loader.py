"""
    Generic plugin discovery via entry_points.

    Design Pattern: Service Locator / Registry
    ────────────────────────────────────────────
    Execution strategies are published as package entry points in the
    ``saffron.executor`` group (see ``setup.py``).  The platform picks one
    by name at configuration time.

    PluginLoader[TPlugin] is generic over the plugin base class and
    discovers *classes*; instances are created on demand with whatever
    constructor arguments the caller supplies.
"""
import importlib.metadata
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from saffron_api.executors.base import CommandExecutor

logger = logging.getLogger(__name__)

TPlugin = TypeVar('TPlugin')

# Entry-point group name (must match setup.py)
EXECUTOR_EP_GROUP = 'saffron.executor'


class PluginLoader(Generic[TPlugin]):
    """
    Discovers every class registered under an entry-point group that
    subclasses the given base.

    Usage:
        loader = PluginLoader(CommandExecutor, 'saffron.executor')
        executor = loader.create('api', config)
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str):
        self._base_class = plugin_base_class
        self._group = group
        self._classes: Dict[str, Type[TPlugin]] = {}
        self._loaded = False

    def load_all(self) -> Dict[str, Type[TPlugin]]:
        """
        Discover plugin classes registered under the group.

        Returns:
            Dict mapping entry-point name → plugin class.
        """
        if self._loaded:
            return self._classes

        for ep in importlib.metadata.entry_points(group=self._group):
            try:
                plugin_cls = ep.load()
            except (ImportError, AttributeError) as exc:
                logger.error("Failed to load plugin '%s': %s", ep.name, exc)
                continue
            if not isinstance(plugin_cls, type) or not issubclass(plugin_cls, self._base_class):
                logger.warning(
                    "Plugin '%s' does not subclass %s — skipped.",
                    ep.name, self._base_class.__name__
                )
                continue
            self._classes[ep.name] = plugin_cls
            logger.info("Discovered plugin: %s (%s)", ep.name, plugin_cls.__name__)

        self._loaded = True
        return self._classes

    def get(self, name: str) -> Optional[Type[TPlugin]]:
        """Plugin class registered as ``name``, or None."""
        return self.load_all().get(name)

    def create(self, name: str, *args: Any, **kwargs: Any) -> TPlugin:
        """
        Instantiate the plugin registered as ``name``.

        Raises:
            LookupError: If no such plugin is installed.
        """
        plugin_cls = self.get(name)
        if plugin_cls is None:
            raise LookupError(
                f"Plugin '{name}' not found in '{self._group}'. "
                f"Available: {self.get_names()}"
            )
        return plugin_cls(*args, **kwargs)

    def get_names(self) -> List[str]:
        """Return sorted list of all discovered plugin names."""
        return sorted(self.load_all().keys())

    def __repr__(self) -> str:
        return (
            f"PluginLoader(base={self._base_class.__name__}, "
            f"group='{self._group}', loaded={len(self._classes)})"
        )


def create_executor_loader() -> PluginLoader[CommandExecutor]:
    """Create a loader for command executor plugins."""
    return PluginLoader(CommandExecutor, EXECUTOR_EP_GROUP)
