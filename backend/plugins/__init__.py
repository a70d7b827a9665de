"""Plugin system: every directory holding an endpoint.py becomes a route prefix."""

import importlib
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI
from structlog import get_logger

logger = get_logger(__name__)

PLUGINS_PACKAGE = "plugins"


class PluginBase:
    """A discovered plugin: its router plus the metadata from its __init__.py."""

    def __init__(self, name: str, version: str = "1.0.0"):
        self.name = name
        self.version = version
        self.router: APIRouter | None = None
        self.metadata: dict[str, Any] = {}

    def get_router(self) -> APIRouter | None:
        return self.router

    def get_metadata(self) -> dict[str, Any]:
        metadata = {"name": self.name, "version": self.version}
        metadata.update(self.metadata)
        return metadata


class PluginDiscovery:
    """Finds plugins below `plugins_dir` and mounts their routers."""

    def __init__(
        self, plugins_dir: Path | None = None, excluded_plugins: list[str] | None = None
    ):
        self.plugins_dir = plugins_dir or Path(__file__).parent
        self.excluded_plugins = set(excluded_plugins or [])
        self.discovered_plugins: dict[str, PluginBase] = {}

    def discover_plugins(self) -> dict[str, PluginBase]:
        """Discover all valid plugins, in path order."""
        if not self.plugins_dir.exists():
            logger.warning("Plugins directory does not exist", path=str(self.plugins_dir))
            return {}

        for endpoint_file in sorted(self.plugins_dir.rglob("endpoint.py")):
            relative_path = endpoint_file.parent.relative_to(self.plugins_dir)
            plugin_name = relative_path.as_posix()

            if any(part.startswith("_") for part in relative_path.parts):
                continue
            if plugin_name in self.excluded_plugins:
                logger.info("Skipping excluded plugin", plugin=plugin_name)
                continue

            plugin = self._load_plugin(plugin_name)
            if plugin:
                self.discovered_plugins[plugin_name] = plugin

        return self.discovered_plugins

    def _load_plugin(self, plugin_name: str) -> PluginBase | None:
        """Import a plugin's endpoint module and, if present, its metadata."""
        package = f"{PLUGINS_PACKAGE}.{plugin_name.replace('/', '.')}"
        module = importlib.import_module(f"{package}.endpoint")

        router = getattr(module, "router", None)
        if not isinstance(router, APIRouter):
            logger.warning("No valid router found in endpoint.py", plugin=plugin_name)
            return None

        plugin = PluginBase(plugin_name)
        plugin.router = router

        init_module = importlib.import_module(package)
        metadata = getattr(init_module, "PLUGIN_METADATA", None)
        if isinstance(metadata, dict):
            plugin.metadata = metadata
            plugin.version = metadata.get("version", plugin.version)

        return plugin

    def register_plugins(self, app: FastAPI) -> None:
        """Mount every discovered router under /<plugin name>."""
        for plugin_name, plugin in self.discovered_plugins.items():
            router = plugin.get_router()
            if router is None:
                logger.warning("No router to register", plugin=plugin_name)
                continue
            app.include_router(
                router, prefix=f"/{plugin_name}", tags=[plugin_name.title()]
            )
            logger.info("Registered plugin routes", plugin=plugin_name)


plugin_discovery = PluginDiscovery()


def init_plugins(app: FastAPI, excluded_plugins: list[str] | None = None) -> None:
    """Initialize plugin system and register all discovered plugins."""
    global plugin_discovery

    if excluded_plugins:
        plugin_discovery = PluginDiscovery(excluded_plugins=excluded_plugins)

    plugins = plugin_discovery.discover_plugins()
    plugin_discovery.register_plugins(app)

    logger.info("Plugin system initialized", count=len(plugins))


def list_plugin_metadata() -> list[dict[str, Any]]:
    return [plugin.get_metadata() for plugin in plugin_discovery.discovered_plugins.values()]
