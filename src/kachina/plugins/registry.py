"""
Plugin descriptors and the registry that indexes them by name and alias.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Awaitable, Callable, Iterable

from kachina.errors import PluginLoadError
from kachina.plugins.loader import FilesystemPluginLoader, PluginLoader

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[None] | None]

HANDLER_ATTRS = ("execute", "handler")


@dataclass
class Plugin:
    """A loaded command handler."""

    name: str
    aliases: tuple[str, ...]
    handler: Handler
    category: str = ""
    description: str = ""
    owner_only: bool = False
    group_only: bool = False
    private_only: bool = False
    require_admin: bool = False
    require_bot_admin: bool = False
    source: Path | None = field(default=None, compare=False)


def _field(descriptor: Any, name: str, default: Any = None) -> Any:
    if isinstance(descriptor, dict):
        return descriptor.get(name, default)
    return getattr(descriptor, name, default)


def resolve_descriptor(module: Any) -> Any:
    """
    Pick the plugin descriptor exported by a module.

    A module may export a `plugin` object (dict or attribute bag), or act as
    the descriptor itself through module-level names.
    """
    if isinstance(module, ModuleType):
        exported = getattr(module, "plugin", None)
        return exported if exported is not None else module
    return module


def derive_aliases(descriptor: Any, name: str) -> tuple[str, ...]:
    """
    Aliases from `command`/`commands` (string or sequence), defaulting
    to the plugin name. Lower-cased, stripped, de-duplicated, in order.
    """
    declared = _field(descriptor, "command") or _field(descriptor, "commands")
    if not declared:
        declared = [name]
    elif isinstance(declared, str):
        declared = [declared]
    elif not isinstance(declared, Iterable):
        raise PluginLoadError(f"commands of '{name}' must be a string or a list")

    aliases: list[str] = []
    for alias in declared:
        if not isinstance(alias, str):
            raise PluginLoadError(f"command alias {alias!r} of '{name}' is not a string")
        alias = alias.strip().lower()
        if alias and alias not in aliases:
            aliases.append(alias)

    if not aliases:
        raise PluginLoadError(f"Plugin '{name}' declares no usable command")
    return tuple(aliases)


def build_plugin(descriptor: Any, default_name: str, source: Path | None = None) -> Plugin:
    """
    Validate a descriptor and turn it into a `Plugin`.

    Raises:
        PluginLoadError: if no handler or alias can be derived.
    """
    if descriptor is None:
        raise PluginLoadError("Plugin must export a descriptor")

    name = _field(descriptor, "name") or default_name
    if not isinstance(name, str) or not name:
        raise PluginLoadError("Plugin name must be a non-empty string")

    handler = None
    for attr in HANDLER_ATTRS:
        handler = _field(descriptor, attr)
        if handler is not None:
            break
    if not callable(handler):
        raise PluginLoadError(f"Plugin '{name}' must have an execute or handler function")

    return Plugin(
        name=name,
        aliases=derive_aliases(descriptor, name),
        handler=handler,
        category=_field(descriptor, "category") or "",
        description=_field(descriptor, "description") or "",
        owner_only=bool(_field(descriptor, "owner", False)),
        group_only=bool(_field(descriptor, "group", False)),
        private_only=bool(_field(descriptor, "private", False)),
        require_admin=bool(_field(descriptor, "admin", False)),
        require_bot_admin=bool(_field(descriptor, "bot_admin", False)),
        source=source,
    )


class PluginRegistry:
    """
    Loaded plugins, indexed by name and by every alias.

    The last plugin loaded wins an alias collision. Every alias in the
    alias map points at a plugin present in the name map.
    """

    def __init__(self, loader: PluginLoader | None = None):
        self.loader: PluginLoader = loader or FilesystemPluginLoader()
        self.plugins: dict[str, Plugin] = {}
        self.commands: dict[str, Plugin] = {}
        self.is_loaded = False

    def register(self, plugin: Plugin) -> Plugin:
        """Index a built plugin, replacing any plugin with the same name."""
        if plugin.name in self.plugins:
            self._unindex(self.plugins.pop(plugin.name))

        self.plugins[plugin.name] = plugin
        for alias in plugin.aliases:
            previous = self.commands.get(alias)
            if previous is not None and previous is not plugin:
                logger.debug(
                    "Alias '%s' moves from '%s' to '%s'", alias, previous.name, plugin.name
                )
            self.commands[alias] = plugin
        return plugin

    def load(self, source: Any) -> Plugin | None:
        """
        Load one plugin from a file path, a module or a descriptor.

        Returns None (and logs why) if the plugin is invalid.
        """
        try:
            if isinstance(source, (str, Path)):
                path = Path(source)
                module = self.loader.import_plugin(path)
                plugin = build_plugin(resolve_descriptor(module), path.stem, source=path)
            else:
                default = getattr(source, "__name__", "").rpartition(".")[2]
                plugin = build_plugin(resolve_descriptor(source), default)
        except Exception as e:
            logger.error("Failed to load plugin %s: %s", source, e)
            return None

        return self.register(plugin)

    def load_all(self, directory: str | Path) -> int:
        """
        Load every plugin file under `directory`, recursively.

        Returns:
            Number of plugins loaded successfully. A missing directory is
            logged and loads nothing.
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning("Plugin directory not found: %s", directory)
            return 0

        files = self.loader.discover(directory)
        loaded = sum(1 for path in files if self.load(path) is not None)

        self.is_loaded = True
        logger.info("Loaded %d/%d plugins", loaded, len(files))
        return loaded

    def _unindex(self, plugin: Plugin) -> None:
        for alias in plugin.aliases:
            if self.commands.get(alias) is plugin:
                del self.commands[alias]

    def reload(self, name: str) -> bool:
        """
        Unload a plugin by name so it can be loaded again.

        Returns:
            True if the plugin was registered. Loading it again is up to
            the caller.
        """
        plugin = self.plugins.pop(name, None)
        if plugin is None:
            return False
        self._unindex(plugin)
        return True

    def list(self) -> list[Plugin]:
        return list(self.plugins.values())

    def get(self, name: str) -> Plugin | None:
        return self.plugins.get(name)

    def find(self, alias: str) -> Plugin | None:
        """Plugin registered under a command alias."""
        if not alias:
            return None
        return self.commands.get(alias.lower())

    def __len__(self) -> int:
        return len(self.plugins)

    def __contains__(self, name: str) -> bool:
        return name in self.plugins
