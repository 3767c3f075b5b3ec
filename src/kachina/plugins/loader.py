"""
Plugin discovery and import from the filesystem.
"""

import importlib.util
import itertools
from pathlib import Path
from types import ModuleType
from typing import Protocol

from kachina.errors import PluginLoadError

_counter = itertools.count()


class PluginLoader(Protocol):
    """Finds plugin sources under a directory and imports one source."""

    def discover(self, directory: Path) -> list[Path]: ...

    def import_plugin(self, path: Path) -> ModuleType: ...


class FilesystemPluginLoader:
    """
    Import `*.py` files as standalone plugin modules.

    Every import gets a fresh module name, so loading the same file again
    after `PluginRegistry.reload()` picks up its current contents.
    """

    suffix = ".py"

    def discover(self, directory: Path) -> list[Path]:
        """All plugin files below `directory`, skipping `_`-prefixed names."""
        return sorted(
            path
            for path in Path(directory).rglob(f"*{self.suffix}")
            if path.is_file() and not path.name.startswith("_")
        )

    def import_plugin(self, path: Path) -> ModuleType:
        path = Path(path).resolve()
        if not path.is_file():
            raise PluginLoadError(f"Plugin file not found: {path}")

        module_name = f"kachina_plugin_{path.stem}_{next(_counter)}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise PluginLoadError(f"Cannot import plugin file: {path}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
