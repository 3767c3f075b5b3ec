"""Plugin loading, command parsing and dispatch."""

from kachina.plugins.dispatch import DispatchSettings, Dispatcher, ExecutionContext
from kachina.plugins.loader import FilesystemPluginLoader, PluginLoader
from kachina.plugins.parse import ParsedCommand, parse_command
from kachina.plugins.registry import Plugin, PluginRegistry, build_plugin

__all__ = [
    "DispatchSettings",
    "Dispatcher",
    "ExecutionContext",
    "FilesystemPluginLoader",
    "ParsedCommand",
    "Plugin",
    "PluginLoader",
    "PluginRegistry",
    "build_plugin",
    "parse_command",
]
