"""
kachina: a plugin-driven bot framework over a WhatsApp multi-device socket.
"""

from kachina.bus.emitter import EventEmitter
from kachina.client import Client, ViewOnceMedia
from kachina.config import ClientConfig, load_config
from kachina.errors import (
    ConfigurationError,
    KachinaError,
    MediaDownloadError,
    PluginLoadError,
    ViewOnceError,
)
from kachina.helpers.logger import Logger
from kachina.helpers.sticker import StickerType, create_sticker
from kachina.messages import ContentType, Message, serialize
from kachina.plugins import ExecutionContext, Plugin, PluginRegistry, parse_command
from kachina.storage import Database
from kachina.transport import DisconnectReason, Transport

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientConfig",
    "ConfigurationError",
    "ContentType",
    "Database",
    "DisconnectReason",
    "EventEmitter",
    "ExecutionContext",
    "KachinaError",
    "Logger",
    "MediaDownloadError",
    "Message",
    "Plugin",
    "PluginLoadError",
    "PluginRegistry",
    "StickerType",
    "Transport",
    "ViewOnceError",
    "ViewOnceMedia",
    "create_sticker",
    "load_config",
    "parse_command",
    "serialize",
]
