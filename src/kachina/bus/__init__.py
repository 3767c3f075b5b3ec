"""Event emitter and event names."""

from kachina.bus.emitter import EventEmitter
from kachina.bus.events import ConnectionUpdate, MessagesUpsert

__all__ = ["EventEmitter", "ConnectionUpdate", "MessagesUpsert"]
