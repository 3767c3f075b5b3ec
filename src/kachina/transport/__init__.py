"""Transport port for the WhatsApp socket library."""

from kachina.transport.base import (
    DisconnectReason,
    Transport,
    TransportFactory,
    disconnect_status,
)
from kachina.transport.resolve import resolve_transport_factory

__all__ = [
    "DisconnectReason",
    "Transport",
    "TransportFactory",
    "disconnect_status",
    "resolve_transport_factory",
]
