"""
Event names and transport payload types flowing through the system.
"""

from dataclasses import dataclass, field
from typing import Any


# Framework events (consumed by the embedding application)
READY = "ready"
MESSAGE = "message"
GROUP_UPDATE = "group.update"
GROUPS_UPDATE = "groups.update"
CALL = "call"
PAIRING_CODE = "pairing.code"
PAIRING_ERROR = "pairing.error"
RECONNECTING = "reconnecting"
RECONNECT_FAILED = "reconnect.failed"
CONNECTING = "connecting"
LOGOUT = "logout"
QR = "qr"

# Transport events (as emitted by the socket library)
CONNECTION_UPDATE = "connection.update"
MESSAGES_UPSERT = "messages.upsert"
GROUP_PARTICIPANTS_UPDATE = "group-participants.update"
TRANSPORT_GROUPS_UPDATE = "groups.update"
TRANSPORT_CALL = "call"

# Delivery kind of a live message batch
LIVE_DELIVERY = "notify"


@dataclass
class ConnectionUpdate:
    """Connection lifecycle change reported by the transport."""

    connection: str | None = None
    qr: str | None = None
    last_disconnect: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ConnectionUpdate":
        return cls(
            connection=payload.get("connection"),
            qr=payload.get("qr"),
            last_disconnect=payload.get("lastDisconnect") or {},
        )


@dataclass
class MessagesUpsert:
    """A batch of raw messages delivered by the transport."""

    messages: list[dict[str, Any]] = field(default_factory=list)
    type: str = LIVE_DELIVERY

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "MessagesUpsert":
        return cls(
            messages=list(payload.get("messages") or []),
            type=payload.get("type", ""),
        )

    @property
    def is_live(self) -> bool:
        """Only live deliveries are normalized and dispatched."""
        return self.type == LIVE_DELIVERY
