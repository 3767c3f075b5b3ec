"""
Abstract port for the WhatsApp socket library.

The wire protocol, encryption, session keys and QR/pairing code generation
all live behind this interface; kachina only calls into it and listens to
its events.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Awaitable, Callable

from kachina.config.schema import ClientConfig


TransportHandler = Callable[[Any], Awaitable[None] | None]


class DisconnectReason(IntEnum):
    """Status codes reported by the socket library when a connection closes."""

    CONNECTION_CLOSED = 428
    CONNECTION_LOST = 408
    CONNECTION_REPLACED = 440
    TIMED_OUT = 408
    LOGGED_OUT = 401
    BAD_SESSION = 500
    RESTART_REQUIRED = 515
    MULTIDEVICE_MISMATCH = 411
    FORBIDDEN = 403
    UNAVAILABLE_SERVICE = 503


def disconnect_status(last_disconnect: dict[str, Any] | None) -> int | None:
    """
    Read the status code of a `lastDisconnect` payload.

    The code may be given directly (`statusCode`) or carried by the error
    object, either as a Boom-style `output.statusCode` or a `status_code`
    attribute. Returns None when no code can be found.
    """
    if not last_disconnect:
        return None
    if isinstance(last_disconnect.get("statusCode"), int):
        return last_disconnect["statusCode"]

    error = last_disconnect.get("error")
    if error is None:
        return None
    if isinstance(error, dict):
        output = error.get("output") or {}
        code = output.get("statusCode", error.get("statusCode"))
        return code if isinstance(code, int) else None

    output = getattr(error, "output", None)
    if isinstance(output, dict) and isinstance(output.get("statusCode"), int):
        return output["statusCode"]
    code = getattr(error, "status_code", None)
    return code if isinstance(code, int) else None


class Transport(ABC):
    """
    Connected WhatsApp session.

    Implementations must provide:
    - `on()` — subscribe to socket events (connection.update, messages.upsert, ...)
    - `send_message()` — deliver a content payload to a chat
    - `group_metadata()` — fetch subject and participants of a group
    - `download_media()` — fetch and decrypt the media of a raw message
    - `request_pairing_code()` — start a pairing-code login
    - `close()` — end the session
    """

    @property
    @abstractmethod
    def user(self) -> dict[str, Any] | None:
        """Identity of the logged-in account (`{"id": ..., "name": ...}`)."""

    @property
    def registered(self) -> bool:
        """Whether the session credentials are already paired."""
        return False

    @abstractmethod
    def on(self, event: str, handler: TransportHandler) -> None:
        """Subscribe to a socket event."""

    @abstractmethod
    async def send_message(
        self,
        jid: str,
        content: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> Any:
        """Send a content payload (`{"text": ...}`, `{"image": ...}`, ...)."""

    @abstractmethod
    async def group_metadata(self, jid: str) -> dict[str, Any]:
        """Return `{"subject": ..., "participants": [{"id": ..., "admin": ...}]}`."""

    @abstractmethod
    async def download_media(self, message: dict[str, Any]) -> bytes:
        """Download the media carried by a raw message."""

    @abstractmethod
    async def request_pairing_code(self, phone_number: str) -> str:
        """Request a pairing code for the given digits-only number."""

    @abstractmethod
    async def close(self) -> None:
        """End the session."""

    async def group_participants_update(
        self, jid: str, participants: list[str], action: str
    ) -> Any:
        raise NotImplementedError(f"{type(self).__name__} cannot update participants")

    async def group_update_subject(self, jid: str, subject: str) -> Any:
        raise NotImplementedError(f"{type(self).__name__} cannot update subjects")

    async def group_update_description(self, jid: str, description: str) -> Any:
        raise NotImplementedError(f"{type(self).__name__} cannot update descriptions")

    async def copy_n_forward(
        self, jid: str, message: dict[str, Any], options: dict[str, Any] | None = None
    ) -> Any:
        """Re-send the content of a raw message to `jid` as a new message."""
        raise NotImplementedError(f"{type(self).__name__} cannot copy messages")


TransportFactory = Callable[[ClientConfig], Awaitable[Transport]]
