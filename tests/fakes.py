"""In-memory transport and raw message builders for tests."""

from typing import Any

from kachina.transport.base import Transport

BOT_ID = "6281111111111:7@s.whatsapp.net"
BOT_JID = "6281111111111@s.whatsapp.net"
USER_JID = "6282222222222@s.whatsapp.net"
ADMIN_JID = "6283333333333@s.whatsapp.net"
GROUP_JID = "120363000000000000@g.us"


class FakeTransport(Transport):
    """Records calls and lets tests fire socket events."""

    def __init__(self, user: dict[str, Any] | None = None, registered: bool = True):
        self._user = user if user is not None else {"id": BOT_ID, "name": "Bot"}
        self._registered = registered
        self.handlers: dict[str, list] = {}
        self.sent: list[dict[str, Any]] = []
        self.metadata: dict[str, dict[str, Any]] = {}
        self.metadata_calls: list[str] = []
        self.media: bytes | Exception = b"media-bytes"
        self.download_calls: list[dict[str, Any]] = []
        self.pairing_code: str | Exception = "ABCD-EFGH"
        self.pairing_requests: list[str] = []
        self.copies: list[dict[str, Any]] = []
        self.closed = False

    @property
    def user(self):
        return self._user

    @property
    def registered(self) -> bool:
        return self._registered

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    async def fire(self, event: str, payload: Any) -> None:
        for handler in self.handlers.get(event, []):
            await handler(payload)

    async def send_message(self, jid, content, options=None):
        self.sent.append({"jid": jid, "content": content, "options": options})
        return {"key": {"remoteJid": jid, "id": f"SENT{len(self.sent)}"}}

    async def group_metadata(self, jid):
        self.metadata_calls.append(jid)
        return self.metadata.get(jid, {"participants": []})

    async def download_media(self, message):
        self.download_calls.append(message)
        if isinstance(self.media, Exception):
            raise self.media
        return self.media

    async def request_pairing_code(self, phone_number):
        self.pairing_requests.append(phone_number)
        if isinstance(self.pairing_code, Exception):
            raise self.pairing_code
        return self.pairing_code

    async def copy_n_forward(self, jid, message, options=None):
        self.copies.append({"jid": jid, "message": message, "options": options})
        return {"key": {"remoteJid": jid, "id": f"COPY{len(self.copies)}"}}

    async def close(self):
        self.closed = True


def make_raw(
    message: dict[str, Any] | None = None,
    *,
    text: str | None = None,
    chat: str = USER_JID,
    participant: str | None = None,
    msg_id: str = "ABC123",
    from_me: bool = False,
    push_name: str = "Tester",
) -> dict[str, Any]:
    """Build a raw socket message; `text` is shorthand for a conversation."""
    if message is None:
        message = {"conversation": text or ""}
    key: dict[str, Any] = {"remoteJid": chat, "fromMe": from_me, "id": msg_id}
    if participant is not None:
        key["participant"] = participant
    return {"key": key, "message": message, "pushName": push_name}


