"""
Normalize raw transport messages into `Message` records.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from kachina.helpers.utils import is_group_jid, normalize_jid
from kachina.messages.content import (
    ContentType,
    classify,
    extract_body,
    get_content_key,
    unwrap_view_once,
)
from kachina.transport.base import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """
    Normalized view of one inbound or quoted message.

    Action methods (`reply`, `react`, `download`, `delete`, `forward`)
    delegate to the transport the message was received on.
    """

    key: dict[str, Any]
    chat_id: str
    from_self: bool
    id: str
    is_group_chat: bool
    sender_id: str
    display_name: str
    content_type: ContentType
    raw_type: str | None
    raw_content: dict[str, Any]
    text: str
    quoted: "Message | None" = None
    caption: str = ""
    mime_type: str = ""
    file_size_bytes: int = 0
    mentioned_ids: tuple[str, ...] = ()
    is_view_once: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)
    transport: Transport | None = field(default=None, repr=False, compare=False)

    def _require_transport(self) -> Transport:
        if self.transport is None:
            raise RuntimeError("Message is not bound to a transport")
        return self.transport

    async def reply(self, text: str, **options: Any) -> Any:
        """Reply in the same chat, quoting this message."""
        return await self._require_transport().send_message(
            self.chat_id, {"text": text, **options}, {"quoted": self.raw}
        )

    async def react(self, emoji: str) -> Any:
        return await self._require_transport().send_message(
            self.chat_id, {"react": {"text": emoji, "key": self.key}}
        )

    async def download(self) -> bytes | None:
        """
        Download the media of this message.

        Returns None (and logs) on failure instead of raising.
        """
        if not self.raw_content:
            return None
        try:
            return await self._require_transport().download_media(self.raw)
        except Exception:
            logger.exception("Download failed for message %s", self.id)
            return None

    async def delete(self) -> Any:
        return await self._require_transport().send_message(
            self.chat_id, {"delete": self.key}
        )

    async def forward(self, jid: str, **options: Any) -> Any:
        return await self._require_transport().send_message(
            jid, {"forward": self.raw}, options or None
        )

    async def copy_n_forward(self, jid: str, **options: Any) -> Any:
        """Send a copy of this message to `jid` (see `Transport.copy_n_forward`)."""
        return await self._require_transport().copy_n_forward(jid, self.raw, options or None)


def _own_id(transport: Transport | None) -> str:
    user = transport.user if transport is not None else None
    return normalize_jid((user or {}).get("id", ""))


def _file_size(content: dict[str, Any]) -> int:
    size = content.get("fileLength", 0)
    try:
        return int(size)
    except (TypeError, ValueError):
        return 0


def _quoted_event(
    chat_id: str, content: Any, transport: Transport | None
) -> dict[str, Any] | None:
    """Rebuild a raw event for the message quoted by `content`, if any."""
    if not isinstance(content, dict):
        return None
    context = content.get("contextInfo")
    if not isinstance(context, dict):
        return None
    quoted = context.get("quotedMessage")
    if not isinstance(quoted, dict) or not quoted:
        return None

    participant = context.get("participant") or ""
    own_id = _own_id(transport)
    return {
        "key": {
            "remoteJid": chat_id,
            "fromMe": bool(own_id) and normalize_jid(participant) == own_id,
            "id": context.get("stanzaId") or "",
            "participant": participant,
        },
        "message": quoted,
        "pushName": context.get("pushName") or "",
    }


def serialize(
    raw: dict[str, Any],
    transport: Transport | None = None,
    *,
    _with_quoted: bool = True,
) -> Message | None:
    """
    Build a `Message` from a raw transport event.

    Returns None when the event has no chat to attribute it to. Quoted
    messages are normalized one level deep.
    """
    key = raw.get("key") or {}
    chat_id = key.get("remoteJid")
    if not chat_id:
        return None

    raw_content = raw.get("message") or {}
    is_group_chat = is_group_jid(chat_id)

    raw_type = get_content_key(raw_content)
    message, is_view_once = unwrap_view_once(raw_content)
    content_key = get_content_key(message) if is_view_once else raw_type
    content = message.get(content_key) if content_key else None
    media = content if isinstance(content, dict) else {}

    quoted = None
    if _with_quoted:
        quoted_raw = _quoted_event(chat_id, content, transport)
        if quoted_raw is not None:
            quoted = serialize(quoted_raw, transport, _with_quoted=False)

    mentions = (media.get("contextInfo") or {}).get("mentionedJid") or []

    return Message(
        key=key,
        chat_id=chat_id,
        from_self=bool(key.get("fromMe")),
        id=key.get("id") or "",
        is_group_chat=is_group_chat,
        sender_id=(key.get("participant") or "") if is_group_chat else chat_id,
        display_name=raw.get("pushName") or "",
        content_type=classify(content_key),
        raw_type=raw_type,
        raw_content=raw_content,
        text=extract_body(message),
        quoted=quoted,
        caption=media.get("caption") or "",
        mime_type=media.get("mimetype") or "",
        file_size_bytes=_file_size(media),
        mentioned_ids=tuple(mentions),
        is_view_once=is_view_once,
        raw=raw,
        transport=transport,
    )
