"""
Content-variant detection and text extraction for raw message payloads.
"""

import json
from enum import Enum
from typing import Any


class ContentType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    STICKER = "sticker"
    BUTTON_REPLY = "button-reply"
    LIST_REPLY = "list-reply"
    INTERACTIVE_REPLY = "interactive-reply"
    OTHER = "other"


CONTENT_TYPES: dict[str, ContentType] = {
    "conversation": ContentType.TEXT,
    "extendedTextMessage": ContentType.TEXT,
    "imageMessage": ContentType.IMAGE,
    "videoMessage": ContentType.VIDEO,
    "audioMessage": ContentType.AUDIO,
    "documentMessage": ContentType.DOCUMENT,
    "documentWithCaptionMessage": ContentType.DOCUMENT,
    "stickerMessage": ContentType.STICKER,
    "buttonsResponseMessage": ContentType.BUTTON_REPLY,
    "templateButtonReplyMessage": ContentType.BUTTON_REPLY,
    "listResponseMessage": ContentType.LIST_REPLY,
    "interactiveResponseMessage": ContentType.INTERACTIVE_REPLY,
}

VIEW_ONCE_WRAPPERS = (
    "viewOnceMessage",
    "viewOnceMessageV2",
    "viewOnceMessageV2Extension",
)

# Keys the socket library attaches next to the real content variant
_NON_CONTENT_KEYS = frozenset({"senderKeyDistributionMessage", "messageContextInfo"})


def get_content_key(message: dict[str, Any] | None) -> str | None:
    """First populated content-variant key of a raw message payload."""
    if not isinstance(message, dict):
        return None
    for key, value in message.items():
        if key in _NON_CONTENT_KEYS or value in (None, "", {}):
            continue
        return key
    return None


def unwrap_view_once(message: dict[str, Any] | None) -> tuple[dict[str, Any] | None, bool]:
    """
    Unwrap one level of view-once wrapper.

    Returns:
        (inner message, True) when `message` was wrapped, else (message, False).
    """
    key = get_content_key(message)
    if key in VIEW_ONCE_WRAPPERS:
        inner = message[key].get("message") if isinstance(message[key], dict) else None
        if isinstance(inner, dict):
            return inner, True
    return message, False


def classify(key: str | None) -> ContentType:
    return CONTENT_TYPES.get(key or "", ContentType.OTHER)


def extract_body(message: dict[str, Any] | None) -> str:
    """
    Extract the text a user would read or select from a raw message.

    Priority: conversation text, extended text, button/list/interactive
    reply id, the content variant's caption, then empty string.
    """
    key = get_content_key(message)
    if key is None:
        return ""
    content = message[key]

    if key == "conversation":
        return content if isinstance(content, str) else ""
    if not isinstance(content, dict):
        return ""
    if key == "extendedTextMessage":
        return content.get("text") or ""

    if key == "buttonsResponseMessage":
        return content.get("selectedButtonId") or ""
    if key == "templateButtonReplyMessage":
        return content.get("selectedId") or ""
    if key == "listResponseMessage":
        return (content.get("singleSelectReply") or {}).get("selectedRowId") or ""
    if key == "interactiveResponseMessage":
        params = (content.get("nativeFlowResponseMessage") or {}).get("paramsJson") or "{}"
        try:
            response = json.loads(params)
        except (TypeError, ValueError):
            return ""
        return str(response.get("id") or "") if isinstance(response, dict) else ""

    return content.get("caption") or ""
