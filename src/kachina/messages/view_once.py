"""
Locate the media inside a view once message.

A quoted view once message reaches us in one of four shapes:

1. raw wrapper        {"viewOnceMessageV2": {"message": {"imageMessage": {...}}}}
2. parsed wrapper     {"message": {"viewOnceMessage": {"message": {...}}}}
3. unwrapped + flag   {"imageMessage": {"viewOnce": true, ...}}
4. raw + flag         {"message": {"imageMessage": {"viewOnce": true, ...}}}
"""

from dataclasses import dataclass
from typing import Any, Union

from kachina.messages.content import VIEW_ONCE_WRAPPERS

MEDIA_KEYS = {
    "imageMessage": "image",
    "videoMessage": "video",
    "audioMessage": "audio",
}


@dataclass(frozen=True)
class ViewOnceFound:
    """Inner media message of a view once envelope."""

    media_key: str
    content: dict[str, Any]
    shape: str

    @property
    def media_type(self) -> str:
        return MEDIA_KEYS[self.media_key]

    @property
    def message(self) -> dict[str, Any]:
        """The unwrapped message payload, suitable for download."""
        return {self.media_key: self.content}


@dataclass(frozen=True)
class NotViewOnce:
    reason: str = "Not a view once message"


ViewOnceMatch = Union[ViewOnceFound, NotViewOnce]


def _media_of(message: Any) -> tuple[str, dict[str, Any]] | None:
    if not isinstance(message, dict):
        return None
    for key in MEDIA_KEYS:
        content = message.get(key)
        if isinstance(content, dict):
            return key, content
    return None


def _wrapped_media(message: Any) -> tuple[str, dict[str, Any]] | None:
    if not isinstance(message, dict):
        return None
    for wrapper in VIEW_ONCE_WRAPPERS:
        envelope = message.get(wrapper)
        if isinstance(envelope, dict):
            found = _media_of(envelope.get("message"))
            if found:
                return found
    return None


def _flagged_media(message: Any) -> tuple[str, dict[str, Any]] | None:
    found = _media_of(message)
    if found and found[1].get("viewOnce") is True:
        return found
    return None


def match_view_once(quoted: Any) -> ViewOnceMatch:
    """
    Match `quoted` against the four view once shapes.

    Accepts a normalized `Message` (its raw event and content are both
    searched) or a raw dict. Never raises.
    """
    candidates = []
    if isinstance(quoted, dict):
        candidates.append(quoted)
    else:
        raw = getattr(quoted, "raw", None)
        content = getattr(quoted, "raw_content", None)
        if isinstance(content, dict):
            candidates.append(content)
        if isinstance(raw, dict):
            candidates.append(raw)

    for candidate in candidates:
        matchers = (
            ("raw-wrapper", lambda: _wrapped_media(candidate)),
            ("parsed-wrapper", lambda: _wrapped_media(candidate.get("message"))),
            ("unwrapped-flag", lambda: _flagged_media(candidate)),
            ("raw-flag", lambda: _flagged_media(candidate.get("message"))),
        )
        for shape, matcher in matchers:
            found = matcher()
            if found:
                return ViewOnceFound(media_key=found[0], content=found[1], shape=shape)

    return NotViewOnce()
