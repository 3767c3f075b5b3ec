"""Message normalization."""

from kachina.messages.content import ContentType, extract_body
from kachina.messages.serialize import Message, serialize
from kachina.messages.view_once import NotViewOnce, ViewOnceFound, match_view_once

__all__ = [
    "ContentType",
    "Message",
    "NotViewOnce",
    "ViewOnceFound",
    "extract_body",
    "match_view_once",
    "serialize",
]
