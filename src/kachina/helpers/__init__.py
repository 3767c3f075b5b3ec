"""Helpers for bots and plugins."""

from kachina.helpers.logger import Logger, setup_logging
from kachina.helpers.sticker import (
    StickerType,
    create_circle_sticker,
    create_cropped_sticker,
    create_full_sticker,
    create_rounded_sticker,
    create_sticker,
)
from kachina.helpers.utils import (
    chunk,
    extract_urls,
    format_bytes,
    format_time,
    is_url,
    pick_random,
    random_number,
    random_string,
)

__all__ = [
    "Logger",
    "StickerType",
    "chunk",
    "create_circle_sticker",
    "create_cropped_sticker",
    "create_full_sticker",
    "create_rounded_sticker",
    "create_sticker",
    "extract_urls",
    "format_bytes",
    "format_time",
    "is_url",
    "pick_random",
    "random_number",
    "random_string",
    "setup_logging",
]
