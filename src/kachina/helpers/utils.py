"""
Small general-purpose helpers for plugin authors.
"""

import random
import re
import string
from typing import Sequence, TypeVar

T = TypeVar("T")

USER_SUFFIX = "@s.whatsapp.net"
GROUP_SUFFIX = "@g.us"

_URL_RE = re.compile(r"https?://[^\s]+", re.IGNORECASE)


def is_group_jid(jid: str) -> bool:
    """Group chats are distinguished by the `@g.us` suffix."""
    return jid.endswith(GROUP_SUFFIX)


def jid_to_number(jid: str) -> str:
    """
    Extract the bare number from a JID.

    "628123:12@s.whatsapp.net" -> "628123"
    """
    return jid.split("@", 1)[0].split(":", 1)[0]


def normalize_jid(jid: str) -> str:
    """Strip the device suffix from a user JID ("628123:12@s.whatsapp.net")."""
    if not jid or "@" not in jid:
        return jid
    user, _, server = jid.partition("@")
    return f"{user.split(':', 1)[0]}@{server}"


def format_time(seconds: float) -> str:
    """Format seconds as "1d 2h 30m", "1h 1m 1s", "5m 30s" or "9s"."""
    seconds = int(seconds)
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_bytes(size: int) -> str:
    """Format a byte count as "1.46 MB"."""
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    value = float(size)
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


def is_url(text: str) -> bool:
    return bool(re.match(r"^https?://", text, re.IGNORECASE))


def extract_urls(text: str) -> list[str]:
    return _URL_RE.findall(text)


def random_string(length: int = 10) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(random.choice(alphabet) for _ in range(length))


def random_number(low: int, high: int) -> int:
    """Random integer in [low, high], both inclusive."""
    return random.randint(low, high)


def pick_random(items: Sequence[T]) -> T:
    return random.choice(items)


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split `items` into lists of at most `size` elements."""
    if size <= 0:
        raise ValueError("size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
