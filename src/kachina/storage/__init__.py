"""JSON key-value storage."""

from kachina.storage.database import Database

__all__ = ["Database"]
