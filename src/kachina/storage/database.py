"""
Key-value storage: one JSON file per named collection.
"""

import asyncio
import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)


class Database:
    """
    Persist collections of key → JSON value pairs under a directory.

    Every call re-reads the collection file and every mutation rewrites it.
    Mutations on one collection are serialized by a per-collection lock
    within this instance; separate processes writing the same file still
    race and the last writer wins.
    """

    def __init__(self, path: str | Path = "./database"):
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def _file(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ValueError(f"Invalid collection name: {name!r}")
        return self.path / f"{name}.json"

    def _read(self, name: str, default: Mapping[str, Any] | None = None) -> dict[str, Any]:
        path = self._file(name)
        if not path.exists():
            return dict(default or {})
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return dict(default or {})
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Collection {name!r} is not a JSON object")
        return data

    def _write(self, name: str, data: dict[str, Any]) -> None:
        path = self._file(name)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)

    async def collection(
        self, name: str, default: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Read a whole collection, creating its file from `default` if absent.
        """
        async with self._locks[name]:
            data = await asyncio.to_thread(self._read, name, default)
            if not self._file(name).exists():
                await asyncio.to_thread(self._write, name, data)
            return data

    async def get(self, collection: str, key: str, default: Any = None) -> Any:
        data = await asyncio.to_thread(self._read, collection)
        value = data.get(key)
        return default if value is None else value

    async def set(self, collection: str, key: str, value: Any) -> Any:
        async with self._locks[collection]:
            data = await asyncio.to_thread(self._read, collection)
            data[key] = value
            await asyncio.to_thread(self._write, collection, data)
        return value

    async def has(self, collection: str, key: str) -> bool:
        data = await asyncio.to_thread(self._read, collection)
        return key in data

    async def delete(self, collection: str, key: str) -> bool:
        async with self._locks[collection]:
            data = await asyncio.to_thread(self._read, collection)
            data.pop(key, None)
            await asyncio.to_thread(self._write, collection, data)
        return True

    async def all(self, collection: str) -> dict[str, Any]:
        return await asyncio.to_thread(self._read, collection)

    async def clear(self, collection: str) -> bool:
        async with self._locks[collection]:
            await asyncio.to_thread(self._write, collection, {})
        return True

    async def update(
        self,
        collection: str,
        key: str,
        updater: Callable[[Any], Any] | Mapping[str, Any],
    ) -> Any:
        """
        Replace a value with `updater(old)`, or shallow-merge a mapping into it.

        Returns:
            The stored value.
        """
        async with self._locks[collection]:
            data = await asyncio.to_thread(self._read, collection)
            current = data.get(key)
            if callable(updater):
                value = updater(current)
            else:
                base = current if isinstance(current, dict) else {}
                value = {**base, **updater}
            data[key] = value
            await asyncio.to_thread(self._write, collection, data)
        return value

    async def increment(
        self, collection: str, key: str, field: str, amount: int | float = 1
    ) -> dict[str, Any]:
        """Add `amount` to a numeric field of a mapping value (missing counts as 0)."""

        def bump(data: Any) -> dict[str, Any]:
            data = dict(data) if isinstance(data, dict) else {}
            data[field] = (data.get(field) or 0) + amount
            return data

        return await self.update(collection, key, bump)

    async def push(self, collection: str, key: str, value: Any) -> Any:
        """Append to a list value; non-list values are left unchanged."""

        def append(data: Any) -> Any:
            if data is None:
                return [value]
            if isinstance(data, list):
                return [*data, value]
            logger.warning("push on non-list key %s/%s ignored", collection, key)
            return data

        return await self.update(collection, key, append)

    async def pull(self, collection: str, key: str, value: Any) -> Any:
        """Remove every occurrence of `value` from a list value."""

        def remove(data: Any) -> Any:
            if isinstance(data, list):
                return [item for item in data if item != value]
            return data

        return await self.update(collection, key, remove)
