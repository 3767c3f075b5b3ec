"""Tests for storage/database.py."""

import asyncio
import json

import pytest

from kachina.storage import Database


@pytest.fixture
def db(tmp_path) -> Database:
    return Database(tmp_path / "db")


class TestDatabase:
    def test_creates_directory(self, tmp_path):
        Database(tmp_path / "nested" / "db")
        assert (tmp_path / "nested" / "db").is_dir()

    @pytest.mark.asyncio
    async def test_set_and_get(self, db):
        await db.set("users", "u1", {"name": "Ana"})
        assert await db.get("users", "u1") == {"name": "Ana"}
        assert await db.get("users", "missing") is None
        assert await db.get("users", "missing", 0) == 0
        assert await db.get("nothing", "u1", "fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_persisted_as_json(self, db):
        await db.set("users", "u1", 1)
        data = json.loads((db.path / "users.json").read_text(encoding="utf-8"))
        assert data == {"u1": 1}

    @pytest.mark.asyncio
    async def test_has_and_delete(self, db):
        await db.set("users", "u1", True)
        assert await db.has("users", "u1")
        assert await db.delete("users", "u1") is True
        assert not await db.has("users", "u1")
        assert await db.delete("users", "never") is True

    @pytest.mark.asyncio
    async def test_collection_creates_file_from_default(self, db):
        data = await db.collection("settings", {"lang": "en"})
        assert data == {"lang": "en"}
        assert (db.path / "settings.json").exists()
        assert await db.collection("settings", {"lang": "id"}) == {"lang": "en"}

    @pytest.mark.asyncio
    async def test_update_merges_mapping(self, db):
        await db.set("users", "u1", {"name": "Ana", "level": 1})
        assert await db.update("users", "u1", {"level": 2}) == {"name": "Ana", "level": 2}

    @pytest.mark.asyncio
    async def test_update_with_callable(self, db):
        await db.set("counters", "hits", 4)
        assert await db.update("counters", "hits", lambda v: v * 2) == 8

    @pytest.mark.asyncio
    async def test_increment(self, db):
        assert await db.increment("users", "u1", "score", 5) == {"score": 5}
        assert await db.increment("users", "u1", "score", 3) == {"score": 8}

    @pytest.mark.asyncio
    async def test_push_and_pull(self, db):
        await db.push("lists", "ids", 1)
        await db.push("lists", "ids", 2)
        await db.push("lists", "ids", 1)
        assert await db.get("lists", "ids") == [1, 2, 1]
        assert await db.pull("lists", "ids", 1) == [2]

    @pytest.mark.asyncio
    async def test_push_on_non_list_is_ignored(self, db):
        await db.set("lists", "name", "Ana")
        assert await db.push("lists", "name", "x") == "Ana"

    @pytest.mark.asyncio
    async def test_all_and_clear(self, db):
        await db.set("users", "a", 1)
        await db.set("users", "b", 2)
        assert await db.all("users") == {"a": 1, "b": 2}
        assert await db.clear("users") is True
        assert await db.all("users") == {}

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, db):
        await asyncio.gather(*(db.increment("users", "u1", "score") for _ in range(20)))
        assert await db.get("users", "u1") == {"score": 20}

    @pytest.mark.asyncio
    async def test_invalid_collection_name(self, db):
        with pytest.raises(ValueError):
            await db.get("../escape", "k")
