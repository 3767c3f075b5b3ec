"""Tests for bus/emitter.py."""

import pytest

from kachina.bus import EventEmitter


class TestEventEmitter:
    @pytest.mark.asyncio
    async def test_sync_and_async_listeners_in_order(self):
        emitter = EventEmitter()
        calls = []

        emitter.on("message", lambda m: calls.append(("sync", m)))

        @emitter.on("message")
        async def handler(m):
            calls.append(("async", m))

        assert await emitter.emit("message", "hi") == 2
        assert calls == [("sync", "hi"), ("async", "hi")]

    @pytest.mark.asyncio
    async def test_failing_listener_is_isolated(self, caplog):
        emitter = EventEmitter()
        calls = []

        def broken():
            raise RuntimeError("boom")

        emitter.on("ready", broken)
        emitter.on("ready", lambda: calls.append(1))

        await emitter.emit("ready")

        assert calls == [1]
        assert "Listener for 'ready' failed" in caplog.text

    @pytest.mark.asyncio
    async def test_once(self):
        emitter = EventEmitter()
        calls = []
        emitter.once("ready", lambda: calls.append(1))

        await emitter.emit("ready")
        await emitter.emit("ready")

        assert calls == [1]
        assert emitter.listeners("ready") == []

    @pytest.mark.asyncio
    async def test_off(self):
        emitter = EventEmitter()
        calls = []

        def listener():
            calls.append(1)

        emitter.on("ready", listener)
        emitter.off("ready", listener)
        emitter.off("ready", listener)

        assert await emitter.emit("ready") == 0
        assert calls == []

    @pytest.mark.asyncio
    async def test_emit_without_listeners(self):
        assert await EventEmitter().emit("nothing", 1, 2) == 0

    @pytest.mark.asyncio
    async def test_once_on_one_event_keeps_other_subscriptions(self):
        emitter = EventEmitter()
        calls = []

        def listener(*args):
            calls.append(args)

        emitter.on("a", listener)
        emitter.once("b", listener)

        await emitter.emit("a", 1)
        await emitter.emit("a", 2)
        await emitter.emit("b", 3)
        await emitter.emit("b", 4)

        assert calls == [(1,), (2,), (3,)]
        assert emitter.listeners("a") == [listener]
        assert emitter.listeners("b") == []
