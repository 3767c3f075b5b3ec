"""
Async event emitter for decoupling the transport bridge from the application.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """
    Observer registry keyed by event name.

    Listeners may be plain functions or coroutine functions. They run
    sequentially in registration order; a failing listener is logged and
    does not prevent the others from running.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._once: dict[str, set[int]] = defaultdict(set)

    def on(self, event: str, listener: Listener | None = None):
        """
        Subscribe to an event.

        Can be used directly (`emitter.on("message", fn)`) or as a
        decorator (`@emitter.on("message")`).
        """
        if listener is None:

            def decorator(fn: Listener) -> Listener:
                self._listeners[event].append(fn)
                return fn

            return decorator

        self._listeners[event].append(listener)
        return listener

    def once(self, event: str, listener: Listener | None = None):
        """Subscribe to the next occurrence of an event only."""
        if listener is None:

            def decorator(fn: Listener) -> Listener:
                self.once(event, fn)
                return fn

            return decorator

        self._listeners[event].append(listener)
        self._once[event].add(id(listener))
        return listener

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)
        once = self._once.get(event)
        if once is not None:
            once.discard(id(listener))

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, []))

    async def emit(self, event: str, *args: Any) -> int:
        """
        Call every listener of `event` with `args`.

        Returns:
            Number of listeners called.
        """
        listeners = self.listeners(event)
        for listener in listeners:
            if id(listener) in self._once.get(event, ()):
                self.off(event, listener)
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Listener for '%s' failed", event)
        return len(listeners)
