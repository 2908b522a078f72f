from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

Listener = Callable[..., Any]


class EventEmitter:
    """Synchronous observer list keyed by event name.

    Listeners run to completion, in subscription order, before ``emit`` returns.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> EventEmitter:
        self._listeners[event].append(listener)
        return self

    def remove_listener(self, event: str, listener: Listener) -> EventEmitter:
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)
        return self

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        listeners = self.listeners(event)
        for listener in listeners:
            listener(*args)
        return bool(listeners)
