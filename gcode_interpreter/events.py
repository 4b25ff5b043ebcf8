"""
Lifecycle notifications for G-code loads.

A load emits ``data`` once per line, ``progress`` after each chunk read from
the source, and then exactly one of ``end`` (with the full result list) or
``error`` (with the exception).
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

EVENTS: tuple[str, ...] = ("data", "progress", "end", "error")

Listener = Callable[..., Any]


class Progress(NamedTuple):
    """Amount of source consumed; total is None when the size is unknown"""

    current: int
    total: int | None


class LifecycleNotifier:
    """
    Observer registration for load notifications.

    Listeners are called synchronously, in registration order, with the
    payload of the event. Exceptions raised by a listener propagate to the
    emitter.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    @staticmethod
    def _check_event(event: str) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown event '{event}', expected one of {', '.join(EVENTS)}")

    def on(self, event: str, listener: Listener):
        """Register listener for event; returns self for chaining"""
        self._check_event(event)
        self._listeners[event].append(listener)
        return self

    def once(self, event: str, listener: Listener):
        """Register listener for the next emission of event only"""
        self._check_event(event)

        def _once(*args):
            self.off(event, _once)
            listener(*args)

        _once.listener = listener  # type: ignore[attr-defined]
        self._listeners[event].append(_once)
        return self

    def off(self, event: str, listener: Listener | None = None):
        """Remove listener from event, or every listener of event if none is given"""
        self._check_event(event)
        if listener is None:
            self._listeners.pop(event, None)
            return self
        registered = self._listeners.get(event, [])
        for i, candidate in enumerate(registered):
            if candidate is listener or getattr(candidate, "listener", None) is listener:
                del registered[i]
                break
        return self

    def listeners(self, event: str) -> list[Listener]:
        self._check_event(event)
        return list(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every listener of event with args.

        Returns:
            True if at least one listener was registered
        """
        self._check_event(event)
        # Copy so once() listeners can remove themselves while iterating
        registered = list(self._listeners.get(event, []))
        for listener in registered:
            listener(*args)
        return bool(registered)
