"""Observer used to tell renderers that a mesh buffer was rewritten."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from tetfile import log

T = TypeVar("T")


class Event(Generic[T]):
    """
    Subscriber list with fire-and-forget delivery.

    Usage:
        on_buffers_changed: Event[str] = Event()
        on_buffers_changed += geometry.mark_changed   # subscribe
        on_buffers_changed -= geometry.mark_changed   # unsubscribe
        on_buffers_changed.emit("normal")

    Emitting with no subscribers does nothing. A subscriber that raises is
    logged and skipped; the remaining subscribers are still called and the
    exception never reaches the emitter.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._handlers: list[Callable[[T], None]] = []

    def __iadd__(self, handler: Callable[[T], None]) -> "Event[T]":
        if handler not in self._handlers:
            self._handlers.append(handler)
        return self

    def __isub__(self, handler: Callable[[T], None]) -> "Event[T]":
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def emit(self, value: T) -> int:
        """Notify subscribers. Returns how many handled the value without error."""
        delivered = 0
        for handler in list(self._handlers):
            try:
                handler(value)
            except Exception as e:
                log.error(e, f"Event {self.name or '<unnamed>'} handler failed for {value!r}")
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        return len(self._handlers) > 0
