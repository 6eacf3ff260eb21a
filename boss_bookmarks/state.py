"""Observable value holders for publishing manager snapshots.

``MutableStateFlow`` holds the current value and fans each new value out to
its subscribers.  New subscribers are called immediately with the current
value, so a late subscriber never misses the latest state.  Setting a value
equal to the current one is a no-op.

Readers get a ``StateFlow`` view, which exposes ``value`` and ``subscribe``
but no setter.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")

Subscriber = Callable[[T], None]
Unsubscribe = Callable[[], None]


class StateFlow(Generic[T]):
    """Read-only view over a ``MutableStateFlow``."""

    def __init__(self, source: MutableStateFlow[T]) -> None:
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def subscribe(self, callback: Subscriber[T]) -> Unsubscribe:
        return self._source.subscribe(callback)


class MutableStateFlow(Generic[T]):
    """Current value plus one-to-many change notification."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Subscriber[T]] = []
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new: T) -> None:
        with self._lock:
            if new == self._value:
                return
            self._value = new
            subscribers = list(self._subscribers)
        for callback in subscribers:
            _notify(callback, new)

    def subscribe(self, callback: Subscriber[T]) -> Unsubscribe:
        """Register *callback* and call it right away with the current value.

        Returns a function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)
            current = self._value
        _notify(callback, current)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def as_state_flow(self) -> StateFlow[T]:
        return StateFlow(self)


def _notify(callback: Subscriber[T], value: T) -> None:
    try:
        callback(value)
    except Exception:
        logger.exception("StateFlow subscriber {!r} raised", callback)
