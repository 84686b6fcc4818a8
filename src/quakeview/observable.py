"""Slice-level change notification shared by the zoom, sort, and selection controllers."""

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Observable(Generic[T]):
    """Holds one slice of state and notifies subscribers only when it changes.

    Listeners receive ``(new, old)``. ``subscribe`` returns a callable that
    removes the listener again.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._listeners: list[Callable[[T, T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        """Replace the value. Returns True when listeners were notified."""
        if value == self._value:
            return False
        old, self._value = self._value, value
        for listener in list(self._listeners):
            listener(value, old)
        return True

    def subscribe(self, listener: Callable[[T, T], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
