"""
Observable Values
=================

Continuously-updated values exposed to the presentation layer.

Design Rules:
    - Only the owning component publishes
    - Consumers read `.value` or subscribe; they never write
    - Observers are called synchronously, and only when the value changes
"""

from typing import Callable, Generic, List, TypeVar


T = TypeVar("T")


class ObservableValue(Generic[T]):
    """
    A value with change notification.

    Example:
        progress = ObservableValue("loading_progress", 0)
        unsubscribe = progress.subscribe(lambda v: print(f"{v}%"))
        progress.publish(10)   # prints "10%"
        progress.publish(10)   # unchanged, nothing printed
        unsubscribe()
    """

    def __init__(self, name: str, initial: T) -> None:
        self.name = name
        self._value: T = initial
        self._observers: List[Callable[[T], None]] = []
        self._publish_count: int = 0

    @property
    def value(self) -> T:
        return self._value

    @property
    def publish_count(self) -> int:
        """Number of publishes that changed the value."""
        return self._publish_count

    def subscribe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            A callable that removes the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def publish(self, value: T) -> bool:
        """
        Set a new value, notifying observers if it differs.

        Returns:
            True if the value changed.
        """
        if value == self._value:
            return False
        self._value = value
        self._publish_count += 1
        for observer in list(self._observers):
            observer(value)
        return True

    def __repr__(self) -> str:
        return f"ObservableValue({self.name}={self._value!r})"
