"""Observable properties for stateful objects.

Provides PropertyObservableMixin, an explicit key to callbacks registry.
Writing a public attribute synchronously notifies the callbacks registered
for that key before control returns to the writer.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

__all__ = ["PropertyObserver", "PropertyObservableMixin"]

PropertyObserver = Callable[[Any, str], None]
"""Callback invoked as ``callback(obj, key)`` after ``key`` changed on ``obj``."""


class PropertyObservableMixin:
    """Mixin that makes public attributes observable by key.

    Observers are plain callables registered per attribute name (or any
    other key, such as a derived flag). Attribute writes notify them
    synchronously. Writes to names starting with an underscore are
    treated as internal state and never notify.

    Notifications can be bracketed with property_will_change() and
    property_did_change() (or the property_changes() context manager).
    While a bracket is open, notifications are queued, deduplicated and
    delivered once the outermost bracket closes, so observers never see
    intermediate state.

    Example:
        class Person(PropertyObservableMixin):
            def __init__(self) -> None:
                self.name = None

        person = Person()
        person.add_property_observer("name", lambda obj, key: print(obj.name))
        person.name = "Ada"  # prints "Ada"
    """

    _property_observers: dict[str, list[PropertyObserver]]
    _change_depth: int
    _pending_changes: list[str]

    def _ensure_property_observers(self) -> None:
        """Ensure the observer registry and change queue are initialized."""
        if getattr(self, "_property_observers", None) is None:
            self._property_observers = {}
            self._change_depth = 0
            self._pending_changes = []

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if not name.startswith("_"):
            self.notify_property_change(name)

    def add_property_observer(self, key: str, callback: PropertyObserver) -> PropertyObserver:
        """Register a callback for changes to ``key``.

        Registering the same callback twice for one key is a no-op.

        Returns:
            The callback, so it can be kept for remove_property_observer().
        """
        self._ensure_property_observers()
        callbacks = self._property_observers.setdefault(key, [])
        if callback not in callbacks:
            callbacks.append(callback)
        return callback

    def remove_property_observer(self, key: str, callback: PropertyObserver) -> bool:
        """Unregister a callback for ``key``.

        Returns:
            True if the callback was registered, False otherwise.
        """
        self._ensure_property_observers()
        callbacks = self._property_observers.get(key, [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        if not callbacks:
            del self._property_observers[key]
        return True

    def property_observers(self, key: str) -> list[PropertyObserver]:
        """Get a copy of the callbacks registered for ``key``."""
        self._ensure_property_observers()
        return list(self._property_observers.get(key, []))

    def notify_property_change(self, key: str) -> None:
        """Notify observers of ``key``, or queue the notification inside a bracket."""
        self._ensure_property_observers()
        if self._change_depth > 0:
            if key not in self._pending_changes:
                self._pending_changes.append(key)
            return
        for callback in list(self._property_observers.get(key, [])):
            callback(self, key)

    def property_will_change(self, *keys: str) -> None:
        """Open a change bracket for ``keys``."""
        self._ensure_property_observers()
        self._change_depth += 1

    def property_did_change(self, *keys: str) -> None:
        """Close a change bracket, notifying ``keys`` and any queued keys."""
        self._ensure_property_observers()
        for key in keys:
            if key not in self._pending_changes:
                self._pending_changes.append(key)
        self._change_depth -= 1
        if self._change_depth > 0:
            return
        pending, self._pending_changes = self._pending_changes, []
        for key in pending:
            self.notify_property_change(key)

    @contextmanager
    def property_changes(self, *keys: str) -> Iterator[None]:
        """Bracket a block of mutations so observers are notified once at the end."""
        self.property_will_change(*keys)
        try:
            yield
        finally:
            self.property_did_change(*keys)
