"""Observer pattern implementation for validation events.

Provides event types, observer protocol, and mixin for adding observer
support to validated objects and their error collections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "ValidationEventType",
    "ValidationEvent",
    "ValidationObserver",
    "ObservableMixin",
]


class ValidationEventType(Enum):
    """Types of validation events that can be observed."""

    ERROR_ADDED = auto()
    """Emitted when a message is added to an error collection."""

    ERRORS_CLEARED = auto()
    """Emitted when messages are removed for one attribute or for all of them."""

    VALIDATION_STARTED = auto()
    """Emitted when a full or single-attribute validation pass begins."""

    VALIDATION_COMPLETED = auto()
    """Emitted when a full or single-attribute validation pass completes."""

    AUTO_VALIDATION_TRIGGERED = auto()
    """Emitted when a value change or focus out re-validates an attribute."""

    TOUCHED = auto()
    """Emitted when an attribute's should-validate flag becomes true."""


@dataclass
class ValidationEvent:
    """A validation event that can be observed.

    Attributes:
        event_type: The type of event that occurred.
        source: The object that emitted the event (model or error collection).
        data: Event-specific data dictionary.

    Example:
        event = ValidationEvent(
            event_type=ValidationEventType.ERROR_ADDED,
            source=my_model,
            data={"field": "email", "message": "is invalid"}
        )
    """

    event_type: ValidationEventType
    source: object
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ValidationObserver(Protocol):
    """Protocol for validation event observers.

    Implement this protocol to receive validation events. Observers
    can be used for logging, rendering, alerting, etc.

    Example:
        class PrintingObserver:
            def on_event(self, event: ValidationEvent) -> None:
                print(f"{event.event_type.name}: {event.data}")
    """

    def on_event(self, event: ValidationEvent) -> None:
        """Handle a validation event.

        Args:
            event: The validation event to handle.
        """
        ...


class ObservableMixin:
    """Mixin class to add observer support to any class.

    Classes that include this mixin can emit events that observers
    will receive. Works on plain classes and on pydantic models.

    Example:
        class Form(ObservableMixin):
            def submit(self):
                self.notify(ValidationEvent(
                    event_type=ValidationEventType.VALIDATION_STARTED,
                    source=self,
                ))

        form = Form()
        form.add_observer(PrintingObserver())
    """

    _observers: list[ValidationObserver]

    def _ensure_observers(self) -> None:
        """Ensure the observers list is initialized."""
        if getattr(self, "_observers", None) is None:
            self._observers = []

    def add_observer(self, observer: ValidationObserver) -> None:
        """Add an observer to receive validation events.

        Args:
            observer: An object implementing the ValidationObserver protocol.
        """
        self._ensure_observers()
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        """Remove an observer from receiving validation events.

        Args:
            observer: The observer to remove.
        """
        self._ensure_observers()
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, event: ValidationEvent) -> None:
        """Notify all observers of a validation event.

        Args:
            event: The validation event to broadcast to observers.
        """
        self._ensure_observers()
        for observer in list(self._observers):
            observer.on_event(event)

    @property
    def observers(self) -> list[ValidationObserver]:
        """Get a copy of the current observers list."""
        self._ensure_observers()
        return self._observers.copy()

    def clear_observers(self) -> None:
        """Remove all observers."""
        self._ensure_observers()
        self._observers.clear()
