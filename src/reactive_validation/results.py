"""Validation error collection.

Provides ValidationErrors, the attribute-keyed container of validation
failure messages owned by every validated object.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field

from reactive_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
)

__all__ = ["ValidationErrors"]


class ValidationErrors(ObservableMixin, BaseModel):
    """Ordered, attribute-keyed collection of validation messages.

    An attribute is present in the collection only while it has at least
    one message. The total message count (``length``) is the sole signal
    used to decide whether the owning object is valid.

    Every mutation that actually changes the collection emits an
    ERROR_ADDED or ERRORS_CLEARED event to registered observers.

    Example:
        errors = ValidationErrors()
        errors.add("name", "can't be blank")
        errors.add("name", "is too short")

        errors.length          # 2
        errors["name"]         # ["can't be blank", "is too short"]
        errors.remove("name")
        errors.length          # 0
    """

    messages: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def length(self) -> int:
        """Total number of messages across all attributes."""
        return sum(len(msgs) for msgs in self.messages.values())

    @property
    def attributes(self) -> list[str]:
        """Attributes that currently have messages, in insertion order."""
        return list(self.messages)

    def add(self, attribute: str, message: str) -> None:
        """Append a message for an attribute.

        Args:
            attribute: Name of the attribute that failed a rule.
            message: Human readable failure message.
        """
        self.messages.setdefault(attribute, []).append(message)
        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.ERROR_ADDED,
                source=self,
                data={"field": attribute, "message": message},
            )
        )

    def remove(self, attribute: str) -> None:
        """Remove all messages for one attribute."""
        removed = self.messages.pop(attribute, None)
        if removed:
            self.notify(
                ValidationEvent(
                    event_type=ValidationEventType.ERRORS_CLEARED,
                    source=self,
                    data={"field": attribute, "count": len(removed)},
                )
            )

    def clear(self) -> None:
        """Remove all messages for all attributes."""
        count = self.length
        self.messages.clear()
        if count:
            self.notify(
                ValidationEvent(
                    event_type=ValidationEventType.ERRORS_CLEARED,
                    source=self,
                    data={"field": None, "count": count},
                )
            )

    def get(self, attribute: str) -> list[str]:
        """Get a copy of the messages for an attribute (empty if none)."""
        return list(self.messages.get(attribute, []))

    def full_messages(self) -> list[str]:
        """Messages prefixed with their attribute name, e.g. "name can't be blank"."""
        return [f"{attribute} {message}" for attribute, msgs in self.messages.items() for message in msgs]

    def to_dict(self) -> dict[str, list[str]]:
        """Snapshot of the collection as plain lists."""
        return {attribute: list(msgs) for attribute, msgs in self.messages.items()}

    def __getitem__(self, attribute: str) -> list[str]:
        return self.get(attribute)

    def __contains__(self, attribute: object) -> bool:
        return bool(self.messages.get(attribute)) if isinstance(attribute, str) else False

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(list(self.messages))

    def __len__(self) -> int:
        return self.length
