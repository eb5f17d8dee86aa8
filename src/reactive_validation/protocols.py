"""Validation protocols for type checking.

Validator protocol that can be used for type hints and for accepting
duck-typed validator instances.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ValidatorProtocol(Protocol):
    """Protocol for validator implementations.

    Use this for type hints when accepting any validator. A validator
    records messages through ``obj.validation_errors.add(attribute, message)``
    and returns nothing.
    """

    def validate(self, obj: Any, attribute: str, value: Any) -> None:
        """Validate one attribute's current value."""
        ...

    @property
    def name(self) -> str:
        """Rule name of this validator."""
        ...
