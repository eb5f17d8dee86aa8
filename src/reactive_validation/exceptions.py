"""Exceptions raised for configuration and programming errors.

Validation failures are never raised: they are recorded as messages in
the object's ValidationErrors collection.
"""

from __future__ import annotations

__all__ = [
    "ReactiveValidationError",
    "ValidatorNotFoundError",
    "InvalidRuleOptionsError",
    "ValidationRecursionError",
]


class ReactiveValidationError(Exception):
    """Base class for all errors raised by reactive_validation."""


class ValidatorNotFoundError(ReactiveValidationError, LookupError):
    """No built-in or explicit validator matches a rule name."""

    def __init__(self, rule_name: str) -> None:
        self.rule_name = rule_name
        super().__init__(f"No validator found for rule {rule_name!r}")


class InvalidRuleOptionsError(ReactiveValidationError, TypeError):
    """Options given for a rule cannot configure its validator."""

    def __init__(self, rule_name: str, reason: str) -> None:
        self.rule_name = rule_name
        super().__init__(f"Invalid options for rule {rule_name!r}: {reason}")


class ValidationRecursionError(ReactiveValidationError, RecursionError):
    """Validating an attribute re-entered itself too many times."""

    def __init__(self, attribute: str, depth: int) -> None:
        self.attribute = attribute
        self.depth = depth
        super().__init__(
            f"Validation of {attribute!r} re-entered itself {depth} times; "
            "a validator or observer is probably re-triggering validation"
        )
