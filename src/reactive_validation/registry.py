"""Validator registry.

Resolves a rule name plus its options to a validator instance.
"""

from __future__ import annotations

from typing import Any

from reactive_validation.exceptions import ValidatorNotFoundError
from reactive_validation.protocols import ValidatorProtocol
from reactive_validation.rules import Rule, RuleKind, rule_key
from reactive_validation.validators import (
    BaseValidator,
    FormatValidator,
    InlineValidator,
    LengthValidator,
    PresenceValidator,
)

__all__ = ["BUILTIN_VALIDATORS", "ValidatorRegistry"]

BUILTIN_VALIDATORS: dict[str, type[BaseValidator]] = {
    "presence": PresenceValidator,
    "length": LengthValidator,
    "format": FormatValidator,
}


class ValidatorRegistry:
    """Maps rule names to validator classes.

    Each registry starts with the built-in validators registered. Names
    are normalized, so ``minLength`` and ``min_length`` resolve to the same
    entry.

    Example:
        registry = ValidatorRegistry()
        registry.register("even", EvenValidator)

        validator = registry.get_validator("length", {"moreThan": 3})
        validator.validate(obj, "name", obj.name)
    """

    def __init__(self, validators: dict[str, type[BaseValidator]] | None = None) -> None:
        """Initialize the registry.

        Args:
            validators: Extra validator classes by rule name. Registered after
                the built-ins, so they can replace them.
        """
        self._validators: dict[str, type[BaseValidator]] = dict(BUILTIN_VALIDATORS)
        for name, validator_class in (validators or {}).items():
            self.register(name, validator_class)

    def register(self, name: str, validator_class: type[BaseValidator]) -> None:
        """Register a validator class under a rule name.

        Raises:
            TypeError: If validator_class is not a BaseValidator subclass.
        """
        if not (isinstance(validator_class, type) and issubclass(validator_class, BaseValidator)):
            raise TypeError(f"{validator_class!r} is not a BaseValidator subclass")
        self._validators[rule_key(name)] = validator_class

    def unregister(self, name: str) -> bool:
        """Remove a rule name. Returns True if it was registered."""
        return self._validators.pop(rule_key(name), None) is not None

    @property
    def names(self) -> list[str]:
        """Registered rule names."""
        return list(self._validators)

    def get_validator(self, name: str, options: Any = None) -> ValidatorProtocol:
        """Resolve a rule to a validator instance.

        Resolution order: an explicit ``validator`` class in the options is
        instantiated, an explicit validator instance (anything
        with ``validate`` and ``name``) is used as-is, any other
        explicit callable is wrapped in an InlineValidator; otherwise the
        registered validator for ``name`` is instantiated with the options.

        Args:
            name: Rule name from the ``validations`` mapping.
            options: Rule options (primitive or mapping).

        Returns:
            A validator exposing ``validate(obj, attribute, value)``.

        Raises:
            ValidatorNotFoundError: If nothing matches the rule name.
            InvalidRuleOptionsError: If the options cannot configure the validator.
        """
        return self.resolve(Rule.parse(name, options))

    def resolve(self, rule: Rule) -> ValidatorProtocol:
        """Resolve an already parsed rule. See get_validator()."""
        if rule.kind is RuleKind.EXPLICIT:
            ref = rule.validator
            if isinstance(ref, type):
                return self._instantiate(ref, rule)
            if isinstance(ref, ValidatorProtocol):
                return ref
            if callable(ref):
                return InlineValidator(ref, rule.options, name=rule.name)
            raise ValidatorNotFoundError(rule.name)

        validator_class = self._validators.get(rule.key)
        if validator_class is None:
            raise ValidatorNotFoundError(rule.name)
        return validator_class(rule.options, name=rule.name)

    def _instantiate(self, validator_class: type, rule: Rule) -> ValidatorProtocol:
        """Create an explicit validator class with the rule's options.

        Classes that do not take a ``name`` keyword are called with the
        options alone.
        """
        if issubclass(validator_class, BaseValidator):
            return validator_class(rule.options, name=rule.name)
        try:
            validator = validator_class(rule.options, name=rule.name)
        except TypeError:
            validator = validator_class(rule.options)
        if not isinstance(validator, ValidatorProtocol):
            raise ValidatorNotFoundError(rule.name)
        return validator

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and rule_key(name) in self._validators

    def __repr__(self) -> str:
        return f"ValidatorRegistry(validators={self.names})"
