"""Validation engine for live, interactively edited objects.

Provides ValidationsMixin, which adds per-attribute validation rules,
automatic error tracking and auto-validation triggers to any property
observable class, and ValidatedModel, a Pydantic base model with the
engine mixed in.
"""

from __future__ import annotations

import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from reactive_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
)
from reactive_validation.exceptions import ValidationRecursionError
from reactive_validation.properties import PropertyObservableMixin
from reactive_validation.protocols import ValidatorProtocol
from reactive_validation.registry import ValidatorRegistry
from reactive_validation.results import ValidationErrors
from reactive_validation.rules import Rule
from reactive_validation.validators import BaseValidator

__all__ = [
    "SHOULD_VALIDATE_SUFFIX",
    "ValidatedModel",
    "ValidationsMixin",
    "should_validate_key",
]

SHOULD_VALIDATE_SUFFIX = "_should_validate"

VALUE_CHANGE = "value_change"
FOCUS_OUT = "focus_out"


def should_validate_key(attribute: str) -> str:
    """Property key of an attribute's should-validate flag (``name`` -> ``name_should_validate``)."""
    return f"{attribute}{SHOULD_VALIDATE_SUFFIX}"


class _ErrorsForwarder:
    """Observer relaying error collection events to the owning object."""

    def __init__(self, owner: ValidationsMixin) -> None:
        self._owner = owner

    def on_event(self, event: ValidationEvent) -> None:
        self._owner._on_validation_errors_event(event)


class ValidationsMixin(PropertyObservableMixin, ObservableMixin):
    """Mixin adding validation rules and automatic error tracking.

    The host object declares a ``validations`` mapping of attribute name
    to ``{rule name: rule options}``. Calling validate() runs every rule and
    records failures in ``validation_errors``; validate_property() does the
    same for one attribute. ``is_valid`` is true when no messages are
    recorded.

    Two automatic triggers can be switched on:
    - ``validate_on_value_change``: re-validate an attribute whenever it is
      written, once it has been touched or after a full validate().
    - ``validate_on_focus_out``: re-validate an attribute as soon as its
      should-validate flag becomes true (a bound input was entered and left).

    The triggers are rewired whenever ``validations`` or one of the flags
    is assigned. Every rule is resolved while wiring, so an unknown rule
    name raises ValidatorNotFoundError at setup time.

    Plain classes call setup_validations() at the end of ``__init__``;
    ValidatedModel does it in ``model_post_init``.

    Example:
        class Signup(ValidationsMixin):
            validate_on_value_change = True

            def __init__(self) -> None:
                self.validations = {"name": {"presence": True}}
                self.name = None
                self.setup_validations()

        signup = Signup()
        signup.validate()                # False
        signup.validation_errors["name"] # ["can't be blank"]
        signup.name = "Ada"              # re-validated automatically
        signup.is_valid                  # True
    """

    max_validation_depth: ClassVar[int] = 8
    """Nesting allowed for one attribute before ValidationRecursionError."""

    custom_validators: ClassVar[dict[str, type[BaseValidator]]] = {}
    """Extra validator classes registered in each object's registry."""

    validation_errors: ValidationErrors

    _errors_forwarder: _ErrorsForwarder
    _bound_errors: ValidationErrors | None
    _validator_registry: ValidatorRegistry
    _validator_cache: dict[tuple[str, str], tuple[Any, ValidatorProtocol | None]]
    _installed_observers: list[tuple[str, str]]
    _touched: set[str]
    _validation_depth: dict[str, int]
    _did_validate_all_once: bool
    _is_valid: bool | None
    _pending_events: list[ValidationEvent]

    # -------------------------------------------------------------------------
    # Setup and wiring
    # -------------------------------------------------------------------------

    def setup_validations(self) -> None:
        """Create the error collection and install auto-validation observers.

        Safe to call more than once.
        """
        if getattr(self, "validation_errors", None) is None:
            self.validation_errors = ValidationErrors()
        self._bind_validation_errors()
        for key in ("validations", "validate_on_value_change", "validate_on_focus_out"):
            self.add_property_observer(key, self._on_validation_config_change)
        self.add_property_observer("validation_errors", self._on_validation_errors_replaced)
        self._setup_auto_validate_observers()

    @property
    def validator_registry(self) -> ValidatorRegistry:
        """Registry resolving this object's rule names to validators."""
        registry = getattr(self, "_validator_registry", None)
        if registry is None:
            registry = ValidatorRegistry(type(self).custom_validators)
            self._validator_registry = registry
        return registry

    def use_validator_registry(self, registry: ValidatorRegistry) -> None:
        """Replace the validator registry and re-resolve every declared rule."""
        self._validator_registry = registry
        self._validator_cache = {}
        self._setup_auto_validate_observers()

    def _get_validations(self) -> Mapping[str, Mapping[str, Any]]:
        return getattr(self, "validations", None) or {}

    def _on_validation_config_change(self, obj: Any, key: str) -> None:
        self._setup_auto_validate_observers()

    def _setup_auto_validate_observers(self) -> None:
        """Install exactly one observer per (trigger kind, attribute).

        Observers for attributes no longer declared, or for a trigger that
        was switched off, are removed, and so are cached validators for
        rules no longer declared.
        """
        validations = self._get_validations()
        on_value_change = bool(getattr(self, "validate_on_value_change", False))
        on_focus_out = bool(getattr(self, "validate_on_focus_out", False))

        wanted: list[tuple[str, str]] = []
        declared: set[tuple[str, str]] = set()
        for attribute, rules in validations.items():
            for name, options in rules.items():
                self._validator_for(attribute, name, options)
                declared.add((attribute, name))
            if on_value_change:
                wanted.append((VALUE_CHANGE, attribute))
            if on_focus_out:
                wanted.append((FOCUS_OUT, attribute))

        cache = getattr(self, "_validator_cache", None) or {}
        for key in [k for k in cache if k not in declared]:
            del cache[key]

        installed = self._installed()
        for kind, attribute in list(installed):
            if (kind, attribute) not in wanted:
                self.remove_property_observer(*self._observer_for(kind, attribute))
                installed.remove((kind, attribute))

        for kind, attribute in wanted:
            if (kind, attribute) not in installed:
                self.add_property_observer(*self._observer_for(kind, attribute))
                installed.append((kind, attribute))

    def _installed(self) -> list[tuple[str, str]]:
        if getattr(self, "_installed_observers", None) is None:
            self._installed_observers = []
        return self._installed_observers

    def _observer_for(self, kind: str, attribute: str) -> tuple[str, Any]:
        if kind == VALUE_CHANGE:
            return attribute, self._on_value_change_validate_attribute
        return should_validate_key(attribute), self._on_focus_out_validate_attribute

    @property
    def auto_validated_attributes(self) -> dict[str, list[str]]:
        """Attributes with an installed observer, by trigger kind."""
        result: dict[str, list[str]] = {VALUE_CHANGE: [], FOCUS_OUT: []}
        for kind, attribute in self._installed():
            result[kind].append(attribute)
        return result

    # -------------------------------------------------------------------------
    # Auto-validation triggers
    # -------------------------------------------------------------------------

    def _gate_open(self, attribute: str) -> bool:
        return self.should_validate(attribute) or bool(
            getattr(self, "_did_validate_all_once", False)
        )

    def _on_value_change_validate_attribute(self, obj: Any, attribute: str) -> None:
        if self._gate_open(attribute):
            self._auto_validate(attribute, VALUE_CHANGE)

    def _on_focus_out_validate_attribute(self, obj: Any, key: str) -> None:
        attribute = key.removesuffix(SHOULD_VALIDATE_SUFFIX)
        if self._gate_open(attribute):
            self._auto_validate(attribute, FOCUS_OUT)

    def _auto_validate(self, attribute: str, trigger: str) -> None:
        self._emit(ValidationEventType.AUTO_VALIDATION_TRIGGERED, field=attribute, trigger=trigger)
        self.validate_property(attribute)

    # -------------------------------------------------------------------------
    # Touch state
    # -------------------------------------------------------------------------

    def _touched_attributes(self) -> set[str]:
        if getattr(self, "_touched", None) is None:
            self._touched = set()
        return self._touched

    def should_validate(self, attribute: str) -> bool:
        """True once a bound input for ``attribute`` was entered and left."""
        return attribute in self._touched_attributes()

    def mark_should_validate(self, attribute: str) -> None:
        """Latch the attribute's should-validate flag.

        The flag never goes back to false. Observers of
        ``<attribute>_should_validate`` are notified on the first call only.
        """
        touched = self._touched_attributes()
        if attribute in touched:
            return
        touched.add(attribute)
        self._emit(ValidationEventType.TOUCHED, field=attribute)
        self.notify_property_change(should_validate_key(attribute))

    def __setattr__(self, name: str, value: Any) -> None:
        if name.endswith(SHOULD_VALIDATE_SUFFIX) and not name.startswith("_"):
            if value:
                self.mark_should_validate(name.removesuffix(SHOULD_VALIDATE_SUFFIX))
            return
        super().__setattr__(name, value)

    def __getattr__(self, name: str) -> Any:
        if name.endswith(SHOULD_VALIDATE_SUFFIX) and not name.startswith("_"):
            attribute = name.removesuffix(SHOULD_VALIDATE_SUFFIX)
            # Only declared or already touched attributes have a flag
            if attribute in self._get_validations() or self.should_validate(attribute):
                return self.should_validate(attribute)
        parent = getattr(super(), "__getattr__", None)
        if parent is None:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return parent(name)

    # -------------------------------------------------------------------------
    # Error collection binding
    # -------------------------------------------------------------------------

    def _bind_validation_errors(self) -> None:
        forwarder = getattr(self, "_errors_forwarder", None)
        if forwarder is None:
            forwarder = self._errors_forwarder = _ErrorsForwarder(self)
        previous = getattr(self, "_bound_errors", None)
        current = self.validation_errors
        if previous is current:
            return
        if previous is not None:
            previous.remove_observer(forwarder)
        current.add_observer(forwarder)
        self._bound_errors = current
        self._is_valid = None

    def _on_validation_errors_replaced(self, obj: Any, key: str) -> None:
        if getattr(self, "_bound_errors", None) is not self.validation_errors:
            self._bind_validation_errors()
            self.notify_property_change("is_valid")

    def _on_validation_errors_event(self, event: ValidationEvent) -> None:
        self._is_valid = None
        forwarded = ValidationEvent(event_type=event.event_type, source=self, data=dict(event.data))
        if getattr(self, "_change_depth", 0) > 0:
            self._queued_events().append(forwarded)
        else:
            self.notify(forwarded)
        self.notify_property_change("validation_errors")
        self.notify_property_change("is_valid")

    def _queued_events(self) -> list[ValidationEvent]:
        if getattr(self, "_pending_events", None) is None:
            self._pending_events = []
        return self._pending_events

    def property_did_change(self, *keys: str) -> None:
        """Close a change bracket.

        Collection events held back while the bracket was open are delivered
        first, once the outermost bracket closes, so event observers only
        see the finished collection.
        """
        if getattr(self, "_change_depth", 0) == 1:
            pending = self._queued_events()
            while pending:
                self.notify(pending.pop(0))
        super().property_did_change(*keys)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        """True when no validation messages are recorded.

        Cached until the error collection changes.
        """
        cached = getattr(self, "_is_valid", None)
        if cached is None:
            cached = self.validation_errors.length == 0
            self._is_valid = cached
        return cached

    def validate(self) -> bool:
        """Validate every attribute declared in ``validations``.

        Clears all recorded messages first, so attributes no longer declared
        lose their stale messages. Observers of ``validation_errors`` and
        ``is_valid`` are notified once, after the whole pass.

        Returns:
            True if the object is valid.
        """
        self._did_validate_all_once = True
        validations = self._get_validations()
        errors = self.validation_errors
        start_time = time.perf_counter()

        self._emit(ValidationEventType.VALIDATION_STARTED, field=None, attributes=list(validations))

        with self.property_changes("validation_errors"):
            errors.clear()
            for attribute in validations:
                with self._recursion_guard(attribute):
                    self._run_rules(attribute)

        return self._complete(None, start_time)

    def validate_property(self, attribute: str) -> bool:
        """Validate one attribute, replacing only its messages.

        Args:
            attribute: Name of the attribute to validate.

        Returns:
            True if the attribute has no messages afterwards.

        Raises:
            ValidationRecursionError: If validating the attribute keeps
                re-triggering itself.
        """
        start_time = time.perf_counter()
        self._emit(ValidationEventType.VALIDATION_STARTED, field=attribute, attributes=[attribute])

        with self._recursion_guard(attribute):
            with self.property_changes("validation_errors"):
                self.validation_errors.remove(attribute)
                self._run_rules(attribute)

        self._complete(attribute, start_time)
        return attribute not in self.validation_errors

    def _run_rules(self, attribute: str) -> None:
        rules = self._get_validations().get(attribute) or {}
        for name, options in rules.items():
            validator = self._validator_for(attribute, name, options)
            if validator is not None:
                validator.validate(self, attribute, getattr(self, attribute, None))

    def _validator_for(self, attribute: str, name: str, options: Any) -> ValidatorProtocol | None:
        """Resolve a rule, reusing the validator while its options object is unchanged."""
        if getattr(self, "_validator_cache", None) is None:
            self._validator_cache = {}
        key = (attribute, name)
        cached = self._validator_cache.get(key)
        if cached is not None and cached[0] is options:
            return cached[1]
        rule = Rule.parse(name, options)
        validator = self.validator_registry.resolve(rule) if rule.enabled else None
        self._validator_cache[key] = (options, validator)
        return validator

    @contextmanager
    def _recursion_guard(self, attribute: str) -> Iterator[None]:
        if getattr(self, "_validation_depth", None) is None:
            self._validation_depth = {}
        depth = self._validation_depth.get(attribute, 0) + 1
        if depth > self.max_validation_depth:
            raise ValidationRecursionError(attribute, depth - 1)
        self._validation_depth[attribute] = depth
        try:
            yield
        finally:
            if depth > 1:
                self._validation_depth[attribute] = depth - 1
            else:
                self._validation_depth.pop(attribute, None)

    def _complete(self, attribute: str | None, start_time: float) -> bool:
        is_valid = self.is_valid
        errors = self.validation_errors
        self._emit(
            ValidationEventType.VALIDATION_COMPLETED,
            field=attribute,
            is_valid=is_valid,
            error_count=errors.length,
            errors=errors.to_dict(),
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return is_valid

    def _emit(self, event_type: ValidationEventType, **data: Any) -> None:
        self.notify(ValidationEvent(event_type=event_type, source=self, data=data))


class ValidatedModel(ValidationsMixin, BaseModel):
    """Pydantic base model with the validation engine built in.

    Engine configuration lives in fields excluded from serialization:
    - validations: ``{attribute: {rule name: rule options}}``
    - validate_on_value_change / validate_on_focus_out: auto-validation
      triggers, both off by default
    - validation_errors: the object's ValidationErrors collection

    Subclasses set defaults by redeclaring those fields.

    Example:
        from reactive_validation import ValidatedModel

        class Person(ValidatedModel):
            name: str | None = None
            validations: dict[str, dict[str, Any]] = {"name": {"presence": True}}
            validate_on_focus_out: bool = True

        person = Person()
        person.validate()            # False
        person.name = "Ada"
        person.validate()            # True
        person.model_dump()          # {"name": "Ada"}
    """

    model_config = ConfigDict(
        # Subclasses can override this
        extra="ignore",
    )

    max_validation_depth: ClassVar[int] = 8
    custom_validators: ClassVar[dict[str, type[BaseValidator]]] = {}

    validations: dict[str, dict[str, Any]] = Field(default_factory=dict, exclude=True)
    validate_on_value_change: bool = Field(default=False, exclude=True)
    validate_on_focus_out: bool = Field(default=False, exclude=True)
    validation_errors: ValidationErrors = Field(default_factory=ValidationErrors, exclude=True)

    def model_post_init(self, __context: Any) -> None:
        """Install auto-validation observers once fields are populated."""
        self.setup_validations()
