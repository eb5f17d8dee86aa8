"""Per-attribute validation with automatic error tracking for live objects."""

from reactive_validation.base import (
    SHOULD_VALIDATE_SUFFIX,
    ValidatedModel,
    ValidationsMixin,
    should_validate_key,
)
from reactive_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)
from reactive_validation.exceptions import (
    InvalidRuleOptionsError,
    ReactiveValidationError,
    ValidationRecursionError,
    ValidatorNotFoundError,
)
from reactive_validation.log_observer import LoggingObserver
from reactive_validation.properties import PropertyObservableMixin, PropertyObserver
from reactive_validation.protocols import ValidatorProtocol
from reactive_validation.registry import BUILTIN_VALIDATORS, ValidatorRegistry
from reactive_validation.results import ValidationErrors
from reactive_validation.rich_observers import RichErrorsObserver, build_errors_table
from reactive_validation.rules import Rule, RuleKind
from reactive_validation.touch import BoundInput
from reactive_validation.validators import (
    BaseValidator,
    FormatValidator,
    InlineValidator,
    LengthValidator,
    PresenceValidator,
    ValidatorOptions,
)

__all__ = [
    # Validation engine
    "ValidatedModel",
    "ValidationsMixin",
    "SHOULD_VALIDATE_SUFFIX",
    "should_validate_key",
    # Error collection
    "ValidationErrors",
    # Validators and registry
    "BaseValidator",
    "InlineValidator",
    "PresenceValidator",
    "LengthValidator",
    "FormatValidator",
    "ValidatorOptions",
    "ValidatorProtocol",
    "ValidatorRegistry",
    "BUILTIN_VALIDATORS",
    "Rule",
    "RuleKind",
    # Touch tracking
    "BoundInput",
    # Observable properties
    "PropertyObservableMixin",
    "PropertyObserver",
    # Observer pattern
    "ObservableMixin",
    "ValidationEvent",
    "ValidationEventType",
    "ValidationObserver",
    # Observers
    "LoggingObserver",
    "RichErrorsObserver",
    "build_errors_table",
    # Exceptions
    "ReactiveValidationError",
    "ValidatorNotFoundError",
    "InvalidRuleOptionsError",
    "ValidationRecursionError",
]

__version__ = "0.1.0"
