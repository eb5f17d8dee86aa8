"""Validator strategies.

Provides the BaseValidator contract, InlineValidator for plain functions,
and the built-in presence, length and format validators.
"""

from __future__ import annotations

import inspect
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sized
from types import MethodType
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from reactive_validation.exceptions import InvalidRuleOptionsError
from reactive_validation.rules import rule_key

if TYPE_CHECKING:
    from reactive_validation.base import ValidationsMixin

__all__ = [
    "BaseValidator",
    "InlineValidator",
    "ValidatorOptions",
    "PresenceValidator",
    "LengthValidator",
    "FormatValidator",
]


class ValidatorOptions(BaseModel):
    """Base options model for built-in validators.

    Keys may be given in snake_case or camelCase (``more_than`` or
    ``moreThan``). Unknown keys are rejected so typos surface as
    configuration errors.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    message: str | None = None


class BaseValidator(ABC):
    """Abstract base class for validators.

    A validator inspects one attribute's current value and records zero or
    more messages in the object's ``validation_errors``. It never raises
    for invalid values.

    Subclasses that declare ``options_model`` get their options parsed into
    that pydantic model; a primitive option is assigned to
    ``default_option`` (``True`` means "all defaults").

    Example:
        class EvenValidator(BaseValidator):
            def validate(self, obj, attribute, value):
                if value % 2:
                    self.add_error(obj, attribute, "must be even")
    """

    options_model: ClassVar[type[ValidatorOptions] | None] = None
    default_option: ClassVar[str | None] = None

    def __init__(self, options: Any = None, *, name: str | None = None) -> None:
        """Initialize the validator.

        Args:
            options: Rule options from the ``validations`` mapping.
            name: Rule name this validator was resolved for.

        Raises:
            InvalidRuleOptionsError: If options do not fit ``options_model``.
        """
        self._name = name or rule_key(self.__class__.__name__.removesuffix("Validator"))
        self._options = self._parse_options(options)

    @property
    def name(self) -> str:
        """Rule name of this validator."""
        return self._name

    @property
    def options(self) -> Any:
        """Configured options (an options model for built-ins)."""
        return self._options

    def _parse_options(self, options: Any) -> Any:
        model = self.options_model
        if model is None:
            return options
        try:
            if options is None or options is True:
                return model()
            if isinstance(options, Mapping):
                return model.model_validate(dict(options))
            if self.default_option is not None and not isinstance(options, bool):
                return model.model_validate({self.default_option: options})
        except PydanticValidationError as e:
            raise InvalidRuleOptionsError(self._name, str(e)) from e
        raise InvalidRuleOptionsError(self._name, f"unsupported value {options!r}")

    @abstractmethod
    def validate(self, obj: ValidationsMixin, attribute: str, value: Any) -> None:
        """Check ``value`` and record messages for ``attribute`` on ``obj``.

        Args:
            obj: The validated object owning the error collection.
            attribute: Name of the attribute being validated.
            value: Current value of the attribute.
        """
        ...

    def add_error(self, obj: ValidationsMixin, attribute: str, message: str) -> None:
        """Record a message, preferring a ``message`` option when configured."""
        custom = getattr(self._options, "message", None)
        obj.validation_errors.add(attribute, custom or message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class InlineValidator(BaseValidator):
    """Validator wrapping a plain function.

    A function following the validator contract ``(obj, attribute, value)``
    is called as-is. A function taking the validator first is bound to it
    like a method, so it can read ``self.options``:

        def more_than(self, obj, attribute, value):
            if value <= self.options["more_than"]:
                obj.validation_errors.add(attribute, "is too small")

    Raises:
        InvalidRuleOptionsError: If the function accepts neither signature.
    """

    def __init__(
        self,
        function: Callable[..., None],
        options: Any = None,
        *,
        name: str | None = None,
    ) -> None:
        super().__init__(options, name=name or getattr(function, "__name__", "inline"))
        if _accepts(function, 3):
            self._function = function
        elif _accepts(function, 4):
            self._function = MethodType(function, self)
        else:
            raise InvalidRuleOptionsError(
                self.name,
                f"{function!r} must accept (obj, attribute, value) "
                "or (validator, obj, attribute, value)",
            )

    def validate(self, obj: ValidationsMixin, attribute: str, value: Any) -> None:
        self._function(obj, attribute, value)


def _accepts(function: Callable[..., Any], count: int) -> bool:
    """True if ``function`` can be called with ``count`` positional arguments."""
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return count == 3
    try:
        signature.bind(*([None] * count))
    except TypeError:
        return False
    return True


class PresenceOptions(ValidatorOptions):
    pass


class PresenceValidator(BaseValidator):
    """Fails for None, blank strings and empty collections."""

    options_model = PresenceOptions

    def validate(self, obj: ValidationsMixin, attribute: str, value: Any) -> None:
        if value is None:
            blank = True
        elif isinstance(value, str):
            blank = not value.strip()
        elif isinstance(value, Sized):
            blank = len(value) == 0
        else:
            blank = False
        if blank:
            self.add_error(obj, attribute, "can't be blank")


class LengthOptions(ValidatorOptions):
    """Length constraints; a bare number in ``validations`` means ``is``."""

    is_: int | None = Field(default=None, alias="is", ge=0)
    minimum: int | None = Field(default=None, ge=0)
    maximum: int | None = Field(default=None, ge=0)
    more_than: int | None = None
    less_than: int | None = None


class LengthValidator(BaseValidator):
    """Checks the length of strings and collections.

    ``None`` counts as length 0; other values are measured through str().
    Each violated constraint adds its own message.
    """

    options_model = LengthOptions
    default_option = "is"

    def validate(self, obj: ValidationsMixin, attribute: str, value: Any) -> None:
        opts: LengthOptions = self.options
        if value is None:
            length = 0
        elif isinstance(value, Sized):
            length = len(value)
        else:
            length = len(str(value))

        if opts.is_ is not None and length != opts.is_:
            self.add_error(obj, attribute, f"is the wrong length (should be {opts.is_} characters)")
        if opts.minimum is not None and length < opts.minimum:
            self.add_error(obj, attribute, f"is too short (minimum is {opts.minimum} characters)")
        if opts.maximum is not None and length > opts.maximum:
            self.add_error(obj, attribute, f"is too long (maximum is {opts.maximum} characters)")
        if opts.more_than is not None and length <= opts.more_than:
            self.add_error(
                obj, attribute, f"is too short (should be more than {opts.more_than} characters)"
            )
        if opts.less_than is not None and length >= opts.less_than:
            self.add_error(
                obj, attribute, f"is too long (should be less than {opts.less_than} characters)"
            )


class FormatOptions(ValidatorOptions):
    """Pattern constraint; a bare string in ``validations`` means ``with``."""

    with_: re.Pattern[str] = Field(alias="with")
    allow_blank: bool = False


class FormatValidator(BaseValidator):
    """Fails when the value does not match a regular expression (``re.search``)."""

    options_model = FormatOptions
    default_option = "with"

    def validate(self, obj: ValidationsMixin, attribute: str, value: Any) -> None:
        opts: FormatOptions = self.options
        if value is None or value == "":
            if not opts.allow_blank:
                self.add_error(obj, attribute, "is invalid")
            return
        if opts.with_.search(str(value)) is None:
            self.add_error(obj, attribute, "is invalid")
