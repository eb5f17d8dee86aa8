"""Parsing of validation rule options.

Rule options in a ``validations`` mapping come in three shapes:

- a primitive (``True``, a number or a string) meaning "enabled with defaults"
  or a shorthand value for the rule's main option;
- a mapping of constraint fields;
- a mapping with an explicit ``validator`` (class, instance or function),
  optionally with nested ``options`` for it.

Rule turns a raw entry into one of those variants.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum, auto
from typing import Any

from pydantic import BaseModel, ConfigDict

__all__ = ["RuleKind", "Rule", "rule_key"]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def rule_key(name: str) -> str:
    """Normalize a rule name to its registry key (``minLength`` -> ``min_length``)."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


class RuleKind(Enum):
    """Shape of a rule's options."""

    DEFAULTS = auto()
    """A primitive: the rule is enabled, the value is a shorthand option."""

    OPTIONS = auto()
    """A mapping of constraint fields for a registered validator."""

    EXPLICIT = auto()
    """A mapping naming the validator to use."""


class Rule(BaseModel):
    """One rule declared for one attribute.

    Attributes:
        name: Rule name as written in the ``validations`` mapping.
        kind: Which shape the raw options had.
        options: Options handed to the validator.
        validator: Explicit validator reference, for EXPLICIT rules.
        raw: The original options object, used for identity-based caching.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    kind: RuleKind
    options: Any = None
    validator: Any = None
    raw: Any = None

    @property
    def key(self) -> str:
        """Registry key for this rule's name."""
        return rule_key(self.name)

    @property
    def enabled(self) -> bool:
        """False when the rule was switched off with ``False`` or ``None``."""
        return not (self.kind is RuleKind.DEFAULTS and self.options in (False, None))

    @classmethod
    def parse(cls, name: str, raw: Any) -> Rule:
        """Classify raw rule options.

        Args:
            name: Rule name.
            raw: Options as found in the ``validations`` mapping.

        Returns:
            The parsed Rule.
        """
        if isinstance(raw, Mapping):
            if raw.get("validator") is not None:
                if "options" in raw:
                    options = raw["options"]
                else:
                    options = {k: v for k, v in raw.items() if k != "validator"}
                return cls(
                    name=name,
                    kind=RuleKind.EXPLICIT,
                    options=options,
                    validator=raw["validator"],
                    raw=raw,
                )
            return cls(name=name, kind=RuleKind.OPTIONS, options=dict(raw), raw=raw)
        return cls(name=name, kind=RuleKind.DEFAULTS, options=raw, raw=raw)

    def __repr__(self) -> str:
        return f"Rule(name={self.name!r}, kind={self.kind.name})"
