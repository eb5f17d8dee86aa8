"""Shared fixtures and Hypothesis strategies for tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from hypothesis import strategies as st

from reactive_validation import ValidatedModel, ValidationEvent, ValidationEventType
from reactive_validation.results import ValidationErrors

# -----------------------------------------------------------------------------
# Hypothesis Strategies
# -----------------------------------------------------------------------------

# Strategy for valid attribute names (letters only, never the flag suffix)
attribute_names = st.text(
    min_size=1,
    max_size=20,
    alphabet=st.characters(whitelist_categories=("Ll",)),  # type: ignore[arg-type]
)

# Strategy for messages
messages = st.text(min_size=1, max_size=100)

# Strategy for values typed into a name input
typed_values = st.one_of(st.none(), st.text(max_size=30))


# -----------------------------------------------------------------------------
# Test Model Classes
# -----------------------------------------------------------------------------


class Person(ValidatedModel):
    """Model with a required name and both auto-validation triggers on."""

    name: str | None = None
    validations: dict[str, dict[str, Any]] = {"name": {"presence": True}}
    validate_on_value_change: bool = True
    validate_on_focus_out: bool = True


class Account(ValidatedModel):
    """Model with a length constraint and no automatic triggers."""

    amount: str | None = None
    validations: dict[str, dict[str, Any]] = {
        "amount": {"length": {"moreThan": 3, "lessThan": 10}},
    }


class Profile(ValidatedModel):
    """Model with several attributes and rules."""

    username: str | None = None
    email: str | None = None
    bio: str = ""
    validations: dict[str, dict[str, Any]] = {
        "username": {"presence": True, "length": {"minimum": 3}},
        "email": {"format": r"^[^@\s]+@[^@\s]+$"},
    }


# -----------------------------------------------------------------------------
# Test Observers
# -----------------------------------------------------------------------------


class RecordingObserver:
    """Observer that records all events for testing."""

    def __init__(self) -> None:
        self.events: list[ValidationEvent] = []

    def on_event(self, event: ValidationEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    @property
    def event_types(self) -> list[ValidationEventType]:
        return [e.event_type for e in self.events]

    def of_type(self, event_type: ValidationEventType) -> list[ValidationEvent]:
        return [e for e in self.events if e.event_type == event_type]


class KeyRecorder:
    """Property observer that records the keys it was called with."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, obj: Any, key: str) -> None:
        self.calls.append(key)


# -----------------------------------------------------------------------------
# Pytest Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def person() -> Person:
    """Create a fresh Person with no name."""
    return Person()


@pytest.fixture
def account() -> Account:
    """Create a fresh Account with no amount."""
    return Account()


@pytest.fixture
def profile() -> Profile:
    """Create a fresh Profile."""
    return Profile()


@pytest.fixture
def recorder() -> RecordingObserver:
    """Create a RecordingObserver instance."""
    return RecordingObserver()


@pytest.fixture
def target() -> SimpleNamespace:
    """A minimal object exposing an error collection, for validator tests."""
    return SimpleNamespace(validation_errors=ValidationErrors())
