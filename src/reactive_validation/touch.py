"""Touch tracking for inputs bound to validated attributes.

An attribute is "touched" once an input bound to it has received focus
and lost focus, in any order. BoundInput latches both events on itself
and then sets ``<attribute>_should_validate`` on the object owning the
bound attribute, which is what the validation engine observes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from reactive_validation.base import should_validate_key
from reactive_validation.properties import PropertyObservableMixin

__all__ = ["BoundInput"]


class BoundInput(PropertyObservableMixin, BaseModel):
    """A focus-capable input bound to an attribute path on a target object.

    The binding is ``value_binding`` for text-like inputs or
    ``checked_binding`` for checkboxes. Paths may be dotted
    (``"address.city"``) to bind an attribute of a nested object; the
    should-validate flag is then set on the nested object.

    Example:
        person = Person(validate_on_focus_out=True)
        name_input = BoundInput(target=person, value_binding="name")

        name_input.focus_in()
        name_input.focus_out()     # person.name_should_validate is now True
        name_input.enter("Ada")    # writes person.name
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    target: Any = Field(repr=False)
    value_binding: str | None = None
    checked_binding: str | None = None
    did_focus_in: bool = False
    did_focus_out: bool = False

    def model_post_init(self, __context: Any) -> None:
        self.add_property_observer("did_focus_in", self._setup_should_validate)
        self.add_property_observer("did_focus_out", self._setup_should_validate)

    @property
    def binding_path(self) -> str | None:
        """Source path of the active binding."""
        return self.value_binding or self.checked_binding

    def resolve_binding(self) -> tuple[Any, str] | None:
        """Resolve the binding path to ``(owner, attribute)``.

        Returns:
            The object owning the bound attribute and the attribute name, or
            None when the input is unbound or an intermediate object is None.
        """
        path = self.binding_path
        if not path:
            return None
        *parents, attribute = path.split(".")
        owner = self.target
        for part in parents:
            owner = getattr(owner, part, None)
            if owner is None:
                return None
        return owner, attribute

    @property
    def value(self) -> Any:
        """Current value of the bound attribute."""
        resolved = self.resolve_binding()
        if resolved is None:
            return None
        owner, attribute = resolved
        return getattr(owner, attribute, None)

    def enter(self, value: Any) -> None:
        """Write a value to the bound attribute, as typing into the input would."""
        resolved = self.resolve_binding()
        if resolved is None:
            raise AttributeError(f"{self!r} has no resolvable binding")
        owner, attribute = resolved
        setattr(owner, attribute, value)

    def focus_in(self) -> None:
        """Record that the input received focus."""
        self.did_focus_in = True

    def focus_out(self) -> None:
        """Record that the input lost focus."""
        self.did_focus_out = True

    def _setup_should_validate(self, obj: Any, key: str) -> None:
        if not (self.did_focus_in and self.did_focus_out):
            return
        resolved = self.resolve_binding()
        if resolved is None:
            return
        owner, attribute = resolved
        setattr(owner, should_validate_key(attribute), True)
