"""Rich-based observers for displaying validation errors.

Provides Rich console UI components that render a validated object's
error collection whenever a validation pass completes.

Requires the 'rich' package: pip install rich
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reactive_validation.events import (
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)

if TYPE_CHECKING:
    from rich.console import Console
    from rich.table import Table

__all__ = ["RichErrorsObserver", "build_errors_table"]


def build_errors_table(
    errors: dict[str, list[str]],
    title: str = "Validation Errors",
    max_message_length: int = 60,
) -> Table:
    """Build a table with one row per message.

    Args:
        errors: Mapping of attribute to messages, e.g. ValidationErrors.to_dict().
        title: Table title.
        max_message_length: Messages longer than this are truncated.

    Returns:
        Rich Table with Field and Error columns.
    """
    from rich.table import Table

    table = Table(
        title=title,
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Field", style="cyan")
    table.add_column("Error", style="yellow")

    for field, messages in errors.items():
        for message in messages:
            # Truncate long messages
            display_msg = (
                message[:max_message_length] + "..."
                if len(message) > max_message_length
                else message
            )
            table.add_row(field, display_msg)

    if not any(errors.values()):
        table.add_row("-", "No errors")

    return table


class RichErrorsObserver(ValidationObserver):
    """Prints the error table after each completed validation pass.

    Example:
        observer = RichErrorsObserver()
        person.add_observer(observer)
        person.validate()  # prints a table of person's errors

    Requires:
        pip install rich
    """

    def __init__(
        self,
        console: Console | None = None,
        only_invalid: bool = False,
        include_single_attribute: bool = True,
    ) -> None:
        """Initialize the observer.

        Args:
            console: Rich Console instance. If None, creates a new one.
            only_invalid: Only print when the pass left the object invalid.
            include_single_attribute: Also print after validate_property() passes.
        """
        from rich.console import Console

        self._console = console or Console()
        self._only_invalid = only_invalid
        self._include_single_attribute = include_single_attribute
        self._passes = 0

    @property
    def passes_rendered(self) -> int:
        """Number of tables printed so far."""
        return self._passes

    def on_event(self, event: ValidationEvent) -> None:
        """Render the error table on VALIDATION_COMPLETED.

        Args:
            event: The validation event to handle.
        """
        if event.event_type != ValidationEventType.VALIDATION_COMPLETED:
            return
        field = event.data.get("field")
        if field is not None and not self._include_single_attribute:
            return
        if self._only_invalid and event.data.get("is_valid", True):
            return

        title = "Validation Errors" if field is None else f"Validation Errors ({field})"
        self._console.print(build_errors_table(event.data.get("errors", {}), title=title))
        self._passes += 1
