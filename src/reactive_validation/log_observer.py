"""Structured logging of validation events.

Provides LoggingObserver, which writes every validation event to a
structlog logger.
"""

from __future__ import annotations

from typing import Any

import structlog

from reactive_validation.events import (
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)

__all__ = ["LoggingObserver"]


class LoggingObserver(ValidationObserver):
    """Logs validation events with structlog.

    The event name is the lower-cased event type (``validation_completed``)
    and the event data becomes key/value pairs. Completed passes that left
    the object invalid are logged at warning level, everything else at
    debug level. The errors snapshot is left out unless ``include_errors``
    is set.

    Example:
        person.add_observer(LoggingObserver())
        person.validate()
        # [warning] validation_completed field=None is_valid=False error_count=1 ...
    """

    def __init__(self, logger: Any = None, include_errors: bool = False) -> None:
        """Initialize the observer.

        Args:
            logger: A structlog logger. Defaults to structlog.get_logger(__name__).
            include_errors: Include the full errors snapshot in completion logs.
        """
        self._logger = logger or structlog.get_logger(__name__)
        self._include_errors = include_errors

    def on_event(self, event: ValidationEvent) -> None:
        """Log one event.

        Args:
            event: The validation event to log.
        """
        data = dict(event.data)
        if not self._include_errors:
            data.pop("errors", None)
        source = type(event.source).__name__
        name = event.event_type.name.lower()

        if event.event_type == ValidationEventType.VALIDATION_COMPLETED and not event.data.get(
            "is_valid", True
        ):
            self._logger.warning(name, source=source, **data)
        else:
            self._logger.debug(name, source=source, **data)
