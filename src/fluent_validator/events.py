"""Observer pattern implementation for validation events.

Provides event types, observer protocol, and mixin for adding observer
support to validation classes. Observers are the tracing channel of the
framework: results announce recorded failures, traced rules announce their
start and completion, and validators announce the start and end of a pass.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "ValidationEventType",
    "ValidationEvent",
    "ValidationObserver",
    "ObservableMixin",
]


class ValidationEventType(Enum):
    """Types of validation events that can be observed."""

    FAILURE_ADDED = auto()
    """Emitted when a failure is appended to a ValidationResult."""

    RULE_STARTED = auto()
    """Emitted by a traced rule before it evaluates."""

    RULE_COMPLETED = auto()
    """Emitted by a traced rule after it evaluates."""

    VALIDATION_STARTED = auto()
    """Emitted when a Validator pass begins."""

    VALIDATION_COMPLETED = auto()
    """Emitted when a Validator pass is completed."""


@dataclass
class ValidationEvent:
    """A validation event that can be observed.

    Attributes:
        event_type: The type of event that occurred.
        source: The object that emitted the event (result, rule or validator).
        data: Event-specific data dictionary.

    Example:
        event = ValidationEvent(
            event_type=ValidationEventType.FAILURE_ADDED,
            source=result,
            data={"identifier": "email", "error_code": "string.matches"},
        )
    """

    event_type: ValidationEventType
    source: object
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ValidationObserver(Protocol):
    """Protocol for validation event observers.

    Implement this protocol to receive validation events. Observers
    can be used for logging, metrics collection, debugging, etc.

    Example:
        class PrintingObserver:
            def on_event(self, event: ValidationEvent) -> None:
                print(f"{event.event_type.name}: {event.data}")
    """

    def on_event(self, event: ValidationEvent) -> None:
        """Handle a validation event.

        Args:
            event: The validation event to handle.
        """
        ...
class ObservableMixin:
    """Observer registry shared by results and validators.

    Subclasses need no ``__init__`` cooperation: the observer list is
    created on first use. Emitters should check ``has_observers`` before
    building event payloads on hot paths such as ``add_failure``.

    Example:
        result = ValidationResult()
        result.add_observer(PrintingObserver())
        result.add_failure(failure)  # observer receives FAILURE_ADDED
    """

    _observers: list[ValidationObserver] | None = None

    def _observer_list(self) -> list[ValidationObserver]:
        if self._observers is None:
            self._observers = []
        return self._observers

    def add_observer(self, observer: ValidationObserver) -> None:
        """Register ``observer``; registering the same one twice is a no-op.

        Raises:
            TypeError: If observer does not implement on_event.
        """
        if not isinstance(observer, ValidationObserver):
            raise TypeError("Observer must implement on_event(event)")
        observers = self._observer_list()
        if observer not in observers:
            observers.append(observer)

    def add_observers(self, observers: Iterable[ValidationObserver]) -> None:
        """Register each of ``observers`` in order."""
        for observer in observers:
            self.add_observer(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        observers = self._observer_list()
        if observer in observers:
            observers.remove(observer)

    @property
    def has_observers(self) -> bool:
        return bool(self._observers)

    def notify(self, event: ValidationEvent) -> None:
        """Deliver ``event`` to every registered observer, in registration order."""
        for observer in tuple(self._observers or ()):
            observer.on_event(event)

    @property
    def observers(self) -> list[ValidationObserver]:
        """Copy of the registered observers."""
        return list(self._observers or ())

    def clear_observers(self) -> None:
        self._observer_list().clear()
