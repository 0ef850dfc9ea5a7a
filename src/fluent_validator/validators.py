"""Fluent traversal engine.

Validator binds a target object, a shared ValidationResult and a sticky
short-circuit flag. PropertyValidator binds one extracted property of that
target to an identifier and runs rules against it, writing into the shared
result. Short-circuit flags only ever go from False to True.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from fluent_validator.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)
from fluent_validator.identifier import ValidationIdentifier, as_identifier
from fluent_validator.results import ScopedValidationResult, ValidationResult
from fluent_validator.rules import ObjectValidationRule, ScopedValidationRule, ValidationRule

if TYPE_CHECKING:
    from fluent_validator.protocols import ObjectRuleFunction, RuleFunction, ScopedRuleFunction

__all__ = ["PropertyValidator", "Validator"]

T = TypeVar("T")
V = TypeVar("V")
K = TypeVar("K")


def _require_callable(obj: object, what: str) -> None:
    if not callable(obj):
        raise TypeError(f"{what} must be callable")


class Validator(ObservableMixin, Generic[T]):
    """Root of a fluent validation chain.

    Example:
        result = (
            Validator.of(user)
            .property("name", lambda u: u.name)
                .validate(string_rules.not_blank())
                .validate_if_no_error(string_rules.min_length(2))
                .end()
            .property("age", lambda u: u.age)
                .validate(number_rules.min_value(18))
                .end()
            .result
        )

    Once ``short_circuit_if`` (or a tripped circuit breaker) sets the flag,
    every property chain started from this validator afterwards skips its
    rules.
    """

    def __init__(
        self,
        target: T | None,
        result: ValidationResult | None = None,
        short_circuit: bool = False,
    ) -> None:
        """Initialize the validator.

        Prefer ``Validator.of`` or ``Validator.with_existing_result``.

        Args:
            target: Object being validated. May be None; all extracted
                property values are then None.
            result: Result to write into. Defaults to a fresh result.
            short_circuit: Initial state of the short-circuit flag.
        """
        self._target = target
        self._result = result if result is not None else ValidationResult()
        self._short_circuit = bool(short_circuit)
        self._started_at: float | None = None

    @classmethod
    def of(
        cls,
        target: T | None,
        observers: Iterable[ValidationObserver] | None = None,
    ) -> Validator[T]:
        """Start validating ``target`` with a fresh result.

        Args:
            target: Object to validate.
            observers: Optional observers. They are attached to both the
                validator and its result, and receive VALIDATION_STARTED
                immediately.
        """
        validator = cls(target)
        if observers is not None:
            observers = list(observers)
            validator.add_observers(observers)
            validator._result.add_observers(observers)
        validator._started_at = time.perf_counter()
        validator.notify(
            ValidationEvent(
                event_type=ValidationEventType.VALIDATION_STARTED,
                source=validator,
                data={"target": target},
            )
        )
        return validator

    @classmethod
    def with_existing_result(
        cls, target: T | None, parent_result: ValidationResult
    ) -> Validator[T]:
        """Start a nested stage whose result is scoped under ``parent_result``.

        The new validator sees the parent's failures (for gating) but records
        its own failures locally; fold them back with
        ``merge_scoped_failures``.

        Raises:
            TypeError: If parent_result is None.
        """
        if parent_result is None:
            raise TypeError("ValidationResult cannot be None")
        return cls(target, ScopedValidationResult(parent_result), False)

    @property
    def target(self) -> T | None:
        return self._target

    @property
    def result(self) -> ValidationResult:
        """The shared result every property chain writes into."""
        return self._result

    @property
    def is_short_circuited(self) -> bool:
        return self._short_circuit

    def property(
        self,
        identifier: ValidationIdentifier | str,
        extractor: Callable[[T], V],
    ) -> PropertyValidator[T, V]:
        """Begin a property chain for ``extractor(target)``.

        The value is extracted immediately. A None target yields a None
        value without calling the extractor.
        """
        property_id = as_identifier(identifier)
        _require_callable(extractor, "Extractor")
        value = extractor(self._target) if self._target is not None else None
        return PropertyValidator(self, property_id, value)

    def property_value(
        self, identifier: ValidationIdentifier | str, value: V
    ) -> PropertyValidator[T, V]:
        """Begin a property chain for an already computed ``value``.

        A None target yields a None value.
        """
        property_id = as_identifier(identifier)
        return PropertyValidator(self, property_id, value if self._target is not None else None)

    def validate_with_circuit_breaker(
        self,
        value: V,
        identifier: ValidationIdentifier | str,
        rule: RuleFunction[V] | ValidationRule[V],
    ) -> Validator[T]:
        """Run ``rule`` in isolation and trip the short-circuit on failure.

        Failures are copied into the main result; property chains started
        after a trip skip their rules.
        """
        breaker_id = as_identifier(identifier)
        checked = ValidationRule.of(rule)
        temp_result = ValidationResult()
        checked(value, temp_result, breaker_id)
        if temp_result.has_errors():
            for failure in temp_result.get_failures():
                self._result.add_failure(failure)
            self._short_circuit = True
        return self

    def validate_object(
        self, rule: ObjectRuleFunction[T] | ObjectValidationRule[T]
    ) -> Validator[T]:
        """Run a whole-object rule against the target and the shared result.

        Skipped when the short-circuit flag is set or the target is None.
        """
        checked = ObjectValidationRule.of(rule)
        if not self._short_circuit and self._target is not None:
            checked(self._target, self._result)
        return self

    def short_circuit_if(self, condition: Callable[[ValidationResult], bool]) -> Validator[T]:
        """Set the short-circuit flag if ``condition(result)`` holds."""
        _require_callable(condition, "Condition")
        if condition(self._result):
            self._short_circuit = True
        return self

    def short_circuit_if_errors(self) -> Validator[T]:
        """Set the short-circuit flag if the result has any error."""
        return self.short_circuit_if(ValidationResult.has_errors)

    def merge_scoped_failures(self, other: Validator[Any]) -> Validator[T]:
        """Copy the other validator's locally scoped failures into this result.

        Does nothing if the other validator's result is not scoped, so
        ancestor failures are never added twice.
        """
        other_result = other.result
        if isinstance(other_result, ScopedValidationResult):
            for failure in other_result.get_scoped_failures():
                self._result.add_failure(failure)
        return self

    def complete(self) -> ValidationResult:
        """Finish the pass, emit VALIDATION_COMPLETED and return the result."""
        duration_ms = (
            (time.perf_counter() - self._started_at) * 1000
            if self._started_at is not None
            else 0.0
        )
        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.VALIDATION_COMPLETED,
                source=self,
                data={
                    "target": self._target,
                    "has_errors": self._result.has_errors(),
                    "failure_count": len(self._result.get_failures()),
                    "duration_ms": duration_ms,
                },
            )
        )
        return self._result

    def __repr__(self) -> str:
        return (
            f"Validator(target={type(self._target).__name__}, "
            f"result={self._result!r}, short_circuit={self._short_circuit})"
        )


class PropertyValidator(Generic[T, V]):
    """Runs rules against one property of a Validator's target.

    Every ``validate*`` method is skipped once either this property's own
    short-circuit flag or the parent's flag is set.
    """

    def __init__(
        self,
        parent: Validator[T],
        identifier: ValidationIdentifier,
        value: V | None,
    ) -> None:
        self._parent = parent
        self._identifier = identifier
        self._value = value
        self._short_circuit = False

    @property
    def parent(self) -> Validator[T]:
        return self._parent

    @property
    def identifier(self) -> ValidationIdentifier:
        return self._identifier

    @property
    def value(self) -> V | None:
        return self._value

    @property
    def is_short_circuited(self) -> bool:
        """True if this chain or its parent validator is short-circuited."""
        return self._short_circuit or self._parent.is_short_circuited

    def validate(self, rule: RuleFunction[V] | ValidationRule[V]) -> PropertyValidator[T, V]:
        checked = ValidationRule.of(rule)
        if not self.is_short_circuited:
            checked(self._value, self._parent.result, self._identifier)
        return self

    def validate_when(
        self,
        condition: Callable[[V | None], bool],
        rule: RuleFunction[V] | ValidationRule[V],
    ) -> PropertyValidator[T, V]:
        """Run ``rule`` only if ``condition(value)`` holds."""
        _require_callable(condition, "Condition")
        checked = ValidationRule.of(rule)
        if not self.is_short_circuited and condition(self._value):
            checked(self._value, self._parent.result, self._identifier)
        return self

    def validate_if_no_error(
        self, rule: RuleFunction[V] | ValidationRule[V]
    ) -> PropertyValidator[T, V]:
        """Run ``rule`` only if this property has no recorded error yet."""
        checked = ValidationRule.of(rule)
        result = self._parent.result
        if not self.is_short_circuited and not result.has_error_for_identifier(self._identifier):
            checked(self._value, result, self._identifier)
        return self

    def validate_if_no_error_for(
        self,
        other_identifier: ValidationIdentifier | str,
        rule: RuleFunction[V] | ValidationRule[V],
    ) -> PropertyValidator[T, V]:
        """Run ``rule`` only if ``other_identifier`` has no recorded error."""
        gate = as_identifier(other_identifier)
        checked = ValidationRule.of(rule)
        result = self._parent.result
        if not self.is_short_circuited and not result.has_error_for_identifier(gate):
            checked(self._value, result, self._identifier)
        return self

    def validate_scoped(
        self, rule: ScopedRuleFunction[V] | ScopedValidationRule[V]
    ) -> PropertyValidator[T, V]:
        """Run a scoped rule with access to the parent validator."""
        checked = ScopedValidationRule.of(rule)
        if not self.is_short_circuited:
            checked(self._value, self._parent)
        return self

    def peek(self, consumer: Callable[[V], Any]) -> PropertyValidator[T, V]:
        """Call ``consumer(value)`` for a non-None value; the result is untouched."""
        _require_callable(consumer, "Consumer")
        if not self.is_short_circuited and self._value is not None:
            consumer(self._value)
        return self

    def short_circuit_if(
        self, condition: Callable[[ValidationResult], bool]
    ) -> PropertyValidator[T, V]:
        """Set this chain's flag if ``condition(result)`` holds."""
        _require_callable(condition, "Condition")
        if condition(self._parent.result):
            self._short_circuit = True
        return self

    def short_circuit_if_errors(self) -> PropertyValidator[T, V]:
        """Set this chain's flag if this property has any recorded error."""
        return self.short_circuit_if(
            lambda result: result.has_error_for_identifier(self._identifier)
        )

    def property(
        self,
        nested_identifier: ValidationIdentifier | str,
        extractor: Callable[[V], K],
    ) -> PropertyValidator[V, K]:
        """Descend into a sub-property of this property's value.

        The nested chain gets a new Validator over the value that shares the
        same result. Its short-circuit flag is a snapshot of this chain's
        state taken now; later changes on either side do not propagate.
        """
        nested_id = as_identifier(nested_identifier)
        _require_callable(extractor, "Extractor")
        nested_parent: Validator[V] = Validator(
            self._value, self._parent.result, self.is_short_circuited
        )
        nested_value = extractor(self._value) if self._value is not None else None
        return PropertyValidator(nested_parent, nested_id, nested_value)

    def end(self) -> Validator[T]:
        """Close this chain and return the parent validator."""
        return self._parent

    def __repr__(self) -> str:
        return (
            f"PropertyValidator(identifier={self._identifier.value!r}, "
            f"short_circuit={self._short_circuit})"
        )
