"""Rule composition algebra.

A ValidationRule wraps a function ``(value, result, identifier) -> None`` whose
only effect is appending failures to ``result``. Combinators return new rules
that close over the originals; building a rule never validates anything.

Note that ``and_`` is not plain sequencing: it gates the second rule on the
error state of the *current* identifier right after the first rule ran, so
``a.and_(b)`` and ``b.and_(a)`` can behave differently. ``and_always`` is the
plain sequencing combinator, with ``noop()`` as its identity.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from fluent_validator.events import ValidationEvent, ValidationEventType, ValidationObserver
from fluent_validator.identifier import ValidationIdentifier, as_identifier
from fluent_validator.metadata import ValidationMetadata, ValidationSeverity
from fluent_validator.results import Failure, ValidationResult

if TYPE_CHECKING:
    from fluent_validator.protocols import ObjectRuleFunction, RuleFunction, ScopedRuleFunction
    from fluent_validator.validators import Validator

__all__ = [
    "ObjectValidationRule",
    "RuleEvaluationError",
    "ScopedValidationRule",
    "ValidationRule",
    "ValidationRuleBuilder",
    "ValidationState",
]

V = TypeVar("V")


class RuleEvaluationError(RuntimeError):
    """Raised when a named rule's own logic fails during evaluation.

    This is a fault, not a validation failure: it aborts the whole pass. The
    original exception is available as ``__cause__``.

    Attributes:
        rule_name: Name given to the rule via ``named``.
        identifier: Identifier being validated when the fault happened, or
            None for an ObjectValidationRule.
    """

    def __init__(self, rule_name: str, identifier: ValidationIdentifier | None = None) -> None:
        if identifier is None:
            message = f"Error in object validation rule '{rule_name}'"
        else:
            message = (
                f"Error in validation rule '{rule_name}' for identifier '{identifier.value}'"
            )
        super().__init__(message)
        self.rule_name = rule_name
        self.identifier = identifier


def _require_callable(obj: object, what: str) -> None:
    if obj is None:
        raise TypeError(f"{what} must not be None")
    if not callable(obj):
        raise TypeError(f"{what} must be callable, got {type(obj).__name__}")


@dataclass(frozen=True)
class ValidationState(Generic[V]):
    """Read-only snapshot handed to ``ValidationRule.peek`` observers.

    Attributes:
        value: The validated value.
        identifier: The identifier under validation.
        has_error: Whether the identifier had errors when the snapshot was taken.
        errors: The identifier's failures at snapshot time.
    """

    value: V
    identifier: ValidationIdentifier
    has_error: bool
    errors: tuple[Failure, ...]

    @classmethod
    def capture(
        cls, value: V, result: ValidationResult, identifier: ValidationIdentifier
    ) -> ValidationState[V]:
        return cls(
            value=value,
            identifier=identifier,
            has_error=result.has_error_for_identifier(identifier),
            errors=tuple(result.get_errors_for_identifier(identifier)),
        )


class ValidationRule(Generic[V]):
    """A composable validation function.

    Rules are callable with ``(value, result, identifier)``. Plain functions
    with that signature are accepted anywhere a rule is expected, and the
    class can be used as a decorator.

    Example:
        @ValidationRule
        def even(value: int, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            if value % 2:
                result.add_failure(Failure(ValidationMetadata.create(identifier, "number.even")))

        rule = number_rules.positive().and_(even).named("positive_even")
    """

    def __init__(self, function: RuleFunction[V] | ValidationRule[V]) -> None:
        """Wrap ``function`` as a rule.

        Raises:
            TypeError: If function is None or not callable.
        """
        if isinstance(function, ValidationRule):
            function = function._function
        _require_callable(function, "Validation rule")
        self._function = function

    @classmethod
    def of(cls, rule: RuleFunction[V] | ValidationRule[V]) -> ValidationRule[V]:
        """Return ``rule`` itself if it already is a ValidationRule, else wrap it."""
        if isinstance(rule, ValidationRule):
            return rule
        return cls(rule)

    def validate(
        self, value: V, result: ValidationResult, identifier: ValidationIdentifier
    ) -> None:
        """Evaluate the rule, appending any failures to ``result``."""
        self._function(value, result, identifier)

    __call__ = validate

    # -- static factories ---------------------------------------------------

    @staticmethod
    def fail(metadata: ValidationMetadata) -> ValidationRule[Any]:
        """A rule that always records one failure wrapping ``metadata``.

        The same metadata object is shared by every failure this rule records.
        """
        if not isinstance(metadata, ValidationMetadata):
            raise TypeError("Metadata must be a ValidationMetadata")

        def _fail(value: Any, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            result.add_failure(Failure(metadata))

        return ValidationRule(_fail)

    @staticmethod
    def noop() -> ValidationRule[Any]:
        """A rule that does nothing."""

        def _noop(value: Any, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            return None

        return ValidationRule(_noop)

    @staticmethod
    def configure(rule: RuleFunction[V] | ValidationRule[V]) -> ValidationRuleBuilder[V]:
        """Start a builder that sets severity/category/group/blocking on ``rule``."""
        return ValidationRuleBuilder(rule)

    # -- sequencing -----------------------------------------------------------

    def and_(self, other: RuleFunction[V] | ValidationRule[V]) -> ValidationRule[V]:
        """Run ``other`` only if the current identifier has no error after self."""
        second = ValidationRule.of(other)

        def _and(value: V, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            self(value, result, identifier)
            if not result.has_error_for_identifier(identifier):
                second(value, result, identifier)

        return ValidationRule(_and)

    def and_always(self, other: RuleFunction[V] | ValidationRule[V]) -> ValidationRule[V]:
        """Run self, then ``other`` unconditionally."""
        second = ValidationRule.of(other)

        def _and_always(
            value: V, result: ValidationResult, identifier: ValidationIdentifier
        ) -> None:
            self(value, result, identifier)
            second(value, result, identifier)

        return ValidationRule(_and_always)

    def and_if(
        self,
        condition: Callable[[V], bool],
        other: RuleFunction[V] | ValidationRule[V],
    ) -> ValidationRule[V]:
        """Run ``other`` if the current identifier has no error and ``condition(value)``."""
        _require_callable(condition, "Condition")
        second = ValidationRule.of(other)

        def _and_if(value: V, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            self(value, result, identifier)
            if not result.has_error_for_identifier(identifier) and condition(value):
                second(value, result, identifier)

        return ValidationRule(_and_if)

    def and_if_no_error_for(
        self,
        other_identifier: ValidationIdentifier | str,
        other: RuleFunction[V] | ValidationRule[V],
    ) -> ValidationRule[V]:
        """Run ``other`` only if ``other_identifier`` has no recorded error.

        The gate is a different identifier from the one being validated,
        e.g. only compare a confirmation field once the original field passed.
        """
        gate = as_identifier(other_identifier)
        second = ValidationRule.of(other)

        def _and_if_no_error_for(
            value: V, result: ValidationResult, identifier: ValidationIdentifier
        ) -> None:
            self(value, result, identifier)
            if not result.has_error_for_identifier(gate):
                second(value, result, identifier)

        return ValidationRule(_and_if_no_error_for)

    def and_if_no_errors_for(
        self,
        identifiers: Iterable[ValidationIdentifier | str],
        other: RuleFunction[V] | ValidationRule[V],
    ) -> ValidationRule[V]:
        """Run ``other`` only if none of ``identifiers`` has a recorded error."""
        if identifiers is None:
            raise TypeError("Identifiers must not be None")
        gates = tuple(as_identifier(i) for i in identifiers)
        second = ValidationRule.of(other)

        def _and_if_no_errors_for(
            value: V, result: ValidationResult, identifier: ValidationIdentifier
        ) -> None:
            self(value, result, identifier)
            if not any(result.has_error_for_identifier(gate) for gate in gates):
                second(value, result, identifier)

        return ValidationRule(_and_if_no_errors_for)

    def break_if(self, condition: Callable[[V], bool]) -> ValidationRule[V]:
        """Skip self entirely whenever ``condition(value)`` holds."""
        _require_callable(condition, "Break condition")

        def _break_if(value: V, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            if not condition(value):
                self(value, result, identifier)

        return ValidationRule(_break_if)

    # -- observation ----------------------------------------------------------

    def peek(self, observer: Callable[[ValidationState[V]], Any]) -> ValidationRule[V]:
        """Run self, then hand ``observer`` a snapshot of the identifier's state."""
        _require_callable(observer, "Peek observer")

        def _peek(value: V, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            self(value, result, identifier)
            observer(ValidationState.capture(value, result, identifier))

        return ValidationRule(_peek)

    def traced(self, name: str, observer: ValidationObserver) -> ValidationRule[V]:
        """Emit RULE_STARTED / RULE_COMPLETED events to ``observer`` around self.

        Args:
            name: Label included in both events.
            observer: Trace sink, e.g. a RichTraceObserver.
        """
        _require_name(name)
        if not isinstance(observer, ValidationObserver):
            raise TypeError("Observer must implement on_event(event)")

        def _traced(value: V, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            observer.on_event(
                ValidationEvent(
                    event_type=ValidationEventType.RULE_STARTED,
                    source=self,
                    data={
                        "rule_name": name,
                        "identifier": identifier.value,
                        "value": value,
                        "has_error": result.has_error_for_identifier(identifier),
                    },
                )
            )
            self(value, result, identifier)
            errors = result.get_errors_for_identifier(identifier)
            observer.on_event(
                ValidationEvent(
                    event_type=ValidationEventType.RULE_COMPLETED,
                    source=self,
                    data={
                        "rule_name": name,
                        "identifier": identifier.value,
                        "value": value,
                        "has_error": bool(errors),
                        "errors": errors,
                    },
                )
            )

        return ValidationRule(_traced)

    # -- fault handling -------------------------------------------------------

    def named(self, name: str) -> ValidationRule[V]:
        """Re-raise any exception from self as a RuleEvaluationError.

        The resulting error carries ``name`` and the identifier, and chains
        the original exception.
        """
        _require_name(name)

        def _named(value: V, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            try:
                self(value, result, identifier)
            except Exception as e:
                raise RuleEvaluationError(name, identifier) from e

        return ValidationRule(_named)

    # -- metadata enrichment --------------------------------------------------

    def with_metadata(self, enricher: Callable[[ValidationMetadata], Any]) -> ValidationRule[V]:
        """Apply ``enricher`` to every failure appended while self runs.

        New failures are found by comparing the failure count before and
        after evaluation, so this relies on rules only ever appending.
        """
        _require_callable(enricher, "Enricher")

        def _with_metadata(
            value: V, result: ValidationResult, identifier: ValidationIdentifier
        ) -> None:
            initial_count = len(result.get_failures())
            self(value, result, identifier)
            for failure in result.get_failures()[initial_count:]:
                failure.enrich(enricher)

        return ValidationRule(_with_metadata)

    def with_severity(self, severity: ValidationSeverity | str) -> ValidationRule[V]:
        level = ValidationSeverity(severity)
        return self.with_metadata(lambda metadata: metadata.set_severity(level))

    def with_category(self, category: str) -> ValidationRule[V]:
        _require_name(category, "Category")
        return self.with_metadata(lambda metadata: metadata.set_category(category))

    def with_group(self, group: str) -> ValidationRule[V]:
        _require_name(group, "Validation group")
        return self.with_metadata(lambda metadata: metadata.set_validation_group(group))

    def blocking(self, blocking: bool = True) -> ValidationRule[V]:
        _require_bool(blocking)
        return self.with_metadata(lambda metadata: metadata.set_blocking(blocking))

    def __repr__(self) -> str:
        name = getattr(self._function, "__name__", type(self._function).__name__)
        return f"ValidationRule({name})"


def _require_name(name: object, what: str = "Rule name") -> None:
    if not isinstance(name, str):
        raise TypeError(f"{what} must be a str")
    if not name.strip():
        raise ValueError(f"{what} must not be blank")


def _require_bool(blocking: object) -> None:
    if not isinstance(blocking, bool):
        raise TypeError(f"Blocking must be a bool, got {type(blocking).__name__}")


class ValidationRuleBuilder(Generic[V]):
    """Fluent builder that configures metadata of a rule's failures.

    Example:
        rule = (
            ValidationRule.configure(string_rules.not_blank())
            .with_severity(ValidationSeverity.WARNING)
            .with_category("profile")
            .blocking(False)
            .build()
        )
    """

    def __init__(self, rule: RuleFunction[V] | ValidationRule[V]) -> None:
        """Initialize the builder.

        Args:
            rule: The rule whose failures will be configured.

        Raises:
            TypeError: If rule is None or not callable.
        """
        self._rule: ValidationRule[V] = ValidationRule.of(rule)
        self._severity: ValidationSeverity | None = None
        self._category: str | None = None
        self._group: str | None = None
        self._blocking: bool | None = None

    def with_severity(self, severity: ValidationSeverity | str) -> ValidationRuleBuilder[V]:
        self._severity = ValidationSeverity(severity)
        return self

    def with_category(self, category: str) -> ValidationRuleBuilder[V]:
        _require_name(category, "Category")
        self._category = category
        return self

    def with_group(self, group: str) -> ValidationRuleBuilder[V]:
        _require_name(group, "Validation group")
        self._group = group
        return self

    def blocking(self, blocking: bool = True) -> ValidationRuleBuilder[V]:
        _require_bool(blocking)
        self._blocking = blocking
        return self

    def build(self) -> ValidationRule[V]:
        """Build the configured rule.

        Returns:
            The original rule when nothing was configured, otherwise a rule
            that applies the configured settings to newly recorded failures.
        """
        if (
            self._severity is None
            and self._category is None
            and self._group is None
            and self._blocking is None
        ):
            return self._rule

        severity, category, group, blocking = (
            self._severity,
            self._category,
            self._group,
            self._blocking,
        )

        def _configure(metadata: ValidationMetadata) -> None:
            if severity is not None:
                metadata.set_severity(severity)
            if category is not None:
                metadata.set_category(category)
            if group is not None:
                metadata.set_validation_group(group)
            if blocking is not None:
                metadata.set_blocking(blocking)

        return self._rule.with_metadata(_configure)

    def __repr__(self) -> str:
        return (
            f"ValidationRuleBuilder(rule={self._rule!r}, severity={self._severity}, "
            f"category={self._category!r}, group={self._group!r}, blocking={self._blocking})"
        )


class ScopedValidationRule(Generic[V]):
    """A validation function with access to the whole Validator.

    Scoped rules receive ``(value, validator)`` and may inspect any
    identifier's errors, start nested validators, and merge their scoped
    failures back. Unlike ``ValidationRule.and_``, ``and_`` here always runs
    both rules.

    Example:
        def check_address(address: Address, validator: Validator[Any]) -> None:
            nested = Validator.with_existing_result(address, validator.result)
            nested.property("city", lambda a: a.city).validate(string_rules.not_blank())
            validator.merge_scoped_failures(nested)

        person_validator.property("address", lambda p: p.address).validate_scoped(
            ScopedValidationRule(check_address)
        )
    """

    def __init__(self, function: ScopedRuleFunction[V] | ScopedValidationRule[V]) -> None:
        if isinstance(function, ScopedValidationRule):
            function = function._function
        _require_callable(function, "Scoped validation rule")
        self._function = function

    @classmethod
    def of(
        cls, rule: ScopedRuleFunction[V] | ScopedValidationRule[V]
    ) -> ScopedValidationRule[V]:
        if isinstance(rule, ScopedValidationRule):
            return rule
        return cls(rule)

    def validate(self, value: V, validator: Validator[Any]) -> None:
        self._function(value, validator)

    __call__ = validate

    def and_(
        self, other: ScopedRuleFunction[V] | ScopedValidationRule[V]
    ) -> ScopedValidationRule[V]:
        """Run self, then ``other`` unconditionally."""
        second = ScopedValidationRule.of(other)

        def _and(value: V, validator: Validator[Any]) -> None:
            self(value, validator)
            second(value, validator)

        return ScopedValidationRule(_and)


class ObjectValidationRule(Generic[V]):
    """A whole-object check receiving ``(value, result)``.

    Object rules have no identifier of their own; they record failures under
    whatever identifiers they choose, typically for cross-field checks. Run
    them through ``Validator.validate_object``. ``and_`` always runs both
    rules.

    Example:
        def dates_ordered(booking: Booking, result: ValidationResult) -> None:
            if booking.check_out <= booking.check_in:
                identifier = ValidationIdentifier.of_field("check_out")
                result.add_failure(Failure(ValidationMetadata.create(identifier, "booking.dates")))

        Validator.of(booking).validate_object(ObjectValidationRule(dates_ordered).named("dates"))
    """

    def __init__(self, function: ObjectRuleFunction[V] | ObjectValidationRule[V]) -> None:
        if isinstance(function, ObjectValidationRule):
            function = function._function
        _require_callable(function, "Object validation rule")
        self._function = function

    @classmethod
    def of(
        cls, rule: ObjectRuleFunction[V] | ObjectValidationRule[V]
    ) -> ObjectValidationRule[V]:
        if isinstance(rule, ObjectValidationRule):
            return rule
        return cls(rule)

    def validate(self, value: V, result: ValidationResult) -> None:
        self._function(value, result)

    __call__ = validate

    def and_(
        self, other: ObjectRuleFunction[V] | ObjectValidationRule[V]
    ) -> ObjectValidationRule[V]:
        """Run self, then ``other`` unconditionally."""
        second = ObjectValidationRule.of(other)

        def _and(value: V, result: ValidationResult) -> None:
            self(value, result)
            second(value, result)

        return ObjectValidationRule(_and)

    def named(self, name: str) -> ObjectValidationRule[V]:
        """Re-raise any exception from self as a RuleEvaluationError without identifier."""
        _require_name(name)

        def _named(value: V, result: ValidationResult) -> None:
            try:
                self(value, result)
            except Exception as e:
                raise RuleEvaluationError(name) from e

        return ObjectValidationRule(_named)

    def __repr__(self) -> str:
        name = getattr(self._function, "__name__", type(self._function).__name__)
        return f"ObjectValidationRule({name})"
