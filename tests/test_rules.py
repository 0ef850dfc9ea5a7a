"""Tests for the rule composition algebra."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fluent_validator.events import ValidationEventType
from fluent_validator.identifier import ValidationIdentifier
from fluent_validator.metadata import ValidationMetadata, ValidationSeverity
from fluent_validator.results import ValidationResult
from fluent_validator.rules import (
    ObjectValidationRule,
    RuleEvaluationError,
    ScopedValidationRule,
    ValidationRule,
    ValidationRuleBuilder,
    ValidationState,
)

from .conftest import RecordingObserver, SpyRule, failing_rule, make_failure, raising_rule

# =============================================================================
# Construction Tests
# =============================================================================


class TestValidationRuleConstruction:
    """Tests for wrapping functions as rules."""

    def test_wraps_plain_function(self, result: ValidationResult, name_id) -> None:
        spy = SpyRule()
        rule = ValidationRule(spy)

        rule("Ada", result, name_id)

        assert spy.calls == [("Ada", name_id)]

    def test_usable_as_decorator(self, result: ValidationResult, name_id) -> None:
        @ValidationRule
        def even(value: int, result: ValidationResult, identifier: ValidationIdentifier) -> None:
            if value % 2:
                result.add_failure(make_failure(identifier, "number.even"))

        even.validate(3, result, name_id)

        assert [f.error_code for f in result.get_failures()] == ["number.even"]

    @pytest.mark.parametrize("bad", [None, 42, "rule"])
    def test_rejects_non_callable(self, bad: Any) -> None:
        with pytest.raises(TypeError):
            ValidationRule(bad)

    def test_of_returns_existing_rule(self) -> None:
        rule = ValidationRule.noop()

        assert ValidationRule.of(rule) is rule

    def test_fail_records_given_metadata(self, result: ValidationResult, name_id) -> None:
        metadata = ValidationMetadata.create(name_id, "always.fails")

        ValidationRule.fail(metadata)("x", result, name_id)

        assert [f.metadata for f in result.get_failures()] == [metadata]

    def test_fail_requires_metadata(self) -> None:
        with pytest.raises(TypeError):
            ValidationRule.fail("always.fails")  # type: ignore[arg-type]

    def test_noop_records_nothing(self, result: ValidationResult, name_id) -> None:
        ValidationRule.noop()("x", result, name_id)

        assert not result.has_errors()

    def test_composition_does_not_evaluate(self) -> None:
        """Building combinators never calls the underlying rules."""
        first, second = SpyRule("a.fail"), SpyRule()

        (
            ValidationRule(first)
            .and_(second)
            .and_always(second)
            .break_if(lambda v: False)
            .with_severity(ValidationSeverity.WARNING)
            .named("composed")
        )

        assert first.call_count == 0
        assert second.call_count == 0

    def test_repr_names_function(self) -> None:
        def check_email(value: Any, result: ValidationResult, identifier: Any) -> None:
            return None

        assert repr(ValidationRule(check_email)) == "ValidationRule(check_email)"


# =============================================================================
# Sequencing Tests
# =============================================================================


class TestSequencing:
    """Tests for and_/and_always/and_if and the cross-identifier gates."""

    def test_and_skips_second_after_failure(self, result: ValidationResult, name_id) -> None:
        second = SpyRule()

        failing_rule().and_(second)("", result, name_id)

        assert second.call_count == 0
        assert len(result.get_failures()) == 1

    def test_and_runs_second_after_success(self, result: ValidationResult, name_id) -> None:
        second = SpyRule()

        ValidationRule.noop().and_(second)("", result, name_id)

        assert second.call_count == 1

    def test_and_checks_state_at_call_time(
        self, result: ValidationResult, name_id, age_id
    ) -> None:
        """The gate is re-evaluated on every invocation, per identifier."""
        second = SpyRule()
        rule = ValidationRule.noop().and_(second)

        result.add_failure(make_failure(name_id))
        rule("", result, name_id)
        rule("", result, age_id)

        assert second.calls == [("", age_id)]

    def test_and_is_not_commutative(self, name_id) -> None:
        failing = SpyRule("a.fail")
        passing = SpyRule()

        ValidationRule(failing).and_(passing)("", ValidationResult(), name_id)
        ValidationRule(passing).and_(failing)("", ValidationResult(), name_id)

        assert failing.call_count == 2
        assert passing.call_count == 1

    def test_and_always_runs_both(self, result: ValidationResult, name_id) -> None:
        second = SpyRule("b.fail")

        failing_rule("a.fail").and_always(second)("", result, name_id)

        assert second.call_count == 1
        assert [f.error_code for f in result.get_failures()] == ["a.fail", "b.fail"]

    def test_and_if_requires_predicate_and_no_error(
        self, result: ValidationResult, name_id
    ) -> None:
        second = SpyRule()
        rule = ValidationRule.noop().and_if(lambda v: v > 0, second)

        rule(-1, result, name_id)
        rule(1, result, name_id)
        result.add_failure(make_failure(name_id))
        rule(2, result, name_id)

        assert second.calls == [(1, name_id)]

    def test_and_if_no_error_for_other_identifier(
        self, result: ValidationResult, name_id, age_id
    ) -> None:
        second = SpyRule()
        rule = ValidationRule.noop().and_if_no_error_for(age_id, second)

        rule("x", result, name_id)
        result.add_failure(make_failure(age_id))
        rule("y", result, name_id)

        assert second.calls == [("x", name_id)]

    def test_and_if_no_error_for_ignores_current_identifier(
        self, result: ValidationResult, name_id, age_id
    ) -> None:
        """Only the named identifier gates, even if the current one failed."""
        second = SpyRule()

        failing_rule().and_if_no_error_for(age_id, second)("x", result, name_id)

        assert second.call_count == 1

    def test_and_if_no_errors_for_any_gate(
        self, result: ValidationResult, name_id, age_id
    ) -> None:
        email_id = ValidationIdentifier.of_field("email")
        second = SpyRule()
        rule = ValidationRule.noop().and_if_no_errors_for([age_id, email_id], second)

        rule("x", result, name_id)
        result.add_failure(make_failure(email_id))
        rule("y", result, name_id)

        assert second.calls == [("x", name_id)]

    def test_and_if_no_error_for_accepts_field_name(
        self, result: ValidationResult, name_id, age_id
    ) -> None:
        second = SpyRule()
        rule = ValidationRule.noop().and_if_no_error_for("age", second)

        result.add_failure(make_failure(age_id))
        rule("x", result, name_id)

        assert second.call_count == 0

    def test_and_if_no_errors_for_accepts_field_names(
        self, result: ValidationResult, name_id
    ) -> None:
        second = SpyRule()
        rule = ValidationRule.noop().and_if_no_errors_for(["age", "email"], second)

        rule("x", result, name_id)
        result.add_failure(make_failure("email"))
        rule("y", result, name_id)

        assert second.calls == [("x", name_id)]

    def test_gate_identifiers_checked(self) -> None:
        with pytest.raises(TypeError):
            ValidationRule.noop().and_if_no_errors_for(None, SpyRule())  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            ValidationRule.noop().and_if_no_errors_for([3], SpyRule())  # type: ignore[list-item]
        with pytest.raises(TypeError):
            ValidationRule.noop().and_if_no_error_for(None, SpyRule())  # type: ignore[arg-type]

    def test_break_if_never_evaluates(self, result: ValidationResult, name_id) -> None:
        inner = SpyRule("a.fail")
        rule = ValidationRule(inner).break_if(lambda v: v == "N/A")

        rule("N/A", result, name_id)
        assert inner.call_count == 0
        assert not result.has_errors()

        rule("value", result, name_id)
        assert inner.call_count == 1

    @pytest.mark.parametrize(
        "combine",
        [
            lambda r: r.and_if("not callable", ValidationRule.noop()),
            lambda r: r.break_if(None),
            lambda r: r.and_(None),
            lambda r: r.and_always(3),
        ],
    )
    def test_combinator_arguments_checked_eagerly(self, combine) -> None:
        with pytest.raises(TypeError):
            combine(ValidationRule.noop())

    @given(outcomes=st.lists(st.booleans(), min_size=1, max_size=6))
    @settings(max_examples=50)
    def test_and_always_collects_every_failure(self, outcomes: list[bool]) -> None:
        """A chain of and_always records one failure per failing link."""
        identifier = ValidationIdentifier.of_field("x")
        result = ValidationResult()
        rule = ValidationRule.noop()
        for fails in outcomes:
            rule = rule.and_always(failing_rule() if fails else ValidationRule.noop())

        rule(None, result, identifier)

        assert len(result.get_failures()) == sum(outcomes)

    @given(outcomes=st.lists(st.booleans(), min_size=1, max_size=6))
    @settings(max_examples=50)
    def test_and_chain_stops_at_first_failure(self, outcomes: list[bool]) -> None:
        identifier = ValidationIdentifier.of_field("x")
        result = ValidationResult()
        spies = [SpyRule("a.fail" if fails else None) for fails in outcomes]
        rule = ValidationRule(spies[0])
        for spy in spies[1:]:
            rule = rule.and_(spy)

        rule(None, result, identifier)

        expected_calls = outcomes.index(True) + 1 if True in outcomes else len(outcomes)
        assert sum(spy.call_count for spy in spies) == expected_calls
        assert len(result.get_failures()) == (1 if True in outcomes else 0)


# =============================================================================
# Observation Tests
# =============================================================================


class TestObservation:
    """Tests for peek and traced."""

    def test_peek_receives_snapshot(self, result: ValidationResult, name_id) -> None:
        states: list[ValidationState[Any]] = []

        failing_rule().peek(states.append)("", result, name_id)

        assert len(states) == 1
        state = states[0]
        assert state.value == ""
        assert state.identifier == name_id
        assert state.has_error is True
        assert state.errors == tuple(result.get_errors_for_identifier(name_id))

    def test_peek_does_not_touch_result(self, result: ValidationResult, name_id) -> None:
        ValidationRule.noop().peek(lambda state: None)("x", result, name_id)

        assert not result.has_errors()

    def test_peek_snapshot_is_frozen(self, result: ValidationResult, name_id) -> None:
        states: list[ValidationState[Any]] = []
        ValidationRule.noop().peek(states.append)("x", result, name_id)

        with pytest.raises(AttributeError):
            states[0].has_error = True  # type: ignore[misc]

    def test_traced_emits_start_and_completion(
        self, result: ValidationResult, name_id, recording_observer: RecordingObserver
    ) -> None:
        failing_rule("a.fail").traced("name_check", recording_observer)("", result, name_id)

        assert recording_observer.event_types == [
            ValidationEventType.RULE_STARTED,
            ValidationEventType.RULE_COMPLETED,
        ]
        started, completed = recording_observer.events
        assert started.data["rule_name"] == "name_check"
        assert started.data["identifier"] == "name"
        assert started.data["has_error"] is False
        assert completed.data["has_error"] is True
        assert [f.error_code for f in completed.data["errors"]] == ["a.fail"]

    def test_traced_requires_observer(self) -> None:
        with pytest.raises(TypeError):
            ValidationRule.noop().traced("name", object())  # type: ignore[arg-type]

    def test_traced_requires_name(self, recording_observer: RecordingObserver) -> None:
        with pytest.raises(ValueError):
            ValidationRule.noop().traced("  ", recording_observer)


# =============================================================================
# Fault Handling Tests
# =============================================================================


class TestNamed:
    """Tests for the named() fault boundary."""

    def test_wraps_exception_with_context(self, result: ValidationResult, name_id) -> None:
        original = ValueError("bad data")

        with pytest.raises(RuleEvaluationError) as excinfo:
            raising_rule(original).named("email_format")("x", result, name_id)

        error = excinfo.value
        assert error.rule_name == "email_format"
        assert error.identifier == name_id
        assert error.__cause__ is original
        assert "email_format" in str(error)
        assert "'name'" in str(error)

    def test_passes_through_when_no_fault(self, result: ValidationResult, name_id) -> None:
        failing_rule().named("check")("x", result, name_id)

        assert len(result.get_failures()) == 1

    def test_is_runtime_error(self) -> None:
        assert issubclass(RuleEvaluationError, RuntimeError)

    @pytest.mark.parametrize(("name", "error"), [(None, TypeError), ("", ValueError)])
    def test_rejects_bad_name(self, name: Any, error: type[Exception]) -> None:
        with pytest.raises(error):
            ValidationRule.noop().named(name)


# =============================================================================
# Metadata Enrichment Tests
# =============================================================================


class TestWithMetadata:
    """Tests for with_metadata and its sugar."""

    def test_enriches_only_new_failures(self, result: ValidationResult, name_id) -> None:
        earlier = make_failure(name_id, "earlier")
        result.add_failure(earlier)

        failing_rule("later").with_category("profile")("", result, name_id)

        later = result.get_failures()[-1]
        assert earlier.metadata.category is None
        assert later.metadata.category == "profile"

    def test_enricher_not_called_without_failures(
        self, result: ValidationResult, name_id
    ) -> None:
        calls: list[ValidationMetadata] = []

        ValidationRule.noop().with_metadata(calls.append)("x", result, name_id)

        assert calls == []

    def test_enriches_every_new_failure(self, result: ValidationResult, name_id, age_id) -> None:
        def two_failures(value: Any, result: ValidationResult, identifier: Any) -> None:
            result.add_failure(make_failure(identifier))
            result.add_failure(make_failure(age_id))

        ValidationRule(two_failures).with_group("signup")("x", result, name_id)

        assert [f.metadata.validation_group for f in result.get_failures()] == [
            "signup",
            "signup",
        ]

    def test_severity_and_blocking_sugar(self, result: ValidationResult, name_id) -> None:
        rule = failing_rule().with_severity("WARNING").blocking(False)

        rule("", result, name_id)

        metadata = result.get_failures()[0].metadata
        assert metadata.severity is ValidationSeverity.WARNING
        assert metadata.blocking is False

    def test_invalid_severity_rejected(self) -> None:
        with pytest.raises(ValueError):
            ValidationRule.noop().with_severity("LOUD")

    def test_blank_category_rejected(self) -> None:
        with pytest.raises(ValueError):
            ValidationRule.noop().with_category(" ")

    @pytest.mark.parametrize("bad", [1, None, "true"])
    def test_non_bool_blocking_rejected(self, bad: Any) -> None:
        with pytest.raises(TypeError):
            ValidationRule.noop().blocking(bad)


class TestValidationRuleBuilder:
    """Tests for ValidationRule.configure()."""

    def test_unconfigured_build_returns_rule(self) -> None:
        rule = failing_rule()

        assert ValidationRule.configure(rule).build() is rule

    def test_configured_build_applies_settings(self, result: ValidationResult, name_id) -> None:
        builder = ValidationRule.configure(failing_rule())
        assert isinstance(builder, ValidationRuleBuilder)

        rule = (
            builder.with_severity(ValidationSeverity.INFO)
            .with_category("profile")
            .with_group("signup")
            .blocking(False)
            .build()
        )
        rule("", result, name_id)

        metadata = result.get_failures()[0].metadata
        assert metadata.severity is ValidationSeverity.INFO
        assert metadata.category == "profile"
        assert metadata.validation_group == "signup"
        assert metadata.blocking is False

    def test_only_configured_settings_applied(self, result: ValidationResult, name_id) -> None:
        ValidationRule.configure(failing_rule()).with_category("x").build()("", result, name_id)

        metadata = result.get_failures()[0].metadata
        assert metadata.category == "x"
        assert metadata.severity is ValidationSeverity.ERROR
        assert "severity" not in metadata.message_parameters

    @pytest.mark.parametrize(
        ("configure", "error"),
        [
            (lambda b: b.with_category(None), TypeError),
            (lambda b: b.with_category(""), ValueError),
            (lambda b: b.with_group(" "), ValueError),
            (lambda b: b.with_group(7), TypeError),
            (lambda b: b.blocking("no"), TypeError),
            (lambda b: b.with_severity("LOUD"), ValueError),
        ],
    )
    def test_settings_checked_when_set(self, configure, error: type[Exception]) -> None:
        builder = ValidationRule.configure(failing_rule())

        with pytest.raises(error):
            configure(builder)


# =============================================================================
# ScopedValidationRule Tests
# =============================================================================


class TestScopedValidationRule:
    """Tests for ScopedValidationRule."""

    def test_and_runs_both_unconditionally(self) -> None:
        calls: list[str] = []
        first = ScopedValidationRule(lambda value, validator: calls.append("first"))
        second = ScopedValidationRule(lambda value, validator: calls.append("second"))

        first.and_(second)("value", object())  # type: ignore[arg-type]

        assert calls == ["first", "second"]

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError):
            ScopedValidationRule(None)  # type: ignore[arg-type]


# =============================================================================
# ObjectValidationRule Tests
# =============================================================================


class TestObjectValidationRule:
    """Tests for ObjectValidationRule."""

    @staticmethod
    def _record(field: str):
        def _check(value: Any, result: ValidationResult) -> None:
            result.add_failure(make_failure(field))

        return _check

    def test_receives_value_and_result(self, result: ValidationResult) -> None:
        seen: list[Any] = []
        rule = ObjectValidationRule(lambda value, res: seen.append((value, res)))

        rule("booking", result)

        assert seen == [("booking", result)]

    def test_and_runs_both_unconditionally(self, result: ValidationResult) -> None:
        rule = ObjectValidationRule(self._record("check_in")).and_(self._record("check_out"))

        rule(object(), result)

        assert [f.metadata.identifier.value for f in result.get_failures()] == [
            "check_in",
            "check_out",
        ]

    def test_of_returns_existing_rule(self) -> None:
        rule = ObjectValidationRule(self._record("x"))

        assert ObjectValidationRule.of(rule) is rule
        assert isinstance(ObjectValidationRule.of(self._record("x")), ObjectValidationRule)

    def test_named_wraps_exception_without_identifier(self, result: ValidationResult) -> None:
        def explode(value: Any, res: ValidationResult) -> None:
            raise KeyError("missing")

        rule = ObjectValidationRule(explode).named("dates ordered")

        with pytest.raises(RuleEvaluationError) as excinfo:
            rule(object(), result)

        assert excinfo.value.rule_name == "dates ordered"
        assert excinfo.value.identifier is None
        assert "object validation rule 'dates ordered'" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, KeyError)

    def test_named_requires_name(self) -> None:
        with pytest.raises(ValueError):
            ObjectValidationRule(self._record("x")).named(" ")

    @pytest.mark.parametrize("bad", [None, "rule", 3])
    def test_rejects_non_callable(self, bad: Any) -> None:
        with pytest.raises(TypeError):
            ObjectValidationRule(bad)

    def test_repr_names_function(self) -> None:
        def dates_ordered(value: Any, result: ValidationResult) -> None:
            pass

        assert repr(ObjectValidationRule(dates_ordered)) == "ObjectValidationRule(dates_ordered)"
