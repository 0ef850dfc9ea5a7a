"""Shared fixtures, Hypothesis strategies and helper rules for tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from hypothesis import strategies as st

from fluent_validator.events import ValidationEvent, ValidationEventType
from fluent_validator.identifier import IdentifierKind, ValidationIdentifier
from fluent_validator.metadata import ValidationMetadata
from fluent_validator.results import Failure, ValidationResult
from fluent_validator.rules import ValidationRule

# -----------------------------------------------------------------------------
# Hypothesis Strategies
# -----------------------------------------------------------------------------

# Strategy for identifier values (letters and numbers only)
identifier_values = st.text(
    min_size=1,
    max_size=30,
    alphabet=st.characters(whitelist_categories=("L", "N")),
)

identifier_kinds = st.sampled_from(list(IdentifierKind))

identifiers = st.builds(ValidationIdentifier, kind=identifier_kinds, value=identifier_values)

# Strategy for dotted error codes
error_codes = st.from_regex(r"[a-z]{1,10}\.[a-z_]{1,15}", fullmatch=True)

# Strategy for message parameter dicts
parameter_dicts = st.dictionaries(
    keys=st.text(
        min_size=1,
        max_size=20,
        alphabet=st.characters(
            whitelist_categories=("L",)  # type: ignore[arg-type]
        ),
    ).filter(lambda key: key not in {"field", "identifier", "code", "cls"}),
    values=st.one_of(st.integers(), st.text(max_size=50), st.booleans()),
    max_size=5,
)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

FIELD = ValidationIdentifier.of_field("field")


def run(rule: ValidationRule[Any], value: Any) -> ValidationResult:
    """Evaluate ``rule`` against ``value`` into a fresh result."""
    result = ValidationResult()
    rule(value, result, FIELD)
    return result


def passes(rule: ValidationRule[Any], value: Any) -> bool:
    return not run(rule, value).has_errors()


def only_parameters(rule: ValidationRule[Any], value: Any) -> dict[str, Any]:
    """Message parameters of the single failure ``rule`` records for ``value``."""
    failures = run(rule, value).get_failures()
    assert len(failures) == 1
    return failures[0].metadata.message_parameters


def only_code(rule: ValidationRule[Any], value: Any) -> str:
    """Error code of the single failure ``rule`` records for ``value``."""
    failures = run(rule, value).get_failures()
    assert len(failures) == 1
    return failures[0].error_code



def make_failure(identifier: ValidationIdentifier | str, code: str = "test.failed") -> Failure:
    """Build a failure for ``identifier`` (str means a field identifier)."""
    if isinstance(identifier, str):
        identifier = ValidationIdentifier.of_field(identifier)
    return Failure(ValidationMetadata.create(identifier, code))


def failing_rule(code: str = "test.failed") -> ValidationRule[Any]:
    """Rule that always records one failure with ``code``."""

    def _rule(value: Any, result: ValidationResult, identifier: ValidationIdentifier) -> None:
        result.add_failure(Failure(ValidationMetadata.create(identifier, code)))

    return ValidationRule(_rule)


def raising_rule(error: Exception) -> ValidationRule[Any]:
    """Rule that raises ``error`` when evaluated."""

    def _rule(value: Any, result: ValidationResult, identifier: ValidationIdentifier) -> None:
        raise error

    return ValidationRule(_rule)


class SpyRule:
    """Rule function that records every call and optionally fails."""

    def __init__(self, code: str | None = None) -> None:
        self.code = code
        self.calls: list[tuple[Any, ValidationIdentifier]] = []

    def __call__(
        self, value: Any, result: ValidationResult, identifier: ValidationIdentifier
    ) -> None:
        self.calls.append((value, identifier))
        if self.code is not None:
            result.add_failure(Failure(ValidationMetadata.create(identifier, self.code)))

    @property
    def call_count(self) -> int:
        return len(self.calls)


class RecordingObserver:
    """Observer that records all events for testing."""

    def __init__(self) -> None:
        self.events: list[ValidationEvent] = []

    def on_event(self, event: ValidationEvent) -> None:
        self.events.append(event)

    @property
    def event_types(self) -> list[ValidationEventType]:
        return [e.event_type for e in self.events]


# -----------------------------------------------------------------------------
# Test Model Classes
# -----------------------------------------------------------------------------


@dataclass
class Address:
    street: str | None = None
    city: str | None = None


@dataclass
class Person:
    name: str | None = None
    age: int | None = None
    email: str | None = None
    tags: list[str] = field(default_factory=list)
    address: Address | None = None


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def name_id() -> ValidationIdentifier:
    return ValidationIdentifier.of_field("name")


@pytest.fixture
def age_id() -> ValidationIdentifier:
    return ValidationIdentifier.of_field("age")


@pytest.fixture
def result() -> ValidationResult:
    return ValidationResult()


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def person() -> Person:
    return Person(
        name="Ada",
        age=36,
        email="ada@example.com",
        tags=["math"],
        address=Address(street="1 Analytical Way", city="London"),
    )
