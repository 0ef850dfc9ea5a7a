"""Shared helpers for the bundled rule packs."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from fluent_validator.identifier import ValidationIdentifier
from fluent_validator.metadata import DefaultValidationCode, MessageParameter, ValidationMetadata
from fluent_validator.results import Failure, ValidationResult
from fluent_validator.rules import ValidationRule

MetadataFactory = Callable[[ValidationIdentifier], ValidationMetadata]


def metadata_factory(
    code: DefaultValidationCode,
    parameters: Mapping[MessageParameter, Any] | None = None,
) -> MetadataFactory:
    """Factory producing fresh metadata for ``code`` on every failure."""
    named = {key.value: value for key, value in (parameters or {}).items()}
    return lambda identifier: ValidationMetadata.create(identifier, code, **named)


def create_rule(
    check: Callable[[Any], bool], make_metadata: MetadataFactory
) -> ValidationRule[Any]:
    """Build a rule recording ``make_metadata(identifier)`` when ``check`` fails."""

    def _rule(value: Any, result: ValidationResult, identifier: ValidationIdentifier) -> None:
        if not check(value):
            result.add_failure(Failure(make_metadata(identifier)))

    return ValidationRule(_rule)


def create_skip_null_rule(
    check: Callable[[Any], bool], make_metadata: MetadataFactory
) -> ValidationRule[Any]:
    """Like ``create_rule`` but None values always pass."""

    def _rule(value: Any, result: ValidationResult, identifier: ValidationIdentifier) -> None:
        if value is None:
            return
        if not check(value):
            result.add_failure(Failure(make_metadata(identifier)))

    return ValidationRule(_rule)


def require_not_none(value: object, what: str) -> None:
    if value is None:
        raise TypeError(f"{what} must not be None")


def require_non_negative_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int")
    if value < 0:
        raise ValueError(f"{what} cannot be negative")
    return value


def require_predicate(predicate: object, description: object) -> None:
    if not callable(predicate):
        raise TypeError("Predicate must be callable")
    if not isinstance(description, str) or not description.strip():
        raise ValueError("Predicate description cannot be None or blank")


def require_non_empty(values: object, what: str) -> tuple[Any, ...]:
    """Materialize ``values`` once, rejecting None and empty iterables."""
    require_not_none(values, what)
    if not isinstance(values, Iterable):
        raise TypeError(f"{what} must be iterable")
    items = tuple(values)
    if not items:
        raise ValueError(f"{what} cannot be empty")
    return items
