"""Rules for mappings (dict, OrderedDict, MappingProxyType, ...).

None values pass. Map rules reuse the collection error codes; key and value
lookups also fill the ``element`` message parameter so the collection
templates render. Entry predicates are called as ``predicate(key, value)``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from fluent_validator._rule_utils import (
    create_skip_null_rule,
    metadata_factory,
    require_non_empty,
    require_non_negative_int,
    require_not_none,
    require_predicate,
)
from fluent_validator.identifier import ValidationIdentifier
from fluent_validator.metadata import DefaultValidationCode, MessageParameter, ValidationMetadata
from fluent_validator.results import Failure, ValidationResult
from fluent_validator.rules import ValidationRule

__all__ = [
    "all_entries_match",
    "all_keys_match",
    "all_values_match",
    "any_entry_matches",
    "any_key_matches",
    "any_value_matches",
    "contains_all_keys",
    "contains_key",
    "contains_value",
    "does_not_contain_key",
    "does_not_contain_value",
    "exact_size",
    "is_empty",
    "max_size",
    "min_size",
    "no_entry_matches",
    "no_key_matches",
    "no_value_matches",
    "not_empty",
    "size_range",
]

MapRule = ValidationRule[Mapping[Any, Any]]


def _sized_rule(
    check: Callable[[int], bool],
    code: DefaultValidationCode,
    parameters: dict[MessageParameter, Any],
) -> MapRule:
    """Like ``create_skip_null_rule`` but also records the actual size."""
    named = {key.value: value for key, value in parameters.items()}

    def _rule(
        value: Mapping[Any, Any] | None,
        result: ValidationResult,
        identifier: ValidationIdentifier,
    ) -> None:
        if value is None:
            return
        size = len(value)
        if not check(size):
            metadata = ValidationMetadata.create(
                identifier, code, **named, **{MessageParameter.ACTUAL_SIZE.value: size}
            )
            result.add_failure(Failure(metadata))

    return ValidationRule(_rule)


def not_empty() -> MapRule:
    return create_skip_null_rule(
        lambda value: len(value) > 0, metadata_factory(DefaultValidationCode.NOT_EMPTY)
    )


def is_empty() -> MapRule:
    return create_skip_null_rule(
        lambda value: len(value) == 0, metadata_factory(DefaultValidationCode.IS_EMPTY)
    )


def min_size(minimum: int) -> MapRule:
    require_non_negative_int(minimum, "Minimum size")
    return create_skip_null_rule(
        lambda value: len(value) >= minimum,
        metadata_factory(DefaultValidationCode.MIN_SIZE, {MessageParameter.MIN_SIZE: minimum}),
    )


def max_size(maximum: int) -> MapRule:
    require_non_negative_int(maximum, "Maximum size")
    return create_skip_null_rule(
        lambda value: len(value) <= maximum,
        metadata_factory(DefaultValidationCode.MAX_SIZE, {MessageParameter.MAX_SIZE: maximum}),
    )


def exact_size(size: int) -> MapRule:
    require_non_negative_int(size, "Exact size")
    return _sized_rule(
        lambda actual: actual == size,
        DefaultValidationCode.EXACT_SIZE,
        {MessageParameter.EXACT_SIZE: size},
    )


def size_range(minimum: int, maximum: int) -> MapRule:
    """Fail unless ``minimum <= len(value) <= maximum``.

    Raises:
        TypeError: If a bound is not an int.
        ValueError: If a bound is negative or minimum exceeds maximum.
    """
    require_non_negative_int(minimum, "Minimum size")
    require_non_negative_int(maximum, "Maximum size")
    if minimum > maximum:
        raise ValueError("Minimum size cannot be greater than maximum size")
    return _sized_rule(
        lambda actual: minimum <= actual <= maximum,
        DefaultValidationCode.SIZE_RANGE,
        {MessageParameter.MIN_SIZE: minimum, MessageParameter.MAX_SIZE: maximum},
    )


def contains_key(key: Any) -> MapRule:
    require_not_none(key, "Key")
    return create_skip_null_rule(
        lambda value: key in value,
        metadata_factory(
            DefaultValidationCode.COLLECTION_CONTAINS,
            {MessageParameter.KEY: repr(key), MessageParameter.ELEMENT: repr(key)},
        ),
    )


def does_not_contain_key(key: Any) -> MapRule:
    require_not_none(key, "Key")
    return create_skip_null_rule(
        lambda value: key not in value,
        metadata_factory(
            DefaultValidationCode.DOES_NOT_CONTAIN,
            {MessageParameter.KEY: repr(key), MessageParameter.ELEMENT: repr(key)},
        ),
    )


def contains_all_keys(keys: Iterable[Any]) -> MapRule:
    """Fail unless every one of ``keys`` is present.

    Raises:
        TypeError: If keys is None.
        ValueError: If keys is empty.
    """
    required = require_non_empty(keys, "Keys collection")
    listed = str(list(required))
    return create_skip_null_rule(
        lambda value: all(key in value for key in required),
        metadata_factory(
            DefaultValidationCode.CONTAINS_ALL,
            {MessageParameter.KEYS: listed, MessageParameter.ELEMENTS: listed},
        ),
    )


def contains_value(expected: Any) -> MapRule:
    return create_skip_null_rule(
        lambda value: any(item == expected for item in value.values()),
        metadata_factory(
            DefaultValidationCode.COLLECTION_CONTAINS,
            {MessageParameter.VALUE: repr(expected), MessageParameter.ELEMENT: repr(expected)},
        ),
    )


def does_not_contain_value(unexpected: Any) -> MapRule:
    return create_skip_null_rule(
        lambda value: all(item != unexpected for item in value.values()),
        metadata_factory(
            DefaultValidationCode.DOES_NOT_CONTAIN,
            {MessageParameter.VALUE: repr(unexpected), MessageParameter.ELEMENT: repr(unexpected)},
        ),
    )


# -- predicates ---------------------------------------------------------------


def _predicate_rule(
    predicate: Callable[..., bool],
    description: str,
    check: Callable[[Mapping[Any, Any]], bool],
    code: DefaultValidationCode,
) -> MapRule:
    require_predicate(predicate, description)
    return create_skip_null_rule(
        check, metadata_factory(code, {MessageParameter.CONDITION: description})
    )


def all_keys_match(predicate: Callable[[Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: all(predicate(key) for key in value),
        DefaultValidationCode.ALL_MATCH,
    )


def all_values_match(predicate: Callable[[Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: all(predicate(item) for item in value.values()),
        DefaultValidationCode.ALL_MATCH,
    )


def all_entries_match(predicate: Callable[[Any, Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: all(predicate(key, item) for key, item in value.items()),
        DefaultValidationCode.ALL_MATCH,
    )


def any_key_matches(predicate: Callable[[Any], bool], description: str) -> MapRule:
    """Fail unless some key satisfies ``predicate``; empty mappings fail."""
    return _predicate_rule(
        predicate,
        description,
        lambda value: any(predicate(key) for key in value),
        DefaultValidationCode.ANY_MATCH,
    )


def any_value_matches(predicate: Callable[[Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: any(predicate(item) for item in value.values()),
        DefaultValidationCode.ANY_MATCH,
    )


def any_entry_matches(predicate: Callable[[Any, Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: any(predicate(key, item) for key, item in value.items()),
        DefaultValidationCode.ANY_MATCH,
    )


def no_key_matches(predicate: Callable[[Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: not any(predicate(key) for key in value),
        DefaultValidationCode.NONE_MATCH,
    )


def no_value_matches(predicate: Callable[[Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: not any(predicate(item) for item in value.values()),
        DefaultValidationCode.NONE_MATCH,
    )


def no_entry_matches(predicate: Callable[[Any, Any], bool], description: str) -> MapRule:
    return _predicate_rule(
        predicate,
        description,
        lambda value: not any(predicate(key, item) for key, item in value.items()),
        DefaultValidationCode.NONE_MATCH,
    )
