"""Rules for sized collections (lists, tuples, sets, ...).

None values pass. Element predicates are paired with a description used in
the ``condition`` message parameter.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from typing import Any

from fluent_validator._rule_utils import (
    create_skip_null_rule,
    metadata_factory,
    require_non_negative_int,
    require_non_empty,
    require_predicate,
)
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = [
    "all_match",
    "any_match",
    "contains",
    "contains_all",
    "contains_none",
    "does_not_contain",
    "exact_size",
    "is_empty",
    "max_size",
    "min_size",
    "no_duplicates",
    "none_match",
    "not_empty",
    "size_range",
]


def _has_no_duplicates(collection: Collection[Any]) -> bool:
    seen: list[Any] = []
    for element in collection:
        # elements may be unhashable
        if element in seen:
            return False
        seen.append(element)
    return True


def not_empty() -> ValidationRule[Collection[Any]]:
    return create_skip_null_rule(
        lambda value: len(value) > 0, metadata_factory(DefaultValidationCode.NOT_EMPTY)
    )


def is_empty() -> ValidationRule[Collection[Any]]:
    return create_skip_null_rule(
        lambda value: len(value) == 0, metadata_factory(DefaultValidationCode.IS_EMPTY)
    )


def min_size(minimum: int) -> ValidationRule[Collection[Any]]:
    require_non_negative_int(minimum, "Minimum size")
    return create_skip_null_rule(
        lambda value: len(value) >= minimum,
        metadata_factory(DefaultValidationCode.MIN_SIZE, {MessageParameter.MIN_SIZE: minimum}),
    )


def max_size(maximum: int) -> ValidationRule[Collection[Any]]:
    require_non_negative_int(maximum, "Maximum size")
    return create_skip_null_rule(
        lambda value: len(value) <= maximum,
        metadata_factory(DefaultValidationCode.MAX_SIZE, {MessageParameter.MAX_SIZE: maximum}),
    )


def exact_size(size: int) -> ValidationRule[Collection[Any]]:
    require_non_negative_int(size, "Exact size")
    return create_skip_null_rule(
        lambda value: len(value) == size,
        metadata_factory(DefaultValidationCode.EXACT_SIZE, {MessageParameter.EXACT_SIZE: size}),
    )


def size_range(minimum: int, maximum: int) -> ValidationRule[Collection[Any]]:
    """Fail unless ``minimum <= len(value) <= maximum``.

    Raises:
        TypeError: If a bound is not an int.
        ValueError: If a bound is negative or minimum exceeds maximum.
    """
    require_non_negative_int(minimum, "Minimum size")
    require_non_negative_int(maximum, "Maximum size")
    if minimum > maximum:
        raise ValueError("Minimum size must be less than or equal to maximum size")
    return create_skip_null_rule(
        lambda value: minimum <= len(value) <= maximum,
        metadata_factory(
            DefaultValidationCode.SIZE_RANGE,
            {MessageParameter.MIN_SIZE: minimum, MessageParameter.MAX_SIZE: maximum},
        ),
    )


def all_match(
    predicate: Callable[[Any], bool], description: str
) -> ValidationRule[Collection[Any]]:
    require_predicate(predicate, description)
    return create_skip_null_rule(
        lambda value: all(predicate(element) for element in value),
        metadata_factory(
            DefaultValidationCode.ALL_MATCH, {MessageParameter.CONDITION: description}
        ),
    )


def any_match(
    predicate: Callable[[Any], bool], description: str
) -> ValidationRule[Collection[Any]]:
    """Fail unless at least one element satisfies ``predicate``; empty collections fail."""
    require_predicate(predicate, description)
    return create_skip_null_rule(
        lambda value: any(predicate(element) for element in value),
        metadata_factory(
            DefaultValidationCode.ANY_MATCH, {MessageParameter.CONDITION: description}
        ),
    )


def none_match(
    predicate: Callable[[Any], bool], description: str
) -> ValidationRule[Collection[Any]]:
    require_predicate(predicate, description)
    return create_skip_null_rule(
        lambda value: not any(predicate(element) for element in value),
        metadata_factory(
            DefaultValidationCode.NONE_MATCH, {MessageParameter.CONDITION: description}
        ),
    )


def no_duplicates() -> ValidationRule[Collection[Any]]:
    return create_skip_null_rule(
        _has_no_duplicates, metadata_factory(DefaultValidationCode.NO_DUPLICATES)
    )


def contains(element: Any) -> ValidationRule[Collection[Any]]:
    return create_skip_null_rule(
        lambda value: element in value,
        metadata_factory(
            DefaultValidationCode.COLLECTION_CONTAINS, {MessageParameter.ELEMENT: repr(element)}
        ),
    )


def does_not_contain(element: Any) -> ValidationRule[Collection[Any]]:
    return create_skip_null_rule(
        lambda value: element not in value,
        metadata_factory(
            DefaultValidationCode.DOES_NOT_CONTAIN, {MessageParameter.ELEMENT: repr(element)}
        ),
    )


def contains_all(elements: Iterable[Any]) -> ValidationRule[Collection[Any]]:
    """Fail unless every one of ``elements`` is in the collection.

    Raises:
        TypeError: If elements is None.
        ValueError: If elements is empty.
    """
    required = require_non_empty(elements, "Elements collection")
    return create_skip_null_rule(
        lambda value: all(element in value for element in required),
        metadata_factory(
            DefaultValidationCode.CONTAINS_ALL, {MessageParameter.ELEMENTS: str(list(required))}
        ),
    )


def contains_none(elements: Iterable[Any]) -> ValidationRule[Collection[Any]]:
    """Fail if any element of the collection is one of ``elements``."""
    forbidden = require_non_empty(elements, "Elements collection")
    return create_skip_null_rule(
        lambda value: not any(element in forbidden for element in value),
        metadata_factory(
            DefaultValidationCode.CONTAINS_NONE, {MessageParameter.ELEMENTS: str(list(forbidden))}
        ),
    )
