"""Rules applicable to any value.

Every factory checks its arguments when called, so a malformed rule is
rejected before anything is validated. Except for ``not_null`` and
``must_be_null``, None values pass.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fluent_validator._rule_utils import (
    create_rule,
    create_skip_null_rule,
    metadata_factory,
    require_not_none,
    require_predicate,
)
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = [
    "is_equal",
    "is_instance_of",
    "is_not_equal",
    "is_not_instance_of",
    "is_not_same_as",
    "is_same_as",
    "must_be_null",
    "not_null",
    "satisfies",
]


def _class_name(cls: type | tuple[type, ...]) -> str:
    if isinstance(cls, tuple):
        return " | ".join(c.__name__ for c in cls)
    return cls.__name__


def _require_class(cls: object) -> None:
    require_not_none(cls, "Class")
    classes = cls if isinstance(cls, tuple) else (cls,)
    if not classes or not all(isinstance(c, type) for c in classes):
        raise TypeError("Class must be a type or a non-empty tuple of types")


def not_null() -> ValidationRule[Any]:
    return create_rule(
        lambda value: value is not None, metadata_factory(DefaultValidationCode.NOT_NULL)
    )


def must_be_null() -> ValidationRule[Any]:
    return create_rule(
        lambda value: value is None, metadata_factory(DefaultValidationCode.MUST_BE_NULL)
    )


def is_equal(expected: Any) -> ValidationRule[Any]:
    require_not_none(expected, "Reference object")
    return create_skip_null_rule(
        lambda value: value == expected,
        metadata_factory(DefaultValidationCode.IS_EQUAL, {MessageParameter.VALUE: str(expected)}),
    )


def is_not_equal(unexpected: Any) -> ValidationRule[Any]:
    require_not_none(unexpected, "Reference object")
    return create_skip_null_rule(
        lambda value: value != unexpected,
        metadata_factory(
            DefaultValidationCode.IS_NOT_EQUAL, {MessageParameter.VALUE: str(unexpected)}
        ),
    )


def satisfies(predicate: Callable[[Any], bool], description: str) -> ValidationRule[Any]:
    """Fail when ``predicate(value)`` is false.

    Args:
        predicate: Check applied to non-None values.
        description: Human-readable condition, used as the ``condition``
            message parameter.

    Raises:
        TypeError: If predicate is not callable.
        ValueError: If description is None or blank.
    """
    require_predicate(predicate, description)
    return create_skip_null_rule(
        lambda value: bool(predicate(value)),
        metadata_factory(
            DefaultValidationCode.SATISFIES, {MessageParameter.CONDITION: description}
        ),
    )


def is_instance_of(cls: type | tuple[type, ...]) -> ValidationRule[Any]:
    _require_class(cls)
    return create_skip_null_rule(
        lambda value: isinstance(value, cls),
        metadata_factory(
            DefaultValidationCode.IS_INSTANCE_OF,
            {MessageParameter.CLASS_NAME: _class_name(cls)},
        ),
    )


def is_not_instance_of(cls: type | tuple[type, ...]) -> ValidationRule[Any]:
    _require_class(cls)
    return create_skip_null_rule(
        lambda value: not isinstance(value, cls),
        metadata_factory(
            DefaultValidationCode.IS_NOT_INSTANCE_OF,
            {MessageParameter.CLASS_NAME: _class_name(cls)},
        ),
    )


def is_same_as(reference: Any) -> ValidationRule[Any]:
    """Fail unless the value is the very same object as ``reference``."""
    require_not_none(reference, "Reference object")
    return create_skip_null_rule(
        lambda value: value is reference,
        metadata_factory(
            DefaultValidationCode.IS_SAME_AS, {MessageParameter.REFERENCE: repr(reference)}
        ),
    )


def is_not_same_as(reference: Any) -> ValidationRule[Any]:
    require_not_none(reference, "Reference object")
    return create_skip_null_rule(
        lambda value: value is not reference,
        metadata_factory(
            DefaultValidationCode.IS_NOT_SAME_AS, {MessageParameter.REFERENCE: repr(reference)}
        ),
    )
