"""Rules restricting a value to (or excluding it from) a fixed set.

None values and blank strings pass. Membership uses ``==``, so unhashable
values work. The ``allowedValues`` message parameter is the caller's
description when given, otherwise the values joined with ", ".
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from fluent_validator._rule_utils import create_rule, metadata_factory, require_non_empty
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = ["contains", "is_in_enum", "none_of", "not_contains", "one_of"]


def _skipped(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _describe(values: tuple[Any, ...], description: str | None) -> str:
    if description is None:
        return ", ".join(str(value) for value in values)
    if not isinstance(description, str):
        raise TypeError("Description must be a str")
    if not description.strip():
        raise ValueError("Description cannot be blank")
    return description


def _membership_rule(
    values: tuple[Any, ...],
    description: str | None,
    code: DefaultValidationCode,
    *,
    allowed: bool,
) -> ValidationRule[Any]:
    described = _describe(values, description)
    return create_rule(
        lambda value: _skipped(value) or ((value in values) is allowed),
        metadata_factory(code, {MessageParameter.ALLOWED_VALUES: described}),
    )


def contains(allowed: Iterable[Any], description: str | None = None) -> ValidationRule[Any]:
    """Fail unless the value is in ``allowed``.

    Raises:
        TypeError: If allowed is None.
        ValueError: If allowed is empty or description is blank.
    """
    values = require_non_empty(allowed, "Allowed values")
    return _membership_rule(
        values, description, DefaultValidationCode.ALLOWED_VALUES_CONTAINS, allowed=True
    )


def one_of(*allowed: Any, description: str | None = None) -> ValidationRule[Any]:
    values = require_non_empty(allowed, "Allowed values")
    return _membership_rule(
        values, description, DefaultValidationCode.ALLOWED_VALUES_ONE_OF, allowed=True
    )


def not_contains(disallowed: Iterable[Any], description: str | None = None) -> ValidationRule[Any]:
    values = require_non_empty(disallowed, "Disallowed values")
    return _membership_rule(values, description, DefaultValidationCode.NOT_CONTAINS, allowed=False)


def none_of(*disallowed: Any, description: str | None = None) -> ValidationRule[Any]:
    values = require_non_empty(disallowed, "Disallowed values")
    return _membership_rule(values, description, DefaultValidationCode.NONE_OF, allowed=False)


def is_in_enum(enum_cls: type[Enum]) -> ValidationRule[Any]:
    """Fail unless the value is a member of ``enum_cls`` or the name of one.

    Strings are matched against member names, case-sensitively; anything
    else must be a member.

    Raises:
        TypeError: If enum_cls is not an Enum subclass.
    """
    if not isinstance(enum_cls, type) or not issubclass(enum_cls, Enum):
        raise TypeError("Enum class must be an Enum subclass")
    names = frozenset(enum_cls.__members__)

    def _check(value: Any) -> bool:
        if _skipped(value) or isinstance(value, enum_cls):
            return True
        if isinstance(value, str):
            return value in names
        return False

    return create_rule(
        _check,
        metadata_factory(
            DefaultValidationCode.IS_IN_ENUM,
            {
                MessageParameter.ALLOWED_VALUES: ", ".join(member.name for member in enum_cls),
                MessageParameter.CLASS_NAME: enum_cls.__name__,
            },
        ),
    )
