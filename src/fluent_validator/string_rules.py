"""Rules for string values.

Length rules measure the stripped string. ``not_blank`` rejects None; every
other rule lets None pass. The leading and trailing whitespace rules also
reject the empty string.
"""

from __future__ import annotations

import re
from typing import Any

from fluent_validator._rule_utils import (
    create_rule,
    create_skip_null_rule,
    metadata_factory,
    require_non_negative_int,
    require_not_none,
)
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = [
    "alphanumeric",
    "contains",
    "ends_with",
    "exact_length",
    "lowercase",
    "matches",
    "max_length",
    "min_length",
    "no_consecutive_whitespace",
    "no_leading_whitespace",
    "no_trailing_whitespace",
    "no_whitespace",
    "not_blank",
    "numeric",
    "one_of",
    "one_of_ignore_case",
    "proper_spacing",
    "starts_with",
    "trimmed",
    "uppercase",
]

_NUMERIC = re.compile(r"\d+")
_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]+")
_WHITESPACE_RUN = re.compile(r"\s+")
_CONSECUTIVE_WHITESPACE = re.compile(r"\s{2,}")


def _require_str(value: object, what: str) -> str:
    require_not_none(value, what)
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a str")
    return value


def _require_allowed(values: tuple[Any, ...]) -> tuple[str, ...]:
    if not values:
        raise ValueError("At least one allowed value is required")
    for value in values:
        _require_str(value, "Allowed value")
    return values


def not_blank() -> ValidationRule[str]:
    return create_rule(
        lambda value: value is not None and bool(value.strip()),
        metadata_factory(DefaultValidationCode.NOT_BLANK),
    )


def max_length(maximum: int) -> ValidationRule[str]:
    require_non_negative_int(maximum, "Maximum length")
    return create_skip_null_rule(
        lambda value: len(value.strip()) <= maximum,
        metadata_factory(DefaultValidationCode.MAX_LENGTH, {MessageParameter.MAX_LENGTH: maximum}),
    )


def min_length(minimum: int) -> ValidationRule[str]:
    require_non_negative_int(minimum, "Minimum length")
    return create_skip_null_rule(
        lambda value: len(value.strip()) >= minimum,
        metadata_factory(DefaultValidationCode.MIN_LENGTH, {MessageParameter.MIN_LENGTH: minimum}),
    )


def exact_length(length: int) -> ValidationRule[str]:
    require_non_negative_int(length, "Exact length")
    return create_skip_null_rule(
        lambda value: len(value.strip()) == length,
        metadata_factory(
            DefaultValidationCode.EXACT_LENGTH, {MessageParameter.EXACT_LENGTH: length}
        ),
    )


def matches(pattern: str | re.Pattern[str]) -> ValidationRule[str]:
    """Fail unless the whole string matches ``pattern``.

    Raises:
        TypeError: If pattern is None.
        ValueError: If pattern is a blank string.
        re.error: If pattern does not compile.
    """
    require_not_none(pattern, "Pattern")
    if isinstance(pattern, str):
        if not pattern.strip():
            raise ValueError("Pattern must not be blank")
        pattern = re.compile(pattern)
    compiled = pattern
    return create_skip_null_rule(
        lambda value: compiled.fullmatch(value) is not None,
        metadata_factory(
            DefaultValidationCode.MATCHES, {MessageParameter.PATTERN: compiled.pattern}
        ),
    )


def one_of(*allowed: str) -> ValidationRule[str]:
    allowed_values = _require_allowed(allowed)
    return create_skip_null_rule(
        lambda value: value in allowed_values,
        metadata_factory(
            DefaultValidationCode.ONE_OF,
            {MessageParameter.ALLOWED_VALUES: ", ".join(allowed_values)},
        ),
    )


def one_of_ignore_case(*allowed: str) -> ValidationRule[str]:
    allowed_values = _require_allowed(allowed)
    folded = {value.casefold() for value in allowed_values}
    return create_skip_null_rule(
        lambda value: value.casefold() in folded,
        metadata_factory(
            DefaultValidationCode.ONE_OF_IGNORE_CASE,
            {MessageParameter.ALLOWED_VALUES: ", ".join(allowed_values)},
        ),
    )


def starts_with(prefix: str) -> ValidationRule[str]:
    _require_str(prefix, "Prefix")
    return create_skip_null_rule(
        lambda value: value.startswith(prefix),
        metadata_factory(DefaultValidationCode.STARTS_WITH, {MessageParameter.PREFIX: prefix}),
    )


def ends_with(suffix: str) -> ValidationRule[str]:
    _require_str(suffix, "Suffix")
    return create_skip_null_rule(
        lambda value: value.endswith(suffix),
        metadata_factory(DefaultValidationCode.ENDS_WITH, {MessageParameter.SUFFIX: suffix}),
    )


def contains(substring: str) -> ValidationRule[str]:
    _require_str(substring, "Substring")
    return create_skip_null_rule(
        lambda value: substring in value,
        metadata_factory(DefaultValidationCode.CONTAINS, {MessageParameter.SUBSTRING: substring}),
    )


def numeric() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: _NUMERIC.fullmatch(value) is not None,
        metadata_factory(DefaultValidationCode.NUMERIC),
    )


def alphanumeric() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: _ALPHANUMERIC.fullmatch(value) is not None,
        metadata_factory(DefaultValidationCode.ALPHANUMERIC),
    )


def uppercase() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: value == value.upper(),
        metadata_factory(DefaultValidationCode.UPPERCASE),
    )


def lowercase() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: value == value.lower(),
        metadata_factory(DefaultValidationCode.LOWERCASE),
    )


def no_whitespace() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: not any(char.isspace() for char in value),
        metadata_factory(DefaultValidationCode.NO_WHITESPACE),
    )


def trimmed() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: value == value.strip(),
        metadata_factory(DefaultValidationCode.TRIMMED),
    )


def no_leading_whitespace() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: bool(value) and not value[0].isspace(),
        metadata_factory(DefaultValidationCode.NO_LEADING_WHITESPACE),
    )


def no_trailing_whitespace() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: bool(value) and not value[-1].isspace(),
        metadata_factory(DefaultValidationCode.NO_TRAILING_WHITESPACE),
    )


def no_consecutive_whitespace() -> ValidationRule[str]:
    return create_skip_null_rule(
        lambda value: _CONSECUTIVE_WHITESPACE.search(value) is None,
        metadata_factory(DefaultValidationCode.NO_CONSECUTIVE_WHITESPACE),
    )


def proper_spacing() -> ValidationRule[str]:
    """Fail unless the string is trimmed and words are separated by single spaces."""
    return create_skip_null_rule(
        lambda value: value == _WHITESPACE_RUN.sub(" ", value.strip()),
        metadata_factory(DefaultValidationCode.PROPER_SPACING),
    )
