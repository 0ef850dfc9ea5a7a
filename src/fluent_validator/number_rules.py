"""Rules for numeric values.

Bounds are checked when the rule is built; None values pass.
"""

from __future__ import annotations

from decimal import Decimal
from numbers import Real

from fluent_validator._rule_utils import create_skip_null_rule, metadata_factory
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = ["in_range", "max_value", "min_value", "negative", "not_zero", "positive"]


def _require_bound(bound: object, what: str) -> Real:
    if bound is None:
        raise TypeError(f"{what} must not be None")
    if isinstance(bound, bool) or not isinstance(bound, (Real, Decimal)):
        raise TypeError(f"{what} must be a real number")
    return bound


def min_value(minimum: Real) -> ValidationRule[Real]:
    _require_bound(minimum, "Minimum value")
    return create_skip_null_rule(
        lambda value: value >= minimum,
        metadata_factory(DefaultValidationCode.MIN, {MessageParameter.MIN: minimum}),
    )


def max_value(maximum: Real) -> ValidationRule[Real]:
    _require_bound(maximum, "Maximum value")
    return create_skip_null_rule(
        lambda value: value <= maximum,
        metadata_factory(DefaultValidationCode.MAX, {MessageParameter.MAX: maximum}),
    )


def in_range(minimum: Real, maximum: Real) -> ValidationRule[Real]:
    """Fail unless ``minimum <= value <= maximum``.

    Raises:
        TypeError: If a bound is None or not a number.
        ValueError: If minimum is greater than maximum.
    """
    _require_bound(minimum, "Minimum value")
    _require_bound(maximum, "Maximum value")
    if minimum > maximum:
        raise ValueError("Minimum value must be less than or equal to maximum value")
    return create_skip_null_rule(
        lambda value: minimum <= value <= maximum,
        metadata_factory(
            DefaultValidationCode.RANGE,
            {MessageParameter.MIN: minimum, MessageParameter.MAX: maximum},
        ),
    )


def positive() -> ValidationRule[Real]:
    return create_skip_null_rule(
        lambda value: value > 0, metadata_factory(DefaultValidationCode.POSITIVE)
    )


def negative() -> ValidationRule[Real]:
    return create_skip_null_rule(
        lambda value: value < 0, metadata_factory(DefaultValidationCode.NEGATIVE)
    )


def not_zero() -> ValidationRule[Real]:
    return create_skip_null_rule(
        lambda value: value != 0, metadata_factory(DefaultValidationCode.NOT_ZERO)
    )
