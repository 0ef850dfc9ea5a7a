"""Rules for calendar values: ``datetime.date`` and ``datetime.datetime``.

None values pass. Reference values are checked when the rule is built and
rendered with ``isoformat()`` in message parameters. ``future``/``past``
compare against today's date for a ``date`` and against ``datetime.now()``
in the value's own timezone for a ``datetime``. Other value types raise
TypeError during validation.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import TypeVar

from fluent_validator._rule_utils import create_skip_null_rule, metadata_factory
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = [
    "after",
    "after_or_equals",
    "before",
    "before_or_equals",
    "equals_date",
    "future",
    "in_month",
    "in_range",
    "in_year",
    "is_weekday",
    "is_weekend",
    "past",
    "present_or_future",
    "present_or_past",
]

D = TypeVar("D", bound=date)

_WEEKDAYS = "Monday-Friday"
_WEEKEND_DAYS = "Saturday-Sunday"


def _require_date(reference: object, what: str) -> date:
    if not isinstance(reference, date):
        raise TypeError(f"{what} must be a date or datetime, got {type(reference).__name__}")
    return reference


def _require_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int")
    return value


def _now_like(value: date) -> date:
    if isinstance(value, datetime):
        return datetime.now(value.tzinfo)
    if isinstance(value, date):
        return date.today()
    raise TypeError(f"Unsupported temporal type: {type(value).__name__}")


def _calendar_date(value: date) -> date:
    if not isinstance(value, date):
        raise TypeError(f"Unsupported temporal type: {type(value).__name__}")
    return value


def in_range(minimum: D, maximum: D) -> ValidationRule[D]:
    """Fail unless ``minimum <= value <= maximum`` (inclusive).

    Raises:
        TypeError: If a bound is not a date or datetime.
        ValueError: If minimum is after maximum.
    """
    _require_date(minimum, "Minimum date")
    _require_date(maximum, "Maximum date")
    if minimum > maximum:
        raise ValueError("Minimum date must not be after maximum date")
    return create_skip_null_rule(
        lambda value: minimum <= value <= maximum,
        metadata_factory(
            DefaultValidationCode.DATE_TIME_IN_RANGE,
            {
                MessageParameter.MIN_DATE: minimum.isoformat(),
                MessageParameter.MAX_DATE: maximum.isoformat(),
            },
        ),
    )


def before(reference: D) -> ValidationRule[D]:
    _require_date(reference, "Reference date")
    return create_skip_null_rule(
        lambda value: value < reference,
        metadata_factory(
            DefaultValidationCode.BEFORE, {MessageParameter.REFERENCE_DATE: reference.isoformat()}
        ),
    )


def after(reference: D) -> ValidationRule[D]:
    _require_date(reference, "Reference date")
    return create_skip_null_rule(
        lambda value: value > reference,
        metadata_factory(
            DefaultValidationCode.AFTER, {MessageParameter.REFERENCE_DATE: reference.isoformat()}
        ),
    )


def before_or_equals(reference: D) -> ValidationRule[D]:
    _require_date(reference, "Reference date")
    return create_skip_null_rule(
        lambda value: value <= reference,
        metadata_factory(
            DefaultValidationCode.BEFORE_OR_EQUALS,
            {MessageParameter.REFERENCE_DATE: reference.isoformat()},
        ),
    )


def after_or_equals(reference: D) -> ValidationRule[D]:
    _require_date(reference, "Reference date")
    return create_skip_null_rule(
        lambda value: value >= reference,
        metadata_factory(
            DefaultValidationCode.AFTER_OR_EQUALS,
            {MessageParameter.REFERENCE_DATE: reference.isoformat()},
        ),
    )


def equals_date(reference: D) -> ValidationRule[D]:
    _require_date(reference, "Reference date")
    return create_skip_null_rule(
        lambda value: value == reference,
        metadata_factory(
            DefaultValidationCode.EQUALS_DATE,
            {MessageParameter.REFERENCE_DATE: reference.isoformat()},
        ),
    )


def future() -> ValidationRule[date]:
    return create_skip_null_rule(
        lambda value: value > _now_like(value), metadata_factory(DefaultValidationCode.FUTURE)
    )


def past() -> ValidationRule[date]:
    return create_skip_null_rule(
        lambda value: value < _now_like(value), metadata_factory(DefaultValidationCode.PAST)
    )


def present_or_future() -> ValidationRule[date]:
    return create_skip_null_rule(
        lambda value: value >= _now_like(value),
        metadata_factory(DefaultValidationCode.PRESENT_OR_FUTURE),
    )


def present_or_past() -> ValidationRule[date]:
    return create_skip_null_rule(
        lambda value: value <= _now_like(value),
        metadata_factory(DefaultValidationCode.PRESENT_OR_PAST),
    )


def is_weekday() -> ValidationRule[date]:
    return create_skip_null_rule(
        lambda value: _calendar_date(value).weekday() < 5,
        metadata_factory(DefaultValidationCode.IS_WEEKDAY, {MessageParameter.WEEKDAYS: _WEEKDAYS}),
    )


def is_weekend() -> ValidationRule[date]:
    return create_skip_null_rule(
        lambda value: _calendar_date(value).weekday() >= 5,
        metadata_factory(
            DefaultValidationCode.IS_WEEKEND, {MessageParameter.WEEKEND_DAYS: _WEEKEND_DAYS}
        ),
    )


def in_month(month: int) -> ValidationRule[date]:
    """Fail unless the value falls in ``month`` (1 = January).

    Raises:
        TypeError: If month is not an int.
        ValueError: If month is outside 1..12.
    """
    _require_int(month, "Month")
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    return create_skip_null_rule(
        lambda value: _calendar_date(value).month == month,
        metadata_factory(
            DefaultValidationCode.IN_MONTH,
            {MessageParameter.MONTH: calendar.month_name[month].upper()},
        ),
    )


def in_year(year: int) -> ValidationRule[date]:
    _require_int(year, "Year")
    return create_skip_null_rule(
        lambda value: _calendar_date(value).year == year,
        metadata_factory(DefaultValidationCode.IN_YEAR, {MessageParameter.YEAR: year}),
    )
