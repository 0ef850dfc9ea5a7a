"""Rules for times of day: ``datetime.time`` and ``datetime.datetime``.

None values pass. Comparisons use the wall-clock time only: a datetime's
date and any timezone are ignored, except by ``in_time_zone``. Period rules
(morning, business hours, ...) use fixed, inclusive windows.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, time, tzinfo
from typing import Any, NamedTuple

from fluent_validator._rule_utils import create_skip_null_rule, metadata_factory
from fluent_validator.metadata import DefaultValidationCode, MessageParameter
from fluent_validator.rules import ValidationRule

__all__ = [
    "after",
    "after_or_equals",
    "before",
    "before_or_equals",
    "equals",
    "hours_between",
    "in_range",
    "in_time_zone",
    "is_afternoon",
    "is_business_hours",
    "is_evening",
    "is_lunch_hour",
    "is_morning",
    "minutes_between",
    "seconds_between",
]

TimeLike = time | datetime


class _Window(NamedTuple):
    start: time
    end: time
    label: str


MORNING = _Window(time(0, 0), time(11, 59, 59), "00:00-11:59")
AFTERNOON = _Window(time(12, 0), time(17, 59, 59), "12:00-17:59")
EVENING = _Window(time(18, 0), time(23, 59, 59), "18:00-23:59")
BUSINESS_HOURS = _Window(time(8, 0), time(16, 0), "08:00-16:00")
LUNCH_HOUR = _Window(time(12, 0), time(13, 0), "12:00-13:00")


def _wall_time(value: Any) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value.replace(tzinfo=None)
    raise TypeError(f"Unsupported temporal type: {type(value).__name__}")


def _reference(reference: object, what: str) -> time:
    if reference is None:
        raise TypeError(f"{what} must not be None")
    return _wall_time(reference)


def _require_component_range(minimum: object, maximum: object, what: str, top: int) -> None:
    for bound in (minimum, maximum):
        if isinstance(bound, bool) or not isinstance(bound, int):
            raise TypeError(f"{what} bounds must be ints")
        if not 0 <= bound <= top:
            raise ValueError(f"{what} bounds must be between 0 and {top}")
    if minimum > maximum:
        raise ValueError(f"Minimum {what.lower()} must not be greater than maximum")


def _compare_rule(
    reference: TimeLike,
    check: Callable[[time, time], bool],
    code: DefaultValidationCode,
) -> ValidationRule[TimeLike]:
    wall = _reference(reference, "Reference time")
    return create_skip_null_rule(
        lambda value: check(_wall_time(value), wall),
        metadata_factory(code, {MessageParameter.REFERENCE_TIME: reference.isoformat()}),
    )


def _window_rule(window: _Window, code: DefaultValidationCode, period: str) -> ValidationRule[Any]:
    return create_skip_null_rule(
        lambda value: window.start <= _wall_time(value) <= window.end,
        metadata_factory(
            code,
            {MessageParameter.TIME_PERIOD: period, MessageParameter.TIME_RANGE: window.label},
        ),
    )


def in_range(minimum: TimeLike, maximum: TimeLike) -> ValidationRule[TimeLike]:
    """Fail unless the wall-clock time lies in ``[minimum, maximum]``.

    Raises:
        TypeError: If a bound is None or not a time/datetime.
        ValueError: If minimum is after maximum.
    """
    low = _reference(minimum, "Minimum time")
    high = _reference(maximum, "Maximum time")
    if low > high:
        raise ValueError("Minimum time must not be after maximum time")
    return create_skip_null_rule(
        lambda value: low <= _wall_time(value) <= high,
        metadata_factory(
            DefaultValidationCode.TIME_IN_RANGE,
            {
                MessageParameter.MIN_TIME: minimum.isoformat(),
                MessageParameter.MAX_TIME: maximum.isoformat(),
            },
        ),
    )


def before(reference: TimeLike) -> ValidationRule[TimeLike]:
    return _compare_rule(reference, lambda wall, ref: wall < ref, DefaultValidationCode.TIME_BEFORE)


def after(reference: TimeLike) -> ValidationRule[TimeLike]:
    return _compare_rule(reference, lambda wall, ref: wall > ref, DefaultValidationCode.TIME_AFTER)


def before_or_equals(reference: TimeLike) -> ValidationRule[TimeLike]:
    return _compare_rule(
        reference, lambda wall, ref: wall <= ref, DefaultValidationCode.TIME_BEFORE_OR_EQUALS
    )


def after_or_equals(reference: TimeLike) -> ValidationRule[TimeLike]:
    return _compare_rule(
        reference, lambda wall, ref: wall >= ref, DefaultValidationCode.TIME_AFTER_OR_EQUALS
    )


def equals(reference: TimeLike) -> ValidationRule[TimeLike]:
    return _compare_rule(
        reference, lambda wall, ref: wall == ref, DefaultValidationCode.TIME_EQUALS
    )


def is_morning() -> ValidationRule[TimeLike]:
    return _window_rule(MORNING, DefaultValidationCode.IS_MORNING, "morning")


def is_afternoon() -> ValidationRule[TimeLike]:
    return _window_rule(AFTERNOON, DefaultValidationCode.IS_AFTERNOON, "afternoon")


def is_evening() -> ValidationRule[TimeLike]:
    return _window_rule(EVENING, DefaultValidationCode.IS_EVENING, "evening")


def is_business_hours() -> ValidationRule[TimeLike]:
    return _window_rule(BUSINESS_HOURS, DefaultValidationCode.IS_BUSINESS_HOURS, "business hours")


def is_lunch_hour() -> ValidationRule[TimeLike]:
    return _window_rule(LUNCH_HOUR, DefaultValidationCode.IS_LUNCH_HOUR, "lunch hour")


def hours_between(minimum: int, maximum: int) -> ValidationRule[TimeLike]:
    _require_component_range(minimum, maximum, "Hour", 23)
    return create_skip_null_rule(
        lambda value: minimum <= _wall_time(value).hour <= maximum,
        metadata_factory(
            DefaultValidationCode.HOURS_BETWEEN,
            {MessageParameter.MIN_HOUR: minimum, MessageParameter.MAX_HOUR: maximum},
        ),
    )


def minutes_between(minimum: int, maximum: int) -> ValidationRule[TimeLike]:
    _require_component_range(minimum, maximum, "Minute", 59)
    return create_skip_null_rule(
        lambda value: minimum <= _wall_time(value).minute <= maximum,
        metadata_factory(
            DefaultValidationCode.MINUTES_BETWEEN,
            {MessageParameter.MIN_MINUTE: minimum, MessageParameter.MAX_MINUTE: maximum},
        ),
    )


def seconds_between(minimum: int, maximum: int) -> ValidationRule[TimeLike]:
    _require_component_range(minimum, maximum, "Second", 59)
    return create_skip_null_rule(
        lambda value: minimum <= _wall_time(value).second <= maximum,
        metadata_factory(
            DefaultValidationCode.SECONDS_BETWEEN,
            {MessageParameter.MIN_SECOND: minimum, MessageParameter.MAX_SECOND: maximum},
        ),
    )


def in_time_zone(zone: tzinfo) -> ValidationRule[TimeLike]:
    """Fail unless the value carries ``zone`` as its tzinfo.

    Naive values always fail.

    Raises:
        TypeError: If zone is not a tzinfo (e.g. ``ZoneInfo`` or ``timezone``).
    """
    if not isinstance(zone, tzinfo):
        raise TypeError("Zone must be a tzinfo")
    return create_skip_null_rule(
        lambda value: value.tzinfo is not None and value.tzinfo == zone,
        metadata_factory(
            DefaultValidationCode.IN_TIME_ZONE, {MessageParameter.TIME_ZONE: str(zone)}
        ),
    )
