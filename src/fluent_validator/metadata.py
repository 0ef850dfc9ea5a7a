"""Failure metadata.

Provides the pydantic model attached to every recorded failure, together with
the error codes and message-parameter keys used by the bundled rule packs and
the default message provider.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fluent_validator.identifier import ValidationIdentifier

__all__ = [
    "DefaultValidationCode",
    "MessageParameter",
    "ValidationMetadata",
    "ValidationSeverity",
]


class ValidationSeverity(str, Enum):
    """How seriously a failure should be treated by the caller."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class MessageParameter(str, Enum):
    """Well-known keys of ``ValidationMetadata.message_parameters``."""

    FIELD = "field"
    VALUE = "value"
    MAX_LENGTH = "maxLength"
    MIN_LENGTH = "minLength"
    EXACT_LENGTH = "exactLength"
    PATTERN = "pattern"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    SUBSTRING = "substring"
    ALLOWED_VALUES = "allowedValues"
    MIN = "min"
    MAX = "max"
    MIN_SIZE = "minSize"
    MAX_SIZE = "maxSize"
    EXACT_SIZE = "exactSize"
    ACTUAL_SIZE = "actualSize"
    ELEMENT = "element"
    ELEMENTS = "elements"
    KEY = "key"
    KEYS = "keys"
    CONDITION = "condition"
    CLASS_NAME = "className"
    REFERENCE = "reference"
    MIN_DATE = "minDate"
    MAX_DATE = "maxDate"
    REFERENCE_DATE = "referenceDate"
    MONTH = "month"
    YEAR = "year"
    WEEKDAYS = "weekdays"
    WEEKEND_DAYS = "weekendDays"
    MIN_TIME = "minTime"
    MAX_TIME = "maxTime"
    REFERENCE_TIME = "referenceTime"
    MIN_HOUR = "minHour"
    MAX_HOUR = "maxHour"
    MIN_MINUTE = "minMinute"
    MAX_MINUTE = "maxMinute"
    MIN_SECOND = "minSecond"
    MAX_SECOND = "maxSecond"
    TIME_ZONE = "timeZone"
    TIME_PERIOD = "timePeriod"
    TIME_RANGE = "timeRange"
    SEVERITY = "severity"
    CATEGORY = "category"
    VALIDATION_GROUP = "validationGroup"
    BLOCKING = "blocking"


class DefaultValidationCode(str, Enum):
    """Error codes emitted by the bundled rule packs."""

    NOT_NULL = "common.not_null"
    MUST_BE_NULL = "common.must_be_null"
    IS_EQUAL = "common.is_equal"
    IS_NOT_EQUAL = "common.is_not_equal"
    SATISFIES = "common.satisfies"
    IS_INSTANCE_OF = "common.is_instance_of"
    IS_NOT_INSTANCE_OF = "common.is_not_instance_of"
    IS_SAME_AS = "common.is_same_as"
    IS_NOT_SAME_AS = "common.is_not_same_as"

    NOT_BLANK = "string.not_blank"
    MAX_LENGTH = "string.max_length"
    MIN_LENGTH = "string.min_length"
    EXACT_LENGTH = "string.exact_length"
    MATCHES = "string.matches"
    ONE_OF = "string.one_of"
    ONE_OF_IGNORE_CASE = "string.one_of_ignore_case"
    STARTS_WITH = "string.starts_with"
    ENDS_WITH = "string.ends_with"
    CONTAINS = "string.contains"
    NUMERIC = "string.numeric"
    ALPHANUMERIC = "string.alphanumeric"
    UPPERCASE = "string.uppercase"
    LOWERCASE = "string.lowercase"
    NO_WHITESPACE = "string.no_whitespace"
    NO_LEADING_WHITESPACE = "string.no_leading_whitespace"
    NO_TRAILING_WHITESPACE = "string.no_trailing_whitespace"
    NO_CONSECUTIVE_WHITESPACE = "string.no_consecutive_whitespace"
    TRIMMED = "string.trimmed"
    PROPER_SPACING = "string.proper_spacing"

    MIN = "number.min"
    MAX = "number.max"
    RANGE = "number.range"
    POSITIVE = "number.positive"
    NEGATIVE = "number.negative"
    NOT_ZERO = "number.not_zero"

    NOT_EMPTY = "collection.not_empty"
    IS_EMPTY = "collection.is_empty"
    MIN_SIZE = "collection.min_size"
    MAX_SIZE = "collection.max_size"
    EXACT_SIZE = "collection.exact_size"
    SIZE_RANGE = "collection.size_range"
    ALL_MATCH = "collection.all_match"
    ANY_MATCH = "collection.any_match"
    NONE_MATCH = "collection.none_match"
    NO_DUPLICATES = "collection.no_duplicates"
    COLLECTION_CONTAINS = "collection.contains"
    DOES_NOT_CONTAIN = "collection.does_not_contain"
    CONTAINS_ALL = "collection.contains_all"
    CONTAINS_NONE = "collection.contains_none"

    ALLOWED_VALUES_CONTAINS = "allowed.contains"
    ALLOWED_VALUES_ONE_OF = "allowed.one_of"
    NOT_CONTAINS = "allowed.not_contains"
    NONE_OF = "allowed.none_of"
    IS_IN_ENUM = "allowed.is_in_enum"

    DATE_TIME_IN_RANGE = "datetime.in_range"
    BEFORE = "datetime.before"
    AFTER = "datetime.after"
    BEFORE_OR_EQUALS = "datetime.before_or_equals"
    AFTER_OR_EQUALS = "datetime.after_or_equals"
    FUTURE = "datetime.future"
    PAST = "datetime.past"
    PRESENT_OR_FUTURE = "datetime.present_or_future"
    PRESENT_OR_PAST = "datetime.present_or_past"
    EQUALS_DATE = "datetime.equals"
    IS_WEEKDAY = "datetime.is_weekday"
    IS_WEEKEND = "datetime.is_weekend"
    IN_MONTH = "datetime.in_month"
    IN_YEAR = "datetime.in_year"

    TIME_IN_RANGE = "time.in_range"
    TIME_BEFORE = "time.before"
    TIME_AFTER = "time.after"
    TIME_BEFORE_OR_EQUALS = "time.before_or_equals"
    TIME_AFTER_OR_EQUALS = "time.after_or_equals"
    TIME_EQUALS = "time.equals"
    IS_MORNING = "time.is_morning"
    IS_AFTERNOON = "time.is_afternoon"
    IS_EVENING = "time.is_evening"
    IS_BUSINESS_HOURS = "time.is_business_hours"
    IS_LUNCH_HOUR = "time.is_lunch_hour"
    HOURS_BETWEEN = "time.hours_between"
    MINUTES_BETWEEN = "time.minutes_between"
    SECONDS_BETWEEN = "time.seconds_between"
    IN_TIME_ZONE = "time.in_time_zone"


class ValidationMetadata(BaseModel):
    """Descriptive record attached to a single validation failure.

    The record is mutable: combinators such as ``ValidationRule.with_metadata``
    enrich it in place after the failure has been recorded. The ``field``
    message parameter always mirrors the identifier value, and the
    ``set_*`` helpers mirror their value into ``message_parameters`` so that
    message templates can reference them.

    Attributes:
        identifier: What was validated.
        error_code: Dotted code used to look up a message template.
        message_parameters: Values substituted into the message template.
        severity: ERROR, WARNING or INFO.
        category: Optional business/domain category.
        validation_group: Optional group name for related checks.
        blocking: Whether the failure should block further processing.
        validation_time: When the failure was recorded (UTC).
        source: Optional name of the component that produced the failure.
        additional_error_code: Optional caller-defined secondary code.

    Example:
        metadata = ValidationMetadata.create(
            ValidationIdentifier.of_field("age"),
            DefaultValidationCode.MIN,
            min=18,
        )
        metadata.set_severity(ValidationSeverity.WARNING)
    """

    model_config = ConfigDict(validate_assignment=True)

    identifier: ValidationIdentifier
    error_code: str = Field(min_length=1)
    message_parameters: dict[str, Any] = Field(default_factory=dict)
    severity: ValidationSeverity = ValidationSeverity.ERROR
    category: str | None = None
    validation_group: str | None = None
    blocking: bool = True
    validation_time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str | None = None
    additional_error_code: str | None = None

    @model_validator(mode="after")
    def _mirror_field_parameter(self) -> ValidationMetadata:
        self.message_parameters[MessageParameter.FIELD.value] = self.identifier.value
        return self

    @classmethod
    def create(
        cls,
        identifier: ValidationIdentifier,
        code: DefaultValidationCode | str,
        **parameters: Any,
    ) -> ValidationMetadata:
        """Build metadata for ``identifier`` with the given code and parameters.

        Args:
            identifier: What was validated.
            code: A DefaultValidationCode or any custom dotted code.
            **parameters: Message parameters, keyed by MessageParameter values.

        Raises:
            TypeError: If identifier is None.
        """
        if identifier is None:
            raise TypeError("Identifier must not be None")
        error_code = code.value if isinstance(code, DefaultValidationCode) else code
        return cls(identifier=identifier, error_code=error_code, message_parameters=parameters)

    def add_message_parameter(self, key: MessageParameter | str, value: Any) -> ValidationMetadata:
        """Set a message parameter. Returns self."""
        name = key.value if isinstance(key, MessageParameter) else key
        self.message_parameters[name] = value
        return self

    def set_severity(self, severity: ValidationSeverity) -> ValidationMetadata:
        if severity is None:
            raise TypeError("Severity must not be None")
        self.severity = severity
        return self.add_message_parameter(MessageParameter.SEVERITY, self.severity.value)

    def set_category(self, category: str | None) -> ValidationMetadata:
        self.category = category
        if category is not None:
            self.add_message_parameter(MessageParameter.CATEGORY, category)
        return self

    def set_validation_group(self, group: str | None) -> ValidationMetadata:
        self.validation_group = group
        if group is not None:
            self.add_message_parameter(MessageParameter.VALIDATION_GROUP, group)
        return self

    def set_blocking(self, blocking: bool) -> ValidationMetadata:
        self.blocking = blocking
        return self.add_message_parameter(MessageParameter.BLOCKING, blocking)

    def enrich(self, enricher: Callable[[ValidationMetadata], Any]) -> ValidationMetadata:
        """Apply ``enricher`` to this record in place. Returns self.

        Raises:
            TypeError: If enricher is not callable.
        """
        if not callable(enricher):
            raise TypeError("Enricher must be callable")
        enricher(self)
        return self
