"""Message rendering for recorded failures.

DefaultMessageProvider renders English text for the bundled error codes from
``{placeholder}`` templates. ValidationMessageRegistry routes each error code
to a provider, falling back to a default provider.
"""

from __future__ import annotations

from collections.abc import Mapping
from string import Formatter
from typing import TYPE_CHECKING, Any

from fluent_validator.metadata import DefaultValidationCode
from fluent_validator.protocols import ValidationMessageProvider

if TYPE_CHECKING:
    from fluent_validator.identifier import ValidationIdentifier
    from fluent_validator.results import Failure

__all__ = ["DefaultMessageProvider", "ValidationMessageRegistry"]

FALLBACK_TEMPLATE = "Validation failed for field '{field}'"

_C = DefaultValidationCode

DEFAULT_TEMPLATES: dict[str, str] = {
    _C.NOT_NULL.value: "Field '{field}' must not be null",
    _C.MUST_BE_NULL.value: "Field '{field}' must be null",
    _C.IS_EQUAL.value: "Field '{field}' must be equal to '{value}'",
    _C.IS_NOT_EQUAL.value: "Field '{field}' must not be equal to '{value}'",
    _C.SATISFIES.value: "Field '{field}' must satisfy the condition: {condition}",
    _C.IS_INSTANCE_OF.value: "Field '{field}' must be an instance of {className}",
    _C.IS_NOT_INSTANCE_OF.value: "Field '{field}' must not be an instance of {className}",
    _C.IS_SAME_AS.value: "Field '{field}' must be the same object as {reference}",
    _C.IS_NOT_SAME_AS.value: "Field '{field}' must not be the same object as {reference}",
    _C.NOT_BLANK.value: "Field '{field}' must not be blank",
    _C.MAX_LENGTH.value: "Field '{field}' must not exceed {maxLength} characters",
    _C.MIN_LENGTH.value: "Field '{field}' must be at least {minLength} characters long",
    _C.EXACT_LENGTH.value: "Field '{field}' must be exactly {exactLength} characters long",
    _C.MATCHES.value: "Field '{field}' must match the pattern: {pattern}",
    _C.ONE_OF.value: "Field '{field}' must be one of: {allowedValues}",
    _C.ONE_OF_IGNORE_CASE.value: (
        "Field '{field}' must be one of (case insensitive): {allowedValues}"
    ),
    _C.STARTS_WITH.value: "Field '{field}' must start with '{prefix}'",
    _C.ENDS_WITH.value: "Field '{field}' must end with '{suffix}'",
    _C.CONTAINS.value: "Field '{field}' must contain '{substring}'",
    _C.NUMERIC.value: "Field '{field}' must contain only numeric characters",
    _C.ALPHANUMERIC.value: "Field '{field}' must contain only alphanumeric characters",
    _C.UPPERCASE.value: "Field '{field}' must be in uppercase",
    _C.LOWERCASE.value: "Field '{field}' must be in lowercase",
    _C.NO_WHITESPACE.value: "Field '{field}' must not contain whitespace",
    _C.NO_LEADING_WHITESPACE.value: "Field '{field}' must not start with whitespace",
    _C.NO_TRAILING_WHITESPACE.value: "Field '{field}' must not end with whitespace",
    _C.NO_CONSECUTIVE_WHITESPACE.value: (
        "Field '{field}' must not contain consecutive whitespace"
    ),
    _C.TRIMMED.value: "Field '{field}' must be trimmed",
    _C.PROPER_SPACING.value: "Field '{field}' must have proper spacing",
    _C.MIN.value: "Field '{field}' must be at least {min}",
    _C.MAX.value: "Field '{field}' must not exceed {max}",
    _C.RANGE.value: "Field '{field}' must be between {min} and {max}",
    _C.POSITIVE.value: "Field '{field}' must be positive",
    _C.NEGATIVE.value: "Field '{field}' must be negative",
    _C.NOT_ZERO.value: "Field '{field}' must not be zero",
    _C.NOT_EMPTY.value: "Field '{field}' must not be empty",
    _C.IS_EMPTY.value: "Field '{field}' must be empty",
    _C.MIN_SIZE.value: "Field '{field}' must contain at least {minSize} elements",
    _C.MAX_SIZE.value: "Field '{field}' must not contain more than {maxSize} elements",
    _C.EXACT_SIZE.value: "Field '{field}' must contain exactly {exactSize} elements",
    _C.SIZE_RANGE.value: "Field '{field}' must contain between {minSize} and {maxSize} elements",
    _C.ALL_MATCH.value: "All elements in '{field}' must satisfy: {condition}",
    _C.ANY_MATCH.value: "At least one element in '{field}' must satisfy: {condition}",
    _C.NONE_MATCH.value: "No element in '{field}' may satisfy: {condition}",
    _C.NO_DUPLICATES.value: "Field '{field}' must not contain duplicates",
    _C.COLLECTION_CONTAINS.value: "Field '{field}' must contain {element}",
    _C.DOES_NOT_CONTAIN.value: "Field '{field}' must not contain {element}",
    _C.CONTAINS_ALL.value: "Field '{field}' must contain all elements: {elements}",
    _C.CONTAINS_NONE.value: "Field '{field}' must not contain any of: {elements}",
    _C.ALLOWED_VALUES_CONTAINS.value: "Field '{field}' must be contained in: {allowedValues}",
    _C.ALLOWED_VALUES_ONE_OF.value: "Field '{field}' must be one of: {allowedValues}",
    _C.NOT_CONTAINS.value: "Field '{field}' must not be contained in: {allowedValues}",
    _C.NONE_OF.value: "Field '{field}' must not be one of: {allowedValues}",
    _C.IS_IN_ENUM.value: "Field '{field}' must be a valid {className} value: {allowedValues}",
    _C.DATE_TIME_IN_RANGE.value: "Field '{field}' must be between {minDate} and {maxDate}",
    _C.BEFORE.value: "Field '{field}' must be before {referenceDate}",
    _C.AFTER.value: "Field '{field}' must be after {referenceDate}",
    _C.BEFORE_OR_EQUALS.value: "Field '{field}' must be before or equal to {referenceDate}",
    _C.AFTER_OR_EQUALS.value: "Field '{field}' must be after or equal to {referenceDate}",
    _C.FUTURE.value: "Field '{field}' must be in the future",
    _C.PAST.value: "Field '{field}' must be in the past",
    _C.PRESENT_OR_FUTURE.value: "Field '{field}' must be in the present or future",
    _C.PRESENT_OR_PAST.value: "Field '{field}' must be in the present or past",
    _C.EQUALS_DATE.value: "Field '{field}' must be equal to {referenceDate}",
    _C.IS_WEEKDAY.value: "Field '{field}' must be a weekday ({weekdays})",
    _C.IS_WEEKEND.value: "Field '{field}' must be a weekend day ({weekendDays})",
    _C.IN_MONTH.value: "Field '{field}' must be in month {month}",
    _C.IN_YEAR.value: "Field '{field}' must be in year {year}",
    _C.TIME_IN_RANGE.value: "Field '{field}' must be between {minTime} and {maxTime}",
    _C.TIME_BEFORE.value: "Field '{field}' must be before {referenceTime}",
    _C.TIME_AFTER.value: "Field '{field}' must be after {referenceTime}",
    _C.TIME_BEFORE_OR_EQUALS.value: (
        "Field '{field}' must be before or equal to {referenceTime}"
    ),
    _C.TIME_AFTER_OR_EQUALS.value: "Field '{field}' must be after or equal to {referenceTime}",
    _C.TIME_EQUALS.value: "Field '{field}' must be equal to {referenceTime}",
    _C.IS_MORNING.value: "Field '{field}' must be in the morning ({timeRange})",
    _C.IS_AFTERNOON.value: "Field '{field}' must be in the afternoon ({timeRange})",
    _C.IS_EVENING.value: "Field '{field}' must be in the evening ({timeRange})",
    _C.IS_BUSINESS_HOURS.value: "Field '{field}' must be during business hours ({timeRange})",
    _C.IS_LUNCH_HOUR.value: "Field '{field}' must be during lunch hour ({timeRange})",
    _C.HOURS_BETWEEN.value: "Field '{field}' hours must be between {minHour} and {maxHour}",
    _C.MINUTES_BETWEEN.value: (
        "Field '{field}' minutes must be between {minMinute} and {maxMinute}"
    ),
    _C.SECONDS_BETWEEN.value: (
        "Field '{field}' seconds must be between {minSecond} and {maxSecond}"
    ),
    _C.IN_TIME_ZONE.value: "Field '{field}' must be in time zone {timeZone}",
}

# (literal_text, placeholder_name_or_None) pairs
_CompiledTemplate = tuple[tuple[str, str | None], ...]


def _compile(template: str) -> _CompiledTemplate:
    parts: list[tuple[str, str | None]] = []
    for literal, name, _spec, _conversion in Formatter().parse(template):
        parts.append((literal, name))
    return tuple(parts)


class DefaultMessageProvider:
    """Template-based provider for the bundled error codes.

    Placeholders name message parameters (``{field}``, ``{min}``, ...).
    Parameters missing at render time render as an empty string, and unknown
    codes use a generic fallback template.

    Example:
        provider = DefaultMessageProvider()
        provider.set_message_template("number.min", "{field} is too small (min {min})")
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        """Initialize the provider.

        Args:
            templates: Extra or overriding templates keyed by error code.
        """
        self._templates: dict[str, str] = dict(DEFAULT_TEMPLATES)
        self._compiled: dict[str, _CompiledTemplate] = {}
        for code, template in (templates or {}).items():
            self.set_message_template(code, template)

    def supports(self, code: str) -> bool:
        return code in self._templates

    def set_message_template(self, code: str, template: str) -> None:
        """Add or replace the template for ``code``.

        Raises:
            ValueError: If the template has malformed braces.
        """
        compiled = _compile(template)
        self._templates[code] = template
        self._compiled[template] = compiled

    def get_message(
        self,
        code: str,
        identifier: ValidationIdentifier,
        parameters: Mapping[str, Any],
    ) -> str:
        template = self._templates.get(code, FALLBACK_TEMPLATE)
        compiled = self._compiled.get(template)
        if compiled is None:
            compiled = self._compiled[template] = _compile(template)

        rendered: list[str] = []
        for literal, name in compiled:
            rendered.append(literal)
            if name is None:
                continue
            if name == "field" and "field" not in parameters:
                rendered.append(identifier.value)
                continue
            value = parameters.get(name)
            if value is not None:
                rendered.append(str(value))
        return "".join(rendered)


class ValidationMessageRegistry:
    """Routes error codes to message providers.

    Codes without an explicit provider go to the default provider.

    Example:
        registry = ValidationMessageRegistry()
        registry.set_provider_for_code("custom.vat_id", VatMessages())
        for failure in result.get_failures():
            print(registry.render(failure))
    """

    def __init__(self, default_provider: ValidationMessageProvider | None = None) -> None:
        self._providers: dict[str, ValidationMessageProvider] = {}
        self._default_provider: ValidationMessageProvider = (
            default_provider if default_provider is not None else DefaultMessageProvider()
        )
        self.register_provider(self._default_provider)

    @property
    def default_provider(self) -> ValidationMessageProvider:
        return self._default_provider

    def register_provider(self, provider: ValidationMessageProvider) -> None:
        """Route every bundled error code ``provider`` supports to it."""
        _require_provider(provider)
        for code in DefaultValidationCode:
            if provider.supports(code.value):
                self._providers[code.value] = provider

    def set_provider_for_code(self, code: str, provider: ValidationMessageProvider) -> None:
        _require_provider(provider)
        self._providers[code] = provider

    def set_default_provider(self, provider: ValidationMessageProvider) -> None:
        """Replace the fallback provider and register its supported codes."""
        _require_provider(provider)
        self._default_provider = provider
        self.register_provider(provider)

    def get_message(
        self,
        code: str,
        identifier: ValidationIdentifier,
        parameters: Mapping[str, Any],
    ) -> str:
        provider = self._providers.get(code, self._default_provider)
        return provider.get_message(code, identifier, parameters)

    def render(self, failure: Failure) -> str:
        """Render the message for a recorded failure."""
        metadata = failure.metadata
        return self.get_message(
            metadata.error_code, metadata.identifier, metadata.message_parameters
        )


def _require_provider(provider: object) -> None:
    if not isinstance(provider, ValidationMessageProvider):
        raise TypeError("Provider must implement get_message() and supports()")
