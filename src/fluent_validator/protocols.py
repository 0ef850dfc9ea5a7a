"""Protocols for type checking.

Callable shapes accepted wherever the framework expects a rule, plus the
interface consumed by the message registry.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from fluent_validator.identifier import ValidationIdentifier
    from fluent_validator.results import ValidationResult
    from fluent_validator.validators import Validator

V = TypeVar("V", contravariant=True)


class RuleFunction(Protocol[V]):
    """Plain function usable as a ValidationRule.

    The function may only append failures to ``result``; it must not mutate
    ``value`` and must not remove or reorder failures already recorded.
    """

    def __call__(
        self, value: V, result: ValidationResult, identifier: ValidationIdentifier
    ) -> None: ...


class ScopedRuleFunction(Protocol[V]):
    """Plain function usable as a ScopedValidationRule."""

    def __call__(self, value: V, validator: Validator[Any]) -> None: ...


class ObjectRuleFunction(Protocol[V]):
    """Plain function usable as an ObjectValidationRule."""

    def __call__(self, value: V, result: ValidationResult) -> None: ...


@runtime_checkable
class ValidationMessageProvider(Protocol):
    """Protocol for message providers.

    A provider renders human text for an error code, given the identifier
    and the failure's message parameters.
    """

    def get_message(
        self,
        code: str,
        identifier: ValidationIdentifier,
        parameters: Mapping[str, Any],
    ) -> str:
        """Render the message for ``code``."""
        ...

    def supports(self, code: str) -> bool:
        """Whether this provider has a template for ``code``."""
        ...
