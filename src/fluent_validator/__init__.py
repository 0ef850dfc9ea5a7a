"""Fluent, composable validation for arbitrary object graphs."""

from fluent_validator import (
    allowed_values_rules,
    collection_rules,
    common_rules,
    datetime_rules,
    map_rules,
    number_rules,
    string_rules,
    time_rules,
)
from fluent_validator.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)
from fluent_validator.identifier import IdentifierKind, ValidationIdentifier
from fluent_validator.messages import DefaultMessageProvider, ValidationMessageRegistry
from fluent_validator.metadata import (
    DefaultValidationCode,
    MessageParameter,
    ValidationMetadata,
    ValidationSeverity,
)
from fluent_validator.protocols import (
    ObjectRuleFunction,
    RuleFunction,
    ScopedRuleFunction,
    ValidationMessageProvider,
)
from fluent_validator.results import Failure, ScopedValidationResult, ValidationResult
from fluent_validator.rich_observers import RichTraceObserver
from fluent_validator.rules import (
    ObjectValidationRule,
    RuleEvaluationError,
    ScopedValidationRule,
    ValidationRule,
    ValidationRuleBuilder,
    ValidationState,
)
from fluent_validator.validators import PropertyValidator, Validator

__all__ = [
    # Identifiers
    "IdentifierKind",
    "ValidationIdentifier",
    # Failure metadata
    "DefaultValidationCode",
    "MessageParameter",
    "ValidationMetadata",
    "ValidationSeverity",
    # Validation results
    "Failure",
    "ScopedValidationResult",
    "ValidationResult",
    # Rule algebra
    "ObjectRuleFunction",
    "ObjectValidationRule",
    "RuleEvaluationError",
    "RuleFunction",
    "ScopedRuleFunction",
    "ScopedValidationRule",
    "ValidationRule",
    "ValidationRuleBuilder",
    "ValidationState",
    # Fluent engine
    "PropertyValidator",
    "Validator",
    # Rule packs
    "allowed_values_rules",
    "collection_rules",
    "common_rules",
    "datetime_rules",
    "map_rules",
    "number_rules",
    "string_rules",
    "time_rules",
    # Messages
    "DefaultMessageProvider",
    "ValidationMessageProvider",
    "ValidationMessageRegistry",
    # Observer pattern
    "ObservableMixin",
    "ValidationEvent",
    "ValidationEventType",
    "ValidationObserver",
    # Rich observers (requires rich optional dependency)
    "RichTraceObserver",
]

__version__ = "0.1.0"
