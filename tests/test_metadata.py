"""Tests for ValidationMetadata."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest
from hypothesis import given, settings
from pydantic import ValidationError

from fluent_validator.identifier import ValidationIdentifier
from fluent_validator.metadata import (
    DefaultValidationCode,
    MessageParameter,
    ValidationMetadata,
    ValidationSeverity,
)

from .conftest import error_codes, identifiers, parameter_dicts

# =============================================================================
# ValidationMetadata Unit Tests
# =============================================================================


class TestValidationMetadataUnit:
    """Unit tests for creating and enriching metadata."""

    def test_create_defaults(self, age_id: ValidationIdentifier) -> None:
        """create() fills the documented defaults."""
        metadata = ValidationMetadata.create(age_id, DefaultValidationCode.MIN, min=18)

        assert metadata.identifier == age_id
        assert metadata.error_code == "number.min"
        assert metadata.severity is ValidationSeverity.ERROR
        assert metadata.blocking is True
        assert metadata.category is None
        assert metadata.validation_group is None
        assert isinstance(metadata.validation_time, datetime)
        assert metadata.validation_time.tzinfo is not None

    def test_field_parameter_mirrors_identifier(self, age_id: ValidationIdentifier) -> None:
        """The field parameter always carries the identifier value."""
        metadata = ValidationMetadata.create(age_id, "custom.code", min=18)

        assert metadata.message_parameters == {"min": 18, "field": "age"}

    def test_custom_code_string_kept(self, name_id: ValidationIdentifier) -> None:
        metadata = ValidationMetadata.create(name_id, "billing.vat_id")

        assert metadata.error_code == "billing.vat_id"

    def test_empty_error_code_rejected(self, name_id: ValidationIdentifier) -> None:
        """An empty error code fails pydantic validation."""
        with pytest.raises(ValidationError):
            ValidationMetadata.create(name_id, "")

    def test_none_identifier_rejected(self) -> None:
        with pytest.raises(TypeError):
            ValidationMetadata.create(None, "x.y")  # type: ignore[arg-type]

    def test_setters_mirror_into_parameters(self, name_id: ValidationIdentifier) -> None:
        """Severity/category/group/blocking are mirrored for message templates."""
        metadata = (
            ValidationMetadata.create(name_id, "x.y")
            .set_severity(ValidationSeverity.WARNING)
            .set_category("profile")
            .set_validation_group("signup")
            .set_blocking(False)
        )

        assert metadata.severity is ValidationSeverity.WARNING
        assert metadata.category == "profile"
        assert metadata.validation_group == "signup"
        assert metadata.blocking is False
        assert metadata.message_parameters[MessageParameter.SEVERITY.value] == "WARNING"
        assert metadata.message_parameters[MessageParameter.CATEGORY.value] == "profile"
        assert metadata.message_parameters[MessageParameter.VALIDATION_GROUP.value] == "signup"
        assert metadata.message_parameters[MessageParameter.BLOCKING.value] is False

    def test_severity_assignment_validated(self, name_id: ValidationIdentifier) -> None:
        """Assignment is validated, so strings coerce and junk is rejected."""
        metadata = ValidationMetadata.create(name_id, "x.y")

        metadata.severity = "INFO"  # type: ignore[assignment]
        assert metadata.severity is ValidationSeverity.INFO

        with pytest.raises(ValidationError):
            metadata.severity = "LOUD"  # type: ignore[assignment]

    def test_set_severity_none_rejected(self, name_id: ValidationIdentifier) -> None:
        with pytest.raises(TypeError):
            ValidationMetadata.create(name_id, "x.y").set_severity(None)  # type: ignore[arg-type]

    def test_add_message_parameter_accepts_enum_key(self, name_id: ValidationIdentifier) -> None:
        metadata = ValidationMetadata.create(name_id, "x.y")

        metadata.add_message_parameter(MessageParameter.MAX_LENGTH, 5)
        metadata.add_message_parameter("unit", "chars")

        assert metadata.message_parameters["maxLength"] == 5
        assert metadata.message_parameters["unit"] == "chars"

    def test_enrich_mutates_in_place(self, name_id: ValidationIdentifier) -> None:
        metadata = ValidationMetadata.create(name_id, "x.y")

        returned = metadata.enrich(lambda m: m.set_category("billing"))

        assert returned is metadata
        assert metadata.category == "billing"

    def test_enrich_requires_callable(self, name_id: ValidationIdentifier) -> None:
        metadata = ValidationMetadata.create(name_id, "x.y")

        with pytest.raises(TypeError):
            metadata.enrich("not callable")  # type: ignore[arg-type]


# =============================================================================
# ValidationMetadata Property-Based Tests
# =============================================================================


class TestValidationMetadataProperties:
    """Property-based tests for metadata creation."""

    @given(identifier=identifiers, code=error_codes, parameters=parameter_dicts)
    @settings(max_examples=50)
    def test_create_keeps_parameters(
        self, identifier: ValidationIdentifier, code: str, parameters: dict[str, Any]
    ) -> None:
        """All given parameters survive, plus the mirrored field."""
        metadata = ValidationMetadata.create(identifier, code, **parameters)

        assert metadata.error_code == code
        assert metadata.message_parameters == {**parameters, "field": identifier.value}
