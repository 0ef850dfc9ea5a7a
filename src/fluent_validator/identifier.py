"""Validation identifiers.

Structural keys naming what is being validated. Identifiers are used as
dictionary keys by ValidationResult, so two identifiers are equal only when
both their kind and their value match.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["IdentifierKind", "ValidationIdentifier"]


class IdentifierKind(Enum):
    """The kind of thing an identifier names."""

    PATH = 1
    """A dotted or slashed path into an object graph (e.g. "user.address.city")."""

    INDEX = 2
    """A position inside a sequence (e.g. "items[3]")."""

    CUSTOM = 3
    """A free-form label for cross-field or object-level checks."""

    FIELD = 4
    """A single named attribute of the validated object."""


@dataclass(frozen=True)
class ValidationIdentifier:
    """Immutable (kind, value) key for a validated property.

    Use the ``of_*`` factories rather than the constructor.

    Example:
        name_id = ValidationIdentifier.of_field("name")
        assert name_id == ValidationIdentifier.of_field("name")
        assert name_id != ValidationIdentifier.of_path("name")
    """

    kind: IdentifierKind
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.kind, IdentifierKind):
            raise TypeError(f"kind must be an IdentifierKind, got {type(self.kind).__name__}")
        if not isinstance(self.value, str):
            raise TypeError(f"Identifier value must be a str, got {type(self.value).__name__}")

    @classmethod
    def of_path(cls, value: str) -> ValidationIdentifier:
        """Create a path identifier."""
        return cls(IdentifierKind.PATH, value)

    @classmethod
    def of_index(cls, value: str) -> ValidationIdentifier:
        """Create an index identifier."""
        return cls(IdentifierKind.INDEX, value)

    @classmethod
    def of_custom(cls, value: str) -> ValidationIdentifier:
        """Create a custom identifier."""
        return cls(IdentifierKind.CUSTOM, value)

    @classmethod
    def of_field(cls, value: str) -> ValidationIdentifier:
        """Create a field identifier."""
        return cls(IdentifierKind.FIELD, value)

    def __str__(self) -> str:
        return self.value


def as_identifier(identifier: ValidationIdentifier | str) -> ValidationIdentifier:
    """Coerce a plain string to a field identifier.

    Raises:
        TypeError: If ``identifier`` is neither a ValidationIdentifier nor a str.
    """
    if isinstance(identifier, ValidationIdentifier):
        return identifier
    if isinstance(identifier, str):
        return ValidationIdentifier.of_field(identifier)
    raise TypeError(
        f"Expected a ValidationIdentifier or str, got {type(identifier).__name__}"
    )
