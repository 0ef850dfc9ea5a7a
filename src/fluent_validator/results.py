"""Validation result containers.

ValidationResult keeps two consistent views of the recorded failures: the
global append order and a per-identifier index. Every getter returns a fresh
copy, so callers can never disturb the accumulator. ScopedValidationResult
layers a local result on top of a parent one for nested validation stages.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fluent_validator.events import ObservableMixin, ValidationEvent, ValidationEventType
from fluent_validator.identifier import ValidationIdentifier
from fluent_validator.metadata import ValidationMetadata

__all__ = ["Failure", "ScopedValidationResult", "ValidationResult"]


@dataclass(eq=False)
class Failure:
    """A single recorded validation mismatch."""

    metadata: ValidationMetadata

    @property
    def identifier(self) -> ValidationIdentifier:
        """Identifier this failure is indexed under."""
        return self.metadata.identifier

    @property
    def error_code(self) -> str:
        return self.metadata.error_code

    def enrich(self, mutator: Callable[[ValidationMetadata], Any]) -> Failure:
        """Apply ``mutator`` to the wrapped metadata in place.

        Returns:
            Self, so enrichments can be chained.
        """
        self.metadata.enrich(mutator)
        return self


class ValidationResult(ObservableMixin):
    """Ordered failures plus an identifier index.

    Results are append-only: ``add_failure`` is the only mutator, and both
    views always agree. Observers receive a FAILURE_ADDED event per failure.

    Example:
        result = ValidationResult()
        result.add_failure(Failure(metadata))
        result.has_error_for_identifier(metadata.identifier)  # True
        result.get_errors_for_identifier(metadata.identifier)  # [failure]
    """

    def __init__(self) -> None:
        self._failures: list[Failure] = []
        self._failures_by_identifier: dict[ValidationIdentifier, list[Failure]] = {}

    @classmethod
    def success(cls) -> ValidationResult:
        """An empty result."""
        return cls()

    @classmethod
    def failure(cls, metadata: ValidationMetadata) -> ValidationResult:
        """A result holding exactly one failure for ``metadata``."""
        result = cls()
        result.add_failure(Failure(metadata))
        return result

    def add_failure(self, failure: Failure) -> None:
        """Append a failure to both views and notify observers.

        Raises:
            TypeError: If failure is not a Failure.
        """
        if not isinstance(failure, Failure):
            raise TypeError(f"Expected a Failure, got {type(failure).__name__}")
        self._failures.append(failure)
        self._failures_by_identifier.setdefault(failure.identifier, []).append(failure)

        if not self.has_observers:
            return
        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.FAILURE_ADDED,
                source=self,
                data={
                    "identifier": failure.identifier.value,
                    "error_code": failure.error_code,
                    "severity": failure.metadata.severity.value,
                    "failure": failure,
                },
            )
        )

    def has_errors(self) -> bool:
        return bool(self._failures)

    def has_error_for_identifier(self, identifier: ValidationIdentifier) -> bool:
        return bool(self._failures_by_identifier.get(identifier))

    def get_failures(self) -> list[Failure]:
        """Snapshot of all failures in append order."""
        return list(self._failures)

    def get_errors_for_identifier(self, identifier: ValidationIdentifier) -> list[Failure]:
        """Snapshot of the failures recorded for ``identifier`` (empty if none)."""
        return list(self._failures_by_identifier.get(identifier, ()))

    def get_failures_by_identifier(self) -> dict[ValidationIdentifier, list[Failure]]:
        """Snapshot of the identifier index; lists are copies too."""
        return {key: list(bucket) for key, bucket in self._failures_by_identifier.items()}

    def audit_log(self, source: str | None = None) -> list[dict[str, Any]]:
        """Export failures as plain dicts for tabular analysis.

        Args:
            source: Optional source label added to each entry.

        Returns:
            One dict per failure, in failure order, suitable for
            ``pd.DataFrame()``. The identifier is flattened into
            ``identifier`` and ``identifier_kind``.
        """
        entries: list[dict[str, Any]] = []
        for failure in self.get_failures():
            entry = failure.metadata.model_dump(exclude={"identifier"})
            entry["identifier"] = failure.identifier.value
            entry["identifier_kind"] = failure.identifier.kind.name
            if source:
                entry["source"] = source
            entries.append(entry)
        return entries

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(failures={len(self._failures)})"


class ScopedValidationResult(ValidationResult):
    """A result that also sees the failures of a parent result.

    ``has_errors``, ``has_error_for_identifier`` and ``get_failures`` combine
    parent and local state (parent first); writes only go to the local state.
    ``get_scoped_failures`` exposes just the local part so it can be merged
    into another ancestor without double counting.

    ``get_errors_for_identifier`` and ``get_failures_by_identifier`` are not
    overridden and read local failures only. An identifier that failed in the
    parent therefore reports ``has_error_for_identifier`` True while
    ``get_errors_for_identifier`` is empty, and ``ValidationRule.peek`` or
    ``traced`` inside a nested stage can observe ``has_error`` True with no
    errors.
    """

    def __init__(self, parent: ValidationResult) -> None:
        """Initialize the scoped result.

        Args:
            parent: The result whose failures gate and prefix this one.

        Raises:
            TypeError: If parent is not a ValidationResult.
        """
        if not isinstance(parent, ValidationResult):
            raise TypeError("Parent ValidationResult must not be None")
        super().__init__()
        self._parent = parent

    @property
    def parent(self) -> ValidationResult:
        return self._parent

    def has_errors(self) -> bool:
        return super().has_errors() or self._parent.has_errors()

    def has_error_for_identifier(self, identifier: ValidationIdentifier) -> bool:
        if super().has_error_for_identifier(identifier):
            return True
        return self._parent.has_error_for_identifier(identifier)

    def get_failures(self) -> list[Failure]:
        """Parent failures followed by local failures."""
        return self._parent.get_failures() + super().get_failures()

    def get_scoped_failures(self) -> list[Failure]:
        """Only the failures added to this scope."""
        return super().get_failures()
