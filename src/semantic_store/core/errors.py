"""Error taxonomy for the semantic store.

Not-found has no exception class: lookups report it as a None/False return.
"""

from dataclasses import dataclass
from typing import Any


class SemanticStoreError(Exception):
    """Base class for all semantic store errors."""


@dataclass(frozen=True)
class Violation:
    """A single field-level validation problem."""

    field: str
    message: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


class ValidationFailure(SemanticStoreError):
    """A payload failed validation; carries every violation found."""

    def __init__(self, violations: list[Violation]) -> None:
        if not violations:
            raise ValueError("ValidationFailure requires at least one violation")
        self.violations = list(violations)
        fields = ", ".join(v.field or "<root>" for v in self.violations)
        super().__init__(f"Validation failed: {fields}")

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]

    def to_list(self) -> list[dict[str, Any]]:
        return [v.to_dict() for v in self.violations]


class CollaboratorUnavailable(SemanticStoreError):
    """The storage or search backend could not complete an operation."""

    def __init__(self, operation: str, reason: str = "") -> None:
        self.operation = operation
        self.reason = reason
        message = f"Storage backend unavailable during {operation}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedOperation(SemanticStoreError):
    """A well-formed request asked for a capability that is disabled."""

    def __init__(self, operation: str, hint: str = "") -> None:
        self.operation = operation
        self.hint = hint
        message = f"{operation} is not implemented"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class EntryConflict(SemanticStoreError):
    """An entry with the same identifier already exists."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Entry {entry_id} already exists")
