"""
Exception hierarchy for wheremap.

Everything raised by the library derives from ``WhereMapError``.
Validation errors carry a ``path`` and expose ``to_dict()`` so they can
be returned from an API as-is.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class WhereMapError(Exception):
    """Root exception for the wheremap package."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ValidationError(WhereMapError):
    """A condition map or payload has an invalid structure."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "message": self.message,
            "path": self.path,
        }


class EmptyConditionError(ValidationError):
    """
    A non-empty condition map was required.

    Mutating operations refuse an empty map instead of treating it as
    "every row".
    """

    def __init__(self, operation: str | None = None) -> None:
        self.operation = operation
        message = "Condition map must not be empty"
        if operation:
            message += f" for '{operation}'"
        super().__init__(message, path="<root>")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "EMPTY_CONDITION",
            "message": self.message,
            "operation": self.operation,
        }


class EmptyPayloadError(ValidationError):
    """The data to insert or assign was empty."""

    def __init__(self, operation: str | None = None) -> None:
        self.operation = operation
        message = "Payload must not be empty"
        if operation:
            message += f" for '{operation}'"
        super().__init__(message, path="<payload>")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "EMPTY_PAYLOAD",
            "message": self.message,
            "operation": self.operation,
        }


class OperatorNotFoundError(ValidationError):
    """
    Unknown operator token.

    Suggests the closest known tokens, so ``"betwen"`` reports
    ``between`` as a likely candidate.
    """

    def __init__(
        self,
        operator: str,
        valid_operators: list[str],
        path: str | None = None,
    ) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators))}"
        super().__init__(message, path=path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "operator": self.operator,
            "path": self.path,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }


class OperandShapeError(ValidationError):
    """The operand does not have the shape its operator needs."""

    def __init__(
        self,
        field: str,
        operator: str,
        expected: str,
        actual: Any,
    ) -> None:
        self.field = field
        self.operator = operator
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Operator '{operator}' on '{field}' expects {expected}, "
            f"got {type(actual).__name__}: {actual!r}",
            path=field,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERAND_SHAPE",
            "field": self.field,
            "operator": self.operator,
            "expected": self.expected,
            "message": self.message,
        }


class FieldNotFoundError(ValidationError):
    """
    A field is not mapped on the target model.

    Example message::

        Invalid field 'categry_id' on 'Article'.
        Did you mean one of these?
          • category_id

        Available fields: body, category_id, id, title
    """

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: list[str],
        full_path: str | None = None,
    ) -> None:
        self.invalid_field = invalid_field
        self.model_name = model_name
        self.available_fields = available_fields
        self.full_path = full_path or invalid_field
        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=5, cutoff=0.6
        )
        super().__init__(self._build_message(), path=self.full_path)

    def _build_message(self) -> str:
        lines = [f"Invalid field '{self.invalid_field}' on '{self.model_name}'."]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            lines.extend(f"  • {s}" for s in self.suggestions)

        sorted_fields = sorted(self.available_fields)
        preview = ", ".join(sorted_fields[:15])
        if len(sorted_fields) > 15:
            preview += ", ..."
        lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "model": self.model_name,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class PersistenceError(WhereMapError):
    """Base class for errors raised around the database session."""


class RepositoryError(PersistenceError):
    """A repository statement failed."""


class SoftDeleteNotSupportedError(RepositoryError):
    """The model has no soft-delete column."""

    def __init__(self, model_name: str, column: str) -> None:
        self.model_name = model_name
        self.column = column
        super().__init__(
            f"Model '{model_name}' has no '{column}' column; "
            "soft delete and restore are unavailable"
        )


class UnitOfWorkError(PersistenceError):
    """Commit or rollback failed."""


class SessionManagementError(PersistenceError):
    """Session creation, configuration or close failed."""


__all__: list[str] = [
    "EmptyConditionError",
    "EmptyPayloadError",
    "FieldNotFoundError",
    "OperandShapeError",
    "OperatorNotFoundError",
    "PersistenceError",
    "RepositoryError",
    "SessionManagementError",
    "SoftDeleteNotSupportedError",
    "UnitOfWorkError",
    "ValidationError",
    "WhereMapError",
]
