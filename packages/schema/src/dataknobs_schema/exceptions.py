"""Exceptions for the dataknobs_schema package.

Two channels are kept apart:

- ``SchemaDefinitionError`` is raised while a schema is being built (bad
  limits, bad comparators, conflicting flags, uncastable literals). It is a
  programmer error and fails before any value is validated.
- ``SchemaValidationError`` is only raised by ``assert_valid``. Regular
  validation never raises for bad input; it returns a ``ValidationResult``.

Example:
    ```python
    from dataknobs_schema import ArraySchema, SchemaValidationError

    try:
        ArraySchema().min(2).assert_valid([1])
    except SchemaValidationError as e:
        logger.error(f"Error: {e}")
        for error in e.errors:
            logger.error(f"{error.code} at {error.path}")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .result import ValidationError


class DataknobsSchemaError(Exception):
    """Base exception for the schema package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class SchemaDefinitionError(DataknobsSchemaError):
    """Raised when a schema cannot be constructed.

    Example:
        ```python
        raise SchemaDefinitionError(
            "limit must be a positive integer or reference",
            context={"limit": -1}
        )
        ```
    """

    @property
    def path(self) -> str | None:
        """Position of the offending item within a builder call, if known."""
        return self.context.get("path")


class SchemaValidationError(DataknobsSchemaError):
    """Raised by ``assert_valid`` when a value fails validation."""

    def __init__(self, errors: Iterable[ValidationError]):
        self.errors = list(errors)
        message = "; ".join(error.message for error in self.errors) or "Validation failed"
        super().__init__(
            message,
            context={"errors": [error.to_dict() for error in self.errors]},
        )


__all__ = [
    "DataknobsSchemaError",
    "SchemaDefinitionError",
    "SchemaValidationError",
]
