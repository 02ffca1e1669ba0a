"""Schema kind accepting the first of several candidate schemas that matches."""

from __future__ import annotations

from typing import Any

from .base import AnySchema
from .cast import cast_at
from .options import ValidationOptions
from .result import ValidationResult
from .state import ValidationState


class AlternativesSchema(AnySchema):
    """Schema that tries candidates in order and keeps the first match."""

    schema_type = "alternatives"

    def __init__(self, *schemas: Any) -> None:
        super().__init__()
        self._matches: tuple[AnySchema, ...] = tuple(
            cast_at(schema, position) for position, schema in enumerate(schemas)
        )

    def try_(self, *schemas: Any) -> AlternativesSchema:
        """Add candidate schemas (``try`` is a keyword, hence the underscore)."""
        obj = self._clone()
        offset = len(obj._matches)
        added = tuple(cast_at(schema, offset + position) for position, schema in enumerate(schemas))
        obj._matches = (*obj._matches, *added)
        return obj

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        if not self._matches:
            return ValidationResult.success(value)

        failures = []
        for candidate in self._matches:
            result = candidate.check(value, state, options)
            if result.valid:
                return result
            failures.append(result)

        if len(failures) == 1:
            return failures[0]
        return self._fail("alternatives.base", {"value": value}, state)

    def describe(self) -> dict[str, Any]:
        description = super().describe()
        description["alternatives"] = [candidate.describe() for candidate in self._matches]
        return description
