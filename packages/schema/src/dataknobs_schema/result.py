"""Validation result types with consistent, predictable behavior.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .utils import UNDEFINED


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure.

    Attributes:
        code: Taxonomy key such as ``array.sparse`` or ``array.unique``
        message: Rendered default message
        path: Keys and indexes from the document root to the failing value
        key: Key that addressed the failing value from its parent
        context: Named details for the code (position, limit, reason, ...)
    """

    code: str
    message: str
    path: tuple[Any, ...] = ()
    key: Any = None
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def reason(self) -> list[ValidationError] | None:
        """Nested failures embedded by ``array.ordered`` / ``array.includesOne``."""
        return self.context.get("reason")

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a plain dictionary, nested reasons included."""
        context = dict(self.context)
        if isinstance(context.get("reason"), list):
            context["reason"] = [error.to_dict() for error in context["reason"]]
        return {
            "code": self.code,
            "message": self.message,
            "path": list(self.path),
            "key": self.key,
            "context": context,
        }

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Unified result object for all validation operations.

    A result is either valid and carries the (possibly coerced) ``value``, or
    invalid and carries ``errors`` with ``value`` left as ``UNDEFINED``.

    A failed rule may also report ``partial``: the value as far as the rule
    got before failing, so later rules of the same schema see its coercions
    and strips. Results returned from ``validate()`` never carry it.
    """

    valid: bool
    value: Any = UNDEFINED
    errors: list[ValidationError] = field(default_factory=list)
    partial: Any = field(default=UNDEFINED, repr=False)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @property
    def codes(self) -> list[str]:
        """Error codes in the order they were reported."""
        return [error.code for error in self.errors]

    @property
    def messages(self) -> list[str]:
        """Error messages in the order they were reported."""
        return [error.message for error in self.errors]

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        """Create a successful validation result.

        Args:
            value: The validated value

        Returns:
            Successful ValidationResult
        """
        return cls(valid=True, value=value, errors=[])

    @classmethod
    def failure(cls, errors: list[ValidationError], partial: Any = UNDEFINED) -> ValidationResult:
        """Create a failed validation result.

        Args:
            errors: List of validation errors
            partial: Value accepted so far by a failed rule

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, value=UNDEFINED, errors=list(errors), partial=partial)
