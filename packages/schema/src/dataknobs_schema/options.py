"""Validation options honoured by every schema kind."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import SchemaDefinitionError


@dataclass(frozen=True)
class ValidationOptions:
    """Options for a single validate call.

    Attributes:
        abort_early: Stop at the first error instead of collecting all of them
        convert: Allow coercion (JSON text to arrays, numeric text to numbers, ...)
        strip_unknown: ``True`` strips unknown object keys; a mapping such as
            ``{"arrays": True, "objects": False}`` selects per container kind.
            Array items are only stripped when ``arrays`` is set explicitly.
        allow_unknown: Accept object keys that have no declared schema
        context: External values reachable through ``$``-prefixed references
    """

    abort_early: bool = True
    convert: bool = True
    strip_unknown: bool | Mapping[str, bool] = False
    allow_unknown: bool = False
    context: Mapping[str, Any] = field(default_factory=dict)

    def strips(self, kind: str) -> bool:
        """Check whether unknown entries of a container kind are stripped.

        Args:
            kind: ``"arrays"`` or ``"objects"``

        Returns:
            True if unmatched entries of that kind are removed silently
        """
        if isinstance(self.strip_unknown, Mapping):
            return bool(self.strip_unknown.get(kind, False))
        return bool(self.strip_unknown) and kind == "objects"

    def merge(self, overrides: Mapping[str, Any] | None) -> ValidationOptions:
        """Create new options with some values replaced.

        Args:
            overrides: Option names mapped to their new values

        Returns:
            New ValidationOptions instance

        Raises:
            SchemaDefinitionError: If an override names an unknown option
        """
        if not overrides:
            return self
        _check_names(overrides)
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ValidationOptions:
        """Create options from a configuration mapping."""
        return DEFAULT_OPTIONS.merge(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert options to a plain dictionary."""
        return dataclasses.asdict(self)


_OPTION_NAMES = frozenset(f.name for f in dataclasses.fields(ValidationOptions))


def _check_names(overrides: Mapping[str, Any]) -> None:
    unknown = sorted(set(overrides) - _OPTION_NAMES)
    if unknown:
        raise SchemaDefinitionError(
            f"Unknown validation options: {', '.join(unknown)}",
            context={"unknown": unknown, "allowed": sorted(_OPTION_NAMES)},
        )


DEFAULT_OPTIONS = ValidationOptions()
