"""References to sibling data or to the validation context."""

from __future__ import annotations

from typing import Any

from .exceptions import SchemaDefinitionError
from .options import ValidationOptions
from .state import ValidationState
from .utils import reach

CONTEXT_PREFIX = "$"


class Reference:
    """A value resolved at validation time instead of schema-build time.

    Plain keys are looked up in the container that holds the value being
    validated (``state.ancestors[0]``); keys starting with ``$`` are looked up
    in ``options.context``.

    Example:
        ```python
        schema = ObjectSchema({
            "count": NumberSchema().integer(),
            "tags": ArraySchema().max(ref("count")),
        })
        ```
    """

    def __init__(self, key: str, separator: str | None = "."):
        if not isinstance(key, str) or not key or key == CONTEXT_PREFIX:
            raise SchemaDefinitionError(f"Invalid reference key: {key!r}", context={"key": key})
        self.key = key
        self.is_context = key.startswith(CONTEXT_PREFIX)
        target = key[len(CONTEXT_PREFIX):] if self.is_context else key
        self.path = tuple(target.split(separator)) if separator else (target,)

    def resolve(self, value: Any, state: ValidationState, options: ValidationOptions) -> Any:
        """Resolve the referenced value, ``UNDEFINED`` when it is missing."""
        if self.is_context:
            return reach(options.context, self.path)
        return reach(state.parent, self.path)

    def describe(self) -> str:
        if self.is_context:
            return f"context:{'.'.join(self.path)}"
        return f"ref:{self.key}"

    def __repr__(self) -> str:
        return f"Reference({self.key!r})"


def ref(key: str, separator: str | None = ".") -> Reference:
    """Create a reference to a sibling key path or a ``$`` context entry."""
    return Reference(key, separator)


def is_ref(value: Any) -> bool:
    return isinstance(value, Reference)
