"""Schema kind for mappings with per-key schemas."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .base import AnySchema, Rule
from .cast import cast_at
from .options import ValidationOptions
from .result import ValidationError, ValidationResult
from .state import ValidationState
from .utils import UNDEFINED

logger = logging.getLogger(__name__)


def _validate_keys(schema: AnySchema, value: dict[str, Any], state: ValidationState,
                   options: ValidationOptions, rule: Rule) -> ValidationResult:
    children: dict[str, AnySchema] | None = schema._children  # type: ignore[attr-defined]
    if children is None:
        return ValidationResult.success(value)

    target = dict(value)
    errors: list[ValidationError] = []

    for key, child in children.items():
        result = child.check(target.get(key, UNDEFINED), state.child(key, target), options)
        if not result.valid:
            errors.extend(result.errors)
            if options.abort_early:
                return ValidationResult.failure(errors)
            continue

        if child.is_stripped or result.value is UNDEFINED:
            target.pop(key, None)
        else:
            target[key] = result.value

    allow_unknown = schema._flags.get("allow_unknown", options.allow_unknown)
    for key in value:
        if key in children:
            continue
        if options.strips("objects"):
            logger.debug(f"Stripping unknown key '{key}'")
            target.pop(key, None)
            continue
        if allow_unknown:
            continue
        errors.append(schema._error(
            "object.allowUnknown",
            {"child": key, "label": str(key), "value": value[key]},
            state.child(key, target),
        ))
        if options.abort_early:
            return ValidationResult.failure(errors)

    if errors:
        return ValidationResult.failure(errors)
    return ValidationResult.success(target)


class ObjectSchema(AnySchema):
    """Schema for mappings. The accepted value is always a new ``dict``.

    Example:
        ```python
        schema = ObjectSchema({"id": NumberSchema().required(), "tags": ArraySchema()})
        ```
    """

    schema_type = "object"

    def __init__(self, keys: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._children: dict[str, AnySchema] | None = None
        self._rules = (Rule("keys", _validate_keys, described=False),)
        if keys is not None:
            self._children = {key: cast_at(child, key) for key, child in keys.items()}

    def keys(self, schema_map: Mapping[str, Any] | None = None) -> ObjectSchema:
        """Declare key schemas; with no argument, any keys are accepted."""
        obj = self._clone()
        if schema_map is None:
            obj._children = None
            return obj
        children = dict(obj._children or {})
        for key, child in schema_map.items():
            children[key] = cast_at(child, key)
        obj._children = children
        return obj

    def unknown(self, allow: bool = True) -> ObjectSchema:
        """Accept (or reject) keys that have no declared schema."""
        return self._set_flag("allow_unknown", bool(allow))

    def _coerce(self, value: Any, state: ValidationState, options: ValidationOptions) -> Any:
        if isinstance(value, str) and value.lstrip().startswith("{"):
            try:
                return json.loads(value)
            except ValueError:
                pass
        return value

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        if not isinstance(value, Mapping):
            return self._fail("object.base", {"value": value}, state)
        return ValidationResult.success(dict(value))

    def describe(self) -> dict[str, Any]:
        description = super().describe()
        if self._children is not None:
            description["children"] = {key: child.describe() for key, child in self._children.items()}
        return description
