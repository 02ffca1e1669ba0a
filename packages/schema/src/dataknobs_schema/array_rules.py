"""Structural rules for array schemas: cardinality, existence and uniqueness."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from .base import AnySchema, Rule
from .options import ValidationOptions
from .references import is_ref
from .result import ValidationResult
from .state import ValidationState
from .utils import UNDEFINED, compare, deep_equal, is_limit, reach


def check_length(schema: AnySchema, value: list[Any], state: ValidationState,
                 options: ValidationOptions, rule: Rule) -> ValidationResult:
    """Compare the item count against a fixed or referenced limit."""
    limit = rule.args["limit"]
    if is_ref(limit):
        resolved = limit.resolve(value, state, options)
        if not is_limit(resolved):
            return schema._fail("array.ref", {"ref": limit.key, "value": resolved}, state)
        limit = resolved

    if compare(len(value), limit, rule.operator or "="):
        return ValidationResult.success(value)
    return schema._fail(f"array.{rule.name}", {"limit": limit, "value": value}, state)


def check_has(schema: AnySchema, value: list[Any], state: ValidationState,
              options: ValidationOptions, rule: Rule) -> ValidationResult:
    """Require at least one item to match a schema; items are not rewritten."""
    pattern: AnySchema = rule.args["schema"]
    for index, item in enumerate(value):
        item_state = ValidationState(index, (*state.path, index), (value, *state.ancestors))
        if pattern.check(item, item_state, options).valid:
            return ValidationResult.success(value)

    pattern_label = pattern.get_label()
    if pattern_label:
        return schema._fail("array.hasKnown", {"pattern_label": pattern_label}, state)
    return schema._fail("array.hasUnknown", None, state)


# Bucket key standing in for NaN, which never equals itself
_NAN = object()


def _primitive_category(item: Any) -> str | None:
    """Bucket name for hashable primitives, None for structural values."""
    if item is UNDEFINED:
        return "undefined"
    if item is None:
        return "null"
    if isinstance(item, bool):
        return "boolean"
    if isinstance(item, (int, float)):
        return "number"
    if isinstance(item, str):
        return "string"
    return None


def check_unique(schema: AnySchema, value: list[Any], state: ValidationState,
                 options: ValidationOptions, rule: Rule) -> ValidationResult:
    """Report the first item that duplicates an earlier one.

    Primitives (strings, numbers, booleans, None, UNDEFINED) go into a hash
    keyed by ``(category, value)`` for O(1) membership; structural values and
    every value under a custom comparator go into a list scanned linearly,
    making those O(n) per item.
    """
    settings = rule.args["settings"]
    path = rule.meta.get("path")
    comparator: Callable[[Any, Any], bool] | None = settings.get("comparator")
    equals = comparator or deep_equal
    ignore_undefined = settings["ignore_undefined"]

    primitives: dict[tuple[str, Any], int] = {}
    structural: list[tuple[Any, int]] = []

    for index, entry in enumerate(value):
        item = reach(entry, path) if path else entry
        category = None if comparator else _primitive_category(item)

        if category is None:
            for seen, seen_index in structural:
                if equals(seen, item):
                    return _duplicate(schema, value, state, index, seen_index, settings)
            structural.append((item, index))
            continue

        if ignore_undefined and item is UNDEFINED:
            continue

        if isinstance(item, float) and math.isnan(item):
            bucket_key = (category, _NAN)
        else:
            bucket_key = (category, item)

        if bucket_key in primitives:
            return _duplicate(schema, value, state, index, primitives[bucket_key], settings)
        primitives[bucket_key] = index

    return ValidationResult.success(value)


def _duplicate(schema: AnySchema, value: list[Any], state: ValidationState, pos: int,
               dupe_pos: int, settings: dict[str, Any]) -> ValidationResult:
    context: dict[str, Any] = {
        "pos": pos,
        "value": value[pos],
        "dupe_pos": dupe_pos,
        "dupe_value": value[dupe_pos],
    }
    if settings.get("path"):
        context["path"] = settings["path"]
    item_state = ValidationState(state.key, (*state.path, pos), (value, *state.ancestors))
    return schema._fail("array.unique", context, item_state)
