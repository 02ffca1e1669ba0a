"""Scalar schema kinds: strings, numbers and booleans."""

from __future__ import annotations

import math
import re
from re import Pattern as RegexPattern
from typing import Any

from .base import AnySchema, Rule, assert_limit
from .coercion import Coercer
from .exceptions import SchemaDefinitionError
from .options import ValidationOptions
from .result import ValidationResult
from .state import ValidationState
from .utils import compare

_coercer = Coercer()


def _check_length(schema: AnySchema, value: Any, state: ValidationState,
                  options: ValidationOptions, rule: Rule) -> ValidationResult:
    limit = rule.args["limit"]
    if compare(len(value), limit, rule.operator or "="):
        return ValidationResult.success(value)
    return schema._fail(f"{schema.schema_type}.{rule.name}", {"limit": limit, "value": value}, state)


class StringSchema(AnySchema):
    """Schema for text values. Empty strings are rejected unless allowed."""

    schema_type = "string"

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        if not isinstance(value, str):
            return self._fail("string.base", {"value": value}, state)
        if value == "":
            return self._fail("string.empty", {"value": value}, state)
        return ValidationResult.success(value)

    def min(self, limit: int) -> StringSchema:
        return self._length("min", limit, ">=")

    def max(self, limit: int) -> StringSchema:
        return self._length("max", limit, "<=")

    def length(self, limit: int) -> StringSchema:
        return self._length("length", limit, "=")

    def _length(self, name: str, limit: int, operator: str) -> StringSchema:
        assert_limit(limit)
        return self._add_rule(Rule(name, _check_length, args={"limit": limit}, operator=operator))

    def pattern(self, regex: str | RegexPattern) -> StringSchema:
        """Require the value to match a regular expression (``re.search``)."""
        if isinstance(regex, str):
            regex = re.compile(regex)
        elif not isinstance(regex, RegexPattern):
            raise SchemaDefinitionError("pattern must be a string or compiled regex", context={"pattern": regex})
        return self._add_rule(Rule("pattern", _check_pattern, args={"regex": regex}, multi=True))


def _check_pattern(schema: AnySchema, value: str, state: ValidationState,
                   options: ValidationOptions, rule: Rule) -> ValidationResult:
    regex = rule.args["regex"]
    if regex.search(value):
        return ValidationResult.success(value)
    return schema._fail("string.pattern", {"value": value, "pattern": regex.pattern}, state)


class NumberSchema(AnySchema):
    """Schema for finite ints and floats. Numeric text converts when ``convert`` is on."""

    schema_type = "number"

    def _coerce(self, value: Any, state: ValidationState, options: ValidationOptions) -> Any:
        if isinstance(value, str):
            result = _coercer.coerce(value, float)
            if result.valid:
                return result.value
        return value

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return self._fail("number.base", {"value": value}, state)
        if isinstance(value, float) and not math.isfinite(value):
            return self._fail("number.base", {"value": value}, state)
        return ValidationResult.success(value)

    def min(self, limit: int | float) -> NumberSchema:
        return self._bound("min", limit, ">=")

    def max(self, limit: int | float) -> NumberSchema:
        return self._bound("max", limit, "<=")

    def _bound(self, name: str, limit: int | float, operator: str) -> NumberSchema:
        if isinstance(limit, bool) or not isinstance(limit, (int, float)):
            raise SchemaDefinitionError("limit must be a number", context={"limit": limit})
        return self._add_rule(Rule(name, _check_bound, args={"limit": limit}, operator=operator))

    def integer(self) -> NumberSchema:
        return self._add_rule(Rule("integer", _check_integer))


def _check_bound(schema: AnySchema, value: int | float, state: ValidationState,
                 options: ValidationOptions, rule: Rule) -> ValidationResult:
    limit = rule.args["limit"]
    if compare(value, limit, rule.operator or "="):
        return ValidationResult.success(value)
    return schema._fail(f"number.{rule.name}", {"limit": limit, "value": value}, state)


def _check_integer(schema: AnySchema, value: int | float, state: ValidationState,
                   options: ValidationOptions, rule: Rule) -> ValidationResult:
    if isinstance(value, int) or value.is_integer():
        return ValidationResult.success(value)
    return schema._fail("number.integer", {"value": value}, state)


class BooleanSchema(AnySchema):
    """Schema for booleans. ``"true"``/``"false"`` text converts when ``convert`` is on."""

    schema_type = "boolean"

    def _coerce(self, value: Any, state: ValidationState, options: ValidationOptions) -> Any:
        if isinstance(value, str):
            result = _coercer.coerce(value, bool)
            if result.valid:
                return result.value
        return value

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        if not isinstance(value, bool):
            return self._fail("boolean.base", {"value": value}, state)
        return ValidationResult.success(value)
