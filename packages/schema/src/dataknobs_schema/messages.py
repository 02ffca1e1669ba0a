"""Default English messages for validation error codes."""

from __future__ import annotations

from typing import Any

DEFAULT_MESSAGES: dict[str, str] = {
    "any.required": '"{label}" is required',
    "any.unknown": '"{label}" is not allowed',
    "any.invalid": '"{label}" contains an invalid value',
    "any.allowOnly": '"{label}" must be one of {valids}',
    "any.convert": '"{label}" cannot be converted to {target}: {reason}',
    "string.base": '"{label}" must be a string',
    "string.empty": '"{label}" is not allowed to be empty',
    "string.min": '"{label}" length must be at least {limit} characters long',
    "string.max": '"{label}" length must be less than or equal to {limit} characters long',
    "string.length": '"{label}" length must be {limit} characters long',
    "string.pattern": '"{label}" with value "{value}" fails to match the required pattern: {pattern}',
    "number.base": '"{label}" must be a number',
    "number.min": '"{label}" must be larger than or equal to {limit}',
    "number.max": '"{label}" must be less than or equal to {limit}',
    "number.integer": '"{label}" must be an integer',
    "boolean.base": '"{label}" must be a boolean',
    "object.base": '"{label}" must be an object',
    "object.allowUnknown": '"{label}" is not allowed',
    "alternatives.base": '"{label}" does not match any of the allowed types',
    "array.base": '"{label}" must be an array',
    "array.sparse": '"{label}" must not be a sparse array',
    "array.excludes": '"{label}" at position {pos} contains an excluded value',
    "array.excludesSingle": 'single value of "{label}" contains an excluded value',
    "array.ordered": '"{label}" at position {pos} fails because {reason}',
    "array.orderedLength": '"{label}" at position {pos} fails because array must contain at most {limit} items',
    "array.includes": '"{label}" at position {pos} does not match any of the allowed types',
    "array.includesSingle": 'single value of "{label}" does not match any of the allowed types',
    "array.includesOne": '"{label}" at position {pos} fails because {reason}',
    "array.includesOneSingle": 'single value of "{label}" fails because {reason}',
    "array.includesRequiredKnowns": '"{label}" does not contain {known_misses}',
    "array.includesRequiredUnknowns": '"{label}" does not contain {unknown_misses} required value(s)',
    "array.includesRequiredBoth": (
        '"{label}" does not contain {known_misses} and {unknown_misses} other required value(s)'
    ),
    "array.hasKnown": '"{label}" does not contain at least one required match for type "{pattern_label}"',
    "array.hasUnknown": '"{label}" does not contain at least one required match',
    "array.unique": '"{label}" position {pos} contains a duplicate value',
    "array.min": '"{label}" must contain at least {limit} items',
    "array.max": '"{label}" must contain less than or equal to {limit} items',
    "array.length": '"{label}" must contain {limit} items',
    "array.ref": '"{label}" references "{ref}" which is not a positive integer',
}


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _display(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value and all(hasattr(v, "message") for v in value):
        return "[" + ". ".join(v.message for v in value) + "]"
    return repr(value)


def render_message(code: str, context: dict[str, Any]) -> str:
    """Render the default message for an error code.

    Args:
        code: Error code such as ``array.unique``
        context: Error context; placeholders missing from it are left as-is

    Returns:
        Human-readable message
    """
    template = DEFAULT_MESSAGES.get(code, '"{label}" failed validation ({code})')
    values = _Placeholders({key: _display(value) for key, value in context.items()})
    values.setdefault("code", code)
    return template.format_map(values)
