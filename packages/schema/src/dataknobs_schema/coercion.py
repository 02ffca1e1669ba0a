"""Type coercion with predictable, consistent behavior.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable
from typing import Any

from .messages import render_message
from .result import ValidationError, ValidationResult


class Coercer:
    """Converts loosely-typed input (usually text) into the type a schema expects.

    Always returns ValidationResult, never raises exceptions. Schemas treat a
    failed coercion as "keep the original value" and let their base type
    check report the problem.
    """

    def __init__(self) -> None:
        self._coercion_map: dict[type, Callable[[Any], Any]] = {
            list: self._to_list,
            float: self._to_number,
            int: self._to_number,
            bool: self._to_bool,
        }

    def coerce(self, value: Any, target_type: type) -> ValidationResult:
        """Coerce a value to the target type.

        Args:
            value: Value to coerce
            target_type: One of ``list``, ``int``, ``float`` or ``bool``

        Returns:
            ValidationResult with coerced value or error
        """
        coercion_func = self._coercion_map.get(target_type)
        if coercion_func is None:
            return self._failure(value, target_type, "unsupported target type")

        try:
            return ValidationResult.success(coercion_func(value))
        except (ValueError, TypeError) as e:
            return self._failure(value, target_type, str(e))

    def _failure(self, value: Any, target_type: type, reason: str) -> ValidationResult:
        context = {
            "label": "value",
            "value": value,
            "target": target_type.__name__,
            "reason": reason,
        }
        error = ValidationError(
            code="any.convert",
            message=render_message("any.convert", context),
            context=context,
        )
        return ValidationResult.failure([error])

    def _to_list(self, value: Any) -> list[Any]:
        if isinstance(value, list):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Cannot coerce {type(value).__name__} to list")
        decoded = json.loads(value)
        if not isinstance(decoded, list):
            raise ValueError("JSON text does not hold an array")
        return decoded

    def _to_number(self, value: Any) -> int | float:
        if isinstance(value, bool):
            raise TypeError("Booleans are not numbers")
        if isinstance(value, (int, float)):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Cannot coerce {type(value).__name__} to number")

        text = value.strip()
        if not text:
            raise ValueError("Empty string is not a number")
        try:
            return int(text)
        except ValueError:
            number = float(text)
        if not math.isfinite(number):
            raise ValueError(f"String '{value}' is not a finite number")
        return number

    def _to_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text == "true":
                return True
            if text == "false":
                return False
        raise ValueError(f"Value {value!r} is not a valid boolean")
