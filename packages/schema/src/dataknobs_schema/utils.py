"""Small helpers shared by the schema kinds.

Provides the ``UNDEFINED`` sentinel used for missing values and array holes,
nested value lookup by path segments, and the type-strict structural
equality used for allow-lists and uniqueness checks.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any


class _Undefined:
    """Marker for a missing value or an array hole.

    Distinct from ``None``, which is an ordinary (JSON ``null``) value.
    """

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


def is_array(value: Any) -> bool:
    """Check whether a value is treated as an array (list or tuple)."""
    return isinstance(value, (list, tuple))


def is_limit(value: Any) -> bool:
    """Check whether a value is a usable non-negative integer limit."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def reach(obj: Any, path: Sequence[Any]) -> Any:
    """Get a nested value by following path segments.

    Mapping segments are looked up as keys, sequence segments are converted
    to integer indexes. Any miss along the way yields ``UNDEFINED``.

    Args:
        obj: Container to start from
        path: Sequence of key or index segments

    Returns:
        The nested value or ``UNDEFINED``
    """
    current = obj
    for segment in path:
        if isinstance(current, Mapping):
            if segment not in current:
                return UNDEFINED
            current = current[segment]
        elif is_array(current):
            try:
                index = int(segment)
            except (TypeError, ValueError):
                return UNDEFINED
            if not -len(current) <= index < len(current):
                return UNDEFINED
            current = current[index]
        else:
            return UNDEFINED
    return current


def deep_equal(left: Any, right: Any) -> bool:
    """Structural equality that does not conflate booleans with numbers.

    Python's ``==`` treats ``True == 1`` and ``[1] == [True]`` as equal; schema
    comparisons must not, so booleans only ever equal booleans. NaN equals
    NaN.
    """
    if left is right:
        return True

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)

    if is_array(left) and is_array(right):
        if isinstance(left, list) != isinstance(right, list) or len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, float) and isinstance(right, float):
        if math.isnan(left) and math.isnan(right):
            return True

    return bool(left == right)


def compare(value: Any, limit: Any, operator: str) -> bool:
    """Compare a value against a limit with one of ``=``, ``>=`` or ``<=``."""
    if operator == "=":
        return bool(value == limit)
    if operator == ">=":
        return bool(value >= limit)
    if operator == "<=":
        return bool(value <= limit)
    raise ValueError(f"Unknown comparison operator: {operator}")
