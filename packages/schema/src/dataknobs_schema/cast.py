"""Turns schema-like literals into schema objects."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .base import AnySchema
from .exceptions import SchemaDefinitionError

logger = logging.getLogger(__name__)


def cast_schema(config: Any) -> AnySchema:
    """Convert a schema or schema-like literal into a schema.

    - schemas are returned unchanged
    - ``None``, strings, numbers and booleans become ``AnySchema().valid(literal)``
    - mappings become an ``ObjectSchema`` with each value cast as a key schema
    - lists and tuples become an ``AlternativesSchema`` of the cast entries

    Raises:
        SchemaDefinitionError: If the literal cannot describe a schema
    """
    from .alternatives import AlternativesSchema
    from .object import ObjectSchema

    if isinstance(config, AnySchema):
        return config
    if config is None or isinstance(config, (str, int, float, bool)):
        return AnySchema().valid(config)
    if isinstance(config, Mapping):
        return ObjectSchema().keys(config)
    if isinstance(config, (list, tuple)):
        return AlternativesSchema().try_(*config)
    raise SchemaDefinitionError(
        f"Invalid schema content: {config!r}",
        context={"value": repr(config)},
    )


def cast_at(config: Any, position: Any) -> AnySchema:
    """Cast a builder argument, prefixing failures with its position.

    The position accumulates through nested literals, so a failure deep inside
    ``items({"a": [1, object()]})`` reports ``(0.a.1)``.
    """
    try:
        return cast_schema(config)
    except SchemaDefinitionError as e:
        base_message = e.context.get("base_message", str(e))
        inner = e.context.get("path")
        path = f"{position}.{inner}" if inner is not None else str(position)
        logger.debug(f"Failed to cast schema at {path}: {base_message}")
        raise SchemaDefinitionError(
            f"{base_message}({path})",
            context={**e.context, "path": path, "base_message": base_message},
        ) from e


def verify_flat(args: Iterable[Any], method: str) -> None:
    """Reject list arguments to variadic builders such as ``items()``."""
    for arg in args:
        if isinstance(arg, (list, tuple)):
            raise SchemaDefinitionError(
                f"Method no longer accepts array arguments: {method}",
                context={"method": method},
            )
