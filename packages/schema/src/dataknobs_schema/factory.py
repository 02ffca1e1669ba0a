"""Factory for building schemas from configuration."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Union

import yaml  # type: ignore[import-untyped]

from .alternatives import AlternativesSchema
from .array import ArraySchema
from .base import AnySchema
from .cast import cast_schema
from .exceptions import SchemaDefinitionError
from .object import ObjectSchema
from .primitives import BooleanSchema, NumberSchema, StringSchema
from .references import ref

logger = logging.getLogger(__name__)

_COMMON_OPTIONS = frozenset({
    "type", "presence", "required", "label", "description", "default",
    "allow", "valid", "invalid", "strip", "strict",
})


class SchemaFactory:
    """Factory for creating schemas from configuration.

    Configuration Options (all kinds):
        type (str): any, array, string, number, boolean, object, alternatives
        presence (str): required, optional or forbidden
        required (bool): Shorthand for ``presence: required``
        label (str): Label used in error messages and missed-item reports
        description (str): Free-form description
        default (any): Value used when the input is missing
        allow / valid / invalid (list): Allow-list, exclusive allow-list, deny-list
        strip (bool): Remove matched values from the containing array/object
        strict (bool): Disable coercion

    Array Options:
        items (list): Item schema configurations
        ordered (list): Positional item schema configurations
        min / max / length (int | {"ref": key}): Item count limits
        has (dict | list): One or more schemas at least one item must match
        unique (bool | str | dict): ``true``, a key path, or
            ``{path, ignore_undefined, separator}``
        sparse (bool): Allow missing items
        single (bool): Wrap non-array values into a one-element array

    Example Configuration:
        schemas:
          - name: tags
            factory: schema
            type: array
            label: tags
            items:
              - type: string
                max: 20
            min: 1
            unique: true
          - name: line_items
            factory: schema
            type: array
            items:
              - type: object
                keys:
                  sku: {type: string, required: true}
                  qty: {type: number, integer: true, min: 1}
            unique: sku
    """

    def __init__(self) -> None:
        self._kinds: Dict[str, Callable[[], AnySchema]] = {
            "any": AnySchema,
            "array": ArraySchema,
            "string": StringSchema,
            "number": NumberSchema,
            "boolean": BooleanSchema,
            "object": ObjectSchema,
            "alternatives": AlternativesSchema,
        }
        self._appliers: Dict[str, Callable[[Any, Mapping[str, Any]], AnySchema]] = {
            "array": self._apply_array,
            "string": self._apply_string,
            "number": self._apply_number,
            "object": self._apply_object,
            "alternatives": self._apply_alternatives,
        }
        self._kind_options: Dict[str, frozenset[str]] = {
            "any": frozenset(),
            "array": frozenset({"items", "ordered", "min", "max", "length", "has", "unique", "sparse", "single"}),
            "string": frozenset({"min", "max", "length", "pattern"}),
            "number": frozenset({"min", "max", "integer"}),
            "boolean": frozenset(),
            "object": frozenset({"keys", "unknown"}),
            "alternatives": frozenset({"try"}),
        }

    def create(self, **config: Any) -> AnySchema:
        """Create a schema from configuration.

        Args:
            **config: Schema configuration

        Returns:
            Schema instance

        Raises:
            SchemaDefinitionError: If the configuration cannot describe a schema
        """
        name = config.pop("name", None)
        config.pop("factory", None)
        logger.info(f"Creating {config.get('type', 'any')} schema: {name or 'unnamed'}")
        return self.build(config)

    def build(self, config: Any) -> AnySchema:
        """Build a schema from a configuration mapping or a schema literal."""
        if not isinstance(config, Mapping):
            return cast_schema(config)

        kind = str(config.get("type", "any")).lower()
        if kind not in self._kinds:
            raise SchemaDefinitionError(
                f"Unknown schema type: {kind}",
                context={"type": kind, "available": sorted(self._kinds)},
            )

        for key in config:
            if key not in _COMMON_OPTIONS and key not in self._kind_options[kind]:
                logger.warning(f"Ignoring unknown {kind} schema option: {key}")

        schema = self._apply_common(self._kinds[kind](), config)
        applier = self._appliers.get(kind)
        if applier is not None:
            schema = applier(schema, config)
        return schema

    def _apply_common(self, schema: AnySchema, config: Mapping[str, Any]) -> AnySchema:
        presence = config.get("presence")
        if config.get("required"):
            presence = "required"
        if presence == "required":
            schema = schema.required()
        elif presence == "forbidden":
            schema = schema.forbidden()
        elif presence not in (None, "optional"):
            raise SchemaDefinitionError(f"Invalid presence: {presence}", context={"presence": presence})

        if "label" in config:
            schema = schema.label(config["label"])
        if "description" in config:
            schema = schema.description(config["description"])
        if "default" in config:
            schema = schema.default(config["default"])
        if "allow" in config:
            schema = schema.allow(*config["allow"])
        if "valid" in config:
            schema = schema.valid(*config["valid"])
        if "invalid" in config:
            schema = schema.invalid(*config["invalid"])
        if config.get("strip"):
            schema = schema.strip()
        if config.get("strict"):
            schema = schema.strict()
        return schema

    def _apply_array(self, schema: ArraySchema, config: Mapping[str, Any]) -> AnySchema:
        if config.get("single"):
            schema = schema.single()
        if "ordered" in config:
            schema = schema.ordered(*(self.build(item) for item in config["ordered"]))
        if "items" in config:
            schema = schema.items(*(self.build(item) for item in config["items"]))
        for name in ("min", "max", "length"):
            if name in config:
                schema = getattr(schema, name)(self._limit(config[name]))

        has = config.get("has")
        if has is not None:
            for pattern in has if isinstance(has, list) else [has]:
                schema = schema.has(self.build(pattern))

        unique = config.get("unique")
        if unique is True:
            schema = schema.unique()
        elif isinstance(unique, str):
            schema = schema.unique(unique)
        elif isinstance(unique, Mapping):
            schema = schema.unique(
                unique.get("path"),
                ignore_undefined=unique.get("ignore_undefined", False),
                separator=unique.get("separator", "."),
            )
        elif unique not in (None, False):
            raise SchemaDefinitionError("unique must be a boolean, a path or a mapping", context={"unique": unique})

        if "sparse" in config:
            schema = schema.sparse(bool(config["sparse"]))
        return schema

    def _apply_string(self, schema: StringSchema, config: Mapping[str, Any]) -> AnySchema:
        for name in ("min", "max", "length"):
            if name in config:
                schema = getattr(schema, name)(config[name])
        if "pattern" in config:
            schema = schema.pattern(config["pattern"])
        return schema

    def _apply_number(self, schema: NumberSchema, config: Mapping[str, Any]) -> AnySchema:
        if "min" in config:
            schema = schema.min(config["min"])
        if "max" in config:
            schema = schema.max(config["max"])
        if config.get("integer"):
            schema = schema.integer()
        return schema

    def _apply_object(self, schema: ObjectSchema, config: Mapping[str, Any]) -> AnySchema:
        if "keys" in config:
            keys = config["keys"] or {}
            schema = schema.keys({key: self.build(child) for key, child in keys.items()})
        if "unknown" in config:
            schema = schema.unknown(bool(config["unknown"]))
        return schema

    def _apply_alternatives(self, schema: AlternativesSchema, config: Mapping[str, Any]) -> AnySchema:
        return schema.try_(*(self.build(item) for item in config.get("try", [])))

    def _limit(self, limit: Any) -> Any:
        if isinstance(limit, Mapping) and "ref" in limit:
            return ref(limit["ref"], limit.get("separator", "."))
        return limit


def load_schema(path: Union[str, Path]) -> AnySchema:
    """Load a schema definition from a YAML or JSON file.

    Args:
        path: File path ending in .yaml, .yml or .json

    Returns:
        Schema instance

    Raises:
        SchemaDefinitionError: If the file format is unsupported or the content
            is not a mapping
    """
    path = Path(path)
    suffix = path.suffix.lower()
    logger.info(f"Loading schema from {path}")

    with open(path, encoding="utf-8") as f:
        if suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise SchemaDefinitionError(
                f"Unsupported schema file format: {suffix}",
                context={"path": str(path)},
            )

    if not isinstance(data, Mapping):
        raise SchemaDefinitionError(
            "Schema file must contain a mapping",
            context={"path": str(path), "found": type(data).__name__},
        )
    return schema_factory.create(**data)


# Create singleton instance for registration
schema_factory = SchemaFactory()
