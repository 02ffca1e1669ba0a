"""Array schema with positional, required, optional and forbidden item schemas.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .array_items import SingleItemList, match_items
from .array_rules import check_has, check_length, check_unique
from .base import PRESENCE_FORBIDDEN, PRESENCE_REQUIRED, AnySchema, Rule, assert_limit
from .cast import cast_at, cast_schema, verify_flat
from .coercion import Coercer
from .exceptions import SchemaDefinitionError
from .options import ValidationOptions
from .references import Reference
from .result import ValidationResult
from .state import ValidationState

logger = logging.getLogger(__name__)

_coercer = Coercer()

# Item kinds whose single-vs-collection meaning is ambiguous under single()
_COLLECTION_TYPES = ("array", "alternatives")

# Always present; items() and ordered() move it to their declaration position
_ITEMS_RULE = Rule("items", match_items, described=False)


class ArraySchema(AnySchema):
    """Schema for lists (and tuples), accepted as a new list.

    Item schemas given to ``items()`` are split by presence: ``required()``
    schemas must each match an item, ``forbidden()`` schemas must match none,
    and the rest may match any number of items. ``ordered()`` schemas match
    items by position.

    Example:
        ```python
        schema = (
            ArraySchema()
            .ordered(StringSchema(), NumberSchema())
            .items(BooleanSchema())
            .max(5)
            .unique()
        )
        result = schema.validate(["a", "1", True])
        result.value   # ["a", 1, True]
        ```
    """

    schema_type = "array"

    def __init__(self) -> None:
        super().__init__()
        self._items: tuple[AnySchema, ...] = ()
        self._ordereds: tuple[AnySchema, ...] = ()
        self._requireds: tuple[AnySchema, ...] = ()
        self._inclusions: tuple[AnySchema, ...] = ()
        self._exclusions: tuple[AnySchema, ...] = ()
        self._flags["sparse"] = False
        self._rules = (_ITEMS_RULE,)

    # -- sub-schema pools --------------------------------------------------

    @property
    def item_schemas(self) -> tuple[AnySchema, ...]:
        """Every schema passed to ``items()``, in declaration order."""
        return self._items

    @property
    def ordered_schemas(self) -> tuple[AnySchema, ...]:
        return self._ordereds

    @property
    def required_schemas(self) -> tuple[AnySchema, ...]:
        return self._requireds

    @property
    def inclusion_schemas(self) -> tuple[AnySchema, ...]:
        return self._inclusions

    @property
    def exclusion_schemas(self) -> tuple[AnySchema, ...]:
        return self._exclusions

    @property
    def sparse_allowed(self) -> bool:
        return bool(self._flags.get("sparse", False))

    @property
    def single_wrap(self) -> bool:
        return bool(self._flags.get("single", False))

    # -- builders ----------------------------------------------------------

    def items(self, *schemas: Any) -> ArraySchema:
        """Add unordered item schemas, partitioned by their presence flag."""
        verify_flat(schemas, "items")
        obj = self._add_rule(_ITEMS_RULE)
        for position, item in enumerate(schemas):
            schema = cast_at(item, position)
            obj._track_collection_item(schema)
            obj._items = (*obj._items, schema)
            if schema.presence == PRESENCE_REQUIRED:
                obj._requireds = (*obj._requireds, schema)
            elif schema.presence == PRESENCE_FORBIDDEN:
                obj._exclusions = (*obj._exclusions, schema.optional())
            else:
                obj._inclusions = (*obj._inclusions, schema)
        return obj

    def ordered(self, *schemas: Any) -> ArraySchema:
        """Add positional item schemas: item ``i`` must match the ``i``-th one."""
        verify_flat(schemas, "ordered")
        obj = self._add_rule(_ITEMS_RULE)
        for position, item in enumerate(schemas):
            schema = cast_at(item, position)
            obj._track_collection_item(schema)
            obj._ordereds = (*obj._ordereds, schema)
        return obj

    def _track_collection_item(self, schema: AnySchema) -> None:
        # Only called on a fresh clone
        if schema.schema_type in _COLLECTION_TYPES:
            if self.single_wrap:
                raise SchemaDefinitionError(
                    "Cannot specify array item with single rule enabled",
                    context={"item_type": schema.schema_type},
                )
            self._flags["_array_items"] = True

    def min(self, limit: int | Reference) -> ArraySchema:
        return self._length("min", limit, ">=")

    def max(self, limit: int | Reference) -> ArraySchema:
        return self._length("max", limit, "<=")

    def length(self, limit: int | Reference) -> ArraySchema:
        return self._length("length", limit, "=")

    def _length(self, name: str, limit: int | Reference, operator: str) -> ArraySchema:
        assert_limit(limit, allow_ref=True)
        return self._add_rule(Rule(name, check_length, args={"limit": limit}, operator=operator))

    def has(self, schema: Any) -> ArraySchema:
        """Require at least one item to match ``schema``. Repeated calls accumulate."""
        pattern = cast_schema(schema)
        return self._add_rule(Rule("has", check_has, args={"schema": pattern}, multi=True))

    def unique(
        self,
        comparator: str | Callable[[Any, Any], bool] | None = None,
        *,
        ignore_undefined: bool = False,
        separator: str | None = ".",
    ) -> ArraySchema:
        """Require items to be distinct.

        Args:
            comparator: A key path (compare the nested value it reaches) or a
                callable ``(earlier, later) -> bool`` returning True for duplicates.
                Deep equality is used when omitted.
            ignore_undefined: Skip items whose compared value is missing
            separator: Key path separator; a falsy separator treats the path
                as a single key

        Raises:
            SchemaDefinitionError: If the comparator is neither a string nor callable
        """
        if comparator is not None and not (callable(comparator) or isinstance(comparator, str)):
            raise SchemaDefinitionError(
                "comparator must be a function or a string",
                context={"comparator": repr(comparator)},
            )
        if separator is not None and not isinstance(separator, str):
            raise SchemaDefinitionError("separator must be a string", context={"separator": separator})

        settings: dict[str, Any] = {"ignore_undefined": bool(ignore_undefined)}
        meta: dict[str, Any] = {}
        if isinstance(comparator, str) and comparator:
            settings["path"] = comparator
            meta["path"] = tuple(comparator.split(separator)) if separator else (comparator,)
        elif comparator:
            settings["comparator"] = comparator

        return self._add_rule(Rule("unique", check_unique, args={"settings": settings}, meta=meta, multi=True))

    def sparse(self, enabled: bool = True) -> ArraySchema:
        """Allow (or reject) ``UNDEFINED`` items."""
        return self._set_flag("sparse", bool(enabled))

    def single(self, enabled: bool = True) -> ArraySchema:
        """Accept a non-array value as a one-element array."""
        value = bool(enabled)
        if value and self._flags.get("_array_items"):
            raise SchemaDefinitionError("Cannot specify single rule when array has array items")
        return self._set_flag("single", value)

    # -- validation --------------------------------------------------------

    def _coerce(self, value: Any, state: ValidationState, options: ValidationOptions) -> Any:
        if isinstance(value, str) and value.lstrip().startswith("["):
            result = _coercer.coerce(value, list)
            if result.valid:
                return result.value
            logger.debug(f"Ignoring array text that is not valid JSON at {list(state.path)}")
        return value

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        if isinstance(value, (list, tuple)):
            # Copied so item matching never touches the caller's list
            return ValidationResult.success(list(value))
        if self.single_wrap:
            return ValidationResult.success(SingleItemList([value]))
        return self._fail("array.base", {"value": value}, state)

    # -- introspection -----------------------------------------------------

    def describe(self) -> dict[str, Any]:
        description = super().describe()
        if self._ordereds:
            description["orderedItems"] = [schema.describe() for schema in self._ordereds]
        if self._items:
            description["items"] = [schema.describe() for schema in self._items]
        return description
