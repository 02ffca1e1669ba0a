"""Runtime schema validation for untyped data.

Schemas are immutable, fluently-built descriptions of accepted values. The
array schema reconciles candidate lists against positional, required,
optional and forbidden item schemas, with sparse-item, strip, uniqueness and
existence rules.

Example:
    ```python
    from dataknobs_schema import ArraySchema, NumberSchema, StringSchema

    schema = ArraySchema().items(
        StringSchema().required().label("name"),
        NumberSchema(),
    ).unique()

    result = schema.validate(["widget", "3", 4])
    result.value   # ["widget", 3, 4]

    result = schema.validate([], abort_early=False)
    result.codes   # ["array.includesRequiredKnowns"]
    ```
"""

from .alternatives import AlternativesSchema
from .array import ArraySchema
from .array_items import ItemMatcher
from .base import AnySchema, Rule
from .cast import cast_schema
from .coercion import Coercer
from .exceptions import DataknobsSchemaError, SchemaDefinitionError, SchemaValidationError
from .factory import SchemaFactory, load_schema, schema_factory
from .object import ObjectSchema
from .options import DEFAULT_OPTIONS, ValidationOptions
from .primitives import BooleanSchema, NumberSchema, StringSchema
from .references import Reference, ref
from .result import ValidationError, ValidationResult
from .state import ValidationState
from .utils import UNDEFINED

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Schema kinds
    "AnySchema",
    "ArraySchema",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "ObjectSchema",
    "AlternativesSchema",
    "Rule",
    "ItemMatcher",
    # Construction
    "cast_schema",
    "ref",
    "Reference",
    "Coercer",
    # Results and state
    "ValidationResult",
    "ValidationError",
    "ValidationState",
    "ValidationOptions",
    "DEFAULT_OPTIONS",
    "UNDEFINED",
    # Exceptions
    "DataknobsSchemaError",
    "SchemaDefinitionError",
    "SchemaValidationError",
    # Factories
    "SchemaFactory",
    "schema_factory",
    "load_schema",
]
