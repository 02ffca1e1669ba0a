"""Base schema behaviour shared by every schema kind.

A schema is an immutable description of accepted values. Every builder call
returns a new schema and leaves the receiver untouched, so a schema can be
shared freely between validate calls.

The validation pipeline of ``AnySchema.check`` is:

1. presence (``forbidden`` / ``required`` / default for missing values)
2. allow-list and deny-list
3. coercion (when ``convert`` is enabled)
4. base type check of the concrete kind
5. the kind's rules, in declaration order; redeclaring a single-use rule
   moves it to the end
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .exceptions import SchemaDefinitionError, SchemaValidationError
from .messages import render_message
from .options import DEFAULT_OPTIONS, ValidationOptions
from .references import Reference
from .result import ValidationError, ValidationResult
from .state import ValidationState
from .utils import UNDEFINED, deep_equal, is_limit

logger = logging.getLogger(__name__)

_S = TypeVar("_S", bound="AnySchema")

PRESENCE_OPTIONAL = "optional"
PRESENCE_REQUIRED = "required"
PRESENCE_FORBIDDEN = "forbidden"

# Flags reported at the top level of describe() rather than under "flags"
_ANNOTATIONS = ("label", "description")

RuleFunc = Callable[["AnySchema", Any, ValidationState, ValidationOptions, "Rule"], ValidationResult]


@dataclass(frozen=True)
class Rule:
    """A named check attached to a schema.

    Attributes:
        name: Rule name; also the error code suffix for length-style rules
        func: Callable ``(schema, value, state, options, rule) -> ValidationResult``
        args: Arguments reported by describe()
        operator: Comparison operator for length-style rules
        meta: Precomputed data the rule needs that describe() does not report
        multi: If True, repeated declarations accumulate instead of replacing
        described: If False, the rule is left out of describe()
    """

    name: str
    func: RuleFunc
    args: Mapping[str, Any] = field(default_factory=dict)
    operator: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)
    multi: bool = False
    described: bool = True

    def describe(self) -> dict[str, Any]:
        description: dict[str, Any] = {"name": self.name}
        args = {key: describe_value(value) for key, value in self.args.items()}
        if len(args) == 1:
            description["arg"] = next(iter(args.values()))
        elif args:
            description["arg"] = args
        return description


def describe_value(value: Any) -> Any:
    """Turn a rule argument into a plain, serializable description."""
    if isinstance(value, AnySchema):
        return value.describe()
    if isinstance(value, Reference):
        return value.describe()
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, Mapping):
        return {key: describe_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [describe_value(item) for item in value]
    if callable(value):
        return getattr(value, "__qualname__", repr(value))
    return value


def assert_limit(limit: Any, allow_ref: bool = False) -> None:
    """Reject limits that are not non-negative integers (or references)."""
    if allow_ref and isinstance(limit, Reference):
        return
    if not is_limit(limit):
        message = "limit must be a positive integer or reference" if allow_ref else "limit must be a positive integer"
        raise SchemaDefinitionError(message, context={"limit": limit})


class AnySchema:
    """Schema accepting any value, and the base class of every schema kind.

    Example:
        ```python
        schema = AnySchema().valid("a", "b").label("letter")
        schema.validate("a").valid   # True
        schema.validate("c").codes   # ["any.allowOnly"]
        ```
    """

    schema_type = "any"

    def __init__(self) -> None:
        self._flags: dict[str, Any] = {}
        self._valids: tuple[Any, ...] = ()
        self._invalids: tuple[Any, ...] = ()
        self._rules: tuple[Rule, ...] = ()
        self._preferences: dict[str, Any] = {}

    # -- cloning -----------------------------------------------------------

    def _clone(self: _S) -> _S:
        obj = copy.copy(self)
        obj._flags = dict(self._flags)
        obj._preferences = dict(self._preferences)
        return obj

    def _set_flag(self: _S, name: str, value: Any) -> _S:
        if name in self._flags and self._flags[name] == value:
            return self
        obj = self._clone()
        obj._flags[name] = value
        return obj

    def _add_rule(self: _S, rule: Rule) -> _S:
        obj = self._clone()
        if not rule.multi:
            obj._rules = tuple(existing for existing in obj._rules if existing.name != rule.name)
        obj._rules = (*obj._rules, rule)
        return obj

    # -- flags -------------------------------------------------------------

    @property
    def presence(self) -> str:
        return self._flags.get("presence", PRESENCE_OPTIONAL)

    @property
    def is_stripped(self) -> bool:
        """Whether a matched value is removed from its containing array or object."""
        return bool(self._flags.get("strip", False))

    def required(self) -> AnySchema:
        return self._set_flag("presence", PRESENCE_REQUIRED)

    def optional(self) -> AnySchema:
        return self._set_flag("presence", PRESENCE_OPTIONAL)

    def forbidden(self) -> AnySchema:
        return self._set_flag("presence", PRESENCE_FORBIDDEN)

    def strip(self) -> AnySchema:
        return self._set_flag("strip", True)

    def label(self, name: str) -> AnySchema:
        if not isinstance(name, str) or not name:
            raise SchemaDefinitionError("Label name must be a non-empty string", context={"label": name})
        return self._set_flag("label", name)

    def get_label(self) -> str | None:
        return self._flags.get("label")

    def description(self, text: str) -> AnySchema:
        if not isinstance(text, str):
            raise SchemaDefinitionError("Description must be a string", context={"description": text})
        return self._set_flag("description", text)

    def default(self, value: Any) -> AnySchema:
        """Use ``value`` (deep-copied per call) when the input is missing."""
        return self._set_flag("default", value)

    def allow(self, *values: Any) -> AnySchema:
        """Always accept the given values, skipping type checks and rules."""
        obj = self._clone()
        obj._valids = (*obj._valids, *values)
        obj._invalids = tuple(v for v in obj._invalids if not any(deep_equal(v, a) for a in values))
        return obj

    def valid(self, *values: Any) -> AnySchema:
        """Accept only the given values."""
        obj = self.allow(*values)
        obj._flags["only"] = True
        return obj

    def invalid(self, *values: Any) -> AnySchema:
        """Reject the given values."""
        obj = self._clone()
        obj._invalids = (*obj._invalids, *values)
        obj._valids = tuple(v for v in obj._valids if not any(deep_equal(v, d) for d in values))
        return obj

    def prefs(self, **overrides: Any) -> AnySchema:
        """Override validation options for this schema and its children."""
        DEFAULT_OPTIONS.merge(overrides)
        obj = self._clone()
        obj._preferences.update(overrides)
        return obj

    def strict(self, enabled: bool = True) -> AnySchema:
        """Disable (or re-enable) coercion for this schema."""
        return self.prefs(convert=not enabled)

    # -- validation --------------------------------------------------------

    def validate(
        self,
        value: Any,
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> ValidationResult:
        """Validate a value from the document root.

        Args:
            value: Value to validate; pass ``UNDEFINED`` for a missing value
            options: ValidationOptions or a mapping of option names
            **overrides: Individual option overrides (``abort_early=False``, ...)

        Returns:
            ValidationResult with the accepted value or the errors
        """
        if options is None:
            resolved = DEFAULT_OPTIONS
        elif isinstance(options, ValidationOptions):
            resolved = options
        else:
            resolved = ValidationOptions.from_dict(options)
        return self.check(value, ValidationState(), resolved.merge(overrides))

    def assert_valid(
        self,
        value: Any,
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> Any:
        """Validate and return the accepted value.

        Raises:
            SchemaValidationError: If the value fails validation
        """
        result = self.validate(value, options, **overrides)
        if not result.valid:
            raise SchemaValidationError(result.errors)
        return result.value

    def check(
        self,
        value: Any,
        state: ValidationState | None = None,
        options: ValidationOptions | None = None,
    ) -> ValidationResult:
        """Validate a value at a given position in the document.

        This is the capability container schemas call for their children.

        Args:
            value: Value to validate
            state: Position of the value; the root when omitted
            options: Validation options; the defaults when omitted

        Returns:
            ValidationResult with the accepted value or the errors
        """
        state = state or ValidationState()
        options = (options or DEFAULT_OPTIONS).merge(self._preferences)

        presence = self.presence
        if presence == PRESENCE_FORBIDDEN:
            if value is UNDEFINED:
                return ValidationResult.success(UNDEFINED)
            return self._fail("any.unknown", {"value": value}, state)

        if value is UNDEFINED:
            if presence == PRESENCE_REQUIRED:
                return self._fail("any.required", None, state)
            return ValidationResult.success(copy.deepcopy(self._flags.get("default", UNDEFINED)))

        if any(deep_equal(allowed, value) for allowed in self._valids):
            return ValidationResult.success(value)

        if any(deep_equal(denied, value) for denied in self._invalids):
            return self._fail("any.invalid", {"value": value, "invalids": list(self._invalids)}, state)

        if self._flags.get("only"):
            return self._fail("any.allowOnly", {"value": value, "valids": list(self._valids)}, state)

        if options.convert:
            value = self._coerce(value, state, options)

        base = self._base(value, state, options)
        if not base.valid:
            return base
        value = base.value

        errors: list[ValidationError] = []
        for rule in self._rules:
            result = rule.func(self, value, state, options, rule)
            if result.valid:
                value = result.value
                continue
            errors.extend(result.errors)
            if options.abort_early:
                break
            if result.partial is not UNDEFINED:
                value = result.partial

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success(value)

    def _coerce(self, value: Any, state: ValidationState, options: ValidationOptions) -> Any:
        return value

    def _base(self, value: Any, state: ValidationState, options: ValidationOptions) -> ValidationResult:
        return ValidationResult.success(value)

    # -- errors ------------------------------------------------------------

    def _error(
        self, code: str, context: Mapping[str, Any] | None, state: ValidationState
    ) -> ValidationError:
        label = self.get_label()
        if label is None:
            label = "value" if state.key is None else str(state.key)
        full_context: dict[str, Any] = {"label": label, "key": state.key}
        if context:
            full_context.update(context)
        return ValidationError(
            code=code,
            message=render_message(code, full_context),
            path=tuple(state.path),
            key=state.key,
            context=full_context,
        )

    def _fail(
        self, code: str, context: Mapping[str, Any] | None, state: ValidationState
    ) -> ValidationResult:
        return ValidationResult.failure([self._error(code, context, state)])

    # -- introspection -----------------------------------------------------

    def describe(self) -> dict[str, Any]:
        """Produce a plain structural description of the schema."""
        description: dict[str, Any] = {"type": self.schema_type}

        flags = {
            name: value
            for name, value in self._flags.items()
            if name not in _ANNOTATIONS and not name.startswith("_")
        }
        if flags:
            description["flags"] = flags

        for name in _ANNOTATIONS:
            if name in self._flags:
                description[name] = self._flags[name]

        if self._preferences:
            description["options"] = dict(self._preferences)
        if self._valids:
            description["valids"] = list(self._valids)
        if self._invalids:
            description["invalids"] = list(self._invalids)

        rules = [rule.describe() for rule in self._rules if rule.described]
        if rules:
            description["rules"] = rules

        return description

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()!r})"
