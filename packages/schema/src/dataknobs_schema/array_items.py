"""Item matching for array schemas.

Every item of a candidate array is reconciled against the array's
sub-schemas in a fixed order:

1. holes (``UNDEFINED``) are rejected unless the schema is sparse
2. exclusion schemas (``forbidden`` items) must not match
3. ordered schemas match positionally; an item claimed by an ordered
   schema never reaches the unordered pools
4. required schemas each claim at most one item, in declaration order
5. inclusion schemas (optional items) may match any number of items,
   reusing failed required attempts for the same item
6. unmatched items are reported, or silently dropped with
   ``strip_unknown={"arrays": True}``

The accepted array is rebuilt rather than edited in place: matched items are
appended in their coerced form, stripped items are skipped, and positions in
error contexts count the items kept so far. Item schemas see that rebuilt
array as their parent, so references to earlier items resolve to converted
values. Each item produces at most one error.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any

from .options import DEFAULT_OPTIONS, ValidationOptions
from .result import ValidationError, ValidationResult
from .state import ValidationState
from .utils import UNDEFINED

if TYPE_CHECKING:
    from .array import ArraySchema
    from .base import AnySchema, Rule

logger = logging.getLogger(__name__)

# Marks an item removed from the accepted array
_DROPPED = object()


class SingleItemList(list):
    """One-element list built by ``ArraySchema.single()`` around a non-array value."""


class ItemMatcher:
    """Working state for matching the items of one array in one validate call."""

    def __init__(self, schema: ArraySchema, value: list[Any], state: ValidationState,
                 options: ValidationOptions):
        self.schema = schema
        self.value = value
        self.state = state
        self.options = options
        self.was_array = not isinstance(value, SingleItemList)
        self.sparse = schema.sparse_allowed
        self.strip_unknown = options.strips("arrays")
        self.ordereds = deque(schema.ordered_schemas)
        self.requireds = list(schema.required_schemas)
        self.inclusions = [*schema.inclusion_schemas, *self.requireds]
        self.output: list[Any] = []

    def run(self) -> ValidationResult:
        """Match every item and account for unmet requirements.

        Returns:
            The rebuilt array, or every error found (only the first one when
            ``abort_early`` is set) with the array rebuilt so far as ``partial``
        """
        output = self.output
        errors: list[ValidationError] = []

        for item in self.value:
            pos = len(output)
            kept, error = self._resolve(item, pos)
            if kept is _DROPPED:
                logger.debug(f"Stripped array item at position {pos}")
            else:
                output.append(kept)

            if error is not None:
                errors.append(error)
                if self.options.abort_early:
                    logger.debug(f"Stopped matching items after {error.code} at position {pos}")
                    return ValidationResult.failure(errors, partial=output)

        if self.requireds:
            errors.append(missed_requirements(self.schema, self.requireds, self.state))

        required_ordereds = [ordered for ordered in self.ordereds if ordered.presence == "required"]
        if required_ordereds:
            errors.append(missed_requirements(self.schema, required_ordereds, self.state))

        if errors:
            return ValidationResult.failure(errors, partial=output)
        return ValidationResult.success(output)

    def _resolve(self, item: Any, pos: int) -> tuple[Any, ValidationError | None]:
        """Decide what to keep for one item and which error, if any, it raises."""
        path = (*self.state.path, pos) if self.was_array else self.state.path
        key = pos if self.was_array else self.state.key
        item_state = ValidationState(key, path, (self.output, *self.state.ancestors))
        error_state = ValidationState(self.state.key, path, self.state.ancestors)

        if item is UNDEFINED and not self.sparse:
            self._skip_ordered()
            return item, self._error("array.sparse", {"pos": pos}, error_state)

        for exclusion in self.schema.exclusion_schemas:
            if exclusion.check(item, item_state, DEFAULT_OPTIONS).valid:
                self._skip_ordered()
                return item, self._error(self._code("array.excludes"), {"pos": pos, "value": item}, error_state)

        if self.schema.ordered_schemas:
            if self.ordereds:
                return self._match_ordered(item, pos, item_state, error_state)
            if not self.schema.item_schemas:
                context = {"pos": pos, "limit": len(self.schema.ordered_schemas)}
                return item, self._error("array.orderedLength", context, error_state)

        attempts: dict[int, ValidationResult] = {}
        for index, required in enumerate(self.requireds):
            result = required.check(item, item_state, self.options)
            attempts[id(required)] = result
            if result.valid:
                del self.requireds[index]
                if not self.sparse and result.value is UNDEFINED:
                    return result.value, self._error("array.sparse", {"pos": pos}, error_state)
                return result.value, None

        return self._match_inclusions(item, pos, item_state, error_state, attempts)

    def _match_ordered(self, item: Any, pos: int, item_state: ValidationState,
                       error_state: ValidationState) -> tuple[Any, ValidationError | None]:
        ordered = self.ordereds.popleft()
        result = ordered.check(item, item_state, self.options)
        if not result.valid:
            context = {"pos": pos, "reason": result.errors, "value": item}
            return item, self._error("array.ordered", context, error_state)
        if ordered.is_stripped:
            return _DROPPED, None
        if not self.sparse and result.value is UNDEFINED:
            return item, self._error("array.sparse", {"pos": pos}, error_state)
        return result.value, None

    def _match_inclusions(self, item: Any, pos: int, item_state: ValidationState,
                          error_state: ValidationState,
                          attempts: dict[int, ValidationResult]) -> tuple[Any, ValidationError | None]:
        for inclusion in self.inclusions:
            if any(required is inclusion for required in self.requireds):
                result = attempts[id(inclusion)]
            else:
                result = inclusion.check(item, item_state, self.options)
                if result.valid:
                    if inclusion.is_stripped:
                        return _DROPPED, None
                    if not self.sparse and result.value is UNDEFINED:
                        return item, self._error("array.sparse", {"pos": pos}, error_state)
                    return result.value, None

            if len(self.inclusions) == 1:
                if self.strip_unknown:
                    return _DROPPED, None
                context = {"pos": pos, "reason": result.errors, "value": item}
                return item, self._error(self._code("array.includesOne"), context, error_state)

        if self.schema.inclusion_schemas:
            if self.strip_unknown:
                return _DROPPED, None
            return item, self._error(self._code("array.includes"), {"pos": pos, "value": item}, error_state)

        return item, None

    def _skip_ordered(self) -> None:
        if self.ordereds:
            self.ordereds.popleft()

    def _code(self, code: str) -> str:
        return code if self.was_array else f"{code}Single"

    def _error(self, code: str, context: dict[str, Any], state: ValidationState) -> ValidationError:
        return self.schema._error(code, context, state)


def missed_requirements(schema: AnySchema, missing: list[AnySchema],
                        state: ValidationState) -> ValidationError:
    """Report required sub-schemas that no item matched.

    Labelled schemas are listed by label, unlabelled ones are counted.
    """
    known_misses = [label for label in (s.get_label() for s in missing) if label]
    unknown_misses = len(missing) - len(known_misses)

    if known_misses and unknown_misses:
        context: dict[str, Any] = {"known_misses": known_misses, "unknown_misses": unknown_misses}
        return schema._error("array.includesRequiredBoth", context, state)
    if known_misses:
        return schema._error("array.includesRequiredKnowns", {"known_misses": known_misses}, state)
    return schema._error("array.includesRequiredUnknowns", {"unknown_misses": unknown_misses}, state)


def match_items(schema: AnySchema, value: list[Any], state: ValidationState,
                options: ValidationOptions, rule: Rule) -> ValidationResult:
    """Rule function running the item matcher for an array schema."""
    return ItemMatcher(schema, value, state, options).run()  # type: ignore[arg-type]
