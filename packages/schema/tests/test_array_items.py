"""
Tests for array item matching: ordered, required, inclusion and exclusion
schemas, sparse items, stripping and single-value wrapping.
"""

import pytest

from dataknobs_schema import (
    UNDEFINED,
    AlternativesSchema,
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    SchemaDefinitionError,
    StringSchema,
    ref,
)


class TestOrderedItems:
    """Positional item schemas."""

    def test_ordered_then_unordered(self):
        """Positions past the ordered schemas fall through to the item pools."""
        schema = ArraySchema().ordered(StringSchema(), NumberSchema()).items(BooleanSchema())

        result = schema.validate(["a", 1, True, False])
        assert result.valid
        assert result.value == ["a", 1, True, False]

    def test_ordered_values_are_coerced(self):
        schema = ArraySchema().ordered(StringSchema(), NumberSchema()).items(BooleanSchema())

        result = schema.validate(["a", "1", "true"])
        assert result.valid
        assert result.value == ["a", 1, True]

    def test_ordered_mismatch_embeds_reason(self):
        """A failing positional schema reports array.ordered with the nested errors."""
        schema = ArraySchema().ordered(StringSchema(), NumberSchema())

        result = schema.validate(["a", "x"])
        assert not result.valid
        assert result.codes == ["array.ordered"]

        error = result.errors[0]
        assert error.path == (1,)
        assert error.context["pos"] == 1
        assert error.context["value"] == "x"
        assert [reason.code for reason in error.reason] == ["number.base"]
        assert error.reason[0].path == (1,)

    def test_ordered_item_never_reaches_item_pools(self):
        """An item claimed by an ordered schema is not retried against items()."""
        schema = ArraySchema().ordered(NumberSchema()).items(StringSchema())

        result = schema.validate(["text"])
        assert result.codes == ["array.ordered"]

    def test_too_many_items_for_fixed_arity(self):
        schema = ArraySchema().ordered(NumberSchema())

        result = schema.validate([1, 2])
        assert result.codes == ["array.orderedLength"]
        assert result.errors[0].context["pos"] == 1
        assert result.errors[0].context["limit"] == 1

    def test_unreached_required_ordered_schemas(self):
        """Required positional schemas beyond the input length are reported as missing."""
        schema = ArraySchema().ordered(
            StringSchema().required(),
            NumberSchema().required().label("count"),
        )

        result = schema.validate(["a"])
        assert result.codes == ["array.includesRequiredKnowns"]
        assert result.errors[0].context["known_misses"] == ["count"]
        assert result.errors[0].path == ()

    def test_unreached_optional_ordered_schemas_are_fine(self):
        schema = ArraySchema().ordered(StringSchema(), NumberSchema())

        result = schema.validate(["a"])
        assert result.valid
        assert result.value == ["a"]

    def test_references_see_converted_earlier_items(self):
        """Item schemas resolve sibling references against the rebuilt array."""
        schema = ArraySchema().ordered(NumberSchema(), ArraySchema().max(ref("0")))

        assert schema.validate(["1", [1]]).value == [1, [1]]

        result = schema.validate(["2", [1, 2, 3]])
        assert result.codes == ["array.ordered"]
        assert result.errors[0].reason[0].code == "array.max"
        assert result.errors[0].reason[0].context["limit"] == 2


class TestSparseItems:
    """UNDEFINED items (holes)."""

    def test_hole_rejected_by_default(self):
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate([1, UNDEFINED, 3])
        assert result.codes == ["array.sparse"]
        assert result.errors[0].path == (1,)
        assert result.errors[0].context["pos"] == 1

    def test_hole_reports_a_single_error_when_collecting(self, collect_all):
        """The sparse error is the only error for that slot."""
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate([1, UNDEFINED, 3], collect_all)
        assert result.codes == ["array.sparse"]

    def test_hole_rejected_without_item_schemas(self):
        result = ArraySchema().validate([UNDEFINED])
        assert result.codes == ["array.sparse"]

    def test_sparse_allows_holes(self):
        schema = ArraySchema().items(NumberSchema()).sparse()

        result = schema.validate([1, UNDEFINED, 3])
        assert result.valid
        assert result.value == [1, UNDEFINED, 3]

    def test_hole_keeps_ordered_alignment(self, collect_all):
        """A hole consumes its positional schema so later items stay aligned."""
        schema = ArraySchema().ordered(NumberSchema(), StringSchema())

        result = schema.validate([UNDEFINED, "a"], collect_all)
        assert result.codes == ["array.sparse"]

    def test_none_is_not_a_hole(self):
        schema = ArraySchema().items(NumberSchema().allow(None))

        result = schema.validate([None])
        assert result.valid
        assert result.value == [None]


class TestExclusions:
    """Forbidden item schemas."""

    def test_excluded_item(self):
        schema = ArraySchema().items(StringSchema().forbidden(), NumberSchema())

        result = schema.validate([1, "x"])
        assert result.codes == ["array.excludes"]
        assert result.errors[0].context["pos"] == 1
        assert result.errors[0].context["value"] == "x"
        assert result.errors[0].path == (1,)

    def test_exclusions_use_default_options(self):
        """Exclusion checks ignore caller options, so conversion still applies."""
        schema = ArraySchema().items(NumberSchema().forbidden(), StringSchema())

        result = schema.validate(["5"], convert=False)
        assert result.codes == ["array.excludes"]

    def test_items_not_matching_exclusions_pass(self):
        schema = ArraySchema().items(StringSchema().forbidden(), NumberSchema())

        result = schema.validate([1, 2])
        assert result.valid


class TestRequiredItems:
    """Required item schemas: each must match exactly one item."""

    def test_all_requirements_met(self):
        schema = ArraySchema().items(StringSchema().required(), NumberSchema().required())

        result = schema.validate(["a", 1])
        assert result.valid
        assert result.value == ["a", 1]

    def test_mixed_labelled_and_unlabelled_misses(self):
        schema = ArraySchema().items(
            StringSchema().required().label("name"),
            NumberSchema().required(),
        )

        result = schema.validate([])
        assert result.codes == ["array.includesRequiredBoth"]
        assert result.errors[0].context["known_misses"] == ["name"]
        assert result.errors[0].context["unknown_misses"] == 1

    def test_unlabelled_misses_are_counted(self):
        schema = ArraySchema().items(StringSchema().required(), NumberSchema().required())

        result = schema.validate(["a"])
        assert result.codes == ["array.includesRequiredUnknowns"]
        assert result.errors[0].context["unknown_misses"] == 1

    def test_labelled_misses_are_listed(self):
        schema = ArraySchema().items(
            StringSchema().required().label("name"),
            NumberSchema().required().label("age"),
        )

        result = schema.validate([])
        assert result.codes == ["array.includesRequiredKnowns"]
        assert result.errors[0].context["known_misses"] == ["name", "age"]
        assert result.errors[0].message == "\"value\" does not contain ['name', 'age']"

    def test_matched_required_schema_acts_as_inclusion_afterwards(self):
        schema = ArraySchema().items(StringSchema().required())

        result = schema.validate(["a", "b"])
        assert result.valid
        assert result.value == ["a", "b"]

    def test_single_required_schema_reports_precise_failure(self):
        schema = ArraySchema().items(StringSchema().required())

        result = schema.validate(["a", 1])
        assert result.codes == ["array.includesOne"]
        assert result.errors[0].reason[0].code == "string.base"

    def test_failed_required_attempt_is_not_repeated(self, counting_schema):
        """The inclusion pass reuses the required attempt for the same item."""
        schema = ArraySchema().items(counting_schema.required(), NumberSchema())

        result = schema.validate(["x"])
        assert result.codes == ["array.includes"]
        assert counting_schema.calls == ["x"]


class TestInclusions:
    """Optional item schemas."""

    def test_single_inclusion_failure(self):
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate([1, "x"])
        assert result.codes == ["array.includesOne"]
        error = result.errors[0]
        assert error.context["pos"] == 1
        assert error.reason[0].code == "number.base"

    def test_multiple_inclusions_failure(self):
        schema = ArraySchema().items(NumberSchema(), BooleanSchema())

        result = schema.validate(["x"])
        assert result.codes == ["array.includes"]
        assert result.errors[0].context == {"label": "value", "key": None, "pos": 0, "value": "x"}

    def test_first_matching_inclusion_wins(self):
        schema = ArraySchema().items(NumberSchema(), StringSchema())

        result = schema.validate(["1", "a"])
        assert result.value == [1, "a"]

    def test_nested_error_message(self):
        schema = ObjectSchema({"tags": ArraySchema().items(StringSchema())})

        result = schema.validate({"tags": ["a", 1]})
        error = result.errors[0]
        assert error.code == "array.includesOne"
        assert error.path == ("tags", 1)
        assert error.key == "tags"
        assert error.message == '"tags" at position 1 fails because ["1" must be a string]'

    def test_collects_every_item_error(self, collect_all):
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate(["a", 1, "b"], collect_all)
        assert result.codes == ["array.includesOne", "array.includesOne"]
        assert [error.context["pos"] for error in result.errors] == [0, 2]

    def test_abort_early_stops_at_first_item_error(self):
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate(["a", 1, "b"])
        assert result.codes == ["array.includesOne"]


class TestStripping:
    """Removing items from the accepted array."""

    def test_stripped_ordered_item(self):
        """Items after a stripped one move down a position."""
        schema = ArraySchema().ordered(StringSchema().strip()).items(NumberSchema())

        result = schema.validate(["x", 2])
        assert result.valid
        assert result.value == [2]

    def test_positions_count_kept_items(self):
        schema = ArraySchema().ordered(StringSchema().strip()).items(NumberSchema())

        result = schema.validate(["x", "bad"])
        assert result.codes == ["array.includesOne"]
        assert result.errors[0].context["pos"] == 0
        assert result.errors[0].path == (0,)

    def test_stripped_inclusion(self):
        schema = ArraySchema().items(NumberSchema(), StringSchema().strip())

        result = schema.validate([1, "a", 2])
        assert result.value == [1, 2]

    def test_strip_unknown_with_single_inclusion(self, strip_arrays):
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate([1, "x", 2], strip_arrays)
        assert result.valid
        assert result.value == [1, 2]

    def test_strip_unknown_with_several_inclusions(self, strip_arrays):
        schema = ArraySchema().items(NumberSchema(), BooleanSchema())

        result = schema.validate([1, "x"], strip_arrays)
        assert result.value == [1]

    def test_plain_strip_unknown_only_applies_to_objects(self):
        schema = ArraySchema().items(NumberSchema())

        result = schema.validate([1, "x"], strip_unknown=True)
        assert result.codes == ["array.includesOne"]

    def test_input_list_is_never_modified(self):
        value = [1, "2", "x"]
        schema = ArraySchema().items(NumberSchema(), StringSchema().strip())

        result = schema.validate(value)
        assert result.value == [1, 2]
        assert value == [1, "2", "x"]


class TestSingleWrap:
    """Accepting a scalar as a one-element array."""

    def test_scalar_rejected_by_default(self):
        result = ArraySchema().items(NumberSchema()).validate(5)
        assert result.codes == ["array.base"]

    def test_scalar_wrapped(self):
        schema = ArraySchema().items(NumberSchema()).single()

        result = schema.validate("5")
        assert result.valid
        assert result.value == [5]
        assert type(result.value) is list

    def test_wrapped_value_uses_single_codes(self):
        schema = ArraySchema().items(NumberSchema()).single()

        result = ObjectSchema({"ids": schema}).validate({"ids": "x"})
        error = result.errors[0]
        assert error.code == "array.includesOneSingle"
        assert error.path == ("ids",)
        assert error.reason[0].path == ("ids",)

    def test_wrapped_value_excluded(self):
        schema = ArraySchema().items(StringSchema().forbidden()).single()

        result = schema.validate("a")
        assert result.codes == ["array.excludesSingle"]

    def test_wrapped_value_unmatched(self):
        schema = ArraySchema().items(NumberSchema(), BooleanSchema()).single()

        result = schema.validate("x")
        assert result.codes == ["array.includesSingle"]

    def test_arrays_are_not_wrapped(self):
        schema = ArraySchema().items(NumberSchema()).single()

        result = schema.validate([1, 2])
        assert result.value == [1, 2]

    @pytest.mark.parametrize("item", [ArraySchema(), AlternativesSchema(NumberSchema())])
    def test_single_conflicts_with_collection_items(self, item):
        with pytest.raises(SchemaDefinitionError):
            ArraySchema().single().items(item)
        with pytest.raises(SchemaDefinitionError):
            ArraySchema().ordered(item).single()

    def test_single_can_be_disabled_with_collection_items(self):
        schema = ArraySchema().items(ArraySchema()).single(False)
        assert not schema.single_wrap


class TestLaterRulesAfterItemErrors:
    """Rules after a failed item pass see its coercions and strips when collecting errors."""

    def test_stripped_items_do_not_count_towards_limits(self, collect_all):
        schema = ArraySchema().items(NumberSchema(), StringSchema().strip()).max(2)

        result = schema.validate([1, "a", {}], collect_all)
        assert result.codes == ["array.includes"]

    def test_coerced_duplicates_are_found(self, collect_all):
        schema = ArraySchema().items(NumberSchema()).unique()

        result = schema.validate(["1", 1, "x"], collect_all)
        assert result.codes == ["array.includesOne", "array.unique"]
        assert result.errors[1].context["pos"] == 1
        assert result.errors[1].context["dupe_pos"] == 0

    def test_has_checks_converted_items(self, collect_all):
        schema = ArraySchema().items(NumberSchema()).has(NumberSchema().strict())

        result = schema.validate(["1", "x"], collect_all)
        assert result.codes == ["array.includesOne"]

    def test_abort_early_still_stops_at_item_error(self):
        schema = ArraySchema().items(NumberSchema()).unique()

        result = schema.validate(["1", 1, "x"])
        assert result.codes == ["array.includesOne"]
