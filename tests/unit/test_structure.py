"""Unit tests for structure specs and rules."""

import pytest

from wireshape.core.exceptions import FormatError, SpecError
from wireshape.structure import (
    Conditional,
    CopyField,
    FormatRule,
    NestedStructure,
    NestedTransformer,
    RenameField,
    StructureSpec,
    ValueMap,
    date_format,
    format_as,
    group,
    nested,
    rename,
    value_map,
    when,
)
from wireshape.transformers import Transformer


class TagTransformer(Transformer):
    def structure(self):
        return ["name"]


# ============================================================================
# Shorthand
# ============================================================================


class TestStructureSpecBuild:
    """Tests for building specs from shorthand."""

    def test_sequence_of_names(self):
        spec = StructureSpec.build(["id", "name"])

        assert spec.keys() == ["id", "name"]
        assert spec.get("id") == CopyField()

    def test_mapping_preserves_order(self):
        spec = StructureSpec.build({"b": None, "a": None, "c": None})

        assert spec.keys() == ["b", "a", "c"]

    def test_string_value_renames(self):
        spec = StructureSpec.build({"name": "first_name", "id": "id"})

        assert spec.get("name") == RenameField("first_name")
        assert spec.get("id") == CopyField()

    def test_mapping_value_nests_structure(self):
        spec = StructureSpec.build({"contact": {"email": None, "phone": "tel"}})

        rule = spec.get("contact")
        assert isinstance(rule, NestedStructure)
        assert rule.spec.keys() == ["email", "phone"]

    def test_list_value_nests_structure(self):
        spec = StructureSpec.build({"contact": ["email"]})

        assert isinstance(spec.get("contact"), NestedStructure)

    def test_transformer_value_nests_transformer(self):
        tags = TagTransformer()
        spec = StructureSpec.build({"tags": tags})

        assert spec.get("tags") == NestedTransformer(tags)

    def test_pairs_in_sequence(self):
        spec = StructureSpec.build(["id", ("name", "first_name")])

        assert spec.get("name") == RenameField("first_name")

    def test_build_none_is_empty(self):
        assert len(StructureSpec.build(None)) == 0

    def test_build_returns_existing_spec(self):
        spec = StructureSpec.build(["id"])

        assert StructureSpec.build(spec) is spec

    def test_build_rejects_scalar(self):
        with pytest.raises(SpecError):
            StructureSpec.build("id")

    def test_invalid_sequence_entry(self):
        with pytest.raises(SpecError) as exc_info:
            StructureSpec.build(["id", 42])

        assert "entry" in exc_info.value.context

    def test_unsupported_rule(self):
        with pytest.raises(SpecError) as exc_info:
            StructureSpec.build({"id": 42})

        assert exc_info.value.context["key"] == "id"


# ============================================================================
# Validation
# ============================================================================


class TestStructureSpecValidation:
    """Tests for fail-fast spec validation."""

    def test_duplicate_key_raises(self):
        with pytest.raises(SpecError) as exc_info:
            StructureSpec.build(["id", "name", "id"])

        assert "Duplicate output key" in str(exc_info.value)

    def test_duplicate_key_behind_false_conditional_raises(self):
        with pytest.raises(SpecError):
            StructureSpec([("id", when(False)), ("id", CopyField())])

    def test_non_string_key_raises(self):
        with pytest.raises(SpecError):
            StructureSpec([(1, CopyField())])

    def test_empty_key_raises(self):
        with pytest.raises(SpecError):
            StructureSpec([("", CopyField())])


# ============================================================================
# Conditionals
# ============================================================================


class TestConditionals:
    """Tests for conditional rules."""

    def test_false_guard_omits_key(self):
        spec = StructureSpec.build({"id": None, "email": when(False)})

        assert spec.keys() == ["id"]
        assert "email" not in spec
        assert spec.omitted == frozenset({"email"})

    def test_true_guard_unwraps_rule(self):
        spec = StructureSpec.build({"name": when(True, "first_name")})

        assert spec.get("name") == RenameField("first_name")
        assert spec.omitted == frozenset()

    def test_when_without_rule_copies(self):
        assert when(True).rule == CopyField()

    def test_guard_is_evaluated_for_truthiness(self):
        spec = StructureSpec.build({"a": Conditional([], CopyField()), "b": Conditional("x")})

        assert spec.keys() == ["b"]

    def test_nested_conditionals(self):
        spec = StructureSpec.build({"a": when(True, when(False))})

        assert spec.keys() == []
        assert spec.omitted == frozenset({"a"})

    def test_conditional_inside_nested_structure(self):
        spec = StructureSpec.build({"contact": {"email": when(False), "phone": None}})

        assert spec.get("contact").spec.keys() == ["phone"]

    def test_conditional_with_invalid_rule_raises(self):
        with pytest.raises(SpecError):
            StructureSpec.build({"a": Conditional(True, 3.5)})

    def test_false_conditional_skips_rule_validation(self):
        """Guards are settled first; the wrapped rule of a false guard is never built."""
        spec = StructureSpec.build({"a": Conditional(False, 3.5)})

        assert spec.keys() == []


# ============================================================================
# Rules
# ============================================================================


class TestRules:
    """Tests for individual rule types."""

    def test_rename_requires_source(self):
        with pytest.raises(SpecError):
            RenameField("")

    def test_value_map_requires_mapping(self):
        with pytest.raises(SpecError):
            ValueMap(["active"])

    def test_value_map_apply(self):
        rule = value_map({"active": "Active"}, default="Unknown")

        assert rule.apply("active") == "Active"
        assert rule.apply("blocked") == "Unknown"

    def test_value_map_default_is_none(self):
        assert value_map({"a": 1}).apply("b") is None

    def test_value_map_unhashable_value_uses_default(self):
        assert value_map({"a": 1}, default=0).apply(["a"]) == 0

    def test_format_rule_unknown_kind_fails_on_creation(self):
        with pytest.raises(SpecError) as exc_info:
            FormatRule("nope")

        assert "available_kinds" in exc_info.value.context

    def test_format_rule_bad_params_fail_on_creation(self):
        with pytest.raises(SpecError):
            format_as("number", places="two")

    def test_format_rule_params_must_be_mapping(self):
        with pytest.raises(SpecError):
            FormatRule("date", ["%Y"])

    def test_format_rule_passes_none_through(self):
        assert date_format().apply(None) is None

    def test_format_rule_wraps_formatter_errors(self):
        rule = date_format("%Y")

        with pytest.raises(FormatError) as exc_info:
            rule.apply("not a date")

        assert exc_info.value.context["value"] == "not a date"

    def test_nested_requires_transformer(self):
        with pytest.raises(SpecError):
            nested(object())

    def test_nested_with_source(self):
        tags = TagTransformer()

        assert nested(tags, source="labels") == NestedTransformer(tags, source="labels")

    def test_rename_helper(self):
        assert rename("first_name") == RenameField("first_name")

    def test_group_helper(self):
        rule = group(["email"])

        assert isinstance(rule, NestedStructure)
        assert rule.spec.keys() == ["email"]

    def test_nested_transformers_keyed_by_relation(self):
        tags = TagTransformer()
        spec = StructureSpec.build({"labels": nested(tags, source="tags"), "id": None})

        assert spec.nested_transformers() == {"tags": NestedTransformer(tags, source="tags")}

    def test_nested_transformers_inside_groups(self):
        """Grouped fields read the same object, so relations keep their names."""
        tags = TagTransformer()
        spec = StructureSpec.build({"id": None, "meta": {"labels": nested(tags, source="tags")}})

        assert spec.nested_transformers() == {"tags": NestedTransformer(tags, source="tags")}
