import pytest

from ts_schema_to_ir.pipeline import DuplicateEnumValue, DuplicateName, UnsupportedTypeShape
from ts_schema_to_ir.pipeline.analyzer import EnumNormalizer, PrimitiveKind
from ts_schema_to_ir.pipeline.source_ast import (
    ConstMember,
    ConstObjectDeclaration,
    IndexedAccessTypeNode,
    KeywordTypeNode,
    LiteralTypeNode,
    TypeOperatorNode,
    TypeQueryNode,
    TypeReferenceNode,
    UnionTypeNode,
)


def const(name, **members):
    return ConstObjectDeclaration(
        name=name,
        members=[ConstMember(key=k, value=LiteralTypeNode(value=v)) for k, v in members.items()],
        is_const_asserted=True,
    )


def derived(name, other=None):
    """Build `typeof name[keyof typeof other]`."""
    return IndexedAccessTypeNode(
        object_type=TypeQueryNode(name=name),
        index_type=TypeOperatorNode(operator="keyof", type_node=TypeQueryNode(name=other or name)),
    )


def literal_union(*values):
    return UnionTypeNode(types=[LiteralTypeNode(value=v) for v in values])


class TestFromConstant:
    def setup_method(self):
        self.normalizer = EnumNormalizer()

    def test_variants_follow_key_order(self):
        enum = self.normalizer.from_constant(const("Status", OPEN="open", CLOSED="closed"))
        assert enum.name == "Status"
        assert enum.labels == ["OPEN", "CLOSED"]
        assert enum.values == ["open", "closed"]
        assert enum.value_kind == PrimitiveKind.STRING

    def test_integer_values(self):
        enum = self.normalizer.from_constant(const("Level", LOW=1, HIGH=2))
        assert enum.value_kind == PrimitiveKind.INTEGER

    def test_mixed_numeric_values_are_float(self):
        enum = self.normalizer.from_constant(const("Ratio", HALF=0.5, ONE=1))
        assert enum.value_kind == PrimitiveKind.FLOAT
        assert enum.values == [0.5, 1]

    def test_duplicate_value(self):
        with pytest.raises(DuplicateEnumValue) as exc_info:
            self.normalizer.from_constant(const("Status", OPEN="open", ALSO_OPEN="open"))
        assert exc_info.value.enum_name == "Status"
        assert exc_info.value.value == "open"

    def test_duplicate_key(self):
        decl = const("Status", OPEN="open")
        decl.members.append(ConstMember(key="OPEN", value=LiteralTypeNode(value="closed")))
        with pytest.raises(DuplicateName) as exc_info:
            self.normalizer.from_constant(decl)
        assert exc_info.value.name == "OPEN"

    def test_non_literal_value(self):
        decl = const("Status", OPEN="open")
        decl.members.append(ConstMember(key="NOTHING", value=KeywordTypeNode(keyword="null")))
        with pytest.raises(UnsupportedTypeShape, match="Status.NOTHING"):
            self.normalizer.from_constant(decl)


class TestDerivedAlias:
    def setup_method(self):
        self.normalizer = EnumNormalizer()
        self.enum = self.normalizer.from_constant(const("Status", OPEN="open", CLOSED="closed"))

    def test_derived_enum_name(self):
        assert EnumNormalizer.derived_enum_name(derived("Status")) == "Status"

    def test_derived_enum_name_requires_same_name(self):
        assert EnumNormalizer.derived_enum_name(derived("Status", "Action")) is None

    def test_derived_enum_name_of_other_nodes(self):
        assert EnumNormalizer.derived_enum_name(TypeReferenceNode(name="Status")) is None
        assert EnumNormalizer.derived_enum_name(None) is None

    def test_matches_derived_spelling(self):
        assert self.normalizer.matches_alias(self.enum, derived("Status"), "Status")

    def test_derived_spelling_of_another_constant(self):
        assert not self.normalizer.matches_alias(self.enum, derived("Action"), "Status")

    def test_matches_literal_union_in_any_order(self):
        assert self.normalizer.matches_alias(self.enum, literal_union("closed", "open"), "Status")

    def test_literal_union_with_missing_value(self):
        assert not self.normalizer.matches_alias(self.enum, literal_union("open"), "Status")

    def test_literal_union_with_extra_value(self):
        assert not self.normalizer.matches_alias(self.enum, literal_union("open", "closed", "stale"), "Status")

    def test_literal_union_of_other_kind(self):
        enum = self.normalizer.from_constant(const("Level", LOW=1, HIGH=2))
        assert not self.normalizer.matches_alias(enum, literal_union("1", "2"), "Level")

    def test_non_literal_alias(self):
        assert not self.normalizer.matches_alias(self.enum, KeywordTypeNode(keyword="string"), "Status")


if __name__ == "__main__":
    pytest.main([__file__])
