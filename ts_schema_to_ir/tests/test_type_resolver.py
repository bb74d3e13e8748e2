from unittest import TestCase

from ts_schema_to_ir.pipeline import DuplicateName, MixedLiteralKinds, UnsupportedTypeShape
from ts_schema_to_ir.pipeline.analyzer import (
    ArrayOf,
    DeclarationKind,
    DeclarationTable,
    LiteralSet,
    LiteralValue,
    ObjectShape,
    Primitive,
    PrimitiveKind,
    Reference,
    TypeResolver,
    Union,
)
from ts_schema_to_ir.pipeline.source_ast import (
    ArrayTypeNode,
    IndexedAccessTypeNode,
    IntersectionTypeNode,
    KeywordTypeNode,
    LiteralTypeNode,
    PropertySignature,
    TypeLiteralNode,
    TypeOperatorNode,
    TypeQueryNode,
    TypeReferenceNode,
    UnionTypeNode,
    UnsupportedTypeNode,
)


def kw(keyword):
    return KeywordTypeNode(keyword=keyword)


def lit(value):
    return LiteralTypeNode(value=value)


def ref(name, *args):
    return TypeReferenceNode(name=name, type_args=list(args))


def prop(name, type_node, optional=False):
    return PropertySignature(name=name, type_node=type_node, optional=optional)


class TestTypeResolver(TestCase):
    """Test resolution of single type expressions"""

    def setUp(self):
        self.resolver = TypeResolver(DeclarationTable())

    def test_primitive_keywords(self):
        self.assertEqual(self.resolver.resolve(kw("string"), "x"), Primitive(kind=PrimitiveKind.STRING))
        self.assertEqual(self.resolver.resolve(kw("number"), "x"), Primitive(kind=PrimitiveKind.FLOAT))
        self.assertEqual(self.resolver.resolve(kw("bigint"), "x"), Primitive(kind=PrimitiveKind.INTEGER))
        self.assertEqual(self.resolver.resolve(kw("boolean"), "x"), Primitive(kind=PrimitiveKind.BOOLEAN))

    def test_unsupported_keywords(self):
        for keyword in ("any", "unknown", "null", "undefined", "never", "object"):
            with self.assertRaises(UnsupportedTypeShape):
                self.resolver.resolve(kw(keyword), "x")

    def test_literals(self):
        self.assertEqual(
            self.resolver.resolve(lit("lol this is content"), "x"),
            LiteralValue(primitive_kind=PrimitiveKind.STRING, value="lol this is content"),
        )
        self.assertEqual(self.resolver.resolve(lit(1), "x"), LiteralValue(primitive_kind=PrimitiveKind.INTEGER, value=1))
        self.assertEqual(self.resolver.resolve(lit(True), "x"), LiteralValue(primitive_kind=PrimitiveKind.BOOLEAN, value=True))

    def test_integral_float_literal(self):
        result = self.resolver.resolve(lit(2.0), "x")
        self.assertEqual(result.primitive_kind, PrimitiveKind.INTEGER)
        self.assertIsInstance(result.value, int)
        self.assertEqual(self.resolver.resolve(lit(2.5), "x").primitive_kind, PrimitiveKind.FLOAT)

    def test_literal_union_collapses(self):
        node = UnionTypeNode(types=[lit(1), lit(2), lit(3.14159)])
        result = self.resolver.resolve(node, "Event.fixedNumber[]")
        self.assertEqual(result, LiteralSet(primitive_kind=PrimitiveKind.FLOAT, values=[1, 2, 3.14159]))

    def test_literal_union_of_one_distinct_value(self):
        node = UnionTypeNode(types=[lit("a"), lit("a")])
        self.assertEqual(self.resolver.resolve(node, "x"), LiteralValue(primitive_kind=PrimitiveKind.STRING, value="a"))

    def test_mixed_literal_union(self):
        node = UnionTypeNode(types=[lit("a"), lit(1)])
        with self.assertRaises(MixedLiteralKinds) as cm:
            self.resolver.resolve(node, "Event.data.bad")
        self.assertIn("Event.data.bad", str(cm.exception))

    def test_union_flattening(self):
        node = UnionTypeNode(types=[kw("string"), UnionTypeNode(types=[kw("number"), kw("string")])])
        result = self.resolver.resolve(node, "x")
        self.assertEqual(
            result,
            Union(members=[Primitive(kind=PrimitiveKind.STRING), Primitive(kind=PrimitiveKind.FLOAT)]),
        )

    def test_union_of_one_member(self):
        node = UnionTypeNode(types=[kw("string"), kw("string")])
        self.assertEqual(self.resolver.resolve(node, "x"), Primitive(kind=PrimitiveKind.STRING))

    def test_union_with_reference(self):
        node = UnionTypeNode(types=[ref("Some"), kw("boolean")])
        result = self.resolver.resolve(node, "x")
        self.assertEqual(result, Union(members=[Reference(name="Some"), Primitive(kind=PrimitiveKind.BOOLEAN)]))

    def test_arrays(self):
        expected = ArrayOf(element=Primitive(kind=PrimitiveKind.FLOAT))
        self.assertEqual(self.resolver.resolve(ArrayTypeNode(element=kw("number")), "x"), expected)
        self.assertEqual(self.resolver.resolve(ref("Array", kw("number")), "x"), expected)
        self.assertEqual(self.resolver.resolve(ref("ReadonlyArray", kw("number")), "x"), expected)
        readonly = TypeOperatorNode(operator="readonly", type_node=ArrayTypeNode(element=kw("number")))
        self.assertEqual(self.resolver.resolve(readonly, "x"), expected)

    def test_array_needs_one_argument(self):
        with self.assertRaises(UnsupportedTypeShape):
            self.resolver.resolve(ref("Array"), "x")

    def test_generic_reference(self):
        with self.assertRaises(UnsupportedTypeShape) as cm:
            self.resolver.resolve(ref("Partial", ref("Some")), "Event.data")
        self.assertEqual(cm.exception.location, "Event.data")

    def test_reference_is_recorded(self):
        result = self.resolver.resolve(ref("Status"), "Event.data.status")
        self.assertEqual(result, Reference(name="Status"))
        self.assertEqual(len(self.resolver.reference_sites), 1)
        site = self.resolver.reference_sites[0]
        self.assertEqual(site.name, "Status")
        self.assertEqual(site.use_site, "Event.data.status")
        self.assertIn(DeclarationKind.TYPE_ALIAS, site.expected_kinds)

    def test_derived_enum_spelling(self):
        node = IndexedAccessTypeNode(
            object_type=TypeQueryNode(name="Status"),
            index_type=TypeOperatorNode(operator="keyof", type_node=TypeQueryNode(name="Status")),
        )
        self.assertEqual(self.resolver.resolve(node, "x"), Reference(name="Status"))
        self.assertEqual(self.resolver.reference_sites[0].expected_kinds, (DeclarationKind.ENUM,))

    def test_unsupported_shapes(self):
        cases = [
            IntersectionTypeNode(types=[ref("A"), ref("B")]),
            TypeQueryNode(name="Status"),
            TypeOperatorNode(operator="keyof", type_node=ref("Some")),
            TypeOperatorNode(operator="readonly", type_node=kw("string")),
            IndexedAccessTypeNode(object_type=ref("Some"), index_type=lit("with")),
            UnsupportedTypeNode(construct="conditional type"),
            None,
        ]
        for node in cases:
            with self.subTest(node=node):
                with self.assertRaises(UnsupportedTypeShape):
                    self.resolver.resolve(node, "x")

    def test_unsupported_shape_names_construct(self):
        node = UnsupportedTypeNode(construct="mapped type", location="3:5")
        with self.assertRaises(UnsupportedTypeShape) as cm:
            self.resolver.resolve(node, "Event.data")
        self.assertEqual(cm.exception.location, "Event.data (3:5)")
        self.assertEqual(cm.exception.description, "mapped type")


class TestResolveMembers(TestCase):
    """Test resolution of object members"""

    def setUp(self):
        self.resolver = TypeResolver(DeclarationTable())

    def test_field_order_and_optional_flags(self):
        shape = self.resolver.resolve_members(
            [
                prop("static", lit("lol this is content")),
                prop("optionalStatic", lit("some opt content"), optional=True),
                prop("staticBool", lit(True), optional=True),
                prop("enabled", kw("boolean")),
            ],
            "Event.data",
        )
        self.assertIsInstance(shape, ObjectShape)
        self.assertEqual([f.name for f in shape.fields], ["static", "optionalStatic", "staticBool", "enabled"])
        self.assertEqual([f.optional for f in shape.fields], [False, True, True, False])

    def test_nested_object(self):
        node = TypeLiteralNode(members=[prop("with", kw("string")), prop("included", kw("boolean"))])
        shape = self.resolver.resolve_members([prop("allow", node)], "Event")
        allow = shape.get("allow")
        self.assertIsInstance(allow.type_ref, ObjectShape)
        self.assertEqual([f.name for f in allow.type_ref.fields], ["with", "included"])

    def test_field_descriptions_and_defaults(self):
        member = PropertySignature(
            name="retries", type_node=kw("number"), description="How many times", default_value=3, has_default=True
        )
        shape = self.resolver.resolve_members([member], "Job")
        field = shape.get("retries")
        self.assertEqual(field.description, "How many times")
        self.assertEqual(field.default, 3)
        self.assertTrue(field.has_default)

    def test_duplicate_field(self):
        with self.assertRaises(DuplicateName) as cm:
            self.resolver.resolve_members([prop("id", kw("number")), prop("id", kw("string"))], "Friend")
        self.assertEqual(cm.exception.name, "id")
        self.assertEqual(cm.exception.location, "Friend.id")

    def test_error_path_of_nested_field(self):
        inner = TypeLiteralNode(members=[prop("bad", kw("any"))])
        with self.assertRaises(UnsupportedTypeShape) as cm:
            self.resolver.resolve_members([prop("data", ArrayTypeNode(element=inner))], "Event")
        self.assertEqual(cm.exception.location, "Event.data[].bad")

    def test_index_signature_member(self):
        member = PropertySignature(name="[index signature]", type_node=UnsupportedTypeNode(construct="index signature"))
        with self.assertRaises(UnsupportedTypeShape):
            self.resolver.resolve_members([member], "Bag")
