"""
Type resolver that turns source type expressions into canonical types.

References to other declarations are not followed here: each one becomes
a Reference placeholder and is recorded as a ReferenceSite, which the
assembler validates once every declaration has been registered.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import DuplicateName, UnsupportedTypeShape
from ..source_ast.nodes import (
    ArrayTypeNode,
    IndexedAccessTypeNode,
    IntersectionTypeNode,
    KeywordTypeNode,
    LiteralTypeNode,
    PropertySignature,
    SourceNode,
    TypeLiteralNode,
    TypeOperatorNode,
    TypeQueryNode,
    TypeReferenceNode,
    UnionTypeNode,
    UnsupportedTypeNode,
)
from .declaration_table import DeclarationTable
from .enum_normalizer import EnumNormalizer, where
from .ir_nodes import (
    ArrayOf,
    CanonicalType,
    DeclarationKind,
    Field,
    LiteralValue,
    ObjectShape,
    Primitive,
    PrimitiveKind,
    Reference,
    Union,
    literal_kind_of,
)
from .literal_collapser import LiteralCollapser

# Kinds a plain type reference (`status: Status`) may resolve to
TYPE_POSITION_KINDS = (DeclarationKind.ENUM, DeclarationKind.TYPE_ALIAS, DeclarationKind.EVENT)

# Kinds the derived spelling `typeof X[keyof typeof X]` may resolve to
ENUM_POSITION_KINDS = (DeclarationKind.ENUM,)


@dataclass
class ReferenceSite:
    """A place where a declared name is used."""

    use_site: str = ""
    name: str = ""
    expected_kinds: tuple[DeclarationKind, ...] = TYPE_POSITION_KINDS


class TypeResolver:
    """Resolves one source type expression at a time."""

    PRIMITIVE_KEYWORDS = {
        "string": PrimitiveKind.STRING,
        "number": PrimitiveKind.FLOAT,
        "bigint": PrimitiveKind.INTEGER,
        "boolean": PrimitiveKind.BOOLEAN,
    }

    ARRAY_TYPE_NAMES = {"Array", "ReadonlyArray"}

    def __init__(
        self,
        table: DeclarationTable,
        collapser: LiteralCollapser | None = None,
        normalizer: EnumNormalizer | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            table: The declaration table of the current run
            collapser: Literal collapser (shared with the normalizer)
            normalizer: Enum normalizer used for derived enum spellings
        """
        self.table = table
        self.collapser = collapser or LiteralCollapser()
        self.normalizer = normalizer or EnumNormalizer(self.collapser)
        self.reference_sites: list[ReferenceSite] = []

    def resolve(self, node: SourceNode | None, path: str) -> CanonicalType:
        """
        Resolve a type expression.

        Args:
            node: The source type node
            path: Field path of the expression, e.g. "Event.data.status"

        Returns:
            The canonical type
        """
        if node is None:
            raise UnsupportedTypeShape(path, "missing type annotation")

        if isinstance(node, TypeReferenceNode):
            return self._resolve_reference(node, path)

        if isinstance(node, KeywordTypeNode):
            return self._resolve_keyword(node, path)

        if isinstance(node, LiteralTypeNode):
            return self._resolve_literal(node, path)

        if isinstance(node, UnionTypeNode):
            return self._resolve_union(node, path)

        if isinstance(node, TypeLiteralNode):
            return self.resolve_members(node.members, path)

        if isinstance(node, ArrayTypeNode):
            return ArrayOf(element=self.resolve(node.element, f"{path}[]"))

        if isinstance(node, TypeOperatorNode):
            return self._resolve_type_operator(node, path)

        if isinstance(node, IndexedAccessTypeNode):
            return self._resolve_indexed_access(node, path)

        if isinstance(node, IntersectionTypeNode):
            raise UnsupportedTypeShape(where(path, node), "intersection type")

        if isinstance(node, TypeQueryNode):
            raise UnsupportedTypeShape(where(path, node), f"typeof query on {node.name!r}")

        if isinstance(node, UnsupportedTypeNode):
            raise UnsupportedTypeShape(where(path, node), node.construct or "unknown construct")

        raise UnsupportedTypeShape(where(path, node), type(node).__name__)

    def resolve_members(self, members: list[PropertySignature], path: str) -> ObjectShape:
        """Resolve the members of an interface body or inline object type."""
        fields: list[Field] = []
        names: set[str] = set()

        for member in members:
            field_path = f"{path}.{member.name}"
            if member.name in names:
                raise DuplicateName(where(field_path, member), member.name)
            names.add(member.name)

            fields.append(
                Field(
                    name=member.name,
                    type_ref=self.resolve(member.type_node, field_path),
                    optional=member.optional,
                    description=member.description,
                    default=member.default_value,
                    has_default=member.has_default,
                )
            )

        return ObjectShape(fields=fields)

    def _record(self, name: str, use_site: str, expected: tuple[DeclarationKind, ...]) -> Reference:
        self.reference_sites.append(ReferenceSite(use_site=use_site, name=name, expected_kinds=expected))
        return Reference(name=name)

    def _resolve_reference(self, node: TypeReferenceNode, path: str) -> CanonicalType:
        """Resolve a named type: a declaration reference or Array<T>."""
        if node.name in self.ARRAY_TYPE_NAMES:
            if len(node.type_args) != 1:
                raise UnsupportedTypeShape(where(path, node), f"{node.name} needs exactly one type argument")
            return ArrayOf(element=self.resolve(node.type_args[0], f"{path}[]"))

        if node.type_args:
            raise UnsupportedTypeShape(where(path, node), f"generic type reference {node.name}<...>")

        return self._record(node.name, where(path, node), TYPE_POSITION_KINDS)

    def _resolve_keyword(self, node: KeywordTypeNode, path: str) -> Primitive:
        kind = self.PRIMITIVE_KEYWORDS.get(node.keyword)
        if kind is None:
            raise UnsupportedTypeShape(where(path, node), f"keyword type {node.keyword!r}")
        return Primitive(kind=kind)

    def _resolve_literal(self, node: LiteralTypeNode, path: str) -> LiteralValue:
        kind = literal_kind_of(node.value)
        if kind is None:
            raise UnsupportedTypeShape(where(path, node), f"literal {node.value!r}")
        value = node.value
        if kind == PrimitiveKind.INTEGER and isinstance(value, float):
            value = int(value)
        return LiteralValue(primitive_kind=kind, value=value)

    def _resolve_union(self, node: UnionTypeNode, path: str) -> CanonicalType:
        """
        Resolve a union.

        A union made only of literals becomes a LiteralSet (or a single
        LiteralValue once duplicates are removed). Any other union is resolved
        member by member and flattened into a Union of distinct members.
        """
        members = self._flatten_source_union(node)
        location = where(path, node)

        if len(members) >= 2 and all(isinstance(m, LiteralTypeNode) for m in members):
            literal_set = self.collapser.collapse([m.value for m in members], location)
            if len(literal_set.values) == 1:
                return LiteralValue(primitive_kind=literal_set.primitive_kind, value=literal_set.values[0])
            return literal_set

        resolved: list[CanonicalType] = []
        for member in members:
            canonical = self.resolve(member, path)
            parts = canonical.members if isinstance(canonical, Union) else [canonical]
            for part in parts:
                if part not in resolved:
                    resolved.append(part)

        if len(resolved) == 1:
            return resolved[0]
        return Union(members=resolved)

    @staticmethod
    def _flatten_source_union(node: UnionTypeNode) -> list[SourceNode]:
        """Inline parenthesized sub-unions, keeping left-to-right order."""
        flat: list[SourceNode] = []
        for member in node.types:
            if isinstance(member, UnionTypeNode):
                flat.extend(TypeResolver._flatten_source_union(member))
            else:
                flat.append(member)
        return flat

    def _resolve_type_operator(self, node: TypeOperatorNode, path: str) -> CanonicalType:
        if node.operator == "readonly":
            inner = node.type_node
            is_array = isinstance(inner, ArrayTypeNode) or (isinstance(inner, TypeReferenceNode) and inner.name in self.ARRAY_TYPE_NAMES)
            if is_array:
                return self.resolve(inner, path)
            raise UnsupportedTypeShape(where(path, node), "readonly modifier on a non-array type")
        raise UnsupportedTypeShape(where(path, node), f"{node.operator} operator")

    def _resolve_indexed_access(self, node: IndexedAccessTypeNode, path: str) -> Reference:
        name = self.normalizer.derived_enum_name(node)
        if name is None:
            raise UnsupportedTypeShape(where(path, node), "indexed access type")
        return self._record(name, where(path, node), ENUM_POSITION_KINDS)
