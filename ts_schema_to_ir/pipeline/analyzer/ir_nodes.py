"""
IR (Intermediate Representation) node definitions.

These nodes represent the canonical, language-neutral schema handed to
marshalling-code generators. The set of type variants is closed: anything
the source can express outside of it is rejected during resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum as _PyEnum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .declaration_table import DeclarationTable


class PrimitiveKind(str, _PyEnum):
    """Primitive value classes a canonical type can carry."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


class TypeKind(_PyEnum):
    """Tag of a canonical type variant."""

    PRIMITIVE = "primitive"  # string, integer, float, boolean
    LITERAL = "literal"  # a single pinned literal
    LITERAL_SET = "literal_set"  # anonymous closed union of literals
    ENUM = "enum"  # named closed set of (label, value)
    UNION = "union"  # A | B | ...
    OBJECT = "object"  # ordered fields
    ARRAY = "array"  # list[T]
    REFERENCE = "reference"  # name lookup into the declaration table


class DeclarationKind(str, _PyEnum):
    """Kind of a top-level declaration."""

    ENUM = "enum"
    TYPE_ALIAS = "type_alias"
    EVENT = "event"
    # A widening constant object: usable as a value only, never emitted
    VALUE = "value"


def literal_kind_of(value: Any) -> PrimitiveKind | None:
    """Return the primitive kind of a literal value, or None if it is not one."""
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return PrimitiveKind.BOOLEAN
    if isinstance(value, int):
        return PrimitiveKind.INTEGER
    if isinstance(value, float):
        # Source numbers have no int/float split: 2.0 and 1e21 are integral
        return PrimitiveKind.INTEGER if value.is_integer() else PrimitiveKind.FLOAT
    if isinstance(value, str):
        return PrimitiveKind.STRING
    return None


def literal_fits(value: Any, kind: PrimitiveKind) -> bool:
    """Whether a literal value can be carried by the given primitive kind."""
    value_kind = literal_kind_of(value)
    if value_kind is None:
        return False
    if kind == PrimitiveKind.FLOAT:
        return value_kind in (PrimitiveKind.INTEGER, PrimitiveKind.FLOAT)
    return value_kind == kind


@dataclass
class CanonicalType:
    """Base class for all canonical type nodes."""

    tag: ClassVar[TypeKind]

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass
class Primitive(CanonicalType):
    tag: ClassVar[TypeKind] = TypeKind.PRIMITIVE

    kind: PrimitiveKind = PrimitiveKind.STRING

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "kind": self.kind.value}


@dataclass
class LiteralValue(CanonicalType):
    """A single pinned literal, e.g. the string "lol this is content"."""

    tag: ClassVar[TypeKind] = TypeKind.LITERAL

    primitive_kind: PrimitiveKind = PrimitiveKind.STRING
    value: Any = ""

    def __post_init__(self):
        if not literal_fits(self.value, self.primitive_kind):
            raise ValueError(f"Literal {self.value!r} does not match kind {self.primitive_kind.value}")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "kind": self.primitive_kind.value, "value": self.value}


@dataclass
class LiteralSet(CanonicalType):
    """An anonymous closed union of literal values of one primitive kind."""

    tag: ClassVar[TypeKind] = TypeKind.LITERAL_SET

    primitive_kind: PrimitiveKind = PrimitiveKind.STRING
    values: list[Any] = field(default_factory=list)  # declaration order, distinct

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "kind": self.primitive_kind.value, "values": list(self.values)}


@dataclass
class EnumVariant:
    """One (label, value) pair of an Enum."""

    label: str = ""
    value: Any = None


@dataclass
class Enum(CanonicalType):
    """A named, closed set of variants. Variant order is significant."""

    tag: ClassVar[TypeKind] = TypeKind.ENUM

    name: str = ""
    variants: list[EnumVariant] = field(default_factory=list)
    value_kind: PrimitiveKind = PrimitiveKind.STRING

    @property
    def labels(self) -> list[str]:
        return [v.label for v in self.variants]

    @property
    def values(self) -> list[Any]:
        return [v.value for v in self.variants]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.tag.value,
            "name": self.name,
            "value_kind": self.value_kind.value,
            "variants": [{"label": v.label, "value": v.value} for v in self.variants],
        }


@dataclass
class Union(CanonicalType):
    """A flattened union of at least two distinct, non-union members."""

    tag: ClassVar[TypeKind] = TypeKind.UNION

    members: list[CanonicalType] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "members": [m.to_dict() for m in self.members]}


@dataclass
class Field:
    """A field of an ObjectShape."""

    name: str = ""
    type_ref: CanonicalType | None = None
    optional: bool = False

    # Documentation carried through for generated code
    description: str | None = None
    default: Any = None
    has_default: bool = False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "type": self.type_ref.to_dict() if self.type_ref else None,
            "optional": self.optional,
        }
        if self.description:
            d["description"] = self.description
        if self.has_default:
            d["default"] = self.default
        return d


@dataclass
class ObjectShape(CanonicalType):
    """Ordered fields; order drives generated struct/record layout."""

    tag: ClassVar[TypeKind] = TypeKind.OBJECT

    fields: list[Field] = field(default_factory=list)

    def get(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "fields": [f.to_dict() for f in self.fields]}


@dataclass
class ArrayOf(CanonicalType):
    tag: ClassVar[TypeKind] = TypeKind.ARRAY

    element: CanonicalType | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "element": self.element.to_dict() if self.element else None}


@dataclass
class Reference(CanonicalType):
    """A name lookup into the declaration table. Never owns its target."""

    tag: ClassVar[TypeKind] = TypeKind.REFERENCE

    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.tag.value, "name": self.name}


@dataclass
class Declaration:
    """Base class for top-level named schema entities."""

    kind: ClassVar[DeclarationKind]

    name: str = ""
    description: str | None = None
    location: str = ""

    # Set when the declaration reaches itself through references
    recursive: bool = False

    @property
    def body(self) -> CanonicalType:
        raise NotImplementedError

    def _base_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"kind": self.kind.value, "name": self.name, "recursive": self.recursive}
        if self.description:
            d["description"] = self.description
        return d

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass
class EnumDeclaration(Declaration):
    kind: ClassVar[DeclarationKind] = DeclarationKind.ENUM

    enum: Enum | None = None

    @property
    def body(self) -> CanonicalType:
        return self.enum

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["enum"] = self.enum.to_dict()
        return d


@dataclass
class TypeAliasDeclaration(Declaration):
    kind: ClassVar[DeclarationKind] = DeclarationKind.TYPE_ALIAS

    target: CanonicalType | None = None

    @property
    def body(self) -> CanonicalType:
        return self.target

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["target"] = self.target.to_dict()
        return d


@dataclass
class EventDeclaration(Declaration):
    """An event envelope: a reserved name field plus structured payload sections."""

    kind: ClassVar[DeclarationKind] = DeclarationKind.EVENT

    shape: ObjectShape | None = None
    name_field: str = "name"
    sections: list[str] = field(default_factory=list)

    @property
    def body(self) -> CanonicalType:
        return self.shape

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["name_field"] = self.name_field
        d["sections"] = list(self.sections)
        d["shape"] = self.shape.to_dict()
        return d


@dataclass
class SchemaDocument:
    """The complete canonical schema for one source input."""

    source_path: str = ""
    declarations: list[Declaration] = field(default_factory=list)
    table: DeclarationTable | None = field(default=None, compare=False, repr=False)

    def get(self, name: str) -> Declaration | None:
        for d in self.declarations:
            if d.name == name:
                return d
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source_path,
            "declarations": [d.to_dict() for d in self.declarations],
        }
