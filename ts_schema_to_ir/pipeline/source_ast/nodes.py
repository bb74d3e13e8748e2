"""
AST (Abstract Syntax Tree) node definitions for TypeScript type declarations.

These nodes represent the declarations handed over by the external source
parser, before any reference resolution or normalization. Only the shapes
the extractor understands get a dedicated node; everything else arrives as
an UnsupportedTypeNode naming the construct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SourceNode:
    """Base class for all AST nodes."""

    # Source position, e.g. "12:4" (for error messages)
    location: str = ""


@dataclass
class KeywordTypeNode(SourceNode):
    """A keyword type such as `string`, `number`, `boolean` or `any`."""

    keyword: str = ""


@dataclass
class LiteralTypeNode(SourceNode):
    """A literal type: `"open"`, `42`, `3.14`, `true`."""

    value: Any = None


@dataclass
class UnionTypeNode(SourceNode):
    """`A | B | ...`"""

    types: list[SourceNode] = field(default_factory=list)


@dataclass
class IntersectionTypeNode(SourceNode):
    """`A & B & ...`"""

    types: list[SourceNode] = field(default_factory=list)


@dataclass
class TypeReferenceNode(SourceNode):
    """A named type, optionally with type arguments (`Status`, `Array<T>`)."""

    name: str = ""
    type_args: list[SourceNode] = field(default_factory=list)


@dataclass
class ArrayTypeNode(SourceNode):
    """`T[]`"""

    element: SourceNode | None = None


@dataclass
class PropertySignature(SourceNode):
    """A member of an interface body or an inline object type."""

    name: str = ""
    type_node: SourceNode | None = None
    optional: bool = False
    readonly: bool = False

    # From the leading JSDoc block, if any
    description: str | None = None
    default_value: Any = None
    has_default: bool = False


@dataclass
class TypeLiteralNode(SourceNode):
    """An inline object type `{ a: string; b?: number }`."""

    members: list[PropertySignature] = field(default_factory=list)


@dataclass
class TypeQueryNode(SourceNode):
    """`typeof X`"""

    name: str = ""


@dataclass
class TypeOperatorNode(SourceNode):
    """`keyof T`, `readonly T[]`, `unique symbol`."""

    operator: str = ""
    type_node: SourceNode | None = None


@dataclass
class IndexedAccessTypeNode(SourceNode):
    """`T[K]`"""

    object_type: SourceNode | None = None
    index_type: SourceNode | None = None


@dataclass
class UnsupportedTypeNode(SourceNode):
    """Any type expression outside the supported closed set."""

    construct: str = ""  # e.g. "conditional type", "mapped type", "tuple type"


@dataclass
class ConstMember(SourceNode):
    """One `KEY: value` entry of a constant object."""

    key: str = ""
    value: SourceNode | None = None


@dataclass
class DeclarationNode(SourceNode):
    """Base class for top-level declarations."""

    name: str = ""
    description: str | None = None
    exported: bool = True


@dataclass
class ConstObjectDeclaration(DeclarationNode):
    """`const X = { KEY: value, ... } as const;`"""

    members: list[ConstMember] = field(default_factory=list)

    # Whether the object was marked non-widening (`as const`)
    is_const_asserted: bool = False


@dataclass
class InterfaceDeclaration(DeclarationNode):
    """`interface X { ... }`"""

    members: list[PropertySignature] = field(default_factory=list)
    type_params: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)


@dataclass
class TypeAliasDeclaration(DeclarationNode):
    """`type X = ...;`"""

    type_node: SourceNode | None = None
    type_params: list[str] = field(default_factory=list)


@dataclass
class SourceFile:
    """Root of the parsed source: top-level declarations in source order."""

    path: str = ""
    declarations: list[DeclarationNode] = field(default_factory=list)
